import logging

import pytest

from govuk_binding.binders import BinderConfigurationError, BindingFailure, BindingSuccess, MultipleValuesError
from govuk_binding.binding_loader import parse_bindings
from govuk_binding.form_binder import FormBinder
from govuk_binding.model_state import ModelState
from govuk_binding.value_provider import DictValueProvider, QueryStringValueProvider


class CaptureHandler(logging.Handler):
    def __init__(self):
        super().__init__()
        self.records = []

    def emit(self, record):
        self.records.append(record)


def _declarations():
    return parse_bindings(
        {
            "version": 1,
            "forms": [
                {
                    "container": "ApplicationForm",
                    "fields": [
                        {
                            "name": "NumberOfChildren",
                            "error_text": {
                                "error_message_if_missing": "Enter the number of children",
                                "name_at_start_of_sentence": "Number of children",
                            },
                        },
                        {
                            "name": "YearsAtAddress",
                            "error_text": {
                                "error_message_if_missing": "Enter years at address",
                                "name_at_start_of_sentence": "Years at address",
                            },
                        },
                    ],
                },
                {"container": "BrokenForm", "fields": [{"name": "Count"}]},
            ],
        }
    )


def _logger(name):
    logger = logging.getLogger(name)
    logger.handlers.clear()
    logger.setLevel(logging.DEBUG)
    logger.propagate = False
    handler = CaptureHandler()
    logger.addHandler(handler)
    return logger, handler


def test_bind_valid_form():
    logger, handler = _logger("test_form_binder_valid")
    binder = FormBinder(_declarations(), logger)

    result = binder.bind("ApplicationForm", QueryStringValueProvider("NumberOfChildren=2&YearsAtAddress=10"))

    assert result.is_valid
    assert result.values == {"NumberOfChildren": 2, "YearsAtAddress": 10}
    assert result.outcomes["NumberOfChildren"] == BindingSuccess(2)
    assert [record.msg for record in handler.records] == ["form_bound"]
    assert handler.records[0].bound == 2


def test_bind_collects_field_errors():
    logger, handler = _logger("test_form_binder_errors")
    binder = FormBinder(_declarations(), logger)

    result = binder.bind("ApplicationForm", DictValueProvider({"YearsAtAddress": "2.5"}))

    assert not result.is_valid
    assert result.values == {}
    assert result.outcomes["NumberOfChildren"] == BindingFailure(
        "NumberOfChildren", "Enter the number of children"
    )
    assert result.to_dict() == {
        "container": "ApplicationForm",
        "valid": False,
        "values": {},
        "errors": {
            "NumberOfChildren": ["Enter the number of children"],
            "YearsAtAddress": ["Years at address must be a whole number"],
        },
        "error_summary": [
            {"text": "Enter the number of children", "href": "#NumberOfChildren"},
            {"text": "Years at address must be a whole number", "href": "#YearsAtAddress"},
        ],
    }
    invalid = [record for record in handler.records if record.msg == "field_invalid"]
    assert [record.field for record in invalid] == ["NumberOfChildren", "YearsAtAddress"]
    assert all(record.levelno == logging.INFO for record in invalid)


def test_bind_uses_supplied_model_state():
    logger, _handler = _logger("test_form_binder_state")
    state = ModelState()
    state.try_add_model_error("Other", "Existing error")

    result = FormBinder(_declarations(), logger).bind(
        "ApplicationForm",
        DictValueProvider({"NumberOfChildren": "1", "YearsAtAddress": "3"}),
        model_state=state,
    )

    assert result.model_state is state
    assert result.values == {"NumberOfChildren": 1, "YearsAtAddress": 3}
    assert not result.is_valid


def test_missing_error_text_is_logged_and_raised():
    logger, handler = _logger("test_form_binder_config")
    binder = FormBinder(_declarations(), logger)

    with pytest.raises(BinderConfigurationError):
        binder.bind("BrokenForm", DictValueProvider({"Count": "1"}))

    assert handler.records[-1].msg == "binder_misconfigured"
    assert handler.records[-1].field == "Count"


def test_multiple_values_propagate():
    logger, handler = _logger("test_form_binder_multi")
    binder = FormBinder(_declarations(), logger)

    with pytest.raises(MultipleValuesError):
        binder.bind("ApplicationForm", QueryStringValueProvider("NumberOfChildren=1&NumberOfChildren=2"))

    assert handler.records[-1].errorType == "MultipleValuesError"


def test_max_allowed_errors_passed_to_model_state():
    logger, _handler = _logger("test_form_binder_cap")
    binder = FormBinder(_declarations(), logger, max_allowed_errors=1)

    result = binder.bind("ApplicationForm", DictValueProvider({}))

    assert result.model_state.error_count == 1
    assert len(result.outcomes) == 2
