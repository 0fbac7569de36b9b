"""Field binders: raw request text in, typed value or GOV.UK error message out."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Optional, Sequence, Union

from .model_state import ModelState
from .validator import is_missing, is_number, parse_int32


class BindingError(Exception):
    pass


class BinderConfigurationError(BindingError):
    """A binder was wired up without the declaration data it needs."""


class MultipleValuesError(BindingError, ValueError):
    """A scalar field received more than one value from the request."""


@dataclass(frozen=True)
class IntErrorText:
    error_message_if_missing: str
    name_at_start_of_sentence: str

    @property
    def not_a_number(self) -> str:
        return f"{self.name_at_start_of_sentence} must be a number"

    @property
    def not_a_whole_number(self) -> str:
        return f"{self.name_at_start_of_sentence} must be a whole number"


@dataclass(frozen=True)
class FieldBindingRequest:
    field_name: str
    raw_values: Sequence[Optional[str]]
    error_text: Optional[IntErrorText]
    container_type: Optional[str] = None


@dataclass(frozen=True)
class BindingSuccess:
    value: int

    @property
    def is_success(self) -> bool:
        return True


@dataclass(frozen=True)
class BindingFailure:
    field_name: str
    message: str

    @property
    def is_success(self) -> bool:
        return False


BindingOutcome = Union[BindingSuccess, BindingFailure]


def bind_mandatory_int(
    request: FieldBindingRequest,
    model_state: Optional[ModelState] = None,
) -> BindingOutcome:
    """Bind a required int field, reporting failures with GOV.UK error wording.

    Checks run in order and stop at the first failure: presence, single value,
    emptiness, number, whole number. User input problems come back as a
    ``BindingFailure`` and are added to ``model_state``. Wiring problems (no
    error text, several values for one field) raise.
    """
    error_text = request.error_text
    if error_text is None:
        raise BinderConfigurationError(
            "The mandatory_int binder needs error_text with error_message_if_missing and "
            f"name_at_start_of_sentence, but none was declared for field [{request.field_name}]"
        )

    field_name = request.field_name
    raw_values = request.raw_values
    if isinstance(raw_values, str):
        raw_values = [raw_values]
    raw_values = list(raw_values)

    if not raw_values:
        return _fail(model_state, field_name, error_text.error_message_if_missing)

    if len(raw_values) > 1:
        joined = ", ".join("" if value is None else value for value in raw_values)
        raise MultipleValuesError(
            "This field should only receive 1 value at a time, "
            f"but received [{len(raw_values)}] values [{joined}] "
            f"for field [{field_name}] on type [{request.container_type or '<unknown>'}]"
        )

    if model_state is not None:
        model_state.set_model_value(field_name, raw_values)

    value = raw_values[0]

    if is_missing(value):
        return _fail(model_state, field_name, error_text.error_message_if_missing)

    if not is_number(value):
        return _fail(model_state, field_name, error_text.not_a_number)

    int_value = parse_int32(value)
    if int_value is None:
        return _fail(model_state, field_name, error_text.not_a_whole_number)

    return BindingSuccess(int_value)


def _fail(model_state: Optional[ModelState], field_name: str, message: str) -> BindingFailure:
    if model_state is not None:
        model_state.try_add_model_error(field_name, message)
    return BindingFailure(field_name, message)


BINDER_REGISTRY: Dict[str, Callable[..., BindingOutcome]] = {
    "mandatory_int": bind_mandatory_int,
}
