"""Runs the declared field binders for one form submission."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .binders import BINDER_REGISTRY, BindingError, BindingOutcome, BindingSuccess, FieldBindingRequest
from .binding_loader import BindingDeclarations, FieldDeclaration
from .model_state import DEFAULT_MAX_ALLOWED_ERRORS, ModelState
from .value_provider import ValueProvider


@dataclass
class FormBindingResult:
    container: str
    model_state: ModelState
    values: Dict[str, int] = field(default_factory=dict)
    outcomes: Dict[str, BindingOutcome] = field(default_factory=dict)

    @property
    def is_valid(self) -> bool:
        return self.model_state.is_valid

    def to_dict(self) -> Dict[str, Any]:
        errors: Dict[str, List[str]] = {}
        for key in self.model_state.keys():
            messages = self.model_state.errors_for(key)
            if messages:
                errors[key] = messages
        return {
            "container": self.container,
            "valid": self.is_valid,
            "values": dict(self.values),
            "errors": errors,
            "error_summary": self.model_state.error_summary(),
        }


class FormBinder:
    def __init__(
        self,
        declarations: BindingDeclarations,
        logger,
        max_allowed_errors: int = DEFAULT_MAX_ALLOWED_ERRORS,
    ) -> None:
        self.declarations = declarations
        self.logger = logger
        self.max_allowed_errors = max_allowed_errors

    def bind(
        self,
        container: str,
        value_provider: ValueProvider,
        model_state: Optional[ModelState] = None,
    ) -> FormBindingResult:
        form = self.declarations.form(container)
        state = model_state if model_state is not None else ModelState(self.max_allowed_errors)
        result = FormBindingResult(container=container, model_state=state)

        for declaration in form.fields:
            outcome = self._bind_field(declaration, value_provider, state)
            result.outcomes[declaration.name] = outcome
            if isinstance(outcome, BindingSuccess):
                result.values[declaration.name] = outcome.value
                continue
            self.logger.info(
                "field_invalid",
                extra={
                    "event": "field_invalid",
                    "container": container,
                    "field": declaration.name,
                    "detail": outcome.message,
                },
            )

        self.logger.debug(
            "form_bound",
            extra={
                "event": "form_bound",
                "container": container,
                "fields": len(form.fields),
                "bound": len(result.values),
                "errors": state.error_count,
            },
        )
        return result

    def _bind_field(
        self,
        declaration: FieldDeclaration,
        value_provider: ValueProvider,
        model_state: ModelState,
    ) -> BindingOutcome:
        binder = BINDER_REGISTRY[declaration.binder]
        request = FieldBindingRequest(
            field_name=declaration.name,
            raw_values=value_provider.get_value(declaration.name),
            error_text=declaration.error_text,
            container_type=declaration.container,
        )
        try:
            return binder(request, model_state)
        except BindingError as exc:
            self.logger.error(
                "binder_misconfigured",
                extra={
                    "event": "binder_misconfigured",
                    "container": declaration.container,
                    "field": declaration.name,
                    "binder": declaration.binder,
                    "errorType": type(exc).__name__,
                },
            )
            raise
