"""Binding declarations YAML loader and validation."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from .binders import BINDER_REGISTRY, BindingError, IntErrorText


class BindingDeclarationError(BindingError):
    pass


@dataclass(frozen=True)
class FieldDeclaration:
    name: str
    binder: str
    error_text: Optional[IntErrorText]
    container: str


@dataclass(frozen=True)
class FormDeclaration:
    container: str
    fields: List[FieldDeclaration]

    def field_names(self) -> List[str]:
        return [entry.name for entry in self.fields]


@dataclass(frozen=True)
class BindingDeclarations:
    version: int
    forms: Dict[str, FormDeclaration]

    def form(self, container: str) -> FormDeclaration:
        try:
            return self.forms[container]
        except KeyError:
            raise BindingDeclarationError(f"No binding declarations for container [{container}]") from None

    def containers(self) -> List[str]:
        return sorted(self.forms)


def load_bindings(path: str | Path) -> BindingDeclarations:
    raw = yaml.safe_load(Path(path).read_text(encoding="utf-8"))
    return parse_bindings(raw)


def parse_bindings(raw: Any) -> BindingDeclarations:
    if not isinstance(raw, dict):
        raise BindingDeclarationError("Bindings root must be a dictionary")

    version = raw.get("version")
    if not isinstance(version, int) or isinstance(version, bool):
        raise BindingDeclarationError("Bindings version must be an integer")

    forms_raw = raw.get("forms")
    if not isinstance(forms_raw, list) or not forms_raw:
        raise BindingDeclarationError("Bindings forms must be a non-empty list")

    forms: Dict[str, FormDeclaration] = {}
    for item in forms_raw:
        form = _parse_form(item)
        if form.container in forms:
            raise BindingDeclarationError(f"Duplicate container: {form.container}")
        forms[form.container] = form

    return BindingDeclarations(version=version, forms=forms)


def _parse_form(item: Any) -> FormDeclaration:
    if not isinstance(item, dict):
        raise BindingDeclarationError("Form entries must be dictionaries")

    container = item.get("container")
    if not isinstance(container, str) or not container:
        raise BindingDeclarationError("Form entry is missing container")

    fields_raw = item.get("fields")
    if not isinstance(fields_raw, list) or not fields_raw:
        raise BindingDeclarationError(f"{container}.fields must be a non-empty list")

    fields: List[FieldDeclaration] = []
    seen = set()
    for entry in fields_raw:
        declaration = _parse_field(entry, container)
        if declaration.name in seen:
            raise BindingDeclarationError(f"Duplicate field {declaration.name} in {container}")
        seen.add(declaration.name)
        fields.append(declaration)

    return FormDeclaration(container=container, fields=fields)


def _parse_field(item: Any, container: str) -> FieldDeclaration:
    if not isinstance(item, dict):
        raise BindingDeclarationError(f"{container} field entries must be dictionaries")

    name = item.get("name")
    if not isinstance(name, str) or not name:
        raise BindingDeclarationError(f"{container} field entry is missing name")

    binder = item.get("binder", "mandatory_int")
    if binder not in BINDER_REGISTRY:
        raise BindingDeclarationError(f"Unknown binder: {binder}")

    return FieldDeclaration(
        name=name,
        binder=binder,
        error_text=_parse_error_text(item.get("error_text"), f"{container}.{name}"),
        container=container,
    )


def _parse_error_text(value: Any, location: str) -> Optional[IntErrorText]:
    # Absent error text is a bind-time failure, not a load-time one.
    if value is None:
        return None
    if not isinstance(value, dict):
        raise BindingDeclarationError(f"{location}.error_text must be a mapping object")

    missing = value.get("error_message_if_missing")
    name_at_start = value.get("name_at_start_of_sentence")
    for key, text in (
        ("error_message_if_missing", missing),
        ("name_at_start_of_sentence", name_at_start),
    ):
        if not isinstance(text, str) or not text.strip():
            raise BindingDeclarationError(f"{location}.error_text.{key} must be a non-empty string")

    return IntErrorText(
        error_message_if_missing=missing,
        name_at_start_of_sentence=name_at_start,
    )
