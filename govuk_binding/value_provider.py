"""Value providers: raw request text keyed by field name."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Iterator, List, Mapping, Optional, Protocol, Sequence, Tuple
from urllib.parse import parse_qs


@dataclass(frozen=True)
class ValueProviderResult:
    values: Tuple[Optional[str], ...] = ()

    @classmethod
    def of(cls, values: Iterable[Optional[str]]) -> "ValueProviderResult":
        return cls(tuple(values))

    @property
    def first_value(self) -> Optional[str]:
        if not self.values:
            return None
        return self.values[0]

    def __len__(self) -> int:
        return len(self.values)

    def __iter__(self) -> Iterator[Optional[str]]:
        return iter(self.values)

    def __str__(self) -> str:
        return ",".join("" if value is None else value for value in self.values)


NONE = ValueProviderResult()


class ValueProvider(Protocol):
    def contains_prefix(self, name: str) -> bool:
        ...

    def get_value(self, name: str) -> ValueProviderResult:
        ...


class DictValueProvider:
    """Provider over a plain mapping of name -> scalar | list | None."""

    def __init__(self, values: Mapping[str, Any]) -> None:
        self._values = dict(values)

    def contains_prefix(self, name: str) -> bool:
        return len(self.get_value(name)) > 0

    def get_value(self, name: str) -> ValueProviderResult:
        raw = self._values.get(name)
        if raw is None:
            return NONE
        if isinstance(raw, (list, tuple)):
            return ValueProviderResult.of(None if item is None else str(item) for item in raw)
        # Scalars from decoded JSON bodies (42, True) bind by their text.
        return ValueProviderResult((str(raw),))


class QueryStringValueProvider(DictValueProvider):
    """Provider over ``application/x-www-form-urlencoded`` text.

    Blank values are kept, so ``age=`` supplies one empty value for ``age``.
    """

    def __init__(self, query: str) -> None:
        super().__init__(parse_qs(query or "", keep_blank_values=True))


class MultiDictValueProvider:
    """Provider over multi-dicts exposing ``getlist`` (werkzeug, Django QueryDict)."""

    def __init__(self, source: Any) -> None:
        self._source = source

    def contains_prefix(self, name: str) -> bool:
        return name in self._source

    def get_value(self, name: str) -> ValueProviderResult:
        if name not in self._source:
            return NONE
        return ValueProviderResult.of(self._source.getlist(name))


class CompositeValueProvider:
    """Asks each provider in turn; the first one holding values for the name wins."""

    def __init__(self, providers: Sequence[ValueProvider]) -> None:
        self.providers: List[ValueProvider] = list(providers)

    def contains_prefix(self, name: str) -> bool:
        return any(provider.contains_prefix(name) for provider in self.providers)

    def get_value(self, name: str) -> ValueProviderResult:
        for provider in self.providers:
            result = provider.get_value(name)
            if len(result) > 0:
                return result
        return NONE
