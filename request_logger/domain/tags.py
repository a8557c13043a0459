"""Typed custom tags pulled from the per-request context store.

Handlers and upstream middleware attach arbitrary values to ``request.state``.
When a tag name is configured, its value is classified once into a ``TagKind``
and rendered as a structured field that keeps its native type in the sink
(lists stay lists, numbers stay numbers) instead of being flattened to text.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import timedelta
from enum import StrEnum
from typing import Any

from pydantic import BaseModel


class TagKind(StrEnum):
    """Closed set of value kinds a tag can carry."""

    STRING = "string"
    STRING_LIST = "string_list"
    BOOLEAN = "boolean"
    INTEGER = "integer"
    UNSIGNED = "unsigned"
    FLOAT = "float"
    DURATION = "duration"
    ERROR_LIST = "error_list"
    OBJECT = "object"
    STRINGIFIABLE = "stringifiable"
    UNKNOWN = "unknown"


def _overrides_str(value: Any) -> bool:
    return type(value).__str__ is not object.__str__


@dataclass(frozen=True, slots=True)
class TagValue:
    """A context value together with its resolved kind.

    Attributes:
        kind: Kind resolved by ``resolve``
        value: Normalized source value
    """

    kind: TagKind
    value: Any

    @classmethod
    def resolve(cls, raw: Any) -> "TagValue":
        """Classify a raw context value.

        Order matters: ``bool`` is a subclass of ``int`` and pydantic models
        override ``__str__``, so both are checked before the broader kinds.

        Args:
            raw: Value read from the request context store

        Returns:
            TagValue with the matching kind

        Example:
            >>> TagValue.resolve(["a", "b"]).kind
            <TagKind.STRING_LIST: 'string_list'>
            >>> TagValue.resolve(-3).kind
            <TagKind.INTEGER: 'integer'>
        """
        if isinstance(raw, str):
            return cls(TagKind.STRING, raw)
        if isinstance(raw, bool):
            return cls(TagKind.BOOLEAN, raw)
        if isinstance(raw, int):
            return cls(TagKind.UNSIGNED if raw >= 0 else TagKind.INTEGER, raw)
        if isinstance(raw, float):
            return cls(TagKind.FLOAT, raw)
        if isinstance(raw, timedelta):
            return cls(TagKind.DURATION, raw)
        if isinstance(raw, list | tuple):
            if all(isinstance(item, str) for item in raw):
                return cls(TagKind.STRING_LIST, list(raw))
            if all(isinstance(item, BaseException) for item in raw):
                return cls(TagKind.ERROR_LIST, list(raw))
        if isinstance(raw, Mapping):
            return cls(TagKind.OBJECT, dict(raw))
        if isinstance(raw, BaseModel):
            return cls(TagKind.OBJECT, raw.model_dump())
        if _overrides_str(raw):
            return cls(TagKind.STRINGIFIABLE, raw)
        return cls(TagKind.UNKNOWN, raw)

    def field(self) -> Any:
        """Return the value to store under the tag name in a log record."""
        match self.kind:
            case (
                TagKind.STRING
                | TagKind.BOOLEAN
                | TagKind.INTEGER
                | TagKind.UNSIGNED
                | TagKind.FLOAT
                | TagKind.DURATION
            ):
                return self.value
            case TagKind.STRING_LIST | TagKind.ERROR_LIST:
                return list(self.value)
            case TagKind.OBJECT:
                return dict(self.value)
            case TagKind.STRINGIFIABLE:
                return str(self.value)
            case TagKind.UNKNOWN:
                return f"<{type(self.value).__qualname__}>"


def collect_tags(names: Iterable[str], state: Any) -> dict[str, Any]:
    """Look up each tag name on the request context store.

    Args:
        names: Configured tag names
        state: Per-request context store (``request.state``)

    Returns:
        Mapping of tag name to structured field value; names whose value is
        missing, ``None`` or an empty string are left out
    """
    fields: dict[str, Any] = {}
    for name in names:
        raw = getattr(state, name, None)
        if raw is None or raw == "":
            continue
        fields[name] = TagValue.resolve(raw).field()
    return fields
