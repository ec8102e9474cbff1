"""Per-field metadata: the ``QueryParam`` marker and its tag syntax.

A tag is a space-separated list of ``key:value`` options::

    Annotated[FilterMap, QueryParam("name:f sep:| ops:>,==,-like-")]

Recognized keys are ``name``, ``sep`` and ``ops``; anything else is ignored.
The value is everything after the first ``:``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from .exceptions import InvalidFieldOptionsError

if TYPE_CHECKING:
    from collections.abc import Iterable

_KNOWN_KEYS = frozenset({"name", "sep", "ops"})


def parse_tag(tag: str) -> dict[str, str]:
    """Return the recognized options of *tag* as raw strings."""
    options: dict[str, str] = {}
    for part in tag.split(" "):
        key, colon, value = part.partition(":")
        if not colon or not value or key not in _KNOWN_KEYS:
            continue
        options[key] = value
    return options


@dataclass(frozen=True)
class FieldOptions:
    """Resolved options; ``None`` means "use the decoder default"."""

    name: str | None = None
    sep: str | None = None
    ops: tuple[str, ...] = ()


@dataclass(frozen=True)
class QueryParam:
    """Field metadata for the decoder.

    Accepts a tag string, keyword options, or both; keywords win::

        QueryParam("sep:|")
        QueryParam(name="q", ops=(">=", "=="))

    A plain dataclass rather than a pydantic model, so pydantic destination
    models leave it alone inside ``Annotated``.
    """

    tag: str = ""
    name: str | None = None
    sep: str | None = None
    ops: tuple[str, ...] | None = None

    def __post_init__(self) -> None:
        if isinstance(self.ops, str):
            raise InvalidFieldOptionsError(
                "ops must be a sequence of operators, not a string"
            )
        if self.ops is not None and not isinstance(self.ops, tuple):
            object.__setattr__(self, "ops", tuple(self.ops))
        if self.sep == "":
            raise InvalidFieldOptionsError("sep option must not be empty")

    def resolve(self, operator_separator: str = ",") -> FieldOptions:
        """Merge the tag with the keyword options."""
        raw = parse_tag(self.tag)
        ops = self.ops
        if ops is None and "ops" in raw:
            ops = tuple(raw["ops"].split(operator_separator))
        return FieldOptions(
            name=self.name if self.name is not None else raw.get("name"),
            sep=self.sep if self.sep is not None else raw.get("sep"),
            ops=ops or (),
        )


def find_query_param(metadata: Iterable[Any]) -> QueryParam | None:
    """Return the first QueryParam in an ``Annotated`` metadata sequence."""
    for item in metadata:
        if isinstance(item, QueryParam):
            return item
    return None
