"""FilterMap and QuerySlice: the values assigned to decoded fields."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, NamedTuple

from pydantic_core import core_schema

from .conversion import parse_float, parse_int

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator, Mapping

    from pydantic import GetCoreSchemaHandler

# Symbol operators -> specification operator names.
DEFAULT_OPERATOR_ALIASES: dict[str, str] = {
    "=": "=",
    "==": "=",
    "!=": "!=",
    "<>": "!=",
    ">": ">",
    ">=": ">=",
    "<": "<",
    "<=": "<=",
    "-like-": "like",
    "~": "ilike",
}


class FilterEntry(NamedTuple):
    field: str
    operator: str
    value: str

    @property
    def key(self) -> str:
        return f"{self.field} {self.operator}"


class SliceConversion(NamedTuple):
    """Members that converted, plus one message per member that did not."""

    values: list[Any]
    errors: list[str]

    @property
    def ok(self) -> bool:
        return not self.errors


class FilterMap(dict[str, str]):
    """Mapping of ``"<field> <operator>"`` to the raw operand."""

    def entries(self) -> Iterator[FilterEntry]:
        """Yield the entries back out of the keys."""
        for key, value in self.items():
            field, _, op = key.rpartition(" ")
            yield FilterEntry(field, op, value)

    def to_query(self, item_separator: str = ",") -> str:
        """Serialize back to a filter string (item order follows insertion)."""
        from .tokenizer import serialize

        return serialize(self.entries(), item_separator)

    def to_spec_dict(self, aliases: Mapping[str, str] | None = None) -> dict[str, Any]:
        """Return a specification condition dict.

        One entry gives ``{"op", "attr", "val"}``; several are combined as
        ``{"op": "and", "conditions": [...]}``. Operators missing from
        *aliases* are passed through unchanged.
        """
        table = DEFAULT_OPERATOR_ALIASES if aliases is None else aliases
        clauses = [
            {"op": table.get(e.operator, e.operator), "attr": e.field, "val": e.value}
            for e in self.entries()
        ]
        if not clauses:
            return {}
        if len(clauses) == 1:
            return clauses[0]
        return {"op": "and", "conditions": clauses}

    @classmethod
    def __get_pydantic_core_schema__(
        cls, source_type: Any, handler: GetCoreSchemaHandler
    ) -> core_schema.CoreSchema:
        return core_schema.no_info_after_validator_function(
            cls,
            core_schema.dict_schema(core_schema.str_schema(), core_schema.str_schema()),
        )


def _convert(
    members: list[str], convert: Callable[[str], Any], type_name: str
) -> SliceConversion:
    values: list[Any] = []
    errors: list[str] = []
    for member in members:
        try:
            values.append(convert(member))
        except ValueError:
            errors.append(f"Could not convert member {member} to {type_name}")
    return SliceConversion(values=values, errors=errors)


class QuerySlice(list[str]):
    """Lower-cased, non-empty members of a separated query value."""

    def to_ints(self) -> SliceConversion:
        """Convert every member to ``int``; failures are skipped and reported."""
        return _convert(self, parse_int, "int")

    def to_floats(self) -> SliceConversion:
        """Convert every member to ``float``; failures are skipped and reported."""
        return _convert(self, parse_float, "float")

    @classmethod
    def __get_pydantic_core_schema__(
        cls, source_type: Any, handler: GetCoreSchemaHandler
    ) -> core_schema.CoreSchema:
        return core_schema.no_info_after_validator_function(
            cls, core_schema.list_schema(core_schema.str_schema())
        )
