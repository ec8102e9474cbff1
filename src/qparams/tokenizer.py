"""Filter-expression tokenizer.

Turns a single query value such as ``age>=7,gender==0,name-like-Doe`` into a
:class:`~qparams.containers.FilterMap` keyed ``"<field> <operator>"``.

Operators are recognized without any delimiter between them and their
operands, so at every scan position the widest declared operator wins.
Only the length classes in :data:`OPERATOR_LENGTHS` are tried; an operator
of any other length is never matched.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, NamedTuple

from .containers import FilterEntry, FilterMap
from .exceptions import FilterSyntaxError

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator, Sequence

logger = logging.getLogger(__name__)

# Widest first.
OPERATOR_LENGTHS: tuple[int, ...] = (6, 4, 2, 1)


class TokenizeResult(NamedTuple):
    """Filters plus every non-empty item that contained no known operator."""

    filters: FilterMap
    unmatched: list[str]


def _group_by_length(operators: Iterable[str]) -> dict[int, tuple[str, ...]]:
    groups: dict[int, list[str]] = {}
    for op in operators:
        if len(op) in OPERATOR_LENGTHS:
            groups.setdefault(len(op), []).append(op)
    return {length: tuple(ops) for length, ops in groups.items()}


def _match_at(
    text: str, pos: int, groups: dict[int, tuple[str, ...]]
) -> str | None:
    for length in OPERATOR_LENGTHS:
        for op in groups.get(length, ()):
            if text.startswith(op, pos):
                return op
    return None


def validate_operators(operators: Iterable[str]) -> list[str]:
    """Return the declared operators that can never be matched."""
    return [op for op in operators if len(op) not in OPERATOR_LENGTHS]


def match_operator(text: str, operators: Sequence[str]) -> str | None:
    """Return the widest operator that *text* starts with, or ``None``.

    Within one length class the first declared operator wins.
    """
    return _match_at(text, 0, _group_by_length(operators))


def _split(
    item: str, groups: dict[int, tuple[str, ...]]
) -> FilterEntry | None:
    for pos in range(len(item)):
        op = _match_at(item, pos, groups)
        if op is not None:
            return FilterEntry(item[:pos].lower(), op, item[pos + len(op) :])
    return None


def split_item(item: str, operators: Sequence[str]) -> FilterEntry | None:
    """Split one filter item into ``(field, operator, value)``.

    The field is lower-cased; operator and value are kept verbatim.
    """
    return _split(item, _group_by_length(operators))


def _items(raw: str, item_separator: str) -> Iterator[str]:
    if not item_separator:
        raise ValueError("item_separator must not be empty")
    for item in raw.split(item_separator):
        if item:
            yield item


def iter_entries(
    raw: str, item_separator: str, operators: Sequence[str]
) -> Iterator[FilterEntry]:
    """Yield one entry per item that contains a known operator, in source order."""
    groups = _group_by_length(operators)
    for item in _items(raw, item_separator):
        entry = _split(item, groups)
        if entry is not None:
            yield entry


def scan(raw: str, item_separator: str, operators: Sequence[str]) -> TokenizeResult:
    """Tokenize *raw* and report the items that could not be split."""
    groups = _group_by_length(operators)
    filters = FilterMap()
    unmatched: list[str] = []
    for item in _items(raw, item_separator):
        entry = _split(item, groups)
        if entry is None:
            unmatched.append(item)
            continue
        filters[entry.key] = entry.value
    if unmatched:
        logger.debug("Unmatched filter items %r in %r", unmatched, raw)
    return TokenizeResult(filters=filters, unmatched=unmatched)


def tokenize(raw: str, item_separator: str, operators: Sequence[str]) -> FilterMap:
    """Return the FilterMap for *raw*.

    Never fails on input: items without a known operator are dropped and
    later duplicates of a ``"<field> <operator>"`` key overwrite earlier ones.
    """
    return scan(raw, item_separator, operators).filters


def tokenize_strict(
    raw: str, item_separator: str, operators: Sequence[str]
) -> FilterMap:
    """Like :func:`tokenize` but raise FilterSyntaxError for unmatched items."""
    result = scan(raw, item_separator, operators)
    if result.unmatched:
        raise FilterSyntaxError(
            {
                "__root__": [
                    f"Unrecognized filter item ({item})" for item in result.unmatched
                ]
            }
        )
    return result.filters


def serialize(entries: Iterable[FilterEntry], item_separator: str = ",") -> str:
    """Join entries back into a filter string."""
    return item_separator.join(f"{e.field}{e.operator}{e.value}" for e in entries)
