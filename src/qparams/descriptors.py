"""Field-descriptor tables: introspect a destination type once, reuse per call."""

from __future__ import annotations

import dataclasses
import functools
import logging
import types
import typing
from enum import Enum
from typing import Annotated, Any, Union

from pydantic import BaseModel

from .config import DEFAULT_CONFIG, DecoderConfig
from .containers import FilterMap, QuerySlice
from .options import FieldOptions, find_query_param
from .tokenizer import validate_operators

logger = logging.getLogger(__name__)


class FieldKind(str, Enum):
    """How a destination field is decoded."""

    INT = "integer"
    FLOAT = "float"
    STRING = "string"
    SLICE = "slice"
    FILTER_MAP = "filter_map"


@dataclasses.dataclass(frozen=True)
class FieldDescriptor:
    attr: str
    display_name: str
    kind: FieldKind
    separator: str
    operators: tuple[str, ...] = ()


def _strip_optional(annotation: Any) -> Any:
    origin = typing.get_origin(annotation)
    if origin is Union or origin is types.UnionType:
        args = [a for a in typing.get_args(annotation) if a is not type(None)]
        if len(args) == 1:
            return args[0]
    return annotation


def _kind_of(annotation: Any) -> FieldKind | None:
    annotation = _strip_optional(annotation)
    if typing.get_origin(annotation) is Annotated:
        annotation = _strip_optional(typing.get_args(annotation)[0])
    origin = typing.get_origin(annotation) or annotation
    if not isinstance(origin, type):
        return None
    if issubclass(origin, FilterMap):
        return FieldKind.FILTER_MAP
    if issubclass(origin, QuerySlice):
        return FieldKind.SLICE
    if origin is dict:
        return FieldKind.FILTER_MAP
    if origin is list:
        return FieldKind.SLICE
    # bool is an int subclass but has no query representation here
    if origin is bool:
        return None
    if issubclass(origin, int):
        return FieldKind.INT
    if issubclass(origin, float):
        return FieldKind.FLOAT
    if issubclass(origin, str):
        return FieldKind.STRING
    return None


def _iter_fields(cls: type) -> typing.Iterator[tuple[str, Any, tuple[Any, ...]]]:
    """Yield ``(attribute, annotation, metadata)`` for each declared field."""
    if issubclass(cls, BaseModel):
        for attr, info in cls.model_fields.items():
            if info.frozen:
                logger.debug("Skipping %s.%s: frozen field", cls.__name__, attr)
                continue
            metadata: tuple[Any, ...] = tuple(info.metadata)
            if find_query_param(metadata) is None:
                # Annotated nested in a union is not lifted into info.metadata
                inner = _strip_optional(info.annotation)
                if typing.get_origin(inner) is Annotated:
                    metadata = inner.__metadata__
            yield attr, info.annotation, metadata
        return
    hints = typing.get_type_hints(cls, include_extras=True)
    for f in dataclasses.fields(cls):
        hint = _strip_optional(hints.get(f.name, f.type))
        metadata = ()
        if typing.get_origin(hint) is Annotated:
            metadata = hint.__metadata__
        yield f.name, hint, metadata


@functools.lru_cache(maxsize=256)
def build_descriptors(
    cls: type, config: DecoderConfig = DEFAULT_CONFIG
) -> tuple[FieldDescriptor, ...]:
    """Return the descriptor table for *cls* (a dataclass or pydantic model)."""
    table: list[FieldDescriptor] = []
    for attr, annotation, metadata in _iter_fields(cls):
        kind = _kind_of(annotation)
        if kind is None:
            logger.debug("Skipping %s.%s: unsupported type", cls.__name__, attr)
            continue
        marker = find_query_param(metadata)
        options = (
            marker.resolve(config.operator_separator) if marker else FieldOptions()
        )
        operators = options.ops if kind is FieldKind.FILTER_MAP else ()
        if kind is FieldKind.FILTER_MAP:
            unusable = validate_operators(operators)
            if unusable:
                logger.warning(
                    "%s.%s declares operators that can never match: %r",
                    cls.__name__,
                    attr,
                    unusable,
                )
        table.append(
            FieldDescriptor(
                attr=attr,
                display_name=options.name or attr.lower(),
                kind=kind,
                separator=options.sep or config.item_separator,
                operators=operators,
            )
        )
    return tuple(table)
