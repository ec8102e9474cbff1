"""Decode HTTP query strings into typed records, including filter expressions."""

from __future__ import annotations

from .config import DEFAULT_CONFIG, DecoderConfig
from .containers import FilterEntry, FilterMap, QuerySlice, SliceConversion
from .decoder import Decoder, decode
from .descriptors import FieldDescriptor, FieldKind, build_descriptors
from .exceptions import (
    FilterSyntaxError,
    InvalidFieldOptionsError,
    QParamsError,
    TypeConversionErrors,
    ValidationError,
    WrongDestinationTypeError,
)
from .options import FieldOptions, QueryParam, parse_tag
from .result import ConversionResult
from .tokenizer import (
    OPERATOR_LENGTHS,
    TokenizeResult,
    iter_entries,
    match_operator,
    scan,
    serialize,
    split_item,
    tokenize,
    tokenize_strict,
    validate_operators,
)

__all__ = [
    "DEFAULT_CONFIG",
    "OPERATOR_LENGTHS",
    "ConversionResult",
    "Decoder",
    "DecoderConfig",
    "FieldDescriptor",
    "FieldKind",
    "FieldOptions",
    "FilterEntry",
    "FilterMap",
    "FilterSyntaxError",
    "InvalidFieldOptionsError",
    "QParamsError",
    "QueryParam",
    "QuerySlice",
    "SliceConversion",
    "TokenizeResult",
    "TypeConversionErrors",
    "ValidationError",
    "WrongDestinationTypeError",
    "build_descriptors",
    "decode",
    "iter_entries",
    "match_operator",
    "parse_tag",
    "scan",
    "serialize",
    "split_item",
    "tokenize",
    "tokenize_strict",
    "validate_operators",
]
