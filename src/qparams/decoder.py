"""Decoder: query values -> fields of a dataclass or pydantic model instance."""

from __future__ import annotations

import dataclasses
import logging
from typing import TYPE_CHECKING, Any
from urllib.parse import parse_qs, urlsplit

from pydantic import BaseModel

from .config import DEFAULT_CONFIG, DecoderConfig
from .containers import QuerySlice
from .conversion import parse_float, parse_int
from .descriptors import FieldDescriptor, FieldKind, build_descriptors
from .exceptions import TypeConversionErrors, WrongDestinationTypeError
from .result import ConversionResult
from .tokenizer import scan

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping, Sequence

logger = logging.getLogger(__name__)

_CONVERTERS: dict[FieldKind, Callable[[str], Any]] = {
    FieldKind.INT: parse_int,
    FieldKind.FLOAT: parse_float,
}


def upper_initial(name: str) -> str:
    return name[:1].upper() + name[1:]


def _check_destination(destination: Any) -> None:
    if isinstance(destination, type):
        raise WrongDestinationTypeError(destination)
    if isinstance(destination, BaseModel):
        if destination.model_config.get("frozen"):
            raise WrongDestinationTypeError(destination)
        return
    if dataclasses.is_dataclass(destination):
        if type(destination).__dataclass_params__.frozen:  # type: ignore[attr-defined]
            raise WrongDestinationTypeError(destination)
        return
    raise WrongDestinationTypeError(destination)


def _first_values(source: Mapping[str, str | Sequence[str]]) -> dict[str, str]:
    """Lower-case the keys and keep the first value of each parameter."""
    values: dict[str, str] = {}
    for key, value in source.items():
        if not isinstance(value, str):
            value = value[0] if value else ""
        values.setdefault(key.lower(), value)
    return values


class Decoder:
    """Decode query parameters into a mutable record.

    Scalar conversion failures do not stop decoding; they are collected and
    reported together once every field has been visited.
    """

    def __init__(self, config: DecoderConfig | None = None) -> None:
        self._config = config or DEFAULT_CONFIG

    @property
    def config(self) -> DecoderConfig:
        return self._config

    def collect(
        self, destination: Any, source: Mapping[str, str | Sequence[str]]
    ) -> ConversionResult:
        """Decode *source* into *destination* and return the collected errors.

        Raises:
            WrongDestinationTypeError: *destination* is not a mutable
                dataclass or pydantic model instance.
        """
        _check_destination(destination)
        values = _first_values(source)
        result = ConversionResult.success()
        for descriptor in build_descriptors(type(destination), self._config):
            raw = values.get(descriptor.display_name.lower())
            if not raw:
                continue
            logger.debug(
                "Decoding %s=%r into %s.%s",
                descriptor.display_name,
                raw,
                type(destination).__name__,
                descriptor.attr,
            )
            self._apply(destination, descriptor, raw, result)
        if not result.is_valid:
            logger.debug(
                "Decoding %s finished with %d error(s)",
                type(destination).__name__,
                len(result.messages),
            )
        return result

    def decode(
        self, destination: Any, source: Mapping[str, str | Sequence[str]]
    ) -> None:
        """Decode *source* into *destination*.

        Raises:
            WrongDestinationTypeError: before any field is touched.
            TypeConversionErrors: after all fields were processed, if any
                value failed to convert.
        """
        result = self.collect(destination, source)
        if not result.is_valid:
            raise TypeConversionErrors(result.errors)

    def decode_query_string(self, destination: Any, query: str) -> None:
        """Decode a raw ``a=1&b=2`` query component."""
        self.decode(destination, parse_qs(query, keep_blank_values=True))

    def decode_url(self, destination: Any, url: str) -> None:
        """Decode the query component of *url*."""
        self.decode_query_string(destination, urlsplit(url).query)

    def _apply(
        self,
        destination: Any,
        descriptor: FieldDescriptor,
        raw: str,
        result: ConversionResult,
    ) -> None:
        label = upper_initial(descriptor.attr)
        value: Any
        if descriptor.kind is FieldKind.FILTER_MAP:
            scanned = scan(raw, descriptor.separator, descriptor.operators)
            if self._config.strict_filters:
                for item in scanned.unmatched:
                    result.add_error(
                        descriptor.display_name,
                        f"Field {label} contains an unrecognized filter item ({item})",
                    )
            value = scanned.filters
        elif descriptor.kind is FieldKind.SLICE:
            value = QuerySlice(
                member
                for member in (m.lower() for m in raw.split(descriptor.separator))
                if member
            )
        elif descriptor.kind is FieldKind.STRING:
            value = raw
        else:
            try:
                value = _CONVERTERS[descriptor.kind](raw)
            except ValueError:
                result.add_error(
                    descriptor.display_name,
                    f"Field {label} does not contain a valid "
                    f"{descriptor.kind.value} ({raw})",
                )
                return
        setattr(destination, descriptor.attr, value)


def decode(
    destination: Any,
    source: Mapping[str, str | Sequence[str]],
    *,
    config: DecoderConfig | None = None,
) -> None:
    """Decode *source* into *destination* with a one-off :class:`Decoder`."""
    Decoder(config).decode(destination, source)
