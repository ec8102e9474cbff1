"""Exceptions raised while decoding query parameters."""

from __future__ import annotations


class QParamsError(Exception):
    """Root exception for the qparams package."""


class WrongDestinationTypeError(QParamsError, TypeError):
    """Raised when the decode target is not a mutable record instance.

    Nothing is decoded when this is raised.
    """

    def __init__(self, destination: object) -> None:
        self.destination = destination
        super().__init__(
            "Destination must be a mutable dataclass or pydantic model instance, "
            f"got {type(destination).__name__}"
        )


class InvalidFieldOptionsError(QParamsError, ValueError):
    """Raised when per-field metadata cannot be used (e.g. empty separator)."""


class ValidationError(QParamsError):
    """Raised when query values fail to convert.

    Carries structured errors: ``{display_name: [messages]}``.
    """

    def __init__(self, errors: dict[str, list[str]] | str | None = None) -> None:
        if isinstance(errors, str):
            self.errors: dict[str, list[str]] = {"__root__": [errors]}
        elif errors is None:
            self.errors = {}
        else:
            self.errors = errors
        super().__init__(str(self.errors))

    @property
    def messages(self) -> list[str]:
        """All messages, in the order fields were decoded."""
        return [msg for msgs in self.errors.values() for msg in msgs]


class TypeConversionErrors(ValidationError):
    """Aggregate of every per-field conversion failure from one decode call."""

    def __str__(self) -> str:
        return "".join(f"{msg}\n" for msg in self.messages)


class FilterSyntaxError(ValidationError):
    """Raised by :func:`qparams.tokenizer.tokenize_strict` for unmatched filter items."""
