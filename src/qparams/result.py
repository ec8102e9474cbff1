"""ConversionResult: per-field conversion errors collected over one decode."""

from __future__ import annotations

from dataclasses import dataclass, field


def default_errors_factory() -> dict[str, list[str]]:
    return {}


@dataclass
class ConversionResult:
    """Collects field-level conversion errors.

    Usage::

        result = ConversionResult.success()
        result.add_error("limit", "Field Limit does not contain a valid integer (x)")
    """

    errors: dict[str, list[str]] = field(default_factory=default_errors_factory)

    @property
    def is_valid(self) -> bool:
        return len(self.errors) == 0

    @property
    def messages(self) -> list[str]:
        return [msg for msgs in self.errors.values() for msg in msgs]

    @classmethod
    def success(cls) -> ConversionResult:
        return cls()

    def add_error(self, field_name: str, message: str) -> None:
        """Add a single error for *field_name*."""
        self.errors.setdefault(field_name, []).append(message)
