"""DecoderConfig: defaults threaded into a Decoder."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, field_validator


class DecoderConfig(BaseModel):
    """Immutable decoder settings.

    Attributes:
        item_separator: Default separator for list and filter-map values.
        operator_separator: Separator used inside an ``ops:`` option.
        strict_filters: Report filter items that match no operator as
            conversion errors instead of dropping them.
    """

    model_config = ConfigDict(frozen=True)

    item_separator: str = ","
    operator_separator: str = ","
    strict_filters: bool = False

    @field_validator("item_separator", "operator_separator")
    @classmethod
    def _non_empty(cls, value: str) -> str:
        if not value:
            raise ValueError("separator must not be empty")
        return value


DEFAULT_CONFIG = DecoderConfig()
