"""Shared fixtures for qparams tests."""

from __future__ import annotations

import pytest

from qparams import Decoder, DecoderConfig
from qparams.descriptors import build_descriptors


@pytest.fixture
def decoder() -> Decoder:
    """Decoder with the default configuration."""
    return Decoder()


@pytest.fixture
def strict_decoder() -> Decoder:
    """Decoder that reports unmatched filter items."""
    return Decoder(DecoderConfig(strict_filters=True))


@pytest.fixture(autouse=True)
def _clear_descriptor_cache():
    yield
    build_descriptors.cache_clear()
