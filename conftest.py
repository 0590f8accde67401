"""Pytest configuration for standin tests."""

from __future__ import annotations

import collections.abc as cabc
import os

import pytest

from standin import InterfaceDescriptor, StandInConfig, default_config
from test_support.delegates import DummyGreeter, Greeter

GREETER = InterfaceDescriptor.from_protocol(Greeter)


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch: pytest.MonkeyPatch) -> cabc.Iterator[None]:
    """Hide ambient ``STANDIN_*`` variables and reset the cached configuration."""
    for key in list(os.environ):
        if key.startswith("STANDIN_"):
            monkeypatch.delenv(key)
    default_config.cache_clear()
    yield
    default_config.cache_clear()


@pytest.fixture
def greeter_descriptor() -> InterfaceDescriptor:
    """Return the descriptor derived from :class:`Greeter`."""
    return GREETER


@pytest.fixture
def delegate() -> DummyGreeter:
    """Return a fresh real greeter."""
    return DummyGreeter()


@pytest.fixture
def oldest_first() -> StandInConfig:
    """Return a configuration keeping calls in chronological order."""
    return StandInConfig(call_order="oldest-first")
