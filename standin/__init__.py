"""Spies, stubs and mocks for explicitly described interfaces.

Describe an interface once, then build doubles from it::

    from standin import InterfaceDescriptor, call_count, mock

    GREETER = InterfaceDescriptor.of("Greeter", greet=["name"], close=[])

    def test_greets_everyone() -> None:
        greeter = mock(GREETER, {"greet": lambda name: f"hi {name}"})
        run_party(greeter, ["ada", "bob"])
        assert call_count(greeter, "greet") == 2
"""

from __future__ import annotations

from .config import StandInConfig, coerce_bool, default_config, load_config
from .descriptor import InterfaceDescriptor, MethodSignature
from .doubles import Double, SpyDouble, StubDouble, build_double, mock, spy, stub
from .errors import (
    ConfigError,
    DescriptorError,
    NotASpyError,
    StandInError,
    UnknownMethodError,
)
from .ledger import CallLedger
from .matchers import (
    Composite,
    Equals,
    Matcher,
    Pattern,
    Predicate,
    Wildcard,
    anything,
    as_matcher,
    matches,
)
from .query import call_count, calls, protocol, proxied, received

__all__ = [
    "CallLedger",
    "Composite",
    "ConfigError",
    "DescriptorError",
    "Double",
    "Equals",
    "InterfaceDescriptor",
    "Matcher",
    "MethodSignature",
    "NotASpyError",
    "Pattern",
    "Predicate",
    "SpyDouble",
    "StandInConfig",
    "StandInError",
    "StubDouble",
    "UnknownMethodError",
    "Wildcard",
    "anything",
    "as_matcher",
    "build_double",
    "call_count",
    "calls",
    "coerce_bool",
    "default_config",
    "load_config",
    "matches",
    "mock",
    "protocol",
    "proxied",
    "received",
    "spy",
    "stub",
]
