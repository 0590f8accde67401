"""Call-count queries over spies, mocks and bare ledgers.

Every query reads one fresh ledger snapshot and never mutates it, so it is
safe to query a double that other threads are still calling.

Examples
--------
>>> from standin import anything, mock
>>> greeter = InterfaceDescriptor.of("Greeter", greet=["name"])
>>> double = mock(greeter)
>>> received(double, "greet")
False
>>> _ = double.greet("ada"), double.greet("bob")
>>> call_count(double, "greet", ["ada"])
1
>>> call_count(double, "greet", anything)
2
"""

from __future__ import annotations

from .descriptor import InterfaceDescriptor, MethodId, method_name
from .doubles import Double, SpyDouble
from .errors import NotASpyError
from .ledger import CallLedger, LedgerSnapshot
from .matchers import matches

__all__ = ["call_count", "calls", "protocol", "proxied", "received"]


class _Omitted:
    """Sentinel type distinguishing "no args filter" from ``None``."""

    def __repr__(self) -> str:
        return "<omitted>"


_OMITTED = _Omitted()


def _require_spy(target: object) -> SpyDouble:
    if not isinstance(target, SpyDouble):
        msg = f"{target!r} is not a spy or mock; it records no calls"
        raise NotASpyError(msg)
    return target


def _ledger_of(target: SpyDouble | CallLedger) -> CallLedger:
    if isinstance(target, CallLedger):
        return target
    return _require_spy(target)._ledger


def _resolve_method(target: SpyDouble | CallLedger, method: MethodId) -> str:
    """Return the method name, checked against the double's interface."""
    if isinstance(target, Double):
        return target._descriptor.method(method).name
    return method_name(method)


def calls(spy: SpyDouble) -> LedgerSnapshot:
    """Return the snapshot of calls recorded by ``spy``."""
    return _require_spy(spy)._ledger.read()


def proxied(spy: SpyDouble) -> object:
    """Return the delegate wrapped by ``spy``."""
    return _require_spy(spy)._delegate


def protocol(double: Double) -> InterfaceDescriptor:
    """Return the interface descriptor ``double`` implements."""
    if not isinstance(double, Double):
        msg = f"{double!r} is not a double"
        raise TypeError(msg)
    return double._descriptor


def call_count(
    target: SpyDouble | CallLedger,
    method: MethodId,
    args: object = _OMITTED,
) -> int:
    """Count the recorded calls of ``method`` on ``target``.

    Parameters
    ----------
    target
        A spy, a mock, or a :class:`~standin.ledger.CallLedger`.
    method
        Method name or interface function.
    args
        Optional matcher applied to each recorded argument tuple. Usually a
        list of per-position values and matchers; ``anything`` counts every
        call.

    Returns
    -------
    int
        Number of matching recorded calls.

    Raises
    ------
    NotASpyError
        Raised when ``target`` records no calls.
    UnknownMethodError
        Raised when ``method`` is not declared by the double's interface.
    """
    name = _resolve_method(target, method)
    entries = _ledger_of(target).calls_of(name)
    if args is _OMITTED:
        return len(entries)
    return sum(1 for entry in entries if matches(args, entry))


def received(
    target: SpyDouble | CallLedger,
    method: MethodId,
    args: object = _OMITTED,
) -> bool:
    """Return ``True`` when ``target`` received ``method`` at least once.

    ``args`` filters the calls exactly as in :func:`call_count`.
    """
    return call_count(target, method, args) >= 1

