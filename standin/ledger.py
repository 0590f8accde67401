"""Thread-safe record of the calls received by a double."""

from __future__ import annotations

import logging
import threading
import types
import typing as typ

from .config import CallOrder

if typ.TYPE_CHECKING:
    import collections.abc as cabc

__all__ = ["CallLedger", "LedgerSnapshot"]

logger = logging.getLogger(__name__)

LedgerSnapshot = types.MappingProxyType[str, tuple[tuple[object, ...], ...]]


class CallLedger:
    """Append-only mapping of method name to recorded argument tuples.

    Calls are appended to per-method lists under a lock. :meth:`read` and
    :meth:`calls_of` copy those lists into tuples while holding the same
    lock, so every value handed out is an immutable, point-in-time
    snapshot that later records never touch. The full snapshot is cached
    until the next :meth:`record`.

    With the default ``"newest-first"`` order the most recent call for a
    method sits at index 0; ``"oldest-first"`` keeps chronological order.
    """

    __slots__ = ("_calls", "_lock", "_order", "_owner", "_snapshot", "_total")

    def __init__(
        self, order: CallOrder = "newest-first", *, owner: str = ""
    ) -> None:
        self._order: CallOrder = order
        self._owner = owner
        self._lock = threading.Lock()
        self._calls: dict[str, list[tuple[object, ...]]] = {}
        self._total = 0
        self._snapshot: LedgerSnapshot | None = types.MappingProxyType({})

    @property
    def order(self) -> CallOrder:
        """Ordering policy of the per-method call tuples."""
        return self._order

    def record(self, method: str, args: cabc.Iterable[object]) -> None:
        """Record one invocation of ``method`` with positional ``args``."""
        entry = tuple(args)
        with self._lock:
            self._calls.setdefault(method, []).append(entry)
            self._total += 1
            self._snapshot = None
        logger.debug("Recorded %s%r on %s", method, entry, self._owner or "ledger")

    def _ordered(
        self, entries: list[tuple[object, ...]]
    ) -> tuple[tuple[object, ...], ...]:
        if self._order == "newest-first":
            return tuple(reversed(entries))
        return tuple(entries)

    def read(self) -> LedgerSnapshot:
        """Return an immutable snapshot of every recorded call."""
        with self._lock:
            if self._snapshot is None:
                self._snapshot = types.MappingProxyType(
                    {
                        method: self._ordered(entries)
                        for method, entries in self._calls.items()
                    }
                )
            return self._snapshot

    def calls_of(self, method: str) -> tuple[tuple[object, ...], ...]:
        """Return the recorded argument tuples for ``method``."""
        with self._lock:
            return self._ordered(self._calls.get(method, []))

    def __len__(self) -> int:
        """Return the total number of recorded calls across methods."""
        return self._total

    def __repr__(self) -> str:
        """Summarise call counts per method."""
        with self._lock:
            counts = {method: len(entries) for method, entries in self._calls.items()}
        return f"CallLedger(order={self._order!r}, calls={counts})"
