"""Delegate implementations wrapped by spies in tests."""

from __future__ import annotations

import dataclasses
import typing as typ


@typ.runtime_checkable
class Greeter(typ.Protocol):
    """Interface exercised throughout the test suite."""

    def greet(self, name: str) -> str:
        """Return a greeting for ``name``."""
        ...

    def farewell(self, name: str, punctuation: str = "!") -> str:
        """Return a goodbye for ``name``."""
        ...

    def close(self) -> None:
        """Release resources."""
        ...


class DummyGreeter:
    """Real greeter recording its own calls for cross-checking spies."""

    def __init__(
        self, calls: list[tuple[str, tuple[object, ...]]] | None = None
    ) -> None:
        self._calls = [] if calls is None else calls
        self.closed = False

    @property
    def calls(self) -> list[tuple[str, tuple[object, ...]]]:
        """Return the calls seen by the delegate itself."""
        return self._calls

    def greet(self, name: str) -> str:
        """Record the call and greet ``name``."""
        self._calls.append(("greet", (name,)))
        return f"hello {name}"

    def farewell(self, name: str, punctuation: str = "!") -> str:
        """Record the call and bid ``name`` farewell."""
        self._calls.append(("farewell", (name, punctuation)))
        return f"bye {name}{punctuation}"

    def close(self) -> None:
        """Record the call and mark the greeter closed."""
        self._calls.append(("close", ()))
        self.closed = True


@dataclasses.dataclass(frozen=True)
class GreeterFailure:
    """Describe a greeting that should fail inside a delegate."""

    name: str
    error: Exception
    cause: BaseException | None = None


class RaisingGreeter(DummyGreeter):
    """Greeter variant that raises the configured error for one name."""

    def __init__(self, failure: GreeterFailure) -> None:
        super().__init__()
        self._failure = failure

    def greet(self, name: str) -> str:
        """Raise the configured error when greeting ``failure.name``."""
        if name == self._failure.name:
            self._calls.append(("greet", (name,)))
            if self._failure.cause is not None:
                raise self._failure.error from self._failure.cause
            raise self._failure.error
        return super().greet(name)


__all__ = ["DummyGreeter", "Greeter", "GreeterFailure", "RaisingGreeter"]
