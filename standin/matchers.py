"""Argument matchers used by call queries.

A matcher is one of a closed set of variants. Raw values passed to
:func:`matches` are resolved into a variant by :func:`as_matcher`:

=====================  ===============  ======================================
Matcher value          Variant          Matches when
=====================  ===============  ======================================
``anything``           ``Wildcard``     always
compiled ``re``        ``Pattern``      ``str(value)`` contains a match
``list`` / ``tuple``   ``Composite``    same length and every position matches
non-class callable     ``Predicate``    ``matcher(value)`` is truthy
anything else          ``Equals``       ``matcher == value``
=====================  ===============  ======================================

Examples
--------
>>> matches(re.compile("ab"), "xaby")
True
>>> matches([anything, 5], (99, 5))
True
>>> matches(42, "42")
False
"""

from __future__ import annotations

import collections.abc as cabc
import dataclasses as dc
import re
import typing as typ

__all__ = [
    "Composite",
    "Equals",
    "Matcher",
    "Pattern",
    "Predicate",
    "Wildcard",
    "anything",
    "as_matcher",
    "matches",
]


@dc.dataclass(frozen=True, slots=True)
class Equals:
    """Match values equal to ``expected``."""

    expected: object

    def matches(self, value: object) -> bool:
        """Return ``True`` when ``value == expected``."""
        return bool(self.expected == value)


@dc.dataclass(frozen=True, slots=True)
class Pattern:
    """Match values whose text contains a match for ``regex``."""

    regex: re.Pattern[typ.Any]

    def matches(self, value: object) -> bool:
        """Search ``str(value)`` for ``regex``.

        Byte patterns only ever match ``bytes`` values.
        """
        if isinstance(self.regex.pattern, bytes):
            if not isinstance(value, (bytes, bytearray)):
                return False
            return self.regex.search(value) is not None
        return self.regex.search(str(value)) is not None


@dc.dataclass(frozen=True, slots=True)
class Predicate:
    """Match values for which ``func`` returns a truthy result."""

    func: cabc.Callable[[typ.Any], object]

    def matches(self, value: object) -> bool:
        """Return the truthiness of ``func(value)``."""
        return bool(self.func(value))


@dc.dataclass(frozen=True, slots=True)
class Composite:
    """Match a positional sequence element by element."""

    items: tuple[Matcher, ...]

    def matches(self, value: object) -> bool:
        """Require an equal-length list or tuple whose items all match."""
        if not isinstance(value, (list, tuple)) or len(value) != len(self.items):
            return False
        return all(
            item.matches(candidate)
            for item, candidate in zip(self.items, value, strict=True)
        )


@dc.dataclass(frozen=True, slots=True)
class Wildcard:
    """Match any value of any type."""

    def matches(self, value: object) -> bool:  # noqa: ARG002
        """Return ``True``."""
        return True

    def __repr__(self) -> str:
        """Render as the public singleton name."""
        return "anything"


Matcher = Equals | Pattern | Predicate | Composite | Wildcard

anything = Wildcard()

_VARIANTS = (Equals, Pattern, Predicate, Composite, Wildcard)


def as_matcher(value: object) -> Matcher:
    """Resolve ``value`` into one of the matcher variants."""
    if isinstance(value, _VARIANTS):
        return typ.cast("Matcher", value)
    if isinstance(value, re.Pattern):
        return Pattern(value)
    if isinstance(value, (list, tuple)):
        return Composite(tuple(as_matcher(item) for item in value))
    if callable(value) and not isinstance(value, type):
        return Predicate(value)
    return Equals(value)


def matches(matcher: object, value: object) -> bool:
    """Return ``True`` when ``value`` satisfies ``matcher``.

    Mismatched shapes never raise; they simply do not match.
    """
    return as_matcher(matcher).matches(value)
