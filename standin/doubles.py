r"""Builders for interface-conformant test doubles.

Every double is an instance of a class generated once per double from an
:class:`~standin.descriptor.InterfaceDescriptor`. Each generated method binds
its arguments against the declared signature and hands the positional
argument tuple to a single ``dispatch(name, args)`` callable; the builders
below differ only in the dispatch they install.

Examples
--------
>>> greeter = InterfaceDescriptor.of("Greeter", greet=["name"], close=[])
>>> double = stub(greeter, {"greet": lambda name: f"hi {name}"})
>>> double.greet("ada")
'hi ada'
>>> double.close() is None
True
>>> recorded = mock(greeter, {"greet": "hello"})
>>> recorded.greet(name="ada")
'hello'
>>> recorded.calls()["greet"]
(('ada',),)
"""

from __future__ import annotations

import collections.abc as cabc
import logging
import typing as typ

from ._ids import new_double_id
from .config import StandInConfig, default_config
from .descriptor import InterfaceDescriptor, MethodId, MethodSignature, method_name
from .errors import UnknownMethodError
from .ledger import CallLedger, LedgerSnapshot

__all__ = [
    "Dispatch",
    "Double",
    "SpyDouble",
    "StubDouble",
    "build_double",
    "mock",
    "spy",
    "stub",
]

logger = logging.getLogger(__name__)

Dispatch = cabc.Callable[[str, tuple[object, ...]], object]


class Double:
    """Base class of every generated double.

    Interface methods are added by :func:`build_double` on a generated
    subclass. When an interface declares a method that shares a name with a
    convenience method defined here (``protocol``, ``calls``, ``proxied``),
    the interface method wins; use the functions in :mod:`standin.query`
    instead.
    """

    _kind: typ.ClassVar[str] = "double"

    def __init__(self, descriptor: InterfaceDescriptor, double_id: str) -> None:
        self._descriptor = descriptor
        self._double_id = double_id

    @property
    def double_id(self) -> str:
        """UUIDv7 identifier of this double."""
        return self._double_id

    def protocol(self) -> InterfaceDescriptor:
        """Return the descriptor of the interface this double implements."""
        return self._descriptor

    def __repr__(self) -> str:
        """Render the interface name, kind and identifier."""
        return f"<{self._kind} of {self._descriptor.name} {self._double_id}>"


class StubDouble(Double):
    """Double whose methods answer from an implementation map."""

    _kind: typ.ClassVar[str] = "stub"


class SpyDouble(Double):
    """Double that records every call before forwarding it to a delegate."""

    _kind: typ.ClassVar[str] = "spy"

    _ledger: CallLedger
    _delegate: object

    def calls(self) -> LedgerSnapshot:
        """Return a snapshot mapping method name to recorded argument tuples."""
        return self._ledger.read()

    def proxied(self) -> object:
        """Return the wrapped delegate."""
        return self._delegate


def _make_method(
    interface: str, signature: MethodSignature, dispatch: Dispatch
) -> cabc.Callable[..., object]:
    """Return the generated method for ``signature``."""
    bound_signature = signature.signature()
    name = signature.name

    def method(*args: object, **kwargs: object) -> object:
        bound = bound_signature.bind(*args, **kwargs)
        bound.apply_defaults()
        return dispatch(name, bound.args[1:])

    method.__name__ = name
    method.__qualname__ = f"{interface}.{name}"
    method.__signature__ = bound_signature  # type: ignore[attr-defined]
    return method


def build_double(
    descriptor: InterfaceDescriptor,
    dispatch: Dispatch,
    *,
    base: type[Double] | tuple[type[Double], ...] = Double,
    attrs: cabc.Mapping[str, object] | None = None,
    kind: str | None = None,
    double_id: str | None = None,
) -> Double:
    """Synthesise an object implementing ``descriptor`` via ``dispatch``.

    Parameters
    ----------
    descriptor
        Interface whose methods the double provides.
    dispatch
        Called as ``dispatch(method_name, args)`` for every method call, with
        ``args`` the positional tuple after keyword and default binding.
    base
        Base class or classes of the generated class.
    attrs
        Instance attributes set on the double after construction.
    kind
        Label used in the generated class name, ``repr`` and logs. Defaults
        to the kind of the first base.
    double_id
        Identifier of the double. A fresh UUIDv7 is generated when omitted.

    Returns
    -------
    Double
        Instance of the generated class. Calls with the wrong arity raise
        :class:`TypeError` before ``dispatch`` runs.
    """
    bases = base if isinstance(base, tuple) else (base,)
    label = kind or bases[0]._kind
    namespace: dict[str, object] = {"_kind": label, "__module__": __name__}
    for signature in descriptor:
        namespace[signature.name] = _make_method(descriptor.name, signature, dispatch)
    cls = type(f"{descriptor.name}{label.title()}", bases, namespace)
    identifier = double_id or new_double_id()
    double = typ.cast("Double", cls(descriptor, identifier))
    for attr, value in (attrs or {}).items():
        setattr(double, attr, value)
    logger.debug(
        "Built %s of %s (%s) with %d method(s)",
        label,
        descriptor.name,
        identifier,
        len(descriptor),
    )
    return double


def _resolve_impls(
    descriptor: InterfaceDescriptor,
    impls: cabc.Mapping[MethodId, object],
    config: StandInConfig,
) -> dict[str, object]:
    """Key ``impls`` by method name, rejecting undeclared methods."""
    resolved: dict[str, object] = {}
    for method, behaviour in impls.items():
        name = method_name(method)
        if name not in descriptor.method_names:
            if config.strict:
                msg = f"{descriptor.name} does not declare a method named {name!r}"
                raise UnknownMethodError(msg)
            logger.warning(
                "Ignoring stub behaviour for %r: %s does not declare it",
                name,
                descriptor.name,
            )
            continue
        resolved[name] = behaviour
    return resolved


def _is_invocable(behaviour: object) -> bool:
    """Return ``True`` when ``behaviour`` should be called rather than returned."""
    return callable(behaviour) and not isinstance(behaviour, type)


def stub(
    descriptor: InterfaceDescriptor,
    impls: cabc.Mapping[MethodId, object] | None = None,
    *,
    config: StandInConfig | None = None,
) -> StubDouble:
    """Build a stub answering from ``impls``.

    Parameters
    ----------
    descriptor
        Interface the stub implements.
    impls
        Partial map from method name (or interface function) to behaviour.
        Callables other than classes are invoked with the call's arguments;
        any other value is returned verbatim. Unmapped methods return
        ``None``.
    config
        Overrides :func:`~standin.config.default_config`.

    Returns
    -------
    StubDouble
        The stub.

    Raises
    ------
    UnknownMethodError
        Raised when ``impls`` names a method the interface does not declare
        and ``config.strict`` is set.

    Notes
    -----
    Classes are callable but count as constants here, so
    ``stub(d, {"fetch": list}).fetch()`` returns ``list`` itself rather than
    ``[]``. Write ``{"fetch": lambda: []}`` to build a fresh value per call.
    """
    settings = config or default_config()
    behaviours = _resolve_impls(descriptor, impls or {}, settings)

    def dispatch(name: str, args: tuple[object, ...]) -> object:
        if name not in behaviours:
            return None
        behaviour = behaviours[name]
        if _is_invocable(behaviour):
            return typ.cast("cabc.Callable[..., object]", behaviour)(*args)
        return behaviour

    double = build_double(descriptor, dispatch, base=StubDouble)
    return typ.cast("StubDouble", double)


def spy(
    descriptor: InterfaceDescriptor,
    delegate: object,
    *,
    config: StandInConfig | None = None,
) -> SpyDouble:
    """Wrap ``delegate`` in a double that records every call.

    Each call is recorded in the spy's ledger before it is forwarded, so a
    call that raises is still recorded. Results and exceptions from the
    delegate pass through unchanged.

    Parameters
    ----------
    descriptor
        Interface the spy implements.
    delegate
        Object providing every method the interface declares.
    config
        Overrides :func:`~standin.config.default_config`.

    Returns
    -------
    SpyDouble
        The spy. It is also a :class:`StubDouble` when ``delegate`` is one.

    Raises
    ------
    UnknownMethodError
        Raised when ``delegate`` lacks a declared method.
    """
    settings = config or default_config()
    missing = [
        name
        for name in descriptor.method_names
        if not callable(getattr(delegate, name, None))
    ]
    if missing:
        joined = ", ".join(missing)
        msg = (
            f"{type(delegate).__name__} does not implement {descriptor.name}: {joined}"
        )
        raise UnknownMethodError(msg)

    double_id = new_double_id()
    ledger = CallLedger(settings.call_order, owner=f"{descriptor.name} {double_id}")

    def dispatch(name: str, args: tuple[object, ...]) -> object:
        ledger.record(name, args)
        return getattr(delegate, name)(*args)

    is_mock = isinstance(delegate, StubDouble)
    bases: tuple[type[Double], ...] = (
        (SpyDouble, StubDouble) if is_mock else (SpyDouble,)
    )
    double = build_double(
        descriptor,
        dispatch,
        base=bases,
        attrs={"_ledger": ledger, "_delegate": delegate},
        kind="mock" if is_mock else None,
        double_id=double_id,
    )
    return typ.cast("SpyDouble", double)


def mock(
    descriptor: InterfaceDescriptor,
    impls: cabc.Mapping[MethodId, object] | None = None,
    *,
    config: StandInConfig | None = None,
) -> SpyDouble:
    """Build a stub from ``impls`` and wrap it in a spy.

    The result is both a :class:`StubDouble` and a :class:`SpyDouble`.
    """
    return spy(descriptor, stub(descriptor, impls, config=config), config=config)
