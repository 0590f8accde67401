"""Interface descriptors consumed by the double builders.

A descriptor names an interface and lists the methods a double must provide.
Builders never look interfaces up by themselves; callers construct a
descriptor once (typically at module import) and pass it in.

Examples
--------
Declaring the interface by hand::

    >>> greeter = InterfaceDescriptor.of("Greeter", greet=["name"], close=[])
    >>> greeter.method_names
    ('greet', 'close')

or deriving it from an explicitly named :class:`typing.Protocol`::

    >>> class Greeter(typ.Protocol):
    ...     def greet(self, name: str) -> str: ...
    >>> InterfaceDescriptor.from_protocol(Greeter).method("greet").params
    ('name',)
"""

from __future__ import annotations

import collections.abc as cabc
import dataclasses as dc
import inspect
import keyword
import types
import typing as typ

from .errors import DescriptorError, UnknownMethodError

__all__ = ["InterfaceDescriptor", "MethodId", "MethodSignature", "method_name"]

MethodId = str | cabc.Callable[..., object]

_SUPPORTED_KINDS = frozenset(
    {
        inspect.Parameter.POSITIONAL_ONLY,
        inspect.Parameter.POSITIONAL_OR_KEYWORD,
    }
)


def method_name(method: MethodId) -> str:
    """Return the method name behind a method identifier.

    Identifiers are either plain names or function objects such as
    ``Greeter.greet`` taken from the interface class.
    """
    if isinstance(method, str):
        return method
    name = getattr(method, "__name__", None)
    if not isinstance(name, str):
        msg = f"Cannot derive a method name from {method!r}"
        raise UnknownMethodError(msg)
    return name


@dc.dataclass(frozen=True, slots=True)
class MethodSignature:
    """Name and formal parameters of one interface method.

    ``params`` excludes the receiver. ``defaults`` maps trailing parameter
    names to the values bound when a caller omits them.
    """

    name: str
    params: tuple[str, ...] = ()
    defaults: cabc.Mapping[str, object] = dc.field(default_factory=dict, hash=False)

    def __post_init__(self) -> None:
        """Freeze the parameter containers and validate their shape."""
        object.__setattr__(self, "params", tuple(self.params))
        frozen_defaults = types.MappingProxyType(dict(self.defaults))
        object.__setattr__(self, "defaults", frozen_defaults)
        _validate_identifier(self.name, "method")
        if self.name.startswith("_"):
            msg = f"Interface method names must be public, got {self.name!r}"
            raise DescriptorError(msg)
        for param in self.params:
            _validate_identifier(param, f"parameter of {self.name}()")
            if keyword.iskeyword(param):
                msg = f"{self.name}() parameter {param!r} is a Python keyword"
                raise DescriptorError(msg)
        if "self" in self.params:
            msg = f"{self.name}() may not declare 'self'; it names the receiver"
            raise DescriptorError(msg)
        if len(set(self.params)) != len(self.params):
            msg = f"Duplicate parameter names in {self.name}{self.params}"
            raise DescriptorError(msg)
        unknown = sorted(set(self.defaults) - set(self.params))
        if unknown:
            msg = f"Defaults for undeclared parameter(s) of {self.name}(): {unknown}"
            raise DescriptorError(msg)
        seen_default = False
        for param in self.params:
            if param in self.defaults:
                seen_default = True
            elif seen_default:
                msg = (
                    f"Parameter {param!r} of {self.name}() follows a parameter "
                    "with a default"
                )
                raise DescriptorError(msg)

    @property
    def arity(self) -> int:
        """Number of declared parameters, excluding the receiver."""
        return len(self.params)

    def signature(self) -> inspect.Signature:
        """Return the signature of the generated method, receiver first."""
        receiver = inspect.Parameter("self", inspect.Parameter.POSITIONAL_OR_KEYWORD)
        params = [
            inspect.Parameter(
                name,
                inspect.Parameter.POSITIONAL_OR_KEYWORD,
                default=self.defaults.get(name, inspect.Parameter.empty),
            )
            for name in self.params
        ]
        return inspect.Signature([receiver, *params])


@dc.dataclass(frozen=True, slots=True)
class InterfaceDescriptor:
    """Named, ordered set of method signatures a double conforms to."""

    name: str
    methods: tuple[MethodSignature, ...] = ()

    def __post_init__(self) -> None:
        """Freeze ``methods`` and reject duplicate method names."""
        object.__setattr__(self, "methods", tuple(self.methods))
        _validate_identifier(self.name, "interface")
        names = [method.name for method in self.methods]
        duplicates = sorted({name for name in names if names.count(name) > 1})
        if duplicates:
            msg = f"Interface {self.name} declares {duplicates} more than once"
            raise DescriptorError(msg)

    @classmethod
    def of(
        cls, name: str, /, **methods: cabc.Sequence[str]
    ) -> InterfaceDescriptor:
        """Build a descriptor from ``method=param_names`` keywords."""
        return cls(
            name,
            tuple(
                MethodSignature(method, tuple(params))
                for method, params in methods.items()
            ),
        )

    @classmethod
    def from_protocol(
        cls, protocol: type, name: str | None = None
    ) -> InterfaceDescriptor:
        """Describe the public methods declared on ``protocol``.

        Parameters
        ----------
        protocol
            A :class:`typing.Protocol` or any class whose public functions
            define the interface. Methods inherited from :class:`object` and
            from ``typing.Protocol`` itself are ignored.
        name
            Interface name. Defaults to ``protocol.__name__``.

        Returns
        -------
        InterfaceDescriptor
            Descriptor listing the methods in definition order.

        Raises
        ------
        DescriptorError
            Raised when a method takes ``*args``, ``**kwargs`` or keyword-only
            parameters, which have no fixed positional arity.
        """
        methods: dict[str, MethodSignature] = {}
        for klass in reversed(protocol.__mro__):
            if klass is object or klass is typ.Protocol or klass is typ.Generic:
                continue
            for attr, value in vars(klass).items():
                if attr.startswith("_") or not inspect.isfunction(value):
                    continue
                methods[attr] = _signature_from_function(attr, value)
        return cls(name or protocol.__name__, tuple(methods.values()))

    @property
    def method_names(self) -> tuple[str, ...]:
        """Declared method names in declaration order."""
        return tuple(method.name for method in self.methods)

    def method(self, method: MethodId) -> MethodSignature:
        """Return the signature for ``method`` or raise :class:`UnknownMethodError`."""
        wanted = method_name(method)
        for signature in self.methods:
            if signature.name == wanted:
                return signature
        msg = f"{self.name} does not declare a method named {wanted!r}"
        raise UnknownMethodError(msg)

    def __contains__(self, method: object) -> bool:
        """Return ``True`` when ``method`` names a declared method."""
        if not isinstance(method, str) and not callable(method):
            return False
        try:
            self.method(typ.cast("MethodId", method))
        except UnknownMethodError:
            return False
        return True

    def __iter__(self) -> cabc.Iterator[MethodSignature]:
        """Iterate over the declared signatures."""
        return iter(self.methods)

    def __len__(self) -> int:
        """Return the number of declared methods."""
        return len(self.methods)


def _validate_identifier(value: object, label: str) -> None:
    if not isinstance(value, str) or not value.isidentifier():
        msg = f"Invalid {label} name: {value!r}"
        raise DescriptorError(msg)


def _signature_from_function(
    name: str, func: cabc.Callable[..., object]
) -> MethodSignature:
    """Convert ``func`` (including its receiver) into a :class:`MethodSignature`."""
    parameters = list(inspect.signature(func).parameters.values())[1:]
    params: list[str] = []
    defaults: dict[str, object] = {}
    for parameter in parameters:
        if parameter.kind not in _SUPPORTED_KINDS:
            msg = (
                f"{name}() parameter {parameter.name!r} is "
                f"{parameter.kind.description}; only positional parameters "
                "are supported"
            )
            raise DescriptorError(msg)
        params.append(parameter.name)
        if parameter.default is not inspect.Parameter.empty:
            defaults[parameter.name] = parameter.default
    return MethodSignature(name, tuple(params), defaults)
