"""Configuration for the double builders.

Settings come from three layers, later layers winning:

1. the defaults declared on :class:`StandInConfig`;
2. the ``[tool.standin]`` table of a ``pyproject.toml``;
3. the ``STANDIN_CALL_ORDER`` and ``STANDIN_STRICT`` environment variables.

Examples
--------
A project that prefers chronological call lists declares::

    [tool.standin]
    call-order = "oldest-first"

and a single test run can relax impl-map validation with::

    STANDIN_STRICT=off pytest
"""

from __future__ import annotations

import collections.abc as cabc
import dataclasses as dc
import functools
import logging
import os
import tomllib
import typing as typ
from pathlib import Path

from .errors import ConfigError

__all__ = [
    "CallOrder",
    "StandInConfig",
    "coerce_bool",
    "default_config",
    "load_config",
]

CallOrder = typ.Literal["newest-first", "oldest-first"]

_CALL_ORDERS: frozenset[str] = frozenset(typ.get_args(CallOrder))
_ENV_PREFIX = "STANDIN_"
_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off"}

logger = logging.getLogger(__name__)


@dc.dataclass(frozen=True, slots=True)
class StandInConfig:
    """Behavioural switches shared by every double a builder creates."""

    call_order: CallOrder = "newest-first"
    strict: bool = True

    def __post_init__(self) -> None:
        """Reject call orders outside :data:`CallOrder`."""
        if self.call_order not in _CALL_ORDERS:
            allowed = ", ".join(sorted(_CALL_ORDERS))
            msg = f"Unknown call order {self.call_order!r}; expected one of {allowed}"
            raise ConfigError(msg)


def coerce_bool(value: object, *, default: bool) -> bool:
    """Interpret a ``strict`` setting read from TOML or the environment.

    TOML hands over real booleans while ``STANDIN_STRICT`` always arrives as
    text, so both are accepted. Blank text keeps the value already in force.

    Parameters
    ----------
    value
        A ``bool``, a spelling such as ``"on"`` or ``"0"``, or ``None``.
    default
        Setting to keep when ``value`` is ``None`` or blank.

    Returns
    -------
    bool
        The interpreted setting.

    Raises
    ------
    ConfigError
        Raised for any other type or spelling, including numbers.

    Examples
    --------
    >>> coerce_bool(" Off ", default=True)
    False
    >>> coerce_bool("", default=True)
    True
    """
    if value is None or isinstance(value, bool):
        return default if value is None else value
    text = value.strip().lower() if isinstance(value, str) else None
    if text == "":
        return default
    if text in _TRUTHY:
        return True
    if text in _FALSY:
        return False
    msg = f"Cannot interpret {value!r} as boolean"
    raise ConfigError(msg)


def _normalise_keys(table: cabc.Mapping[str, object]) -> dict[str, object]:
    """Return ``table`` with dashed keys rewritten to underscore keys."""
    return {key.replace("-", "_"): value for key, value in table.items()}


def _load_tool_table(pyproject: Path) -> dict[str, object]:
    """Return the ``[tool.standin]`` table of ``pyproject`` or an empty dict."""
    try:
        with pyproject.open("rb") as handle:
            data = tomllib.load(handle)
    except tomllib.TOMLDecodeError as exc:
        msg = f"Invalid TOML in {pyproject}: {exc}"
        raise ConfigError(msg) from exc
    table = data.get("tool", {}).get("standin", {})
    if not isinstance(table, dict):
        msg = f"[tool.standin] in {pyproject} must be a table"
        raise ConfigError(msg)
    return _normalise_keys(table)


def _env_overrides(environ: cabc.Mapping[str, str]) -> dict[str, object]:
    """Collect ``STANDIN_*`` variables that name a :class:`StandInConfig` field.

    Other tools may share the prefix, so variables matching no field are
    skipped rather than rejected.
    """
    fields = {field.name for field in dc.fields(StandInConfig)}
    overrides: dict[str, object] = {}
    for key, value in environ.items():
        if not key.startswith(_ENV_PREFIX):
            continue
        name = key.removeprefix(_ENV_PREFIX).lower()
        if name in fields:
            overrides[name] = value
        else:
            logger.debug("Skipping %s: not a standin setting", key)
    return overrides


def _apply(
    base: StandInConfig, overrides: dict[str, object], source: str
) -> StandInConfig:
    """Return ``base`` updated from ``overrides`` read from ``source``."""
    fields = {field.name for field in dc.fields(StandInConfig)}
    unknown = sorted(set(overrides) - fields)
    if unknown:
        joined = ", ".join(unknown)
        msg = f"Unknown standin setting(s) {joined} in {source}"
        raise ConfigError(msg)
    changes: dict[str, typ.Any] = {}
    if "call_order" in overrides:
        order = overrides["call_order"]
        if not isinstance(order, str):
            msg = f"call_order in {source} must be a string, got {type(order).__name__}"
            raise ConfigError(msg)
        changes["call_order"] = order.strip().lower()
    if "strict" in overrides:
        changes["strict"] = coerce_bool(overrides["strict"], default=base.strict)
    return dc.replace(base, **changes)


def load_config(
    pyproject: Path | str | None = None,
    *,
    environ: cabc.Mapping[str, str] | None = None,
) -> StandInConfig:
    """Build a :class:`StandInConfig` from ``pyproject`` and the environment.

    Parameters
    ----------
    pyproject
        Path to a ``pyproject.toml``. A missing file contributes nothing.
    environ
        Mapping consulted for ``STANDIN_*`` overrides. Defaults to
        :data:`os.environ`.

    Returns
    -------
    StandInConfig
        The merged configuration.

    Raises
    ------
    ConfigError
        Raised for unknown ``[tool.standin]`` keys, malformed TOML, or
        uninterpretable values.
    """
    config = StandInConfig()
    if pyproject is not None:
        path = Path(pyproject)
        if path.is_file():
            config = _apply(config, _load_tool_table(path), str(path))
    env = os.environ if environ is None else environ
    return _apply(config, _env_overrides(env), "environment")


@functools.cache
def default_config() -> StandInConfig:
    """Return the process-wide configuration, loaded on first use."""
    return load_config(Path.cwd() / "pyproject.toml")
