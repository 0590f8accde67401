"""Tests for :mod:`standin.config`."""

from __future__ import annotations

import logging
import textwrap
import typing as typ

import pytest

from standin import (
    ConfigError,
    InterfaceDescriptor,
    StandInConfig,
    coerce_bool,
    default_config,
    load_config,
    stub,
)

if typ.TYPE_CHECKING:
    from pathlib import Path


class TestCoerceBool:
    """Tests for the coerce_bool function."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (True, True),
            (False, False),
            ("true", True),
            ("TRUE", True),
            ("1", True),
            ("yes", True),
            ("on", True),
            (" On ", True),
            ("false", False),
            ("0", False),
            ("no", False),
            ("OFF", False),
        ],
    )
    def test_accepts_valid_values(
        self,
        value: bool | str,  # noqa: FBT001
        expected: bool,  # noqa: FBT001
    ) -> None:
        """Valid boolean-like values are coerced correctly."""
        assert coerce_bool(value, default=not expected) is expected

    @pytest.mark.parametrize("value", [None, "", "   "], ids=["none", "empty", "blank"])
    def test_returns_default_for_missing_values(self, value: str | None) -> None:
        """None and blank strings return the default."""
        assert coerce_bool(value, default=True) is True
        assert coerce_bool(value, default=False) is False

    @pytest.mark.parametrize("value", ["maybe", 42, 1.0], ids=["word", "int", "float"])
    def test_raises_for_invalid_values(self, value: object) -> None:
        """Uninterpretable values raise ConfigError."""
        with pytest.raises(ConfigError, match="Cannot interpret"):
            coerce_bool(value, default=False)


class TestStandInConfig:
    """Tests for the configuration dataclass."""

    def test_defaults(self) -> None:
        """Newest-first ordering and strict impl maps are the defaults."""
        config = StandInConfig()
        assert config.call_order == "newest-first"
        assert config.strict is True

    def test_rejects_unknown_call_order(self) -> None:
        """Only the two documented orders are accepted."""
        with pytest.raises(ConfigError, match="Unknown call order 'random'"):
            StandInConfig(call_order="random")  # type: ignore[arg-type]


class TestLoadConfig:
    """Tests for :func:`load_config`."""

    def _write(self, tmp_path: Path, body: str) -> Path:
        path = tmp_path / "pyproject.toml"
        path.write_text(textwrap.dedent(body), encoding="utf-8")
        return path

    def test_missing_file_yields_defaults(self, tmp_path: Path) -> None:
        """An absent pyproject contributes nothing."""
        config = load_config(tmp_path / "pyproject.toml", environ={})
        assert config == StandInConfig()

    def test_reads_tool_table_with_dashed_keys(self, tmp_path: Path) -> None:
        """Dashed keys in ``[tool.standin]`` map onto fields."""
        path = self._write(
            tmp_path,
            """
            [tool.standin]
            call-order = "oldest-first"
            strict = false
            """,
        )
        config = load_config(path, environ={})
        assert config == StandInConfig(call_order="oldest-first", strict=False)

    def test_environment_overrides_file(self, tmp_path: Path) -> None:
        """``STANDIN_*`` variables win over the pyproject table."""
        path = self._write(
            tmp_path,
            """
            [tool.standin]
            call_order = "oldest-first"
            """,
        )
        config = load_config(
            path,
            environ={"STANDIN_CALL_ORDER": " Newest-First ", "STANDIN_STRICT": "no"},
        )
        assert config == StandInConfig(call_order="newest-first", strict=False)

    def test_ignores_unrelated_environment(self) -> None:
        """Only ``STANDIN_`` prefixed variables are consulted."""
        config = load_config(environ={"CALL_ORDER": "oldest-first", "STRICT": "0"})
        assert config == StandInConfig()

    @pytest.mark.parametrize(
        ("body", "message"),
        [
            ('[tool.standin]\ncolour = "blue"\n', "Unknown standin setting"),
            ("[tool.standin]\ncall-order = 3\n", "must be a string"),
            ('[tool.standin]\ncall-order = "sideways"\n', "Unknown call order"),
            ('[tool.standin]\nstrict = "perhaps"\n', "Cannot interpret"),
            ('[tool]\nstandin = "on"\n', "must be a table"),
            ("[tool.standin\n", "Invalid TOML"),
        ],
        ids=["unknown-key", "order-type", "order-value", "strict", "table", "toml"],
    )
    def test_rejects_invalid_files(
        self, tmp_path: Path, body: str, message: str
    ) -> None:
        """Malformed settings raise ConfigError naming the problem."""
        path = self._write(tmp_path, body)
        with pytest.raises(ConfigError, match=message):
            load_config(path, environ={})

    def test_skips_unrelated_prefixed_variables(
        self, caplog: pytest.LogCaptureFixture
    ) -> None:
        """``STANDIN_*`` variables that name no setting are skipped and logged."""
        with caplog.at_level(logging.DEBUG, logger="standin.config"):
            config = load_config(
                environ={"STANDIN_HOME": "/opt/standin", "STANDIN_STRICT": "off"}
            )
        assert config == StandInConfig(strict=False)
        assert "Skipping STANDIN_HOME" in caplog.text

    def test_unknown_table_keys_are_still_rejected(self, tmp_path: Path) -> None:
        """Only the environment is lenient; the pyproject table stays strict."""
        path = self._write(tmp_path, '[tool.standin]\nhome = "/opt"\n')
        with pytest.raises(ConfigError, match="Unknown standin setting"):
            load_config(path, environ={"STANDIN_HOME": "/opt"})


def test_builders_ignore_unrelated_environment(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    """A stray ``STANDIN_*`` variable does not stop doubles being built."""
    monkeypatch.setenv("STANDIN_HOME", "/opt/standin")
    greeter = InterfaceDescriptor.of("Greeter", greet=["name"])
    double = stub(greeter, {"greet": "hi"})
    assert double.greet("ada") == "hi"  # type: ignore[attr-defined]


def test_default_config_reads_working_directory(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    """The process-wide config is loaded from ``./pyproject.toml`` once."""
    (tmp_path / "pyproject.toml").write_text(
        '[tool.standin]\ncall-order = "oldest-first"\n', encoding="utf-8"
    )
    monkeypatch.chdir(tmp_path)
    first = default_config()
    assert first.call_order == "oldest-first"
    monkeypatch.setenv("STANDIN_CALL_ORDER", "newest-first")
    assert default_config() is first
