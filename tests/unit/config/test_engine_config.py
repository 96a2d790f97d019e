"""Unit tests for engine configuration loading."""

import pytest
import yaml

from jsont_core.config import (
    CompileConfig,
    ConfigLoader,
    EngineConfig,
    deep_merge,
    resolve_env_vars,
)
from jsont_core.config.loader import CONFIG_PATH_ENV
from jsont_core.errors import ConfigurationError
from jsont_core.types import LogFormat, LogLevel


@pytest.fixture
def loader():
    """Create ConfigLoader instance."""
    return ConfigLoader()


@pytest.fixture
def write_config(tmp_path):
    """Write a YAML config file and return its path."""

    def _write(data, name="jsont-config.yaml"):
        path = tmp_path / name
        path.write_text(yaml.safe_dump(data), encoding="utf-8")
        return path

    return _write


class TestResolveEnvVars:
    """Tests for ${VAR} interpolation."""

    def test_set_variable(self, monkeypatch):
        """Set variables are substituted."""
        monkeypatch.setenv("JSONT_TEST_DIR", "/srv/templates")

        assert resolve_env_vars("${JSONT_TEST_DIR}/mail") == "/srv/templates/mail"

    def test_default(self, monkeypatch):
        """${VAR:-default} falls back when unset."""
        monkeypatch.delenv("JSONT_TEST_UNSET", raising=False)

        assert resolve_env_vars("${JSONT_TEST_UNSET:-html}") == "html"

    def test_required_missing(self, monkeypatch):
        """${VAR} must be set."""
        monkeypatch.delenv("JSONT_TEST_UNSET", raising=False)

        with pytest.raises(ConfigurationError) as exc_info:
            resolve_env_vars("${JSONT_TEST_UNSET}")
        assert "JSONT_TEST_UNSET" in exc_info.value.detail

    def test_required_with_message(self, monkeypatch):
        """${VAR:?message} uses the given message."""
        monkeypatch.delenv("JSONT_TEST_UNSET", raising=False)

        with pytest.raises(ConfigurationError) as exc_info:
            resolve_env_vars("${JSONT_TEST_UNSET:?set the template root}")
        assert exc_info.value.detail == "set the template root"


class TestDeepMerge:
    """Tests for deep_merge()."""

    def test_nested(self):
        """Nested mappings merge; other values are replaced."""
        base = {"compile": {"meta": "{}", "format_char": "|"}, "locator": {"paths": ["a"]}}
        override = {"compile": {"meta": "[]"}, "locator": {"paths": ["b"]}}

        assert deep_merge(base, override) == {
            "compile": {"meta": "[]", "format_char": "|"},
            "locator": {"paths": ["b"]},
        }
        assert base["compile"]["meta"] == "{}"


class TestConfigLoader:
    """Tests for ConfigLoader."""

    def test_defaults(self, loader):
        """No data gives the default configuration."""
        config = loader.load_defaults()

        assert config == EngineConfig()
        assert config.compile == CompileConfig(meta="{}", format_char="|", default_formatter="str")
        assert config.logging.enabled is False

    def test_load_file(self, loader, write_config):
        """All sections are read from YAML."""
        path = write_config(
            {
                "compile": {"meta": "[[]]", "format_char": ":", "default_formatter": "html"},
                "logging": {
                    "enabled": True,
                    "level": "DEBUG",
                    "format": "json",
                    "components": {"locator": False},
                },
                "locator": {"paths": ["templates"], "extension": ".jsont"},
            }
        )

        config = loader.load(path)

        assert config.compile.meta == "[[]]"
        assert config.compile.format_char == ":"
        assert config.compile.default_formatter == "html"
        assert config.logging.level == LogLevel.DEBUG
        assert config.logging.format == LogFormat.JSON
        assert config.logging.components.locator is False
        assert config.logging.components.compile is True
        assert config.locator.paths == ["templates"]
        assert config.locator.extension == ".jsont"
        assert loader.config_path == path
        assert loader.get() is config

    def test_default_formatter_none(self, loader):
        """'none' disables the default formatter."""
        config = loader.load_from_dict({"compile": {"default_formatter": "none"}})

        assert config.compile.default_formatter is None

    def test_env_vars_in_file(self, loader, write_config, monkeypatch):
        """Strings in the file are interpolated."""
        monkeypatch.setenv("JSONT_TEST_ROOT", "/srv")
        path = write_config({"locator": {"paths": ["${JSONT_TEST_ROOT}/templates"]}})

        assert loader.load(path).locator.paths == ["/srv/templates"]

    def test_path_from_environment(self, loader, write_config, monkeypatch):
        """JSONT_CONFIG_PATH names the file when no path is given."""
        path = write_config({"compile": {"meta": "<>"}}, name="custom.yaml")
        monkeypatch.setenv(CONFIG_PATH_ENV, str(path))

        assert loader.load().compile.meta == "<>"

    def test_missing_file_uses_defaults(self, loader, tmp_path):
        """A missing file falls back to defaults."""
        assert loader.load(tmp_path / "absent.yaml") == EngineConfig()

    def test_missing_file_strict(self, loader, tmp_path):
        """use_defaults=False makes a missing file an error."""
        with pytest.raises(ConfigurationError):
            loader.load(tmp_path / "absent.yaml", use_defaults=False)

    def test_invalid_yaml(self, loader, tmp_path):
        """Broken YAML is reported."""
        path = tmp_path / "broken.yaml"
        path.write_text("compile: [unclosed", encoding="utf-8")

        with pytest.raises(ConfigurationError) as exc_info:
            loader.load(path)
        assert "Invalid YAML" in exc_info.value.detail

    def test_not_a_mapping(self, loader, tmp_path):
        """The document must be a mapping."""
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n", encoding="utf-8")

        with pytest.raises(ConfigurationError):
            loader.load(path)

    def test_invalid_values_rejected(self, loader):
        """Validation errors stop loading."""
        with pytest.raises(ConfigurationError) as exc_info:
            loader.load_from_dict({"compile": {"meta": "{{}", "format_char": "%"}})
        assert "meta" in exc_info.value.detail
        assert "format_char" in exc_info.value.detail

    def test_get_before_load(self, loader):
        """get() needs a loaded configuration."""
        with pytest.raises(ConfigurationError):
            loader.get()


class TestValidate:
    """Tests for ConfigLoader.validate()."""

    def test_unknown_keys_warn(self, loader):
        """Unknown keys are warnings, not errors."""
        result = loader.validate({"compile": {"metta": "{}"}, "extra": 1})

        assert result.valid
        assert {w.path for w in result.warnings} == {"compile.metta", "extra"}

    def test_section_must_be_mapping(self, loader):
        """Sections are dictionaries."""
        result = loader.validate({"logging": "on"})

        assert not result.valid
        assert result.errors[0].path == "logging"

    @pytest.mark.parametrize(
        "data,path",
        [
            ({"logging": {"level": "LOUD"}}, "logging.level"),
            ({"logging": {"format": "xml"}}, "logging.format"),
            ({"locator": {"paths": "templates"}}, "locator.paths"),
            ({"compile": {"meta": ""}}, "compile.meta"),
        ],
    )
    def test_bad_values(self, loader, data, path):
        """Each bad value is reported at its path."""
        result = loader.validate(data)

        assert not result.valid
        assert [e.path for e in result.errors] == [path]


class TestOverridesAndReload:
    """Tests for load(overrides=...) and reload()."""

    def test_overrides_merge_over_file(self, loader, write_config):
        """Overrides replace single keys and keep the rest of the file."""
        path = write_config({"compile": {"meta": "[]", "format_char": ":"}})

        config = loader.load(path, overrides={"compile": {"meta": "<>"}})

        assert config.compile.meta == "<>"
        assert config.compile.format_char == ":"

    def test_overrides_without_file(self, loader, tmp_path):
        """Overrides apply on top of the defaults."""
        config = loader.load(tmp_path / "absent.yaml", overrides={"logging": {"enabled": True}})

        assert config.logging.enabled is True
        assert loader.config_path is None

    def test_reload(self, loader, write_config):
        """reload() picks up changes to the file."""
        path = write_config({"compile": {"meta": "[]"}})
        loader.load(path)
        write_config({"compile": {"meta": "<>"}})

        assert loader.reload().compile.meta == "<>"

    def test_reload_without_file(self, loader):
        """Defaults have no file to reload."""
        loader.load_defaults()

        with pytest.raises(ConfigurationError):
            loader.reload()
