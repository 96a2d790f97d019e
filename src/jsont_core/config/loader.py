"""Engine configuration loader."""

import os
import re
from pathlib import Path
from typing import Any

import yaml

from jsont_core.errors import create_error
from jsont_core.types import LogFormat, LogLevel, ValidationIssue, ValidationResult

from .models import (
    CompileConfig,
    EngineConfig,
    LocatorConfig,
    LoggingComponentsConfig,
    LoggingConfig,
)

CONFIG_PATH_ENV = "JSONT_CONFIG_PATH"
DEFAULT_CONFIG_FILE = "jsont-config.yaml"

# ${NAME}, ${NAME:-fallback} or ${NAME:?message}
ENV_REF_PATTERN = re.compile(r"\$\{(?P<name>[^}:]+)(?::(?P<op>[?-])(?P<arg>[^}]*))?\}")


def resolve_env_vars(value: str) -> str:
    """Expand environment variable references in a config string.

    Supports:
    - ${VAR} - must be set
    - ${VAR:-default} - default when unset
    - ${VAR:?message} - must be set; message is the error detail

    Raises:
        ConfigurationError: If a required variable is not set
    """

    def substitute(ref: re.Match[str]) -> str:
        name = ref.group("name")
        if name in os.environ:
            return os.environ[name]
        if ref.group("op") == "-":
            return ref.group("arg")
        message = ref.group("arg") if ref.group("op") == "?" else ""
        raise create_error(
            "CONFIG_INVALID",
            detail=message or f"Required environment variable {name} not set",
        )

    return ENV_REF_PATTERN.sub(substitute, value)


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Merge ``override`` into a copy of ``base``.

    Nested dictionaries are merged key by key; any other value in
    ``override`` replaces the one in ``base``.
    """
    merged = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = deep_merge(current, value)
        else:
            merged[key] = value
    return merged


def _expand_env(data: Any) -> Any:
    if isinstance(data, str):
        return resolve_env_vars(data)
    if isinstance(data, dict):
        return {key: _expand_env(value) for key, value in data.items()}
    if isinstance(data, list):
        return [_expand_env(item) for item in data]
    return data


class ConfigLoader:
    """Load and validate engine configuration."""

    VALID_KEYS = {
        "compile": {"meta", "format_char", "default_formatter"},
        "logging": {"enabled", "level", "format", "components"},
        "locator": {"paths", "extension"},
    }

    def __init__(self) -> None:
        """Initialize config loader."""
        self._config: EngineConfig | None = None
        self._config_path: Path | None = None

    def load(
        self,
        path: str | Path | None = None,
        use_defaults: bool = True,
        overrides: dict[str, Any] | None = None,
    ) -> EngineConfig:
        """Load configuration from a YAML file.

        Resolution order if path not specified:
        1. JSONT_CONFIG_PATH environment variable
        2. ./jsont-config.yaml
        3. If use_defaults=True and no file found, use default configuration

        Args:
            path: Optional path to config file
            use_defaults: If True, use default config when no file found
            overrides: Values merged over the file's, section by section

        Returns:
            Loaded EngineConfig instance

        Raises:
            ConfigurationError: If file not found (when use_defaults=False) or invalid
        """
        config_path = Path(path) if path is not None else self._default_path()

        if config_path.exists():
            data = self._read(config_path)
        elif use_defaults:
            config_path, data = None, {}
        else:
            raise create_error(
                "CONFIG_INVALID",
                detail=f"Configuration file not found: {config_path}",
            )

        if overrides:
            data = deep_merge(data, overrides)
        return self.load_from_dict(data, config_path)

    def load_defaults(self) -> EngineConfig:
        """Load the default configuration without reading any file."""
        return self.load_from_dict({})

    def load_from_dict(self, data: dict[str, Any], config_path: Path | None = None) -> EngineConfig:
        """Build configuration from a dictionary shaped like the YAML file.

        Args:
            data: Configuration dictionary
            config_path: File the data came from, if any

        Returns:
            Loaded EngineConfig instance

        Raises:
            ConfigurationError: If configuration is invalid
        """
        result = self.validate(data)
        if not result.valid:
            problems = "\n".join(f"- {issue.path}: {issue.message}" for issue in result.errors)
            raise create_error("CONFIG_INVALID", detail=f"Invalid configuration:\n{problems}")

        try:
            config = self._build(data)
        except (TypeError, ValueError) as e:
            raise create_error("CONFIG_INVALID", detail=f"Cannot build configuration: {e}") from e

        self._config = config
        self._config_path = config_path
        return config

    def reload(self) -> EngineConfig:
        """Read the current configuration file again.

        Raises:
            ConfigurationError: If the configuration did not come from a file
        """
        if self._config_path is None:
            raise create_error("CONFIG_INVALID", detail="No configuration file to reload")
        return self.load(self._config_path, use_defaults=False)

    def validate(self, data: dict[str, Any]) -> ValidationResult:
        """Check config data without building it.

        Unknown keys are warnings; bad values are errors.

        Args:
            data: Configuration dictionary

        Returns:
            ValidationResult with errors and warnings
        """
        errors: list[ValidationIssue] = []
        warnings: list[ValidationIssue] = []

        for section, values in data.items():
            if section not in self.VALID_KEYS:
                warnings.append(_warning(section, f"Unknown configuration key: {section}"))
                continue
            if not isinstance(values, dict):
                errors.append(
                    ValidationIssue(path=section, message=f"{section} must be a dictionary")
                )
                continue
            for key in values:
                if key not in self.VALID_KEYS[section]:
                    path = f"{section}.{key}"
                    warnings.append(_warning(path, f"Unknown configuration key: {path}"))
            check = getattr(self, f"_check_{section}")
            errors.extend(check(values))

        return ValidationResult(valid=not errors, errors=errors, warnings=warnings)

    def get(self) -> EngineConfig:
        """Get current configuration.

        Raises:
            ConfigurationError: If configuration not loaded
        """
        if self._config is None:
            raise create_error("CONFIG_INVALID", detail="Configuration not loaded")
        return self._config

    @property
    def config_path(self) -> Path | None:
        """Path of the file the current configuration came from."""
        return self._config_path

    def _default_path(self) -> Path:
        env_path = os.environ.get(CONFIG_PATH_ENV)
        return Path(env_path) if env_path else Path.cwd() / DEFAULT_CONFIG_FILE

    def _read(self, path: Path) -> dict[str, Any]:
        try:
            with path.open(encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise create_error("CONFIG_INVALID", detail=f"Invalid YAML in {path}: {e}") from e

        if not isinstance(data, dict):
            raise create_error(
                "CONFIG_INVALID",
                detail=f"Config file must contain a mapping: {path}",
            )
        return _expand_env(data)

    def _check_compile(self, values: dict[str, Any]) -> list[ValidationIssue]:
        issues = []
        meta = values.get("meta")
        if meta is not None and not (isinstance(meta, str) and meta and len(meta) % 2 == 0):
            issues.append(
                ValidationIssue(
                    path="compile.meta",
                    message="meta must be a non-empty string of even length",
                )
            )
        if values.get("format_char", "|") not in (":", "|"):
            issues.append(
                ValidationIssue(
                    path="compile.format_char",
                    message="format_char must be ':' or '|'",
                )
            )
        return issues

    def _check_logging(self, values: dict[str, Any]) -> list[ValidationIssue]:
        issues = []
        level = values.get("level")
        if level is not None and level not in {lvl.value for lvl in LogLevel}:
            issues.append(
                ValidationIssue(path="logging.level", message=f"Unknown log level: {level}")
            )
        fmt = values.get("format")
        if fmt is not None and fmt not in {f.value for f in LogFormat}:
            issues.append(
                ValidationIssue(path="logging.format", message=f"Unknown log format: {fmt}")
            )
        components = values.get("components")
        if components is not None and not isinstance(components, dict):
            issues.append(
                ValidationIssue(
                    path="logging.components",
                    message="components must be a dictionary",
                )
            )
        return issues

    def _check_locator(self, values: dict[str, Any]) -> list[ValidationIssue]:
        paths = values.get("paths")
        if paths is not None and not isinstance(paths, list):
            return [ValidationIssue(path="locator.paths", message="paths must be a list")]
        return []

    def _build(self, data: dict[str, Any]) -> EngineConfig:
        compile_data = data.get("compile", {})
        default_formatter = compile_data.get("default_formatter", CompileConfig.default_formatter)
        if isinstance(default_formatter, str) and default_formatter.lower() == "none":
            default_formatter = None

        logging_data = data.get("logging", {})
        locator_data = data.get("locator", {})

        return EngineConfig(
            compile=CompileConfig(
                meta=compile_data.get("meta", CompileConfig.meta),
                format_char=compile_data.get("format_char", CompileConfig.format_char),
                default_formatter=default_formatter,
            ),
            logging=LoggingConfig(
                enabled=bool(logging_data.get("enabled", False)),
                level=LogLevel(logging_data.get("level", LogLevel.INFO.value)),
                format=LogFormat(logging_data.get("format", LogFormat.COLORED.value)),
                components=LoggingComponentsConfig(**logging_data.get("components", {})),
            ),
            locator=LocatorConfig(
                paths=[str(p) for p in locator_data.get("paths", [])],
                extension=locator_data.get("extension", LocatorConfig.extension),
            ),
        )


def _warning(path: str, message: str) -> ValidationIssue:
    return ValidationIssue(path=path, message=message, severity="warning")


# Convenience singleton
_default_loader: ConfigLoader | None = None


def get_config_loader() -> ConfigLoader:
    """Get default config loader singleton.

    Returns:
        Default ConfigLoader instance
    """
    global _default_loader  # noqa: PLW0603
    if _default_loader is None:
        _default_loader = ConfigLoader()
    return _default_loader


def load_config(path: str | Path | None = None) -> EngineConfig:
    """Load configuration with the default loader.

    Args:
        path: Optional path to config file

    Returns:
        Loaded EngineConfig instance
    """
    return get_config_loader().load(path)
