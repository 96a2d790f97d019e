"""Engine configuration - Config loading and management."""

from .loader import (
    ConfigLoader,
    deep_merge,
    get_config_loader,
    load_config,
    resolve_env_vars,
)
from .models import (
    CompileConfig,
    EngineConfig,
    LocatorConfig,
    LoggingComponentsConfig,
    LoggingConfig,
)

__all__ = [
    # Config models
    "EngineConfig",
    "CompileConfig",
    "LoggingConfig",
    "LoggingComponentsConfig",
    "LocatorConfig",
    # Loader
    "ConfigLoader",
    "get_config_loader",
    "load_config",
    # Utilities
    "resolve_env_vars",
    "deep_merge",
]
