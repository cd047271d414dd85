"""Machine configuration loading and validation."""

from wire_bender.configs.loader import (
    DEFAULT_CONFIG_PATH,
    BenderConfig,
    ConfigError,
    load_config,
    validate_config,
)

__all__ = [
    "DEFAULT_CONFIG_PATH",
    "BenderConfig",
    "ConfigError",
    "load_config",
    "validate_config",
]
