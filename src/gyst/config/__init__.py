"""Configuration for gyst."""

from gyst.config.config_loader import ConfigError, ConfigLoader, ConfigParsingError
from gyst.config.config_schema import AppConfigSchema

__all__ = ["AppConfigSchema", "ConfigError", "ConfigLoader", "ConfigParsingError"]
