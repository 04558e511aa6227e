"""
Configuration loading for gyst.

Settings live in a YAML file validated against ``AppConfigSchema``. The
first file found is used, in this order: an explicitly given path,
``./.gyst.yml``, ``$XDG_CONFIG_HOME/gyst/config.yml`` and finally
``~/.gyst/config.yml``. Without any file the schema defaults apply.

"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError
from xdg.BaseDirectory import xdg_config_home

from gyst.config.config_schema import AppConfigSchema

logger = logging.getLogger(__name__)

LOCAL_CONFIG_NAME = ".gyst.yml"
API_KEY_ENV_VAR = "ANTHROPIC_API_KEY"


class ConfigError(Exception):
	"""Exception raised for configuration errors."""


class ConfigParsingError(ConfigError):
	"""Exception raised when configuration file cannot be parsed."""


def xdg_config_file() -> Path:
	"""Return the per-user configuration file location."""
	return Path(xdg_config_home) / "gyst" / "config.yml"


def default_config_candidates() -> list[Path]:
	"""Configuration files searched when none is given, most specific first."""
	return [Path(LOCAL_CONFIG_NAME), xdg_config_file(), Path.home() / ".gyst" / "config.yml"]


def read_config_file(path: Path) -> dict[str, Any]:
	"""
	Read a YAML configuration file into a mapping.

	An empty document is an empty mapping.

	Raises:
		ConfigParsingError: If the file cannot be read, is not YAML, or is not a mapping
	"""
	try:
		with path.open(encoding="utf-8") as f:
			content = yaml.safe_load(f)
	except yaml.YAMLError as e:
		msg = f"Configuration file {path} does not contain a valid YAML dictionary."
		logger.exception(msg)
		raise ConfigParsingError(msg) from e
	except OSError as e:
		msg = f"Error accessing configuration file {path}: {e}"
		logger.exception(msg)
		raise ConfigParsingError(msg) from e

	if content is None:
		return {}
	if not isinstance(content, dict):
		msg = f"Configuration file {path} does not contain a valid YAML dictionary."
		logger.error(msg)
		raise ConfigParsingError(msg)
	return content


class ConfigLoader:
	"""Loads, updates and saves the gyst configuration."""

	def __init__(self, config_file: Path | None = None) -> None:
		"""
		Initialize the loader and read the configuration.

		Args:
			config_file: Use this file instead of searching the default locations

		Raises:
			ConfigParsingError: If the chosen file is invalid
		"""
		self._config_file = self._find_config_file(config_file)
		self._app_config = self._load()

	@staticmethod
	def _find_config_file(config_file: Path | None) -> Path | None:
		if config_file:
			path = config_file.expanduser().resolve()
			if not path.exists():
				logger.warning("Specified config file not found: %s", path)
			return path
		return next((candidate for candidate in default_config_candidates() if candidate.exists()), None)

	def _load(self) -> AppConfigSchema:
		data: dict[str, Any] = {}
		if self._config_file is not None and self._config_file.exists():
			data = read_config_file(self._config_file)
			logger.info("Loaded configuration from %s", self._config_file)
		else:
			logger.info("No configuration file found. Using default configuration.")

		try:
			return AppConfigSchema.model_validate(data)
		except ValidationError as e:
			msg = f"Error parsing configuration into schema: {e}"
			logger.exception(msg)
			raise ConfigParsingError(msg) from e

	@property
	def config_file(self) -> Path | None:
		"""The file configuration was read from, if any."""
		return self._config_file

	@property
	def get(self) -> AppConfigSchema:
		"""The current configuration."""
		return self._app_config

	@property
	def api_key(self) -> str:
		"""API key from the configuration, falling back to the environment."""
		return self._app_config.llm.api_key or os.environ.get(API_KEY_ENV_VAR, "")

	def save(self, path: Path | None = None) -> Path:
		"""
		Write the current configuration as YAML.

		Args:
			path: Target file; defaults to the file the configuration was
			    loaded from, or the XDG location when there was none

		Returns:
			Path: The file written

		Raises:
			ConfigError: If the file cannot be written
		"""
		target = path or self._config_file or xdg_config_file()
		try:
			target.parent.mkdir(parents=True, exist_ok=True)
			with target.open("w", encoding="utf-8") as f:
				yaml.safe_dump(self._app_config.model_dump(), f, sort_keys=False)
		except OSError as e:
			msg = f"Failed to write configuration to {target}: {e}"
			logger.exception(msg)
			raise ConfigError(msg) from e

		self._config_file = target
		logger.info("Saved configuration to %s", target)
		return target

	def set_api_key(self, api_key: str) -> None:
		"""Store an API key in the in-memory configuration."""
		self._app_config.llm.api_key = api_key.strip()

	def set_use_server(self, use_server: bool) -> None:
		"""Choose between the proxy server and direct provider access."""
		self._app_config.server.use_server = use_server
