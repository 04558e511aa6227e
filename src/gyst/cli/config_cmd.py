"""Command for viewing and updating the gyst configuration."""

from __future__ import annotations

import logging
from typing import Annotated

import typer

logger = logging.getLogger(__name__)

ApiKeyOpt = Annotated[str | None, typer.Option("--api-key", help="Store the Anthropic API key")]

ShowFlag = Annotated[bool, typer.Option("--show", help="Show the current configuration")]

UseServerOpt = Annotated[
	bool | None,
	typer.Option("--use-server/--no-use-server", help="Generate through the gyst server or call the provider directly"),
]


def register_command(app: typer.Typer) -> None:
	"""Register the config command with the CLI app."""

	@app.command(name="config")
	def config_command(
		api_key: ApiKeyOpt = None,
		show: ShowFlag = False,
		use_server: UseServerOpt = None,
	) -> None:
		"""Configure gyst settings."""
		_config_command_impl(api_key=api_key, show=show, use_server=use_server)


def mask_key(api_key: str) -> str:
	"""Hide all but the last four characters of a key."""
	if not api_key:
		return "(not set)"
	return "*" * max(len(api_key) - 4, 4) + api_key[-4:]


def _config_command_impl(api_key: str | None, show: bool, use_server: bool | None) -> None:
	"""Implementation of the config command."""
	from rich.table import Table

	from gyst.config import ConfigError, ConfigLoader
	from gyst.utils.cli_utils import console, exit_with_error, show_warning

	try:
		loader = ConfigLoader()
		changed = False
		if api_key is not None:
			loader.set_api_key(api_key)
			changed = True
		if use_server is not None:
			loader.set_use_server(use_server)
			changed = True
		if changed:
			path = loader.save()
			console.print(f"[green]✓[/green] Configuration saved to {path}")
	except ConfigError as e:
		exit_with_error(str(e), exception=e)
		return

	config = loader.get
	if not config.server.use_server and not loader.api_key:
		show_warning("Direct generation is enabled but no API key is set. Use 'gyst config --api-key <key>'.")

	if not show and changed:
		return

	table = Table(title="gyst configuration", show_header=True)
	table.add_column("Setting", style="cyan")
	table.add_column("Value")
	table.add_row("Config file", str(loader.config_file or "(defaults)"))
	table.add_row("API key", mask_key(loader.api_key))
	table.add_row("Provider", config.llm.provider)
	table.add_row("Model", config.llm.model)
	table.add_row("Max diff size", str(config.git.max_diff_size))
	table.add_row("Use server", str(config.server.use_server))
	table.add_row("Server URL", config.server.url)
	console.print(table)
