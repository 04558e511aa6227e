"""Command-line interface package for gyst."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Annotated

import typer
from dotenv import load_dotenv

from gyst import __version__
from gyst.utils.log_setup import default_log_file, setup_logging

from .branches_cmd import register_command as register_branches_command
from .commit_cmd import register_command as register_commit_command
from .config_cmd import register_command as register_config_command
from .diff_cmd import register_command as register_diff_command
from .explain_cmd import register_command as register_explain_command
from .serve_cmd import register_command as register_serve_command

logger = logging.getLogger(__name__)


def load_env_files() -> None:
	"""Load environment variables from .env.local, falling back to .env."""
	for candidate in (Path(".env.local"), Path(".env")):
		if candidate.exists():
			load_dotenv(dotenv_path=candidate)
			logger.debug("Loaded environment variables from %s", candidate)
			return


app = typer.Typer(
	help=f"gyst - AI-powered git commit messages and branch health\n\nVersion: {__version__}",
	no_args_is_help=True,
	context_settings={"help_option_names": ["-h", "--help"]},
)

# --- Global Options Callback ---


def _version_callback(value: bool) -> None:
	"""Callback for --version option."""
	if value:
		typer.echo(f"gyst version: {__version__}")
		raise typer.Exit


VerboseOpt = Annotated[bool, typer.Option("--verbose", "-v", help="Show debug logging on the console.")]

SaveLogOpt = Annotated[bool, typer.Option("--save-log", help="Also write a debug log to logs/gyst_<timestamp>.log.")]

VersionOpt = Annotated[
	bool | None,
	typer.Option("--version", help="Show version and exit.", callback=_version_callback, is_eager=True),
]


@app.callback(invoke_without_command=True)
def global_options(
	is_verbose: VerboseOpt = False,
	save_log: SaveLogOpt = False,
	_version: VersionOpt = None,
) -> None:
	"""Set up logging and load .env files before any command runs."""
	setup_logging(is_verbose=is_verbose, log_file_path=default_log_file() if save_log else None)
	load_env_files()


# --- Register commands ---

register_commit_command(app)
register_diff_command(app)
register_explain_command(app)
register_config_command(app)
register_branches_command(app)
register_serve_command(app)


# --- Main Entry Point ---
def main() -> int:
	"""Run the CLI application."""
	return app()


if __name__ == "__main__":
	sys.exit(main())
