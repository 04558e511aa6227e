"""Console helpers shared by the gyst commands."""

from __future__ import annotations

import contextlib
import logging
import os
from typing import TYPE_CHECKING

import typer

from gyst.utils.log_setup import console, display_error_summary, display_warning_summary

if TYPE_CHECKING:
	from collections.abc import Iterator

logger = logging.getLogger(__name__)

SIGINT_EXIT_CODE = 130


def _spinner_enabled() -> bool:
	"""Spinners are suppressed under pytest and on CI."""
	return not (os.environ.get("PYTEST_CURRENT_TEST") or os.environ.get("CI"))


@contextlib.contextmanager
def progress_indicator(message: str) -> Iterator[None]:
	"""
	Show a spinner with ``message`` while the block runs.

	Args:
	    message: Text shown next to the spinner

	Yields:
	    None
	"""
	if not _spinner_enabled():
		yield
		return
	with console.status(message):
		yield


def show_error(message: str, exception: Exception | None = None) -> None:
	"""Show an error panel, appending the exception text when there is one."""
	if exception is not None:
		logger.debug("Command failed", exc_info=exception)
		if str(exception) != message:
			message = f"{message}\n\nDetails: {exception}"
	display_error_summary(message)


def show_warning(message: str) -> None:
	"""Show a warning panel."""
	display_warning_summary(message)


def exit_with_error(message: str, exit_code: int = 1, exception: Exception | None = None) -> None:
	"""
	Show an error panel and stop the command.

	Args:
	    message: What went wrong
	    exit_code: Process exit status
	    exception: The underlying error, if any

	Raises:
	    typer.Exit: Always
	"""
	show_error(message, exception)
	raise typer.Exit(exit_code) from exception


def handle_keyboard_interrupt() -> None:
	"""Report a Ctrl-C and exit with the SIGINT status."""
	console.print("\n[yellow]Operation cancelled by user.[/yellow]")
	raise typer.Exit(SIGINT_EXIT_CODE)
