"""Logging and summary panels for the gyst command line."""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler
from rich.rule import Rule
from rich.text import Text

console = Console()
# Log records go to stderr so command output on stdout stays machine-readable.
log_console = Console(stderr=True)

LOG_DIR = Path("logs")
FILE_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(module)s:%(lineno)d - %(message)s"

# Client libraries that log every request at INFO/DEBUG.
CHATTY_LOGGERS = ("httpx", "httpcore", "urllib3", "requests", "anthropic", "pydantic_ai")


def default_log_file() -> Path:
	"""Return a timestamped log file path under ``logs/``."""
	return LOG_DIR / f"gyst_{datetime.now().strftime('%Y%m%d_%H%M%S')}.log"  # noqa: DTZ005


def _file_handler(path: Path) -> logging.Handler | None:
	try:
		path.parent.mkdir(parents=True, exist_ok=True)
		handler = logging.FileHandler(path, mode="a", encoding="utf-8")
	except OSError as e:
		console.print(f"[red]Could not open log file {path}: {e}[/red]")
		return None
	handler.setLevel(logging.DEBUG)
	handler.setFormatter(logging.Formatter(FILE_LOG_FORMAT))
	return handler


def setup_logging(
	is_verbose: bool = False,
	log_to_console: bool = True,
	log_file_path: Path | str | None = None,
) -> None:
	"""
	Configure the root logger for a CLI run.

	Console output goes through rich and shows warnings and errors only,
	unless ``is_verbose`` is set. A log file, when given, always receives
	everything down to DEBUG.

	Args:
	    is_verbose: Show debug output on the console
	    log_to_console: Install the rich console handler
	    log_file_path: Also append all records to this file
	"""
	console_level = logging.DEBUG if is_verbose else logging.WARNING

	root = logging.getLogger()
	for handler in list(root.handlers):
		root.removeHandler(handler)
	root.setLevel(logging.DEBUG if log_file_path else console_level)

	if log_to_console:
		root.addHandler(
			RichHandler(
				level=console_level,
				console=log_console,
				rich_tracebacks=True,
				show_time=True,
				show_path=is_verbose,
			),
		)

	if not is_verbose:
		for name in CHATTY_LOGGERS:
			logging.getLogger(name).setLevel(logging.WARNING)

	if log_file_path:
		handler = _file_handler(Path(log_file_path))
		if handler is not None:
			root.addHandler(handler)
			root.debug("Writing debug log to %s", log_file_path)


def display_summary(title: str, message: str, color: str) -> None:
	"""Print ``message`` between two rules, the first one titled."""
	console.print()
	console.print(Rule(Text(title, style=f"bold {color}"), style=color))
	console.print(f"\n{message}\n")
	console.print(Rule(style=color))
	console.print()


def display_error_summary(error_message: str) -> None:
	"""Show an error panel."""
	display_summary("Error Summary", error_message, "red")


def display_warning_summary(warning_message: str) -> None:
	"""Show a warning panel."""
	display_summary("Warning Summary", warning_message, "yellow")
