"""Utility module for the gyst package."""

from .cli_utils import console, exit_with_error, handle_keyboard_interrupt, progress_indicator, show_warning

__all__ = [
	"console",
	"exit_with_error",
	"handle_keyboard_interrupt",
	"progress_indicator",
	"show_warning",
]
