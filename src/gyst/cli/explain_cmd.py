"""Command for suggesting git commands from a plain-language description."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Annotated

import typer

if TYPE_CHECKING:
	from gyst.llm.command_suggest import CommandSuggestion

logger = logging.getLogger(__name__)

DescriptionArg = Annotated[str, typer.Argument(help="What you want to do, in plain words")]


def register_command(app: typer.Typer) -> None:
	"""Register the explain command with the CLI app."""

	@app.command(name="explain")
	def explain_command(description: DescriptionArg) -> None:
		"""Suggest the git commands for a task."""
		_explain_command_impl(description)


def render_suggestion(suggestion: CommandSuggestion) -> None:
	"""Print a parsed suggestion, showing only notes and tips that carry a warning."""
	from rich.markup import escape

	from gyst.llm.command_suggest import is_important
	from gyst.utils.cli_utils import console

	if not suggestion.is_structured:
		console.print(f"\n[green]{escape(suggestion.raw)}[/green]")
		return

	if suggestion.intro:
		console.print(f"\n{escape(suggestion.intro)}")
	for step in suggestion.steps:
		console.print(f"\n[bold green]{escape(step.command)}[/bold green]")
		console.print(f"   {escape(step.explanation)}")
		if step.note and is_important(step.note):
			console.print(f"   [yellow]✗ {escape(step.note)}[/yellow]")
	if suggestion.tip and is_important(suggestion.tip):
		console.print(f"\n[italic yellow]{escape(suggestion.tip)}[/italic yellow]")


def _explain_command_impl(description: str) -> None:
	"""Implementation of the explain command."""
	from gyst.config import ConfigError, ConfigLoader
	from gyst.llm import LLMError, get_message_backend
	from gyst.llm.command_suggest import parse_suggestion
	from gyst.utils.cli_utils import console, exit_with_error, handle_keyboard_interrupt, progress_indicator

	try:
		backend = get_message_backend(ConfigLoader())
		with progress_indicator("Analyzing your request..."):
			text = backend.suggest_command(description)
		console.print("[green]✓[/green] Analysis complete!")
		render_suggestion(parse_suggestion(text))
	except KeyboardInterrupt:
		handle_keyboard_interrupt()
	except (LLMError, ConfigError) as e:
		exit_with_error(str(e), exception=e)
