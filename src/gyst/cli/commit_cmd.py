"""Commands for generating commit messages from staged changes."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Annotated

import typer

if TYPE_CHECKING:
	from gyst.config import ConfigLoader
	from gyst.git.staged import StagedChangeSet
	from gyst.git.utils import GitRepoContext

logger = logging.getLogger(__name__)

# --- Command Argument Annotations ---

QuickFlag = Annotated[bool, typer.Option("--quick", "-q", help="Commit with the generated message without asking")]

CountOpt = Annotated[int, typer.Option("--count", "-c", min=1, help="Number of suggestions to generate")]


# --- Registration Function ---


def register_command(app: typer.Typer) -> None:
	"""Register the commit and suggest commands with the CLI app."""

	@app.command(name="commit")
	def commit_command(quick: QuickFlag = False) -> None:
		"""Generate a commit message for the staged changes and commit."""
		_commit_command_impl(quick=quick)

	@app.command(name="suggest")
	def suggest_command(count: CountOpt = 3) -> None:
		"""Generate several commit messages and pick one to commit."""
		_suggest_command_impl(count=count)


# --- Shared Helpers ---


def prepare_staged_changes(repo_ctx: GitRepoContext) -> tuple[StagedChangeSet, str] | None:
	"""
	Collect the staged change set and diff text, offering to stage everything.

	Args:
	    repo_ctx: Open repository

	Returns:
	    The change set and hunk text, or None when there is nothing to commit
	"""
	from gyst.git.diff_builder import StructuredDiffBuilder
	from gyst.git.staged import StagedChangeExtractor
	from gyst.utils.cli_utils import console, progress_indicator

	extractor = StagedChangeExtractor(repo_ctx.repo)
	changes = extractor.extract()
	if changes.is_empty:
		console.print("\n[yellow]✗ No staged changes found.[/yellow]")
		if not repo_ctx.has_any_changes() or not typer.confirm("Would you like to stage all changes?", default=False):
			console.print("[yellow]✗ No changes to commit. Stage your changes using 'git add' first.[/yellow]")
			return None
		with progress_indicator("Staging all changes..."):
			repo_ctx.stage_all()
		console.print("[green]✓[/green] All changes have been staged")
		changes = extractor.extract()
		if changes.is_empty:
			console.print("[yellow]✗ No changes to commit.[/yellow]")
			return None

	diff = StructuredDiffBuilder(repo_ctx.repo).text()
	return changes, diff


def _finish_commit(repo_ctx: GitRepoContext, message: str) -> None:
	from gyst.utils.cli_utils import console, progress_indicator

	with progress_indicator("Creating commit..."):
		commit_id = repo_ctx.create_commit(message)
	console.print(f"[green]✓[/green] [bold green]Commit created successfully![/bold green] ({commit_id[:7]})")
	console.print(f"\n[bold cyan]Final Commit Message:[/bold cyan]\n{message}\n")


def _warn_if_protected(repo_ctx: GitRepoContext, config: ConfigLoader) -> None:
	from gyst.utils.cli_utils import show_warning

	branch = repo_ctx.current_branch()
	if branch and branch in config.get.git.protected_branches:
		show_warning(f"You are committing directly to the protected branch '{branch}'.")


def _load_config() -> ConfigLoader:
	from gyst.config import ConfigLoader

	return ConfigLoader()


# --- Implementation Functions ---


def _commit_command_impl(quick: bool) -> None:
	"""Implementation of the commit command."""
	import questionary

	from gyst.config import ConfigError
	from gyst.git.utils import GitError, GitRepoContext
	from gyst.llm import LLMError, get_message_backend
	from gyst.utils.cli_utils import console, exit_with_error, handle_keyboard_interrupt, progress_indicator

	try:
		repo_ctx = GitRepoContext.open()
		prepared = prepare_staged_changes(repo_ctx)
		if prepared is None:
			return
		changes, diff = prepared

		config = _load_config()
		_warn_if_protected(repo_ctx, config)
		backend = get_message_backend(config)
		with progress_indicator("Analyzing changes and generating commit message..."):
			message = backend.generate_message(changes, diff)
		console.print("[green]✓[/green] Commit message generated!")

		if not quick:
			console.print("\n[bold cyan]Proposed commit message:[/bold cyan]")
			console.print(f"[green]{message}[/green]\n")
			action = questionary.select(
				"What would you like to do?",
				choices=[
					{"value": "accept", "name": "Accept and commit"},
					{"value": "edit", "name": "Edit in $EDITOR and commit"},
					{"value": "abort", "name": "Abort"},
				],
			).ask()

			if action is None or action == "abort":
				console.print("[yellow]✗ Commit aborted[/yellow]")
				return
			if action == "edit":
				edited = typer.edit(message)
				if edited is None:
					console.print("[yellow]✗ Editor closed without saving; commit aborted[/yellow]")
					return
				message = edited.strip()
				if not message:
					console.print("[yellow]✗ Empty commit message; commit aborted[/yellow]")
					return

		_finish_commit(repo_ctx, message)
	except KeyboardInterrupt:
		handle_keyboard_interrupt()
	except (GitError, LLMError, ConfigError) as e:
		exit_with_error(str(e), exception=e)


def _suggest_command_impl(count: int) -> None:
	"""Implementation of the suggest command."""
	import questionary

	from gyst.config import ConfigError
	from gyst.git.utils import GitError, GitRepoContext
	from gyst.llm import LLMError, get_message_backend
	from gyst.utils.cli_utils import console, exit_with_error, handle_keyboard_interrupt, progress_indicator

	try:
		repo_ctx = GitRepoContext.open()
		prepared = prepare_staged_changes(repo_ctx)
		if prepared is None:
			return
		changes, diff = prepared

		config = _load_config()
		_warn_if_protected(repo_ctx, config)
		backend = get_message_backend(config)
		with progress_indicator("Generating commit message suggestions..."):
			suggestions = backend.generate_suggestions(changes, diff, count)
		console.print("[green]✓[/green] Suggestions generated!")

		message = questionary.select("Select a commit message", choices=suggestions).ask()
		if message is None:
			console.print("[yellow]✗ No message selected. You can still create a commit manually.[/yellow]")
			return

		_finish_commit(repo_ctx, message)
	except KeyboardInterrupt:
		handle_keyboard_interrupt()
	except (GitError, LLMError, ConfigError) as e:
		exit_with_error(str(e), exception=e)
