"""Command for showing the analyzed staged diff."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import typer

if TYPE_CHECKING:
	from gyst.git.diff_builder import DiffHunk
	from gyst.git.staged import StagedChangeSet

logger = logging.getLogger(__name__)

LINE_STYLES = {"+": "green", "-": "red"}


def register_command(app: typer.Typer) -> None:
	"""Register the diff command with the CLI app."""

	@app.command(name="diff")
	def diff_command() -> None:
		"""Show the staged changes: summary, file lists and hunks."""
		_diff_command_impl()


def _plural(count: int, singular: str, plural: str) -> str:
	return f"{count} {singular if count == 1 else plural}"


def _print_summary(changes: StagedChangeSet) -> None:
	from rich.markup import escape

	from gyst.utils.cli_utils import console

	stats = changes.stats
	console.print("\n[bold underline cyan]Summary[/bold underline cyan]")
	console.print(
		f"[bold]{_plural(stats.files_changed, 'file', 'files')}[/bold], "
		f"[bold green]{_plural(stats.insertions, 'insertion(+)', 'insertions(+)')}[/bold green], "
		f"[bold red]{_plural(stats.deletions, 'deletion(-)', 'deletions(-)')}[/bold red]"
	)

	sections = (
		("Added files:", "+", "green", changes.added),
		("Modified files:", "*", "yellow", changes.modified),
		("Deleted files:", "-", "red", changes.deleted),
	)
	for title, marker, color, paths in sections:
		if not paths:
			continue
		console.print(f"\n[bold cyan]{title}[/bold cyan]")
		for path in paths:
			console.print(f"  [bold {color}]{marker}[/bold {color}] [{color}]{escape(path)}[/{color}]")

	if changes.renamed:
		console.print("\n[bold cyan]Renamed files:[/bold cyan]")
		for old, new in changes.renamed:
			console.print(f"  [strike]{escape(old)}[/strike] [bold blue]→[/bold blue] [blue]{escape(new)}[/blue]")


def _print_hunks(hunks: list[DiffHunk]) -> None:
	from rich.text import Text

	from gyst.utils.cli_utils import console

	console.print("\n[bold underline cyan]Detailed changes:[/bold underline cyan]")
	for hunk in hunks:
		console.print()
		console.print(Text(hunk.header.rstrip("\n"), style="cyan"))
		for line in hunk.lines:
			console.print(Text(line.render().rstrip("\n"), style=LINE_STYLES.get(line.origin, "dim")))


def _diff_command_impl() -> None:
	"""Implementation of the diff command."""
	from gyst.git.diff_builder import StructuredDiffBuilder
	from gyst.git.staged import StagedChangeExtractor
	from gyst.git.utils import GitError, GitRepoContext
	from gyst.utils.cli_utils import console, exit_with_error, handle_keyboard_interrupt

	try:
		repo_ctx = GitRepoContext.open()
		changes = StagedChangeExtractor(repo_ctx.repo).extract()
		if changes.is_empty:
			console.print("[yellow]✗ No staged changes found. Stage some changes first with 'git add'[/yellow]")
			return

		_print_summary(changes)
		_print_hunks(StructuredDiffBuilder(repo_ctx.repo).build())
	except KeyboardInterrupt:
		handle_keyboard_interrupt()
	except GitError as e:
		exit_with_error(str(e), exception=e)
