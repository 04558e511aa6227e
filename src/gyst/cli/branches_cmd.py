"""Command for reporting branch health."""

from __future__ import annotations

import logging
from typing import Annotated

import typer

logger = logging.getLogger(__name__)

ScopeOpt = Annotated[str, typer.Option("--scope", "-s", help="Branches to include: all, local or remote")]

DaysOpt = Annotated[int | None, typer.Option("--days", "-d", min=0, help="Only branches active within N days")]

AuthorOpt = Annotated[str | None, typer.Option("--author", "-a", help="Only branches whose last commit is by AUTHOR")]

FormatOpt = Annotated[str, typer.Option("--format", "-f", help="Output format: text, json or markdown")]


def register_command(app: typer.Typer) -> None:
	"""Register the branches command with the CLI app."""

	@app.command(name="branches")
	def branches_command(
		scope: ScopeOpt = "all",
		days: DaysOpt = None,
		author: AuthorOpt = None,
		output_format: FormatOpt = "text",
	) -> None:
		"""Report the health of the repository's branches."""
		_branches_command_impl(scope=scope, days=days, author=author, output_format=output_format)


def _branches_command_impl(scope: str, days: int | None, author: str | None, output_format: str) -> None:
	"""Implementation of the branches command."""
	from gyst.branch import BranchHealthClassifier, OutputFormat, format_report
	from gyst.git.graph import BranchScope, RepositoryGraph
	from gyst.git.utils import GitError, GitRepoContext
	from gyst.utils.cli_utils import exit_with_error, handle_keyboard_interrupt, progress_indicator

	try:
		branch_scope = BranchScope(scope.lower())
	except ValueError:
		exit_with_error(f"Invalid scope '{scope}'. Use all, local or remote.")
		return

	try:
		repo_ctx = GitRepoContext.open()
		classifier = BranchHealthClassifier(RepositoryGraph(repo_ctx.repo))
		with progress_indicator("Analyzing branches..."):
			results = classifier.analyze_branches(branch_scope, days=days, author=author)
	except KeyboardInterrupt:
		handle_keyboard_interrupt()
		return
	except GitError as e:
		exit_with_error(str(e), exception=e)
		return

	# Plain echo keeps JSON output parseable.
	typer.echo(format_report(results, OutputFormat.from_str(output_format)))
