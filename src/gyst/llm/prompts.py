"""Prompt templates for commit messages and command suggestions."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
	from gyst.git.staged import StagedChangeSet

COMMIT_SYSTEM_PROMPT = """\
You are an AI assistant that helps developers write clear and meaningful git commit messages.
Follow these rules:
1. Use the conventional commit format: <type>(<scope>): <description>
2. Keep the subject line under {max_subject_length} characters
3. Use the imperative mood ("add" not "added")
4. Don't end the subject line with a period
5. Focus on WHY and WHAT, not HOW
6. If there are breaking changes, add BREAKING CHANGE: in the body

Types: feat, fix, docs, style, refactor, perf, test, chore, ci, build

Return ONLY the commit message, without any prefixes or explanations."""

COMMAND_SYSTEM_PROMPT = """\
You are a Git command suggestion assistant. Given a natural language description of what \
the user wants to do, suggest the appropriate Git command(s).

Rules:
1. Always provide clear, concise commands
2. Include a brief explanation of what each command does
3. If multiple steps are needed, number them
4. If there are alternative approaches, mention them
5. Include any relevant flags or options that might be helpful
6. Warn about any potential risks or things to be careful about

Format your response as:
COMMAND: <the command>
EXPLANATION: <brief explanation>
NOTE: <optional notes/warnings>
"""

TRUNCATION_MARKER = "... (diff truncated, {remaining} more lines)\n"


def commit_system_prompt(max_subject_length: int = 72) -> str:
	"""Return the commit system prompt for a given subject length limit."""
	return COMMIT_SYSTEM_PROMPT.format(max_subject_length=max_subject_length)


def truncate_diff(diff: str, max_lines: int) -> str:
	"""
	Keep the first ``max_lines`` lines of a diff.

	A non-positive limit keeps everything.
	"""
	if max_lines <= 0:
		return diff
	lines = diff.splitlines(keepends=True)
	if len(lines) <= max_lines:
		return diff
	kept = "".join(lines[:max_lines])
	if not kept.endswith("\n"):
		kept += "\n"
	return kept + TRUNCATION_MARKER.format(remaining=len(lines) - max_lines)


def build_commit_prompt(changes: StagedChangeSet, diff: str, max_diff_lines: int = 0) -> str:
	"""
	Build the user prompt asking for a commit message.

	Args:
	    changes: Classified staged changes
	    diff: Patch text of the staged changes
	    max_diff_lines: Limit on the number of diff lines included (0 for no limit)

	Returns:
	    str: The prompt
	"""
	sections: list[str] = []
	if changes.added:
		sections.append("Added files:\n" + "".join(f"  + {path}\n" for path in changes.added))
	if changes.modified:
		sections.append("Modified files:\n" + "".join(f"  * {path}\n" for path in changes.modified))
	if changes.deleted:
		sections.append("Deleted files:\n" + "".join(f"  - {path}\n" for path in changes.deleted))
	if changes.renamed:
		sections.append("Renamed files:\n" + "".join(f"  {old} -> {new}\n" for old, new in changes.renamed))

	return (
		"Here are the changes to commit:\n\n"
		+ "\n".join(sections)
		+ "\nHere's the detailed diff:\n"
		+ truncate_diff(diff, max_diff_lines)
		+ "\nPlease generate a commit message following the conventional commit format."
	)
