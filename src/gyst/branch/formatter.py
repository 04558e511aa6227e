"""Rendering of branch health reports."""

from __future__ import annotations

import json
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING

from gyst.branch.health import BranchStatus

if TYPE_CHECKING:
	from collections.abc import Sequence

	from gyst.branch.health import BranchHealth

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"

STATUS_GLYPHS = {
	BranchStatus.HEALTHY: "🟢",
	BranchStatus.NEEDS_ATTENTION: "🟡",
	BranchStatus.STALE: "🔴",
}


class OutputFormat(str, Enum):
	"""Report output formats."""

	TEXT = "text"
	JSON = "json"
	MARKDOWN = "markdown"

	@classmethod
	def from_str(cls, value: str) -> OutputFormat:
		"""Parse a format name case-insensitively; anything unknown is text."""
		try:
			return cls(value.strip().lower())
		except ValueError:
			return cls.TEXT


def _distance(health: BranchHealth) -> str:
	return f"{health.ahead_count} ahead, {health.behind_count} behind"


def _format_text(results: Sequence[BranchHealth], timestamp: str) -> str:
	lines = ["Branch Health Report", f"Last updated: {timestamp}", ""]
	for health in results:
		lines.extend(
			[
				health.name,
				f"├── Status: {STATUS_GLYPHS[health.status]} {health.status.value}",
				f"├── Age: {health.age.display}",
				f"├── Last Activity: {health.last_activity.display}",
				f"├── Author: {health.author}",
				f"├── Commits: {health.commit_count}",
				f"└── Main Distance: {_distance(health)}",
				"",
			]
		)
	return "\n".join(lines) + "\n"


def _format_markdown(results: Sequence[BranchHealth], timestamp: str) -> str:
	lines = ["# Branch Health Report", "", f"*Last updated: {timestamp}*", ""]
	for health in results:
		lines.extend(
			[
				f"## {health.name}",
				"",
				"| Metric | Value |",
				"|--------|-------|",
				f"| Status | {STATUS_GLYPHS[health.status]} {health.status.value} |",
				f"| Age | {health.age.display} |",
				f"| Last Activity | {health.last_activity.display} |",
				f"| Author | {health.author} |",
				f"| Commits | {health.commit_count} |",
				f"| Main Distance | {_distance(health)} |",
				"",
			]
		)
	return "\n".join(lines) + "\n"


def to_dict(health: BranchHealth) -> dict[str, str | int]:
	"""Serialize a record with its keys in report order."""
	return {
		"name": health.name,
		"status": health.status.value,
		"last_activity": health.last_activity.display,
		"age": health.age.display,
		"author": health.author,
		"commit_count": health.commit_count,
		"ahead_count": health.ahead_count,
		"behind_count": health.behind_count,
	}


def format_report(
	results: Sequence[BranchHealth],
	fmt: OutputFormat = OutputFormat.TEXT,
	generated_at: datetime | None = None,
) -> str:
	"""
	Render branch health records.

	Args:
	    results: Records to render
	    fmt: Output format
	    generated_at: Report time shown in text and markdown output (defaults to now)

	Returns:
	    str: The rendered report
	"""
	if fmt is OutputFormat.JSON:
		return json.dumps([to_dict(health) for health in results], indent=2, ensure_ascii=False)

	timestamp = (generated_at or datetime.now()).strftime(TIMESTAMP_FORMAT)  # noqa: DTZ005
	if fmt is OutputFormat.MARKDOWN:
		return _format_markdown(results, timestamp)
	return _format_text(results, timestamp)
