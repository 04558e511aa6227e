"""
Structured view of the staged diff.

The diff engine emits a flat stream of file, hunk and line events.
``iter_line_records`` turns a pygit2 diff into that stream and
``build_hunks`` folds it into ``DiffHunk`` values in emission order.

"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from pygit2 import GitError as Pygit2GitError

from gyst.git.staged import staged_diff
from gyst.git.utils import DiffError

if TYPE_CHECKING:
	from collections.abc import Iterable, Iterator

	from pygit2 import Diff, Repository

logger = logging.getLogger(__name__)

PREFIXED_ORIGINS = frozenset({"+", "-", " "})


class RecordKind(str, Enum):
	"""Kind of event in the diff stream."""

	FILE = "file"
	HUNK = "hunk"
	LINE = "line"


@dataclass(frozen=True)
class LineRecord:
	"""One event of the diff stream; which fields are set depends on ``kind``."""

	kind: RecordKind
	path: str = ""
	status: str = ""
	old_start: int = 0
	old_lines: int = 0
	new_start: int = 0
	new_lines: int = 0
	header: str = ""
	origin: str = ""
	content: str = ""


@dataclass(frozen=True)
class DiffLine:
	"""A single diff line with its origin marker."""

	origin: str
	content: str

	def render(self) -> str:
		"""Render the line as it appears in a patch."""
		if self.origin in PREFIXED_ORIGINS:
			return f"{self.origin}{self.content}"
		return self.content


@dataclass(frozen=True)
class DiffHunk:
	"""A contiguous block of changes."""

	old_start: int
	old_lines: int
	new_start: int
	new_lines: int
	header: str
	lines: tuple[DiffLine, ...] = ()


def iter_line_records(diff: Diff) -> Iterator[LineRecord]:
	"""
	Yield the diff as a stream of file, hunk and line records.

	Args:
	    diff: The pygit2 diff to walk

	Yields:
	    LineRecord: Records in the order the diff engine emits them

	Raises:
	    DiffError: If a patch cannot be generated
	"""
	try:
		for patch in diff:
			if patch is None:
				continue
			delta = patch.delta
			yield LineRecord(
				kind=RecordKind.FILE,
				path=delta.new_file.path or delta.old_file.path,
				status=delta.status_char(),
			)
			for hunk in patch.hunks:
				yield LineRecord(
					kind=RecordKind.HUNK,
					old_start=hunk.old_start,
					old_lines=hunk.old_lines,
					new_start=hunk.new_start,
					new_lines=hunk.new_lines,
					header=hunk.header,
				)
				for line in hunk.lines:
					yield LineRecord(kind=RecordKind.LINE, origin=line.origin, content=line.content)
	except Pygit2GitError as e:
		msg = f"Failed to generate diff: {e}"
		raise DiffError(msg) from e


def build_hunks(records: Iterable[LineRecord]) -> list[DiffHunk]:
	"""
	Fold a record stream into hunks.

	A hunk record closes the open hunk and starts a new one, line records
	accumulate onto the open hunk, and a file record closes the open hunk.
	Whatever is still open at the end of the stream is flushed.

	Args:
	    records: Records as produced by ``iter_line_records``

	Returns:
	    list[DiffHunk]: Hunks in stream order
	"""
	hunks: list[DiffHunk] = []
	current: LineRecord | None = None
	lines: list[DiffLine] = []

	def flush() -> None:
		if current is not None:
			hunks.append(
				DiffHunk(
					old_start=current.old_start,
					old_lines=current.old_lines,
					new_start=current.new_start,
					new_lines=current.new_lines,
					header=current.header,
					lines=tuple(lines),
				)
			)

	for record in records:
		if record.kind is RecordKind.LINE:
			if current is None:
				logger.debug("Dropping line outside of any hunk: %r", record.content)
				continue
			lines.append(DiffLine(origin=record.origin, content=record.content))
			continue

		flush()
		lines = []
		current = record if record.kind is RecordKind.HUNK else None

	flush()
	return hunks


def render_hunks(hunks: Iterable[DiffHunk]) -> str:
	"""Render hunks back to patch text, without the per-file headers."""
	parts: list[str] = []
	for hunk in hunks:
		parts.append(hunk.header)
		parts.extend(line.render() for line in hunk.lines)
	return "".join(parts)


class StructuredDiffBuilder:
	"""Builds hunks from the staged diff of a repository."""

	def __init__(self, repo: Repository) -> None:
		"""
		Initialize the builder.

		Args:
		    repo: Repository whose staged diff is read
		"""
		self.repo = repo

	def build(self) -> list[DiffHunk]:
		"""Return the staged diff as a list of hunks."""
		return build_hunks(iter_line_records(staged_diff(self.repo)))

	def text(self) -> str:
		"""Return the staged diff as patch text (hunks only)."""
		return render_hunks(self.build())
