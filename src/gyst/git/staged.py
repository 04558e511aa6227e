"""Extraction of the staged (index vs HEAD) change set."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pygit2 import GitError as Pygit2GitError
from pygit2 import Tree
from pygit2.enums import DeltaStatus, DiffFind, FileMode

from gyst.git.utils import DiffError

if TYPE_CHECKING:
	from pygit2 import Diff, DiffDelta, Repository

logger = logging.getLogger(__name__)

UNKNOWN_PATH = "unknown"


class DiffStats(BaseModel):
	"""Aggregate numbers for a staged diff."""

	model_config = ConfigDict(frozen=True)

	files_changed: int = 0
	insertions: int = 0
	deletions: int = 0


class StagedChangeSet(BaseModel):
	"""Staged paths classified by kind of change, plus aggregate stats."""

	model_config = ConfigDict(frozen=True)

	added: list[str] = Field(default_factory=list)
	modified: list[str] = Field(default_factory=list)
	deleted: list[str] = Field(default_factory=list)
	renamed: list[tuple[str, str]] = Field(default_factory=list)
	stats: DiffStats = Field(default_factory=DiffStats)

	@model_validator(mode="after")
	def _check_file_count(self) -> StagedChangeSet:
		total = len(self.added) + len(self.modified) + len(self.deleted) + len(self.renamed)
		if self.stats.files_changed != total:
			msg = f"stats.files_changed is {self.stats.files_changed} but {total} paths are listed"
			raise ValueError(msg)
		return self

	@property
	def is_empty(self) -> bool:
		"""Whether nothing is staged."""
		return self.stats.files_changed == 0


def staged_diff(repo: Repository) -> Diff:
	"""
	Diff the index against HEAD, with renames detected.

	When HEAD is unborn (no commit yet) the index is compared against the
	empty tree, so every staged file shows up as added.

	Args:
	    repo: Repository to diff

	Returns:
	    Diff: The staged diff

	Raises:
	    DiffError: If the index or object database cannot be read
	"""
	try:
		if repo.head_is_unborn:
			logger.debug("HEAD is unborn, diffing index against the empty tree")
			base = repo.get(repo.TreeBuilder().write())
		else:
			base = repo.head.peel(Tree)
		diff = base.diff_to_index(repo.index)
		diff.find_similar(flags=DiffFind.FIND_RENAMES)
	except Pygit2GitError as e:
		msg = f"Failed to generate diff: {e}"
		logger.exception(msg)
		raise DiffError(msg) from e
	return diff


def _is_submodule(delta: DiffDelta) -> bool:
	return delta.old_file.mode == FileMode.COMMIT or delta.new_file.mode == FileMode.COMMIT


class StagedChangeExtractor:
	"""Classifies the staged changes of a repository."""

	def __init__(self, repo: Repository) -> None:
		"""
		Initialize the extractor.

		Args:
		    repo: Repository whose index is inspected
		"""
		self.repo = repo

	def extract(self) -> StagedChangeSet:
		"""
		Classify every staged path into added, modified, deleted or renamed.

		Classification, the file count and the line counts all come from
		one pass over the patches of a single diff, so they always agree.
		Submodule entries are skipped and contribute no lines.

		Returns:
		    StagedChangeSet: The classified change set

		Raises:
		    DiffError: If the diff cannot be produced
		"""
		diff = staged_diff(self.repo)

		added: list[str] = []
		modified: list[str] = []
		deleted: list[str] = []
		renamed: list[tuple[str, str]] = []
		insertions = 0
		deletions = 0

		try:
			for patch in diff:
				if patch is None:
					continue
				delta = patch.delta
				if _is_submodule(delta):
					logger.debug("Skipping submodule entry %s", delta.new_file.path)
					continue

				status = delta.status
				if status == DeltaStatus.ADDED:
					added.append(delta.new_file.path)
				elif status in (DeltaStatus.MODIFIED, DeltaStatus.TYPECHANGE):
					modified.append(delta.new_file.path)
				elif status == DeltaStatus.DELETED:
					deleted.append(delta.old_file.path)
				elif status == DeltaStatus.RENAMED:
					renamed.append((delta.old_file.path or UNKNOWN_PATH, delta.new_file.path or UNKNOWN_PATH))
				else:
					logger.debug("Ignoring delta %s with status %s", delta.new_file.path, status)
					continue

				_, additions, removals = patch.line_stats
				insertions += additions
				deletions += removals
		except Pygit2GitError as e:
			msg = f"Failed to generate diff: {e}"
			logger.exception(msg)
			raise DiffError(msg) from e

		stats = DiffStats(
			files_changed=len(added) + len(modified) + len(deleted) + len(renamed),
			insertions=insertions,
			deletions=deletions,
		)
		return StagedChangeSet(added=added, modified=modified, deleted=deleted, renamed=renamed, stats=stats)

	def has_staged_changes(self) -> bool:
		"""Check whether anything countable is staged."""
		return not self.extract().is_empty
