"""
Commit-graph walking for branch analysis.

This module exposes the history queries the branch-health report needs
(ancestor counts, ahead/behind distance, merge bases and the oldest
commit unique to a branch) behind the small ``CommitGraph`` protocol, so
the analysis code never handles pygit2 objects directly.

"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Protocol

from pygit2 import Commit
from pygit2 import GitError as Pygit2GitError
from pygit2.enums import SortMode

from gyst.git.utils import GitError, NoMainBranchError, ReferenceResolutionError

if TYPE_CHECKING:
	from collections.abc import Sequence

	from pygit2 import Repository

logger = logging.getLogger(__name__)

SECONDS_PER_MINUTE = 60
SECONDS_PER_HOUR = 60 * SECONDS_PER_MINUTE
SECONDS_PER_DAY = 24 * SECONDS_PER_HOUR

DEFAULT_MAIN_BRANCHES = ("main", "master")


class BranchKind(str, Enum):
	"""Where a branch lives."""

	LOCAL = "local"
	REMOTE = "remote"


class BranchScope(str, Enum):
	"""Which branches a listing covers."""

	ALL = "all"
	LOCAL = "local"
	REMOTE = "remote"

	@property
	def kinds(self) -> tuple[BranchKind, ...]:
		"""Branch kinds included in this scope, local first."""
		if self is BranchScope.LOCAL:
			return (BranchKind.LOCAL,)
		if self is BranchScope.REMOTE:
			return (BranchKind.REMOTE,)
		return (BranchKind.LOCAL, BranchKind.REMOTE)


@dataclass(frozen=True)
class CommitInfo:
	"""A commit reduced to what the analysis needs."""

	id: str
	timestamp: int
	"""Commit time in seconds since the epoch."""
	author: str


@dataclass(frozen=True)
class BranchRef:
	"""A branch by name and kind."""

	name: str
	kind: BranchKind = BranchKind.LOCAL


@dataclass(frozen=True)
class TimeAgo:
	"""Elapsed time split into whole days, hours and minutes."""

	days: int
	hours: int
	minutes: int

	@classmethod
	def since(cls, timestamp: int, now: int) -> TimeAgo:
		"""
		Decompose ``now - timestamp`` into days, then hours, then minutes.

		Seconds are dropped. A negative delta (future-dated commit or clock
		skew) is decomposed on its magnitude and every component keeps the
		sign, so the result is never an error.

		Args:
		    timestamp: Commit time in epoch seconds
		    now: Reference time in epoch seconds

		Returns:
		    TimeAgo: The decomposed delta
		"""
		delta = now - timestamp
		sign = -1 if delta < 0 else 1
		days, remainder = divmod(abs(delta), SECONDS_PER_DAY)
		hours, remainder = divmod(remainder, SECONDS_PER_HOUR)
		minutes = remainder // SECONDS_PER_MINUTE
		return cls(days=sign * days, hours=sign * hours, minutes=sign * minutes)

	@property
	def display(self) -> str:
		"""Human string using the largest non-zero unit."""
		if self.days != 0:
			return f"{self.days} days"
		if self.hours != 0:
			return f"{self.hours} hours"
		return f"{self.minutes} minutes"

	def __str__(self) -> str:
		"""Return the human string."""
		return self.display


class CommitGraph(Protocol):
	"""History queries over a repository, keyed by commit id strings."""

	def count_ancestors(self, commit_id: str) -> int:
		"""Count commits reachable from ``commit_id``, itself included."""
		...

	def ahead_behind(self, subject: str, reference: str) -> tuple[int, int]:
		"""Commits reachable only from ``subject`` and only from ``reference``."""
		...

	def merge_base(self, subject: str, reference: str) -> str | None:
		"""Nearest common ancestor, or None for unrelated histories."""
		...

	def oldest_unique_commit(self, tip: str, base: str | None) -> CommitInfo | None:
		"""Oldest commit reachable from ``tip`` but not from ``base``."""
		...

	def commit_info(self, commit_id: str) -> CommitInfo:
		"""Look up one commit."""
		...

	def list_branches(self, scope: BranchScope) -> list[BranchRef]:
		"""Branches in ``scope``, local before remote."""
		...

	def resolve_branch(self, ref: BranchRef) -> str:
		"""Peel a branch to the id of its tip commit."""
		...

	def find_local_branch(self, name: str) -> str | None:
		"""Tip commit id of a local branch, or None if it does not exist."""
		...


class RepositoryGraph:
	"""``CommitGraph`` backed by a pygit2 repository."""

	def __init__(self, repo: Repository) -> None:
		"""
		Initialize the graph over an opened repository.

		Args:
		    repo: The pygit2 repository to walk
		"""
		self.repo = repo

	def _commit(self, commit_id: str) -> Commit:
		try:
			obj = self.repo.revparse_single(commit_id)
			return obj.peel(Commit)
		except (KeyError, ValueError, Pygit2GitError) as e:
			msg = f"Failed to resolve commit '{commit_id}': {e}"
			raise ReferenceResolutionError(msg) from e

	@staticmethod
	def _info(commit: Commit) -> CommitInfo:
		return CommitInfo(
			id=str(commit.id),
			timestamp=commit.commit_time,
			author=commit.author.name or "unknown",
		)

	def count_ancestors(self, commit_id: str) -> int:
		"""
		Count every commit reachable from ``commit_id``, itself included.

		Args:
		    commit_id: Commit to start the walk from

		Returns:
		    int: Number of reachable commits
		"""
		commit = self._commit(commit_id)
		try:
			return sum(1 for _ in self.repo.walk(commit.id))
		except Pygit2GitError as e:
			msg = f"Failed to walk history from {commit_id}: {e}"
			raise GitError(msg) from e

	def ahead_behind(self, subject: str, reference: str) -> tuple[int, int]:
		"""
		Compute the ahead/behind distance of ``subject`` against ``reference``.

		Args:
		    subject: Commit being measured
		    reference: Commit measured against

		Returns:
		    tuple[int, int]: (ahead, behind)
		"""
		subject_commit = self._commit(subject)
		reference_commit = self._commit(reference)
		try:
			ahead, behind = self.repo.ahead_behind(subject_commit.id, reference_commit.id)
		except Pygit2GitError as e:
			msg = f"Failed to calculate ahead/behind counts: {e}"
			raise GitError(msg) from e
		return ahead, behind

	def merge_base(self, subject: str, reference: str) -> str | None:
		"""Return the merge base of two commits, or None when they share no history."""
		subject_commit = self._commit(subject)
		reference_commit = self._commit(reference)
		try:
			base = self.repo.merge_base(subject_commit.id, reference_commit.id)
		except Pygit2GitError as e:
			msg = f"Failed to find merge base of {subject} and {reference}: {e}"
			raise GitError(msg) from e
		return str(base) if base is not None else None

	def oldest_unique_commit(self, tip: str, base: str | None) -> CommitInfo | None:
		"""
		Find the oldest commit reachable from ``tip`` but not from ``base``.

		Args:
		    tip: Branch tip commit
		    base: Commit whose ancestry is hidden, or None to hide nothing

		Returns:
		    CommitInfo | None: The oldest unique commit, or None if there is none
		"""
		tip_commit = self._commit(tip)
		try:
			walker = self.repo.walk(tip_commit.id, SortMode.TOPOLOGICAL | SortMode.TIME | SortMode.REVERSE)
			if base is not None:
				walker.hide(self._commit(base).id)
			oldest = next(iter(walker), None)
		except Pygit2GitError as e:
			msg = f"Failed to walk history from {tip}: {e}"
			raise GitError(msg) from e
		return self._info(oldest) if oldest is not None else None

	def commit_info(self, commit_id: str) -> CommitInfo:
		"""Look up one commit by id."""
		return self._info(self._commit(commit_id))

	def list_branches(self, scope: BranchScope) -> list[BranchRef]:
		"""List branch names in ``scope``, local branches first."""
		refs: list[BranchRef] = []
		for kind in scope.kinds:
			names = self.repo.branches.local if kind is BranchKind.LOCAL else self.repo.branches.remote
			refs.extend(BranchRef(name=name, kind=kind) for name in names)
		return refs

	def resolve_branch(self, ref: BranchRef) -> str:
		"""
		Peel a branch to its tip commit id.

		Raises:
		    ReferenceResolutionError: If the branch is missing or does not point at a commit
		"""
		collection = self.repo.branches.local if ref.kind is BranchKind.LOCAL else self.repo.branches.remote
		try:
			branch = collection[ref.name]
			commit = branch.peel(Commit)
		except (KeyError, ValueError, Pygit2GitError) as e:
			msg = f"Failed to get commit for branch '{ref.name}': {e}"
			raise ReferenceResolutionError(msg) from e
		return str(commit.id)

	def find_local_branch(self, name: str) -> str | None:
		"""Return the tip commit id of a local branch, or None when it does not exist."""
		if name not in self.repo.branches.local:
			return None
		return self.resolve_branch(BranchRef(name=name, kind=BranchKind.LOCAL))


def resolve_main_branch(graph: CommitGraph, names: Sequence[str] = DEFAULT_MAIN_BRANCHES) -> str:
	"""
	Resolve the comparison branch, trying ``names`` in order.

	Args:
	    graph: Commit graph to search
	    names: Candidate local branch names, most preferred first

	Returns:
	    str: Tip commit id of the first branch that exists

	Raises:
	    NoMainBranchError: If none of the branches exists
	"""
	for name in names:
		tip = graph.find_local_branch(name)
		if tip is not None:
			logger.debug("Using '%s' as the main branch", name)
			return tip
	msg = f"Failed to find main branch (tried: {', '.join(names)})"
	raise NoMainBranchError(msg)


def branch_age(graph: CommitGraph, tip: str, main_tip: str) -> CommitInfo:
	"""
	Find the commit that dates a branch: the first commit unique to it.

	The branch's history is walked back to the merge base with the main
	branch. When the tip is itself the merge base there are no unique
	commits and the tip dates the branch.

	Args:
	    graph: Commit graph to walk
	    tip: Branch tip commit id
	    main_tip: Main branch tip commit id

	Returns:
	    CommitInfo: The dating commit
	"""
	base = graph.merge_base(tip, main_tip)
	oldest = graph.oldest_unique_commit(tip, base)
	return oldest if oldest is not None else graph.commit_info(tip)
