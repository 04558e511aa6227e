"""Branch health classification."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from gyst.git.graph import (
	DEFAULT_MAIN_BRANCHES,
	BranchRef,
	BranchScope,
	CommitGraph,
	TimeAgo,
	branch_age,
	resolve_main_branch,
)
from gyst.git.utils import GitError

if TYPE_CHECKING:
	from collections.abc import Callable, Sequence

logger = logging.getLogger(__name__)

DEFAULT_STALE_DAYS = 30
DEFAULT_INACTIVE_DAYS = 7


def _now() -> int:
	return int(time.time())


class BranchStatus(str, Enum):
	"""Health bucket of a branch, based on days since its last commit."""

	HEALTHY = "Healthy"
	NEEDS_ATTENTION = "NeedsAttention"
	STALE = "Stale"


@dataclass(frozen=True)
class BranchHealth:
	"""Health report for one branch."""

	name: str
	status: BranchStatus
	last_activity: TimeAgo
	age: TimeAgo
	author: str
	commit_count: int
	ahead_count: int
	behind_count: int


class BranchHealthClassifier:
	"""Computes ``BranchHealth`` records from a commit graph."""

	def __init__(
		self,
		graph: CommitGraph,
		*,
		stale_days: int = DEFAULT_STALE_DAYS,
		inactive_days: int = DEFAULT_INACTIVE_DAYS,
		main_branch_names: Sequence[str] = DEFAULT_MAIN_BRANCHES,
		clock: Callable[[], int] = _now,
	) -> None:
		"""
		Initialize the classifier.

		Args:
		    graph: Commit graph to query
		    stale_days: Days without a commit after which a branch is stale
		    inactive_days: Days without a commit after which a branch needs attention
		    main_branch_names: Comparison branch candidates, most preferred first
		    clock: Returns the current time in epoch seconds
		"""
		self.graph = graph
		self.stale_days = stale_days
		self.inactive_days = inactive_days
		self.main_branch_names = tuple(main_branch_names)
		self.clock = clock

	def classify(self, days: int) -> BranchStatus:
		"""Map days since the last commit to a status."""
		if days >= self.stale_days:
			return BranchStatus.STALE
		if days >= self.inactive_days:
			return BranchStatus.NEEDS_ATTENTION
		return BranchStatus.HEALTHY

	def analyze_branch(self, ref: BranchRef, main_tip: str | None = None) -> BranchHealth:
		"""
		Build the health record for one branch.

		Args:
		    ref: Branch to analyze
		    main_tip: Tip of the comparison branch; resolved from
		        ``main_branch_names`` when omitted

		Returns:
		    BranchHealth: The computed record

		Raises:
		    NoMainBranchError: If ``main_tip`` is omitted and no main branch exists
		    GitError: If any graph query fails
		"""
		if main_tip is None:
			main_tip = resolve_main_branch(self.graph, self.main_branch_names)

		tip = self.graph.resolve_branch(ref)
		tip_info = self.graph.commit_info(tip)
		commit_count = self.graph.count_ancestors(tip)
		ahead, behind = self.graph.ahead_behind(tip, main_tip)
		first = branch_age(self.graph, tip, main_tip)

		now = self.clock()
		last_activity = TimeAgo.since(tip_info.timestamp, now)
		return BranchHealth(
			name=ref.name,
			status=self.classify(last_activity.days),
			last_activity=last_activity,
			age=TimeAgo.since(first.timestamp, now),
			author=tip_info.author or "unknown",
			commit_count=commit_count,
			ahead_count=ahead,
			behind_count=behind,
		)

	def analyze_branches(
		self,
		scope: BranchScope = BranchScope.ALL,
		days: int | None = None,
		author: str | None = None,
	) -> list[BranchHealth]:
		"""
		Analyze every branch in ``scope``.

		The main branch is resolved once before the scan. Branches that fail
		to analyze are left out of the result (logged at debug level).

		Args:
		    scope: Which branches to include
		    days: Drop branches whose last commit is more than this many days old
		    author: Keep only branches whose tip author matches exactly

		Returns:
		    list[BranchHealth]: Records in listing order, local branches first

		Raises:
		    NoMainBranchError: If no main branch exists
		"""
		main_tip = resolve_main_branch(self.graph, self.main_branch_names)

		results: list[BranchHealth] = []
		for ref in self.graph.list_branches(scope):
			try:
				health = self.analyze_branch(ref, main_tip)
			except GitError as e:
				logger.debug("Skipping branch %s: %s", ref.name, e)
				continue

			if days is not None and health.last_activity.days > days:
				continue
			if author is not None and health.author != author:
				continue
			results.append(health)

		logger.debug("Analyzed %d branches in scope %s", len(results), scope.value)
		return results
