"""Tests for commit-graph walking."""

from __future__ import annotations

import pytest

from gyst.git.graph import (
	BranchKind,
	BranchRef,
	BranchScope,
	RepositoryGraph,
	TimeAgo,
	branch_age,
	resolve_main_branch,
)
from gyst.git.utils import NoMainBranchError, ReferenceResolutionError
from tests.base import BASE_TIME, DAY, GitTestBase, RepoBuilder


@pytest.mark.unit
class TestTimeAgo:
	"""Decomposition of elapsed time."""

	def test_decomposes_days_hours_minutes(self) -> None:
		"""Seconds are dropped after taking whole days, hours and minutes."""
		elapsed = 2 * DAY + 3 * 3600 + 4 * 60 + 59
		assert TimeAgo.since(0, elapsed) == TimeAgo(days=2, hours=3, minutes=4)

	def test_display_uses_largest_unit(self) -> None:
		"""Only the largest non-zero unit is shown."""
		assert TimeAgo(2, 3, 4).display == "2 days"
		assert TimeAgo(0, 3, 4).display == "3 hours"
		assert TimeAgo(0, 0, 4).display == "4 minutes"
		assert TimeAgo(0, 0, 0).display == "0 minutes"
		assert str(TimeAgo(0, 5, 0)) == "5 hours"
		assert TimeAgo(-1, -1, -6).display == "-1 days"
		assert TimeAgo(0, -2, -6).display == "-2 hours"

	def test_exact_day_boundary(self) -> None:
		"""Exactly N days leaves no hours or minutes."""
		assert TimeAgo.since(BASE_TIME, BASE_TIME + 7 * DAY) == TimeAgo(7, 0, 0)

	def test_future_timestamp_keeps_sign(self) -> None:
		"""A commit dated after now gives negative components instead of failing."""
		ago = TimeAgo.since(100 + DAY + 3600 + 400, 100)
		assert ago == TimeAgo(days=-1, hours=-1, minutes=-6)


class TestRepositoryGraph(GitTestBase):
	"""History queries against a real repository."""

	@pytest.fixture(autouse=True)
	def _history(self, _git_repo: None) -> None:
		b = self.builder
		b.write("README.md", "hello\n")
		b.stage("README.md")
		self.a = b.commit("initial", timestamp=BASE_TIME)
		b.write("main.txt", "one\n")
		b.stage("main.txt")
		self.main_b = b.commit("main b", timestamp=BASE_TIME + DAY)
		self.f1 = b.commit("f1", timestamp=BASE_TIME + 2 * DAY, author="Alice", branch="feature", parents=[self.a])
		self.f2 = b.commit("f2", timestamp=BASE_TIME + 3 * DAY, author="Alice", branch="feature", parents=[self.f1])
		self.main_c = b.commit("main c", timestamp=BASE_TIME + 10 * DAY, parents=[self.main_b])
		self.graph = RepositoryGraph(self.repo)

	def test_count_ancestors_includes_tip(self) -> None:
		"""Every reachable commit is counted once."""
		assert self.graph.count_ancestors(self.f2) == 3
		assert self.graph.count_ancestors(self.a) == 1

	def test_ahead_behind_is_antisymmetric(self) -> None:
		"""Swapping the arguments swaps the counts."""
		assert self.graph.ahead_behind(self.f2, self.main_c) == (2, 2)
		assert self.graph.ahead_behind(self.main_b, self.main_c) == (0, 1)
		assert self.graph.ahead_behind(self.main_c, self.main_b) == (1, 0)

	def test_merge_base(self) -> None:
		"""The fork point is the common ancestor."""
		assert self.graph.merge_base(self.f2, self.main_c) == self.a

	def test_merge_base_of_unrelated_histories(self) -> None:
		"""Orphan branches have no merge base."""
		orphan = self.builder.commit("orphan", timestamp=BASE_TIME, branch="orphan", parents=[])
		assert self.graph.merge_base(orphan, self.main_c) is None

	def test_oldest_unique_commit(self) -> None:
		"""The first commit after the fork point is found."""
		oldest = self.graph.oldest_unique_commit(self.f2, self.a)
		assert oldest is not None
		assert oldest.id == self.f1
		assert oldest.timestamp == BASE_TIME + 2 * DAY
		assert oldest.author == "Alice"

	def test_oldest_unique_commit_without_base_walks_everything(self) -> None:
		"""With nothing hidden the root commit is the oldest."""
		oldest = self.graph.oldest_unique_commit(self.f2, None)
		assert oldest is not None
		assert oldest.id == self.a

	def test_oldest_unique_commit_when_tip_is_base(self) -> None:
		"""No commit is unique when the tip is the base."""
		assert self.graph.oldest_unique_commit(self.main_b, self.main_b) is None

	def test_branch_age_uses_first_unique_commit(self) -> None:
		"""A feature branch is dated by its first own commit."""
		assert branch_age(self.graph, self.f2, self.main_c).id == self.f1

	def test_branch_age_falls_back_to_tip(self) -> None:
		"""A branch fully merged into main is dated by its tip."""
		dating = branch_age(self.graph, self.main_b, self.main_c)
		assert dating.id == self.main_b
		assert dating.timestamp == BASE_TIME + DAY

	def test_commit_info_uses_committer_time(self) -> None:
		"""Commit info carries the timestamp and author name."""
		info = self.graph.commit_info(self.main_c)
		assert info.timestamp == BASE_TIME + 10 * DAY
		assert info.author == "Test User"

	def test_list_local_branches(self) -> None:
		"""Local branches are listed by name."""
		refs = self.graph.list_branches(BranchScope.LOCAL)
		assert {ref.name for ref in refs} == {"main", "feature"}
		assert all(ref.kind is BranchKind.LOCAL for ref in refs)

	def test_list_all_puts_local_before_remote(self) -> None:
		"""Remote-tracking branches follow local ones."""
		self.builder.remote_branch("origin", "feature", self.f2)
		refs = self.graph.list_branches(BranchScope.ALL)
		kinds = [ref.kind for ref in refs]
		assert kinds == sorted(kinds, key=lambda kind: kind is BranchKind.REMOTE)
		assert BranchRef("origin/feature", BranchKind.REMOTE) in refs
		assert self.graph.list_branches(BranchScope.REMOTE) == [BranchRef("origin/feature", BranchKind.REMOTE)]

	def test_resolve_branch(self) -> None:
		"""Branches peel to their tip commit."""
		assert self.graph.resolve_branch(BranchRef("feature")) == self.f2
		self.builder.remote_branch("origin", "main", self.main_b)
		assert self.graph.resolve_branch(BranchRef("origin/main", BranchKind.REMOTE)) == self.main_b

	def test_resolve_missing_branch(self) -> None:
		"""Unknown branches raise a resolution error."""
		with pytest.raises(ReferenceResolutionError, match="nope"):
			self.graph.resolve_branch(BranchRef("nope"))

	def test_find_local_branch(self) -> None:
		"""Missing branches resolve to None rather than raising."""
		assert self.graph.find_local_branch("main") == self.main_c
		assert self.graph.find_local_branch("develop") is None

	def test_resolve_main_branch_prefers_main(self) -> None:
		"""main wins over master when both exist."""
		self.builder.branch("master", self.a)
		assert resolve_main_branch(self.graph) == self.main_c


@pytest.mark.git
class TestResolveMainBranch:
	"""Main branch fallback."""

	def test_falls_back_to_master(self, tmp_path) -> None:
		"""master is used when main does not exist."""
		builder = RepoBuilder(tmp_path / "repo", initial_head="master")
		builder.write("a.txt", "a\n")
		builder.stage("a.txt")
		tip = builder.commit("initial", branch="master")
		assert resolve_main_branch(RepositoryGraph(builder.repo)) == tip

	def test_neither_branch_exists(self, tmp_path) -> None:
		"""A clear error is raised when no comparison branch exists."""
		builder = RepoBuilder(tmp_path / "repo", initial_head="trunk")
		builder.write("a.txt", "a\n")
		builder.stage("a.txt")
		builder.commit("initial", branch="trunk")
		with pytest.raises(NoMainBranchError, match="main, master"):
			resolve_main_branch(RepositoryGraph(builder.repo))
