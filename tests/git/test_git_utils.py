"""Tests for the repository handle."""

from __future__ import annotations

from unittest.mock import MagicMock, PropertyMock, patch

import pytest
from pygit2 import Commit
from pygit2 import GitError as Pygit2GitError

from gyst.git.utils import GitError, GitRepoContext, RepositoryNotFoundError
from tests.base import GitTestBase


class TestGitRepoContext(GitTestBase):
	"""Opening repositories and writing commits."""

	def test_open_discovers_from_subdirectory(self) -> None:
		"""Parent directories are searched."""
		nested = self.repo_path / "src" / "pkg"
		nested.mkdir(parents=True)

		ctx = GitRepoContext.open(nested)

		assert ctx.workdir is not None
		assert ctx.workdir.resolve() == self.repo_path.resolve()

	def test_open_outside_repository(self, tmp_path) -> None:
		"""A directory with no repository above it is an error."""
		with (
			patch("gyst.git.utils.discover_repository", return_value=None),
			pytest.raises(RepositoryNotFoundError, match="Failed to find git repository"),
		):
			GitRepoContext.open(tmp_path / "elsewhere")

	def test_current_branch(self) -> None:
		"""Unborn HEAD has no branch name; after a commit it does."""
		ctx = GitRepoContext(self.repo)
		assert ctx.current_branch() == ""
		self.builder.write("a.txt", "a\n")
		self.builder.stage("a.txt")
		self.builder.commit("initial")
		assert ctx.current_branch() == "main"

	def test_stage_all_includes_new_and_deleted_files(self) -> None:
		"""Everything in the working tree is staged."""
		self.builder.write("tracked.txt", "one\n")
		self.builder.stage("tracked.txt")
		self.builder.commit("initial")
		(self.repo_path / "tracked.txt").unlink()
		self.builder.write("new.txt", "two\n")
		ctx = GitRepoContext(self.repo)
		assert ctx.has_any_changes()

		ctx.stage_all()

		paths = {entry.path for entry in self.repo.index}
		assert paths == {"new.txt"}

	def test_has_any_changes_on_clean_tree(self) -> None:
		"""A clean working tree reports no changes."""
		self.builder.write("a.txt", "a\n")
		self.builder.stage("a.txt")
		self.builder.commit("initial")
		assert not GitRepoContext(self.repo).has_any_changes()

	def test_create_initial_commit(self) -> None:
		"""The first commit has no parents."""
		self.builder.write("a.txt", "a\n")
		self.builder.stage("a.txt")
		ctx = GitRepoContext(self.repo)

		commit_id = ctx.create_commit("feat: first")

		head = self.repo.head.peel(Commit)
		assert str(head.id) == commit_id
		assert head.message == "feat: first"
		assert head.parents == []

	def test_create_commit_on_top_of_head(self) -> None:
		"""Later commits use HEAD as parent."""
		self.builder.write("a.txt", "a\n")
		self.builder.stage("a.txt")
		first = self.builder.commit("initial")
		self.builder.write("a.txt", "b\n")
		self.builder.stage("a.txt")

		GitRepoContext(self.repo).create_commit("fix: second")

		head = self.repo.head.peel(Commit)
		assert [str(parent.id) for parent in head.parents] == [first]

	def test_create_commit_without_identity(self) -> None:
		"""A missing identity gives a helpful error."""
		repo = MagicMock()
		type(repo).default_signature = PropertyMock(side_effect=KeyError("user.name"))

		with pytest.raises(GitError, match="user.name and user.email"):
			GitRepoContext(repo).create_commit("msg")

	def test_create_commit_failure(self) -> None:
		"""libgit2 failures are wrapped."""
		repo = MagicMock()
		repo.head_is_unborn = True
		repo.create_commit.side_effect = Pygit2GitError("locked")

		with pytest.raises(GitError, match="Failed to create commit: locked"):
			GitRepoContext(repo).create_commit("msg")
