"""Shared base classes and helpers for the gyst test suite."""

from __future__ import annotations

from pathlib import Path

import pygit2
import pytest
from pygit2 import Repository, Signature
from typer.testing import CliRunner

BASE_TIME = 1_700_000_000
"""Fixed epoch used for deterministic commit timestamps."""

DAY = 24 * 60 * 60


class RepoBuilder:
	"""Builds throwaway repositories with controlled history."""

	def __init__(self, path: Path, initial_head: str = "main") -> None:
		"""Initialize an empty repository at ``path``."""
		self.path = path
		self.repo: Repository = pygit2.init_repository(str(path), initial_head=initial_head)
		self.repo.config["user.name"] = "Test User"
		self.repo.config["user.email"] = "test@example.com"

	def write(self, rel_path: str, content: str) -> Path:
		"""Write a file in the working tree."""
		target = self.path / rel_path
		target.parent.mkdir(parents=True, exist_ok=True)
		target.write_text(content, encoding="utf-8")
		return target

	def stage(self, *rel_paths: str) -> None:
		"""Add paths to the index."""
		index = self.repo.index
		for rel_path in rel_paths:
			index.add(rel_path)
		index.write()

	def delete(self, rel_path: str) -> None:
		"""Delete a file from disk and the index."""
		(self.path / rel_path).unlink()
		index = self.repo.index
		index.remove(rel_path)
		index.write()

	def commit(
		self,
		message: str,
		*,
		timestamp: int = BASE_TIME,
		author: str = "Test User",
		branch: str = "main",
		parents: list[str] | None = None,
	) -> str:
		"""
		Commit the current index onto ``branch``.

		Parents default to the current tip of ``branch`` (none for a new branch).
		"""
		signature = Signature(author, f"{author.lower().replace(' ', '.')}@example.com", timestamp, 0)
		tree = self.repo.index.write_tree()
		if parents is None:
			existing = self.repo.branches.local.get(branch)
			parents = [str(existing.target)] if existing is not None else []
		oid = self.repo.create_commit(
			f"refs/heads/{branch}",
			signature,
			signature,
			message,
			tree,
			[pygit2.Oid(hex=parent) for parent in parents],
		)
		return str(oid)

	def branch(self, name: str, commit_id: str) -> None:
		"""Create a local branch at ``commit_id``."""
		self.repo.branches.local.create(name, self.repo.get(commit_id))

	def remote_branch(self, remote: str, name: str, commit_id: str) -> None:
		"""Create a remote-tracking ref without a real remote."""
		self.repo.references.create(f"refs/remotes/{remote}/{name}", pygit2.Oid(hex=commit_id))


@pytest.mark.git
class GitTestBase:
	"""Base class for tests that need a real repository."""

	builder: RepoBuilder

	@pytest.fixture(autouse=True)
	def _git_repo(self, tmp_path: Path) -> None:
		self.builder = RepoBuilder(tmp_path / "repo")
		self.repo = self.builder.repo
		self.repo_path = self.builder.path


@pytest.mark.cli
class CLITestBase:
	"""Base class for command-line tests."""

	runner: CliRunner

	@pytest.fixture(autouse=True)
	def _cli_runner(self) -> None:
		self.runner = CliRunner()


@pytest.mark.fs
class FileSystemTestBase:
	"""Base class for tests that work inside a temporary directory."""

	temp_dir: Path

	@pytest.fixture(autouse=True)
	def _temp_cwd(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
		self.temp_dir = tmp_path
		monkeypatch.chdir(tmp_path)
