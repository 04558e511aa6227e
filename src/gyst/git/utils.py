"""Repository handle and write operations for gyst."""

from __future__ import annotations

import logging
from pathlib import Path

from pygit2 import Commit, Repository, discover_repository
from pygit2 import GitError as Pygit2GitError
from pygit2.enums import FileStatus

logger = logging.getLogger(__name__)


class GitError(Exception):
	"""Custom exception for Git-related errors."""


class RepositoryNotFoundError(GitError):
	"""Raised when no repository can be discovered from a path."""


class ReferenceResolutionError(GitError):
	"""Raised when a branch, HEAD or other reference cannot be resolved to a commit."""


class NoMainBranchError(ReferenceResolutionError):
	"""Raised when neither of the default comparison branches exists."""


class DiffError(GitError):
	"""Raised when reading the index or object database for a diff fails."""


class GitRepoContext:
	"""Context for Git operations on one repository using pygit2."""

	def __init__(self, repo: Repository) -> None:
		"""
		Initialize the context around an already opened repository.

		Args:
		    repo: The opened pygit2 repository
		"""
		self.repo = repo

	@classmethod
	def get_repo_root(cls, path: Path | None = None) -> Path:
		"""Get the git directory of the repository containing ``path``."""
		start = path or Path.cwd()
		git_dir = discover_repository(str(start))
		if git_dir is None:
			msg = f"Failed to find git repository at or above {start}"
			logger.error(msg)
			raise RepositoryNotFoundError(msg)
		return Path(git_dir)

	@classmethod
	def open(cls, path: Path | None = None) -> GitRepoContext:
		"""
		Open the repository containing ``path``, searching parent directories.

		Args:
		    path: Directory to start searching from (defaults to the cwd)

		Returns:
		    GitRepoContext: A freshly opened repository handle

		Raises:
		    RepositoryNotFoundError: If no repository is found
		"""
		git_dir = cls.get_repo_root(path)
		try:
			repo = Repository(str(git_dir))
		except Pygit2GitError as e:
			msg = f"Failed to find git repository: {e}"
			raise RepositoryNotFoundError(msg) from e
		logger.debug("Opened repository at %s", repo.workdir or repo.path)
		return cls(repo)

	@property
	def workdir(self) -> Path | None:
		"""Working tree root, or None for bare repositories."""
		return Path(self.repo.workdir) if self.repo.workdir else None

	def current_branch(self) -> str:
		"""
		Get the current branch name.

		Returns:
			str: The branch shorthand, or empty string if detached or unborn.
		"""
		if self.repo.head_is_unborn or self.repo.head_is_detached:
			return ""
		return self.repo.head.shorthand or ""

	def stage_all(self) -> None:
		"""Stage every change in the working tree, including deletions and new files."""
		try:
			index = self.repo.index
			index.add_all()
			for path, flags in self.repo.status().items():
				if flags & FileStatus.WT_DELETED and path in index:
					index.remove(path)
			index.write()
		except Pygit2GitError as e:
			msg = f"Failed to stage changes: {e}"
			logger.exception(msg)
			raise GitError(msg) from e
		logger.info("Staged all changes in %s", self.repo.workdir)

	def has_any_changes(self) -> bool:
		"""Check for staged, unstaged or untracked changes (ignored files excluded)."""
		try:
			statuses = self.repo.status()
		except Pygit2GitError as e:
			msg = f"Failed to get repository status: {e}"
			raise GitError(msg) from e
		return any(
			flags != FileStatus.CURRENT and not flags & FileStatus.IGNORED for flags in statuses.values()
		)

	def create_commit(self, message: str) -> str:
		"""
		Commit the current index on top of HEAD.

		Args:
		    message: Commit message

		Returns:
		    str: The new commit id

		Raises:
		    GitError: If the signature, tree or commit cannot be created
		"""
		try:
			signature = self.repo.default_signature
		except (Pygit2GitError, KeyError) as e:
			msg = "Failed to get signature; set user.name and user.email in your git config"
			raise GitError(msg) from e

		try:
			tree_id = self.repo.index.write_tree()
		except Pygit2GitError as e:
			msg = f"Failed to write tree: {e}"
			raise GitError(msg) from e

		parents = [] if self.repo.head_is_unborn else [self.repo.head.peel(Commit).id]
		try:
			oid = self.repo.create_commit("HEAD", signature, signature, message, tree_id, parents)
		except Pygit2GitError as e:
			msg = f"Failed to create commit: {e}"
			logger.exception(msg)
			raise GitError(msg) from e

		logger.info("Created commit %s", oid)
		return str(oid)
