"""Git repository access and analysis for gyst."""

from __future__ import annotations

from gyst.git.diff_builder import DiffHunk, DiffLine, StructuredDiffBuilder
from gyst.git.graph import BranchKind, BranchRef, BranchScope, CommitGraph, CommitInfo, RepositoryGraph, TimeAgo
from gyst.git.staged import DiffStats, StagedChangeExtractor, StagedChangeSet
from gyst.git.utils import (
	DiffError,
	GitError,
	GitRepoContext,
	NoMainBranchError,
	ReferenceResolutionError,
	RepositoryNotFoundError,
)

__all__ = [
	"BranchKind",
	"BranchRef",
	"BranchScope",
	"CommitGraph",
	"CommitInfo",
	"DiffError",
	"DiffHunk",
	"DiffLine",
	"DiffStats",
	"GitError",
	"GitRepoContext",
	"NoMainBranchError",
	"ReferenceResolutionError",
	"RepositoryGraph",
	"RepositoryNotFoundError",
	"StagedChangeExtractor",
	"StagedChangeSet",
	"StructuredDiffBuilder",
	"TimeAgo",
]
