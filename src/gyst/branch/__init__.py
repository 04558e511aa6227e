"""Branch health analysis."""

from __future__ import annotations

from gyst.branch.formatter import OutputFormat, format_report
from gyst.branch.health import BranchHealth, BranchHealthClassifier, BranchStatus

__all__ = ["BranchHealth", "BranchHealthClassifier", "BranchStatus", "OutputFormat", "format_report"]
