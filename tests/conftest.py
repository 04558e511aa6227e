"""Global test fixtures and configuration."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from tests.base import BASE_TIME, DAY, RepoBuilder

if TYPE_CHECKING:
	from pathlib import Path


@pytest.fixture
def repo_builder(tmp_path: Path) -> RepoBuilder:
	"""An empty repository with ``main`` as the unborn HEAD."""
	return RepoBuilder(tmp_path / "repo")


@pytest.fixture
def branched_repo(repo_builder: RepoBuilder) -> dict[str, str]:
	"""
	A repository with a main line and two feature branches.

	main:      A(day 0) - B(day 1) - C(day 10)
	feature:          \\- F1(day 2) - F2(day 3)     (branched from A)
	merged:   points at B
	"""
	b = repo_builder
	b.write("README.md", "hello\n")
	b.stage("README.md")
	a = b.commit("initial", timestamp=BASE_TIME)
	b.write("main.txt", "one\n")
	b.stage("main.txt")
	main_b = b.commit("main b", timestamp=BASE_TIME + DAY)
	f1 = b.commit("feature 1", timestamp=BASE_TIME + 2 * DAY, author="Alice", branch="feature", parents=[a])
	f2 = b.commit("feature 2", timestamp=BASE_TIME + 3 * DAY, author="Alice", branch="feature", parents=[f1])
	main_c = b.commit("main c", timestamp=BASE_TIME + 10 * DAY, parents=[main_b])
	b.branch("merged", main_b)
	return {"a": a, "main_b": main_b, "main_c": main_c, "f1": f1, "f2": f2}


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Path:
	"""Isolate config lookup and provider credentials from the real environment."""
	home = tmp_path / "home"
	home.mkdir()
	monkeypatch.setenv("HOME", str(home))
	monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)
	monkeypatch.delenv("ANTHROPIC_MODEL", raising=False)
	monkeypatch.setattr("gyst.config.config_loader.xdg_config_home", str(home / ".config"))
	return home
