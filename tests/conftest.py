"""
Pytest fixtures for the entire test suite.

This file defines:
1. Session-scoped fixtures to generate test repositories once.
2. Function-scoped fixtures to provide Repo objects and readers to tests.
3. In-memory fakes and mocks for the reader and matplotlib.
"""
import io

import pytest
from git import Repo
from rich.console import Console

from git_reader import GitRepositoryReader
from tests.fixtures.create_test_repos import (
    create_linear_repo,
    create_merge_repo,
    create_deletion_repo,
    create_references_repo,
)
from tests.fixtures.fake_repository import FakeRepositoryReader


@pytest.fixture(scope="session")
def test_repos_dir(tmp_path_factory):
    """
    Creates all test repositories once per test session in a temporary directory.
    """
    repos_dir = tmp_path_factory.mktemp("git_repos")

    repo_paths = {
        "linear": repos_dir / "linear",
        "merge": repos_dir / "merge",
        "deletion": repos_dir / "deletion",
        "references": repos_dir / "references",
    }

    create_linear_repo(repo_paths["linear"])
    merge_shas = create_merge_repo(repo_paths["merge"])
    create_deletion_repo(repo_paths["deletion"])
    references_shas = create_references_repo(repo_paths["references"])

    repo_paths["merge_shas"] = merge_shas
    repo_paths["references_shas"] = references_shas
    return repo_paths


@pytest.fixture
def linear_repo(test_repos_dir) -> Repo:
    """Provides a Repo object for the linear-history repository."""
    return Repo(test_repos_dir["linear"])


@pytest.fixture
def merge_repo(test_repos_dir) -> Repo:
    """Provides a Repo object for the repository containing a merge commit."""
    return Repo(test_repos_dir["merge"])


@pytest.fixture
def merge_shas(test_repos_dir):
    """Full hashes of commits A, B, C and D of the merge repository."""
    return test_repos_dir["merge_shas"]


@pytest.fixture
def deletion_repo(test_repos_dir) -> Repo:
    """Provides a Repo object for the repository that deletes a file."""
    return Repo(test_repos_dir["deletion"])


@pytest.fixture
def references_repo(test_repos_dir) -> Repo:
    """Provides a Repo object with a detached HEAD, tags, a side branch and a remote HEAD."""
    return Repo(test_repos_dir["references"])


@pytest.fixture
def references_shas(test_repos_dir):
    """Hashes of root R, side commit S and the annotated tag object."""
    return test_repos_dir["references_shas"]


@pytest.fixture
def empty_repo(tmp_path) -> Repo:
    """Provides an empty, newly initialized repository."""
    return Repo.init(tmp_path)


@pytest.fixture
def reader_for():
    """Wraps a Repo in the GitPython-backed reader."""
    return GitRepositoryReader


@pytest.fixture
def fake_reader() -> FakeRepositoryReader:
    """An empty in-memory repository."""
    return FakeRepositoryReader()


@pytest.fixture
def console():
    """A colorless, fixed-width console whose output can be read back."""
    return Console(file=io.StringIO(), width=120, color_system=None, force_terminal=False)


@pytest.fixture
def mock_plt(monkeypatch):
    """
    Mocks matplotlib.pyplot to prevent plots from being displayed during tests.
    """
    monkeypatch.setattr("matplotlib.pyplot.show", lambda: None)
    monkeypatch.setattr("matplotlib.pyplot.savefig", lambda *args, **kwargs: None)
