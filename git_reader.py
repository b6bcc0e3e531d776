# git_reader.py

"""
git_reader.py - Read-only access to a Git repository's history.

Everything the visualizer needs from Git goes through the RepositoryReader
interface: resolving HEAD, walking the commit log, diffing a commit against
its first parent and enumerating references. GitRepositoryReader is the
GitPython-backed implementation used by the command line tool; tests can
supply any other implementation that keeps the same contract.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Iterator, List, Optional, Tuple

from git import Repo, GitCommandError, InvalidGitRepositoryError, NoSuchPathError
from git.exc import BadName, BadObject

logger = logging.getLogger(__name__)


# ============================================================================
# ERRORS
# ============================================================================


class GitVizError(Exception):
    """Base class for every failure raised while reading history."""


class RepositoryOpenError(GitVizError):
    """The path is missing or is not a Git repository."""


class HeadResolutionError(GitVizError):
    """HEAD cannot be resolved to a commit (e.g. the repository is empty)."""


class LogTraversalError(GitVizError):
    """The commit walk could not be started or failed part way."""


class ChangeComputationError(GitVizError):
    """Trees or the diff of a commit against its first parent could not be loaded."""


class PatchGenerationError(GitVizError):
    """A single changed entry has no usable patch."""


class ReferenceEnumerationError(GitVizError):
    """References could not be listed."""


# ============================================================================
# RECORDS
# ============================================================================


@dataclass(frozen=True)
class CommitRecord:
    """A commit as seen by the aggregator, independent of the Git library."""

    hexsha: str
    message: str
    author_name: str
    author_email: str
    authored_datetime: datetime
    committed_datetime: datetime
    parents: Tuple[str, ...] = ()


@dataclass(frozen=True)
class ChangedEntry:
    """
    One entry of a tree diff.

    a_path is None for added files, b_path is None for deleted files.
    patch holds the raw hunks, or None when no patch could be produced.
    """

    a_path: Optional[str]
    b_path: Optional[str]
    patch: Optional[bytes]


@dataclass(frozen=True)
class ReferenceRecord:
    name: str
    target: Optional[str]
    symbolic: bool = False


def patch_line_stats(patch: Optional[bytes]) -> Tuple[int, int]:
    """
    Counts added and deleted lines inside the hunks of a patch.

    Binary patches carry no hunks and count as (0, 0).
    """
    if patch is None:
        raise PatchGenerationError("no patch available")
    if isinstance(patch, str):
        patch = patch.encode("utf-8", errors="replace")
    if not isinstance(patch, bytes):
        raise PatchGenerationError(f"unexpected patch type {type(patch).__name__}")

    additions = 0
    deletions = 0
    in_hunk = False
    for line in patch.splitlines():
        if line.startswith(b"@@"):
            in_hunk = True
        elif not in_hunk:
            continue
        elif line.startswith(b"+"):
            additions += 1
        elif line.startswith(b"-"):
            deletions += 1
    return additions, deletions


# ============================================================================
# READER INTERFACE
# ============================================================================


class RepositoryReader(ABC):
    """Capabilities the history aggregator relies on."""

    @abstractmethod
    def head(self) -> str:
        """Full hex identifier of the commit HEAD points at."""

    @abstractmethod
    def iter_commits(self, start: str, all_refs: bool = True) -> Iterator[CommitRecord]:
        """Commits reachable from start (and every ref when all_refs), newest committer time first."""

    @abstractmethod
    def diff_first_parent(self, record: CommitRecord) -> List[ChangedEntry]:
        """Entries changed between the first parent's tree and the commit's tree."""

    @abstractmethod
    def iter_references(self) -> Iterator[ReferenceRecord]:
        """Every reference in the repository, in store order."""


# ============================================================================
# GITPYTHON IMPLEMENTATION
# ============================================================================


def open_repository(repo_path: str) -> "GitRepositoryReader":
    """Loads a Git repository from a given path."""
    try:
        repo = Repo(repo_path, search_parent_directories=True)
    except (InvalidGitRepositoryError, NoSuchPathError) as e:
        raise RepositoryOpenError(
            f"could not load repository at {repo_path}: is it a valid git repo?"
        ) from e
    logger.info(f"Opened repository at {repo.working_tree_dir or repo.git_dir}")
    return GitRepositoryReader(repo)


def to_commit_record(commit) -> CommitRecord:
    """Converts a git.Commit into a CommitRecord."""
    return CommitRecord(
        hexsha=commit.hexsha,
        message=commit.message,
        author_name=commit.author.name,
        author_email=commit.author.email,
        authored_datetime=commit.authored_datetime,
        committed_datetime=commit.committed_datetime,
        parents=tuple(parent.hexsha for parent in commit.parents),
    )


class GitRepositoryReader(RepositoryReader):
    """RepositoryReader backed by a git.Repo object."""

    def __init__(self, repo: Repo):
        self.repo = repo
        self.logger = logging.getLogger(self.__class__.__name__)

    def head(self) -> str:
        try:
            return self.repo.head.commit.hexsha
        except ValueError as e:
            # An empty repository has an unborn HEAD.
            raise HeadResolutionError(f"failed to get HEAD: {e}") from e

    def iter_commits(self, start: str, all_refs: bool = True) -> Iterator[CommitRecord]:
        # Plain rev-list order: reverse chronological by committer time.
        kwargs = {"all": True} if all_refs else {}
        try:
            for commit in self.repo.iter_commits(start, **kwargs):
                yield to_commit_record(commit)
        except (GitCommandError, ValueError) as e:
            raise LogTraversalError(f"failed to get commit log: {e}") from e

    def diff_first_parent(self, record: CommitRecord) -> List[ChangedEntry]:
        if not record.parents:
            return []
        try:
            commit = self.repo.commit(record.hexsha)
            parent = commit.parents[0]
            # Renames are reported as a deletion plus an addition.
            diffs = parent.diff(commit, create_patch=True, no_renames=True)
        except (GitCommandError, BadName, BadObject, ValueError) as e:
            raise ChangeComputationError(
                f"failed to diff {record.hexsha[:7]} against its first parent: {e}"
            ) from e

        return [
            ChangedEntry(
                a_path=None if d.new_file else d.a_path,
                b_path=None if d.deleted_file else d.b_path,
                patch=d.diff,
            )
            for d in diffs
        ]

    def iter_references(self) -> Iterator[ReferenceRecord]:
        try:
            references = list(self.repo.references)
            head = self.repo.head
            head_detached = head.is_valid() and head.is_detached
        except (GitCommandError, OSError, ValueError) as e:
            raise ReferenceEnumerationError(f"failed to get references: {e}") from e

        if head_detached:
            yield ReferenceRecord(name="HEAD", target=head.commit.hexsha)
        else:
            yield ReferenceRecord(name="HEAD", target=None, symbolic=True)

        for ref in references:
            # is_detached on a ref means it stores a hash rather than another ref name.
            if not ref.is_detached:
                yield ReferenceRecord(name=ref.name, target=None, symbolic=True)
                continue
            try:
                target = ref.object.hexsha
            except (ValueError, BadName, BadObject) as e:
                raise ReferenceEnumerationError(
                    f"failed to resolve reference {ref.path}: {e}"
                ) from e
            yield ReferenceRecord(name=ref.name, target=target)
