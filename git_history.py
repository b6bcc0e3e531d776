# git_history.py
"""
Single-pass history aggregation.

Walks the commit log once, counts the changes each commit introduces against
its first parent, and folds the results into an in-memory HistoryReport:
ordered commit summaries, an author tally, and running line/file totals.
References are indexed in a separate pass by load_branches().

The fold step (accumulate) takes and returns the report explicitly, so it
can be exercised without any repository at all.
"""

import logging
from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, NamedTuple, Tuple

from tqdm import tqdm

from git_reader import (
    CommitRecord,
    PatchGenerationError,
    RepositoryReader,
    patch_line_stats,
)

logger = logging.getLogger(__name__)

SHORT_HASH_LENGTH = 7

BranchIndex = Dict[str, List[str]]


def short_hash(hexsha: str, length: int = SHORT_HASH_LENGTH) -> str:
    """Truncates a hex identifier, returning it unchanged when already shorter."""
    if len(hexsha) < length:
        return hexsha
    return hexsha[:length]


def first_line(message: str) -> str:
    return message.split("\n")[0]


# ============================================================================
# REPORT MODEL
# ============================================================================


class ChangeCount(NamedTuple):
    count: int
    files: Tuple[str, ...]
    additions: int
    deletions: int


@dataclass(frozen=True)
class CommitSummary:
    """One visited commit, reduced to what the reports display."""

    hash: str
    message: str
    author: str
    email: str
    timestamp: datetime
    parents: Tuple[str, ...] = ()
    files: Tuple[str, ...] = ()

    @property
    def changes(self) -> int:
        return len(self.files)

    @property
    def is_merge(self) -> bool:
        return len(self.parents) > 1


@dataclass
class AggregateStats:
    total_files_changed: int = 0
    total_additions: int = 0
    total_deletions: int = 0


@dataclass
class HistoryReport:
    """Everything the renderer needs, built up by the aggregation pass."""

    commits: List[CommitSummary] = field(default_factory=list)
    commit_map: Dict[str, CommitSummary] = field(default_factory=dict)
    authors: Counter = field(default_factory=Counter)
    stats: AggregateStats = field(default_factory=AggregateStats)
    branches: BranchIndex = field(default_factory=dict)


# ============================================================================
# CHANGE COUNTER
# ============================================================================


def count_changes(record: CommitRecord, reader: RepositoryReader) -> ChangeCount:
    """
    Counts the files and lines a commit changed relative to its first parent.

    Root commits report no changes. Merge commits are only compared with
    their first parent, so their volume is understated. Entries whose patch
    cannot be produced are skipped; any other reader failure propagates.
    """
    if not record.parents:
        return ChangeCount(0, (), 0, 0)

    files = []
    additions = 0
    deletions = 0
    for entry in reader.diff_first_parent(record):
        try:
            added, deleted = patch_line_stats(entry.patch)
        except PatchGenerationError as e:
            logger.debug(
                f"Skipping {entry.b_path or entry.a_path} in {short_hash(record.hexsha)}: {e}"
            )
            continue

        additions += added
        deletions += deleted

        # Deleted files still count towards the line totals above.
        if entry.b_path is not None:
            files.append(entry.b_path)

    return ChangeCount(len(files), tuple(files), additions, deletions)


# ============================================================================
# HISTORY AGGREGATOR
# ============================================================================


def summarize_commit(record: CommitRecord, change_count: ChangeCount) -> CommitSummary:
    return CommitSummary(
        hash=short_hash(record.hexsha),
        message=first_line(record.message),
        author=record.author_name,
        email=record.author_email,
        timestamp=record.authored_datetime,
        parents=tuple(short_hash(p) for p in record.parents),
        files=change_count.files,
    )


def accumulate(
    report: HistoryReport, record: CommitRecord, change_count: ChangeCount
) -> HistoryReport:
    """Folds one commit into the report and returns it."""
    summary = summarize_commit(record, change_count)

    report.commits.append(summary)
    report.commit_map[summary.hash] = summary
    report.authors[summary.email] += 1

    report.stats.total_files_changed += change_count.count
    report.stats.total_additions += change_count.additions
    report.stats.total_deletions += change_count.deletions
    return report


def load_commits(
    reader: RepositoryReader, limit: int = 0, show_progress: bool = False
) -> HistoryReport:
    """
    Builds a HistoryReport from every commit reachable from HEAD and all refs.

    With limit > 0 only the first `limit` commits in committer-time order are
    summarized; the walk itself still runs to the end. Any reader failure
    aborts the load and no partial report is returned.
    """
    head = reader.head()
    logger.info(f"Walking history from {short_hash(head)} (limit={limit})")

    report = HistoryReport()
    visited = 0
    commits = tqdm(
        reader.iter_commits(head, all_refs=True),
        desc="Loading commits",
        unit="commit",
        disable=not show_progress,
        leave=False,
    )
    for record in commits:
        if limit > 0 and visited >= limit:
            continue
        visited += 1
        report = accumulate(report, record, count_changes(record, reader))

    logger.info(
        f"Loaded {len(report.commits):,} commits from {len(report.authors):,} authors"
    )
    return report


def load_branches(reader: RepositoryReader) -> BranchIndex:
    """
    Indexes direct references by the short hash of their target.

    Names are appended in the order the reference store lists them, without
    sorting or de-duplication. Symbolic references are ignored.
    """
    branches: BranchIndex = {}
    for ref in reader.iter_references():
        if ref.symbolic or ref.target is None:
            continue
        branches.setdefault(short_hash(ref.target), []).append(ref.name)
    logger.info(f"Indexed references on {len(branches):,} commits")
    return branches
