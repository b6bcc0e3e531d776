# git_report.py

"""
git_report.py - Derived views over a loaded HistoryReport.

Tabular helpers return pandas DataFrames so they can be printed, exported or
explored interactively; the plotting helper renders the weekly timeline with
matplotlib.
"""

from datetime import datetime

import matplotlib.pyplot as plt
import pandas as pd

from git_history import HistoryReport

COMMIT_COLUMNS = [
    "hash",
    "message",
    "author",
    "email",
    "timestamp",
    "parents",
    "changes",
    "is_merge",
]


# ============================================================================
# TABULAR VIEWS
# ============================================================================


def commits_dataframe(report: HistoryReport) -> pd.DataFrame:
    """(Accessor) One row per commit summary, in traversal order."""
    if not report.commits:
        return pd.DataFrame(columns=COMMIT_COLUMNS)

    return pd.DataFrame(
        [
            {
                "hash": c.hash,
                "message": c.message,
                "author": c.author,
                "email": c.email,
                "timestamp": c.timestamp,
                "parents": list(c.parents),
                "changes": c.changes,
                "is_merge": c.is_merge,
            }
            for c in report.commits
        ],
        columns=COMMIT_COLUMNS,
    )


def top_authors(report: HistoryReport, top_n: int = 5) -> pd.DataFrame:
    """
    Ranks author emails by commit count, highest first.

    Equal counts keep the order in which authors were first seen.
    """
    if not report.authors:
        return pd.DataFrame(columns=["author_email", "commit_count"])

    tally = pd.Series(dict(report.authors), dtype="int64")
    ranked = tally.sort_values(ascending=False, kind="stable").head(top_n)
    df = ranked.reset_index()
    df.columns = ["author_email", "commit_count"]
    return df


def week_key(timestamp: datetime) -> str:
    """ISO year and week of a timestamp, e.g. '2024-W01'."""
    year, week, _ = timestamp.isocalendar()
    # Zero padding keeps lexicographic order chronological.
    return f"{year:04d}-W{week:02d}"


def weekly_commit_counts(report: HistoryReport) -> pd.DataFrame:
    """Counts commits per ISO week of their author timestamp, oldest week first."""
    if not report.commits:
        return pd.DataFrame(columns=["week", "commit_count"])

    weeks = pd.Series([week_key(c.timestamp) for c in report.commits], dtype="object")
    counts = weeks.value_counts().sort_index()
    df = counts.reset_index()
    df.columns = ["week", "commit_count"]
    return df


# ============================================================================
# VISUALIZATION HELPERS
# ============================================================================


def plot_commit_timeline(report: HistoryReport, save_path: str = None):
    """Creates a bar chart of commits per week."""
    df = weekly_commit_counts(report)
    if df.empty:
        print("No commit data to plot.")
        return

    fig, ax = plt.subplots(figsize=(12, 6))
    ax.bar(df["week"], df["commit_count"], color="#5A56E0")
    ax.set_title("Commits per Week")
    ax.set_xlabel("ISO Week")
    ax.set_ylabel("Number of Commits")
    ax.grid(axis="y", linestyle="--", linewidth=0.5)
    fig.autofmt_xdate()

    if save_path:
        try:
            plt.savefig(save_path, bbox_inches="tight")
        finally:
            plt.close(fig)
    else:
        plt.show()
