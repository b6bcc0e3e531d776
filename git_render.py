# git_render.py
"""
Terminal rendering of a HistoryReport.

Pure presentation: every number shown here was computed by git_history or
git_report. Commit text is always wrapped in rich Text objects so that
brackets in messages or branch names are never interpreted as markup.
"""

import logging
from datetime import datetime

from rich import box
from rich.console import Console, Group
from rich.padding import Padding
from rich.panel import Panel
from rich.text import Text

from git_history import CommitSummary, HistoryReport
from git_report import top_authors, weekly_commit_counts

COMPACT_MESSAGE_WIDTH = 50
TIMELINE_BAR_WIDTH = 50

HASH_STYLE = "bold bright_red"
AUTHOR_STYLE = "bright_green"
MESSAGE_STYLE = "bright_white"
BRANCH_STYLE = "bright_yellow"
FILE_STYLE = "bright_blue"
META_STYLE = "bright_cyan"
MERGE_STYLE = "bold bright_magenta"
CONNECTOR_STYLE = "cyan"
BORDER_STYLE = "color(63)"
HEADER_STYLE = "bold #FFFFFF on #5A56E0"
FOOTER_STYLE = "#5A56E0"


def format_timestamp(timestamp: datetime) -> str:
    """Formats like 'Mon Jan 2 15:04:05 2006 -0700'."""
    return f"{timestamp:%a %b} {timestamp.day} {timestamp:%H:%M:%S %Y %z}".rstrip()


def header(title: str) -> Text:
    return Text(f" {title} ", style=HEADER_STYLE)


def bordered(renderable) -> Panel:
    return Panel(
        renderable,
        box=box.ROUNDED,
        border_style=BORDER_STYLE,
        padding=(1, 2),
        expand=False,
    )


class HistoryRenderer:
    """Writes the graph, statistics and timeline views to a rich Console."""

    def __init__(self, console: Console = None):
        self.console = console or Console()
        self.logger = logging.getLogger(self.__class__.__name__)

    # ------------------------------------------------------------------
    # Graph
    # ------------------------------------------------------------------

    def display_graph(self, report: HistoryReport, compact: bool = False):
        self.console.print(bordered(header("Git Repository Visualizer")))
        self.console.print()

        if compact:
            line = Text()
            for i, commit in enumerate(report.commits):
                if i:
                    line.append(" → ")
                line.append_text(self.compact_commit(commit, report))
            self.console.print(line)
        else:
            for i, commit in enumerate(report.commits):
                self.console.print(self.detailed_commit(commit, report))
                if i < len(report.commits) - 1:
                    self.console.print(Text("│", style=CONNECTOR_STYLE))
                    self.console.print(Text("▼", style=CONNECTOR_STYLE))

        self.console.print()
        self.console.print(
            Text(f" Showing {len(report.commits)} commits ", style=FOOTER_STYLE)
        )

    def compact_commit(self, commit: CommitSummary, report: HistoryReport) -> Text:
        text = Text()
        text.append(commit.hash, style=HASH_STYLE)
        if commit.is_merge:
            text.append(" (merge)", style=MERGE_STYLE)
        text.append(" ")
        text.append(commit.message[:COMPACT_MESSAGE_WIDTH], style=MESSAGE_STYLE)
        if len(commit.message) > COMPACT_MESSAGE_WIDTH:
            text.append("...")
        text.append(" ")
        text.append(f"({commit.author})", style=AUTHOR_STYLE)
        branches = report.branches.get(commit.hash)
        if branches:
            text.append(f" [{', '.join(branches)}]", style=BRANCH_STYLE)
        return text

    def detailed_commit(self, commit: CommitSummary, report: HistoryReport) -> Text:
        text = Text()
        text.append(f"Commit: {commit.hash}\n", style=HASH_STYLE)
        if commit.is_merge:
            text.append("Merge commit\n", style=MERGE_STYLE)
        text.append(f"Author: {commit.author} <{commit.email}>\n", style=AUTHOR_STYLE)
        text.append(f"Date:   {format_timestamp(commit.timestamp)}\n", style=META_STYLE)
        text.append("\n")
        text.append(f"    {commit.message}\n", style=MESSAGE_STYLE)
        text.append("\n")

        branches = report.branches.get(commit.hash)
        if branches:
            text.append(f"Branches: {', '.join(branches)}\n", style=BRANCH_STYLE)

        text.append(f"Files changed: {commit.changes}\n", style=FILE_STYLE)
        for path in commit.files:
            text.append(f"    {path}\n")

        if commit.parents:
            text.append(f"Parents: {', '.join(commit.parents)}\n", style=META_STYLE)
        return text

    # ------------------------------------------------------------------
    # Statistics and timeline panels
    # ------------------------------------------------------------------

    def display_stats(self, report: HistoryReport, top_n: int = 5):
        lines = [
            f"Total Commits:    {len(report.commits)}",
            f"Files Changed:    {report.stats.total_files_changed}",
            f"Lines Added:      {report.stats.total_additions}",
            f"Lines Deleted:    {report.stats.total_deletions}",
            "",
            "Top Authors:",
        ]
        for row in top_authors(report, top_n=top_n).itertuples(index=False):
            lines.append(f"- {row.author_email}: {row.commit_count} commits")

        self.console.print(
            bordered(
                Group(
                    header("Repository Statistics"),
                    Padding(Text("\n".join(lines)), (0, 1)),
                )
            )
        )

    def display_timeline(self, report: HistoryReport):
        lines = []
        for row in weekly_commit_counts(report).itertuples(index=False):
            bar = "■" * row.commit_count
            if len(bar) > TIMELINE_BAR_WIDTH:
                bar = bar[:TIMELINE_BAR_WIDTH] + "..."
            lines.append(f"{row.week}: {bar} {row.commit_count} commits")

        if not lines:
            self.logger.info("No commits to place on the timeline")

        self.console.print(
            bordered(
                Group(
                    header("Commit Timeline"),
                    Padding(Text("\n".join(lines)), (0, 1)),
                )
            )
        )
