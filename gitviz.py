#!/usr/bin/env python3
"""
gitviz - Visualize Git repositories with style.

Loads the commit history of a repository, then prints a commit graph (or a
compact one-line view), aggregate statistics and a weekly commit timeline.

Examples:
  gitviz
  gitviz /path/to/repo -n 0 --stats
  gitviz -c -n 20
  gitviz --timeline --plot weekly.png
"""

import argparse
import logging
import sys
from dataclasses import dataclass
from typing import Optional

from rich.console import Console

from git_history import load_branches, load_commits
from git_reader import GitVizError, RepositoryOpenError, open_repository
from git_render import HistoryRenderer
from git_report import plot_commit_timeline

__version__ = "1.0.1"

DEFAULT_LIMIT = 50
DEFAULT_TOP_AUTHORS = 5


@dataclass
class VisualizerConfig:
    """Settings for one gitviz run."""

    repo_path: str = "."
    limit: int = DEFAULT_LIMIT
    compact: bool = False
    stats_only: bool = False
    timeline_only: bool = False
    top_authors: int = DEFAULT_TOP_AUTHORS
    plot_path: Optional[str] = None
    show_progress: bool = False
    verbosity: int = 0

    def __post_init__(self):
        if self.top_authors < 1:
            raise ValueError(f"top_authors must be at least 1, got {self.top_authors}")

    @property
    def display_mode(self) -> str:
        if self.stats_only:
            return "stats"
        if self.timeline_only:
            return "timeline"
        return "compact" if self.compact else "graph"

    @property
    def log_level(self) -> int:
        if self.verbosity >= 2:
            return logging.DEBUG
        if self.verbosity == 1:
            return logging.INFO
        return logging.WARNING

    @classmethod
    def from_args(cls, args: argparse.Namespace) -> "VisualizerConfig":
        return cls(
            repo_path=args.repo_path,
            limit=args.limit,
            compact=args.compact,
            stats_only=args.stats,
            timeline_only=args.timeline,
            top_authors=args.top_authors,
            plot_path=args.plot,
            show_progress=args.progress,
            verbosity=args.verbose,
        )


def parse_args(argv=None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="gitviz",
        description="Visualize Git repositories with style.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s
  %(prog)s /path/to/repo -n 0 --stats
  %(prog)s -c -n 20
  %(prog)s --timeline --plot weekly.png
        """,
    )

    parser.add_argument(
        "repo_path",
        nargs="?",
        default=".",
        help="Path to the Git repository (default: current directory)",
    )

    parser.add_argument(
        "-n", "--limit",
        type=int,
        default=DEFAULT_LIMIT,
        help=f"Limit number of commits to display, 0 or less for all (default: {DEFAULT_LIMIT})",
    )

    parser.add_argument(
        "-c", "--compact",
        action="store_true",
        help="Compact display mode",
    )

    parser.add_argument(
        "-s", "--stats",
        action="store_true",
        help="Show only statistics",
    )

    parser.add_argument(
        "-t", "--timeline",
        action="store_true",
        help="Show commit timeline",
    )

    parser.add_argument(
        "--top-authors",
        type=int,
        default=DEFAULT_TOP_AUTHORS,
        help=f"Number of authors listed in the statistics (default: {DEFAULT_TOP_AUTHORS})",
    )

    parser.add_argument(
        "--plot",
        metavar="PATH",
        default=None,
        help="Also save the weekly commit chart to an image file",
    )

    parser.add_argument(
        "--progress",
        action="store_true",
        help="Show a progress bar while loading commits",
    )

    parser.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="Increase log output (-v info, -vv debug)",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    return parser.parse_args(argv)


def setup_logging(level: int):
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )


def fail(message: str) -> int:
    print(message, file=sys.stderr)
    return 1


def run(config: VisualizerConfig, console: Console = None) -> int:
    """Runs one visualization and returns the process exit code."""
    logger = logging.getLogger(__name__)

    try:
        reader = open_repository(config.repo_path)
    except RepositoryOpenError as e:
        return fail(f"Error opening repository: {e}")

    try:
        report = load_commits(
            reader, limit=config.limit, show_progress=config.show_progress
        )
    except GitVizError as e:
        return fail(f"Error loading commits: {e}")

    try:
        report.branches = load_branches(reader)
    except GitVizError as e:
        return fail(f"Error loading branches: {e}")

    renderer = HistoryRenderer(console)
    mode = config.display_mode
    logger.info(f"Rendering {len(report.commits):,} commits in {mode} mode")

    if mode == "stats":
        renderer.display_stats(report, top_n=config.top_authors)
    elif mode == "timeline":
        renderer.display_timeline(report)
    else:
        renderer.display_graph(report, compact=(mode == "compact"))
        renderer.console.print()
        renderer.display_stats(report, top_n=config.top_authors)

    if config.plot_path:
        try:
            plot_commit_timeline(report, save_path=config.plot_path)
        except (OSError, ValueError) as e:
            return fail(f"Error saving plot: {e}")
        logger.info(f"Saved weekly chart to {config.plot_path}")

    return 0


def main(argv=None) -> int:
    args = parse_args(argv)
    try:
        config = VisualizerConfig.from_args(args)
    except ValueError as e:
        return fail(f"Invalid arguments: {e}")
    setup_logging(config.log_level)
    return run(config)


if __name__ == "__main__":
    sys.exit(main())
