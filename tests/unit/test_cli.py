"""Unit tests for argument parsing and configuration in gitviz.py."""
import logging

import pytest

from gitviz import VisualizerConfig, main, parse_args


class TestParseArgs:
    """Tests for the command line surface."""

    def test_defaults(self):
        config = VisualizerConfig.from_args(parse_args([]))
        assert config.repo_path == "."
        assert config.limit == 50
        assert config.top_authors == 5
        assert config.plot_path is None
        assert config.display_mode == "graph"
        assert config.log_level == logging.WARNING

    def test_short_flags(self):
        args = parse_args(["some/repo", "-n", "0", "-c", "-vv"])
        config = VisualizerConfig.from_args(args)
        assert config.repo_path == "some/repo"
        assert config.limit == 0
        assert config.display_mode == "compact"
        assert config.log_level == logging.DEBUG

    @pytest.mark.parametrize(
        "argv, mode",
        [
            (["--stats"], "stats"),
            (["--timeline"], "timeline"),
            (["-s", "-t"], "stats"),
            (["-c", "-t"], "timeline"),
            (["--compact"], "compact"),
        ],
    )
    def test_display_mode_precedence(self, argv, mode):
        assert VisualizerConfig.from_args(parse_args(argv)).display_mode == mode

    def test_version(self, capsys):
        with pytest.raises(SystemExit) as exc:
            parse_args(["--version"])
        assert exc.value.code == 0
        assert "gitviz" in capsys.readouterr().out


class TestVisualizerConfig:
    def test_rejects_non_positive_top_authors(self):
        with pytest.raises(ValueError):
            VisualizerConfig(top_authors=0)

    def test_main_reports_invalid_arguments(self, capsys):
        assert main(["--top-authors", "0"]) == 1
        assert "Invalid arguments" in capsys.readouterr().err
