"""Tests for cli module."""

import logging
from unittest.mock import patch

import pytest

from jcomment.cli import build_parser, main


class TestParser:
    """Tests for the argument parser."""

    def test_update_arguments(self):
        """Positionals and flags are parsed for update."""
        args = build_parser().parse_args(
            ["update", "PROJ-1", "1001", "body text", "-T", "tpl.md", "--internal", "--web"]
        )

        assert args.command == "update"
        assert args.key == "PROJ-1"
        assert args.comment_id == "1001"
        assert args.body == "body text"
        assert args.template == "tpl.md"
        assert args.internal is True
        assert args.web is True
        assert args.no_input is False
        assert args.debug is False

    def test_positionals_are_optional(self):
        """Missing positionals are left for prompts."""
        args = build_parser().parse_args(["update", "--no-input", "--template", "-"])

        assert args.key is None
        assert args.comment_id is None
        assert args.body is None
        assert args.template == "-"
        assert args.no_input is True


class TestMain:
    """Tests for main function."""

    def test_no_command_prints_help(self, capsys):
        """Exits with help when no command is given."""
        with pytest.raises(SystemExit) as exc_info:
            main([])

        assert exc_info.value.code == 1
        assert "update" in capsys.readouterr().out

    def test_dispatches_update(self):
        """Runs the update command handler."""
        with patch("jcomment.cli.update_command") as handler:
            main(["update", "PROJ-1", "1001", "text"])

        handler.assert_called_once()
        assert handler.call_args.args[0].key == "PROJ-1"

    def test_debug_enables_debug_logging(self):
        """--debug configures DEBUG logging, WARNING otherwise."""
        with patch("jcomment.cli.update_command"), patch(
            "jcomment.cli.logging.basicConfig"
        ) as basic_config:
            main(["update", "PROJ-1", "1001", "text", "--debug"])
            main(["update", "PROJ-1", "1001", "text"])

        levels = [c.kwargs["level"] for c in basic_config.call_args_list]
        assert levels == [logging.DEBUG, logging.WARNING]

    def test_unknown_flag_is_usage_error(self, capsys):
        """Bad flags are rejected by argparse."""
        with pytest.raises(SystemExit) as exc_info:
            main(["update", "--bogus"])

        assert exc_info.value.code == 2
