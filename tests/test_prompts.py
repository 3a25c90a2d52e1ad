"""Tests for prompts module."""

from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from jcomment import prompts
from jcomment.prompts import PromptCancelled, ask_editor, ask_select, ask_text, launch_editor


def _question(answer):
    return MagicMock(ask=MagicMock(return_value=answer))


class TestAskText:
    """Tests for ask_text function."""

    def test_returns_stripped_answer(self):
        """Returns the answer without surrounding whitespace."""
        with patch("jcomment.prompts.questionary.text", return_value=_question(" PROJ-1 ")) as text:
            assert ask_text("Issue key") == "PROJ-1"

        assert text.call_args.args == ("Issue key",)

    def test_cancelled(self):
        """Ctrl-C (None answer) raises PromptCancelled."""
        with patch("jcomment.prompts.questionary.text", return_value=_question(None)):
            with pytest.raises(PromptCancelled):
                ask_text("Issue key")

    def test_validator_requires_value(self):
        """Blank answers are rejected by the validator."""
        assert prompts._required("") == "Value is required"
        assert prompts._required("   ") == "Value is required"
        assert prompts._required("x") is True


class TestAskSelect:
    """Tests for ask_select function."""

    def test_returns_choice(self):
        """Returns the selected option."""
        with patch("jcomment.prompts.questionary.select", return_value=_question("Submit")) as select:
            result = ask_select("What's next?", ["Submit", "Cancel"])

        assert result == "Submit"
        select.assert_called_once_with("What's next?", choices=["Submit", "Cancel"])

    def test_cancelled(self):
        """Ctrl-C (None answer) raises PromptCancelled."""
        with patch("jcomment.prompts.questionary.select", return_value=_question(None)):
            with pytest.raises(PromptCancelled):
                ask_select("What's next?", ["Submit", "Cancel"])


class TestGetEditor:
    """Tests for get_editor function."""

    def test_visual_wins(self, monkeypatch):
        monkeypatch.setenv("VISUAL", "code --wait")
        monkeypatch.setenv("EDITOR", "nano")

        assert prompts.get_editor() == "code --wait"

    def test_falls_back_to_vi(self, monkeypatch):
        monkeypatch.delenv("VISUAL", raising=False)
        monkeypatch.delenv("EDITOR", raising=False)

        assert prompts.get_editor() == "vi"


class TestLaunchEditor:
    """Tests for launch_editor function."""

    def test_edits_temp_file(self, monkeypatch):
        """Editor sees the initial text and its changes are returned."""
        monkeypatch.delenv("VISUAL", raising=False)
        monkeypatch.setenv("EDITOR", "nano -w")
        seen = {}

        def fake_run(cmd, check):
            path = Path(cmd[-1])
            seen["cmd"] = cmd[:-1]
            seen["initial"] = path.read_text()
            seen["path"] = path
            path.write_text(seen["initial"] + " edited\n")

        with patch("jcomment.prompts.subprocess.run", side_effect=fake_run):
            result = launch_editor("Hello")

        assert result == "Hello edited"
        assert seen["cmd"] == ["nano", "-w"]
        assert seen["initial"] == "Hello"
        assert seen["path"].suffix == ".md"
        assert not seen["path"].exists()


class TestAskEditor:
    """Tests for ask_editor function."""

    def test_returns_edited_text(self):
        """Accepted text is returned."""
        with patch("jcomment.prompts.launch_editor", return_value="Hello") as editor:
            assert ask_editor("Comment body", "Hello") == "Hello"

        editor.assert_called_once_with("Hello")

    def test_rejects_blank_and_reopens(self, capsys):
        """Blank results reopen the editor."""
        with patch("jcomment.prompts.launch_editor", side_effect=["  ", "Final"]) as editor:
            assert ask_editor("Comment body", "Draft") == "Final"

        assert editor.call_count == 2
        captured = capsys.readouterr()
        assert "Comment body cannot be empty" in captured.err
