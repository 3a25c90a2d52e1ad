"""Tests for types module."""

from types import SimpleNamespace

from jcomment.types import LegacyMarkup, RichDocument, UpdateRequest, comment_body_from_raw


ADF_HELLO = {
    "type": "doc",
    "version": 1,
    "content": [{"type": "paragraph", "content": [{"type": "text", "text": "Hello"}]}],
}


class TestCommentBodyFromRaw:
    """Tests for comment_body_from_raw function."""

    def test_dict_is_rich_document(self):
        """ADF dicts become RichDocument."""
        body = comment_body_from_raw(ADF_HELLO)

        assert body == RichDocument(ADF_HELLO)

    def test_resource_with_raw_is_rich_document(self):
        """Objects exposing .raw (jira library resources) are unwrapped."""
        body = comment_body_from_raw(SimpleNamespace(raw=ADF_HELLO))

        assert body == RichDocument(ADF_HELLO)

    def test_string_is_legacy_markup(self):
        """Strings become LegacyMarkup."""
        assert comment_body_from_raw("h1. Title") == LegacyMarkup("h1. Title")

    def test_none_is_empty_markup(self):
        """Missing body becomes empty LegacyMarkup."""
        assert comment_body_from_raw(None) == LegacyMarkup("")


class TestToMarkdown:
    """Each variant translates with its own converter."""

    def test_rich_document(self):
        assert RichDocument(ADF_HELLO).to_markdown() == "Hello"

    def test_legacy_markup(self):
        assert LegacyMarkup("*done*").to_markdown() == "**done**"


class TestUpdateRequest:
    """Tests for UpdateRequest defaults."""

    def test_defaults_are_unresolved(self):
        """A new request has nothing resolved."""
        request = UpdateRequest()

        assert request.issue_key == ""
        assert request.comment_id == ""
        assert request.body == ""
        assert request.template == ""
        assert request.no_input is False
        assert request.internal is False
