"""Data types shared across jcomment."""

from dataclasses import dataclass, field
from typing import Any

from jcomment.mdconv import adf_to_markdown, jira_to_markdown


@dataclass
class UpdateRequest:
    """State of a single comment update, filled in step by step."""

    issue_key: str = ""
    comment_id: str = ""
    body: str = ""
    template: str = ""
    no_input: bool = False
    internal: bool = False
    debug: bool = False
    web: bool = False


@dataclass
class RichDocument:
    """Comment body stored as an Atlassian Document Format tree."""

    doc: dict = field(default_factory=dict)

    def to_markdown(self) -> str:
        return adf_to_markdown(self.doc)


@dataclass
class LegacyMarkup:
    """Comment body stored as Jira wiki markup."""

    text: str = ""

    def to_markdown(self) -> str:
        return jira_to_markdown(self.text)


CommentBody = RichDocument | LegacyMarkup


def comment_body_from_raw(body: Any) -> CommentBody:
    """Wrap a comment body returned by the Jira API in its variant.

    Jira Cloud (REST v3) returns ADF as a dict, or as a resource object
    exposing ``.raw`` when fetched through the jira library. Server/DC
    installations (REST v2) return wiki markup strings.
    """
    if hasattr(body, "raw"):
        body = body.raw
    if isinstance(body, dict):
        return RichDocument(body)
    if body is None:
        return LegacyMarkup("")
    return LegacyMarkup(str(body))
