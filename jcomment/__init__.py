"""jcomment - update Jira comments from the command line."""

from importlib.metadata import version
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from jira import JIRA

__version__ = version("jcomment")


def client() -> "JIRA":
    """Get an authenticated Jira client.

    Returns an authenticated jira.JIRA instance using credentials
    from ~/.config/jcomment/credentials.toml.

    Usage:
        import jcomment
        jira = jcomment.client()
        comment = jira.comment("FOO-123", "10001")

    Returns:
        jira.JIRA: Authenticated Jira client
    """
    from jcomment.jira_client import get_jira

    return get_jira()
