"""Jira client wrapper using the jira library."""

import logging
import sys
import tomllib
from pathlib import Path

from jira import JIRA

from jcomment.mdconv import markdown_to_jira
from jcomment.project import INSTALLATION_CLOUD, get_installation, load_config
from jcomment.types import CommentBody, comment_body_from_raw

logger = logging.getLogger(__name__)

CONFIG_DIR = Path.home() / ".config" / "jcomment"
CREDENTIALS_FILE = CONFIG_DIR / "credentials.toml"

# ADF comment bodies are only served by REST API v3
CLOUD_API_BASE = "{server}/rest/api/3/{path}"

# Service desk comment visibility
INTERNAL_PROPERTY = "sd.public.comment"

_jira_client: JIRA | None = None


def get_server_from_config() -> str | None:
    """Get Jira server URL from credentials or jcomment.toml."""
    # First check credentials file
    creds = load_credentials()
    site = creds.get("site")

    # Fall back to jcomment.toml
    if not site:
        config = load_config()
        site = config.get("project", {}).get("site")

    if site:
        if not site.startswith(("https://", "http://")):
            site = f"https://{site}"
        return site.rstrip("/")
    return None


def load_credentials() -> dict:
    """Load credentials from ~/.config/jcomment/credentials.toml."""
    if not CREDENTIALS_FILE.exists():
        return {}

    with open(CREDENTIALS_FILE, "rb") as f:
        return tomllib.load(f)


def get_credentials() -> tuple[str, str, str]:
    """Get Jira credentials from config files.

    Server comes from credentials.toml or jcomment.toml, the login from
    ~/.config/jcomment/credentials.toml.

    Returns:
        Tuple of (server_url, email, api_token)
    """
    server = get_server_from_config()
    creds = load_credentials()
    email = creds.get("email")
    token = creds.get("api_token")

    if not server or not email or not token:
        print(f"Error: Credentials not configured in {CREDENTIALS_FILE}", file=sys.stderr)
        print(
            "\nAdd 'email' and 'api_token' there, and 'site' there or in the "
            "[project] section of jcomment.toml.",
            file=sys.stderr,
        )
        sys.exit(1)

    return server, email, token


def get_jira() -> JIRA:
    """Get a cached JIRA client instance.

    Returns:
        Authenticated JIRA client
    """
    global _jira_client
    if _jira_client is None:
        server, email, token = get_credentials()
        logger.debug("Connecting to %s as %s", server, email)
        _jira_client = JIRA(server=server, basic_auth=(email, token))
    return _jira_client


def set_jira(client) -> None:
    """Replace the cached client (used by tests)."""
    global _jira_client
    _jira_client = client


def reset_jira() -> None:
    """Drop the cached client."""
    global _jira_client
    _jira_client = None


def get_server_url() -> str:
    """Get the Jira server URL."""
    server, _, _ = get_credentials()
    return server


def get_browse_url(server: str, key: str) -> str:
    """Get the browse URL of an issue."""
    return f"{server.rstrip('/')}/browse/{key}"


def get_comment(key: str, comment_id: str) -> CommentBody | None:
    """Fetch the body of an existing comment.

    Cloud installations are read through REST v3 so the body comes back as
    ADF; local (Server/DC) installations return wiki markup through v2.

    Args:
        key: Ticket key (e.g., PROJ-123)
        comment_id: Comment ID

    Returns:
        The comment body, or None if the comment could not be fetched
    """
    jira = get_jira()
    path = f"issue/{key}/comment/{comment_id}"
    try:
        if get_installation() == INSTALLATION_CLOUD:
            data = jira._get_json(path, base=CLOUD_API_BASE)
        else:
            data = jira._get_json(path)
    except Exception as e:
        print(f"Error fetching comment {comment_id} of {key}: {e}", file=sys.stderr)
        return None

    logger.debug("Fetched comment %s of %s", comment_id, key)
    return comment_body_from_raw(data.get("body"))


def comment_payload(body: str, internal: bool) -> dict:
    """Build the REST v2 request body for a comment update."""
    return {
        "body": markdown_to_jira(body),
        "properties": [{"key": INTERNAL_PROPERTY, "value": {"internal": internal}}],
    }


def update_comment(key: str, comment_id: str, body: str, internal: bool) -> bool:
    """Replace the body of a comment.

    The internal property is always sent, so updating without ``internal``
    makes a previously internal comment public again.

    Args:
        key: Ticket key (e.g., PROJ-123)
        comment_id: Comment ID
        body: New comment text in Markdown
        internal: Mark the comment as internal (service desk projects)

    Returns:
        True if successful, False otherwise
    """
    jira = get_jira()
    # Comment.update only sends the property when is_internal is true
    url = f'{jira._options["server"]}/rest/api/2/issue/{key}/comment/{comment_id}'
    try:
        resp = jira._session.put(url, json=comment_payload(body, internal))
        resp.raise_for_status()
        return True
    except Exception as e:
        print(f"Error updating comment {comment_id} of {key}: {e}", file=sys.stderr)
        return False
