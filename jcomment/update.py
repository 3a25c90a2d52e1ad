"""Update an existing comment on a Jira ticket.

The comment body is resolved through a fixed precedence chain:

1. the literal COMMENT-BODY argument,
2. a template file or piped standard input,
3. in non-interactive mode, whatever step 2 produced (possibly nothing),
4. otherwise the current comment is fetched and converted to Markdown,
5. and opened in an editor for the user to change.
"""

import argparse
import logging
import subprocess
import sys
import webbrowser
from enum import Enum
from typing import NoReturn

from jcomment.jira_client import get_browse_url, get_comment, get_server_url, update_comment
from jcomment.project import get_project_key
from jcomment.prompts import (
    ACTION_CANCEL,
    ACTION_SUBMIT,
    PromptCancelled,
    ask_editor,
    ask_select,
    ask_text,
)
from jcomment.stdin import read_file, stdin_has_data
from jcomment.types import UpdateRequest

logger = logging.getLogger(__name__)

MANDATORY_PARAMS_MESSAGE = (
    "`ISSUE-KEY` & `COMMENT-ID` are mandatory when using a non-interactive mode"
)


class BodyState(Enum):
    """Steps of comment body resolution, in precedence order."""

    LITERAL = "literal"
    TEMPLATE = "template"
    NO_INPUT = "no-input"
    PREFILL = "prefill"
    EDIT = "edit"
    DONE = "done"


def fail(message: str) -> NoReturn:
    """Print an error and exit with status 1."""
    print(f"Error: {message}", file=sys.stderr)
    sys.exit(1)


def get_issue_key(project_key: str, key: str) -> str:
    """Expand a bare issue number with the default project key.

    "12" becomes "PROJ-12" when the project key is "PROJ"; anything else
    is treated as a full key and upper-cased.
    """
    key = key.strip()
    if project_key and key.isdigit():
        return f"{project_key}-{key}"
    return key.upper()


def parse_args_and_flags(args: argparse.Namespace, project_key: str) -> UpdateRequest:
    """Build the update request from parsed command line arguments."""
    key = getattr(args, "key", None) or ""
    return UpdateRequest(
        issue_key=get_issue_key(project_key, key) if key else "",
        comment_id=(getattr(args, "comment_id", None) or "").strip(),
        body=getattr(args, "body", None) or "",
        template=getattr(args, "template", None) or "",
        no_input=getattr(args, "no_input", False),
        internal=getattr(args, "internal", False),
        debug=getattr(args, "debug", False),
        web=getattr(args, "web", False),
    )


def is_non_interactive(request: UpdateRequest, stdin_piped: bool) -> bool:
    """Body comes from a pipe or from '--template -', so nobody can answer prompts."""
    return stdin_piped or request.template == "-"


def is_mandatory_params_missing(request: UpdateRequest) -> bool:
    return not request.issue_key or not request.comment_id


def set_issue_key(request: UpdateRequest, project_key: str) -> None:
    if request.issue_key:
        return
    request.issue_key = get_issue_key(project_key, ask_text("Issue key"))


def set_comment_id(request: UpdateRequest) -> None:
    if request.comment_id:
        return
    request.comment_id = ask_text("Comment ID")


def next_state(state: BodyState, request: UpdateRequest) -> BodyState:
    """Transition guard for body resolution."""
    if state is BodyState.LITERAL:
        return BodyState.DONE if request.body else BodyState.TEMPLATE
    if state is BodyState.TEMPLATE:
        return BodyState.NO_INPUT
    if state is BodyState.NO_INPUT:
        return BodyState.DONE if request.no_input else BodyState.PREFILL
    if state is BodyState.PREFILL:
        return BodyState.EDIT
    return BodyState.DONE


def read_template(path: str) -> str:
    """Read the template file or stdin, exiting on failure."""
    try:
        return read_file(path)
    except (OSError, UnicodeDecodeError) as e:
        fail(str(e))


def fetch_default_body(request: UpdateRequest) -> str:
    """Fetch the current comment body as Markdown for the editor."""
    comment = get_comment(request.issue_key, request.comment_id)
    if comment is None:
        sys.exit(1)
    return comment.to_markdown()


def edit_body(default: str) -> str:
    try:
        return ask_editor("Comment body", default)
    except (OSError, subprocess.CalledProcessError) as e:
        fail(f"Editor failed: {e}")


def resolve_body(request: UpdateRequest, stdin_piped: bool) -> BodyState:
    """Resolve request.body in place.

    Args:
        request: Update request with issue key and comment ID set
        stdin_piped: Whether stdin had piped data when the command started

    Returns:
        The state that produced the final body
    """
    default = ""
    state = BodyState.LITERAL
    source = BodyState.LITERAL

    while state is not BodyState.DONE:
        logger.debug("Resolving comment body: %s", state.value)
        if state is BodyState.TEMPLATE and (request.template or stdin_piped):
            default = read_template(request.template)
        elif state is BodyState.NO_INPUT and request.no_input:
            request.body = default
            source = state
        elif state is BodyState.PREFILL and not request.template:
            default = fetch_default_body(request)
        elif state is BodyState.EDIT:
            request.body = edit_body(default)
            source = state
        state = next_state(state, request)

    return source


def confirm_action() -> None:
    """Ask to submit or cancel; anything but submit aborts."""
    action = ask_select("What's next?", [ACTION_SUBMIT, ACTION_CANCEL])
    if action != ACTION_SUBMIT:
        fail("Action aborted")


def navigate(url: str) -> None:
    """Open a URL in the default web browser."""
    try:
        opened = webbrowser.open_new_tab(url)
    except webbrowser.Error as e:
        fail(f"Could not open browser: {e}")
    if not opened:
        fail(f"Could not open browser for {url}")


def commit(request: UpdateRequest, server: str) -> None:
    """Submit the update and report where to find it."""
    print(f"Updating comment {request.comment_id} of {request.issue_key}...")

    if not update_comment(
        request.issue_key, request.comment_id, request.body, request.internal
    ):
        sys.exit(1)

    issue_url = get_browse_url(server, request.issue_key)
    print(f'Comment "{request.comment_id}" of issue "{request.issue_key}" updated')
    print(f"View at: {issue_url}?focusedCommentId={request.comment_id}")

    if request.web:
        navigate(issue_url)


def update_command(args: argparse.Namespace) -> None:
    """Handle update subcommand."""
    project_key = get_project_key()
    request = parse_args_and_flags(args, project_key)

    # Probe once: the template step may drain stdin later
    stdin_piped = stdin_has_data()

    if is_non_interactive(request, stdin_piped):
        logger.debug("Non-interactive mode")
        request.no_input = True

    if request.no_input and is_mandatory_params_missing(request):
        fail(MANDATORY_PARAMS_MESSAGE)

    try:
        set_issue_key(request, project_key)
        set_comment_id(request)
        source = resolve_body(request, stdin_piped)
        if not request.no_input and source is BodyState.EDIT:
            confirm_action()
    except PromptCancelled:
        fail("Action aborted")

    commit(request, get_server_url())
