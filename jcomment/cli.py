"""jcomment CLI - Main entry point."""

import argparse
import logging
import sys

from jcomment import __version__
from jcomment.update import update_command

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

UPDATE_EPILOG = """examples:
  jcomment update ISSUE-1 986745 "My comment"
  jcomment update ISSUE-1 986745 --template /path/to/template.md
  jcomment update ISSUE-1 986745 --template -
  echo "Comment from stdin" | jcomment update ISSUE-1 986745

The COMMENT-BODY argument takes precedence over --template.
"""


def setup_logging(debug: bool = False) -> None:
    """Configure the root logger; --debug also shows jira/urllib3 requests."""
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format=LOG_FORMAT,
        force=True,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="jcomment",
        description="Update Jira issue comments",
    )
    parser.add_argument(
        "-V",
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Update command
    update_parser = subparsers.add_parser(
        "update",
        help="Update a comment on an issue",
        epilog=UPDATE_EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    update_parser.add_argument(
        "key",
        nargs="?",
        metavar="ISSUE-KEY",
        help="Issue key (e.g., PROJ-123, or 123 with a default project key)",
    )
    update_parser.add_argument(
        "comment_id",
        nargs="?",
        metavar="COMMENT-ID",
        help="ID of the comment to update (e.g., 986745)",
    )
    update_parser.add_argument(
        "body",
        nargs="?",
        metavar="COMMENT-BODY",
        help="New comment text in Markdown",
    )
    update_parser.add_argument(
        "--web",
        action="store_true",
        help="Open issue in web browser after updating the comment",
    )
    update_parser.add_argument(
        "-T",
        "--template",
        help="Path to a file to read the comment body from ('-' for stdin)",
    )
    update_parser.add_argument(
        "--no-input",
        action="store_true",
        help="Disable all prompts (body comes from COMMENT-BODY, --template or stdin)",
    )
    update_parser.add_argument(
        "--internal",
        action="store_true",
        help="Make the comment internal",
    )
    update_parser.add_argument(
        "--debug",
        action="store_true",
        help="Show debug output, including Jira API requests",
    )
    update_parser.set_defaults(func=update_command)

    return parser


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        sys.exit(1)

    setup_logging(getattr(args, "debug", False))
    args.func(args)


if __name__ == "__main__":
    main()
