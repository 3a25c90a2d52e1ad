"""Project configuration handling."""

import tomllib
from pathlib import Path

PROJECT_FILE = "jcomment.toml"

INSTALLATION_CLOUD = "cloud"
INSTALLATION_LOCAL = "local"


def find_project_root() -> Path | None:
    """Search up the directory tree for jcomment.toml."""
    current = Path.cwd()
    for parent in [current, *current.parents]:
        if (parent / PROJECT_FILE).exists():
            return parent
    return None


def load_config() -> dict:
    """Load jcomment.toml if it exists."""
    root = find_project_root()
    if root is None:
        return {}
    with open(root / PROJECT_FILE, "rb") as f:
        return tomllib.load(f)


def get_project_key() -> str:
    """Get the default project key (e.g. "PROJ"), or "" when not configured."""
    config = load_config()
    return config.get("project", {}).get("key", "").strip().upper()


def get_installation() -> str:
    """Get the Jira installation type: "cloud" (default) or "local"."""
    config = load_config()
    installation = config.get("project", {}).get("installation", INSTALLATION_CLOUD)
    if installation.lower() == INSTALLATION_LOCAL:
        return INSTALLATION_LOCAL
    return INSTALLATION_CLOUD
