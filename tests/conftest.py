"""Shared pytest fixtures for jcomment tests."""

import pytest
from unittest.mock import MagicMock

from jcomment import jira_client

JIRA_SERVER = "https://jira.example.com"


@pytest.fixture
def mock_jira():
    """Provide a mock JIRA client.

    The mock is injected into jira_client and automatically reset after the test.

    Usage:
        def test_something(mock_jira):
            mock_jira._get_json.return_value = {"body": "text"}
            # Test code that calls jira_client.get_jira()
    """
    mock = MagicMock()
    mock._options = {"server": JIRA_SERVER}
    jira_client.set_jira(mock)
    yield mock
    jira_client.reset_jira()


@pytest.fixture
def project_dir(tmp_path, monkeypatch):
    """Run the test from an empty directory, optionally holding jcomment.toml.

    Usage:
        def test_something(project_dir):
            (project_dir / "jcomment.toml").write_text('[project]\\nkey = "PROJ"\\n')
    """
    monkeypatch.chdir(tmp_path)
    return tmp_path
