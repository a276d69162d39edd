"""
Shared fixtures for the test suite.
"""

import os

import pytest

from orderly.utils.config_manager import CategoryRule, OrganizerConfig
from orderly.utils.logging_config import teardown_logging
from orderly.utils.naming import NamingConvention


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch, tmp_path):
    """Run every test without ORDERLY_ variables or stray config files."""
    for key in list(os.environ):
        if key.startswith("ORDERLY_"):
            monkeypatch.delenv(key, raising=False)
    workdir = tmp_path / "cwd"
    workdir.mkdir()
    monkeypatch.chdir(workdir)
    yield
    teardown_logging()


@pytest.fixture
def categories():
    return (
        CategoryRule.from_dict(
            {"name": "images", "extensions": [".jpg", ".png"], "target_folder": "images"}
        ),
        CategoryRule.from_dict(
            {"name": "documents", "extensions": [".txt", ".pdf"], "target_folder": "documents"}
        ),
    )


@pytest.fixture
def organizer_config(categories):
    return OrganizerConfig(
        categories=categories,
        naming_convention=NamingConvention(type="kebab-case", lowercase=True),
        exclude_patterns=("node_modules/**", ".git/**"),
    )
