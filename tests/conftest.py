"""Pytest configuration and shared fixtures for the autolinker test suite.

This module provides shared fixtures, test configuration, and utilities
that are used across the entire test suite.
"""

import os
from pathlib import Path
from typing import Generator

import pytest
from utils import cleanup_test_dir, create_test_temp_dir

from autolinker.ast.builder import document_from_text
from autolinker.ast.nodes import Document
from autolinker.editor.location import Point
from autolinker.editor.tree import DocumentTree
from autolinker.linkify.engine import AutoLinkEngine

# Configure Hypothesis for property-based testing
try:
    from hypothesis import Phase, Verbosity, settings

    settings.register_profile("ci", max_examples=200, verbosity=Verbosity.verbose)
    settings.register_profile("dev", max_examples=50)
    settings.register_profile(
        "debug", max_examples=10, verbosity=Verbosity.verbose, phases=[Phase.explicit, Phase.reuse, Phase.generate]
    )

    # Load profile from environment or use default
    settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "dev"))
except ImportError:
    # Hypothesis not installed, skip configuration
    pass


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests - fast, isolated component tests")
    config.addinivalue_line("markers", "integration: Integration tests - component interaction tests")
    config.addinivalue_line("markers", "slow: Slow tests that may take several seconds")
    config.addinivalue_line("markers", "cli: Tests related to command-line interface")


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Provide a temporary directory for test files.

    Yields
    ------
    Path
        Temporary directory path that will be cleaned up after test.

    """
    temp_path = create_test_temp_dir()
    try:
        yield temp_path
    finally:
        cleanup_test_dir(temp_path)


@pytest.fixture
def isolated_config(temp_dir: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run from an empty directory with no config file in reach.

    The working directory and the home directory both point at ``temp_dir``
    and ``AUTOLINKER_CONFIG`` is unset.
    """
    work = temp_dir / "work"
    work.mkdir()
    monkeypatch.chdir(work)
    monkeypatch.setenv("HOME", str(temp_dir))
    monkeypatch.delenv("AUTOLINKER_CONFIG", raising=False)
    return work


@pytest.fixture
def sample_text() -> str:
    """Provide prose with several links, punctuation and no-link lines."""
    return (
        "Visit https://example.com for info.\n"
        "Docs live at www.example.org/docs, mirrors at https://mirror.example.net?\n"
        "No links on this line at all"
    )


@pytest.fixture
def sample_document(sample_text: str) -> Document:
    """Provide ``sample_text`` as an unlinked document."""
    return document_from_text(sample_text)


@pytest.fixture
def live_tree() -> tuple[DocumentTree, AutoLinkEngine]:
    """Provide an empty tree with an attached engine and the caret at the start."""
    engine = AutoLinkEngine()
    tree = engine.attach(DocumentTree(document_from_text("")))
    tree.select(Point((0, 0), 0))
    return tree, engine
