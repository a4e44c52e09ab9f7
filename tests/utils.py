"""Test utilities for the autolinker test suite.

This module provides helpers for building documents, summarising their
inline structure, and managing temporary directories.
"""

import shutil
import tempfile
from pathlib import Path

from autolinker.ast.nodes import AutoLink, Document, Paragraph, Text, node_text


def paragraph(*children) -> Paragraph:
    """Build a paragraph from Text and AutoLink children."""
    return Paragraph(children=list(children))


def document(*paragraphs) -> Document:
    """Build a document from paragraphs."""
    return Document(children=list(paragraphs))


def link(url: str, *runs: Text) -> AutoLink:
    """Build a link whose children are ``runs``, or one run holding ``url``."""
    return AutoLink(url=url, children=list(runs) if runs else [Text(url)])


def inline_summary(doc: Document, index: int = 0) -> list[tuple[str, str]]:
    """Summarise the children of paragraph ``index`` as (kind, text) pairs.

    Links are reported as ``("link", url)`` after checking that their text
    matches their url; text runs as ``("text", text)``.
    """
    summary = []
    for child in doc.children[index].children:
        if isinstance(child, AutoLink):
            assert node_text(child) == child.url, f"link text {node_text(child)!r} differs from url {child.url!r}"
            summary.append(("link", child.url))
        else:
            summary.append(("text", child.text))
    return summary


def link_urls(doc: Document) -> list[str]:
    """Return the urls of every link in ``doc`` in document order."""
    urls = []
    for block in doc.children:
        for child in block.children:
            if isinstance(child, AutoLink):
                urls.append(child.url)
    return urls


def plain_text(doc: Document) -> str:
    """Return the text of ``doc`` with paragraphs joined by newlines."""
    return "\n".join(node_text(block) for block in doc.children)


def create_test_temp_dir() -> Path:
    """Create a temporary directory for test files."""
    return Path(tempfile.mkdtemp(prefix="autolinker_test_"))


def cleanup_test_dir(temp_dir: Path) -> None:
    """Remove a temporary test directory and everything in it."""
    shutil.rmtree(temp_dir, ignore_errors=True)
