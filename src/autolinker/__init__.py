"""autolinker - keep URLs in rich-text documents wrapped in auto-links.

autolinker maintains one rule over a tree-structured rich-text document:
every URL-shaped substring that is properly delimited by whitespace or
sentence punctuation is wrapped in exactly one link node, and nothing else
is. The rule is restored incrementally after every edit by a normalization
engine that applies one local rewrite at a time (wrap, unwrap, resync, trim
trailing punctuation, merge) until the document reaches a fixpoint.

Key Features
------------
- Incremental normalization driven by a dirty-node worklist
- Editing primitives with selection tracking (insert, backward delete, paste)
- Stale-path detection for rules working on a changing tree
- Native and Slate-shaped JSON, HTML and Markdown output
- Invariant checker for converged documents

Requirements
------------
- Python 3.10+

Examples
--------
Linkify a detached document:

    >>> from autolinker import document_from_text, linkify
    >>> document, rewrites = linkify(document_from_text("See https://a.com."))
    >>> document.children[0].children[1].url
    'https://a.com'

Keep a live tree linked while editing:

    >>> from autolinker import DocumentTree, Point, with_auto_links
    >>> tree = with_auto_links(DocumentTree(document_from_text("Visit ")))
    >>> tree.select(Point((0, 0), 6))
    >>> tree.insert_text("www.example.com ")

"""

__version__ = "0.1.0"

from autolinker.ast import (
    AutoLink,
    Document,
    DocumentBuilder,
    Paragraph,
    Text,
    check_invariants,
    document_from_text,
)
from autolinker.editor import DocumentTree, Point, Range
from autolinker.exceptions import (
    AutolinkerError,
    ConvergenceError,
    DocumentError,
    StalePathError,
    TreeError,
    ValidationError,
)
from autolinker.linkify import AutoLinkEngine, Rewrite, RewriteKind, find_url, linkify, with_auto_links
from autolinker.options import HtmlRendererOptions, NormalizeOptions

__all__ = [
    "__version__",
    # Document model
    "Document",
    "Paragraph",
    "Text",
    "AutoLink",
    "DocumentBuilder",
    "document_from_text",
    "check_invariants",
    # Editing
    "DocumentTree",
    "Point",
    "Range",
    # Engine
    "AutoLinkEngine",
    "Rewrite",
    "RewriteKind",
    "find_url",
    "linkify",
    "with_auto_links",
    # Options
    "NormalizeOptions",
    "HtmlRendererOptions",
    # Exceptions
    "AutolinkerError",
    "ValidationError",
    "DocumentError",
    "TreeError",
    "StalePathError",
    "ConvergenceError",
]
