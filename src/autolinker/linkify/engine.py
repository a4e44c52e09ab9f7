#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/autolinker/linkify/engine.py
"""Auto-link normalization engine.

The engine keeps a document consistent with one rule: every maximal
URL-shaped substring that is properly delimited is wrapped in exactly one
:class:`~autolinker.ast.nodes.AutoLink`, and nothing else is. It runs as the
per-node handler of a :class:`~autolinker.editor.tree.DocumentTree` and
applies at most one rewrite each time a Text leaf is visited:

Text inside a link (``review_existing_link``)
    0. A link nested in another link is unwrapped.
    1. A link holding anything but Text is unwrapped.
    2. A link whose text is not exactly one URL is unwrapped.
    3. A link ending in ``.`` or ``?`` is re-wrapped without that character.
    4. A link touching a non-separator neighbour is unwrapped.
    5. A link whose ``url`` differs from its text gets ``url`` resynced.

Text outside a link (``try_create_link`` then ``resolve_neighbours``)
    - The leftmost URL in the text is wrapped when it is delimited.
    - Otherwise a neighbouring link is unwrapped when this text touches it
      without a separator, and a ``.``/``?`` + alphanumerics continuation is
      merged back into the link text it continues.

Every rewrite dirties the nodes it touches and the tree keeps draining its
worklist until a pass performs no rewrite. Applied rewrites are logged and
appended to :attr:`AutoLinkEngine.rewrites`.

Examples
--------
    >>> document, rewrites = linkify(document_from_text("Visit https://a.com for info"))
    >>> [r.kind.value for r in rewrites]
    ['wrap']

"""

from __future__ import annotations

import copy
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from autolinker.ast.nodes import AutoLink, Document, Node, Paragraph, Text, node_text
from autolinker.editor.location import Path, Point, Range, next_path
from autolinker.editor.tree import DocumentTree, EditHandler, NodeHandler
from autolinker.exceptions import StalePathError, TreeError
from autolinker.linkify.boundaries import is_content_around_valid, is_next_node_valid, is_previous_node_valid
from autolinker.linkify.matcher import find_url
from autolinker.linkify.separators import (
    ends_with_period_or_question_mark,
    ends_with_separator,
    starts_with_punctuation_then_alnum,
    starts_with_separator,
)
from autolinker.options import NormalizeOptions

logger = logging.getLogger(__name__)


class RewriteKind(str, Enum):
    """Kinds of tree rewrite the engine performs."""

    WRAP = "wrap"
    UNWRAP = "unwrap"
    RESYNC = "resync"
    TRIM_PUNCTUATION = "trim_punctuation"
    MERGE = "merge"
    DEMOTE = "demote"


@dataclass(frozen=True)
class Rewrite:
    """One applied rewrite.

    Parameters
    ----------
    kind : RewriteKind
        What the rewrite did to the tree
    rule : str
        Which check triggered it
    path : Path
        Path of the affected node when the rewrite was applied
    text : str
        Text of the affected link or span
    url : str or None
        URL involved, when there is one

    """

    kind: RewriteKind
    rule: str
    path: Path
    text: str
    url: Optional[str] = None


class AutoLinkEngine:
    """Maintains auto-links in a :class:`DocumentTree`.

    Parameters
    ----------
    options : NormalizeOptions, optional
        Engine options; defaults are used when omitted

    Examples
    --------
    >>> engine = AutoLinkEngine()
    >>> tree = engine.attach(DocumentTree(document_from_text("See www.example.com.")))
    >>> rewrites = engine.normalize()
    >>> tree.document.children[0].children[1].url
    'www.example.com'

    """

    def __init__(self, options: Optional[NormalizeOptions] = None):
        self.options = options or NormalizeOptions()
        self.rewrites: list[Rewrite] = []
        self.tree: Optional[DocumentTree] = None
        self._next_node_handler: Optional[NodeHandler] = None
        self._next_delete_backward: Optional[EditHandler] = None

    def attach(self, tree: DocumentTree) -> DocumentTree:
        """Install the engine's hooks on ``tree`` and return it.

        Raises
        ------
        TreeError
            If the engine is already attached to a tree

        """
        if self.tree is not None:
            raise TreeError("AutoLinkEngine is already attached to a document tree")
        tree.iteration_factor = self.options.iteration_factor
        self._next_node_handler = tree.on_dirty_node(self.normalize_node)
        self._next_delete_backward = tree.on_delete_backward(self.delete_backward)
        self.tree = tree
        return tree

    def normalize(self, force: bool = True) -> list[Rewrite]:
        """Run the tree to a fixpoint and return the rewrites of this run.

        Parameters
        ----------
        force : bool, default = True
            Re-check every node, not only the dirty ones

        """
        tree = self._require_tree()
        before = len(self.rewrites)
        tree.normalize(force=force)
        return self.rewrites[before:]

    # ------------------------------------------------------------------
    # Hooks
    # ------------------------------------------------------------------

    def normalize_node(self, node: Node, path: Path) -> None:
        """Per-node handler: apply one rule to a Text, then the baseline pass."""
        tree = self._require_tree()
        if isinstance(node, Text):
            try:
                self._apply_rules(node, path)
            except StalePathError as e:
                # The node is still dirty if it needs work; it comes back with a fresh path.
                logger.debug("Abandoned rule at %s: %s", e.path, e.message)
        if tree.is_attached(node):
            self._next_node_handler(node, tree.path_of(node))  # type: ignore[misc]

    def delete_backward(self) -> None:
        """Backward-delete handler: delete, then demote the link at the cursor.

        Editing inside a link always turns it back into plain text; the
        following normalization pass decides whether a (possibly shorter)
        link should be created again.
        """
        tree = self._require_tree()
        self._next_delete_backward()  # type: ignore[misc]
        if not self.options.unwrap_on_backward_delete:
            return
        point = tree.selection_collapsed_at()
        if point is None:
            return
        entry = tree.above(point, AutoLink)
        if entry is None:
            return
        link, path = entry
        self._unwrap(link, path, "backward_delete", kind=RewriteKind.DEMOTE)  # type: ignore[arg-type]
        tree.normalize()

    # ------------------------------------------------------------------
    # Rules
    # ------------------------------------------------------------------

    def _apply_rules(self, node: Text, path: Path) -> Optional[Rewrite]:
        parent, parent_path = self._require_tree().parent_of(path)
        if isinstance(parent, AutoLink):
            return self.review_existing_link(parent, parent_path)
        rewrite = self.try_create_link(node, path)
        if rewrite is None:
            rewrite = self.resolve_neighbours(node, path)
        return rewrite

    def review_existing_link(self, link: AutoLink, path: Path) -> Optional[Rewrite]:
        """Check an existing link and rewrite it when it is no longer valid."""
        tree = self._require_tree()
        if not isinstance(tree.parent_of(path)[0], Paragraph):
            return self._unwrap(link, path, "review.nested")
        if not all(isinstance(child, Text) for child in link.children):
            return self._unwrap(link, path, "review.non_text_child")

        full_text = node_text(link)
        match = find_url(full_text)
        if match is None or not match.spans(full_text):
            return self._unwrap(link, path, "review.not_a_url")

        if ends_with_period_or_question_mark(full_text):
            tree.unwrap(path, expected=link)
            trimmed = full_text[:-1]
            end = self._point_at(path, len(trimmed))
            tree.wrap(Range(anchor=Point(path, 0), focus=end), AutoLink(url=trimmed))
            return self._record(RewriteKind.TRIM_PUNCTUATION, "review.trailing_punctuation", path, full_text, trimmed)

        if not is_previous_node_valid(tree, path) or not is_next_node_valid(tree, path):
            return self._unwrap(link, path, "review.not_isolated")

        if link.url != full_text:
            previous_url = link.url
            tree.set_attribute(path, "url", full_text, expected=link)
            logger.debug("Link url %r resynced to its text", previous_url)
            return self._record(RewriteKind.RESYNC, "review.url_mismatch", path, full_text, full_text)

        return None

    def try_create_link(self, node: Text, path: Path) -> Optional[Rewrite]:
        """Wrap the leftmost URL in ``node`` when it is properly delimited."""
        tree = self._require_tree()
        match = find_url(node.text)
        if match is None:
            return None
        if not is_content_around_valid(tree, node, path, match.start, match.end):
            return None
        tree.wrap(
            Range(anchor=Point(path, match.start), focus=Point(path, match.end)),
            AutoLink(url=match.text),
            expected=node,
        )
        return self._record(RewriteKind.WRAP, "create.delimited_url", path, match.text, match.text)

    def resolve_neighbours(self, node: Text, path: Path) -> Optional[Rewrite]:
        """Unwrap or heal links that ``node`` touches without a separator."""
        tree = self._require_tree()
        previous = tree.previous_sibling(path)
        if previous is not None and isinstance(previous[0], AutoLink):
            link, link_path = previous
            if starts_with_punctuation_then_alnum(node.text):
                text = node_text(link)
                tree.unwrap(link_path, expected=link)
                current = tree.path_of(node)
                before = tree.previous_sibling(current)
                if before is not None and isinstance(before[0], Text):
                    tree.merge_with_previous(current, expected=node)
                return self._record(RewriteKind.MERGE, "neighbours.continuation", link_path, text + node.text, link.url)
            if not starts_with_separator(node.text):
                return self._unwrap(link, link_path, "neighbours.previous_not_separated")

        following = tree.next_sibling(path)
        if following is not None and isinstance(following[0], AutoLink) and not ends_with_separator(node.text):
            return self._unwrap(following[0], following[1], "neighbours.next_not_separated")  # type: ignore[arg-type]

        return None

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _require_tree(self) -> DocumentTree:
        if self.tree is None:
            raise TreeError("AutoLinkEngine is not attached to a document tree")
        return self.tree

    def _unwrap(self, link: AutoLink, path: Path, rule: str, kind: RewriteKind = RewriteKind.UNWRAP) -> Rewrite:
        text = node_text(link)
        self._require_tree().unwrap(path, expected=link)
        return self._record(kind, rule, path, text, link.url)

    def _point_at(self, first: Path, offset: int) -> Point:
        # Walks the runs a link left behind after it was unwrapped.
        tree = self._require_tree()
        current, remaining = first, offset
        while True:
            text = tree.node(current)
            length = len(text.text) if isinstance(text, Text) else 0
            if remaining <= length:
                return Point(current, remaining)
            remaining -= length
            current = next_path(current)

    def _record(self, kind: RewriteKind, rule: str, path: Path, text: str, url: Optional[str] = None) -> Rewrite:
        rewrite = Rewrite(kind=kind, rule=rule, path=path, text=text, url=url)
        self.rewrites.append(rewrite)
        logger.debug("Applied %s (%s) at %s: %r", kind.value, rule, path, text)
        return rewrite


def with_auto_links(tree: DocumentTree, options: Optional[NormalizeOptions] = None) -> DocumentTree:
    """Attach a new :class:`AutoLinkEngine` to ``tree`` and return the tree."""
    return AutoLinkEngine(options).attach(tree)


def linkify(document: Document, options: Optional[NormalizeOptions] = None) -> tuple[Document, list[Rewrite]]:
    """Converge a copy of ``document`` and return it with the applied rewrites.

    Parameters
    ----------
    document : Document
        Document to process; it is not modified
    options : NormalizeOptions, optional
        Engine options

    Returns
    -------
    tuple of (Document, list of Rewrite)
        The converged document and every rewrite applied to reach it

    Raises
    ------
    ConvergenceError
        If the document does not reach a fixpoint within the iteration limit

    """
    engine = AutoLinkEngine(options)
    tree = engine.attach(DocumentTree(copy.deepcopy(document)))
    rewrites = engine.normalize(force=True)
    return tree.document, rewrites


__all__ = [
    "RewriteKind",
    "Rewrite",
    "AutoLinkEngine",
    "with_auto_links",
    "linkify",
]
