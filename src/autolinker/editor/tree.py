#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/autolinker/editor/tree.py
"""Editable document tree with primitive operations and a dirty worklist.

``DocumentTree`` owns a :class:`~autolinker.ast.nodes.Document` and is the
only thing that mutates it. It offers three layers:

Navigation
    ``node``, ``path_of``, ``parent_of``, ``children_of``,
    ``previous_sibling``, ``next_sibling``, ``text_of``, ``above``.

Primitive operations
    ``wrap``, ``unwrap``, ``split_text``, ``merge_with_previous``,
    ``set_attribute``, ``insert_node``, ``remove_node``. Primitives only
    record which nodes became dirty; they never normalize.

Edits
    ``insert_text``, ``delete_backward``, ``delete_fragment``,
    ``insert_nodes`` and ``load``. Each edit ends with a normalization pass
    (unless wrapped in ``without_normalizing``).

Nodes are tracked by identity through a parent map, and the dirty worklist
holds node references, so a path is only ever computed at the moment it is
used. Primitives take an optional ``expected`` node and raise
:class:`~autolinker.exceptions.StalePathError` when the path no longer
points at it.

Normalization pops nodes from the worklist (deepest first) and hands each
one to the installed per-node handler. The default handler enforces the
baseline structure of inline content; plug-ins such as the auto-link engine
install their own handler with :meth:`DocumentTree.on_dirty_node` and call
through to the previous one.

Examples
--------
    >>> tree = DocumentTree(Document(children=[Paragraph(children=[Text("Hello")])]))
    >>> tree.select(Point((0, 0), 5))
    >>> tree.insert_text(" world")
    >>> tree.text_of(())
    'Hello world'

"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import fields, replace
from typing import Callable, Optional, Union

from autolinker.ast.nodes import (
    AutoLink,
    Document,
    Inline,
    Node,
    Paragraph,
    Text,
    get_node_children,
    node_text,
)
from autolinker.constants import DEFAULT_ITERATION_FACTOR
from autolinker.editor.location import Path, Point, Range, parent_path
from autolinker.exceptions import ConvergenceError, DocumentError, StalePathError, TreeError, ValidationError

logger = logging.getLogger(__name__)

NodeEntry = tuple[Node, Path]
NodeHandler = Callable[[Node, Path], None]
EditHandler = Callable[[], None]


class _Caret:
    """Selection endpoint held by Text identity rather than by path."""

    __slots__ = ("node", "offset")

    def __init__(self, node: Text, offset: int):
        self.node = node
        self.offset = offset


def _index_of(children: list, node: Node) -> int:
    for index, child in enumerate(children):
        if child is node:
            return index
    raise TreeError(f"{type(node).__name__} node is not a child of its recorded parent")


def _iter_texts(node: Node) -> Iterator[Text]:
    if isinstance(node, Text):
        yield node
        return
    for child in get_node_children(node):
        yield from _iter_texts(child)


def _allowed_children(parent: Node) -> tuple[type, ...]:
    if isinstance(parent, Document):
        return (Paragraph,)
    if isinstance(parent, (Paragraph, AutoLink)):
        return (Text, AutoLink)
    return ()


class DocumentTree:
    """Mutable rich-text document with selection and normalization.

    Parameters
    ----------
    document : Document, optional
        Document to own. The tree mutates it in place. Defaults to an empty
        document.
    iteration_factor : int, default = 42
        Normalization limit per node. A pass that performs more than
        ``iteration_factor * max(initial worklist, node count)`` node
        normalizations raises :class:`ConvergenceError`.

    Raises
    ------
    DocumentError
        If ``document`` nests nodes where the model does not allow them, or
        holds the same node object twice
    ValidationError
        If ``iteration_factor`` is not positive

    """

    def __init__(self, document: Optional[Document] = None, iteration_factor: int = DEFAULT_ITERATION_FACTOR):
        if iteration_factor <= 0:
            raise ValidationError(
                f"iteration_factor must be positive, got {iteration_factor}",
                parameter_name="iteration_factor",
                parameter_value=iteration_factor,
            )
        self.iteration_factor = iteration_factor
        self.document = Document()
        self._parents: dict[int, Node] = {}
        self._dirty: list[Node] = []
        self._dirty_ids: set[int] = set()
        self._selection: Optional[tuple[_Caret, _Caret]] = None
        self._batch_depth = 0
        self._normalizing = False
        self._node_handler: NodeHandler = self.normalize_node
        self._delete_backward_handler: EditHandler = self._delete_backward
        self._adopt(document if document is not None else Document())

    # ------------------------------------------------------------------
    # Hooks
    # ------------------------------------------------------------------

    def on_dirty_node(self, hook: NodeHandler) -> NodeHandler:
        """Install the per-node normalization handler.

        Parameters
        ----------
        hook : callable
            Called as ``hook(node, path)`` for every dirty node

        Returns
        -------
        callable
            The previously installed handler. ``hook`` is expected to call it
            so the baseline normalization keeps running.

        """
        previous = self._node_handler
        self._node_handler = hook
        return previous

    def on_delete_backward(self, hook: EditHandler) -> EditHandler:
        """Install the backward-delete handler and return the previous one."""
        previous = self._delete_backward_handler
        self._delete_backward_handler = hook
        return previous

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    def node(self, path: Path) -> Node:
        """Return the node at ``path``.

        Raises
        ------
        StalePathError
            If ``path`` does not resolve in the current tree

        """
        current: Node = self.document
        for depth, index in enumerate(path):
            children = get_node_children(current)
            if not 0 <= index < len(children):
                raise StalePathError(f"Path {path} does not resolve at depth {depth}", path)
            current = children[index]
        return current

    def has(self, path: Path) -> bool:
        """Return whether ``path`` resolves to a node."""
        try:
            self.node(path)
        except StalePathError:
            return False
        return True

    def is_attached(self, node: Node) -> bool:
        """Return whether ``node`` is currently part of this document."""
        return node is self.document or id(node) in self._parents

    def path_of(self, node: Node) -> Path:
        """Compute the current path of ``node``.

        Raises
        ------
        TreeError
            If ``node`` is not part of this document

        """
        indices: list[int] = []
        current = node
        while current is not self.document:
            parent = self._parents.get(id(current))
            if parent is None:
                raise TreeError(f"{type(node).__name__} node is not part of this document")
            indices.append(_index_of(get_node_children(parent), current))
            current = parent
        return tuple(reversed(indices))

    def parent_of(self, path: Path) -> NodeEntry:
        """Return the ``(node, path)`` entry of the parent of ``path``."""
        self.node(path)
        ppath = parent_path(path)
        return self.node(ppath), ppath

    def children_of(self, path: Path) -> list[NodeEntry]:
        """Return ``(node, path)`` entries for the children of ``path``."""
        return [(child, path + (index,)) for index, child in enumerate(get_node_children(self.node(path)))]

    def previous_sibling(self, path: Path) -> Optional[NodeEntry]:
        """Return the entry of the sibling before ``path``, or None."""
        self.node(path)
        if not path or path[-1] == 0:
            return None
        sibling_path = path[:-1] + (path[-1] - 1,)
        return self.node(sibling_path), sibling_path

    def next_sibling(self, path: Path) -> Optional[NodeEntry]:
        """Return the entry of the sibling after ``path``, or None."""
        self.node(path)
        if not path:
            return None
        sibling_path = path[:-1] + (path[-1] + 1,)
        if not self.has(sibling_path):
            return None
        return self.node(sibling_path), sibling_path

    def text_of(self, target: Union[Node, Path]) -> str:
        """Return the concatenated text of a node or of the node at a path."""
        node = target if isinstance(target, Node) else self.node(target)
        return node_text(node)

    def above(self, at: Union[Point, Path], match: Union[type, tuple[type, ...]]) -> Optional[NodeEntry]:
        """Return the lowest ancestor of ``at`` that is an instance of ``match``."""
        path = at.path if isinstance(at, Point) else at
        current = self.node(path)
        while current is not self.document:
            current = self._parents[id(current)]
            if isinstance(current, match):
                return current, self.path_of(current)
        return None

    def entries(self) -> Iterator[NodeEntry]:
        """Iterate over every ``(node, path)`` in document order, root first."""

        def walk(node: Node, path: Path) -> Iterator[NodeEntry]:
            yield node, path
            for index, child in enumerate(get_node_children(node)):
                yield from walk(child, path + (index,))

        return walk(self.document, ())

    def texts(self) -> Iterator[tuple[Text, Path]]:
        """Iterate over every Text leaf with its path, in document order."""
        for node, path in self.entries():
            if isinstance(node, Text):
                yield node, path

    # ------------------------------------------------------------------
    # Selection
    # ------------------------------------------------------------------

    @property
    def selection(self) -> Optional[Range]:
        """Current selection with freshly computed paths, or None."""
        if self._selection is None:
            return None
        anchor, focus = self._selection
        return Range(
            anchor=Point(self.path_of(anchor.node), anchor.offset),
            focus=Point(self.path_of(focus.node), focus.offset),
        )

    def select(self, target: Union[Range, Point, None]) -> None:
        """Set the selection to a range, a collapsed point, or nothing.

        Raises
        ------
        TreeError
            If a point does not address a Text leaf or its offset is out of range

        """
        if target is None:
            self._selection = None
            return
        if isinstance(target, Point):
            target = Range.collapsed(target)
        self._selection = (self._caret_for(target.anchor), self._caret_for(target.focus))

    def is_selection_collapsed(self) -> bool:
        """Return whether there is a selection and it is a single point."""
        if self._selection is None:
            return False
        anchor, focus = self._selection
        return anchor.node is focus.node and anchor.offset == focus.offset

    def selection_collapsed_at(self) -> Optional[Point]:
        """Return the selection point if the selection is collapsed, else None."""
        if not self.is_selection_collapsed():
            return None
        selection = self.selection
        return selection.anchor if selection is not None else None

    # ------------------------------------------------------------------
    # Primitive operations
    # ------------------------------------------------------------------

    def split_text(self, path: Path, offset: int, expected: Optional[Node] = None) -> Path:
        """Split the Text at ``path`` and return the path of the second half.

        Raises
        ------
        TreeError
            If ``offset`` is not strictly inside the text

        """
        text = self._resolve_text(path, expected)
        if not 0 < offset < len(text.text):
            raise TreeError(f"Cannot split text of length {len(text.text)} at offset {offset}")
        return self.path_of(self._split(text, offset))

    def merge_with_previous(self, path: Path, expected: Optional[Node] = None) -> Path:
        """Append the Text at ``path`` to its previous sibling Text and remove it.

        The previous sibling keeps its own style flags. Returns the path of
        the merged node.
        """
        self._resolve_text(path, expected)
        previous = self.previous_sibling(path)
        if previous is None or not isinstance(previous[0], Text):
            raise TreeError(f"Node at {path} has no previous Text sibling to merge into")
        parent, _ = self.parent_of(path)
        self._merge_into_previous(parent, path[-1])
        return previous[1]

    def set_attribute(self, path: Path, key: str, value: object, expected: Optional[Node] = None) -> None:
        """Set attribute ``key`` of the node at ``path``.

        Raises
        ------
        TreeError
            If ``key`` is not a settable attribute of that node

        """
        node = self._resolve(path, expected)
        settable = {f.name for f in fields(node)} - {"children", "text"}  # type: ignore[arg-type]
        if key not in settable:
            raise TreeError(f"{type(node).__name__} has no settable attribute {key!r}")
        setattr(node, key, value)
        parent = self._parents[id(node)]
        self._touch(parent, path[-1], path[-1])

    def insert_node(self, path: Path, node: Node) -> None:
        """Insert ``node`` so that it ends up at ``path``."""
        parent = self.node(parent_path(path))
        index = path[-1]
        if not 0 <= index <= len(get_node_children(parent)):
            raise StalePathError(f"Cannot insert at {path}: index out of range", path)
        self._insert_child(parent, index, node)

    def remove_node(self, path: Path, expected: Optional[Node] = None) -> Node:
        """Remove and return the node at ``path``."""
        node = self._resolve(path, expected)
        if node is self.document:
            raise TreeError("Cannot remove the document root")
        return self._remove_child(self._parents[id(node)], path[-1])

    def wrap(self, at: Range, element: AutoLink, expected: Optional[Node] = None) -> Path:
        """Wrap the text covered by ``at`` in ``element`` and return its path.

        Text leaves partially covered by the range are split at the range
        edges first. Both edges must lie in Text leaves of the same
        paragraph, and every leaf in between must be a Text. ``expected``
        is checked against the leaf at the start of the range.

        Raises
        ------
        TreeError
            If the range is empty, spans parents, covers a non-Text node, or
            ``element`` already has children

        """
        if element.children:
            raise TreeError("Wrapping element must be empty")
        start, end = at.edges()
        start_text = self._resolve_text(start.path, expected)
        end_text = self._resolve_text(end.path)
        if parent_path(start.path) != parent_path(end.path):
            raise TreeError(f"Cannot wrap a range spanning {start.path} and {end.path}")
        parent = self._parents[id(start_text)]
        if not isinstance(parent, Paragraph):
            raise TreeError("Links can only be created directly inside a paragraph")
        for point, text in ((start, start_text), (end, end_text)):
            if not 0 <= point.offset <= len(text.text):
                raise TreeError(f"Offset {point.offset} out of range at {point.path}")

        first, last = start.path[-1], end.path[-1]
        if 0 < end.offset < len(end_text.text):
            self._split(end_text, end.offset)
        if end.offset == 0:
            last -= 1
        if start.offset == len(start_text.text):
            first += 1
        elif start.offset > 0:
            self._split(start_text, start.offset)
            first += 1
            last += 1
        children = parent.children
        covered = children[first : last + 1]
        if not covered:
            raise TreeError("Cannot wrap an empty range")
        if not all(isinstance(child, Text) for child in covered):
            raise TreeError("Cannot wrap a range containing a non-Text node")

        element.children = list(covered)
        children[first : last + 1] = [element]
        self._parents[id(element)] = parent
        for child in covered:
            self._parents[id(child)] = element
        self._touch(parent, first, first)
        return self.path_of(element)

    def unwrap(self, path: Path, expected: Optional[Node] = None) -> None:
        """Replace the link at ``path`` by its children."""
        node = self._resolve(path, expected)
        if not isinstance(node, AutoLink):
            raise TreeError(f"Only links can be unwrapped, not {type(node).__name__}")
        parent = self._parents[id(node)]
        index = path[-1]
        promoted = list(node.children)
        if not promoted:
            self._remove_child(parent, index)
            return
        get_node_children(parent)[index : index + 1] = promoted
        del self._parents[id(node)]
        for child in promoted:
            self._parents[id(child)] = parent
        node.children = []
        self._touch(parent, index, index + len(promoted) - 1)

    # ------------------------------------------------------------------
    # Edits
    # ------------------------------------------------------------------

    @contextmanager
    def without_normalizing(self) -> Iterator[None]:
        """Defer normalization until the outermost block exits."""
        self._batch_depth += 1
        try:
            yield
        finally:
            self._batch_depth -= 1
        self.normalize()

    def load(self, document: Document) -> None:
        """Replace the whole document and normalize every node."""
        self._adopt(document)
        self.normalize(force=True)

    def insert_text(self, text: str, at: Optional[Point] = None) -> None:
        """Insert ``text`` at ``at`` or at the selection.

        An expanded selection is deleted first, as typing over a selection
        does in an editor.
        """
        if not text:
            return
        with self.without_normalizing():
            if at is not None:
                caret = self._caret_for(at)
            else:
                if self._selection is None:
                    raise TreeError("No selection to insert text at")
                if not self.is_selection_collapsed():
                    self.delete_fragment()
                caret = self._selection[1]  # type: ignore[index]
            self._insert_text(caret.node, caret.offset, text)

    def insert_nodes(self, nodes: list[Inline]) -> None:
        """Paste inline nodes at the selection, splitting the Text under it."""
        if not nodes:
            return
        if self._selection is None:
            raise TreeError("No selection to insert nodes at")
        with self.without_normalizing():
            if not self.is_selection_collapsed():
                self.delete_fragment()
            caret = self._selection[1]
            text, offset = caret.node, caret.offset
            parent = self._parents[id(text)]
            index = _index_of(get_node_children(parent), text)
            if offset == 0:
                at = index
            elif offset >= len(text.text):
                at = index + 1
            else:
                self._split(text, offset)
                at = index + 1
            for position, node in enumerate(nodes):
                self._insert_child(parent, at + position, node)
            leaves = [leaf for node in nodes for leaf in _iter_texts(node)]
            if leaves:
                self._collapse_to(leaves[-1], len(leaves[-1].text))

    def delete_backward(self) -> None:
        """Delete the character before the selection, through the installed handler."""
        self._delete_backward_handler()

    def delete_fragment(self) -> None:
        """Delete the content covered by an expanded selection.

        Blocks touched by the range are joined into the first one.
        """
        if self._selection is None or self.is_selection_collapsed():
            return
        with self.without_normalizing():
            start, end = self._ordered_carets()
            start_node, start_offset = start.node, start.offset
            end_node, end_offset = end.node, end.offset
            if start_node is end_node:
                self._remove_text(start_node, start_offset, end_offset - start_offset)
            else:
                leaves = list(_iter_texts(self.document))
                first, last = _index_of(leaves, start_node), _index_of(leaves, end_node)
                self._remove_text(start_node, start_offset, len(start_node.text) - start_offset)
                for leaf in leaves[first + 1 : last]:
                    self._remove_text(leaf, 0, len(leaf.text))
                self._remove_text(end_node, 0, end_offset)
                start_block, end_block = self._block_of(start_node), self._block_of(end_node)
                if start_block is not end_block:
                    blocks = self.document.children
                    start_index = _index_of(blocks, start_block)
                    while blocks[start_index + 1] is not end_block:
                        self._remove_child(self.document, start_index + 1)
                    self._merge_block(start_block, end_block)
            self._collapse_to(start_node, start_offset)

    def _delete_backward(self) -> None:
        if self._selection is None:
            return
        with self.without_normalizing():
            if not self.is_selection_collapsed():
                self.delete_fragment()
                return
            caret = self._selection[0]
            node, offset = caret.node, caret.offset
            if offset > 0:
                self._remove_text(node, offset - 1, 1)
                return
            block = self._block_of(node)
            leaves = list(_iter_texts(block))
            previous = next((leaf for leaf in reversed(leaves[: _index_of(leaves, node)]) if leaf.text), None)
            if previous is not None:
                self._remove_text(previous, len(previous.text) - 1, 1)
                self._collapse_to(previous, len(previous.text))
                return
            index = _index_of(self.document.children, block)
            if index > 0:
                self._merge_block(self.document.children[index - 1], block)

    # ------------------------------------------------------------------
    # Normalization
    # ------------------------------------------------------------------

    def normalize(self, force: bool = False) -> int:
        """Drain the dirty worklist through the installed node handler.

        Parameters
        ----------
        force : bool, default = False
            Mark every node dirty first

        Returns
        -------
        int
            Number of node normalizations performed (0 when deferred)

        Raises
        ------
        ConvergenceError
            If the pass exceeds its iteration limit

        """
        if force:
            for node, _ in self.entries():
                self._mark(node)
        if self._normalizing or self._batch_depth > 0:
            return 0

        self._normalizing = True
        initial = len(self._dirty)
        iterations = 0
        try:
            while self._dirty:
                limit = self.iteration_factor * max(initial, len(self._parents) + 1)
                if iterations >= limit:
                    self._dirty.clear()
                    self._dirty_ids.clear()
                    logger.error("Normalization gave up after %d node normalizations", iterations)
                    raise ConvergenceError(
                        f"Document did not converge after {iterations} node normalizations", iterations
                    )
                node = self._dirty.pop()
                self._dirty_ids.discard(id(node))
                if not self.is_attached(node):
                    continue
                self._node_handler(node, self.path_of(node))
                iterations += 1
        finally:
            self._normalizing = False
        return iterations

    def normalize_node(self, node: Node, path: Path) -> None:
        """Apply the baseline structural rules to one node.

        Elements always hold at least one child. Adjacent Text leaves with
        the same style flags are merged, an empty Text next to a differently
        styled one is dropped, and every link has a Text on its left and,
        when it is the last child, an empty Text on its right.
        """
        if isinstance(node, (Text, Document)):
            return
        children = node.children  # type: ignore[union-attr]
        if not children:
            self._insert_child(node, 0, Text())
            return

        n = 0
        while n < len(children):
            child = children[n]
            previous = children[n - 1] if n > 0 else None
            if isinstance(child, Text):
                if isinstance(previous, Text):
                    if previous.same_marks(child):
                        self._merge_into_previous(node, n)
                        continue
                    if previous.text == "":
                        self._remove_child(node, n - 1)
                        n -= 1
                        continue
                    if child.text == "":
                        self._remove_child(node, n)
                        continue
            elif isinstance(child, AutoLink):
                if not isinstance(previous, Text):
                    self._insert_child(node, n, Text())
                    n += 1
                if n == len(children) - 1:
                    self._insert_child(node, n + 1, Text())
                    n += 1
            n += 1

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _adopt(self, document: Document) -> None:
        if not isinstance(document, Document):
            raise DocumentError(f"Expected a Document, got {type(document).__name__}")
        self._validate(document)
        self.document = document
        self._parents = {}
        self._dirty = []
        self._dirty_ids = set()
        self._selection = None
        self._index_subtree(document, None)

    def _validate(self, document: Document) -> None:
        seen: set[int] = set()

        def check(node: Node) -> None:
            if id(node) in seen:
                raise DocumentError(f"{type(node).__name__} node appears more than once in the document")
            seen.add(id(node))
            allowed = _allowed_children(node)
            for child in get_node_children(node):
                if not isinstance(child, allowed):
                    raise DocumentError(f"{type(child).__name__} is not allowed inside {type(node).__name__}")
                check(child)

        check(document)

    def _index_subtree(self, node: Node, parent: Optional[Node]) -> None:
        if parent is not None:
            if id(node) in self._parents or node is self.document:
                raise TreeError(f"{type(node).__name__} node is already part of the document")
            self._parents[id(node)] = parent
        for child in get_node_children(node):
            self._index_subtree(child, node)

    def _unindex(self, node: Node) -> None:
        self._parents.pop(id(node), None)
        for child in get_node_children(node):
            self._unindex(child)

    def _resolve(self, path: Path, expected: Optional[Node] = None) -> Node:
        node = self.node(path)
        if expected is not None and node is not expected:
            raise StalePathError(f"Path {path} no longer points at the expected {type(expected).__name__}", path)
        return node

    def _resolve_text(self, path: Path, expected: Optional[Node] = None) -> Text:
        node = self._resolve(path, expected)
        if not isinstance(node, Text):
            raise TreeError(f"Expected a Text at {path}, found {type(node).__name__}")
        return node

    def _caret_for(self, point: Point) -> _Caret:
        text = self._resolve_text(point.path)
        if not 0 <= point.offset <= len(text.text):
            raise TreeError(f"Offset {point.offset} out of range at {point.path}")
        return _Caret(text, point.offset)

    def _carets(self) -> tuple[_Caret, ...]:
        return self._selection if self._selection is not None else ()

    def _collapse_to(self, node: Text, offset: int) -> None:
        self._selection = (_Caret(node, offset), _Caret(node, offset))

    def _ordered_carets(self) -> tuple[_Caret, _Caret]:
        anchor, focus = self._selection  # type: ignore[misc]
        if (self.path_of(anchor.node), anchor.offset) <= (self.path_of(focus.node), focus.offset):
            return anchor, focus
        return focus, anchor

    def _block_of(self, node: Node) -> Node:
        current = node
        while self._parents[id(current)] is not self.document:
            current = self._parents[id(current)]
        return current

    def _mark(self, node: Node) -> None:
        if id(node) not in self._dirty_ids:
            self._dirty_ids.add(id(node))
            self._dirty.append(node)

    def _touch(self, parent: Node, first: int, last: int) -> None:
        # Rules only read a node and its immediate siblings, so the siblings
        # around the touched slice (and a sibling link's leaves) go dirty too.
        children = get_node_children(parent)
        for index in (first - 1, last + 1):
            if 0 <= index < len(children):
                self._mark(children[index])
                for leaf in get_node_children(children[index]):
                    self._mark(leaf)
        chain = [parent]
        while chain[-1] is not self.document:
            chain.append(self._parents[id(chain[-1])])
        for ancestor in reversed(chain):
            self._mark(ancestor)
        for child in children[first : last + 1]:
            for entry in self._subtree(child):
                self._mark(entry)

    def _subtree(self, node: Node) -> Iterator[Node]:
        yield node
        for child in get_node_children(node):
            yield from self._subtree(child)

    def _check_child(self, parent: Node, child: Node) -> None:
        if not isinstance(child, _allowed_children(parent)):
            raise TreeError(f"{type(child).__name__} is not allowed inside {type(parent).__name__}")
        for grandchild in get_node_children(child):
            self._check_child(child, grandchild)

    def _insert_child(self, parent: Node, index: int, child: Node) -> None:
        self._check_child(parent, child)
        self._index_subtree(child, parent)
        get_node_children(parent).insert(index, child)
        self._touch(parent, index, index)

    def _remove_child(self, parent: Node, index: int) -> Node:
        children = get_node_children(parent)
        child = children[index]
        self._relocate_carets(child)
        del children[index]
        self._unindex(child)
        self._touch(parent, index, index - 1)
        return child

    def _relocate_carets(self, removed: Node) -> None:
        removed_ids = {id(leaf) for leaf in _iter_texts(removed)}
        if not any(id(caret.node) in removed_ids for caret in self._carets()):
            return
        leaves = list(_iter_texts(self.document))
        for caret in self._carets():
            if id(caret.node) not in removed_ids:
                continue
            position = _index_of(leaves, caret.node)
            before = next((leaf for leaf in reversed(leaves[:position]) if id(leaf) not in removed_ids), None)
            after = next((leaf for leaf in leaves[position + 1 :] if id(leaf) not in removed_ids), None)
            if before is not None:
                caret.node, caret.offset = before, len(before.text)
            elif after is not None:
                caret.node, caret.offset = after, 0
            else:
                self._selection = None
                return

    def _split(self, text: Text, offset: int) -> Text:
        parent = self._parents[id(text)]
        children = get_node_children(parent)
        index = _index_of(children, text)
        tail = replace(text, text=text.text[offset:])
        text.text = text.text[:offset]
        children.insert(index + 1, tail)
        self._parents[id(tail)] = parent
        for caret in self._carets():
            if caret.node is text and caret.offset >= offset:
                caret.node, caret.offset = tail, caret.offset - offset
        self._touch(parent, index, index + 1)
        return tail

    def _merge_into_previous(self, parent: Node, index: int) -> None:
        children = get_node_children(parent)
        node, previous = children[index], children[index - 1]
        shift = len(previous.text)
        previous.text += node.text
        for caret in self._carets():
            if caret.node is node:
                caret.node, caret.offset = previous, caret.offset + shift
        del children[index]
        self._unindex(node)
        self._touch(parent, index - 1, index - 1)

    def _merge_block(self, target: Node, source: Node) -> None:
        moved = list(get_node_children(source))
        get_node_children(source).clear()
        start = len(get_node_children(target))
        get_node_children(target).extend(moved)
        for child in moved:
            self._parents[id(child)] = target
        self._touch(target, start, start + len(moved) - 1)
        self._remove_child(self.document, _index_of(self.document.children, source))

    def _insert_text(self, node: Text, offset: int, text: str) -> None:
        node.text = node.text[:offset] + text + node.text[offset:]
        for caret in self._carets():
            if caret.node is node and caret.offset >= offset:
                caret.offset += len(text)
        parent = self._parents[id(node)]
        index = _index_of(get_node_children(parent), node)
        self._touch(parent, index, index)

    def _remove_text(self, node: Text, offset: int, length: int) -> None:
        if length <= 0:
            return
        node.text = node.text[:offset] + node.text[offset + length :]
        for caret in self._carets():
            if caret.node is node and caret.offset > offset:
                caret.offset = max(offset, caret.offset - length)
        parent = self._parents[id(node)]
        index = _index_of(get_node_children(parent), node)
        self._touch(parent, index, index)


__all__ = [
    "DocumentTree",
    "NodeEntry",
    "NodeHandler",
    "EditHandler",
]
