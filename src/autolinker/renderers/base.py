#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/autolinker/renderers/base.py
"""Base classes for document renderers."""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import IO, Any, Union

from autolinker.ast.nodes import Document


class BaseRenderer(ABC):
    """Abstract base class for all renderers.

    Renderers implement ``render_to_string``; ``render`` writes the same
    output to a path or a text stream.

    Parameters
    ----------
    options : Any, default = None
        Format-specific rendering options

    """

    def __init__(self, options: Any = None):
        """Initialize the renderer with optional configuration."""
        self.options = options

    @abstractmethod
    def render_to_string(self, document: Document) -> str:
        """Render ``document`` and return the text."""
        pass

    def render(self, document: Document, output: Union[str, Path, IO[str]]) -> None:
        """Render ``document`` and write it to ``output``.

        Parameters
        ----------
        document : Document
            Document to render
        output : str, Path, or IO[str]
            Output destination (file path or text stream)

        """
        text = self.render_to_string(document)
        if isinstance(output, (str, Path)):
            Path(output).write_text(text, encoding="utf-8")
        else:
            output.write(text)


__all__ = ["BaseRenderer"]
