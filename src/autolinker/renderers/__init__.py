#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/autolinker/renderers/__init__.py
"""Renderers that turn documents into HTML or Markdown text."""

from __future__ import annotations

from autolinker.renderers.base import BaseRenderer
from autolinker.renderers.html import HtmlRenderer
from autolinker.renderers.markdown import MarkdownRenderer

__all__ = ["BaseRenderer", "HtmlRenderer", "MarkdownRenderer"]
