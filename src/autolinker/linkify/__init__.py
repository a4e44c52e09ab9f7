#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/autolinker/linkify/__init__.py
"""Auto-link detection and the normalization engine that maintains links."""

from __future__ import annotations

from autolinker.linkify.matcher import UrlMatch, find_url, is_exact_url
from autolinker.linkify.separators import (
    ends_with_period_or_question_mark,
    ends_with_separator,
    is_separator,
    starts_with_punctuation_then_alnum,
    starts_with_separator,
)
from autolinker.linkify.boundaries import is_content_around_valid, is_next_node_valid, is_previous_node_valid
from autolinker.linkify.engine import AutoLinkEngine, Rewrite, RewriteKind, linkify, with_auto_links

__all__ = [
    "UrlMatch",
    "find_url",
    "is_exact_url",
    "is_separator",
    "starts_with_separator",
    "ends_with_separator",
    "ends_with_period_or_question_mark",
    "starts_with_punctuation_then_alnum",
    "is_previous_node_valid",
    "is_next_node_valid",
    "is_content_around_valid",
    "AutoLinkEngine",
    "Rewrite",
    "RewriteKind",
    "linkify",
    "with_auto_links",
]
