#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/autolinker/linkify/separators.py
"""Character classes that decide where a link may start and stop.

A separator is whitespace or one of ``. , ; ! ?``. The empty string counts
as both starting and ending with a separator, so an empty neighbour never
blocks a link.
"""

from __future__ import annotations

from autolinker.constants import PUNCTUATION_OR_SPACE_REGEX, PUNCTUATION_THEN_ALNUM_REGEX, TRAILING_PUNCTUATION


def is_separator(char: str) -> bool:
    """Return whether ``char`` is whitespace or sentence punctuation."""
    return len(char) == 1 and PUNCTUATION_OR_SPACE_REGEX.match(char) is not None


def starts_with_separator(text: str) -> bool:
    """Return whether ``text`` is empty or its first character is a separator."""
    return text == "" or is_separator(text[0])


def ends_with_separator(text: str) -> bool:
    """Return whether ``text`` is empty or its last character is a separator."""
    return text == "" or is_separator(text[-1])


def ends_with_period_or_question_mark(text: str) -> bool:
    """Return whether the last character of ``text`` is ``.`` or ``?``."""
    return text != "" and text[-1] in TRAILING_PUNCTUATION


def starts_with_punctuation_then_alnum(text: str) -> bool:
    """Return whether ``text`` opens with ``.`` or ``?`` followed by alphanumerics.

    This is how a link continuing across what looked like sentence-final
    punctuation shows up, e.g. ``.uk`` typed after ``https://a.co``.
    """
    return PUNCTUATION_THEN_ALNUM_REGEX.match(text) is not None


__all__ = [
    "is_separator",
    "starts_with_separator",
    "ends_with_separator",
    "ends_with_period_or_question_mark",
    "starts_with_punctuation_then_alnum",
]
