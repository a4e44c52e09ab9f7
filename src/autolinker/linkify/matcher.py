#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/autolinker/linkify/matcher.py
"""URL pattern matching.

The grammar accepts ``http://`` or ``https://`` (each optionally followed by
``www.``) or a bare ``www.``, then a host, a period, a 1-6 character
top-level domain, a word boundary, and an optional path/query/fragment
tail. See :data:`autolinker.constants.URL_REGEX` for the exact pattern.

Matching URLs:
    - http://www.example.com
    - https://example.com/path?query=param#anchor
    - www.example.com

Non-matching:
    - http:/example.com (malformed scheme)
    - ftp://example.com (unsupported scheme)
    - example.com (no scheme and no www.)

"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from autolinker.constants import URL_REGEX


@dataclass(frozen=True)
class UrlMatch:
    """A URL-shaped span inside a string.

    Parameters
    ----------
    start : int
        Offset of the first matched character
    end : int
        Offset one past the last matched character
    text : str
        The matched substring

    """

    start: int
    end: int
    text: str

    def spans(self, text: str) -> bool:
        """Return whether the match covers all of ``text``."""
        return self.start == 0 and self.end == len(text)


def find_url(text: str) -> Optional[UrlMatch]:
    """Find the leftmost URL-shaped span in ``text``.

    Only one match is returned per call; callers re-scan the residual text
    after an edit to find further ones.

    Examples
    --------
    >>> find_url("Visit https://a.com for info")
    UrlMatch(start=6, end=19, text='https://a.com')
    >>> find_url("no links here") is None
    True

    """
    match = URL_REGEX.search(text)
    if match is None:
        return None
    return UrlMatch(start=match.start(), end=match.end(), text=match.group(0))


def is_exact_url(text: str) -> bool:
    """Return whether the leftmost match of ``text`` is ``text`` itself."""
    match = find_url(text)
    return match is not None and match.spans(text)


__all__ = ["UrlMatch", "find_url", "is_exact_url"]
