#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Constants and default values for autolinker.

This module centralizes the URL grammar, character classes and configuration
defaults used across the package.

Constants are organized by category:
1. Type Definitions - Literal types and type aliases
2. URL Grammar - The pattern that decides what counts as a link
3. Separators - Characters that may delimit a link
4. Normalization Defaults - Iteration caps and engine switches
5. Rendering Defaults - HTML and Markdown output settings
6. CLI - Exit codes and configuration file discovery
"""

from __future__ import annotations

import re
from typing import Literal

# =============================================================================
# Type Definitions
# =============================================================================

StyleFlag = Literal["bold", "italic", "underline"]
InputFormat = Literal["auto", "text", "json", "slate"]
OutputFormat = Literal["json", "slate", "html", "markdown"]

STYLE_FLAGS: tuple[StyleFlag, ...] = ("bold", "italic", "underline")

# =============================================================================
# URL Grammar
# =============================================================================

# Scheme (http://, https://, optionally followed by www.) or a bare www.
URL_SCHEME_PATTERN = r"((https?://(www\.)?)|(www\.))"

# Host characters, 1 to 256 of them, usually domain and subdomains
URL_HOST_PATTERN = r"[-a-zA-Z0-9@:%._+~#=]{1,256}"

# A literal period followed by a 1-6 character top-level domain
URL_TLD_PATTERN = r"\.[a-zA-Z0-9()]{1,6}"

# Path, query and fragment characters after the word boundary
URL_TAIL_PATTERN = r"([-a-zA-Z0-9().@:%_+~#?&/=]*)"

# re.ASCII keeps \b on ASCII word characters, so "https://a.comé" does not
# match past "com".
URL_REGEX = re.compile(
    URL_SCHEME_PATTERN + URL_HOST_PATTERN + URL_TLD_PATTERN + r"\b" + URL_TAIL_PATTERN,
    re.ASCII,
)

# =============================================================================
# Separators
# =============================================================================

SEPARATOR_PUNCTUATION = frozenset(".,;!?")
PUNCTUATION_OR_SPACE_REGEX = re.compile(r"[.,;!?\s]")
TRAILING_PUNCTUATION = frozenset(".?")
PUNCTUATION_THEN_ALNUM_REGEX = re.compile(r"^[.?][a-zA-Z0-9]+")

# =============================================================================
# Normalization Defaults
# =============================================================================

AUTO_LINK_TYPE = "auto-link"
PARAGRAPH_TYPE = "paragraph"

# Node normalizations allowed per node in one normalization run
DEFAULT_ITERATION_FACTOR = 42
DEFAULT_UNWRAP_ON_BACKWARD_DELETE = True
DEFAULT_STRICT_MODE = True

# =============================================================================
# Rendering Defaults
# =============================================================================

DEFAULT_LINK_STYLE = "text-decoration: underline"
DEFAULT_BLOCK_TAG = "div"
DEFAULT_ESCAPE_HTML = True
DEFAULT_JSON_INDENT = 2

# =============================================================================
# CLI
# =============================================================================

EXIT_SUCCESS = 0
EXIT_INVARIANT_VIOLATION = 1
EXIT_VALIDATION_ERROR = 2
EXIT_INPUT_ERROR = 3
EXIT_CONVERGENCE_ERROR = 4

CONFIG_ENV_VAR = "AUTOLINKER_CONFIG"
CONFIG_FILENAMES = (".autolinker.toml", ".autolinker.yaml", ".autolinker.yml", ".autolinker.json")
PYPROJECT_TOOL_SECTION = "autolinker"
