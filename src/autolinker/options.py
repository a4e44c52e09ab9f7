#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Option classes for normalization and rendering.

Options are frozen dataclasses. Each field carries ``help`` metadata used by
the CLI and by configuration-file validation, and ``create_updated`` returns
a modified copy.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, field, fields, replace
from typing import Any, Mapping

if sys.version_info >= (3, 11):
    from typing import Self
else:
    from typing_extensions import Self

from autolinker.constants import (
    DEFAULT_BLOCK_TAG,
    DEFAULT_ESCAPE_HTML,
    DEFAULT_ITERATION_FACTOR,
    DEFAULT_LINK_STYLE,
    DEFAULT_STRICT_MODE,
    DEFAULT_UNWRAP_ON_BACKWARD_DELETE,
)
from autolinker.exceptions import ValidationError


@dataclass(frozen=True)
class CloneFrozenMixin:
    """Mixin providing frozen dataclass cloning and mapping construction."""

    def create_updated(self, **kwargs: Any) -> Self:
        """Create a new instance with updated field values.

        Parameters
        ----------
        **kwargs : Any
            Field names and their new values

        Returns
        -------
        Self
            New instance with specified fields updated

        """
        return replace(self, **kwargs)

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> Self:
        """Build an instance from a configuration mapping.

        Keys may use dashes or underscores.

        Raises
        ------
        ValidationError
            If a key does not name a field, or a value fails validation

        """
        known = {f.name for f in fields(cls)}  # type: ignore[arg-type]
        normalized = {str(key).replace("-", "_"): value for key, value in values.items()}
        unknown = sorted(set(normalized) - known)
        if unknown:
            raise ValidationError(
                f"Unknown {cls.__name__} option(s): {', '.join(unknown)}. Valid options are: {', '.join(sorted(known))}",
                parameter_name=unknown[0],
                parameter_value=normalized[unknown[0]],
            )
        try:
            return cls(**normalized)
        except (TypeError, ValueError) as e:
            raise ValidationError(f"Invalid {cls.__name__} configuration: {e}", original_error=e) from e


@dataclass(frozen=True)
class NormalizeOptions(CloneFrozenMixin):
    """Options for the auto-link normalization engine.

    Parameters
    ----------
    iteration_factor : int, default = 42
        Node normalizations allowed per node before a pass is declared
        non-convergent
    unwrap_on_backward_delete : bool, default = True
        Demote the enclosing link to plain text after every backward delete
    strict_mode : bool, default = True
        Reject unknown node types when reading serialized documents instead
        of skipping them

    """

    iteration_factor: int = field(
        default=DEFAULT_ITERATION_FACTOR,
        metadata={"help": "Node normalizations allowed per node before giving up", "type": int},
    )
    unwrap_on_backward_delete: bool = field(
        default=DEFAULT_UNWRAP_ON_BACKWARD_DELETE,
        metadata={"help": "Unwrap the link around the cursor after a backward delete"},
    )
    strict_mode: bool = field(
        default=DEFAULT_STRICT_MODE,
        metadata={"help": "Fail on unknown node types in serialized input"},
    )

    def __post_init__(self) -> None:
        """Validate numeric ranges.

        Raises
        ------
        ValueError
            If ``iteration_factor`` is not a positive integer

        """
        if not isinstance(self.iteration_factor, int) or isinstance(self.iteration_factor, bool):
            raise ValueError(f"iteration_factor must be an integer, got {self.iteration_factor!r}")
        if self.iteration_factor <= 0:
            raise ValueError(f"iteration_factor must be positive, got {self.iteration_factor}")


@dataclass(frozen=True)
class HtmlRendererOptions(CloneFrozenMixin):
    """Configuration options for HTML rendering.

    Parameters
    ----------
    link_style : str, default = "text-decoration: underline"
        Inline CSS applied to every link; empty to omit the attribute
    block_tag : str, default = "div"
        Tag used for paragraphs
    escape_html : bool, default = True
        Escape text and attribute values

    """

    link_style: str = field(
        default=DEFAULT_LINK_STYLE,
        metadata={"help": "Inline CSS for rendered links"},
    )
    block_tag: str = field(
        default=DEFAULT_BLOCK_TAG,
        metadata={"help": "HTML tag used for paragraphs"},
    )
    escape_html: bool = field(
        default=DEFAULT_ESCAPE_HTML,
        metadata={"help": "Escape text and attribute values"},
    )

    def __post_init__(self) -> None:
        """Validate the block tag.

        Raises
        ------
        ValueError
            If ``block_tag`` is not a plain tag name

        """
        if not self.block_tag.isalnum():
            raise ValueError(f"block_tag must be a plain tag name, got {self.block_tag!r}")


__all__ = ["CloneFrozenMixin", "NormalizeOptions", "HtmlRendererOptions"]
