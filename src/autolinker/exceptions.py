#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Custom exceptions for the autolinker library.

Link normalization itself never raises: a failed match or a failed boundary
check is answered with a tree rewrite. The exceptions below cover the
surrounding surface (options, document input, tree primitives) and the
single fatal condition of the engine, a normalization run that does not
converge.

Exception Hierarchy
-------------------
- AutolinkerError (base exception)

  - ValidationError (option and configuration validation)

  - DocumentError (malformed document input)

  - TreeError (invalid primitive tree operation)
    - StalePathError (path no longer resolves to the expected node)

  - ConvergenceError (normalization exceeded its iteration cap)

"""

from __future__ import annotations

from typing import Any


class AutolinkerError(Exception):
    """Base exception class for all autolinker-specific errors.

    Parameters
    ----------
    message : str
        Human-readable description of the error
    original_error : Exception, optional
        The original exception that caused this error, if applicable

    Attributes
    ----------
    message : str
        The error message
    original_error : Exception or None
        The wrapped original exception, if any

    """

    def __init__(self, message: str, original_error: Exception | None = None):
        """Initialize the error with a message and optional original exception."""
        super().__init__(message)
        self.message = message
        self.original_error = original_error


class ValidationError(AutolinkerError):
    """Exception raised for invalid options or configuration values.

    Parameters
    ----------
    message : str
        Description of the validation error
    parameter_name : str, optional
        Name of the invalid parameter
    parameter_value : any, optional
        The invalid value that was provided
    original_error : Exception, optional
        The original exception that caused this error

    """

    def __init__(
        self,
        message: str,
        parameter_name: str | None = None,
        parameter_value: Any = None,
        original_error: Exception | None = None,
    ):
        """Initialize the validation error with parameter details."""
        super().__init__(message, original_error=original_error)
        self.parameter_name = parameter_name
        self.parameter_value = parameter_value


class DocumentError(AutolinkerError):
    """Exception raised when document input cannot be turned into a tree.

    Covers unknown node types, blocks nested inside inline nodes and
    fields of the wrong type in serialized documents.
    """


class TreeError(AutolinkerError):
    """Exception raised when a primitive tree operation cannot be applied."""


class StalePathError(TreeError):
    """Exception raised when a path no longer resolves to the expected node.

    Parameters
    ----------
    message : str
        Description of the failed resolution
    path : tuple of int
        The path that went stale

    """

    def __init__(self, message: str, path: tuple[int, ...]):
        """Initialize the error with the stale path."""
        super().__init__(message)
        self.path = path


class ConvergenceError(AutolinkerError):
    """Exception raised when normalization does not reach a fixpoint.

    Parameters
    ----------
    message : str
        Description of the failure
    iterations : int
        Number of node normalizations performed before giving up

    """

    def __init__(self, message: str, iterations: int):
        """Initialize the error with the iteration count."""
        super().__init__(message)
        self.iterations = iterations


__all__ = [
    "AutolinkerError",
    "ValidationError",
    "DocumentError",
    "TreeError",
    "StalePathError",
    "ConvergenceError",
]
