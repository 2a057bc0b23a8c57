#!/usr/bin/env python3
"""
exceptions.py
--------------------
Custom exception classes for the vault curator.

This module defines a hierarchy of exceptions used throughout the project
to handle specific error conditions in the taxonomy and vault subsystems.

Exception Hierarchy:
    Exception (built-in)
    └── CuratorError - Base for all curator errors
        ├── TaxonomyError - Schema problems
        │   └── TaxonomyLoadError - Schema could not be parsed
        ├── TagValidationError - A tag was rejected
        │   ├── TaxonomyViolation - Single tag fails schema rules
        │   └── AggregateTagError - One or more tags in a batch failed
        ├── RenameError - Rename propagation failures
        │   ├── InvalidRenameError - Bad rename input
        │   └── RenameAbortedError - Scan stopped before completion
        ├── DocumentError - Document read/write failure
        │   └── PartialWriteError - Failure after some writes landed
        └── ConfigError - Invalid configuration file

Usage:
    from curator.core.exceptions import TaxonomyViolation, InvalidRenameError

    try:
        validator.validate("status/custom")
    except TaxonomyViolation as e:
        logger.log_warning(f"Rejected {e.tag}: {e.reason}")
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from pathlib import Path
from typing import Any, List, Optional, Sequence, Tuple, Union


class CuratorError(Exception):
    """
    Base exception for all curator errors.

    Catch this to handle any error raised by the taxonomy or vault
    subsystems, or catch specific subclasses for finer handling.
    """

    pass


# ----- Taxonomy -----

class TaxonomyError(CuratorError):
    """Exception for taxonomy schema problems."""

    pass


class TaxonomyLoadError(TaxonomyError):
    """
    Exception for schemas that cannot be parsed.

    Raised by the schema parser for malformed JSON/YAML, wrong field
    types, or inconsistent depth bounds. TaxonomyDefinition always
    catches it and falls back to the built-in schema.

    Examples:
        >>> raise TaxonomyLoadError("tags.status.depth: min 3 > max 1")
    """

    pass


# ----- Tag validation -----

class TagValidationError(CuratorError, ValueError):
    """Exception for tags rejected by validation."""

    pass


class TaxonomyViolation(TagValidationError):
    """
    A single tag fails the taxonomy rules.

    Attributes:
        tag: The (cleaned) tag that was rejected
        reason: Human-readable explanation

    Examples:
        >>> raise TaxonomyViolation("status/custom",
        ...     "custom children not allowed under 'status'")
    """

    def __init__(self, tag: str, reason: str) -> None:
        super().__init__(reason)
        self.tag = tag
        self.reason = reason


class AggregateTagError(TagValidationError):
    """
    One or more tags in a batch failed validation.

    Attributes:
        failures: List of (tag, reason) pairs, in input order
    """

    def __init__(self, failures: Sequence[Tuple[str, str]]) -> None:
        self.failures: List[Tuple[str, str]] = list(failures)
        detail = "; ".join(f"{tag}: {reason}" for tag, reason in self.failures)
        super().__init__(f"Invalid tags: {detail}")


# ----- Rename -----

class RenameError(CuratorError):
    """Exception for tag rename failures."""

    pass


class InvalidRenameError(RenameError, ValueError):
    """
    Rename input rejected before any document is touched.

    Examples:
        >>> raise InvalidRenameError("Old and new tags are the same")
        >>> raise InvalidRenameError("Invalid tag name: spaces not allowed")
    """

    pass


class RenameAbortedError(RenameError):
    """
    An unexpected failure stopped a rename mid-scan.

    Attributes:
        last_processed: Last document fully processed, or None
        pending: Documents that were never visited
    """

    def __init__(
        self,
        message: str,
        last_processed: Optional[str] = None,
        pending: Optional[Sequence[str]] = None,
    ) -> None:
        super().__init__(message)
        self.last_processed = last_processed
        self.pending: List[str] = list(pending or [])


# ----- Documents & config -----

class DocumentError(CuratorError):
    """
    A document could not be read or written.

    Attributes:
        path: Document path (as given to the DocumentSet)
    """

    def __init__(self, path: Union[str, Path], message: str) -> None:
        super().__init__(f"{path}: {message}")
        self.path = str(path)


class PartialWriteError(DocumentError):
    """
    A document write failed after earlier writes to it had landed.

    Attributes:
        applied: What reached the document before the failure
    """

    def __init__(self, path: Union[str, Path], message: str, applied: Any) -> None:
        super().__init__(path, message)
        self.applied = applied


class ConfigError(CuratorError):
    """
    Exception for invalid configuration files.

    Examples:
        >>> raise ConfigError("similarity_threshold must be a number")
    """

    pass
