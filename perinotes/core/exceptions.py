#!/usr/bin/env python3
"""
exceptions.py
--------------------
Custom exception classes for the perinotes project.

This module defines the exceptions used throughout the project to report
specific error conditions in the different subsystems.

Exception Hierarchy:
    Exception (built-in)
    ├── ValidationError - Data validation failures
    │   └── ConfigurationError - Invalid settings or view options
    ├── PeriodParseError - A date could not be extracted from a note name
    ├── DocumentStoreError - Document store read/write/create failures
    ├── TemplateError - Template expansion failures
    └── ReconciliationError - Diff engine invariant violations

Usage:
    from perinotes.core.exceptions import ConfigurationError, DocumentStoreError

    try:
        settings = load_settings(path)
    except ConfigurationError as e:
        logger.log_error(e, {"path": str(path)})
"""


class ValidationError(Exception):
    """
    Exception for data validation failures.

    Raised when input data fails validation checks:
    - Missing required fields
    - Values that cannot be coerced to the expected type
    - Values outside their accepted range

    Examples:
        >>> raise ValidationError("Required field 'folder' missing or empty")
        >>> raise ValidationError("Cannot convert 'maybe' to boolean")
    """

    pass


class ConfigurationError(ValidationError):
    """
    Exception for invalid configuration.

    Raised when settings or view options are structurally valid YAML but
    carry values the system cannot honour:
    - Unknown granularity names
    - Negative future horizon
    - Selection context values out of range (quarter 5, month 12)

    Examples:
        >>> raise ConfigurationError("future_periods must be between 0 and 12, got -1")
        >>> raise ConfigurationError("Unknown granularity: 'hourly'")
    """

    pass


class PeriodParseError(Exception):
    """
    Exception for dates that cannot be extracted from a note name.

    Raised by the strict parsing helpers only. Record discovery never
    raises it: unparseable notes are skipped and logged instead.

    Examples:
        >>> raise PeriodParseError("Cannot parse 'notes' with pattern 'YYYY-MM-DD'")
    """

    pass


class DocumentStoreError(Exception):
    """
    Exception for document store failures.

    Raised when the underlying store cannot complete an operation:
    - Reading or writing a note
    - Creating a note or folder
    - Listing a folder

    These are recoverable: callers surface a notice to the user and roll
    back any optimistic state.

    Examples:
        >>> raise DocumentStoreError("Failed to write Journal/2024-01-15.md: permission denied")
        >>> raise DocumentStoreError("Folder not found: Journal/Weekly")
    """

    pass


class TemplateError(Exception):
    """
    Exception for template expansion failures.

    Raised when a configured template exists but cannot be read or
    expanded. A missing template expander is not an error.

    Examples:
        >>> raise TemplateError("Template not found: Templates/daily.md")
    """

    pass


class ReconciliationError(Exception):
    """
    Exception for view reconciliation invariant violations.

    The diff engine assumes key uniqueness in its input sequence. A
    duplicate key reaching it is a programming error upstream (the merger
    deduplicates), so it is reported loudly instead of being patched over.

    Examples:
        >>> raise ReconciliationError("Duplicate key 1704067200 in merged sequence")
    """

    pass
