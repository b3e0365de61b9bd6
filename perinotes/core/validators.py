#!/usr/bin/env python3
"""
validators.py
--------------------
Data validation and normalization utilities for perinotes settings.

Provides type-safe conversion used when loading settings files, view
options and CLI input.
"""
from __future__ import annotations

from typing import Any, Optional

from .exceptions import ValidationError


class DataValidator:
    """Centralized data validation for settings and user input."""

    @staticmethod
    def normalize_string(value: Any) -> Optional[str]:
        """
        Normalize string value.

        Args:
            value: Value to normalize

        Returns:
            Stripped string, or None for empty input
        """
        if value is None:
            return None
        text = str(value).strip()
        return text or None

    @staticmethod
    def normalize_bool(value: Any) -> Optional[bool]:
        """
        Convert various inputs to boolean.

        Args:
            value: Value to convert

        Returns:
            Boolean value or None

        Raises:
            ValidationError: If conversion fails
        """
        if isinstance(value, bool):
            return value
        elif isinstance(value, (int, float)):
            if value == 0:
                return False
            elif value == 1:
                return True
            else:
                raise ValidationError(f"Cannot convert numeric '{value}' to boolean")
        elif isinstance(value, str):
            if value.lower() in ("true", "1", "yes", "on"):
                return True
            elif value.lower() in ("false", "0", "no", "off"):
                return False
            else:
                raise ValidationError(f"Cannot convert '{value}' to boolean")
        elif value is not None:
            return bool(value)
        return None

    @staticmethod
    def normalize_int(value: Any) -> Optional[int]:
        """
        Convert value to integer.

        Args:
            value: Value to convert

        Returns:
            Integer value or None

        Raises:
            ValidationError: If the value is not an integer
        """
        if value is None or value == "":
            return None
        if isinstance(value, bool):
            raise ValidationError(f"Cannot convert boolean '{value}' to integer")
        try:
            return int(str(value).strip())
        except ValueError as e:
            raise ValidationError(f"Cannot convert '{value}' to integer") from e

