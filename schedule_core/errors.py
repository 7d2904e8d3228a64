# -*- coding: utf-8 -*-
"""Exceptions raised by the schedule planner."""
from __future__ import annotations


class CSVParseError(Exception):
    """Raised when CSV text is structurally malformed, e.g. an unterminated quoted field."""

    pass


class StorageError(Exception):
    """Raised when the repository cannot read or write its backing document store."""

    pass


class OverrideValidationError(Exception):
    """Raised when a day override is inconsistent with its kind or has unusable times."""

    pass


class NoteValidationError(Exception):
    """Raised when a class note or general note violates its length or content limits."""

    pass


class NotFoundError(Exception):
    """Raised when a requested entity does not exist."""

    pass


class SettingsError(Exception):
    """Raised when a settings update names an unknown field or an unsupported value."""


# Mapping of custom exceptions to HTTP status codes
CUSTOM_ERRORS = {
    CSVParseError: 400,
    OverrideValidationError: 422,
    NoteValidationError: 422,
    SettingsError: 422,
    NotFoundError: 404,
    StorageError: 500,
}
