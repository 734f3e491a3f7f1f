"""Shared error taxonomy and logging helpers for listblend."""

from .errors import BlendError, ErrorContext, FailureCategory, err

__all__ = ["BlendError", "ErrorContext", "FailureCategory", "err"]
