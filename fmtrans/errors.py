"""
Error taxonomy for the front-matter translator.

Every error carries enough context (path string, language, expected vs. actual
counts) to diagnose a failure without re-running in verbose mode.
"""

from __future__ import annotations


class TranslatorError(Exception):
    """Base class for all errors raised by this package."""


class PathNotFound(TranslatorError, LookupError):
    """A manifest path does not resolve against the document's metadata."""

    def __init__(self, expression: str, reason: str | None = None) -> None:
        self.expression = expression
        self.reason = reason
        message = f"Path not found: {expression}"
        if reason:
            message += f" ({reason})"
        super().__init__(message)


class TranslationMismatch(TranslatorError):
    """The backend returned a different number of items than it was sent."""

    def __init__(self, language: str, expected: int, actual: int) -> None:
        self.language = language
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Translation count mismatch for '{language}': "
            f"sent {expected}, received {actual}"
        )


class BackendError(TranslatorError):
    """The translation backend call failed."""

    def __init__(self, message: str, language: str | None = None) -> None:
        self.language = language
        if language:
            message = f"[{language}] {message}"
        super().__init__(message)


class MalformedDocument(TranslatorError, ValueError):
    """The input cannot be split into a metadata tree and a body."""

    def __init__(self, message: str, source: str | None = None) -> None:
        self.source = source
        if source:
            message = f"{source}: {message}"
        super().__init__(message)
