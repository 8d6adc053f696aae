"""Error taxonomy for the secret store."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager


class HipsError(Exception):
    """Base exception carrying a chain of operation contexts."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message
        self.context: list[str] = []

    def within(self, context: str) -> HipsError:
        """Prepend the operation being attempted when this error occurred."""
        self.context.insert(0, context)
        return self

    def __str__(self) -> str:
        return ": ".join([*self.context, self.message])


class NotFound(HipsError):
    """Raised when a name is absent from a backend."""


class AuthenticationFailure(HipsError):
    """Raised when the authentication tag does not verify."""


class DecodingError(HipsError):
    """Raised on malformed base64, UTF-8 or serialized structure."""


class StorageError(HipsError):
    """Raised when the filesystem cannot be read or written."""


class InvalidLayout(HipsError):
    """Raised when on-disk state has the wrong shape."""


class UnsupportedFormat(HipsError):
    """Raised when a database location has an unknown extension."""


class ConfigurationError(HipsError):
    """Raised when an operation lacks the settings it needs."""


class TemplateError(HipsError):
    """Raised when a template cannot be rendered."""


@contextmanager
def context(description: str) -> Iterator[None]:
    """Annotate any HipsError raised in the block with `description`."""
    try:
        yield
    except HipsError as e:
        e.within(description)
        raise
