"""Errors raised by metadata resolution."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from galmeta.domain.model import DataSource


class MetadataError(RuntimeError):
    """Base class for metadata lookup failures."""

    def __init__(self, message: str, *, source: DataSource | None = None) -> None:
        super().__init__(message)
        self.source = source


class NotFoundError(MetadataError):
    """A direct catalog call found nothing."""


class MissingCredentialError(MetadataError):
    """A catalog that requires a token was called without one."""


class SourceUnavailableError(MetadataError):
    """A direct catalog call failed (network, auth or malformed payload)."""


class NoDataFromAnySourceError(MetadataError):
    """A name search returned nothing from every catalog."""


class MalformedQueryError(MetadataError, ValueError):
    """An explicit id search did not contain a recognised id."""


class NoParameterProvidedError(MetadataError, ValueError):
    """Neither an id nor a usable name was given."""


class CustomRecordError(MetadataError, ValueError):
    """Catalog refresh was requested for a manually created record."""


class ResolutionTimeoutError(MetadataError):
    """Resolution did not finish in time."""


class ResolutionCancelledError(MetadataError):
    """The caller cancelled resolution before it finished."""
