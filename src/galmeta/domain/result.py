"""Tagged results returned by catalog sources."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, Literal

from galmeta.domain.errors import (
    MetadataError,
    MissingCredentialError,
    NotFoundError,
    SourceUnavailableError,
)

if TYPE_CHECKING:
    from galmeta.domain.model import DataSource


class ErrorKind(StrEnum):
    NOT_FOUND = "not_found"
    MISSING_CREDENTIAL = "missing_credential"
    AUTH_FAILED = "auth_failed"
    NETWORK = "network"
    MALFORMED_RESPONSE = "malformed_response"


@dataclass(frozen=True, slots=True)
class Ok[T]:
    value: T
    status: Literal["ok"] = "ok"


@dataclass(frozen=True, slots=True)
class Err:
    """Failed catalog call; ``message`` is meant for display."""

    kind: ErrorKind
    message: str
    source: DataSource | None = None
    status: Literal["err"] = "err"

    def to_exception(self) -> MetadataError:
        match self.kind:
            case ErrorKind.NOT_FOUND:
                return NotFoundError(self.message, source=self.source)
            case ErrorKind.MISSING_CREDENTIAL:
                return MissingCredentialError(self.message, source=self.source)
            case _:
                return SourceUnavailableError(self.message, source=self.source)


type FetchResult[T] = Ok[T] | Err


def unwrap[T](result: FetchResult[T]) -> T:
    """Return the value of ``result`` or raise the matching :class:`MetadataError`."""

    if isinstance(result, Err):
        raise result.to_exception()
    return result.value


def value_or_none[T](result: FetchResult[T]) -> T | None:
    return None if isinstance(result, Err) else result.value
