"""Type definitions for TrueVault SDK."""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import IO, Any, Union

from .constants import DEFAULT_CHUNK_SIZE, DEFAULT_HOST, DEFAULT_TIMEOUT_MS

# Credentials


@dataclass(frozen=True)
class ApiKey:
    """Authenticate with a user API key."""

    value: str


@dataclass(frozen=True)
class AccessToken:
    """Authenticate with an access token obtained from login."""

    value: str


@dataclass(frozen=True)
class HttpBasicHeader:
    """Authenticate with a pre-built ``Authorization`` header value.

    The value is sent verbatim, e.g. ``"Basic dXNlcjo="``.
    """

    value: str


@dataclass(frozen=True)
class NoAuth:
    """Send requests without an ``Authorization`` header."""


Credential = Union[ApiKey, AccessToken, HttpBasicHeader, NoAuth]


@dataclass
class ClientConfig:
    """Configuration for TrueVaultClient.

    Attributes:
        host: Base URL of the TrueVault API.
        timeout: HTTP request timeout in milliseconds.
        chunk_size: Chunk size in bytes for progress-reporting transfers.
    """

    host: str = DEFAULT_HOST
    timeout: int = DEFAULT_TIMEOUT_MS
    chunk_size: int = DEFAULT_CHUNK_SIZE


# Request bodies

FileInput = Union[bytes, IO[bytes], tuple[str, Any], tuple[str, Any, str]]


@dataclass
class FormFields:
    """A ``multipart/form-data`` request body.

    Attributes:
        fields: Plain form fields. ``None`` values are dropped.
        files: File parts, keyed by field name, in any shape httpx accepts.
    """

    fields: Mapping[str, Any] = field(default_factory=dict)
    files: Mapping[str, FileInput] = field(default_factory=dict)

    def data(self) -> dict[str, str]:
        """Return the non-empty fields as strings."""
        return {key: str(value) for key, value in self.fields.items() if value is not None}


@dataclass
class JsonBody:
    """An ``application/json`` request body."""

    payload: Any


RequestBody = Union[FormFields, JsonBody]


# Progress reporting


class ProgressEventType(str, Enum):
    """Kinds of transfer progress events."""

    PROGRESS = "progress"
    LOAD = "load"


@dataclass
class ProgressEvent:
    """A progress notification for an upload or download.

    Attributes:
        type: PROGRESS while bytes are moving, LOAD once the transfer is done.
        transferred: Bytes sent or received so far.
        total: Total bytes, or None when the server sent no Content-Length.
    """

    type: ProgressEventType
    transferred: int
    total: int | None

    @property
    def length_computable(self) -> bool:
        return self.total is not None


ProgressCallback = Callable[[ProgressEvent], Union[None, Awaitable[None]]]


@dataclass
class BlobDownload:
    """Raw blob contents returned by a blob download.

    Attributes:
        blob: The blob bytes.
        filename: File name from the Content-Disposition header, if any.
        content_type: The response Content-Type, if any.
    """

    blob: bytes
    filename: str | None = None
    content_type: str | None = None

    @property
    def size(self) -> int:
        return len(self.blob)
