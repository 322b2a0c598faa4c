"""Base HTTP client with envelope handling for TrueVault SDK."""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import AsyncIterator, Iterable, Mapping
from typing import Any
from urllib.parse import quote

import httpx

from ..errors import ApiError, MalformedResponseError, TransportError
from ..types import (
    BlobDownload,
    ClientConfig,
    Credential,
    FormFields,
    JsonBody,
    NoAuth,
    ProgressCallback,
    ProgressEvent,
    ProgressEventType,
    RequestBody,
)
from ..utils import derive_auth_header, parse_content_disposition_filename

logger = logging.getLogger("truevault")


def encode_path_segment(value: str) -> str:
    """URL-encode a path segment for use in API URLs.

    Args:
        value: The value to encode.

    Returns:
        URL-encoded string safe for use in URL paths.
    """
    return quote(str(value), safe="")


def encode_id_list(ids: Iterable[str]) -> str:
    """Join IDs into a comma-separated multi-get path segment."""
    return ",".join(encode_path_segment(value) for value in ids)


def expand_multiget_ids(ids: list[str]) -> list[str]:
    """Return the IDs to request for a multi-get of ``ids``.

    The API answers a single-ID multi-get with the bare resource instead of
    the multi-get envelope, so a lone ID is sent twice and only the first
    result is kept by the caller.
    """
    if len(ids) == 1:
        return [ids[0], ids[0]]
    return ids


def _body_kwargs(body: RequestBody | None) -> dict[str, Any]:
    """Translate a request body variant into httpx request arguments."""
    if body is None:
        return {}
    if isinstance(body, JsonBody):
        return {"json": body.payload}
    if isinstance(body, FormFields):
        # Plain fields are sent as filename-less parts so the body is always
        # multipart/form-data, even when there are no files.
        parts: list[tuple[str, Any]] = [
            (key, (None, value.encode("utf-8"))) for key, value in body.data().items()
        ]
        parts.extend(body.files.items())
        return {"files": parts}
    raise TypeError(f"Unsupported request body: {type(body).__name__}")


def _clean_params(params: Mapping[str, Any] | None) -> dict[str, Any] | None:
    """Drop unset query parameters."""
    if not params:
        return None
    return {key: value for key, value in params.items() if value is not None} or None


async def _notify(progress: ProgressCallback | None, event: ProgressEvent) -> None:
    """Invoke a progress callback, awaiting it if it is a coroutine function."""
    if progress is None:
        return
    result = progress(event)
    if asyncio.iscoroutine(result):
        await result


class BaseApiClient:
    """Base HTTP client for the TrueVault API.

    Owns the HTTP connection, the derived ``Authorization`` header and the
    response envelope handling shared by all domain-specific clients.

    Attributes:
        config: Client configuration.
    """

    def __init__(self, config: ClientConfig, credential: Credential | None = None) -> None:
        """Initialize the base API client.

        Args:
            config: Client configuration with host and timeouts.
            credential: The credential to authenticate with.
        """
        self.config = config
        self._client: httpx.AsyncClient | None = None
        self._credential: Credential = NoAuth()
        self._auth_header: str | None = None
        self._set_credential(credential or NoAuth())

    def _set_credential(self, credential: Credential) -> None:
        """Replace the credential and re-derive the Authorization header."""
        self._credential = credential
        self._auth_header = derive_auth_header(credential)

    @property
    def auth_header(self) -> str | None:
        """The current ``Authorization`` header value, or None."""
        return self._auth_header

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client.

        Returns:
            The HTTP client instance.
        """
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.config.host,
                timeout=httpx.Timeout(self.config.timeout / 1000),
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    def _build_headers(self, headers: Mapping[str, str] | None) -> dict[str, str]:
        """Merge caller headers with the Authorization header.

        The header is read once here, at request start, so a concurrent
        logout cannot strip it from a request that is already being built.
        """
        merged = dict(headers or {})
        auth_header = self._auth_header
        if auth_header is not None:
            for key in [k for k in merged if k.lower() == "authorization"]:
                del merged[key]
            merged["Authorization"] = auth_header
        return merged

    @staticmethod
    def _parse_envelope(text: str, status_code: int | None = None) -> Any:
        """Parse a response body and raise on an error envelope.

        Args:
            text: The raw response body.
            status_code: The HTTP status code, for diagnostics.

        Returns:
            The parsed JSON, unmodified.

        Raises:
            MalformedResponseError: If the body is not valid JSON.
            ApiError: If the envelope's ``result`` is ``"error"``.
        """
        try:
            data = json.loads(text)
        except ValueError as e:
            raise MalformedResponseError(text, status_code) from e

        if isinstance(data, dict) and data.get("result") == "error":
            raise ApiError.from_envelope(data)
        return data

    async def perform_request(
        self,
        path: str,
        method: str = "GET",
        *,
        body: RequestBody | None = None,
        headers: Mapping[str, str] | None = None,
        params: Mapping[str, Any] | None = None,
    ) -> Any:
        """Issue a request and return the parsed success envelope.

        Args:
            path: API path relative to the host, e.g. ``v1/users``.
            method: HTTP method.
            body: Form or JSON request body.
            headers: Extra request headers. Authorization is always the
                client's own.
            params: Query parameters. ``None`` values are dropped.

        Returns:
            The parsed response envelope.

        Raises:
            TransportError: If there's a network communication failure.
            MalformedResponseError: If the response is not JSON.
            ApiError: If the server returned an error envelope.
        """
        client = await self._get_client()
        request_headers = self._build_headers(headers)
        logger.debug("%s %s", method, path)
        try:
            response = await client.request(
                method,
                path,
                headers=request_headers,
                params=_clean_params(params),
                **_body_kwargs(body),
            )
        except httpx.TransportError as e:
            raise TransportError(f"Network error: {e}") from e

        return self._parse_envelope(response.text, response.status_code)

    async def perform_transfer(
        self,
        path: str,
        method: str = "GET",
        *,
        body: FormFields | None = None,
        progress: ProgressCallback | None = None,
        raw: bool = False,
    ) -> Any:
        """Issue a request that reports transfer progress.

        With a body, progress is reported while the body is uploaded;
        without one, while the response is downloaded. Each transfer emits
        PROGRESS events followed by a single LOAD event.

        Args:
            path: API path relative to the host.
            method: HTTP method.
            body: Multipart body to upload.
            progress: Callback receiving ProgressEvent instances. May be a
                coroutine function.
            raw: If True, return the response bytes as a BlobDownload without
                envelope inspection.

        Returns:
            The parsed response envelope, or a BlobDownload when ``raw``.

        Raises:
            TransportError: If there's a network communication failure.
            MalformedResponseError: If a JSON response is not JSON.
            ApiError: If the server returned an error envelope or, for raw
                downloads, an error status.
        """
        client = await self._get_client()
        headers = self._build_headers(None)
        content: AsyncIterator[bytes] | None = None
        if body is not None:
            encoded = client.build_request(method, path, **_body_kwargs(body))
            payload = encoded.read()
            headers["Content-Type"] = encoded.headers["Content-Type"]
            headers["Content-Length"] = str(len(payload))
            content = self._iter_upload(payload, progress)

        request = client.build_request(method, path, headers=headers, content=content)
        logger.debug("%s %s (streamed)", method, path)
        try:
            response = await client.send(request, stream=True)
            try:
                if body is None:
                    data = await self._read_with_progress(response, progress)
                else:
                    data = await response.aread()
            finally:
                await response.aclose()
        except httpx.TransportError as e:
            raise TransportError(f"Network error: {e}") from e

        text = data.decode(response.encoding or "utf-8", errors="replace")
        if not raw:
            return self._parse_envelope(text, response.status_code)

        if response.status_code >= 400:
            self._parse_envelope(text, response.status_code)
            raise ApiError(None, f"HTTP {response.status_code}", None)

        return BlobDownload(
            blob=data,
            filename=parse_content_disposition_filename(
                response.headers.get("Content-Disposition")
            ),
            content_type=response.headers.get("Content-Type"),
        )

    async def _iter_upload(
        self, payload: bytes, progress: ProgressCallback | None
    ) -> AsyncIterator[bytes]:
        """Yield the upload body in chunks, reporting each chunk once sent."""
        total = len(payload)
        sent = 0
        for start in range(0, total, self.config.chunk_size):
            chunk = payload[start : start + self.config.chunk_size]
            yield chunk
            sent += len(chunk)
            await _notify(progress, ProgressEvent(ProgressEventType.PROGRESS, sent, total))
        await _notify(progress, ProgressEvent(ProgressEventType.LOAD, sent, total))

    async def _read_with_progress(
        self, response: httpx.Response, progress: ProgressCallback | None
    ) -> bytes:
        """Read a streamed response body, reporting each received chunk."""
        length = response.headers.get("Content-Length")
        total = int(length) if length and length.isdigit() else None
        chunks: list[bytes] = []
        received = 0
        async for chunk in response.aiter_bytes(self.config.chunk_size):
            chunks.append(chunk)
            received += len(chunk)
            await _notify(progress, ProgressEvent(ProgressEventType.PROGRESS, received, total))
        await _notify(progress, ProgressEvent(ProgressEventType.LOAD, received, total))
        return b"".join(chunks)
