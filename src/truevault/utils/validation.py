"""Validation utilities for TrueVault SDK."""

from __future__ import annotations

from collections.abc import Sequence
from urllib.parse import urlparse

from ..errors import ConfigurationError


def validate_host(host: str) -> str:
    """Validate the API host URL and strip any trailing slash.

    Args:
        host: The base URL, e.g. ``https://api.truevault.com``.

    Returns:
        The host without a trailing slash.

    Raises:
        ConfigurationError: If the host is not an absolute http(s) URL.
    """
    if not isinstance(host, str):
        raise ConfigurationError(f"Host must be a string: {host!r}")
    parsed = urlparse(host)
    if parsed.scheme not in ("http", "https"):
        raise ConfigurationError(f"Host must use HTTP(S): {host}")
    if not parsed.netloc:
        raise ConfigurationError(f"Host must have a network location: {host}")
    return host.rstrip("/")


def validate_id_list(ids: Sequence[str], name: str = "ids") -> list[str]:
    """Validate a list of resource IDs.

    Args:
        ids: The IDs to validate.
        name: Argument name used in error messages.

    Returns:
        The IDs as a list.

    Raises:
        ValueError: If ``ids`` is a plain string or contains empty values.
    """
    if isinstance(ids, (str, bytes)):
        raise ValueError(f"{name} must be a list of IDs, not a string")
    result = list(ids)
    for value in result:
        if not value:
            raise ValueError(f"{name} cannot contain empty IDs")
    return result
