"""Credential resolution and Authorization header derivation."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from ..errors import ConfigurationError
from ..types import AccessToken, ApiKey, Credential, HttpBasicHeader, NoAuth
from .encoding import to_base64

# Mapping keys accepted for each credential variant.
_CREDENTIAL_KEYS: dict[str, type[ApiKey] | type[AccessToken] | type[HttpBasicHeader]] = {
    "apiKey": ApiKey,
    "api_key": ApiKey,
    "accessToken": AccessToken,
    "access_token": AccessToken,
    "httpBasic": HttpBasicHeader,
    "http_basic": HttpBasicHeader,
}


def resolve_credential(auth: Any) -> Credential:
    """Resolve an authentication specifier into a credential variant.

    Accepts a credential instance, ``None``, or a mapping with exactly one
    of ``apiKey``, ``accessToken`` or ``httpBasic`` (snake_case spellings are
    also accepted).

    Args:
        auth: The authentication specifier.

    Returns:
        The resolved credential.

    Raises:
        ConfigurationError: If the specifier has an unrecognized shape.
    """
    if auth is None:
        return NoAuth()
    if isinstance(auth, (ApiKey, AccessToken, HttpBasicHeader, NoAuth)):
        return auth
    if isinstance(auth, str):
        raise ConfigurationError(
            "A bare string is not a valid auth specifier. "
            "Use ApiKey(...), AccessToken(...) or HttpBasicHeader(...)."
        )
    if not isinstance(auth, Mapping):
        raise ConfigurationError(f"Invalid auth specifier: {auth!r}")

    matches = [key for key in auth if key in _CREDENTIAL_KEYS and auth[key] is not None]
    if len(matches) != 1:
        raise ConfigurationError(
            "Auth specifier must contain exactly one of apiKey, accessToken or httpBasic, "
            f"got keys: {sorted(auth)}"
        )
    key = matches[0]
    value = auth[key]
    if not isinstance(value, str) or not value:
        raise ConfigurationError(f"Auth value for {key!r} must be a non-empty string")
    return _CREDENTIAL_KEYS[key](value)


def basic_auth_header(value: str) -> str:
    """Build a Basic auth header using ``value`` as username and no password."""
    return f"Basic {to_base64(f'{value}:'.encode())}"


def derive_auth_header(credential: Credential) -> str | None:
    """Derive the ``Authorization`` header value for a credential.

    Returns:
        The header value, or None for NoAuth.
    """
    if isinstance(credential, (ApiKey, AccessToken)):
        return basic_auth_header(credential.value)
    if isinstance(credential, HttpBasicHeader):
        return credential.value
    return None
