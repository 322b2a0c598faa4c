"""TrueVaultClient - Main entry point for TrueVault SDK."""

from __future__ import annotations

import logging
from typing import Any, cast

from .constants import (
    DEFAULT_CHUNK_SIZE,
    DEFAULT_HOST,
    DEFAULT_TIMEOUT_MS,
    LOGIN_PATH,
    LOGOUT_PATH,
)
from .errors import StateError
from .http import ApiClient
from .types import AccessToken, ApiKey, ClientConfig, Credential, FormFields, NoAuth
from .utils import resolve_credential, validate_host

logger = logging.getLogger("truevault")


class TrueVaultClient(ApiClient):
    """Main client for interacting with the TrueVault API.

    Every operation issues exactly one HTTP request. The only state is the
    credential, which is fixed at construction and changed only by
    ``login`` and ``logout``.

    Example:
        ```python
        async with TrueVaultClient(ApiKey("your-api-key")) as client:
            vault = await client.create_vault("patients")
            doc = await client.create_document(vault["id"], None, {"name": "Ada"})
            [fetched] = await client.get_documents(vault["id"], [doc["id"]])
            print(fetched["document"])
        ```
    """

    def __init__(
        self,
        auth: Any = None,
        host: str = DEFAULT_HOST,
        *,
        timeout: int = DEFAULT_TIMEOUT_MS,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
    ) -> None:
        """Initialize the TrueVault client.

        Args:
            auth: ApiKey, AccessToken, HttpBasicHeader, NoAuth or None. A
                mapping such as ``{"apiKey": "..."}`` is also accepted.
            host: Base URL of the TrueVault API.
            timeout: HTTP request timeout in milliseconds.
            chunk_size: Chunk size in bytes for progress-reporting transfers.

        Raises:
            ConfigurationError: If ``auth`` or ``host`` is invalid.
        """
        config = ClientConfig(host=validate_host(host), timeout=timeout, chunk_size=chunk_size)
        super().__init__(config, resolve_credential(auth))

    async def __aenter__(self) -> TrueVaultClient:
        """Enter async context manager."""
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Exit async context manager."""
        await self.close()

    @property
    def credential(self) -> Credential:
        """The active credential."""
        return self._credential

    @property
    def access_token(self) -> str:
        """The access token the client authenticates with.

        Raises:
            StateError: If the client is not authenticated by access token.
        """
        if not isinstance(self._credential, AccessToken):
            raise StateError("Client is not authenticated with an access token")
        return self._credential.value

    @property
    def api_key(self) -> str:
        """The API key the client authenticates with.

        Raises:
            StateError: If the client is not authenticated by API key.
        """
        if not isinstance(self._credential, ApiKey):
            raise StateError("Client is not authenticated with an API key")
        return self._credential.value

    @classmethod
    async def generate_access_token(
        cls,
        account_id: str,
        username: str,
        password: str,
        mfa_code: str | None = None,
        host: str = DEFAULT_HOST,
        *,
        timeout: int = DEFAULT_TIMEOUT_MS,
    ) -> str:
        """Log in and return the raw access token.

        Use this to persist the token yourself; ``login`` wraps it in a client.

        Args:
            account_id: The TrueVault account ID.
            username: The user's username.
            password: The user's password.
            mfa_code: Current TOTP code, for users enrolled in MFA.
            host: Base URL of the TrueVault API.
            timeout: HTTP request timeout in milliseconds.

        Returns:
            The access token.

        Raises:
            ApiError: If the credentials are rejected.
        """
        fields: dict[str, Any] = {
            "account_id": account_id,
            "username": username,
            "password": password,
        }
        if mfa_code:
            fields["mfa_code"] = mfa_code

        async with cls(NoAuth(), host, timeout=timeout) as client:
            response = await client.perform_request(
                LOGIN_PATH, "POST", body=FormFields(fields=fields)
            )
        logger.debug("Obtained access token for user %s", username)
        return cast(str, response["user"]["access_token"])

    @classmethod
    async def login(
        cls,
        account_id: str,
        username: str,
        password: str,
        mfa_code: str | None = None,
        host: str = DEFAULT_HOST,
        *,
        timeout: int = DEFAULT_TIMEOUT_MS,
    ) -> TrueVaultClient:
        """Log in and return a client authenticated with the new access token.

        Same arguments as generate_access_token.
        """
        token = await cls.generate_access_token(
            account_id, username, password, mfa_code, host, timeout=timeout
        )
        return cls(AccessToken(token), host, timeout=timeout)

    async def logout(self) -> dict[str, Any]:
        """End the session and clear the client's credential.

        The credential is cleared once the server has answered; requests
        made afterwards carry no Authorization header.

        Returns:
            The user that was logged out.
        """
        response = await self.perform_request(LOGOUT_PATH, "POST")
        self._set_credential(NoAuth())
        logger.debug("Logged out, credential cleared")
        return cast(dict[str, Any], response["user"])
