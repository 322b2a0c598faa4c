"""Error hierarchy for TrueVault SDK."""

from __future__ import annotations

from typing import Any


class TrueVaultError(Exception):
    """Base exception for all TrueVault SDK errors."""

    pass


class ConfigurationError(TrueVaultError):
    """Invalid client construction arguments."""

    pass


class TransportError(TrueVaultError):
    """Network communication failure (DNS, connection reset, timeout)."""

    pass


class MalformedResponseError(TrueVaultError):
    """Response body is not valid JSON.

    Attributes:
        body: The raw response text.
        status_code: The HTTP status code, if known.
    """

    def __init__(self, body: str, status_code: int | None = None) -> None:
        self.body = body
        self.status_code = status_code
        super().__init__(f"non-JSON response: {body}")


class ApiError(TrueVaultError):
    """The server answered with an error envelope.

    Fields are copied verbatim from the server so they can be correlated with
    vendor support.

    Attributes:
        code: Machine-readable error code.
        message: Human-readable error message.
        type: Error category.
        transaction_id: Server-side correlation identifier.
    """

    def __init__(
        self,
        code: str | None,
        message: str | None,
        type: str | None,
        transaction_id: str | None = None,
    ) -> None:
        self.code = code
        self.message = message
        self.type = type
        self.transaction_id = transaction_id
        super().__init__(message or code or "TrueVault API error")

    @classmethod
    def from_envelope(cls, envelope: dict[str, Any]) -> ApiError:
        """Build an ApiError from a ``result: "error"`` envelope.

        An ``error`` member that is not an object is used as the message.
        """
        error = envelope.get("error")
        if not isinstance(error, dict):
            return cls(
                code=None,
                message=str(error) if error is not None else None,
                type=None,
                transaction_id=envelope.get("transaction_id"),
            )
        return cls(
            code=error.get("code"),
            message=error.get("message"),
            type=error.get("type"),
            transaction_id=envelope.get("transaction_id"),
        )

    @property
    def error(self) -> dict[str, str | None]:
        """The nested error object as sent by the server."""
        return {"code": self.code, "message": self.message, "type": self.type}


class StateError(TrueVaultError):
    """Operation requires a credential the client does not hold."""

    pass
