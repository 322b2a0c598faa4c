"""TrueVault Python SDK.

An asyncio client for the TrueVault encrypted-storage API: users, groups,
vaults, documents, blobs, schemas, password reset flows, MFA and message
relay.

Example:
    ```python
    import asyncio
    from truevault import TrueVaultClient

    async def main():
        client = await TrueVaultClient.login(account_id, "alice", "s3cret")
        async with client:
            me = await client.read_current_user()
            print(me["username"], me["attributes"])
            await client.logout()

    asyncio.run(main())
    ```
"""

from .client import TrueVaultClient
from .constants import DEFAULT_CHUNK_SIZE, DEFAULT_HOST, DEFAULT_TIMEOUT_MS
from .errors import (
    ApiError,
    ConfigurationError,
    MalformedResponseError,
    StateError,
    TransportError,
    TrueVaultError,
)
from .types import (
    AccessToken,
    ApiKey,
    BlobDownload,
    ClientConfig,
    Credential,
    FormFields,
    HttpBasicHeader,
    JsonBody,
    NoAuth,
    ProgressCallback,
    ProgressEvent,
    ProgressEventType,
)
from .utils import decode_json_field, encode_json_field

__version__ = "1.3.1"

__all__ = [
    # Main classes
    "TrueVaultClient",
    # Constants
    "DEFAULT_HOST",
    "DEFAULT_TIMEOUT_MS",
    "DEFAULT_CHUNK_SIZE",
    # Configuration
    "ClientConfig",
    "Credential",
    "ApiKey",
    "AccessToken",
    "HttpBasicHeader",
    "NoAuth",
    # Request and response types
    "FormFields",
    "JsonBody",
    "BlobDownload",
    "ProgressCallback",
    "ProgressEvent",
    "ProgressEventType",
    # Field encoding
    "encode_json_field",
    "decode_json_field",
    # Errors
    "TrueVaultError",
    "ApiError",
    "ConfigurationError",
    "MalformedResponseError",
    "StateError",
    "TransportError",
    # Version
    "__version__",
]
