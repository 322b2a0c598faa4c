"""HTTP client for TrueVault SDK.

This module provides HTTP clients for the TrueVault API:
- ApiClient: Unified client with all operations
- BaseApiClient: Auth header, dispatch and envelope handling
- UserApiClient: Users, credentials and MFA
- GroupApiClient: Groups and membership
- VaultApiClient: Vaults and vault schemas
- DocumentApiClient: Documents
- BlobApiClient: Blobs, with optional progress reporting
- AccountApiClient: User schema, password reset flows and message relay
"""

from .account_client import AccountApiClient
from .api_client import ApiClient
from .base_client import BaseApiClient, encode_path_segment
from .blob_client import BlobApiClient
from .document_client import DocumentApiClient
from .group_client import GroupApiClient
from .user_client import UserApiClient
from .vault_client import VaultApiClient

__all__ = [
    "AccountApiClient",
    "ApiClient",
    "BaseApiClient",
    "BlobApiClient",
    "DocumentApiClient",
    "GroupApiClient",
    "UserApiClient",
    "VaultApiClient",
    "encode_path_segment",
]
