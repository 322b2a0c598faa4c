"""Unified HTTP API client for TrueVault SDK."""

from __future__ import annotations

from .account_client import AccountApiClient
from .blob_client import BlobApiClient
from .document_client import DocumentApiClient
from .group_client import GroupApiClient
from .user_client import UserApiClient
from .vault_client import VaultApiClient


class ApiClient(
    UserApiClient,
    GroupApiClient,
    VaultApiClient,
    DocumentApiClient,
    BlobApiClient,
    AccountApiClient,
):
    """HTTP client exposing every TrueVault API operation.

    All domain clients share one BaseApiClient state: the HTTP connection and
    the Authorization header.
    """
