"""Blob API client for TrueVault SDK."""

from __future__ import annotations

from typing import Any, cast

from ..types import BlobDownload, FileInput, FormFields, JsonBody, ProgressCallback
from .base_client import BaseApiClient, encode_path_segment


def _file_body(file: FileInput, owner_id: str | None = None) -> FormFields:
    return FormFields(fields={"owner_id": owner_id}, files={"file": file})


class BlobApiClient(BaseApiClient):
    """API client for blob (binary file) operations.

    Create, update and download each come in a plain form and a
    ``*_with_progress`` form that reports transfer progress.
    """

    def _blob_path(self, vault_id: str, blob_id: str | None = None) -> str:
        path = f"v1/vaults/{encode_path_segment(vault_id)}/blobs"
        if blob_id is not None:
            path += f"/{encode_path_segment(blob_id)}"
        return path

    async def create_blob(
        self, vault_id: str, file: FileInput, owner_id: str | None = None
    ) -> dict[str, Any]:
        """Upload a new blob.

        Args:
            vault_id: The vault ID.
            file: The file contents: bytes, a binary file object, or an httpx
                ``(filename, content[, content_type])`` tuple.
            owner_id: Optional ID of the user who owns the blob.

        Returns:
            The created blob's metadata (``id``, ``filename``, ``size``).
        """
        response = await self.perform_request(
            self._blob_path(vault_id), "POST", body=_file_body(file, owner_id)
        )
        return cast(dict[str, Any], response["blob"])

    async def create_blob_with_progress(
        self,
        vault_id: str,
        file: FileInput,
        progress: ProgressCallback,
        owner_id: str | None = None,
    ) -> dict[str, Any]:
        """Upload a new blob, reporting upload progress.

        Args:
            vault_id: The vault ID.
            file: The file contents.
            progress: Callback receiving ProgressEvent instances.
            owner_id: Optional ID of the user who owns the blob.

        Returns:
            The created blob's metadata.
        """
        response = await self.perform_transfer(
            self._blob_path(vault_id), "POST", body=_file_body(file, owner_id), progress=progress
        )
        return cast(dict[str, Any], response["blob"])

    async def get_blob(self, vault_id: str, blob_id: str) -> BlobDownload:
        """Download a blob's contents.

        Returns:
            The raw blob with its file name and content type.
        """
        return cast(
            BlobDownload, await self.perform_transfer(self._blob_path(vault_id, blob_id), raw=True)
        )

    async def get_blob_with_progress(
        self, vault_id: str, blob_id: str, progress: ProgressCallback
    ) -> BlobDownload:
        """Download a blob's contents, reporting download progress."""
        return cast(
            BlobDownload,
            await self.perform_transfer(
                self._blob_path(vault_id, blob_id), progress=progress, raw=True
            ),
        )

    async def list_blobs(
        self, vault_id: str, page: int | None = None, per_page: int | None = None
    ) -> dict[str, Any]:
        """List blobs in a vault.

        Returns:
            The page: ``items``, ``page``, ``per_page`` and ``total``.
        """
        response = await self.perform_request(
            self._blob_path(vault_id), params={"page": page, "per_page": per_page}
        )
        return cast(dict[str, Any], response["data"])

    async def update_blob(self, vault_id: str, blob_id: str, file: FileInput) -> dict[str, Any]:
        """Replace a blob's contents."""
        response = await self.perform_request(
            self._blob_path(vault_id, blob_id), "PUT", body=_file_body(file)
        )
        return cast(dict[str, Any], response["blob"])

    async def update_blob_with_progress(
        self, vault_id: str, blob_id: str, file: FileInput, progress: ProgressCallback
    ) -> dict[str, Any]:
        """Replace a blob's contents, reporting upload progress."""
        response = await self.perform_transfer(
            self._blob_path(vault_id, blob_id), "PUT", body=_file_body(file), progress=progress
        )
        return cast(dict[str, Any], response["blob"])

    async def update_blob_owner(self, vault_id: str, blob_id: str, owner_id: str) -> dict[str, Any]:
        """Change the owner of a blob."""
        path = (
            f"v2/vaults/{encode_path_segment(vault_id)}"
            f"/blobs/{encode_path_segment(blob_id)}/owner"
        )
        response = await self.perform_request(path, "PUT", body=JsonBody({"owner_id": owner_id}))
        return cast(dict[str, Any], response["blob"])

    async def delete_blob(self, vault_id: str, blob_id: str) -> dict[str, Any]:
        """Delete a blob.

        Returns:
            The response envelope.
        """
        return cast(
            dict[str, Any],
            await self.perform_request(self._blob_path(vault_id, blob_id), "DELETE"),
        )
