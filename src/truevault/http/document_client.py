"""Document API client for TrueVault SDK."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, cast

from ..types import FormFields, JsonBody
from ..utils import decode_field_in_place, encode_json_field, validate_id_list
from .base_client import (
    BaseApiClient,
    encode_id_list,
    encode_path_segment,
    expand_multiget_ids,
)


def decode_document(document: dict[str, Any]) -> dict[str, Any]:
    """Decode a document's base64 ``document`` contents in place."""
    return decode_field_in_place(document, "document")


def _page_params(full: bool, page: int | None, per_page: int | None) -> dict[str, Any]:
    return {"full": full or None, "page": page, "per_page": per_page}


class DocumentApiClient(BaseApiClient):
    """API client for document operations.

    Document contents are arbitrary JSON, transmitted base64-encoded and
    decoded on the way back.
    """

    async def create_document(
        self,
        vault_id: str,
        schema_id: str | None,
        document: Any,
        owner_id: str | None = None,
    ) -> dict[str, Any]:
        """Create a document.

        Args:
            vault_id: The vault ID.
            schema_id: Optional schema to index the document with.
            document: The document contents.
            owner_id: Optional ID of the user who owns the document.

        Returns:
            The created document's metadata (``id``, ``vault_id``, ``owner_id``).
        """
        payload: dict[str, Any] = {"document": encode_json_field(document)}
        if schema_id:
            payload["schema_id"] = schema_id
        if owner_id:
            payload["owner_id"] = owner_id

        encoded = encode_path_segment(vault_id)
        response = await self.perform_request(
            f"v2/vaults/{encoded}/documents", "POST", body=JsonBody(payload)
        )
        return cast(dict[str, Any], response["document"])

    async def list_documents(
        self,
        vault_id: str,
        full: bool = False,
        page: int | None = None,
        per_page: int | None = None,
    ) -> dict[str, Any]:
        """List documents in a vault.

        Args:
            vault_id: The vault ID.
            full: If True, include decoded document contents.
            page: Page number, starting at 1.
            per_page: Page size.

        Returns:
            The page: ``items``, ``page``, ``per_page`` and ``total``.
        """
        encoded = encode_path_segment(vault_id)
        response = await self.perform_request(
            f"v1/vaults/{encoded}/documents", params=_page_params(full, page, per_page)
        )
        return self._decode_page(response["data"], "items")

    async def list_documents_in_schema(
        self,
        vault_id: str,
        schema_id: str,
        full: bool = False,
        page: int | None = None,
        per_page: int | None = None,
    ) -> dict[str, Any]:
        """List the documents indexed by a schema.

        Same arguments and result as list_documents.
        """
        encoded_vault = encode_path_segment(vault_id)
        encoded_schema = encode_path_segment(schema_id)
        response = await self.perform_request(
            f"v1/vaults/{encoded_vault}/schemas/{encoded_schema}/documents",
            params=_page_params(full, page, per_page),
        )
        return self._decode_page(response["data"], "items")

    async def get_documents(
        self, vault_id: str, document_ids: Sequence[str]
    ) -> list[dict[str, Any]]:
        """Fetch documents by ID.

        Always returns a list of ``{id, document, ...}`` objects, whatever
        the number of IDs requested.

        Args:
            vault_id: The vault ID.
            document_ids: The document IDs. An empty list returns ``[]``
                without a request.

        Returns:
            Decoded documents in server order.
        """
        ids = validate_id_list(document_ids, "document_ids")
        if not ids:
            return []

        request_ids = expand_multiget_ids(ids)
        encoded = encode_path_segment(vault_id)
        response = await self.perform_request(
            f"v1/vaults/{encoded}/documents/{encode_id_list(request_ids)}"
        )
        documents = [decode_document(doc) for doc in response["documents"]]
        if len(ids) == 1:
            # Duplicate results come back for the doubled ID.
            return documents[:1]
        return documents

    async def search_documents(
        self, vault_id: str, search_option: dict[str, Any]
    ) -> dict[str, Any]:
        """Search documents in a vault.

        Args:
            vault_id: The vault ID.
            search_option: Search filter, e.g. ``{"schema_id": ..., "filter":
                {"name": {"type": "eq", "value": "x"}}}``. Set
                ``full_document`` to include contents in the results.

        Returns:
            The search result page: ``documents`` and ``info``.
        """
        encoded = encode_path_segment(vault_id)
        response = await self.perform_request(
            f"v1/vaults/{encoded}/search",
            "POST",
            body=FormFields(fields={"search_option": encode_json_field(search_option)}),
        )
        return self._decode_page(response["data"], "documents")

    async def update_document(
        self,
        vault_id: str,
        document_id: str,
        document: Any,
        owner_id: str | None = None,
        schema_id: str | None = None,
    ) -> dict[str, Any]:
        """Replace a document's contents.

        Args:
            vault_id: The vault ID.
            document_id: The document ID.
            document: The new contents.
            owner_id: Optional new owner.
            schema_id: Optional schema to (re)index the document with.

        Returns:
            The updated document's metadata.
        """
        payload: dict[str, Any] = {"document": encode_json_field(document)}
        if owner_id:
            payload["owner_id"] = owner_id
        if schema_id:
            payload["schema_id"] = schema_id

        encoded_vault = encode_path_segment(vault_id)
        encoded_doc = encode_path_segment(document_id)
        response = await self.perform_request(
            f"v2/vaults/{encoded_vault}/documents/{encoded_doc}", "PUT", body=JsonBody(payload)
        )
        return cast(dict[str, Any], response["document"])

    async def update_document_owner(
        self, vault_id: str, document_id: str, owner_id: str
    ) -> dict[str, Any]:
        """Change the owner of a document."""
        encoded_vault = encode_path_segment(vault_id)
        encoded_doc = encode_path_segment(document_id)
        response = await self.perform_request(
            f"v2/vaults/{encoded_vault}/documents/{encoded_doc}/owner",
            "PUT",
            body=JsonBody({"owner_id": owner_id}),
        )
        return cast(dict[str, Any], response["document"])

    async def delete_document(self, vault_id: str, document_id: str) -> dict[str, Any]:
        """Delete a document.

        Returns:
            The response envelope.
        """
        encoded_vault = encode_path_segment(vault_id)
        encoded_doc = encode_path_segment(document_id)
        return cast(
            dict[str, Any],
            await self.perform_request(
                f"v1/vaults/{encoded_vault}/documents/{encoded_doc}", "DELETE"
            ),
        )

    @staticmethod
    def _decode_page(data: dict[str, Any], key: str) -> dict[str, Any]:
        for document in data.get(key, []):
            decode_document(document)
        return data
