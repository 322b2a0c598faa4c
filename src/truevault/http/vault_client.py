"""Vault and schema API client for TrueVault SDK."""

from __future__ import annotations

from typing import Any, cast

from ..types import FormFields
from ..utils import encode_json_field
from .base_client import BaseApiClient, encode_path_segment


def _schema_fields(name: str, fields: list[dict[str, Any]]) -> FormFields:
    """Build the form body carrying a base64-encoded schema definition."""
    return FormFields(fields={"schema": encode_json_field({"name": name, "fields": fields})})


class VaultApiClient(BaseApiClient):
    """API client for vault and vault schema operations."""

    # Vault endpoints

    async def list_vaults(self) -> list[dict[str, Any]]:
        """List all vaults in the account."""
        response = await self.perform_request("v1/vaults")
        return cast(list[dict[str, Any]], response["vaults"])

    async def create_vault(self, name: str) -> dict[str, Any]:
        """Create a new vault.

        Args:
            name: The vault name.

        Returns:
            The created vault object.
        """
        response = await self.perform_request(
            "v1/vaults", "POST", body=FormFields(fields={"name": name})
        )
        return cast(dict[str, Any], response["vault"])

    async def read_vault(self, vault_id: str) -> dict[str, Any]:
        """Read a vault."""
        encoded = encode_path_segment(vault_id)
        response = await self.perform_request(f"v1/vaults/{encoded}")
        return cast(dict[str, Any], response["vault"])

    async def update_vault(self, vault_id: str, name: str) -> dict[str, Any]:
        """Rename a vault.

        Args:
            vault_id: The vault ID.
            name: The new name.

        Returns:
            The updated vault object.
        """
        encoded = encode_path_segment(vault_id)
        response = await self.perform_request(
            f"v1/vaults/{encoded}", "PUT", body=FormFields(fields={"name": name})
        )
        return cast(dict[str, Any], response["vault"])

    async def delete_vault(self, vault_id: str) -> dict[str, Any]:
        """Delete a vault and everything in it.

        Returns:
            The deleted vault object.
        """
        encoded = encode_path_segment(vault_id)
        response = await self.perform_request(f"v1/vaults/{encoded}", "DELETE")
        return cast(dict[str, Any], response["vault"])

    # Schema endpoints

    async def create_schema(
        self, vault_id: str, name: str, fields: list[dict[str, Any]]
    ) -> dict[str, Any]:
        """Create a schema in a vault.

        Args:
            vault_id: The vault ID.
            name: The schema name.
            fields: Field definitions, e.g.
                ``[{"name": "email", "type": "string", "index": True}]``.

        Returns:
            The created schema object.
        """
        encoded = encode_path_segment(vault_id)
        response = await self.perform_request(
            f"v1/vaults/{encoded}/schemas", "POST", body=_schema_fields(name, fields)
        )
        return cast(dict[str, Any], response["schema"])

    async def read_schema(self, vault_id: str, schema_id: str) -> dict[str, Any]:
        """Read a schema."""
        encoded_vault = encode_path_segment(vault_id)
        encoded_schema = encode_path_segment(schema_id)
        response = await self.perform_request(f"v1/vaults/{encoded_vault}/schemas/{encoded_schema}")
        return cast(dict[str, Any], response["schema"])

    async def list_schemas(self, vault_id: str) -> list[dict[str, Any]]:
        """List the schemas in a vault."""
        encoded = encode_path_segment(vault_id)
        response = await self.perform_request(f"v1/vaults/{encoded}/schemas")
        return cast(list[dict[str, Any]], response["schemas"])

    async def update_schema(
        self, vault_id: str, schema_id: str, name: str, fields: list[dict[str, Any]]
    ) -> dict[str, Any]:
        """Replace a schema's name and field definitions.

        Returns:
            The updated schema object.
        """
        encoded_vault = encode_path_segment(vault_id)
        encoded_schema = encode_path_segment(schema_id)
        response = await self.perform_request(
            f"v1/vaults/{encoded_vault}/schemas/{encoded_schema}",
            "PUT",
            body=_schema_fields(name, fields),
        )
        return cast(dict[str, Any], response["schema"])

    async def delete_schema(self, vault_id: str, schema_id: str) -> None:
        """Delete a schema."""
        encoded_vault = encode_path_segment(vault_id)
        encoded_schema = encode_path_segment(schema_id)
        await self.perform_request(
            f"v1/vaults/{encoded_vault}/schemas/{encoded_schema}", "DELETE"
        )
