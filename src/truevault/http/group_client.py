"""Group API client for TrueVault SDK."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from ..types import FormFields, JsonBody
from ..utils import decode_json_field, encode_json_field
from .base_client import BaseApiClient, encode_path_segment


def decode_group(group: dict[str, Any]) -> dict[str, Any]:
    """Decode a group's ``policy`` if the server sent it base64-encoded.

    A null policy becomes ``{}``; an already-decoded list is left as is.
    """
    if isinstance(group.get("policy"), str):
        group["policy"] = decode_json_field(group["policy"])
    elif "policy" in group and group["policy"] is None:
        group["policy"] = {}
    return group


class GroupApiClient(BaseApiClient):
    """API client for group operations.

    Groups carry an access policy, a list of ``{Resources, Activities}``
    statements, and a set of member user IDs.
    """

    async def create_group(
        self,
        name: str,
        policy: list[dict[str, Any]],
        user_ids: Sequence[str] | None = None,
    ) -> dict[str, Any]:
        """Create a new group.

        Args:
            name: The group name.
            policy: The group's access policy.
            user_ids: Optional IDs of initial members.

        Returns:
            The created group object.
        """
        fields: dict[str, Any] = {"name": name, "policy": encode_json_field(policy)}
        if user_ids is not None:
            fields["user_ids"] = ",".join(user_ids)
        response = await self.perform_request("v1/groups", "POST", body=FormFields(fields=fields))
        return decode_group(response["group"])

    async def read_full_group(self, group_id: str) -> dict[str, Any]:
        """Read a group including its policy and member IDs."""
        encoded = encode_path_segment(group_id)
        response = await self.perform_request(f"v1/groups/{encoded}", params={"full": True})
        return decode_group(response["group"])

    async def update_group(
        self,
        group_id: str,
        name: str | None = None,
        policy: list[dict[str, Any]] | None = None,
    ) -> dict[str, Any]:
        """Rename a group and/or replace its policy.

        Args:
            group_id: The group ID.
            name: The new name, or None to keep it.
            policy: The new policy, or None to keep it.

        Returns:
            The updated group object.
        """
        fields: dict[str, Any] = {"name": name}
        if policy is not None:
            fields["policy"] = encode_json_field(policy)
        encoded = encode_path_segment(group_id)
        response = await self.perform_request(
            f"v1/groups/{encoded}", "PUT", body=FormFields(fields=fields)
        )
        return decode_group(response["group"])

    async def list_groups(self, full: bool = True) -> list[dict[str, Any]]:
        """List all groups in the account.

        Args:
            full: If True, include policies and member IDs.
        """
        response = await self.perform_request("v1/groups", params={"full": full})
        return [decode_group(group) for group in response["groups"]]

    async def delete_group(self, group_id: str) -> dict[str, Any]:
        """Delete a group.

        Returns:
            The deleted group object.
        """
        encoded = encode_path_segment(group_id)
        response = await self.perform_request(f"v1/groups/{encoded}", "DELETE")
        return decode_group(response["group"])

    async def add_users_to_group(self, group_id: str, user_ids: Sequence[str]) -> None:
        """Add users to a group.

        Args:
            group_id: The group ID.
            user_ids: IDs of users to add.
        """
        encoded = encode_path_segment(group_id)
        await self.perform_request(
            f"v1/groups/{encoded}/membership",
            "POST",
            body=JsonBody({"user_ids": list(user_ids)}),
        )

    async def remove_users_from_group(self, group_id: str, user_ids: Sequence[str]) -> None:
        """Remove users from a group.

        Args:
            group_id: The group ID.
            user_ids: IDs of users to remove.
        """
        encoded = encode_path_segment(group_id)
        await self.perform_request(
            f"v1/groups/{encoded}/membership",
            "DELETE",
            body=JsonBody({"user_ids": list(user_ids)}),
        )

    async def add_users_to_group_return_user_ids(
        self, group_id: str, user_ids: Sequence[str]
    ) -> dict[str, Any]:
        """Add users to a group and return the group with its member IDs."""
        return await self._update_membership(group_id, user_ids, "APPEND")

    async def remove_users_from_group_return_user_ids(
        self, group_id: str, user_ids: Sequence[str]
    ) -> dict[str, Any]:
        """Remove users from a group and return the group with its member IDs."""
        return await self._update_membership(group_id, user_ids, "REMOVE")

    async def _update_membership(
        self, group_id: str, user_ids: Sequence[str], operation: str
    ) -> dict[str, Any]:
        encoded = encode_path_segment(group_id)
        body = FormFields(fields={"user_ids": ",".join(user_ids), "operation": operation})
        response = await self.perform_request(f"v1/groups/{encoded}", "PUT", body=body)
        return decode_group(response["group"])
