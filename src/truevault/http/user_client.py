"""User API client for TrueVault SDK."""

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


def decode_user(user: dict[str, Any]) -> dict[str, Any]:
    """Decode a user's base64 ``attributes`` in place.

    Null attributes become ``{}``; a missing key is left missing.
    """
    return decode_field_in_place(user, "attributes")


def _user_fields(**fields: Any) -> FormFields:
    return FormFields(fields=fields)


class UserApiClient(BaseApiClient):
    """API client for user operations.

    Provides methods for creating, reading, updating and searching users,
    issuing user credentials and managing MFA enrollment.
    """

    async def read_current_user(self, full: bool = True) -> dict[str, Any]:
        """Read the user the client is authenticated as.

        Args:
            full: If True, include the user's attributes.

        Returns:
            The user object.
        """
        response = await self.perform_request("v1/auth/me", params={"full": full})
        return decode_user(response["user"])

    async def update_current_user(self, attributes: Any) -> dict[str, Any]:
        """Replace the attributes of the authenticated user.

        Args:
            attributes: New attributes. None clears them to ``{}``.

        Returns:
            The updated user object.
        """
        response = await self.perform_request(
            "v1/auth/me",
            "PUT",
            body=_user_fields(attributes=encode_json_field(attributes)),
        )
        return decode_user(response["user"])

    async def list_users(self, full: bool = True) -> list[dict[str, Any]]:
        """List all users in the account.

        Args:
            full: If True, include each user's attributes.

        Returns:
            List of user objects.
        """
        response = await self.perform_request("v1/users", params={"full": full})
        return [decode_user(user) for user in response["users"]]

    async def list_users_with_status(
        self, status: str, full: bool = False
    ) -> list[dict[str, Any]]:
        """List users with the given status.

        Args:
            status: User status, e.g. ``ACTIVE``, ``DEACTIVATED`` or ``PENDING``.
            full: If True, include each user's attributes.

        Returns:
            List of user objects.
        """
        response = await self.perform_request(
            "v1/users", params={"status": status, "full": full}
        )
        return [decode_user(user) for user in response["users"]]

    async def create_user(
        self,
        username: str,
        password: str,
        attributes: Any = None,
        group_ids: Sequence[str] | None = None,
        status: str | None = None,
    ) -> dict[str, Any]:
        """Create a new user.

        Args:
            username: The new user's username.
            password: The new user's password.
            attributes: Optional attributes to store on the user.
            group_ids: Optional IDs of groups to add the user to.
            status: Optional initial status, e.g. ``PENDING``.

        Returns:
            The created user object.
        """
        fields: dict[str, Any] = {"username": username, "password": password}
        if attributes is not None:
            fields["attributes"] = encode_json_field(attributes)
        if group_ids:
            fields["group_ids"] = ",".join(group_ids)
        if status is not None:
            fields["status"] = status

        response = await self.perform_request("v1/users", "POST", body=FormFields(fields=fields))
        return decode_user(response["user"])

    async def read_user(self, user_id: str) -> dict[str, Any]:
        """Read a single user, including attributes.

        Args:
            user_id: The user ID.

        Returns:
            The user object.
        """
        encoded = encode_path_segment(user_id)
        response = await self.perform_request(f"v1/users/{encoded}", params={"full": True})
        return decode_user(response["user"])

    async def read_users(self, user_ids: Sequence[str]) -> list[dict[str, Any]]:
        """Read several users at once, including attributes.

        Args:
            user_ids: The user IDs. An empty list returns ``[]`` without a
                request.

        Returns:
            List of user objects in server order.
        """
        ids = validate_id_list(user_ids, "user_ids")
        if not ids:
            return []

        request_ids = expand_multiget_ids(ids)
        response = await self.perform_request(
            f"v1/users/{encode_id_list(request_ids)}", params={"full": True}
        )
        users = [decode_user(user) for user in response["users"]]
        if len(ids) == 1:
            return users[:1]
        return users

    async def update_user_attributes(self, user_id: str, attributes: Any) -> dict[str, Any]:
        """Replace a user's attributes.

        Args:
            user_id: The user ID.
            attributes: The new attributes.

        Returns:
            The updated user object.
        """
        return await self._update_user(user_id, attributes=encode_json_field(attributes))

    async def update_user_status(self, user_id: str, status: str) -> dict[str, Any]:
        """Change a user's status."""
        return await self._update_user(user_id, status=status)

    async def update_user_username(self, user_id: str, username: str) -> dict[str, Any]:
        """Change a user's username."""
        return await self._update_user(user_id, username=username)

    async def update_user_password(self, user_id: str, password: str) -> dict[str, Any]:
        """Change a user's password."""
        return await self._update_user(user_id, password=password)

    async def _update_user(self, user_id: str, **fields: Any) -> dict[str, Any]:
        encoded = encode_path_segment(user_id)
        response = await self.perform_request(
            f"v1/users/{encoded}", "PUT", body=_user_fields(**fields)
        )
        return decode_user(response["user"])

    async def delete_user(self, user_id: str) -> dict[str, Any]:
        """Delete a user.

        Args:
            user_id: The user ID.

        Returns:
            The deleted user object.
        """
        encoded = encode_path_segment(user_id)
        response = await self.perform_request(f"v1/users/{encoded}", "DELETE")
        return decode_user(response["user"])

    async def search_users(self, search_option: dict[str, Any]) -> dict[str, Any]:
        """Search users by attribute.

        Args:
            search_option: Search filter, e.g.
                ``{"filter": {"email": {"type": "eq", "value": "a@b.c"}}}``.
                Set ``full_document`` to include attributes in the results.

        Returns:
            The search result page: ``documents`` and ``info``.
        """
        response = await self.perform_request(
            "v1/users/search",
            "POST",
            body=_user_fields(search_option=encode_json_field(search_option)),
        )
        data = response["data"]
        for user in data.get("documents", []):
            decode_user(user)
        return cast(dict[str, Any], data)

    async def create_user_api_key(self, user_id: str) -> str:
        """Create a new API key for a user.

        Returns:
            The API key.
        """
        encoded = encode_path_segment(user_id)
        response = await self.perform_request(f"v1/users/{encoded}/api_key", "POST")
        return cast(str, response["api_key"])

    async def create_user_access_token(self, user_id: str) -> str:
        """Create a new access token for a user.

        Returns:
            The access token.
        """
        encoded = encode_path_segment(user_id)
        response = await self.perform_request(f"v1/users/{encoded}/access_token", "POST")
        return cast(str, response["user"]["access_token"])

    # MFA

    async def start_user_mfa_enrollment(self, user_id: str, issuer: str) -> dict[str, Any]:
        """Begin TOTP MFA enrollment for a user.

        Args:
            user_id: The user ID.
            issuer: Issuer name shown in the user's authenticator app.

        Returns:
            Enrollment info with ``secret``, ``uri`` and ``qr_code_svg``.
        """
        encoded = encode_path_segment(user_id)
        response = await self.perform_request(
            f"v1/users/{encoded}/mfa/start_enrollment",
            "POST",
            body=JsonBody({"issuer": issuer}),
        )
        return cast(dict[str, Any], response["mfa"])

    async def finalize_mfa_enrollment(
        self, user_id: str, mfa_code_1: str, mfa_code_2: str
    ) -> None:
        """Finish MFA enrollment with two consecutive TOTP codes.

        Args:
            user_id: The user ID.
            mfa_code_1: A TOTP code.
            mfa_code_2: The next TOTP code.
        """
        encoded = encode_path_segment(user_id)
        await self.perform_request(
            f"v1/users/{encoded}/mfa/finalize_enrollment",
            "POST",
            body=JsonBody({"mfa_code_1": mfa_code_1, "mfa_code_2": mfa_code_2}),
        )

    async def unenroll_mfa(self, user_id: str, mfa_code: str, password: str) -> None:
        """Remove MFA from a user.

        Args:
            user_id: The user ID.
            mfa_code: A current TOTP code.
            password: The user's password.
        """
        encoded = encode_path_segment(user_id)
        await self.perform_request(
            f"v1/users/{encoded}/mfa/unenroll",
            "POST",
            body=JsonBody({"mfa_code": mfa_code, "password": password}),
        )
