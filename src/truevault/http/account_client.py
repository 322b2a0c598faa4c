"""Account-level API client for TrueVault SDK.

Covers the user schema, password reset flows and the SendGrid/Twilio message
relay. Provider credentials are passed through to TrueVault as-is.
"""

from __future__ import annotations

from typing import Any, cast

from ..types import JsonBody
from .base_client import BaseApiClient, encode_path_segment


class AccountApiClient(BaseApiClient):
    """API client for account-wide configuration and messaging."""

    # User schema endpoints

    def _user_schema_path(self, account_id: str) -> str:
        return f"v1/accounts/{encode_path_segment(account_id)}/user_schema"

    async def create_user_schema(
        self, account_id: str, name: str, fields: list[dict[str, Any]]
    ) -> dict[str, Any]:
        """Create the account's user schema.

        Args:
            account_id: The account ID.
            name: The schema name.
            fields: Field definitions indexed on user attributes.

        Returns:
            The created user schema.
        """
        response = await self.perform_request(
            self._user_schema_path(account_id),
            "POST",
            body=JsonBody({"name": name, "fields": fields}),
        )
        return cast(dict[str, Any], response["user_schema"])

    async def read_user_schema(self, account_id: str) -> dict[str, Any]:
        """Read the account's user schema."""
        response = await self.perform_request(self._user_schema_path(account_id))
        return cast(dict[str, Any], response["user_schema"])

    async def update_user_schema(
        self, account_id: str, name: str, fields: list[dict[str, Any]]
    ) -> dict[str, Any]:
        """Replace the account's user schema."""
        response = await self.perform_request(
            self._user_schema_path(account_id),
            "PUT",
            body=JsonBody({"name": name, "fields": fields}),
        )
        return cast(dict[str, Any], response["user_schema"])

    async def delete_user_schema(self, account_id: str) -> None:
        """Delete the account's user schema.

        The server refuses while any user exists.
        """
        await self.perform_request(self._user_schema_path(account_id), "DELETE")

    # Password reset endpoints

    async def create_password_reset_flow(
        self,
        name: str,
        sg_template_id: str,
        sg_api_key: str,
        user_email_value_spec: dict[str, Any],
        from_email_value_spec: dict[str, Any],
        substitutions: dict[str, Any],
    ) -> dict[str, Any]:
        """Create a password reset flow backed by a SendGrid template.

        Args:
            name: The flow name.
            sg_template_id: SendGrid template ID.
            sg_api_key: SendGrid API key.
            user_email_value_spec: Where to find the user's address, e.g.
                ``{"user_attribute": "email"}``.
            from_email_value_spec: Sender address spec, e.g.
                ``{"literal_value": "support@example.com"}``.
            substitutions: Template substitutions.

        Returns:
            The created password reset flow.
        """
        response = await self.perform_request(
            "v1/password_reset_flows",
            "POST",
            body=JsonBody(
                {
                    "name": name,
                    "sg_template_id": sg_template_id,
                    "sg_api_key": sg_api_key,
                    "user_email_value_spec": user_email_value_spec,
                    "from_email_value_spec": from_email_value_spec,
                    "substitutions": substitutions,
                }
            ),
        )
        return cast(dict[str, Any], response["password_reset_flow"])

    async def list_password_reset_flows(self) -> list[dict[str, Any]]:
        """List the account's password reset flows."""
        response = await self.perform_request("v1/password_reset_flows")
        return cast(list[dict[str, Any]], response["password_reset_flows"])

    async def send_password_reset_email(self, flow_id: str, username: str) -> None:
        """Send a password reset email to a user through a flow.

        Args:
            flow_id: The password reset flow ID.
            username: The username of the user to reset.
        """
        encoded = encode_path_segment(flow_id)
        await self.perform_request(
            f"v1/password_reset_flows/{encoded}/email",
            "POST",
            body=JsonBody({"username": username}),
        )

    # Message relay endpoints

    async def send_email_sendgrid(
        self,
        sendgrid_api_key: str,
        user_id: str,
        sendgrid_template_id: str,
        from_email_specifier: dict[str, Any],
        to_email_specifier: dict[str, Any],
        substitutions: dict[str, Any],
    ) -> str:
        """Send an email to a user through SendGrid.

        Args:
            sendgrid_api_key: SendGrid API key.
            user_id: The recipient user ID.
            sendgrid_template_id: SendGrid template ID.
            from_email_specifier: Sender address spec.
            to_email_specifier: Recipient address spec, e.g.
                ``{"user_attribute": "email"}``.
            substitutions: Template substitutions.

        Returns:
            SendGrid's message ID.
        """
        encoded = encode_path_segment(user_id)
        response = await self.perform_request(
            f"v1/users/{encoded}/message/email",
            "POST",
            body=JsonBody(
                {
                    "provider": "SENDGRID",
                    "auth": {"sendgrid_api_key": sendgrid_api_key},
                    "template_id": sendgrid_template_id,
                    "from_email_address": from_email_specifier,
                    "to_email_address": to_email_specifier,
                    "substitutions": substitutions,
                }
            ),
        )
        return cast(str, response["provider_message_id"])

    async def send_sms_twilio(
        self,
        twilio_account_sid: str,
        twilio_key_id: str,
        twilio_key_secret: str,
        user_id: str,
        from_number_specifier: dict[str, Any],
        to_number_specifier: dict[str, Any],
        message_body: str,
    ) -> str:
        """Send an SMS to a user through Twilio.

        Args:
            twilio_account_sid: Twilio account SID.
            twilio_key_id: Twilio API key SID.
            twilio_key_secret: Twilio API key secret.
            user_id: The recipient user ID.
            from_number_specifier: Sender number spec.
            to_number_specifier: Recipient number spec, e.g.
                ``{"user_attribute": "phone"}``.
            message_body: The SMS text.

        Returns:
            Twilio's message ID.
        """
        encoded = encode_path_segment(user_id)
        response = await self.perform_request(
            f"v1/users/{encoded}/message/sms",
            "POST",
            body=JsonBody(
                {
                    "provider": "TWILIO",
                    "auth": {
                        "account_sid": twilio_account_sid,
                        "username": twilio_key_id,
                        "password": twilio_key_secret,
                    },
                    "from_number": from_number_specifier,
                    "to_number": to_number_specifier,
                    "message_body": message_body,
                }
            ),
        )
        return cast(str, response["provider_message_id"])
