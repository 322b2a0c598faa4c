"""Tests for group, vault, schema, blob and account operations."""

from __future__ import annotations

import json
from typing import Any

import httpx
import pytest

from truevault import (
    ApiKey,
    BlobDownload,
    ProgressEvent,
    ProgressEventType,
    TrueVaultClient,
    decode_json_field,
    encode_json_field,
)

HOST = "https://api.test.truevault.com"

POLICY = [{"Resources": ["Vault::.*"], "Activities": "CRUD"}]


class Recorder:
    """Mock transport handler that records requests and replies with fixed JSON."""

    def __init__(self, payload: dict[str, Any]) -> None:
        self.payload = {"result": "success", "transaction_id": "tx", **payload}
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return httpx.Response(200, json=self.payload)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]


def make_client(handler: Any) -> TrueVaultClient:
    client = TrueVaultClient(ApiKey("test-api-key"), HOST)
    client._client = httpx.AsyncClient(base_url=HOST, transport=httpx.MockTransport(handler))
    return client


def form_value(request: httpx.Request, name: str) -> str:
    """Extract a plain field value from a multipart request body."""
    boundary = request.headers["Content-Type"].split("boundary=")[1].encode()
    for part in request.content.split(b"--" + boundary):
        head, _, value = part.partition(b"\r\n\r\n")
        if f'name="{name}"'.encode() in head:
            return value.rstrip(b"\r\n").decode()
    raise KeyError(name)


class TestGroups:
    """Tests for group operations."""

    @pytest.mark.asyncio
    async def test_create_group_encodes_policy(self) -> None:
        recorder = Recorder({"group": {"id": "g1", "name": "admins", "policy": POLICY}})
        group = await make_client(recorder).create_group("admins", POLICY, ["u1", "u2"])

        assert decode_json_field(form_value(recorder.last, "policy")) == POLICY
        assert form_value(recorder.last, "user_ids") == "u1,u2"
        assert group["policy"] == POLICY

    @pytest.mark.asyncio
    async def test_read_full_group_decodes_encoded_policy(self) -> None:
        recorder = Recorder({"group": {"id": "g1", "policy": encode_json_field(POLICY)}})
        group = await make_client(recorder).read_full_group("g1")

        assert recorder.last.url.params["full"] == "true"
        assert group["policy"] == POLICY

    @pytest.mark.asyncio
    async def test_read_full_group_null_policy_becomes_empty_dict(self) -> None:
        recorder = Recorder({"group": {"id": "g1", "policy": None}})
        group = await make_client(recorder).read_full_group("g1")

        assert group["policy"] == {}

    @pytest.mark.asyncio
    async def test_list_groups_keeps_decoded_policy_and_absent_key(self) -> None:
        recorder = Recorder({"groups": [{"id": "g1", "policy": POLICY}, {"id": "g2"}]})
        groups = await make_client(recorder).list_groups()

        assert groups[0]["policy"] == POLICY
        assert "policy" not in groups[1]

    @pytest.mark.asyncio
    async def test_update_group(self) -> None:
        recorder = Recorder({"group": {"id": "g1", "name": "renamed"}})
        await make_client(recorder).update_group("g1", "renamed", [])

        assert recorder.last.method == "PUT"
        assert form_value(recorder.last, "name") == "renamed"
        assert decode_json_field(form_value(recorder.last, "policy")) == []

    @pytest.mark.asyncio
    async def test_list_groups(self) -> None:
        recorder = Recorder({"groups": [{"id": "g1"}, {"id": "g2"}]})
        groups = await make_client(recorder).list_groups()

        assert [group["id"] for group in groups] == ["g1", "g2"]

    @pytest.mark.asyncio
    async def test_membership_json_endpoints(self) -> None:
        recorder = Recorder({})
        client = make_client(recorder)

        assert await client.add_users_to_group("g1", ["u1"]) is None
        assert recorder.last.method == "POST"
        assert recorder.last.url.path == "/v1/groups/g1/membership"
        assert json.loads(recorder.last.content) == {"user_ids": ["u1"]}

        assert await client.remove_users_from_group("g1", ["u1"]) is None
        assert recorder.last.method == "DELETE"
        assert json.loads(recorder.last.content) == {"user_ids": ["u1"]}

    @pytest.mark.asyncio
    async def test_membership_returning_user_ids(self) -> None:
        recorder = Recorder({"group": {"id": "g1", "user_ids": ["u1"]}})
        client = make_client(recorder)

        group = await client.add_users_to_group_return_user_ids("g1", ["u1"])
        assert form_value(recorder.last, "operation") == "APPEND"
        assert group["user_ids"] == ["u1"]

        await client.remove_users_from_group_return_user_ids("g1", ["u1"])
        assert form_value(recorder.last, "operation") == "REMOVE"

    @pytest.mark.asyncio
    async def test_delete_group(self) -> None:
        recorder = Recorder({"group": {"id": "g1"}})
        assert await make_client(recorder).delete_group("g1") == {"id": "g1"}
        assert recorder.last.method == "DELETE"


class TestVaultsAndSchemas:
    """Tests for vault and schema operations."""

    @pytest.mark.asyncio
    async def test_vault_lifecycle(self) -> None:
        recorder = Recorder({"vault": {"id": "v1", "name": "patients"}, "vaults": []})
        client = make_client(recorder)

        assert (await client.create_vault("patients"))["id"] == "v1"
        assert form_value(recorder.last, "name") == "patients"

        await client.read_vault("v1")
        assert recorder.last.url.path == "/v1/vaults/v1"

        await client.update_vault("v1", "renamed")
        assert recorder.last.method == "PUT"

        await client.delete_vault("v1")
        assert recorder.last.method == "DELETE"

        assert await client.list_vaults() == []

    @pytest.mark.asyncio
    async def test_create_schema_encodes_definition(self) -> None:
        fields = [{"name": "foo", "type": "string", "index": True}]
        recorder = Recorder({"schema": {"id": "s1", "name": "people", "fields": fields}})
        schema = await make_client(recorder).create_schema("v1", "people", fields)

        assert recorder.last.url.path == "/v1/vaults/v1/schemas"
        assert decode_json_field(form_value(recorder.last, "schema")) == {
            "name": "people",
            "fields": fields,
        }
        assert schema["id"] == "s1"

    @pytest.mark.asyncio
    async def test_schema_read_list_update_delete(self) -> None:
        recorder = Recorder({"schema": {"id": "s1"}, "schemas": [{"id": "s1"}]})
        client = make_client(recorder)

        assert (await client.read_schema("v1", "s1"))["id"] == "s1"
        assert await client.list_schemas("v1") == [{"id": "s1"}]

        await client.update_schema("v1", "s1", "renamed", [])
        assert recorder.last.method == "PUT"
        assert decode_json_field(form_value(recorder.last, "schema")) == {
            "name": "renamed",
            "fields": [],
        }

        assert await client.delete_schema("v1", "s1") is None
        assert recorder.last.url.path == "/v1/vaults/v1/schemas/s1"


class TestBlobs:
    """Tests for blob operations."""

    @pytest.mark.asyncio
    async def test_create_blob(self) -> None:
        recorder = Recorder({"blob": {"id": "b1", "filename": "a.txt", "size": "5"}})
        blob = await make_client(recorder).create_blob("v1", ("a.txt", b"hello", "text/plain"))

        assert recorder.last.url.path == "/v1/vaults/v1/blobs"
        assert b'filename="a.txt"' in recorder.last.content
        assert b"hello" in recorder.last.content
        assert b'name="owner_id"' not in recorder.last.content
        assert blob["id"] == "b1"

    @pytest.mark.asyncio
    async def test_create_blob_with_progress(self) -> None:
        recorder = Recorder({"blob": {"id": "b1"}})
        events: list[ProgressEvent] = []

        blob = await make_client(recorder).create_blob_with_progress(
            "v1", ("a.bin", b"\x00" * 1000), events.append, owner_id="u1"
        )

        assert blob == {"id": "b1"}
        assert form_value(recorder.last, "owner_id") == "u1"
        assert events[0].type == ProgressEventType.PROGRESS
        assert events[-1].type == ProgressEventType.LOAD

    @pytest.mark.asyncio
    async def test_update_blob_with_progress(self) -> None:
        recorder = Recorder({"blob": {"id": "b1"}})
        events: list[ProgressEvent] = []

        await make_client(recorder).update_blob_with_progress(
            "v1", "b1", b"new contents", events.append
        )

        assert recorder.last.method == "PUT"
        assert recorder.last.url.path == "/v1/vaults/v1/blobs/b1"
        assert [e.type for e in events][-1] == ProgressEventType.LOAD

    @pytest.mark.asyncio
    async def test_get_blob(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(
                200,
                content=b"raw bytes",
                headers={"Content-Disposition": 'attachment; filename="r.txt"'},
            )

        download = await make_client(handler).get_blob("v1", "b1")

        assert download == BlobDownload(blob=b"raw bytes", filename="r.txt", content_type=None)

    @pytest.mark.asyncio
    async def test_get_blob_with_progress(self) -> None:
        events: list[ProgressEvent] = []
        download = await make_client(
            lambda request: httpx.Response(200, content=b"x" * 10)
        ).get_blob_with_progress("v1", "b1", events.append)

        assert download.size == 10
        assert events[-1] == ProgressEvent(ProgressEventType.LOAD, 10, 10)

    @pytest.mark.asyncio
    async def test_list_update_owner_delete(self) -> None:
        recorder = Recorder(
            {"data": {"items": [], "page": 1, "per_page": 5, "total": 0}, "blob": {"id": "b1"}}
        )
        client = make_client(recorder)

        data = await client.list_blobs("v1", per_page=5)
        assert recorder.last.url.params["per_page"] == "5"
        assert "page" not in recorder.last.url.params
        assert data["total"] == 0

        await client.update_blob("v1", "b1", b"data")
        assert recorder.last.method == "PUT"

        await client.update_blob_owner("v1", "b1", "u1")
        assert recorder.last.url.path == "/v2/vaults/v1/blobs/b1/owner"
        assert json.loads(recorder.last.content) == {"owner_id": "u1"}

        result = await client.delete_blob("v1", "b1")
        assert recorder.last.method == "DELETE"
        assert result["result"] == "success"


class TestAccount:
    """Tests for user schema, password reset flows and message relay."""

    @pytest.mark.asyncio
    async def test_user_schema(self) -> None:
        fields = [{"name": "foo", "type": "string", "index": 1}]
        recorder = Recorder({"user_schema": {"id": "us1", "name": "users", "fields": fields}})
        client = make_client(recorder)

        await client.create_user_schema("acct-1", "users", fields)
        assert recorder.last.url.path == "/v1/accounts/acct-1/user_schema"
        assert json.loads(recorder.last.content) == {"name": "users", "fields": fields}

        assert (await client.read_user_schema("acct-1"))["id"] == "us1"

        await client.update_user_schema("acct-1", "users", fields)
        assert recorder.last.method == "PUT"

        assert await client.delete_user_schema("acct-1") is None
        assert recorder.last.method == "DELETE"

    @pytest.mark.asyncio
    async def test_password_reset_flow(self) -> None:
        recorder = Recorder(
            {"password_reset_flow": {"id": "f1"}, "password_reset_flows": [{"id": "f1"}]}
        )
        client = make_client(recorder)

        flow = await client.create_password_reset_flow(
            "reset", "tpl-1", "sg-key", {"user_attribute": "email"},
            {"literal_value": "support@example.com"}, {},
        )
        assert flow == {"id": "f1"}
        assert json.loads(recorder.last.content)["sg_template_id"] == "tpl-1"

        assert await client.list_password_reset_flows() == [{"id": "f1"}]

        assert await client.send_password_reset_email("f1", "ada") is None
        assert recorder.last.url.path == "/v1/password_reset_flows/f1/email"
        assert json.loads(recorder.last.content) == {"username": "ada"}

    @pytest.mark.asyncio
    async def test_send_email_sendgrid(self) -> None:
        recorder = Recorder({"provider_message_id": "sg-msg-1"})
        message_id = await make_client(recorder).send_email_sendgrid(
            "sg-key", "u1", "tpl-1", {"literal_value": "a@example.com"},
            {"user_attribute": "email"}, {"name": "Ada"},
        )

        assert message_id == "sg-msg-1"
        assert recorder.last.url.path == "/v1/users/u1/message/email"
        assert json.loads(recorder.last.content) == {
            "provider": "SENDGRID",
            "auth": {"sendgrid_api_key": "sg-key"},
            "template_id": "tpl-1",
            "from_email_address": {"literal_value": "a@example.com"},
            "to_email_address": {"user_attribute": "email"},
            "substitutions": {"name": "Ada"},
        }

    @pytest.mark.asyncio
    async def test_send_sms_twilio(self) -> None:
        recorder = Recorder({"provider_message_id": "tw-msg-1"})
        message_id = await make_client(recorder).send_sms_twilio(
            "AC1", "SK1", "secret", "u1", {"literal_value": "+15555555555"},
            {"user_attribute": "phone"}, "Testing",
        )

        body = json.loads(recorder.last.content)
        assert message_id == "tw-msg-1"
        assert recorder.last.url.path == "/v1/users/u1/message/sms"
        assert body["provider"] == "TWILIO"
        assert body["auth"] == {"account_sid": "AC1", "username": "SK1", "password": "secret"}
        assert body["message_body"] == "Testing"
