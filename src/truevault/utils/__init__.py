"""Utility functions for TrueVault SDK."""

from .auth import basic_auth_header, derive_auth_header, resolve_credential
from .encoding import decode_field_in_place, decode_json_field, encode_json_field
from .headers import parse_content_disposition_filename
from .validation import validate_host, validate_id_list

__all__ = [
    "basic_auth_header",
    "decode_field_in_place",
    "decode_json_field",
    "derive_auth_header",
    "encode_json_field",
    "parse_content_disposition_filename",
    "resolve_credential",
    "validate_host",
    "validate_id_list",
]
