from __future__ import annotations

import base64
import binascii
import json
from typing import Any

from .errors import DecodeError
from .models import Claims


def _b64url_unescape(segment: str) -> str:
    padding = "=" * (-len(segment) % 4)
    return (segment + padding).replace("-", "+").replace("_", "/")


def decode(token: str) -> Any:
    """Return the JSON payload of a ``header.payload.signature`` token.

    The signature is not verified; the token is trusted because it was
    received from the auth endpoint over the configured transport.
    """
    if not isinstance(token, str):
        raise DecodeError("token must be a string")
    parts = token.split(".")
    if len(parts) < 2:
        raise DecodeError("token must have a payload segment")
    try:
        raw = base64.b64decode(_b64url_unescape(parts[1]), validate=True)
    except (binascii.Error, ValueError) as exc:
        raise DecodeError(f"Invalid token payload encoding: {exc}") from exc
    try:
        return json.loads(raw.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise DecodeError(f"Invalid token payload JSON: {exc}") from exc


def decode_claims(token: str) -> Claims:
    return Claims.from_payload(decode(token))
