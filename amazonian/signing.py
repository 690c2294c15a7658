"""Canonical query strings and request signatures for the ECommerce REST API.

The signature covers the whole GET request, not just the query string::

    GET\\n{host}\\n{path}\\n{canonical query}&Timestamp=...

so host and path must match what is actually requested.
"""

from __future__ import annotations

import base64
import hashlib
import hmac
from datetime import datetime, timezone
from typing import Any, Mapping
from urllib.parse import quote_plus

from .configuration import Configuration

SERVICE_NAME = "AWSECommerceService"
TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%SZ"


def _escape(value: Any) -> str:
    # The signing algorithm expects spaces as %20, never as "+".
    return quote_plus(str(value)).replace("+", "%20")


def canonicalize(params: Mapping[str, Any], access_key: str) -> str:
    """Return the sorted, percent-encoded query string for ``params``.

    ``Service`` and ``AWSAccessKeyId`` are always added. Pairs are sorted by
    the full ``key=value`` string.
    """

    merged = dict(params)
    merged["Service"] = SERVICE_NAME
    merged["AWSAccessKeyId"] = access_key
    pairs = [f"{key}={_escape(value)}" for key, value in merged.items()]
    return "&".join(sorted(pairs))


def format_timestamp(now: datetime) -> str:
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return now.astimezone(timezone.utc).strftime(TIMESTAMP_FORMAT)


def _signature(payload: str, secret: str) -> str:
    digest = hmac.new(secret.encode("utf-8"), payload.encode("utf-8"), hashlib.sha256).digest()
    encoded = base64.b64encode(digest).decode("ascii").rstrip("\n")
    return quote_plus(encoded)


def sign(query: str, configuration: Configuration, now: datetime) -> str:
    """Timestamp ``query`` with ``now`` and append its HMAC-SHA256 signature."""

    timestamped = f"{query}&Timestamp={quote_plus(format_timestamp(now))}"
    payload = f"GET\n{configuration.host}\n{configuration.path}\n{timestamped}"
    return f"{timestamped}&Signature={_signature(payload, configuration.secret)}"
