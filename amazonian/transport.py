from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Protocol, runtime_checkable

import requests

from .configuration import DEFAULT_TIMEOUT
from .exceptions import TransportError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Response:
    status_code: int
    body: bytes


@runtime_checkable
class Transport(Protocol):
    def get(self, url: str) -> Response: ...


class RequestsTransport:
    """Single-attempt GET over a shared ``requests.Session``."""

    def __init__(self, *, timeout: float = DEFAULT_TIMEOUT, session: Optional[requests.Session] = None) -> None:
        self.timeout = timeout
        self._session = session or requests.Session()

    def get(self, url: str) -> Response:
        try:
            resp = self._session.get(url, timeout=self.timeout)
        except requests.RequestException as exc:
            logger.warning("GET failed before a response was received: %s", exc)
            raise TransportError(f"Request failed: {exc}", url=url) from exc
        return Response(status_code=resp.status_code, body=resp.content)

    def close(self) -> None:
        self._session.close()
