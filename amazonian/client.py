from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Dict, Mapping, Optional

from .configuration import Configuration, load_configuration
from .exceptions import AmazonianError, ConfigurationError, RequestError, TransportError
from .models import Item, Search, decode_lookup, decode_search
from .parsing import parse_xml
from .signing import canonicalize, sign
from .transport import RequestsTransport, Response, Transport

logger = logging.getLogger(__name__)

__all__ = [
    "Amazonian",
    "AmazonianError",
    "CachedExchange",
    "ConfigurationError",
    "RequestError",
    "TransportError",
    "create_client",
]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class CachedExchange:
    """The most recent request/response pair, used to memoize repeat calls."""

    query: Optional[str] = None
    url: Optional[str] = None
    body: Optional[bytes] = None
    status_code: Optional[int] = None

    def clear(self) -> None:
        self.query = None
        self.url = None
        self.body = None
        self.status_code = None


class Amazonian:
    """Signed REST client for the Product Advertising API.

    Identical consecutive requests are answered from the last response when
    ``configuration.cache_last`` is enabled.
    """

    def __init__(
        self,
        configuration: Configuration,
        *,
        transport: Optional[Transport] = None,
        parser: Callable[[bytes], Dict[str, Any]] = parse_xml,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self.configuration = configuration
        self._transport = transport or RequestsTransport(timeout=configuration.timeout)
        self._parser = parser
        self._clock = clock
        self._cache = CachedExchange()
        self._lock = threading.Lock()

    @property
    def last_request(self) -> Optional[str]:
        with self._lock:
            return self._cache.url

    @property
    def last_response(self) -> Optional[Response]:
        with self._lock:
            if self._cache.body is None or self._cache.status_code is None:
                return None
            return Response(status_code=self._cache.status_code, body=self._cache.body)

    def call(self, params: Mapping[str, Any]) -> Dict[str, Any]:
        """Sign and perform a request, returning the decoded XML mapping."""

        config = self.configuration
        if not config.has_credentials:
            raise ConfigurationError("Cannot call the Amazon API without key and secret key.")

        if config.debug:
            logger.debug(
                "Started Amazonian request for params: %s",
                ",".join(f"{key}=>{value}" for key, value in params.items()),
            )

        query = canonicalize(params, config.key)
        with self._lock:
            if config.cache_last and query == self._cache.query and self._cache.body is not None:
                logger.debug("MEMO'D! Shortcutting API call for duplicate request.")
                body = self._cache.body
            else:
                body = self._dispatch(query)
        return self._parser(body)

    def _dispatch(self, query: str) -> bytes:
        config = self.configuration
        url = f"http://{config.host}{config.path}?{sign(query, config, self._clock())}"

        if config.debug:
            logger.info("Performing REST call to %s", url)
        try:
            response = self._transport.get(url)
        except Exception:
            # Never leave a new query paired with the previous body.
            self._cache.clear()
            raise
        self._cache.query = query
        self._cache.url = url
        self._cache.body = response.body
        self._cache.status_code = response.status_code

        if config.debug:
            logger.debug("Response code: %s", response.status_code)

        if response.status_code >= 400:
            logger.error("Amazon API error: %s", response.status_code)
            self._cache.query = None
            raise RequestError(
                f"Amazon API returned HTTP {response.status_code}",
                status_code=response.status_code,
                url=url,
                body=response.body,
            )
        return response.body

    def lookup(self, asin: str, **params: Any) -> Item:
        """Perform an ``ItemLookup`` for ``asin``.

        Extra API parameters pass straight through::

            client.lookup("1430218150", ResponseGroup="Medium")
        """

        params.update(Operation="ItemLookup", ItemId=asin)
        decoded = self.call(params)
        return decode_lookup(decoded)

    def search(self, keywords: str, **params: Any) -> Search:
        params.update(Operation="ItemSearch", Keywords=keywords)
        if params.get("SearchIndex") is None:
            params["SearchIndex"] = self.configuration.default_search
        decoded = self.call(params)
        return decode_search(decoded.get("ItemSearchResponse"))


def create_client(env_path: str | Path = ".env", **options: Any) -> Optional[Amazonian]:
    configuration = load_configuration(env_path)
    if not configuration:
        return None
    if options:
        configuration.setup(**options)
    return Amazonian(configuration)
