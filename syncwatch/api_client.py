"""
HTTP client for the Syncthing REST API.
Wraps an authenticated httpx session and decodes the endpoints the aggregator polls.
"""
import logging
from typing import Any, Dict, List, Optional, Union
from urllib.parse import urlparse

import httpx

from .config import CONFIG_PATH, CONNECTIONS_PATH, EVENTS_PATH, EVENT_TYPES
from .errors import ConfigError, TransportError
from .models import (
    ConfigResponse,
    ConnectionsResponse,
    DeviceDisconnectedEvent,
    FolderCompletionEvent,
    decode_config,
    decode_connections,
    decode_events,
)


# Configure logger
logger = logging.getLogger(__name__)


def normalize_base_url(base_url: str) -> str:
    """
    Validate a daemon base URL and strip trailing slashes.

    Raises:
        ConfigError: If the URL has no http(s) scheme, no host or a bad port
    """
    trimmed = base_url.strip().rstrip("/")
    parsed = urlparse(trimmed)
    if parsed.scheme not in ("http", "https") or not parsed.hostname:
        raise ConfigError(f"Invalid base URL: {base_url!r}")
    try:
        parsed.port
    except ValueError as e:
        raise ConfigError(f"Invalid base URL: {base_url!r}: {e}") from e
    return trimmed


class ApiClient:
    """Authenticated client for one Syncthing daemon."""

    def __init__(
        self,
        base_url: str,
        api_key: str,
        transport: Optional[httpx.BaseTransport] = None
    ):
        """
        Initialize the client.

        The events endpoint long-polls, so no client-side timeout is set.

        Args:
            base_url: Daemon base URL, e.g. "http://localhost:8384"
            api_key: Resolved API key sent as a bearer token
            transport: Optional httpx transport, used by tests
        """
        self.base_url = normalize_base_url(base_url)
        self.client = httpx.Client(
            headers={
                "Authorization": f"Bearer {api_key}",
                "Accept": "application/json",
            },
            timeout=None,
            transport=transport,
        )

    def get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        """
        Authenticated GET returning the parsed JSON body.

        Args:
            path: Endpoint path relative to the base URL
            params: Optional query parameters

        Returns:
            Decoded JSON payload

        Raises:
            TransportError: On connection failure, non-2xx status or a non-JSON body
        """
        url = f"{self.base_url}/{path}"
        try:
            response = self.client.get(url, params=params)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise TransportError(
                f"GET {url} returned HTTP {e.response.status_code}"
            ) from e
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise TransportError(f"GET {url} failed: {e.__class__.__name__}: {e}") from e

        try:
            return response.json()
        except ValueError as e:
            raise TransportError(f"GET {url} returned a non-JSON body") from e

    def get_events(self, since: int) -> List[Union[FolderCompletionEvent, DeviceDisconnectedEvent]]:
        """Fetch events newer than ``since``; blocks until the daemon has some or its poll expires."""
        payload = self.get(
            EVENTS_PATH,
            params={"since": since, "events": ",".join(EVENT_TYPES)},
        )
        return decode_events(payload)

    def get_connections(self) -> ConnectionsResponse:
        return decode_connections(self.get(CONNECTIONS_PATH))

    def get_config(self) -> ConfigResponse:
        return decode_config(self.get(CONFIG_PATH))

    def close(self) -> None:
        """Close the underlying HTTP session."""
        self.client.close()

    def __enter__(self) -> "ApiClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
