"""HTTP announcement source.

Implements AnnouncementSourcePort by fetching a JSON document (typically a
raw file on GitHub) with httpx. A cache-busting `t` query parameter is
appended to every request so intermediate caches cannot serve stale data.
"""

import json
import logging
import time
from collections.abc import Callable
from typing import Any

import httpx

from rounds_quiz.core.models import AnnouncementDecodeError, AnnouncementPayload
from rounds_quiz.core.ports import AnnouncementSourcePort

logger = logging.getLogger(__name__)


class AnnouncementUnavailableError(Exception):
    """Raised when the remote announcement cannot be used."""

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason


class HttpAnnouncementSource(AnnouncementSourcePort):
    """Fetches the announcement payload over HTTP."""

    def __init__(
        self,
        url: str,
        timeout_seconds: float = 10.0,
        clock: Callable[[], float] = time.time,
        client: httpx.AsyncClient | None = None,
    ):
        """Initialize the HTTP source.

        Args:
            url: Fixed endpoint of the announcement JSON document.
            timeout_seconds: Transport timeout for each request.
            clock: Returns the current Unix time, used for cache busting.
            client: Optional preconfigured client (tests inject a mock transport).
        """
        self.url = url
        self.timeout_seconds = timeout_seconds
        self.clock = clock
        self.client = client or httpx.AsyncClient(timeout=timeout_seconds)

    async def __aenter__(self) -> "HttpAnnouncementSource":
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Async context manager exit."""
        await self.close()

    async def close(self) -> None:
        """Close the httpx client and clean up resources."""
        await self.client.aclose()

    def cache_busting_params(self) -> dict[str, str]:
        """Query parameters appended to every request."""
        return {"t": str(int(self.clock()))}

    async def fetch_latest(self) -> AnnouncementPayload:
        """Fetch and decode the current announcement.

        Raises:
            AnnouncementUnavailableError: On transport errors, any status
                other than 200, or a body that does not match the schema.
        """
        try:
            response = await self.client.get(self.url, params=self.cache_busting_params())
        except httpx.HTTPError as e:
            raise AnnouncementUnavailableError(f"transport error: {e}") from e

        if response.status_code != 200:
            raise AnnouncementUnavailableError(
                f"unexpected status {response.status_code} from {self.url}"
            )

        try:
            data = response.json()
            payload = AnnouncementPayload.from_dict(data)
        except (json.JSONDecodeError, UnicodeDecodeError, AnnouncementDecodeError) as e:
            raise AnnouncementUnavailableError(f"invalid announcement body: {e}") from e

        logger.debug(f"Fetched announcement {payload.version} from {self.url}")
        return payload
