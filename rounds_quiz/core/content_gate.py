"""Version-gated loading of the "What's New" announcement.

Resolution order for a load:
1. Remote source (any failure, timeout or cancellation counts as unavailable)
2. Previously cached payload in the key-value store
3. Bundled default, which always succeeds

Whether the resolved payload is displayed depends on the seen marker,
the last announcement version the user dismissed.
"""

import asyncio
import json
import logging
import time
from collections.abc import Callable
from datetime import datetime, timezone

from .bundled import BUNDLED_ANNOUNCEMENT
from .models import (
    DEFAULT_SEEN_VERSION,
    AnnouncementPayload,
    GateState,
    Provenance,
)
from .ports import AnnouncementSourcePort, KeyValueStorePort
from .versioning import should_show

logger = logging.getLogger(__name__)

SEEN_VERSION_KEY = "whats_new.last_seen_version"
CACHED_DATA_KEY = "whats_new.cached_data"
LAST_FETCH_KEY = "whats_new.last_fetch"


class ContentGate:
    """Loads the current announcement and decides whether to show it.

    Concurrent load() calls coalesce: while one load is in flight, later
    callers await its result instead of issuing a second fetch.
    """

    def __init__(
        self,
        source: AnnouncementSourcePort,
        store: KeyValueStorePort,
        bundled: AnnouncementPayload | None = BUNDLED_ANNOUNCEMENT,
        clock: Callable[[], float] = time.time,
        fetch_timeout: float | None = None,
    ):
        """Initialize the gate.

        Args:
            source: Remote announcement source.
            store: Key-value store for the cache and seen marker.
            bundled: Compiled-in fallback payload. Required.
            clock: Returns the current Unix time in seconds.
            fetch_timeout: Default timeout in seconds for the remote fetch.

        Raises:
            ValueError: If no bundled payload is provided.
        """
        if bundled is None:
            raise ValueError("a bundled announcement is required as the final fallback")

        self.source = source
        self.store = store
        self.bundled = bundled
        self.clock = clock
        self.fetch_timeout = fetch_timeout

        self.state = GateState.IDLE
        self.payload: AnnouncementPayload | None = None
        self.provenance: Provenance | None = None
        self.should_display = False
        self._inflight: asyncio.Task[AnnouncementPayload] | None = None

    @property
    def is_loading(self) -> bool:
        """True while a load is in flight."""
        return self.state == GateState.LOADING

    async def load(
        self,
        timeout: float | None = None,
        cancel_event: asyncio.Event | None = None,
    ) -> AnnouncementPayload:
        """Resolve the current announcement.

        Args:
            timeout: Timeout in seconds for the remote fetch, overriding
                the gate default.
            cancel_event: When set, abandons the remote fetch and proceeds
                straight to the cache/bundled fallback.

        Returns:
            The resolved payload. Never fails while the bundled payload exists.
        """
        task = self._inflight
        if task is None or task.done():
            task = asyncio.ensure_future(self._run_load(timeout, cancel_event))
            task.add_done_callback(self._clear_inflight)
            self._inflight = task
        else:
            logger.debug("Announcement load already in flight, awaiting its result")
        return await asyncio.shield(task)

    def _clear_inflight(self, task: "asyncio.Future[AnnouncementPayload]") -> None:
        if self._inflight is task:
            self._inflight = None

    async def _run_load(
        self,
        timeout: float | None,
        cancel_event: asyncio.Event | None,
    ) -> AnnouncementPayload:
        self.state = GateState.LOADING
        try:
            payload, provenance = await self._resolve(timeout, cancel_event)
        except BaseException:
            self.state = GateState.FAILED
            logger.error("Announcement load failed outside the fallback chain", exc_info=True)
            raise

        self.payload = payload
        self.provenance = provenance
        self.state = GateState.LOADED
        self.should_display = await self.should_show_to_user(payload)

        logger.info(
            f"Announcement {payload.version} loaded from {provenance.value} "
            f"(display={self.should_display})"
        )
        return payload

    async def _resolve(
        self,
        timeout: float | None,
        cancel_event: asyncio.Event | None,
    ) -> tuple[AnnouncementPayload, Provenance]:
        remote = await self._fetch_remote(timeout, cancel_event)
        if remote is not None:
            await self._cache_payload(remote)
            return remote, Provenance.REMOTE

        cached = await self._read_cache()
        if cached is not None:
            return cached, Provenance.CACHED

        return self.bundled, Provenance.BUNDLED

    async def _fetch_remote(
        self,
        timeout: float | None,
        cancel_event: asyncio.Event | None,
    ) -> AnnouncementPayload | None:
        """Fetch from the source, folding every failure into None."""
        if cancel_event is not None and cancel_event.is_set():
            logger.warning("Remote announcement fetch cancelled before start, using fallback")
            return None

        effective_timeout = timeout if timeout is not None else self.fetch_timeout

        fetch = asyncio.ensure_future(self.source.fetch_latest())
        waiters: set[asyncio.Future] = {fetch}
        cancel_waiter: asyncio.Future | None = None
        if cancel_event is not None:
            cancel_waiter = asyncio.ensure_future(cancel_event.wait())
            waiters.add(cancel_waiter)

        try:
            done, _ = await asyncio.wait(
                waiters,
                timeout=effective_timeout,
                return_when=asyncio.FIRST_COMPLETED,
            )
        finally:
            if cancel_waiter is not None:
                cancel_waiter.cancel()
            if not fetch.done():
                fetch.cancel()

        cancelled = cancel_waiter is not None and cancel_waiter in done
        if cancelled or fetch not in done:
            reason = "cancelled" if cancelled else "timed out"
            logger.warning(f"Remote announcement fetch {reason}, using fallback")
            return None

        if fetch.cancelled():
            logger.warning("Remote announcement fetch was cancelled by the source, using fallback")
            return None

        error = fetch.exception()
        if error is not None:
            logger.warning(f"Remote announcement unavailable: {error}")
            return None

        return fetch.result()

    async def _cache_payload(self, payload: AnnouncementPayload) -> None:
        """Persist a freshly fetched payload and the fetch time.

        The two writes are independent; failures are logged and ignored.
        """
        fetched_at = datetime.fromtimestamp(self.clock(), tz=timezone.utc)
        try:
            await self.store.set_blob(
                CACHED_DATA_KEY, json.dumps(payload.to_dict()).encode("utf-8")
            )
        except Exception as e:
            logger.warning(f"Failed to cache announcement {payload.version}: {e}")

        try:
            await self.store.set_string(LAST_FETCH_KEY, fetched_at.isoformat())
        except Exception as e:
            logger.warning(f"Failed to record announcement fetch time: {e}")

    async def _read_cache(self) -> AnnouncementPayload | None:
        """Read the cached payload; absence and errors both yield None."""
        try:
            blob = await self.store.get_blob(CACHED_DATA_KEY)
            if blob is None:
                return None
            return AnnouncementPayload.from_dict(json.loads(blob))
        except Exception as e:
            logger.warning(f"Cached announcement unreadable: {e}")
            return None

    async def seen_marker(self) -> str:
        """The last dismissed announcement version, or "0.0.0"."""
        try:
            marker = await self.store.get_string(SEEN_VERSION_KEY)
        except Exception as e:
            logger.warning(f"Failed to read seen marker: {e}")
            return DEFAULT_SEEN_VERSION
        return marker or DEFAULT_SEEN_VERSION

    async def should_show_to_user(self, payload: AnnouncementPayload) -> bool:
        """Apply the seen-marker gate to a payload."""
        return should_show(payload, await self.seen_marker())

    async def mark_seen(self, payload: AnnouncementPayload | None = None) -> None:
        """Record payload.version as seen and hide the announcement.

        Overwrites the marker unconditionally, even with an older version.
        Falls back to the currently loaded payload when none is given.
        """
        target = payload or self.payload
        if target is None:
            logger.debug("mark_seen called before any announcement was loaded")
            return

        try:
            await self.store.set_string(SEEN_VERSION_KEY, target.version)
        except Exception as e:
            logger.warning(f"Failed to persist seen marker {target.version}: {e}")
        self.should_display = False

    def force_show(self) -> AnnouncementPayload:
        """Display the announcement regardless of the seen marker."""
        if self.payload is None:
            self.payload = self.bundled
            self.provenance = Provenance.BUNDLED
        self.should_display = True
        return self.payload

    async def reset_seen_status(self) -> None:
        """Forget the seen marker so the next gate check starts from "0.0.0"."""
        try:
            await self.store.remove(SEEN_VERSION_KEY)
        except Exception as e:
            logger.warning(f"Failed to reset seen marker: {e}")

    async def last_fetch_time(self) -> datetime | None:
        """When the remote payload was last fetched successfully."""
        try:
            raw = await self.store.get_string(LAST_FETCH_KEY)
            if not raw:
                return None
            fetched_at = datetime.fromisoformat(raw)
        except Exception as e:
            logger.warning(f"Failed to read last fetch time: {e}")
            return None

        if fetched_at.tzinfo is None:
            fetched_at = fetched_at.replace(tzinfo=timezone.utc)
        return fetched_at
