"""Best-effort mirroring of confession events to a Supabase table.

The primary database is authoritative. The mirror only receives two events,
a new confession and an updated like count, and is allowed to drift. This
module provides:

- ``MirrorSink``, the capability interface the API depends on
- ``SupabaseMirror``, an httpx client for the Supabase REST (PostgREST) API
- ``NullMirror``, used when no credentials are configured
- ``MirrorDispatcher``, which runs mirror calls with a timeout and logs failures
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable

import httpx

from confession_wall.core.errors import MirrorError
from confession_wall.core.settings import Settings

# Configure logger for this module
logger = logging.getLogger(__name__)

HTTP_BAD_REQUEST = 400


@runtime_checkable
class MirrorSink(Protocol):
    """Write events the mirror store accepts."""

    enabled: bool

    async def insert_confession(self, content: str, likes: int = 0) -> None:
        """Record a newly created confession."""
        ...

    async def update_like_count(self, content: str, likes: int) -> None:
        """Overwrite the like count of a mirrored confession."""
        ...


class NullMirror:
    """Mirror used when Supabase is not configured. Every call is a no-op."""

    enabled = False

    async def insert_confession(self, content: str, likes: int = 0) -> None:
        return None

    async def update_like_count(self, content: str, likes: int) -> None:
        return None

    async def aclose(self) -> None:
        return None


@dataclass(frozen=True)
class MirrorConfig:
    """Immutable configuration for the Supabase mirror."""

    base_url: str | None
    api_key: str | None
    table: str
    timeout_seconds: float

    @property
    def enabled(self) -> bool:
        return bool(self.base_url and self.api_key)


def load_mirror_config(app_settings: Settings) -> MirrorConfig:
    """Build configuration object from application settings."""

    return MirrorConfig(
        base_url=app_settings.supabase_url,
        api_key=app_settings.supabase_anon_key,
        table=app_settings.supabase_table,
        timeout_seconds=float(app_settings.mirror_timeout_seconds),
    )


class SupabaseMirror:
    """HTTP client wrapper for the Supabase ``confessions`` table.

    Mirror rows are keyed by confession text, as the mirror table has no
    notion of the primary store's ids.
    """

    def __init__(
        self,
        config: MirrorConfig,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.config = config
        self._transport = transport
        self._client: httpx.AsyncClient | None = None
        self._client_lock = asyncio.Lock()

    @property
    def enabled(self) -> bool:
        return self.config.enabled

    @property
    def _path(self) -> str:
        return f"/rest/v1/{self.config.table}"

    async def _ensure_client(self) -> httpx.AsyncClient:
        if not self.enabled:
            raise MirrorError("Supabase mirror is not configured")

        async with self._client_lock:
            if self._client is None:
                self._client = httpx.AsyncClient(
                    base_url=(self.config.base_url or "").rstrip("/"),
                    timeout=httpx.Timeout(self.config.timeout_seconds),
                    headers={
                        "apikey": self.config.api_key or "",
                        "Authorization": f"Bearer {self.config.api_key}",
                        "Prefer": "return=minimal",
                    },
                    transport=self._transport,
                )

        return self._client

    async def _request(
        self,
        method: str,
        *,
        json_data: Any,
        params: dict[str, str] | None = None,
    ) -> httpx.Response:
        client = await self._ensure_client()
        try:
            response = await client.request(method, self._path, json=json_data, params=params)
        except httpx.HTTPError as exc:
            raise MirrorError(f"Supabase request failed: {exc}") from exc

        if response.status_code >= HTTP_BAD_REQUEST:
            raise MirrorError(f"Supabase responded with {response.status_code}: {response.text}")
        return response

    async def insert_confession(self, content: str, likes: int = 0) -> None:
        await self._request("POST", json_data=[{"confession": content, "like": likes}])

    async def update_like_count(self, content: str, likes: int) -> None:
        await self._request(
            "PATCH",
            json_data={"like": likes},
            params={"confession": f"eq.{content}"},
        )

    async def aclose(self) -> None:
        """Close the underlying HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None


def build_mirror(app_settings: Settings) -> SupabaseMirror | NullMirror:
    """Return the Supabase mirror when configured, otherwise a no-op mirror."""
    config = load_mirror_config(app_settings)
    if not config.enabled:
        logger.warning("Supabase credentials missing; mirroring disabled")
        return NullMirror()
    logger.info("Supabase mirror enabled for table %s", config.table)
    return SupabaseMirror(config)


class MirrorDispatcher:
    """Runs mirror calls off the response path.

    Each call is bounded by ``timeout_seconds``. A failed or slow call produces
    one warning record and nothing else: no retry, no exception.
    """

    def __init__(self, sink: MirrorSink, timeout_seconds: float) -> None:
        self.sink = sink
        self.timeout_seconds = timeout_seconds

    @property
    def enabled(self) -> bool:
        return bool(getattr(self.sink, "enabled", False))

    async def _dispatch(self, event: str, call: Callable[[], Awaitable[None]]) -> bool:
        if not self.enabled:
            return False

        start_time = time.perf_counter()
        try:
            await asyncio.wait_for(call(), timeout=self.timeout_seconds)
        except TimeoutError:
            logger.warning(
                "Mirror sync failed: event=%s error=timeout elapsed=%.3fs",
                event,
                time.perf_counter() - start_time,
            )
            return False
        except (MirrorError, httpx.HTTPError, OSError) as exc:
            logger.warning(
                "Mirror sync failed: event=%s error=%s elapsed=%.3fs",
                event,
                exc,
                time.perf_counter() - start_time,
            )
            return False
        except Exception:
            logger.exception("Mirror sync failed unexpectedly: event=%s", event)
            return False

        logger.debug("Mirror sync ok: event=%s", event)
        return True

    async def confession_created(self, content: str) -> bool:
        return await self._dispatch(
            "confession_created",
            lambda: self.sink.insert_confession(content, 0),
        )

    async def likes_updated(self, content: str, likes: int) -> bool:
        return await self._dispatch(
            "likes_updated",
            lambda: self.sink.update_like_count(content, likes),
        )

    async def aclose(self) -> None:
        close = getattr(self.sink, "aclose", None)
        if close is not None:
            await close()
