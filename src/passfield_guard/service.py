"""Answering side of the query interface.

``TrustService`` owns the process-wide trust state (one store, one loader)
and answers ``isWhitelisted`` / ``getSupportEmail`` messages. It never
answers before the first load attempt has finished, and it fails closed.
"""

from __future__ import annotations

import asyncio
import contextlib
from collections.abc import Mapping
from typing import Any

import structlog

from .config import Settings, settings
from .loader import ConfigLoader
from .models import (
    ACTION_GET_SUPPORT_EMAIL,
    ACTION_IS_WHITELISTED,
    ConfigurationView,
    LoadState,
)
from .transport import Fetcher, HttpFetcher, RoutingFetcher
from .trust_store import TrustStore

log = structlog.get_logger()


class TrustService:
    def __init__(
        self,
        fetcher: Fetcher | None = None,
        *,
        config_url: str | None = None,
        base_url: str | None = None,
        refresh_interval_ms: int | None = None,
        cfg: Settings = settings,
    ) -> None:
        self.store = TrustStore()
        self._fetcher = fetcher or RoutingFetcher(HttpFetcher(timeout=cfg.fetch_timeout_seconds))
        self.loader = ConfigLoader(
            self.store,
            self._fetcher,
            config_url=config_url or cfg.config_url,
            base_url=base_url or cfg.base_url,
            refresh_interval_ms=refresh_interval_ms or cfg.refresh_interval_ms,
        )
        self._preload_task: asyncio.Task[None] | None = None

    @property
    def state(self) -> LoadState:
        return self.loader.state

    def start(self) -> None:
        """Begin loading in the background without waiting for it."""
        if self._preload_task is None:
            self._preload_task = asyncio.create_task(self._preload())

    async def _preload(self) -> None:
        try:
            await self.loader.load()
        except Exception:
            log.error("config_preload_failed")

    async def is_whitelisted(self, domain: str) -> bool:
        try:
            await self.loader.load()
        except Exception:
            # Safe default
            log.error("is_whitelisted_failed", domain=domain)
            return False
        result = self.store.is_trusted(domain)
        log.info("whitelist_result", domain=domain, result=result)
        return result

    async def support_details(self) -> ConfigurationView:
        try:
            await self.loader.load()
        except Exception:
            log.error("support_details_failed")
            return ConfigurationView()
        return self.store.configuration.view()

    async def handle_message(self, message: Any) -> dict[str, Any]:
        """Dispatch one query message to its answer.

        Unknown actions and malformed requests get an empty answer.
        """
        action = message.get("action") if isinstance(message, Mapping) else None
        if action == ACTION_IS_WHITELISTED:
            domain = message.get("domain")
            if not isinstance(domain, str):
                log.warning("is_whitelisted_missing_domain")
                return {}
            return {"isWhitelisted": await self.is_whitelisted(domain)}
        if action == ACTION_GET_SUPPORT_EMAIL:
            view = await self.support_details()
            return view.to_message()
        log.warning("unknown_action", action=action)
        return {}

    async def close(self) -> None:
        await self.loader.stop()
        task, self._preload_task = self._preload_task, None
        if task is not None and not task.done():
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task
        aclose = getattr(self._fetcher, "aclose", None)
        if aclose is not None:
            await aclose()

    async def __aenter__(self) -> TrustService:
        self.start()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()
