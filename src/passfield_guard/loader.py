"""Single-flight configuration loading and periodic trust-list refresh.

``ConfigLoader`` is the only writer of the ``TrustStore``. The first
``load()`` starts one task; every later or concurrent caller awaits that same
task, so the bootstrap payload and the trust list are fetched exactly once
and nobody sees the store before that first attempt has finished.
"""

from __future__ import annotations

import asyncio
import contextlib

import structlog
from pydantic import ValidationError

from .errors import ConfigFetchError, FetchError, ListFetchError
from .models import (
    DEFAULT_REFRESH_INTERVAL_MS,
    BootstrapPayload,
    LoadState,
    TrustConfiguration,
)
from .transport import Fetcher, resolve_url
from .trust_store import TrustStore

log = structlog.get_logger()


class ConfigLoader:
    def __init__(
        self,
        store: TrustStore,
        fetcher: Fetcher,
        config_url: str,
        base_url: str = ".",
        refresh_interval_ms: int = DEFAULT_REFRESH_INTERVAL_MS,
    ) -> None:
        self._store = store
        self._fetcher = fetcher
        self._config_url = config_url
        self._base_url = base_url
        self._refresh_interval_ms = refresh_interval_ms

        self._state = LoadState.UNLOADED
        self._load_task: asyncio.Task[None] | None = None
        self._refresh_task: asyncio.Task[None] | None = None
        self._list_url: str | None = None
        self._stopped = False

    @property
    def state(self) -> LoadState:
        return self._state

    @property
    def list_url(self) -> str | None:
        return self._list_url

    @property
    def refreshing(self) -> bool:
        return self._refresh_task is not None and not self._refresh_task.done()

    async def load(self) -> None:
        """Load once; concurrent and later calls share the same outcome.

        A failed load stays failed: later calls re-raise the original error
        without fetching again.
        """
        if self._load_task is None:
            self._state = LoadState.LOADING
            self._load_task = asyncio.create_task(self._load())
        # Shielded so a cancelled caller does not cancel everyone else's load.
        await asyncio.shield(self._load_task)

    async def _load(self) -> None:
        try:
            await self._load_configuration_and_list()
        except Exception:
            self._store.clear_patterns()
            self._state = LoadState.FAILED
            log.exception("config_load_failed", config_url=self._config_url)
            raise

    async def _load_configuration_and_list(self) -> None:
        configuration = await self._fetch_configuration()
        self._store.apply_configuration(configuration)

        if not configuration.source_url:
            log.warning("whitelist_url_missing", config_url=self._config_url)
            self._state = LoadState.LOADED
            return

        self._list_url = resolve_url(configuration.source_url, self._base_url)
        log.info("loading_whitelist", url=self._list_url)
        text = await self._fetch(self._list_url, ListFetchError)
        self._store.replace_patterns(text)
        self._state = LoadState.LOADED

        interval_ms = configuration.refresh_interval_ms
        if not self._stopped:
            self._refresh_task = asyncio.create_task(self._refresh_loop(interval_ms / 1000))
        log.info("config_loaded", url=self._list_url, refresh_interval_ms=interval_ms)

    async def _fetch_configuration(self) -> TrustConfiguration:
        url = resolve_url(self._config_url, self._base_url)
        text = await self._fetch(url, ConfigFetchError)
        try:
            payload = BootstrapPayload.model_validate_json(text)
        except ValidationError as e:
            raise ConfigFetchError(url, f"invalid bootstrap payload: {e.error_count()} errors") from e
        return TrustConfiguration.from_payload(payload, self._refresh_interval_ms)

    async def _fetch(self, url: str, error: type[FetchError]) -> str:
        try:
            return await self._fetcher.fetch(url)
        except FetchError as e:
            raise error(url, e.reason) from e
        except Exception as e:
            raise error(url, f"{type(e).__name__}: {e}") from e

    async def _refresh_loop(self, interval: float) -> None:
        while True:
            await asyncio.sleep(interval)
            await self.refresh()

    async def refresh(self) -> bool:
        """Re-fetch the trust list once.

        On failure the pattern set is emptied; the error is logged, not raised,
        and ``state`` is left alone.
        """
        if self._list_url is None:
            return False
        try:
            text = await self._fetch(self._list_url, ListFetchError)
        except ListFetchError as e:
            self._store.clear_patterns()
            log.error("whitelist_refresh_failed", url=e.url, reason=e.reason)
            return False
        self._store.replace_patterns(text)
        return True

    async def stop(self) -> None:
        """Cancel the periodic refresh. Safe to call more than once.

        A load still in flight completes, but will not arm a new refresh.
        """
        self._stopped = True
        task, self._refresh_task = self._refresh_task, None
        if task is None:
            return
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task
        log.info("whitelist_refresh_stopped")
