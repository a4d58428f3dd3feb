"""Caller-facing query client with retry, linear backoff and safe defaults."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Mapping
from typing import Any, TypeVar

import structlog

from .config import settings
from .errors import InvalidResponseError
from .models import ACTION_GET_SUPPORT_EMAIL, ACTION_IS_WHITELISTED, ConfigurationView

log = structlog.get_logger()

T = TypeVar("T")

Send = Callable[[dict[str, Any]], Awaitable[Any]]


def parse_trust_response(response: Any) -> bool:
    if isinstance(response, Mapping) and isinstance(response.get("isWhitelisted"), bool):
        return response["isWhitelisted"]
    raise InvalidResponseError("response lacks a boolean isWhitelisted flag")


def parse_config_response(response: Any) -> ConfigurationView:
    """Build a view from an answer, defaulting each missing or empty field."""
    if not isinstance(response, Mapping):
        raise InvalidResponseError("configuration response is not a mapping")
    fields: dict[str, str] = {}
    for name, info in ConfigurationView.model_fields.items():
        value = response.get(info.alias)
        if isinstance(value, str) and value:
            fields[name] = value
    if not any(info.alias in response for info in ConfigurationView.model_fields.values()):
        raise InvalidResponseError("configuration response carries no known fields")
    return ConfigurationView(**fields)


class QueryGateway:
    """Ask the trust service questions over ``send`` and never fail open.

    Each query makes up to ``max_retries`` attempts, sleeping
    ``retry_delay_ms * attempt`` between them. An attempt fails when ``send``
    raises or the answer is malformed.
    """

    def __init__(
        self,
        send: Send,
        max_retries: int | None = None,
        retry_delay_ms: int | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._send = send
        self.max_retries = max(1, max_retries if max_retries is not None else settings.max_retries)
        self.retry_delay_ms = retry_delay_ms if retry_delay_ms is not None else settings.retry_delay_ms
        self._sleep = sleep

    async def _request(self, message: dict[str, Any], parse: Callable[[Any], T]) -> T | None:
        action = message["action"]
        for attempt in range(1, self.max_retries + 1):
            try:
                return parse(await self._send(message))
            except Exception as e:
                log.warning(
                    "query_attempt_failed",
                    action=action,
                    attempt=attempt,
                    max_retries=self.max_retries,
                    error=f"{type(e).__name__}: {e}",
                )
            if attempt < self.max_retries:
                await self._sleep(self.retry_delay_ms * attempt / 1000)
        log.error("query_retries_exhausted", action=action, attempts=self.max_retries)
        return None

    async def query_is_trusted(self, domain: str) -> bool:
        result = await self._request(
            {"action": ACTION_IS_WHITELISTED, "domain": domain}, parse_trust_response
        )
        return bool(result)

    async def query_config_fields(self) -> ConfigurationView:
        view = await self._request({"action": ACTION_GET_SUPPORT_EMAIL}, parse_config_response)
        return view if view is not None else ConfigurationView()
