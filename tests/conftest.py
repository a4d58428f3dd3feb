"""Shared fixtures: an in-memory fetcher standing in for the network."""

from __future__ import annotations

import asyncio
import json

import pytest

from passfield_guard.errors import FetchError

BASE_URL = "https://ext.example/"
CONFIG_URL = BASE_URL + "config.json"
LIST_URL = BASE_URL + "whitelist.txt"

SAMPLE_LIST = "example.com\n*.corp.example.org\n# comment\n\n"


class FakeFetcher:
    """Serve canned bodies by URL.

    A response may be a string, an exception to raise, or a list of those
    consumed in order (the last one repeats).
    """

    def __init__(self, responses: dict) -> None:
        self.responses = responses
        self.calls: list[str] = []

    async def fetch(self, url: str) -> str:
        self.calls.append(url)
        # Yield so concurrent callers genuinely interleave.
        await asyncio.sleep(0)
        if url not in self.responses:
            raise FetchError(url, "not found")
        response = self.responses[url]
        if isinstance(response, list):
            response = response.pop(0) if len(response) > 1 else response[0]
        if isinstance(response, Exception):
            raise response
        return response

    def count(self, url: str) -> int:
        return self.calls.count(url)


def bootstrap(**fields) -> str:
    payload = {"whitelistUrl": "whitelist.txt"}
    payload.update(fields)
    return json.dumps(payload)


@pytest.fixture
def fetcher() -> FakeFetcher:
    return FakeFetcher({CONFIG_URL: bootstrap(), LIST_URL: SAMPLE_LIST})
