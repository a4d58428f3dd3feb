"""Process-wide trust state: the current pattern set plus configuration."""

from __future__ import annotations

import threading
from collections.abc import Iterable

import structlog

from .matching import find_match
from .models import StoreSnapshot, TrustConfiguration
from .patterns import parse_patterns

log = structlog.get_logger()


class TrustStore:
    """Holds one immutable ``StoreSnapshot`` and swaps it wholesale.

    Writers are serialised by a lock and publish a new snapshot with a single
    attribute assignment, so readers never see a half-updated pattern set and
    never block.
    """

    def __init__(self, configuration: TrustConfiguration | None = None) -> None:
        self._write_lock = threading.Lock()
        self._snapshot = StoreSnapshot(configuration=configuration or TrustConfiguration())

    def snapshot(self) -> StoreSnapshot:
        return self._snapshot

    @property
    def configuration(self) -> TrustConfiguration:
        return self._snapshot.configuration

    def replace_patterns(self, lines: Iterable[str] | str) -> int:
        """Parse ``lines`` and replace the entire pattern set. Returns its size."""
        patterns = parse_patterns(lines)
        with self._write_lock:
            self._snapshot = StoreSnapshot(
                patterns=patterns, configuration=self._snapshot.configuration
            )
        log.info(
            "whitelist_patterns_replaced",
            count=len(patterns),
            patterns=[p.original for p in patterns],
        )
        return len(patterns)

    def clear_patterns(self) -> None:
        with self._write_lock:
            self._snapshot = StoreSnapshot(configuration=self._snapshot.configuration)

    def apply_configuration(self, configuration: TrustConfiguration) -> None:
        with self._write_lock:
            self._snapshot = StoreSnapshot(
                patterns=self._snapshot.patterns, configuration=configuration
            )

    def is_trusted(self, domain: str) -> bool:
        snapshot = self._snapshot
        match = find_match(domain, snapshot.patterns)
        if match is not None:
            log.debug("whitelist_match", domain=domain, pattern=match.original)
            return True
        return False
