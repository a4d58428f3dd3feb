"""Trust-list parsing: raw text lines to ``TrustPattern`` objects."""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from .models import TrustPattern

WILDCARD_PREFIX = "*."
COMMENT_PREFIX = "#"


def parse_pattern(line: str) -> TrustPattern:
    """Parse one trimmed, non-comment trust-list line.

    ``*.example.com`` becomes a wildcard with suffix ``.example.com``;
    ``example.com`` becomes a bare entry with the same suffix. Domain syntax
    is not validated.
    """
    normalized = line.strip().lower()
    if normalized.startswith(WILDCARD_PREFIX):
        base = normalized[len(WILDCARD_PREFIX):]
        return TrustPattern(original=line, is_wildcard=True, match_suffix="." + base)
    return TrustPattern(original=line, is_wildcard=False, match_suffix="." + normalized)


def is_pattern_line(line: str) -> bool:
    stripped = line.strip()
    return bool(stripped) and not stripped.startswith(COMMENT_PREFIX)


def iter_pattern_lines(lines: Iterable[str] | str) -> Iterator[str]:
    """Yield trimmed candidate lines, skipping blanks and ``#`` comments.

    Accepts either the raw list text or an already-split sequence of lines.
    """
    if isinstance(lines, str):
        lines = lines.split("\n")
    for line in lines:
        if is_pattern_line(line):
            yield line.strip()


def parse_patterns(lines: Iterable[str] | str) -> tuple[TrustPattern, ...]:
    return tuple(parse_pattern(line) for line in iter_pattern_lines(lines))
