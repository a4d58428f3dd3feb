"""Pure matching of candidate host names against parsed trust patterns."""

from __future__ import annotations

from collections.abc import Iterable

from .models import TrustPattern


def _has_label_before(domain: str, suffix: str) -> bool:
    # At least one character must precede the suffix, so ".example.com"
    # never matches "example.com" and "." alone never matches "".
    return len(domain) > len(suffix) and domain.endswith(suffix)


def matches(domain: str, pattern: TrustPattern) -> bool:
    """Check one lower-cased domain against one pattern.

    Wildcards (``*.example.com``) need at least one subdomain label. Bare
    entries (``example.com``) match the domain itself and every subdomain.
    """
    if pattern.is_wildcard:
        return _has_label_before(domain, pattern.match_suffix)
    bare = pattern.match_suffix[1:]
    if bare and domain == bare:
        return True
    return _has_label_before(domain, pattern.match_suffix)


def find_match(domain: str, patterns: Iterable[TrustPattern]) -> TrustPattern | None:
    """Return the first pattern trusting ``domain``, or None.

    A trailing root dot is dropped, so ``evil.com.`` is matched as ``evil.com``.
    """
    domain = domain.lower().rstrip(".")
    for pattern in patterns:
        if matches(domain, pattern):
            return pattern
    return None


def is_trusted(domain: str, patterns: Iterable[TrustPattern]) -> bool:
    """True iff any pattern matches. An empty pattern set is never trusting."""
    return find_match(domain, patterns) is not None
