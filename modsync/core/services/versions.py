"""
Version ordering (pure).

PowerShell Gallery versions are dotted numerics with up to four parts
(``16.0.24322.12000``) and an optional prerelease tag (``2.0.0-preview3``).
Comparison is semantic, never lexical: ``10.0.0`` is newer than ``9.9.9``.
No I/O, no subprocess.
"""

from __future__ import annotations

import logging

from packaging.version import InvalidVersion, Version

logger = logging.getLogger(__name__)


def parse_version(raw: str | None) -> Version | None:
    """Parse a module version string, or return None if it is unusable."""
    if raw is None:
        return None
    text = raw.strip().lstrip("vV")
    if not text:
        return None
    try:
        return Version(text)
    except InvalidVersion:
        logger.debug("Unparsable version string: %r", raw)
        return None


def is_newer(candidate: str | None, baseline: str | None) -> bool:
    """True only when both versions parse and ``candidate > baseline``."""
    cand = parse_version(candidate)
    base = parse_version(baseline)
    if cand is None or base is None:
        return False
    return cand > base


def sort_versions(versions: list[str]) -> list[str]:
    """Sort version strings newest first; unparsable ones go last, in input order."""
    parsed = [(v, parse_version(v)) for v in versions]
    known = sorted((p for p in parsed if p[1] is not None), key=lambda p: p[1], reverse=True)
    unknown = [p for p in parsed if p[1] is None]
    return [v for v, _ in known + unknown]
