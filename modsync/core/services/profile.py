"""
PowerShell profile maintenance — channel-independent service.

Checks that the user's profile script contains the required lines
(``Import-Module MicrosoftTeams`` by default) and appends the missing
ones. Creating and appending are idempotent; existing content is never
rewritten.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable

logger = logging.getLogger(__name__)

PROFILE_HEADER = "# PowerShell Profile"


@dataclass
class ProfileStatus:
    """What the profile file holds relative to the required lines."""

    path: Path
    exists: bool = False
    present: list[str] = field(default_factory=list)
    missing: list[str] = field(default_factory=list)
    created: bool = False
    added: list[str] = field(default_factory=list)

    @property
    def complete(self) -> bool:
        return self.exists and not self.missing

    def to_dict(self) -> dict:
        return {
            "path": str(self.path),
            "exists": self.exists,
            "complete": self.complete,
            "present": self.present,
            "missing": self.missing,
            "created": self.created,
            "added": self.added,
        }


def _read_lines(path: Path) -> list[str]:
    # utf-8-sig drops the BOM PowerShell editors often write.
    return path.read_text(encoding="utf-8-sig").splitlines()


def profile_status(path: Path, required: Iterable[str]) -> ProfileStatus:
    """Report which required lines the profile already contains.

    A required line counts as present when it appears anywhere in a
    profile line, so ``Import-Module X -ErrorAction SilentlyContinue``
    satisfies ``Import-Module X``.

    Raises:
        OSError: If the profile exists but cannot be read.
        UnicodeDecodeError: If the profile is not UTF-8 text.
    """
    required = [line.strip() for line in required if line.strip()]
    status = ProfileStatus(path=path, exists=path.is_file())

    existing = _read_lines(path) if status.exists else []
    for line in required:
        found = any(line in candidate for candidate in existing)
        (status.present if found else status.missing).append(line)
    return status


def ensure_profile(path: Path, required: Iterable[str]) -> ProfileStatus:
    """Create the profile if needed and append every missing required line.

    Raises:
        OSError: If the profile or its directory cannot be written.
        UnicodeDecodeError: If an existing profile is not UTF-8 text.
    """
    required = list(required)
    status = profile_status(path, required)
    if status.complete:
        return status

    if not status.exists:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(PROFILE_HEADER + "\n", encoding="utf-8")
        status.created = True
        status.exists = True
        logger.info("Created profile %s", path)

    content = path.read_text(encoding="utf-8-sig")
    prefix = "" if not content or content.endswith("\n") else "\n"
    with path.open("a", encoding="utf-8") as fh:
        fh.write(prefix + "".join(f"{line}\n" for line in status.missing))

    logger.info("Added %d line(s) to %s", len(status.missing), path)
    status.added = list(status.missing)
    status.present.extend(status.missing)
    status.missing = []
    return status
