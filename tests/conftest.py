"""
Shared test fixtures and configuration.
"""

from pathlib import Path

import pytest

from modsync.adapters.mock import InMemoryPackageManager
from modsync.core.models.config import ToolConfig
from modsync.core.models.package import TargetPackage


@pytest.fixture
def targets() -> tuple[TargetPackage, ...]:
    """Three targets, in a fixed declaration order."""
    return (
        TargetPackage(name="A", description="Alpha"),
        TargetPackage(name="B", description="Bravo"),
        TargetPackage(name="C", description="Charlie"),
    )


@pytest.fixture
def config(targets) -> ToolConfig:
    return ToolConfig(targets=targets)


@pytest.fixture
def manager() -> InMemoryPackageManager:
    """A: stale (1.0 → 2.0), B: missing (3.0 published), C: current."""
    return InMemoryPackageManager(
        installed={"A": ["1.0"], "C": ["5.1.0"]},
        registry={"A": "2.0", "B": "3.0", "C": "5.1.0"},
    )


@pytest.fixture
def profile_file(tmp_path: Path) -> Path:
    """Path of a not-yet-existing profile in a not-yet-existing directory."""
    return tmp_path / "powershell" / "Microsoft.PowerShell_profile.ps1"
