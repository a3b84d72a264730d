"""
Domain models — Pydantic types for modsync.

All models are re-exported here for convenient access:

    from modsync.core.models import TargetPackage, PackageStatus, Receipt
"""

from modsync.core.models.config import ToolConfig
from modsync.core.models.package import (
    PackageState,
    PackageStatus,
    StatusSummary,
    TargetPackage,
)
from modsync.core.models.receipt import Receipt

__all__ = [
    # package.py
    "PackageState",
    "PackageStatus",
    "StatusSummary",
    "TargetPackage",
    # receipt.py
    "Receipt",
    # config.py
    "ToolConfig",
]
