"""
Command runner — the SINGLE PLACE where ``subprocess.run`` is called.

Every pwsh invocation goes through ``run_command``. It captures output,
enforces a timeout, and converts every failure mode into a failed
Receipt. It never raises.
"""

from __future__ import annotations

import logging
import shutil
import subprocess
import time

from modsync.core.models.receipt import Receipt

logger = logging.getLogger(__name__)

# Keep receipts small; pwsh error records can be very long.
_OUTPUT_TAIL = 2000


def command_available(executable: str) -> bool:
    """Whether an executable is resolvable on PATH (or is an existing path)."""
    return shutil.which(executable) is not None


def run_command(
    cmd: list[str],
    *,
    operation: str,
    package: str = "",
    timeout: int = 300,
) -> Receipt:
    """Run a command and capture its outcome as a Receipt.

    Args:
        cmd: Command list for ``subprocess.run()`` (never a shell string).
        operation: Operation label recorded on the receipt.
        package: Package the operation targets, if any.
        timeout: Seconds before ``TimeoutExpired``.

    Returns:
        ``Receipt.success`` with stdout on exit 0, ``Receipt.failure``
        with stderr (or the exit code) otherwise.
    """
    logger.debug("Executing %s for %s: %s", operation, package or "-", cmd[0])
    start = time.monotonic()

    try:
        result = subprocess.run(
            cmd,
            capture_output=True,
            text=True,
            timeout=timeout,
        )
    except subprocess.TimeoutExpired:
        return Receipt.failure(
            operation=operation,
            package=package,
            error=f"Command timed out after {timeout}s",
            metadata={"timeout": timeout},
        )
    except FileNotFoundError:
        return Receipt.failure(
            operation=operation,
            package=package,
            error=f"'{cmd[0]}' command not found. Is PowerShell installed and in your PATH?",
        )
    except Exception as e:
        logger.exception("Subprocess error running %s", cmd[0])
        return Receipt.failure(
            operation=operation,
            package=package,
            error=f"Command execution error: {e}",
        )

    elapsed_ms = int((time.monotonic() - start) * 1000)
    stdout = (result.stdout or "").strip()[-_OUTPUT_TAIL:]
    stderr = (result.stderr or "").strip()[-_OUTPUT_TAIL:]

    if result.returncode == 0:
        return Receipt.success(
            operation=operation,
            package=package,
            output=stdout,
            duration_ms=elapsed_ms,
            metadata={"return_code": 0, "stderr": stderr},
        )

    return Receipt.failure(
        operation=operation,
        package=package,
        error=stderr or f"Command exited with code {result.returncode}",
        output=stdout,
        duration_ms=elapsed_ms,
        metadata={"return_code": result.returncode},
    )
