"""modsync — keep a workstation's PowerShell admin modules present and current."""

__version__ = "0.1.0"
