# pcie_netfix/core/__init__.py
from .exceptions import (
    BackupWriteError,
    ConfigMissingError,
    Fatal,
    NotFoundError,
    PcieNetfixError,
    VerificationError,
)
from .logger import Log

__all__ = [
    "PcieNetfixError",
    "Fatal",
    "NotFoundError",
    "VerificationError",
    "BackupWriteError",
    "ConfigMissingError",
    "Log",
]
