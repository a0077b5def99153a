"""Premium clock exceptions."""
from __future__ import annotations


class PremiumClockError(Exception):
    """Base exception for the premium clock feature."""


class ConfigurationDecodeError(PremiumClockError, ValueError):
    """Raised when persisted configuration bytes are not a valid record."""


class ConfigurationStoreError(PremiumClockError, OSError):
    """Raised when the shared store cannot be read or written."""
