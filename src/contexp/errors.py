# src/contexp/errors.py
from __future__ import annotations

__all__ = [
    "ContexpError",
    "ConfigError",
    "InvalidRegionError",
    "AllocationError",
    "ContexpWarning",
    "InvalidRegionWarning",
    "PrecisionFallbackWarning",
]

class ContexpError(Exception):
    """Base error for the contexp package."""


class ConfigError(ContexpError):
    """Raised when scan parameters or a configuration file are malformed."""
    def __init__(self, message: str):
        super().__init__(message)


class InvalidRegionError(ContexpError):
    """Raised when a region has min > max on either axis."""
    def __init__(self, min_re, max_re, min_im, max_im):
        self.bounds = (min_re, max_re, min_im, max_im)
        msg = (
            f"Invalid area [{float(min_re):.3f},{float(max_re):.3f}] ; "
            f"[{float(min_im):.3f},{float(max_im):.3f}]"
        )
        super().__init__(msg)


class AllocationError(ContexpError):
    """Raised when the sequence buffer cannot be obtained."""
    def __init__(self, capacity: int, reason: str):
        self.capacity = capacity
        super().__init__(f"Failed to allocate sequence buffer of length {capacity}: {reason}")


class ContexpWarning(UserWarning):
    """Base warning for non-fatal contexp diagnostics."""


class InvalidRegionWarning(ContexpWarning):
    """Issued when a scan is rejected; the scan yields no cells."""


class PrecisionFallbackWarning(ContexpWarning):
    """Issued when the widest floating type is unavailable or unusable."""
