"""
MPR Errors

Exception types raised by the core. Everything other than a failed load
degrades to a default value instead of raising.

Requirements:
    - Standard library only
"""


class MPRError(Exception):
    """Base class for MPR viewer errors."""


class VolumeLoadError(MPRError):
    """Raised when a load yields zero usable slices or cannot be read at all."""
