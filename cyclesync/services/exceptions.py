"""
Service-level exceptions.

This module contains exceptions that can be raised by the profile store and
the storage backends. None of them escape the public store operations; they
are converted to failure results there.
"""

class CycleSyncError(Exception):
    """Base exception for CycleSync errors."""
    pass

class InvalidInputError(CycleSyncError):
    """Raised when a caller supplies a name, index or date that cannot be used."""
    pass

class StorageError(CycleSyncError):
    """Raised when the durable storage backend cannot be read or written."""
    pass
