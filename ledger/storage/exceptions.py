class StorageError(Exception):
    """Base exception for document storage errors."""


class UnsupportedStorageDiskError(StorageError):
    """Raised when settings name a storage disk type this service cannot use."""
