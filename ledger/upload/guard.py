import threading
from collections.abc import Iterator
from contextlib import contextmanager

from ledger.upload.exceptions import UploadInProgressError


class UploadGuard:
    """Allows at most one upload at a time per client session."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._active: set[str] = set()

    def acquire(self, session_id: str) -> bool:
        """Mark the session busy. Returns False if it already was."""
        with self._lock:
            if session_id in self._active:
                return False
            self._active.add(session_id)
            return True

    def release(self, session_id: str) -> None:
        with self._lock:
            self._active.discard(session_id)

    def is_active(self, session_id: str) -> bool:
        with self._lock:
            return session_id in self._active

    @contextmanager
    def hold(self, session_id: str) -> Iterator[None]:
        """Hold the session for the duration of the block.

        Raises:
            UploadInProgressError: if the session is already uploading.
        """
        if not self.acquire(session_id):
            raise UploadInProgressError("Upload already in progress")
        try:
            yield
        finally:
            self.release(session_id)
