from pathlib import Path, PurePath

from ledger.config.settings import Settings
from ledger.logging.logger import Log
from ledger.storage.exceptions import UnsupportedStorageDiskError


def document_file_path(user_id: str, record_number: str, file_name: str = "") -> str:
    """Build the storage path of a recorded file: {user_id}/{record_number}{suffix}

    The suffix is taken from the uploaded file name and defaults to ".pdf".
    """
    suffix = PurePath(file_name).suffix.lower() or ".pdf"
    return f"{user_id}/{record_number}{suffix}"


class LocalDocumentStorage:
    """Reads and writes recorded files below a root directory."""

    FILES_ROOT = Path("/app/files")

    def __init__(self, files_root: Path | None = None) -> None:
        self._files_root = files_root if files_root is not None else self.FILES_ROOT

    def path_for(self, user_id: str, record_number: str, file_name: str = "") -> str:
        return document_file_path(user_id, record_number, file_name)

    def save(self, file_path: str, data: bytes) -> None:
        path = self._resolve(file_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
        Log.info(f"Stored {len(data)} bytes at {file_path}")

    def load(self, file_path: str) -> bytes:
        """Read stored bytes.

        Raises:
            FileNotFoundError: if nothing is stored at file_path.
        """
        path = self._resolve(file_path)
        if not path.exists():
            raise FileNotFoundError(f"File not found: {path}")
        return path.read_bytes()

    def delete(self, file_path: str) -> None:
        """Remove a stored file. A file that is already gone is not an error."""
        self._resolve(file_path).unlink(missing_ok=True)

    def _resolve(self, file_path: str) -> Path:
        path = (self._files_root / file_path).resolve()
        if not path.is_relative_to(self._files_root.resolve()):
            raise ValueError(f"File path '{file_path}' escapes the storage root")
        return path


class DocumentStorageFactory:
    """Creates the storage backend named by settings."""

    @classmethod
    def create(cls, settings: Settings) -> LocalDocumentStorage:
        disk = settings.storage_disk.lower()
        if disk != "local":
            raise UnsupportedStorageDiskError(
                f"storage_disk '{settings.storage_disk}' is not supported"
            )
        return LocalDocumentStorage(files_root=Path(settings.files_root))
