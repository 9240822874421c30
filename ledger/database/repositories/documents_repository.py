from datetime import date, datetime
from typing import Any

import psycopg
from psycopg.rows import dict_row

from ledger.database.connection import get_connection
from ledger.records.exceptions import DocumentNotFoundError, RecordNumberConflictError
from ledger.records.models import DocumentRecord, NewDocument, SearchParams
from ledger.records.record_number import record_number_prefix

_COLUMNS = """
    id, record_number, title, submitter_name, user_id, file_name, file_path,
    mime_type, is_public, created_at, client_name, client_email, private_note,
    trustee_id, trustee_name, folder_id
"""


def _contains_pattern(term: str) -> str:
    """Build an ILIKE pattern matching ``term`` literally anywhere in a value."""
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def _to_record(row: dict[str, Any]) -> DocumentRecord:
    return DocumentRecord(
        id=row["id"],
        record_number=row["record_number"],
        title=row["title"],
        submitter_name=row["submitter_name"],
        user_id=str(row["user_id"]),
        file_name=row["file_name"],
        file_path=row["file_path"],
        mime_type=row["mime_type"],
        is_public=row["is_public"],
        created_at=row["created_at"],
        client_name=row["client_name"],
        client_email=row["client_email"],
        private_note=row["private_note"],
        trustee_id=row["trustee_id"],
        trustee_name=row["trustee_name"],
        folder_id=row["folder_id"],
    )


class DocumentsRepository:
    """Database operations for the documents table."""

    def last_sequence_for_day(self, on: date) -> int:
        """Return the highest sequence issued on ``on``, or 0 if none.

        Deleted records leave gaps, so the row count can fall below this value.
        """
        with get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    """
                    SELECT COALESCE(MAX(CAST(split_part(record_number, '-', 3) AS integer)), 0)
                    FROM documents
                    WHERE record_number LIKE %s
                    """,
                    (f"{record_number_prefix(on)}-%",),
                )
                row = cur.fetchone()
        return int(row[0]) if row is not None else 0

    def insert(
        self,
        document: NewDocument,
        record_number: str,
        created_at: datetime,
    ) -> DocumentRecord:
        """Insert a document row under ``record_number``.

        Raises:
            RecordNumberConflictError: if the record number is already taken.
        """
        try:
            with get_connection() as conn:
                with conn.cursor(row_factory=dict_row) as cur:
                    cur.execute(
                        f"""
                        INSERT INTO documents
                        (record_number, title, submitter_name, user_id, file_name,
                         file_path, mime_type, is_public, created_at, client_name,
                         client_email, private_note, trustee_id, trustee_name, folder_id)
                        VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s)
                        RETURNING {_COLUMNS}
                        """,
                        (
                            record_number,
                            document.title,
                            document.submitter_name,
                            document.user_id,
                            document.file_name,
                            document.file_path,
                            document.mime_type,
                            document.is_public,
                            created_at,
                            document.client_name,
                            document.client_email,
                            document.private_note,
                            document.trustee_id,
                            document.trustee_name,
                            document.folder_id,
                        ),
                    )
                    row = cur.fetchone()
                conn.commit()
        except psycopg.errors.UniqueViolation as exc:
            raise RecordNumberConflictError(
                f"Record number {record_number} is already taken"
            ) from exc

        if row is None:
            raise RuntimeError(f"Insert of {record_number} returned no row")
        return _to_record(row)

    def find_by_record_number(self, record_number: str) -> DocumentRecord:
        """Find a document by its record number.

        Raises:
            DocumentNotFoundError: if no document carries this record number.
        """
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    f"SELECT {_COLUMNS} FROM documents WHERE record_number = %s",
                    (record_number,),
                )
                row = cur.fetchone()

        if row is None:
            raise DocumentNotFoundError(f"Document {record_number} not found")
        return _to_record(row)

    def search_public(self, params: SearchParams) -> list[DocumentRecord]:
        """Case-insensitive substring search over public documents, newest first.

        The name filter matches either the submitter or the client name.
        """
        conditions = ["is_public = TRUE"]
        values: list[str] = []
        if params.record_number:
            conditions.append("record_number ILIKE %s")
            values.append(_contains_pattern(params.record_number))
        if params.title:
            conditions.append("title ILIKE %s")
            values.append(_contains_pattern(params.title))
        if params.name:
            conditions.append("(submitter_name ILIKE %s OR client_name ILIKE %s)")
            pattern = _contains_pattern(params.name)
            values.extend([pattern, pattern])

        where = " AND ".join(conditions)
        return self._select_many(
            f"SELECT {_COLUMNS} FROM documents WHERE {where} ORDER BY created_at DESC",
            tuple(values),
        )

    def list_for_user(self, user_id: str) -> list[DocumentRecord]:
        return self._select_many(
            f"SELECT {_COLUMNS} FROM documents WHERE user_id = %s ORDER BY created_at DESC",
            (user_id,),
        )

    def list_for_trustee(
        self,
        trustee_id: str,
        folder_id: int | None = None,
    ) -> list[DocumentRecord]:
        """List a trustee's uploads, optionally narrowed to one client folder."""
        if folder_id is None:
            return self._select_many(
                f"SELECT {_COLUMNS} FROM documents WHERE trustee_id = %s "
                "ORDER BY created_at DESC",
                (trustee_id,),
            )
        return self._select_many(
            f"SELECT {_COLUMNS} FROM documents WHERE trustee_id = %s AND folder_id = %s "
            "ORDER BY created_at DESC",
            (trustee_id, folder_id),
        )

    def set_visibility(self, document_id: int, is_public: bool) -> None:
        """Raises DocumentNotFoundError if no document with this ID exists."""
        self._update_one(
            "UPDATE documents SET is_public = %s WHERE id = %s",
            (is_public, document_id),
            document_id,
        )

    def move_to_folder(self, document_id: int, folder_id: int | None) -> None:
        """Move a document into a folder, or out of any folder when None."""
        self._update_one(
            "UPDATE documents SET folder_id = %s WHERE id = %s",
            (folder_id, document_id),
            document_id,
        )

    def delete(self, document_id: int) -> None:
        self._update_one(
            "DELETE FROM documents WHERE id = %s",
            (document_id,),
            document_id,
        )

    def _select_many(self, sql: str, params: tuple[Any, ...]) -> list[DocumentRecord]:
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(sql, params)
                rows = cur.fetchall()
        return [_to_record(row) for row in rows]

    def _update_one(self, sql: str, params: tuple[Any, ...], document_id: int) -> None:
        with get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(sql, params)
                if cur.rowcount == 0:
                    raise DocumentNotFoundError(f"Document {document_id} not found")
            conn.commit()
