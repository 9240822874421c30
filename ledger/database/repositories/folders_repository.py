from psycopg.rows import dict_row

from ledger.database.connection import get_connection
from ledger.records.exceptions import FolderNotFoundError
from ledger.records.models import ClientFolder


class FoldersRepository:
    """Database operations for the client_folders table."""

    def create(
        self,
        trustee_id: str,
        name: str,
        client_email: str | None = None,
    ) -> ClientFolder:
        """Create a client folder owned by a trustee.

        Raises:
            ValueError: if the folder name is blank.
        """
        name = name.strip()
        if not name:
            raise ValueError("Folder name must not be blank")
        email = client_email.strip() if client_email else ""

        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    """
                    INSERT INTO client_folders (name, client_email, trustee_id)
                    VALUES (%s, %s, %s)
                    RETURNING id, name, client_email, trustee_id, created_at
                    """,
                    (name, email or None, trustee_id),
                )
                row = cur.fetchone()
            conn.commit()

        if row is None:
            raise RuntimeError(f"Insert of folder '{name}' returned no row")
        return ClientFolder(
            id=row["id"],
            name=row["name"],
            client_email=row["client_email"],
            trustee_id=str(row["trustee_id"]),
            created_at=row["created_at"],
        )

    def list_for_trustee(self, trustee_id: str) -> list[ClientFolder]:
        """List a trustee's folders with their document counts, newest first."""
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    """
                    SELECT f.id, f.name, f.client_email, f.trustee_id, f.created_at,
                           COUNT(d.id) AS document_count
                    FROM client_folders f
                    LEFT JOIN documents d ON d.folder_id = f.id
                    WHERE f.trustee_id = %s
                    GROUP BY f.id
                    ORDER BY f.created_at DESC
                    """,
                    (trustee_id,),
                )
                rows = cur.fetchall()

        return [
            ClientFolder(
                id=row["id"],
                name=row["name"],
                client_email=row["client_email"],
                trustee_id=str(row["trustee_id"]),
                created_at=row["created_at"],
                document_count=int(row["document_count"]),
            )
            for row in rows
        ]

    def delete(self, folder_id: int) -> None:
        """Raises FolderNotFoundError if no folder with this ID exists."""
        with get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute("DELETE FROM client_folders WHERE id = %s", (folder_id,))
                if cur.rowcount == 0:
                    raise FolderNotFoundError(f"Folder {folder_id} not found")
            conn.commit()
