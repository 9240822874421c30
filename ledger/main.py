import argparse
import mimetypes
import sys
import uuid
from pathlib import Path

from ledger.config.settings import Settings
from ledger.database.connection import close_pool, init_pool
from ledger.logging.logger import Log
from ledger.records.links import share_url
from ledger.upload.models import PDF_MIME_TYPE, UploadRequest
from ledger.upload.workflow import build_workflow


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="ledger",
        description="Stamp a document, assign it a record number and record it.",
    )
    parser.add_argument("file", type=Path, help="file to record")
    parser.add_argument("--user-id", required=True, help="owner of the upload")
    parser.add_argument("--title", default="", help="defaults to the file name")
    parser.add_argument("--submitter", default=None, help="name shown on the stamp")
    parser.add_argument("--public", action="store_true", help="list in public search")
    parser.add_argument("--trustee-id", default=None)
    parser.add_argument("--trustee-name", default=None)
    parser.add_argument("--client-name", default=None)
    parser.add_argument("--client-email", default=None)
    parser.add_argument("--note", default=None, help="private note kept with the record")
    parser.add_argument("--folder-id", type=int, default=None)
    return parser.parse_args(argv)


def build_request(args: argparse.Namespace) -> UploadRequest:
    mime_type, _ = mimetypes.guess_type(args.file.name)
    return UploadRequest(
        session_id=str(uuid.uuid4()),
        user_id=args.user_id,
        file_name=args.file.name,
        file_bytes=args.file.read_bytes(),
        mime_type=mime_type or PDF_MIME_TYPE,
        title=args.title,
        submitter_name=args.submitter,
        is_public=args.public,
        is_trustee_upload=args.trustee_id is not None,
        trustee_id=args.trustee_id,
        trustee_name=args.trustee_name,
        client_name=args.client_name,
        client_email=args.client_email,
        private_note=args.note,
        folder_id=args.folder_id,
    )


def main(argv: list[str] | None = None) -> int:
    """Entry point: parse args -> initialize pool -> run one upload."""
    args = _parse_args(argv)
    settings = Settings()
    Log.configure(settings.log_level)
    request = build_request(args)
    init_pool(settings)

    try:
        result = build_workflow(settings).upload(request)
    finally:
        close_pool()

    if not result.success or result.document is None:
        print(f"Upload failed: {result.error}", file=sys.stderr)
        return 1
    record_number = result.document.record_number
    print(record_number)
    print(share_url(settings.public_base_url, record_number))
    return 0


if __name__ == "__main__":
    sys.exit(main())
