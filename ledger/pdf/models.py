from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class StampOptions:
    """Submission metadata rendered into the stamp.

    ``stamped_at`` lets the caller pin the timestamp to the one used for the
    record number; when omitted the stamper uses the current time.
    """

    submitter_name: str | None
    is_trustee_upload: bool = False
    trustee_name: str | None = None
    client_name: str | None = None
    stamped_at: datetime | None = None
