from datetime import datetime

UNKNOWN_SUBMITTER = "Unknown"

_MONTHS = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)


def resolve_attribution(
    submitter_name: str | None,
    is_trustee_upload: bool = False,
    trustee_name: str | None = None,
    client_name: str | None = None,
) -> str:
    """Return the "Recorded by" text for a submission.

    Trustee uploads with both names present read
    ``"{trustee_name} on behalf of {client_name}"``. Everything else uses the
    submitter name, or ``"Unknown"`` when it is blank.
    """
    if is_trustee_upload and trustee_name and client_name:
        return f"{trustee_name} on behalf of {client_name}"
    if submitter_name and submitter_name.strip():
        return submitter_name
    return UNKNOWN_SUBMITTER


def format_stamp_timestamp(moment: datetime) -> str:
    """Format ``moment`` as ``"Mar 4, 2025, 10:32 AM"`` regardless of locale."""
    hour = moment.hour % 12 or 12
    meridiem = "AM" if moment.hour < 12 else "PM"
    return (
        f"{_MONTHS[moment.month - 1]} {moment.day}, {moment.year}, "
        f"{hour:02d}:{moment.minute:02d} {meridiem}"
    )
