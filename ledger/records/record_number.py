from datetime import date

RECORD_NUMBER_PREFIX = "SR"
SEQUENCE_WIDTH = 4


def record_number_prefix(on: date) -> str:
    """Day prefix shared by every record created on ``on``: ``SR-YYYYMMDD``."""
    return f"{RECORD_NUMBER_PREFIX}-{on:%Y%m%d}"


def generate_record_number(existing_count: int, on: date | None = None) -> str:
    """Format the record number for the next document of the day.

    Args:
        existing_count: Number of records already created on ``on``.
        on: Submission date. Defaults to today.

    Returns:
        ``SR-YYYYMMDD-NNNN`` with a 1-indexed sequence, zero-padded to four
        digits. Sequences past 9999 keep growing in width.

    Raises:
        TypeError: if existing_count is not an integer.
        ValueError: if existing_count is negative.
    """
    if isinstance(existing_count, bool) or not isinstance(existing_count, int):
        raise TypeError(f"existing_count must be an int, got {type(existing_count).__name__}")
    if existing_count < 0:
        raise ValueError(f"existing_count must be >= 0, got {existing_count}")
    day = on if on is not None else date.today()
    sequence = str(existing_count + 1).zfill(SEQUENCE_WIDTH)
    return f"{record_number_prefix(day)}-{sequence}"
