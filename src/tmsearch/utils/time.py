"""Time utilities for UTC timestamps and epoch date display."""

from datetime import datetime, timedelta, timezone

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

# en-US abbreviated month names, independent of the process locale
MONTH_ABBREVIATIONS = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)


def utc_now_z() -> str:
    """
    Get current UTC time as ISO 8601 string with Z suffix.

    Returns:
        ISO 8601 UTC timestamp ending with 'Z' (e.g., '2025-12-23T00:27:07.804867Z')
    """
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def epoch_to_utc(seconds: int) -> datetime:
    """
    Decode epoch seconds into an aware UTC datetime.

    Values outside the range datetime can represent are clamped to the epoch
    itself rather than raising.
    """
    try:
        return EPOCH + timedelta(seconds=int(seconds))
    except (OverflowError, ValueError, TypeError):
        return EPOCH


def format_epoch_date(seconds: int, lowercase: bool = False) -> str:
    """
    Format epoch seconds as a short en-US date, e.g. 'Sep 9, 2001'.

    Decoding is UTC-based; no local timezone correction is applied.

    Args:
        seconds: Seconds since 1970-01-01T00:00:00Z
        lowercase: Return 'sep 9, 2001' instead (used by the status column)

    Example:
        >>> format_epoch_date(1000000000)
        'Sep 9, 2001'
    """
    dt = epoch_to_utc(seconds)
    text = f"{MONTH_ABBREVIATIONS[dt.month - 1]} {dt.day}, {dt.year}"
    return text.lower() if lowercase else text
