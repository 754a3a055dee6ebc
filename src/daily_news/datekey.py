"""Date key helpers

Cache rows are keyed by zero-padded ``YYYY-MM-DD`` strings. Because the
format is fixed width, lexicographic order equals chronological order, and
retention pruning relies on that.
"""

import re
from datetime import date, datetime, timedelta

KEY_FORMAT = "%Y-%m-%d"
KEY_PATTERN = re.compile(r"\d{4}-\d{2}-\d{2}", re.ASCII)


def today() -> str:
    """Return the current local date as a key"""
    return date.today().strftime(KEY_FORMAT)


def parse_key(key: str) -> date:
    """Parse a key into a date, raising ValueError when malformed"""
    if not isinstance(key, str) or not KEY_PATTERN.fullmatch(key):
        raise ValueError(f"Malformed date key: {key!r}")
    return datetime.strptime(key, KEY_FORMAT).date()


def is_valid_key(value: object) -> bool:
    """Check that value is a YYYY-MM-DD string naming a real calendar date"""
    try:
        parse_key(value)  # type: ignore[arg-type]
    except ValueError:
        return False
    return True


def shift_days(key: str, n: int = 1) -> str:
    """Return the key for the date n days before key

    Args:
        key: A validated date key
        n: Number of days to go back (negative goes forward)
    """
    return (parse_key(key) - timedelta(days=n)).strftime(KEY_FORMAT)


def archive_path(key: str) -> str:
    """Archive path of a day's image, e.g. ``2024/03/2024-03-08.jpg``"""
    day = parse_key(key)
    return f"{day.year:04d}/{day.month:02d}/{key}.jpg"
