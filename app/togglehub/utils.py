from __future__ import annotations

from datetime import datetime, timezone


def utcnow() -> datetime:
    """Naive UTC timestamp, the format every table stores."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def isoformat(value: datetime | None) -> str | None:
    if value is None:
        return None
    return value.isoformat()


# Largest value a BIGINT column (and SQLite INTEGER) can hold.
MAX_DB_INT = 2**63 - 1


def parse_id(raw: str | None) -> int | None:
    """Parse a positive integer record id from a path segment; None if malformed."""
    raw = (raw or "").strip()
    # isdigit() alone also accepts superscripts and other non-decimal digits
    if not (raw.isascii() and raw.isdigit()):
        return None
    value = int(raw)
    if value <= 0 or value > MAX_DB_INT:
        return None
    return value


def get_pagination_params(
    page_query: str | None,
    page_size_query: str | None,
    *,
    default_page_size: int = 10,
    max_page_size: int = 100,
) -> tuple[int, int]:
    """
    Resolve ``page`` and ``page_size`` query values.

    - missing or malformed page -> 1; page below 1 -> 1
    - missing, malformed or non-positive page_size -> default_page_size
    - page_size above max_page_size -> max_page_size
    - page past the last addressable row -> clamped so the offset fits MAX_DB_INT
    """
    try:
        page = int((page_query or "").strip())
    except ValueError:
        page = 1
    page = max(page, 1)

    try:
        page_size = int((page_size_query or "").strip())
    except ValueError:
        page_size = default_page_size
    if page_size <= 0:
        page_size = default_page_size
    page_size = min(page_size, max_page_size)
    page = min(page, MAX_DB_INT // page_size + 1)

    return page, page_size
