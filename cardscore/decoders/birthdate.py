"""Birth-date decoding: parses LOS date strings and derives age in whole years."""

from __future__ import annotations

import logging
from datetime import date, datetime

logger = logging.getLogger(__name__)

# Formats seen in LOS payloads, tried in order
_DATE_FORMATS = ("%Y-%m-%d", "%d-%m-%Y", "%d/%m/%Y", "%Y/%m/%d")


def parse_birth_date(raw: object) -> date | None:
    """Parse a birth date from a date, datetime or string; None if unusable."""
    if raw is None or raw is False:
        return None
    if isinstance(raw, datetime):
        return raw.date()
    if isinstance(raw, date):
        return raw

    text = str(raw).strip()
    if not text:
        return None
    # ISO timestamps ("1985-06-15T00:00:00Z") keep only the date part
    candidate = text[:10]
    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(candidate, fmt).date()
        except ValueError:
            continue

    logger.debug("Unparseable birth date: %r", raw)
    return None


def age_on(birth_date: date | None, as_of: date) -> int | None:
    """Completed years between ``birth_date`` and ``as_of``.

    Returns None when the birth date is missing or lies after ``as_of``
    (a future-dated birth date is invalid input, not age zero).
    """
    if birth_date is None or birth_date > as_of:
        return None

    age = as_of.year - birth_date.year
    if (as_of.month, as_of.day) < (birth_date.month, birth_date.day):
        age -= 1
    return age
