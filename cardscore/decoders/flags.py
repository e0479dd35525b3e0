"""Lenient boolean parsing for flags arriving from LOS / CBS payloads.

Upstream systems send check results as real booleans, 0/1, or free text
("Yes", "Y", "true", "1"). Anything not recognised as true is false.
"""

from __future__ import annotations

from typing import Any

_TRUE_STRINGS = frozenset({"true", "1", "yes", "y"})


def as_bool(value: Any) -> bool:
    """Normalize a boolean-like value.

    True for ``True``, ``1`` and the strings ``true``, ``1``, ``yes``, ``y``
    (case-insensitive, surrounding whitespace ignored). False for everything
    else, including ``None``, other numbers and unrecognised text.
    """
    if value is True:
        return True
    if isinstance(value, bool):
        return False
    if isinstance(value, int | float) and value == 1:
        return True
    if isinstance(value, str):
        return value.strip().lower() in _TRUE_STRINGS
    return False
