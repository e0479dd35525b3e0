"""Deterministic input decoders: lenient flags and birth dates."""

from cardscore.decoders.birthdate import age_on, parse_birth_date
from cardscore.decoders.flags import as_bool

__all__ = ["age_on", "as_bool", "parse_birth_date"]
