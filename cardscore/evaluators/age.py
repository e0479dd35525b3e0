"""Age evaluator: demographic eligibility banding.

First matching rule wins:
1. Self-employed (occupation or employment type mentions "self"): 22–65 → 100, else hard stop
2. Retired: 20–61 → 75 (penalized), else hard stop
3. Salaried: 21–60 → 100; exactly 20 or 61 → 80 (edge tolerance); else hard stop

A missing or future-dated birth date is a hard stop, never an exception.
"""

from __future__ import annotations

import logging

from cardscore.models.enums import EmploymentType, ModuleName
from cardscore.schemas.scoring import ModuleScore

logger = logging.getLogger(__name__)

MODULE = ModuleName.AGE

SELF_EMPLOYED_RANGE = (22, 65)
RETIRED_RANGE = (20, 61)
SALARIED_RANGE = (21, 60)
SALARIED_EDGE_AGES = frozenset({20, 61})

SCORE_FULL = 100
SCORE_RETIRED = 75
SCORE_EDGE = 80


def _is_self_employed(occupation: str, employment_type: EmploymentType | str | None) -> bool:
    if "self" in occupation.lower():
        return True
    type_text = employment_type.value if isinstance(employment_type, EmploymentType) else str(employment_type or "")
    return "self" in type_text.lower()


def evaluate_age(
    age: int | None,
    occupation: str = "",
    employment_type: EmploymentType | str | None = None,
    is_retired: bool = False,
) -> ModuleScore:
    """Score the applicant's age against the band for their employment.

    Args:
        age: Completed years on the evaluation date; None if the birth date
            is missing, unparseable or in the future.
        occupation: Free-text occupation.
        employment_type: Employment type (enum or raw text).
        is_retired: Retired flag.
    """
    if age is None or age < 0:
        logger.info("Age hard stop: invalid or future-dated birth date")
        return ModuleScore.stopped(
            MODULE,
            "Invalid or future-dated birth date",
            notes=["Date of birth missing, invalid or in the future."],
        )

    if _is_self_employed(occupation, employment_type):
        low, high = SELF_EMPLOYED_RANGE
        if low <= age <= high:
            return ModuleScore.ok(MODULE, SCORE_FULL, notes=[f"Age {age} within {low}–{high} (Self-Employed)."])
        return ModuleScore.stopped(
            MODULE,
            f"Age {age} outside {low}–{high} (Self-Employed)",
            notes=[f"Age {age} outside {low}–{high} (Self-Employed)."],
        )

    if is_retired:
        low, high = RETIRED_RANGE
        if not low <= age <= high:
            return ModuleScore.stopped(
                MODULE,
                f"Age {age} not acceptable for Salaried (Retired)",
                notes=[f"Age {age} outside {low}–{high} (Retired)."],
            )
        if age < 60:
            note = f"Retired before 60 (Age {age}) → penalized score."
        else:
            note = f"Retired at/near 60–61 (Age {age}) → penalized score."
        return ModuleScore.ok(MODULE, SCORE_RETIRED, notes=[note])

    low, high = SALARIED_RANGE
    if low <= age <= high:
        return ModuleScore.ok(MODULE, SCORE_FULL, notes=[f"Age {age} within {low}–{high} (Salaried)."])
    if age in SALARIED_EDGE_AGES:
        return ModuleScore.ok(
            MODULE,
            SCORE_EDGE,
            notes=[f"Edge tolerance (Age {age}) for Salaried → lesser score."],
        )

    return ModuleScore.stopped(
        MODULE,
        f"Age {age} outside 20–61 (Salaried)",
        notes=[f"Age {age} outside 20–61 (Salaried)."],
    )
