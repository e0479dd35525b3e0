"""Data-quality report for an applicant record.

Advisory only: problems are listed for the reviewer, evaluation still runs
and encodes the same problems as notes, flags and hard stops.
"""

from __future__ import annotations

from datetime import date

from cardscore.decoders.birthdate import age_on
from cardscore.schemas.applicant import ApplicantRecord


def validate_application(applicant: ApplicantRecord, as_of: date | None = None) -> list[str]:
    """Return human-readable data-quality problems; empty when none found."""
    problems: list[str] = []
    today = as_of or date.today()

    if applicant.date_of_birth is None:
        problems.append("Date of birth is missing or invalid")
    elif age_on(applicant.date_of_birth, today) is None:
        problems.append("Date of birth is in the future")

    if not applicant.current_address.city:
        problems.append("Current city is missing")
    if not applicant.office_address.city:
        problems.append("Office city is missing")

    net = applicant.net_monthly_income
    if net is None or net <= 0:
        problems.append("Net monthly income is missing or not positive")
    gross = applicant.gross_monthly_income
    if gross is not None and net is not None and net > gross > 0:
        problems.append("Net monthly income exceeds gross monthly income")

    if applicant.eamvu_submitted is None:
        problems.append("EAMVU submission flag is missing")

    return problems
