"""Fetch → map → evaluate pipeline for one LOS application."""

from __future__ import annotations

import logging
from datetime import date

from cardscore.decision.engine import evaluate
from cardscore.integrations.los.client import LosClient
from cardscore.integrations.los.mapping import (
    applicant_from_payload,
    cbs_from_payload,
    fallback_application,
    obligations_from_payload,
    system_checks_from_payload,
)
from cardscore.schemas.scoring import DecisionResult

logger = logging.getLogger(__name__)


async def process_application(
    application_id: int | str,
    client: LosClient | None = None,
    *,
    as_of: date | None = None,
) -> DecisionResult:
    """Fetch the application, CBS summary and DBR, then evaluate.

    An unavailable application API yields the fallback record; unavailable CBS
    or DBR data leaves those inputs empty. Neither case raises.
    """
    client = client or LosClient()

    payload = await client.fetch_application(application_id)
    if payload is None:
        logger.warning("Application %s unavailable, using fallback record", application_id)
        payload = fallback_application(application_id)

    cbs_payload = await client.fetch_cbs(application_id)
    loan_type = payload.get("loan_type") or None
    dbr_payload = await client.fetch_dbr(application_id, loan_type)

    applicant = applicant_from_payload(payload)
    if applicant.application_id is None:
        applicant = applicant.model_copy(update={"application_id": str(application_id)})

    return evaluate(
        applicant,
        obligations_from_payload(payload),
        cbs_from_payload(cbs_payload, dbr_payload),
        system_checks=system_checks_from_payload(payload),
        as_of=as_of,
    )
