"""SPU evaluator: blacklist, credit-card-30k and negative-list screening."""

from __future__ import annotations

import logging

from cardscore.decoders.flags import as_bool
from cardscore.models.enums import ModuleName
from cardscore.schemas.applicant import FlagValue
from cardscore.schemas.scoring import ModuleScore

logger = logging.getLogger(__name__)

MODULE = ModuleName.SPU

FLAG_BLACKLIST = "BLACKLIST"
FLAG_CREDITCARD_30K = "CREDITCARD_30K"
FLAG_NEGATIVE_LIST = "NEGATIVE_LIST"


def evaluate_spu(
    blacklist: FlagValue,
    credit_card_30k: FlagValue,
    negative_list: FlagValue,
) -> ModuleScore:
    """Any hit on the three lists is a hard stop; no hits scores 100."""
    hits = [
        flag
        for flag, value in (
            (FLAG_BLACKLIST, blacklist),
            (FLAG_CREDITCARD_30K, credit_card_30k),
            (FLAG_NEGATIVE_LIST, negative_list),
        )
        if as_bool(value)
    ]

    if not hits:
        return ModuleScore.ok(MODULE, 100, notes=["No critical SPU hits → score 100"])

    logger.info("SPU hard stop: %s", ", ".join(hits))
    return ModuleScore.stopped(
        MODULE,
        f"SPU hit: {', '.join(hits)}",
        notes=["Critical SPU hit (Blacklist / CreditCard30k / NegativeList) → score 0"],
        flags=hits,
    )
