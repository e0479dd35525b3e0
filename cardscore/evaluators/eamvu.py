"""EAMVU evaluator: asset / address verification submission."""

from __future__ import annotations

from cardscore.decoders.flags import as_bool
from cardscore.models.enums import ModuleName
from cardscore.schemas.applicant import FlagValue
from cardscore.schemas.scoring import ModuleScore

MODULE = ModuleName.EAMVU
FLAG_NOT_SUBMITTED = "EAMVU_NOT_SUBMITTED"


def evaluate_eamvu(submitted: FlagValue) -> ModuleScore:
    if as_bool(submitted):
        return ModuleScore.ok(MODULE, 100, notes=["EAMVU approved"])
    return ModuleScore.ok(MODULE, 0, notes=["EAMVU not approved"], flags=[FLAG_NOT_SUBMITTED])
