"""Module weight tables, one per customer relationship status.

| module      | ETB  | NTB  |
|-------------|------|------|
| DBR         | 0.55 | 0.55 |
| Age         | 0.05 | 0.05 |
| City        | 0.05 | 0.05 |
| Income      | 0.10 | 0.10 |
| SPU         | 0.05 | 0.05 |
| EAMVU       | 0.05 | 0.05 |
| Application | 0.10 | 0.15 |
| Behavioral  | 0.05 | 0.00 |
"""

from __future__ import annotations

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, model_validator

from cardscore.models.enums import CustomerType, ModuleName


class WeightTable(BaseModel):
    """Weights for every module; validated to cover all modules and sum to 1."""

    model_config = ConfigDict(frozen=True)

    customer_type: CustomerType
    weights: dict[ModuleName, Decimal]

    @model_validator(mode="after")
    def _check(self) -> WeightTable:
        missing = set(ModuleName) - set(self.weights)
        if missing:
            msg = f"{self.customer_type.value} weight table missing: {sorted(m.value for m in missing)}"
            raise ValueError(msg)
        total = sum(self.weights.values(), Decimal("0"))
        if total != Decimal("1"):
            msg = f"{self.customer_type.value} weights sum to {total}, expected 1"
            raise ValueError(msg)
        return self

    def weight(self, module: ModuleName) -> Decimal:
        return self.weights[module]


ETB_WEIGHTS = WeightTable(
    customer_type=CustomerType.ETB,
    weights={
        ModuleName.DBR: Decimal("0.55"),
        ModuleName.AGE: Decimal("0.05"),
        ModuleName.CITY: Decimal("0.05"),
        ModuleName.INCOME: Decimal("0.10"),
        ModuleName.SPU: Decimal("0.05"),
        ModuleName.EAMVU: Decimal("0.05"),
        ModuleName.APPLICATION: Decimal("0.10"),
        ModuleName.BEHAVIORAL: Decimal("0.05"),
    },
)

NTB_WEIGHTS = WeightTable(
    customer_type=CustomerType.NTB,
    weights={
        ModuleName.DBR: Decimal("0.55"),
        ModuleName.AGE: Decimal("0.05"),
        ModuleName.CITY: Decimal("0.05"),
        ModuleName.INCOME: Decimal("0.10"),
        ModuleName.SPU: Decimal("0.05"),
        ModuleName.EAMVU: Decimal("0.05"),
        ModuleName.APPLICATION: Decimal("0.15"),
        ModuleName.BEHAVIORAL: Decimal("0"),
    },
)

WEIGHT_TABLES: dict[CustomerType, WeightTable] = {
    CustomerType.ETB: ETB_WEIGHTS,
    CustomerType.NTB: NTB_WEIGHTS,
}


def weights_for(customer_type: CustomerType) -> WeightTable:
    return WEIGHT_TABLES[customer_type]
