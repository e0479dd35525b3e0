"""Financial calculators - DBR stage A, EMI, credit limit, system checks."""

from cardscore.calculators.credit_limit import assign_credit_limit
from cardscore.calculators.dbr import calculate_dbr, dynamic_threshold, resolve_net_income
from cardscore.calculators.emi import calculate_emi
from cardscore.calculators.system_checks import run_system_checks

__all__ = [
    "assign_credit_limit",
    "calculate_dbr",
    "calculate_emi",
    "dynamic_threshold",
    "resolve_net_income",
    "run_system_checks",
]
