"""Decision engine: weight tables, aggregation and the evaluate entry point."""

from cardscore.decision.aggregator import aggregate, bucket, external_score
from cardscore.decision.engine import evaluate
from cardscore.decision.validation import validate_application
from cardscore.decision.weights import ETB_WEIGHTS, NTB_WEIGHTS, WeightTable, weights_for

__all__ = [
    "ETB_WEIGHTS",
    "NTB_WEIGHTS",
    "WeightTable",
    "aggregate",
    "bucket",
    "evaluate",
    "external_score",
    "validate_application",
    "weights_for",
]
