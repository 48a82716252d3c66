"""
Stage 6: Reconciliation

ЦКП: Сверка сумм по стилю с итогами поставщика.
"""

from .stage import ReconciliationResult, ReconciliationStage, StyleReconciliation

__all__ = [
    "ReconciliationResult",
    "ReconciliationStage",
    "StyleReconciliation",
]
