"""
Stage 6: Reconciliation

ЦКП: Сверка вычисленных сумм по стилю с итогом, заявленным поставщиком.

Input: ParseSessionResult (записи + declared_totals)
Output: ReconciliationResult

Правила:
1. Для каждого стиля с заявленным итогом: SUM(line_total) == declared_total
2. Допустимая погрешность: ±0.05 (округление)
3. Результат информационный: расхождение не отменяет записи
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, List, Optional

from loguru import logger

from config.settings import RECONCILIATION_TOLERANCE
from contracts.delivery_dto import ParseSessionResult


@dataclass
class StyleReconciliation:
    """Сверка одного стиля."""
    style_or_barcode: str
    declared_total: Decimal
    computed_total: Decimal
    difference: Decimal
    passed: bool

    def to_dict(self) -> dict:
        return {
            "style_or_barcode": self.style_or_barcode,
            "declared_total": str(self.declared_total),
            "computed_total": str(self.computed_total),
            "difference": str(self.difference),
            "passed": self.passed,
        }


@dataclass
class ReconciliationResult:
    """
    Результат Stage 6: Reconciliation.

    ЦКП: Совпадение сумм документа.
    """
    passed: bool
    styles: List[StyleReconciliation] = field(default_factory=list)
    tolerance: float = RECONCILIATION_TOLERANCE
    error_message: Optional[str] = None

    @property
    def mismatches(self) -> List[StyleReconciliation]:
        return [style for style in self.styles if not style.passed]

    def to_dict(self) -> dict:
        return {
            "passed": self.passed,
            "styles": [style.to_dict() for style in self.styles],
            "tolerance": self.tolerance,
            "error_message": self.error_message,
        }


class ReconciliationStage:
    """
    Stage 6: сверка с итогами поставщика.

    Документы без заявленных итогов проходят сверку без проверок.
    """

    def __init__(self, tolerance: float = RECONCILIATION_TOLERANCE):
        """
        Args:
            tolerance: Допустимая погрешность (по умолчанию 0.05)
        """
        self.tolerance = Decimal(str(tolerance))

    def process(self, session: ParseSessionResult) -> ReconciliationResult:
        """
        Сверяет суммы по стилям.

        Args:
            session: Результат сессии разбора

        Returns:
            ReconciliationResult: Результат сверки
        """
        if not session.declared_totals:
            logger.debug("[Stage 6: Reconciliation] Нет заявленных итогов для сверки")
            return ReconciliationResult(passed=True, tolerance=float(self.tolerance))

        computed: Dict[str, Decimal] = {}
        for record in session.records:
            computed[record.style_or_barcode] = computed.get(record.style_or_barcode, Decimal("0")) + record.line_total

        styles = []
        for reference, declared in session.declared_totals.items():
            total = computed.get(reference, Decimal("0"))
            difference = abs(total - declared)
            styles.append(StyleReconciliation(
                style_or_barcode=reference,
                declared_total=declared,
                computed_total=total,
                difference=difference,
                passed=difference <= self.tolerance,
            ))

        result = ReconciliationResult(
            passed=all(style.passed for style in styles),
            styles=styles,
            tolerance=float(self.tolerance),
        )

        if result.passed:
            logger.info(f"[Stage 6: Reconciliation] PASSED: {len(styles)} стилей сверено")
        else:
            result.error_message = "; ".join(
                f"{s.style_or_barcode}: computed={s.computed_total}, declared={s.declared_total}, "
                f"diff={s.difference}"
                for s in result.mismatches
            )
            logger.warning(f"[Stage 6: Reconciliation] Расхождение итогов: {result.error_message}")

        return result
