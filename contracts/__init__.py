"""
Контракты DTO проекта Delivery Parser.

Все контракты используют Pydantic v2 для валидации.

Контракты:
- Delivery Parser -> Экспорт: ParseSessionResult (delivery_dto.py)
"""

from .delivery_dto import (
    ProductLineRecord,
    UnmatchedLine,
    ParseTotals,
    ParseSessionResult,
)

__all__ = [
    "ProductLineRecord",
    "UnmatchedLine",
    "ParseTotals",
    "ParseSessionResult",
]
