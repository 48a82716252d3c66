"""
Stage 5: Record Assembly

ЦКП: Валидные записи строк товаров.
"""

from .stage import RecordAssembler

__all__ = ["RecordAssembler"]
