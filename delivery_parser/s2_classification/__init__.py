"""
Stage 2: Line Classification

ЦКП: Тип каждой строки по паттернам формата.
"""

from .line_tag import LineKind, LineTag
from .stage import LineClassifier

__all__ = [
    "LineClassifier",
    "LineKind",
    "LineTag",
]
