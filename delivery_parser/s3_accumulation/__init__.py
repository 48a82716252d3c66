"""
Stage 3: Line Accumulation

ЦКП: Контекст стиля и названия из многострочных фрагментов.
"""

from .context import ParseContext
from .stage import (
    FoldResult,
    LineAccumulator,
    NOISE_OVERFLOW,
    STALE_FRAGMENT,
    UNRECOGNIZED_LINE,
)

__all__ = [
    "FoldResult",
    "LineAccumulator",
    "NOISE_OVERFLOW",
    "ParseContext",
    "STALE_FRAGMENT",
    "UNRECOGNIZED_LINE",
]
