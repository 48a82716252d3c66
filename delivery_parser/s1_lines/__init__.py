"""
Stage 1: Line Split

ЦКП: Непустые строки документа с позицией.
"""

from .stage import LineSplitStage, LinesResult, RawLine

__all__ = [
    "LineSplitStage",
    "LinesResult",
    "RawLine",
]
