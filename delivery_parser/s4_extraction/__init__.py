"""
Stage 4: Field Extraction

ЦКП: Типизированные значения полей строки.
"""

from .number_parser import MalformedNumericError, NumberParser
from .size_normalizer import SizeNormalizer
from .stage import ExtractedFields, FieldExtractor, NameFields

__all__ = [
    "ExtractedFields",
    "FieldExtractor",
    "MalformedNumericError",
    "NameFields",
    "NumberParser",
    "SizeNormalizer",
]
