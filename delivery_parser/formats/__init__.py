"""
Форматы поставщиков.

Каждый формат - YAML файл formats/<code>/format.yaml,
валидируемый FormatSpec и компилируемый в CompiledFormat.
"""

from .compiled_format import CompiledFormat, SizeHeaderMatcher
from .config_loader import FormatLoader
from .format_spec import FormatSpec, SizeHeaderRule, SizeRule

__all__ = [
    "CompiledFormat",
    "FormatLoader",
    "FormatSpec",
    "SizeHeaderMatcher",
    "SizeHeaderRule",
    "SizeRule",
]
