"""
Скомпилированный формат поставщика.

ЦКП: Неизменяемая конфигурация с заранее скомпилированными regex.

FormatSpec (YAML + Pydantic) компилируется один раз при загрузке,
а не на каждую строку. Объект не меняется после создания и может
безопасно использоваться параллельными сессиями разбора.
"""

import re
from dataclasses import dataclass
from types import MappingProxyType
from typing import FrozenSet, Mapping, Optional, Pattern, Tuple

from .format_spec import FormatSpec


FLAGS = re.IGNORECASE


@dataclass(frozen=True)
class SizeHeaderMatcher:
    """Скомпилированный заголовок колонок размеров."""
    pattern: Pattern
    sizes: Tuple[str, ...] = ()


@dataclass(frozen=True)
class CompiledFormat:
    """
    Скомпилированная конфигурация формата.

    Все коллекции - кортежи или read-only mapping.
    """
    code: str
    name: str
    decimal_separator: str
    currency_symbols: Tuple[str, ...]

    noise: Tuple[Pattern, ...]
    style: Tuple[Pattern, ...]
    attribute: Tuple[Pattern, ...]
    color: Tuple[Pattern, ...]
    size_header: Tuple[SizeHeaderMatcher, ...]
    data_row: Tuple[Pattern, ...]
    size: Tuple[Pattern, ...]

    row_strip: Tuple[Pattern, ...]
    empty_cell_tokens: FrozenSet[str]
    min_numeric_tokens: int
    summary_columns: Tuple[str, ...]
    min_summary_columns: int
    column_mismatch: str

    name_cleanup: Tuple[Pattern, ...]
    name_split: Optional[Pattern]
    name_size: Optional[Pattern]
    name_as_reference: bool
    name_before_style: bool
    max_fragments: int

    reset_color_after_row: bool
    consume_size: bool

    size_map: Mapping[str, str]
    size_rules: Tuple[Tuple[Pattern, str], ...]

    @property
    def has_size_columns(self) -> bool:
        """Формат с числовыми строками по колонкам размеров."""
        return bool(self.summary_columns)

    @classmethod
    def from_spec(cls, spec: FormatSpec) -> "CompiledFormat":
        """Компилирует FormatSpec в неизменяемый объект."""

        def compile_all(patterns) -> Tuple[Pattern, ...]:
            return tuple(re.compile(p, FLAGS) for p in patterns)

        min_summary = spec.min_summary_columns
        if min_summary is None:
            min_summary = len(spec.summary_columns)

        # Ключи словаря размеров сравниваются без учёта регистра
        size_map = {key.upper(): value for key, value in spec.size_map.items()}

        return cls(
            code=spec.code,
            name=spec.name,
            decimal_separator=spec.decimal_separator,
            currency_symbols=tuple(spec.currency_symbols),
            noise=compile_all(spec.noise_patterns),
            style=compile_all(spec.style_patterns),
            attribute=compile_all(spec.attribute_patterns),
            color=compile_all(spec.color_patterns),
            size_header=tuple(
                SizeHeaderMatcher(pattern=re.compile(rule.pattern, FLAGS), sizes=tuple(rule.sizes))
                for rule in spec.size_header_patterns
            ),
            data_row=compile_all(spec.data_row_patterns),
            size=compile_all(spec.size_patterns),
            row_strip=compile_all(spec.row_strip_patterns),
            empty_cell_tokens=frozenset(spec.empty_cell_tokens),
            min_numeric_tokens=spec.min_numeric_tokens,
            summary_columns=tuple(spec.summary_columns),
            min_summary_columns=min_summary,
            column_mismatch=spec.column_mismatch,
            name_cleanup=compile_all(spec.name_cleanup_patterns),
            name_split=re.compile(spec.name_split_pattern, FLAGS) if spec.name_split_pattern else None,
            name_size=re.compile(spec.name_size_pattern, FLAGS) if spec.name_size_pattern else None,
            name_as_reference=spec.name_as_reference,
            name_before_style=spec.name_before_style,
            max_fragments=spec.max_fragments,
            reset_color_after_row=spec.reset_color_after_row,
            consume_size=spec.consume_size,
            size_map=MappingProxyType(size_map),
            size_rules=tuple(
                (re.compile(rule.pattern, FLAGS), rule.replacement) for rule in spec.size_rules
            ),
        )
