"""
Stage 4: Field Extraction

ЦКП: Типизированные значения полей (ExtractedFields) из классифицированной строки.

Input: LineTag + ParseContext (только чтение) + CompiledFormat
Output: ExtractedFields или None (экстрактор отказался от строки)

Два вида строк данных:
1. Именованные группы regex (quantity, unit_price, line_total, size, sku, ...)
2. Числовая строка по колонкам размеров:
   ведущие числа сопоставляются с заголовком размеров по позиции,
   хвост - итоговые колонки формата (quantity, line_total, ...)
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, List, Optional, Tuple

from loguru import logger

from ..formats.compiled_format import CompiledFormat
from ..s2_classification.line_tag import LineKind, LineTag
from ..s3_accumulation.context import ParseContext
from .number_parser import NumberParser
from .size_normalizer import SizeNormalizer


@dataclass
class ExtractedFields:
    """Значения, извлечённые из одной строки."""
    code: Optional[str] = None
    sku: Optional[str] = None
    name: Optional[str] = None
    color: Optional[str] = None
    size: Optional[str] = None
    quality: Optional[str] = None

    quantity: Optional[Decimal] = None
    unit_price: Optional[Decimal] = None
    line_total: Optional[Decimal] = None
    rrp: Optional[Decimal] = None
    declared_total: Optional[Decimal] = None

    size_headers: List[str] = field(default_factory=list)
    size_quantities: List[Tuple[str, Decimal]] = field(default_factory=list)


@dataclass
class NameFields:
    """Название после очистки и разбора правил формата."""
    name: str
    color: Optional[str] = None
    size: Optional[str] = None


class FieldExtractor:
    """
    Stage 4: извлечение полей.

    Не изменяет контекст, кроме apply_name (слияние названия после строки данных).
    """

    def __init__(self, size_normalizer: Optional[SizeNormalizer] = None):
        self.size_normalizer = size_normalizer or SizeNormalizer()

    def extract(
        self,
        tag: LineTag,
        context: ParseContext,
        fmt: CompiledFormat,
    ) -> Optional[ExtractedFields]:
        """
        Извлекает поля строки.

        Args:
            tag: Классифицированная строка
            context: Текущий контекст (заголовки размеров, активный размер)
            fmt: Формат поставщика

        Returns:
            ExtractedFields или None, если строку нельзя разобрать

        Raises:
            MalformedNumericError: числовое поле не разбирается в конечное число
        """
        if tag.kind in (LineKind.NOISE, LineKind.HEADER_FRAGMENT):
            return None

        parser = NumberParser(fmt.decimal_separator, fmt.currency_symbols)

        if tag.is_size_header:
            return ExtractedFields(
                size_headers=[self.size_normalizer.normalize(s, fmt) for s in tag.sizes]
            )

        if tag.is_numeric_row:
            return self._extract_size_columns(tag, context, fmt, parser)

        extracted = self._extract_groups(tag.fields, fmt, parser)

        if tag.kind in (LineKind.STYLE_MARKER, LineKind.ATTRIBUTE_MARKER) and extracted.name:
            name_fields = self.split_name(extracted.name, fmt)
            extracted.name = name_fields.name
            extracted.color = extracted.color or name_fields.color
            extracted.size = extracted.size or name_fields.size

        if tag.kind == LineKind.DATA_ROW and extracted.quantity is None:
            logger.debug(f"[Stage 4: Extraction] Нет количества в строке данных: '{tag.text}'")
            return None

        return extracted

    def split_name(self, text: str, fmt: CompiledFormat) -> NameFields:
        """Очищает название и выделяет из него цвет и размер по правилам формата."""
        name = text
        for pattern in fmt.name_cleanup:
            name = pattern.sub("", name).strip()

        color = None
        size = None

        if fmt.name_split:
            match = fmt.name_split.search(name)
            if match:
                color = (match.groupdict().get("color") or "").strip() or None
                name = match.group("name").strip()

        if fmt.name_size:
            match = fmt.name_size.search(name)
            if match:
                size = self.size_normalizer.normalize(match.group("size"), fmt)
                if "name" in fmt.name_size.groupindex and match.group("name"):
                    name = match.group("name").strip()
                else:
                    name = (name[:match.start()] + name[match.end():]).strip()

        return NameFields(name=" ".join(name.split()), color=color, size=size)

    def apply_name(
        self,
        completed_fragment: Optional[str],
        extracted: ExtractedFields,
        context: ParseContext,
        fmt: CompiledFormat,
    ) -> None:
        """
        Применяет правила названия после успешной строки данных.

        Если строка сама несёт название, фрагменты ставятся перед ним и
        название относится только к этой строке. Иначе название из фрагментов
        становится названием текущего стиля.
        """
        if extracted.name:
            parts = [p for p in (completed_fragment, extracted.name) if p]
            name_fields = self.split_name(" ".join(parts), fmt)
            extracted.name = name_fields.name
            extracted.color = extracted.color or name_fields.color
            extracted.size = extracted.size or name_fields.size
            return

        if not completed_fragment:
            return

        name_fields = self.split_name(context.style_name, fmt)
        context.style_name = name_fields.name
        if name_fields.color:
            context.color = name_fields.color
        if name_fields.size and not extracted.size:
            extracted.size = name_fields.size

    def _extract_groups(
        self,
        groups: Dict[str, str],
        fmt: CompiledFormat,
        parser: NumberParser,
    ) -> ExtractedFields:

        def number(key: str) -> Optional[Decimal]:
            return parser.parse_required(groups[key]) if groups.get(key) else None

        unit_price = number("unit_price")
        if unit_price is None:
            unit_price = number("price")

        sku = groups.get("sku")
        size = groups.get("size")

        return ExtractedFields(
            code=groups.get("code"),
            sku="".join(sku.split()) if sku else None,
            name=groups.get("name"),
            color=groups.get("color"),
            size=self.size_normalizer.normalize(size, fmt) if size else None,
            quality=groups.get("quality"),
            quantity=number("quantity"),
            unit_price=unit_price,
            line_total=number("line_total"),
            rrp=number("rrp"),
            declared_total=number("total"),
        )

    def _extract_size_columns(
        self,
        tag: LineTag,
        context: ParseContext,
        fmt: CompiledFormat,
        parser: NumberParser,
    ) -> Optional[ExtractedFields]:
        if not fmt.has_size_columns:
            return None
        if not context.size_headers:
            logger.debug(f"[Stage 4: Extraction] Числовая строка без заголовка размеров: '{tag.text}'")
            return None

        values = [
            Decimal("0") if token in fmt.empty_cell_tokens else parser.parse_required(token)
            for token in tag.tokens
        ]

        headers = context.size_headers
        max_summary = len(fmt.summary_columns)
        if len(values) <= fmt.min_summary_columns:
            return None

        available = len(values) - len(headers)
        summary_count = min(max(available, fmt.min_summary_columns), max_summary)
        leading = values[:len(values) - summary_count]
        summary = values[len(values) - summary_count:]

        if len(leading) != len(headers):
            logger.warning(
                f"[Stage 4: Extraction] Колонок размеров {len(headers)}, количеств {len(leading)} "
                f"({fmt.column_mismatch}): '{tag.text}'"
            )
            if fmt.column_mismatch == "drop":
                return None

        pairs = [
            (size, quantity)
            for size, quantity in zip(headers, leading)
            if quantity > 0
        ]

        columns = dict(zip(fmt.summary_columns, summary))

        return ExtractedFields(
            quantity=columns.get("quantity"),
            unit_price=columns.get("unit_price"),
            line_total=columns.get("line_total"),
            size_quantities=pairs,
        )
