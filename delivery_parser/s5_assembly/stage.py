"""
Stage 5: Record Assembly

ЦКП: Валидные ProductLineRecord из полей строки данных и контекста стиля.

Инвариант записи: есть код стиля / штрихкод, непустой размер, количество > 0.
Строка данных с несколькими размерами даёт по записи на каждый размер.
"""

from decimal import Decimal
from typing import List, Optional, Tuple

from loguru import logger
from pydantic import ValidationError

from contracts.delivery_dto import ProductLineRecord
from ..formats.compiled_format import CompiledFormat
from ..s2_classification.line_tag import LineTag
from ..s3_accumulation.context import ParseContext
from ..s4_extraction.stage import ExtractedFields


class RecordAssembler:
    """Stage 5: сборка записей."""

    def assemble(
        self,
        extracted: ExtractedFields,
        context: ParseContext,
        fmt: CompiledFormat,
        tag: Optional[LineTag] = None,
    ) -> Optional[List[ProductLineRecord]]:
        """
        Собирает записи строки данных.

        Args:
            extracted: Поля строки данных
            context: Контекст стиля
            fmt: Формат поставщика
            tag: Исходная строка (для номера и текста в записи)

        Returns:
            Список записей или None, если ни одна не проходит инвариант
        """
        pairs = self._size_quantities(extracted, context)

        code = context.style_code or extracted.code
        sku = extracted.sku or context.sku
        name = extracted.name or context.style_name
        color = extracted.color or context.color
        unit_price = extracted.unit_price if extracted.unit_price is not None else context.unit_price

        reference = code or sku or (name if fmt.name_as_reference else None)
        if not reference:
            logger.debug("[Stage 5: Assembly] Нет кода стиля для строки данных")
            return None
        if unit_price is None:
            logger.debug(f"[Stage 5: Assembly] Нет цены для {reference}")
            return None

        records = []
        for size, quantity in pairs:
            if extracted.line_total is not None and len(pairs) == 1:
                line_total = extracted.line_total
            else:
                line_total = quantity * unit_price

            try:
                records.append(ProductLineRecord(
                    style_or_barcode=reference,
                    sku=sku,
                    product_name=name or "",
                    color=color or "",
                    size=size,
                    quantity=quantity,
                    unit_price=unit_price,
                    line_total=line_total,
                    line_number=tag.line.index if tag else 0,
                    raw_text=tag.text if tag else "",
                ))
            except ValidationError as e:
                logger.debug(f"[Stage 5: Assembly] Запись {reference}/{size} отклонена: {e.errors()[0]['msg']}")

        if not records:
            return None

        if fmt.reset_color_after_row:
            context.color = ""
        if fmt.consume_size:
            context.size = None

        return records

    @staticmethod
    def _size_quantities(
        extracted: ExtractedFields,
        context: ParseContext,
    ) -> List[Tuple[str, Decimal]]:
        if extracted.size_quantities:
            return list(extracted.size_quantities)

        size = extracted.size or context.size
        if not size or extracted.quantity is None:
            return []
        return [(size, extracted.quantity)]
