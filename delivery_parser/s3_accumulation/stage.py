"""
Stage 3: Line Accumulation

ЦКП: Название товара, собранное из фрагментов, и актуальный контекст стиля.

Поставщики часто переносят название товара на несколько строк.
Фрагменты копятся в буфере ограниченного размера и сливаются в название,
когда строка данных успешно разобрана.

Правила:
- HEADER_FRAGMENT   -> в буфер; при переполнении вытесняется самый старый
- STYLE_MARKER      -> устаревшие фрагменты отбрасываются, поля стиля сбрасываются
                       (при name_before_style фрагменты становятся названием нового стиля)
- COLOR_MARKER      -> меняет только цвет, буфер не трогает
- DATA_ROW (успех)  -> фрагменты сливаются через пробел в название стиля,
                       если название не задано маркером (иначе unrecognized_line)
- NOISE             -> ничего не меняет
"""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from loguru import logger

from ..formats.compiled_format import CompiledFormat
from ..s1_lines.stage import RawLine
from ..s2_classification.line_tag import LineKind, LineTag
from .context import ParseContext


NOISE_OVERFLOW = "noise_overflow"
STALE_FRAGMENT = "stale_fragment"
UNRECOGNIZED_LINE = "unrecognized_line"


@dataclass
class FoldResult:
    """Результат применения одной строки к контексту."""
    context: ParseContext
    completed_fragment: Optional[str] = None
    dropped: List[Tuple[RawLine, str]] = field(default_factory=list)   # (строка, причина)


class LineAccumulator:
    """Stage 3: накопление фрагментов названия и управление контекстом стиля."""

    def fold(
        self,
        tag: LineTag,
        context: ParseContext,
        fmt: CompiledFormat,
        resolved: bool = False,
    ) -> FoldResult:
        """
        Применяет строку к контексту.

        Args:
            tag: Классифицированная строка
            context: Контекст сессии (изменяется на месте)
            fmt: Формат поставщика
            resolved: Для DATA_ROW - строка успешно разобрана экстрактором

        Returns:
            FoldResult с завершённым названием (если было слияние) и отброшенными фрагментами
        """
        result = FoldResult(context=context)

        if tag.kind == LineKind.HEADER_FRAGMENT:
            context.pending_fragments.append(tag.line)
            while len(context.pending_fragments) > fmt.max_fragments:
                evicted = context.pending_fragments.pop(0)
                result.dropped.append((evicted, NOISE_OVERFLOW))
                logger.debug(f"[Stage 3: Accumulation] Вытеснен фрагмент: '{evicted.text}'")

        elif tag.kind == LineKind.STYLE_MARKER:
            carried = None
            fragments = context.take_fragments()
            if fragments:
                if fmt.name_before_style and not tag.fields.get("name"):
                    carried = self._join(fragments)
                else:
                    result.dropped.extend((line, STALE_FRAGMENT) for line in fragments)
                    logger.debug(
                        f"[Stage 3: Accumulation] Отброшено {len(fragments)} устаревших фрагментов"
                    )
            context.reset_style()
            if carried:
                context.style_name = carried
                result.completed_fragment = carried

        elif tag.kind == LineKind.COLOR_MARKER:
            color = tag.fields.get("color")
            if color:
                context.color = color

        elif tag.kind == LineKind.DATA_ROW and resolved:
            fragments = context.take_fragments()
            if fragments and context.name_from_marker:
                result.dropped.extend((line, UNRECOGNIZED_LINE) for line in fragments)
                logger.debug(
                    f"[Stage 3: Accumulation] Название задано маркером, "
                    f"{len(fragments)} фрагментов не распознано"
                )
            elif fragments:
                name = self._join(fragments)
                context.style_name = name
                result.completed_fragment = name

            # Стиль без кода может смениться названием из фрагментов после первой строки
            if context.style_code is None:
                context.name_from_marker = False

        return result

    @staticmethod
    def _join(fragments: List[RawLine]) -> str:
        return " ".join(line.text for line in fragments)
