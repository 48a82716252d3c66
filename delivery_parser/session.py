"""
Parse Session - один проход по строкам документа.

ЦКП: ParseSessionResult (записи в порядке документа + диагностика).

Для каждой строки: классификация -> свёртка контекста -> извлечение -> сборка.
Ошибки отдельных строк не прерывают проход: строка попадает в unmatched_lines
с причиной. Фатальны только пустой документ и документ без единой записи.
"""

from typing import Dict, List, Optional, Sequence

from loguru import logger

from config.settings import UNMATCHED_SAMPLE_SIZE
from contracts.delivery_dto import ParseSessionResult, ParseTotals, UnmatchedLine
from .domain.exceptions import EmptyDocumentError, NoRecognizedFormatError
from .formats.compiled_format import CompiledFormat
from .s1_lines.stage import RawLine
from .s2_classification import LineClassifier, LineKind, LineTag
from .s3_accumulation import FoldResult, LineAccumulator, ParseContext, UNRECOGNIZED_LINE
from .s4_extraction import FieldExtractor, MalformedNumericError
from .s5_assembly import RecordAssembler


# Причины для UnmatchedLine (unrecognized_line и причины буфера - в Stage 3)
INCOMPLETE_RECORD = "incomplete_record"
MALFORMED_NUMERIC = "malformed_numeric"


class ParseSession:
    """
    Сессия разбора документа.

    Компоненты не хранят состояния документа: контекст создаётся
    заново на каждый вызов parse, поэтому один экземпляр можно
    использовать для разных документов.
    """

    def __init__(
        self,
        classifier: Optional[LineClassifier] = None,
        accumulator: Optional[LineAccumulator] = None,
        extractor: Optional[FieldExtractor] = None,
        assembler: Optional[RecordAssembler] = None,
        sample_size: int = UNMATCHED_SAMPLE_SIZE,
    ):
        self.classifier = classifier or LineClassifier()
        self.accumulator = accumulator or LineAccumulator()
        self.extractor = extractor or FieldExtractor()
        self.assembler = assembler or RecordAssembler()
        self.sample_size = sample_size

    def parse(self, lines: Sequence[RawLine], fmt: CompiledFormat) -> ParseSessionResult:
        """
        Разбирает строки документа по формату поставщика.

        Args:
            lines: Строки документа в исходном порядке
            fmt: Скомпилированный формат

        Returns:
            ParseSessionResult с записями, нераспознанными строками и итогами

        Raises:
            EmptyDocumentError: нет ни одной непустой строки
            NoRecognizedFormatError: после прохода нет ни одной записи
        """
        lines = [line for line in lines if line.text.strip()]
        if not lines:
            raise EmptyDocumentError(
                message="Документ не содержит непустых строк",
                component="ParseSession",
            )

        logger.info(f"[ParseSession] Старт: формат {fmt.code}, {len(lines)} строк")

        context = ParseContext()
        records = []
        unmatched: List[UnmatchedLine] = []
        declared_totals: Dict = {}

        def reject(line: RawLine, reason: str) -> None:
            unmatched.append(UnmatchedLine(index=line.index, text=line.text, reason=reason))

        def collect(fold: FoldResult) -> None:
            for line, reason in fold.dropped:
                reject(line, reason)

        for line in lines:
            tag = self.classifier.classify(line, fmt)

            if tag.kind == LineKind.NOISE:
                continue

            if tag.kind == LineKind.HEADER_FRAGMENT:
                collect(self.accumulator.fold(tag, context, fmt))
                continue

            try:
                extracted = self.extractor.extract(tag, context, fmt)
            except MalformedNumericError as e:
                logger.debug(f"[ParseSession] Строка {line.index}: {e}")
                reject(line, MALFORMED_NUMERIC)
                if tag.kind == LineKind.STYLE_MARKER:
                    # Новый стиль начался, даже если его цена не разобралась
                    collect(self.accumulator.fold(tag, context, fmt))
                continue

            if tag.kind != LineKind.DATA_ROW:
                collect(self.accumulator.fold(tag, context, fmt))
                if extracted is not None:
                    context.absorb(extracted)
                continue

            if extracted is None:
                reject(line, self._decline_reason(tag, fmt))
                continue

            fold = self.accumulator.fold(tag, context, fmt, resolved=True)
            collect(fold)
            self.extractor.apply_name(fold.completed_fragment, extracted, context, fmt)

            built = self.assembler.assemble(extracted, context, fmt, tag)
            if not built:
                reject(line, INCOMPLETE_RECORD)
                continue

            records.extend(built)
            if context.declared_total is not None:
                declared_totals[built[0].style_or_barcode] = context.declared_total

        # Фрагменты, так и не ставшие названием
        for fragment in context.take_fragments():
            reject(fragment, UNRECOGNIZED_LINE)

        unmatched.sort(key=lambda item: item.index)

        result = ParseSessionResult(
            format_code=fmt.code,
            records=records,
            unmatched_lines=unmatched,
            totals=ParseTotals.from_records(records),
            declared_totals=declared_totals,
        )

        if not records:
            logger.error(
                f"[ParseSession] Формат {fmt.code}: ни одной записи, "
                f"нераспознано {len(unmatched)} строк"
            )
            raise NoRecognizedFormatError(
                message=f"Документ не распознан форматом '{fmt.code}': ни одной строки товара",
                format_code=fmt.code,
                unmatched_sample=unmatched[:self.sample_size],
                result=result,
                component="ParseSession",
            )

        logger.info(
            f"[ParseSession] Завершено: {result.totals.record_count} записей, "
            f"qty={result.totals.total_quantity}, value={result.totals.total_value}, "
            f"нераспознано {len(unmatched)}"
        )
        return result

    @staticmethod
    def _decline_reason(tag: LineTag, fmt: CompiledFormat) -> str:
        if tag.is_numeric_row and not fmt.has_size_columns:
            return UNRECOGNIZED_LINE
        return INCOMPLETE_RECORD
