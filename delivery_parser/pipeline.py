"""
Parsing Pipeline - оркестратор разбора документа поставщика.

Координирует выполнение этапов в строгом порядке:
1. Line Split -> (2-5. Parse Session: классификация, свёртка, извлечение, сборка)
-> 6. Reconciliation

Возвращает ParseSessionResult (контракт для экспорта) внутри PipelineResult.
"""

import time
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional

from loguru import logger

from contracts.delivery_dto import ParseSessionResult
from .domain.interfaces import IFormatProvider, ITextSource
from .formats.config_loader import FormatLoader
from .infrastructure.text_source import PlainTextSource
from .s1_lines import LineSplitStage, LinesResult
from .s6_reconciliation import ReconciliationResult, ReconciliationStage
from .session import ParseSession


@dataclass
class PipelineResult:
    """
    Полный результат пайплайна с промежуточными данными.

    Используется для отладки и анализа.
    """
    # Финальный результат
    result: ParseSessionResult

    # Промежуточные результаты этапов
    lines: Optional[LinesResult] = None
    reconciliation: Optional[ReconciliationResult] = None

    # Метрики
    processing_time_ms: float = 0.0
    stages_completed: int = 0

    @property
    def format_code(self) -> str:
        return self.result.format_code

    def to_dict(self) -> dict:
        return {
            "result": self.result.to_dict() if self.result else None,
            "lines": self.lines.to_dict() if self.lines else None,
            "reconciliation": self.reconciliation.to_dict() if self.reconciliation else None,
            "processing_time_ms": self.processing_time_ms,
            "stages_completed": self.stages_completed,
        }


class ParsingPipeline:
    """
    Пайплайн разбора документа поставщика.

    ЦКП: ParseSessionResult + сверка итогов.
    """

    def __init__(
        self,
        format_provider: Optional[IFormatProvider] = None,
        line_stage: Optional[LineSplitStage] = None,
        session: Optional[ParseSession] = None,
        reconciliation_stage: Optional[ReconciliationStage] = None,
        text_source: Optional[ITextSource] = None,
    ):
        """
        Инициализация пайплайна.

        Args:
            Все компоненты опциональны - по умолчанию создаются стандартные.
        """
        self.format_provider = format_provider or FormatLoader()
        self.line_stage = line_stage or LineSplitStage()
        self.session = session or ParseSession()
        self.reconciliation_stage = reconciliation_stage or ReconciliationStage()
        self.text_source = text_source or PlainTextSource()

        logger.info("[ParsingPipeline] Инициализирован")

    def process_text(self, text: str, format_code: str) -> PipelineResult:
        """Разбирает полный текст документа."""
        start_time = time.time()
        lines = self.line_stage.process(text)
        return self._run(lines, format_code, start_time)

    def process_lines(self, lines: Iterable[str], format_code: str) -> PipelineResult:
        """Разбирает документ, уже разбитый на строки."""
        start_time = time.time()
        lines_result = self.line_stage.from_lines(lines)
        return self._run(lines_result, format_code, start_time)

    def process_file(self, document_path: Path, format_code: str) -> PipelineResult:
        """Читает текст документа через источник текста и разбирает его."""
        logger.info(f"[ParsingPipeline] Старт обработки: {Path(document_path).name}")
        return self.process_text(self.text_source.read_text(Path(document_path)), format_code)

    def _run(self, lines: LinesResult, format_code: str, start_time: float) -> PipelineResult:
        fmt = self.format_provider.load(format_code)
        stages_completed = 1

        logger.debug("[ParsingPipeline] Parse Session")
        result = self.session.parse(lines.lines, fmt)
        stages_completed += 4

        logger.debug("[ParsingPipeline] Reconciliation")
        reconciliation = self.reconciliation_stage.process(result)
        stages_completed += 1

        processing_time_ms = (time.time() - start_time) * 1000

        logger.info(
            f"[ParsingPipeline] Завершено за {processing_time_ms:.1f}ms: "
            f"{result.totals.record_count} записей, reconciliation={reconciliation.passed}"
        )

        return PipelineResult(
            result=result,
            lines=lines,
            reconciliation=reconciliation,
            processing_time_ms=processing_time_ms,
            stages_completed=stages_completed,
        )
