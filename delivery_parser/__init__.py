"""
Delivery Parser: извлечение строк товаров из документов поставщиков.

Архитектура: один пайплайн, форматы поставщиков - данные (YAML)
- Stage 1: Line Split (непустые строки с позицией)
- Stage 2: Classification (тип строки по паттернам формата)
- Stage 3: Accumulation (контекст стиля, многострочные названия)
- Stage 4: Extraction (числа, размеры, колонки размеров)
- Stage 5: Assembly (ProductLineRecord с проверкой инварианта)
- Stage 6: Reconciliation (сверка с итогами поставщика)

Вход: текст документа (после внешнего PDF-to-text)
Выход: contracts.ParseSessionResult
"""

from .pipeline import ParsingPipeline, PipelineResult
from .session import ParseSession
from .formats import CompiledFormat, FormatLoader, FormatSpec

# Stage exports
from .s1_lines import LineSplitStage, LinesResult, RawLine
from .s2_classification import LineClassifier, LineKind, LineTag
from .s3_accumulation import LineAccumulator, ParseContext
from .s4_extraction import ExtractedFields, FieldExtractor, NumberParser
from .s5_assembly import RecordAssembler
from .s6_reconciliation import ReconciliationResult, ReconciliationStage

__all__ = [
    # Pipeline
    "ParsingPipeline",
    "PipelineResult",
    "ParseSession",
    # Formats
    "CompiledFormat",
    "FormatLoader",
    "FormatSpec",
    # Stages
    "LineSplitStage",
    "LinesResult",
    "RawLine",
    "LineClassifier",
    "LineKind",
    "LineTag",
    "LineAccumulator",
    "ParseContext",
    "ExtractedFields",
    "FieldExtractor",
    "NumberParser",
    "RecordAssembler",
    "ReconciliationResult",
    "ReconciliationStage",
]
