"""
Stage 1: Line Split

ЦКП: Упорядоченные непустые строки документа.

Input: текст документа (результат внешнего PDF-to-text) или список строк
Output: LinesResult (RawLine с индексом позиции в документе)

Алгоритм:
1. Разбиение по переносам строк
2. Нормализация пробелов (табы, неразрывные пробелы, повторы)
3. Отбрасывание пустых строк с сохранением исходного индекса
"""

import re
from dataclasses import dataclass, field
from typing import Iterable, List

from loguru import logger


WHITESPACE = re.compile(r"\s+")  # включая неразрывные пробелы


@dataclass(frozen=True)
class RawLine:
    """Одна обрезанная непустая строка документа."""
    index: int                          # Позиция в документе (с 0)
    text: str                           # Текст без крайних пробелов

    def to_dict(self) -> dict:
        return {"index": self.index, "text": self.text}


@dataclass
class LinesResult:
    """
    Результат Stage 1: Line Split.

    ЦКП: Строки, готовые к классификации.
    """
    lines: List[RawLine] = field(default_factory=list)
    total_input_lines: int = 0
    blank_lines: int = 0

    @property
    def texts(self) -> List[str]:
        return [line.text for line in self.lines]

    def to_dict(self) -> dict:
        return {
            "lines": [line.to_dict() for line in self.lines],
            "total_input_lines": self.total_input_lines,
            "blank_lines": self.blank_lines,
        }


class LineSplitStage:
    """Stage 1: разбиение текста на RawLine."""

    def process(self, text: str) -> LinesResult:
        """Разбивает сырой текст документа на строки."""
        return self.from_lines((text or "").splitlines())

    def from_lines(self, lines: Iterable[str]) -> LinesResult:
        """Нормализует уже разбитые строки (индекс = позиция во входе)."""
        result = LinesResult()

        for index, raw in enumerate(lines):
            result.total_input_lines += 1
            text = WHITESPACE.sub(" ", raw or "").strip()
            if not text:
                result.blank_lines += 1
                continue
            result.lines.append(RawLine(index=index, text=text))

        logger.debug(
            f"[Stage 1: Lines] {len(result.lines)} строк "
            f"(пустых: {result.blank_lines} из {result.total_input_lines})"
        )
        return result
