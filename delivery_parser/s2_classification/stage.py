"""
Stage 2: Line Classification

ЦКП: Тип каждой строки (LineKind) по паттернам формата поставщика.

SRP: Только классификация, без разбора чисел и без состояния.

Приоритет проверок (первое совпадение выигрывает):
1. noise            - служебные строки (страницы, банковские реквизиты, заголовки таблиц)
2. style            - маркер нового товара
3. attribute        - атрибуты текущего стиля
4. color            - смена цвета
5. size_header      - заголовок колонок размеров
6. data_row         - строки данных по именованным группам
7. size             - одиночный размер (и SKU)
8. числовая строка  - только числа и пустые ячейки, не меньше min_numeric_tokens
9. иначе            - фрагмент названия
"""

import re
from typing import Optional, Pattern, Sequence, Tuple

from ..formats.compiled_format import CompiledFormat
from ..s1_lines.stage import RawLine
from .line_tag import LineKind, LineTag


# Токен, похожий на число (разбор и проверка выполняются экстрактором)
NUMERIC_TOKEN = re.compile(r"^[+-]?\d[\d.,]*$")


class LineClassifier:
    """
    Классификатор строк документа поставщика.

    Не хранит состояния между вызовами: результат зависит только от строки и формата.
    """

    def classify(self, line: RawLine, fmt: CompiledFormat) -> LineTag:
        """
        Определяет тип строки.

        Args:
            line: Строка документа
            fmt: Скомпилированный формат поставщика

        Returns:
            LineTag с типом, группами и токенами
        """
        text = line.text

        if any(pattern.search(text) for pattern in fmt.noise):
            return LineTag(kind=LineKind.NOISE, line=line)

        for kind, patterns in (
            (LineKind.STYLE_MARKER, fmt.style),
            (LineKind.ATTRIBUTE_MARKER, fmt.attribute),
            (LineKind.COLOR_MARKER, fmt.color),
        ):
            match = self._first_match(text, patterns)
            if match:
                return LineTag(kind=kind, line=line, fields=self._groups(match))

        for header in fmt.size_header:
            match = header.pattern.search(text)
            if not match:
                continue
            sizes = header.sizes or tuple(match.group("sizes").split())
            if sizes:
                return LineTag(kind=LineKind.SIZE_MARKER, line=line, sizes=tuple(sizes))

        match = self._first_match(text, fmt.data_row)
        if match:
            return LineTag(kind=LineKind.DATA_ROW, line=line, fields=self._groups(match))

        match = self._first_match(text, fmt.size)
        if match:
            fields = self._groups(match)
            fields.setdefault("size", text)
            return LineTag(kind=LineKind.SIZE_MARKER, line=line, fields=fields)

        tokens = self.numeric_tokens(text, fmt)
        if tokens:
            return LineTag(kind=LineKind.DATA_ROW, line=line, tokens=tokens)

        return LineTag(kind=LineKind.HEADER_FRAGMENT, line=line)

    def numeric_tokens(self, text: str, fmt: CompiledFormat) -> Optional[Tuple[str, ...]]:
        """
        Токены числовой строки или None, если строка не числовая.

        Перед разбиением применяются row_strip паттерны (префиксы вроде "total")
        и удаляются символы валюты.
        """
        for pattern in fmt.row_strip:
            text = pattern.sub("", text)
        for symbol in fmt.currency_symbols:
            text = text.replace(symbol, " ")

        tokens = tuple(text.split())
        if len(tokens) < fmt.min_numeric_tokens:
            return None

        has_number = False
        for token in tokens:
            if token in fmt.empty_cell_tokens:
                continue
            if not NUMERIC_TOKEN.match(token):
                return None
            has_number = True

        return tokens if has_number else None

    @staticmethod
    def _first_match(text: str, patterns: Sequence[Pattern]) -> Optional[re.Match]:
        for pattern in patterns:
            match = pattern.search(text)
            if match:
                return match
        return None

    @staticmethod
    def _groups(match: re.Match) -> dict:
        return {
            key: value.strip()
            for key, value in match.groupdict().items()
            if value is not None and value.strip()
        }
