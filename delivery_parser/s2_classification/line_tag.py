"""
LineTag - результат классификации строки.

Классификация не выполняет разбор значений: она только определяет тип
строки и сохраняет найденные regex-группы и токены для экстрактора.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Tuple

from ..s1_lines.stage import RawLine


class LineKind(Enum):
    """Тип строки документа поставщика."""
    NOISE = "noise"                         # Служебная строка, не влияет на состояние
    STYLE_MARKER = "style_marker"           # Начало нового товара (код стиля / штрихкод)
    ATTRIBUTE_MARKER = "attribute_marker"   # Атрибут текущего стиля (название, итог, RRP)
    COLOR_MARKER = "color_marker"           # Смена цвета
    SIZE_MARKER = "size_marker"             # Одиночный размер или заголовок колонок размеров
    DATA_ROW = "data_row"                   # Строка с количествами и ценами
    HEADER_FRAGMENT = "header_fragment"     # Часть названия товара, разбитого на строки


@dataclass(frozen=True)
class LineTag:
    """Классифицированная строка."""
    kind: LineKind
    line: RawLine
    fields: Dict[str, str] = field(default_factory=dict)    # Непустые именованные группы
    sizes: Tuple[str, ...] = ()                             # Для заголовка колонок размеров
    tokens: Tuple[str, ...] = ()                            # Для числовой строки по колонкам

    @property
    def text(self) -> str:
        return self.line.text

    @property
    def is_size_header(self) -> bool:
        return self.kind == LineKind.SIZE_MARKER and bool(self.sizes)

    @property
    def is_numeric_row(self) -> bool:
        return self.kind == LineKind.DATA_ROW and bool(self.tokens)
