"""
ParseContext - изменяемое состояние одной сессии разбора.

Создаётся на каждый документ и не разделяется между сессиями.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import TYPE_CHECKING, List, Optional

from ..s1_lines.stage import RawLine

if TYPE_CHECKING:
    from ..s4_extraction.stage import ExtractedFields


@dataclass
class ParseContext:
    """
    Состояние разбора на текущей позиции документа.

    Поля стиля сбрасываются на каждом STYLE_MARKER.
    Заголовок колонок размеров описывает раскладку таблицы и переживает смену стиля.
    name_from_marker: название стиля задано маркером, фрагменты его не заменяют.
    """
    style_code: Optional[str] = None
    style_name: str = ""
    color: str = ""
    size: Optional[str] = None
    sku: Optional[str] = None
    unit_price: Optional[Decimal] = None
    rrp: Optional[Decimal] = None
    quality: str = ""
    declared_total: Optional[Decimal] = None
    name_from_marker: bool = False

    size_headers: List[str] = field(default_factory=list)
    pending_fragments: List[RawLine] = field(default_factory=list)

    @property
    def pending_name_fragments(self) -> List[str]:
        return [line.text for line in self.pending_fragments]

    def reset_style(self) -> None:
        """Сброс всех полей стиля (новый товар)."""
        self.style_code = None
        self.style_name = ""
        self.color = ""
        self.size = None
        self.sku = None
        self.unit_price = None
        self.rrp = None
        self.quality = ""
        self.declared_total = None
        self.name_from_marker = False

    def absorb(self, fields: "ExtractedFields") -> None:
        """Переносит в контекст поля маркера (только найденные значения)."""
        for name in ("sku", "size", "unit_price", "rrp", "declared_total"):
            value = getattr(fields, name)
            if value is not None:
                setattr(self, name, value)

        if fields.code:
            self.style_code = fields.code
        if fields.name:
            self.style_name = fields.name
            self.name_from_marker = True
        if fields.color:
            self.color = fields.color
        if fields.quality:
            self.quality = fields.quality
        if fields.size_headers:
            self.size_headers = list(fields.size_headers)

    def take_fragments(self) -> List[RawLine]:
        """Забирает накопленные фрагменты и очищает буфер."""
        fragments = self.pending_fragments
        self.pending_fragments = []
        return fragments

    def to_dict(self) -> dict:
        return {
            "style_code": self.style_code,
            "style_name": self.style_name,
            "color": self.color,
            "size": self.size,
            "sku": self.sku,
            "unit_price": str(self.unit_price) if self.unit_price is not None else None,
            "name_from_marker": self.name_from_marker,
            "size_headers": list(self.size_headers),
            "pending_name_fragments": self.pending_name_fragments,
        }
