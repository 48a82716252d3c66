"""
DTO контракт: Delivery Parser -> внешний потребитель (экспорт, ERP-импорт)

Результат разбора документа поставщика: строки товаров, нераспознанные
строки для диагностики и сводные итоги.

ВАЛИДАЦИЯ: Pydantic гарантирует инвариант записи (код, размер, qty > 0).
"""

from decimal import Decimal
from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ProductLineRecord(BaseModel):
    """
    Одна строка товара (стиль + цвет + размер) из документа поставщика.

    Создаётся сборщиком записей и больше не изменяется.
    """

    style_or_barcode: str = Field(..., description="Код стиля/артикул или штрихкод")
    sku: str | None = Field(None, description="Дополнительный артикул поставщика (SKU)")
    product_name: str = Field("", description="Название товара")
    color: str = Field("", description="Цвет")
    size: str = Field(..., description="Размер (после нормализации словаря)")
    quantity: Decimal = Field(..., description="Количество")
    unit_price: Decimal = Field(..., description="Цена за единицу")
    line_total: Decimal = Field(..., description="Сумма по строке")
    line_number: int = Field(0, description="Индекс исходной строки документа")
    raw_text: str = Field("", description="Исходный текст строки данных")

    model_config = ConfigDict(frozen=True, from_attributes=True)

    @field_validator("style_or_barcode", "size")
    @classmethod
    def validate_not_blank(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Field must not be blank")
        return v.strip()

    @field_validator("quantity")
    @classmethod
    def validate_quantity(cls, v: Decimal) -> Decimal:
        if not v.is_finite() or v <= 0:
            raise ValueError("Quantity must be positive")
        return v

    @field_validator("unit_price", "line_total")
    @classmethod
    def validate_money_values(cls, v: Decimal) -> Decimal:
        if not v.is_finite() or v < 0:
            raise ValueError("Money values must be non-negative")
        return v

    def to_row(self) -> Dict[str, Any]:
        """Плоская строка для табличного экспорта."""
        return {
            "style_or_barcode": self.style_or_barcode,
            "sku": self.sku or "",
            "product_name": self.product_name,
            "color": self.color,
            "size": self.size,
            "quantity": str(self.quantity),
            "unit_price": f"{self.unit_price:.2f}",
            "line_total": f"{self.line_total:.2f}",
        }


class UnmatchedLine(BaseModel):
    """Строка, которая не превратилась в запись (только для диагностики)."""

    index: int = Field(..., description="Индекс строки в документе (с 0)")
    text: str = Field(..., description="Текст строки")
    reason: str = Field(..., description="Причина: unrecognized_line, incomplete_record, ...")

    model_config = ConfigDict(frozen=True, from_attributes=True)


class ParseTotals(BaseModel):
    """Сводные итоги, вычисленные по записям после прохода."""

    record_count: int = Field(0, description="Количество записей")
    total_quantity: Decimal = Field(Decimal("0"), description="Суммарное количество")
    total_value: Decimal = Field(Decimal("0"), description="Суммарная стоимость")

    model_config = ConfigDict(frozen=True, from_attributes=True)

    @classmethod
    def from_records(cls, records: List[ProductLineRecord]) -> "ParseTotals":
        return cls(
            record_count=len(records),
            total_quantity=sum((r.quantity for r in records), Decimal("0")),
            total_value=sum((r.line_total for r in records), Decimal("0")),
        )


class ParseSessionResult(BaseModel):
    """
    Результат одной сессии разбора документа.

    Это output движка извлечения строк товаров.
    """

    format_code: str = Field(..., description="Код формата поставщика")
    records: list[ProductLineRecord] = Field(default_factory=list, description="Записи в порядке документа")
    unmatched_lines: list[UnmatchedLine] = Field(default_factory=list, description="Нераспознанные строки")
    totals: ParseTotals = Field(default_factory=ParseTotals, description="Сводные итоги")
    declared_totals: Dict[str, Decimal] = Field(
        default_factory=dict,
        description="Итоги по стилю, заявленные в документе (для сверки)"
    )

    model_config = ConfigDict(frozen=True, from_attributes=True)

    def to_rows(self) -> List[Dict[str, Any]]:
        """Плоский список записей для CSV-подобного экспорта."""
        return [record.to_row() for record in self.records]

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(mode="json")
