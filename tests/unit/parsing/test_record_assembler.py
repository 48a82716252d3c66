"""
Unit-тесты для Stage 5: Record Assembly.

ЦКП: Проверка инварианта записи и расчёта суммы строки.
"""

from decimal import Decimal

import pytest
from pydantic import ValidationError

from contracts.delivery_dto import ProductLineRecord
from delivery_parser.formats.compiled_format import CompiledFormat
from delivery_parser.formats.format_spec import FormatSpec
from delivery_parser.s3_accumulation import ParseContext
from delivery_parser.s4_extraction.stage import ExtractedFields
from delivery_parser.s5_assembly import RecordAssembler


def make_format(**overrides) -> CompiledFormat:
    data = {"code": "test", "name": "Test"}
    data.update(overrides)
    return CompiledFormat.from_spec(FormatSpec(**data))


@pytest.fixture
def assembler():
    return RecordAssembler()


def test_one_record_per_size(assembler):
    context = ParseContext(
        style_code="F10854", style_name="Fresa Onesie", color="Blue Violet",
        unit_price=Decimal("16.40"),
    )
    extracted = ExtractedFields(
        line_total=Decimal("49.20"),
        size_quantities=[("2Y", Decimal("1")), ("3Y", Decimal("2"))],
    )

    records = assembler.assemble(extracted, context, make_format())

    assert [(r.size, r.quantity, r.line_total) for r in records] == [
        ("2Y", Decimal("1"), Decimal("16.40")),
        ("3Y", Decimal("2"), Decimal("32.80")),
    ]
    assert all(r.style_or_barcode == "F10854" for r in records)
    assert all(r.color == "Blue Violet" for r in records)


def test_single_size_uses_row_line_total(assembler):
    context = ParseContext(style_code="8435512929389", sku="WKN00256", size="S")
    extracted = ExtractedFields(
        quantity=Decimal("1"), unit_price=Decimal("60.00"), line_total=Decimal("59.99"),
    )

    records = assembler.assemble(extracted, context, make_format())

    assert len(records) == 1
    assert records[0].line_total == Decimal("59.99")
    assert records[0].sku == "WKN00256"


def test_sku_used_when_no_style_code(assembler):
    context = ParseContext(style_name="Avenue Shorts")
    extracted = ExtractedFields(
        sku="S26W2161-GR-2", size="2 jaar", quantity=Decimal("1"), unit_price=Decimal("28.00"),
    )

    records = assembler.assemble(extracted, context, make_format())
    assert records[0].style_or_barcode == "S26W2161-GR-2"


def test_name_as_reference(assembler):
    extracted = ExtractedFields(
        name="BURTON OVERALLS", size="2Y", quantity=Decimal("1.00"), unit_price=Decimal("27.60"),
    )

    assert assembler.assemble(extracted, ParseContext(), make_format()) is None
    records = assembler.assemble(extracted, ParseContext(), make_format(name_as_reference=True))
    assert records[0].style_or_barcode == "BURTON OVERALLS"


@pytest.mark.parametrize("extracted", [
    ExtractedFields(quantity=Decimal("1"), unit_price=Decimal("10")),                    # нет размера
    ExtractedFields(size="M", quantity=Decimal("0"), unit_price=Decimal("10")),          # qty = 0
    ExtractedFields(size="M", quantity=Decimal("1")),                                    # нет цены
    ExtractedFields(size_quantities=[], unit_price=Decimal("10")),                       # нет количеств
])
def test_invariant_violations_return_none(assembler, extracted):
    context = ParseContext(style_code="F1")
    assert assembler.assemble(extracted, context, make_format()) is None


def test_no_style_reference_returns_none(assembler):
    extracted = ExtractedFields(size="M", quantity=Decimal("1"), unit_price=Decimal("10"))
    assert assembler.assemble(extracted, ParseContext(style_name="Orphan"), make_format()) is None


def test_reset_color_after_row(assembler):
    context = ParseContext(style_code="F1", color="Sand", unit_price=Decimal("5"))
    extracted = ExtractedFields(size_quantities=[("M", Decimal("1"))])

    assembler.assemble(extracted, context, make_format(reset_color_after_row=True))
    assert context.color == ""


def test_consume_size(assembler):
    context = ParseContext(style_code="30005160", size="M", unit_price=Decimal("45.00"))
    extracted = ExtractedFields(quantity=Decimal("2"))

    records = assembler.assemble(extracted, context, make_format(consume_size=True))

    assert records[0].size == "M"
    assert context.size is None
    assert assembler.assemble(ExtractedFields(quantity=Decimal("1")), context, make_format()) is None


def test_record_contract_rejects_invalid_values():
    with pytest.raises(ValidationError):
        ProductLineRecord(
            style_or_barcode=" ", size="M", quantity=Decimal("1"),
            unit_price=Decimal("1"), line_total=Decimal("1"),
        )
    with pytest.raises(ValidationError):
        ProductLineRecord(
            style_or_barcode="F1", size="M", quantity=Decimal("-1"),
            unit_price=Decimal("1"), line_total=Decimal("1"),
        )


def test_record_to_row_formats_money():
    record = ProductLineRecord(
        style_or_barcode="F1", size="2Y", quantity=Decimal("1"),
        unit_price=Decimal("16.4"), line_total=Decimal("16.4"),
    )
    row = record.to_row()
    assert row["unit_price"] == "16.40"
    assert row["line_total"] == "16.40"
    assert row["sku"] == ""
