#!/usr/bin/env python3
"""
Точка входа Delivery Parser (разбор документа поставщика).

Использование:
    # Разобрать текст документа форматом floss
    python scripts/parse_delivery.py path/to/confirmation.txt --format floss

    # Сохранить результат в другую директорию
    python scripts/parse_delivery.py path/to/invoice.txt --format thinkingmu --output out/

    # Список доступных форматов
    python scripts/parse_delivery.py --list-formats
"""

import sys
import argparse
from pathlib import Path

from loguru import logger

# Добавляем корень проекта в путь
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from config.settings import LOG_LEVEL, OUTPUT_DIR, validate_config
from delivery_parser import FormatLoader, ParsingPipeline
from delivery_parser.domain.exceptions import NoRecognizedFormatError, ParsingError
from delivery_parser.infrastructure import DeliveryFileManager


def configure_logging(level: str) -> None:
    """Настраивает вывод loguru."""
    logger.remove()
    logger.add(
        sys.stderr,
        level=level,
        format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | {message}",
    )


def parse_document(document: Path, format_code: str, output_dir: Path) -> bool:
    """
    Разбирает один документ и сохраняет JSON и CSV.

    Returns:
        True если успешно, False если ошибка
    """
    pipeline = ParsingPipeline()
    file_manager = DeliveryFileManager()

    try:
        result = pipeline.process_file(document, format_code)
    except NoRecognizedFormatError as e:
        print(f"  [ERROR] {e.message}")
        for line in e.unmatched_sample:
            print(f"    #{line.index} [{line.reason}] {line.text}")
        return False
    except ParsingError as e:
        print(f"  [ERROR] Ошибка разбора {document.name}: {e}")
        return False

    session = result.result
    print(f"  [INFO]  Записей: {session.totals.record_count}")
    print(f"  [INFO]  Количество: {session.totals.total_quantity}")
    print(f"  [INFO]  Сумма: {session.totals.total_value:.2f}")
    print(f"  [INFO]  Нераспознано строк: {len(session.unmatched_lines)}")

    reconciliation = result.reconciliation
    if reconciliation and reconciliation.styles:
        status = "PASSED" if reconciliation.passed else "MISMATCH"
        print(f"  [INFO]  Сверка итогов: {status} ({len(reconciliation.styles)} стилей)")

    saved = file_manager.save_parsing_result(
        result_data=result.to_dict(),
        rows=session.to_rows(),
        source_file=document.stem,
        output_dir=output_dir,
    )
    for kind, path in saved.items():
        print(f"  [SAVED] {kind.upper()}: {path}")

    return True


def main():
    """Главная функция запуска Delivery Parser."""

    parser = argparse.ArgumentParser(description="Delivery Parser - строки товаров из документов поставщиков")
    parser.add_argument("document", nargs="?", help="Путь к тексту документа (.txt)")
    parser.add_argument("--format", dest="format_code", help="Код формата поставщика (например, floss)")
    parser.add_argument("--output", help="Директория для результатов (по умолчанию data/output)")
    parser.add_argument("--list-formats", action="store_true", help="Показать доступные форматы")
    parser.add_argument("--log-level", default=LOG_LEVEL, help="Уровень логирования loguru")
    args = parser.parse_args()

    configure_logging(args.log_level)

    if args.list_formats:
        for code in FormatLoader().available_formats():
            print(code)
        return

    if not args.document or not args.format_code:
        parser.error("нужны путь к документу и --format")

    try:
        validate_config()
    except ValueError as e:
        print(f"[ERROR] Некорректная конфигурация:\n{e}")
        sys.exit(1)

    document = Path(args.document)
    output_dir = Path(args.output) if args.output else OUTPUT_DIR

    print("\n" + "="*60)
    print(f"  DELIVERY PARSER - {document.name} ({args.format_code})")
    print("="*60)

    if not parse_document(document, args.format_code, output_dir):
        sys.exit(1)


if __name__ == "__main__":
    main()
