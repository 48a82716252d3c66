"""
Менеджер файлов для Delivery Parser.

Чтение текста документов и сохранение результатов разбора.
"""

import csv
import json
from pathlib import Path
from typing import Any, Dict, List

from loguru import logger

from ..domain.exceptions import ParsingFileNotFoundError, ParsingFileSystemError, ParsingFileWriteError


class DeliveryFileManager:
    """Менеджер файлов для Delivery Parser."""

    def read_text(self, file_path: Path) -> str:
        """
        Читает текстовый файл документа.

        Raises:
            ParsingFileNotFoundError: Если файл не существует
            ParsingFileSystemError: Если файл не удалось прочитать
        """
        if not file_path.exists():
            raise ParsingFileNotFoundError(
                message=f"Файл не найден: {file_path}",
                component="DeliveryFileManager"
            )

        try:
            return file_path.read_text(encoding="utf-8")
        except (IOError, OSError, UnicodeDecodeError) as e:
            raise ParsingFileSystemError(
                message=f"Не удалось прочитать файл: {file_path}",
                component="DeliveryFileManager",
                original_error=e
            )

    def save_json(self, data: Dict[str, Any], file_path: Path) -> Path:
        """
        Сохраняет данные в JSON файл.

        Raises:
            ParsingFileWriteError: Если не удалось сохранить файл
        """
        try:
            file_path.parent.mkdir(parents=True, exist_ok=True)

            with open(file_path, 'w', encoding='utf-8') as f:
                json.dump(data, f, ensure_ascii=False, indent=2)

            logger.debug(f"[DeliveryParser] Файл сохранен: {file_path}")
            return file_path

        except (IOError, OSError, TypeError) as e:
            raise ParsingFileWriteError(
                message=f"Не удалось сохранить JSON файл: {file_path}",
                component="DeliveryFileManager",
                original_error=e
            )

    def save_rows_csv(self, rows: List[Dict[str, Any]], file_path: Path) -> Path:
        """
        Сохраняет плоские строки записей в CSV.

        Raises:
            ParsingFileWriteError: Если не удалось сохранить файл
        """
        try:
            file_path.parent.mkdir(parents=True, exist_ok=True)

            with open(file_path, 'w', encoding='utf-8', newline='') as f:
                if rows:
                    writer = csv.DictWriter(f, fieldnames=list(rows[0].keys()))
                    writer.writeheader()
                    writer.writerows(rows)

            logger.debug(f"[DeliveryParser] CSV сохранен: {file_path} ({len(rows)} строк)")
            return file_path

        except (IOError, OSError) as e:
            raise ParsingFileWriteError(
                message=f"Не удалось сохранить CSV файл: {file_path}",
                component="DeliveryFileManager",
                original_error=e
            )

    def save_parsing_result(
        self,
        result_data: Dict[str, Any],
        rows: List[Dict[str, Any]],
        source_file: str,
        output_dir: Path,
    ) -> Dict[str, Path]:
        """
        Сохраняет результат разбора: полный JSON и CSV строк товаров.

        Returns:
            Словарь с путями к сохраненным файлам
        """
        json_path = self.save_json(result_data, output_dir / f"{source_file}_result.json")
        csv_path = self.save_rows_csv(rows, output_dir / f"{source_file}_lines.csv")

        return {
            "json": json_path,
            "csv": csv_path,
        }
