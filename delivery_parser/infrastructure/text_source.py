"""
Источник текста документа.

PDF-to-text выполняется внешним инструментом; здесь читается уже
извлечённый текст (.txt рядом с документом или сам .txt).
"""

from pathlib import Path
from typing import Optional

from loguru import logger

from ..domain.interfaces import ITextSource
from .file_manager import DeliveryFileManager


class PlainTextSource(ITextSource):
    """Читает текст документа из .txt файла."""

    def __init__(self, file_manager: Optional[DeliveryFileManager] = None):
        self.file_manager = file_manager or DeliveryFileManager()

    def read_text(self, document_path: Path) -> str:
        document_path = Path(document_path)
        if document_path.suffix.lower() != ".txt":
            # Ожидаем текст, извлечённый рядом с исходным документом
            document_path = document_path.with_suffix(".txt")

        text = self.file_manager.read_text(document_path)
        logger.debug(f"[PlainTextSource] Прочитано {len(text)} символов из {document_path.name}")
        return text
