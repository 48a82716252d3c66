"""
Интерфейсы (абстрактные классы) для домена Delivery Parser.

Домен отвечает за:
1. Разбиение текста документа на строки
2. Классификацию и свёртку строк
3. Извлечение полей и сборку записей товаров

Извлечение текста из PDF - внешний коллаборатор (ITextSource).
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..formats.compiled_format import CompiledFormat


class ITextSource(ABC):
    """Интерфейс источника текста документа (PDF-to-text и т.п.)."""

    @abstractmethod
    def read_text(self, document_path: Path) -> str:
        """
        Возвращает полный текст документа.

        Args:
            document_path: Путь к исходному документу

        Returns:
            Текст документа (строки через перенос)
        """
        pass


class IFormatProvider(ABC):
    """Интерфейс поставщика скомпилированных форматов."""

    @abstractmethod
    def load(self, format_code: str) -> "CompiledFormat":
        """
        Загружает формат поставщика по коду.

        Args:
            format_code: Код формата (например, 'floss')

        Returns:
            Скомпилированный неизменяемый формат
        """
        pass

    @abstractmethod
    def available_formats(self) -> list:
        """Список кодов доступных форматов."""
        pass
