"""
Исключения для домена Delivery Parser.

Ошибки отдельных строк сюда не попадают: они поглощаются сессией
и сохраняются как UnmatchedLine. Исключения - только фатальные
условия сессии, конфигурация и файловая система.
"""

from typing import List, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from contracts.delivery_dto import ParseSessionResult, UnmatchedLine


class ParsingError(Exception):
    """Базовое исключение для ошибок домена Delivery Parser."""

    def __init__(self, message: str, component: str = None, original_error: Exception = None):
        self.message = message
        self.component = component
        self.original_error = original_error
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        msg = f"Parsing Error: {self.message}"
        if self.component:
            msg += f" (Component: {self.component})"
        if self.original_error:
            msg += f" [Original: {type(self.original_error).__name__}: {str(self.original_error)}]"
        return msg


class EmptyDocumentError(ParsingError):
    """В документе нет ни одной непустой строки."""
    pass


class NoRecognizedFormatError(ParsingError):
    """
    После полного прохода не найдено ни одной записи.

    Несёт диагностический контекст: первые нераспознанные строки
    и частичный результат сессии.
    """

    def __init__(
        self,
        message: str,
        format_code: str,
        unmatched_sample: Optional[List["UnmatchedLine"]] = None,
        result: Optional["ParseSessionResult"] = None,
        component: str = None,
    ):
        self.format_code = format_code
        self.unmatched_sample = list(unmatched_sample or [])
        self.result = result
        super().__init__(message, component=component)


class FormatConfigurationError(ParsingError):
    """Ошибка конфигурации формата поставщика (YAML, regex, валидация)."""
    pass


class FormatNotFoundError(FormatConfigurationError):
    """Формат поставщика не найден."""
    pass


class ParsingFileSystemError(ParsingError):
    """Ошибка файловой системы в домене Delivery Parser."""
    pass


class ParsingFileNotFoundError(ParsingFileSystemError):
    """Файл не найден."""
    pass


class ParsingFileWriteError(ParsingFileSystemError):
    """Ошибка записи файла."""
    pass
