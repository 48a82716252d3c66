"""
Domain слой Delivery Parser.

Содержит интерфейсы (абстрактные классы) и исключения.
"""

from .interfaces import ITextSource, IFormatProvider

from .exceptions import (
    ParsingError,
    EmptyDocumentError,
    NoRecognizedFormatError,
    FormatConfigurationError,
    FormatNotFoundError,
    ParsingFileSystemError,
    ParsingFileNotFoundError,
    ParsingFileWriteError,
)

__all__ = [
    # Интерфейсы
    "ITextSource",
    "IFormatProvider",

    # Исключения
    "ParsingError",
    "EmptyDocumentError",
    "NoRecognizedFormatError",
    "FormatConfigurationError",
    "FormatNotFoundError",
    "ParsingFileSystemError",
    "ParsingFileNotFoundError",
    "ParsingFileWriteError",
]
