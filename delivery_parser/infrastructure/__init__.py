"""
Инфраструктурный слой Delivery Parser.

Содержит источники текста и менеджер файлов.
"""

from .file_manager import DeliveryFileManager
from .text_source import PlainTextSource

__all__ = [
    "DeliveryFileManager",
    "PlainTextSource",
]
