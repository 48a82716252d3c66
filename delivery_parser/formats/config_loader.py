"""
Config Loader для форматов поставщиков.

ЦКП: Загрузка и компиляция CompiledFormat для кода формата.

Архитектурный принцип:
- Один формат = один файл formats/<code>/format.yaml
- Общие списки и словари лежат в formats/base.yaml и подключаются через $extends
- Формат может наследовать другой формат целиком (extends: <code>)
- Кеш принадлежит экземпляру загрузчика, глобального состояния нет
"""

import copy
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from loguru import logger
from pydantic import ValidationError

from config.settings import FORMATS_DIR
from ..domain.exceptions import FormatConfigurationError, FormatNotFoundError
from ..domain.interfaces import IFormatProvider
from .compiled_format import CompiledFormat
from .format_spec import FormatSpec


FORMAT_FILE = "format.yaml"
BASE_FILE = "base.yaml"


class FormatLoader(IFormatProvider):
    """
    Загрузчик форматов поставщиков из YAML.

    Компилирует каждый формат один раз и кеширует результат в экземпляре.
    """

    def __init__(self, formats_dir: Optional[Path] = None):
        """
        Args:
            formats_dir: Директория с конфигами (по умолчанию settings.FORMATS_DIR)
        """
        self.formats_dir = Path(formats_dir) if formats_dir else Path(FORMATS_DIR)
        self._cache: Dict[str, CompiledFormat] = {}

    def load(self, format_code: str) -> CompiledFormat:
        """Загружает и компилирует формат (с кешем экземпляра)."""
        if format_code in self._cache:
            return self._cache[format_code]

        spec = self.load_spec(format_code)
        compiled = CompiledFormat.from_spec(spec)
        self._cache[format_code] = compiled

        logger.debug(
            f"[FormatLoader] Загружен формат {format_code}: "
            f"{len(compiled.noise)} noise, {len(compiled.style)} style, "
            f"{len(compiled.data_row)} data_row паттернов"
        )
        return compiled

    def load_spec(self, format_code: str) -> FormatSpec:
        """Загружает и валидирует FormatSpec без компиляции."""
        base_config = self._load_base_config(self.formats_dir)
        raw = self._load_raw(format_code, chain=[])
        resolved = {key: self._resolve_extends(value, base_config) for key, value in raw.items()}

        try:
            return FormatSpec(**resolved)
        except ValidationError as e:
            raise FormatConfigurationError(
                message=f"Некорректная конфигурация формата '{format_code}'",
                component="FormatLoader",
                original_error=e,
            )

    def available_formats(self) -> List[str]:
        """Коды всех форматов, у которых есть format.yaml."""
        if not self.formats_dir.exists():
            logger.warning(f"[FormatLoader] Директория форматов не найдена: {self.formats_dir}")
            return []
        return sorted(
            item.name for item in self.formats_dir.iterdir()
            if item.is_dir() and not item.name.startswith("_") and (item / FORMAT_FILE).exists()
        )

    def _load_raw(self, format_code: str, chain: List[str]) -> Dict[str, Any]:
        """Читает format.yaml и рекурсивно применяет наследование форматов."""
        if format_code in chain:
            raise FormatConfigurationError(
                message=f"Циклическое наследование форматов: {' -> '.join(chain + [format_code])}",
                component="FormatLoader",
            )

        config_file = self.formats_dir / format_code / FORMAT_FILE
        if not config_file.exists():
            raise FormatNotFoundError(
                message=f"Формат '{format_code}' не найден: {config_file}",
                component="FormatLoader",
            )

        try:
            with open(config_file, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise FormatConfigurationError(
                message=f"Ошибка чтения YAML: {config_file}",
                component="FormatLoader",
                original_error=e,
            )

        if not isinstance(data, dict):
            raise FormatConfigurationError(
                message=f"Ожидался словарь верхнего уровня в {config_file}",
                component="FormatLoader",
            )

        parent_code = data.pop("extends", None)
        if parent_code:
            parent = self._load_raw(parent_code, chain + [format_code])
            logger.debug(f"[FormatLoader] {format_code} наследует {parent_code}")
            merged = copy.deepcopy(parent)
            merged.update(data)
            data = merged

        data["code"] = format_code
        return data

    @staticmethod
    def _load_base_config(config_dir: Path) -> dict:
        """Загружает общие списки и словари из base.yaml."""
        base_file = config_dir / BASE_FILE

        if not base_file.exists():
            logger.warning(f"[FormatLoader] base.yaml не найден: {base_file}")
            return {}

        with open(base_file, "r", encoding="utf-8") as f:
            return yaml.safe_load(f) or {}

    @staticmethod
    def _resolve_extends(value: Any, base_config: dict) -> Any:
        """
        Обрабатывает выборочное наследование через $extends.

        Поддерживает форматы:
        - Строка в списке: "$extends: key"
        - Словарь в списке: {"$extends": "key"} (YAML без кавычек)
        - Ключ словаря: {"$extends": "key", ...} - базовый словарь, локальные ключи поверх
        """
        if isinstance(value, list):
            result = []
            for item in value:
                extended_key = None

                if isinstance(item, str) and item.startswith("$extends:"):
                    extended_key = item.split(":", 1)[1].strip()
                elif isinstance(item, dict) and "$extends" in item and len(item) == 1:
                    extended_key = item["$extends"]

                if extended_key:
                    extended = base_config.get(extended_key, [])
                    if not extended:
                        logger.warning(f"[FormatLoader] Ключ '{extended_key}' для $extends не найден в base.yaml")
                    result.extend(extended)
                else:
                    result.append(item)
            return result

        if isinstance(value, dict) and "$extends" in value:
            extended_key = value["$extends"]
            extended = base_config.get(extended_key, {})
            if not extended:
                logger.warning(f"[FormatLoader] Ключ '{extended_key}' для $extends не найден в base.yaml")
            result = dict(extended)
            result.update({k: v for k, v in value.items() if k != "$extends"})
            return result

        return value
