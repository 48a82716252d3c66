"""
Size Normalizer - приведение размера к словарю магазина.

Словарь формата (size_map) применяется первым, затем правила size_rules.
Размер без совпадений возвращается как есть.
"""

import re

from ..formats.compiled_format import CompiledFormat


class SizeNormalizer:
    """Элемент-функция: нормализация размера по словарю формата."""

    def normalize(self, size: str, fmt: CompiledFormat) -> str:
        token = re.sub(r"\s+", " ", size or "").strip()
        if not token:
            return token

        mapped = fmt.size_map.get(token.upper())
        if mapped:
            return mapped

        for pattern, replacement in fmt.size_rules:
            match = pattern.fullmatch(token)
            if match:
                return match.expand(replacement)

        return token
