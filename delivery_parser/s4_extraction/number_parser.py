import re
from decimal import Decimal, InvalidOperation
from typing import Iterable, Optional

from loguru import logger


# Нормализованное число: только цифры и одна точка
PLAIN_NUMBER = re.compile(r"^[+-]?\d+(?:\.\d+)?$")


class MalformedNumericError(ValueError):
    """Токен похож на число, но не разбирается в конечное значение."""

    def __init__(self, token: str):
        self.token = token
        super().__init__(f"Некорректное число: '{token}'")


class NumberParser:
    """
    Элемент-функция: Разбирает число с учётом разделителя дроби формата.

    ЦКП: Decimal или None (никогда не float).

    Правила:
    - Оба разделителя в токене: дробным считается последний ("1.234,56" -> 1234.56)
    - Только "чужой" разделитель: разделитель тысяч, если группы ровно по 3 цифры
      ("1.234" -> 1234 при ","), иначе дробный ("65.40" -> 65.40 при ",")
    - NaN, бесконечность и мусор -> None
    """

    def __init__(self, decimal_separator: str = ",", currency_symbols: Iterable[str] = ()):
        """
        Args:
            decimal_separator: Разделитель дроби формата ("," или ".")
            currency_symbols: Символы валюты, удаляемые перед разбором
        """
        self.decimal_separator = decimal_separator
        self.other_separator = "." if decimal_separator == "," else ","
        self.currency_symbols = tuple(currency_symbols)
        self.thousands_pattern = re.compile(
            r"^\d{1,3}(?:" + re.escape(self.other_separator) + r"\d{3})+$"
        )
        self.own_thousands_pattern = re.compile(
            r"^\d{1,3}(?:" + re.escape(self.decimal_separator) + r"\d{3})+$"
        )

    def parse(self, token: str) -> Optional[Decimal]:
        """Разбирает токен. Возвращает None, если это не конечное число."""
        if token is None:
            return None

        text = token.strip()
        for symbol in self.currency_symbols:
            text = text.replace(symbol, "")
        text = re.sub(r"\s+", "", text)
        if not text:
            return None

        sign = ""
        if text[0] in "+-":
            sign, text = text[0], text[1:]

        normalized = self._normalize(text)
        if normalized is None:
            return None

        normalized = sign + normalized
        if not PLAIN_NUMBER.match(normalized):
            return None

        try:
            value = Decimal(normalized)
        except InvalidOperation:
            logger.warning(f"[NumberParser] Ошибка нормализации числа: {token}")
            return None

        return value if value.is_finite() else None

    def parse_required(self, token: str) -> Decimal:
        """Как parse, но бросает MalformedNumericError вместо None."""
        value = self.parse(token)
        if value is None:
            raise MalformedNumericError(token)
        return value

    def _normalize(self, text: str) -> Optional[str]:
        dec, other = self.decimal_separator, self.other_separator

        if dec in text and other in text:
            # Дробный разделитель - последний из встреченных
            if text.rfind(dec) > text.rfind(other):
                return text.replace(other, "").replace(dec, ".")
            return text.replace(dec, "").replace(other, ".")

        if dec in text:
            if text.count(dec) == 1:
                return text.replace(dec, ".")
            if self.own_thousands_pattern.match(text):
                return text.replace(dec, "")
            return None

        if other in text:
            if self.thousands_pattern.match(text):
                return text.replace(other, "")
            if text.count(other) == 1:
                return text.replace(other, ".")
            return None

        return text
