"""
Настройки проекта Delivery Parser.

Все значения можно переопределить через переменные окружения.
"""

import os
from pathlib import Path

# =============================================================================
# ПУТИ ПРОЕКТА
# =============================================================================
PROJECT_ROOT = Path(__file__).parent.parent
DATA_DIR = Path(os.getenv("DELIVERY_PARSER_DATA_DIR", str(PROJECT_ROOT / "data")))
INPUT_DIR = DATA_DIR / "input"
OUTPUT_DIR = DATA_DIR / "output"

# Директория с YAML-конфигурациями форматов поставщиков
FORMATS_DIR = Path(os.getenv(
    "DELIVERY_PARSER_FORMATS_DIR",
    str(PROJECT_ROOT / "delivery_parser" / "formats")
))

# =============================================================================
# НАСТРОЙКИ ПАРСИНГА
# =============================================================================
# Максимальное окно фрагментов названия (если формат не задаёт своё)
DEFAULT_MAX_FRAGMENTS = 3

# Минимум числовых токенов для строки данных (если формат не задаёт своё)
DEFAULT_MIN_NUMERIC_TOKENS = 3

# Сколько нераспознанных строк отдавать в диагностике фатальной ошибки
UNMATCHED_SAMPLE_SIZE = int(os.getenv("DELIVERY_PARSER_UNMATCHED_SAMPLE", "10"))

# Допустимая погрешность сверки с заявленной суммой поставщика
RECONCILIATION_TOLERANCE = 0.05

# =============================================================================
# ЛОГИРОВАНИЕ
# =============================================================================
LOG_LEVEL = os.getenv("DELIVERY_PARSER_LOG_LEVEL", "INFO")


# =============================================================================
# ПРОВЕРКА КОНФИГУРАЦИИ
# =============================================================================
def validate_config():
    """Проверяет корректность конфигурации."""
    errors = []

    if not FORMATS_DIR.exists():
        errors.append(f"Директория форматов не найдена: {FORMATS_DIR}")
    elif not (FORMATS_DIR / "base.yaml").exists():
        errors.append(f"base.yaml не найден в {FORMATS_DIR}")

    if UNMATCHED_SAMPLE_SIZE < 1:
        errors.append(
            f"DELIVERY_PARSER_UNMATCHED_SAMPLE должен быть >= 1, получено: {UNMATCHED_SAMPLE_SIZE}"
        )

    if errors:
        raise ValueError("\n".join(errors))

    # Создаём директории если не существуют
    INPUT_DIR.mkdir(parents=True, exist_ok=True)
    OUTPUT_DIR.mkdir(parents=True, exist_ok=True)

    return True
