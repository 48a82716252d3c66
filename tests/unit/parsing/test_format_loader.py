"""
Unit-тесты для FormatLoader.

ЦКП: Проверка наследования ($extends, extends), валидации и кеша форматов.
"""

from dataclasses import FrozenInstanceError

import pytest

from delivery_parser.domain.exceptions import FormatConfigurationError, FormatNotFoundError
from delivery_parser.formats.config_loader import FormatLoader


MOCK_BASE_YAML = """
common_noise:
  - '^page \\d+'
  - '^iban'

sizes_map:
  2Y-3Y: 2 jaar
  4Y-5Y: 4 jaar
"""

MOCK_PARENT_YAML = """
name: Parent
decimal_separator: ","

noise_patterns:
  - $extends: common_noise
  - '^confirmation$'

style_patterns:
  - '^Style no:\\s*(?P<code>F\\d+)'

size_map:
  $extends: sizes_map
  6Y-7Y: 6 jaar

summary_columns: [quantity, line_total]
"""

MOCK_CHILD_YAML = """
extends: parent
name: Child

row_strip_patterns:
  - '^total\\s*'
"""

MOCK_BROKEN_REGEX_YAML = """
name: Broken
style_patterns:
  - '^(?P<code>unclosed'
"""

MOCK_UNKNOWN_GROUP_YAML = """
name: Unknown
style_patterns:
  - '^(?P<barcode>\\d+)$'
"""

MOCK_BAD_SEPARATOR_YAML = """
name: Separator
decimal_separator: ";"
"""


def write_format(root, code, content):
    format_dir = root / code
    format_dir.mkdir()
    (format_dir / "format.yaml").write_text(content, encoding="utf-8")


@pytest.fixture
def formats_dir(tmp_path):
    """Создаёт временные base.yaml и format.yaml для тестов."""
    (tmp_path / "base.yaml").write_text(MOCK_BASE_YAML, encoding="utf-8")
    write_format(tmp_path, "parent", MOCK_PARENT_YAML)
    write_format(tmp_path, "child", MOCK_CHILD_YAML)
    return tmp_path


def test_resolve_extends_list(formats_dir):
    """$extends в списке подставляет общий список перед локальными элементами."""
    base_config = FormatLoader._load_base_config(formats_dir)

    resolved = FormatLoader._resolve_extends(["$extends: common_noise", "local"], base_config)
    assert resolved == ["^page \\d+", "^iban", "local"]

    resolved = FormatLoader._resolve_extends([{"$extends": "common_noise"}], base_config)
    assert resolved == ["^page \\d+", "^iban"]


def test_resolve_extends_missing_key(formats_dir):
    """Отсутствующий ключ логируется и пропускается."""
    base_config = FormatLoader._load_base_config(formats_dir)
    resolved = FormatLoader._resolve_extends(["$extends: missing", "local"], base_config)
    assert resolved == ["local"]


def test_resolve_extends_dict_local_keys_win(formats_dir):
    base_config = FormatLoader._load_base_config(formats_dir)
    resolved = FormatLoader._resolve_extends(
        {"$extends": "sizes_map", "2Y-3Y": "twee"}, base_config
    )
    assert resolved == {"2Y-3Y": "twee", "4Y-5Y": "4 jaar"}


def test_load_spec_with_base_extends(formats_dir):
    spec = FormatLoader(formats_dir).load_spec("parent")

    assert spec.code == "parent"
    assert spec.noise_patterns == ["^page \\d+", "^iban", "^confirmation$"]
    assert spec.size_map == {"2Y-3Y": "2 jaar", "4Y-5Y": "4 jaar", "6Y-7Y": "6 jaar"}


def test_format_inherits_parent_format(formats_dir):
    """extends: <code> берёт все ключи родителя, локальные ключи перекрывают."""
    spec = FormatLoader(formats_dir).load_spec("child")

    assert spec.code == "child"
    assert spec.name == "Child"
    assert spec.style_patterns == ["^Style no:\\s*(?P<code>F\\d+)"]
    assert spec.row_strip_patterns == ["^total\\s*"]
    assert spec.summary_columns == ["quantity", "line_total"]


def test_load_compiles_and_caches(formats_dir):
    loader = FormatLoader(formats_dir)

    first = loader.load("parent")
    second = loader.load("parent")

    assert first is second
    assert first.style[0].search("style no: F10854")  # IGNORECASE
    assert first.size_map["2Y-3Y"] == "2 jaar"
    assert first.min_summary_columns == 2
    assert first.has_size_columns


def test_compiled_format_is_immutable(formats_dir):
    fmt = FormatLoader(formats_dir).load("parent")
    with pytest.raises(FrozenInstanceError):
        fmt.code = "other"
    with pytest.raises(TypeError):
        fmt.size_map["8Y-9Y"] = "8 jaar"


def test_available_formats(formats_dir):
    assert FormatLoader(formats_dir).available_formats() == ["child", "parent"]


def test_unknown_format_raises(formats_dir):
    with pytest.raises(FormatNotFoundError):
        FormatLoader(formats_dir).load("missing")


def test_not_found_is_configuration_error(formats_dir):
    with pytest.raises(FormatConfigurationError):
        FormatLoader(formats_dir).load("missing")


@pytest.mark.parametrize("content", [
    MOCK_BROKEN_REGEX_YAML,
    MOCK_UNKNOWN_GROUP_YAML,
    MOCK_BAD_SEPARATOR_YAML,
])
def test_invalid_format_rejected(formats_dir, content):
    write_format(formats_dir, "invalid", content)
    with pytest.raises(FormatConfigurationError) as exc_info:
        FormatLoader(formats_dir).load("invalid")
    assert exc_info.value.component == "FormatLoader"


def test_cyclic_format_inheritance(formats_dir):
    write_format(formats_dir, "loop_a", "extends: loop_b\nname: A\n")
    write_format(formats_dir, "loop_b", "extends: loop_a\nname: B\n")
    with pytest.raises(FormatConfigurationError, match="Циклическое"):
        FormatLoader(formats_dir).load("loop_a")


@pytest.mark.parametrize("code", [
    "floss", "brunobruno", "thinkingmu", "sundaycollective",
    "goldieandace", "playup", "armedangels",
])
def test_shipped_formats_load(code):
    """Все форматы из поставки проходят валидацию и компиляцию."""
    fmt = FormatLoader().load(code)
    assert fmt.code == code
    assert fmt.noise


def test_brunobruno_extends_floss():
    loader = FormatLoader()
    floss = loader.load("floss")
    bruno = loader.load("brunobruno")

    assert bruno.summary_columns == floss.summary_columns
    assert len(bruno.row_strip) == 2
    assert bruno.style[0].pattern == floss.style[0].pattern
