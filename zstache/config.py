from __future__ import annotations

from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Tuple

from ruamel.yaml import YAML

from .lexer import DEFAULT_CLOSE_TAG, DEFAULT_OPEN_TAG

# --------------------------------------------------------------------------- #
# YAML loader
# --------------------------------------------------------------------------- #
_yaml = YAML(typ="safe")


class ConfigError(ValueError):
    """Ошибка загрузки настроек шаблонизатора с указанием ключа."""
    pass


@dataclass(frozen=True)
class TemplateOptions:
    """
    Настройки компиляции и рендера.

    Attributes:
        error_on_missing: Переменная, не найденная ни в одном контексте,
            приводит к MissingVariableError вместо пустого вывода
        delimiters: Начальная пара разделителей тегов
    """
    error_on_missing: bool = False
    delimiters: Tuple[str, str] = (DEFAULT_OPEN_TAG, DEFAULT_CLOSE_TAG)

    def __post_init__(self) -> None:
        if len(self.delimiters) != 2 or not all(self.delimiters):
            raise ConfigError(f"delimiters: expected two non-empty strings, got {self.delimiters!r}")

    def with_error_on_missing(self, enabled: bool = True) -> "TemplateOptions":
        return replace(self, error_on_missing=enabled)


DEFAULT_OPTIONS = TemplateOptions()

_KNOWN_KEYS = {"error_on_missing", "delimiters"}


# --------------------------------------------------------------------------- #
# PUBLIC API
# --------------------------------------------------------------------------- #
def options_from_mapping(raw: Mapping[str, Any]) -> TemplateOptions:
    """
    Строит TemplateOptions из словаря (например, секции YAML).

    • Отсутствующие ключи берутся из дефолтов.
    • Неизвестные ключи считаются ошибкой, чтобы опечатки не терялись молча.
    • delimiters задается строкой "<% %>" или списком из двух строк.
    """
    unknown = sorted(set(raw) - _KNOWN_KEYS)
    if unknown:
        raise ConfigError(f"Unknown option(s): {', '.join(unknown)}")

    values: Dict[str, Any] = {}

    if "error_on_missing" in raw:
        flag = raw["error_on_missing"]
        if not isinstance(flag, bool):
            raise ConfigError(f"error_on_missing: expected bool, got {type(flag).__name__}")
        values["error_on_missing"] = flag

    if "delimiters" in raw:
        values["delimiters"] = _parse_delimiters(raw["delimiters"])

    return replace(DEFAULT_OPTIONS, **values)


def load_options(path: Path) -> TemplateOptions:
    """
    Загрузить настройки из YAML-файла.

    • Если файла нет, вернуть дефолты.
    • Пустой файл эквивалентен пустому словарю.
    """
    if not path.exists():
        return DEFAULT_OPTIONS

    with path.open(encoding="utf-8") as f:
        raw = _yaml.load(f) or {}

    if not isinstance(raw, Mapping):
        raise ConfigError(f"{path}: top-level mapping expected")

    return options_from_mapping(raw)


def _parse_delimiters(value: Any) -> Tuple[str, str]:
    if isinstance(value, str):
        parts = value.split()
    elif isinstance(value, (list, tuple)):
        parts = list(value)
    else:
        raise ConfigError(f"delimiters: expected string or list, got {type(value).__name__}")

    if len(parts) != 2 or not all(isinstance(p, str) and p and not p.isspace() for p in parts):
        raise ConfigError(f"delimiters: expected two non-empty strings, got {value!r}")
    return parts[0], parts[1]


__all__ = [
    "TemplateOptions",
    "DEFAULT_OPTIONS",
    "ConfigError",
    "options_from_mapping",
    "load_options",
]
