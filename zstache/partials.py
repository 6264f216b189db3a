"""
Провайдеры частичных шаблонов.

Хост-приложение передает движку объект с методом get(name), который
возвращает исходный текст частичного шаблона. Движок компилирует
полученный текст заново при каждом рендере.
"""

from __future__ import annotations

import re
from typing import Mapping, Optional, Protocol, Union, runtime_checkable

from .errors import PartialNotFoundError

_NON_EMPTY_LINE = re.compile(r"^(.+)$", re.MULTILINE)


@runtime_checkable
class PartialProvider(Protocol):
    """
    Протокол источника частичных шаблонов.

    get() возвращает текст шаблона. Реализация может выбросить любое
    исключение: рендер прерывается и исключение передается вызывающему.
    """

    def get(self, name: str) -> str:
        ...


class StaticProvider:
    """Частичные шаблоны из словаря имя -> текст."""

    def __init__(self, partials: Optional[Mapping[str, str]] = None):
        self.partials: Mapping[str, str] = partials if partials is not None else {}

    def get(self, name: str) -> str:
        """
        Raises:
            PartialNotFoundError: Если имя отсутствует в словаре
        """
        try:
            return self.partials[name]
        except KeyError:
            raise PartialNotFoundError(name) from None

    def __repr__(self) -> str:
        return f"StaticProvider({sorted(self.partials)!r})"


class EmptyProvider:
    """Провайдер, возвращающий пустой текст для любого имени."""

    def get(self, name: str) -> str:
        return ""

    def __repr__(self) -> str:
        return "EmptyProvider()"


# Провайдер по умолчанию, когда вызывающий не передал свой
EMPTY_PROVIDER = EmptyProvider()

PartialsArg = Union[PartialProvider, Mapping[str, str], None]


def as_provider(partials: PartialsArg) -> PartialProvider:
    """
    Приводит аргумент partials к провайдеру.

    None -> EMPTY_PROVIDER, словарь -> StaticProvider, провайдер как есть.
    """
    if partials is None:
        return EMPTY_PROVIDER
    if isinstance(partials, Mapping):
        return StaticProvider(partials)
    if isinstance(partials, PartialProvider):
        return partials
    raise TypeError(f"Unsupported partials source: {type(partials).__name__}")


def indent_lines(text: str, indent: str) -> str:
    """Добавляет indent в начало каждой непустой строки."""
    if not indent:
        return text
    return _NON_EMPTY_LINE.sub(lambda m: indent + m.group(1), text)


__all__ = [
    "PartialProvider",
    "StaticProvider",
    "EmptyProvider",
    "EMPTY_PROVIDER",
    "PartialsArg",
    "as_provider",
    "indent_lines",
]
