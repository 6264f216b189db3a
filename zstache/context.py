"""
Цепочка контекстов и разрешение имен.

Цепочка: неизменяемая последовательность значений хоста, самый
внутренний (специфичный) контекст первым. Имя ищется изнутри наружу.
"""

from __future__ import annotations

from typing import Any, Iterator, Tuple

from .errors import MissingVariableError
from .values import MISSING, AdapterRegistry, default_registry


class ContextChain:
    """
    Неизменяемый стек контекстов рендера.

    push() возвращает новую цепочку, исходная не меняется.
    """

    __slots__ = ("_frames",)

    def __init__(self, *frames: Any):
        self._frames: Tuple[Any, ...] = frames

    def push(self, value: Any) -> "ContextChain":
        """Новая цепочка с value в роли самого внутреннего контекста."""
        return ContextChain(value, *self._frames)

    @property
    def innermost(self) -> Any:
        return self._frames[0] if self._frames else None

    def __iter__(self) -> Iterator[Any]:
        return iter(self._frames)

    def __len__(self) -> int:
        return len(self._frames)

    def __repr__(self) -> str:
        return f"ContextChain{self._frames!r}"


def lookup(
    chain: ContextChain,
    name: str,
    required: bool = False,
    registry: AdapterRegistry = default_registry,
) -> Any:
    """
    Ищет значение по имени, в том числе по точечному пути.

    Порядок для каждого контекста (изнутри наружу):
    1. имя "." означает сам контекст (самый внутренний, даже None)
    2. метод без аргументов с таким именем (вызывается)
    3. поле записи, затем ключ отображения

    Найденное поле/ключ останавливает поиск даже при значении None.

    Args:
        chain: Цепочка контекстов
        name: Имя или путь через точку (a.b.c)
        required: Бросать ошибку, если значение не найдено
        registry: Реестр адаптеров значений

    Returns:
        Найденное значение или MISSING

    Raises:
        MissingVariableError: Если required и значение не найдено
    """
    if name != "." and "." in name:
        head, tail = name.split(".", 1)
        value = lookup(chain, head, required, registry)
        if value is MISSING:
            return MISSING
        return lookup(ContextChain(value), tail, required, registry)

    for frame in chain:
        value = _lookup_in_frame(frame, name, registry)
        if value is not MISSING:
            return value

    if required:
        raise MissingVariableError(name)
    return MISSING


def _lookup_in_frame(frame: Any, name: str, registry: AdapterRegistry) -> Any:
    """Ищет имя в одном контексте, снимая слои косвенности."""
    # "." возвращает сам контекст, даже если это None
    if name == ".":
        return frame

    while frame is not None and frame is not MISSING:
        adapter = registry.adapter_for(frame)

        result = adapter.invoke(frame, name)
        if result is not MISSING:
            return result

        inner = adapter.unwrap(frame)
        if inner is not frame:
            frame = inner
            continue

        result = adapter.get_field(frame, name)
        if result is not MISSING:
            return result
        return adapter.get_key(frame, name)

    return MISSING


__all__ = ["ContextChain", "lookup"]
