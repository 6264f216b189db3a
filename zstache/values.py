"""
Адаптеры динамических значений.

Данные хоста могут иметь любую форму. Вместо повсеместного getattr движок
обращается к значению через адаптер, выбранный по типу значения.
Адаптер умеет:
- вызвать метод без аргументов по имени
- прочитать поле записи по имени
- прочитать значение по ключу отображения
- снять слой косвенности (unwrap)
- сообщить вид значения (скаляр, список, запись) и его «пустоту»

Слои косвенности: только weakref.ref и типы, чей зарегистрированный
адаптер переопределяет unwrap. Единственное «отсутствующее» значение:
None (и служебный MISSING).
"""

from __future__ import annotations

import enum
import inspect
import logging
import numbers
import weakref
from collections.abc import Mapping, Sequence, Set
from typing import Any, Dict, Iterable, Type

logger = logging.getLogger(__name__)


class _Missing:
    """Маркер ненайденного значения (в отличие от найденного None)."""

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "MISSING"


MISSING: Any = _Missing()


class ValueKind(enum.Enum):
    """Вид значения, определяющий поведение секции."""
    SCALAR = "scalar"
    LIST = "list"
    RECORD = "record"


class ValueAdapter:
    """
    Базовый адаптер: значение без полей и ключей.

    Методы доступа возвращают MISSING, если имя не применимо.
    """

    kind = ValueKind.SCALAR

    def invoke(self, value: Any, name: str) -> Any:
        """Вызывает метод без аргументов с именем name."""
        return MISSING

    def get_field(self, value: Any, name: str) -> Any:
        return MISSING

    def get_key(self, value: Any, name: str) -> Any:
        return MISSING

    def unwrap(self, value: Any) -> Any:
        """Снимает один слой косвенности; без косвенности возвращает value."""
        return value

    def is_empty(self, value: Any) -> bool:
        return not value

    def iterate(self, value: Any) -> Iterable[Any]:
        return (value,)


class ScalarAdapter(ValueAdapter):
    """Строки, байты, числа и bool."""

    def is_empty(self, value: Any) -> bool:
        if isinstance(value, str):
            return not value.strip()
        return not value


class SequenceAdapter(ValueAdapter):
    """Списки, кортежи, множества: секция повторяется для каждого элемента."""

    kind = ValueKind.LIST

    def is_empty(self, value: Any) -> bool:
        return len(value) == 0

    def iterate(self, value: Any) -> Iterable[Any]:
        return value


class MappingAdapter(ValueAdapter):
    """
    Отображения: доступ только по ключу.

    Методы dict (items, keys, ...) намеренно не видны шаблону.
    """

    kind = ValueKind.RECORD

    def get_key(self, value: Any, name: str) -> Any:
        try:
            return value[name]
        except (KeyError, TypeError):
            return MISSING

    def is_empty(self, value: Any) -> bool:
        return len(value) == 0


class ObjectAdapter(ValueAdapter):
    """
    Записи: произвольные объекты, dataclass, namedtuple.

    Публичные методы без обязательных аргументов вызываются, остальные
    публичные атрибуты (включая property) читаются как поля.
    Имена, начинающиеся с '_', не видны.
    """

    kind = ValueKind.RECORD

    def invoke(self, value: Any, name: str) -> Any:
        if name.startswith("_"):
            return MISSING
        member = inspect.getattr_static(value, name, MISSING)
        if member is MISSING or not _is_routine(member):
            return MISSING
        bound = getattr(value, name)
        if not _accepts_no_arguments(bound):
            return MISSING
        return bound()

    def get_field(self, value: Any, name: str) -> Any:
        if name.startswith("_"):
            return MISSING
        member = inspect.getattr_static(value, name, MISSING)
        if member is not MISSING and _is_routine(member):
            return MISSING
        return getattr(value, name, MISSING)


class ReferenceAdapter(ValueAdapter):
    """weakref.ref: разыменовывается, мертвая ссылка дает None."""

    def unwrap(self, value: Any) -> Any:
        return value()


def _is_routine(member: Any) -> bool:
    return isinstance(member, (staticmethod, classmethod)) or inspect.isroutine(member)


def _accepts_no_arguments(func: Any) -> bool:
    try:
        signature = inspect.signature(func)
    except (TypeError, ValueError):
        return False
    for param in signature.parameters.values():
        if param.kind in (param.VAR_POSITIONAL, param.VAR_KEYWORD):
            continue
        if param.default is param.empty:
            return False
    return True


SCALAR_ADAPTER = ScalarAdapter()
SEQUENCE_ADAPTER = SequenceAdapter()
MAPPING_ADAPTER = MappingAdapter()
OBJECT_ADAPTER = ObjectAdapter()
REFERENCE_ADAPTER = ReferenceAdapter()


class AdapterRegistry:
    """
    Реестр адаптеров по типам значений.

    Явно зарегистрированные типы ищутся по MRO значения, затем
    применяются встроенные правила: namedtuple -> запись,
    Mapping -> отображение, str/bytes/числа -> скаляр,
    Sequence/Set -> список, все остальное -> запись.
    """

    def __init__(self):
        self._adapters: Dict[type, ValueAdapter] = {}
        self._cache: Dict[type, ValueAdapter] = {}
        self.register(weakref.ReferenceType, REFERENCE_ADAPTER)

    def register(self, tp: Type[Any], adapter: ValueAdapter) -> None:
        """
        Регистрирует адаптер для типа и его подклассов.

        Args:
            tp: Тип значений хоста
            adapter: Адаптер для этого типа
        """
        if tp in self._adapters:
            logger.warning(f"Adapter for '{tp.__name__}' overwrites existing adapter")
        self._adapters[tp] = adapter
        self._cache.clear()

    def adapter_for(self, value: Any) -> ValueAdapter:
        tp = type(value)
        adapter = self._cache.get(tp)
        if adapter is None:
            adapter = self._resolve(tp)
            self._cache[tp] = adapter
        return adapter

    def _resolve(self, tp: type) -> ValueAdapter:
        for base in tp.__mro__:
            adapter = self._adapters.get(base)
            if adapter is not None:
                return adapter

        if issubclass(tp, tuple) and hasattr(tp, "_fields"):
            return OBJECT_ADAPTER
        if issubclass(tp, Mapping):
            return MAPPING_ADAPTER
        if issubclass(tp, (str, bytes, bytearray, numbers.Number)):
            return SCALAR_ADAPTER
        if issubclass(tp, (Sequence, Set)):
            return SEQUENCE_ADAPTER
        return OBJECT_ADAPTER

    def unwrap(self, value: Any) -> Any:
        """Снимает все слои косвенности."""
        while value is not None and value is not MISSING:
            inner = self.adapter_for(value).unwrap(value)
            if inner is value:
                break
            value = inner
        return value

    def is_empty(self, value: Any) -> bool:
        """
        Проверяет «пустоту» значения для секций.

        Пусто: MISSING/None, пустой список/множество/отображение, строка из
        одних пробелов, нулевое значение своего типа (False, 0) и объекты,
        чьи __bool__/__len__ сообщают False.
        """
        value = self.unwrap(value)
        if value is None or value is MISSING:
            return True
        return self.adapter_for(value).is_empty(value)

    def kind_of(self, value: Any) -> ValueKind:
        value = self.unwrap(value)
        if value is None or value is MISSING:
            return ValueKind.SCALAR
        return self.adapter_for(value).kind


default_registry = AdapterRegistry()


def register_adapter(tp: Type[Any], adapter: ValueAdapter) -> None:
    """Регистрирует адаптер в реестре по умолчанию."""
    default_registry.register(tp, adapter)


def is_empty(value: Any) -> bool:
    return default_registry.is_empty(value)


__all__ = [
    "MISSING",
    "ValueKind",
    "ValueAdapter",
    "ScalarAdapter",
    "SequenceAdapter",
    "MappingAdapter",
    "ObjectAdapter",
    "ReferenceAdapter",
    "AdapterRegistry",
    "default_registry",
    "register_adapter",
    "is_empty",
]
