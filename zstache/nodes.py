"""
Узлы дерева документа.

Неизменяемая иерархия узлов, которую строит парсер и обходит рендерер.
Узлы тегов (все, кроме текста) также служат дескрипторами для
статического анализа шаблона через Template.tags().
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Iterable, Tuple

if TYPE_CHECKING:
    from .partials import PartialProvider


class TagType(enum.Enum):
    """Типы тегов шаблона."""
    INVALID = "Invalid"
    VARIABLE = "Variable"
    SECTION = "Section"
    INVERTED_SECTION = "InvertedSection"
    PARTIAL = "Partial"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class TemplateNode:
    """Базовый класс для всех узлов дерева."""
    pass


@dataclass(frozen=True)
class TextNode(TemplateNode):
    """Статический текст, выводится как есть."""
    text: str


@dataclass(frozen=True)
class TagNode(TemplateNode):
    """
    Базовый класс узлов, соответствующих тегам.

    Не все методы применимы ко всем тегам: вызов tags() у переменной
    является ошибкой программиста.
    """
    name: str

    @property
    def tag_type(self) -> TagType:
        return TagType.INVALID

    def tags(self) -> Tuple["TagNode", ...]:
        raise NotImplementedError


@dataclass(frozen=True)
class VariableNode(TagNode):
    """
    Подстановка переменной.

    escape=False для форм {{{name}}} и {{&name}}.
    """
    escape: bool = True

    @property
    def tag_type(self) -> TagType:
        return TagType.VARIABLE

    def tags(self) -> Tuple[TagNode, ...]:
        raise TypeError("tags() is not supported on Variable tags")


@dataclass(frozen=True)
class SectionNode(TagNode):
    """
    Секция {{#name}}...{{/name}} или инвертированная секция {{^name}}...{{/name}}.

    line: строка исходника, где секция открыта (для сообщений об ошибках).
    """
    inverted: bool = False
    line: int = 0
    children: Tuple[TemplateNode, ...] = ()

    @property
    def tag_type(self) -> TagType:
        return TagType.INVERTED_SECTION if self.inverted else TagType.SECTION

    def tags(self) -> Tuple[TagNode, ...]:
        return extract_tags(self.children)


@dataclass(frozen=True)
class PartialNode(TagNode):
    """
    Включение частичного шаблона {{> name}}.

    Содержимое разрешается лениво при каждом рендере через провайдера.
    indent: пробелы между началом строки и тегом, добавляемые к каждой непустой строке.
    """
    indent: str = ""
    provider: "PartialProvider | None" = field(default=None, compare=False, repr=False)

    @property
    def tag_type(self) -> TagType:
        return TagType.PARTIAL

    def tags(self) -> Tuple[TagNode, ...]:
        return ()


# Алиас для последовательности узлов (дерево документа)
TemplateAST = Tuple[TemplateNode, ...]


def extract_tags(nodes: Iterable[TemplateNode]) -> Tuple[TagNode, ...]:
    """Возвращает узлы тегов, пропуская текст."""
    return tuple(node for node in nodes if isinstance(node, TagNode))


__all__ = [
    "TagType",
    "TemplateNode",
    "TextNode",
    "TagNode",
    "VariableNode",
    "SectionNode",
    "PartialNode",
    "TemplateAST",
    "extract_tags",
]
