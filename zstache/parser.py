"""
Парсер Mustache-шаблонов.

Рекурсивным спуском преобразует поток текста и тегов от лексера
в дерево документа. Поддерживает секции, инвертированные секции,
частичные шаблоны, комментарии и смену разделителей.
"""

from __future__ import annotations

import logging
import re
from typing import List, Optional, Tuple

from .errors import ParseError
from .lexer import DEFAULT_CLOSE_TAG, DEFAULT_OPEN_TAG, TagSpan, TemplateLexer
from .nodes import (
    PartialNode, SectionNode, TemplateAST, TemplateNode, TextNode, VariableNode
)
from .partials import PartialProvider

logger = logging.getLogger(__name__)

_WHITESPACE_RUN = re.compile(r"\s+")


class TemplateParser:
    """
    Рекурсивный парсер шаблонов.

    Все изменяемое состояние разбора (позиция, строка, разделители)
    живет в лексере, который явно передается через рекурсию.
    """

    def __init__(
        self,
        provider: PartialProvider,
        delimiters: Tuple[str, str] = (DEFAULT_OPEN_TAG, DEFAULT_CLOSE_TAG),
    ):
        """
        Args:
            provider: Провайдер частичных шаблонов, который получат узлы {{> name}}
            delimiters: Начальная пара разделителей
        """
        self.provider = provider
        self.delimiters = delimiters

    def parse(self, text: str) -> Tuple[TemplateAST, Tuple[str, str]]:
        """
        Компилирует исходный текст в дерево.

        Returns:
            Корневые узлы и пара разделителей, активная в конце разбора

        Raises:
            ParseError: При синтаксической ошибке
        """
        lexer = TemplateLexer(text, *self.delimiters)
        nodes = self._parse_nodes(lexer, None, 0)
        logger.debug("Parsed template -> %d root nodes, %d lines", len(nodes), lexer.line)
        return nodes, (lexer.open_tag, lexer.close_tag)

    def _parse_nodes(self, lexer: TemplateLexer, section: Optional[str], section_line: int) -> TemplateAST:
        """
        Читает узлы до конца текста (section is None) или до закрывающего тега секции.

        Args:
            lexer: Состояние разбора
            section: Имя открытой секции или None на верхнем уровне
            section_line: Строка, где открыта секция
        """
        nodes: List[TemplateNode] = []

        while True:
            span = lexer.read_text()
            if span.at_eof:
                if section is not None:
                    raise ParseError(f"Section {section} has no closing tag", section_line)
                _append_text(nodes, span.text)
                return tuple(nodes)

            _append_text(nodes, span.text)

            tag = lexer.read_tag(span.may_standalone)
            if not tag.standalone:
                _append_text(nodes, span.padding)

            sigil = tag.tag[0]

            if sigil == "!":
                continue

            if sigil in "#^":
                name = tag.tag[1:].strip()
                children = self._parse_nodes(lexer, name, tag.line)
                nodes.append(SectionNode(name=name, inverted=sigil == "^", line=tag.line, children=children))
            elif sigil == "/":
                name = tag.tag[1:].strip()
                if section is None:
                    raise ParseError("unmatched close tag", lexer.line)
                if name != section:
                    raise ParseError(f"interleaved closing tag: {name}", lexer.line)
                return tuple(nodes)
            elif sigil == ">":
                name = tag.tag[1:].strip()
                nodes.append(PartialNode(name=name, indent=span.padding, provider=self.provider))
            elif sigil == "=":
                self._change_delimiters(lexer, tag)
            elif sigil == "{":
                # {{ {name}} без закрывающей скобки пропускается
                if len(tag.tag) > 1 and tag.tag.endswith("}"):
                    nodes.append(VariableNode(name=tag.tag[1:-1].strip(), escape=False))
            elif sigil == "&":
                nodes.append(VariableNode(name=tag.tag[1:].strip(), escape=False))
            else:
                nodes.append(VariableNode(name=tag.tag, escape=True))

    def _change_delimiters(self, lexer: TemplateLexer, tag: TagSpan) -> None:
        """Обрабатывает тег {{=open close=}}."""
        body = tag.tag
        if len(body) < 2 or not body.endswith("="):
            raise ParseError("Invalid meta tag", lexer.line)

        parts = _WHITESPACE_RUN.split(body[1:-1].strip(), maxsplit=1)
        if len(parts) != 2 or not parts[0] or not parts[1]:
            logger.debug("Ignoring delimiter tag without two delimiters at line %d", lexer.line)
            return

        lexer.set_delimiters(parts[0], parts[1])
        logger.debug("Delimiters changed to %r %r at line %d", parts[0], parts[1], lexer.line)


def _append_text(nodes: List[TemplateNode], text: str) -> None:
    """Добавляет текст, склеивая его с предыдущим текстовым узлом."""
    if not text:
        return
    if nodes and isinstance(nodes[-1], TextNode):
        nodes[-1] = TextNode(text=nodes[-1].text + text)
    else:
        nodes.append(TextNode(text=text))


__all__ = ["TemplateParser"]
