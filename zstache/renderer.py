"""
Рендерер дерева документа.

Обходит узлы и пишет результат в приемник с методом write(str).
Данные хоста только читаются, дерево не изменяется, поэтому один
скомпилированный шаблон можно рендерить параллельно.
"""

from __future__ import annotations

import logging
from typing import Iterable, TextIO

from .config import TemplateOptions
from .context import ContextChain, lookup
from .nodes import PartialNode, SectionNode, TemplateNode, TextNode, VariableNode
from .parser import TemplateParser
from .partials import EMPTY_PROVIDER, indent_lines
from .values import MISSING, AdapterRegistry, ValueKind, default_registry

logger = logging.getLogger(__name__)

_HTML_ESCAPES = str.maketrans({
    "&": "&amp;",
    "<": "&lt;",
    ">": "&gt;",
    '"': "&#34;",
    "'": "&#39;",
    "\0": "\ufffd",
})


def escape_html(text: str) -> str:
    """Экранирует спецсимволы HTML."""
    return text.translate(_HTML_ESCAPES)


class TemplateRenderer:
    """
    Обходчик дерева документа.

    Не хранит состояния между вызовами, кроме настроек.
    """

    def __init__(self, options: TemplateOptions, registry: AdapterRegistry = default_registry):
        self.options = options
        self.registry = registry

    def render_nodes(self, nodes: Iterable[TemplateNode], chain: ContextChain, out: TextIO) -> None:
        for node in nodes:
            self.render_node(node, chain, out)

    def render_node(self, node: TemplateNode, chain: ContextChain, out: TextIO) -> None:
        """Рендерит один узел, выбирая обработчик по типу."""
        if isinstance(node, TextNode):
            out.write(node.text)
        elif isinstance(node, VariableNode):
            self._render_variable(node, chain, out)
        elif isinstance(node, SectionNode):
            self._render_section(node, chain, out)
        elif isinstance(node, PartialNode):
            self._render_partial(node, chain, out)
        else:
            raise TypeError(f"Unknown node type: {type(node).__name__}")

    def _render_variable(self, node: VariableNode, chain: ContextChain, out: TextIO) -> None:
        value = lookup(chain, node.name, self.options.error_on_missing, self.registry)
        if value is MISSING:
            return
        value = self.registry.unwrap(value)
        if value is None:
            return

        text = str(value)
        out.write(escape_html(text) if node.escape else text)

    def _render_section(self, node: SectionNode, chain: ContextChain, out: TextIO) -> None:
        """
        Рендерит секцию.

        - список: тело для каждого элемента, элемент становится внутренним контекстом
        - запись/отображение: тело один раз с этим значением внутри
        - прочий непустой скаляр: тело один раз в неизменной цепочке
        - инвертированная секция: тело один раз, если значение пусто
        """
        value = lookup(chain, node.name, False, self.registry)
        if self.registry.is_empty(value) != node.inverted:
            return

        if node.inverted:
            self.render_nodes(node.children, chain, out)
            return

        target = self.registry.unwrap(value)
        kind = self.registry.kind_of(target)

        if kind is ValueKind.LIST:
            for item in self.registry.adapter_for(target).iterate(target):
                self.render_nodes(node.children, chain.push(item), out)
        elif kind is ValueKind.RECORD:
            self.render_nodes(node.children, chain.push(target), out)
        else:
            self.render_nodes(node.children, chain, out)

    def _render_partial(self, node: PartialNode, chain: ContextChain, out: TextIO) -> None:
        """
        Загружает, компилирует и рендерит частичный шаблон.

        Компиляция выполняется при каждом рендере, изменения источника
        подхватываются сразу. Частичный шаблон не создает новой области видимости.
        """
        provider = node.provider if node.provider is not None else EMPTY_PROVIDER
        source = indent_lines(provider.get(node.name), node.indent)

        parser = TemplateParser(provider, self.options.delimiters)
        nodes, _ = parser.parse(source)
        logger.debug("Expanding partial '%s' -> %d nodes", node.name, len(nodes))

        self.render_nodes(nodes, chain, out)


__all__ = ["TemplateRenderer", "escape_html"]
