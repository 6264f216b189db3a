"""
Скомпилированный шаблон и публичные точки входа.

    from zstache import compile_template

    tmpl = compile_template("Hello {{name}}!")
    tmpl.render({"name": "World"})   # "Hello World!"

Несколько контекстов передаются от самого внутреннего к внешнему:
первый аргумент проверяется первым.
"""

from __future__ import annotations

import io
from typing import Any, Optional, TextIO, Tuple

from .config import DEFAULT_OPTIONS, TemplateOptions
from .context import ContextChain
from .nodes import TagNode, TemplateAST, extract_tags
from .parser import TemplateParser
from .partials import PartialProvider, PartialsArg, as_provider
from .renderer import TemplateRenderer


class Template:
    """
    Скомпилированный Mustache-шаблон.

    Неизменяем после компиляции: рендер не меняет дерево,
    поэтому один экземпляр можно рендерить многократно и параллельно.
    """

    __slots__ = ("_nodes", "_delimiters", "_provider", "_options")

    def __init__(
        self,
        nodes: TemplateAST,
        delimiters: Tuple[str, str],
        provider: PartialProvider,
        options: TemplateOptions,
    ):
        self._nodes = nodes
        self._delimiters = delimiters
        self._provider = provider
        self._options = options

    @property
    def nodes(self) -> TemplateAST:
        return self._nodes

    @property
    def delimiters(self) -> Tuple[str, str]:
        """Пара разделителей, активная в конце разбора."""
        return self._delimiters

    @property
    def provider(self) -> PartialProvider:
        return self._provider

    @property
    def options(self) -> TemplateOptions:
        return self._options

    @property
    def error_on_missing(self) -> bool:
        return self._options.error_on_missing

    def with_error_on_missing(self, enabled: bool = True) -> "Template":
        """Копия шаблона, для которой ненайденная переменная является ошибкой."""
        return Template(self._nodes, self._delimiters, self._provider, self._options.with_error_on_missing(enabled))

    def tags(self) -> Tuple[TagNode, ...]:
        """
        Теги верхнего уровня для статического анализа.

        Секции раскрываются рекурсивно через их собственный tags().
        """
        return extract_tags(self._nodes)

    def render_to(self, out: TextIO, *contexts: Any) -> None:
        """
        Рендерит шаблон в приемник без промежуточного буфера.

        Args:
            out: Объект с методом write(str)
            *contexts: Контексты от внутреннего к внешнему

        Raises:
            MissingVariableError: Переменная не найдена в строгом режиме
            PartialNotFoundError: Частичный шаблон не найден
            ParseError: Частичный шаблон содержит синтаксическую ошибку
        """
        renderer = TemplateRenderer(self._options)
        renderer.render_nodes(self._nodes, ContextChain(*contexts), out)

    def render(self, *contexts: Any) -> str:
        """Рендерит шаблон в строку. При ошибке частичный результат отбрасывается."""
        buf = io.StringIO()
        self.render_to(buf, *contexts)
        return buf.getvalue()

    def render_to_in_layout(self, out: TextIO, layout: "Template", *contexts: Any) -> None:
        """
        Рендерит шаблон внутрь шаблона-обертки.

        Результат доступен обертке как переменная content
        (самый внутренний контекст).
        """
        content = self.render(*contexts)
        layout.render_to(out, {"content": content}, *contexts)

    def render_in_layout(self, layout: "Template", *contexts: Any) -> str:
        buf = io.StringIO()
        self.render_to_in_layout(buf, layout, *contexts)
        return buf.getvalue()

    def __repr__(self) -> str:
        return f"Template(nodes={len(self._nodes)}, provider={self._provider!r}, options={self._options!r})"


def compile_template(
    source: str,
    partials: PartialsArg = None,
    *,
    options: Optional[TemplateOptions] = None,
) -> Template:
    """
    Компилирует текст шаблона.

    Args:
        source: Исходный текст шаблона
        partials: Провайдер частичных шаблонов или словарь имя -> текст
        options: Настройки; по умолчанию DEFAULT_OPTIONS

    Returns:
        Скомпилированный шаблон

    Raises:
        ParseError: При синтаксической ошибке
    """
    options = options or DEFAULT_OPTIONS
    provider = as_provider(partials)

    parser = TemplateParser(provider, options.delimiters)
    nodes, delimiters = parser.parse(source)
    return Template(nodes, delimiters, provider, options)


def parse_string(source: str) -> Template:
    return compile_template(source)


def parse_string_partials(source: str, partials: PartialsArg) -> Template:
    return compile_template(source, partials)


def render(
    source: str,
    *contexts: Any,
    partials: PartialsArg = None,
    options: Optional[TemplateOptions] = None,
) -> str:
    """Компилирует и сразу рендерит шаблон."""
    return compile_template(source, partials, options=options).render(*contexts)


__all__ = [
    "Template",
    "compile_template",
    "parse_string",
    "parse_string_partials",
    "render",
]
