"""
Логико-свободный шаблонизатор Mustache.

Компилирует текст шаблона в неизменяемое дерево документа и рендерит
его против цепочки контекстов хоста, с поддержкой частичных шаблонов.
"""

from __future__ import annotations

from .config import ConfigError, DEFAULT_OPTIONS, TemplateOptions, load_options, options_from_mapping
from .context import ContextChain, lookup
from .errors import MissingVariableError, MustacheError, ParseError, PartialNotFoundError
from .nodes import PartialNode, SectionNode, TagNode, TagType, TextNode, VariableNode
from .partials import EMPTY_PROVIDER, EmptyProvider, PartialProvider, StaticProvider
from .renderer import escape_html
from .template import Template, compile_template, parse_string, parse_string_partials, render
from .values import MISSING, AdapterRegistry, ValueAdapter, ValueKind, is_empty, register_adapter
from .version import tool_version

__version__ = tool_version()

__all__ = [
    # Main API
    "Template",
    "compile_template",
    "parse_string",
    "parse_string_partials",
    "render",
    # Options
    "TemplateOptions",
    "DEFAULT_OPTIONS",
    "ConfigError",
    "load_options",
    "options_from_mapping",
    # Errors
    "MustacheError",
    "ParseError",
    "PartialNotFoundError",
    "MissingVariableError",
    # Partials
    "PartialProvider",
    "StaticProvider",
    "EmptyProvider",
    "EMPTY_PROVIDER",
    # Tags
    "TagType",
    "TagNode",
    "TextNode",
    "VariableNode",
    "SectionNode",
    "PartialNode",
    # Values
    "ContextChain",
    "lookup",
    "MISSING",
    "AdapterRegistry",
    "ValueAdapter",
    "ValueKind",
    "is_empty",
    "register_adapter",
    "escape_html",
    "tool_version",
    "__version__",
]
