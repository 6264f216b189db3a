"""
Base exception for user-facing errors.

All expected errors that a host application should handle (broken template
source, unknown partials, missing variables in strict mode) inherit from
MustacheError.

Programming errors and bugs should NOT inherit from MustacheError;
they will propagate with full tracebacks.
"""

from __future__ import annotations


class MustacheError(Exception):
    """
    Base class for all user-facing errors of the template engine.
    """
    pass


class ParseError(MustacheError):
    """Ошибка компиляции шаблона с номером строки."""

    def __init__(self, message: str, line: int):
        super().__init__(f"line {line}: {message}")
        self.message = message
        self.line = line


class PartialNotFoundError(MustacheError):
    """Частичный шаблон не найден провайдером."""

    def __init__(self, name: str):
        super().__init__(f"Partial '{name}' not found")
        self.name = name


class MissingVariableError(MustacheError):
    """Переменная не найдена ни в одном контексте (строгий режим)."""

    def __init__(self, name: str):
        super().__init__(f'Missing variable "{name}"')
        self.name = name


__all__ = ["MustacheError", "ParseError", "PartialNotFoundError", "MissingVariableError"]
