"""
Лексический анализатор (курсор) для Mustache-шаблонов.

Сканирует исходный текст, отслеживая текущую позицию и номер строки,
ищет вхождения разделителей и определяет, может ли следующий тег
оказаться «одиночным» (единственным содержимым своей строки).
"""

from __future__ import annotations

from dataclasses import dataclass

from .errors import ParseError

# Теги с этими сигилами при одиночном размещении на строке
# поглощают окружающие пробелы и перевод строки
STANDALONE_SIGILS = "#^/<>=!"

DEFAULT_OPEN_TAG = "{{"
DEFAULT_CLOSE_TAG = "}}"


class EndOfTemplate(Exception):
    """
    Разделитель не найден до конца текста.

    Несет остаток текста, чтобы вызывающий код мог его использовать.
    """

    def __init__(self, text: str):
        super().__init__("unexpected end of template")
        self.text = text


@dataclass(frozen=True)
class TextSpan:
    """
    Текст перед очередным тегом.

    Attributes:
        text: Текст без завершающих пробелов (если тег может быть одиночным)
        padding: Пробелы/табы между началом строки и тегом
        may_standalone: Перед тегом на строке только пробельные символы
        at_eof: Открывающий разделитель не найден, text содержит весь остаток
    """
    text: str
    padding: str
    may_standalone: bool
    at_eof: bool = False


@dataclass(frozen=True)
class TagSpan:
    """Содержимое тега без разделителей."""
    tag: str
    standalone: bool
    line: int


class TemplateLexer:
    """
    Курсор по исходному тексту шаблона.

    Хранит все изменяемое состояние разбора: позицию, номер строки
    и текущую пару разделителей. Один экземпляр живет ровно один вызов
    компиляции.
    """

    def __init__(self, text: str, open_tag: str = DEFAULT_OPEN_TAG, close_tag: str = DEFAULT_CLOSE_TAG):
        self.text = text
        self.length = len(text)
        self.position = 0
        self.line = 1
        self.open_tag = open_tag
        self.close_tag = close_tag

    def set_delimiters(self, open_tag: str, close_tag: str) -> None:
        """Заменяет активные разделители для всех последующих чтений."""
        self.open_tag = open_tag
        self.close_tag = close_tag

    def read_until(self, marker: str) -> str:
        """
        Читает текст до первого вхождения marker включительно.

        Args:
            marker: Искомая подстрока

        Returns:
            Текст от текущей позиции до конца marker

        Raises:
            EndOfTemplate: Если marker не встречается; остаток текста
                доступен в атрибуте text
        """
        end = self.text.find(marker, self.position)
        if end < 0:
            tail = self.text[self.position:]
            self.position = self.length
            raise EndOfTemplate(tail)

        end += len(marker)
        chunk = self.text[self.position:end]
        self.line += chunk.count("\n")
        self.position = end
        return chunk

    def read_text(self) -> TextSpan:
        """
        Читает текст до следующего открывающего разделителя.

        Определяет, может ли следующий тег быть одиночным: между началом
        строки (или началом текста) и разделителем допустимы только
        пробелы и табы. Эти пробелы возвращаются отдельно как padding.
        """
        start = self.position
        try:
            self.read_until(self.open_tag)
        except EndOfTemplate as eof:
            return TextSpan(text=eof.text, padding="", may_standalone=False, at_eof=True)

        tag_start = self.position - len(self.open_tag)
        i = tag_start
        while i > start and self.text[i - 1] in " \t":
            i -= 1

        if i == 0 or self.text[i - 1] == "\n":
            return TextSpan(
                text=self.text[start:i],
                padding=self.text[i:tag_start],
                may_standalone=True,
            )

        return TextSpan(text=self.text[start:tag_start], padding="", may_standalone=False)

    def read_tag(self, may_standalone: bool) -> TagSpan:
        """
        Читает тело тега до закрывающего разделителя.

        Для формы {{{name}}} ищется '}' + закрывающий разделитель.
        Если тег структурный и после него до конца строки только пробелы,
        поглощает остаток строки вместе с переводом строки.

        Raises:
            ParseError: Нет закрывающего разделителя или тег пуст
        """
        line = self.line
        marker = self.close_tag
        if self.position < self.length and self.text[self.position] == "{":
            marker = "}" + marker

        try:
            chunk = self.read_until(marker)
        except EndOfTemplate:
            raise ParseError("unmatched open tag", self.line) from None

        tag = chunk[:len(chunk) - len(self.close_tag)].strip()
        if not tag:
            raise ParseError("empty tag", self.line)

        standalone = False
        if may_standalone and tag[0] in STANDALONE_SIGILS:
            standalone = self._consume_line_end()

        return TagSpan(tag=tag, standalone=standalone, line=line)

    def _consume_line_end(self) -> bool:
        """
        Пропускает пробелы и перевод строки после тега.

        Позиция меняется только если до конца строки нет другого содержимого.
        """
        eow = self.position
        while eow < self.length and self.text[eow] in " \t":
            eow += 1

        if eow == self.length:
            self.position = eow
            return True
        if self.text[eow] == "\n":
            self.position = eow + 1
            self.line += 1
            return True
        if self.text.startswith("\r\n", eow):
            self.position = eow + 2
            self.line += 1
            return True
        return False


__all__ = [
    "TemplateLexer",
    "TextSpan",
    "TagSpan",
    "EndOfTemplate",
    "STANDALONE_SIGILS",
    "DEFAULT_OPEN_TAG",
    "DEFAULT_CLOSE_TAG",
]
