"""
Лексические типы.

Определяет токены шаблона, их позиционную информацию и разбиение
содержимого токена на компоненты.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

# Символы, которые склеиваются с соседними компонентами: `a | b` -> `a|b`
SPECIAL_CHARACTERS = ",|:"
QUOTES = "'\""


@dataclass(frozen=True)
class SourceMap:
    """
    Положение токена в исходном тексте шаблона.

    Используется только для диагностики и никогда не влияет на результат.
    """
    filename: Optional[str] = None
    line: int = 1           # Номер строки (начиная с 1)
    column: int = 1         # Номер колонки (начиная с 1)
    content: str = ""       # Текст строки, в которой находится токен
    span: Tuple[int, int] = (0, 0)

    def __repr__(self) -> str:
        return f"SourceMap({self.filename or ''}:{self.line}:{self.column})"


class Behaviour(enum.Enum):
    """Маркер управления пробелами рядом с разделителем тега."""
    UNSPECIFIED = "unspecified"
    TRIM = "trim"
    KEEP = "keep"


@dataclass(frozen=True)
class WhitespaceBehaviour:
    """Пара маркеров `{%-`/`{%+` и `-%}`/`+%}` блочного тега."""
    leading: Behaviour = Behaviour.UNSPECIFIED
    trailing: Behaviour = Behaviour.UNSPECIFIED


class TokenKind(enum.Enum):
    """Типы токенов в шаблоне."""
    TEXT = "TEXT"
    VARIABLE = "VARIABLE"
    BLOCK = "BLOCK"
    COMMENT = "COMMENT"


@dataclass(frozen=True)
class Token:
    """
    Неизменяемый токен с позиционной информацией для точной диагностики ошибок.

    Маркеры пробелов есть только у блочных токенов.
    """
    kind: TokenKind
    contents: str
    source_map: SourceMap = field(default_factory=SourceMap)
    whitespace: Optional[WhitespaceBehaviour] = None

    @classmethod
    def text(cls, value: str, source_map: Optional[SourceMap] = None) -> Token:
        return cls(TokenKind.TEXT, value, source_map or SourceMap())

    @classmethod
    def variable(cls, value: str, source_map: Optional[SourceMap] = None) -> Token:
        return cls(TokenKind.VARIABLE, value, source_map or SourceMap())

    @classmethod
    def comment(cls, value: str, source_map: Optional[SourceMap] = None) -> Token:
        return cls(TokenKind.COMMENT, value, source_map or SourceMap())

    @classmethod
    def block(
        cls,
        value: str,
        source_map: Optional[SourceMap] = None,
        whitespace: Optional[WhitespaceBehaviour] = None,
    ) -> Token:
        return cls(TokenKind.BLOCK, value, source_map or SourceMap(), whitespace or WhitespaceBehaviour())

    @property
    def components(self) -> List[str]:
        """Содержимое токена, разбитое по пробелам с учётом кавычек."""
        return smart_split(self.contents)

    def __repr__(self) -> str:
        return f"Token({self.kind.name}, {self.contents!r}, {self.source_map.line}:{self.source_map.column})"


def smart_split(text: str, separator: str = " ") -> List[str]:
    """
    Разбивает строку по разделителю, сохраняя фразы в кавычках целиком.

    При разбиении по пробелам склеивает компоненты вокруг `,`, `|` и `:`,
    так что `a | b`, `a|b` и `a |b` дают один компонент `a|b`.

    Args:
        text: Исходная строка
        separator: Символ-разделитель

    Returns:
        Список компонентов
    """
    word = ""
    components: List[str] = []
    separate = separator
    single_quotes = 0
    double_quotes = 0

    for char in text:
        if char == "'":
            single_quotes += 1
        elif char == '"':
            double_quotes += 1

        if char == separate:
            if separate != separator:
                # Закрывающая кавычка остаётся частью слова
                word += separate
            elif (single_quotes % 2 == 0 or double_quotes % 2 == 0) and word:
                _append_word(word, components, separator)
                word = ""
            separate = separator
        else:
            if separate == separator and char in QUOTES:
                separate = char
            word += char

    if word:
        _append_word(word, components, separator)

    return components


def _append_word(word: str, components: List[str], separator: str) -> None:
    if separator != " ":
        components.append(word)
        return

    if components and components[-1][-1] in SPECIAL_CHARACTERS:
        # `label: for ...` не склеивается
        if len(components) == 1 and word == "for":
            components.append(word)
        else:
            components[-1] += word
    elif components and word[0] in SPECIAL_CHARACTERS:
        components[-1] += word
    elif word[0] not in QUOTES and word != "(" and word.startswith("("):
        components.append("(")
        _append_word(word[1:], components, separator)
    elif word[0] not in QUOTES and word != ")" and word.endswith(")"):
        _append_word(word[:-1], components, separator)
        components.append(")")
    else:
        components.append(word)


__all__ = [
    "SourceMap",
    "Behaviour",
    "WhitespaceBehaviour",
    "TokenKind",
    "Token",
    "smart_split",
]
