"""
Лексический анализатор шаблонов.

Разбивает исходный текст шаблона на плоскую последовательность токенов:
текст, переменные {{ ... }}, блочные теги {% ... %} и комментарии {# ... #}.
"""

from __future__ import annotations

import re
from typing import Dict, List, Optional

from .tokens import Behaviour, SourceMap, Token, TokenKind, WhitespaceBehaviour

TAG_LENGTH = 2


class Lexer:
    """
    Лексический анализатор шаблонов.

    Никогда не выбрасывает исключений: незакрытый тег превращается
    в обычный текст и дальше обрабатывается парсером как есть.
    """

    _TOKEN_START = re.compile(r'\{[{%#]')

    _DELIMITERS: Dict[str, str] = {
        "{{": "}}",
        "{%": "%}",
        "{#": "#}",
    }

    _KINDS: Dict[str, TokenKind] = {
        "{{": TokenKind.VARIABLE,
        "{%": TokenKind.BLOCK,
        "{#": TokenKind.COMMENT,
    }

    _BEHAVIOURS: Dict[str, Behaviour] = {
        "+": Behaviour.KEEP,
        "-": Behaviour.TRIM,
    }

    def __init__(self, template_string: str, template_name: Optional[str] = None):
        self.template_string = template_string
        self.template_name = template_name
        self.length = len(template_string)

    def tokenize(self) -> List[Token]:
        """
        Токенизирует весь исходный текст и возвращает список токенов.
        """
        text = self.template_string
        tokens: List[Token] = []
        position = 0

        while position < self.length:
            match = self._TOKEN_START.search(text, position)
            if match is None:
                tokens.append(self._create_text_token(text[position:], position))
                break

            start = match.start()
            if start > position:
                tokens.append(self._create_text_token(text[position:start], position))

            opener = match.group(0)
            end = text.find(self._DELIMITERS[opener], start + TAG_LENGTH)
            if end == -1:
                # Незакрытый тег: остаток шаблона становится текстом
                tokens.append(self._create_text_token(text[start:], start))
                break

            end += TAG_LENGTH
            tokens.append(self._create_tag_token(text[start:end], start, self._KINDS[opener]))
            position = end

        return tokens

    def _create_text_token(self, value: str, offset: int) -> Token:
        return Token(TokenKind.TEXT, value, self._source_map(offset, len(value)))

    def _create_tag_token(self, raw: str, offset: int, kind: TokenKind) -> Token:
        whitespace = self._whitespace_behaviour(raw) if kind is TokenKind.BLOCK else None

        leading = TAG_LENGTH
        trailing = TAG_LENGTH
        if whitespace is not None:
            if whitespace.leading is not Behaviour.UNSPECIFIED:
                leading += 1
            if whitespace.trailing is not Behaviour.UNSPECIFIED:
                trailing += 1

        value = self._strip(raw, leading, trailing)

        # Позиция указывает на содержимое тега, а не на разделитель
        index = raw.find(value, leading) if value else -1
        start = offset + index if index >= 0 else offset

        return Token(kind, value, self._source_map(start, len(value)), whitespace)

    def _whitespace_behaviour(self, raw: str) -> WhitespaceBehaviour:
        inner = raw[TAG_LENGTH:-TAG_LENGTH]
        if not inner:
            return WhitespaceBehaviour()
        return WhitespaceBehaviour(
            leading=self._BEHAVIOURS.get(inner[0], Behaviour.UNSPECIFIED),
            trailing=self._BEHAVIOURS.get(inner[-1], Behaviour.UNSPECIFIED),
        )

    @staticmethod
    def _strip(raw: str, leading: int, trailing: int) -> str:
        if len(raw) <= leading + trailing:
            return ""
        inner = raw[leading:len(raw) - trailing]
        lines = [line.strip() for line in inner.split("\n") if line]
        return " ".join(lines)

    def _source_map(self, offset: int, length: int) -> SourceMap:
        text = self.template_string
        line_start = text.rfind("\n", 0, offset) + 1
        line_end = text.find("\n", offset)
        if line_end == -1:
            line_end = self.length

        return SourceMap(
            filename=self.template_name,
            line=text.count("\n", 0, offset) + 1,
            column=offset - line_start + 1,
            content=text[line_start:line_end],
            span=(offset, offset + length),
        )


def tokenize_template(text: str, template_name: Optional[str] = None) -> List[Token]:
    """
    Удобная функция для токенизации шаблона.

    Args:
        text: Исходный текст шаблона
        template_name: Имя шаблона для диагностики

    Returns:
        Список токенов
    """
    return Lexer(text, template_name).tokenize()


__all__ = ["Lexer", "tokenize_template"]
