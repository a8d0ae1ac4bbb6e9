"""
Политика обрезки пробелов вокруг блочных тегов.
"""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass
from typing import Dict, Pattern


class Trim(enum.Enum):
    """Что удалять из текста рядом с блочным тегом."""
    NOTHING = "nothing"
    WHITESPACE = "whitespace"                                      # пробелы и табы
    WHITESPACE_AND_ONE_NEWLINE = "whitespace_and_one_newline"      # пробелы, табы и один перевод строки
    WHITESPACE_AND_NEWLINES = "whitespace_and_newlines"            # все пробелы и переводы строк


_LEADING: Dict[Trim, Pattern[str]] = {
    Trim.WHITESPACE: re.compile(r'\A[ \t]*'),
    Trim.WHITESPACE_AND_ONE_NEWLINE: re.compile(r'\A[ \t]*\n'),
    Trim.WHITESPACE_AND_NEWLINES: re.compile(r'\A\s+'),
}

_TRAILING: Dict[Trim, Pattern[str]] = {
    Trim.WHITESPACE: re.compile(r'[ \t]*\Z'),
    Trim.WHITESPACE_AND_ONE_NEWLINE: re.compile(r'\n[ \t]*\Z'),
    Trim.WHITESPACE_AND_NEWLINES: re.compile(r'\s+\Z'),
}


@dataclass(frozen=True)
class TrimBehaviour:
    """
    Пара правил обрезки для текста.

    leading применяется к началу текста (после предыдущего тега),
    trailing применяется к концу текста (перед следующим тегом).
    """
    leading: Trim = Trim.NOTHING
    trailing: Trim = Trim.NOTHING

    def apply(self, text: str) -> str:
        """Обрезает текст согласно правилам."""
        if not text:
            return text
        if self.leading is not Trim.NOTHING:
            text = _LEADING[self.leading].sub("", text, count=1)
        if self.trailing is not Trim.NOTHING:
            text = _TRAILING[self.trailing].sub("", text, count=1)
        return text


# Не трогает переводы строк
NOTHING = TrimBehaviour(Trim.NOTHING, Trim.NOTHING)
# Убирает пробелы перед тегом и пробелы с одним переводом строки после него
SMART = TrimBehaviour(Trim.WHITESPACE, Trim.WHITESPACE_AND_ONE_NEWLINE)
# Убирает все пробелы и переводы строк вокруг тега
ALL = TrimBehaviour(Trim.WHITESPACE_AND_NEWLINES, Trim.WHITESPACE_AND_NEWLINES)

PRESETS: Dict[str, TrimBehaviour] = {
    "nothing": NOTHING,
    "smart": SMART,
    "all": ALL,
}


__all__ = ["Trim", "TrimBehaviour", "NOTHING", "SMART", "ALL", "PRESETS"]
