"""
Встроенные фильтры.

Фильтр без аргументов принимает значение, фильтр с аргументами получает
значение и список уже разрешённых аргументов (и, при необходимости, контекст).
"""

from __future__ import annotations

import re
from typing import Any, List, Optional

from .context import Context
from .errors import TemplateSyntaxError
from .values import is_sequence, stringify

_WORD = re.compile(r'\S+')


def _map_strings(value: Any, transform) -> Any:
    if is_sequence(value):
        return [transform(stringify(item)) for item in value]
    return transform(stringify(value))


def capitalize(value: Any) -> Any:
    """Каждое слово с заглавной буквы: `hello world` -> `Hello World`."""
    return _map_strings(value, lambda text: _WORD.sub(lambda match: match.group(0).capitalize(), text))


def uppercase(value: Any) -> Any:
    return _map_strings(value, str.upper)


def lowercase(value: Any) -> Any:
    return _map_strings(value, str.lower)


def default(value: Any, arguments: List[Any]) -> Any:
    """Значение, а если его нет, первый аргумент, отличный от None."""
    if value is not None:
        return value
    for argument in arguments:
        if argument is not None:
            return argument
    return None


def join(value: Any, arguments: List[Any]) -> Any:
    if len(arguments) > 1:
        raise TemplateSyntaxError("'join' filter takes a single argument")

    separator = stringify(arguments[0]) if arguments else ""
    if is_sequence(value):
        return separator.join(stringify(item) for item in value)
    return value


def split(value: Any, arguments: List[Any]) -> Any:
    if len(arguments) > 1:
        raise TemplateSyntaxError("'split' filter takes a single argument")

    separator = stringify(arguments[0]) if arguments else " "
    if isinstance(value, str):
        return value.split(separator)
    return value


def indent(value: Any, arguments: List[Any]) -> Any:
    """
    Добавляет отступ к каждой непустой строке, кроме первой.

    Аргументы: ширина (по умолчанию 4), символ отступа (по умолчанию пробел),
    отступ для первой строки (по умолчанию false).
    """
    if len(arguments) > 3:
        raise TemplateSyntaxError("'indent' filter can take at most 3 arguments")

    width = 4
    if arguments:
        width = arguments[0]
        if not isinstance(width, int) or isinstance(width, bool):
            raise TemplateSyntaxError(
                f"'indent' filter width argument must be an Integer ({stringify(arguments[0])})"
            )

    character = " "
    if len(arguments) > 1:
        character = arguments[1]
        if not isinstance(character, str):
            raise TemplateSyntaxError(
                f"'indent' filter indentation argument must be a String ({stringify(arguments[1])})"
            )

    indent_first = False
    if len(arguments) > 2:
        indent_first = arguments[2]
        if not isinstance(indent_first, bool):
            raise TemplateSyntaxError(
                f"'indent' filter indentFirst argument must be a Bool ({stringify(arguments[2])})"
            )

    return indent_text(stringify(value), character * width, indent_first)


def indent_text(content: str, indentation: str, indent_first: bool = False) -> str:
    if not indentation:
        return content

    first, *rest = content.split("\n")
    lines = [(indentation if indent_first else "") + first]
    lines.extend(indentation + line if line else line for line in rest)
    return "\n".join(lines)


def filter_(value: Any, arguments: List[Any], context: Context) -> Optional[Any]:
    """
    Применяет фильтр, имя которого хранится в переменной:
    `{{ name|filter:some_filter }}` при some_filter = "uppercase".
    """
    if value is None:
        return None
    if len(arguments) != 1:
        raise TemplateSyntaxError("'filter' filter takes one argument")

    expression = context.environment.compile_filter(f"$0|{stringify(arguments[0])}")
    with context.push({"$0": value}):
        return expression.resolve(context)


def unique(value: Any) -> Any:
    """Удаляет повторы из списка, сохраняя порядок первых вхождений."""
    if not is_sequence(value):
        return value

    result: List[Any] = []
    for item in value:
        if item not in result:
            result.append(item)
    return result


__all__ = [
    "capitalize",
    "uppercase",
    "lowercase",
    "default",
    "join",
    "split",
    "indent",
    "indent_text",
    "filter_",
    "unique",
]
