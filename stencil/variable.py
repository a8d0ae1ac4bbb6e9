"""
Переменные шаблона и их разрешение в контексте.

Содержит:
- Variable: путь `a.b[c.d].e` или литерал (строка, число, true/false)
- FilterExpression: переменная с цепочкой фильтров `value|f1|f2:arg1,arg2`
- RangeVariable: диапазон целых чисел `from...to`
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Any, List, Optional, Sequence, Tuple

from .context import Context
from .errors import TemplateSyntaxError
from .tokens import smart_split
from .values import LazyValueWrapper, Resolvable, StructuredValue, is_mapping, is_sequence, stringify, to_number

if TYPE_CHECKING:
    from .environment import Environment
    from .extension import Filter
    from .tokens import Token

_INT_LITERAL = re.compile(r'^[+-]?\d+$')
_FLOAT_LITERAL = re.compile(r'^[+-]?(?:\d+\.\d*|\.\d+|\d+)(?:[eE][+-]?\d+)?$')
_INDEX = re.compile(r'^-?\d+$')

_MISSING = object()


class Variable(Resolvable):
    """
    Переменная шаблона, разрешаемая в заданном контексте.

    Литералы возвращаются сразу и не зависят от содержимого контекста.
    """

    def __init__(self, variable: str):
        self.variable = variable

    def resolve(self, context: Context) -> Optional[Any]:
        """
        Разрешает переменную в контексте.

        Args:
            context: Контекст рендеринга

        Returns:
            Значение переменной или None, если путь не найден

        Raises:
            TemplateSyntaxError: Если путь синтаксически неверен
        """
        literal = self._literal()
        if literal is not _MISSING:
            return literal

        current: Any = context
        for bit in LookupParser(self.variable, context).parse():
            current = _resolve_bit(bit, current)
            if current is None:
                return None
            if isinstance(current, LazyValueWrapper):
                current = current.value(context)

        if isinstance(current, Resolvable):
            return current.resolve(context)

        from .nodes import NodeType
        if isinstance(current, NodeType):
            return current.render(context)

        return current

    def _literal(self) -> Any:
        variable = self.variable

        if len(variable) > 1 and variable[0] == variable[-1] and variable[0] in "'\"":
            return variable[1:-1]
        if _INT_LITERAL.match(variable):
            return int(variable)
        if _FLOAT_LITERAL.match(variable):
            return float(variable)
        if variable == "true":
            return True
        if variable == "false":
            return False

        return _MISSING

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Variable) and other.variable == self.variable

    def __hash__(self) -> int:
        return hash(self.variable)

    def __repr__(self) -> str:
        return f"Variable({self.variable!r})"


def _resolve_bit(bit: str, current: Any) -> Any:
    """Один шаг обхода пути: значение текущего объекта по имени `bit`."""
    if isinstance(current, Context):
        return current[bit]

    if is_mapping(current):
        if bit in current:
            return current[bit]
        if bit == "count":
            return len(current)
        return None

    if is_sequence(current) or isinstance(current, str):
        return _resolve_collection_bit(bit, current)

    if isinstance(current, StructuredValue):
        for name, value in current.named_fields():
            if name == bit:
                return value
        return None

    return None


def _resolve_collection_bit(bit: str, collection: Sequence[Any]) -> Any:
    if _INDEX.match(bit):
        index = int(bit)
        if 0 <= index < len(collection):
            return collection[index]
        return None
    if bit == "first":
        return collection[0] if collection else None
    if bit == "last":
        return collection[-1] if collection else None
    if bit == "count":
        return len(collection)
    return None


class LookupParser:
    """
    Разбивает путь переменной на сегменты по точкам.

    Выражения в квадратных скобках разрешаются в текущем контексте
    и подставляются как обычные сегменты: `a.b[c.d]` -> `a.b.<значение c.d>`.
    """

    def __init__(self, variable: str, context: Context):
        self.variable = variable
        self.context = context
        self._bits: List[str] = []
        self._partial_bits: List[str] = []
        self._current = ""
        self._reference_level = 0

    def parse(self) -> List[str]:
        self._bits = []
        self._partial_bits = []
        self._current = ""
        self._reference_level = 0

        for char in self.variable:
            if char == "." and self._reference_level == 0:
                self._found_separator()
            elif char == "[":
                self._open_bracket()
            elif char == "]":
                self._close_bracket()
            else:
                self._current += char

        self._finish()
        return self._bits

    def _found_separator(self) -> None:
        if self._current:
            self._partial_bits.append(self._current)

        if not self._partial_bits:
            raise TemplateSyntaxError(f"Attempting to dereference empty object in variable '{self.variable}'")

        self._bits.extend(self._partial_bits)
        self._current = ""
        self._partial_bits = []

    def _open_bracket(self) -> None:
        # Перед первой скобкой обязательно должен быть объект
        if not self._partial_bits and not self._current:
            raise TemplateSyntaxError(f"Attempting to dereference an empty object in variable '{self.variable}'")

        if self._reference_level > 0:
            self._current += "["
        elif self._current:
            self._partial_bits.append(self._current)
            self._current = ""

        self._reference_level += 1

    def _close_bracket(self) -> None:
        if self._reference_level == 0:
            raise TemplateSyntaxError(f"Unbalanced brackets in variable '{self.variable}'")

        if self._reference_level > 1:
            self._current += "]"
        else:
            value = Variable(self._current).resolve(self.context) if self._current else None
            if value is None:
                raise TemplateSyntaxError(
                    f"Unable to resolve reference '{self._current}' in variable '{self.variable}'"
                )
            self._partial_bits.append(stringify(value))
            self._current = ""

        self._reference_level -= 1

    def _finish(self) -> None:
        if self._current:
            self._partial_bits.append(self._current)
        self._bits.extend(self._partial_bits)

        if self._reference_level != 0:
            raise TemplateSyntaxError(f"Unbalanced brackets in variable '{self.variable}'")


class FilterExpression(Resolvable):
    """
    Переменная с упорядоченной цепочкой фильтров.

    Аргументы каждого фильтра разрешаются в том же контексте,
    что и сама переменная, непосредственно перед вызовом фильтра.
    """

    def __init__(self, token: str, environment: Environment):
        bits = [bit.strip() for bit in smart_split(token, "|")]
        if not bits:
            raise TemplateSyntaxError("Variable tags must include at least 1 argument")

        self.variable = Variable(bits[0])
        self.filters: List[Tuple[Filter, List[Variable]]] = []
        for bit in bits[1:]:
            name, arguments = parse_filter_components(bit)
            self.filters.append((environment.find_filter(name), arguments))

    def resolve(self, context: Context) -> Optional[Any]:
        result = self.variable.resolve(context)

        for filter_, arguments in self.filters:
            values = [argument.resolve(context) for argument in arguments]
            result = filter_.invoke(result, values, context)

        return result

    def __repr__(self) -> str:
        return f"FilterExpression({self.variable.variable!r}, filters={len(self.filters)})"


def parse_filter_components(token: str) -> Tuple[str, List[Variable]]:
    """
    Разбирает `name:arg1,arg2` на имя фильтра и список аргументов.
    """
    components = smart_split(token, ":")
    if not components:
        return "", []
    name = components[0].strip()
    arguments = [
        Variable(argument.strip())
        for argument in smart_split(":".join(components[1:]), ",")
    ]
    return name, arguments


class RangeVariable(Resolvable):
    """
    Диапазон целых чисел `from...to` включительно.

    Если from больше to, числа идут по убыванию.
    """

    SEPARATOR = "..."

    def __init__(self, from_: Resolvable, to: Resolvable):
        self.from_ = from_
        self.to = to

    @classmethod
    def parse(
        cls,
        token: str,
        environment: Environment,
        contained_in: Optional[Token] = None,
    ) -> Optional[RangeVariable]:
        """
        Создаёт диапазон из строки или возвращает None, если это не диапазон.
        """
        components = token.split(cls.SEPARATOR)
        if len(components) != 2:
            return None

        return cls(
            environment.compile_filter(components[0], contained_in),
            environment.compile_filter(components[1], contained_in),
        )

    def resolve(self, context: Context) -> Optional[Any]:
        start = _to_int(self.from_.resolve(context))
        if start is None:
            raise TemplateSyntaxError(f"'from' value is not an Int ({stringify(self.from_.resolve(context))})")

        end = _to_int(self.to.resolve(context))
        if end is None:
            raise TemplateSyntaxError(f"'to' value is not an Int ({stringify(self.to.resolve(context))})")

        if start > end:
            return list(range(start, end - 1, -1))
        return list(range(start, end + 1))

    def __repr__(self) -> str:
        return f"RangeVariable({self.from_!r}, {self.to!r})"


def _to_int(value: Any) -> Optional[int]:
    number = to_number(value)
    if number is None:
        return None
    if isinstance(number, float):
        return int(number) if number.is_integer() else None
    return number


__all__ = [
    "Variable",
    "LookupParser",
    "FilterExpression",
    "RangeVariable",
    "parse_filter_components",
]
