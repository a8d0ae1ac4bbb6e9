"""
Модели данных для логических выражений.

Содержит классы для представления условий тегов `if`, `ifnot`,
`where` в цикле `for` и условной формы `{{ a if cond else b }}`.
"""

from __future__ import annotations

from abc import abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Optional

from ..values import Resolvable

if TYPE_CHECKING:
    from ..context import Context


class ExpressionType(Enum):
    """Типы выражений."""
    STATIC = "static"
    VARIABLE = "variable"
    NOT = "not"
    AND = "and"
    OR = "or"
    IN = "in"
    EQUAL = "=="
    NOT_EQUAL = "!="
    MORE_THAN = ">"
    MORE_THAN_EQUAL = ">="
    LESS_THAN = "<"
    LESS_THAN_EQUAL = "<="


# Операторы сравнения, применимые только к двум переменным
COMPARISON_TYPES = frozenset({
    ExpressionType.EQUAL,
    ExpressionType.NOT_EQUAL,
    ExpressionType.MORE_THAN,
    ExpressionType.MORE_THAN_EQUAL,
    ExpressionType.LESS_THAN,
    ExpressionType.LESS_THAN_EQUAL,
})


@dataclass
class Expression(Resolvable):
    """
    Базовый абстрактный класс для всех выражений.

    Выражение также является Resolvable: в контексте оно разрешается
    в строку "true" или "false".
    """

    @abstractmethod
    def get_type(self) -> ExpressionType:
        """Возвращает тип выражения."""
        pass

    def evaluate(self, context: Context) -> bool:
        """Вычисляет выражение в контексте."""
        from .evaluator import ExpressionEvaluator
        return ExpressionEvaluator(context).evaluate(self)

    def resolve(self, context: Context) -> Optional[Any]:
        return "true" if self.evaluate(context) else "false"

    def __str__(self) -> str:
        return self._to_string()

    @abstractmethod
    def _to_string(self) -> str:
        pass


@dataclass
class StaticExpression(Expression):
    """Константа true/false."""
    value: bool

    def get_type(self) -> ExpressionType:
        return ExpressionType.STATIC

    def _to_string(self) -> str:
        return "true" if self.value else "false"


@dataclass
class VariableExpression(Expression):
    """
    Лист выражения: переменная, фильтр или диапазон.

    Истинность определяется значением, см. ExpressionEvaluator.
    """
    variable: Resolvable

    def get_type(self) -> ExpressionType:
        return ExpressionType.VARIABLE

    def _to_string(self) -> str:
        return f"(variable: {self.variable!r})"


@dataclass
class NotExpression(Expression):
    """Отрицание: not expression"""
    expression: Expression

    def get_type(self) -> ExpressionType:
        return ExpressionType.NOT

    def _to_string(self) -> str:
        return f"not {self.expression}"


@dataclass
class BinaryExpression(Expression):
    """
    Бинарная операция: left op right

    Поддерживаемые операторы:
    - and, or: логические операции с коротким вычислением
    - in: вхождение в список, подстроку или ключи словаря
    - ==, !=, >, >=, <, <=: сравнение двух переменных
    """
    left: Expression
    right: Expression
    operator: ExpressionType

    def get_type(self) -> ExpressionType:
        return self.operator

    def _to_string(self) -> str:
        return f"({self.left} {self.operator.value} {self.right})"


__all__ = [
    "Expression",
    "ExpressionType",
    "COMPARISON_TYPES",
    "StaticExpression",
    "VariableExpression",
    "NotExpression",
    "BinaryExpression",
]
