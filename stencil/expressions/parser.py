"""
Парсер логических выражений методом Пратта (precedence climbing).

Работает с компонентами блочного тега, уже разбитыми smart_split.
Каждый компонент является оператором или листом (переменная с фильтрами либо
диапазон). Скобки `(` и `)` группируют подвыражения.

Приоритеты (чем больше, тем сильнее связывание):
    in            5
    or            6
    and           7
    not           8 (префиксный)
    == != > >= < <=   10
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import TYPE_CHECKING, Dict, List, Optional, Sequence, Tuple

from ..errors import TemplateSyntaxError
from ..values import Resolvable
from .model import (
    BinaryExpression,
    Expression,
    ExpressionType,
    NotExpression,
    VariableExpression,
)

if TYPE_CHECKING:
    from ..environment import Environment
    from ..tokens import Token


class _Kind(enum.Enum):
    INFIX = "infix"
    PREFIX = "prefix"
    VARIABLE = "variable"
    SUB_EXPRESSION = "sub_expression"
    END = "end"


# имя оператора -> (вид, сила связывания, тип выражения)
OPERATORS: Dict[str, Tuple[_Kind, int, ExpressionType]] = {
    "in": (_Kind.INFIX, 5, ExpressionType.IN),
    "or": (_Kind.INFIX, 6, ExpressionType.OR),
    "and": (_Kind.INFIX, 7, ExpressionType.AND),
    "not": (_Kind.PREFIX, 8, ExpressionType.NOT),
    "==": (_Kind.INFIX, 10, ExpressionType.EQUAL),
    "!=": (_Kind.INFIX, 10, ExpressionType.NOT_EQUAL),
    ">": (_Kind.INFIX, 10, ExpressionType.MORE_THAN),
    ">=": (_Kind.INFIX, 10, ExpressionType.MORE_THAN_EQUAL),
    "<": (_Kind.INFIX, 10, ExpressionType.LESS_THAN),
    "<=": (_Kind.INFIX, 10, ExpressionType.LESS_THAN_EQUAL),
}


@dataclass
class _ExpressionToken:
    kind: _Kind
    name: str = ""
    binding_power: int = 0
    operator: Optional[ExpressionType] = None
    variable: Optional[Resolvable] = None
    expression: Optional[Expression] = None


_END = _ExpressionToken(_Kind.END)


def _error(message: str) -> TemplateSyntaxError:
    return TemplateSyntaxError(f"'if' expression error: {message}")


class ExpressionParser:
    """
    Парсер логических выражений.

    Ошибки синтаксиса выражения: TemplateSyntaxError без токена;
    токен тега привязывается вызывающим кодом.
    """

    def __init__(
        self,
        components: Sequence[str],
        environment: Environment,
        token: Optional[Token] = None,
    ):
        """
        Args:
            components: Компоненты условия (без имени тега)
            environment: Окружение для компиляции листьев
            token: Токен тега, содержащего выражение
        """
        self.environment = environment
        self.token = token
        self._tokens = self._tokenize(list(components))
        self._position = 0

    def _tokenize(self, components: List[str]) -> List[_ExpressionToken]:
        tokens: List[_ExpressionToken] = []
        brackets_balance = 0
        index = 0

        while index < len(components):
            component = components[index]

            if component == "(":
                brackets_balance += 1
                expression, consumed = self._sub_expression(components[index + 1:])
                tokens.append(_ExpressionToken(_Kind.SUB_EXPRESSION, expression=expression))
                index += consumed + 1
                continue

            if component == ")":
                brackets_balance -= 1
                if brackets_balance < 0:
                    raise _error("missing opening bracket")
            elif component in OPERATORS:
                kind, power, operator = OPERATORS[component]
                tokens.append(_ExpressionToken(kind, component, power, operator))
            else:
                variable = self.environment.compile_resolvable(component, self.token)
                tokens.append(_ExpressionToken(_Kind.VARIABLE, component, variable=variable))

            index += 1

        return tokens

    def _sub_expression(self, components: List[str]) -> Tuple[Expression, int]:
        """Разбирает содержимое скобок до парной закрывающей скобки."""
        depth = 1
        for index, component in enumerate(components):
            if component == "(":
                depth += 1
            elif component == ")":
                depth -= 1
                if depth == 0:
                    inner = components[:index]
                    parser = ExpressionParser(inner, self.environment, self.token)
                    return parser.parse(), len(inner)

        raise _error("missing closing bracket")

    def parse(self) -> Expression:
        """
        Разбирает все компоненты в одно выражение.

        Raises:
            TemplateSyntaxError: Пустое выражение, оператор без операнда,
                лишний токен после выражения, несбалансированные скобки
        """
        expression = self._expression()

        if self._current().kind is not _Kind.END:
            raise _error("dangling token")

        return expression

    def _current(self) -> _ExpressionToken:
        if self._position < len(self._tokens):
            return self._tokens[self._position]
        return _END

    def _expression(self, binding_power: int = 0) -> Expression:
        token = self._current()
        self._position += 1
        left = self._null_denotation(token)

        while binding_power < self._current().binding_power:
            token = self._current()
            self._position += 1
            left = self._left_denotation(token, left)

        return left

    def _null_denotation(self, token: _ExpressionToken) -> Expression:
        if token.kind is _Kind.INFIX:
            raise _error(f"infix operator '{token.name}' doesn't have a left hand side")
        if token.kind is _Kind.PREFIX:
            return NotExpression(self._expression(token.binding_power))
        if token.kind is _Kind.VARIABLE:
            return VariableExpression(token.variable)
        if token.kind is _Kind.SUB_EXPRESSION:
            return token.expression
        raise _error("end")

    def _left_denotation(self, token: _ExpressionToken, left: Expression) -> Expression:
        if token.kind is _Kind.INFIX:
            right = self._expression(token.binding_power)
            return BinaryExpression(left, right, token.operator)
        if token.kind is _Kind.PREFIX:
            raise _error(f"prefix operator '{token.name}' was called with a left hand side")
        if token.kind is _Kind.VARIABLE:
            raise _error(f"variable '{token.name}' was called with a left hand side")
        if token.kind is _Kind.SUB_EXPRESSION:
            raise _error(f"sub expression '{token.expression}' was called with a left hand side")
        raise _error("end")


def parse_expression(
    components: Sequence[str],
    environment: Environment,
    token: Optional[Token] = None,
) -> Expression:
    """
    Удобная функция для разбора выражения.

    Args:
        components: Компоненты условия
        environment: Окружение шаблонизатора
        token: Токен тега для диагностики

    Returns:
        Корень дерева выражения
    """
    return ExpressionParser(components, environment, token).parse()


__all__ = ["ExpressionParser", "OPERATORS", "parse_expression"]
