"""
Вычислитель логических выражений.

Проходит по дереву выражения и вычисляет его значение, разрешая
листья-переменные в контексте рендеринга.
"""

from __future__ import annotations

from typing import Any, Optional, Tuple, cast

from ..context import Context
from ..errors import TemplateSyntaxError
from ..values import is_mapping, is_sequence, to_number
from .model import (
    BinaryExpression,
    Expression,
    ExpressionType,
    NotExpression,
    StaticExpression,
    VariableExpression,
)


def is_truthy(value: Any) -> bool:
    """
    Истинность значения в условиях шаблона.

    Коллекции и строки истинны, если непусты; числа, если больше нуля;
    None ложно; любое другое значение истинно.
    """
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    if is_sequence(value) or is_mapping(value) or isinstance(value, (set, frozenset, str)):
        return len(value) > 0
    number = to_number(value)
    if number is not None:
        return number > 0
    return True


class ExpressionEvaluator:
    """
    Вычислитель логических выражений.

    Принимает дерево выражения и контекст, возвращает булево значение.
    """

    def __init__(self, context: Context):
        """
        Args:
            context: Контекст рендеринга для разрешения переменных
        """
        self.context = context

    def evaluate(self, expression: Expression) -> bool:
        """
        Вычисляет значение выражения.

        Args:
            expression: Корень дерева выражения

        Returns:
            Булево значение результата

        Raises:
            TemplateSyntaxError: При неизвестном типе выражения или ошибке
                разрешения переменной
        """
        expression_type = expression.get_type()

        if expression_type == ExpressionType.STATIC:
            return cast(StaticExpression, expression).value
        elif expression_type == ExpressionType.VARIABLE:
            return self._evaluate_variable(cast(VariableExpression, expression))
        elif expression_type == ExpressionType.NOT:
            return not self.evaluate(cast(NotExpression, expression).expression)
        elif expression_type == ExpressionType.AND:
            return self._evaluate_and(cast(BinaryExpression, expression))
        elif expression_type == ExpressionType.OR:
            return self._evaluate_or(cast(BinaryExpression, expression))
        elif expression_type == ExpressionType.IN:
            return self._evaluate_in(cast(BinaryExpression, expression))
        elif expression_type == ExpressionType.EQUAL:
            return self._evaluate_equal(cast(BinaryExpression, expression))
        elif expression_type == ExpressionType.NOT_EQUAL:
            return not self._evaluate_equal(cast(BinaryExpression, expression))
        elif expression_type in (
            ExpressionType.MORE_THAN,
            ExpressionType.MORE_THAN_EQUAL,
            ExpressionType.LESS_THAN,
            ExpressionType.LESS_THAN_EQUAL,
        ):
            return self._evaluate_numeric(cast(BinaryExpression, expression))
        else:
            raise TemplateSyntaxError(f"Unknown expression type: {expression_type}")

    def _evaluate_variable(self, expression: VariableExpression) -> bool:
        return is_truthy(expression.variable.resolve(self.context))

    def _evaluate_and(self, expression: BinaryExpression) -> bool:
        if not self.evaluate(expression.left):
            return False  # Короткое вычисление
        return self.evaluate(expression.right)

    def _evaluate_or(self, expression: BinaryExpression) -> bool:
        if self.evaluate(expression.left):
            return True  # Короткое вычисление
        return self.evaluate(expression.right)

    def _resolve_operands(self, expression: BinaryExpression) -> Optional[Tuple[Any, Any]]:
        """
        Значения обоих операндов, если оба являются листьями-переменные.

        Сравнение составных выражений (например, `(a and b) == c`) не определено.
        """
        left, right = expression.left, expression.right
        if not isinstance(left, VariableExpression) or not isinstance(right, VariableExpression):
            return None
        return left.variable.resolve(self.context), right.variable.resolve(self.context)

    def _evaluate_in(self, expression: BinaryExpression) -> bool:
        """
        Вычисляет вхождение: left in right

        - элемент в списке, кортеже, множестве или диапазоне
        - подстрока в строке
        - ключ в словаре
        - None in None истинно
        """
        operands = self._resolve_operands(expression)
        if operands is None:
            return False
        left, right = operands

        if left is None and right is None:
            return True
        if isinstance(right, (list, tuple, range)):
            return left in right
        if isinstance(right, (set, frozenset)) or is_mapping(right):
            try:
                return left in right
            except TypeError:
                # Нехешируемое значение не может быть ни элементом множества, ни ключом
                return False
        if isinstance(left, str) and isinstance(right, str):
            return left in right
        return False

    def _evaluate_equal(self, expression: BinaryExpression) -> bool:
        """
        Вычисляет равенство: left == right

        Числа сравниваются по значению независимо от типа (1 == 1.0),
        строки со строками, булевы с булевыми. Два None равны.
        Значения разных видов не равны.
        """
        operands = self._resolve_operands(expression)
        if operands is None:
            return False
        left, right = operands

        if left is None and right is None:
            return True
        if left is None or right is None:
            return False

        left_number, right_number = to_number(left), to_number(right)
        if left_number is not None and right_number is not None:
            return left_number == right_number
        if isinstance(left, str) and isinstance(right, str):
            return left == right
        if isinstance(left, bool) and isinstance(right, bool):
            return left == right
        return False

    def _evaluate_numeric(self, expression: BinaryExpression) -> bool:
        """
        Вычисляет сравнение: >, >=, <, <=

        Ложно, если хотя бы один операнд не число.
        """
        operands = self._resolve_operands(expression)
        if operands is None:
            return False

        left, right = (to_number(value) for value in operands)
        if left is None or right is None:
            return False

        operator = expression.operator
        if operator == ExpressionType.MORE_THAN:
            return left > right
        if operator == ExpressionType.MORE_THAN_EQUAL:
            return left >= right
        if operator == ExpressionType.LESS_THAN:
            return left < right
        return left <= right


__all__ = ["ExpressionEvaluator", "is_truthy"]
