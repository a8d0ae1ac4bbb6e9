"""
Логические выражения шаблонов: модель, парсер и вычислитель.
"""

from __future__ import annotations

from .evaluator import ExpressionEvaluator, is_truthy
from .model import (
    BinaryExpression,
    Expression,
    ExpressionType,
    NotExpression,
    StaticExpression,
    VariableExpression,
)
from .parser import ExpressionParser, parse_expression

__all__ = [
    "Expression",
    "ExpressionType",
    "StaticExpression",
    "VariableExpression",
    "NotExpression",
    "BinaryExpression",
    "ExpressionParser",
    "ExpressionEvaluator",
    "parse_expression",
    "is_truthy",
]
