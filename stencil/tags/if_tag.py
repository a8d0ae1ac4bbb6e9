"""
Условные теги `if` и `ifnot`.

    {% if a %}...{% elif b %}...{% else %}...{% endif %}
    {% ifnot a %}...{% else %}...{% endif %}
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, List, Optional

from ..context import Context
from ..errors import TemplateSyntaxError
from ..nodes import NodeType, render_nodes
from ..parser import until

if TYPE_CHECKING:
    from ..expressions import Expression
    from ..parser import TokenParser
    from ..tokens import Token


@dataclass
class IfBranch:
    """Ветка условия. Ветка без выражения (else) выполняется всегда."""
    expression: Optional[Expression]
    nodes: List[NodeType]


def _is_tag(token: Optional[Token], name: str) -> bool:
    if token is None:
        return False
    components = token.components
    return bool(components) and components[0] == name


class IfNode(NodeType):
    """
    Узел условной конструкции.

    Рендерит первую ветку, условие которой истинно, в отдельной области
    видимости. Если подходящей ветки нет, выводит пустую строку.
    """

    def __init__(self, branches: List[IfBranch], token: Optional[Token] = None):
        self.branches = branches
        self.token = token

    @classmethod
    def parse(cls, parser: TokenParser, token: Token) -> IfNode:
        expression = parser.compile_expression(token.components[1:], token)
        nodes = parser.parse(until(["endif", "elif", "else"]))
        branches = [IfBranch(expression, nodes)]

        current = parser.next_token()
        while _is_tag(current, "elif"):
            expression = parser.compile_expression(current.components[1:], current)
            nodes = parser.parse(until(["endif", "elif", "else"]))
            branches.append(IfBranch(expression, nodes))
            current = parser.next_token()

        if _is_tag(current, "else"):
            branches.append(IfBranch(None, parser.parse(until(["endif"]))))
            current = parser.next_token()

        if not _is_tag(current, "endif"):
            raise TemplateSyntaxError("`endif` was not found.")

        return cls(branches, token)

    @classmethod
    def parse_ifnot(cls, parser: TokenParser, token: Token) -> IfNode:
        """
        Разбирает `ifnot`: тело выполняется при ложном условии,
        ветка else при истинном.
        """
        components = token.components[1:]
        if not components:
            raise TemplateSyntaxError("'ifnot' statements should use the following syntax 'ifnot condition'.")

        expression = parser.compile_expression(components, token)
        false_nodes = parser.parse(until(["endif", "else"]))
        true_nodes: List[NodeType] = []

        current = parser.next_token()
        if _is_tag(current, "else"):
            true_nodes = parser.parse(until(["endif"]))
            current = parser.next_token()

        if not _is_tag(current, "endif"):
            raise TemplateSyntaxError("`endif` was not found.")

        return cls([IfBranch(expression, true_nodes), IfBranch(None, false_nodes)], token)

    def render(self, context: Context) -> str:
        for branch in self.branches:
            with context.push():
                if branch.expression is None or branch.expression.evaluate(context):
                    return render_nodes(branch.nodes, context)
        return ""


__all__ = ["IfNode", "IfBranch"]
