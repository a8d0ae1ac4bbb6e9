"""
Тег `filter`: применяет фильтры к отрендеренному телу.

    {% filter lowercase|capitalize %}HELLO{% endfilter %}  ->  Hello
"""

from __future__ import annotations

from typing import TYPE_CHECKING, List, Optional

from ..context import Context
from ..errors import TemplateSyntaxError
from ..nodes import NodeType, VariableNode, render_nodes
from ..parser import until
from ..values import Resolvable

if TYPE_CHECKING:
    from ..parser import TokenParser
    from ..tokens import Token

FILTER_VALUE = "filter_value"


class FilterNode(NodeType):
    def __init__(self, nodes: List[NodeType], resolvable: Resolvable, token: Optional[Token] = None):
        self.nodes = nodes
        self.resolvable = resolvable
        self.token = token

    @classmethod
    def parse(cls, parser: TokenParser, token: Token) -> FilterNode:
        components = token.components
        if len(components) != 2:
            raise TemplateSyntaxError("'filter' tag takes one argument, the filter expression")

        nodes = parser.parse(until(["endfilter"]))
        if parser.next_token() is None:
            raise TemplateSyntaxError("`endfilter` was not found.")

        resolvable = parser.compile_filter(f"{FILTER_VALUE}|{components[1]}", token)
        return cls(nodes, resolvable, token)

    def render(self, context: Context) -> str:
        value = render_nodes(self.nodes, context)
        with context.push({FILTER_VALUE: value}):
            return VariableNode(self.resolvable, self.token).render(context)


__all__ = ["FilterNode"]
