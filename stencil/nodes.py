"""
Базовые узлы дерева шаблона.

Узел умеет отрендерить себя в контексте. Здесь определены базовый класс,
текстовый узел, узел переменной и узел для простых пользовательских тегов.
Узлы управляющих конструкций находятся в пакете tags.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Callable, List, Optional, Sequence

from .context import Context
from .errors import TemplateSyntaxError, attach_token
from .trim import NOTHING, TrimBehaviour
from .values import Resolvable, stringify

if TYPE_CHECKING:
    from .expressions import Expression
    from .parser import TokenParser
    from .tokens import Token

# Флаги завершения итерации цикла, которые выставляют {% break %} и {% continue %}
BREAK_KEY = "_internal_forloop_break"
CONTINUE_KEY = "_internal_forloop_continue"


class NodeType(ABC):
    """Базовый класс для всех узлов дерева шаблона."""

    token: Optional[Token] = None

    @abstractmethod
    def render(self, context: Context) -> str:
        """
        Рендерит узел в заданном контексте.

        Raises:
            TemplateError: При ошибке рендеринга
        """
        pass


def render_nodes(nodes: Sequence[NodeType], context: Context) -> str:
    """
    Рендерит последовательность узлов и склеивает результат.

    Останавливается после узла, выставившего флаг break/continue цикла.
    Ошибке без позиции назначается токен узла, в котором она возникла.
    """
    result: List[str] = []

    for node in nodes:
        try:
            result.append(node.render(context))
        except Exception as error:
            raise attach_token(error, node.token)

        if context[BREAK_KEY] is not None or context[CONTINUE_KEY] is not None:
            break

    return "".join(result)


class TextNode(NodeType):
    """
    Статический текст шаблона.

    При рендеринге обрезает пробелы по правилам, вычисленным парсером
    из маркеров соседних блочных тегов.
    """

    def __init__(self, text: str, trim_behaviour: TrimBehaviour = NOTHING, token: Optional[Token] = None):
        self.text = text
        self.trim_behaviour = trim_behaviour
        self.token = token

    def render(self, context: Context) -> str:
        return self.trim_behaviour.apply(self.text)

    def __repr__(self) -> str:
        return f"TextNode({self.text!r})"


class VariableNode(NodeType):
    """
    Вывод значения: `{{ value|filter }}` или `{{ a if condition else b }}`.
    """

    def __init__(
        self,
        variable: Resolvable,
        token: Optional[Token] = None,
        condition: Optional[Expression] = None,
        else_expression: Optional[Resolvable] = None,
    ):
        self.variable = variable
        self.token = token
        self.condition = condition
        self.else_expression = else_expression

    @classmethod
    def parse(cls, parser: TokenParser, token: Token) -> VariableNode:
        components = token.components

        condition = None
        else_expression = None
        if len(components) > 2 and components[1] == "if":
            rest = components[2:]
            if "else" in rest:
                else_index = rest.index("else")
                condition = parser.compile_expression(rest[:else_index], token)
                else_token = " ".join(rest[else_index + 1:])
                else_expression = parser.compile_resolvable(else_token, token)
            else:
                condition = parser.compile_expression(rest, token)

        if not components:
            raise TemplateSyntaxError("Missing variable name", token)

        variable = parser.compile_resolvable(components[0], token)
        return cls(variable, token, condition, else_expression)

    def render(self, context: Context) -> str:
        if self.condition is not None and not self.condition.evaluate(context):
            if self.else_expression is None:
                return ""
            return stringify(self.else_expression.resolve(context))

        return stringify(self.variable.resolve(context))

    def __repr__(self) -> str:
        return f"VariableNode({self.variable!r})"


class SimpleNode(NodeType):
    """Узел пользовательского тега, рендеринг которого сводится к вызову функции."""

    def __init__(self, handler: Callable[[Context], Any], token: Optional[Token] = None):
        self.handler = handler
        self.token = token

    def render(self, context: Context) -> str:
        return stringify(self.handler(context))


__all__ = [
    "BREAK_KEY",
    "CONTINUE_KEY",
    "NodeType",
    "TextNode",
    "VariableNode",
    "SimpleNode",
    "render_nodes",
]
