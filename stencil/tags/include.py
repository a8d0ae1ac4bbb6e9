"""
Тег `include`: вставка другого шаблона.

    {% include "header.html" %}
    {% include "item.html" using item %}
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional

from ..context import Context
from ..errors import TemplateSyntaxError
from ..nodes import NodeType
from ..values import Resolvable, is_mapping

if TYPE_CHECKING:
    from ..parser import TokenParser
    from ..tokens import Token

logger = logging.getLogger(__name__)


class IncludeNode(NodeType):
    """
    Узел вставки шаблона.

    Вставляемый шаблон рендерится в текущем контексте; если указана
    переменная-словарь, её содержимое добавляется отдельной областью.
    """

    def __init__(
        self,
        template_name: Resolvable,
        name_expression: str,
        include_context: Optional[str] = None,
        token: Optional[Token] = None,
    ):
        self.template_name = template_name
        self.name_expression = name_expression
        self.include_context = include_context
        self.token = token

    @classmethod
    def parse(cls, parser: TokenParser, token: Token) -> IncludeNode:
        bits = token.components

        if len(bits) == 2:
            include_context = None
        elif len(bits) == 3:
            include_context = bits[2]
        elif len(bits) == 4 and bits[2] == "using":
            include_context = bits[3]
        else:
            raise TemplateSyntaxError(
                "'include' tag requires one argument, the template file to be included. "
                "A second optional argument can be used to specify the context that will "
                "be passed to the included file"
            )

        template_name = parser.compile_filter(bits[1], token)
        return cls(template_name, bits[1], include_context, token)

    def render(self, context: Context) -> str:
        name = self.template_name.resolve(context)
        if not isinstance(name, str):
            raise TemplateSyntaxError(f"'{self.name_expression}' could not be resolved as a string")

        template = context.environment.load_template(name)
        logger.debug(f"Including template '{name}'")

        sub_context = {}
        if self.include_context is not None:
            value = context[self.include_context]
            if is_mapping(value):
                sub_context = dict(value)

        try:
            with context.push(sub_context):
                return template.render(context)
        except TemplateSyntaxError as error:
            # Токен include добавится к трассе при выходе из render_nodes
            raise TemplateSyntaxError(error.reason, stack_trace=error.all_tokens) from error


__all__ = ["IncludeNode"]
