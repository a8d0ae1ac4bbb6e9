"""
Шаблон: исходный текст плюс окружение, в котором он рендерится.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, List, Mapping, Optional, Union

from .context import Context
from .lexer import Lexer
from .nodes import NodeType, render_nodes
from .parser import TokenParser
from .tokens import Token

if TYPE_CHECKING:
    from .environment import Environment

logger = logging.getLogger(__name__)


class Template:
    """
    Шаблон.

    Разобранное дерево не кэшируется: каждый вызов render заново
    токенизирует и разбирает исходный текст.
    """

    def __init__(
        self,
        template_string: str,
        environment: Optional[Environment] = None,
        name: Optional[str] = None,
    ):
        """
        Args:
            template_string: Исходный текст шаблона
            environment: Окружение; по умолчанию создаётся новое
            name: Имя шаблона для диагностики
        """
        if environment is None:
            from .environment import Environment
            environment = Environment()

        self.template_string = template_string
        self.environment = environment
        self.name = name

    @property
    def tokens(self) -> List[Token]:
        return Lexer(self.template_string, self.name).tokenize()

    def parse(self, environment: Optional[Environment] = None) -> List[NodeType]:
        """Разбирает шаблон в список узлов."""
        parser = TokenParser(self.tokens, environment or self.environment)
        return parser.parse()

    def render(self, context: Union[Context, Mapping[str, Any], None] = None) -> str:
        """
        Рендерит шаблон.

        Args:
            context: Готовый контекст (например, при include) или словарь
                переменных для нового контекста

        Returns:
            Результат рендеринга

        Raises:
            TemplateError: При ошибке разбора или рендеринга
        """
        if not isinstance(context, Context):
            context = Context(context, self.environment)

        logger.debug(f"Rendering template '{self.name or '<string>'}'")
        nodes = self.parse(context.environment)
        return render_nodes(nodes, context)

    def __repr__(self) -> str:
        return f"Template(name={self.name!r})"


__all__ = ["Template"]
