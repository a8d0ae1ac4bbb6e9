"""
Наследование шаблонов: теги `extends` и `block`.

Дочерний шаблон начинается с `{% extends "base.html" %}` и переопределяет
блоки родителя. Внутри переопределения `{{ block.super }}` выводит
содержимое блока предка. Цепочка может быть любой длины.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Dict, List, Optional

from ..context import Context
from ..errors import TemplateSyntaxError, attach_token
from ..nodes import NodeType, render_nodes
from ..parser import until
from ..values import Resolvable

if TYPE_CHECKING:
    from ..parser import TokenParser
    from ..tokens import Token

logger = logging.getLogger(__name__)


class BlockContext:
    """
    Переопределения блоков, собранные по цепочке наследования.

    Для каждого имени хранит список блоков от самого дальнего потомка
    к ближайшему предку.
    """

    CONTEXT_KEY = "block_context"

    def __init__(self, blocks: Optional[Dict[str, BlockNode]] = None):
        self.blocks: Dict[str, List[BlockNode]] = {
            name: [block] for name, block in (blocks or {}).items()
        }

    def push(self, name: str, block: BlockNode) -> None:
        self.blocks.setdefault(name, []).append(block)

    def pop(self, name: str) -> Optional[BlockNode]:
        """Забирает ближайшее к потомку переопределение блока."""
        blocks = self.blocks.get(name)
        if not blocks:
            return None
        block = blocks.pop(0)
        if not blocks:
            del self.blocks[name]
        return block


class ExtendsNode(NodeType):
    """
    Узел `extends`.

    Поглощает весь остаток шаблона; из него сохраняются только блоки
    верхнего уровня. При рендеринге выводится родительский шаблон.
    """

    def __init__(
        self,
        template_name: Resolvable,
        name_expression: str,
        blocks: Dict[str, BlockNode],
        token: Optional[Token] = None,
    ):
        self.template_name = template_name
        self.name_expression = name_expression
        self.blocks = blocks
        self.token = token

    @classmethod
    def parse(cls, parser: TokenParser, token: Token) -> ExtendsNode:
        bits = token.components
        if len(bits) != 2:
            raise TemplateSyntaxError("'extends' takes one argument, the template file to be extended")

        nodes = parser.parse()
        if any(isinstance(node, ExtendsNode) for node in nodes):
            raise TemplateSyntaxError("'extends' cannot appear more than once in the same template")

        blocks = {node.name: node for node in nodes if isinstance(node, BlockNode)}
        template_name = parser.compile_filter(bits[1], token)
        return cls(template_name, bits[1], blocks, token)

    def render(self, context: Context) -> str:
        name = self.template_name.resolve(context)
        if not isinstance(name, str):
            raise TemplateSyntaxError(f"'{self.name_expression}' could not be resolved as a string")

        base_template = context.environment.load_template(name)
        logger.debug(f"Extending template '{name}'")

        block_context = context[BlockContext.CONTEXT_KEY]
        if isinstance(block_context, BlockContext):
            for block_name, block in self.blocks.items():
                block_context.push(block_name, block)
        else:
            block_context = BlockContext(self.blocks)

        try:
            with context.push({BlockContext.CONTEXT_KEY: block_context}):
                return base_template.render(context)
        except TemplateSyntaxError as error:
            # Ошибка из другого шаблона получает трассу до этого тега
            own_name = self.token.source_map.filename if self.token is not None else None
            if error.template_name != own_name:
                raise TemplateSyntaxError(error.reason, stack_trace=error.all_tokens) from error
            raise


class BlockNode(NodeType):
    """
    Узел `block`.

    Если у блока есть переопределение в потомке, выводится оно, а собственное
    содержимое (вместе с остальной цепочкой предков) доступно потомку как
    `block.super`. Отрендеренный блок сохраняется в `block.<имя>`.
    """

    def __init__(self, name: str, nodes: List[NodeType], token: Optional[Token] = None):
        self.name = name
        self.nodes = nodes
        self.token = token

    @classmethod
    def parse(cls, parser: TokenParser, token: Token) -> BlockNode:
        bits = token.components
        if len(bits) != 2:
            raise TemplateSyntaxError("'block' tag takes one argument, the block name")

        nodes = parser.parse(until(["endblock"]))
        if parser.next_token() is None:
            raise TemplateSyntaxError("`endblock` was not found.")

        return cls(bits[1], nodes, token)

    def render(self, context: Context) -> str:
        block_context = context[BlockContext.CONTEXT_KEY]
        child = block_context.pop(self.name) if isinstance(block_context, BlockContext) else None

        if child is None:
            result = render_nodes(self.nodes, context)
            context.cache_block(self.name, result)
            return result

        # Оставшаяся цепочка предков рендерится до потомка
        super_content = self.render(context)

        try:
            with context.push({
                BlockContext.CONTEXT_KEY: block_context,
                "block": {"super": super_content},
            }):
                result = render_nodes(child.nodes, context)
        except TemplateSyntaxError as error:
            # Место ошибки внутри переопределения уходит в трассу за тегом блока
            raise TemplateSyntaxError(error.reason, token=child.token, stack_trace=error.all_tokens) from error
        except Exception as error:
            raise attach_token(error, child.token)

        context.cache_block(self.name, result)
        return result


__all__ = ["BlockContext", "ExtendsNode", "BlockNode"]
