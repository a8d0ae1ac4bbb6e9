"""
Цикл `for` и управляющие теги `break`/`continue`.

    {% outer: for item in items where item.visible %}
      {% for x in item.children %}{% continue outer %}{% endfor %}
    {% empty %}
      nothing
    {% endfor %}
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import TYPE_CHECKING, Any, Dict, Iterator, List, Optional

from ..context import Context
from ..errors import TemplateSyntaxError
from ..nodes import BREAK_KEY, CONTINUE_KEY, NodeType, render_nodes
from ..parser import until
from ..values import Resolvable, StructuredValue, is_mapping, is_sequence

if TYPE_CHECKING:
    from ..expressions import Expression
    from ..parser import TokenParser
    from ..tokens import Token


class ForNode(NodeType):
    """
    Узел цикла.

    Для каждого элемента добавляет область с записью `forloop`
    (first, last, counter, counter0, length) и область с переменными цикла.
    Записи помеченных внешних циклов доступны как `forloop.<метка>`.
    """

    def __init__(
        self,
        resolvable: Resolvable,
        loop_variables: List[str],
        nodes: List[NodeType],
        empty_nodes: List[NodeType],
        where: Optional[Expression] = None,
        label: Optional[str] = None,
        token: Optional[Token] = None,
    ):
        self.resolvable = resolvable
        self.loop_variables = loop_variables
        self.nodes = nodes
        self.empty_nodes = empty_nodes
        self.where = where
        self.label = label
        self.token = token

    @classmethod
    def parse(cls, parser: TokenParser, token: Token) -> ForNode:
        components = token.components

        label = None
        if components and components[0].endswith(":"):
            label = components.pop(0)[:-1]

        def has_token(name: str, index: int) -> bool:
            return len(components) > index + 1 and components[index] == name

        def ends_or_has_token(name: str, index: int) -> bool:
            return len(components) == index or has_token(name, index)

        if not (has_token("in", 2) and ends_or_has_token("where", 4)):
            raise TemplateSyntaxError(
                "'for' statements should use the syntax: `for <x> in <y> [where <condition>]`."
            )

        loop_variables = [name.strip() for name in components[1].split(",")]
        resolvable = parser.compile_resolvable(components[3], token)
        where = parser.compile_expression(components[5:], token) if has_token("where", 4) else None

        nodes = parser.parse(until(["endfor", "empty"]))
        current = parser.next_token()
        if current is None:
            raise TemplateSyntaxError("`endfor` was not found.")

        empty_nodes: List[NodeType] = []
        if current.components[:1] == ["empty"]:
            empty_nodes = parser.parse(until(["endfor"]))
            if parser.next_token() is None:
                raise TemplateSyntaxError("`endfor` was not found.")

        return cls(resolvable, loop_variables, nodes, empty_nodes, where, label, token)

    def render(self, context: Context) -> str:
        values = self._resolve(context)

        if self.where is not None:
            values = [item for item in values if self._matches(item, context)]

        if not values:
            with context.push():
                return render_nodes(self.empty_nodes, context)

        count = len(values)
        result: List[str] = []
        parent_loops = self._parent_loops(context)

        for index, item in enumerate(values):
            forloop: Dict[str, Any] = {
                "first": index == 0,
                "last": index == count - 1,
                "counter": index + 1,
                "counter0": index,
                "length": count,
            }
            if self.label is not None:
                forloop["label"] = self.label
                forloop[self.label] = dict(forloop)
            for name, record in parent_loops.items():
                forloop.setdefault(name, record)

            with context.push({"forloop": forloop}):
                with self._push_value(item, context):
                    result.append(render_nodes(self.nodes, context))
                should_break = self._should_break(context)

            if should_break:
                break

        return "".join(result)

    def _matches(self, item: Any, context: Context) -> bool:
        with self._push_value(item, context):
            return self.where.evaluate(context)

    def _should_break(self, context: Context) -> bool:
        continue_label = context[CONTINUE_KEY]
        if isinstance(continue_label, str):
            # continue внешнего цикла прерывает текущий
            return self.label is None or continue_label != self.label
        return context[BREAK_KEY] is not None

    @staticmethod
    def _parent_loops(context: Context) -> Dict[str, Any]:
        """Записи помеченных внешних циклов."""
        forloop = context["forloop"]
        if not is_mapping(forloop):
            return {}
        return {
            name: record
            for name, record in forloop.items()
            if is_mapping(record) and "label" in record
        }

    @contextmanager
    def _push_value(self, value: Any, context: Context) -> Iterator[None]:
        """
        Добавляет область с переменными цикла для одного элемента.

        Кортеж раскладывается по переменным позиционно (`_` пропускает
        значение), StructuredValue при нескольких переменных по значениям
        полей. Иначе элемент целиком связывается с первой переменной.
        """
        variables: Dict[str, Any]

        if not self.loop_variables:
            variables = {}
        elif isinstance(value, tuple):
            variables = self._destructure(value, list(value))
        elif isinstance(value, StructuredValue) and len(self.loop_variables) > 1:
            variables = self._destructure(value, [field for _, field in value.named_fields()])
        else:
            variables = {self.loop_variables[0]: value}

        with context.push(variables):
            yield

    def _destructure(self, value: Any, elements: List[Any]) -> Dict[str, Any]:
        if len(self.loop_variables) > len(elements):
            raise TemplateSyntaxError(f"Tuple '{value}' has less values than loop variables")
        return {
            name: element
            for name, element in zip(self.loop_variables, elements)
            if name != "_"
        }

    def _resolve(self, context: Context) -> List[Any]:
        resolved = self.resolvable.resolve(context)

        if is_mapping(resolved):
            return sorted(resolved.items(), key=lambda item: item[0])
        if is_sequence(resolved):
            return list(resolved)
        if isinstance(resolved, range):
            return list(resolved)
        if isinstance(resolved, StructuredValue):
            return [tuple(field) for field in resolved.named_fields()]
        return []


class LoopTerminationNode(NodeType):
    """
    `{% break [label] %}` и `{% continue [label] %}`.

    Выставляет флаг в области итерации нужного цикла; render_nodes
    и ForNode проверяют его после каждого узла.
    """

    def __init__(self, name: str, label: Optional[str] = None, token: Optional[Token] = None):
        self.name = name
        self.label = label
        self.token = token

    @property
    def context_key(self) -> str:
        return f"_internal_forloop_{self.name}"

    @classmethod
    def parse(cls, parser: TokenParser, token: Token) -> LoopTerminationNode:
        components = token.components

        if len(components) > 2:
            raise TemplateSyntaxError(f"'{token.contents}' can accept only one parameter")
        if not parser.has_opened_for_tag():
            raise TemplateSyntaxError(f"'{token.contents}' can be used only inside loop body")

        label = components[1] if len(components) == 2 else None
        return cls(components[0], label, token)

    def render(self, context: Context) -> str:
        for frame in reversed(context.frames):
            forloop = frame.get("forloop")
            if not is_mapping(forloop):
                continue
            if self.label is None or forloop.get("label") == self.label:
                frame[self.context_key] = self.label if self.label is not None else True
                return ""

        if self.label is not None:
            raise TemplateSyntaxError(f"No loop labeled '{self.label}' is currently running")
        raise TemplateSyntaxError("No loop is currently running")


__all__ = ["ForNode", "LoopTerminationNode"]
