"""
Расширения: реестры тегов и фильтров.

Окружение ищет тег или фильтр по всем расширениям по порядку,
побеждает первое совпадение. DefaultExtension со встроенными тегами
и фильтрами всегда проверяется последним.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from . import filters
from .context import Context
from .errors import TemplateSyntaxError
from .nodes import SimpleNode
from .parser import TagParser
from .tags import BlockNode, ExtendsNode, FilterNode, ForNode, IfNode, IncludeNode, LoopTerminationNode

logger = logging.getLogger(__name__)


class FilterKind(enum.Enum):
    SIMPLE = "simple"          # value -> result
    ARGUMENTS = "arguments"    # (value, arguments, context) -> result


@dataclass(frozen=True)
class Filter:
    """Зарегистрированный фильтр."""
    kind: FilterKind
    function: Callable[..., Any]

    def invoke(self, value: Any, arguments: List[Any], context: Context) -> Any:
        """
        Вызывает фильтр.

        Raises:
            TemplateSyntaxError: Если фильтру без аргументов переданы аргументы
        """
        if self.kind is FilterKind.SIMPLE:
            if arguments:
                raise TemplateSyntaxError("Can't invoke filter with an argument")
            return self.function(value)
        return self.function(value, arguments, context)


class Extension:
    """Контейнер пользовательских тегов и фильтров."""

    def __init__(self):
        self.tags: Dict[str, TagParser] = {}
        self.filters: Dict[str, Filter] = {}

    def register_tag(self, name: str, parser: TagParser) -> None:
        """
        Регистрирует тег.

        Args:
            name: Имя тега (первое слово в `{% ... %}`)
            parser: Функция (TokenParser, Token) -> NodeType
        """
        if name in self.tags:
            logger.warning(f"Tag '{name}' overwrites existing tag")
        self.tags[name] = parser
        logger.debug(f"Registered tag '{name}'")

    def register_simple_tag(self, name: str, handler: Callable[[Context], Any]) -> None:
        """Регистрирует тег без тела, вывод которого равен результату handler(context)."""
        self.register_tag(name, lambda parser, token: SimpleNode(handler, token))

    def register_filter(self, name: str, filter_: Callable[[Any], Any]) -> None:
        """Регистрирует фильтр без аргументов."""
        self._set_filter(name, Filter(FilterKind.SIMPLE, filter_))

    def register_filter_with_arguments(self, name: str, filter_: Callable[[Any, List[Any]], Any]) -> None:
        """Регистрирует фильтр, принимающий значение и список аргументов."""
        self._set_filter(
            name,
            Filter(FilterKind.ARGUMENTS, lambda value, arguments, context: filter_(value, arguments)),
        )

    def register_context_filter(self, name: str, filter_: Callable[[Any, List[Any], Context], Any]) -> None:
        """Регистрирует фильтр, которому нужен ещё и контекст рендеринга."""
        self._set_filter(name, Filter(FilterKind.ARGUMENTS, filter_))

    def register_boolean_filter(
        self,
        name: str,
        negative_name: str,
        filter_: Callable[[Any], Optional[bool]],
    ) -> None:
        """
        Регистрирует логический фильтр вместе с его отрицанием.

        Если фильтр вернул None, отрицание тоже вернёт None.
        """
        def negative(value: Any) -> Optional[bool]:
            result = filter_(value)
            return None if result is None else not result

        self.register_filter(name, filter_)
        self.register_filter(negative_name, negative)

    def _set_filter(self, name: str, filter_: Filter) -> None:
        if name in self.filters:
            logger.warning(f"Filter '{name}' overwrites existing filter")
        self.filters[name] = filter_
        logger.debug(f"Registered filter '{name}'")


class DefaultExtension(Extension):
    """Встроенные теги и фильтры."""

    def __init__(self):
        super().__init__()
        self._register_default_tags()
        self._register_default_filters()

    def _register_default_tags(self) -> None:
        self.register_tag("for", ForNode.parse)
        self.register_tag("break", LoopTerminationNode.parse)
        self.register_tag("continue", LoopTerminationNode.parse)
        self.register_tag("if", IfNode.parse)
        self.register_tag("ifnot", IfNode.parse_ifnot)
        self.register_tag("include", IncludeNode.parse)
        self.register_tag("extends", ExtendsNode.parse)
        self.register_tag("block", BlockNode.parse)
        self.register_tag("filter", FilterNode.parse)

    def _register_default_filters(self) -> None:
        self.register_filter_with_arguments("default", filters.default)
        self.register_filter("capitalize", filters.capitalize)
        self.register_filter("uppercase", filters.uppercase)
        self.register_filter("lowercase", filters.lowercase)
        self.register_filter_with_arguments("join", filters.join)
        self.register_filter_with_arguments("split", filters.split)
        self.register_filter_with_arguments("indent", filters.indent)
        self.register_context_filter("filter", filters.filter_)
        self.register_filter("unique", filters.unique)


__all__ = ["Extension", "DefaultExtension", "Filter", "FilterKind"]
