"""
Окружение шаблонизатора.

Объединяет загрузчик шаблонов, расширения с тегами и фильтрами,
политику обрезки пробелов и форматирование ошибок.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from pathlib import Path
from typing import Any, Iterable, List, Mapping, Optional, Sequence, Type, Union

from .config import load_config
from .errors import TemplateDoesNotExist, TemplateError, TemplateSyntaxError
from .expressions import Expression, parse_expression
from .extension import DefaultExtension, Extension, Filter
from .loader import FileSystemLoader, Loader
from .parser import TagParser, suggest_names
from .reporter import ErrorReporter
from .template import Template
from .tokens import Token
from .trim import NOTHING, TrimBehaviour
from .values import Resolvable
from .variable import FilterExpression, RangeVariable

logger = logging.getLogger(__name__)


class Environment:
    """
    Окружение, в котором загружаются и рендерятся шаблоны.

    Пользовательские расширения проверяются в порядке передачи,
    встроенное DefaultExtension идёт последним.
    """

    def __init__(
        self,
        loader: Optional[Loader] = None,
        extensions: Optional[Iterable[Extension]] = None,
        template_class: Type[Template] = Template,
        trim_behaviour: TrimBehaviour = NOTHING,
        error_reporter: Optional[ErrorReporter] = None,
    ):
        """
        Args:
            loader: Загрузчик шаблонов для include/extends и render_template
            extensions: Пользовательские расширения
            template_class: Класс, экземпляры которого создают загрузчики
            trim_behaviour: Политика обрезки пробелов вокруг блочных тегов
            error_reporter: Форматирование ошибок
        """
        self.loader = loader
        self.extensions: List[Extension] = list(extensions or []) + [DefaultExtension()]
        self.template_class = template_class
        self.trim_behaviour = trim_behaviour
        self.error_reporter = error_reporter or ErrorReporter()

    @classmethod
    def from_config(
        cls,
        path: Optional[Union[str, Path]] = None,
        extensions: Optional[Iterable[Extension]] = None,
    ) -> Environment:
        """
        Создаёт окружение по YAML-конфигурации (см. stencil.config).

        Шаблоны загружаются из каталогов template_dirs.
        """
        config = load_config(Path(path) if path is not None else None)
        logger.debug(f"Environment from config: dirs={config.template_dirs}, trim={config.trim_behaviour}")
        return cls(
            loader=FileSystemLoader(config.template_dirs),
            extensions=extensions,
            trim_behaviour=config.trim_behaviour,
        )

    # ---------------------------------------------------------------- #
    # Шаблоны
    # ---------------------------------------------------------------- #

    def load_template(self, name: str) -> Template:
        """
        Raises:
            TemplateDoesNotExist: Если загрузчика нет или он не нашёл шаблон
        """
        if self.loader is None:
            raise TemplateDoesNotExist([name])
        return self.loader.load_template(name, self)

    def load_templates(self, names: Sequence[str]) -> Template:
        if self.loader is None:
            raise TemplateDoesNotExist(names)
        return self.loader.load_templates(names, self)

    def render_template(self, name: str, context: Optional[Mapping[str, Any]] = None) -> str:
        """Загружает шаблон по имени и рендерит его."""
        return self._render(self.load_template(name), context)

    def render_template_string(self, source: str, context: Optional[Mapping[str, Any]] = None) -> str:
        """Рендерит шаблон из строки."""
        return self._render(self.template_class(source, self), context)

    def _render(self, template: Template, context: Optional[Mapping[str, Any]]) -> str:
        """
        Рендерит шаблон верхнего уровня.

        Ошибки проходят через error_reporter, который привязывает их к имени
        шаблона. Отсутствующий шаблон и недопустимый путь пробрасываются как есть.
        """
        template.environment = self
        try:
            return template.render(context)
        except TemplateSyntaxError as error:
            raise self.error_reporter.report_error(error, template.name)
        except TemplateError:
            raise
        except Exception as error:
            raise self.error_reporter.report_error(error, template.name) from error

    # ---------------------------------------------------------------- #
    # Реестры
    # ---------------------------------------------------------------- #

    def find_tag(self, name: str) -> TagParser:
        """
        Raises:
            TemplateSyntaxError: Если тег не зарегистрирован
        """
        for extension in self.extensions:
            if name in extension.tags:
                return extension.tags[name]

        names = [tag for extension in self.extensions for tag in extension.tags]
        raise TemplateSyntaxError(_unknown_message("template tag", "tags", name, names))

    def find_filter(self, name: str) -> Filter:
        """
        Raises:
            TemplateSyntaxError: Если фильтр не зарегистрирован
        """
        for extension in self.extensions:
            if name in extension.filters:
                return extension.filters[name]

        names = [filter_ for extension in self.extensions for filter_ in extension.filters]
        raise TemplateSyntaxError(_unknown_message("filter", "filters", name, names))

    # ---------------------------------------------------------------- #
    # Компиляция выражений
    # ---------------------------------------------------------------- #

    def compile_filter(self, filter_token: str, contained_in: Optional[Token] = None) -> Resolvable:
        """
        Компилирует переменную с фильтрами.

        Ошибке без позиции назначается позиция выражения внутри
        содержащего токена, чтобы подсвечивалось только оно.
        """
        try:
            return FilterExpression(filter_token, self)
        except TemplateSyntaxError as error:
            if error.token is None and contained_in is not None:
                error.token = _sub_token(filter_token, contained_in)
            raise

    def compile_resolvable(self, text: str, contained_in: Optional[Token] = None) -> Resolvable:
        """Диапазон `a...b` или переменная с фильтрами."""
        range_variable = RangeVariable.parse(text, self, contained_in)
        if range_variable is not None:
            return range_variable
        return self.compile_filter(text, contained_in)

    def compile_expression(self, components: Sequence[str], contained_in: Optional[Token] = None) -> Expression:
        return parse_expression(components, self, contained_in)

    def __repr__(self) -> str:
        return f"Environment(loader={self.loader!r}, extensions={len(self.extensions)})"


def _unknown_message(kind: str, plural: str, name: str, candidates: List[str]) -> str:
    suggestions = suggest_names(name, candidates)
    if not suggestions:
        return f"Unknown {kind} '{name}'."
    found = ", ".join(f"'{suggestion}'" for suggestion in suggestions)
    return f"Unknown {kind} '{name}'. Found similar {plural}: {found}."


def _sub_token(text: str, container: Token) -> Token:
    """Токен для фрагмента содержимого другого токена."""
    offset = container.contents.find(text)
    if offset < 0:
        return container

    source_map = container.source_map
    start = source_map.span[0] + offset
    return Token.variable(
        text,
        replace(source_map, column=source_map.column + offset, span=(start, start + len(text))),
    )


__all__ = ["Environment"]
