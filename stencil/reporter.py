"""
Форматирование ошибок шаблонов для вывода пользователю.

    base.html:3:8: error: Unknown filter 'uppercse'. Found similar filters: 'uppercase'.
    <h1>{{ title|uppercse }}</h1>
           ^~~~~~~~~~~~~~~~
"""

from __future__ import annotations

from typing import List, Optional

from .errors import TemplateSyntaxError
from .tokens import Token


class ErrorReporter:
    """Приводит ошибки к TemplateSyntaxError и рендерит их с указанием места."""

    def report_error(
        self,
        error: BaseException,
        template: Optional[str] = None,
        token: Optional[Token] = None,
    ) -> TemplateSyntaxError:
        """
        Приводит любую ошибку к TemplateSyntaxError.

        Уже привязанная к месту ошибка сохраняет своё (более точное) место.

        Args:
            error: Исходная ошибка
            template: Имя шаблона, в котором она возникла
            token: Токен, с которым связать ошибку

        Returns:
            Ошибка шаблона
        """
        if isinstance(error, TemplateSyntaxError):
            if error.token is None:
                error.token = token
            if error.template is None:
                error.template = template
            return error

        return TemplateSyntaxError(str(error), token=token, template=template, parent=error)

    def render_error(self, error: BaseException) -> str:
        """
        Текст ошибки: сначала причина и трасса include/extends, затем
        место самой ошибки.
        """
        if not isinstance(error, TemplateSyntaxError):
            return str(error)

        descriptions: List[str] = []
        if error.parent is not None and isinstance(error.parent, TemplateSyntaxError):
            descriptions.append(self.render_error(error.parent))

        for token in error.stack_trace:
            descriptions.append(self._describe(token, error.reason, error.template))

        if error.token is not None:
            descriptions.append(self._describe(error.token, error.reason, error.template))
        else:
            descriptions.append(error.reason)

        return "\n".join(descriptions)

    @staticmethod
    def _describe(token: Token, reason: str, template: Optional[str]) -> str:
        source_map = token.source_map
        name = source_map.filename or template or "<template>"
        highlight = " " * (source_map.column - 1) + "^" + "~" * max(len(token.contents) - 1, 0)
        return (
            f"{name}:{source_map.line}:{source_map.column}: error: {reason}\n"
            f"{source_map.content}\n"
            f"{highlight}"
        )


__all__ = ["ErrorReporter"]
