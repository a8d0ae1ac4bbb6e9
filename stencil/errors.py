"""
Иерархия ошибок шаблонизатора.

Все ожидаемые ошибки, которые должны показываться пользователю
в виде понятных сообщений, наследуются от TemplateError.

Ошибки программирования и баги НЕ наследуются от TemplateError:
они распространяются с полным трейсбеком.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, List, Optional, Sequence

if TYPE_CHECKING:
    from .tokens import Token


class TemplateError(Exception):
    """
    Базовый класс для всех пользовательских ошибок шаблонизатора.

    Означает проблему, которую пользователь может исправить:
    синтаксис шаблона, отсутствующий шаблон, неверная конфигурация.
    """
    pass


class TemplateSyntaxError(TemplateError):
    """
    Ошибка синтаксиса или вычисления шаблона.

    Хранит всё необходимое для построения диагностики без повторного
    обхода стека вызовов: причину, токен, имя шаблона, исходную ошибку
    и накопленную трассу токенов через границы include/extends.
    """

    def __init__(
        self,
        reason: str,
        token: Optional[Token] = None,
        stack_trace: Optional[Sequence[Token]] = None,
        template: Optional[str] = None,
        parent: Optional[BaseException] = None,
    ):
        super().__init__(reason)
        self.reason = reason
        self.token = token
        self.stack_trace: List[Token] = list(stack_trace or [])
        self.template = template
        self.parent = parent

    @property
    def template_name(self) -> Optional[str]:
        """Имя шаблона, в котором находится токен ошибки."""
        if self.token is not None:
            return self.token.source_map.filename
        return self.template

    @property
    def all_tokens(self) -> List[Token]:
        """Трасса токенов вместе с собственным токеном ошибки."""
        if self.token is None:
            return list(self.stack_trace)
        return self.stack_trace + [self.token]

    def with_token(self, token: Optional[Token]) -> TemplateSyntaxError:
        """Привязывает токен, только если ошибка ещё не привязана к месту."""
        if self.token is None:
            self.token = token
        return self

    def __str__(self) -> str:
        return self.reason

    def __repr__(self) -> str:
        return f"TemplateSyntaxError({self.reason!r}, token={self.token!r})"


class TemplateDoesNotExist(TemplateError):
    """Ни один загрузчик не нашёл шаблон с указанным именем (именами)."""

    def __init__(self, template_names: Sequence[str], loader: Any = None):
        self.template_names = list(template_names)
        self.loader = loader
        templates = ", ".join(self.template_names)
        if loader is None:
            message = f"Template named `{templates}` does not exist. No loaders found"
        else:
            message = f"Template named `{templates}` does not exist in loader {loader}"
        super().__init__(message)


class SuspiciousFileOperation(TemplateError):
    """Путь шаблона выходит за пределы корня загрузчика."""

    def __init__(self, base_path: str, path: str):
        self.base_path = base_path
        self.path = path
        super().__init__(f"Path `{path}` is located outside of base path `{base_path}`")


def attach_token(error: BaseException, token: Optional[Token]) -> BaseException:
    """
    Привязывает токен к ошибке, возникшей при раскрытии тега или рендеринге узла.

    Синтаксическая ошибка сохраняет свой (более точный) токен, если он уже есть.
    Ошибки пользовательского кода (фильтры, простые теги) оборачиваются
    в TemplateSyntaxError. Прочие ошибки шаблонизатора возвращаются как есть.
    """
    if isinstance(error, TemplateSyntaxError):
        return error.with_token(token)
    if isinstance(error, TemplateError):
        return error
    wrapped = TemplateSyntaxError(str(error), token=token)
    wrapped.__cause__ = error
    return wrapped


__all__ = [
    "TemplateError",
    "TemplateSyntaxError",
    "TemplateDoesNotExist",
    "SuspiciousFileOperation",
    "attach_token",
]
