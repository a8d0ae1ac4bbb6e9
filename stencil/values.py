"""
Протоколы значений и вспомогательные функции для работы с ними.

Определяет, что может быть вычислено в контексте (Resolvable), как
пользовательские объекты открывают свои поля шаблонам (StructuredValue),
а также приведение значений к строке и числу.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Callable, List, Mapping, Optional, Protocol, Tuple, Union, runtime_checkable

if TYPE_CHECKING:
    from .context import Context

Number = Union[int, float]


class Resolvable(ABC):
    """Всё, что может вычислить значение в заданном контексте."""

    @abstractmethod
    def resolve(self, context: Context) -> Optional[Any]:
        pass


@runtime_checkable
class StructuredValue(Protocol):
    """
    Пользовательское значение, явно открывающее свои поля шаблонам.

    Значения, которые не реализуют этот протокол (и не являются
    словарями, последовательностями или строками), не разрешаются
    по пути `a.b` и не перебираются в `for`.
    """

    def named_fields(self) -> List[Tuple[str, Any]]:
        ...


class LazyValueWrapper(Resolvable):
    """
    Отложенное значение контекста.

    Полезно для данных, которые дорого вычислять и которые нужны
    не при каждом рендеринге. Значение вычисляется один раз.
    """

    def __init__(self, factory: Callable[[Context], Any], context: Optional[Context] = None):
        """
        Args:
            factory: Функция, вычисляющая значение по контексту
            context: Если задан, вычисление идёт по снимку этого контекста,
                иначе по контексту, активному в момент обращения
        """
        self._factory = factory
        self._context = context.copy() if context is not None else None
        self._evaluated = False
        self._value: Any = None

    @classmethod
    def of(cls, factory: Callable[[], Any]) -> LazyValueWrapper:
        """Обёртка для вычислений, которым не нужен контекст."""
        return cls(lambda _: factory())

    def value(self, context: Context) -> Any:
        if not self._evaluated:
            self._value = self._factory(self._context or context)
            self._evaluated = True
        return self._value

    def resolve(self, context: Context) -> Optional[Any]:
        value = self.value(context)
        if isinstance(value, Resolvable):
            return value.resolve(context)
        return value


def is_sequence(value: Any) -> bool:
    """Список или кортеж (строки и словари сюда не относятся)."""
    return isinstance(value, (list, tuple))


def is_mapping(value: Any) -> bool:
    return isinstance(value, Mapping)


def to_number(value: Any) -> Optional[Number]:
    """
    Приводит значение к числу.

    bool числом не считается, хотя в Python это подкласс int.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return value
    return None


def stringify(value: Any) -> str:
    """Строковое представление значения для вывода в шаблон."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if is_sequence(value):
        return "[" + ", ".join(_describe(item) for item in value) + "]"
    return str(value)


def _describe(value: Any) -> str:
    if isinstance(value, str):
        return f'"{value}"'
    if value is None:
        return "nil"
    return stringify(value)


__all__ = [
    "Number",
    "Resolvable",
    "StructuredValue",
    "LazyValueWrapper",
    "is_sequence",
    "is_mapping",
    "to_number",
    "stringify",
]
