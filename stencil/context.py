"""
Контекст рендеринга.

Стек областей видимости переменных: поиск идёт от самой новой области
к самой старой, вложенные области гарантированно снимаются при выходе.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import TYPE_CHECKING, Any, Dict, Iterator, List, Mapping, Optional

if TYPE_CHECKING:
    from .environment import Environment


class Context:
    """
    Контейнер переменных шаблона.

    Каждая область представляет собой словарь имя -> значение. Значение None, явно
    записанное в более новую область, скрывает одноимённую переменную
    из старых областей.
    """

    def __init__(
        self,
        dictionary: Optional[Mapping[str, Any]] = None,
        environment: Optional[Environment] = None,
    ):
        """
        Args:
            dictionary: Данные корневой области
            environment: Окружение с расширениями и загрузчиком
        """
        if environment is None:
            from .environment import Environment
            environment = Environment()

        self.environment = environment
        self.frames: List[Dict[str, Any]] = [dict(dictionary or {})]

    def __getitem__(self, key: str) -> Optional[Any]:
        for frame in reversed(self.frames):
            if key in frame:
                return frame[key]
        return None

    def get(self, key: str, default: Any = None) -> Any:
        value = self[key]
        return default if value is None else value

    def __contains__(self, key: str) -> bool:
        return any(key in frame for frame in self.frames)

    def __setitem__(self, key: str, value: Any) -> None:
        """Записывает переменную в текущую (самую новую) область."""
        self.frames[-1][key] = value

    def __delitem__(self, key: str) -> None:
        """Скрывает переменную в текущей области, не трогая старые."""
        self[key] = None

    @contextmanager
    def push(self, dictionary: Optional[Mapping[str, Any]] = None) -> Iterator[Context]:
        """
        Добавляет новую область на время блока with.

        При выходе стек восстанавливается в точности, в том числе при
        исключении и если внутри блока области не были сняты.

        Args:
            dictionary: Переменные новой области
        """
        depth = len(self.frames)
        self.frames.append(dict(dictionary) if dictionary else {})
        try:
            yield self
        finally:
            del self.frames[depth:]

    def flatten(self) -> Dict[str, Any]:
        """
        Сводит все области в один словарь, более новые перекрывают старые.

        Явно удалённые (None) значения не попадают в результат.
        """
        accumulator: Dict[str, Any] = {}
        for frame in self.frames:
            for key, value in frame.items():
                if value is None:
                    accumulator.pop(key, None)
                else:
                    accumulator[key] = value
        return accumulator

    def cache_block(self, name: str, content: str) -> None:
        """
        Сохраняет отрендеренный блок в корневой области,
        чтобы его можно было вывести через `{{ block.name }}`.
        """
        root = self.frames[0]
        if not isinstance(root.get("block"), dict):
            root["block"] = {}
        root["block"][name] = content

    def copy(self) -> Context:
        """Снимок стека областей (сами значения не копируются)."""
        clone = Context(environment=self.environment)
        clone.frames = [dict(frame) for frame in self.frames]
        return clone

    def __repr__(self) -> str:
        return f"Context({self.frames!r})"


__all__ = ["Context"]
