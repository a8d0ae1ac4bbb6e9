"""
Утилиты для рендеринга шаблонов в тестах.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, Mapping, Optional

from stencil import DictionaryLoader, Environment, Extension
from stencil.trim import NOTHING, TrimBehaviour


def make_env(
    templates: Optional[Mapping[str, str]] = None,
    extensions: Optional[Iterable[Extension]] = None,
    trim_behaviour: TrimBehaviour = NOTHING,
) -> Environment:
    """
    Окружение с шаблонами в памяти.

    Args:
        templates: Словарь имя -> исходный текст для include/extends
        extensions: Пользовательские расширения
        trim_behaviour: Политика обрезки пробелов
    """
    return Environment(
        loader=DictionaryLoader(templates or {}),
        extensions=extensions,
        trim_behaviour=trim_behaviour,
    )


def render(
    source: str,
    context: Optional[Dict[str, Any]] = None,
    env: Optional[Environment] = None,
) -> str:
    """Рендерит шаблон из строки."""
    env = env or make_env()
    return env.render_template_string(source, context or {})
