"""
Общая инфраструктура тестов.

Modules:
- file_utils: создание файлов шаблонов и конфигов
- rendering_utils: рендеринг шаблонов из строк и словарей
"""

from .file_utils import write
from .rendering_utils import make_env, render

__all__ = ["write", "make_env", "render"]
