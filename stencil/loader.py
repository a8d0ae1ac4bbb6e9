"""
Загрузчики шаблонов по имени.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import TYPE_CHECKING, Iterable, List, Mapping, Sequence, Union

from .errors import SuspiciousFileOperation, TemplateDoesNotExist

if TYPE_CHECKING:
    from .environment import Environment
    from .template import Template

logger = logging.getLogger(__name__)


class Loader(ABC):
    """Источник шаблонов."""

    @abstractmethod
    def load_template(self, name: str, environment: Environment) -> Template:
        """
        Загружает шаблон по имени.

        Raises:
            TemplateDoesNotExist: Если шаблона нет
        """
        pass

    def load_templates(self, names: Sequence[str], environment: Environment) -> Template:
        """
        Загружает первый найденный шаблон из списка имён.

        Raises:
            TemplateDoesNotExist: Если не найден ни один шаблон
        """
        for name in names:
            try:
                return self.load_template(name, environment)
            except TemplateDoesNotExist:
                continue

        raise TemplateDoesNotExist(names, self)


class FileSystemLoader(Loader):
    """
    Загружает шаблоны из файлов в одном или нескольких каталогах.

    Имена шаблонов являются путями относительно каталога. Путь, выходящий
    за пределы каталога (например, через `..`), запрещён.
    """

    def __init__(self, paths: Iterable[Union[str, Path]]):
        self.paths: List[Path] = [Path(path) for path in paths]

    def load_template(self, name: str, environment: Environment) -> Template:
        return self.load_templates([name], environment)

    def load_templates(self, names: Sequence[str], environment: Environment) -> Template:
        for base in self.paths:
            root = base.resolve()
            for name in names:
                template_path = (root / name).resolve()
                if template_path != root and root not in template_path.parents:
                    raise SuspiciousFileOperation(str(base), name)

                if template_path.is_file():
                    logger.debug(f"Loading template '{name}' from {template_path}")
                    content = template_path.read_text(encoding="utf-8")
                    return environment.template_class(content, environment, name)

        raise TemplateDoesNotExist(names, self)

    def __repr__(self) -> str:
        return f"FileSystemLoader({[str(path) for path in self.paths]})"


class DictionaryLoader(Loader):
    """Шаблоны из словаря имя -> исходный текст."""

    def __init__(self, templates: Mapping[str, str]):
        self.templates = dict(templates)

    def load_template(self, name: str, environment: Environment) -> Template:
        content = self.templates.get(name)
        if content is None:
            raise TemplateDoesNotExist([name], self)
        return environment.template_class(content, environment, name)

    def __repr__(self) -> str:
        return f"DictionaryLoader({sorted(self.templates)})"


__all__ = ["Loader", "FileSystemLoader", "DictionaryLoader"]
