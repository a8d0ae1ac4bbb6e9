from pathlib import Path

import pytest

from stencil import Context, Environment

from tests.infrastructure import make_env, write


@pytest.fixture
def env() -> Environment:
    """Окружение без загрузчика шаблонов."""
    return make_env()


@pytest.fixture
def context(env: Environment) -> Context:
    return Context({"name": "Kyle", "items": [1, 2, 3]}, env)


@pytest.fixture
def templates_dir(tmp_path: Path) -> Path:
    """Каталог с шаблонами для FileSystemLoader."""
    root = tmp_path / "templates"
    write(root / "base.html", "Header {% block body %}Base body{% endblock %} Footer")
    write(root / "child.html", '{% extends "base.html" %}{% block body %}Child body{% endblock %}')
    write(root / "partials" / "greeting.html", "Hello {{ name }}!")
    write(tmp_path / "secret.txt", "do not read")
    return root
