"""
Тесты наследования шаблонов: extends, block и block.super.
"""

import pytest

from stencil import TemplateDoesNotExist, TemplateSyntaxError

from tests.infrastructure import make_env


@pytest.fixture
def inheritance_env():
    return make_env({
        "base": "{% block body %}base{% endblock %}",
        "layout": "<{% block body %}base{% endblock %}>",
        "middle": '{% extends "layout" %}{% block body %}middle+{{ block.super }}{% endblock %}',
        "page": "A{% block a %}1{% endblock %}B{% block b %}2{% endblock %}",
        "cached": "{% block body %}base{% endblock %}|{{ block.body }}",
        "broken": '{% block body %}{{ value|indent:"x" }}{% endblock %}',
    })


class TestInheritance:

    def test_child_overrides_block(self, inheritance_env):
        template = '{% extends "base" %}{% block body %}child{% endblock %}'

        assert inheritance_env.render_template_string(template) == "child"

    def test_block_super(self, inheritance_env):
        template = '{% extends "base" %}{% block body %}[{{ block.super }}]{% endblock %}'

        assert inheritance_env.render_template_string(template) == "[base]"

    def test_base_renders_standalone(self, inheritance_env):
        assert inheritance_env.render_template("layout") == "<base>"

    def test_three_levels(self, inheritance_env):
        template = '{% extends "middle" %}{% block body %}child+{{ block.super }}{% endblock %}'

        assert inheritance_env.render_template_string(template) == "<child+middle+base>"

    def test_middle_level_alone(self, inheritance_env):
        assert inheritance_env.render_template("middle") == "<middle+base>"

    def test_non_overridden_blocks_keep_defaults(self, inheritance_env):
        template = '{% extends "page" %}{% block b %}x{% endblock %}'

        assert inheritance_env.render_template_string(template) == "A1Bx"

    def test_content_outside_blocks_is_ignored(self, inheritance_env):
        template = '{% extends "base" %}ignored{% block body %}child{% endblock %}ignored'

        assert inheritance_env.render_template_string(template) == "child"

    def test_rendered_blocks_are_cached(self, inheritance_env):
        template = '{% extends "cached" %}{% block body %}child{% endblock %}'

        assert inheritance_env.render_template_string(template) == "child|child"

    def test_child_sees_context(self, inheritance_env):
        template = '{% extends "base" %}{% block body %}{{ name }}{% endblock %}'

        assert inheritance_env.render_template_string(template, {"name": "Kyle"}) == "Kyle"

    def test_dynamic_parent_name(self, inheritance_env):
        template = "{% extends parent %}{% block body %}child{% endblock %}"

        assert inheritance_env.render_template_string(template, {"parent": "layout"}) == "<child>"


class TestInheritanceErrors:

    def test_duplicate_extends(self, inheritance_env):
        with pytest.raises(TemplateSyntaxError, match="'extends' cannot appear more than once"):
            inheritance_env.render_template_string('{% extends "base" %}{% extends "base" %}')

    def test_extends_arguments(self, inheritance_env):
        with pytest.raises(TemplateSyntaxError, match="'extends' takes one argument"):
            inheritance_env.render_template_string("{% extends %}")

    def test_block_arguments(self, inheritance_env):
        with pytest.raises(TemplateSyntaxError, match="'block' tag takes one argument"):
            inheritance_env.render_template_string("{% block %}{% endblock %}")

    def test_missing_endblock(self, inheritance_env):
        with pytest.raises(TemplateSyntaxError, match="`endblock` was not found."):
            inheritance_env.render_template_string("{% block body %}x")

    def test_missing_parent(self, inheritance_env):
        with pytest.raises(TemplateDoesNotExist):
            inheritance_env.render_template_string('{% extends "missing" %}')

    def test_parent_name_must_be_string(self, inheritance_env):
        with pytest.raises(TemplateSyntaxError, match="'parent' could not be resolved as a string"):
            inheritance_env.render_template_string("{% extends parent %}")

    def test_error_in_parent_block_carries_trace(self, inheritance_env):
        template = '{% extends "broken" %}'

        with pytest.raises(TemplateSyntaxError) as excinfo:
            inheritance_env.render_template_string(template, {"value": "text"})

        error = excinfo.value
        assert "width argument must be an Integer" in error.reason
        assert error.token.contents == 'extends "broken"'
        assert error.stack_trace[-1].source_map.filename == "broken"

    def test_error_in_override_points_to_child_block(self, inheritance_env):
        template = '{% extends "base" %}{% block body %}{{ value|indent:"x" }}{% endblock %}'

        with pytest.raises(TemplateSyntaxError) as excinfo:
            inheritance_env.render_template_string(template, {"value": "text"})

        error = excinfo.value
        assert error.token.contents == "block body"
        assert [token.contents for token in error.stack_trace] == ['value|indent:"x"']
