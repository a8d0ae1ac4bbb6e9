"""
Тесты тега include.
"""

import pytest

from stencil import TemplateDoesNotExist, TemplateSyntaxError

from tests.infrastructure import make_env, render


@pytest.fixture
def include_env():
    return make_env({
        "greeting.html": "Hello {{ name }}!",
        "broken.html": "line\n{{ value|indent:\"x\" }}",
        "nested.html": '[{% include "greeting.html" %}]',
    })


class TestIncludeTag:

    def test_include_uses_current_context(self, include_env):
        output = render('{% include "greeting.html" %}', {"name": "Kyle"}, include_env)

        assert output == "Hello Kyle!"

    def test_include_with_context_variable(self, include_env):
        template = '{% include "greeting.html" user %}{{ name }}'

        output = render(template, {"name": "Kyle", "user": {"name": "Ann"}}, include_env)

        assert output == "Hello Ann!Kyle"

    def test_include_using_form(self, include_env):
        template = '{% include "greeting.html" using user %}'

        assert render(template, {"user": {"name": "Ann"}}, include_env) == "Hello Ann!"

    def test_dynamic_template_name(self, include_env):
        output = render("{% include tpl %}", {"tpl": "greeting.html", "name": "Kyle"}, include_env)

        assert output == "Hello Kyle!"

    def test_nested_include(self, include_env):
        assert render('{% include "nested.html" %}', {"name": "Kyle"}, include_env) == "[Hello Kyle!]"

    def test_name_must_be_string(self, include_env):
        with pytest.raises(TemplateSyntaxError, match="'tpl' could not be resolved as a string"):
            render("{% include tpl %}", {}, include_env)

    def test_missing_template(self, include_env):
        with pytest.raises(TemplateDoesNotExist) as excinfo:
            render('{% include "missing.html" %}', {}, include_env)

        assert excinfo.value.template_names == ["missing.html"]

    def test_invalid_arguments(self, include_env):
        with pytest.raises(TemplateSyntaxError, match="'include' tag requires one argument"):
            render("{% include %}", {}, include_env)
        with pytest.raises(TemplateSyntaxError, match="'include' tag requires one argument"):
            render('{% include "a" with b %}', {}, include_env)

    def test_error_in_included_template_carries_trace(self, include_env):
        with pytest.raises(TemplateSyntaxError) as excinfo:
            render('{% include "broken.html" %}', {"value": "text"}, include_env)

        error = excinfo.value
        assert "width argument must be an Integer" in error.reason
        assert error.token.contents == 'include "broken.html"'
        assert [token.source_map.filename for token in error.stack_trace] == ["broken.html"]
        assert error.stack_trace[0].source_map.line == 2
