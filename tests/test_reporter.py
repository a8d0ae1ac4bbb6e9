"""
Тесты форматирования ошибок шаблонов.
"""

import pytest

from stencil import ErrorReporter, TemplateSyntaxError
from stencil.lexer import tokenize_template

from tests.infrastructure import make_env


class TestErrorReporter:

    def setup_method(self):
        self.reporter = ErrorReporter()

    def test_report_wraps_foreign_errors(self):
        token = tokenize_template("{{ value }}", "index.html")[0]
        cause = ValueError("boom")

        error = self.reporter.report_error(cause, "index.html", token)

        assert isinstance(error, TemplateSyntaxError)
        assert error.reason == "boom"
        assert error.parent is cause
        assert error.template_name == "index.html"

    def test_report_keeps_existing_token(self):
        own, other = tokenize_template("{{ a }}{{ b }}")
        error = TemplateSyntaxError("bad", own)

        reported = self.reporter.report_error(error, "index.html", other)

        assert reported is error
        assert reported.token is own
        assert reported.template == "index.html"

    def test_render_error_with_highlight(self):
        env = make_env()

        with pytest.raises(TemplateSyntaxError) as excinfo:
            env.render_template_string("<h1>{{ title|uppercse }}</h1>")

        assert self.reporter.render_error(excinfo.value) == (
            "<template>:1:8: error: Unknown filter 'uppercse'. Found similar filters: 'uppercase'.\n"
            "<h1>{{ title|uppercse }}</h1>\n"
            "       ^~~~~~~~~~~~~~"
        )

    def test_render_error_without_token(self):
        assert self.reporter.render_error(TemplateSyntaxError("plain")) == "plain"
        assert self.reporter.render_error(ValueError("other")) == "other"

    def test_render_error_with_include_trace(self):
        env = make_env({"inner.html": "{{ x|indent:\"a\" }}"})

        with pytest.raises(TemplateSyntaxError) as excinfo:
            env.render_template_string('{% include "inner.html" %}', {"x": "text"})

        lines = self.reporter.render_error(excinfo.value).split("\n")

        assert lines[0].startswith("inner.html:1:4: error: 'indent' filter width argument")
        assert lines[3].startswith("<template>:1:4: error: 'indent' filter width argument")
        assert lines[4] == '{% include "inner.html" %}'

    def test_render_error_includes_parent(self):
        parent = TemplateSyntaxError("first", tokenize_template("{{ a }}", "a.html")[0])
        error = TemplateSyntaxError("second", parent=parent)

        assert self.reporter.render_error(error).split("\n") == [
            "a.html:1:4: error: first",
            "{{ a }}",
            "   ^",
            "second",
        ]

    def test_render_error_names_unnamed_template(self):
        token = tokenize_template("x\n{{ a }}")[1]

        assert self.reporter.render_error(TemplateSyntaxError("bad", token)).split("\n")[0] == (
            "<template>:2:4: error: bad"
        )
        assert self.reporter.render_error(TemplateSyntaxError("bad", token, template="page.html")).split("\n")[0] == (
            "page.html:2:4: error: bad"
        )
