"""
Тесты цикла for, его записи forloop и тегов break/continue.
"""

from typing import Any, List, Tuple

import pytest

from stencil import TemplateSyntaxError

from tests.infrastructure import render


class Point:
    def __init__(self, x: int, y: int):
        self.x = x
        self.y = y

    def named_fields(self) -> List[Tuple[str, Any]]:
        return [("x", self.x), ("y", self.y)]


class TestForTag:

    def test_iterates_items(self):
        assert render("{% for i in items %}{{ i }}{% endfor %}", {"items": [1, 2, 3]}) == "123"

    def test_forloop_counters(self):
        template = (
            "{% for i in items %}"
            "{{ forloop.counter }}{{ forloop.counter0 }}{{ forloop.length }}"
            "{% if forloop.first %}F{% endif %}{% if forloop.last %}L{% endif %};"
            "{% endfor %}"
        )

        assert render(template, {"items": ["a", "b", "c"]}) == "103F;213;323L;"

    def test_empty_branch(self):
        template = "{% for i in items %}{{ i }}{% empty %}none{% endfor %}"

        assert render(template, {"items": []}) == "none"
        assert render(template, {}) == "none"
        assert render(template, {"items": 5}) == "none"
        assert render(template, {"items": [1]}) == "1"

    def test_where_filter(self):
        template = "{% for i in items where i > 1 %}{{ i }}{{ forloop.length }};{% endfor %}"

        assert render(template, {"items": [1, 2, 3]}) == "22;32;"

    def test_where_filter_excluding_everything(self):
        template = "{% for i in items where i > 5 %}{{ i }}{% empty %}none{% endfor %}"

        assert render(template, {"items": [1, 2]}) == "none"

    def test_mapping_is_sorted_by_key(self):
        template = "{% for key, value in mapping %}{{ key }}={{ value }};{% endfor %}"

        assert render(template, {"mapping": {"b": 2, "a": 1}}) == "a=1;b=2;"

    def test_tuple_destructuring_with_placeholder(self):
        template = "{% for _, number in pairs %}{{ number }}{% endfor %}"

        assert render(template, {"pairs": [("a", 1), ("b", 2)]}) == "12"

    def test_tuple_with_too_few_values(self):
        with pytest.raises(TemplateSyntaxError, match="has less values than loop variables"):
            render("{% for a, b, c in pairs %}{% endfor %}", {"pairs": [("a", 1)]})

    def test_structured_value_destructuring(self):
        template = "{% for x, y in points %}({{ x }},{{ y }}){% endfor %}"

        assert render(template, {"points": [Point(1, 2), Point(3, 4)]}) == "(1,2)(3,4)"

    def test_structured_value_fields_are_iterated(self):
        template = "{% for name, value in point %}{{ name }}={{ value }} {% endfor %}"

        assert render(template, {"point": Point(1, 2)}) == "x=1 y=2 "

    def test_python_range(self):
        assert render("{% for i in numbers %}{{ i }}{% endfor %}", {"numbers": range(3)}) == "012"

    def test_loop_variables_do_not_leak(self):
        template = "{% for name in items %}{{ name }}{% endfor %}{{ name }}"

        assert render(template, {"items": ["a"], "name": "Kyle"}) == "aKyle"

    def test_nested_loops(self):
        template = "{% for i in items %}{% for j in items %}{{ i }}{{ j }} {% endfor %}{% endfor %}"

        assert render(template, {"items": [1, 2]}) == "11 12 21 22 "


class TestForTagSyntax:

    @pytest.mark.parametrize("source", [
        "{% for x items %}{% endfor %}",
        "{% for x in %}{% endfor %}",
        "{% for x in items where %}{% endfor %}",
        "{% for x in items extra stuff %}{% endfor %}",
    ])
    def test_invalid_syntax(self, source):
        with pytest.raises(TemplateSyntaxError, match="'for' statements should use the syntax"):
            render(source)

    def test_missing_endfor(self):
        with pytest.raises(TemplateSyntaxError, match="`endfor` was not found."):
            render("{% for x in items %}{{ x }}")

    def test_missing_endfor_after_empty(self):
        with pytest.raises(TemplateSyntaxError, match="`endfor` was not found."):
            render("{% for x in items %}{{ x }}{% empty %}none")


class TestLoopTermination:

    def test_break(self):
        template = "{% for i in items %}{% if i == 2 %}{% break %}{% endif %}{{ i }}{% endfor %}"

        assert render(template, {"items": [1, 2, 3]}) == "1"

    def test_continue(self):
        template = "{% for i in items %}{% if i == 2 %}{% continue %}{% endif %}{{ i }}{% endfor %}"

        assert render(template, {"items": [1, 2, 3]}) == "13"

    def test_break_outer_loop(self):
        template = (
            "{% outer: for i in items %}"
            "{% for j in items %}"
            "{% if j == 2 %}{% break outer %}{% endif %}{{ i }}{{ j }};"
            "{% endfor %}"
            "-{% endfor %}"
        )

        assert render(template, {"items": [1, 2, 3]}) == "11;"

    def test_continue_outer_loop(self):
        template = (
            "{% outer: for i in items %}"
            "{% for j in items %}"
            "{% if j == 2 %}{% continue outer %}{% endif %}{{ i }}{{ j }};"
            "{% endfor %}"
            "-{% endfor %}"
        )

        assert render(template, {"items": [1, 2, 3]}) == "11;21;31;"

    def test_break_inner_loop_only(self):
        template = (
            "{% for i in items %}"
            "{% for j in items %}{% if j == 2 %}{% break %}{% endif %}{{ j }}{% endfor %}"
            "{{ i }};"
            "{% endfor %}"
        )

        assert render(template, {"items": [1, 2]}) == "11;12;"

    def test_labelled_forloop_record(self):
        template = (
            "{% outer: for i in items %}"
            "{% for j in items %}{{ forloop.outer.counter }}{{ forloop.counter }} {% endfor %}"
            "{% endfor %}"
        )

        assert render(template, {"items": [1, 2]}) == "11 12 21 22 "

    def test_break_outside_loop(self):
        with pytest.raises(TemplateSyntaxError, match="'break' can be used only inside loop body"):
            render("{% break %}")

    def test_continue_after_loop_closed(self):
        with pytest.raises(TemplateSyntaxError, match="'continue' can be used only inside loop body"):
            render("{% for i in items %}{% endfor %}{% continue %}")

    def test_too_many_parameters(self):
        with pytest.raises(TemplateSyntaxError, match="'break a b' can accept only one parameter"):
            render("{% for i in items %}{% break a b %}{% endfor %}")

    def test_unknown_label(self):
        with pytest.raises(TemplateSyntaxError, match="No loop labeled 'nope' is currently running"):
            render("{% for i in items %}{% break nope %}{% endfor %}", {"items": [1]})
