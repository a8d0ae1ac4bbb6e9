"""
Тесты встроенных фильтров.
"""

import pytest

from stencil import TemplateSyntaxError
from stencil import filters

from tests.infrastructure import render


class TestCaseFilters:

    def test_capitalize_each_word(self):
        assert filters.capitalize("hello world") == "Hello World"
        assert filters.capitalize("hELLO") == "Hello"

    def test_case_filters_map_over_lists(self):
        assert filters.capitalize(["ab", "cd"]) == ["Ab", "Cd"]
        assert filters.uppercase(["ab", 1]) == ["AB", "1"]
        assert filters.lowercase(["AB"]) == ["ab"]

    def test_non_strings_are_stringified(self):
        assert filters.uppercase(5) == "5"
        assert filters.lowercase(None) == ""

    def test_in_template(self):
        assert render("{{ name|uppercase }} {{ name|lowercase }}", {"name": "Kyle"}) == "KYLE kyle"


class TestDefaultFilter:

    def test_present_value_is_kept(self):
        assert render('{{ name|default:"x" }}', {"name": "Kyle"}) == "Kyle"

    def test_missing_value_uses_first_present_argument(self):
        assert render('{{ missing|default:a,b,"c" }}', {"b": "B"}) == "B"
        assert render('{{ missing|default:a,b,"c" }}') == "c"

    def test_falsy_value_is_kept(self):
        assert render('{{ flag|default:"x" }}', {"flag": False}) == "false"


class TestJoinSplit:

    def test_join(self):
        assert render('{{ value|join:", " }}', {"value": ["One", "Two"]}) == "One, Two"
        assert render("{{ value|join }}", {"value": ["a", "b"]}) == "ab"

    def test_join_non_sequence_passes_through(self):
        assert render('{{ value|join:"," }}', {"value": "text"}) == "text"

    def test_join_takes_single_argument(self):
        with pytest.raises(TemplateSyntaxError, match="'join' filter takes a single argument"):
            render('{{ value|join:"a","b" }}', {"value": ["x"]})

    def test_split(self):
        assert filters.split("a b c", []) == ["a", "b", "c"]
        assert filters.split("a,b", [","]) == ["a", "b"]
        assert filters.split(5, []) == 5

    def test_split_and_join(self):
        assert render('{{ value|split:","|join:"-" }}', {"value": "a,b"}) == "a-b"


class TestIndentFilter:

    def test_default_width(self):
        assert filters.indent("a\nb", []) == "a\n    b"

    def test_empty_lines_are_not_indented(self):
        assert filters.indent("a\nb\n\nc", [2]) == "a\n  b\n\n  c"

    def test_custom_character_and_first_line(self):
        assert filters.indent("a\nb", [2, "-", True]) == "--a\n--b"

    def test_argument_types(self):
        with pytest.raises(TemplateSyntaxError, match="width argument must be an Integer"):
            filters.indent("a", ["x"])
        with pytest.raises(TemplateSyntaxError, match="indentation argument must be a String"):
            filters.indent("a", [2, 3])
        with pytest.raises(TemplateSyntaxError, match="indentFirst argument must be a Bool"):
            filters.indent("a", [2, " ", "yes"])
        with pytest.raises(TemplateSyntaxError, match="at most 3 arguments"):
            filters.indent("a", [2, " ", True, 4])

    def test_in_template(self):
        assert render('{{ text|indent:2,"*",true }}', {"text": "a\nb"}) == "**a\n**b"


class TestFilterFilter:

    def test_dynamic_filter_name(self):
        assert render("{{ name|filter:f }}", {"name": "Kyle", "f": "uppercase"}) == "KYLE"

    def test_dynamic_filter_with_arguments(self):
        context = {"items": [1, 2], "f": 'join:"+"'}

        assert render("{{ items|filter:f }}", context) == "1+2"

    def test_missing_value(self):
        assert render("[{{ missing|filter:f }}]", {"f": "uppercase"}) == "[]"


class TestUniqueFilter:

    def test_unique_keeps_first_occurrence(self):
        assert filters.unique([1, 2, 1, 3, 2]) == [1, 2, 3]
        assert filters.unique("text") == "text"

    def test_in_template(self):
        assert render("{{ items|unique|join:\",\" }}", {"items": ["a", "b", "a"]}) == "a,b"


class TestFilterInvocation:

    def test_simple_filter_rejects_arguments(self):
        with pytest.raises(TemplateSyntaxError, match="Can't invoke filter with an argument"):
            render('{{ name|uppercase:"x" }}', {"name": "Kyle"})

    def test_error_is_bound_to_variable_token(self):
        with pytest.raises(TemplateSyntaxError) as excinfo:
            render('line\n{{ name|uppercase:"x" }}', {"name": "Kyle"})

        assert excinfo.value.token.source_map.line == 2
