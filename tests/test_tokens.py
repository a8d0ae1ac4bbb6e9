"""
Тесты разбиения содержимого токенов на компоненты.
"""

from stencil.tokens import Token, TokenKind, smart_split


class TestSmartSplit:

    def test_split_by_spaces(self):
        assert smart_split("for item in items") == ["for", "item", "in", "items"]

    def test_quoted_phrase_kept_whole(self):
        assert smart_split('include "my file.html"') == ["include", '"my file.html"']

    def test_filter_pipes_are_glued(self):
        assert smart_split("value | uppercase") == ["value|uppercase"]
        assert smart_split("value |uppercase") == ["value|uppercase"]
        assert smart_split("value| uppercase") == ["value|uppercase"]

    def test_filter_argument_with_quoted_separator(self):
        assert smart_split('value | join: ", "') == ['value|join:", "']

    def test_comma_separated_loop_variables(self):
        assert smart_split("for key, value in dict") == ["for", "key,value", "in", "dict"]

    def test_brackets_become_components(self):
        assert smart_split("if (a and b)") == ["if", "(", "a", "and", "b", ")"]

    def test_leading_bracket_is_split(self):
        assert smart_split("(a or b) and c") == ["(", "a", "or", "b", ")", "and", "c"]
        assert smart_split("((a))") == ["(", "(", "a", ")", ")"]

    def test_loop_label_is_not_glued(self):
        assert smart_split("outer: for x in y") == ["outer:", "for", "x", "in", "y"]

    def test_custom_separator(self):
        assert smart_split("a,b", ",") == ["a", "b"]
        assert smart_split('"a,b",c', ",") == ['"a,b"', "c"]

    def test_empty(self):
        assert smart_split("") == []
        assert smart_split("   ") == []


class TestToken:

    def test_components(self):
        token = Token.block("if a and b")

        assert token.kind is TokenKind.BLOCK
        assert token.components == ["if", "a", "and", "b"]

    def test_block_has_default_whitespace(self):
        assert Token.block("if a").whitespace is not None
        assert Token.variable("a").whitespace is None
