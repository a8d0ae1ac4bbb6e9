"""
Тесты лексического анализатора шаблонов.
"""

from stencil.lexer import Lexer, tokenize_template
from stencil.tokens import Behaviour, TokenKind


class TestLexer:

    def test_plain_text(self):
        tokens = tokenize_template("Hello world")

        assert len(tokens) == 1
        assert tokens[0].kind is TokenKind.TEXT
        assert tokens[0].contents == "Hello world"

    def test_variable_between_text(self):
        tokens = tokenize_template("Hello {{ name }}!")

        assert [token.kind for token in tokens] == [TokenKind.TEXT, TokenKind.VARIABLE, TokenKind.TEXT]
        assert [token.contents for token in tokens] == ["Hello ", "name", "!"]

    def test_block_and_comment(self):
        tokens = tokenize_template("{% if x %}{# note #}{% endif %}")

        assert [token.kind for token in tokens] == [TokenKind.BLOCK, TokenKind.COMMENT, TokenKind.BLOCK]
        assert [token.contents for token in tokens] == ["if x", "note", "endif"]

    def test_adjacent_variables(self):
        tokens = tokenize_template("{{ x }}{{ y }}")

        assert [token.kind for token in tokens] == [TokenKind.VARIABLE, TokenKind.VARIABLE]
        assert [token.contents for token in tokens] == ["x", "y"]
        assert [token.source_map.column for token in tokens] == [4, 11]

    def test_empty_template(self):
        assert tokenize_template("") == []

    def test_empty_tag(self):
        tokens = tokenize_template("{{}}")

        assert tokens[0].kind is TokenKind.VARIABLE
        assert tokens[0].contents == ""

    def test_unclosed_tag_becomes_text(self):
        """Незакрытый тег не является ошибкой лексера"""
        tokens = tokenize_template("Hello {{ name")

        assert [token.kind for token in tokens] == [TokenKind.TEXT, TokenKind.TEXT]
        assert tokens[1].contents == "{{ name"

    def test_multiline_tag_is_joined(self):
        tokens = tokenize_template("{% if a\n   and b %}")

        assert tokens[0].contents == "if a and b"

    def test_whitespace_markers(self):
        tokens = tokenize_template("{%- if x +%}{% endif -%}")

        first, second = tokens
        assert first.contents == "if x"
        assert first.whitespace.leading is Behaviour.TRIM
        assert first.whitespace.trailing is Behaviour.KEEP
        assert second.contents == "endif"
        assert second.whitespace.leading is Behaviour.UNSPECIFIED
        assert second.whitespace.trailing is Behaviour.TRIM

    def test_variables_have_no_whitespace_markers(self):
        tokens = tokenize_template("{{ -1 }}")

        assert tokens[0].whitespace is None
        assert tokens[0].contents == "-1"


class TestSourceMap:

    def test_position_points_to_contents(self):
        tokens = Lexer("Hello {{ name }}!", "greeting.html").tokenize()

        source_map = tokens[1].source_map
        assert source_map.filename == "greeting.html"
        assert source_map.line == 1
        assert source_map.column == 10
        assert source_map.content == "Hello {{ name }}!"

    def test_line_and_column_on_later_line(self):
        tokens = tokenize_template("line one\n  {% if x %}\nend")

        block = tokens[1]
        assert block.source_map.line == 2
        assert block.source_map.column == 6
        assert block.source_map.content == "  {% if x %}"

    def test_span_covers_contents(self):
        text = "ab{{ value }}"
        token = tokenize_template(text)[1]

        start, end = token.source_map.span
        assert text[start:end] == "value"
