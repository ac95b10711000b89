"""Tests for text interpolation, filters, literals and callback parameters."""

import pytest

from vcompiler.codegen.literals import quote, to_source
from vcompiler.codegen.params import gen_lambda, split_top_level, translate_params
from vcompiler.parser.filter_parser import parse_filters
from vcompiler.parser.text_parser import parse_text


class TestParseText:
    """``{{ }}`` interpolation."""

    def test_plain_text_has_no_result(self):
        assert parse_text("hello") is None

    def test_mixed_text(self):
        """Literal parts are quoted and bindings stringified."""
        result = parse_text("Hello {{ name }}!")
        assert result.expression == '"Hello " + _s(name) + "!"'
        assert result.tokens == ["Hello ", {"@binding": "name"}, "!"]

    def test_expression_kept_verbatim(self):
        """The binding text is not rewritten."""
        assert parse_text("{{ a + 1 }}").expression == "_s(a + 1)"

    def test_multiline_binding(self):
        result = parse_text("{{ a\n + b }}")
        assert result.expression == "_s(a\n + b)"

    def test_custom_delimiters(self):
        """Delimiters containing regex metacharacters are escaped."""
        result = parse_text("a ${ b } {{ c }}", ("${", "}"))
        assert result.expression == '"a " + _s(b) + " {{ c }}"'
        assert result.tokens[1] == {"@binding": "b"}

    def test_filters_inside_interpolation(self):
        result = parse_text("{{ msg | upper }}")
        assert result.expression == '_s(_f("upper")(msg))'


class TestParseFilters:
    """``value | filter(args)`` pipelines."""

    def test_no_filter(self):
        assert parse_filters("  a + b ") == "a + b"

    def test_filter_chain(self):
        """Each filter wraps the previous result as its first argument."""
        assert parse_filters("msg | upper | truncate(3)") == '_f("truncate")(_f("upper")(msg), 3)'

    def test_filter_without_arguments_call(self):
        assert parse_filters("msg | upper()") == '_f("upper")(msg)'

    def test_double_pipe_is_not_a_filter(self):
        assert parse_filters("a || b") == "a || b"

    def test_pipe_inside_string_or_brackets(self):
        """Only top-level pipes separate filters."""
        assert parse_filters("'a|b'") == "'a|b'"
        assert parse_filters("f(a | b)") == "f(a | b)"
        assert parse_filters("[a | b] | g") == '_f("g")([a | b])'


class TestLiterals:
    """Python source rendering."""

    def test_quote_escapes(self):
        assert quote('say "hi"') == '"say \\"hi\\""'
        assert quote("a\nb") == '"a\\nb"'

    def test_quote_line_separators(self):
        assert quote("a\u2028b") == '"a\\u2028b"'

    def test_to_source(self):
        assert to_source({"stop": True, "keys": [8, 46]}) == '{"stop": True, "keys": [8, 46]}'
        assert to_source(None) == "None"
        assert to_source(("a", False)) == '["a", False]'

    def test_to_source_rejects_objects(self):
        with pytest.raises(TypeError):
            to_source(object())


class TestParams:
    """Lambda parameter translation."""

    def test_split_top_level(self):
        assert split_top_level("a, {b, c}, d", ",") == ["a", " {b, c}", " d"]

    def test_plain_parameters(self):
        assert gen_lambda("item, index", "x") == "lambda item, index: x"

    def test_no_parameters(self):
        assert gen_lambda("", "x") == "lambda: x"
        assert gen_lambda(None, "x") == "lambda: x"

    def test_object_destructuring(self):
        """Renames and defaults become ``.get`` lookups."""
        assert gen_lambda("{a, b: c, d = 1}", "body") == (
            'lambda _p0: (lambda a, c, d: body)(_p0.get("a"), _p0.get("b"), _p0.get("d", 1))'
        )

    def test_array_destructuring(self):
        assert gen_lambda("[x, y]", "body") == "lambda _p0: (lambda x, y: body)(_p0[0], _p0[1])"

    def test_rest_parameter(self):
        assert gen_lambda("...rest", "body") == "lambda *rest: body"

    def test_default_value(self):
        params = translate_params("a, b = 2")
        assert params.params == ["a", "b=2"]
        assert params.bindings == []

    def test_generated_lambda_runs(self):
        """Destructured names are bound from the argument."""
        fn = eval(gen_lambda("{ id, name }, i", "(id, name, i)"))
        assert fn({"id": 7, "name": "x"}, 2) == (7, "x", 2)
