"""Tests for the compiler driver and the error detector."""

import pytest

import vcompiler
from vcompiler.core.errors import CompilerConfigError, SourceRange, WarningMessage
from vcompiler.engine.driver import WarningCollector
from vcompiler.engine.error_detector import check_expression, detect_errors


class TestCompile:
    """The compile pipeline."""

    def test_result(self, compile_template):
        result = compile_template('<div :id="id">{{ msg }}</div>')
        assert result.render == '_c("div", {"attrs": {"id": id}}, [_v(_s(msg))])'
        assert result.ast.tag == "div"
        assert result.errors == []
        assert result.tips == []

    def test_idempotent(self, compile_template):
        template = '<ul><li v-for="x in xs" :key="x" @click="pick(x)">{{ x }}</li></ul>'
        first = compile_template(template)
        second = compile_template(template)
        assert first.render == second.render
        assert first.static_render_fns == second.static_render_fns

    def test_surrounding_whitespace_trimmed(self, compile_template):
        assert compile_template("\n  <p>a</p>\n").render == compile_template("<p>a</p>").render

    def test_empty_template(self, compile_template):
        result = compile_template("")
        assert result.render == '_c("div")'
        assert result.errors == []

    def test_text_only_template(self, compile_template):
        result = compile_template("hello")
        assert [str(e) for e in result.errors] == [
            "Component template requires a root element, rather than just text."
        ]

    def test_unknown_option(self, compiler):
        with pytest.raises(CompilerConfigError, match="unknown compiler option"):
            compiler.compile("<div></div>", {"delimters": ("${", "}")})

    def test_custom_delimiters(self, compile_template):
        result = compile_template("<p>${ a } {{ b }}</p>", delimiters=("${", "}"))
        assert result.render == '_c("p", [_v(_s(a) + " {{ b }}")])'

    def test_production_skips_diagnostics(self, compile_template):
        result = compile_template('<div :title="a b"></div><p></p>', dev=False)
        assert result.errors == []

    def test_optimize_off(self, compile_template):
        result = compile_template("<div><p>hi</p><span>there</span></div>", optimize=False)
        assert result.static_render_fns == []
        assert result.render.startswith('_c("div", [')

    def test_package_exports(self):
        """The top-level package exposes a ready-made web compiler."""
        result = vcompiler.compile("<p>{{ a }}</p>")
        assert result.render == '_c("p", [_v(_s(a))])'
        assert vcompiler.CompilerOptions is not None

    def test_literal_template_optimized(self):
        """Plain elements pass the static-key check without raising."""
        result = vcompiler.compile("<div><p>hi</p><span>there</span></div>", {"dev": True})
        assert result.errors == []
        assert result.render == "_m(0)"
        assert result.ast.static and result.ast.static_root
        assert all(child.static for child in result.ast.children)


class TestDiagnostics:
    """Errors, tips and source ranges."""

    def test_errors_and_tips_are_separate(self, compile_template):
        result = compile_template('<div><my-item v-for="i in items"></my-item></div>')
        assert result.errors == []
        assert len(result.tips) == 1

    def test_ranges_shifted_by_leading_whitespace(self, compile_template):
        template = '  <div :title="a b"></div>'
        result = compile_template(template, output_source_range=True)
        error = result.errors[0]
        assert (error.start, error.end) == (7, 19)
        assert template[error.start:error.end] == ':title="a b"'

    def test_no_ranges_by_default(self, compile_template):
        result = compile_template('  <div :title="a b"></div>')
        assert result.errors[0].start is None

    def test_collector(self):
        collector = WarningCollector(leading_space=3, record_ranges=True)
        collector("bad", SourceRange(1, 4))
        collector(WarningMessage("hint"), None, True)
        assert (collector.errors[0].start, collector.errors[0].end) == (4, 7)
        assert [str(tip) for tip in collector.tips] == ["hint"]


class TestErrorDetector:
    """Expression validation."""

    def test_keyword_as_property(self, compile_template):
        result = compile_template('<div :title="item.class"></div>')
        assert [str(e) for e in result.errors] == [
            'avoid using Python keyword as property name: "class"\n'
            '  Raw expression: :title="item.class"'
        ]

    def test_invalid_binding(self, compile_template):
        result = compile_template('<div :title="a b"></div>')
        message = str(result.errors[0])
        assert message.startswith("invalid expression: ")
        assert message.endswith('  Raw expression: :title="a b"\n')

    def test_invalid_interpolation(self, compile_template):
        result = compile_template("<p>{{ a b }}</p>")
        assert len(result.errors) == 1
        assert "Raw expression: {{ a b }}" in str(result.errors[0])

    def test_invalid_for_alias(self, compile_template):
        result = compile_template('<div><p v-for="1x in items"></p></div>')
        assert 'invalid v-for alias "1x" in expression: v-for="1x in items"' in [
            str(e) for e in result.errors
        ]

    def test_unary_operator_as_property(self, compile_template):
        result = compile_template('<div @click="x.not(1)"></div>')
        messages = [str(e) for e in result.errors]
        assert messages[0] == (
            'avoid using Python unary operator as property name: "not(1)" '
            'in expression @click="x.not(1)"'
        )
        assert messages[1].startswith("invalid expression: ")

    def test_invalid_slot_params(self, compile_template):
        result = compile_template('<comp><template #default="{ a b }">x</template></comp>')
        assert any(str(e).startswith("invalid function parameter expression: ") for e in result.errors)

    def test_else_branches_checked(self, compile_template):
        result = compile_template(
            '<div><p v-if="a">x</p><p v-else-if="a b">y</p><p v-else>{{ c d }}</p></div>'
        )
        messages = [str(e) for e in result.errors]
        assert len(messages) == 2
        assert 'Raw expression: v-else-if="a b"' in messages[0]
        assert "Raw expression: {{ c d }}" in messages[1]

    def test_scoped_slot_content_checked(self, compile_template):
        result = compile_template('<comp><template #foo="{x}">{{ x y }}</template></comp>')
        assert len(result.errors) == 1
        assert "Raw expression: {{ x y }}" in str(result.errors[0])

    def test_valid_templates_pass(self, compile_template):
        template = (
            '<div><p v-for="({ id }, i) in rows" :key="id" @click="count += 1; save(id)">'
            "{{ i | pad }}</p><comp v-slot=\"{ item }\">{{ item }}</comp></div>"
        )
        assert compile_template(template).errors == []

    def test_check_expression(self):
        messages = []
        check_expression("'class' + a", "x", lambda message, range=None: messages.append(message))
        assert messages == []
        detect_errors(None, lambda message, range=None: messages.append(message))
        assert messages == []
