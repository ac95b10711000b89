"""Tests for render source generation."""

import re

import pytest

from vcompiler.codegen.generator import CodegenState, Stage, content_hash, generate
from vcompiler.core.errors import CompilerStateError
from vcompiler.parser.nodes import ASTElement


class TestElements:
    """Elements, text and children."""

    def test_interpolation(self, compile_template):
        result = compile_template("<p>{{ a + 1 }}</p>")
        assert result.render == '_c("p", [_v(_s(a + 1))])'

    def test_filter_chain(self, compile_template):
        result = compile_template("<p>{{ msg | upper | truncate(3) }}</p>")
        assert result.render == '_c("p", [_v(_s(_f("truncate")(_f("upper")(msg), 3)))])'

    def test_attributes_and_props(self, compile_template):
        result = compile_template('<input :value="v" :title="t" id="x">')
        assert result.render == (
            '_c("input", {"attrs": {"title": t, "id": "x"}, "domProps": {"value": v}})'
        )

    def test_class_and_style(self, compile_template):
        result = compile_template(
            """<div class="a  b" :class="{'x': on}" style="color: red" :style="s"></div>"""
        )
        assert result.render == (
            '_c("div", {"staticClass": "a b", "class": {\'x\': on}, '
            '"staticStyle": {"color": "red"}, "style": (s)})'
        )

    def test_empty_template(self, compile_template):
        result = compile_template("   ")
        assert result.render == '_c("div")'
        assert result.ast is None

    def test_component_children_normalization(self, compile_template):
        result = compile_template("<div><my-comp></my-comp>{{ a }}</div>")
        assert result.render == '_c("div", [_c("my-comp"), _v(_s(a))], 1)'

    def test_dynamic_component(self, compile_template):
        result = compile_template('<component :is="view"></component>')
        assert result.render == '_c(view, {"tag": "component"})'

    def test_dynamic_attribute_names(self, compile_template):
        result = compile_template('<div :[name]="v" :id="i"></div>')
        assert result.render == '_c("div", _b({"attrs": {"id": i}}, "div", _d({}, [name, v])))'

    def test_comment(self, compile_template):
        result = compile_template("<div><!-- c -->{{ a }}</div>", comments=True)
        assert result.render == '_c("div", [_e(" c "), _v(_s(a))])'

    def test_script_root(self, compile_template):
        result = compile_template('<script type="text/x-template"></script>')
        assert result.render == "None"


class TestStatic:
    """Hoisting."""

    def test_static_root_hoisted(self, compile_template):
        result = compile_template("<div><p>hi</p><span>there</span></div>")
        assert result.render == "_m(0)"
        assert result.static_render_fns == [
            '_c("div", [_c("p", [_v("hi")]), _c("span", [_v("there")])])'
        ]

    def test_lone_text_not_hoisted(self, compile_template):
        result = compile_template("<div>hello</div>")
        assert result.render == '_c("div", [_v("hello")])'
        assert result.static_render_fns == []

    def test_static_root_in_for(self, compile_template):
        result = compile_template('<ul><li v-for="x in xs" :key="x"><p><b>a</b></p></li></ul>')
        assert result.render == (
            '_c("ul", _l((xs), lambda x: _c("li", {"key": x}, [_m(0, True)])), 0)'
        )

    def test_v_pre(self, compile_template):
        result = compile_template('<div v-pre><span :a="b">{{ x }}</span></div>')
        assert result.render == "_m(0)"
        static = result.static_render_fns[0]
        assert static.startswith('_c("div", {"pre": True}, ')
        assert '"attrs": {":a": "b"}' in static
        assert '_v("{{ x }}")' in static

    def test_once(self, compile_template):
        result = compile_template("<div><p v-once>{{ msg }}</p></div>")
        assert result.render == '_c("div", [_m(0)])'
        assert result.static_render_fns == ['_c("p", [_v(_s(msg))])']

    def test_once_in_keyed_for(self, compile_template):
        result = compile_template(
            '<ul><li v-for="x in xs" :key="x.id"><p v-once>{{ x }}</p></li></ul>'
        )
        assert '_o(_c("p", [_v(_s(x))]), 0, x.id)' in result.render


class TestControlFlow:
    """v-if and v-for."""

    def test_if_chain(self, compile_template):
        result = compile_template(
            '<div><p v-if="a">A</p><p v-else-if="b">B</p><p v-else>C</p></div>'
        )
        assert result.render == (
            '_c("div", [(_c("p", [_v("A")])) if (a) else '
            '(_c("p", [_v("B")])) if (b) else _c("p", [_v("C")])])'
        )

    def test_if_without_else(self, compile_template):
        result = compile_template('<div><p v-if="a">A</p></div>')
        assert result.render == '_c("div", [(_c("p", [_v("A")])) if (a) else _e()])'

    def test_root_if_chain(self, compile_template):
        result = compile_template('<div v-if="a"></div><p v-else></p>')
        assert result.render == '(_c("div")) if (a) else _c("p")'

    def test_keyed_for(self, compile_template):
        result = compile_template(
            '<ul><li v-for="(item, i) in items" :key="item">{{ i }}: {{ item }}</li></ul>'
        )
        assert result.render == (
            '_c("ul", _l((items), lambda item, i: '
            '_c("li", {"key": item}, [_v(_s(i) + ": " + _s(item))])), 0)'
        )
        assert result.errors == []
        assert result.static_render_fns == []

    def test_for_with_destructuring(self, compile_template):
        result = compile_template('<ul><li v-for="{ id, name } in rows" :key="id">{{ name }}</li></ul>')
        assert (
            'lambda _p0: (lambda id, name: _c("li", {"key": id}, [_v(_s(name))]))'
            '(_p0.get("id"), _p0.get("name"))'
        ) in result.render

    def test_template_for(self, compile_template):
        result = compile_template('<div><template v-for="x in xs"><span>{{ x }}</span></template></div>')
        assert result.render == '_c("div", [_l((xs), lambda x: [_c("span", [_v(_s(x))])])], 2)'

    def test_unkeyed_component_list_tip(self, compile_template):
        result = compile_template('<div><my-item v-for="i in items"></my-item></div>')
        assert len(result.tips) == 1
        assert "should have explicit keys" in result.tips[0].message


class TestData:
    """Data object entries."""

    def test_key_and_ref(self, compile_template):
        result = compile_template('<div><p v-for="x in xs" :key="x" ref="item"></p></div>')
        assert '{"key": x, "ref": "item", "refInFor": True}' in result.render

    def test_runtime_directive(self, compile_template):
        result = compile_template('<div v-show="ok"></div>')
        assert result.render == (
            '_c("div", {"directives": [{"name": "show", "rawName": "v-show", '
            '"value": (ok), "expression": "ok"}]})'
        )

    def test_directive_arg_and_modifiers(self, compile_template):
        result = compile_template('<div v-tip:top.delay="msg"></div>')
        assert '"arg": "top", "modifiers": {"delay": True}' in result.render

    def test_v_text_and_v_html(self, compile_template):
        assert compile_template('<p v-text="msg"></p>').render == (
            '_c("p", {"domProps": {"textContent": _s(msg)}})'
        )
        assert compile_template('<p v-html="raw"></p>').render == (
            '_c("p", {"domProps": {"innerHTML": _s(raw)}})'
        )

    def test_v_bind_object(self, compile_template):
        result = compile_template('<div v-bind="attrs"></div>')
        assert result.render == '_c("div", _b({}, "div", attrs, False))'

    def test_v_bind_object_prop(self, compile_template):
        result = compile_template('<div v-bind.prop="props"></div>')
        assert result.render == '_c("div", _b({}, "div", props, True))'

    def test_v_on_object(self, compile_template):
        result = compile_template('<div v-on="listeners"></div>')
        assert result.render == '_c("div", _g({}, listeners))'

    def test_sync(self, compile_template):
        result = compile_template('<comp :title.sync="t"></comp>')
        assert result.render == (
            '_c("comp", {"attrs": {"title": t}, '
            '"on": {"update:title": lambda event: _set(_self, "t", event)}})'
        )

    def test_custom_module(self, compile_template):
        """Module gen_data entries follow the key/ref entries."""
        from vcompiler.plugins.hooks import CompilerModule

        class TrackModule(CompilerModule):
            name = "track"

            def gen_data(self, el):
                return ['"track": True'] if el.tag == "a" else []

            def transform_code(self, el, code):
                return f"wrap({code})" if el.tag == "a" else code

        result = compile_template('<a href="#">x</a>', modules=[TrackModule()])
        assert result.render == 'wrap(_c("a", {"track": True, "attrs": {"href": "#"}}, [_v("x")]))'


class TestSlots:
    """Slot outlets and scoped slots."""

    def test_slot_outlet(self, compile_template):
        result = compile_template('<div><slot name="header">fallback</slot></div>')
        assert result.render == '_c("div", [_t("header", lambda: [_v("fallback")])], 2)'

    def test_slot_outlet_props(self, compile_template):
        result = compile_template('<div><slot :user-name="u"></slot></div>')
        assert result.render == '_c("div", [_t("default", None, {"userName": u})], 2)'

    def test_scoped_slot(self, compile_template):
        result = compile_template('<Comp><template #foo="{x}">{{ x }}</template></Comp>')
        assert result.render == (
            '_c("Comp", {"scopedSlots": _u([{"key": "foo", '
            '"fn": lambda _p0: (lambda x: [_v(_s(x))])(_p0.get("x"))}])})'
        )
        assert result.errors == []

    def test_slot_without_scope_is_proxy(self, compile_template):
        result = compile_template("<comp><template #a>x</template></comp>")
        assert result.render == (
            '_c("comp", {"scopedSlots": _u([{"key": "a", "fn": lambda: [_v("x")], "proxy": True}])})'
        )

    def test_conditional_slot_forces_update(self, compile_template):
        result = compile_template('<comp><template #a v-if="ok">x</template></comp>')
        assert result.render == (
            '_c("comp", {"scopedSlots": _u([({"key": "a", "fn": lambda: [_v("x")], '
            '"proxy": True}) if (ok) else None], None, True)})'
        )

    def test_slots_under_v_if_get_a_key(self, compile_template):
        result = compile_template('<comp v-if="ok"><template #a>x</template></comp>')
        assert re.search(r"_u\(\[.*\], None, False, \d+\)", result.render)

    def test_content_hash(self):
        assert content_hash("abc") == content_hash("abc")
        assert content_hash("abc") != content_hash("abd")
        assert 0 <= content_hash("x" * 1000) < 2 ** 32


class TestCodegenState:
    """Stage bookkeeping."""

    def test_stage_consumed_once(self, web_options):
        state = CodegenState(web_options)
        el = ASTElement(tag="div")
        state.consume(el, Stage.FOR)
        assert state.is_consumed(el, Stage.FOR)
        assert not state.is_consumed(el, Stage.IF)
        with pytest.raises(CompilerStateError):
            state.consume(el, Stage.FOR)

    def test_generate_does_not_mutate_ast(self, build, web_options):
        """The same tree generates the same code twice."""
        root = build('<div><p v-if="a">{{ b }}</p><li v-for="x in xs">{{ x }}</li></div>')
        first = generate(root, web_options)
        second = generate(root, web_options)
        assert first.render == second.render
