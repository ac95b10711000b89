"""Tests for the AST builder."""

import pytest

from vcompiler.core.errors import CompilerStateError
from vcompiler.parser.builder import EMPTY_SLOT_SCOPE_TOKEN, parse_for, parse_modifiers
from vcompiler.parser.nodes import ASTElement, ASTExpression, ASTText, NodeState


class TestParseFor:
    """``v-for`` expression parsing."""

    def test_alias_only(self):
        result = parse_for("item in items")
        assert (result.for_exp, result.alias, result.iterator1, result.iterator2) == (
            "items", "item", None, None,
        )

    def test_alias_with_iterators(self):
        result = parse_for("(value, key, index) of obj")
        assert (result.alias, result.iterator1, result.iterator2) == ("value", "key", "index")
        assert result.for_exp == "obj"

    def test_destructured_alias(self):
        """Commas inside a destructuring pattern are not iterators."""
        result = parse_for("{ id, name } in rows")
        assert result.alias == "{ id, name }"
        assert result.iterator1 is None

    def test_invalid(self):
        assert parse_for("items") is None


class TestStructuralDirectives:
    """v-for, v-if chains, v-once and v-pre."""

    def test_for_on_element(self, build):
        root = build('<ul><li v-for="(item, i) in items" :key="item.id">{{ item }}</li></ul>')
        li = root.children[0]
        assert (li.for_exp, li.alias, li.iterator1) == ("items", "item", "i")
        assert li.key == "item.id"

    def test_if_chain(self, build):
        """else-if and else branches attach to the v-if element only."""
        root = build('<div><p v-if="a">A</p><p v-else-if="b">B</p><p v-else>C</p></div>')
        assert len(root.children) == 1
        conditions = root.children[0].if_conditions
        assert [c.exp for c in conditions] == ["a", "b", None]
        assert conditions[2].block.is_else

    def test_whitespace_between_branches_ignored(self, build, warnings):
        root = build('<div><p v-if="a">A</p>\n  <p v-else>B</p></div>')
        assert len(root.children[0].if_conditions) == 2
        assert warnings == []

    def test_text_between_branches_warned(self, build, warnings):
        build('<div><p v-if="a">A</p>oops<p v-else>B</p></div>')
        assert warnings == ['text "oops" between v-if and v-else(-if) will be ignored.']

    def test_else_without_if(self, build, warnings):
        build("<div><p v-else>x</p></div>")
        assert warnings == ["v-else used on element <p> without corresponding v-if."]

    def test_once(self, build):
        root = build('<div><p v-once>{{ a }}</p></div>')
        assert root.children[0].once

    def test_pre_keeps_raw_content(self, build):
        """Inside v-pre, attributes and mustaches stay literal."""
        root = build('<div v-pre><span :a="b">{{ x }}</span></div>')
        span = root.children[0]
        assert root.pre
        assert [(a.name, a.value) for a in span.attrs] == [(":a", '"b"')]
        assert isinstance(span.children[0], ASTText)
        assert span.children[0].text == "{{ x }}"

    def test_root_with_else_chain(self, build, warnings):
        """Root-level v-if / v-else elements form one chain."""
        root = build('<div v-if="a"></div><p v-else></p>')
        assert [c.exp for c in root.if_conditions] == ["a", None]
        assert warnings == []

    def test_multiple_roots_warned_once(self, build, warnings):
        build("<div></div><p></p><span></span>")
        assert len(warnings) == 1
        assert warnings[0].startswith("Component template should contain exactly one root element.")

    def test_template_root_warned(self, build, warnings):
        build("<template><div></div></template>")
        assert warnings == [
            "Cannot use <template> as component root element because it may contain multiple nodes."
        ]


class TestAttributes:
    """Bindings, handlers and directives."""

    def test_static_attribute(self, build):
        root = build('<div id="app"></div>', optimized=False)
        assert [(a.name, a.value) for a in root.attrs] == [("id", '"app"')]
        assert not root.has_bindings

    def test_bind_with_filters(self, build):
        root = build('<div :title="msg | upper"></div>')
        assert root.attrs[0].value == '_f("upper")(msg)'
        assert root.has_bindings

    def test_prop_modifier_camelizes(self, build):
        root = build('<div :text-content.prop="t"></div>')
        assert [(p.name, p.value) for p in root.props] == [("textContent", "t")]

    def test_must_use_prop(self, build):
        """Bound ``value`` on an input goes to DOM properties."""
        root = build('<input :value="v">')
        assert [(p.name, p.value) for p in root.props] == [("value", "v")]
        assert root.attrs is None

    def test_dynamic_attribute_name(self, build):
        root = build('<div :[name]="v"></div>')
        attr = root.dynamic_attrs[0]
        assert (attr.name, attr.value, attr.dynamic) == ("name", "v", True)

    def test_sync_adds_update_handlers(self, build):
        root = build('<comp :my-title.sync="t"></comp>')
        assert set(root.events) == {"update:myTitle", "update:my-title"}
        assert root.events["update:myTitle"].value == '_set(_self, "t", event)'

    def test_event_modifiers(self, build):
        """capture/once/passive become sigils; native routes to nativeOn."""
        root = build('<comp @click.capture.once="a" @focus.native="b"></comp>')
        assert list(root.events) == ["~!click"]
        assert list(root.native_events) == ["focus"]

    def test_right_click_renamed(self, build):
        root = build('<div @click.right="menu"></div>')
        assert list(root.events) == ["contextmenu"]

    def test_passive_and_prevent_warned(self, build, warnings):
        build('<div @touchstart.passive.prevent="go"></div>')
        assert warnings == [
            "passive and prevent can't be used together. Passive handler can't prevent default event."
        ]

    def test_generic_directive(self, build):
        root = build('<div v-focus:[arg].lazy="value"></div>')
        directive = root.directives[0]
        assert (directive.name, directive.arg, directive.is_dynamic_arg) == ("focus", "arg", True)
        assert directive.modifiers == {"lazy": True}
        assert directive.needs_runtime

    def test_parse_modifiers(self):
        assert parse_modifiers("click.stop.prevent") == {"stop": True, "prevent": True}
        assert parse_modifiers("click") is None

    def test_duplicate_attribute(self, build, warnings):
        """One diagnostic; the last value wins."""
        root = build('<div id="a" id="b"></div>')
        assert warnings == ["duplicate attribute: id"]
        assert root.attrs_map["id"] == "b"

    def test_interpolation_in_attribute_warned(self, build, warnings):
        build('<div id="{{ x }}"></div>')
        assert len(warnings) == 1
        assert "Interpolation inside attributes has been removed" in warnings[0]

    def test_forbidden_tag(self, build, warnings):
        root = build("<div><style>a {}</style></div>")
        assert root.children == []
        assert len(warnings) == 1
        assert "Avoid placing tags with side-effects" in warnings[0]


class TestSlots:
    """Slot content, scoped slots and slot outlets."""

    def test_named_scoped_slot(self, build, warnings):
        root = build('<Comp><template #foo="{x}">{{ x }}</template></Comp>')
        assert list(root.scoped_slots) == ['"foo"']
        slot = root.scoped_slots['"foo"']
        assert slot.slot_scope == "{x}"
        assert root.children == []
        assert warnings == []

    def test_default_slot_on_component(self, build):
        """v-slot on the component wraps its children in a template."""
        root = build('<comp v-slot="props"><span>{{ props.a }}</span></comp>')
        container = root.scoped_slots['"default"']
        assert container.tag == "template"
        assert container.slot_scope == "props"
        assert container.children[0].tag == "span"
        assert root.children == []

    def test_slot_without_scope(self, build):
        root = build("<comp><template v-slot:header>h</template></comp>")
        assert root.scoped_slots['"header"'].slot_scope == EMPTY_SLOT_SCOPE_TOKEN

    def test_dynamic_slot_name(self, build):
        root = build('<comp><template #[name]="s">x</template></comp>')
        slot = root.scoped_slots["name"]
        assert slot.slot_target_dynamic

    def test_v_slot_on_plain_element_warned(self, build, warnings):
        build('<div v-slot="x"></div>')
        assert "v-slot can only be used on components or <template>." in warnings

    def test_legacy_slot_attribute(self, build):
        root = build('<comp><p slot="footer">f</p></comp>')
        p = root.children[0]
        assert p.slot_target == '"footer"'
        assert [(a.name, a.value) for a in p.attrs] == [("slot", '"footer"')]

    def test_slot_outlet(self, build):
        root = build('<div><slot name="header">fallback</slot></div>')
        assert root.children[0].slot_name == '"header"'

    def test_dynamic_component(self, build):
        root = build('<component :is="view" inline-template><div></div></component>')
        assert root.component == "view"
        assert root.inline_template


class TestText:
    """Text handling."""

    def test_expression_node(self, build):
        root = build("<p>a {{ b }}</p>")
        node = root.children[0]
        assert isinstance(node, ASTExpression)
        assert node.expression == '"a " + _s(b)'

    def test_entities_decoded(self, build):
        root = build("<p>&lt;b&gt; &amp;</p>")
        assert root.children[0].text == "<b> &"

    def test_preserved_whitespace(self, build):
        root = build("<div>\n  <span>a</span>\n  <span>b</span>\n</div>")
        assert [getattr(c, "tag", None) or c.text for c in root.children] == ["span", " ", "span"]

    def test_condensed_whitespace(self, build):
        root = build(
            "<div>\n  <span>a</span>\n  <span>b</span> <i>c   d</i>\n</div>",
            whitespace="condense",
        )
        assert [getattr(c, "tag", None) or c.text for c in root.children] == [
            "span", "span", " ", "i",
        ]
        assert root.children[3].children[0].text == "c d"

    def test_pre_keeps_whitespace(self, build):
        root = build("<pre>  a\n  b  </pre>")
        assert root.children[0].text == "  a\n  b  "

    def test_text_only_template(self, build, warnings):
        assert build("hello") is None
        assert warnings == ["Component template requires a root element, rather than just text."]

    def test_comments(self, build):
        root = build("<div><!-- c --></div>", comments=True)
        assert root.children[0].is_comment


class TestNodeState:
    """Element lifecycle."""

    def test_processed_after_build(self, build):
        root = build("<div><p></p></div>")
        assert root.state is NodeState.PROCESSED
        assert root.children[0].processed

    def test_state_never_moves_back(self):
        el = ASTElement(tag="div")
        el.advance(NodeState.STRUCTURAL)
        with pytest.raises(CompilerStateError):
            el.advance(NodeState.UNPROCESSED)

    def test_to_dict(self, build):
        data = build('<div class="a"><p v-if="x">{{ y }}</p></div>').to_dict()
        assert data["tag"] == "div"
        assert data["static_class"] == '"a"'
        assert data["children"][0]["if_conditions"] == ["x"]
