"""Tests for the HTML scanner."""

from vcompiler.parser.html_scanner import (
    Comment,
    ElementEnd,
    ElementStart,
    HTMLScanner,
    Text,
    decode_attr,
)


def scan(template, options, warnings=None):
    warn = None
    if warnings is not None:
        warn = lambda message, *args, **kwargs: warnings.append(message)  # noqa: E731
    return list(HTMLScanner(template, options, warn).scan())


def kinds(events):
    result = []
    for event in events:
        if isinstance(event, ElementStart):
            result.append(("start", event.tag))
        elif isinstance(event, ElementEnd):
            result.append(("end", event.tag))
        elif isinstance(event, Text):
            result.append(("text", event.text))
        else:
            result.append(("comment", event.text))
    return result


class TestTags:
    """Start tags, end tags and attributes."""

    def test_simple_element(self, web_options):
        """Start, text and end events are produced in order."""
        events = scan('<div id="app">hi</div>', web_options)
        assert kinds(events) == [("start", "div"), ("text", "hi"), ("end", "div")]

        start = events[0]
        assert [(a.name, a.value) for a in start.attrs] == [("id", "app")]
        assert start.unary is False

    def test_attribute_quoting_styles(self, web_options):
        """Double, single, unquoted and valueless attributes are all read."""
        start = scan("<input a=\"1\" b='2' c=3 disabled>", web_options)[0]
        assert [(a.name, a.value) for a in start.attrs] == [
            ("a", "1"), ("b", "2"), ("c", "3"), ("disabled", ""),
        ]

    def test_void_and_self_closing(self, web_options):
        """Void tags and ``/>`` are unary and get no end event."""
        events = scan("<div><br><my-comp/></div>", web_options)
        assert kinds(events) == [
            ("start", "div"), ("start", "br"), ("start", "my-comp"), ("end", "div"),
        ]
        assert events[1].unary and events[2].unary

    def test_dynamic_argument_attribute(self, web_options):
        """Dynamic arguments may contain characters a plain name cannot."""
        start = scan('<div :[key + "x"]="v"></div>', web_options)[0]
        assert start.attrs[0].name == ':[key + "x"]'
        assert start.attrs[0].value == "v"

    def test_attribute_entities_decoded(self, web_options):
        """Attribute values decode the basic entities."""
        start = scan('<div title="a &lt; b &amp; c"></div>', web_options)[0]
        assert start.attrs[0].value == "a < b & c"

    def test_source_ranges(self, web_options):
        """Offsets are recorded when source ranges are requested."""
        options = web_options.merge({"output_source_range": True})
        start = scan('<div :title="a b"></div>', options)[0]
        attr = start.attrs[0]
        assert (start.start, start.end) == (0, 18)
        assert (attr.start, attr.end) == (5, 17)


class TestImplicitRules:
    """HTML end-tag inference."""

    def test_paragraph_closed_by_block(self, web_options):
        """A block element implicitly closes an open <p>."""
        events = scan("<p>one<div>two</div>", web_options)
        assert kinds(events) == [
            ("start", "p"), ("text", "one"), ("end", "p"),
            ("start", "div"), ("text", "two"), ("end", "div"),
        ]

    def test_list_item_left_open(self, web_options):
        """A new <li> closes the previous one."""
        events = scan("<ul><li>a<li>b</ul>", web_options)
        assert kinds(events) == [
            ("start", "ul"), ("start", "li"), ("text", "a"), ("end", "li"),
            ("start", "li"), ("text", "b"), ("end", "li"), ("end", "ul"),
        ]

    def test_stray_paragraph_end(self, web_options):
        """A stray </p> becomes an empty paragraph."""
        events = scan("<div></p></div>", web_options)
        assert kinds(events) == [
            ("start", "div"), ("start", "p"), ("end", "p"), ("end", "div"),
        ]

    def test_stray_br_end(self, web_options):
        """A stray </br> becomes a <br>."""
        events = scan("<div></br></div>", web_options)
        assert kinds(events)[1] == ("start", "br")
        assert events[1].unary


class TestRecovery:
    """The scanner never raises."""

    def test_unclosed_tags_warned(self, web_options):
        """Open tags at end of input are closed with one warning each."""
        warnings = []
        events = scan("<div><span>", web_options, warnings)
        assert kinds(events) == [
            ("start", "div"), ("start", "span"), ("end", "span"), ("end", "div"),
        ]
        assert warnings == [
            "tag <span> has no matching end tag.",
            "tag <div> has no matching end tag.",
        ]

    def test_mismatched_end_tag_warned(self, web_options):
        """Closing an outer tag closes and warns about the inner ones."""
        warnings = []
        events = scan("<div><span></div>", web_options, warnings)
        assert kinds(events)[-2:] == [("end", "span"), ("end", "div")]
        assert warnings == ["tag <span> has no matching end tag."]

    def test_stray_less_than_is_text(self, web_options):
        """A ``<`` that starts no tag stays in the text."""
        events = scan("<p>a < b</p>", web_options)
        assert kinds(events) == [("start", "p"), ("text", "a < b"), ("end", "p")]

    def test_doctype_and_conditional_comment_skipped(self, web_options):
        """Doctypes and conditional comments produce no events."""
        events = scan("<!DOCTYPE html><![if IE]><div></div>", web_options)
        assert kinds(events) == [("start", "div"), ("end", "div")]


class TestRawText:
    """Comments and raw-text elements."""

    def test_comments_dropped_by_default(self, web_options):
        events = scan("<div><!-- note --></div>", web_options)
        assert kinds(events) == [("start", "div"), ("end", "div")]

    def test_comments_kept(self, web_options):
        """With ``comments`` the comment body is emitted."""
        options = web_options.merge({"comments": True})
        events = scan("<div><!-- note --></div>", options)
        assert isinstance(events[1], Comment)
        assert events[1].text == " note "

    def test_textarea_content_is_raw(self, web_options):
        """Tags inside a textarea are text, and the first newline is dropped."""
        events = scan("<textarea>\n<b>bold</b></textarea>", web_options)
        assert kinds(events) == [
            ("start", "textarea"), ("text", "<b>bold</b>"), ("end", "textarea"),
        ]

    def test_decode_attr_newlines(self):
        """Newline entities decode only when requested."""
        assert decode_attr("a&#10;b", False) == "a&#10;b"
        assert decode_attr("a&#10;b", True) == "a\nb"

    def test_raw_text_range(self, web_options):
        template = "<textarea>\n<b>bold</b></textarea>"
        text = scan(template, web_options)[1]
        assert template[text.start:text.end] == text.text


class TestTrailingText:
    """Input left over when no production matches."""

    def test_flushed_with_range(self, web_options):
        warnings = []
        template = "<div></div><"
        events = scan(template, web_options, warnings)
        assert events[-1] == Text("<", 11, 12)
        assert warnings == ['Mal-formatted tag at end of template: "<"']
