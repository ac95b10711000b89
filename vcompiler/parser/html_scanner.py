"""
vcompiler HTML Scanner
======================

Forgiving tag-level scanner for HTML-like templates.

The scanner does not build a tree. It walks the template once and yields
parse events that the AST builder consumes:

    ElementStart(tag, attrs, unary, start, end)
    ElementEnd(tag, start, end)
    Text(text, start, end)
    Comment(text, start, end)

It never raises. Unclosed tags are closed with a warning, stray ``<`` is
kept as text, and unparsable input at the end is flushed as text.

Example:
    scanner = HTMLScanner('<div id="app">{{ msg }}</div>', options)
    for event in scanner.scan():
        print(event)
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterator, List, Optional, Pattern, Union

from vcompiler.core.config import CompilerOptions
from vcompiler.core.errors import SourceRange
from vcompiler.parser.nodes import ASTAttr
from vcompiler.utils.helpers import make_map


# =============================================================================
# Grammar
# =============================================================================

_unicode_letters = (
    "a-zA-Z\\u00B7\\u00C0-\\u00D6\\u00D8-\\u00F6\\u00F8-\\u037D\\u037F-\\u1FFF"
    "\\u200C-\\u200D\\u203F-\\u2040\\u2070-\\u218F\\u2C00-\\u2FEF\\u3001-\\uD7FF"
    "\\uF900-\\uFDCF\\uFDF0-\\uFFFD"
)

_attr_value = r"""(?:\s*(=)\s*(?:"([^"]*)"+|'([^']*)'+|([^\s"'=<>`]+)))?"""

attribute = re.compile(r"""\s*([^\s"'<>/=]+)""" + _attr_value)
dynamic_arg_attribute = re.compile(
    r"""\s*((?:v-[\w-]+:|@|:|#)\[[^=]+?\][^\s"'<>/=]*)""" + _attr_value
)

ncname = rf"[a-zA-Z_][\-.0-9_{_unicode_letters}]*"
qname_capture = rf"((?:{ncname}:)?{ncname})"

start_tag_open = re.compile(rf"<{qname_capture}")
start_tag_close = re.compile(r"\s*(/?)>")
end_tag = re.compile(rf"</{qname_capture}[^>]*>")
doctype = re.compile(r"<!DOCTYPE [^>]+>", re.IGNORECASE)
comment = re.compile(r"<!--")
conditional_comment = re.compile(r"<!\[")

_leading_space = re.compile(r"\s*")

is_plain_text_element = make_map("script,style,textarea", expects_lower_case=True)
is_ignore_newline_tag = make_map("pre,textarea", expects_lower_case=True)

# Tags that implicitly close an open <p>.
is_non_phrasing_tag = make_map(
    "address,article,aside,base,blockquote,body,caption,col,colgroup,dd,"
    "details,dialog,div,dl,dt,fieldset,figcaption,figure,footer,form,"
    "h1,h2,h3,h4,h5,h6,head,header,hgroup,hr,html,legend,li,menuitem,meta,"
    "optgroup,option,param,rp,rt,source,style,summary,tbody,td,tfoot,th,thead,"
    "title,tr,track"
)

_decoding_map = {
    "&lt;": "<",
    "&gt;": ">",
    "&quot;": '"',
    "&amp;": "&",
    "&#10;": "\n",
    "&#9;": "\t",
    "&#39;": "'",
}
_encoded_attr = re.compile(r"&(?:lt|gt|quot|amp|#39);")
_encoded_attr_with_newlines = re.compile(r"&(?:lt|gt|quot|amp|#39|#10|#9);")

_raw_comment = re.compile(r"<!--([\s\S]*?)-->")
_raw_cdata = re.compile(r"<!\[CDATA\[([\s\S]*?)]]>")

_raw_end_cache: Dict[str, Pattern[str]] = {}


def decode_attr(value: str, should_decode_newlines: bool) -> str:
    """Decode the entities allowed in attribute values."""
    pattern = _encoded_attr_with_newlines if should_decode_newlines else _encoded_attr
    return pattern.sub(lambda m: _decoding_map[m.group(0)], value)


def should_ignore_first_newline(tag: Optional[str], text: str) -> bool:
    return bool(tag) and is_ignore_newline_tag(tag) and text[:1] == "\n"


def _raw_end_pattern(tag: str) -> Pattern[str]:
    pattern = _raw_end_cache.get(tag)
    if pattern is None:
        pattern = re.compile(r"([\s\S]*?)(</" + re.escape(tag) + r"[^>]*>)", re.IGNORECASE)
        _raw_end_cache[tag] = pattern
    return pattern


# =============================================================================
# Events
# =============================================================================

@dataclass
class ElementStart:
    """Start tag; ``unary`` is True for void tags and explicit ``/>``."""
    tag: str
    attrs: List[ASTAttr]
    unary: bool
    start: Optional[int] = None
    end: Optional[int] = None


@dataclass
class ElementEnd:
    """End tag, explicit or synthesized."""
    tag: str
    start: Optional[int] = None
    end: Optional[int] = None


@dataclass
class Text:
    """Character data."""
    text: str
    start: Optional[int] = None
    end: Optional[int] = None


@dataclass
class Comment:
    """Comment content, without the ``<!--``/``-->`` markers."""
    text: str
    start: Optional[int] = None
    end: Optional[int] = None


ParseEvent = Union[ElementStart, ElementEnd, Text, Comment]


@dataclass
class OpenTag:
    """Entry of the scanner's open-tag stack."""
    tag: str
    lower_tag: str
    start: int
    end: int


@dataclass
class ScannerState:
    """
    Mutable scanner state.

    Attributes:
        source: Full template text
        pos: Offset of the next unconsumed character
        stack: Open tags, innermost last
        last_tag: Innermost open tag, if any
    """
    source: str
    pos: int = 0
    stack: List[OpenTag] = field(default_factory=list)
    last_tag: Optional[str] = None

    @property
    def exhausted(self) -> bool:
        return self.pos >= len(self.source)

    def rest(self) -> str:
        return self.source[self.pos:]


@dataclass
class _StartTagMatch:
    tag: str
    start: int
    end: int = 0
    attrs: List["re.Match[str]"] = field(default_factory=list)
    attr_ranges: List[SourceRange] = field(default_factory=list)
    unary_slash: str = ""


# =============================================================================
# Scanner
# =============================================================================

class HTMLScanner:
    """
    Single-use template scanner.

    Args:
        template: Template source
        options: Compiler options (tag predicates, decoding, comments)
        warn: Diagnostic sink ``warn(message, range)``
    """

    def __init__(
        self,
        template: str,
        options: Optional[CompilerOptions] = None,
        warn: Optional[Callable[..., None]] = None,
    ):
        self.options = options or CompilerOptions()
        self.warn = warn or (lambda *args, **kwargs: None)
        self.state = ScannerState(template)

    def scan(self) -> Iterator[ParseEvent]:
        """Yield parse events for the whole template."""
        state = self.state
        source = state.source

        while not state.exhausted:
            last_pos = state.pos

            if not state.last_tag or not is_plain_text_element(state.last_tag):
                text_end = source.find("<", state.pos)

                if text_end == state.pos:
                    if comment.match(source, state.pos):
                        comment_end = source.find("-->", state.pos)
                        if comment_end >= 0:
                            if self.options.comments:
                                yield Comment(
                                    source[state.pos + 4:comment_end],
                                    state.pos,
                                    comment_end + 3,
                                )
                            state.pos = comment_end + 3
                            continue

                    if conditional_comment.match(source, state.pos):
                        conditional_end = source.find("]>", state.pos)
                        if conditional_end >= 0:
                            state.pos = conditional_end + 2
                            continue

                    doctype_match = doctype.match(source, state.pos)
                    if doctype_match:
                        state.pos = doctype_match.end()
                        continue

                    end_tag_match = end_tag.match(source, state.pos)
                    if end_tag_match:
                        cur = state.pos
                        state.pos = end_tag_match.end()
                        yield from self._parse_end_tag(end_tag_match.group(1), cur, state.pos)
                        continue

                    start_tag_match = self._parse_start_tag()
                    if start_tag_match:
                        yield from self._handle_start_tag(start_tag_match)
                        if should_ignore_first_newline(
                            start_tag_match.tag, source[state.pos:state.pos + 1]
                        ):
                            state.pos += 1
                        continue
                    # an unterminated start tag is dropped
                    text_end = state.pos

                text = ""
                if text_end >= 0:
                    while (
                        not end_tag.match(source, text_end)
                        and not start_tag_open.match(source, text_end)
                        and not comment.match(source, text_end)
                        and not conditional_comment.match(source, text_end)
                    ):
                        nxt = source.find("<", text_end + 1)
                        if nxt < 0:
                            break
                        text_end = nxt
                    text = source[state.pos:text_end]
                else:
                    text = source[state.pos:]

                if text:
                    state.pos += len(text)
                    yield Text(text, state.pos - len(text), state.pos)
            else:
                yield from self._scan_raw_text()

            if state.pos == last_pos:
                rest = state.rest()
                yield Text(rest, state.pos, len(source))
                if self.options.dev and not state.stack:
                    self.warn(
                        f'Mal-formatted tag at end of template: "{rest}"',
                        SourceRange(len(source)),
                    )
                break

        yield from self._parse_end_tag()

    def _scan_raw_text(self) -> Iterator[ParseEvent]:
        """Consume the body of a script/style/textarea element."""
        state = self.state
        stacked_tag = (state.last_tag or "").lower()
        match = _raw_end_pattern(stacked_tag).match(state.source, state.pos)
        end_tag_length = 0

        if match:
            end_tag_length = len(match.group(2))
            text = match.group(1)
            if not is_plain_text_element(stacked_tag) and stacked_tag != "noscript":
                text = _raw_comment.sub(r"\1", text)
                text = _raw_cdata.sub(r"\1", text)
            if should_ignore_first_newline(stacked_tag, text):
                text = text[1:]
            yield Text(text, match.start(1), match.end(1))
            state.pos = match.end()

        yield from self._parse_end_tag(stacked_tag, state.pos - end_tag_length, state.pos)

    def _parse_start_tag(self) -> Optional[_StartTagMatch]:
        state = self.state
        source = state.source
        open_match = start_tag_open.match(source, state.pos)
        if not open_match:
            return None

        match = _StartTagMatch(tag=open_match.group(1), start=state.pos)
        state.pos = open_match.end()

        while True:
            close = start_tag_close.match(source, state.pos)
            if close:
                match.unary_slash = close.group(1)
                state.pos = close.end()
                match.end = state.pos
                return match

            attr = dynamic_arg_attribute.match(source, state.pos) or attribute.match(
                source, state.pos
            )
            if not attr:
                return None
            match.attrs.append(attr)
            match.attr_ranges.append(SourceRange(state.pos, attr.end()))
            state.pos = attr.end()

    def _handle_start_tag(self, match: _StartTagMatch) -> Iterator[ParseEvent]:
        state = self.state
        options = self.options
        tag = match.tag

        if options.expect_html:
            if state.last_tag == "p" and is_non_phrasing_tag(tag):
                yield from self._parse_end_tag(state.last_tag)
            if options.can_be_left_open_tag(tag) and state.last_tag == tag:
                yield from self._parse_end_tag(tag)

        unary = bool(options.is_unary_tag(tag)) or bool(match.unary_slash)

        attrs: List[ASTAttr] = []
        for attr, span in zip(match.attrs, match.attr_ranges):
            name = attr.group(1)
            value = attr.group(3) or attr.group(4) or attr.group(5) or ""
            if tag == "a" and name == "href":
                decode_newlines = options.should_decode_newlines_for_href
            else:
                decode_newlines = options.should_decode_newlines
            item = ASTAttr(name=name, value=decode_attr(value, decode_newlines))
            if options.output_source_range:
                item.start = span.start + _leading_space.match(attr.group(0)).end()
                item.end = span.end
            attrs.append(item)

        if not unary:
            state.stack.append(OpenTag(tag, tag.lower(), match.start, match.end))
            state.last_tag = tag

        yield ElementStart(tag, attrs, unary, match.start, match.end)

    def _parse_end_tag(
        self,
        tag: Optional[str] = None,
        start: Optional[int] = None,
        end: Optional[int] = None,
    ) -> Iterator[ParseEvent]:
        """
        Close ``tag`` and everything opened after it.

        Without a tag, closes every open tag (end of input).
        """
        state = self.state
        if start is None:
            start = state.pos
        if end is None:
            end = state.pos

        lower_tag = ""
        if tag:
            lower_tag = tag.lower()
            pos = len(state.stack) - 1
            while pos >= 0 and state.stack[pos].lower_tag != lower_tag:
                pos -= 1
        else:
            pos = 0

        if pos >= 0:
            for i in range(len(state.stack) - 1, pos - 1, -1):
                open_tag = state.stack[i]
                if self.options.dev and (i > pos or not tag):
                    self.warn(
                        f"tag <{open_tag.tag}> has no matching end tag.",
                        SourceRange(open_tag.start, open_tag.end),
                    )
                yield ElementEnd(open_tag.tag, start, end)
            del state.stack[pos:]
            state.last_tag = state.stack[pos - 1].tag if pos else None
        elif lower_tag == "br":
            yield ElementStart(tag, [], True, start, end)  # type: ignore[arg-type]
        elif lower_tag == "p":
            yield ElementStart(tag, [], False, start, end)  # type: ignore[arg-type]
            yield ElementEnd(tag, start, end)  # type: ignore[arg-type]
