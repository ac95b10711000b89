"""
vcompiler Web Tags
==================

HTML/SVG tag tables and predicates for the web platform.
"""

from __future__ import annotations

import re
from typing import Dict, Optional

from vcompiler.parser.html_scanner import is_non_phrasing_tag
from vcompiler.utils.helpers import cached, make_map


NAMESPACE_MAP = {
    "svg": "http://www.w3.org/2000/svg",
    "math": "http://www.w3.org/1998/Math/MathML",
}

is_unary_tag = make_map(
    "area,base,br,col,embed,frame,hr,img,input,isindex,keygen,"
    "link,meta,param,source,track,wbr"
)

# Elements whose end tag may be omitted.
can_be_left_open_tag = make_map(
    "colgroup,dd,dt,li,options,p,td,tfoot,th,thead,tr,source"
)

is_html_tag = make_map(
    "html,body,base,head,link,meta,style,title,"
    "address,article,aside,footer,header,h1,h2,h3,h4,h5,h6,hgroup,nav,section,"
    "div,dd,dl,dt,figcaption,figure,picture,hr,img,li,main,ol,p,pre,ul,"
    "a,b,abbr,bdi,bdo,br,cite,code,data,dfn,em,i,kbd,mark,q,rp,rt,rtc,ruby,"
    "s,samp,small,span,strong,sub,sup,time,u,var,wbr,area,audio,map,track,video,"
    "embed,object,param,source,canvas,script,noscript,del,ins,"
    "caption,col,colgroup,table,thead,tbody,td,th,tr,"
    "button,datalist,fieldset,form,input,label,legend,meter,optgroup,option,"
    "output,progress,select,textarea,"
    "details,dialog,menu,menuitem,summary,"
    "content,element,shadow,template,blockquote,iframe,tfoot"
)

is_svg = make_map(
    "svg,animate,circle,clippath,cursor,defs,desc,ellipse,filter,font-face,"
    "foreignobject,g,glyph,image,line,marker,mask,missing-glyph,path,pattern,"
    "polygon,polyline,rect,switch,symbol,text,textpath,tspan,use,view",
    expects_lower_case=True,
)

is_text_input_type = make_map("text,number,password,search,email,tel,url")

_accept_value = make_map("input,textarea,option,select,progress")


def is_pre_tag(tag: Optional[str]) -> bool:
    return tag == "pre"


def is_reserved_tag(tag: str) -> bool:
    """Platform tags, which are never resolved as components."""
    return is_html_tag(tag) or is_svg(tag)


def get_tag_namespace(tag: str) -> Optional[str]:
    if is_svg(tag):
        return "svg"
    if tag == "math":
        return "math"
    return None


def must_use_prop(tag: str, type: Optional[str] = None, attr: Optional[str] = None) -> bool:
    """
    Whether an attribute binding has to be set as a DOM property.

    Example:
        >>> must_use_prop("input", "text", "value")
        True
        >>> must_use_prop("input", "button", "value")
        False
    """
    return (
        (attr == "value" and _accept_value(tag) and type != "button")
        or (attr == "selected" and tag == "option")
        or (attr == "checked" and tag == "input")
        or (attr == "muted" and tag == "video")
    )


_list_delimiter_re = re.compile(r";(?![^(]*\))")
_property_delimiter_re = re.compile(r":(.+)", re.DOTALL)


@cached
def _parse_style_text(css_text: str) -> Dict[str, str]:
    result: Dict[str, str] = {}
    for item in _list_delimiter_re.split(css_text):
        if not item:
            continue
        parts = _property_delimiter_re.split(item, maxsplit=1)
        if len(parts) > 1:
            result[parts[0].strip()] = parts[1].strip()
    return result


def parse_style_text(css_text: str) -> Dict[str, str]:
    """
    Parse an inline ``style`` attribute into a property map.

    Semicolons inside parentheses (``url(a;b)``) do not split declarations.

    Example:
        >>> parse_style_text("color: red; background: url(a;b)")
        {'color': 'red', 'background': 'url(a;b)'}
    """
    return dict(_parse_style_text(css_text))


__all__ = [
    "NAMESPACE_MAP",
    "can_be_left_open_tag",
    "get_tag_namespace",
    "is_html_tag",
    "is_non_phrasing_tag",
    "is_pre_tag",
    "is_reserved_tag",
    "is_svg",
    "is_text_input_type",
    "is_unary_tag",
    "must_use_prop",
    "parse_style_text",
]
