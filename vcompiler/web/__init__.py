"""
vcompiler Web Platform
======================

HTML tag tables, the class/style/model modules, ``v-model`` / ``v-text`` /
``v-html`` and a ready-to-use compiler.

Example:
    from vcompiler.web import compile

    result = compile('<p v-if="ok">{{ msg }}</p>')
    print(result.render)
"""

from vcompiler.engine.driver import create_compiler
from vcompiler.web.directives import WEB_DIRECTIVES
from vcompiler.web.modules import ClassModule, ModelModule, StyleModule, web_modules
from vcompiler.web.options import base_options, create_base_options
from vcompiler.web.tags import (
    get_tag_namespace,
    is_reserved_tag,
    is_unary_tag,
    must_use_prop,
    parse_style_text,
)

compiler = create_compiler(base_options)
compile = compiler.compile
compile_to_functions = compiler.compile_to_functions

__all__ = [
    "WEB_DIRECTIVES",
    "ClassModule",
    "ModelModule",
    "StyleModule",
    "base_options",
    "compile",
    "compile_to_functions",
    "compiler",
    "create_base_options",
    "get_tag_namespace",
    "is_reserved_tag",
    "is_unary_tag",
    "must_use_prop",
    "parse_style_text",
    "web_modules",
]
