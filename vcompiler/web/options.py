"""
vcompiler Web Options
=====================

Base compiler options of the web platform.
"""

from __future__ import annotations

from vcompiler.core.config import CompilerOptions
from vcompiler.web.directives import WEB_DIRECTIVES
from vcompiler.web.modules import web_modules
from vcompiler.web.tags import (
    can_be_left_open_tag,
    get_tag_namespace,
    is_pre_tag,
    is_reserved_tag,
    is_unary_tag,
    must_use_prop,
)


def create_base_options() -> CompilerOptions:
    """Fresh web platform options."""
    return CompilerOptions(
        expect_html=True,
        modules=web_modules(),
        directives=dict(WEB_DIRECTIVES),
        is_pre_tag=is_pre_tag,
        is_unary_tag=is_unary_tag,
        must_use_prop=must_use_prop,
        can_be_left_open_tag=can_be_left_open_tag,
        is_reserved_tag=is_reserved_tag,
        get_tag_namespace=get_tag_namespace,
    )


base_options = create_base_options()
