"""Template compilation, rendering and helper functions."""

from .helpers import HelperLibrary
from .renderer import (
    CompiledTemplate,
    TemplateRenderer,
    compile_header,
    compile_row,
    compile_template,
    render,
)

__all__ = [
    "CompiledTemplate",
    "HelperLibrary",
    "TemplateRenderer",
    "compile_header",
    "compile_row",
    "compile_template",
    "render",
]
