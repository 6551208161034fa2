"""Utilities for walking, rendering, and post-processing documentation pages."""

from .macros import InlineMacro
from .models import BuildContext, BuildStateError, PageTarget, RenderOptions
from .navigation import PagePostProcessor
from .renderer import AsciidoctorRenderer, CodeHighlighter, RenderError
from .site_generator import SiteGenerator

__all__ = [
    "AsciidoctorRenderer",
    "BuildContext",
    "BuildStateError",
    "CodeHighlighter",
    "InlineMacro",
    "PagePostProcessor",
    "PageTarget",
    "RenderError",
    "RenderOptions",
    "SiteGenerator",
]
