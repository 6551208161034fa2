"""Naming conventions shared by the site build.

These constants keep file extensions, reserved directory names, and bundled
asset names in one place so the tree walker, renderer, post-processor, and
tests agree on them. Intended for internal use within the adocsite package.

Examples
--------
>>> from adocsite import _constants
>>> _constants.is_include_fragment("header.adocf")
True
>>> _constants.contains_index("index.adoc")
True
>>> _constants.relative_prefix(2)
'../../'
"""

from __future__ import annotations

MARKUP_SUFFIX = ".adoc"
INCLUDE_SUFFIX = ".adocf"
HTML_SUFFIX = ".html"
HIDDEN_PREFIX = "."
INDEX_MARKER = "index"
RES_DIR = "_res"
CONFIG_FILENAME = "adocsite.xml"
CONFIG_ROOT = "attributes"

SCRIPTS = ("adocsite.js",)
STYLESHEETS = ("adocsite.css",)
PYGMENTS_STYLESHEET = "pygments.css"
PYGMENTS_STYLE = "monokai"


def is_hidden(name: str) -> bool:
    """Return ``True`` for entries that never reach the output tree."""
    return name.startswith(HIDDEN_PREFIX)


def is_include_fragment(name: str) -> bool:
    """Return ``True`` for documents that are only transcluded by others."""
    return name.endswith(INCLUDE_SUFFIX)


def is_markup(name: str) -> bool:
    return name.endswith(MARKUP_SUFFIX)


def contains_index(name: str) -> bool:
    return INDEX_MARKER in name


def relative_prefix(depth: int) -> str:
    """Return the ``../`` sequence leading from ``depth`` back to the output root."""
    return "../" * max(depth, 0)
