"""Inline macros expanded before documents reach the rendering engine.

A macro is written ``name:target[label]`` in the markup source. Each
:class:`InlineMacro` pairs a macro name with a pure function turning the
target, the label, and the document attributes into inline HTML; the
renderer wraps that HTML in an inline passthrough so the engine emits it
verbatim. Delimited verbatim and comment blocks are copied as written, since
the engine never applies inline macros inside them.
"""

from __future__ import annotations

import dataclasses as dc
import re
import typing as typ
from html import escape

MacroHandler = typ.Callable[[str, str, typ.Mapping[str, str]], str]

DEFAULT_JAVADOC_URL = "https://docs.oracle.com/javase/8/docs/api/"
VERBATIM_DELIMITER = re.compile(r"-{4,}|\.{4,}|\+{4,}|/{4,}")
COMMENT_LINE = re.compile(r"//(?!//)")


@dc.dataclass(frozen=True, slots=True)
class InlineMacro:
    """Named inline macro and the handler producing its HTML."""

    name: str
    handler: MacroHandler

    @property
    def pattern(self) -> re.Pattern[str]:
        return re.compile(
            rf"(?<![\w\\]){re.escape(self.name)}:([^\s\[\]]+)\[([^\]]*)\]"
        )


def expand_macros(
    text: str,
    macros: typ.Iterable[InlineMacro],
    attributes: typ.Mapping[str, str],
) -> str:
    """Replace every macro occurrence in ``text`` with a passthrough of its HTML.

    Lines inside delimited listing, literal, passthrough and comment blocks
    are left untouched, as are single-line ``//`` comments.
    """
    registered = tuple(macros)
    expanded: list[str] = []
    delimiter: str | None = None
    for line in text.splitlines(keepends=True):
        stripped = line.rstrip()
        if delimiter is not None:
            if stripped == delimiter:
                delimiter = None
            expanded.append(line)
        elif VERBATIM_DELIMITER.fullmatch(stripped):
            delimiter = stripped
            expanded.append(line)
        elif COMMENT_LINE.match(line):
            expanded.append(line)
        else:
            expanded.append(_expand_line(line, registered, attributes))
    return "".join(expanded)


def _expand_line(
    line: str, macros: tuple[InlineMacro, ...], attributes: typ.Mapping[str, str]
) -> str:
    for macro in macros:

        def _repl(match: re.Match[str], macro: InlineMacro = macro) -> str:
            html = macro.handler(match.group(1), match.group(2), attributes)
            return f"pass:[{html}]"

        line = macro.pattern.sub(_repl, line)
    return line


def javadoc_link(target: str, label: str, attributes: typ.Mapping[str, str]) -> str:
    """Return a link into generated Java API docs.

    ``target`` is a fully qualified type name with an optional member after
    ``#``, for example ``java.util.List#size()``. Without a label the simple
    type name (plus member) is shown.
    """
    type_name, _, member = target.partition("#")
    base = attributes.get("javadoc-url") or DEFAULT_JAVADOC_URL
    if not base.endswith("/"):
        base = f"{base}/"
    href = f"{base}{type_name.replace('.', '/')}.html"
    if member:
        href = f"{href}#{member}"
    if not label:
        simple = type_name.rsplit(".", 1)[-1]
        label = f"{simple}.{member}" if member else simple
    return (
        f'<a href="{escape(href, quote=True)}" target="_blank" '
        f'class="javadoc">{escape(label)}</a>'
    )


JAVADOC = InlineMacro("javadoc", javadoc_link)
DEFAULT_MACROS: tuple[InlineMacro, ...] = (JAVADOC,)

__all__ = [
    "DEFAULT_JAVADOC_URL",
    "DEFAULT_MACROS",
    "JAVADOC",
    "InlineMacro",
    "MacroHandler",
    "expand_macros",
    "javadoc_link",
]
