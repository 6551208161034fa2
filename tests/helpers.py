"""Test doubles and tree builders shared by the adocsite test suite.

The real rendering engine is an external executable, so the suite renders
documents with :class:`FakeRenderer`, a small stand-in that understands the
handful of constructs the tests need and emits HTML shaped like
Asciidoctor's standalone output:

* ``= Title`` becomes the document title and ``<h1>``.
* ``== Section`` becomes a ``sect1`` block with an ``_section`` anchor and
  an entry in the ``#toc.toc`` block.
* ``* link:target[Label]`` lines become list items with links.
* Any other non-blank line becomes a paragraph.
"""

from __future__ import annotations

import re
import typing as typ
from html import escape

if typ.TYPE_CHECKING:
    from pathlib import Path

    from adocsite.generator.models import RenderOptions

LINK_ITEM = re.compile(r"^\* link:(\S+?)\[([^\]]*)\]$")


def _anchor(title: str) -> str:
    return "_" + re.sub(r"[^a-z0-9]+", "_", title.lower()).strip("_")


class FakeRenderer:
    """Deterministic in-memory replacement for the Asciidoctor engine."""

    def __init__(self) -> None:
        self.calls: list[tuple[Path, RenderOptions]] = []

    def render(self, source: Path, options: RenderOptions) -> str:
        self.calls.append((source, options))
        attributes = options.to_attributes()
        title = source.stem
        sections: list[tuple[str, str]] = []
        body: list[str] = []
        items: list[str] = []

        def _flush() -> None:
            if items:
                body.append('<div class="ulist"><ul>' + "".join(items) + "</ul></div>")
                items.clear()

        for line in source.read_text(encoding="utf-8").splitlines():
            link = LINK_ITEM.match(line)
            if link:
                href, label = link.groups()
                items.append(f'<li><p><a href="{href}">{escape(label)}</a></p></li>')
                continue
            _flush()
            if line.startswith("== "):
                heading = line[3:].strip()
                anchor = _anchor(heading)
                sections.append((heading, anchor))
                body.append(
                    f'<div class="sect1"><h2 id="{anchor}">'
                    f'<a class="anchor" href="#{anchor}"></a>{escape(heading)}</h2></div>'
                )
            elif line.startswith("= "):
                title = line[2:].strip()
            elif line.strip():
                body.append(f"<div class=\"paragraph\"><p>{escape(line)}</p></div>")
        _flush()

        toc = ""
        if sections:
            entries = "".join(
                f'<li><a href="#{anchor}">{escape(heading)}</a></li>'
                for heading, anchor in sections
            )
            toc = (
                '<div id="toc" class="toc"><div id="toctitle">Table of Contents</div>'
                f'<ul class="sectlevel1">{entries}</ul></div>'
            )
        product = attributes.get("product", "")
        return (
            "<!DOCTYPE html>\n"
            '<html lang="en">\n<head>\n<meta charset="UTF-8">\n'
            f"<title>{escape(title)}</title>\n"
            f'<link rel="stylesheet" href="{attributes["stylesdir"]}/'
            f'{attributes["stylesheet"]}">\n'
            "</head>\n"
            '<body class="article">\n'
            f'<div id="header"><h1>{escape(title)}</h1>{toc}</div>\n'
            f'<div id="content">{"".join(body)}</div>\n'
            f'<div id="footer"><div id="footer-text">{escape(product)}</div></div>\n'
            "</body>\n</html>\n"
        )


def write_tree(root: Path, files: typ.Mapping[str, str | bytes]) -> Path:
    """Create ``files`` (POSIX relative path -> content) below ``root``."""
    for relative, content in files.items():
        path = root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, bytes):
            path.write_bytes(content)
        else:
            path.write_text(content, encoding="utf-8")
    return root


INDEX_ADOC = (
    "= Handbook\n"
    "\n"
    "== Overview\n"
    "* link:index.html[Home]\n"
    "* link:guide.html[Guide]\n"
    "* link:reference/api.html[API]\n"
    "* link:reference/deep/notes.html[Notes]\n"
)


