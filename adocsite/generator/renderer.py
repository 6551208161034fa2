"""Render markup documents to HTML through the external Asciidoctor engine."""

from __future__ import annotations

import datetime as dt
import logging
import re
import subprocess
import typing as typ
from html import escape, unescape

from pygments import highlight
from pygments.formatters.html import HtmlFormatter
from pygments.lexers import get_lexer_by_name
from pygments.util import ClassNotFound

from adocsite._constants import PYGMENTS_STYLE
from adocsite.generator.macros import DEFAULT_MACROS, InlineMacro, expand_macros

if typ.TYPE_CHECKING:
    from pathlib import Path

    from adocsite.generator.models import RenderOptions

logger = logging.getLogger(__name__)

PIPELINE_BLOCK_PATTERN = re.compile(
    r'<pre lang="([^"]*)"><code>(.*?)</code></pre>', re.DOTALL
)
HIGHLIGHT_OPEN_TAG = re.compile(r'<div class="highlight">')


class RenderError(RuntimeError):
    """Raised when the rendering engine fails on a document."""


class DocumentRenderer(typ.Protocol):
    """Anything able to turn a markup file into a standalone HTML document."""

    def render(self, source: Path, options: RenderOptions) -> str: ...


class CodeHighlighter:
    """Highlight engine-emitted code blocks with Pygments."""

    def __init__(self, pygments_style: str = PYGMENTS_STYLE) -> None:
        self.pygments_style = pygments_style
        self._formatter = HtmlFormatter(style=pygments_style, cssclass="highlight")

    @property
    def stylesheet(self) -> str:
        """Return the CSS used for highlighted code blocks."""
        return self._formatter.get_style_defs(".highlight")

    def code_block(self, code: str, language: str | None = None) -> str:
        """Render ``code`` into highlighted HTML tagged with its language."""
        lang = language or "text"
        try:
            lexer = get_lexer_by_name(lang)
        except ClassNotFound:
            lexer = get_lexer_by_name("text")
        html = highlight(code, lexer, self._formatter)
        safe_lang = escape(lang, quote=True)
        return HIGHLIGHT_OPEN_TAG.sub(
            f'<div class="highlight" data-language="{safe_lang}">', html, 1
        )

    def highlight_html(self, html: str) -> str:
        """Replace every ``<pre lang="..."><code>`` block in ``html``."""

        def _repl(match: re.Match[str]) -> str:
            return self.code_block(unescape(match.group(2)), match.group(1))

        return PIPELINE_BLOCK_PATTERN.sub(_repl, html)


class AsciidoctorRenderer:
    """Drive the ``asciidoctor`` executable for one document at a time.

    The source text is piped on stdin after inline macro expansion and the
    standalone HTML document is read back from stdout. Relative includes
    resolve against the source file's directory.

    Notes
    -----
    Macros are expanded in the text of ``source`` only. Content pulled in
    through ``include::`` directives is resolved later by the engine, so
    macros written inside included files reach the output unexpanded.
    """

    def __init__(
        self,
        executable: str = "asciidoctor",
        *,
        macros: typ.Sequence[InlineMacro] = DEFAULT_MACROS,
        highlighter: CodeHighlighter | None = None,
    ) -> None:
        self.executable = executable
        self.macros = tuple(macros)
        self.highlighter = highlighter or CodeHighlighter()

    def render(self, source: Path, options: RenderOptions) -> str:
        """Render ``source`` into a complete HTML document.

        Raises
        ------
        RenderError
            If the executable cannot be started or exits with an error.
        """
        attributes = options.to_attributes()
        attributes.setdefault("docname", source.stem)
        text = source.read_text(encoding="utf-8")
        text = expand_macros(text, self.macros, attributes)
        command = self.build_command(source, attributes)
        try:
            completed = subprocess.run(  # noqa: S603
                command,
                input=text,
                check=True,
                text=True,
                encoding="utf-8",
                capture_output=True,
            )
        except FileNotFoundError as exc:
            msg = f"Rendering engine '{self.executable}' was not found."
            raise RenderError(msg) from exc
        except subprocess.CalledProcessError as exc:
            msg = f"Failed to render '{source}': {(exc.stderr or '').strip()}"
            raise RenderError(msg) from exc
        if completed.stderr:
            logger.warning("%s: %s", source, completed.stderr.strip())
        return self.highlighter.highlight_html(completed.stdout)

    def build_command(
        self, source: Path, attributes: typ.Mapping[str, str]
    ) -> list[str]:
        """Return the command line rendering ``source`` with ``attributes``."""
        command = [
            self.executable,
            "--safe-mode",
            "unsafe",
            "--base-dir",
            str(source.parent),
            "--out-file",
            "-",
        ]
        for name, value in attributes.items():
            command.extend(["-a", f"{name}={value}" if value else name])
        command.append("-")
        return command


def source_timestamp(source: Path) -> str:
    """Return the modification time of ``source`` in Asciidoctor's format."""
    modified = dt.datetime.fromtimestamp(source.stat().st_mtime, tz=dt.UTC)
    return modified.strftime("%Y-%m-%d %H:%M:%S %z")


__all__ = [
    "AsciidoctorRenderer",
    "CodeHighlighter",
    "DocumentRenderer",
    "PIPELINE_BLOCK_PATTERN",
    "RenderError",
    "source_timestamp",
]
