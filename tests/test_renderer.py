"""Tests for render options, macro expansion, and the Asciidoctor driver.

The external ``asciidoctor`` executable is never started: ``subprocess.run``
is replaced through ``pytest-mock`` so the tests can inspect the command
line and feed canned HTML back to the renderer.
"""

from __future__ import annotations

import subprocess
import typing as typ

import pytest
from bs4 import BeautifulSoup

from adocsite.generator.macros import (
    DEFAULT_JAVADOC_URL,
    DEFAULT_MACROS,
    InlineMacro,
    expand_macros,
    javadoc_link,
)
from adocsite.generator.models import ATTRIBUTION_LABEL, RenderOptions
from adocsite.generator.renderer import (
    AsciidoctorRenderer,
    CodeHighlighter,
    RenderError,
    source_timestamp,
)

if typ.TYPE_CHECKING:
    from pathlib import Path

RUN_TARGET = "adocsite.generator.renderer.subprocess.run"


@pytest.fixture
def document(tmp_path: Path) -> Path:
    source = tmp_path / "docs" / "guide.adoc"
    source.parent.mkdir()
    source.write_text(
        "= Guide\n\nSee javadoc:java.util.List#size()[] for details.\n",
        encoding="utf-8",
    )
    return source


def _completed(stdout: str, stderr: str = "") -> subprocess.CompletedProcess[str]:
    return subprocess.CompletedProcess(
        args=[], returncode=0, stdout=stdout, stderr=stderr
    )


def test_render_options_defaults_depend_on_depth() -> None:
    attributes = RenderOptions(depth=2).to_attributes()
    assert attributes["stylesdir"] == "../../_res"
    assert attributes["stylesheet"] == "adocsite.css"
    assert attributes["icons"] == "font"
    assert attributes["source-highlighter"] == "html-pipeline"
    assert attributes["last-update-label"] == ATTRIBUTION_LABEL
    for flag in ("linkcss", "toc", "sectanchors"):
        assert attributes[flag] == "", f"{flag} should be enabled"


def test_global_attributes_override_defaults() -> None:
    options = RenderOptions(
        depth=0,
        attributes={"icons": "image", "product": "Acme"},
        docdatetime="2024-05-01 10:00:00 +0000",
    )
    attributes = options.to_attributes()
    assert attributes["icons"] == "image"
    assert attributes["product"] == "Acme"
    assert attributes["stylesdir"] == "_res"
    assert attributes["docdate"] == "2024-05-01"


def test_build_command_passes_attributes(document: Path) -> None:
    renderer = AsciidoctorRenderer("/usr/bin/asciidoctor")
    command = renderer.build_command(document, {"toc": "", "icons": "font"})
    assert command[0] == "/usr/bin/asciidoctor"
    assert command[-1] == "-", "Source is read from stdin"
    assert ["--base-dir", str(document.parent)] == command[3:5]
    assert ["--out-file", "-"] == command[5:7]
    assert command[7:11] == ["-a", "toc", "-a", "icons=font"]


def test_render_pipes_expanded_source(document: Path, mocker: typ.Any) -> None:
    run = mocker.patch(RUN_TARGET, return_value=_completed("<html><body></body></html>"))
    html = AsciidoctorRenderer().render(document, RenderOptions(depth=1))
    assert html == "<html><body></body></html>"
    command = run.call_args.args[0]
    assert "stylesdir=../_res" in command
    assert "docname=guide" in command
    piped = run.call_args.kwargs["input"]
    assert "javadoc:" not in piped
    assert 'pass:[<a href="' in piped
    assert run.call_args.kwargs["check"] is True


def test_render_highlights_pipeline_blocks(document: Path, mocker: typ.Any) -> None:
    stdout = (
        '<div class="listingblock"><div class="content">'
        '<pre lang="python"><code>print(&quot;hi&quot;) &lt; 3</code></pre>'
        "</div></div>"
    )
    mocker.patch(RUN_TARGET, return_value=_completed(stdout))
    html = AsciidoctorRenderer().render(document, RenderOptions(depth=0))
    block = BeautifulSoup(html, "html.parser").find("div", class_="highlight")
    assert block is not None, html
    assert block["data-language"] == "python"
    assert block.get_text() == 'print("hi") < 3\n'


def test_engine_failure_is_fatal(document: Path, mocker: typ.Any) -> None:
    mocker.patch(
        RUN_TARGET,
        side_effect=subprocess.CalledProcessError(
            1, ["asciidoctor"], output="", stderr="asciidoctor: FAILED: boom"
        ),
    )
    with pytest.raises(RenderError, match="boom"):
        AsciidoctorRenderer().render(document, RenderOptions(depth=0))


def test_missing_engine_is_fatal(document: Path, mocker: typ.Any) -> None:
    mocker.patch(RUN_TARGET, side_effect=FileNotFoundError("asciidoctor"))
    with pytest.raises(RenderError, match="not found"):
        AsciidoctorRenderer("missing-asciidoctor").render(
            document, RenderOptions(depth=0)
        )


def test_code_block_falls_back_to_text() -> None:
    html = CodeHighlighter().code_block("plain words", "no-such-language")
    block = BeautifulSoup(html, "html.parser").find("div", class_="highlight")
    assert block["data-language"] == "no-such-language"
    assert "plain words" in block.get_text()


def test_highlighter_stylesheet_targets_highlight_class() -> None:
    assert ".highlight" in CodeHighlighter().stylesheet


def test_source_timestamp_is_stable(document: Path) -> None:
    assert source_timestamp(document) == source_timestamp(document)
    assert source_timestamp(document).endswith("+0000")


def test_javadoc_link_defaults() -> None:
    html = javadoc_link("java.util.List#size()", "", {})
    link = BeautifulSoup(html, "html.parser").a
    assert link["href"] == f"{DEFAULT_JAVADOC_URL}java/util/List.html#size()"
    assert link.get_text() == "List.size()"


def test_javadoc_link_uses_configured_base() -> None:
    attributes = {"javadoc-url": "https://x.invalid/api"}
    html = javadoc_link("org.acme.Server", "the server", attributes)
    link = BeautifulSoup(html, "html.parser").a
    assert link["href"] == "https://x.invalid/api/org/acme/Server.html"
    assert link.get_text() == "the server"


def test_expand_macros_leaves_escaped_and_unknown_text() -> None:
    upper = InlineMacro(
        "shout", lambda target, label, _attrs: f"<b>{target.upper()}{label}</b>"
    )
    text = "a shout:hey[!] b \\shout:no[] c whisper:x[]"
    assert expand_macros(text, [upper], {}) == (
        "a pass:[<b>HEY!</b>] b \\shout:no[] c whisper:x[]"
    )


@pytest.mark.parametrize(
    "block",
    [
        "----\nsee javadoc:java.util.List[List] here\n----\n",
        "....\njavadoc:java.util.List[]\n....\n",
        "++++\njavadoc:java.util.List[]\n++++\n",
        "////\njavadoc:java.util.List[]\n////\n",
        "// javadoc:java.util.List[]\n",
    ],
)
def test_expand_macros_skips_verbatim_and_comment_blocks(block: str) -> None:
    assert expand_macros(block, DEFAULT_MACROS, {}) == block


def test_expand_macros_resumes_after_closing_delimiter() -> None:
    text = (
        "------\n"
        "----\n"
        "javadoc:java.util.List[inside]\n"
        "------\n"
        "After javadoc:java.util.Map[Map].\n"
    )
    expanded = expand_macros(text, DEFAULT_MACROS, {})
    assert "javadoc:java.util.List[inside]" in expanded, (
        "A shorter delimiter must not close the block"
    )
    assert 'href="https://docs.oracle.com/javase/8/docs/api/java/util/Map.html"' in (
        expanded
    )
    assert "javadoc:java.util.Map" not in expanded
