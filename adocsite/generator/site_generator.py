"""High-level orchestration for building a documentation site.

This module mirrors a source tree of Asciidoctor documents into an output
tree. :class:`SiteGenerator` resets the output directory, stages the bundled
assets, and walks the source depth first: markup documents are rendered and
post-processed, files inside ``_res`` directories are copied verbatim, and
hidden entries or include fragments are skipped. Index documents are visited
before their siblings so the root index supplies the navigation and the
global attributes before any other page needs them.

Example
-------
>>> from pathlib import Path
>>> from adocsite.config import BuildSettings
>>> from adocsite.generator import SiteGenerator
>>> settings = BuildSettings(Path("config"), Path("docs"), Path("site"))
>>> SiteGenerator(settings).run()  # doctest: +SKIP
[PosixPath('site/index.html'), PosixPath('site/guide.html'), ...]
"""

from __future__ import annotations

import logging
import typing as typ

from adocsite._constants import (
    HTML_SUFFIX,
    RES_DIR,
    contains_index,
    is_hidden,
    is_include_fragment,
    is_markup,
)
from adocsite.assets import stage_assets
from adocsite.config import load_attributes
from adocsite.generator.models import BuildContext, PageTarget, RenderOptions
from adocsite.generator.navigation import PagePostProcessor
from adocsite.generator.output import copy_resource, reset_output_dir, write_page
from adocsite.generator.renderer import (
    AsciidoctorRenderer,
    CodeHighlighter,
    source_timestamp,
)

if typ.TYPE_CHECKING:
    from pathlib import Path

    from adocsite.config import BuildSettings
    from adocsite.generator.renderer import DocumentRenderer

logger = logging.getLogger(__name__)


def entry_sort_key(entry: Path) -> tuple[bool, bool, str]:
    """Order index-named entries first, files before directories, then by name."""
    return (not contains_index(entry.name), entry.is_dir(), entry.name)


def ordered_entries(directory: Path) -> list[Path]:
    """Return the children of ``directory`` in processing order."""
    return sorted(directory.iterdir(), key=entry_sort_key)


class SiteGenerator:
    """Render a markup source tree into a navigable HTML site."""

    def __init__(
        self,
        settings: BuildSettings,
        *,
        renderer: DocumentRenderer | None = None,
        context: BuildContext | None = None,
        highlighter: CodeHighlighter | None = None,
    ) -> None:
        """Initialize the generator.

        Parameters
        ----------
        settings : BuildSettings
            Source, output, and tool locations for the build.
        renderer : DocumentRenderer, optional
            Rendering engine; defaults to :class:`AsciidoctorRenderer` using
            ``settings.asciidoctor``.
        context : BuildContext, optional
            Build state; a fresh context is created when omitted.
        highlighter : CodeHighlighter, optional
            Code highlighter shared by the default renderer and the staged
            ``pygments.css``.
        """
        self.settings = settings
        self.highlighter = highlighter or CodeHighlighter()
        self.renderer = renderer or AsciidoctorRenderer(
            settings.asciidoctor, highlighter=self.highlighter
        )
        self.context = context or BuildContext()
        self.post_processor = PagePostProcessor(self.context)
        self.written: list[Path] = []

    def run(self) -> list[Path]:
        """Build the whole site and return the written files in order.

        Notes
        -----
        The output directory is deleted and recreated first; there is no
        incremental mode.
        """
        source_dir = self.settings.source_dir
        if not source_dir.is_dir():
            msg = f"Source directory '{source_dir}' does not exist."
            raise FileNotFoundError(msg)

        output_dir = self.settings.output_dir
        reset_output_dir(output_dir)
        self.written = []
        self.written.extend(stage_assets(output_dir, self.highlighter))
        self.process(source_dir, output_dir, depth=-1, resource=False)
        return self.written

    def process(
        self, source: Path, target: Path, *, depth: int, resource: bool
    ) -> None:
        """Process ``source`` and its descendants into ``target``.

        Parameters
        ----------
        source : Path
            File or directory in the source tree.
        target : Path
            Mirrored location in the output tree.
        depth : int
            Directory levels below the output root; the root itself is ``-1``.
        resource : bool
            ``True`` when ``source`` lies inside a resource subtree.
        """
        name = source.name
        if depth >= 0 and is_hidden(name):
            logger.debug("Skip hidden: %s", source)
            return
        if depth >= 0 and is_include_fragment(name):
            logger.debug("Skip include: %s", source)
            return

        if source.is_dir():
            resource_dir = resource or name == RES_DIR
            for entry in ordered_entries(source):
                self.process(
                    entry, target / entry.name, depth=depth + 1, resource=resource_dir
                )
        elif is_markup(name):
            self._render(source, target, depth)
        elif resource:
            self.written.append(copy_resource(source, target))

    def _render(self, source: Path, target: Path, depth: int) -> None:
        logger.info("Processing: %s", source)
        if contains_index(source.name) and not self.context.attributes_resolved:
            self.context.set_attributes(load_attributes(source.parent))

        options = RenderOptions(
            depth=depth,
            attributes=self.context.attributes,
            docdatetime=source_timestamp(source),
        )
        html = self.renderer.render(source, options)

        output_path = target.with_suffix(HTML_SUFFIX)
        relative = output_path.relative_to(self.settings.output_dir)
        page = PageTarget(relative_path=relative.as_posix(), depth=depth)
        html = self.post_processor.process(html, page)
        self.written.append(write_page(output_path, html))


__all__ = ["SiteGenerator", "entry_sort_key", "ordered_entries"]
