"""Propagate the root table of contents into every rendered page.

The first index page rendered in the output root donates its body as the
site-wide navigation fragment. Every page rendered afterwards receives the
shared scripts, a copy of that fragment in a left-hand sidebar with the
current page highlighted, and its own section list nested under its entry.

Example
-------
>>> from adocsite.generator.models import BuildContext, PageTarget
>>> from adocsite.generator.navigation import PagePostProcessor
>>> processor = PagePostProcessor(BuildContext())
>>> index_html = "<html><body><a href='guide.html'>Guide</a></body></html>"
>>> processor.process(index_html, PageTarget("index.html", 0)) == index_html
True
>>> processor.context.toc_captured
True
"""

from __future__ import annotations

import logging
import typing as typ
from pathlib import Path
from urllib.parse import urlsplit

from bs4 import BeautifulSoup
from jinja2 import Environment, FileSystemLoader
from markupsafe import Markup

from adocsite._constants import RES_DIR, SCRIPTS

if typ.TYPE_CHECKING:
    from bs4 import Tag

    from adocsite.generator.models import BuildContext, PageTarget

logger = logging.getLogger(__name__)

HTML_PARSER = "html.parser"
LOCAL_TOC_SELECTOR = "#toc.toc"
LOCAL_SECTIONS_SELECTOR = ".sectlevel1"
NAV_CLASS = "toc2"
CURRENT_CLASS = "current"


class PagePostProcessor:
    """Capture the root table of contents once and inject it everywhere else."""

    def __init__(
        self,
        context: BuildContext,
        *,
        scripts: typ.Sequence[str] = SCRIPTS,
        templates_dir: Path | None = None,
    ) -> None:
        """Initialize the post-processor.

        Parameters
        ----------
        context : BuildContext
            Build state holding the captured navigation fragment.
        scripts : Sequence[str], optional
            Script file names injected from the shared resource directory.
        templates_dir : Path, optional
            Directory containing ``site_nav.jinja``; defaults to the package
            templates.
        """
        self.context = context
        self.scripts = tuple(scripts)
        default_templates = Path(__file__).resolve().parents[1] / "templates"
        self.templates_dir = templates_dir or default_templates
        self.env = Environment(
            loader=FileSystemLoader(str(self.templates_dir)),
            autoescape=True,
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self.template = self.env.get_template("site_nav.jinja")

    def process(self, html: str, page: PageTarget) -> str:
        """Return the final HTML for ``page``.

        Until a navigation fragment is captured, pages are returned unchanged;
        the root index page additionally donates its body as the fragment.
        """
        logger.debug("Post-processing %s at depth %d", page.relative_path, page.depth)
        if not self.context.toc_captured:
            if page.is_root_index:
                self.context.capture_toc(extract_fragment(html), page.relative_path)
                logger.debug("Captured navigation from %s", page.relative_path)
            else:
                logger.debug("No navigation captured yet for %s", page.relative_path)
            return html
        return self._inject(html, page)

    def _inject(self, html: str, page: PageTarget) -> str:
        soup = BeautifulSoup(html, HTML_PARSER)
        self._inject_scripts(soup, page)

        local_toc = soup.select_one(LOCAL_TOC_SELECTOR)
        sub_nav: Tag | None = None
        if local_toc is not None:
            sections = local_toc.select_one(LOCAL_SECTIONS_SELECTOR)
            if sections is not None:
                sub_nav = sections.extract()
            local_toc.clear()

        nav = self._build_nav()
        body = soup.body
        if body is None:
            logger.debug("No <body> in %s, navigation prepended", page.relative_path)
        else:
            _add_class(body, NAV_CLASS)
        if local_toc is not None:
            local_toc.insert_before(nav)
        elif body is not None:
            body.insert(0, nav)
        else:
            soup.insert(0, nav)

        self._link_entries(nav, page, sub_nav)
        return str(soup)

    def _inject_scripts(self, soup: BeautifulSoup, page: PageTarget) -> None:
        head = soup.head
        if head is None:
            logger.debug("No <head> in %s, scripts not injected", page.relative_path)
            return
        for script in self.scripts:
            head.append(soup.new_tag("script", src=f"{page.prefix}{RES_DIR}/{script}"))

    def _build_nav(self) -> Tag:
        """Return a freshly parsed copy of the navigation wrapper."""
        markup = self.template.render(fragment=Markup(self.context.toc_fragment or ""))
        wrapper = BeautifulSoup(markup, HTML_PARSER).find("div")
        return typ.cast("Tag", wrapper.extract())

    def _link_entries(self, nav: Tag, page: PageTarget, sub_nav: Tag | None) -> None:
        """Mark the current entry and rebase every reference for ``page``."""
        links = nav.find_all("a", href=True)
        sources = nav.find_all(src=True)
        hrefs = [link["href"] for link in links]
        current = select_current_link(hrefs, page.relative_path)
        if current is None:
            logger.debug("No navigation entry matches %s", page.relative_path)
        else:
            _add_class(links[current], CURRENT_CLASS)
            if sub_nav is not None:
                links[current].insert_after(sub_nav)

        source = self.context.toc_source or ""
        for link in links:
            link["href"] = rebase_href(link["href"], page.prefix, source)
            link["title"] = link.get_text(strip=True)
        for tag in sources:
            tag["src"] = rebase_href(tag["src"], page.prefix, source)


def extract_fragment(html: str) -> str:
    """Return the document body of ``html`` serialized as a ``<div>``."""
    soup = BeautifulSoup(html, HTML_PARSER)
    body = soup.body
    if body is None:
        return str(soup)
    body.name = "div"
    return str(body)


def is_external(href: str) -> bool:
    parts = urlsplit(href)
    return bool(parts.scheme or parts.netloc or href.startswith("/"))


def is_current_link(href: str, page_path: str) -> bool:
    """Return ``True`` when ``href`` names ``page_path`` by a path-segment suffix."""
    if not href or href.startswith("#") or is_external(href):
        return False
    return page_path == href or page_path.endswith(f"/{href}")


def select_current_link(hrefs: typ.Sequence[str], page_path: str) -> int | None:
    """Return the index of the navigation entry that best names ``page_path``.

    An exact match wins; otherwise the longest matching suffix is chosen, so
    ``docs/guide.html`` beats ``guide.html`` on the ``docs/guide.html`` page. Ties
    go to the earliest entry. ``None`` means no entry names the page.
    """
    best: int | None = None
    for index, href in enumerate(hrefs):
        if not is_current_link(href, page_path):
            continue
        if best is None or len(href) > len(hrefs[best]):
            best = index
    return best


def rebase_href(href: str, prefix: str, fragment_source: str) -> str:
    """Rewrite a root-relative navigation ``href`` for a page below ``prefix``.

    Fragment-only targets point into the page the navigation was captured
    from, so they are resolved against ``fragment_source``.
    """
    if not href or is_external(href):
        return href
    if href.startswith("#"):
        return f"{prefix}{fragment_source}{href}"
    return f"{prefix}{href}"


def _add_class(tag: Tag, name: str) -> None:
    classes = list(tag.get("class") or [])
    if name not in classes:
        classes.append(name)
    tag["class"] = classes


__all__ = [
    "PagePostProcessor",
    "extract_fragment",
    "is_current_link",
    "is_external",
    "rebase_href",
    "select_current_link",
]
