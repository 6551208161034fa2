"""Validate internal references in a generated site.

:class:`LinkChecker` scans every HTML file below an output directory and
counts references that do not resolve: missing files, and fragments that
name no ``id`` (or ``<a name>``) in the target page. External URLs are not
fetched. Each broken reference is logged at ERROR level.

Examples
--------
>>> from pathlib import Path
>>> from adocsite.linkcheck import LinkChecker
>>> LinkChecker(Path("site")).check()  # doctest: +SKIP
0
"""

from __future__ import annotations

import dataclasses as dc
import logging
import typing as typ
from pathlib import Path
from urllib.parse import unquote, urlsplit

from bs4 import BeautifulSoup

from ._constants import HTML_SUFFIX

logger = logging.getLogger(__name__)

REFERENCE_ATTRIBUTES: tuple[tuple[str, str], ...] = (
    ("a", "href"),
    ("link", "href"),
    ("script", "src"),
    ("img", "src"),
)
IGNORED_SCHEMES = ("mailto:", "tel:", "javascript:", "data:")


@dc.dataclass(frozen=True, slots=True)
class BrokenLink:
    """Reference from ``source`` that does not resolve."""

    source: Path
    target: str
    reason: str


class LinkChecker:
    """Count unresolved internal references below ``output_dir``."""

    def __init__(self, output_dir: Path) -> None:
        self.output_dir = output_dir
        self._anchors: dict[Path, set[str]] = {}
        self.broken: list[BrokenLink] = []

    def check(self) -> int:
        """Scan the site, log every broken reference, and return their count."""
        self.broken = []
        for page in sorted(self.output_dir.rglob(f"*{HTML_SUFFIX}")):
            soup = self._parse(page)
            for reference in _references(soup):
                reason = self._verify(page, reference)
                if reason:
                    self.broken.append(BrokenLink(page, reference, reason))
                    logger.error(
                        "Broken link in %s: %s (%s)",
                        page.relative_to(self.output_dir).as_posix(),
                        reference,
                        reason,
                    )
        return len(self.broken)

    def _verify(self, page: Path, reference: str) -> str | None:
        """Return why ``reference`` from ``page`` is broken, or ``None``."""
        parts = urlsplit(reference)
        target = (page.parent / unquote(parts.path)).resolve() if parts.path else page
        if not target.exists():
            return "missing file"
        if parts.fragment and target.is_file() and target.suffix == HTML_SUFFIX:
            if unquote(parts.fragment) not in self._anchors_of(target):
                return "missing anchor"
        return None

    def _anchors_of(self, page: Path) -> set[str]:
        page = page.resolve()
        if page not in self._anchors:
            soup = self._parse(page)
            anchors = {str(tag["id"]) for tag in soup.find_all(id=True)}
            named = soup.find_all("a", attrs={"name": True})
            anchors.update(str(tag["name"]) for tag in named)
            self._anchors[page] = anchors
        return self._anchors[page]

    @staticmethod
    def _parse(page: Path) -> BeautifulSoup:
        return BeautifulSoup(page.read_text(encoding="utf-8"), "html.parser")


def _references(soup: BeautifulSoup) -> typ.Iterator[str]:
    """Yield internal reference targets found in ``soup``."""
    for tag_name, attribute in REFERENCE_ATTRIBUTES:
        for tag in soup.find_all(tag_name, attrs={attribute: True}):
            value = str(tag[attribute]).strip()
            if value and _is_internal(value):
                yield value


def _is_internal(reference: str) -> bool:
    if reference.lower().startswith(IGNORED_SCHEMES):
        return False
    parts = urlsplit(reference)
    return not (parts.scheme or parts.netloc or reference.startswith("/"))


__all__ = ["BrokenLink", "LinkChecker"]
