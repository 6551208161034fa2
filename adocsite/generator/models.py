"""Shared dataclasses used by the site build pipeline."""

from __future__ import annotations

import dataclasses as dc
import typing as typ
from pathlib import PurePosixPath

from adocsite._constants import (
    CONFIG_ROOT,
    RES_DIR,
    STYLESHEETS,
    contains_index,
    relative_prefix,
)

ATTRIBUTION_LABEL = (
    "Generated by <a target='_blank' href='https://pypi.org/project/adocsite/'>"
    "adocsite</a> at: "
)


class BuildStateError(RuntimeError):
    """Raised when a write-once build context field is written twice."""


@dc.dataclass(slots=True)
class BuildContext:
    """Process-wide state for a single build run.

    Both fields follow a single-writer, write-once discipline: the traversal
    order guarantees the root index page is processed before any page that
    reads them.

    Attributes
    ----------
    toc_fragment : str or None
        Serialized body of the root index page, reused as site navigation.
    toc_source : str or None
        Output-relative POSIX path of the page the fragment was captured from.
    attributes : dict[str, str] or None
        Global attributes read from the root configuration file, or ``None``
        when no configuration file exists.
    attributes_resolved : bool
        ``True`` once the configuration lookup happened, whatever its outcome.
    """

    toc_fragment: str | None = None
    toc_source: str | None = None
    attributes: dict[str, str] | None = None
    attributes_resolved: bool = False

    @property
    def toc_captured(self) -> bool:
        return self.toc_fragment is not None

    def capture_toc(self, fragment: str, source: str) -> None:
        """Store the navigation fragment; raise if one was already captured."""
        if self.toc_fragment is not None:
            msg = (
                f"Table of contents already captured from '{self.toc_source}', "
                f"refusing to replace it with '{source}'."
            )
            raise BuildStateError(msg)
        self.toc_fragment = fragment
        self.toc_source = source

    def set_attributes(self, attributes: typ.Mapping[str, str] | None) -> None:
        """Record the outcome of the one-time configuration lookup."""
        if self.attributes_resolved:
            msg = f"Global <{CONFIG_ROOT}> were already resolved for this build."
            raise BuildStateError(msg)
        self.attributes = dict(attributes) if attributes is not None else None
        self.attributes_resolved = True


@dc.dataclass(frozen=True, slots=True)
class PageTarget:
    """Location of one rendered page within the output tree.

    Attributes
    ----------
    relative_path : str
        POSIX path of the HTML file relative to the output root.
    depth : int
        Number of directory levels between the file and the output root.
    """

    relative_path: str
    depth: int

    @property
    def name(self) -> str:
        return PurePosixPath(self.relative_path).name

    @property
    def prefix(self) -> str:
        return relative_prefix(self.depth)

    @property
    def is_root_index(self) -> bool:
        """Return ``True`` for an index page placed directly in the output root."""
        return self.depth == 0 and contains_index(self.name)


@dc.dataclass(frozen=True, slots=True)
class RenderOptions:
    """Per-page rendering options derived from depth and global attributes."""

    depth: int
    attributes: typ.Mapping[str, str] | None = None
    docdatetime: str | None = None

    def to_attributes(self) -> dict[str, str]:
        """Return engine attributes; global attributes override the defaults."""
        merged = {
            "stylesdir": f"{relative_prefix(self.depth)}{RES_DIR}",
            "stylesheet": STYLESHEETS[0],
            "linkcss": "",
            "source-highlighter": "html-pipeline",
            "icons": "font",
            "toc": "",
            "sectanchors": "",
            "last-update-label": ATTRIBUTION_LABEL,
        }
        if self.docdatetime:
            merged["docdatetime"] = self.docdatetime
            merged["docdate"] = self.docdatetime.split(" ", 1)[0]
        if self.attributes:
            merged.update(self.attributes)
        return merged


__all__ = [
    "ATTRIBUTION_LABEL",
    "BuildContext",
    "BuildStateError",
    "PageTarget",
    "RenderOptions",
]
