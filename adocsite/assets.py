"""Stage the bundled scripts and stylesheets into the output tree.

The bundle ships inside the package under ``adocsite/static`` and is copied
verbatim into the reserved ``_res`` directory of every generated site,
together with the Pygments stylesheet matching the code highlighter.
"""

from __future__ import annotations

import logging
import typing as typ
from importlib import resources

from ._constants import PYGMENTS_STYLESHEET, RES_DIR, SCRIPTS, STYLESHEETS

if typ.TYPE_CHECKING:
    from pathlib import Path

    from .generator.renderer import CodeHighlighter

logger = logging.getLogger(__name__)

ASSET_PACKAGE = "adocsite"


class AssetMissingError(FileNotFoundError):
    """Raised when a bundled asset is absent from the installed package."""


def bundled_assets() -> list[tuple[str, str]]:
    """Return ``(subdirectory, filename)`` pairs for every bundled asset."""
    return [("scripts", name) for name in SCRIPTS] + [
        ("stylesheets", name) for name in STYLESHEETS
    ]


def stage_assets(
    output_dir: Path, highlighter: CodeHighlighter | None = None
) -> list[Path]:
    """Copy the asset bundle into ``output_dir/_res``.

    Parameters
    ----------
    output_dir : Path
        Root of the generated site.
    highlighter : CodeHighlighter, optional
        When given, its stylesheet is written as ``pygments.css``.

    Returns
    -------
    list[Path]
        Paths of the staged files.

    Raises
    ------
    AssetMissingError
        If any bundled asset cannot be found.
    """
    logger.info("Copy scripts and styles.")
    res_dir = output_dir / RES_DIR
    res_dir.mkdir(parents=True, exist_ok=True)
    root = resources.files(ASSET_PACKAGE)
    written: list[Path] = []
    for subdir, name in bundled_assets():
        resource = root.joinpath("static", subdir, name)
        if not resource.is_file():
            msg = f"Bundled asset '{subdir}/{name}' is missing from the package."
            raise AssetMissingError(msg)
        target = res_dir / name
        target.write_bytes(resource.read_bytes())
        written.append(target)
    if highlighter is not None:
        target = res_dir / PYGMENTS_STYLESHEET
        target.write_text(highlighter.stylesheet, encoding="utf-8")
        written.append(target)
    return written


__all__ = ["ASSET_PACKAGE", "AssetMissingError", "bundled_assets", "stage_assets"]
