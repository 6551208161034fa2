"""Write generated pages and copied resources to disk."""

from __future__ import annotations

import shutil
import typing as typ

if typ.TYPE_CHECKING:
    from pathlib import Path

ENCODING = "utf-8"


def reset_output_dir(output_dir: Path) -> None:
    """Delete ``output_dir`` when present and recreate it empty."""
    if output_dir.exists():
        shutil.rmtree(output_dir)
    output_dir.mkdir(parents=True)


def write_page(target: Path, html: str) -> Path:
    """Write ``html`` to ``target``, creating parent directories as needed."""
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(html, encoding=ENCODING)
    return target


def copy_resource(source: Path, target: Path) -> Path:
    """Copy ``source`` byte for byte to ``target``."""
    target.parent.mkdir(parents=True, exist_ok=True)
    shutil.copyfile(source, target)
    return target


__all__ = ["ENCODING", "copy_resource", "reset_output_dir", "write_page"]
