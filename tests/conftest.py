"""Shared fixtures for the adocsite test suite."""

from __future__ import annotations

import typing as typ

import pytest

from adocsite.config import BuildSettings
from adocsite.generator import SiteGenerator

from .helpers import INDEX_ADOC, FakeRenderer, write_tree

if typ.TYPE_CHECKING:
    from pathlib import Path


@pytest.fixture
def fake_renderer() -> FakeRenderer:
    """Return a fresh in-memory renderer."""
    return FakeRenderer()


@pytest.fixture
def site_source(tmp_path: Path) -> Path:
    """Return a small source tree with nested documents and resources."""
    return write_tree(
        tmp_path / "src",
        {
            "index.adoc": INDEX_ADOC,
            "guide.adoc": "= Guide\n\n== Install\nSteps.\n\n== Configure\nMore.\n",
            "reference/api.adoc": "= API\n\n== Calls\nDetails.\n",
            "reference/deep/notes.adoc": "= Notes\nNo sections here.\n",
            "_res/style.css": "body { color: black; }\n",
        },
    )


@pytest.fixture
def build_site_with(
    tmp_path: Path, fake_renderer: FakeRenderer
) -> typ.Callable[..., SiteGenerator]:
    """Return a helper running :class:`SiteGenerator` with the fake renderer."""

    def _build(source: Path, output_name: str = "out") -> SiteGenerator:
        settings = BuildSettings(
            config_dir=tmp_path / "config",
            source_dir=source,
            output_dir=tmp_path / output_name,
        )
        generator = SiteGenerator(settings, renderer=fake_renderer)
        generator.run()
        return generator

    return _build
