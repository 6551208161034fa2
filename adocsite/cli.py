"""Cyclopts CLI entrypoint for building an Asciidoctor documentation site.

The ``adocsite`` console script renders a tree of ``.adoc`` documents into a
static HTML site with a shared navigation sidebar, then validates internal
links in the result. The process exit status is the number of broken links,
so CI jobs fail when the generated site contains dead references.

Examples
--------
Build ``docs`` into ``site``:

>>> from adocsite.cli import app
>>> app(["config", "docs", "site"])  # doctest: +SKIP

Skip link validation and log every decision:

>>> app(["config", "docs", "site", "--no-check", "--verbose"])  # doctest: +SKIP
"""

from __future__ import annotations

import logging
import sys
import typing as typ
from pathlib import Path

import cyclopts
from cyclopts import App, Parameter

from .config import DEFAULT_ASCIIDOCTOR, BuildSettings
from .generator import SiteGenerator
from .linkcheck import LinkChecker

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)-5s %(name)s: %(message)s"

app = App(name="adocsite", config=cyclopts.config.Env("ADOCSITE_", command=False))  # type: ignore[unknown-argument]


def _format_path(path: Path) -> str:
    """Return a cwd-relative path when possible, otherwise the absolute path."""
    if path.is_absolute():
        try:
            return str(path.relative_to(Path.cwd()))
        except ValueError:  # pragma: no cover - fallback for different roots
            return str(path)
    return str(path)


def configure_logging(*, verbose: bool = False) -> None:
    """Configure the root logger once for console output."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format=LOG_FORMAT,
        stream=sys.stderr,
    )


def build_site(settings: BuildSettings, *, check: bool = True) -> int:
    """Build the site described by ``settings`` and return the broken link count.

    Parameters
    ----------
    settings : BuildSettings
        Source, output, and tool locations.
    check : bool, optional
        Run the link checker over the output directory; defaults to ``True``.

    Returns
    -------
    int
        Number of broken internal links, ``0`` when ``check`` is disabled.
    """
    written = SiteGenerator(settings).run()
    for path in written:
        if path.suffix == ".html":
            print(f"wrote {_format_path(path)}")
    if not check:
        return 0
    errors = LinkChecker(settings.output_dir).check()
    if errors > 0:
        logger.error("ERROR COUNT => %d", errors)
    return errors


@app.default
def build(
    config_dir: typ.Annotated[Path, Parameter(help="Configuration directory")],
    source_dir: typ.Annotated[Path, Parameter(help="Directory of .adoc sources")],
    output_dir: typ.Annotated[
        Path, Parameter(help="Output directory; deleted and recreated")
    ],
    *,
    check: typ.Annotated[
        bool, Parameter(help="Validate internal links after the build")
    ] = True,
    asciidoctor: typ.Annotated[
        str, Parameter(help="Asciidoctor executable", env_var="ADOCSITE_ASCIIDOCTOR")
    ] = DEFAULT_ASCIIDOCTOR,
    verbose: typ.Annotated[bool, Parameter(help="Log debug details")] = False,
) -> None:
    """Render ``source_dir`` into ``output_dir`` and exit with the broken link count.

    Parameters
    ----------
    config_dir : Path
        Configuration directory; recorded in the build settings.
    source_dir : Path
        Root of the markup source tree.
    output_dir : Path
        Destination of the generated site.
    check : bool, optional
        Run the link checker after the build (``--no-check`` disables it).
    asciidoctor : str, optional
        Rendering engine executable (overridable via ``ADOCSITE_ASCIIDOCTOR``).
    verbose : bool, optional
        Enable DEBUG logging.

    Raises
    ------
    SystemExit
        Always; the exit status is the number of broken links.
    """
    configure_logging(verbose=verbose)
    settings = BuildSettings(
        config_dir=config_dir,
        source_dir=source_dir,
        output_dir=output_dir,
        asciidoctor=asciidoctor,
    )
    errors = build_site(settings, check=check)
    logger.info("DONE!")
    sys.exit(errors)


def main() -> None:
    """Invoke the Cyclopts application that powers the `adocsite` console command."""
    app()


if __name__ == "__main__":  # pragma: no cover - manual invocation helper
    main()
