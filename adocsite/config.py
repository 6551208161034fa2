"""Load build settings and directory-scoped attribute files.

Two kinds of configuration feed a build. :class:`BuildSettings` carries the
paths and executable chosen on the command line. Attribute files
(``adocsite.xml``) live next to the root index document and hold global
rendering attributes, one child element per attribute:

.. code-block:: xml

    <attributes>
        <product>Acme</product>
        <javadoc-url>https://example.invalid/api/</javadoc-url>
    </attributes>

Examples
--------
>>> from pathlib import Path
>>> from adocsite.config import load_attributes
>>> load_attributes(Path("docs"))  # doctest: +SKIP
{'product': 'Acme', 'javadoc-url': 'https://example.invalid/api/'}
"""

from __future__ import annotations

import dataclasses as dc
import logging
import os
from pathlib import Path

from lxml import etree

from ._constants import CONFIG_FILENAME, CONFIG_ROOT

logger = logging.getLogger(__name__)

DEFAULT_ASCIIDOCTOR = "asciidoctor"


class SiteConfigError(ValueError):
    """Raised when an attribute file is malformed."""


@dc.dataclass(slots=True)
class BuildSettings:
    """Paths and tools resolved for one build run.

    Attributes
    ----------
    config_dir : Path
        Configuration directory passed on the command line; stored only.
    source_dir : Path
        Root of the markup source tree.
    output_dir : Path
        Root of the generated site; deleted and recreated on every run.
    asciidoctor : str
        Executable used to render markup documents.
    """

    config_dir: Path
    source_dir: Path
    output_dir: Path
    asciidoctor: str = dc.field(
        default_factory=lambda: os.getenv("ADOCSITE_ASCIIDOCTOR", DEFAULT_ASCIIDOCTOR)
    )


def load_attributes(directory: Path) -> dict[str, str] | None:
    """Read the attribute file placed in ``directory``.

    Parameters
    ----------
    directory : Path
        Directory that may contain an ``adocsite.xml`` file.

    Returns
    -------
    dict[str, str] or None
        Mapping of element name to element text for every child of the
        ``<attributes>`` element, or ``None`` when the file does not exist.

    Raises
    ------
    SiteConfigError
        If the file exists but cannot be parsed as XML.
    """
    path = directory / CONFIG_FILENAME
    if not path.is_file():
        logger.debug("No configuration file at %s", path)
        return None

    logger.info("Processing configuration: %s", path)
    try:
        document = etree.parse(str(path))  # noqa: S320 - local build input
    except (etree.XMLSyntaxError, OSError) as exc:
        msg = f"Configuration file '{path}' is not valid XML: {exc}"
        raise SiteConfigError(msg) from exc

    attributes: dict[str, str] = {}
    for element in document.xpath(f"//{CONFIG_ROOT}/*"):
        if not isinstance(element.tag, str):
            # comments and processing instructions
            continue
        attributes[etree.QName(element).localname] = (element.text or "").strip()
    logger.info("Read %d attributes", len(attributes))
    return attributes


__all__ = ["DEFAULT_ASCIIDOCTOR", "BuildSettings", "SiteConfigError", "load_attributes"]
