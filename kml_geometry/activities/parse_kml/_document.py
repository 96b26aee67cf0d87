"""Document parsing and parse-stage errors.

Responsibilities:
- Parse KML text into an lxml tree without raising at the call boundary
- Record the parser's error log on the document as the malformed marker
- Check that marker and raise ``MalformedDocumentError``
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from kml_geometry.core.exceptions import PermanentError

if TYPE_CHECKING:
    from lxml.etree import _Element

logger = logging.getLogger("kml_geometry.activities.parse_kml")


# ---------------------------------------------------------------------------
# Exceptions (public API, re-exported from __init__)
# ---------------------------------------------------------------------------


class KmlParseError(PermanentError):
    """Raised when a KML document cannot be turned into features."""

    default_stage = "parse_kml"
    default_code = "KML_PARSE_FAILED"


class MalformedDocumentError(KmlParseError):
    """Raised when the input is not well-formed XML."""

    default_code = "KML_MALFORMED"


class NoFeaturesExtractedError(KmlParseError):
    """Raised when neither extractor produced a single feature."""

    default_code = "KML_NO_FEATURES"


# ---------------------------------------------------------------------------
# Parsed document
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class GeometryDocument:
    """A parsed KML tree plus the parser's error log.

    Attributes:
        root: Root element, or ``None`` when nothing could be recovered.
        errors: Error-level messages reported by the parser. Non-empty
            means the markup was not well-formed.
    """

    root: _Element | None
    errors: tuple[str, ...] = ()

    @property
    def is_malformed(self) -> bool:
        return self.root is None or bool(self.errors)


def load_document(text: str) -> GeometryDocument:
    """Parse *text* in recovery mode; never raises on bad markup.

    Well-formedness problems are collected into ``GeometryDocument.errors``
    instead. Entity resolution and network access are disabled.
    """
    from lxml import etree  # type: ignore[attr-defined]

    if not text.strip():
        return GeometryDocument(root=None, errors=("KML document is empty",))

    parser = etree.XMLParser(
        recover=True,
        encoding="utf-8",
        resolve_entities=False,
        no_network=True,
        huge_tree=False,
    )
    try:
        root = etree.fromstring(text.encode("utf-8"), parser=parser)
    except etree.XMLSyntaxError as exc:
        # libxml2 can still give up entirely (e.g. no root element at all).
        return GeometryDocument(root=None, errors=(str(exc),))

    errors = tuple(
        f"line {entry.line}: {entry.message}"
        for entry in parser.error_log
        if entry.level >= etree.ErrorLevels.ERROR
    )
    return GeometryDocument(root=root, errors=errors)


def parse_document(text: str) -> GeometryDocument:
    """Parse KML text into a ``GeometryDocument``.

    Raises:
        MalformedDocumentError: If the markup is not well-formed XML.
    """
    document = load_document(text)
    if document.is_malformed:
        detail = document.errors[0] if document.errors else "no root element"
        logger.warning("Rejecting malformed KML document: %s", detail)
        msg = f"XML parsing error in KML file ({detail})"
        raise MalformedDocumentError(msg)

    logger.debug("Parsed KML document with root <%s>", document.root.tag)  # type: ignore[union-attr]
    return document
