"""
HeaderFooterManager: creates and tracks header and footer parts.

Registering a header of a given type:

1. name the part ``word/header{N}.xml`` from a header-only counter
2. register a header relationship (Target is the bare file name)
3. declare a content-type Override for ``/word/header{N}.xml``
4. create the ``w:hdr`` root
5. reference it from the body's ``w:sectPr`` with
   ``<w:headerReference w:type="..." r:id="..."/>``

FIRST also switches on ``w:titlePg`` in the section (see Section); EVEN and ODD switch on
``w:evenAndOddHeaders`` in word/settings.xml. Footers work the same way with
``footer{N}.xml``, ``w:ftr`` and ``w:footerReference``.
"""

from __future__ import annotations

import logging
import posixpath
import re
from typing import TYPE_CHECKING

from lxml import etree

from ..allocator import IdAllocator
from ..constants import NSMAP_PART, SETTINGS_PART, r, w
from ..content_types import ContentTypes
from ..models.header_footer import Footer, Header, HeaderFooterBase, HeaderFooterType
from ..relationships import RelationshipTypes
from ..xml_utils import insert_before_first, remove_child

if TYPE_CHECKING:
    from ..document import Document

logger = logging.getLogger(__name__)

_REFERENCE_TAGS = (w("headerReference"), w("footerReference"))

# settings children that must come after w:evenAndOddHeaders
_AFTER_EVEN_AND_ODD = (
    "bookFoldRevPrinting",
    "bookFoldPrinting",
    "bookFoldPrintingSheets",
    "drawingGridHorizontalSpacing",
    "drawingGridVerticalSpacing",
    "displayHorizontalDrawingGridEvery",
    "displayVerticalDrawingGridEvery",
    "doNotUseMarginsForDrawingGridOrigin",
    "doNotShadeFormData",
    "noPunctuationKerning",
    "characterSpacingControl",
    "printTwoOnOne",
    "strictFirstAndLastChars",
    "savePreviewPicture",
    "updateFields",
    "hdrShapeDefaults",
    "footnotePr",
    "endnotePr",
    "compat",
    "docVars",
    "rsids",
    "mathPr",
    "attachedSchema",
    "themeFontLang",
    "clrSchemeMapping",
    "doNotIncludeSubdocsInStats",
    "doNotAutoCompressPictures",
    "forceUpgrade",
    "captions",
    "readModeInkLockDown",
    "smartTagType",
    "schemaLibrary",
    "shapeDefaults",
    "doNotEmbedSmartTags",
    "decimalSymbol",
    "listSeparator",
)


class _Kind:
    """Per-kind constants: header or footer."""

    def __init__(self, keyword: str, root_tag: str, cls: type[HeaderFooterBase]) -> None:
        self.keyword = keyword
        self.root_tag = w(root_tag)
        self.reference_tag = w(f"{keyword}Reference")
        self.rel_type = getattr(RelationshipTypes, keyword.upper())
        self.content_type = getattr(ContentTypes, keyword.upper())
        self.cls = cls
        self.name_pattern = re.compile(rf"^word/{keyword}(\d+)\.xml$")


HEADER = _Kind("header", "hdr", Header)
FOOTER = _Kind("footer", "ftr", Footer)


class HeaderFooterManager:
    """Creates headers and footers on demand and finds existing ones.

    At most one header and one footer exists per HeaderFooterType. Parts
    already referenced from the body's ``w:sectPr`` are reused rather than
    created again.

    Example:
        >>> header = doc.header_footer.get_header(HeaderFooterType.FIRST)
        >>> header.add_paragraph("Cover page")
        >>> doc.header_footer.get_footer().add_paragraph("Page footer")
    """

    def __init__(self, document: Document, allocator: IdAllocator) -> None:
        """Initialize a HeaderFooterManager and load existing parts.

        Args:
            document: The owning Document
            allocator: The document's shared id source
        """
        self._document = document
        self._allocator = allocator
        self._parts: dict[str, dict[HeaderFooterType, HeaderFooterBase]] = {
            HEADER.keyword: {},
            FOOTER.keyword: {},
        }
        self._counters = {
            HEADER.keyword: self._highest_part_number(HEADER) + 1,
            FOOTER.keyword: self._highest_part_number(FOOTER) + 1,
        }
        self._load_existing(HEADER)
        self._load_existing(FOOTER)

    def _highest_part_number(self, kind: _Kind) -> int:
        highest = 0
        names = set(self._document.package.entry_names()) | set(self._document.part_names())
        for name in names:
            match = kind.name_pattern.match(name)
            if match:
                highest = max(highest, int(match.group(1)))
        return highest

    def _load_existing(self, kind: _Kind) -> None:
        """Wrap the parts the body's section properties already reference."""
        sect_pr = self._document.body.element.find(w("sectPr"))
        if sect_pr is None:
            return
        relationships = self._document.relationships
        for ref in sect_pr.findall(kind.reference_tag):
            rel_id = ref.get(r("id"))
            target = relationships.get_target(rel_id) if rel_id else None
            if target is None:
                logger.warning(f"{kind.keyword} reference {rel_id} has no relationship")
                continue
            try:
                hf_type = HeaderFooterType(ref.get(w("type"), "default"))
            except ValueError:
                logger.warning(f"Ignoring {kind.keyword} reference with type {ref.get(w('type'))}")
                continue
            part_name = posixpath.normpath(posixpath.join("word", target))
            root = self._document.get_part(part_name)
            self._parts[kind.keyword].setdefault(
                hf_type, kind.cls(root, self._document, hf_type, rel_id, part_name)
            )

    # ------------------------------------------------------------------
    # Access
    # ------------------------------------------------------------------

    def get_header(self, hf_type: HeaderFooterType = HeaderFooterType.DEFAULT) -> Header:
        """The header of ``hf_type``, created on first request."""
        return self._get_or_create(HEADER, hf_type)  # type: ignore[return-value]

    def get_footer(self, hf_type: HeaderFooterType = HeaderFooterType.DEFAULT) -> Footer:
        """The footer of ``hf_type``, created on first request."""
        return self._get_or_create(FOOTER, hf_type)  # type: ignore[return-value]

    def has_header(self, hf_type: HeaderFooterType = HeaderFooterType.DEFAULT) -> bool:
        return hf_type in self._parts[HEADER.keyword]

    def has_footer(self, hf_type: HeaderFooterType = HeaderFooterType.DEFAULT) -> bool:
        return hf_type in self._parts[FOOTER.keyword]

    def headers(self) -> list[Header]:
        """Every header known to the document."""
        return list(self._parts[HEADER.keyword].values())  # type: ignore[arg-type]

    def footers(self) -> list[Footer]:
        """Every footer known to the document."""
        return list(self._parts[FOOTER.keyword].values())  # type: ignore[arg-type]

    def _get_or_create(self, kind: _Kind, hf_type: HeaderFooterType) -> HeaderFooterBase:
        existing = self._parts[kind.keyword].get(hf_type)
        if existing is not None:
            return existing
        part = self._create_part(kind, hf_type)
        self._parts[kind.keyword][hf_type] = part
        return part

    # ------------------------------------------------------------------
    # Creation
    # ------------------------------------------------------------------

    def _create_part(self, kind: _Kind, hf_type: HeaderFooterType) -> HeaderFooterBase:
        number = self._counters[kind.keyword]
        self._counters[kind.keyword] += 1
        file_name = f"{kind.keyword}{number}.xml"
        part_name = f"word/{file_name}"

        rel_id = self._document.relationships.add_relationship(kind.rel_type, file_name)
        self._document.content_types.add_override(f"/{part_name}", kind.content_type)

        root = etree.Element(kind.root_tag, nsmap=NSMAP_PART)
        self._document.add_part(part_name, root)

        self._add_reference(kind, hf_type, rel_id)
        logger.debug(f"Created {hf_type.value} {kind.keyword} {part_name} ({rel_id})")
        return kind.cls(root, self._document, hf_type, rel_id, part_name)

    def _add_reference(self, kind: _Kind, hf_type: HeaderFooterType, rel_id: str) -> None:
        """Reference the part from the body's sectPr and set the page flags it needs."""
        sect_pr = self._document.body.get_or_create_sect_pr()

        reference = etree.Element(kind.reference_tag)
        reference.set(w("type"), hf_type.value)
        reference.set(r("id"), rel_id)
        # References lead the sectPr content
        last_reference = None
        for child in sect_pr:
            if child.tag in _REFERENCE_TAGS:
                last_reference = child
        if last_reference is not None:
            last_reference.addnext(reference)
        else:
            sect_pr.insert(0, reference)

        if hf_type.needs_title_page:
            self._document.section.set_different_first_page(True)
        if hf_type.needs_even_and_odd:
            self.set_even_and_odd_headers(True)

    # ------------------------------------------------------------------
    # Odd and even pages
    # ------------------------------------------------------------------

    @property
    def even_and_odd_headers(self) -> bool:
        """Whether word/settings.xml switches on separate even and odd page headers."""
        if not self._document.has_part(SETTINGS_PART):
            return False
        return self._document.settings.find(w("evenAndOddHeaders")) is not None

    def set_even_and_odd_headers(self, on: bool) -> None:
        """Switch ``w:evenAndOddHeaders`` on or off.

        The setting is document-wide; it applies to every section.
        """
        settings = self._document.settings
        existing = settings.find(w("evenAndOddHeaders"))
        if on and existing is None:
            insert_before_first(
                settings, etree.Element(w("evenAndOddHeaders")), _AFTER_EVEN_AND_ODD
            )
            logger.debug("Enabled different odd and even page headers")
        elif not on and existing is not None:
            remove_child(settings, w("evenAndOddHeaders"))
            logger.debug("Disabled different odd and even page headers")
