"""
HyperlinkManager: external hyperlinks inside paragraphs.

OOXML structure:
    <w:hyperlink r:id="rId5">
      <w:r><w:rPr><w:rStyle w:val="Hyperlink"/><w:color w:val="0563C1"/>
      <w:u w:val="single"/></w:rPr><w:t>text</w:t></w:r>
    </w:hyperlink>

The URL itself lives in an External relationship of the part that holds
the paragraph.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from lxml import etree

from ..allocator import IdAllocator
from ..constants import HYPERLINK_COLOR, HYPERLINK_STYLE, r, w
from ..errors import InvalidArgumentError
from ..models.run import Run
from ..models.style import StyleType
from ..relationships import RelationshipTypes
from ..xml_utils import check_text_length, set_text

if TYPE_CHECKING:
    from ..document import Document
    from ..models.paragraph import Paragraph

logger = logging.getLogger(__name__)


@dataclass
class HyperlinkInfo:
    """An external hyperlink found in the main document part.

    Attributes:
        rel_id: Relationship id the w:hyperlink points at
        text: Display text
        url: Relationship target
    """

    rel_id: str
    text: str
    url: str


def build_hyperlink(rel_id: str, text: str) -> etree._Element:
    """Create a detached w:hyperlink holding one Hyperlink-styled run."""
    hyperlink = etree.Element(w("hyperlink"))
    hyperlink.set(r("id"), rel_id)

    run = etree.SubElement(hyperlink, w("r"))
    rpr = etree.SubElement(run, w("rPr"))
    etree.SubElement(rpr, w("rStyle")).set(w("val"), HYPERLINK_STYLE)
    etree.SubElement(rpr, w("color")).set(w("val"), HYPERLINK_COLOR)
    etree.SubElement(rpr, w("u")).set(w("val"), "single")
    set_text(etree.SubElement(run, w("t")), text)
    return hyperlink


class HyperlinkManager:
    """Adds and lists external hyperlinks.

    Example:
        >>> para = doc.body.add_paragraph("See ")
        >>> run = doc.links.add_hyperlink(para, "https://example.com", "example.com")
        >>> run.style
        'Hyperlink'
    """

    def __init__(self, document: Document, allocator: IdAllocator) -> None:
        self._document = document
        self._allocator = allocator

    def add_hyperlink(self, paragraph: Paragraph, url: str, text: str) -> Run:
        """Append an external hyperlink to ``paragraph``.

        Args:
            paragraph: Paragraph that receives the w:hyperlink
            url: Link target, stored as an External relationship
            text: Display text

        Returns:
            The run inside the new w:hyperlink

        Raises:
            InvalidArgumentError: If the URL is empty or the paragraph is empty
        """
        if not url:
            raise InvalidArgumentError("Hyperlink URL must not be empty", code="empty_url")
        check_text_length(text)
        p_node = paragraph.current_node
        if p_node is None:
            raise InvalidArgumentError(
                "Cannot add a hyperlink to an empty paragraph projection", code="empty_paragraph"
            )
        relationships = self._document.relationships_for(p_node)
        self._ensure_hyperlink_style()

        rel_id = relationships.add_relationship(RelationshipTypes.HYPERLINK, url, external=True)
        hyperlink = build_hyperlink(rel_id, text)
        p_node.append(hyperlink)
        logger.debug(f"Added hyperlink {rel_id} -> {url}")
        return Run(hyperlink, hyperlink[0], self._document)

    def _ensure_hyperlink_style(self) -> None:
        """Define the Hyperlink character style when the document lacks it."""
        styles = self._document.styles
        if HYPERLINK_STYLE not in styles:
            styles.add_style(HYPERLINK_STYLE, StyleType.CHARACTER, name="Hyperlink")

    def get_url(self, rel_id: str) -> str | None:
        """The target URL of a hyperlink relationship in the main document part."""
        relationships = self._document.relationships
        if relationships.get_type(rel_id) != RelationshipTypes.HYPERLINK:
            return None
        return relationships.get_target(rel_id)

    def hyperlinks(self) -> list[HyperlinkInfo]:
        """Every external hyperlink in the main document part, in document order."""
        found = []
        for node in self._document.element.iter(w("hyperlink")):
            rel_id = node.get(r("id"))
            if rel_id is None:
                continue
            text = "".join(t.text or "" for t in node.iter(w("t")))
            found.append(HyperlinkInfo(rel_id, text, self.get_url(rel_id) or ""))
        return found
