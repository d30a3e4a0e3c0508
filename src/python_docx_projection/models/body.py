"""
Body projection: the ``w:body`` of the main document part.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from lxml import etree

from ..constants import w
from ..errors import XmlManipulationError
from .blocks import BlockContainer

if TYPE_CHECKING:
    from ..document import Document


class Body(BlockContainer):
    """The document body.

    New paragraphs and tables are always placed before the body-level
    ``w:sectPr`` so that the section properties stay last.

    Example:
        >>> body = doc.body
        >>> body.add_paragraph("Hello", FormattingFlag.BOLD)
        >>> [p.text for p in body.paragraphs()]
        ['Hello']
    """

    def __init__(self, element: etree._Element, document: Document | None = None) -> None:
        if element.tag != w("body"):
            raise XmlManipulationError(
                "Body must wrap a w:body element", code="unexpected_tag"
            )
        self.element = element
        self._document = document

    def _block_node(self) -> etree._Element:
        return self.element

    @property
    def document(self) -> Document | None:
        return self._document

    @property
    def text(self) -> str:
        """Text of the body-level paragraphs, one line per paragraph."""
        return "\n".join(p.text for p in self.paragraphs())

    def get_or_create_sect_pr(self) -> etree._Element:
        """The body-level w:sectPr, appended as last child when missing."""
        sect_pr = self.element.find(w("sectPr"))
        if sect_pr is None:
            sect_pr = etree.SubElement(self.element, w("sectPr"))
        return sect_pr

    def __repr__(self) -> str:
        return f"<Body: {len(self.paragraphs())} paragraphs, {len(self.tables())} tables>"
