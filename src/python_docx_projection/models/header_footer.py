"""
Header and Footer model classes.

Headers and footers live in their own parts (header1.xml, footer1.xml, ...)
whose root is ``w:hdr`` / ``w:ftr``. They are linked to the body through a
relationship id referenced from the body's ``w:sectPr``.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

from lxml import etree

from .blocks import BlockContainer

if TYPE_CHECKING:
    from ..document import Document


class HeaderFooterType(Enum):
    """Which pages of a section a header or footer applies to.

    - DEFAULT: every page not covered by a more specific type
    - FIRST: the first page of the section (enables ``w:titlePg``)
    - EVEN / ODD: even or odd pages (enables ``w:evenAndOddHeaders``)
    """

    DEFAULT = "default"
    FIRST = "first"
    EVEN = "even"
    ODD = "odd"

    @property
    def needs_title_page(self) -> bool:
        return self is HeaderFooterType.FIRST

    @property
    def needs_even_and_odd(self) -> bool:
        return self in (HeaderFooterType.EVEN, HeaderFooterType.ODD)


class HeaderFooterBase(BlockContainer):
    """Block container over the root of a header or footer part.

    Attributes:
        element: The w:hdr / w:ftr root element
        hf_type: The HeaderFooterType this part is referenced as
        rel_id: Relationship id from the document part to this part
        part_name: Package path of the part (e.g. "word/header1.xml")
    """

    KIND = ""

    def __init__(
        self,
        element: etree._Element,
        document: Document | None,
        hf_type: HeaderFooterType,
        rel_id: str,
        part_name: str,
    ) -> None:
        self.element = element
        self._document = document
        self.hf_type = hf_type
        self.rel_id = rel_id
        self.part_name = part_name

    def _block_node(self) -> etree._Element:
        return self.element

    @property
    def document(self) -> Document | None:
        return self._document

    @property
    def type(self) -> str:
        """The type as stored in ``w:type`` ('default', 'first', 'even' or 'odd')."""
        return self.hf_type.value

    @property
    def text(self) -> str:
        """All paragraph text, one line per paragraph."""
        return "\n".join(p.text for p in self.paragraphs())

    def __repr__(self) -> str:
        preview = self.text[:50].replace("\n", " ")
        if len(self.text) > 50:
            preview += "..."
        return f'<{self.KIND} type="{self.type}": "{preview}">'


class Header(HeaderFooterBase):
    """A page header (``w:hdr`` root)."""

    KIND = "Header"


class Footer(HeaderFooterBase):
    """A page footer (``w:ftr`` root)."""

    KIND = "Footer"
