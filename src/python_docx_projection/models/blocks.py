"""
Shared behaviour of block containers: the body, header/footer roots,
table cells and text box contents all hold paragraphs and tables.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from lxml import etree

from ..constants import DEFAULT_COLUMN_WIDTH_TWIPS, MAX_TABLE_COLS, MAX_TABLE_ROWS, w
from ..errors import InvalidArgumentError, ResourceLimitError
from .base import ElementRange
from .formatting import FormattingFlag
from .paragraph import Paragraph

if TYPE_CHECKING:
    from ..document import Document
    from .table import Table

TABLE_BORDER_EDGES = ("top", "left", "bottom", "right", "insideH", "insideV")


def validate_table_size(rows: int, cols: int) -> None:
    """Reject non-positive or oversized table dimensions before any XML is built."""
    if rows < 1 or cols < 1:
        raise InvalidArgumentError(
            "Table must have at least one row and one column",
            code="invalid_dimensions",
            context={"rows": rows, "cols": cols},
        )
    if rows > MAX_TABLE_ROWS or cols > MAX_TABLE_COLS:
        raise ResourceLimitError(
            "Table dimensions exceed the configured limits",
            code="table_too_large",
            context={
                "rows": rows,
                "cols": cols,
                "max_rows": MAX_TABLE_ROWS,
                "max_cols": MAX_TABLE_COLS,
            },
        )


def new_cell() -> etree._Element:
    """A w:tc holding one empty paragraph."""
    cell = etree.Element(w("tc"))
    etree.SubElement(cell, w("p"))
    return cell


def build_table(rows: int, cols: int) -> etree._Element:
    """Build a complete w:tbl skeleton with single-line borders.

    The grid has ``cols`` columns of DEFAULT_COLUMN_WIDTH_TWIPS each, and
    every one of the ``rows`` x ``cols`` cells holds one empty paragraph.
    """
    validate_table_size(rows, cols)

    tbl = etree.Element(w("tbl"))
    tbl_pr = etree.SubElement(tbl, w("tblPr"))
    borders = etree.SubElement(tbl_pr, w("tblBorders"))
    for edge in TABLE_BORDER_EDGES:
        etree.SubElement(borders, w(edge)).set(w("val"), "single")

    grid = etree.SubElement(tbl, w("tblGrid"))
    for _ in range(cols):
        etree.SubElement(grid, w("gridCol")).set(w("w"), str(DEFAULT_COLUMN_WIDTH_TWIPS))

    for _ in range(rows):
        tr = etree.SubElement(tbl, w("tr"))
        for _ in range(cols):
            tr.append(new_cell())
    return tbl


def append_block(container: etree._Element, block: etree._Element) -> None:
    """Append a paragraph or table, keeping a trailing w:sectPr last."""
    last = container[-1] if len(container) else None
    if last is not None and last.tag == w("sectPr"):
        last.addprevious(block)
    else:
        container.append(block)


class BlockContainer:
    """Mixin for objects that hold a sequence of paragraphs and tables.

    Subclasses provide ``_block_node()`` (the element paragraphs are
    appended to) and a ``_document`` attribute.
    """

    _document: Document | None

    def _block_node(self) -> etree._Element:
        raise NotImplementedError

    def paragraphs(self) -> ElementRange[Paragraph]:
        """Range over the direct w:p children."""
        return ElementRange(Paragraph, self._block_node(), self._document)

    def tables(self) -> ElementRange[Table]:
        """Range over the direct w:tbl children."""
        from .table import Table

        return ElementRange(Table, self._block_node(), self._document)

    def add_paragraph(
        self, text: str = "", flags: FormattingFlag = FormattingFlag.NONE
    ) -> Paragraph:
        """Append a paragraph, with one run when ``text`` or ``flags`` are given."""
        container = self._block_node()
        node = etree.Element(w("p"))
        append_block(container, node)
        paragraph = Paragraph(container, node, self._document)
        if text or flags:
            paragraph.add_run(text, flags)
        return paragraph

    def add_table(self, rows: int, cols: int) -> Table:
        """Append a rows x cols table (see ``build_table``).

        Inside a table cell an empty paragraph follows the new table, since
        a w:tc must end with a w:p.
        """
        from .table import Table

        container = self._block_node()
        node = build_table(rows, cols)
        append_block(container, node)
        if container.tag == w("tc"):
            node.addnext(etree.Element(w("p")))
        return Table(container, node, self._document)
