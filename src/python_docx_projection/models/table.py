"""
Table projections: views over ``w:tbl``, ``w:tr`` and ``w:tc`` elements.

All lengths are taken in points. Widths, heights and margins are stored as
twips; border widths as eighths of a point.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from lxml import etree

from ..constants import (
    MAX_BORDER_WIDTH_PT,
    MAX_CELL_WIDTH_PT,
    MAX_ROW_HEIGHT_PT,
    MAX_TABLE_WIDTH_PT,
    w,
)
from ..errors import IncompatibleTypeError, InvalidArgumentError, NotFoundError, ResourceLimitError
from ..units import points_to_eighths, points_to_twips, round_half_away, twips_to_points
from ..xml_utils import (
    find_child,
    get_attribute,
    get_int_attribute,
    get_or_create_child,
    normalize_hex_color,
    remove_child,
    set_attribute,
    set_property,
)
from .base import DocxElement, ElementRange, style_catalog
from .blocks import TABLE_BORDER_EDGES, BlockContainer, new_cell
from .formatting import (
    BorderStyle,
    HeightRule,
    TableAlignment,
    TextDirection,
    VerticalAlignment,
    WidthType,
)

if TYPE_CHECKING:
    from ..styles import StyleManager

CELL_BORDER_EDGES = ("top", "left", "bottom", "right")


def check_length(value: float, limit: float, name: str) -> None:
    """Reject negative lengths and lengths above ``limit`` points."""
    if value < 0:
        raise InvalidArgumentError(
            f"{name} must not be negative", code="negative_length", context={name: value}
        )
    if value > limit:
        raise ResourceLimitError(
            f"{name} exceeds {limit} pt",
            code="length_too_large",
            context={name: value, "max": limit},
        )


def stored_width(value: float, width_type: WidthType, limit: float) -> int:
    """Convert a width to the integer stored in w:tblW / w:tcW.

    DXA widths are points (stored as twips); PCT widths are a percentage
    (stored in fiftieths of a percent); AUTO and NIL ignore ``value``.
    """
    if width_type is WidthType.DXA:
        check_length(value, limit, "width")
        stored = points_to_twips(value)
    elif width_type is WidthType.PCT:
        if not 0 <= value <= 100:
            raise InvalidArgumentError(
                "Percentage width must be between 0 and 100",
                code="invalid_percentage",
                context={"width": value},
            )
        stored = round_half_away(value * 50)
    else:
        stored = 0
    return stored


def write_borders(
    container: etree._Element,
    edges: tuple[str, ...],
    style: BorderStyle,
    width_pt: float,
    color: str,
) -> None:
    """Set every edge of a w:tblBorders / w:tcBorders node to the same line."""
    check_length(width_pt, MAX_BORDER_WIDTH_PT, "border_width")
    color_value = normalize_hex_color(color, allow_auto=True)
    for edge in edges:
        node = get_or_create_child(container, w(edge))
        set_attribute(node, "val", style.value)
        if style is BorderStyle.NONE:
            for attr in ("sz", "space", "color"):
                node.attrib.pop(w(attr), None)
            continue
        set_attribute(node, "sz", points_to_eighths(width_pt))
        set_attribute(node, "space", 0)
        set_attribute(node, "color", color_value)


def write_margins(container: etree._Element, margins: dict[str, float | None]) -> None:
    """Set w:top/w:left/w:bottom/w:right margins (points) under a margin node."""
    for edge, value in margins.items():
        if value is not None:
            check_length(value, MAX_CELL_WIDTH_PT, edge)
    for edge, value in margins.items():
        if value is None:
            continue
        node = get_or_create_child(container, w(edge))
        set_attribute(node, "w", points_to_twips(value))
        set_attribute(node, "type", WidthType.DXA.value)


class TableCell(DocxElement, BlockContainer):
    """Wrapper around a w:tc (table cell) element.

    A cell is a block container: it holds paragraphs and nested tables and
    always keeps at least one paragraph.
    """

    TAG = w("tc")

    def _require_node(self) -> etree._Element:
        if self._current is None:
            raise InvalidArgumentError(
                "TableCell does not refer to a w:tc element", code="empty_cell"
            )
        return self._current

    def _block_node(self) -> etree._Element:
        return self._require_node()

    def _tcpr(self) -> etree._Element | None:
        return find_child(self._current, w("tcPr"))

    def _get_or_create_tcpr(self) -> etree._Element:
        return get_or_create_child(self._require_node(), w("tcPr"))

    @property
    def text(self) -> str:
        """Text of the cell's paragraphs, one line per paragraph."""
        if self._current is None:
            return ""
        return "\n".join(p.text for p in self.paragraphs())

    def set_text(self, text: str) -> TableCell:
        """Replace the cell content (keeping w:tcPr) with one paragraph."""
        node = self._require_node()
        for child in list(node):
            if child.tag != w("tcPr"):
                node.remove(child)
        self.add_paragraph(text)
        return self

    # ------------------------------------------------------------------
    # Formatting
    # ------------------------------------------------------------------

    @property
    def width(self) -> float | None:
        """Cell width in points when stored as dxa, else None."""
        tc_w = find_child(self._tcpr(), w("tcW"))
        if tc_w is None or get_attribute(tc_w, "type") != WidthType.DXA.value:
            return None
        return twips_to_points(get_int_attribute(tc_w, "w"))

    def set_width(self, value: float, width_type: WidthType = WidthType.DXA) -> TableCell:
        """Set the preferred cell width (points for DXA, percent for PCT)."""
        stored = stored_width(value, width_type, MAX_CELL_WIDTH_PT)
        tc_w = get_or_create_child(self._get_or_create_tcpr(), w("tcW"))
        set_attribute(tc_w, "w", stored)
        set_attribute(tc_w, "type", width_type.value)
        return self

    @property
    def vertical_alignment(self) -> VerticalAlignment:
        value = get_attribute(find_child(self._tcpr(), w("vAlign")), "val")
        try:
            return VerticalAlignment(value)
        except ValueError:
            return VerticalAlignment.TOP

    def set_vertical_alignment(self, alignment: VerticalAlignment) -> TableCell:
        set_property(self._get_or_create_tcpr(), w("vAlign"), alignment.value)
        return self

    @property
    def background_color(self) -> str | None:
        """The shading fill as RRGGBB, or None."""
        fill = get_attribute(find_child(self._tcpr(), w("shd")), "fill")
        if fill is None or fill == "auto":
            return None
        return fill

    def set_background_color(self, color: str) -> TableCell:
        """Shade the cell with a solid RRGGBB fill."""
        fill = normalize_hex_color(color)
        shd = get_or_create_child(self._get_or_create_tcpr(), w("shd"))
        set_attribute(shd, "val", "clear")
        set_attribute(shd, "color", "auto")
        set_attribute(shd, "fill", fill)
        return self

    @property
    def text_direction(self) -> TextDirection:
        value = get_attribute(find_child(self._tcpr(), w("textDirection")), "val")
        try:
            return TextDirection(value)
        except ValueError:
            return TextDirection.LR_TB

    def set_text_direction(self, direction: TextDirection) -> TableCell:
        set_property(self._get_or_create_tcpr(), w("textDirection"), direction.value)
        return self

    def set_margins(
        self,
        top: float | None = None,
        left: float | None = None,
        bottom: float | None = None,
        right: float | None = None,
    ) -> TableCell:
        """Set cell margins in points; None leaves an edge unchanged."""
        margins = {"top": top, "left": left, "bottom": bottom, "right": right}
        write_margins(get_or_create_child(self._get_or_create_tcpr(), w("tcMar")), margins)
        return self

    def set_borders(
        self, style: BorderStyle, width_pt: float = 0.5, color: str = "000000"
    ) -> TableCell:
        """Apply one border line to all four cell edges."""
        borders = get_or_create_child(self._get_or_create_tcpr(), w("tcBorders"))
        write_borders(borders, CELL_BORDER_EDGES, style, width_pt, color)
        return self

    def __repr__(self) -> str:
        text_preview = self.text[:30] + "..." if len(self.text) > 30 else self.text
        return f"<TableCell: {text_preview!r}>"


class TableRow(DocxElement):
    """Wrapper around a w:tr (table row) element."""

    TAG = w("tr")

    def _require_node(self) -> etree._Element:
        if self._current is None:
            raise InvalidArgumentError(
                "TableRow does not refer to a w:tr element", code="empty_row"
            )
        return self._current

    def _trpr(self) -> etree._Element | None:
        return find_child(self._current, w("trPr"))

    def _get_or_create_trpr(self) -> etree._Element:
        return get_or_create_child(self._require_node(), w("trPr"))

    def cells(self) -> ElementRange[TableCell]:
        """Range over the row's w:tc children."""
        return ElementRange(TableCell, self._current, self._document)

    @property
    def cell_count(self) -> int:
        return len(self.cells())

    def get_cell(self, index: int) -> TableCell:
        """Cell at ``index`` (0-based).

        Raises:
            NotFoundError: If the row has no such cell
        """
        if self._current is not None and index >= 0:
            nodes = self._current.findall(w("tc"))
            if index < len(nodes):
                return TableCell(self._current, nodes[index], self._document)
        raise NotFoundError(
            f"Row has no cell at index {index}",
            code="cell_not_found",
            context={"index": index, "cell_count": self.cell_count},
        )

    def add_cell(self) -> TableCell:
        """Append a cell holding one empty paragraph."""
        node = self._require_node()
        cell = new_cell()
        node.append(cell)
        return TableCell(node, cell, self._document)

    @property
    def height(self) -> float | None:
        """Row height in points, or None when unset."""
        tr_height = find_child(self._trpr(), w("trHeight"))
        if tr_height is None:
            return None
        return twips_to_points(get_int_attribute(tr_height, "val"))

    @property
    def height_rule(self) -> HeightRule:
        value = get_attribute(find_child(self._trpr(), w("trHeight")), "hRule")
        try:
            return HeightRule(value)
        except ValueError:
            return HeightRule.AUTO

    def set_height(self, points: float, rule: HeightRule = HeightRule.AT_LEAST) -> TableRow:
        """Set the row height in points and how Word applies it."""
        check_length(points, MAX_ROW_HEIGHT_PT, "height")
        tr_height = get_or_create_child(self._get_or_create_trpr(), w("trHeight"))
        set_attribute(tr_height, "val", points_to_twips(points))
        set_attribute(tr_height, "hRule", rule.value)
        return self

    @property
    def is_header_row(self) -> bool:
        return find_child(self._trpr(), w("tblHeader")) is not None

    def set_header_row(self, on: bool = True) -> TableRow:
        """Repeat this row at the top of each page the table spans."""
        if on:
            set_property(self._get_or_create_trpr(), w("tblHeader"))
        else:
            remove_child(self._trpr(), w("tblHeader"))
        return self

    @property
    def cant_split(self) -> bool:
        return find_child(self._trpr(), w("cantSplit")) is not None

    def set_cant_split(self, on: bool = True) -> TableRow:
        if on:
            set_property(self._get_or_create_trpr(), w("cantSplit"))
        else:
            remove_child(self._trpr(), w("cantSplit"))
        return self

    def __repr__(self) -> str:
        return f"<TableRow: {self.cell_count} cells>"


class Table(DocxElement):
    """Wrapper around a w:tbl element.

    Example:
        >>> table = doc.body.add_table(2, 3)
        >>> table.get_cell(0, 1).set_text("Total")
        >>> table.set_alignment(TableAlignment.CENTER).set_width(400)
    """

    TAG = w("tbl")

    def _require_node(self) -> etree._Element:
        if self._current is None:
            raise InvalidArgumentError(
                "Table does not refer to a w:tbl element", code="empty_table"
            )
        return self._current

    def _tblpr(self) -> etree._Element | None:
        return find_child(self._current, w("tblPr"))

    def _get_or_create_tblpr(self) -> etree._Element:
        return get_or_create_child(self._require_node(), w("tblPr"))

    # ------------------------------------------------------------------
    # Structure
    # ------------------------------------------------------------------

    def rows(self) -> ElementRange[TableRow]:
        """Range over the table's w:tr children."""
        return ElementRange(TableRow, self._current, self._document)

    @property
    def row_count(self) -> int:
        return len(self.rows())

    @property
    def column_count(self) -> int:
        """Number of w:gridCol entries, or the first row's cell count without a grid."""
        grid = find_child(self._current, w("tblGrid"))
        if grid is not None and len(grid.findall(w("gridCol"))):
            return len(grid.findall(w("gridCol")))
        first = self.rows().first()
        return first.cell_count if first is not None else 0

    def get_row(self, index: int) -> TableRow:
        """Row at ``index`` (0-based).

        Raises:
            NotFoundError: If the table has no such row
        """
        if self._current is not None and index >= 0:
            nodes = self._current.findall(w("tr"))
            if index < len(nodes):
                return TableRow(self._current, nodes[index], self._document)
        raise NotFoundError(
            f"Table has no row at index {index}",
            code="row_not_found",
            context={"index": index, "row_count": self.row_count},
        )

    def get_cell(self, row: int, col: int) -> TableCell:
        """Cell at (``row``, ``col``), both 0-based."""
        return self.get_row(row).get_cell(col)

    def add_row(self) -> TableRow:
        """Append a row with one empty cell per grid column."""
        node = self._require_node()
        tr = etree.SubElement(node, w("tr"))
        for _ in range(max(self.column_count, 1)):
            tr.append(new_cell())
        return TableRow(node, tr, self._document)

    @property
    def text(self) -> str:
        """Cell texts, tab-separated within a row and one line per row."""
        return "\n".join("\t".join(c.text for c in row.cells()) for row in self.rows())

    # ------------------------------------------------------------------
    # Formatting
    # ------------------------------------------------------------------

    @property
    def alignment(self) -> TableAlignment:
        value = get_attribute(find_child(self._tblpr(), w("jc")), "val")
        try:
            return TableAlignment(value)
        except ValueError:
            return TableAlignment.LEFT

    def set_alignment(self, alignment: TableAlignment) -> Table:
        set_property(self._get_or_create_tblpr(), w("jc"), alignment.value)
        return self

    @property
    def width(self) -> float | None:
        """Table width in points when stored as dxa, else None."""
        tbl_w = find_child(self._tblpr(), w("tblW"))
        if tbl_w is None or get_attribute(tbl_w, "type") != WidthType.DXA.value:
            return None
        return twips_to_points(get_int_attribute(tbl_w, "w"))

    def set_width(self, value: float, width_type: WidthType = WidthType.DXA) -> Table:
        """Set the preferred table width (points for DXA, percent for PCT)."""
        stored = stored_width(value, width_type, MAX_TABLE_WIDTH_PT)
        tbl_w = get_or_create_child(self._get_or_create_tblpr(), w("tblW"))
        set_attribute(tbl_w, "w", stored)
        set_attribute(tbl_w, "type", width_type.value)
        return self

    def set_borders(
        self, style: BorderStyle, width_pt: float = 0.5, color: str = "000000"
    ) -> Table:
        """Apply one border line to the outer edges and the inside grid lines."""
        borders = get_or_create_child(self._get_or_create_tblpr(), w("tblBorders"))
        write_borders(borders, TABLE_BORDER_EDGES, style, width_pt, color)
        return self

    def set_cell_margins(
        self,
        top: float | None = None,
        left: float | None = None,
        bottom: float | None = None,
        right: float | None = None,
    ) -> Table:
        """Set default cell margins for the whole table, in points."""
        margins = {"top": top, "left": left, "bottom": bottom, "right": right}
        write_margins(get_or_create_child(self._get_or_create_tblpr(), w("tblCellMar")), margins)
        return self

    @property
    def style(self) -> str | None:
        """The applied table style id (w:tblStyle), or None."""
        return get_attribute(find_child(self._tblpr(), w("tblStyle")), "val")

    def set_style(self, style_name: str, styles: StyleManager | None = None) -> Table:
        """Apply a table style.

        Raises:
            NotFoundError: If the style does not exist
            IncompatibleTypeError: If it is not a table or mixed style
        """
        self._require_node()
        style = style_catalog(self, styles).get_style(style_name)
        if not style.style_type.applies_to_table:
            raise IncompatibleTypeError(style.style_id, style.style_type.value, "table")
        set_property(self._get_or_create_tblpr(), w("tblStyle"), style.style_id)
        return self

    def __repr__(self) -> str:
        return f"<Table: {self.row_count}x{self.column_count}>"
