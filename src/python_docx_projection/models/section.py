"""
Section model: page layout of the body-level ``w:sectPr``.

A Section reads and writes page size and orientation (``w:pgSz``), margins
(``w:pgMar``), newspaper columns (``w:cols``), the section start type,
page numbering and the first-page / odd-even header switches. Lengths are
given in points; OOXML stores them as twips.

Headings are collected separately by ``outline`` into OutlineEntry
records, one per heading paragraph in document order.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from lxml import etree

from ..constants import (
    DEFAULT_COLUMN_SPACING_PT,
    DEFAULT_PAGE_MARGINS_PT,
    MAX_OUTLINE_LEVEL,
    MAX_PAGE_SIZE_PT,
    MAX_SECTION_COLUMNS,
    w,
)
from ..errors import InvalidArgumentError, ResourceLimitError
from ..units import points_to_twips, twips_to_points
from ..xml_utils import (
    find_child,
    get_attribute,
    get_int_attribute,
    insert_before_first,
    set_attribute,
)
from .formatting import VerticalAlignment
from .paragraph import Paragraph

if TYPE_CHECKING:
    from ..document import Document

# Schema order of the w:sectPr children
SECT_PR_ORDER = (
    "headerReference",
    "footerReference",
    "footnotePr",
    "endnotePr",
    "type",
    "pgSz",
    "pgMar",
    "paperSrc",
    "pgBorders",
    "lnNumType",
    "pgNumType",
    "cols",
    "formProt",
    "vAlign",
    "noEndnote",
    "titlePg",
    "textDirection",
    "bidi",
    "rtlGutter",
    "docGrid",
    "printerSettings",
    "sectPrChange",
)

MARGIN_SIDES = ("top", "right", "bottom", "left", "header", "footer", "gutter")

# Word's stored size of a 1 mm difference, used when matching standard sizes
PAGE_SIZE_TOLERANCE_TWIPS = 57

HEADING_STYLE_ID = re.compile(r"^Heading([1-9])$")
HEADING_STYLE_NAME = re.compile(r"^heading ([1-9])$", re.IGNORECASE)


class Orientation(Enum):
    PORTRAIT = "portrait"
    LANDSCAPE = "landscape"


class PageSize(Enum):
    """Standard paper sizes; ``twips`` is the portrait (width, height)."""

    A3 = "a3"
    A4 = "a4"
    A5 = "a5"
    LETTER = "letter"
    LEGAL = "legal"

    @property
    def twips(self) -> tuple[int, int]:
        return _PAGE_SIZE_TWIPS[self]


_PAGE_SIZE_TWIPS = {
    PageSize.A3: (16838, 23811),
    PageSize.A4: (11906, 16838),
    PageSize.A5: (8391, 11906),
    PageSize.LETTER: (12240, 15840),
    PageSize.LEGAL: (12240, 20160),
}


class SectionStart(Enum):
    """Where the section begins (``w:type``); absent means NEXT_PAGE."""

    NEXT_PAGE = "nextPage"
    CONTINUOUS = "continuous"
    NEXT_COLUMN = "nextColumn"
    EVEN_PAGE = "evenPage"
    ODD_PAGE = "oddPage"


class PageNumberFormat(Enum):
    """Page number style (``w:pgNumType/@w:fmt``)."""

    DECIMAL = "decimal"
    UPPER_ROMAN = "upperRoman"
    LOWER_ROMAN = "lowerRoman"
    UPPER_LETTER = "upperLetter"
    LOWER_LETTER = "lowerLetter"


@dataclass
class PageMargins:
    """Page margins in points; None where the section does not set a side."""

    top: float | None = None
    right: float | None = None
    bottom: float | None = None
    left: float | None = None
    header: float | None = None
    footer: float | None = None
    gutter: float | None = None


@dataclass
class OutlineEntry:
    """One heading of the document outline.

    Attributes:
        level: Heading level, 1 (top) to 9
        text: The heading paragraph's text
        paragraph: Projection of the heading paragraph
    """

    level: int
    text: str
    paragraph: Paragraph


def _child_in_order(sect_pr: etree._Element, name: str) -> etree._Element:
    """Get or create the w:``name`` child of sectPr at its schema position."""
    child = sect_pr.find(w(name))
    if child is None:
        child = etree.Element(w(name))
        index = SECT_PR_ORDER.index(name)
        insert_before_first(sect_pr, child, SECT_PR_ORDER[index + 1 :])
    return child


def _check_length(value: float, field: str, allow_zero: bool = True) -> None:
    if value < 0 or (value == 0 and not allow_zero):
        raise InvalidArgumentError(
            f"{field} must be {'non-negative' if allow_zero else 'positive'}",
            code="invalid_page_layout",
            context={field: value},
        )
    if value > MAX_PAGE_SIZE_PT:
        raise ResourceLimitError(
            f"{field} exceeds {MAX_PAGE_SIZE_PT}pt",
            code="page_too_large",
            context={field: value, "max": MAX_PAGE_SIZE_PT},
        )


class Section:
    """Page layout of a section.

    The projection wraps a ``w:sectPr`` element; every setter returns the
    Section for chaining and validates its arguments before writing.

    Example:
        >>> doc.section.set_page_size(PageSize.A4, Orientation.LANDSCAPE)
        >>> doc.section.set_margins(top=54, bottom=54).set_columns(2)
        >>> doc.section.orientation
        <Orientation.LANDSCAPE: 'landscape'>
    """

    def __init__(self, element: etree._Element, document: Document | None = None) -> None:
        if element.tag != w("sectPr"):
            raise InvalidArgumentError(
                "Section must wrap a w:sectPr element", code="unexpected_tag"
            )
        self.element = element
        self._document = document

    # ------------------------------------------------------------------
    # Page size and orientation
    # ------------------------------------------------------------------

    def _pg_sz(self) -> etree._Element | None:
        return find_child(self.element, w("pgSz"))

    @property
    def page_width(self) -> float | None:
        """Page width in points, or None when the section sets no page size."""
        pg_sz = self._pg_sz()
        if pg_sz is None or get_attribute(pg_sz, "w") is None:
            return None
        return twips_to_points(get_int_attribute(pg_sz, "w"))

    @property
    def page_height(self) -> float | None:
        """Page height in points, or None when the section sets no page size."""
        pg_sz = self._pg_sz()
        if pg_sz is None or get_attribute(pg_sz, "h") is None:
            return None
        return twips_to_points(get_int_attribute(pg_sz, "h"))

    @property
    def orientation(self) -> Orientation:
        if get_attribute(self._pg_sz(), "orient") == Orientation.LANDSCAPE.value:
            return Orientation.LANDSCAPE
        return Orientation.PORTRAIT

    @property
    def page_size(self) -> PageSize | None:
        """The standard size the page matches in either orientation, or None."""
        pg_sz = self._pg_sz()
        if pg_sz is None:
            return None
        dims = sorted((get_int_attribute(pg_sz, "w"), get_int_attribute(pg_sz, "h")))
        for size, (width, height) in _PAGE_SIZE_TWIPS.items():
            if (
                abs(dims[0] - width) <= PAGE_SIZE_TOLERANCE_TWIPS
                and abs(dims[1] - height) <= PAGE_SIZE_TOLERANCE_TWIPS
            ):
                return size
        return None

    def _write_page_size(self, width: int, height: int, orientation: Orientation) -> None:
        pg_sz = _child_in_order(self.element, "pgSz")
        set_attribute(pg_sz, "w", width)
        set_attribute(pg_sz, "h", height)
        if orientation is Orientation.LANDSCAPE:
            set_attribute(pg_sz, "orient", Orientation.LANDSCAPE.value)
        else:
            pg_sz.attrib.pop(w("orient"), None)

    def set_page_size(
        self, size: PageSize, orientation: Orientation = Orientation.PORTRAIT
    ) -> Section:
        """Use a standard paper size; LANDSCAPE swaps its width and height."""
        width, height = size.twips
        if orientation is Orientation.LANDSCAPE:
            width, height = height, width
        self._write_page_size(width, height, orientation)
        return self

    def set_custom_page_size(self, width: float, height: float) -> Section:
        """Set the page size in points; pages wider than tall are marked landscape.

        Raises:
            InvalidArgumentError: If a dimension is not positive
            ResourceLimitError: If a dimension exceeds MAX_PAGE_SIZE_PT
        """
        _check_length(width, "width", allow_zero=False)
        _check_length(height, "height", allow_zero=False)
        orientation = Orientation.LANDSCAPE if width > height else Orientation.PORTRAIT
        self._write_page_size(points_to_twips(width), points_to_twips(height), orientation)
        return self

    def set_orientation(self, orientation: Orientation) -> Section:
        """Turn the page, swapping width and height when they do not fit ``orientation``.

        A section without a page size starts from A4.
        """
        pg_sz = self._pg_sz()
        if pg_sz is None or get_attribute(pg_sz, "w") is None or get_attribute(pg_sz, "h") is None:
            width, height = PageSize.A4.twips
        else:
            width, height = get_int_attribute(pg_sz, "w"), get_int_attribute(pg_sz, "h")
        if (orientation is Orientation.LANDSCAPE) != (width > height) and width != height:
            width, height = height, width
        self._write_page_size(width, height, orientation)
        return self

    # ------------------------------------------------------------------
    # Margins
    # ------------------------------------------------------------------

    @property
    def margins(self) -> PageMargins:
        pg_mar = find_child(self.element, w("pgMar"))
        values = {}
        for side in MARGIN_SIDES:
            if get_attribute(pg_mar, side) is not None:
                values[side] = twips_to_points(get_int_attribute(pg_mar, side))
        return PageMargins(**values)

    def set_margins(
        self,
        top: float | None = None,
        right: float | None = None,
        bottom: float | None = None,
        left: float | None = None,
        header: float | None = None,
        footer: float | None = None,
        gutter: float | None = None,
    ) -> Section:
        """Set margins in points; None leaves a side unchanged.

        w:pgMar needs every side, so a new one starts from
        DEFAULT_PAGE_MARGINS_PT (one inch, half an inch for header and footer).

        Raises:
            InvalidArgumentError: If a margin is negative
            ResourceLimitError: If a margin exceeds MAX_PAGE_SIZE_PT
        """
        given = {
            "top": top,
            "right": right,
            "bottom": bottom,
            "left": left,
            "header": header,
            "footer": footer,
            "gutter": gutter,
        }
        for side, value in given.items():
            if value is not None:
                _check_length(value, side)

        pg_mar = _child_in_order(self.element, "pgMar")
        for side in MARGIN_SIDES:
            value = given[side]
            if value is not None:
                set_attribute(pg_mar, side, points_to_twips(value))
            elif get_attribute(pg_mar, side) is None:
                set_attribute(pg_mar, side, points_to_twips(DEFAULT_PAGE_MARGINS_PT[side]))
        return self

    # ------------------------------------------------------------------
    # Columns
    # ------------------------------------------------------------------

    @property
    def column_count(self) -> int:
        """Number of text columns (1 when unset)."""
        return get_int_attribute(find_child(self.element, w("cols")), "num", 1) or 1

    @property
    def column_spacing(self) -> float | None:
        """Space between columns in points, or None when unset."""
        cols = find_child(self.element, w("cols"))
        if get_attribute(cols, "space") is None:
            return None
        return twips_to_points(get_int_attribute(cols, "space"))

    def set_columns(self, count: int, spacing: float = DEFAULT_COLUMN_SPACING_PT) -> Section:
        """Lay the section out in ``count`` equal columns ``spacing`` points apart.

        Raises:
            InvalidArgumentError: If count is outside 1..MAX_SECTION_COLUMNS or spacing is negative
        """
        if not 1 <= count <= MAX_SECTION_COLUMNS:
            raise InvalidArgumentError(
                f"Column count must be between 1 and {MAX_SECTION_COLUMNS}",
                code="invalid_column_count",
                context={"count": count},
            )
        _check_length(spacing, "spacing")
        cols = _child_in_order(self.element, "cols")
        set_attribute(cols, "num", count)
        if count > 1:
            set_attribute(cols, "space", points_to_twips(spacing))
        else:
            cols.attrib.pop(w("space"), None)
        return self

    # ------------------------------------------------------------------
    # Header and footer switches
    # ------------------------------------------------------------------

    @property
    def different_first_page(self) -> bool:
        return self.element.find(w("titlePg")) is not None

    def set_different_first_page(self, on: bool) -> Section:
        """Give the first page its own header and footer (``w:titlePg``)."""
        if on:
            _child_in_order(self.element, "titlePg")
        else:
            for node in self.element.findall(w("titlePg")):
                self.element.remove(node)
        return self

    @property
    def different_odd_even(self) -> bool:
        """Whether even and odd pages get separate headers (document-wide)."""
        if self._document is None:
            return False
        return self._document.header_footer.even_and_odd_headers

    def set_different_odd_even(self, on: bool) -> Section:
        """Switch separate even and odd page headers on or off for the whole document.

        Raises:
            InvalidArgumentError: If the Section was not obtained from a Document
        """
        if self._document is None:
            raise InvalidArgumentError(
                "Odd and even page headers are a document setting; use Document.section",
                code="detached_element",
            )
        self._document.header_footer.set_even_and_odd_headers(on)
        return self

    # ------------------------------------------------------------------
    # Start, numbering and vertical alignment
    # ------------------------------------------------------------------

    @property
    def start_type(self) -> SectionStart:
        value = get_attribute(find_child(self.element, w("type")), "val")
        try:
            return SectionStart(value)
        except ValueError:
            return SectionStart.NEXT_PAGE

    def set_start_type(self, start: SectionStart) -> Section:
        set_attribute(_child_in_order(self.element, "type"), "val", start.value)
        return self

    @property
    def page_number_format(self) -> PageNumberFormat | None:
        value = get_attribute(find_child(self.element, w("pgNumType")), "fmt")
        try:
            return PageNumberFormat(value) if value is not None else None
        except ValueError:
            return None

    @property
    def page_number_start(self) -> int | None:
        pg_num = find_child(self.element, w("pgNumType"))
        if get_attribute(pg_num, "start") is None:
            return None
        return get_int_attribute(pg_num, "start")

    def set_page_numbering(
        self, number_format: PageNumberFormat = PageNumberFormat.DECIMAL, start: int | None = None
    ) -> Section:
        """Set the page number style and, optionally, the first page number.

        Raises:
            InvalidArgumentError: If start is negative
        """
        if start is not None and start < 0:
            raise InvalidArgumentError(
                "Page numbering cannot start below 0",
                code="invalid_page_number_start",
                context={"start": start},
            )
        pg_num = _child_in_order(self.element, "pgNumType")
        set_attribute(pg_num, "fmt", number_format.value)
        if start is not None:
            set_attribute(pg_num, "start", start)
        else:
            pg_num.attrib.pop(w("start"), None)
        return self

    @property
    def vertical_alignment(self) -> VerticalAlignment:
        value = get_attribute(find_child(self.element, w("vAlign")), "val")
        try:
            return VerticalAlignment(value)
        except ValueError:
            return VerticalAlignment.TOP

    def set_vertical_alignment(self, alignment: VerticalAlignment) -> Section:
        """Align text vertically on the page; TOP removes ``w:vAlign``."""
        if alignment is VerticalAlignment.TOP:
            for node in self.element.findall(w("vAlign")):
                self.element.remove(node)
        else:
            set_attribute(_child_in_order(self.element, "vAlign"), "val", alignment.value)
        return self

    def __repr__(self) -> str:
        size = self.page_size
        label = size.name if size is not None else "custom"
        if self.page_width is None:
            label = "unset"
        return f"<Section: {label} {self.orientation.value}, {self.column_count} column(s)>"


def heading_level(paragraph: Paragraph, document: Document | None = None) -> int | None:
    """The heading level (1-9) of a paragraph, or None for body text.

    An explicit ``w:outlineLvl`` wins; otherwise the paragraph style is
    matched by id ("Heading2") and then by catalog display name ("heading 2").
    """
    node = paragraph.current_node
    if node is None:
        return None
    outline = node.find(f"{w('pPr')}/{w('outlineLvl')}")
    if outline is not None:
        level = get_int_attribute(outline, "val", 9)
        # Levels past MAX_OUTLINE_LEVEL mark body text
        return level + 1 if 0 <= level <= MAX_OUTLINE_LEVEL else None

    style_id = paragraph.style
    if style_id is None:
        return None
    match = HEADING_STYLE_ID.match(style_id)
    if match is None and document is not None:
        style = document.styles.get(style_id)
        if style is not None:
            match = HEADING_STYLE_NAME.match(style.name)
    return int(match.group(1)) if match else None


def outline(paragraphs: list[Paragraph], document: Document | None = None) -> list[OutlineEntry]:
    """Collect the heading paragraphs, in order, with their levels."""
    entries = []
    for paragraph in paragraphs:
        level = heading_level(paragraph, document)
        if level is not None:
            entries.append(OutlineEntry(level, paragraph.text, paragraph))
    return entries
