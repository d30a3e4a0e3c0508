"""
Paragraph projection: a view over one ``w:p`` element.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from lxml import etree

from ..constants import (
    BULLET_NUM_ID,
    MAX_LIST_LEVEL,
    MAX_OUTLINE_LEVEL,
    NUMBER_NUM_ID,
    WORD_NAMESPACE,
    w,
)
from ..errors import IncompatibleTypeError, InvalidArgumentError
from ..units import (
    line_spacing_to_ooxml,
    ooxml_to_line_spacing,
    points_to_twips,
    twips_to_points,
)
from ..xml_utils import (
    find_child,
    get_attribute,
    get_int_attribute,
    get_or_create_child,
    remove_child,
    set_attribute,
    set_property,
)
from .base import DocxElement, ElementRange, require_document, style_catalog
from .formatting import Alignment, FormattingFlag, ListType
from .run import Run, build_run

if TYPE_CHECKING:
    from ..styles import StyleManager
    from .drawing import Image, TextBox

_TEXT_XPATH = etree.XPath(
    "./w:r/w:t | ./w:hyperlink/w:r/w:t", namespaces={"w": WORD_NAMESPACE}
)


class Paragraph(DocxElement):
    """Wrapper around a w:p (paragraph) element.

    Lengths are given in points; OOXML stores them as twips.

    Example:
        >>> para = doc.body.add_paragraph("Intro", FormattingFlag.BOLD)
        >>> para.set_alignment(Alignment.CENTER).set_spacing(before=6, after=12)
        >>> [run.text for run in para.runs()]
        ['Intro']
    """

    TAG = w("p")

    def _ppr(self) -> etree._Element | None:
        return find_child(self._current, w("pPr"))

    def _require_node(self) -> etree._Element:
        if self._current is None:
            raise InvalidArgumentError(
                "Paragraph does not refer to a w:p element", code="empty_paragraph"
            )
        return self._current

    def _get_or_create_ppr(self) -> etree._Element:
        return get_or_create_child(self._require_node(), w("pPr"))

    # ------------------------------------------------------------------
    # Content
    # ------------------------------------------------------------------

    def runs(self) -> ElementRange[Run]:
        """Range over the paragraph's direct w:r children."""
        return ElementRange(Run, self._current, self._document)

    @property
    def text(self) -> str:
        """Text of all runs, including runs inside hyperlinks."""
        if self._current is None:
            return ""
        return "".join(t.text or "" for t in _TEXT_XPATH(self._current))

    def add_run(self, text: str = "", flags: FormattingFlag = FormattingFlag.NONE) -> Run:
        """Append a run with the given text and formatting toggles."""
        node = self._require_node()
        run_node = build_run(text, flags)
        node.append(run_node)
        return Run(node, run_node, self._document)

    def set_text(self, text: str, flags: FormattingFlag = FormattingFlag.NONE) -> Paragraph:
        """Replace all content (keeping w:pPr) with one run holding ``text``."""
        node = self._require_node()
        run_node = build_run(text, flags)
        for child in list(node):
            if child.tag != w("pPr"):
                node.remove(child)
        node.append(run_node)
        return self

    def insert_paragraph_after(
        self, text: str = "", flags: FormattingFlag = FormattingFlag.NONE
    ) -> Paragraph:
        """Insert a sibling w:p directly after this one and return it."""
        node = self._require_node()
        new_node = etree.Element(w("p"))
        node.addnext(new_node)
        paragraph = Paragraph(self._parent, new_node, self._document)
        if text or flags:
            paragraph.add_run(text, flags)
        return paragraph

    def add_hyperlink(self, url: str, text: str) -> Run:
        """Append an external hyperlink; returns the run inside the w:hyperlink."""
        document = require_document(self, "add_hyperlink")
        return document.links.add_hyperlink(self, url, text)

    def add_image(
        self,
        path: str | Path,
        width_px: int | None = None,
        height_px: int | None = None,
        max_width_px: int = 0,
    ) -> Image:
        """Append an inline picture; see MediaManager.add_image."""
        document = require_document(self, "add_image")
        return document.media.add_image(self, path, width_px, height_px, max_width_px)

    def add_text_box(self, width_px: int, height_px: int) -> TextBox:
        """Append an inline text box; see MediaManager.add_text_box."""
        document = require_document(self, "add_text_box")
        return document.media.add_text_box(self, width_px, height_px)

    # ------------------------------------------------------------------
    # Alignment and spacing
    # ------------------------------------------------------------------

    @property
    def alignment(self) -> Alignment:
        """Justification; LEFT when unset or unrecognized."""
        return Alignment.from_xml(get_attribute(find_child(self._ppr(), w("jc")), "val"))

    def set_alignment(self, alignment: Alignment) -> Paragraph:
        set_property(self._get_or_create_ppr(), w("jc"), alignment.value)
        return self

    @property
    def spacing_before(self) -> float:
        """Space before in points (0 when unset)."""
        return twips_to_points(get_int_attribute(find_child(self._ppr(), w("spacing")), "before"))

    @property
    def spacing_after(self) -> float:
        """Space after in points (0 when unset)."""
        return twips_to_points(get_int_attribute(find_child(self._ppr(), w("spacing")), "after"))

    def set_spacing(self, before: float | None = None, after: float | None = None) -> Paragraph:
        """Set space before and/or after in points; None leaves a value unchanged."""
        for name, value in (("before", before), ("after", after)):
            if value is not None and value < 0:
                raise InvalidArgumentError(
                    "Spacing must not be negative", code="negative_spacing", context={name: value}
                )
        spacing = get_or_create_child(self._get_or_create_ppr(), w("spacing"))
        if before is not None:
            set_attribute(spacing, "before", points_to_twips(before))
        if after is not None:
            set_attribute(spacing, "after", points_to_twips(after))
        return self

    @property
    def line_spacing(self) -> float:
        """Line spacing multiplier (1.0 when unset)."""
        line = get_attribute(find_child(self._ppr(), w("spacing")), "line")
        if line is None:
            return 1.0
        try:
            return ooxml_to_line_spacing(int(line))
        except ValueError:
            return 1.0

    def set_line_spacing(self, multiplier: float) -> Paragraph:
        """Set proportional line spacing (1.0 single, 2.0 double)."""
        if multiplier <= 0:
            raise InvalidArgumentError(
                "Line spacing must be positive",
                code="invalid_line_spacing",
                context={"line_spacing": multiplier},
            )
        spacing = get_or_create_child(self._get_or_create_ppr(), w("spacing"))
        set_attribute(spacing, "line", line_spacing_to_ooxml(multiplier))
        set_attribute(spacing, "lineRule", "auto")
        return self

    # ------------------------------------------------------------------
    # Indentation
    # ------------------------------------------------------------------

    def _ind(self) -> etree._Element | None:
        return find_child(self._ppr(), w("ind"))

    @property
    def left_indent(self) -> float:
        return twips_to_points(get_int_attribute(self._ind(), "left"))

    @property
    def right_indent(self) -> float:
        return twips_to_points(get_int_attribute(self._ind(), "right"))

    @property
    def first_line_indent(self) -> float:
        """First-line indent in points; a hanging indent reads as a negative value."""
        ind = self._ind()
        hanging = get_int_attribute(ind, "hanging")
        if hanging:
            return -twips_to_points(hanging)
        return twips_to_points(get_int_attribute(ind, "firstLine"))

    def set_indentation(self, left: float | None = None, right: float | None = None) -> Paragraph:
        """Set left and/or right indentation in points."""
        ind = get_or_create_child(self._get_or_create_ppr(), w("ind"))
        if left is not None:
            set_attribute(ind, "left", points_to_twips(left))
        if right is not None:
            set_attribute(ind, "right", points_to_twips(right))
        return self

    def set_first_line_indent(self, points: float) -> Paragraph:
        """Positive sets a first-line indent, negative a hanging indent, 0 removes both."""
        ind = get_or_create_child(self._get_or_create_ppr(), w("ind"))
        if points > 0:
            set_attribute(ind, "firstLine", points_to_twips(points))
            ind.attrib.pop(w("hanging"), None)
        elif points < 0:
            set_attribute(ind, "hanging", points_to_twips(-points))
            ind.attrib.pop(w("firstLine"), None)
        else:
            ind.attrib.pop(w("firstLine"), None)
            ind.attrib.pop(w("hanging"), None)
        return self

    # ------------------------------------------------------------------
    # Lists
    # ------------------------------------------------------------------

    def _num_pr(self) -> etree._Element | None:
        return find_child(self._ppr(), w("numPr"))

    @property
    def list_level(self) -> int | None:
        num_pr = self._num_pr()
        if num_pr is None:
            return None
        return get_int_attribute(find_child(num_pr, w("ilvl")), "val")

    @property
    def list_id(self) -> int | None:
        """The referenced numbering id (w:numId), or None."""
        num_pr = self._num_pr()
        if num_pr is None:
            return None
        return get_int_attribute(find_child(num_pr, w("numId")), "val")

    @property
    def list_type(self) -> ListType:
        """Bullet or number, resolved against numbering.xml when available.

        Without numbering definitions, numId 2 reads as NUMBER and any other
        id as BULLET.
        """
        num_id = self.list_id
        if num_id is None:
            return ListType.NONE
        if self._document is not None:
            fmt = self._document.numbering.format_for(num_id, self.list_level or 0)
            if fmt is not None:
                return ListType.BULLET if fmt == "bullet" else ListType.NUMBER
        return ListType.NUMBER if num_id == NUMBER_NUM_ID else ListType.BULLET

    def set_list_style(self, list_type: ListType, level: int = 0) -> Paragraph:
        """Make the paragraph a bullet or numbered list item, or remove list membership."""
        if list_type is ListType.NONE:
            remove_child(self._ppr(), w("numPr"))
            return self
        self._require_node()
        if not 0 <= level <= MAX_LIST_LEVEL:
            raise InvalidArgumentError(
                f"List level must be between 0 and {MAX_LIST_LEVEL}",
                code="invalid_level",
                context={"level": level},
            )
        if self._document is not None:
            self._document.ensure_numbering()

        num_pr = get_or_create_child(self._get_or_create_ppr(), w("numPr"))
        num_id = BULLET_NUM_ID if list_type is ListType.BULLET else NUMBER_NUM_ID
        # ilvl must precede numId; both are created at index 0
        set_property(num_pr, w("numId"), num_id)
        set_property(num_pr, w("ilvl"), level)
        return self

    # ------------------------------------------------------------------
    # Style
    # ------------------------------------------------------------------

    @property
    def style(self) -> str | None:
        """The applied paragraph style id (w:pStyle), or None."""
        return get_attribute(find_child(self._ppr(), w("pStyle")), "val")

    def set_style(self, style_name: str, styles: StyleManager | None = None) -> Paragraph:
        """Apply a paragraph (or mixed) style.

        Raises:
            NotFoundError: If the style does not exist
            IncompatibleTypeError: If it is a character, table or numbering style
        """
        self._require_node()
        style = style_catalog(self, styles).get_style(style_name)
        if not style.style_type.applies_to_paragraph:
            raise IncompatibleTypeError(style.style_id, style.style_type.value, "paragraph")
        set_property(self._get_or_create_ppr(), w("pStyle"), style.style_id)
        return self

    def remove_style(self) -> Paragraph:
        remove_child(self._ppr(), w("pStyle"))
        return self

    @property
    def outline_level(self) -> int | None:
        """Explicit outline level from w:outlineLvl (0 is the top level), or None."""
        node = find_child(self._ppr(), w("outlineLvl"))
        return None if node is None else get_int_attribute(node, "val")

    def set_outline_level(self, level: int | None) -> Paragraph:
        """Mark the paragraph as an outline heading at ``level`` (0-8); None removes it."""
        if level is None:
            remove_child(self._ppr(), w("outlineLvl"))
            return self
        self._require_node()
        if not 0 <= level <= MAX_OUTLINE_LEVEL:
            raise InvalidArgumentError(
                f"Outline level must be between 0 and {MAX_OUTLINE_LEVEL}",
                code="invalid_level",
                context={"level": level},
            )
        set_property(self._get_or_create_ppr(), w("outlineLvl"), level)
        return self

    def __repr__(self) -> str:
        text_preview = self.text[:50] + "..." if len(self.text) > 50 else self.text
        style_info = f" style={self.style}" if self.style else ""
        return f"<Paragraph{style_info}: {text_preview!r}>"
