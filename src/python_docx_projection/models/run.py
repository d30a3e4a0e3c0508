"""
Run projection: a view over one ``w:r`` element.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from lxml import etree

from ..constants import w
from ..errors import IncompatibleTypeError, InvalidArgumentError
from ..units import half_points_to_points, points_to_half_points
from ..xml_utils import (
    check_text_length,
    find_child,
    get_attribute,
    get_or_create_child,
    normalize_hex_color,
    remove_child,
    set_attribute,
    set_property,
    set_text,
)
from .base import DocxElement, style_catalog
from .formatting import FormattingFlag, HighlightColor

if TYPE_CHECKING:
    from ..styles import StyleManager

_FALSE_VALUES = ("false", "0", "off")

# Simple on/off toggles: flag -> rPr child tag
_TOGGLE_TAGS = {
    FormattingFlag.BOLD: "b",
    FormattingFlag.ITALIC: "i",
    FormattingFlag.SMALLCAPS: "smallCaps",
    FormattingFlag.STRIKETHROUGH: "strike",
    FormattingFlag.SHADOW: "shadow",
}


def is_on(rpr: etree._Element | None, tag: str) -> bool:
    """Whether a boolean run property is present and not switched off."""
    node = find_child(rpr, w(tag))
    if node is None:
        return False
    value = get_attribute(node, "val")
    return value is None or value.lower() not in _FALSE_VALUES


def build_rpr(flags: FormattingFlag) -> etree._Element | None:
    """Create a w:rPr holding one property element per flag, or None for no flags."""
    flags = FormattingFlag(flags)
    if not flags:
        return None
    rpr = etree.Element(w("rPr"))
    if FormattingFlag.BOLD in flags:
        etree.SubElement(rpr, w("b"))
    if FormattingFlag.ITALIC in flags:
        etree.SubElement(rpr, w("i"))
    if FormattingFlag.SMALLCAPS in flags:
        etree.SubElement(rpr, w("smallCaps")).set(w("val"), "true")
    if FormattingFlag.STRIKETHROUGH in flags:
        etree.SubElement(rpr, w("strike")).set(w("val"), "true")
    if FormattingFlag.SHADOW in flags:
        etree.SubElement(rpr, w("shadow")).set(w("val"), "true")
    if FormattingFlag.UNDERLINE in flags:
        etree.SubElement(rpr, w("u")).set(w("val"), "single")
    if FormattingFlag.SUPERSCRIPT in flags:
        etree.SubElement(rpr, w("vertAlign")).set(w("val"), "superscript")
    elif FormattingFlag.SUBSCRIPT in flags:
        etree.SubElement(rpr, w("vertAlign")).set(w("val"), "subscript")
    return rpr


def build_run(text: str, flags: FormattingFlag = FormattingFlag.NONE) -> etree._Element:
    """Create a detached ``w:r`` with formatting and a single ``w:t``."""
    check_text_length(text)
    run = etree.Element(w("r"))
    rpr = build_rpr(flags)
    if rpr is not None:
        run.append(rpr)
    set_text(etree.SubElement(run, w("t")), text)
    return run


class Run(DocxElement):
    """Wrapper around a w:r (run) element.

    Example:
        >>> run = paragraph.add_run("Hello", FormattingFlag.BOLD)
        >>> run.is_bold
        True
        >>> run.set_font("Arial").set_font_size(14)
    """

    TAG = w("r")

    def _rpr(self) -> etree._Element | None:
        return find_child(self._current, w("rPr"))

    def _require_node(self) -> etree._Element:
        if self._current is None:
            raise InvalidArgumentError("Run does not refer to a w:r element", code="empty_run")
        return self._current

    # ------------------------------------------------------------------
    # Text
    # ------------------------------------------------------------------

    @property
    def text(self) -> str:
        """Concatenated text of every w:t in the run ("" for an empty projection)."""
        if self._current is None:
            return ""
        return "".join(t.text or "" for t in self._current.findall(w("t")))

    def set_text(self, text: str) -> Run:
        """Replace the run's text with a single w:t, keeping its formatting."""
        node = self._require_node()
        check_text_length(text)
        texts = node.findall(w("t"))
        for extra in texts[1:]:
            node.remove(extra)
        t_element = texts[0] if texts else etree.SubElement(node, w("t"))
        set_text(t_element, text)
        return self

    # ------------------------------------------------------------------
    # Formatting flags
    # ------------------------------------------------------------------

    @property
    def is_bold(self) -> bool:
        return is_on(self._rpr(), "b")

    @property
    def is_italic(self) -> bool:
        return is_on(self._rpr(), "i")

    @property
    def is_underline(self) -> bool:
        """Underline is on unless absent or explicitly ``w:val="none"``."""
        u_node = find_child(self._rpr(), w("u"))
        if u_node is None:
            return False
        return get_attribute(u_node, "val") != "none"

    @property
    def is_strikethrough(self) -> bool:
        return is_on(self._rpr(), "strike")

    @property
    def is_smallcaps(self) -> bool:
        return is_on(self._rpr(), "smallCaps")

    @property
    def is_shadow(self) -> bool:
        return is_on(self._rpr(), "shadow")

    @property
    def vertical_align(self) -> str | None:
        return get_attribute(find_child(self._rpr(), w("vertAlign")), "val")

    @property
    def is_superscript(self) -> bool:
        return self.vertical_align == "superscript"

    @property
    def is_subscript(self) -> bool:
        return self.vertical_align == "subscript"

    @property
    def formatting(self) -> FormattingFlag:
        """All active toggles merged into one FormattingFlag."""
        flags = FormattingFlag.NONE
        checks = (
            (self.is_bold, FormattingFlag.BOLD),
            (self.is_italic, FormattingFlag.ITALIC),
            (self.is_underline, FormattingFlag.UNDERLINE),
            (self.is_strikethrough, FormattingFlag.STRIKETHROUGH),
            (self.is_superscript, FormattingFlag.SUPERSCRIPT),
            (self.is_subscript, FormattingFlag.SUBSCRIPT),
            (self.is_smallcaps, FormattingFlag.SMALLCAPS),
            (self.is_shadow, FormattingFlag.SHADOW),
        )
        for active, flag in checks:
            if active:
                flags |= flag
        return flags

    def _set_toggle(self, flag: FormattingFlag, on: bool) -> Run:
        rpr = get_or_create_child(self._require_node(), w("rPr"))
        tag = w(_TOGGLE_TAGS[flag])
        if on:
            set_property(rpr, tag, "true")
        else:
            remove_child(rpr, tag)
        return self

    def set_bold(self, on: bool = True) -> Run:
        return self._set_toggle(FormattingFlag.BOLD, on)

    def set_italic(self, on: bool = True) -> Run:
        return self._set_toggle(FormattingFlag.ITALIC, on)

    def set_strikethrough(self, on: bool = True) -> Run:
        return self._set_toggle(FormattingFlag.STRIKETHROUGH, on)

    def set_smallcaps(self, on: bool = True) -> Run:
        return self._set_toggle(FormattingFlag.SMALLCAPS, on)

    def set_shadow(self, on: bool = True) -> Run:
        return self._set_toggle(FormattingFlag.SHADOW, on)

    def set_underline(self, on: bool = True) -> Run:
        rpr = get_or_create_child(self._require_node(), w("rPr"))
        if on:
            set_property(rpr, w("u"), "single")
        else:
            remove_child(rpr, w("u"))
        return self

    def _set_vertical_align(self, value: str, on: bool) -> Run:
        rpr = get_or_create_child(self._require_node(), w("rPr"))
        if on:
            set_property(rpr, w("vertAlign"), value)
        elif self.vertical_align == value:
            remove_child(rpr, w("vertAlign"))
        return self

    def set_superscript(self, on: bool = True) -> Run:
        return self._set_vertical_align("superscript", on)

    def set_subscript(self, on: bool = True) -> Run:
        return self._set_vertical_align("subscript", on)

    def set_formatting(self, flags: FormattingFlag) -> Run:
        """Switch every toggle on or off to match ``flags``."""
        flags = FormattingFlag(flags)
        for flag in _TOGGLE_TAGS:
            self._set_toggle(flag, flag in flags)
        self.set_underline(FormattingFlag.UNDERLINE in flags)
        if FormattingFlag.SUPERSCRIPT in flags:
            self.set_superscript()
        elif FormattingFlag.SUBSCRIPT in flags:
            self.set_subscript()
        else:
            remove_child(self._rpr(), w("vertAlign"))
        return self

    # ------------------------------------------------------------------
    # Font, size, color, highlight
    # ------------------------------------------------------------------

    @property
    def font(self) -> str | None:
        """The w:rFonts ascii font, or None."""
        return get_attribute(find_child(self._rpr(), w("rFonts")), "ascii")

    def set_font(self, font_name: str) -> Run:
        """Set the font family for every script slot."""
        if not font_name:
            raise InvalidArgumentError("Font name must not be empty", code="empty_font")
        rpr = get_or_create_child(self._require_node(), w("rPr"))
        fonts = get_or_create_child(rpr, w("rFonts"))
        for slot in ("ascii", "hAnsi", "eastAsia", "cs"):
            set_attribute(fonts, slot, font_name)
        return self

    @property
    def font_size(self) -> float | None:
        """Font size in points, or None when not set."""
        value = get_attribute(find_child(self._rpr(), w("sz")), "val")
        if value is None:
            return None
        try:
            return half_points_to_points(int(value))
        except ValueError:
            return None

    def set_font_size(self, points: float) -> Run:
        """Set the font size in points (stored as half-points in w:sz and w:szCs)."""
        if points <= 0:
            raise InvalidArgumentError(
                "Font size must be positive", code="invalid_font_size", context={"size": points}
            )
        rpr = get_or_create_child(self._require_node(), w("rPr"))
        half_points = points_to_half_points(points)
        set_property(rpr, w("szCs"), half_points)
        set_property(rpr, w("sz"), half_points)
        return self

    @property
    def color(self) -> str | None:
        """Explicit RRGGBB color, or None when unset or "auto"."""
        value = get_attribute(find_child(self._rpr(), w("color")), "val")
        if value is None or value == "auto":
            return None
        return value

    def set_color(self, color: str) -> Run:
        """Set the text color ("RRGGBB", "#RRGGBB" or "auto")."""
        value = normalize_hex_color(color, allow_auto=True)
        rpr = get_or_create_child(self._require_node(), w("rPr"))
        set_property(rpr, w("color"), value)
        return self

    @property
    def highlight(self) -> HighlightColor:
        """Highlight color; NONE when absent."""
        value = get_attribute(find_child(self._rpr(), w("highlight")), "val")
        return HighlightColor.from_xml(value)

    def set_highlight(self, color: HighlightColor) -> Run:
        """Set the highlight; HighlightColor.NONE removes the w:highlight node."""
        rpr = get_or_create_child(self._require_node(), w("rPr"))
        if color is HighlightColor.NONE:
            remove_child(rpr, w("highlight"))
        else:
            set_property(rpr, w("highlight"), color.value)
        return self

    # ------------------------------------------------------------------
    # Character style
    # ------------------------------------------------------------------

    @property
    def style(self) -> str | None:
        """The applied character style id (w:rStyle), or None."""
        return get_attribute(find_child(self._rpr(), w("rStyle")), "val")

    def set_style(self, style_name: str, styles: StyleManager | None = None) -> Run:
        """Apply a character (or mixed) style.

        The style is validated before anything is written.

        Raises:
            NotFoundError: If the style does not exist
            IncompatibleTypeError: If it is not a character or mixed style
        """
        node = self._require_node()
        style = style_catalog(self, styles).get_style(style_name)
        if not style.style_type.applies_to_run:
            raise IncompatibleTypeError(style.style_id, style.style_type.value, "run")
        rpr = get_or_create_child(node, w("rPr"))
        set_property(rpr, w("rStyle"), style.style_id)
        return self

    def remove_style(self) -> Run:
        remove_child(self._rpr(), w("rStyle"))
        return self

    def __repr__(self) -> str:
        text_preview = self.text[:30] + "..." if len(self.text) > 30 else self.text
        return f"<Run: {text_preview!r}>"
