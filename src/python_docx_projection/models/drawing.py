"""
Drawing projections: inline pictures and text boxes.

Both live inside a ``w:r/w:drawing`` in the paragraph they were added to.
The builders here only produce detached XML; MediaManager allocates ids,
registers parts and appends the run.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from lxml import etree

from ..constants import (
    A_NAMESPACE,
    NSMAP_DRAWING,
    OFFICE_RELATIONSHIPS_NAMESPACE,
    PIC_NAMESPACE,
    WP_NAMESPACE,
    WPS_NAMESPACE,
    a,
    pic,
    r,
    w,
    wp,
    wps,
)
from ..errors import InvalidArgumentError, XmlManipulationError
from ..units import emu_to_pixels, pixels_to_emu
from .blocks import BlockContainer
from .formatting import BorderStyle, FormattingFlag, RelativeFrom
from .paragraph import Paragraph
from .run import Run

if TYPE_CHECKING:
    from ..document import Document

TEXT_BOX_NSMAP = {
    "wp": WP_NAMESPACE,
    "a": A_NAMESPACE,
    "wps": WPS_NAMESPACE,
    "r": OFFICE_RELATIONSHIPS_NAMESPACE,
}

# Insets of a text box body, in EMUs (0.1" left/right, 0.05" top/bottom)
TEXT_BOX_INSETS = {"lIns": "91440", "tIns": "45720", "rIns": "91440", "bIns": "45720"}

_DIST_ATTRS = {"distT": "0", "distB": "0", "distL": "0", "distR": "0"}

# Line attributes per border style: (preset dash, compound type, width in EMUs)
_LINE_STYLES = {
    BorderStyle.SINGLE: (None, None, "9525"),
    BorderStyle.DOUBLE: (None, "dbl", "19050"),
    BorderStyle.DASHED: ("dash", None, "9525"),
    BorderStyle.DOTTED: ("sysDot", None, "9525"),
    BorderStyle.THICK: (None, None, "38100"),
}


def _add_extents(parent: etree._Element, width_emu: int, height_emu: int) -> None:
    etree.SubElement(parent, wp("extent"), attrib={"cx": str(width_emu), "cy": str(height_emu)})
    etree.SubElement(
        parent, wp("effectExtent"), attrib={"l": "0", "t": "0", "r": "0", "b": "0"}
    )


def _add_xfrm(sp_pr: etree._Element, width_emu: int, height_emu: int) -> None:
    xfrm = etree.SubElement(sp_pr, a("xfrm"))
    etree.SubElement(xfrm, a("off"), attrib={"x": "0", "y": "0"})
    etree.SubElement(xfrm, a("ext"), attrib={"cx": str(width_emu), "cy": str(height_emu)})
    prst_geom = etree.SubElement(sp_pr, a("prstGeom"), attrib={"prst": "rect"})
    etree.SubElement(prst_geom, a("avLst"))


def build_inline_picture(
    rel_id: str, drawing_id: int, width_emu: int, height_emu: int, name: str | None = None
) -> etree._Element:
    """Create a ``w:drawing`` holding an inline picture that embeds ``rel_id``."""
    name = name or f"Picture {drawing_id}"

    drawing = etree.Element(w("drawing"))
    inline = etree.SubElement(drawing, wp("inline"), nsmap=NSMAP_DRAWING, attrib=_DIST_ATTRS)
    _add_extents(inline, width_emu, height_emu)
    etree.SubElement(inline, wp("docPr"), attrib={"id": str(drawing_id), "name": name})

    frame_pr = etree.SubElement(inline, wp("cNvGraphicFramePr"))
    etree.SubElement(frame_pr, a("graphicFrameLocks"), attrib={"noChangeAspect": "1"})

    graphic = etree.SubElement(inline, a("graphic"))
    graphic_data = etree.SubElement(graphic, a("graphicData"), attrib={"uri": PIC_NAMESPACE})
    pic_elem = etree.SubElement(graphic_data, pic("pic"))

    nv_pic_pr = etree.SubElement(pic_elem, pic("nvPicPr"))
    etree.SubElement(nv_pic_pr, pic("cNvPr"), attrib={"id": str(drawing_id), "name": name})
    cnv_pic_pr = etree.SubElement(nv_pic_pr, pic("cNvPicPr"))
    etree.SubElement(cnv_pic_pr, a("picLocks"), attrib={"noChangeAspect": "1"})

    blip_fill = etree.SubElement(pic_elem, pic("blipFill"))
    etree.SubElement(blip_fill, a("blip"), attrib={r("embed"): rel_id})
    stretch = etree.SubElement(blip_fill, a("stretch"))
    etree.SubElement(stretch, a("fillRect"))

    sp_pr = etree.SubElement(pic_elem, pic("spPr"))
    _add_xfrm(sp_pr, width_emu, height_emu)
    return drawing


def build_text_box(
    drawing_id: int, shape_id: int, width_emu: int, height_emu: int
) -> etree._Element:
    """Create a ``w:drawing`` holding an inline wps text box with one empty paragraph.

    ``drawing_id`` goes on wp:docPr and ``shape_id`` on the shape's wps:cNvPr.
    """
    name = f"Text Box {drawing_id}"

    drawing = etree.Element(w("drawing"))
    inline = etree.SubElement(drawing, wp("inline"), nsmap=TEXT_BOX_NSMAP, attrib=_DIST_ATTRS)
    _add_extents(inline, width_emu, height_emu)
    etree.SubElement(inline, wp("docPr"), attrib={"id": str(drawing_id), "name": name})
    etree.SubElement(inline, wp("cNvGraphicFramePr"))

    graphic = etree.SubElement(inline, a("graphic"))
    graphic_data = etree.SubElement(graphic, a("graphicData"), attrib={"uri": WPS_NAMESPACE})
    wsp = etree.SubElement(graphic_data, wps("wsp"))
    etree.SubElement(wsp, wps("cNvPr"), attrib={"id": str(shape_id), "name": name})
    etree.SubElement(wsp, wps("cNvSpPr"), attrib={"txBox": "1"})

    sp_pr = etree.SubElement(wsp, wps("spPr"))
    _add_xfrm(sp_pr, width_emu, height_emu)
    etree.SubElement(sp_pr, a("noFill"))
    ln = etree.SubElement(sp_pr, a("ln"))
    solid = etree.SubElement(ln, a("solidFill"))
    etree.SubElement(solid, a("srgbClr"), attrib={"val": "000000"})

    txbx = etree.SubElement(wsp, wps("txbx"))
    content = etree.SubElement(txbx, w("txbxContent"))
    etree.SubElement(content, w("p"))
    etree.SubElement(wsp, wps("bodyPr"), attrib={"wrap": "square", **TEXT_BOX_INSETS})
    return drawing


class DrawingBase:
    """Shared view over a run holding one ``w:drawing``."""

    def __init__(self, run_node: etree._Element, document: Document | None = None) -> None:
        drawing = run_node.find(w("drawing"))
        if drawing is None or not len(drawing):
            raise XmlManipulationError(
                "Run does not contain a drawing", code="missing_drawing"
            )
        self._run = run_node
        self._drawing = drawing
        self._document = document

    @property
    def run(self) -> Run:
        """The w:r projection that carries the drawing."""
        return Run(self._run.getparent(), self._run, self._document)

    @property
    def element(self) -> etree._Element:
        """The w:drawing element."""
        return self._drawing

    def _root(self) -> etree._Element:
        """The wp:inline or wp:anchor child of the drawing."""
        return self._drawing[0]

    @property
    def is_inline(self) -> bool:
        return self._root().tag == wp("inline")

    @property
    def drawing_id(self) -> int:
        """The wp:docPr id."""
        return int(self._root().find(wp("docPr")).get("id"))

    @property
    def name(self) -> str:
        return self._root().find(wp("docPr")).get("name", "")

    @property
    def width_emu(self) -> int:
        return int(self._root().find(wp("extent")).get("cx"))

    @property
    def height_emu(self) -> int:
        return int(self._root().find(wp("extent")).get("cy"))

    @property
    def width_px(self) -> int:
        return emu_to_pixels(self.width_emu)

    @property
    def height_px(self) -> int:
        return emu_to_pixels(self.height_emu)


class Image(DrawingBase):
    """An inline picture.

    Example:
        >>> image = paragraph.add_image("chart.png", max_width_px=100)
        >>> image.width_px, image.height_px
        (100, 50)
    """

    @property
    def rel_id(self) -> str:
        """The relationship id of the embedded image part."""
        blip = self._drawing.find(f".//{a('blip')}")
        return blip.get(r("embed")) if blip is not None else ""

    def __repr__(self) -> str:
        return f"<Image {self.rel_id}: {self.width_px}x{self.height_px}px>"


class TextBox(DrawingBase, BlockContainer):
    """A wps text box whose ``w:txbxContent`` holds paragraphs.

    A new text box carries one empty placeholder paragraph; the first
    ``add_paragraph`` call replaces it.

    Example:
        >>> box = paragraph.add_text_box(200, 80)
        >>> box.add_paragraph("Note")
        >>> box.set_border(BorderStyle.NONE).set_position(96, 48, RelativeFrom.MARGIN)
    """

    def __init__(
        self, run_node: etree._Element, document: Document | None = None, fresh: bool = False
    ) -> None:
        super().__init__(run_node, document)
        self._fresh = fresh

    def _block_node(self) -> etree._Element:
        content = self._drawing.find(f".//{w('txbxContent')}")
        if content is None:
            raise XmlManipulationError(
                "Text box has no w:txbxContent", code="missing_text_box_content"
            )
        return content

    def _shape_properties(self) -> etree._Element:
        sp_pr = self._drawing.find(f".//{wps('spPr')}")
        if sp_pr is None:
            raise XmlManipulationError("Text box has no wps:spPr", code="missing_shape_properties")
        return sp_pr

    def add_paragraph(
        self, text: str = "", flags: FormattingFlag = FormattingFlag.NONE
    ) -> Paragraph:
        """Append a paragraph to the text box, replacing the initial placeholder."""
        if self._fresh:
            content = self._block_node()
            paragraphs = content.findall(w("p"))
            if len(paragraphs) == 1 and not len(paragraphs[0]):
                content.remove(paragraphs[0])
            self._fresh = False
        return super().add_paragraph(text, flags)

    @property
    def text(self) -> str:
        return "\n".join(p.text for p in self.paragraphs())

    # ------------------------------------------------------------------
    # Border
    # ------------------------------------------------------------------

    @property
    def border(self) -> BorderStyle:
        ln = self._shape_properties().find(a("ln"))
        if ln is None or ln.find(a("noFill")) is not None:
            return BorderStyle.NONE
        dash = ln.find(a("prstDash"))
        if dash is not None:
            return BorderStyle.DOTTED if dash.get("val") == "sysDot" else BorderStyle.DASHED
        if ln.get("cmpd") == "dbl":
            return BorderStyle.DOUBLE
        if ln.get("w") == _LINE_STYLES[BorderStyle.THICK][2]:
            return BorderStyle.THICK
        return BorderStyle.SINGLE

    def set_border(self, style: BorderStyle) -> TextBox:
        """Draw the box outline in black with ``style``; NONE hides it."""
        sp_pr = self._shape_properties()
        ln = sp_pr.find(a("ln"))
        if ln is None:
            ln = etree.SubElement(sp_pr, a("ln"))
        for child in list(ln):
            ln.remove(child)
        for attr in ("w", "cmpd"):
            ln.attrib.pop(attr, None)

        if style is BorderStyle.NONE:
            etree.SubElement(ln, a("noFill"))
            return self

        dash, compound, width = _LINE_STYLES[style]
        ln.set("w", width)
        if compound:
            ln.set("cmpd", compound)
        solid = etree.SubElement(ln, a("solidFill"))
        etree.SubElement(solid, a("srgbClr"), attrib={"val": "000000"})
        if dash:
            etree.SubElement(ln, a("prstDash"), attrib={"val": dash})
        return self

    # ------------------------------------------------------------------
    # Position
    # ------------------------------------------------------------------

    @property
    def position(self) -> tuple[int, int, RelativeFrom] | None:
        """(x_px, y_px, frame) of an anchored box, None while inline."""
        root = self._root()
        if root.tag != wp("anchor"):
            return None
        pos_h = root.find(wp("positionH"))
        pos_v = root.find(wp("positionV"))
        x_emu = int(pos_h.findtext(wp("posOffset"), "0"))
        y_emu = int(pos_v.findtext(wp("posOffset"), "0"))
        return emu_to_pixels(x_emu), emu_to_pixels(y_emu), RelativeFrom(pos_h.get("relativeFrom"))

    def set_position(
        self, x_px: int, y_px: int, relative_to: RelativeFrom = RelativeFrom.PAGE
    ) -> TextBox:
        """Float the box at an absolute offset from the page or margin.

        The first call turns the wp:inline into a wp:anchor with no text
        wrapping; later calls only move it.
        """
        if x_px < 0 or y_px < 0:
            raise InvalidArgumentError(
                "Position offsets must not be negative",
                code="negative_position",
                context={"x_px": x_px, "y_px": y_px},
            )
        root = self._root()
        if root.tag == wp("inline"):
            root = self._convert_to_anchor(root)

        for tag, offset in (("positionH", x_px), ("positionV", y_px)):
            node = root.find(wp(tag))
            node.set("relativeFrom", relative_to.value)
            node.find(wp("posOffset")).text = str(pixels_to_emu(offset))
        return self

    def _convert_to_anchor(self, inline: etree._Element) -> etree._Element:
        anchor = etree.Element(
            wp("anchor"),
            nsmap={"wp": WP_NAMESPACE},
            attrib={
                **_DIST_ATTRS,
                "simplePos": "0",
                "relativeHeight": "0",
                "behindDoc": "0",
                "locked": "0",
                "layoutInCell": "1",
                "allowOverlap": "1",
            },
        )
        etree.SubElement(anchor, wp("simplePos"), attrib={"x": "0", "y": "0"})
        for tag in ("positionH", "positionV"):
            node = etree.SubElement(anchor, wp(tag), attrib={"relativeFrom": "page"})
            etree.SubElement(node, wp("posOffset")).text = "0"

        anchor.append(inline.find(wp("extent")))
        anchor.append(inline.find(wp("effectExtent")))
        etree.SubElement(anchor, wp("wrapNone"))
        for tag in (wp("docPr"), wp("cNvGraphicFramePr"), a("graphic")):
            node = inline.find(tag)
            if node is not None:
                anchor.append(node)

        inline.addprevious(anchor)
        self._drawing.remove(inline)
        return anchor

    def __repr__(self) -> str:
        preview = self.text[:30].replace("\n", " ")
        return f"<TextBox {self.width_px}x{self.height_px}px: {preview!r}>"
