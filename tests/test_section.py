"""Tests for the Section page layout projection and the heading outline."""

import pytest
from lxml import etree

from python_docx_projection import (
    BatchBuilder,
    Document,
    HeaderFooterType,
    Orientation,
    PageMargins,
    PageNumberFormat,
    PageSize,
    Section,
    SectionStart,
    VerticalAlignment,
)
from python_docx_projection.constants import w
from python_docx_projection.errors import InvalidArgumentError, ResourceLimitError

LOCALIZED_STYLES = """<?xml version="1.0" encoding="UTF-8" standalone="yes"?>
<w:styles xmlns:w="http://schemas.openxmlformats.org/wordprocessingml/2006/main">
  <w:style w:type="paragraph" w:styleId="Kop1"><w:name w:val="heading 1"/></w:style>
  <w:style w:type="paragraph" w:styleId="Kop2"><w:name w:val="heading 2"/></w:style>
  <w:style w:type="paragraph" w:styleId="Citaat"><w:name w:val="Quote"/></w:style>
</w:styles>"""

STYLES_OVERRIDE = (
    '<Override PartName="/word/styles.xml" '
    'ContentType="application/vnd.openxmlformats-officedocument.wordprocessingml.styles+xml"/>'
)


def heading(text: str, style: str) -> str:
    return f'<w:p><w:pPr><w:pStyle w:val="{style}"/></w:pPr><w:r><w:t>{text}</w:t></w:r></w:p>'


def child_names(element):
    return [etree.QName(child).localname for child in element]


@pytest.fixture
def section():
    """The section of a blank in-memory document."""
    return Document.create().section


class TestPageSize:
    """Tests for page size and orientation."""

    def test_unset(self, section):
        """Test reading a section without w:pgSz."""
        assert section.page_width is None
        assert section.page_height is None
        assert section.page_size is None
        assert section.orientation is Orientation.PORTRAIT
        assert repr(section) == "<Section: unset portrait, 1 column(s)>"

    def test_standard_size(self, section):
        """Test that a standard size is written in twips."""
        section.set_page_size(PageSize.LETTER)
        pg_sz = section.element.find(w("pgSz"))
        assert (pg_sz.get(w("w")), pg_sz.get(w("h"))) == ("12240", "15840")
        assert pg_sz.get(w("orient")) is None
        assert (section.page_width, section.page_height) == (612, 792)
        assert section.page_size is PageSize.LETTER

    def test_landscape_swaps_dimensions(self, section):
        """Test that a landscape standard size is wider than tall."""
        section.set_page_size(PageSize.A4, Orientation.LANDSCAPE)
        pg_sz = section.element.find(w("pgSz"))
        assert (pg_sz.get(w("w")), pg_sz.get(w("h"))) == ("16838", "11906")
        assert pg_sz.get(w("orient")) == "landscape"
        assert section.orientation is Orientation.LANDSCAPE
        assert section.page_size is PageSize.A4

    def test_set_orientation_turns_page(self, section):
        """Test that changing orientation swaps width and height and back."""
        section.set_page_size(PageSize.LEGAL)
        section.set_orientation(Orientation.LANDSCAPE)
        assert (section.page_width, section.page_height) == (1008, 612)
        section.set_orientation(Orientation.PORTRAIT)
        assert (section.page_width, section.page_height) == (612, 1008)
        assert section.element.find(w("pgSz")).get(w("orient")) is None

    def test_set_orientation_twice_keeps_dimensions(self, section):
        """Test that re-applying the current orientation is a no-op."""
        section.set_page_size(PageSize.A5, Orientation.LANDSCAPE)
        section.set_orientation(Orientation.LANDSCAPE)
        assert section.page_width > section.page_height

    def test_orientation_without_size_starts_from_a4(self, section):
        """Test that turning an unsized page uses A4."""
        section.set_orientation(Orientation.LANDSCAPE)
        assert section.page_size is PageSize.A4
        assert section.page_width > section.page_height

    def test_custom_size(self, section):
        """Test a custom size in points; wider pages read as landscape."""
        section.set_custom_page_size(500, 300.25)
        pg_sz = section.element.find(w("pgSz"))
        assert (pg_sz.get(w("w")), pg_sz.get(w("h"))) == ("10000", "6005")
        assert section.orientation is Orientation.LANDSCAPE
        assert section.page_size is None

    @pytest.mark.parametrize(
        "width,height,error",
        [
            (0, 792, InvalidArgumentError),
            (612, -1, InvalidArgumentError),
            (2000, 792, ResourceLimitError),
        ],
    )
    def test_invalid_custom_size(self, section, width, height, error):
        """Test that bad sizes are rejected before anything is written."""
        with pytest.raises(error):
            section.set_custom_page_size(width, height)
        assert section.element.find(w("pgSz")) is None

    def test_size_matched_within_a_millimetre(self):
        """Test that sizes written by other tools still match a standard size."""
        doc = Document.create()
        sect_pr = doc.body.get_or_create_sect_pr()
        etree.SubElement(sect_pr, w("pgSz"), {w("w"): "11900", w("h"): "16840"})
        assert doc.section.page_size is PageSize.A4


class TestMargins:
    """Tests for page margins."""

    def test_unset(self, section):
        """Test that a section without w:pgMar reports no margins."""
        assert section.margins == PageMargins()

    def test_new_margins_fill_defaults(self, section):
        """Test that unspecified sides get the default margins."""
        section.set_margins(top=54, left=90.5)
        pg_mar = section.element.find(w("pgMar"))
        assert pg_mar.get(w("top")) == "1080"
        assert pg_mar.get(w("left")) == "1810"
        assert pg_mar.get(w("bottom")) == "1440"
        assert pg_mar.get(w("header")) == "720"
        assert pg_mar.get(w("gutter")) == "0"
        assert section.margins == PageMargins(
            top=54, right=72, bottom=72, left=90.5, header=36, footer=36, gutter=0
        )

    def test_update_keeps_other_sides(self, section):
        """Test that a second call changes only the given sides."""
        section.set_margins(top=36, bottom=36)
        section.set_margins(bottom=18)
        margins = section.margins
        assert (margins.top, margins.bottom) == (36, 18)

    def test_negative_margin_rejected(self, section):
        """Test that a negative margin is rejected and nothing is written."""
        with pytest.raises(InvalidArgumentError) as exc_info:
            section.set_margins(top=72, footer=-1)
        assert exc_info.value.code == "invalid_page_layout"
        assert section.element.find(w("pgMar")) is None


class TestColumns:
    """Tests for newspaper columns."""

    def test_default_single_column(self, section):
        """Test the column defaults of an unset section."""
        assert section.column_count == 1
        assert section.column_spacing is None

    def test_two_columns(self, section):
        """Test columns with the default spacing."""
        section.set_columns(2)
        cols = section.element.find(w("cols"))
        assert cols.get(w("num")) == "2"
        assert cols.get(w("space")) == "720"
        assert section.column_spacing == 36

    def test_back_to_one_column_drops_spacing(self, section):
        """Test that a single column carries no spacing."""
        section.set_columns(3, spacing=18).set_columns(1)
        assert section.column_count == 1
        assert section.element.find(w("cols")).get(w("space")) is None

    @pytest.mark.parametrize("count", [0, 11])
    def test_invalid_count(self, section, count):
        """Test the column count bounds."""
        with pytest.raises(InvalidArgumentError) as exc_info:
            section.set_columns(count)
        assert exc_info.value.code == "invalid_column_count"
        assert section.element.find(w("cols")) is None


class TestPageFlags:
    """Tests for first-page and odd/even header switches."""

    def test_different_first_page(self, section):
        """Test switching w:titlePg on and off."""
        section.set_different_first_page(True)
        section.set_different_first_page(True)
        assert len(section.element.findall(w("titlePg"))) == 1
        assert section.different_first_page
        section.set_different_first_page(False)
        assert not section.different_first_page

    def test_first_page_header_sets_flag(self):
        """Test that a FIRST header switches on the first-page flag."""
        doc = Document.create()
        doc.get_header(HeaderFooterType.FIRST)
        assert doc.section.different_first_page

    def test_different_odd_even(self):
        """Test that the odd/even switch lives in the settings part."""
        doc = Document.create()
        assert not doc.section.different_odd_even
        doc.section.set_different_odd_even(True)
        assert doc.settings.find(w("evenAndOddHeaders")) is not None
        assert doc.section.different_odd_even
        doc.section.set_different_odd_even(False)
        assert doc.settings.find(w("evenAndOddHeaders")) is None

    def test_odd_even_read_does_not_create_settings(self, simple_docx):
        """Test that reading the switch leaves a document without settings untouched."""
        doc = Document.open(simple_docx)
        assert not doc.section.different_odd_even
        assert "word/settings.xml" not in doc.part_names()

    def test_detached_odd_even(self):
        """Test that a Section without a Document cannot set the document switch."""
        section = Section(etree.Element(w("sectPr")))
        assert not section.different_odd_even
        with pytest.raises(InvalidArgumentError):
            section.set_different_odd_even(True)


class TestSectionProperties:
    """Tests for start type, page numbering and vertical alignment."""

    def test_start_type(self, section):
        """Test the section start with NEXT_PAGE as default."""
        assert section.start_type is SectionStart.NEXT_PAGE
        section.set_start_type(SectionStart.CONTINUOUS)
        assert section.start_type is SectionStart.CONTINUOUS

    def test_page_numbering(self, section):
        """Test the page number format and start."""
        assert section.page_number_format is None
        section.set_page_numbering(PageNumberFormat.LOWER_ROMAN, start=1)
        assert section.page_number_format is PageNumberFormat.LOWER_ROMAN
        assert section.page_number_start == 1
        section.set_page_numbering()
        assert section.page_number_start is None

    def test_negative_page_number_start(self, section):
        """Test that numbering cannot start below zero."""
        with pytest.raises(InvalidArgumentError):
            section.set_page_numbering(start=-1)

    def test_vertical_alignment(self, section):
        """Test centring text on the page and resetting to top."""
        section.set_vertical_alignment(VerticalAlignment.CENTER)
        assert section.vertical_alignment is VerticalAlignment.CENTER
        section.set_vertical_alignment(VerticalAlignment.TOP)
        assert section.element.find(w("vAlign")) is None

    def test_children_in_schema_order(self):
        """Test that properties land in schema order whatever order they are set in."""
        doc = Document.create()
        section = doc.section
        section.set_different_first_page(True)
        section.set_columns(2)
        section.set_margins(top=72)
        section.set_page_size(PageSize.A4)
        section.set_start_type(SectionStart.ODD_PAGE)
        doc.get_footer()
        assert child_names(section.element) == [
            "footerReference",
            "type",
            "pgSz",
            "pgMar",
            "cols",
            "titlePg",
        ]

    def test_wrong_element(self):
        """Test that Section only wraps w:sectPr."""
        with pytest.raises(InvalidArgumentError):
            Section(etree.Element(w("p")))

    def test_layout_survives_save(self, tmp_path):
        """Test that page layout is written and read back."""
        path = tmp_path / "layout.docx"
        doc = Document.create(path)
        doc.body.add_paragraph("Landscape text")
        doc.section.set_page_size(PageSize.A4, Orientation.LANDSCAPE).set_columns(2)
        doc.save()

        reopened = Document.open(path)
        assert reopened.section.orientation is Orientation.LANDSCAPE
        assert reopened.section.page_size is PageSize.A4
        assert reopened.section.column_count == 2
        assert reopened.body.element[-1].tag == w("sectPr")


class TestSectionBatch:
    """Tests for the section build operation."""

    def test_section_operation(self):
        """Test a full page layout operation."""
        doc = Document.create()
        results = BatchBuilder(doc).apply(
            [
                {
                    "type": "section",
                    "size": "letter",
                    "orientation": "landscape",
                    "margins": {"top": 36, "bottom": 36},
                    "columns": 2,
                    "start": "continuous",
                    "different_first_page": True,
                    "different_odd_even": True,
                }
            ]
        )
        assert results[0].message == "Updated page layout (landscape, 2 column(s))"
        section = doc.section
        assert section.page_size is PageSize.LETTER
        assert section.margins.top == 36
        assert section.start_type is SectionStart.CONTINUOUS
        assert section.different_first_page and section.different_odd_even

    @pytest.mark.parametrize(
        "op,code",
        [
            ({"size": "b5"}, "invalid_enum_value"),
            ({"size": "a4", "columns": 20}, "invalid_column_count"),
            ({"margins": {"inside": 10}}, "invalid_parameter"),
            ({"margins": {"top": "wide"}}, "invalid_parameter"),
            ({"orientation": "landscape", "margins": {"left": -5}}, "invalid_page_layout"),
        ],
    )
    def test_invalid_section_changes_nothing(self, op, code):
        """Test that a rejected layout leaves the document without a w:sectPr."""
        doc = Document.create()
        results = BatchBuilder(doc).apply([{"type": "section", **op}])
        assert results[0].code == code
        assert doc.body.element.find(w("sectPr")) is None


class TestOutline:
    """Tests for the heading outline."""

    def test_headings_by_style_id(self, make_docx):
        """Test that HeadingN styles give the level and body text is skipped."""
        path = make_docx(
            heading("Introduction", "Heading1")
            + "<w:p><w:r><w:t>Body</w:t></w:r></w:p>"
            + heading("Scope", "Heading2")
        )
        entries = Document.open(path).outline()
        assert [(e.level, e.text) for e in entries] == [(1, "Introduction"), (2, "Scope")]
        assert entries[1].paragraph.style == "Heading2"

    def test_outline_level(self, make_docx):
        """Test that w:outlineLvl wins over the style and level 9 is body text."""
        path = make_docx(
            '<w:p><w:pPr><w:pStyle w:val="Heading1"/><w:outlineLvl w:val="2"/></w:pPr>'
            "<w:r><w:t>Deep</w:t></w:r></w:p>"
            '<w:p><w:pPr><w:outlineLvl w:val="9"/></w:pPr><w:r><w:t>Plain</w:t></w:r></w:p>'
        )
        assert [(e.level, e.text) for e in Document.open(path).outline()] == [(3, "Deep")]

    def test_localized_style_names(self, make_docx):
        """Test that styles named "heading N" count whatever their id."""
        path = make_docx(
            heading("Inleiding", "Kop1") + heading("Citaat", "Citaat") + heading("Doel", "Kop2"),
            parts={"word/styles.xml": LOCALIZED_STYLES},
            overrides=STYLES_OVERRIDE,
        )
        entries = Document.open(path).outline()
        assert [(e.level, e.text) for e in entries] == [(1, "Inleiding"), (2, "Doel")]

    def test_built_document(self):
        """Test the outline of a document built through the API."""
        doc = Document.create()
        doc.body.add_paragraph("Report").set_style("Heading1")
        doc.body.add_paragraph("text")
        assert [(e.level, e.text) for e in doc.outline()] == [(1, "Report")]

    def test_no_headings(self, simple_docx):
        """Test a document without headings."""
        assert Document.open(simple_docx).outline() == []
