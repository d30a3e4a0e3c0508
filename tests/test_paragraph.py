"""Tests for the Paragraph projection."""

import pytest

from python_docx_projection import Alignment, Document, FormattingFlag, ListType
from python_docx_projection.constants import w
from python_docx_projection.errors import IncompatibleTypeError, InvalidArgumentError


def new_paragraph(text: str = "Body text"):
    """A paragraph in a blank in-memory document."""
    return Document.create().body.add_paragraph(text)


class TestParagraphContent:
    """Tests for paragraph runs and text."""

    def test_add_run(self):
        """Test that runs are appended in order."""
        para = new_paragraph("Hello")
        para.add_run(" world", FormattingFlag.BOLD)
        assert para.text == "Hello world"
        runs = list(para.runs())
        assert [r.text for r in runs] == ["Hello", " world"]
        assert runs[1].is_bold

    def test_empty_text_adds_no_run(self):
        """Test that a paragraph added without text or flags has no runs."""
        para = Document.create().body.add_paragraph()
        assert len(para.runs()) == 0
        assert para.text == ""

    def test_set_text_keeps_properties(self):
        """Test that set_text replaces runs but keeps w:pPr."""
        para = new_paragraph("old").set_alignment(Alignment.CENTER)
        para.add_run(" more")
        para.set_text("new", FormattingFlag.ITALIC)
        assert para.text == "new"
        assert para.alignment is Alignment.CENTER
        assert len(para.runs()) == 1
        assert para.runs().first().is_italic

    def test_insert_paragraph_after(self):
        """Test inserting a sibling directly after a paragraph."""
        body = Document.create().body
        first = body.add_paragraph("one")
        body.add_paragraph("three")
        first.insert_paragraph_after("two")
        assert [p.text for p in body.paragraphs()] == ["one", "two", "three"]

    def test_text_includes_hyperlinks(self):
        """Test that hyperlink runs count toward paragraph text."""
        para = new_paragraph("See ")
        para.add_hyperlink("https://example.com", "example")
        assert para.text == "See example"
        assert len(para.runs()) == 1

    def test_repr(self):
        """Test the repr shows style and text."""
        para = new_paragraph("Intro").set_style("Heading1")
        assert repr(para) == "<Paragraph style=Heading1: 'Intro'>"


class TestParagraphFormatting:
    """Tests for alignment, spacing and indentation."""

    def test_alignment_default(self):
        """Test that an unset alignment reads as LEFT."""
        assert new_paragraph().alignment is Alignment.LEFT

    def test_alignment_round_trip(self):
        """Test setting each alignment."""
        para = new_paragraph()
        for alignment in Alignment:
            para.set_alignment(alignment)
            assert para.alignment is alignment
        assert len(para.current_node.find(w("pPr")).findall(w("jc"))) == 1

    def test_spacing(self):
        """Test that spacing is stored in twips."""
        para = new_paragraph().set_spacing(before=6, after=12)
        spacing = para.current_node.find(f"{w('pPr')}/{w('spacing')}")
        assert spacing.get(w("before")) == "120"
        assert spacing.get(w("after")) == "240"
        assert para.spacing_before == 6
        assert para.spacing_after == 12

    def test_spacing_partial_update(self):
        """Test that None leaves the other value untouched."""
        para = new_paragraph().set_spacing(before=6, after=12)
        para.set_spacing(after=3)
        assert para.spacing_before == 6
        assert para.spacing_after == 3

    def test_negative_spacing(self):
        """Test that negative spacing is rejected."""
        with pytest.raises(InvalidArgumentError):
            new_paragraph().set_spacing(before=-1)

    def test_line_spacing(self):
        """Test proportional line spacing."""
        para = new_paragraph()
        assert para.line_spacing == 1.0
        para.set_line_spacing(1.5)
        spacing = para.current_node.find(f"{w('pPr')}/{w('spacing')}")
        assert spacing.get(w("line")) == "360"
        assert spacing.get(w("lineRule")) == "auto"
        assert para.line_spacing == 1.5

    def test_line_spacing_must_be_positive(self):
        """Test that zero line spacing is rejected."""
        with pytest.raises(InvalidArgumentError):
            new_paragraph().set_line_spacing(0)

    def test_indentation(self):
        """Test left and right indentation."""
        para = new_paragraph().set_indentation(left=36, right=18)
        assert para.left_indent == 36
        assert para.right_indent == 18

    def test_first_line_and_hanging_exclusive(self):
        """Test that first-line and hanging indents replace each other."""
        para = new_paragraph()
        ind_path = f"{w('pPr')}/{w('ind')}"

        para.set_first_line_indent(18)
        ind = para.current_node.find(ind_path)
        assert ind.get(w("firstLine")) == "360"
        assert ind.get(w("hanging")) is None
        assert para.first_line_indent == 18

        para.set_first_line_indent(-9)
        assert ind.get(w("hanging")) == "180"
        assert ind.get(w("firstLine")) is None
        assert para.first_line_indent == -9

        para.set_first_line_indent(0)
        assert ind.get(w("hanging")) is None
        assert ind.get(w("firstLine")) is None
        assert para.first_line_indent == 0


class TestParagraphLists:
    """Tests for list membership."""

    def test_bullet_list(self):
        """Test that a bullet item references numId 1 at the requested level."""
        para = new_paragraph().set_list_style(ListType.BULLET, level=2)
        num_pr = para.current_node.find(f"{w('pPr')}/{w('numPr')}")
        assert [child.tag for child in num_pr] == [w("ilvl"), w("numId")]
        assert para.list_id == 1
        assert para.list_level == 2
        assert para.list_type is ListType.BULLET

    def test_numbered_list(self):
        """Test that a numbered item resolves to NUMBER through numbering.xml."""
        para = new_paragraph().set_list_style(ListType.NUMBER)
        assert para.list_id == 2
        assert para.list_type is ListType.NUMBER

    def test_remove_list(self):
        """Test that NONE removes list membership."""
        para = new_paragraph().set_list_style(ListType.BULLET)
        para.set_list_style(ListType.NONE)
        assert para.list_type is ListType.NONE
        assert para.list_level is None

    @pytest.mark.parametrize("level", [-1, 9])
    def test_level_out_of_range(self, level):
        """Test that levels outside 0-8 are rejected."""
        with pytest.raises(InvalidArgumentError):
            new_paragraph().set_list_style(ListType.BULLET, level)

    def test_list_adds_numbering_part(self, simple_docx):
        """Test that a document without numbering.xml gains one."""
        doc = Document.open(simple_docx)
        assert not doc.numbering.exists
        doc.body.paragraphs().first().set_list_style(ListType.NUMBER)
        assert doc.numbering.exists
        assert doc.package.has_entry("word/numbering.xml")
        assert doc.content_types.has_override("/word/numbering.xml")
        assert doc.numbering.format_for(2, 0) == "decimal"


class TestParagraphStyle:
    """Tests for paragraph styles."""

    def test_set_style_by_name(self):
        """Test that a style can be applied by display name."""
        para = new_paragraph().set_style("heading 1")
        assert para.style == "Heading1"

    def test_mixed_style(self):
        """Test that a linked style applies to paragraphs."""
        assert new_paragraph().set_style("Title").style == "Title"

    def test_character_style_rejected(self):
        """Test that a character style cannot be applied to a paragraph."""
        para = new_paragraph()
        with pytest.raises(IncompatibleTypeError) as exc_info:
            para.set_style("Hyperlink")
        assert exc_info.value.code == "style_type_mismatch"
        assert para.style is None

    def test_table_style_rejected(self):
        """Test that a table style cannot be applied to a paragraph."""
        with pytest.raises(IncompatibleTypeError):
            new_paragraph().set_style("TableGrid")

    def test_remove_style(self):
        """Test removing the paragraph style."""
        para = new_paragraph().set_style("ListParagraph")
        para.remove_style()
        assert para.style is None

    def test_outline_level(self):
        """Test setting, reading and removing an explicit outline level."""
        para = new_paragraph()
        assert para.outline_level is None
        para.set_outline_level(0)
        assert para.outline_level == 0
        para.set_outline_level(None)
        assert para.current_node.find(f"{w('pPr')}/{w('outlineLvl')}") is None

    @pytest.mark.parametrize("level", [-1, 9])
    def test_invalid_outline_level(self, level):
        """Test the outline level bounds."""
        with pytest.raises(InvalidArgumentError) as exc_info:
            new_paragraph().set_outline_level(level)
        assert exc_info.value.code == "invalid_level"
