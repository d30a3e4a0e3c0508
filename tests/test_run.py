"""Tests for the Run projection."""

import pytest
from lxml import etree

from python_docx_projection import Document, FormattingFlag, HighlightColor
from python_docx_projection.constants import w
from python_docx_projection.errors import (
    IncompatibleTypeError,
    InvalidArgumentError,
    NotFoundError,
)
from python_docx_projection.models.run import Run, build_run


def new_run(text: str = "Hello", flags: FormattingFlag = FormattingFlag.NONE) -> Run:
    """A run inside a detached paragraph."""
    p = etree.Element(w("p"))
    node = build_run(text, flags)
    p.append(node)
    return Run(p, node)


class TestBuildRun:
    """Tests for building runs from flags."""

    def test_bold_has_no_val(self):
        """Test that BOLD is written as a bare w:b."""
        node = build_run("x", FormattingFlag.BOLD)
        bold = node.find(f"{w('rPr')}/{w('b')}")
        assert bold is not None
        assert bold.get(w("val")) is None

    def test_no_flags_no_rpr(self):
        """Test that a plain run carries no w:rPr."""
        assert build_run("x").find(w("rPr")) is None

    def test_combined_flags(self):
        """Test that every requested toggle is present."""
        flags = FormattingFlag.BOLD | FormattingFlag.ITALIC | FormattingFlag.UNDERLINE
        assert new_run("x", flags).formatting == flags

    def test_superscript_wins_over_subscript(self):
        """Test that only one vertical alignment is written."""
        run = new_run("x", FormattingFlag.SUPERSCRIPT | FormattingFlag.SUBSCRIPT)
        assert run.is_superscript
        assert not run.is_subscript


class TestRunText:
    """Tests for run text."""

    def test_text(self):
        """Test reading the run text."""
        assert new_run("Hello").text == "Hello"

    def test_set_text_collapses_texts(self):
        """Test that set_text leaves a single w:t."""
        run = new_run("a")
        etree.SubElement(run.current_node, w("t")).text = "b"
        assert run.text == "ab"
        run.set_text("  spaced")
        assert run.text == "  spaced"
        assert len(run.current_node.findall(w("t"))) == 1

    def test_empty_projection(self):
        """Test that an empty projection reads defaults and refuses writes."""
        run = Run()
        assert run.text == ""
        assert not run.is_bold
        assert run.font_size is None
        with pytest.raises(InvalidArgumentError):
            run.set_bold()


class TestRunFormatting:
    """Tests for run formatting setters."""

    def test_toggle_bold(self):
        """Test switching bold on and off."""
        run = new_run()
        run.set_bold()
        assert run.is_bold
        run.set_bold(False)
        assert not run.is_bold

    def test_false_values_read_as_off(self):
        """Test that w:val="false" and "0" switch a toggle off."""
        run = new_run()
        rpr = etree.Element(w("rPr"))
        run.current_node.insert(0, rpr)
        etree.SubElement(rpr, w("b")).set(w("val"), "0")
        etree.SubElement(rpr, w("i")).set(w("val"), "false")
        assert not run.is_bold
        assert not run.is_italic

    def test_setter_is_idempotent(self):
        """Test that setting twice does not duplicate property nodes."""
        run = new_run()
        run.set_italic().set_italic()
        assert len(run.current_node.find(w("rPr")).findall(w("i"))) == 1

    def test_underline_none_reads_off(self):
        """Test that w:u with val none is not underlined."""
        run = new_run()
        run.set_underline()
        assert run.is_underline
        run.current_node.find(f"{w('rPr')}/{w('u')}").set(w("val"), "none")
        assert not run.is_underline

    def test_set_formatting_replaces_all(self):
        """Test that set_formatting switches unmentioned toggles off."""
        run = new_run("x", FormattingFlag.BOLD | FormattingFlag.SUBSCRIPT)
        run.set_formatting(FormattingFlag.ITALIC | FormattingFlag.STRIKETHROUGH)
        assert run.formatting == FormattingFlag.ITALIC | FormattingFlag.STRIKETHROUGH

    def test_font(self):
        """Test that a font fills every script slot."""
        run = new_run().set_font("Arial")
        fonts = run.current_node.find(f"{w('rPr')}/{w('rFonts')}")
        for slot in ("ascii", "hAnsi", "eastAsia", "cs"):
            assert fonts.get(w(slot)) == "Arial"
        assert run.font == "Arial"

    def test_empty_font(self):
        """Test that an empty font name is rejected."""
        with pytest.raises(InvalidArgumentError):
            new_run().set_font("")

    def test_font_size(self):
        """Test that sizes are stored as half-points in sz and szCs."""
        run = new_run().set_font_size(10.5)
        rpr = run.current_node.find(w("rPr"))
        assert rpr.find(w("sz")).get(w("val")) == "21"
        assert rpr.find(w("szCs")).get(w("val")) == "21"
        assert run.font_size == 10.5

    def test_quarter_point_font_size_rounds_up(self):
        """Test that a quarter-point size rounds up to the next half-point."""
        run = new_run().set_font_size(10.25)
        assert run.current_node.find(f"{w('rPr')}/{w('sz')}").get(w("val")) == "21"
        assert run.font_size == 10.5

    def test_invalid_font_size(self):
        """Test that a non-positive size is rejected."""
        with pytest.raises(InvalidArgumentError):
            new_run().set_font_size(0)

    def test_color(self):
        """Test explicit and automatic colors."""
        run = new_run().set_color("#ff0000")
        assert run.color == "FF0000"
        run.set_color("auto")
        assert run.color is None

    def test_invalid_color(self):
        """Test that malformed colors are rejected before writing."""
        run = new_run()
        with pytest.raises(InvalidArgumentError):
            run.set_color("red")
        assert run.current_node.find(w("rPr")) is None

    def test_highlight(self):
        """Test setting and clearing a highlight."""
        run = new_run().set_highlight(HighlightColor.YELLOW)
        assert run.highlight is HighlightColor.YELLOW
        run.set_highlight(HighlightColor.NONE)
        assert run.highlight is HighlightColor.NONE
        assert run.current_node.find(f"{w('rPr')}/{w('highlight')}") is None


class TestRunStyle:
    """Tests for character styles on runs."""

    def test_apply_character_style(self):
        """Test applying a character style from the document catalog."""
        doc = Document.create()
        run = doc.body.add_paragraph().add_run("link")
        run.set_style("Hyperlink")
        assert run.style == "Hyperlink"
        run.remove_style()
        assert run.style is None

    def test_mixed_style_applies(self):
        """Test that a linked paragraph/character style applies to runs."""
        doc = Document.create()
        run = doc.body.add_paragraph().add_run("title")
        run.set_style("Title")
        assert run.style == "Title"

    def test_style_stays_first_in_properties(self):
        """Test that formatting set after a style keeps w:rStyle first."""
        doc = Document.create()
        run = doc.body.add_paragraph().add_run("link")
        run.set_style("Hyperlink")
        run.set_bold(True)
        run.set_font_size(12)
        rpr = run.current_node.find(w("rPr"))
        assert rpr[0].tag == w("rStyle")
        assert rpr.find(w("b")) is not None

    def test_paragraph_style_rejected(self):
        """Test that a paragraph-only style is refused and nothing is written."""
        doc = Document.create()
        run = doc.body.add_paragraph().add_run("x")
        with pytest.raises(IncompatibleTypeError) as exc_info:
            run.set_style("Heading1")
        assert exc_info.value.target == "run"
        assert run.current_node.find(w("rPr")) is None

    def test_unknown_style(self):
        """Test that an unknown style raises NotFoundError."""
        doc = Document.create()
        run = doc.body.add_paragraph().add_run("x")
        with pytest.raises(NotFoundError):
            run.set_style("NoSuchStyle")

    def test_detached_run_needs_catalog(self):
        """Test that a run outside a Document needs an explicit catalog."""
        with pytest.raises(InvalidArgumentError):
            new_run().set_style("Hyperlink")
