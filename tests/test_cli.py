"""Tests for the command-line interface."""

import json

from typer.testing import CliRunner

from python_docx_projection import Document, HeaderFooterType, Orientation, PageSize
from python_docx_projection.cli import app

runner = CliRunner()


class TestCLIVersion:
    """Tests for version option."""

    def test_version_flag(self):
        """Test --version shows version."""
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert "docx-projection version 0.1.0" in result.stdout

    def test_version_short_flag(self):
        """Test -v shows version."""
        result = runner.invoke(app, ["-v"])
        assert result.exit_code == 0
        assert "0.1.0" in result.stdout

    def test_help(self):
        """Test that --help lists the commands."""
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        for command in ("info", "create", "add-paragraph", "add-image", "build", "page-setup"):
            assert command in result.stdout


class TestCLICreate:
    """Tests for the create command."""

    def test_create(self, tmp_path):
        """Test creating a blank document."""
        path = tmp_path / "new.docx"
        result = runner.invoke(app, ["create", str(path)])
        assert result.exit_code == 0
        assert f"Created {path}" in result.stdout
        assert Document.open(path).get_text() == ""

    def test_create_with_text(self, tmp_path, entry_text):
        """Test creating a document with a first paragraph and an author."""
        path = tmp_path / "new.docx"
        result = runner.invoke(app, ["create", str(path), "--text", "Hello", "--author", "Grace"])
        assert result.exit_code == 0
        assert Document.open(path).get_text() == "Hello"
        assert "Grace" in entry_text(path, "docProps/core.xml")


class TestCLIInfo:
    """Tests for the info command."""

    def test_info(self, simple_docx):
        """Test the document summary."""
        result = runner.invoke(app, ["info", str(simple_docx)])
        assert result.exit_code == 0
        assert "Paragraphs: 2" in result.stdout
        assert "Tables: 0" in result.stdout

    def test_info_missing_file(self, tmp_path):
        """Test that a missing file exits with an error."""
        result = runner.invoke(app, ["info", str(tmp_path / "missing.docx")])
        assert result.exit_code == 1
        assert "Error:" in result.output


class TestCLIAdd:
    """Tests for the add-* commands."""

    def test_add_paragraph(self, simple_docx, tmp_path):
        """Test appending a formatted paragraph to a new output file."""
        output = tmp_path / "out.docx"
        result = runner.invoke(
            app,
            [
                "add-paragraph",
                str(simple_docx),
                "--text",
                "Closing remarks",
                "--bold",
                "--align",
                "center",
                "-o",
                str(output),
            ],
        )
        assert result.exit_code == 0
        assert f"Added paragraph and saved to {output}" in result.stdout

        para = Document.open(output).body.paragraphs()[-1]
        assert para.text == "Closing remarks"
        assert para.runs().first().is_bold
        assert para.alignment.value == "center"

    def test_add_paragraph_unknown_style(self, simple_docx):
        """Test that an unknown style is reported and nothing is saved."""
        before = simple_docx.read_bytes()
        result = runner.invoke(
            app, ["add-paragraph", str(simple_docx), "--text", "x", "--style", "Nope"]
        )
        assert result.exit_code == 1
        assert "Error:" in result.output
        assert simple_docx.read_bytes() == before

    def test_add_image(self, simple_docx, wide_png):
        """Test adding an image in place."""
        result = runner.invoke(
            app, ["add-image", str(simple_docx), str(wide_png), "--max-width", "100"]
        )
        assert result.exit_code == 0
        assert "Added wide.png (100x50px)" in result.stdout
        assert len(Document.open(simple_docx).media.images()) == 1

    def test_add_image_missing(self, simple_docx, tmp_path):
        """Test that a missing image exits with an error."""
        result = runner.invoke(app, ["add-image", str(simple_docx), str(tmp_path / "no.png")])
        assert result.exit_code == 1
        assert "Image file not found" in result.output

    def test_add_header(self, simple_docx):
        """Test adding a first-page header."""
        result = runner.invoke(
            app, ["add-header", str(simple_docx), "--text", "Cover", "--type", "first"]
        )
        assert result.exit_code == 0
        assert "Added first header" in result.stdout
        assert Document.open(simple_docx).get_header(HeaderFooterType.FIRST).text == "Cover"

    def test_add_footer(self, simple_docx):
        """Test adding a default footer."""
        result = runner.invoke(app, ["add-footer", str(simple_docx), "--text", "Page"])
        assert result.exit_code == 0
        assert Document.open(simple_docx).get_footer().text == "Page"


class TestCLILayout:
    """Tests for the page-setup and outline commands."""

    def test_page_setup(self, simple_docx):
        """Test changing paper size, orientation, margins and columns."""
        result = runner.invoke(
            app,
            [
                "page-setup",
                str(simple_docx),
                "--size",
                "a4",
                "--orientation",
                "landscape",
                "--margin",
                "54",
                "--columns",
                "2",
            ],
        )
        assert result.exit_code == 0
        section = Document.open(simple_docx).section
        assert section.page_size is PageSize.A4
        assert section.orientation is Orientation.LANDSCAPE
        assert section.margins.left == 54
        assert section.column_count == 2

    def test_page_setup_invalid_columns(self, simple_docx):
        """Test that a rejected change is reported and nothing is saved."""
        before = simple_docx.read_bytes()
        result = runner.invoke(app, ["page-setup", str(simple_docx), "--columns", "0"])
        assert result.exit_code == 1
        assert "Column count" in result.output
        assert simple_docx.read_bytes() == before

    def test_info_shows_page(self, simple_docx):
        """Test that info reports the page size once one is set."""
        doc = Document.open(simple_docx)
        doc.section.set_page_size(PageSize.LETTER)
        doc.save()
        result = runner.invoke(app, ["info", str(simple_docx)])
        assert "Page: LETTER portrait (612 x 792 pt)" in result.stdout

    def test_outline(self, tmp_path):
        """Test listing headings indented by level."""
        path = tmp_path / "outline.docx"
        doc = Document.create(path)
        doc.body.add_paragraph("Report").set_style("Heading1")
        doc.body.add_paragraph("Detail").set_outline_level(1)
        doc.save()
        result = runner.invoke(app, ["outline", str(path)])
        assert result.exit_code == 0
        assert result.stdout.splitlines() == ["Report", "  Detail"]

    def test_outline_without_headings(self, simple_docx):
        """Test the message for a document without headings."""
        result = runner.invoke(app, ["outline", str(simple_docx)])
        assert "No headings found" in result.stdout


class TestCLIBuild:
    """Tests for the build command."""

    def test_build(self, tmp_path):
        """Test building a new document from a YAML file."""
        build_file = tmp_path / "build.yaml"
        build_file.write_text(
            "operations:\n"
            "  - type: paragraph\n"
            "    text: Report\n"
            "    formatting: [bold]\n"
            "  - type: table\n"
            "    rows: 2\n"
            "    cols: 2\n"
        )
        output = tmp_path / "report.docx"
        result = runner.invoke(app, ["build", str(output), str(build_file)])
        assert result.exit_code == 0
        assert "Applied 2 operations (0 failed)" in result.stdout

        doc = Document.open(output)
        assert doc.body.paragraphs().first().text == "Report"
        assert len(doc.body.tables()) == 1

    def test_build_reports_failures(self, tmp_path):
        """Test that failed operations are listed."""
        build_file = tmp_path / "build.json"
        build_file.write_text(
            json.dumps({"operations": [{"type": "paragraph", "text": "ok"}, {"type": "chart"}]})
        )
        output = tmp_path / "out.docx"
        result = runner.invoke(app, ["build", str(output), str(build_file)])
        assert result.exit_code == 0
        assert "Applied 1 operations (1 failed)" in result.output
        assert "Failed: Unknown operation type: chart" in result.output

    def test_build_from_template(self, tmp_path, simple_docx):
        """Test building on top of an existing document."""
        build_file = tmp_path / "build.yaml"
        build_file.write_text("operations:\n  - type: paragraph\n    text: Appended\n")
        output = tmp_path / "out.docx"
        result = runner.invoke(
            app, ["build", str(output), str(build_file), "--template", str(simple_docx)]
        )
        assert result.exit_code == 0
        assert Document.open(output).get_text().endswith("Appended")

    def test_build_missing_operations_file(self, tmp_path):
        """Test that a missing build file exits with an error."""
        result = runner.invoke(
            app, ["build", str(tmp_path / "out.docx"), str(tmp_path / "missing.yaml")]
        )
        assert result.exit_code == 1
        assert "Build file not found" in result.output
