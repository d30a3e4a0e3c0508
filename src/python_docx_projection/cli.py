"""Command-line interface for python-docx-projection.

Provides commands for creating and extending Word documents from the terminal.
"""

from pathlib import Path
from typing import Annotated

import typer

from . import __version__
from .document import Document
from .errors import DocxProjectionError
from .models.formatting import Alignment, FormattingFlag
from .models.header_footer import HeaderFooterType
from .models.section import Orientation, PageSize
from .operations.batch import BatchBuilder

app = typer.Typer(
    name="docx-projection",
    help="Create and edit Word documents from the command line.",
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"docx-projection version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-v",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """Create and edit Word documents from the command line."""
    pass


@app.command()
def info(
    file: Annotated[Path, typer.Argument(help="Path to the .docx file")],
) -> None:
    """Show document information."""
    try:
        with Document.open(file) as doc:
            typer.echo(f"File: {file}")
            typer.echo(f"Paragraphs: {len(doc.body.paragraphs())}")
            typer.echo(f"Tables: {len(doc.body.tables())}")
            typer.echo(f"Headers: {len(doc.headers())}")
            typer.echo(f"Footers: {len(doc.footers())}")
            typer.echo(f"Images: {len(doc.media.images())}")
            typer.echo(f"Hyperlinks: {len(doc.links.hyperlinks())}")
            section = doc.section
            if section.page_width is not None:
                size = section.page_size.name if section.page_size else "custom"
                typer.echo(
                    f"Page: {size} {section.orientation.value} "
                    f"({section.page_width:g} x {section.page_height:g} pt)"
                )
            typer.echo(f"Headings: {len(doc.outline())}")
    except DocxProjectionError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)


@app.command()
def create(
    file: Annotated[Path, typer.Argument(help="Path of the new .docx file")],
    author: Annotated[
        str | None, typer.Option("--author", help="Creator recorded in the document")
    ] = None,
    text: Annotated[
        str | None, typer.Option("--text", "-t", help="Text of a first paragraph")
    ] = None,
) -> None:
    """Create a blank document."""
    try:
        doc = Document(author=author) if author else Document()
        doc.create(file)
        if text:
            doc.body.add_paragraph(text)
            doc.save()
        typer.echo(f"Created {file}")
    except DocxProjectionError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)


@app.command("add-paragraph")
def add_paragraph(
    file: Annotated[Path, typer.Argument(help="Path to the .docx file")],
    text: Annotated[str, typer.Option("--text", "-t", help="Paragraph text")],
    bold: Annotated[bool, typer.Option("--bold", help="Make the text bold")] = False,
    italic: Annotated[bool, typer.Option("--italic", help="Make the text italic")] = False,
    underline: Annotated[bool, typer.Option("--underline", help="Underline the text")] = False,
    style: Annotated[
        str | None, typer.Option("--style", "-s", help="Paragraph style id or name")
    ] = None,
    align: Annotated[
        Alignment | None, typer.Option("--align", help="Paragraph alignment")
    ] = None,
    output: Annotated[Path | None, typer.Option("--output", "-o", help="Output file path")] = None,
) -> None:
    """Append a paragraph to the document body."""
    flags = FormattingFlag.NONE
    if bold:
        flags |= FormattingFlag.BOLD
    if italic:
        flags |= FormattingFlag.ITALIC
    if underline:
        flags |= FormattingFlag.UNDERLINE

    try:
        doc = Document.open(file)
        paragraph = doc.body.add_paragraph(text, flags)
        if style:
            paragraph.set_style(style)
        if align is not None:
            paragraph.set_alignment(align)
        output_path = doc.save(output or file)
        typer.echo(f"Added paragraph and saved to {output_path}")
    except DocxProjectionError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)


@app.command("add-image")
def add_image(
    file: Annotated[Path, typer.Argument(help="Path to the .docx file")],
    image: Annotated[Path, typer.Argument(help="Path to the image file")],
    width: Annotated[int | None, typer.Option("--width", help="Width in pixels")] = None,
    height: Annotated[int | None, typer.Option("--height", help="Height in pixels")] = None,
    max_width: Annotated[
        int, typer.Option("--max-width", help="Shrink wider images to this width (pixels)")
    ] = 0,
    output: Annotated[Path | None, typer.Option("--output", "-o", help="Output file path")] = None,
) -> None:
    """Append a paragraph holding an inline picture."""
    try:
        doc = Document.open(file)
        picture = doc.body.add_paragraph().add_image(image, width, height, max_width)
        output_path = doc.save(output or file)
        typer.echo(
            f"Added {image.name} ({picture.width_px}x{picture.height_px}px) "
            f"and saved to {output_path}"
        )
    except DocxProjectionError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)


def _add_header_footer(
    file: Path, text: str, kind: str, page: HeaderFooterType, output: Path | None
) -> None:
    try:
        doc = Document.open(file)
        part = doc.get_header(page) if kind == "header" else doc.get_footer(page)
        part.add_paragraph(text)
        output_path = doc.save(output or file)
        typer.echo(f"Added {page.value} {kind} and saved to {output_path}")
    except DocxProjectionError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)


@app.command("add-header")
def add_header(
    file: Annotated[Path, typer.Argument(help="Path to the .docx file")],
    text: Annotated[str, typer.Option("--text", "-t", help="Header text")],
    page: Annotated[
        HeaderFooterType, typer.Option("--type", help="Pages the header applies to")
    ] = HeaderFooterType.DEFAULT,
    output: Annotated[Path | None, typer.Option("--output", "-o", help="Output file path")] = None,
) -> None:
    """Add a paragraph to a header, creating the header if needed."""
    _add_header_footer(file, text, "header", page, output)


@app.command("add-footer")
def add_footer(
    file: Annotated[Path, typer.Argument(help="Path to the .docx file")],
    text: Annotated[str, typer.Option("--text", "-t", help="Footer text")],
    page: Annotated[
        HeaderFooterType, typer.Option("--type", help="Pages the footer applies to")
    ] = HeaderFooterType.DEFAULT,
    output: Annotated[Path | None, typer.Option("--output", "-o", help="Output file path")] = None,
) -> None:
    """Add a paragraph to a footer, creating the footer if needed."""
    _add_header_footer(file, text, "footer", page, output)


@app.command()
def outline(
    file: Annotated[Path, typer.Argument(help="Path to the .docx file")],
) -> None:
    """List the document's headings, indented by level."""
    try:
        with Document.open(file) as doc:
            entries = doc.outline()
            if not entries:
                typer.echo("No headings found")
            for entry in entries:
                typer.echo(f"{'  ' * (entry.level - 1)}{entry.text}")
    except DocxProjectionError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)


@app.command("page-setup")
def page_setup(
    file: Annotated[Path, typer.Argument(help="Path to the .docx file")],
    size: Annotated[PageSize | None, typer.Option("--size", help="Standard paper size")] = None,
    orientation: Annotated[
        Orientation | None, typer.Option("--orientation", help="Page orientation")
    ] = None,
    margin: Annotated[
        float | None, typer.Option("--margin", help="Top, bottom, left and right margin in points")
    ] = None,
    columns: Annotated[int | None, typer.Option("--columns", help="Number of text columns")] = None,
    output: Annotated[Path | None, typer.Option("--output", "-o", help="Output file path")] = None,
) -> None:
    """Change page size, orientation, margins or columns."""
    try:
        doc = Document.open(file)
        section = doc.section
        if size is not None:
            section.set_page_size(size, orientation or Orientation.PORTRAIT)
        elif orientation is not None:
            section.set_orientation(orientation)
        if margin is not None:
            section.set_margins(top=margin, bottom=margin, left=margin, right=margin)
        if columns is not None:
            section.set_columns(columns)
        output_path = doc.save(output or file)
        typer.echo(f"Updated page layout and saved to {output_path}")
    except DocxProjectionError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)


@app.command()
def build(
    output: Annotated[Path, typer.Argument(help="Path of the .docx file to write")],
    operations: Annotated[Path, typer.Argument(help="Path to YAML/JSON build file")],
    template: Annotated[
        Path | None, typer.Option("--template", help="Start from this document instead")
    ] = None,
    author: Annotated[
        str | None, typer.Option("--author", help="Creator recorded in a new document")
    ] = None,
    stop_on_error: Annotated[
        bool, typer.Option("--stop-on-error", help="Stop at the first failed operation")
    ] = False,
) -> None:
    """Build a document from a YAML or JSON file of operations."""
    try:
        doc = Document(author=author) if author else Document()
        if template is not None:
            doc.open(template)
        else:
            doc.create()
        results = BatchBuilder(doc).apply_file(operations, stop_on_error=stop_on_error)
        output_path = doc.save(output)

        success_count = sum(1 for r in results if r.success)
        fail_count = len(results) - success_count
        typer.echo(
            f"Applied {success_count} operations ({fail_count} failed), saved to {output_path}"
        )

        if fail_count > 0:
            for r in results:
                if not r.success:
                    typer.echo(f"  Failed: {r.message}", err=True)
    except DocxProjectionError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
