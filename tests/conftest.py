"""Shared fixtures: minimal .docx archives and small images built on the fly."""

import zipfile
from pathlib import Path

import pytest
from PIL import Image as PILImage

WORD_NAMESPACE = "http://schemas.openxmlformats.org/wordprocessingml/2006/main"
RELS_NAMESPACE = "http://schemas.openxmlformats.org/officeDocument/2006/relationships"
PACKAGE_RELS_NAMESPACE = "http://schemas.openxmlformats.org/package/2006/relationships"

CONTENT_TYPES = """<?xml version="1.0" encoding="UTF-8"?>
<Types xmlns="http://schemas.openxmlformats.org/package/2006/content-types">
  <Default Extension="rels" ContentType="application/vnd.openxmlformats-package.relationships+xml"/>
  <Default Extension="xml" ContentType="application/xml"/>
  <Override PartName="/word/document.xml" ContentType="application/vnd.openxmlformats-officedocument.wordprocessingml.document.main+xml"/>
  {overrides}
</Types>"""

PACKAGE_RELS = f"""<?xml version="1.0" encoding="UTF-8"?>
<Relationships xmlns="{PACKAGE_RELS_NAMESPACE}">
  <Relationship Id="rId1" Type="http://schemas.openxmlformats.org/officeDocument/2006/relationships/officeDocument" Target="word/document.xml"/>
</Relationships>"""


def document_xml(body: str) -> str:
    """Wrap body content in a w:document root."""
    return f"""<?xml version="1.0" encoding="UTF-8" standalone="yes"?>
<w:document xmlns:w="{WORD_NAMESPACE}" xmlns:r="{RELS_NAMESPACE}">
  <w:body>{body}</w:body>
</w:document>"""


def relationships_xml(relationships: str = "") -> str:
    """Wrap Relationship elements in a Relationships root."""
    return f"""<?xml version="1.0" encoding="UTF-8"?>
<Relationships xmlns="{PACKAGE_RELS_NAMESPACE}">{relationships}</Relationships>"""


def write_docx(
    path: Path,
    body: str,
    document_rels: str | None = "",
    parts: dict[str, str] | None = None,
    overrides: str = "",
) -> Path:
    """Write a minimal .docx archive.

    Args:
        path: Where to write the archive
        body: XML placed inside w:body
        document_rels: Relationship elements for word/document.xml
            (None leaves out the .rels part entirely)
        parts: Extra entries, name -> content
        overrides: Extra Override elements for [Content_Types].xml
    """
    with zipfile.ZipFile(path, "w", zipfile.ZIP_DEFLATED) as zf:
        zf.writestr("[Content_Types].xml", CONTENT_TYPES.format(overrides=overrides))
        zf.writestr("_rels/.rels", PACKAGE_RELS)
        zf.writestr("word/document.xml", document_xml(body))
        if document_rels is not None:
            zf.writestr("word/_rels/document.xml.rels", relationships_xml(document_rels))
        for name, content in (parts or {}).items():
            zf.writestr(name, content)
    return path


def read_entry(path: Path, name: str) -> str:
    """Read one entry of a saved archive as text."""
    with zipfile.ZipFile(path) as zf:
        return zf.read(name).decode("utf-8")


@pytest.fixture
def make_docx(tmp_path: Path):
    """Factory writing ``write_docx`` archives into the test's tmp_path."""

    def _make(body: str, name: str = "test.docx", **kwargs) -> Path:
        return write_docx(tmp_path / name, body, **kwargs)

    return _make


@pytest.fixture
def entry_text():
    """Reader for one entry of a saved archive."""
    return read_entry


@pytest.fixture
def simple_docx(tmp_path: Path) -> Path:
    """A document holding two plain paragraphs and no styles part."""
    return write_docx(
        tmp_path / "simple.docx",
        "<w:p><w:r><w:t>First paragraph</w:t></w:r></w:p>"
        "<w:p><w:r><w:t>Second paragraph</w:t></w:r></w:p>",
    )


@pytest.fixture
def wide_png(tmp_path: Path) -> Path:
    """A 400x200 PNG."""
    path = tmp_path / "wide.png"
    PILImage.new("RGB", (400, 200), color=(200, 30, 30)).save(path)
    return path


@pytest.fixture
def square_jpeg(tmp_path: Path) -> Path:
    """A 64x64 JPEG."""
    path = tmp_path / "square.jpg"
    PILImage.new("RGB", (64, 64), color=(30, 30, 200)).save(path, format="JPEG")
    return path
