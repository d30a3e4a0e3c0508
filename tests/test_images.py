"""Tests for inline pictures."""

import logging
import zipfile

import pytest
from lxml import etree

from python_docx_projection import Body, Document
from python_docx_projection.constants import DEFAULT_IMAGE_SIZE, a, pic, w, wp
from python_docx_projection.errors import InvalidArgumentError, NotFoundError
from python_docx_projection.images import get_image_size, resolve_display_size
from python_docx_projection.relationships import RelationshipTypes


class TestImageSizing:
    """Tests for display size resolution."""

    def test_native_size(self, wide_png):
        """Test reading pixel dimensions with Pillow."""
        assert get_image_size(wide_png) == (400, 200)

    def test_max_width(self, wide_png):
        """Test narrowing to max width while keeping the aspect ratio."""
        assert resolve_display_size(wide_png, max_width_px=100) == (100, 50)

    def test_explicit_size_wins(self, wide_png):
        """Test that explicit dimensions are used as given."""
        assert resolve_display_size(wide_png, 30, 90) == (30, 90)

    def test_single_dimension_scales_other(self, wide_png):
        """Test that one explicit dimension scales the other."""
        assert resolve_display_size(wide_png, width_px=200) == (200, 100)
        assert resolve_display_size(wide_png, height_px=50) == (100, 50)

    def test_invalid_sizes(self, wide_png):
        """Test that non-positive sizes are rejected."""
        with pytest.raises(InvalidArgumentError):
            resolve_display_size(wide_png, width_px=0)
        with pytest.raises(InvalidArgumentError):
            resolve_display_size(wide_png, max_width_px=-1)

    def test_unreadable_image_uses_default(self, tmp_path, caplog):
        """Test that a file Pillow cannot identify falls back with a warning."""
        path = tmp_path / "broken.png"
        path.write_bytes(b"not really a png")
        with caplog.at_level(logging.WARNING, logger="python_docx_projection.images"):
            assert get_image_size(path) == DEFAULT_IMAGE_SIZE
        assert "Could not read image size" in caplog.text


class TestAddImage:
    """Tests for MediaManager.add_image."""

    def test_inline_picture(self, wide_png):
        """Test the drawing extent and relationship of a scaled image."""
        doc = Document.create()
        para = doc.body.add_paragraph()
        image = para.add_image(wide_png, max_width_px=100)

        assert image.is_inline
        assert (image.width_px, image.height_px) == (100, 50)
        assert (image.width_emu, image.height_emu) == (952500, 476250)

        drawing = para.current_node.find(f"{w('r')}/{w('drawing')}")
        extent = drawing.find(f"{wp('inline')}/{wp('extent')}")
        assert extent.get("cx") == "952500"
        assert extent.get("cy") == "476250"
        assert drawing.find(f".//{pic('pic')}") is not None
        assert drawing.find(f".//{a('blip')}") is not None

        assert doc.relationships.get_type(image.rel_id) == RelationshipTypes.IMAGE
        assert doc.relationships.get_target(image.rel_id) == "media/image1.png"
        assert doc.package.has_entry("word/media/image1.png")
        assert doc.content_types.get_default("png") == "image/png"

    def test_media_numbers_increase(self, wide_png, square_jpeg):
        """Test that each image gets its own media entry."""
        doc = Document.create()
        para = doc.body.add_paragraph()
        first = para.add_image(wide_png)
        second = para.add_image(square_jpeg)
        assert doc.relationships.get_target(first.rel_id) == "media/image1.png"
        assert doc.relationships.get_target(second.rel_id) == "media/image2.jpg"
        assert doc.content_types.get_default("jpg") == "image/jpeg"
        assert first.drawing_id != second.drawing_id
        assert [i.rel_id for i in doc.media.images()] == [first.rel_id, second.rel_id]

    def test_missing_file(self, tmp_path):
        """Test that a missing image raises NotFoundError."""
        doc = Document.create()
        with pytest.raises(NotFoundError) as exc_info:
            doc.body.add_paragraph().add_image(tmp_path / "nope.png")
        assert exc_info.value.code == "image_not_found"

    def test_unsupported_extension(self, tmp_path):
        """Test that unknown extensions are rejected before anything is written."""
        path = tmp_path / "vector.svg"
        path.write_text("<svg/>")
        doc = Document.create()
        para = doc.body.add_paragraph()
        with pytest.raises(InvalidArgumentError):
            para.add_image(path)
        assert len(para.current_node) == 0

    def test_detached_paragraph(self, wide_png):
        """Test that a paragraph outside a Document cannot take images."""
        body = Body(etree.Element(w("body")))
        with pytest.raises(InvalidArgumentError):
            body.add_paragraph().add_image(wide_png)

    def test_saved_archive_contains_media(self, tmp_path, wide_png):
        """Test that the image bytes are written into the package."""
        path = tmp_path / "pictures.docx"
        doc = Document.create(path)
        doc.body.add_paragraph().add_image(wide_png)
        doc.save()

        with zipfile.ZipFile(path) as zf:
            assert zf.read("word/media/image1.png") == wide_png.read_bytes()

        reopened = Document.open(path)
        assert len(reopened.media.images()) == 1
        assert reopened.media.images()[0].width_px == 400

    def test_image_in_footer(self, wide_png):
        """Test that a footer image is related from the footer part."""
        doc = Document.create()
        footer = doc.get_footer()
        image = footer.add_paragraph().add_image(wide_png, width_px=40, height_px=20)
        footer_rels = doc.relationships_for(footer.element)
        assert footer_rels.get_target(image.rel_id) == "media/image1.png"
        assert doc.relationships.get_target(image.rel_id) is None
