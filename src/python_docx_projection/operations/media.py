"""
MediaManager: embeds pictures and text boxes into paragraphs.

Picture bytes are copied into ``word/media/imageN.ext``; a Default content
type is declared for the extension and an image relationship is registered
on the part that owns the paragraph. Drawing ids come from the document's
shared IdAllocator.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import TYPE_CHECKING

from lxml import etree

from ..allocator import IdAllocator
from ..constants import a, w
from ..content_types import IMAGE_EXTENSION_MAP
from ..errors import InvalidArgumentError, IOFailureError, NotFoundError
from ..images import resolve_display_size
from ..models.drawing import Image, TextBox, build_inline_picture, build_text_box
from ..relationships import RelationshipTypes
from ..units import pixels_to_emu

if TYPE_CHECKING:
    from ..document import Document
    from ..models.paragraph import Paragraph

logger = logging.getLogger(__name__)

_MEDIA_ENTRY_PATTERN = re.compile(r"^word/media/image(\d+)\.\w+$")


def check_image_file(image_path: Path) -> tuple[str, str]:
    """Return the lowercase extension and content type of an insertable image.

    Raises:
        NotFoundError: If the file does not exist
        InvalidArgumentError: If the extension is not a supported image type
    """
    if not image_path.is_file():
        raise NotFoundError(
            f"Image file not found: {image_path}",
            code="image_not_found",
            context={"path": str(image_path)},
        )
    extension = image_path.suffix.lstrip(".").lower()
    content_type = IMAGE_EXTENSION_MAP.get(extension)
    if content_type is None:
        raise InvalidArgumentError(
            f"Unsupported image type: {image_path.suffix or '(none)'}",
            code="unsupported_image_type",
            context={"path": str(image_path)},
        )
    return extension, content_type


class MediaManager:
    """Inserts inline pictures and text boxes.

    Example:
        >>> para = doc.body.add_paragraph()
        >>> image = doc.media.add_image(para, "logo.png", max_width_px=300)
        >>> box = doc.media.add_text_box(para, 240, 120)
    """

    def __init__(self, document: Document, allocator: IdAllocator) -> None:
        """Initialize a MediaManager.

        Args:
            document: The owning Document
            allocator: The document's shared id source
        """
        self._document = document
        self._allocator = allocator
        self._next_media_number = self._scan_media_numbers() + 1

    def _scan_media_numbers(self) -> int:
        highest = 0
        for name in self._document.package.entry_names():
            match = _MEDIA_ENTRY_PATTERN.match(name)
            if match:
                highest = max(highest, int(match.group(1)))
        return highest

    @staticmethod
    def _paragraph_node(paragraph: Paragraph) -> etree._Element:
        node = paragraph.current_node
        if node is None:
            raise InvalidArgumentError(
                "Cannot add a drawing to an empty paragraph projection", code="empty_paragraph"
            )
        return node

    def add_image(
        self,
        paragraph: Paragraph,
        image_path: str | Path,
        width_px: int | None = None,
        height_px: int | None = None,
        max_width_px: int = 0,
    ) -> Image:
        """Append an inline picture to ``paragraph``.

        Args:
            paragraph: Paragraph that receives a new run holding the drawing
            image_path: PNG, JPEG, GIF, BMP or TIFF file
            width_px: Display width (native width when omitted)
            height_px: Display height (native height when omitted)
            max_width_px: Narrow wider images to this width, keeping the
                aspect ratio (0 disables)

        Returns:
            The inserted Image

        Raises:
            NotFoundError: If the file does not exist
            InvalidArgumentError: If the extension is not a supported image type
            IOFailureError: If the file cannot be read
        """
        image_path = Path(image_path)
        extension, content_type = check_image_file(image_path)
        p_node = self._paragraph_node(paragraph)
        relationships = self._document.relationships_for(p_node)
        width, height = resolve_display_size(image_path, width_px, height_px, max_width_px)
        try:
            data = image_path.read_bytes()
        except OSError as e:
            raise IOFailureError(
                f"Cannot read image file: {e}", path=str(image_path), code="read_failed"
            ) from e

        # Copy the bytes into the package
        number = self._next_media_number
        self._next_media_number += 1
        file_name = f"image{number}.{extension}"
        self._document.package.write_entry(f"word/media/{file_name}", data)
        self._document.content_types.add_default(extension, content_type)

        rel_id = relationships.add_relationship(RelationshipTypes.IMAGE, f"media/{file_name}")
        drawing_id = self._allocator.allocate_drawing_id()

        run_node = etree.SubElement(p_node, w("r"))
        run_node.append(
            build_inline_picture(rel_id, drawing_id, pixels_to_emu(width), pixels_to_emu(height))
        )
        logger.debug(f"Embedded {image_path.name} as {file_name} ({rel_id}, {width}x{height}px)")
        return Image(run_node, self._document)

    def add_text_box(self, paragraph: Paragraph, width_px: int, height_px: int) -> TextBox:
        """Append an inline text box to ``paragraph``.

        The box takes two drawing ids: one for its wp:docPr and one for the
        shape inside it.
        """
        if width_px <= 0 or height_px <= 0:
            raise InvalidArgumentError(
                "Text box size must be positive",
                code="invalid_text_box_size",
                context={"width_px": width_px, "height_px": height_px},
            )
        p_node = self._paragraph_node(paragraph)
        drawing_id = self._allocator.allocate_drawing_id()
        shape_id = self._allocator.allocate_drawing_id()

        run_node = etree.SubElement(p_node, w("r"))
        run_node.append(
            build_text_box(drawing_id, shape_id, pixels_to_emu(width_px), pixels_to_emu(height_px))
        )
        logger.debug(f"Added text box {drawing_id} ({width_px}x{height_px}px)")
        return TextBox(run_node, self._document, fresh=True)

    def images(self) -> list[Image]:
        """Every inline picture in the main document part, in document order."""
        return [
            Image(drawing.getparent(), self._document)
            for drawing in self._document.element.iter(w("drawing"))
            if drawing.getparent().tag == w("r") and drawing.find(f".//{a('blip')}") is not None
        ]
