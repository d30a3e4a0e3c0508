"""
ContentTypeManager class for managing [Content_Types].xml.

Content types in OOXML use two mechanisms:
- Default: maps a file extension to a content type (e.g. png -> image/png)
- Override: maps one part name to a content type (e.g. /word/header1.xml)

Images are declared through Defaults keyed by extension; headers and
footers each get an Override.
"""

import logging

from lxml import etree

from .constants import CONTENT_TYPES_NAMESPACE, CONTENT_TYPES_PART
from .package import DocxPackage

logger = logging.getLogger(__name__)

# Image file extension -> content type
IMAGE_EXTENSION_MAP = {
    "png": "image/png",
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "gif": "image/gif",
    "bmp": "image/bmp",
    "tiff": "image/tiff",
}


def _ct(tag: str) -> str:
    return f"{{{CONTENT_TYPES_NAMESPACE}}}{tag}"


class ContentTypeManager:
    """Manages the [Content_Types].xml part.

    Example:
        >>> ct_mgr = ContentTypeManager(package)
        >>> ct_mgr.add_override("/word/header1.xml", ContentTypes.HEADER)
        >>> ct_mgr.add_default("png", "image/png")
        >>> ct_mgr.save()
    """

    def __init__(self, package: DocxPackage, root: etree._Element | None = None) -> None:
        """Initialize a ContentTypeManager for a package.

        Args:
            package: The package containing the [Content_Types].xml entry
            root: Already-parsed tree (loaded lazily if omitted)
        """
        self._package = package
        self._root = root
        self._modified = False

    @property
    def root(self) -> etree._Element:
        """The ``Types`` root element."""
        self._ensure_loaded()
        assert self._root is not None
        return self._root

    def _ensure_loaded(self) -> None:
        """Ensure the content types XML is loaded into memory."""
        if self._root is not None:
            return

        if self._package.has_entry(CONTENT_TYPES_PART):
            self._root = self._package.read_xml(CONTENT_TYPES_PART)
        else:
            # Shouldn't happen for a valid docx
            self._root = etree.Element(_ct("Types"), nsmap={None: CONTENT_TYPES_NAMESPACE})
            self._modified = True

    def get_content_type(self, part_name: str) -> str | None:
        """Get the override content type for a part name such as "/word/header1.xml"."""
        for override in self.root.findall(_ct("Override")):
            if override.get("PartName") == part_name:
                return override.get("ContentType")
        return None

    def get_default(self, extension: str) -> str | None:
        """Get the default content type registered for a file extension."""
        extension = extension.lower().lstrip(".")
        for default in self.root.findall(_ct("Default")):
            if (default.get("Extension") or "").lower() == extension:
                return default.get("ContentType")
        return None

    def has_override(self, part_name: str) -> bool:
        """Check if an override exists for the given part name."""
        return self.get_content_type(part_name) is not None

    def has_default(self, extension: str) -> bool:
        """Check if a Default entry exists for a file extension."""
        return self.get_default(extension) is not None

    def add_override(self, part_name: str, content_type: str) -> bool:
        """Add a content type override for a part.

        If an override already exists for the part, this is a no-op.

        Returns:
            True if a new override was added, False if it already existed
        """
        if self.has_override(part_name):
            logger.debug(f"Content type override already exists for {part_name}")
            return False

        override = etree.SubElement(self.root, _ct("Override"))
        override.set("PartName", part_name)
        override.set("ContentType", content_type)

        self._modified = True
        logger.debug(f"Added content type override: {part_name} -> {content_type}")
        return True

    def add_default(self, extension: str, content_type: str) -> bool:
        """Add a Default entry for a file extension unless one exists.

        Defaults are inserted ahead of the first Override so the part keeps
        the conventional ordering.

        Returns:
            True if a new entry was added
        """
        extension = extension.lower().lstrip(".")
        if self.has_default(extension):
            return False

        default = etree.Element(_ct("Default"))
        default.set("Extension", extension)
        default.set("ContentType", content_type)

        first_override = self.root.find(_ct("Override"))
        if first_override is not None:
            first_override.addprevious(default)
        else:
            self.root.append(default)

        self._modified = True
        logger.debug(f"Added content type default: {extension} -> {content_type}")
        return True

    def remove_override(self, part_name: str) -> bool:
        """Remove a content type override by part name.

        Returns:
            True if an override was removed, False if not found
        """
        for override in self.root.findall(_ct("Override")):
            if override.get("PartName") == part_name:
                self.root.remove(override)
                self._modified = True
                logger.debug(f"Removed content type override: {part_name}")
                return True
        return False

    def save(self) -> None:
        """Write the content types back into the package if they changed."""
        if not self._modified or self._root is None:
            return
        self._package.write_xml(CONTENT_TYPES_PART, self._root)
        self._modified = False
        logger.debug("Saved content types part")

    @property
    def is_modified(self) -> bool:
        """Check if there are unsaved modifications."""
        return self._modified


class ContentTypes:
    """Common OOXML content type strings."""

    DOCUMENT = "application/vnd.openxmlformats-officedocument.wordprocessingml.document.main+xml"
    STYLES = "application/vnd.openxmlformats-officedocument.wordprocessingml.styles+xml"
    SETTINGS = "application/vnd.openxmlformats-officedocument.wordprocessingml.settings+xml"
    NUMBERING = "application/vnd.openxmlformats-officedocument.wordprocessingml.numbering+xml"
    FONT_TABLE = "application/vnd.openxmlformats-officedocument.wordprocessingml.fontTable+xml"
    HEADER = "application/vnd.openxmlformats-officedocument.wordprocessingml.header+xml"
    FOOTER = "application/vnd.openxmlformats-officedocument.wordprocessingml.footer+xml"
