"""
RelationshipManager class for managing .rels parts.

A relationship links one part to another using an id (``rIdN``), a
relationship type URI and a target. New ids never come from scanning the
part itself: they are drawn from the document's shared IdAllocator so that
ids stay unique across every manager that registers relationships.
"""

import logging
import posixpath

from lxml import etree

from .allocator import IdAllocator, max_relationship_number
from .constants import PACKAGE_RELATIONSHIPS_NAMESPACE
from .package import DocxPackage

logger = logging.getLogger(__name__)

RELS_NAMESPACE = PACKAGE_RELATIONSHIPS_NAMESPACE


def _rel(tag: str) -> str:
    return f"{{{RELS_NAMESPACE}}}{tag}"


def rels_part_name(part_name: str) -> str:
    """Compute the .rels entry for a part.

    For example:
    - "word/document.xml" -> "word/_rels/document.xml.rels"
    - "word/header1.xml" -> "word/_rels/header1.xml.rels"
    """
    directory, filename = posixpath.split(part_name)
    return posixpath.join(directory, "_rels", f"{filename}.rels")


class RelationshipManager:
    """Manages one .rels part of a package.

    Example:
        >>> rels = RelationshipManager(package, "word/document.xml", allocator)
        >>> rel_id = rels.add_relationship(RelationshipTypes.HEADER, "header1.xml")
        >>> rels.save()

    Attributes:
        part_name: The part this relationship file is for (e.g., "word/document.xml")
        rels_name: The archive entry holding the relationships
    """

    def __init__(
        self,
        package: DocxPackage,
        part_name: str,
        allocator: IdAllocator,
        root: etree._Element | None = None,
    ) -> None:
        """Initialize a RelationshipManager for a specific part.

        Args:
            package: The package containing the relationship entry
            part_name: The part this relationship file is for
            allocator: Shared id source for new relationships
            root: Already-parsed relationships tree (loaded lazily if omitted)
        """
        self._package = package
        self._part_name = part_name
        self._rels_name = rels_part_name(part_name)
        self._allocator = allocator
        self._root = root
        self._modified = False

    @property
    def part_name(self) -> str:
        return self._part_name

    @property
    def rels_name(self) -> str:
        return self._rels_name

    @property
    def root(self) -> etree._Element:
        """The ``Relationships`` root element, loading or creating it on first use."""
        self._ensure_loaded()
        assert self._root is not None
        return self._root

    def _ensure_loaded(self) -> None:
        """Ensure the relationship XML is loaded into memory."""
        if self._root is not None:
            return

        if self._package.has_entry(self._rels_name):
            self._root = self._package.read_xml(self._rels_name)
            # ids already used by this part must never be handed out again
            self._allocator.reserve_relationship_number(max_relationship_number(self._root))
        else:
            self._root = etree.Element(_rel("Relationships"), nsmap={None: RELS_NAMESPACE})
            self._modified = True

    def _relationships(self) -> list[etree._Element]:
        return self.root.findall(_rel("Relationship"))

    def get_relationship(self, rel_type: str) -> str | None:
        """Get the id of the first relationship of a given type, or None."""
        for rel in self._relationships():
            if rel.get("Type") == rel_type:
                return rel.get("Id")
        return None

    def get_relationship_target(self, rel_type: str) -> str | None:
        """Get the target of the first relationship of a given type, or None."""
        for rel in self._relationships():
            if rel.get("Type") == rel_type:
                return rel.get("Target")
        return None

    def get_target(self, rel_id: str) -> str | None:
        """Get the target of the relationship with id ``rel_id``, or None."""
        for rel in self._relationships():
            if rel.get("Id") == rel_id:
                return rel.get("Target")
        return None

    def get_type(self, rel_id: str) -> str | None:
        """Get the type URI of the relationship with id ``rel_id``, or None."""
        for rel in self._relationships():
            if rel.get("Id") == rel_id:
                return rel.get("Type")
        return None

    def has_relationship(self, rel_type: str) -> bool:
        """Check if a relationship of the given type exists."""
        return self.get_relationship(rel_type) is not None

    def relationships_of_type(self, rel_type: str) -> list[tuple[str, str]]:
        """List ``(id, target)`` pairs for every relationship of a type."""
        return [
            (rel.get("Id", ""), rel.get("Target", ""))
            for rel in self._relationships()
            if rel.get("Type") == rel_type
        ]

    def add_relationship(self, rel_type: str, target: str, external: bool = False) -> str:
        """Register a new relationship under a freshly allocated id.

        The id is drawn from the shared allocator before the entry is
        written, so it is consumed even if a later step of the caller fails.

        Args:
            rel_type: The relationship type URI
            target: The target path (relative to the part's directory) or URL
            external: Mark the target as external (TargetMode="External")

        Returns:
            The new relationship id (e.g., "rId7")
        """
        root = self.root
        rel_id = self._allocator.allocate_relationship_id()

        rel_elem = etree.SubElement(root, _rel("Relationship"))
        rel_elem.set("Id", rel_id)
        rel_elem.set("Type", rel_type)
        rel_elem.set("Target", target)
        if external:
            rel_elem.set("TargetMode", "External")

        self._modified = True
        logger.debug(f"Added relationship {rel_id}: {rel_type} -> {target}")
        return rel_id

    def get_or_add_relationship(self, rel_type: str, target: str) -> str:
        """Return the id of an existing relationship of this type, adding one if absent.

        Use for singleton parts such as settings or numbering.
        """
        existing_id = self.get_relationship(rel_type)
        if existing_id is not None:
            logger.debug(f"Relationship {rel_type} already exists: {existing_id}")
            return existing_id
        return self.add_relationship(rel_type, target)

    def remove_relationship(self, rel_id: str) -> bool:
        """Remove the relationship with id ``rel_id``.

        The id is not returned to the allocator.

        Returns:
            True if a relationship was removed
        """
        for rel in self._relationships():
            if rel.get("Id") == rel_id:
                self.root.remove(rel)
                self._modified = True
                logger.debug(f"Removed relationship {rel_id}")
                return True
        return False

    def save(self) -> None:
        """Write the relationships back into the package if they changed."""
        if not self._modified or self._root is None:
            return
        self._package.write_xml(self._rels_name, self._root)
        self._modified = False
        logger.debug(f"Saved relationship part: {self._rels_name}")

    @property
    def is_modified(self) -> bool:
        """Check if there are unsaved modifications."""
        return self._modified


class RelationshipTypes:
    """Common OOXML relationship type URIs."""

    OFFICE_DOCUMENT = (
        "http://schemas.openxmlformats.org/officeDocument/2006/relationships/officeDocument"
    )
    STYLES = "http://schemas.openxmlformats.org/officeDocument/2006/relationships/styles"
    SETTINGS = "http://schemas.openxmlformats.org/officeDocument/2006/relationships/settings"
    NUMBERING = "http://schemas.openxmlformats.org/officeDocument/2006/relationships/numbering"
    FONT_TABLE = "http://schemas.openxmlformats.org/officeDocument/2006/relationships/fontTable"
    HEADER = "http://schemas.openxmlformats.org/officeDocument/2006/relationships/header"
    FOOTER = "http://schemas.openxmlformats.org/officeDocument/2006/relationships/footer"
    IMAGE = "http://schemas.openxmlformats.org/officeDocument/2006/relationships/image"
    HYPERLINK = "http://schemas.openxmlformats.org/officeDocument/2006/relationships/hyperlink"
