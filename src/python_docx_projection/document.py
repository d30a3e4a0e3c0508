"""
Document class: the entry point for building and editing .docx files.

A Document owns the package, the parsed XML of every part it touches and a
single IdAllocator shared by the media, hyperlink and header/footer
managers. Managers and the Body are constructed on first access.
"""

from __future__ import annotations

import functools
import logging
import posixpath
from pathlib import Path
from typing import Any, BinaryIO, Callable

from lxml import etree

from .allocator import IdAllocator
from .constants import (
    DOCUMENT_PART,
    DOCUMENT_RELS_PART,
    SETTINGS_PART,
    STYLES_PART,
    w,
)
from .content_types import ContentTypeManager, ContentTypes
from .errors import (
    InvalidArgumentError,
    IOFailureError,
    XmlManipulationError,
)
from .models.body import Body
from .models.header_footer import Footer, Header, HeaderFooterType
from .models.section import OutlineEntry, Section, outline
from .numbering import NumberingDefinitions
from .operations.header_footer import HeaderFooterManager
from .operations.hyperlinks import HyperlinkManager
from .operations.media import MediaManager
from .package import DocxPackage
from .relationships import RelationshipManager, RelationshipTypes
from .styles import StyleManager
from .templates import SETTINGS_XML
from .xml_utils import parse

logger = logging.getLogger(__name__)

DEFAULT_AUTHOR = "python-docx-projection"

_HEADER_FOOTER_TYPES = (RelationshipTypes.HEADER, RelationshipTypes.FOOTER)


class _transition:
    """Make ``open``/``create`` callable on the class or on an instance.

    ``Document.open(path)`` builds a new Document; ``doc.open(path)`` loads
    into the existing one. Both return the loaded Document.
    """

    def __init__(self, func: Callable[..., Document]) -> None:
        self._func = func
        functools.update_wrapper(self, func)  # type: ignore[arg-type]

    def __get__(self, instance: Document | None, owner: type[Document]) -> Callable[..., Document]:
        if instance is None:
            return lambda *args, **kwargs: self._func(owner(), *args, **kwargs)
        return functools.partial(self._func, instance)


class Document:
    """A Word document being created or edited.

    Lifecycle: a Document starts unopened, becomes loaded through ``open``
    or ``create`` and stays loaded across saves.

    Example:
        >>> doc = Document.create("report.docx")
        >>> doc.body.add_paragraph("Hello", FormattingFlag.BOLD)
        >>> doc.get_header().add_paragraph("Quarterly report")
        >>> doc.save()

    Example with an existing file:
        >>> with Document.open("report.docx") as doc:
        ...     for para in doc.body.paragraphs():
        ...         print(para.text)

    Attributes:
        author: Creator recorded when a new document is created

    Not thread-safe.
    """

    def __init__(self, author: str = DEFAULT_AUTHOR) -> None:
        self.author = author
        self._reset()

    def _reset(self) -> None:
        self._package: DocxPackage | None = None
        self._root: etree._Element | None = None
        self._allocator: IdAllocator | None = None
        self._relationships: RelationshipManager | None = None
        self._content_types: ContentTypeManager | None = None
        self._parts: dict[str, etree._Element] = {}
        self._part_relationships: dict[str, RelationshipManager] = {}
        for name in (
            "_body_instance",
            "_styles_instance",
            "_numbering_instance",
            "_media_instance",
            "_links_instance",
            "_header_footer_instance",
        ):
            self.__dict__.pop(name, None)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @_transition
    def open(self, source: str | Path | bytes | BinaryIO) -> Document:
        """Load an existing .docx from a path, bytes or a binary stream.

        On failure the Document keeps whatever state it had before the call.

        Raises:
            InvalidArgumentError: If the path is empty
            IOFailureError: If the archive is missing, unreadable or corrupt
        """
        if isinstance(source, bytes):
            package = DocxPackage.from_bytes(source)
        else:
            package = DocxPackage.open(source)
        self._load(package)
        logger.debug(f"Opened document {package.path or '<in-memory>'}")
        return self

    @_transition
    def create(self, path: str | Path | None = None) -> Document:
        """Start a new blank document, written to ``path`` immediately when given.

        Raises:
            InvalidArgumentError: If the path is empty
            IOFailureError: If the new file cannot be written
        """
        package = DocxPackage.create(path, creator=self.author)
        self._load(package)
        logger.debug(f"Created document {package.path or '<in-memory>'}")
        return self

    def _load(self, package: DocxPackage) -> None:
        """Parse the parts every Document needs and seed the allocator."""
        try:
            root = package.read_xml(DOCUMENT_PART)
            rels_root = (
                package.read_xml(DOCUMENT_RELS_PART)
                if package.has_entry(DOCUMENT_RELS_PART)
                else None
            )
            parts: dict[str, etree._Element] = {}
            if rels_root is not None:
                for rel in rels_root:
                    if rel.get("Type") in _HEADER_FOOTER_TYPES and rel.get("TargetMode") is None:
                        target = rel.get("Target", "")
                        part_name = posixpath.normpath(posixpath.join("word", target))
                        if package.has_entry(part_name):
                            parts[part_name] = package.read_xml(part_name)
        except XmlManipulationError as e:
            raise IOFailureError(
                f"Document contains malformed XML: {e}",
                path=str(package.path) if package.path else None,
                code="corrupt_document",
            ) from e

        if root.find(w("body")) is None:
            etree.SubElement(root, w("body"))

        allocator = IdAllocator.from_parts(rels_root, [root, *parts.values()])

        self._reset()
        self._package = package
        self._root = root
        self._allocator = allocator
        self._parts = parts
        self._relationships = RelationshipManager(
            package, DOCUMENT_PART, allocator, root=rels_root
        )
        self._content_types = ContentTypeManager(package)
        self._part_relationships[DOCUMENT_PART] = self._relationships
        logger.debug(f"Loaded document with {allocator!r}")

    def _require_loaded(self, operation: str) -> DocxPackage:
        if self._package is None:
            raise InvalidArgumentError(
                f"Cannot {operation}: no document is open", code="document_not_open"
            )
        return self._package

    @property
    def is_open(self) -> bool:
        return self._package is not None

    @property
    def path(self) -> Path | None:
        """File the document was opened from or last saved to."""
        return self._package.path if self._package is not None else None

    def save(self, path: str | Path | None = None) -> Path:
        """Write every modified part and rewrite the archive.

        Args:
            path: Destination (defaults to where the document came from)

        Returns:
            The path written

        Raises:
            InvalidArgumentError: If no document is open or there is no destination
            IOFailureError: If writing fails
        """
        package = self._require_loaded("save")
        self._flush()
        return package.save(path)

    def save_to_bytes(self) -> bytes:
        """Serialize the document, with all pending changes, to .docx bytes."""
        package = self._require_loaded("save")
        self._flush()
        return package.save_to_bytes()

    def _flush(self) -> None:
        """Write the in-memory XML trees back into the package."""
        package = self.package
        package.write_xml(DOCUMENT_PART, self.element)
        for part_name, root in self._parts.items():
            package.write_xml(part_name, root)

        if "_styles_instance" in self.__dict__ and self.styles.is_modified:
            self._register_part(STYLES_PART, RelationshipTypes.STYLES, ContentTypes.STYLES)
            self.styles.save()

        for relationships in self._part_relationships.values():
            relationships.save()
        self.content_types.save()

    def _register_part(self, part_name: str, rel_type: str, content_type: str) -> None:
        """Link a singleton part from the document part and declare its content type."""
        self.relationships.get_or_add_relationship(rel_type, part_name.split("/")[-1])
        self.content_types.add_override(f"/{part_name}", content_type)

    def close(self) -> None:
        """Drop the loaded document; unsaved changes are discarded."""
        self._reset()

    def __enter__(self) -> Document:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Parts
    # ------------------------------------------------------------------

    @property
    def package(self) -> DocxPackage:
        return self._require_loaded("access the package")

    @property
    def element(self) -> etree._Element:
        """Root (w:document) of the main document part."""
        self._require_loaded("access the document part")
        assert self._root is not None
        return self._root

    @property
    def allocator(self) -> IdAllocator:
        self._require_loaded("allocate ids")
        assert self._allocator is not None
        return self._allocator

    @property
    def relationships(self) -> RelationshipManager:
        """Relationships of the main document part."""
        self._require_loaded("access relationships")
        assert self._relationships is not None
        return self._relationships

    @property
    def content_types(self) -> ContentTypeManager:
        self._require_loaded("access content types")
        assert self._content_types is not None
        return self._content_types

    def part_names(self) -> list[str]:
        """Names of the secondary parts (headers, footers, settings) held in memory."""
        return list(self._parts)

    def get_part(self, part_name: str) -> etree._Element:
        """Root of a secondary part, parsed on first request and kept for saving."""
        if part_name not in self._parts:
            self._parts[part_name] = self.package.read_xml(part_name)
        return self._parts[part_name]

    def add_part(self, part_name: str, root: etree._Element) -> None:
        """Hold a new part's tree so that it is written on save."""
        self._require_loaded("add a part")
        self._parts[part_name] = root

    def has_part(self, part_name: str) -> bool:
        """Whether ``part_name`` is held in memory or stored in the package."""
        return part_name in self._parts or self.package.has_entry(part_name)

    def relationships_for(self, element: etree._Element) -> RelationshipManager:
        """Relationships of the part whose tree contains ``element``.

        Raises:
            XmlManipulationError: If the element does not belong to this document
        """
        root = element.getroottree().getroot()
        if root is self.element:
            return self.relationships
        for part_name, part_root in self._parts.items():
            if part_root is root:
                if part_name not in self._part_relationships:
                    self._part_relationships[part_name] = RelationshipManager(
                        self.package, part_name, self.allocator
                    )
                return self._part_relationships[part_name]
        raise XmlManipulationError(
            "Element is not part of this document", code="foreign_element"
        )

    @property
    def settings(self) -> etree._Element:
        """Root of word/settings.xml, created and registered when missing."""
        if SETTINGS_PART not in self._parts:
            if self.package.has_entry(SETTINGS_PART):
                self._parts[SETTINGS_PART] = self.package.read_xml(SETTINGS_PART)
            else:
                self._parts[SETTINGS_PART] = parse(SETTINGS_XML, part_name=SETTINGS_PART)
                self._register_part(
                    SETTINGS_PART, RelationshipTypes.SETTINGS, ContentTypes.SETTINGS
                )
                logger.debug("Created settings part")
        return self._parts[SETTINGS_PART]

    # ------------------------------------------------------------------
    # Components (lazy)
    # ------------------------------------------------------------------

    @property
    def body(self) -> Body:
        if "_body_instance" not in self.__dict__:
            self._body_instance = Body(self.element.find(w("body")), self)
        return self._body_instance

    @property
    def styles(self) -> StyleManager:
        if "_styles_instance" not in self.__dict__:
            self._styles_instance = StyleManager(self.package)
        return self._styles_instance

    @property
    def numbering(self) -> NumberingDefinitions:
        if "_numbering_instance" not in self.__dict__:
            self._numbering_instance = NumberingDefinitions(self.package)
        return self._numbering_instance

    def ensure_numbering(self) -> bool:
        """Give the document the default bullet/number definitions if it has none."""
        return self.numbering.ensure_part(self.relationships, self.content_types)

    @property
    def media(self) -> MediaManager:
        if "_media_instance" not in self.__dict__:
            self._media_instance = MediaManager(self, self.allocator)
        return self._media_instance

    @property
    def links(self) -> HyperlinkManager:
        if "_links_instance" not in self.__dict__:
            self._links_instance = HyperlinkManager(self, self.allocator)
        return self._links_instance

    @property
    def header_footer(self) -> HeaderFooterManager:
        if "_header_footer_instance" not in self.__dict__:
            self._header_footer_instance = HeaderFooterManager(self, self.allocator)
        return self._header_footer_instance

    @property
    def section(self) -> Section:
        """Page layout of the body-level section, creating its w:sectPr when missing."""
        return Section(self.body.get_or_create_sect_pr(), self)

    def get_header(self, hf_type: HeaderFooterType = HeaderFooterType.DEFAULT) -> Header:
        return self.header_footer.get_header(hf_type)

    def get_footer(self, hf_type: HeaderFooterType = HeaderFooterType.DEFAULT) -> Footer:
        return self.header_footer.get_footer(hf_type)

    def headers(self) -> list[Header]:
        return self.header_footer.headers()

    def footers(self) -> list[Footer]:
        return self.header_footer.footers()

    # ------------------------------------------------------------------
    # Convenience
    # ------------------------------------------------------------------

    def get_text(self) -> str:
        """Text of the body paragraphs, one line per paragraph."""
        return self.body.text

    def outline(self) -> list[OutlineEntry]:
        """The body's heading paragraphs with their levels, in document order.

        Example:
            >>> [(entry.level, entry.text) for entry in doc.outline()]
            [(1, 'Introduction'), (2, 'Scope')]
        """
        return outline(list(self.body.paragraphs()), self)

    def __repr__(self) -> str:
        if self._package is None:
            return "<Document (not open)>"
        return f"<Document {self.path or '<in-memory>'}>"
