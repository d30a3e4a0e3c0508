"""
DocxPackage class for managing the Word document ZIP container.

This module keeps ZIP handling apart from XML manipulation: it reads every
entry of the archive into memory, tracks which entries were rewritten, and
on save copies untouched entries verbatim while writing the dirty ones.
"""

import io
import logging
import os
import tempfile
import zipfile
from pathlib import Path
from typing import BinaryIO

from lxml import etree

from .constants import DOCUMENT_PART
from .errors import InvalidArgumentError, IOFailureError, NotFoundError
from .templates import EMPTY_DOCUMENT_XML, new_package_entries
from .xml_utils import parse, serialize

logger = logging.getLogger(__name__)


class DocxPackage:
    """Manages the entries of a .docx ZIP archive.

    This class handles the low-level operations of:
    - Reading an existing archive (or creating a blank one)
    - Providing access to entries as bytes or parsed XML
    - Tracking rewritten ("dirty") entries in memory
    - Rewriting the archive through a temporary file and an atomic rename

    Example:
        >>> pkg = DocxPackage.open("document.docx")
        >>> root = pkg.read_xml("word/document.xml")
        >>> # Modify root...
        >>> pkg.write_xml("word/document.xml", root)
        >>> pkg.save()
    """

    def __init__(self, path: Path | None = None) -> None:
        """Initialize an empty package.

        Use the class methods `open()`, `create()` or `from_bytes()` instead of
        calling this constructor directly.

        Args:
            path: File the package is saved to by default
        """
        self._path = path
        self._entries: dict[str, bytes] = {}
        self._dirty: dict[str, bytes] = {}

    @classmethod
    def open(cls, source: str | Path | BinaryIO) -> "DocxPackage":
        """Open a package from a file path or file-like object.

        Args:
            source: Path to .docx file or file-like object containing it

        Returns:
            DocxPackage holding every entry of the archive

        Raises:
            InvalidArgumentError: If the path is empty
            IOFailureError: If the file is missing or not a valid ZIP archive
        """
        path: Path | None = None
        if isinstance(source, str | Path):
            if not str(source):
                raise InvalidArgumentError("Document path must not be empty", code="empty_path")
            path = Path(source)
            if not path.exists():
                raise IOFailureError(
                    f"Document not found: {path}", path=str(path), code="file_not_found"
                )
            zip_source: Path | BinaryIO = path
        else:
            zip_source = source

        if not zipfile.is_zipfile(zip_source):
            raise IOFailureError(
                "Source must be a valid .docx (ZIP) file",
                path=str(path) if path else None,
                code="not_a_zip",
            )

        if hasattr(zip_source, "seek"):
            zip_source.seek(0)

        package = cls(path)
        try:
            with zipfile.ZipFile(zip_source, "r") as zf:
                for info in zf.infolist():
                    if info.is_dir():
                        continue
                    package._entries[info.filename] = zf.read(info)
        except (zipfile.BadZipFile, OSError) as e:
            raise IOFailureError(
                f"Failed to read .docx archive: {e}",
                path=str(path) if path else None,
                code="read_failed",
            ) from e

        logger.debug(f"Opened package with {len(package._entries)} entries")
        return package

    @classmethod
    def from_bytes(cls, data: bytes) -> "DocxPackage":
        """Open a package from the bytes of a .docx file."""
        return cls.open(io.BytesIO(data))

    @classmethod
    def create(
        cls, path: str | Path | None = None, creator: str = "python-docx-projection"
    ) -> "DocxPackage":
        """Create a blank document package.

        When a path is given the new archive is written there immediately.

        Args:
            path: Where to write the new document (optional)
            creator: Author recorded in docProps/core.xml

        Returns:
            DocxPackage with the parts of an empty document marked dirty
        """
        if path is not None and not str(path):
            raise InvalidArgumentError("Document path must not be empty", code="empty_path")
        package = cls(Path(path) if path is not None else None)
        for name, content in new_package_entries(creator).items():
            package.write_entry(name, content)
        if package._path is not None:
            package.save()
        return package

    @property
    def path(self) -> Path | None:
        """Get the file this package saves to by default."""
        return self._path

    def entry_names(self) -> list[str]:
        """List every entry name, original entries first."""
        names = list(self._entries)
        names.extend(name for name in self._dirty if name not in self._entries)
        return names

    def has_entry(self, name: str) -> bool:
        """Check whether the archive (or the pending writes) contain ``name``."""
        return name in self._dirty or name in self._entries

    def read_entry(self, name: str) -> bytes:
        """Read the current bytes of an entry.

        A missing main document part yields an empty-document template.

        Raises:
            NotFoundError: If the entry does not exist
        """
        if name in self._dirty:
            return self._dirty[name]
        if name in self._entries:
            return self._entries[name]
        if name == DOCUMENT_PART:
            return EMPTY_DOCUMENT_XML.encode("utf-8")
        raise NotFoundError(f"Archive entry not found: {name}", code="missing_entry")

    def read_xml(self, name: str) -> etree._Element:
        """Read an entry and parse it as XML."""
        return parse(self.read_entry(name), part_name=name)

    def write_entry(self, name: str, content: bytes | str) -> None:
        """Replace (or add) an entry; nothing touches disk until save()."""
        if isinstance(content, str):
            content = content.encode("utf-8")
        self._dirty[name] = content

    def write_xml(self, name: str, element: etree._Element) -> None:
        """Serialize an XML tree into an entry."""
        self.write_entry(name, serialize(element))

    def is_dirty(self, name: str) -> bool:
        """Whether ``name`` has pending changes."""
        return name in self._dirty

    def _write_zip(self, target: BinaryIO) -> None:
        with zipfile.ZipFile(target, "w", zipfile.ZIP_DEFLATED) as zf:
            for name in self.entry_names():
                zf.writestr(name, self.read_entry(name))

    def save(self, path: str | Path | None = None) -> Path:
        """Rewrite the archive.

        The new archive is written to a temporary file in the destination
        directory and then renamed over the destination.

        Args:
            path: Destination (defaults to the path the package was opened from)

        Returns:
            Path that was written

        Raises:
            InvalidArgumentError: If there is no destination
            IOFailureError: If writing fails
        """
        target = Path(path) if path is not None else self._path
        if target is None or not str(target):
            raise InvalidArgumentError("No output path given for save", code="empty_path")

        target.parent.mkdir(parents=True, exist_ok=True)
        fd, temp_name = tempfile.mkstemp(prefix=".docx_", suffix=".tmp", dir=target.parent)
        try:
            with os.fdopen(fd, "wb") as temp_file:
                self._write_zip(temp_file)
            os.replace(temp_name, target)
        except OSError as e:
            if os.path.exists(temp_name):
                os.unlink(temp_name)
            raise IOFailureError(
                f"Failed to save document: {e}", path=str(target), code="write_failed"
            ) from e

        # The written archive is the new baseline
        self._entries = {name: self.read_entry(name) for name in self.entry_names()}
        self._dirty.clear()
        if self._path is None:
            self._path = target
        logger.debug(f"Saved package to {target}")
        return target

    def save_to_bytes(self) -> bytes:
        """Serialize the archive (including pending writes) to bytes."""
        buffer = io.BytesIO()
        self._write_zip(buffer)
        return buffer.getvalue()
