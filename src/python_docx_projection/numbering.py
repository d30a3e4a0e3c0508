"""
NumberingDefinitions: read access to word/numbering.xml.

Paragraphs only store a ``numId``/``ilvl`` pair. Whether that pair is a
bullet or a numbered list is decided by the level's ``w:numFmt`` inside the
abstract numbering definition the ``w:num`` points to.
"""

import logging

from lxml import etree

from .constants import NUMBERING_PART, w
from .content_types import ContentTypeManager, ContentTypes
from .package import DocxPackage
from .relationships import RelationshipManager, RelationshipTypes
from .templates import NUMBERING_XML
from .xml_utils import parse

logger = logging.getLogger(__name__)


class NumberingDefinitions:
    """Lookup of list formats by (numId, level).

    Example:
        >>> numbering = NumberingDefinitions(package)
        >>> numbering.format_for(1, 0)
        'bullet'
    """

    def __init__(self, package: DocxPackage) -> None:
        self._package = package
        self._root: etree._Element | None = None
        if package.has_entry(NUMBERING_PART):
            self._root = package.read_xml(NUMBERING_PART)

    @property
    def exists(self) -> bool:
        """Whether the document carries numbering definitions."""
        return self._root is not None

    def format_for(self, num_id: int, level: int = 0) -> str | None:
        """The ``w:numFmt`` value for a list level, or None if it cannot be resolved."""
        if self._root is None:
            return None

        abstract_id = None
        for num in self._root.findall(w("num")):
            if num.get(w("numId")) == str(num_id):
                ref = num.find(w("abstractNumId"))
                abstract_id = ref.get(w("val")) if ref is not None else None
                break
        if abstract_id is None:
            return None

        for abstract in self._root.findall(w("abstractNum")):
            if abstract.get(w("abstractNumId")) != abstract_id:
                continue
            for lvl in abstract.findall(w("lvl")):
                if lvl.get(w("ilvl")) == str(level):
                    fmt = lvl.find(w("numFmt"))
                    return fmt.get(w("val")) if fmt is not None else None
        return None

    def ensure_part(
        self, relationships: RelationshipManager, content_types: ContentTypeManager
    ) -> bool:
        """Add the default two-list numbering part if the document has none.

        Returns:
            True if the part was created
        """
        if self._root is not None:
            return False
        self._root = parse(NUMBERING_XML, part_name=NUMBERING_PART)
        self._package.write_xml(NUMBERING_PART, self._root)
        relationships.get_or_add_relationship(RelationshipTypes.NUMBERING, "numbering.xml")
        content_types.add_override(f"/{NUMBERING_PART}", ContentTypes.NUMBERING)
        logger.debug("Added default numbering definitions")
        return True
