"""
IdAllocator: the per-document source of relationship and drawing ids.

A Document owns exactly one allocator and hands it to every manager that
registers relationships or embeds drawings, so ids can never collide
between managers. Counters only move forward; an id is consumed the moment
it is handed out, even if the caller later fails to use it.

Not thread-safe: callers that share a Document across threads must
synchronize externally.
"""

import logging
import re

from lxml import etree

from .constants import PACKAGE_RELATIONSHIPS_NAMESPACE, RELATIONSHIP_ID_PREFIX

logger = logging.getLogger(__name__)

_RID_PATTERN = re.compile(rf"^{RELATIONSHIP_ID_PREFIX}(\d+)$")


class IdAllocator:
    """Monotonic counters for relationship ids (``rIdN``) and docPr ids.

    Example:
        >>> allocator = IdAllocator(next_relationship_id=5)
        >>> allocator.allocate_relationship_id()
        'rId5'
        >>> allocator.allocate_relationship_id()
        'rId6'
    """

    def __init__(self, next_relationship_id: int = 1, next_drawing_id: int = 1) -> None:
        self._next_relationship_id = max(1, next_relationship_id)
        self._next_drawing_id = max(1, next_drawing_id)

    @classmethod
    def from_parts(
        cls,
        rels_root: etree._Element | None,
        content_roots: list[etree._Element] | tuple[etree._Element, ...] = (),
    ) -> "IdAllocator":
        """Seed counters one past the largest ids already present.

        Args:
            rels_root: Root of the document's relationships part
            content_roots: Content trees to scan for drawing ids (document,
                headers, footers)
        """
        return cls(
            next_relationship_id=max_relationship_number(rels_root) + 1,
            next_drawing_id=max_drawing_id(content_roots) + 1,
        )

    @property
    def next_relationship_number(self) -> int:
        """The number the next relationship id will carry."""
        return self._next_relationship_id

    @property
    def next_drawing_id(self) -> int:
        """The next drawing id that will be handed out."""
        return self._next_drawing_id

    def allocate_relationship_id(self) -> str:
        """Return a never-before-returned relationship id such as ``rId7``."""
        number = self._next_relationship_id
        self._next_relationship_id += 1
        rel_id = f"{RELATIONSHIP_ID_PREFIX}{number}"
        logger.debug(f"Allocated relationship id {rel_id}")
        return rel_id

    def allocate_drawing_id(self) -> int:
        """Return a never-before-returned drawing (docPr) id."""
        drawing_id = self._next_drawing_id
        self._next_drawing_id += 1
        logger.debug(f"Allocated drawing id {drawing_id}")
        return drawing_id

    def reserve_relationship_number(self, number: int) -> None:
        """Make sure later relationship ids are greater than ``number``."""
        if number >= self._next_relationship_id:
            self._next_relationship_id = number + 1

    def reserve_drawing_id(self, drawing_id: int) -> None:
        """Make sure later drawing ids are greater than ``drawing_id``."""
        if drawing_id >= self._next_drawing_id:
            self._next_drawing_id = drawing_id + 1

    def __repr__(self) -> str:
        return (
            f"<IdAllocator next_rel={RELATIONSHIP_ID_PREFIX}{self._next_relationship_id} "
            f"next_drawing={self._next_drawing_id}>"
        )


def max_relationship_number(rels_root: etree._Element | None) -> int:
    """Largest N among ``rIdN`` ids in a relationships part (0 if none)."""
    if rels_root is None:
        return 0
    highest = 0
    for rel in rels_root.iter(f"{{{PACKAGE_RELATIONSHIPS_NAMESPACE}}}Relationship"):
        match = _RID_PATTERN.match(rel.get("Id", ""))
        if match:
            highest = max(highest, int(match.group(1)))
    return highest


def max_drawing_id(roots: list[etree._Element] | tuple[etree._Element, ...]) -> int:
    """Largest ``id`` on any docPr or shape cNvPr element in ``roots`` (0 if none)."""
    highest = 0
    for root in roots:
        # Local-name match covers wp:docPr and wps:cNvPr alike
        for element in root.iter(etree.Element):
            local = etree.QName(element).localname
            if local not in ("docPr", "cNvPr"):
                continue
            try:
                highest = max(highest, int(element.get("id", "0")))
            except ValueError:
                continue
    return highest
