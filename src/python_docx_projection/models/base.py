"""
Base projection type and the range used to iterate sibling projections.

A projection never owns XML. It remembers a container node (``parent_node``)
and the child it currently stands for (``current_node``); all reads and
writes go straight to that node. ``current_node is None`` means the
projection is past-the-end, and every query on it returns a default value.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Generic, TypeVar

from lxml import etree

from ..errors import InvalidArgumentError

if TYPE_CHECKING:
    from ..document import Document
    from ..styles import StyleManager

E = TypeVar("E", bound="DocxElement")


class DocxElement:
    """Abstract base of Run, Paragraph, TableCell, TableRow and Table.

    Subclasses set ``TAG`` to the fully qualified tag they project.

    Attributes:
        parent_node: The container the projection iterates within
        current_node: The node currently projected, or None
    """

    TAG: str = ""

    def __init__(
        self,
        parent_node: etree._Element | None = None,
        current_node: etree._Element | None = None,
        document: Document | None = None,
    ) -> None:
        if current_node is not None:
            if current_node.tag != self.TAG:
                raise InvalidArgumentError(
                    f"Expected {etree.QName(self.TAG).localname} element, "
                    f"got {etree.QName(current_node).localname}",
                    code="unexpected_tag",
                )
            if parent_node is None:
                parent_node = current_node.getparent()
            elif current_node.getparent() is not parent_node:
                raise InvalidArgumentError(
                    "Node is not a child of the given parent", code="parent_mismatch"
                )
        self._parent = parent_node
        self._current = current_node
        self._document = document

    @classmethod
    def first_in(
        cls: type[E], container: etree._Element | None, document: Document | None = None
    ) -> E:
        """Projection anchored at the first ``TAG`` child of ``container``."""
        element = cls(None, None, document)
        element.set_parent(container)
        return element

    @property
    def parent_node(self) -> etree._Element | None:
        return self._parent

    @property
    def current_node(self) -> etree._Element | None:
        return self._current

    @property
    def element(self) -> etree._Element | None:
        """Alias of ``current_node``."""
        return self._current

    @property
    def document(self) -> Document | None:
        return self._document

    @property
    def exists(self) -> bool:
        """Whether the projection currently refers to a node."""
        return self._current is not None

    def set_parent(self, container: etree._Element | None) -> None:
        """Re-anchor to the first ``TAG`` child of ``container`` (or to empty)."""
        self._parent = container
        self._current = container.find(self.TAG) if container is not None else None

    def set_current(self, node: etree._Element | None) -> None:
        """Point at ``node`` without re-deriving it from the parent."""
        if node is not None and node.tag != self.TAG:
            raise InvalidArgumentError(
                f"Expected {etree.QName(self.TAG).localname} element",
                code="unexpected_tag",
            )
        self._current = node

    def has_next(self) -> bool:
        """True while the projection refers to a node."""
        return self._current is not None

    def next(self: E) -> E:
        """Advance to the next sibling carrying the same tag (or to empty)."""
        if self._current is not None:
            self._current = next(self._current.itersiblings(self.TAG), None)
        return self

    def copy(self: E) -> E:
        """A new projection of the same node."""
        return type(self)(self._parent, self._current, self._document)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DocxElement):
            return NotImplemented
        return type(self) is type(other) and self._current is other._current

    def __hash__(self) -> int:
        return hash((type(self), id(self._current)))


class ElementIterator(Generic[E]):
    """Forward iterator over sibling projections.

    Two iterators are equal when they stand on the same node; both being
    exhausted counts as equal.
    """

    def __init__(self, cursor: E) -> None:
        self._cursor = cursor

    @property
    def position(self) -> etree._Element | None:
        return self._cursor.current_node

    def __iter__(self) -> ElementIterator[E]:
        return self

    def __next__(self) -> E:
        if self._cursor.current_node is None:
            raise StopIteration
        item = self._cursor.copy()
        self._cursor.next()
        return item

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ElementIterator):
            return NotImplemented
        return self.position is other.position


class ElementRange(Generic[E]):
    """Lazy sequence of projections of one kind within a container.

    The start node is looked up again every time the range is iterated, so
    a range obtained before a mutation still sees the new children. A
    single iterator is not protected against the container changing while
    it is being walked.

    Example:
        >>> for cell in row.cells():
        ...     print(cell.text)
    """

    def __init__(
        self,
        element_type: type[E],
        container: etree._Element | None,
        document: Document | None = None,
    ) -> None:
        self._type = element_type
        self._container = container
        self._document = document

    def __iter__(self) -> ElementIterator[E]:
        return ElementIterator(self._type.first_in(self._container, self._document))

    def end(self) -> ElementIterator[E]:
        """An exhausted iterator, equal to any iterator that has run off the end."""
        return ElementIterator(self._type(self._container, None, self._document))

    def first(self) -> E | None:
        """The first projection, or None for an empty container."""
        return next(iter(self), None)

    def __len__(self) -> int:
        return sum(1 for _ in self)

    def __bool__(self) -> bool:
        return self.first() is not None

    def __getitem__(self, index: int) -> E:
        items = list(self)
        return items[index]

    def __repr__(self) -> str:
        return f"<ElementRange of {self._type.__name__}: {len(self)} items>"


def style_catalog(element: DocxElement, styles: StyleManager | None) -> StyleManager:
    """Resolve the style catalog for a style setter.

    Raises:
        InvalidArgumentError: If neither ``styles`` nor a document is available
    """
    if styles is not None:
        return styles
    if element.document is not None:
        return element.document.styles
    raise InvalidArgumentError(
        "No style catalog available; pass styles= or use a projection from a Document",
        code="no_style_catalog",
    )


def require_document(element: DocxElement, operation: str) -> Document:
    """Return the element's Document or fail for operations that need one."""
    if element.document is None:
        raise InvalidArgumentError(
            f"{operation} needs a projection obtained from a Document",
            code="detached_element",
        )
    return element.document
