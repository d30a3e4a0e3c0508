"""
Small XML helpers shared by every projection type.

All formatting setters go through ``get_or_create_child`` and
``set_attribute`` so that calling a setter twice updates one node instead of
appending a duplicate sibling.
"""

from lxml import etree

from .constants import MAX_TEXT_LENGTH, w, xml
from .errors import InvalidArgumentError, ResourceLimitError, XmlManipulationError

# Single-byte whitespace only; never classify multi-byte characters.
ASCII_WHITESPACE = frozenset(" \t\n\r\x0b\x0c")

# Style references come first in w:pPr, w:rPr and w:tblPr.
STYLE_REFERENCE_TAGS = frozenset({w("pStyle"), w("rStyle"), w("tblStyle")})


def find_child(parent: etree._Element | None, tag: str) -> etree._Element | None:
    """Return the first direct child of ``parent`` with ``tag``, or None."""
    if parent is None:
        return None
    return parent.find(tag)


def get_or_create_child(parent: etree._Element, tag: str) -> etree._Element:
    """Get the first child with ``tag``, creating it at the front if absent.

    OOXML requires property elements (w:pPr, w:rPr, w:tblPr, ...) to precede
    content elements, so a new child is inserted at position 0, or just
    after a leading style reference (w:pStyle, w:rStyle, w:tblStyle) so that
    reference stays first. Other property children end up in reverse order
    of creation rather than schema order.

    Args:
        parent: Element to search
        tag: Fully qualified tag of the wanted child

    Returns:
        The existing or newly created child
    """
    if parent is None:
        raise XmlManipulationError(
            "Cannot create a child of a missing node",
            code="missing_parent",
            context={"tag": tag},
        )
    child = parent.find(tag)
    if child is None:
        child = etree.Element(tag)
        keep_first = (
            tag not in STYLE_REFERENCE_TAGS
            and len(parent)
            and parent[0].tag in STYLE_REFERENCE_TAGS
        )
        parent.insert(1 if keep_first else 0, child)
    return child


def insert_before_first(
    parent: etree._Element, child: etree._Element, names: tuple[str, ...]
) -> None:
    """Insert ``child`` before the first child whose local name is in ``names``, else append."""
    for existing in parent:
        if isinstance(existing.tag, str) and etree.QName(existing).localname in names:
            existing.addprevious(child)
            return
    parent.append(child)


def remove_child(parent: etree._Element | None, tag: str) -> bool:
    """Remove every direct child with ``tag``.

    Returns:
        True if anything was removed
    """
    if parent is None:
        return False
    removed = False
    for child in parent.findall(tag):
        parent.remove(child)
        removed = True
    return removed


def set_attribute(element: etree._Element, name: str, value: str | int) -> None:
    """Set (or overwrite) an attribute; ``name`` is a bare w: attribute name or a Clark name."""
    key = name if name.startswith("{") else w(name)
    element.set(key, str(value))


def get_attribute(element: etree._Element | None, name: str) -> str | None:
    """Read a w: attribute (or a Clark-named one) from ``element``, tolerating None."""
    if element is None:
        return None
    key = name if name.startswith("{") else w(name)
    return element.get(key)


def set_property(
    parent: etree._Element, tag: str, value: str | int | None = None
) -> etree._Element:
    """Get-or-create ``tag`` under ``parent`` and optionally set its w:val."""
    child = get_or_create_child(parent, tag)
    if value is not None:
        set_attribute(child, "val", value)
    return child


def get_int_attribute(element: etree._Element | None, name: str, default: int = 0) -> int:
    """Read an integer attribute, returning ``default`` when absent or malformed."""
    value = get_attribute(element, name)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def needs_space_preserve(text: str) -> bool:
    """Whether ``text`` starts or ends with ASCII whitespace.

    Example:
        >>> needs_space_preserve(" padded")
        True
        >>> needs_space_preserve("tight")
        False
    """
    if not text:
        return False
    return text[0] in ASCII_WHITESPACE or text[-1] in ASCII_WHITESPACE


def set_text(t_element: etree._Element, text: str) -> None:
    """Write ``text`` into a w:t element, toggling xml:space as needed."""
    t_element.text = text
    if needs_space_preserve(text):
        t_element.set(xml("space"), "preserve")
    elif xml("space") in t_element.attrib:
        del t_element.attrib[xml("space")]


def serialize(element: etree._Element) -> bytes:
    """Serialize the tree that owns ``element`` as a standalone UTF-8 XML part."""
    return etree.tostring(
        element.getroottree(),
        xml_declaration=True,
        encoding="UTF-8",
        standalone=True,
    )


def parse(data: bytes | str, part_name: str = "") -> etree._Element:
    """Parse XML bytes into a root element.

    Raises:
        XmlManipulationError: If the bytes are not well-formed XML
    """
    if isinstance(data, str):
        data = data.encode("utf-8")
    parser = etree.XMLParser(remove_blank_text=False)
    try:
        return etree.fromstring(data, parser)
    except etree.XMLSyntaxError as e:
        raise XmlManipulationError(
            f"Failed to parse XML part: {e}",
            code="parse_failed",
            context={"part": part_name},
        ) from e


def normalize_hex_color(value: str, allow_auto: bool = False) -> str:
    """Validate an RRGGBB color (optionally "#"-prefixed) and return it upper-cased.

    Raises:
        InvalidArgumentError: If the value is not six hex digits
    """
    if allow_auto and value == "auto":
        return value
    color = value[1:] if value.startswith("#") else value
    if len(color) != 6 or any(ch not in "0123456789abcdefABCDEF" for ch in color):
        raise InvalidArgumentError(
            f"Invalid hex color: {value!r}",
            code="invalid_color",
            context={"color": value},
        )
    return color.upper()


def check_text_length(text: str) -> None:
    """Reject text longer than MAX_TEXT_LENGTH characters."""
    if len(text) > MAX_TEXT_LENGTH:
        raise ResourceLimitError(
            "Text exceeds the maximum length",
            code="text_too_long",
            context={"length": len(text), "max_length": MAX_TEXT_LENGTH},
        )
