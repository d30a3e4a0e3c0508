"""
StyleManager class for reading and extending word/styles.xml.

The manager answers one question for the projection layer: given a style
name, what kind of style is it? Paragraph and run style setters use the
answer to reject incompatible styles before touching the document.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from typing import TYPE_CHECKING

from lxml import etree

from .constants import NSMAP, STYLES_PART, w
from .errors import InvalidArgumentError, NotFoundError
from .models.style import Style, StyleType

if TYPE_CHECKING:
    from .package import DocxPackage

logger = logging.getLogger(__name__)


class StyleManager:
    """Manages word/styles.xml.

    Example:
        >>> style_mgr = StyleManager(package)
        >>> style_mgr.get_style("Heading1").style_type
        <StyleType.PARAGRAPH: 'paragraph'>
    """

    def __init__(self, package: DocxPackage) -> None:
        """Initialize a StyleManager and parse the styles part.

        Args:
            package: The package containing word/styles.xml
        """
        self._package = package
        self._root: etree._Element | None = None
        self._styles: dict[str, Style] = {}
        self._modified = False

        self._load()

    def _load(self) -> None:
        """Load styles.xml, or start from an empty w:styles root when absent."""
        if self._package.has_entry(STYLES_PART):
            self._root = self._package.read_xml(STYLES_PART)
            logger.debug("Loaded styles part")
        else:
            self._root = etree.Element(w("styles"), nsmap=NSMAP)
            self._modified = True
            logger.debug("Created empty styles part")

        self._parse_styles()

    def _parse_styles(self) -> None:
        """Parse every w:style element into a Style, keyed by style id."""
        assert self._root is not None
        self._styles.clear()

        elements = self._root.findall(w("style"))
        raw_types = {
            element.get(w("styleId")): element.get(w("type"), "paragraph") for element in elements
        }
        for element in elements:
            style = self._element_to_style(element, raw_types)
            if style is not None:
                self._styles[style.style_id] = style

    def _element_to_style(
        self, element: etree._Element, raw_types: dict[str | None, str]
    ) -> Style | None:
        """Convert a w:style element to a Style.

        A paragraph style linked to a character style is reported as MIXED.
        """
        style_id = element.get(w("styleId"))
        if not style_id:
            logger.warning("Skipping style element without styleId attribute")
            return None

        type_str = element.get(w("type"), "paragraph")
        try:
            style_type = StyleType(type_str)
        except ValueError:
            logger.warning(f"Unknown style type '{type_str}' for {style_id}")
            style_type = StyleType.PARAGRAPH

        name_elem = element.find(w("name"))
        name = name_elem.get(w("val"), style_id) if name_elem is not None else style_id

        based_on_elem = element.find(w("basedOn"))
        based_on = based_on_elem.get(w("val")) if based_on_elem is not None else None

        link_elem = element.find(w("link"))
        linked_style = link_elem.get(w("val")) if link_elem is not None else None

        if (
            style_type is StyleType.PARAGRAPH
            and linked_style is not None
            and raw_types.get(linked_style) == StyleType.CHARACTER.value
        ):
            style_type = StyleType.MIXED

        return Style(
            style_id=style_id,
            name=name,
            style_type=style_type,
            based_on=based_on,
            linked_style=linked_style,
            is_default=element.get(w("default")) in ("1", "true"),
            _element=element,
        )

    def get(self, style_id: str) -> Style | None:
        """Get a style by its id, or None."""
        return self._styles.get(style_id)

    def get_by_name(self, name: str) -> Style | None:
        """Get a style by display name (case-insensitive), or None."""
        name_lower = name.lower()
        for style in self._styles.values():
            if style.name.lower() == name_lower:
                return style
        return None

    def get_style(self, name: str) -> Style:
        """Look up a style by id first, then by display name.

        Raises:
            NotFoundError: If no style matches
        """
        style = self.get(name) or self.get_by_name(name)
        if style is None:
            raise NotFoundError(
                f"Style '{name}' not found",
                code="style_not_found",
                context={"style": name},
            )
        return style

    def add_style(
        self,
        style_id: str,
        style_type: StyleType,
        name: str | None = None,
        based_on: str | None = None,
        linked_style: str | None = None,
    ) -> Style:
        """Append a new style definition.

        MIXED styles are written as paragraph styles with a w:link to
        ``linked_style``.

        Raises:
            InvalidArgumentError: If the id is empty or already defined
        """
        if not style_id:
            raise InvalidArgumentError("Style id must not be empty", code="empty_style_id")
        if style_id in self._styles:
            raise InvalidArgumentError(
                f"Style '{style_id}' already exists",
                code="duplicate_style",
                context={"style": style_id},
            )
        assert self._root is not None

        xml_type = StyleType.PARAGRAPH if style_type is StyleType.MIXED else style_type
        element = etree.SubElement(self._root, w("style"))
        element.set(w("type"), xml_type.value)
        element.set(w("styleId"), style_id)
        etree.SubElement(element, w("name")).set(w("val"), name or style_id)
        if based_on:
            etree.SubElement(element, w("basedOn")).set(w("val"), based_on)
        if linked_style:
            etree.SubElement(element, w("link")).set(w("val"), linked_style)

        style = Style(
            style_id=style_id,
            name=name or style_id,
            style_type=style_type,
            based_on=based_on,
            linked_style=linked_style,
            _element=element,
        )
        self._styles[style_id] = style
        self._modified = True
        logger.debug(f"Added {style_type.value} style: {style_id}")
        return style

    def list(self, style_type: StyleType | None = None) -> list[Style]:
        """List styles, optionally filtered by type."""
        if style_type is None:
            return list(self._styles.values())
        return [s for s in self._styles.values() if s.style_type is style_type]

    def __contains__(self, style_id: str) -> bool:
        return style_id in self._styles

    def __iter__(self) -> Iterator[Style]:
        return iter(self._styles.values())

    def __len__(self) -> int:
        return len(self._styles)

    @property
    def is_modified(self) -> bool:
        return self._modified

    def save(self) -> None:
        """Write styles.xml back into the package if it changed."""
        if not self._modified or self._root is None:
            return
        self._package.write_xml(STYLES_PART, self._root)
        self._modified = False
        logger.debug("Saved styles part")
