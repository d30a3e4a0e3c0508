"""
Style model classes.

A Style is a read-only description of one ``w:style`` definition in
word/styles.xml. The projection layer only needs its identifier, name and
type in order to decide whether it can be applied to a paragraph or a run.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class StyleType(Enum):
    """Types of styles in Word documents.

    Attributes:
        PARAGRAPH: Applied to whole paragraphs
        CHARACTER: Applied to runs of text within paragraphs
        TABLE: Applied to tables
        NUMBERING: Applied to numbered/bulleted lists
        MIXED: A paragraph style linked to a character style; usable in
            both paragraph and run style slots
    """

    PARAGRAPH = "paragraph"
    CHARACTER = "character"
    TABLE = "table"
    NUMBERING = "numbering"
    MIXED = "mixed"

    @property
    def applies_to_paragraph(self) -> bool:
        return self in (StyleType.PARAGRAPH, StyleType.MIXED)

    @property
    def applies_to_run(self) -> bool:
        return self in (StyleType.CHARACTER, StyleType.MIXED)

    @property
    def applies_to_table(self) -> bool:
        return self in (StyleType.TABLE, StyleType.MIXED)


@dataclass
class Style:
    """Represents a Word document style.

    Attributes:
        style_id: Identifier used in document references (e.g., "Heading1")
        name: Display name shown in Word's UI (e.g., "heading 1")
        style_type: Type of style
        based_on: style_id of the parent style
        linked_style: style_id of the linked style of the other kind
        is_default: Whether this is the default style of its type

    Example:
        >>> style = Style(style_id="Hyperlink", name="Hyperlink", style_type=StyleType.CHARACTER)
        >>> style.style_type.applies_to_paragraph
        False
    """

    style_id: str
    name: str
    style_type: StyleType
    based_on: str | None = None
    linked_style: str | None = None
    is_default: bool = False
    _element: Any = field(default=None, repr=False, compare=False)

    def __repr__(self) -> str:
        """String representation of the style."""
        return f"<Style style_id={self.style_id!r} name={self.name!r} type={self.style_type.value}>"
