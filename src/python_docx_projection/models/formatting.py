"""
Enumerations shared by the projection types.

Each enum's value is the exact string stored in the XML, so ``member.value``
is the write form and ``from_xml`` the read form.
"""

from enum import Enum, IntFlag


class FormattingFlag(IntFlag):
    """Bit set of run formatting toggles passed to ``add_run``/``add_paragraph``.

    Example:
        >>> flags = FormattingFlag.BOLD | FormattingFlag.ITALIC
        >>> FormattingFlag.BOLD in flags
        True
    """

    NONE = 0
    BOLD = 1
    ITALIC = 2
    UNDERLINE = 4
    STRIKETHROUGH = 8
    SUPERSCRIPT = 16
    SUBSCRIPT = 32
    SMALLCAPS = 64
    SHADOW = 128


class Alignment(Enum):
    """Paragraph justification (``w:jc``)."""

    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"
    BOTH = "both"

    @classmethod
    def from_xml(cls, value: str | None) -> "Alignment":
        """Map a stored w:jc value back; absent or unknown values read as LEFT."""
        try:
            return cls(value)
        except ValueError:
            return cls.LEFT


class HighlightColor(Enum):
    """Named text highlight colors (``w:highlight``); NONE removes the highlight."""

    NONE = "none"
    BLACK = "black"
    BLUE = "blue"
    CYAN = "cyan"
    GREEN = "green"
    MAGENTA = "magenta"
    RED = "red"
    YELLOW = "yellow"
    WHITE = "white"
    DARK_BLUE = "darkBlue"
    DARK_CYAN = "darkCyan"
    DARK_GREEN = "darkGreen"
    DARK_MAGENTA = "darkMagenta"
    DARK_RED = "darkRed"
    DARK_YELLOW = "darkYellow"
    LIGHT_GRAY = "lightGray"

    @classmethod
    def from_xml(cls, value: str | None) -> "HighlightColor":
        try:
            return cls(value)
        except ValueError:
            return cls.NONE


class ListType(Enum):
    """List membership of a paragraph."""

    NONE = "none"
    BULLET = "bullet"
    NUMBER = "number"


class TableAlignment(Enum):
    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"


class VerticalAlignment(Enum):
    """Cell content vertical alignment (``w:vAlign``)."""

    TOP = "top"
    CENTER = "center"
    BOTTOM = "bottom"


class HeightRule(Enum):
    """How a row height is interpreted (``w:trHeight/@w:hRule``)."""

    AUTO = "auto"
    AT_LEAST = "atLeast"
    EXACT = "exact"


class WidthType(Enum):
    """Unit of a table or cell width (``w:type``)."""

    AUTO = "auto"
    DXA = "dxa"
    PCT = "pct"
    NIL = "nil"


class BorderStyle(Enum):
    """Line style of table, cell and text box borders."""

    NONE = "none"
    SINGLE = "single"
    DOUBLE = "double"
    DASHED = "dashed"
    DOTTED = "dotted"
    THICK = "thick"


class TextDirection(Enum):
    """Cell text flow (``w:textDirection``)."""

    LR_TB = "lrTb"
    TB_RL = "tbRl"
    BT_LR = "btLr"
    LR_TB_V = "lrTbV"
    TB_RL_V = "tbRlV"
    TB_LR_V = "tbLrV"


class RelativeFrom(Enum):
    """Reference frame of an anchored drawing's position."""

    PAGE = "page"
    MARGIN = "margin"
