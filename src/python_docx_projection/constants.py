"""
Namespaces, tag helpers and configuration constants.

Every module builds Clark-notation tag names through the helpers defined
here (``w("p")``, ``wp("inline")`` and so on) so that namespace URIs live in
exactly one place.
"""

# =============================================================================
# WordprocessingML Namespaces
# =============================================================================

# Main WordprocessingML namespace
WORD_NAMESPACE = "http://schemas.openxmlformats.org/wordprocessingml/2006/main"

# Office Document relationships (r:id, r:embed)
OFFICE_RELATIONSHIPS_NAMESPACE = (
    "http://schemas.openxmlformats.org/officeDocument/2006/relationships"
)

# XML namespace (xml:space)
XML_NAMESPACE = "http://www.w3.org/XML/1998/namespace"

# Markup Compatibility namespace
MC_NAMESPACE = "http://schemas.openxmlformats.org/markup-compatibility/2006"


# =============================================================================
# DrawingML Namespaces
# =============================================================================

A_NAMESPACE = "http://schemas.openxmlformats.org/drawingml/2006/main"
PIC_NAMESPACE = "http://schemas.openxmlformats.org/drawingml/2006/picture"
WP_NAMESPACE = "http://schemas.openxmlformats.org/drawingml/2006/wordprocessingDrawing"

# Word 2010 shapes (text boxes)
WPS_NAMESPACE = "http://schemas.microsoft.com/office/word/2010/wordprocessingShape"


# =============================================================================
# Package Namespaces
# =============================================================================

PACKAGE_RELATIONSHIPS_NAMESPACE = "http://schemas.openxmlformats.org/package/2006/relationships"
CONTENT_TYPES_NAMESPACE = "http://schemas.openxmlformats.org/package/2006/content-types"


# =============================================================================
# Namespace Maps
# =============================================================================

NSMAP = {"w": WORD_NAMESPACE}

# Used for the root of newly created document, header and footer parts
NSMAP_PART = {
    "w": WORD_NAMESPACE,
    "r": OFFICE_RELATIONSHIPS_NAMESPACE,
    "wp": WP_NAMESPACE,
    "a": A_NAMESPACE,
    "pic": PIC_NAMESPACE,
    "wps": WPS_NAMESPACE,
}

NSMAP_DRAWING = {
    "a": A_NAMESPACE,
    "pic": PIC_NAMESPACE,
    "wp": WP_NAMESPACE,
    "r": OFFICE_RELATIONSHIPS_NAMESPACE,
}


# =============================================================================
# Well-known Part Names
# =============================================================================

DOCUMENT_PART = "word/document.xml"
DOCUMENT_RELS_PART = "word/_rels/document.xml.rels"
CONTENT_TYPES_PART = "[Content_Types].xml"
STYLES_PART = "word/styles.xml"
SETTINGS_PART = "word/settings.xml"
NUMBERING_PART = "word/numbering.xml"


# =============================================================================
# Defaults and Limits
# =============================================================================

# Prefix of every relationship id handed out by the allocator
RELATIONSHIP_ID_PREFIX = "rId"

# Width of each w:gridCol created by add_table, in twips
DEFAULT_COLUMN_WIDTH_TWIPS = 2390

# Fallback pixel size when an image's dimensions cannot be read
DEFAULT_IMAGE_SIZE = (320, 240)

MAX_TABLE_ROWS = 1000
MAX_TABLE_COLS = 63
MAX_LIST_LEVEL = 8
MAX_OUTLINE_LEVEL = 8
MAX_TEXT_LENGTH = 1_000_000

# Upper bounds for table formatting, in points
MAX_CELL_WIDTH_PT = 1000
MAX_TABLE_WIDTH_PT = 2000
MAX_BORDER_WIDTH_PT = 20
MAX_ROW_HEIGHT_PT = 500

# Section page layout, in points
MAX_PAGE_SIZE_PT = 1584
MAX_SECTION_COLUMNS = 10
DEFAULT_COLUMN_SPACING_PT = 36
DEFAULT_PAGE_MARGINS_PT = {
    "top": 72,
    "right": 72,
    "bottom": 72,
    "left": 72,
    "header": 36,
    "footer": 36,
    "gutter": 0,
}

# Hyperlink run appearance
HYPERLINK_STYLE = "Hyperlink"
HYPERLINK_COLOR = "0563C1"

# numId values of the fixed two-list numbering scheme
BULLET_NUM_ID = 1
NUMBER_NUM_ID = 2


# =============================================================================
# Helper Functions
# =============================================================================


def w(tag: str) -> str:
    """Create a fully qualified Word namespace tag.

    Args:
        tag: Tag name without namespace prefix (e.g., "p", "r", "t")

    Returns:
        Fully qualified tag (e.g., "{http://...wordprocessingml/2006/main}p")

    Example:
        >>> w("p")
        '{http://schemas.openxmlformats.org/wordprocessingml/2006/main}p'
    """
    return f"{{{WORD_NAMESPACE}}}{tag}"


def r(tag: str) -> str:
    """Create a fully qualified Office Relationships namespace tag.

    Args:
        tag: Tag name without namespace prefix (e.g., "id", "embed")

    Returns:
        Fully qualified tag with relationship namespace
    """
    return f"{{{OFFICE_RELATIONSHIPS_NAMESPACE}}}{tag}"


def a(tag: str) -> str:
    """Create a fully qualified DrawingML main namespace tag."""
    return f"{{{A_NAMESPACE}}}{tag}"


def pic(tag: str) -> str:
    """Create a fully qualified DrawingML picture namespace tag."""
    return f"{{{PIC_NAMESPACE}}}{tag}"


def wp(tag: str) -> str:
    """Create a fully qualified Word Processing Drawing namespace tag.

    Args:
        tag: Tag name without namespace prefix (e.g., "inline", "extent")

    Returns:
        Fully qualified tag with WP drawing namespace
    """
    return f"{{{WP_NAMESPACE}}}{tag}"


def wps(tag: str) -> str:
    """Create a fully qualified Word 2010 shape namespace tag."""
    return f"{{{WPS_NAMESPACE}}}{tag}"


def xml(tag: str) -> str:
    """Create a fully qualified XML namespace attribute name (e.g. xml:space)."""
    return f"{{{XML_NAMESPACE}}}{tag}"
