"""
python_docx_projection - Build and edit Word documents through live XML projections.

Paragraphs, runs, tables, headers and footers are thin views over the
document's XML: reading a property reads the underlying element and setting
one writes it immediately.

Example:
    >>> from python_docx_projection import Document, FormattingFlag
    >>> doc = Document.create("report.docx")
    >>> doc.body.add_paragraph("Hello", FormattingFlag.BOLD)
    >>> table = doc.body.add_table(2, 3)
    >>> table.get_cell(0, 0).set_text("Quarter")
    >>> doc.save()
"""

__version__ = "0.1.0"
__all__ = [
    "Document",
    "DocxPackage",
    "IdAllocator",
    "StyleManager",
    "BatchBuilder",
    "BuildResult",
    "HyperlinkInfo",
    # Errors
    "DocxProjectionError",
    "ErrorCategory",
    "InvalidArgumentError",
    "NotFoundError",
    "IncompatibleTypeError",
    "ResourceLimitError",
    "IOFailureError",
    "XmlManipulationError",
    # Projections
    "ElementRange",
    "Body",
    "Run",
    "Paragraph",
    "Table",
    "TableRow",
    "TableCell",
    "Header",
    "Footer",
    "HeaderFooterType",
    "Image",
    "TextBox",
    "Section",
    "OutlineEntry",
    "PageMargins",
    "Style",
    "StyleType",
    # Enumerations
    "Alignment",
    "BorderStyle",
    "FormattingFlag",
    "HeightRule",
    "HighlightColor",
    "ListType",
    "Orientation",
    "PageNumberFormat",
    "PageSize",
    "RelativeFrom",
    "SectionStart",
    "TableAlignment",
    "TextDirection",
    "VerticalAlignment",
    "WidthType",
]

# Import id allocation
from .allocator import IdAllocator

# Import document class
from .document import Document
from .errors import (
    DocxProjectionError,
    ErrorCategory,
    IncompatibleTypeError,
    InvalidArgumentError,
    IOFailureError,
    NotFoundError,
    ResourceLimitError,
    XmlManipulationError,
)

# Import model classes
from .models import (
    Alignment,
    Body,
    BorderStyle,
    ElementRange,
    Footer,
    FormattingFlag,
    Header,
    HeaderFooterType,
    HeightRule,
    HighlightColor,
    Image,
    ListType,
    Orientation,
    OutlineEntry,
    PageMargins,
    PageNumberFormat,
    PageSize,
    Paragraph,
    RelativeFrom,
    Run,
    Section,
    SectionStart,
    Style,
    StyleType,
    Table,
    TableAlignment,
    TableCell,
    TableRow,
    TextBox,
    TextDirection,
    VerticalAlignment,
    WidthType,
)

# Import batch building
from .operations import BatchBuilder, HyperlinkInfo

# Import package class
from .package import DocxPackage

# Import result types
from .results import BuildResult
from .styles import StyleManager
