"""
Projection classes for python_docx_projection.

These classes are live views over OOXML elements: they own no data and read
and write the underlying lxml nodes directly.
"""

from python_docx_projection.models.base import DocxElement, ElementRange
from python_docx_projection.models.body import Body
from python_docx_projection.models.drawing import Image, TextBox
from python_docx_projection.models.formatting import (
    Alignment,
    BorderStyle,
    FormattingFlag,
    HeightRule,
    HighlightColor,
    ListType,
    RelativeFrom,
    TableAlignment,
    TextDirection,
    VerticalAlignment,
    WidthType,
)
from python_docx_projection.models.header_footer import Footer, Header, HeaderFooterType
from python_docx_projection.models.paragraph import Paragraph
from python_docx_projection.models.run import Run
from python_docx_projection.models.section import (
    Orientation,
    OutlineEntry,
    PageMargins,
    PageNumberFormat,
    PageSize,
    Section,
    SectionStart,
)
from python_docx_projection.models.style import Style, StyleType
from python_docx_projection.models.table import Table, TableCell, TableRow

__all__ = [
    "DocxElement",
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
    "Style",
    "Section",
    "OutlineEntry",
    "PageMargins",
    "Orientation",
    "PageNumberFormat",
    "PageSize",
    "SectionStart",
    "StyleType",
    "Alignment",
    "BorderStyle",
    "FormattingFlag",
    "HeightRule",
    "HighlightColor",
    "ListType",
    "RelativeFrom",
    "TableAlignment",
    "TextDirection",
    "VerticalAlignment",
    "WidthType",
]
