"""
Operations package for Document manipulation.

Managers that register package resources (media, hyperlinks, header and
footer parts) share the Document's IdAllocator; BatchBuilder applies lists
of build operations on top of them.
"""

from .batch import BatchBuilder
from .header_footer import HeaderFooterManager
from .hyperlinks import HyperlinkInfo, HyperlinkManager
from .media import MediaManager

__all__ = [
    "BatchBuilder",
    "HeaderFooterManager",
    "HyperlinkInfo",
    "HyperlinkManager",
    "MediaManager",
]
