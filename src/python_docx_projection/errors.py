"""
Custom exception classes for python_docx_projection package.

Every fallible operation raises one member of a single exception family.
Each exception carries a category, a short machine-readable code, a
human-readable message and an optional context dictionary describing the
values involved, so callers can either catch broadly on
``DocxProjectionError`` or narrowly on a specific subclass.
"""

from enum import Enum
from typing import Any


class ErrorCategory(Enum):
    """Broad classification of a failure."""

    INVALID_ARGUMENT = "invalid_argument"
    NOT_FOUND = "not_found"
    INCOMPATIBLE_TYPE = "incompatible_type"
    RESOURCE_LIMIT = "resource_limit"
    IO_FAILURE = "io_failure"
    XML_MANIPULATION = "xml_manipulation"


class DocxProjectionError(Exception):
    """Base exception for all python_docx_projection errors.

    Attributes:
        message: Human-readable description of the failure
        code: Short snake_case identifier (e.g. "negative_dimension")
        context: Structured details about the values involved
    """

    category: ErrorCategory = ErrorCategory.INVALID_ARGUMENT

    def __init__(
        self,
        message: str,
        code: str | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        self.message = message
        self.code = code or self.category.value
        self.context = context or {}
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the message followed by any context values."""
        if not self.context:
            return self.message
        details = ", ".join(f"{key}={value!r}" for key, value in self.context.items())
        return f"{self.message} ({details})"


class InvalidArgumentError(DocxProjectionError, ValueError):
    """Raised when a caller passes a value outside the accepted domain.

    Examples are an empty path, a negative table dimension, a malformed hex
    color or an unsupported enumeration string.
    """

    category = ErrorCategory.INVALID_ARGUMENT


class NotFoundError(DocxProjectionError):
    """Raised when a named style, archive entry or file does not exist."""

    category = ErrorCategory.NOT_FOUND


class IncompatibleTypeError(DocxProjectionError):
    """Raised when a style is applied to an element of the wrong kind.

    Attributes:
        style_name: Name of the style that was rejected
        style_type: The type of that style (e.g. "character")
        target: What it was applied to (e.g. "paragraph")
    """

    category = ErrorCategory.INCOMPATIBLE_TYPE

    def __init__(self, style_name: str, style_type: str, target: str) -> None:
        self.style_name = style_name
        self.style_type = style_type
        self.target = target
        super().__init__(
            f"Style '{style_name}' of type '{style_type}' cannot be applied to a {target}",
            code="style_type_mismatch",
            context={"style": style_name, "style_type": style_type, "target": target},
        )


class ResourceLimitError(DocxProjectionError, ValueError):
    """Raised when a request exceeds a configured cap (table size, text length)."""

    category = ErrorCategory.RESOURCE_LIMIT


class IOFailureError(DocxProjectionError):
    """Raised when the archive cannot be read or written.

    Attributes:
        path: The file involved, if any
    """

    category = ErrorCategory.IO_FAILURE

    def __init__(
        self,
        message: str,
        path: str | None = None,
        code: str | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        self.path = path
        merged = dict(context or {})
        if path is not None:
            merged.setdefault("path", path)
        super().__init__(message, code=code, context=merged)


class XmlManipulationError(DocxProjectionError):
    """Raised when an expected structural node is missing or a part cannot be parsed."""

    category = ErrorCategory.XML_MANIPULATION
