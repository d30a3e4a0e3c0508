"""
Result classes for batch building.

A batch run never raises for a single failing operation; each operation
yields a BuildResult that records what happened.
"""

from dataclasses import dataclass

from .errors import DocxProjectionError


@dataclass
class BuildResult:
    """Result of applying a single build operation.

    Attributes:
        success: Whether the operation was applied
        op_type: Type of operation (e.g., "paragraph", "table", "header")
        message: Human-readable message about the result
        error: The exception that stopped the operation, if any
    """

    success: bool
    op_type: str
    message: str
    error: DocxProjectionError | None = None

    @property
    def code(self) -> str | None:
        """Machine-readable error code of a failed operation."""
        return self.error.code if self.error is not None else None

    def __str__(self) -> str:
        """Get string representation of the result."""
        status = "✓" if self.success else "✗"
        return f"{status} {self.op_type}: {self.message}"
