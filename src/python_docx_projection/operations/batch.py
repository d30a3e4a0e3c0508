"""
BatchBuilder class for building documents from operation lists.

Operations are plain dictionaries, typically loaded from a YAML or JSON
build file. Each one is applied independently and reported through a
BuildResult, so one bad operation does not abort the rest of the batch.
"""

from __future__ import annotations

import copy
import json
import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Any, TypeVar

import yaml
from lxml import etree

from ..constants import DEFAULT_COLUMN_SPACING_PT, MAX_LIST_LEVEL, w
from ..errors import (
    DocxProjectionError,
    IncompatibleTypeError,
    InvalidArgumentError,
    NotFoundError,
)
from ..images import resolve_display_size
from ..models.blocks import BlockContainer, validate_table_size
from ..models.formatting import Alignment, FormattingFlag, ListType
from ..models.header_footer import HeaderFooterType
from ..models.section import MARGIN_SIDES, Orientation, PageSize, Section, SectionStart
from ..results import BuildResult
from .media import check_image_file

if TYPE_CHECKING:
    from ..document import Document
    from ..models.paragraph import Paragraph

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=Enum)


def parse_enum(enum_cls: type[E], value: Any, field: str) -> E:
    """Look up an enum member by value, e.g. ``"center"`` -> Alignment.CENTER.

    Raises:
        InvalidArgumentError: If the value names no member
    """
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(str(member.value) for member in enum_cls)
        raise InvalidArgumentError(
            f"Invalid {field} '{value}' (expected one of: {allowed})",
            code="invalid_enum_value",
            context={field: value},
        ) from None


def parse_flags(names: Any) -> FormattingFlag:
    """Combine formatting flag names such as ``["bold", "italic"]``.

    A single string is accepted as a one-element list.

    Raises:
        InvalidArgumentError: If a name is not a FormattingFlag member
    """
    if names is None:
        return FormattingFlag.NONE
    if isinstance(names, str):
        names = [names]
    flags = FormattingFlag.NONE
    for name in names:
        try:
            flags |= FormattingFlag[str(name).upper()]
        except KeyError:
            raise InvalidArgumentError(
                f"Unknown formatting flag '{name}'",
                code="invalid_enum_value",
                context={"formatting": name},
            ) from None
    return flags


def require(op: dict[str, Any], key: str) -> Any:
    """Fetch a mandatory operation parameter.

    Raises:
        InvalidArgumentError: If the parameter is missing or empty
    """
    value = op.get(key)
    if value is None or value == "":
        raise InvalidArgumentError(
            f"Missing required parameter: '{key}'", code="missing_parameter", context={"key": key}
        )
    return value


def as_float(value: Any, key: str) -> float:
    """Convert a length parameter given in points."""
    try:
        return float(value)
    except (TypeError, ValueError):
        raise InvalidArgumentError(
            f"Parameter '{key}' must be a number", code="invalid_parameter", context={key: value}
        ) from None


def as_int(value: Any, key: str) -> int:
    """Convert a numeric parameter, rejecting values such as ``"wide"``."""
    try:
        return int(value)
    except (TypeError, ValueError):
        raise InvalidArgumentError(
            f"Parameter '{key}' must be an integer", code="invalid_parameter", context={key: value}
        ) from None


@dataclass
class _ParagraphOptions:
    """Parsed paragraph options of a paragraph, header or footer operation."""

    text: str
    flags: FormattingFlag
    style: str | None
    alignment: Alignment | None
    list_type: ListType | None
    level: int


class BatchBuilder:
    """Applies build operations to a Document.

    Supported operation types:
    - paragraph: text, formatting, style, alignment, list
    - table: rows, cols, cells, style
    - header / footer: text, formatting, page (default/first/even/odd)
    - hyperlink: url, text, prefix
    - image: path, width, height, max_width
    - section: size, orientation, margins, columns, column_spacing, start,
      different_first_page, different_odd_even

    Example:
        >>> builder = BatchBuilder(doc)
        >>> results = builder.apply([
        ...     {"type": "paragraph", "text": "Title", "formatting": ["bold"]},
        ...     {"type": "table", "rows": 2, "cols": 2},
        ...     {"type": "footer", "text": "Confidential"},
        ... ])
        >>> print(f"Applied {sum(r.success for r in results)}/{len(results)} operations")
    """

    def __init__(self, document: Document, base_dir: str | Path | None = None) -> None:
        """Initialize a BatchBuilder.

        Args:
            document: The Document to build into
            base_dir: Directory that relative image paths are resolved against
        """
        self._document = document
        self._base_dir = Path(base_dir) if base_dir is not None else None

    def apply(self, ops: list[dict[str, Any]], stop_on_error: bool = False) -> list[BuildResult]:
        """Apply operations in order.

        Args:
            ops: Operation dictionaries, each with a ``type`` key
            stop_on_error: If True, stop processing on first failure

        Returns:
            One BuildResult per processed operation
        """
        results = []
        for i, op in enumerate(ops):
            result = self._apply_single(i, op)
            results.append(result)
            if result.success:
                logger.debug(str(result))
            else:
                logger.warning(str(result))
                if stop_on_error:
                    break
        return results

    def _apply_single(self, index: int, op: Any) -> BuildResult:
        if not isinstance(op, dict):
            error = InvalidArgumentError(
                f"Operation {index} must be a mapping", code="invalid_operation"
            )
            return BuildResult(False, "unknown", str(error), error)

        op_type = op.get("type")
        if not op_type:
            error = InvalidArgumentError(
                f"Operation {index}: missing 'type' field", code="missing_parameter"
            )
            return BuildResult(False, "unknown", str(error), error)

        # Dispatch table mapping operation types to handler methods
        handlers = {
            "paragraph": self._handle_paragraph,
            "table": self._handle_table,
            "header": self._handle_header,
            "footer": self._handle_footer,
            "hyperlink": self._handle_hyperlink,
            "image": self._handle_image,
            "section": self._handle_section,
        }
        handler = handlers.get(op_type)
        if handler is None:
            error = InvalidArgumentError(
                f"Unknown operation type: {op_type}",
                code="unknown_operation",
                context={"type": op_type},
            )
            return BuildResult(False, str(op_type), str(error), error)

        try:
            message = handler(op)
        except DocxProjectionError as e:
            return BuildResult(False, op_type, f"Error: {e}", e)
        return BuildResult(True, op_type, message)

    # ------------------------------------------------------------------
    # Handlers
    # ------------------------------------------------------------------

    def _resolve_style(self, op: dict[str, Any], target: str) -> str | None:
        """Look up the op's style and check it fits ``target`` without writing anything."""
        name = op.get("style")
        if not name:
            return None
        style = self._document.styles.get_style(str(name))
        applies = {
            "paragraph": style.style_type.applies_to_paragraph,
            "table": style.style_type.applies_to_table,
        }[target]
        if not applies:
            raise IncompatibleTypeError(style.style_id, style.style_type.value, target)
        return style.style_id

    def _paragraph_options(self, op: dict[str, Any]) -> _ParagraphOptions:
        """Parse every paragraph option of ``op`` before the document is touched."""
        alignment = op.get("alignment")
        list_type = op.get("list")
        level = as_int(op.get("level", 0), "level")
        if list_type and not 0 <= level <= MAX_LIST_LEVEL:
            raise InvalidArgumentError(
                f"List level must be between 0 and {MAX_LIST_LEVEL}",
                code="invalid_level",
                context={"level": level},
            )
        return _ParagraphOptions(
            text=str(op.get("text", "")),
            flags=parse_flags(op.get("formatting")),
            style=self._resolve_style(op, "paragraph"),
            alignment=parse_enum(Alignment, alignment, "alignment") if alignment else None,
            list_type=parse_enum(ListType, list_type, "list") if list_type else None,
            level=level,
        )

    @staticmethod
    def _fill_paragraph(container: BlockContainer, options: _ParagraphOptions) -> Paragraph:
        """Add a paragraph to ``container`` with already validated options."""
        paragraph = container.add_paragraph(options.text, options.flags)
        if options.style is not None:
            paragraph.set_style(options.style)
        if options.alignment is not None:
            paragraph.set_alignment(options.alignment)
        if options.list_type is not None:
            paragraph.set_list_style(options.list_type, options.level)
        return paragraph

    def _handle_paragraph(self, op: dict[str, Any]) -> str:
        options = self._paragraph_options(op)
        paragraph = self._fill_paragraph(self._document.body, options)
        return f"Added paragraph '{paragraph.text}'"

    def _handle_table(self, op: dict[str, Any]) -> str:
        rows = as_int(require(op, "rows"), "rows")
        cols = as_int(require(op, "cols"), "cols")
        cells = op.get("cells") or []
        if not isinstance(cells, list) or not all(isinstance(row, list) for row in cells):
            raise InvalidArgumentError(
                "'cells' must be a list of rows", code="invalid_parameter", context={"key": "cells"}
            )
        validate_table_size(rows, cols)
        style = self._resolve_style(op, "table")

        table = self._document.body.add_table(rows, cols)
        for r, row_values in enumerate(cells[:rows]):
            for c, value in enumerate(row_values[:cols]):
                if value is not None:
                    table.get_cell(r, c).set_text(str(value))
        if style is not None:
            table.set_style(style)
        return f"Added {rows}x{cols} table"

    def _handle_header(self, op: dict[str, Any]) -> str:
        page = parse_enum(HeaderFooterType, op.get("page", "default"), "page")
        options = self._paragraph_options(op)
        self._fill_paragraph(self._document.get_header(page), options)
        return f"Added {page.value} header text '{options.text}'"

    def _handle_footer(self, op: dict[str, Any]) -> str:
        page = parse_enum(HeaderFooterType, op.get("page", "default"), "page")
        options = self._paragraph_options(op)
        self._fill_paragraph(self._document.get_footer(page), options)
        return f"Added {page.value} footer text '{options.text}'"

    def _handle_hyperlink(self, op: dict[str, Any]) -> str:
        url = str(require(op, "url"))
        text = str(op.get("text") or url)
        paragraph = self._document.body.add_paragraph(str(op.get("prefix", "")))
        paragraph.add_hyperlink(url, text)
        return f"Added hyperlink '{text}' -> {url}"

    def _handle_image(self, op: dict[str, Any]) -> str:
        path = Path(require(op, "path"))
        if not path.is_absolute() and self._base_dir is not None:
            path = self._base_dir / path
        width = as_int(op["width"], "width") if op.get("width") is not None else None
        height = as_int(op["height"], "height") if op.get("height") is not None else None
        max_width = as_int(op.get("max_width", 0), "max_width")
        check_image_file(path)
        width, height = resolve_display_size(path, width, height, max_width)

        paragraph = self._document.body.add_paragraph()
        image = paragraph.add_image(path, width_px=width, height_px=height)
        return f"Added image {path.name} ({image.width_px}x{image.height_px}px)"

    def _handle_section(self, op: dict[str, Any]) -> str:
        size = parse_enum(PageSize, op["size"], "size") if op.get("size") else None
        orientation = op.get("orientation")
        orientation = parse_enum(Orientation, orientation, "orientation") if orientation else None
        margins = op.get("margins") or {}
        if not isinstance(margins, dict) or not set(margins) <= set(MARGIN_SIDES):
            raise InvalidArgumentError(
                f"'margins' must map sides ({', '.join(MARGIN_SIDES)}) to points",
                code="invalid_parameter",
                context={"key": "margins"},
            )
        margin_values = {side: as_float(value, side) for side, value in margins.items()}
        columns = as_int(op["columns"], "columns") if op.get("columns") is not None else None
        spacing = as_float(op.get("column_spacing", DEFAULT_COLUMN_SPACING_PT), "column_spacing")
        start = parse_enum(SectionStart, op["start"], "start") if op.get("start") else None

        # Check every value on a detached copy before touching the document
        current = self._document.body.element.find(w("sectPr"))
        if current is None:
            current = etree.Element(w("sectPr"))
        trial = Section(copy.deepcopy(current))
        self._apply_layout(trial, size, orientation, margin_values, columns, spacing, start)

        section = self._document.section
        self._apply_layout(section, size, orientation, margin_values, columns, spacing, start)
        if "different_first_page" in op:
            section.set_different_first_page(bool(op["different_first_page"]))
        if "different_odd_even" in op:
            section.set_different_odd_even(bool(op["different_odd_even"]))
        layout = f"{section.orientation.value}, {section.column_count} column(s)"
        return f"Updated page layout ({layout})"

    @staticmethod
    def _apply_layout(
        section: Section,
        size: PageSize | None,
        orientation: Orientation | None,
        margins: dict[str, float],
        columns: int | None,
        spacing: float,
        start: SectionStart | None,
    ) -> None:
        if size is not None:
            section.set_page_size(size, orientation or Orientation.PORTRAIT)
        elif orientation is not None:
            section.set_orientation(orientation)
        if margins:
            section.set_margins(**margins)
        if columns is not None:
            section.set_columns(columns, spacing)
        if start is not None:
            section.set_start_type(start)

    # ------------------------------------------------------------------
    # Build files
    # ------------------------------------------------------------------

    def apply_file(
        self, path: str | Path, format: str | None = None, stop_on_error: bool = False
    ) -> list[BuildResult]:
        """Apply operations from a YAML or JSON build file.

        The file holds an ``operations`` key with a list of operation
        dictionaries. Relative image paths are resolved against the file's
        directory unless the builder was given a ``base_dir``.

        Args:
            path: Path to the build file
            format: "yaml" or "json" (default: chosen from the file extension)
            stop_on_error: If True, stop processing on first failure

        Returns:
            One BuildResult per processed operation

        Raises:
            NotFoundError: If the file does not exist
            InvalidArgumentError: If the file cannot be parsed or has the wrong shape

        Example YAML file:
            ```yaml
            operations:
              - type: paragraph
                text: "Quarterly report"
                formatting: [bold]
                alignment: center
              - type: header
                page: first
                text: "Cover"
            ```
        """
        file_path = Path(path)
        if not file_path.is_file():
            raise NotFoundError(
                f"Build file not found: {path}",
                code="build_file_not_found",
                context={"path": str(path)},
            )
        if format is None:
            format = "json" if file_path.suffix.lower() == ".json" else "yaml"

        try:
            with open(file_path, encoding="utf-8") as f:
                if format == "yaml":
                    data = yaml.safe_load(f)
                elif format == "json":
                    data = json.load(f)
                else:
                    raise InvalidArgumentError(
                        f"Unsupported format: {format}", code="unsupported_format"
                    )
        except yaml.YAMLError as e:
            raise InvalidArgumentError(
                f"Failed to parse YAML file: {e}", code="invalid_build_file"
            ) from e
        except json.JSONDecodeError as e:
            raise InvalidArgumentError(
                f"Failed to parse JSON file: {e}", code="invalid_build_file"
            ) from e

        if not isinstance(data, dict):
            raise InvalidArgumentError(
                "Build file must contain a dictionary/object", code="invalid_build_file"
            )
        if "operations" not in data:
            raise InvalidArgumentError(
                "Build file must contain an 'operations' key", code="invalid_build_file"
            )
        ops = data["operations"]
        if not isinstance(ops, list):
            raise InvalidArgumentError("'operations' must be a list", code="invalid_build_file")

        if self._base_dir is None:
            return BatchBuilder(self._document, file_path.parent).apply(ops, stop_on_error)
        return self.apply(ops, stop_on_error=stop_on_error)
