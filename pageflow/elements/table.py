"""
Table layout with proportional columns and optional cell frames.

Rows are rendered one after another. Every cell of a row is rendered into its
column; the row is as tall as its tallest cell. A row that does not fit
continues on the next page, where each cell resumes on its own: finished
cells stay empty and unfinished cells pick up where they stopped.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence, Tuple

from reportlab.lib import colors

from ..errors import InvalidTableRow
from ..geometry import Margins, Position, Size
from ..layout_utils import ColumnSpec
from ..render import Area
from ..style import LineStyle, Style
from .base import Context, Element, RenderResult


@dataclass(slots=True)
class TableCell:
    """A table cell with optional per-cell border and shading overrides."""

    element: Element
    line_style: LineStyle | None = None
    background: colors.Color | None = None


class FrameCellDecorator:
    """Draws borders and shading around table cells.

    Args:
        inner: Draw lines between cells.
        outer: Draw the outer table border.
        cont: Draw the horizontal border where a row is split across pages.
        line_style: Default stroke; the table's and the cell's line styles
            take precedence.
        background: Default cell shading.

    Example:
        >>> FrameCellDecorator(True, True, False).margins(
        ...     column=0, row=0, continued=False, line_style=LineStyle()
        ... )
        Margins(top=1.0, right=0.0, bottom=0.0, left=1.0)
    """

    def __init__(
        self,
        inner: bool = True,
        outer: bool = True,
        cont: bool = False,
        line_style: LineStyle | None = None,
        background: colors.Color | None = None,
    ) -> None:
        self.inner = inner
        self.outer = outer
        self.cont = cont
        self.line_style = line_style or LineStyle()
        self.background = background
        self.num_columns = 0
        self.num_rows = 0

    def set_table_size(self, num_columns: int, num_rows: int) -> None:
        self.num_columns = num_columns
        self.num_rows = num_rows

    def margins(
        self,
        *,
        column: int,
        row: int,
        continued: bool,
        line_style: LineStyle,
    ) -> Margins:
        """Return the border space reserved around a cell's content."""

        thickness = line_style.thickness
        bottom = self.cont or (row + 1 == self.num_rows and self.outer)
        return Margins(
            thickness if self._print_top(row=row, continued=continued) else 0.0,
            thickness if self._print_right(column=column) else 0.0,
            thickness if bottom else 0.0,
            thickness if self._print_left(column=column) else 0.0,
        )

    def decorate_cell(
        self,
        *,
        area: Area,
        column: int,
        row: int,
        continued: bool,
        has_more: bool,
        height: float,
        line_style: LineStyle,
        background: colors.Color | None,
    ) -> None:
        """Paint shading and borders of one cell fragment.

        Args:
            area: Full cell area (content is drawn on a higher layer).
            column: Column index.
            row: Row index.
            continued: The fragment continues a row split on a previous page.
            has_more: The row continues on the next page.
            height: Total row height including reserved border space.
            line_style: Effective stroke for this cell.
            background: Effective shading for this cell.
        Returns:
            None.
        """

        width = area.width
        fill = background if background is not None else self.background
        if fill is not None:
            area.draw_rect(Position(), Size(width, height), fill=fill)

        offset = line_style.thickness / 2
        if self._print_top(row=row, continued=continued):
            area.draw_line([Position(0, offset), Position(width, offset)], line_style)
        if self._print_bottom(row=row, has_more=has_more):
            area.draw_line(
                [Position(0, height - offset), Position(width, height - offset)],
                line_style,
            )
        if self._print_left(column=column):
            area.draw_line([Position(offset, 0), Position(offset, height)], line_style)
        if self._print_right(column=column):
            area.draw_line(
                [Position(width - offset, 0), Position(width - offset, height)],
                line_style,
            )

    def _print_top(self, *, row: int, continued: bool) -> bool:
        if continued:
            return self.cont
        return self.outer if row == 0 else self.inner

    def _print_bottom(self, *, row: int, has_more: bool) -> bool:
        if has_more:
            return self.cont
        return row + 1 == self.num_rows and self.outer

    def _print_left(self, *, column: int) -> bool:
        return self.outer if column == 0 else self.inner

    def _print_right(self, *, column: int) -> bool:
        return column + 1 == self.num_columns and self.outer


class TableLayoutRow:
    """Builder collecting the cells of one table row."""

    def __init__(self, table: TableLayout) -> None:
        self.table = table
        self.cells: List[TableCell] = []

    def element(
        self,
        element: Element,
        line_style: LineStyle | None = None,
        background: colors.Color | None = None,
    ) -> TableLayoutRow:
        self.cells.append(TableCell(element, line_style, background))
        return self

    def push(self) -> None:
        """Append the row to the table.

        Raises:
            InvalidTableRow: The number of cells differs from the column count.
        """

        self.table.push_row(self.cells)


class TableLayout(Element):
    """Rows of cells laid out in columns of proportional or fixed width.

    Example:
        >>> table = TableLayout([30, 70])
        >>> table.row().element(Text("a")).element(Paragraph("b")).push()  # doctest: +SKIP
    """

    def __init__(
        self,
        column_weights: Sequence[ColumnSpec],
        line_style: LineStyle | None = None,
    ) -> None:
        self.column_weights = list(column_weights)
        self.line_style = line_style
        self.rows: List[List[TableCell]] = []
        self.cell_decorator: FrameCellDecorator | None = None
        self._row_index = 0
        self._row_started = False
        self._finished: List[bool] = []

    def set_cell_decorator(self, decorator: FrameCellDecorator) -> None:
        self.cell_decorator = decorator

    def with_cell_decorator(self, decorator: FrameCellDecorator) -> TableLayout:
        self.set_cell_decorator(decorator)
        return self

    def row(self) -> TableLayoutRow:
        return TableLayoutRow(self)

    def push_row(self, cells: Sequence[TableCell | Element]) -> None:
        """Append a row of cells.

        Raises:
            InvalidTableRow: The number of cells differs from the column count.
        """

        if len(cells) != len(self.column_weights):
            raise InvalidTableRow(len(self.column_weights), len(cells))
        self.rows.append(
            [cell if isinstance(cell, TableCell) else TableCell(cell) for cell in cells]
        )

    def render(self, context: Context, area: Area, style: Style) -> RenderResult:
        if self.cell_decorator is not None:
            self.cell_decorator.set_table_size(len(self.column_weights), len(self.rows))
        result = RenderResult(Size(area.width, 0.0))
        area = area.copy()
        while self._row_index < len(self.rows):
            row_result = self._render_row(context=context, area=area.copy(), style=style)
            result.size = Size(result.size.width, result.size.height + row_result.size.height)
            area.add_offset(Position(0, row_result.size.height))
            if row_result.has_more:
                break
            self._row_index += 1
            self._row_started = False
            self._finished = []
        result.has_more = self._row_index < len(self.rows)
        return result

    def _render_row(self, *, context: Context, area: Area, style: Style) -> RenderResult:
        """Render the current row, resuming unfinished cells.

        Args:
            context: Render context.
            area: Area below the previously rendered rows.
            style: Inherited style.
        Returns:
            RenderResult for the row fragment.
        """

        row = self._row_index
        cells = self.rows[row]
        continued = self._row_started
        if not continued:
            self._finished = [False] * len(cells)
        decorator = self.cell_decorator

        columns = area.split_horizontally(self.column_weights)
        content_height = 0.0
        margin_height = 0.0
        has_more = False
        progressed = False
        placements: List[Tuple[Area, LineStyle]] = []
        for column, (cell, cell_area) in enumerate(zip(cells, columns)):
            line_style = self._line_style_for(cell=cell)
            content = cell_area.next_layer()
            if decorator is not None:
                margins = decorator.margins(
                    column=column, row=row, continued=continued, line_style=line_style
                )
                content.add_margins(margins)
                margin_height = max(margin_height, margins.vertical)
            placements.append((cell_area, line_style))
            if self._finished[column]:
                continue
            cell_result = cell.element.render(context, content, style)
            content_height = max(content_height, cell_result.size.height)
            if cell_result.has_more:
                has_more = True
            else:
                self._finished[column] = True
                progressed = True
            if cell_result.size.height > 0:
                progressed = True

        if has_more and not progressed:
            return RenderResult(has_more=True)
        self._row_started = True

        height = min(area.height, content_height + margin_height)
        if decorator is not None:
            for column, (cell_area, line_style) in enumerate(placements):
                decorator.decorate_cell(
                    area=cell_area,
                    column=column,
                    row=row,
                    continued=continued,
                    has_more=has_more,
                    height=height,
                    line_style=line_style,
                    background=cells[column].background,
                )
        else:
            for cell, (cell_area, _) in zip(cells, placements):
                if cell.background is not None:
                    cell_area.draw_rect(
                        Position(), Size(cell_area.width, height), fill=cell.background
                    )
        return RenderResult(Size(area.width, height), has_more)

    def _line_style_for(self, *, cell: TableCell) -> LineStyle:
        if cell.line_style is not None:
            return cell.line_style
        if self.line_style is not None:
            return self.line_style
        if self.cell_decorator is not None:
            return self.cell_decorator.line_style
        return LineStyle()
