"""
Editable grid behind the table-insertion dialog.

The model only lives while the dialog is open: authors resize it, fill cells,
toggle the header row, and on confirm it is turned into a table fragment once
and thrown away. Only the generated markup is ever stored.
"""
from __future__ import annotations

import dataclasses
import html
from typing import List


MIN_ROWS = 1
MIN_COLS = 1
MAX_ROWS = 20
MAX_COLS = 10

DEFAULT_ROWS = 3
DEFAULT_COLS = 3

TABLE_STYLE = "border-collapse: collapse; width: 100%; margin: 10px 0;"
CELL_STYLE = "border: 1px solid #dee2e6; padding: 8px;"
HEADER_CELL_STYLE = CELL_STYLE + " background-color: #f8f9fa; font-weight: bold;"


def _empty_cells(rows: int, cols: int) -> List[List[str]]:
  return [["" for _ in range(cols)] for _ in range(rows)]


def _clamp(value: int, lower: int, upper: int) -> int:
  return max(lower, min(upper, value))


@dataclasses.dataclass
class GridTableModel:
  """
  Rows x cols matrix of cell strings, stored row-major.

  ``cells`` always has exactly ``rows`` rows of ``cols`` entries; every
  mutator keeps that shape.

  Example:
      model = GridTableModel(rows=2, cols=2)
      model.set_cell(0, 0, "Process")
      model.set_cell(0, 1, "Memory")
      markup = model.to_markup()
  """
  rows: int = DEFAULT_ROWS
  cols: int = DEFAULT_COLS
  cells: List[List[str]] = dataclasses.field(default_factory=list)
  has_header_row: bool = True

  def __post_init__(self):
    self.rows = _clamp(self.rows, MIN_ROWS, MAX_ROWS)
    self.cols = _clamp(self.cols, MIN_COLS, MAX_COLS)
    if not self.cells:
      self.cells = _empty_cells(self.rows, self.cols)
      return
    if len(self.cells) != self.rows or any(len(row) != self.cols for row in self.cells):
      raise ValueError(
        f"cells must be {self.rows}x{self.cols}, got {len(self.cells)} rows "
        f"with lengths {[len(row) for row in self.cells]}"
      )

  @classmethod
  def from_rows(cls, data: List[List[str]], has_header_row: bool = True) -> GridTableModel:
    """Build a model from ragged row data, padding short rows with empty cells."""
    rows = max(len(data), MIN_ROWS)
    cols = max([len(row) for row in data] + [MIN_COLS])
    model = cls(rows=rows, cols=cols, has_header_row=has_header_row)
    for row_index, row in enumerate(data[:model.rows]):
      for col_index, content in enumerate(row[:model.cols]):
        model.cells[row_index][col_index] = str(content)
    return model

  def resize(self, rows: int, cols: int) -> GridTableModel:
    """Rebuild the matrix at a new size, keeping cells whose coordinates still exist."""
    rows = _clamp(rows, MIN_ROWS, MAX_ROWS)
    cols = _clamp(cols, MIN_COLS, MAX_COLS)
    new_cells = _empty_cells(rows, cols)
    for row_index in range(min(rows, self.rows)):
      for col_index in range(min(cols, self.cols)):
        new_cells[row_index][col_index] = self.cells[row_index][col_index]
    self.rows, self.cols, self.cells = rows, cols, new_cells
    return self

  def _check_bounds(self, row: int, col: int) -> None:
    if not (0 <= row < self.rows and 0 <= col < self.cols):
      raise IndexError(f"cell ({row}, {col}) outside {self.rows}x{self.cols} table")

  def cell(self, row: int, col: int) -> str:
    self._check_bounds(row, col)
    return self.cells[row][col]

  def set_cell(self, row: int, col: int, content: str) -> None:
    self._check_bounds(row, col)
    self.cells[row][col] = content

  def add_row(self) -> GridTableModel:
    return self.resize(self.rows + 1, self.cols)

  def add_column(self) -> GridTableModel:
    return self.resize(self.rows, self.cols + 1)

  def remove_row(self, row: int) -> bool:
    if self.rows <= MIN_ROWS:
      return False
    if not 0 <= row < self.rows:
      raise IndexError(f"row {row} outside {self.rows}-row table")
    del self.cells[row]
    self.rows -= 1
    return True

  def remove_column(self, col: int) -> bool:
    if self.cols <= MIN_COLS:
      return False
    if not 0 <= col < self.cols:
      raise IndexError(f"column {col} outside {self.cols}-column table")
    for row in self.cells:
      del row[col]
    self.cols -= 1
    return True

  def escaped(self) -> GridTableModel:
    """Copy of this model with every cell HTML-escaped."""
    return GridTableModel(
      rows=self.rows,
      cols=self.cols,
      cells=[[html.escape(content, quote=False) for content in row] for row in self.cells],
      has_header_row=self.has_header_row,
    )

  def to_markup(self) -> str:
    # Cell content goes out verbatim; callers escape first (see escaped()).
    result = [f'<table style="{TABLE_STYLE}">']

    body_rows = self.cells
    if self.has_header_row:
      result.append("<thead><tr>")
      for content in self.cells[0]:
        result.append(f'<th style="{HEADER_CELL_STYLE}">{content}</th>')
      result.append("</tr></thead>")
      body_rows = self.cells[1:]

    if body_rows:
      result.append("<tbody>")
      for row in body_rows:
        result.append("<tr>")
        for content in row:
          result.append(f'<td style="{CELL_STYLE}">{content}</td>')
        result.append("</tr>")
      result.append("</tbody>")

    result.append("</table>")
    return "".join(result)

  def to_plain_text_preview(self) -> str:
    return plain_text_table(self.cells, has_header_row=self.has_header_row)


def plain_text_table(cells: List[List[str]], has_header_row: bool = False) -> str:
  """
  Column-aligned, pipe-delimited rendering of ragged row data.

  Short rows are padded with empty cells; a separator line follows the first
  row when it is a header row.
  """
  if not cells:
    return ""
  cols = max(len(row) for row in cells)
  rows = [list(row) + [""] * (cols - len(row)) for row in cells]
  widths = [max(len(row[col_index]) for row in rows) for col_index in range(cols)]

  lines = []
  for row_index, row in enumerate(rows):
    padded = [content.ljust(widths[col_index]) for col_index, content in enumerate(row)]
    lines.append("| " + " | ".join(padded) + " |")
    if has_header_row and row_index == 0:
      lines.append("|" + "|".join("-" * (width + 2) for width in widths) + "|")
  return "\n".join(lines)
