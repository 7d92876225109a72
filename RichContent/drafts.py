"""
Working state of the math and table insertion dialogs.

A draft lives only while its dialog is open. Confirming hands the result to
the editor; cancelling (or confirming a blank math draft) leaves the editor
untouched.
"""
from __future__ import annotations

from typing import Callable, Optional

from RichContent.grid_table import GridTableModel
from RichContent.symbols import convert


class _Draft:
  def __init__(self):
    self.is_open = True

  def cancel(self) -> None:
    self.is_open = False


class MathExpressionDraft(_Draft):
  """Notation being typed in the math dialog plus its converted preview."""

  def __init__(self, raw_notation: str = "", on_confirm: Optional[Callable[[str], None]] = None):
    super().__init__()
    self._on_confirm = on_confirm
    self._raw_notation = ""
    self._preview = ""
    self.raw_notation = raw_notation

  @property
  def raw_notation(self) -> str:
    return self._raw_notation

  @raw_notation.setter
  def raw_notation(self, value: str) -> None:
    self._raw_notation = value
    self._preview = convert(value)

  @property
  def preview(self) -> str:
    return self._preview

  def append(self, snippet: str) -> None:
    """Quick-insert palette: add a notation snippet at the end."""
    self.raw_notation = self._raw_notation + snippet

  def is_blank(self) -> bool:
    return not self._raw_notation.strip()

  def confirm(self) -> Optional[str]:
    """Close the dialog and deliver the converted text; blank drafts stay open."""
    if not self.is_open or self.is_blank():
      return None
    self.is_open = False
    if self._on_confirm is not None:
      self._on_confirm(self._preview)
    return self._preview


class TableDraft(_Draft):
  """Grid being edited in the table dialog."""

  def __init__(self, model: Optional[GridTableModel] = None, on_confirm: Optional[Callable[[GridTableModel], None]] = None):
    super().__init__()
    self.model = model if model is not None else GridTableModel()
    self._on_confirm = on_confirm

  def confirm(self) -> Optional[GridTableModel]:
    if not self.is_open:
      return None
    self.is_open = False
    if self._on_confirm is not None:
      self._on_confirm(self.model)
    return self.model
