"""
Expanded (modal) editing of a single field.

The session edits a private working copy through its own EditorController;
the caller's value only changes when the session is confirmed.
"""
from __future__ import annotations

import logging
from typing import Callable, Optional

from RichContent.config import EngineSettings
from RichContent.editor import EditorController, EditorMode, FileReader
from RichContent.renderer import plain_text
from RichContent.surfaces import EditableSurface, HeadlessSurface
from RichContent.uploads import FieldKey, read_as_data_url

log = logging.getLogger(__name__)

NEAR_LIMIT_RATIO = 0.9


class ExpandedEditSession:

  def __init__(
      self,
      initial_value: str,
      on_save: Callable[[str], None],
      *,
      title: str = "",
      max_length: Optional[int] = None,
      surface: Optional[EditableSurface] = None,
      mode: EditorMode = EditorMode.RAW,
      field_key: Optional[FieldKey] = None,
      settings: Optional[EngineSettings] = None,
      file_reader: FileReader = read_as_data_url,
  ):
    self.title = title
    self.max_length = max_length
    self.is_open = True
    self._on_save = on_save
    self.editor = EditorController(
      surface if surface is not None else HeadlessSurface(),
      field_key=field_key,
      initial_value=initial_value,
      mode=mode,
      settings=settings,
      file_reader=file_reader,
    )

  @classmethod
  def from_editor(cls, editor: EditorController, **kwargs) -> ExpandedEditSession:
    """Open an expanded session whose confirmation writes back into ``editor``."""
    kwargs.setdefault("mode", editor.mode)
    kwargs.setdefault("field_key", editor.field_key)
    kwargs.setdefault("settings", editor.settings)
    return cls(editor.get_canonical_value(), editor.set_canonical_value, **kwargs)

  @property
  def working_copy(self) -> str:
    return self.editor.get_canonical_value()

  # Statistics shown in the dialog footer

  @property
  def char_count(self) -> int:
    return len(plain_text(self.working_copy))

  @property
  def word_count(self) -> int:
    return len(plain_text(self.working_copy).split())

  @property
  def remaining_chars(self) -> Optional[int]:
    if self.max_length is None:
      return None
    return self.max_length - self.char_count

  @property
  def is_near_limit(self) -> bool:
    if self.max_length is None:
      return False
    return self.char_count > self.max_length * NEAR_LIMIT_RATIO

  @property
  def is_over_limit(self) -> bool:
    remaining = self.remaining_chars
    return remaining is not None and remaining < 0

  def confirm(self) -> Optional[str]:
    """Hand the working copy to the caller and close. Closed sessions do nothing."""
    if not self.is_open:
      return None
    if self.editor.is_composing:
      self.editor.composition_end()
    self.is_open = False
    value = self.working_copy
    self._on_save(value)
    log.info(f"{self.editor.field_key}: expanded edit saved ({len(value)} chars)")
    return value

  def cancel(self) -> None:
    if self.is_open:
      log.debug(f"{self.editor.field_key}: expanded edit discarded")
    self.is_open = False

  def handle_key(self, key: str, ctrl: bool = False) -> bool:
    """Dialog shortcuts: Ctrl+Enter saves, Escape cancels. Returns True when handled."""
    if not self.is_open:
      return False
    if key == "Enter" and ctrl:
      self.confirm()
      return True
    if key == "Escape":
      self.cancel()
      return True
    return False
