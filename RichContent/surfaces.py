"""
Editing surfaces driven by the editor controller.

``EditableSurface`` is the seam between the controller and whatever shows
rendered, editable content (a native rich-text control, a web view, ...).
``HeadlessSurface`` implements it over a plain markup string with a simulated
caret, which is what tests and non-UI callers use. ``RawSurface`` is the plain
text input used in raw mode.

Live content is held in the canonical content form: text exactly as typed,
with tables and images as markup. Text is never HTML-escaped on the way in,
so reading a surface back gives the author's characters unchanged.
"""
from __future__ import annotations

import abc
import dataclasses
from typing import Optional, Tuple

from RichContent.errors import SurfaceInsertionError
from RichContent.parser import TextSegment, parse


class EditableSurface(abc.ABC):
  """
  WYSIWYG surface contract.

  Implementations report author activity by calling the attached listener's
  hooks (``handle_surface_input``, ``composition_start``, ``composition_end``,
  ``focus``, ``blur``). The editor controller attaches itself on creation.
  """

  def __init__(self):
    self.listener = None

  def attach(self, listener) -> None:
    self.listener = listener

  @abc.abstractmethod
  def get_live_content(self) -> str:
    """Current markup shown in the surface."""

  @abc.abstractmethod
  def set_live_content(self, markup: str) -> None:
    """Replace the surface's content; the caret moves to the end."""

  @abc.abstractmethod
  def insert_at_caret(self, fragment: str) -> None:
    """Insert markup at the caret/selection; raises SurfaceInsertionError on failure."""

  @abc.abstractmethod
  def shows_placeholder(self) -> bool:
    ...

  @abc.abstractmethod
  def show_placeholder(self, text: str) -> None:
    ...

  @abc.abstractmethod
  def clear_placeholder(self) -> None:
    ...

  def text_content(self) -> str:
    if self.shows_placeholder():
      return ""
    return "".join(
      segment.content for segment in parse(self.get_live_content()) if isinstance(segment, TextSegment)
    )

  def has_embedded_media(self) -> bool:
    if self.shows_placeholder():
      return False
    return any(not isinstance(segment, TextSegment) for segment in parse(self.get_live_content()))

  def is_empty(self) -> bool:
    return not self.text_content().strip() and not self.has_embedded_media()


class HeadlessSurface(EditableSurface):
  """
  In-memory surface: a markup string plus a caret and selection.

  ``type_text`` and the composition helpers edit the markup the way a user
  would and fire the same hooks a real surface fires. Setting
  ``fail_insertions`` makes ``insert_at_caret`` fail, standing in for a
  platform whose native insertion primitive is unavailable.
  """

  def __init__(self, markup: str = ""):
    super().__init__()
    self.markup = markup
    self.caret = len(markup)
    self.selection_end = self.caret
    self.placeholder_text: Optional[str] = None
    self.fail_insertions = False
    self._composition_span: Optional[Tuple[int, int]] = None

  def get_live_content(self) -> str:
    if self.placeholder_text is not None:
      return self.placeholder_text
    return self.markup

  def set_live_content(self, markup: str) -> None:
    self.placeholder_text = None
    self.markup = markup
    self.caret = self.selection_end = len(markup)

  def select(self, start: int, end: Optional[int] = None) -> None:
    end = start if end is None else end
    self.caret = max(0, min(start, len(self.markup)))
    self.selection_end = max(self.caret, min(end, len(self.markup)))

  def _replace_selection(self, text: str) -> None:
    self.markup = self.markup[:self.caret] + text + self.markup[self.selection_end:]
    self.caret = self.selection_end = self.caret + len(text)

  def insert_at_caret(self, fragment: str) -> None:
    if self.fail_insertions:
      raise SurfaceInsertionError("insertion primitive unavailable")
    self.placeholder_text = None
    self._replace_selection(fragment)

  def shows_placeholder(self) -> bool:
    return self.placeholder_text is not None

  def show_placeholder(self, text: str) -> None:
    self.markup = ""
    self.caret = self.selection_end = 0
    self.placeholder_text = text

  def clear_placeholder(self) -> None:
    self.placeholder_text = None

  # Simulated author activity

  def type_text(self, text: str) -> None:
    self._replace_selection(text)
    if self.listener is not None:
      self.listener.handle_surface_input()

  def start_composition(self) -> None:
    if self.listener is not None:
      self.listener.composition_start()
    self._composition_span = (self.caret, self.selection_end)

  def update_composition(self, text: str) -> None:
    """Replace the in-progress composed text, e.g. "ㅎ" -> "하" -> "한"."""
    start, end = self._composition_span or (self.caret, self.selection_end)
    self.markup = self.markup[:start] + text + self.markup[end:]
    self.caret = self.selection_end = start + len(text)
    self._composition_span = (start, self.caret)
    if self.listener is not None:
      self.listener.handle_surface_input()

  def end_composition(self) -> None:
    self._composition_span = None
    if self.listener is not None:
      self.listener.composition_end()

  def focus(self) -> None:
    if self.listener is not None:
      self.listener.focus()

  def blur(self) -> None:
    if self.listener is not None:
      self.listener.blur()


@dataclasses.dataclass
class RawSurface:
  """Plain text input holding the literal content string and a caret."""
  value: str = ""
  caret: int = 0
  selection_end: Optional[int] = None

  def set_value(self, value: str, caret: Optional[int] = None) -> None:
    self.value = value
    self.caret = len(value) if caret is None else max(0, min(caret, len(value)))
    self.selection_end = None

  def splice(self, fragment: str) -> str:
    """Replace the selection (or insert at the caret) and move the caret past the fragment."""
    start = max(0, min(self.caret, len(self.value)))
    end = start if self.selection_end is None else max(start, min(self.selection_end, len(self.value)))
    self.value = self.value[:start] + fragment + self.value[end:]
    self.caret = start + len(fragment)
    self.selection_end = None
    return self.value
