"""
Dual-mode editor controller.

One controller owns one answer field's authoring session. In RAW mode the
author edits the literal content string; in PREVIEW mode they edit the
rendered content through an ``EditableSurface``. The controller keeps the
canonical value (the string that gets persisted) correct in both modes:

  - RAW -> PREVIEW loads the canonical value into the surface in its
    editable form: text exactly as typed, tables and images as markup.
  - PREVIEW -> RAW reads the surface back. An untouched surface yields the
    canonical value it was loaded from, so toggling never rewrites content.
  - Surface input updates the canonical value, except while an input-method
    composition is in progress. Composed text is flushed once, at
    composition end, so multi-keystroke characters are never split across
    two updates.
  - Math, table and image insertions target the canonical value directly in
    either mode.

Example:
    surface = HeadlessSurface()
    editor = EditorController(surface, field_key=FieldKey("step-1", "answer"))
    editor.on_change(save_draft)
    editor.insert_math(r"x^{2} + \\frac{1}{2}")
"""
from __future__ import annotations

import dataclasses
import enum
import logging
from typing import Awaitable, Callable, List, Optional, Set

from RichContent.config import EngineSettings, load_settings
from RichContent.drafts import MathExpressionDraft, TableDraft
from RichContent.errors import ImageReadError, ImageValidationError, SurfaceInsertionError, UploadInProgressError
from RichContent.grid_table import GridTableModel
from RichContent.renderer import render
from RichContent.sanitizer import sanitize
from RichContent.surfaces import EditableSurface, RawSurface
from RichContent.symbols import convert
from RichContent.uploads import (
  ClipboardData,
  FieldKey,
  ImageFile,
  UploadTracker,
  build_image_fragment,
  read_as_data_url,
  validate_image_file,
)

log = logging.getLogger(__name__)

FileReader = Callable[[ImageFile], Awaitable[str]]
ChangeListener = Callable[[str], None]


class EditorMode(enum.Enum):
  RAW = "raw"
  PREVIEW = "preview"


@dataclasses.dataclass
class EditorSessionState:
  mode: EditorMode = EditorMode.RAW
  is_composing: bool = False
  canonical_value: str = ""


class EditorController:
  DEFAULT_FIELD_KEY = FieldKey("default", "default")

  def __init__(
      self,
      surface: EditableSurface,
      raw_surface: Optional[RawSurface] = None,
      *,
      field_key: Optional[FieldKey] = None,
      initial_value: str = "",
      mode: EditorMode = EditorMode.RAW,
      settings: Optional[EngineSettings] = None,
      file_reader: FileReader = read_as_data_url,
      uploads: Optional[UploadTracker] = None,
      on_alert: Optional[Callable[[str], None]] = None,
  ):
    self.settings = settings if settings is not None else load_settings()
    self.surface = surface
    self.raw_surface = raw_surface if raw_surface is not None else RawSurface()
    self.field_key = field_key if field_key is not None else self.DEFAULT_FIELD_KEY
    self.uploads = uploads if uploads is not None else UploadTracker()
    self.state = EditorSessionState(mode=mode, canonical_value=initial_value)

    self._file_reader = file_reader
    self._on_alert = on_alert
    self._listeners: List[ChangeListener] = []
    self._abandoned_uploads: Set[FieldKey] = set()
    self._injected_markup: Optional[str] = None

    self.raw_surface.set_value(initial_value)
    self.surface.attach(self)
    if mode is EditorMode.PREVIEW:
      self._inject_into_surface()

  # Canonical value

  @property
  def mode(self) -> EditorMode:
    return self.state.mode

  @property
  def is_composing(self) -> bool:
    return self.state.is_composing

  def get_canonical_value(self) -> str:
    return self.state.canonical_value

  def set_canonical_value(self, value: str) -> None:
    """Load previously saved content into the editor."""
    self.raw_surface.set_value(value)
    if self.state.mode is EditorMode.PREVIEW:
      self._commit(value)
      self._inject_into_surface()
    else:
      self._commit(value)

  def on_change(self, listener: ChangeListener) -> Callable[[], None]:
    """Subscribe to canonical value changes; returns an unsubscribe function."""
    self._listeners.append(listener)

    def unsubscribe() -> None:
      if listener in self._listeners:
        self._listeners.remove(listener)

    return unsubscribe

  def _commit(self, value: str) -> bool:
    if value == self.state.canonical_value:
      return False
    self.state.canonical_value = value
    for listener in list(self._listeners):
      listener(value)
    return True

  def _alert(self, message: str) -> None:
    log.warning(message)
    if self._on_alert is not None:
      self._on_alert(message)

  # Surface synchronization

  def _read_surface(self) -> str:
    if self.surface.shows_placeholder():
      return ""
    live = self.surface.get_live_content()
    if self._injected_markup is not None and live == self._injected_markup:
      return self.state.canonical_value
    self._injected_markup = None
    return live

  def _inject_into_surface(self) -> None:
    value = self.state.canonical_value
    if value:
      self._injected_markup = render(value).render("editable")
      self.surface.set_live_content(self._injected_markup)
    else:
      self._injected_markup = None
      self.surface.show_placeholder(self.settings.placeholder)

  def switch_mode(self, mode: EditorMode) -> None:
    if mode is self.state.mode:
      return
    if mode is EditorMode.PREVIEW:
      self.state.mode = EditorMode.PREVIEW
      self._inject_into_surface()
    else:
      value = self._read_surface()
      self._injected_markup = None
      self.state.is_composing = False
      self.state.mode = EditorMode.RAW
      self.raw_surface.set_value(value)
      self._commit(value)
    log.info(f"{self.field_key}: switched to {mode.value} mode")

  def toggle_mode(self) -> EditorMode:
    self.switch_mode(EditorMode.RAW if self.state.mode is EditorMode.PREVIEW else EditorMode.PREVIEW)
    return self.state.mode

  # Surface event hooks

  def handle_surface_input(self) -> None:
    if self.state.mode is not EditorMode.PREVIEW:
      return
    if self.state.is_composing:
      log.debug(f"{self.field_key}: input deferred until composition ends")
      return
    self._commit(self._read_surface())

  def composition_start(self) -> None:
    if self.surface.shows_placeholder():
      self.surface.clear_placeholder()
    self.state.is_composing = True

  def composition_end(self) -> None:
    self.state.is_composing = False
    if self.state.mode is EditorMode.PREVIEW:
      self._commit(self._read_surface())
    else:
      self._commit(self.raw_surface.value)

  def focus(self) -> None:
    if self.surface.shows_placeholder():
      self.surface.clear_placeholder()

  def blur(self) -> None:
    if self.state.mode is not EditorMode.PREVIEW:
      return
    if self.surface.shows_placeholder() or self.surface.is_empty():
      self.surface.show_placeholder(self.settings.placeholder)
      self._commit("")

  def handle_raw_input(self, value: str, caret: Optional[int] = None) -> None:
    """Raw-mode typing: the text input now holds ``value``."""
    self.raw_surface.set_value(value, caret)
    if self.state.is_composing:
      return
    self._commit(value)

  # Insertion

  def _insert_fragment(self, fragment: str) -> None:
    if self.state.mode is EditorMode.RAW:
      self._commit(self.raw_surface.splice(fragment))
      return

    if self.surface.shows_placeholder():
      self.surface.clear_placeholder()
    try:
      self.surface.insert_at_caret(fragment)
    except SurfaceInsertionError as e:
      log.warning(f"{self.field_key}: caret insertion failed ({e}); appending instead")
      self.surface.set_live_content(self._read_surface() + fragment)
    self._commit(self._read_surface())

  def insert_math(self, notation: str) -> str:
    """Convert ``notation`` and insert the symbols at the caret. Blank notation is ignored."""
    if not notation.strip():
      return ""
    converted = convert(notation)
    self._insert_fragment(converted)
    log.info(f"{self.field_key}: inserted math ({len(converted)} chars)")
    return converted

  def insert_table(self, model: GridTableModel) -> str:
    fragment = sanitize(model.escaped().to_markup())
    self._insert_fragment(fragment)
    log.info(f"{self.field_key}: inserted {model.rows}x{model.cols} table")
    return fragment

  def open_math_draft(self, raw_notation: str = "") -> MathExpressionDraft:
    return MathExpressionDraft(raw_notation, on_confirm=self._insert_fragment)

  def open_table_draft(self, model: Optional[GridTableModel] = None) -> TableDraft:
    return TableDraft(model, on_confirm=self.insert_table)

  # Images

  def is_uploading(self, field_key: Optional[FieldKey] = None) -> bool:
    return self.uploads.is_active(field_key or self.field_key)

  def cancel_image_upload(self, field_key: Optional[FieldKey] = None) -> None:
    """The image dialog closed; a read still in flight for this field will not be applied."""
    key = field_key or self.field_key
    if self.uploads.is_active(key):
      self._abandoned_uploads.add(key)

  async def insert_image(self, image: ImageFile, field_key: Optional[FieldKey] = None) -> bool:
    """
    Read ``image`` into a data URI and insert it at the caret.

    Validation happens before anything is awaited. Every failure is reported
    through the alert hook and leaves the content untouched; the field's
    uploading flag is always cleared.
    """
    key = field_key or self.field_key
    try:
      validate_image_file(image, self.settings.max_image_bytes)
      self.uploads.begin(key)
    except (ImageValidationError, UploadInProgressError) as e:
      self._alert(str(e))
      return False

    self._abandoned_uploads.discard(key)
    try:
      data_url = await self._file_reader(image)
    except (ImageReadError, OSError) as e:
      self._alert(f"Image upload failed: {e}")
      return False
    finally:
      self.uploads.finish(key)

    if key in self._abandoned_uploads:
      self._abandoned_uploads.discard(key)
      log.info(f"{key}: image dialog closed before the read finished; discarding result")
      return False

    self._insert_fragment(sanitize(build_image_fragment(data_url)))
    log.info(f"{key}: inserted image '{image.filename}'")
    return True

  async def handle_paste(self, clipboard: ClipboardData) -> bool:
    """
    Route pasted images through image insertion.

    Returns True when the paste was intercepted (the default paste must be
    suppressed); plain text pastes return False and go through normal input.
    """
    image = clipboard.first_image()
    if image is None:
      return False
    await self.insert_image(image)
    return True
