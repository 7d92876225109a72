"""
Image files, per-field upload tracking and the inline image fragment.

Images are embedded as ``data:`` URIs, never as links to external storage, so
a stored answer is self-contained.
"""
from __future__ import annotations

import asyncio
import base64
import dataclasses
import logging
import mimetypes
from pathlib import Path
from typing import List, Optional, Set

from RichContent.errors import ImageReadError, ImageValidationError, UploadInProgressError

log = logging.getLogger(__name__)

IMAGE_STYLE = "max-width: 100%; height: auto; margin: 10px 0;"


@dataclasses.dataclass(frozen=True)
class FieldKey:
  """Identity of one answer input on an authoring screen."""
  step_id: str
  field_id: str

  def __str__(self):
    return f"{self.step_id}/{self.field_id}"


@dataclasses.dataclass(frozen=True)
class ImageFile:
  """
  A file picked (or pasted) by the author.

  Either ``data`` holds the bytes already, or ``path`` points at a file that
  is read when the upload runs.
  """
  filename: str
  mime_type: str
  data: bytes = b""
  path: Optional[Path] = None

  @classmethod
  def from_path(cls, path) -> ImageFile:
    path = Path(path)
    mime_type, _ = mimetypes.guess_type(path.name)
    return cls(filename=path.name, mime_type=mime_type or "application/octet-stream", path=path)

  @property
  def size(self) -> int:
    if self.path is not None:
      return self.path.stat().st_size
    return len(self.data)

  def read_bytes(self) -> bytes:
    if self.path is not None:
      return self.path.read_bytes()
    return self.data


@dataclasses.dataclass
class ClipboardData:
  text: str = ""
  images: List[ImageFile] = dataclasses.field(default_factory=list)

  def first_image(self) -> Optional[ImageFile]:
    return self.images[0] if self.images else None


def validate_image_file(image: ImageFile, max_bytes: int) -> None:
  """Raise ImageValidationError unless ``image`` is an image within the size ceiling."""
  if not image.mime_type.startswith("image/"):
    raise ImageValidationError(f"'{image.filename}' is not an image ({image.mime_type})")
  try:
    size = image.size
  except OSError as e:
    raise ImageValidationError(f"'{image.filename}' cannot be read: {e}") from e
  if size > max_bytes:
    raise ImageValidationError(
      f"'{image.filename}' is {size} bytes; images must be at most {max_bytes} bytes"
    )


def _encode_data_url(image: ImageFile) -> str:
  encoded = base64.b64encode(image.read_bytes()).decode("ascii")
  return f"data:{image.mime_type};base64,{encoded}"


async def read_as_data_url(image: ImageFile) -> str:
  """Read ``image`` into a data URI without blocking the event loop."""
  try:
    return await asyncio.to_thread(_encode_data_url, image)
  except OSError as e:
    raise ImageReadError(f"Failed to read '{image.filename}': {e}") from e


def build_image_fragment(data_url: str) -> str:
  return f'<img src="{data_url}" style="{IMAGE_STYLE}" />'


class UploadTracker:
  """
  Fields with an image upload in flight.

  Keys are only ever added and removed. A key already present cannot begin a
  second upload; UIs use ``is_active`` to disable that field's image trigger.
  """

  def __init__(self):
    self._active: Set[FieldKey] = set()

  def __contains__(self, key: FieldKey) -> bool:
    return key in self._active

  def is_active(self, key: FieldKey) -> bool:
    return key in self._active

  @property
  def active(self) -> frozenset:
    return frozenset(self._active)

  def begin(self, key: FieldKey) -> None:
    if key in self._active:
      raise UploadInProgressError(f"An image upload is already running for {key}")
    self._active.add(key)
    log.debug(f"Upload started for {key}")

  def finish(self, key: FieldKey) -> None:
    self._active.discard(key)
    log.debug(f"Upload finished for {key}")
