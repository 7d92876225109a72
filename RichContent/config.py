"""
Runtime settings for the engine.

Values come from the environment (the CLI loads a .env file first), so a
deployment can tune limits without code changes.
"""
from __future__ import annotations

import dataclasses
import logging
import os

log = logging.getLogger(__name__)

DEFAULT_MAX_IMAGE_BYTES = 5 * 1024 * 1024
DEFAULT_PLACEHOLDER = "Enter text..."


@dataclasses.dataclass(frozen=True)
class EngineSettings:
  max_image_bytes: int = DEFAULT_MAX_IMAGE_BYTES
  placeholder: str = DEFAULT_PLACEHOLDER


def _env_int(name: str, default: int) -> int:
  raw = os.environ.get(name)
  if raw is None or not raw.strip():
    return default
  try:
    value = int(raw)
  except ValueError:
    log.warning(f"Ignoring non-integer {name}={raw!r}; using {default}")
    return default
  if value <= 0:
    log.warning(f"Ignoring non-positive {name}={value}; using {default}")
    return default
  return value


def load_settings() -> EngineSettings:
  """Build settings from RICHCONTENT_* environment variables."""
  return EngineSettings(
    max_image_bytes=_env_int("RICHCONTENT_MAX_IMAGE_BYTES", DEFAULT_MAX_IMAGE_BYTES),
    placeholder=os.environ.get("RICHCONTENT_PLACEHOLDER", DEFAULT_PLACEHOLDER),
  )
