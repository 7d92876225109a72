"""
Rich-content authoring and rendering engine.

Turns constrained math notation into Unicode, builds and sanitizes table and
image fragments, parses stored answers back into segments, and drives the
dual-mode (raw / preview) editor used by every answer field.

Logging is configured on import from ``logging.yaml`` beside this file.
``RICHCONTENT_LOG_LEVEL`` and ``RICHCONTENT_LOG_FILE`` fill the config's
``${VAR:-default}`` slots; ``RICHCONTENT_FILE_LOGGING=0`` keeps everything on
the console.
"""

import logging.config
import os
import re
from pathlib import Path
from typing import Iterator, Tuple

import yaml

LOGGING_CONFIG = Path(__file__).with_name("logging.yaml")
FILE_HANDLER_CLASSES = frozenset({"logging.FileHandler", "logging.handlers.RotatingFileHandler"})

_ENV_DEFAULT = re.compile(r"\$\{([^}:]+):-([^}]+)\}")
_TRUTHY = frozenset({"1", "true", "yes", "on", "y"})


def _env_flag(name: str, *, default: bool = False) -> bool:
  value = os.environ.get(name)
  if value is None:
    return default
  return value.strip().lower() in _TRUTHY


def _file_handlers(config: dict) -> Iterator[Tuple[str, dict]]:
  for name, handler in config.get("handlers", {}).items():
    if handler.get("class") in FILE_HANDLER_CLASSES:
      yield name, handler


def _remove_file_handlers(config: dict) -> None:
  dropped = {name for name, _ in _file_handlers(config)}
  if not dropped:
    return
  for name in dropped:
    del config["handlers"][name]

  # Every place that names a handler
  targets = [config.get("root", {}), *config.get("loggers", {}).values()]
  for target in targets:
    target["handlers"] = [name for name in target.get("handlers", []) if name not in dropped]


def _find_project_root() -> Path:
  package_dir = Path(__file__).resolve().parent
  return next(
    (candidate for candidate in (package_dir, *package_dir.parents) if (candidate / "pyproject.toml").exists()),
    package_dir.parent,
  )


def _anchor_file_handler_paths(config: dict, *, base_dir: Path) -> None:
  for _, handler in _file_handlers(config):
    filename = handler.get("filename")
    if filename and not Path(filename).is_absolute():
      handler["filename"] = str((base_dir / filename).resolve())


def _ensure_file_handler_directories(config: dict) -> None:
  for _, handler in _file_handlers(config):
    filename = handler.get("filename")
    if filename:
      Path(filename).parent.mkdir(parents=True, exist_ok=True)


def _substitute_env_vars(config_text: str) -> str:
  return _ENV_DEFAULT.sub(lambda match: os.environ.get(match.group(1), match.group(2)), config_text)


def _load_config(config_path: Path) -> dict:
  return yaml.safe_load(_substitute_env_vars(config_path.read_text(encoding="utf-8")))


def setup_logging() -> None:
  if not LOGGING_CONFIG.exists():
    logging.basicConfig(level=logging.INFO)
    return

  config = _load_config(LOGGING_CONFIG)
  if _env_flag("RICHCONTENT_FILE_LOGGING", default=True):
    _anchor_file_handler_paths(config, base_dir=_find_project_root())
    _ensure_file_handler_directories(config)
  else:
    _remove_file_handlers(config)
  logging.config.dictConfig(config)


setup_logging()
