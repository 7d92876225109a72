"""
Split a stored answer into text, table and image segments.

Scanning is left to right: the text before the next ``<table>`` or ``<img>``
marker becomes a text segment, the element itself (a table up to its matching
close tag, an image on its own) is sanitized and becomes a table or image
segment, and scanning resumes after it. A table segment holds nothing but the
table element itself.

Malformed markup never raises. A table that is opened but never closed is
treated as plain text from its opening tag to the end of the content.
"""
from __future__ import annotations

import dataclasses
import logging
import re
from typing import Iterator, List, Optional, Tuple

from RichContent.sanitizer import sanitize, sanitize_table

log = logging.getLogger(__name__)

_MARKER = re.compile(r"<(?P<table>table)\b[^>]*>|<img\b[^>]*>", re.IGNORECASE)
_TABLE_TAG = re.compile(r"<(?P<close>/)?table\b[^>]*>", re.IGNORECASE)


@dataclasses.dataclass(frozen=True)
class ParsedSegment:
  """Base of the closed set of segment kinds."""


@dataclasses.dataclass(frozen=True)
class TextSegment(ParsedSegment):
  content: str


@dataclasses.dataclass(frozen=True)
class TableSegment(ParsedSegment):
  markup: str


@dataclasses.dataclass(frozen=True)
class ImageSegment(ParsedSegment):
  markup: str


def _find_table_end(content: str, start: int) -> Optional[int]:
  """Index just past the ``</table>`` closing the table opened at ``start``."""
  depth = 0
  for match in _TABLE_TAG.finditer(content, start):
    if match.group("close"):
      depth -= 1
      if depth == 0:
        return match.end()
    else:
      depth += 1
  return None


def _next_element(content: str, position: int) -> Optional[Tuple[int, int, bool]]:
  """(start, end, is_table) of the next complete element, or None."""
  match = _MARKER.search(content, position)
  if match is None:
    return None
  if match.group("table") is None:
    return match.start(), match.end(), False
  end = _find_table_end(content, match.start())
  if end is None:
    log.debug(f"Unterminated table at offset {match.start()}; treating remainder as text")
    return None
  return match.start(), end, True


def iter_segments(content: str) -> Iterator[ParsedSegment]:
  """
  Lazily yield the segments of ``content``.

  Adjacent text is merged, so content without any complete element yields
  exactly one text segment, and empty content yields nothing.
  """
  pending_text = ""
  position = 0
  while position < len(content):
    element = _next_element(content, position)
    if element is None:
      pending_text += content[position:]
      break

    start, end, is_table = element
    pending_text += content[position:start]
    position = end

    fragment = content[start:end]
    markup = sanitize_table(fragment) if is_table else sanitize(fragment)
    if not markup:
      log.debug(f"Fragment at offset {start} sanitized to nothing; dropping it")
      continue

    if pending_text:
      yield TextSegment(pending_text)
      pending_text = ""
    yield TableSegment(markup) if is_table else ImageSegment(markup)

  if pending_text:
    yield TextSegment(pending_text)


def parse(content: str) -> List[ParsedSegment]:
  return list(iter_segments(content or ""))
