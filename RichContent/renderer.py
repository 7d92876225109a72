"""
Read-only rendering of stored answers.

Used by live previews, the editable surface's committed state, instructor
feedback screens and report export. Rendering never mutates its input and is
safe to repeat.
"""
from __future__ import annotations

import logging

from bs4 import BeautifulSoup

from RichContent.contentast import ContentAST
from RichContent.parser import ImageSegment, ParsedSegment, TableSegment, TextSegment, iter_segments

log = logging.getLogger(__name__)


def _segment_element(segment: ParsedSegment) -> ContentAST.Element:
  if isinstance(segment, TextSegment):
    return ContentAST.Text(segment.content)
  if isinstance(segment, TableSegment):
    return ContentAST.Table(segment.markup)
  if isinstance(segment, ImageSegment):
    return ContentAST.Picture(segment.markup)
  raise TypeError(f"Unknown segment type: {type(segment).__name__}")


def render(content: str) -> ContentAST.Section:
  """Build the presentation tree for ``content``."""
  section = ContentAST.Section()
  for segment in iter_segments(content or ""):
    section.add_element(_segment_element(segment))
  log.debug(f"Rendered {len(section)} segment(s)")
  return section


def render_html(content: str) -> str:
  return render(content).render("html")


def plain_text(content: str) -> str:
  """Visible text of ``content`` with every tag removed."""
  if not content:
    return ""
  return BeautifulSoup(content, "html.parser").get_text()
