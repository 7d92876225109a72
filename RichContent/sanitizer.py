"""
Allowlist sanitizer for embedded table and image fragments.

Answers are stored as strings and later injected as live markup into other
users' views (instructors reading student work, exported reports), so every
fragment passes through here before it is rendered.

Two passes:
  1. BeautifulSoup drops every element outside the allowlist *together with
     its content*, so text that lived inside a ``<script>`` never leaks out
     through a stripped tag boundary. Images without an inline data source
     are dropped here too.
  2. bleach enforces the per-element attribute allowlist, the CSS property
     allowlist for ``style`` and the ``data:`` scheme for image sources.

The output of ``sanitize`` is a fixed point: sanitizing it again returns it
unchanged, so content can be sanitized at authoring time and again at render
time.
"""
from __future__ import annotations

import logging

import bleach
from bleach.css_sanitizer import CSSSanitizer
from bs4 import BeautifulSoup

log = logging.getLogger(__name__)

ALLOWED_TAGS = frozenset({"table", "thead", "tbody", "tr", "td", "th", "img"})

ALLOWED_ATTRIBUTES = {
  "table": ["style"],
  "td": ["style"],
  "th": ["style"],
  "img": ["src", "style"],
}

ALLOWED_CSS_PROPERTIES = [
  "border",
  "border-collapse",
  "width",
  "max-width",
  "height",
  "margin",
  "padding",
  "background-color",
  "font-weight",
  "text-align",
]

ALLOWED_PROTOCOLS = ["data"]

_CSS_SANITIZER = CSSSanitizer(allowed_css_properties=ALLOWED_CSS_PROPERTIES)


def _is_embeddable_image_source(value: str) -> bool:
  return value.strip().lower().startswith("data:image/")


def _allow_attribute(tag: str, name: str, value: str) -> bool:
  if name not in ALLOWED_ATTRIBUTES.get(tag, []):
    return False
  if tag == "img" and name == "src":
    return _is_embeddable_image_source(value)
  return True


def _prune_disallowed_elements(fragment: str) -> str:
  soup = BeautifulSoup(fragment, "html.parser")
  removed = 0
  for tag in soup.find_all(True):
    if tag.decomposed:
      # Already gone with a removed ancestor
      continue
    if tag.name not in ALLOWED_TAGS:
      tag.decompose()
      removed += 1
    elif tag.name == "img" and not _is_embeddable_image_source(tag.get("src", "")):
      # An image with nothing to show
      tag.decompose()
      removed += 1
  if removed:
    log.debug(f"Removed {removed} disallowed element(s) from fragment")
  return str(soup)


def sanitize(fragment: str) -> str:
  """
  Reduce a markup fragment to the table/image allowlist.

  Disallowed elements are removed with their content; disallowed attributes
  are dropped from otherwise-allowed elements. Images whose source is not an
  inline ``data:image/`` URI are removed outright. Never raises.
  """
  if not fragment:
    return ""
  pruned = _prune_disallowed_elements(fragment)
  return bleach.clean(
    pruned,
    tags=ALLOWED_TAGS,
    attributes=_allow_attribute,
    protocols=ALLOWED_PROTOCOLS,
    css_sanitizer=_CSS_SANITIZER,
    strip=True,
    strip_comments=True,
  )


def sanitize_table(fragment: str) -> str:
  """
  Sanitize a fragment that must come out as exactly one table.

  HTML parsing moves stray text that sits directly inside ``<table>`` (outside
  any cell) in front of the table. That text, and anything else left beside
  the table, is discarded. Returns "" when no table survives.
  """
  cleaned = sanitize(fragment)
  if not cleaned:
    return ""
  soup = BeautifulSoup(cleaned, "html.parser")
  table = soup.find("table")
  if table is None:
    return ""
  if len(soup.contents) == 1:
    return cleaned
  log.debug(f"Discarding {len(soup.contents) - 1} node(s) outside the table root")
  return sanitize(str(table))
