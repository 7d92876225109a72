from __future__ import annotations

import html
from typing import List

from bs4 import BeautifulSoup

from RichContent.grid_table import plain_text_table


class ContentAST:
  """
  Content Abstract Syntax Tree - presentation tree for authored answers.

  The renderer turns a stored answer into a Section of elements, and every
  consumer (live preview, editable surface, instructor feedback screen, report
  export) asks that tree for the output format it needs instead of touching
  the raw string.

  Key Components:
  - ContentAST.Section: ordered container, one per rendered answer
  - ContentAST.Text: free text, whitespace and line breaks significant
  - ContentAST.Table: an already-sanitized table fragment
  - ContentAST.Picture: an already-sanitized inline image fragment

  Supported output formats: "html", "markdown", "text", and "editable" (the
  canonical content form loaded into an editable surface: text as typed,
  tables and images as their markup).

  Examples:
    section = ContentAST.Section()
    section.add_element(ContentAST.Text("Results:\\n"))
    section.add_element(ContentAST.Table(sanitized_table_markup))

    section.render("html")      # markup for a read-only view
    section.render("markdown")  # pipe tables for exported reports
  """

  class Element:
    """
    Base class for all ContentAST elements providing cross-format rendering.

    ``render(output_format)`` dispatches to ``render_<format>`` and falls back
    to ``render_text`` for formats an element does not know about.
    """
    def __init__(self, elements=None):
      self.elements : List[ContentAST.Element] = elements or []

    def __str__(self):
      return self.render_text()

    def add_element(self, element):
      self.elements.append(element)

    def add_elements(self, elements):
      self.elements.extend(elements)

    def render(self, output_format, **kwargs):
      method_name = f"render_{output_format}"
      if hasattr(self, method_name):
        return getattr(self, method_name)(**kwargs)

      return self.render_text(**kwargs)  # Fallback to plain text

    def render_html(self, **kwargs):
      return "".join(element.render("html", **kwargs) for element in self.elements)

    def render_markdown(self, **kwargs):
      return "".join(element.render("markdown", **kwargs) for element in self.elements)

    def render_text(self, **kwargs):
      return "".join(element.render("text", **kwargs) for element in self.elements)

    def render_editable(self, **kwargs):
      return "".join(element.render("editable", **kwargs) for element in self.elements)

  class Section(Element):
    """
    Ordered container for the elements of one rendered answer.

    An empty section renders to an empty string in every format.
    """
    def __len__(self):
      return len(self.elements)

    def __iter__(self):
      return iter(self.elements)

  class Text(Element):
    """
    Free text whose whitespace is significant.

    Content is escaped for HTML. With ``wrap_text=True`` (the default) it is
    wrapped in a pre-wrap block so line breaks survive in read-only views;
    ``wrap_text=False`` gives the bare escaped text for callers that style the
    container themselves. The editable form is the text unescaped, exactly as
    the author typed it.
    """
    def __init__(self, content : str):
      super().__init__()
      self.content = content

    def render_html(self, wrap_text=True, **kwargs):
      escaped = html.escape(self.content, quote=False)
      if not wrap_text:
        return escaped
      return f'<div style="white-space: pre-wrap;">{escaped}</div>'

    def render_markdown(self, **kwargs):
      return self.content

    def render_text(self, **kwargs):
      return self.content

    def render_editable(self, **kwargs):
      return self.content

  class Table(Element):
    """
    A sanitized table fragment.

    HTML output is the fragment itself. Markdown and text outputs are rebuilt
    from the cells so exported reports stay readable without an HTML engine;
    a first row made only of header cells becomes the header row.
    """
    def __init__(self, markup : str):
      super().__init__()
      self.markup = markup
      self.rows, self.has_header_row = self._extract_rows(markup)

    @staticmethod
    def _extract_rows(markup):
      soup = BeautifulSoup(markup, "html.parser")
      rows = []
      has_header_row = False
      for index, row in enumerate(soup.find_all("tr")):
        cells = row.find_all(["td", "th"])
        if index == 0 and cells and all(cell.name == "th" for cell in cells):
          has_header_row = True
        rows.append([cell.get_text() for cell in cells])
      return rows, has_header_row

    def render_html(self, **kwargs):
      return self.markup

    def render_markdown(self, **kwargs):
      if not self.rows:
        return ""
      width = max(len(row) for row in self.rows)
      padded = [row + [""] * (width - len(row)) for row in self.rows]

      result = []
      if self.has_header_row:
        headers, body = padded[0], padded[1:]
      else:
        headers, body = [""] * width, padded
      result.append("| " + " | ".join(headers) + " |")
      result.append("| " + " | ".join(["---"] * width) + " |")
      for row in body:
        result.append("| " + " | ".join(row) + " |")

      return "\n\n" + "\n".join(result) + "\n\n"

    def render_text(self, **kwargs):
      if not self.rows:
        return ""
      return "\n" + plain_text_table(self.rows, has_header_row=self.has_header_row) + "\n"

    def render_editable(self, **kwargs):
      return self.markup

  class Picture(Element):
    """
    A sanitized inline image fragment whose source is a data URI.
    """
    def __init__(self, markup : str):
      super().__init__()
      self.markup = markup
      image = BeautifulSoup(markup, "html.parser").find("img")
      self.src = image.get("src", "") if image is not None else ""

    def render_html(self, **kwargs):
      return self.markup

    def render_markdown(self, **kwargs):
      return f"![image]({self.src})"

    def render_text(self, **kwargs):
      return "[image]"

    def render_editable(self, **kwargs):
      return self.markup
