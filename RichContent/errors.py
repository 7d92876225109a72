"""Exceptions raised by the rich-content engine."""


class RichContentError(Exception):
  """User-facing error for authoring operations."""


class ImageValidationError(RichContentError):
  """The selected file cannot be embedded (wrong type or too large)."""


class ImageReadError(RichContentError):
  """Reading the selected file into an embeddable form failed."""


class UploadInProgressError(RichContentError):
  """A field already has an image upload running."""


class SurfaceInsertionError(RichContentError):
  """The editable surface could not insert a fragment at the caret."""
