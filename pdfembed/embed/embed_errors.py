"""
Exception classes for the embed module.

Each failure kind of the <pdf> tag carries the message key used to
render its inline error fragment.
"""


class PdfEmbedError(Exception):
    """Base exception for embed module."""

    message_key = "embed_pdf_error"

    def __init__(self, message: str = ""):
        super().__init__(message or self.message_key)


class InvalidUserError(PdfEmbedError):
    """Acting user could not be resolved."""

    message_key = "embed_pdf_invalid_user"


class NoPermissionError(PdfEmbedError):
    """Acting user lacks the embed_pdf right."""

    message_key = "embed_pdf_no_permission"


class BlankFileError(PdfEmbedError):
    """File argument is empty or does not name a .pdf file."""

    message_key = "embed_pdf_blank_file"


class InvalidFileError(PdfEmbedError):
    """File argument does not resolve to an uploaded file."""

    message_key = "embed_pdf_invalid_file"
