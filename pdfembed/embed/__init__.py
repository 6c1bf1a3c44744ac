"""
Embed module for PDFEmbed.

This module provides the <pdf> tag:
- Resolving the file argument and the width, height and page attributes
- Attributing the embed to the revision author, or to the previewing user
- Checking the embed_pdf right
- Rendering an iframe, or an inline error for each failure kind

Main classes:
- PdfTagHandler: Renders one tag occurrence
- PdfEmbedConfig: Default iframe dimensions
- TagHookRegistry: Minimal host dispatching tags in wikitext
- TextExpander, UserResolver, FileResolver, MessageLookup: Collaborator interfaces

Errors:
- PdfEmbedError: Base exception for embed module
- InvalidUserError, NoPermissionError, BlankFileError, InvalidFileError
"""

from .embed_config import PdfEmbedConfig
from .embed_core import PdfTagHandler, TAG_NAME
from .embed_errors import (
    PdfEmbedError,
    InvalidUserError,
    NoPermissionError,
    BlankFileError,
    InvalidFileError,
)
from .embed_collaborators import (
    EMBED_PDF_RIGHT,
    DefaultMessages,
    DirectoryFileResolver,
    FileHandle,
    FileResolver,
    MessageLookup,
    RequestContext,
    StaticFileResolver,
    StaticUserResolver,
    TemplateArgumentExpander,
    TextExpander,
    UserResolver,
    WikiUser,
)
from .embed_hooks import TagHookRegistry, on_parser_first_call_init
from .embed_render import EmbedDimensions, HtmlRenderer

__all__ = [
    # Main classes
    "PdfTagHandler",
    "PdfEmbedConfig",
    "TagHookRegistry",
    "HtmlRenderer",
    "EmbedDimensions",
    "on_parser_first_call_init",
    "TAG_NAME",
    
    # Collaborators
    "TextExpander",
    "UserResolver",
    "FileResolver",
    "MessageLookup",
    "TemplateArgumentExpander",
    "StaticUserResolver",
    "StaticFileResolver",
    "DirectoryFileResolver",
    "DefaultMessages",
    "WikiUser",
    "FileHandle",
    "RequestContext",
    "EMBED_PDF_RIGHT",
    
    # Errors
    "PdfEmbedError",
    "InvalidUserError",
    "NoPermissionError",
    "BlankFileError",
    "InvalidFileError",
]
