"""
Core <pdf> tag handling.

Resolves the tag's file argument and attributes, decides which user the
embed is attributed to, checks that user's embed_pdf right, and renders
either an iframe or an inline error.
"""

import re
from typing import Mapping, Optional

from ..config.config_module import parse_loose_int
from ..config.logger_module import log_info, log_warning
from ..wiki.wiki_title import WikiTitle
from .embed_collaborators import (
    EMBED_PDF_RIGHT,
    DefaultMessages,
    FileHandle,
    FileResolver,
    MessageLookup,
    RequestContext,
    TextExpander,
    UserResolver,
    WikiUser,
)
from .embed_config import PdfEmbedConfig
from .embed_errors import (
    PdfEmbedError,
    InvalidUserError,
    NoPermissionError,
    BlankFileError,
    InvalidFileError,
)
from .embed_render import EmbedDimensions, HtmlRenderer


TAG_NAME = "pdf"

# Unexpanded template parameter marker
PLACEHOLDER_MARKER = "{{{"

# At least one character followed by ".pdf", anywhere in the text
PDF_FILE_PATTERN = re.compile(r"(.+?)\.pdf", re.IGNORECASE | re.DOTALL)

DEFAULT_PAGE = 1


class PdfTagHandler:
    """
    Renders one <pdf> tag occurrence.
    
    The handler keeps no per-call state; one instance can serve every tag
    on a page. Each step of generate() either returns a value for the next
    step or raises a PdfEmbedError subclass naming the message to show.
    """
    
    def __init__(self,
                 expander: TextExpander,
                 user_resolver: UserResolver,
                 file_resolver: FileResolver,
                 messages: MessageLookup = None,
                 config: PdfEmbedConfig = None,
                 renderer: HtmlRenderer = None):
        """
        Initialize the tag handler.
        
        Args:
            expander: Resolves template syntax in the file argument and attributes
            user_resolver: Looks up the acting user and its rights
            file_resolver: Maps file titles to stored files
            messages: Error message texts (English defaults if None)
            config: Default dimensions (PdfEmbedConfig() if None)
            renderer: HTML fragment builder
        """
        self.expander = expander
        self.user_resolver = user_resolver
        self.file_resolver = file_resolver
        self.messages = messages or DefaultMessages()
        self.config = config or PdfEmbedConfig()
        self.renderer = renderer or HtmlRenderer()
    
    def generate(self,
                 file_arg: Optional[str],
                 args: Optional[Mapping[str, str]] = None,
                 request: Optional[RequestContext] = None) -> str:
        """
        Produce the HTML for one tag occurrence.
        
        Args:
            file_arg: Tag body, the name of the PDF file
            args: Tag attributes; width, height and page are read
            request: Action and revision author of the current request
            
        Returns:
            Either an <iframe> embed or a <span class="error"> fragment
        """
        args = args or {}
        request = request or RequestContext()
        
        try:
            file_text = self.expand_file_argument(file_arg)
            user = self.resolve_acting_user(request)
            self.check_permission(user)
            self.validate_file_name(file_text)
            file = self.resolve_file(file_text)
            dimensions = self.resolve_dimensions(args)
        except PdfEmbedError as e:
            log_warning(f"Not embedding PDF {file_arg!r}: {e.message_key}")
            return self.renderer.error(self.messages.plain(e.message_key))
        
        log_info(
            f"Embedding {file.name} for {user.name} "
            f"({dimensions.width}x{dimensions.height}, page {dimensions.page})"
        )
        return self.renderer.embed(file.get_full_url(), dimensions)
    
    def generate_tag(self, body: Optional[str], attributes: Mapping[str, str],
                     request: RequestContext) -> str:
        """Hook callback registered for the pdf tag."""
        return self.generate(body, attributes, request)
    
    def expand_file_argument(self, file_arg: Optional[str]) -> str:
        """Expand template parameters in the file argument, if it has any."""
        file_text = file_arg or ""
        if PLACEHOLDER_MARKER in file_text:
            file_text = self.expander.expand(file_text)
        return file_text
    
    def resolve_acting_user(self, request: RequestContext) -> WikiUser:
        """
        Find the user the embed is attributed to.
        
        During an edit preview that is the user making the request;
        otherwise it is the author of the revision being rendered.
        
        Raises:
            InvalidUserError: If no user can be resolved
        """
        if request.is_preview:
            user = self.user_resolver.get_current_user()
        else:
            user = self.user_resolver.new_from_name(request.revision_user)
        
        if user is None:
            raise InvalidUserError(f"No user for revision author {request.revision_user!r}")
        return user
    
    def check_permission(self, user: WikiUser) -> None:
        """
        Raises:
            NoPermissionError: If user lacks the embed_pdf right
        """
        if not self.user_resolver.is_allowed(user, EMBED_PDF_RIGHT):
            raise NoPermissionError(f"{user.name} lacks {EMBED_PDF_RIGHT}")
    
    def validate_file_name(self, file_text: str) -> None:
        """
        Raises:
            BlankFileError: If file_text is empty or names no .pdf file
        """
        if not file_text or not PDF_FILE_PATTERN.search(file_text):
            raise BlankFileError(f"{file_text!r} is not a PDF file name")
    
    def resolve_file(self, file_text: str) -> FileHandle:
        """
        Look up the stored file named by file_text.
        
        Raises:
            InvalidFileError: If the text is not a valid title or no file exists
        """
        title = WikiTitle.new_from_text(file_text)
        if title is None:
            raise InvalidFileError(f"{file_text!r} is not a valid title")
        
        file = self.file_resolver.find_file(title)
        if file is None:
            raise InvalidFileError(f"{title.prefixed_text} does not exist")
        return file
    
    def resolve_dimensions(self, args: Mapping[str, str]) -> EmbedDimensions:
        """Read width, height and page from the attributes, falling back to defaults."""
        return EmbedDimensions(
            width=self._int_argument(args, "width", self.config.width),
            height=self._int_argument(args, "height", self.config.height),
            page=self._int_argument(args, "page", DEFAULT_PAGE),
        )
    
    def _int_argument(self, args: Mapping[str, str], name: str, default: int) -> int:
        if name not in args:
            return default
        return parse_loose_int(self.expander.expand(args[name]))
