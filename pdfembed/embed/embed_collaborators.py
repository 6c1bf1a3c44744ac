"""
Collaborator interfaces for the <pdf> tag handler.

The handler never looks up host services itself. It is given a text
expander, a user resolver, a file resolver and a message lookup. This
module defines those interfaces, the values they exchange, and
in-memory implementations for the CLI and tests.
"""

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, FrozenSet, Iterable, Mapping, Optional
from urllib.parse import quote

from ..config.logger_module import log_debug
from ..wiki.wiki_title import WikiTitle


EMBED_PDF_RIGHT = "embed_pdf"

# Actions during which the tag is evaluated for an edit preview
PREVIEW_ACTIONS = frozenset({"edit", "submit"})

DEFAULT_MESSAGES = {
    "embed_pdf_invalid_user": "Error: An invalid user was supplied.",
    "embed_pdf_no_permission": "Error: The user who last edited this page does not have permission to embed PDFs.",
    "embed_pdf_blank_file": "Error: A file name ending in .pdf must be given.",
    "embed_pdf_invalid_file": "Error: The file given does not exist.",
}


@dataclass(frozen=True)
class WikiUser:
    """A wiki account and the rights granted to it."""
    name: str
    rights: FrozenSet[str] = frozenset()


@dataclass(frozen=True)
class FileHandle:
    """A stored file as returned by a file resolver."""
    name: str
    url: str
    
    def get_full_url(self) -> str:
        """Absolute URL of the file."""
        return self.url


@dataclass
class RequestContext:
    """The parts of the current web request the tag handler reads."""
    action: Optional[str] = "view"
    revision_user: Optional[str] = None
    
    @property
    def is_preview(self) -> bool:
        return self.action in PREVIEW_ACTIONS


class TextExpander(ABC):
    """Resolves template syntax in the current rendering context."""
    
    @abstractmethod
    def expand(self, text: str) -> str:
        """
        Expand placeholders and templates in text.
        
        Args:
            text: Raw markup
            
        Returns:
            Expanded text
        """
        pass


class UserResolver(ABC):
    """Looks up users and their rights."""
    
    @abstractmethod
    def get_current_user(self) -> Optional[WikiUser]:
        """Return the authenticated user of the current request."""
        pass
    
    @abstractmethod
    def new_from_name(self, name: Optional[str]) -> Optional[WikiUser]:
        """
        Look up a user by name.
        
        Args:
            name: User name; blank or None yields None
            
        Returns:
            WikiUser, or None if the name does not identify a user
        """
        pass
    
    def is_allowed(self, user: WikiUser, right: str) -> bool:
        """Check whether user holds right."""
        return right in user.rights


class FileResolver(ABC):
    """Maps file titles to stored files."""
    
    @abstractmethod
    def find_file(self, title: WikiTitle) -> Optional[FileHandle]:
        """
        Find the file stored under title.
        
        Returns:
            FileHandle, or None if no such file exists
        """
        pass


class MessageLookup(ABC):
    """Provides localized interface messages."""
    
    @abstractmethod
    def plain(self, key: str) -> str:
        """Return the plain text of message key."""
        pass


class TemplateArgumentExpander(TextExpander):
    """
    Substitutes template parameters from a fixed set of arguments.
    
    Handles {{{name}}} and {{{name|default}}}, innermost first, the way
    a template body sees the arguments it was transcluded with. Unknown
    parameters without a default are left as written.
    """
    
    PARAMETER_PATTERN = re.compile(r"\{\{\{([^{}|]*)(?:\|([^{}]*))?\}\}\}")
    
    def __init__(self, arguments: Optional[Mapping[str, str]] = None):
        self.arguments = {k.strip(): v for k, v in (arguments or {}).items()}
    
    def _substitute(self, match: "re.Match") -> str:
        name = match.group(1).strip()
        if name in self.arguments:
            return self.arguments[name]
        if match.group(2) is not None:
            return match.group(2)
        return match.group(0)
    
    def expand(self, text: str) -> str:
        original = text
        previous = None
        while text != previous:
            previous = text
            text = self.PARAMETER_PATTERN.sub(self._substitute, text)
        log_debug(f"Expanded template parameters: {original!r} -> {text!r}")
        return text


class StaticUserResolver(UserResolver):
    """Resolves users from an in-memory name -> rights table."""
    
    def __init__(self,
                 users: Optional[Mapping[str, Iterable[str]]] = None,
                 current_user: Optional[str] = None):
        self.users: Dict[str, FrozenSet[str]] = {
            self._normalize(name): frozenset(rights)
            for name, rights in (users or {}).items()
        }
        self.current_user = current_user
    
    @staticmethod
    def _normalize(name: str) -> str:
        name = " ".join(name.replace("_", " ").split())
        return name[:1].upper() + name[1:]
    
    def get_current_user(self) -> Optional[WikiUser]:
        return self.new_from_name(self.current_user)
    
    def new_from_name(self, name: Optional[str]) -> Optional[WikiUser]:
        if not name or not name.strip():
            return None
        name = self._normalize(name)
        if name not in self.users:
            return None
        return WikiUser(name=name, rights=self.users[name])


class StaticFileResolver(FileResolver):
    """Resolves files from an in-memory name -> URL table."""
    
    def __init__(self, files: Optional[Mapping[str, str]] = None):
        self.files: Dict[str, str] = {}
        for name, url in (files or {}).items():
            title = WikiTitle.new_from_text(name)
            if title is None:
                raise ValueError(f"Invalid file name: {name!r}")
            self.files[title.db_key] = url
    
    def find_file(self, title: WikiTitle) -> Optional[FileHandle]:
        url = self.files.get(title.db_key)
        if url is None:
            return None
        return FileHandle(name=title.db_key, url=url)


class DirectoryFileResolver(FileResolver):
    """Resolves files stored flat in a local directory."""
    
    def __init__(self, root: str, base_url: str):
        self.root = Path(root)
        self.base_url = base_url.rstrip("/")
    
    def find_file(self, title: WikiTitle) -> Optional[FileHandle]:
        path = self.root / title.db_key
        if not path.is_file():
            return None
        return FileHandle(
            name=title.db_key,
            url=f"{self.base_url}/{quote(title.db_key)}"
        )


class DefaultMessages(MessageLookup):
    """English messages, optionally overridden per key."""
    
    def __init__(self, overrides: Optional[Mapping[str, str]] = None):
        self.messages = dict(DEFAULT_MESSAGES)
        self.messages.update(overrides or {})
    
    def plain(self, key: str) -> str:
        # Missing messages render as ⧼key⧽, matching the wiki's fallback
        return self.messages.get(key, f"⧼{key}⧽")
