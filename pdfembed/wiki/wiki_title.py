"""
File title normalization.

Turns the text of a <pdf> tag into the canonical title of a file page,
using the same rules the wiki applies to page names.
"""

import re
from dataclasses import dataclass
from typing import Optional

from .wiki_errors import WikiTitleError


FILE_NAMESPACE = "File"

# Canonical namespace names and aliases. A title in any of them is moved
# into the file namespace by its name alone, so the prefix is dropped.
NAMESPACE_PREFIXES = frozenset({
    "media", "special", "talk",
    "user", "user talk",
    "project", "project talk",
    "file", "file talk", "image", "image talk",
    "mediawiki", "mediawiki talk",
    "template", "template talk",
    "help", "help talk",
    "category", "category talk",
})

MAX_TITLE_BYTES = 255

_ILLEGAL_CHARS = re.compile(r"[<>\[\]|{}\x00-\x1f\x7f]")
_WHITESPACE_RUN = re.compile(r"[ \t\u00a0\u3000]+")


@dataclass(frozen=True)
class WikiTitle:
    """Canonical title of a page in the file namespace."""
    text: str
    namespace: str = FILE_NAMESPACE
    
    @property
    def db_key(self) -> str:
        """Title text as stored: spaces become underscores."""
        return self.text.replace(" ", "_")
    
    @property
    def prefixed_text(self) -> str:
        return f"{self.namespace}:{self.text}"
    
    @classmethod
    def new_from_text(cls, text: Optional[str]) -> Optional["WikiTitle"]:
        """
        Normalize text into a file title.
        
        Args:
            text: Raw title text, with or without a namespace prefix such as File:
            
        Returns:
            WikiTitle, or None if the text is not a valid title
        """
        try:
            return cls.parse(text)
        except WikiTitleError:
            return None
    
    @classmethod
    def parse(cls, text: Optional[str]) -> "WikiTitle":
        """
        Normalize text into a file title.
        
        Raises:
            WikiTitleError: If the text is empty, too long or has illegal characters
        """
        if text is None:
            raise WikiTitleError("Title text is missing")
        
        # Fragments are not part of the title
        text = text.split("#", 1)[0]
        
        text = _WHITESPACE_RUN.sub(" ", text.replace("_", " ")).strip()
        text = text.lstrip(":").strip()
        
        if ":" in text:
            prefix, rest = text.split(":", 1)
            if prefix.strip().lower() in NAMESPACE_PREFIXES:
                text = rest.strip()
        
        if not text:
            raise WikiTitleError("Title is empty")
        
        match = _ILLEGAL_CHARS.search(text)
        if match:
            raise WikiTitleError(f"Title contains illegal character {match.group(0)!r}")
        
        if len(text.encode("utf-8")) > MAX_TITLE_BYTES:
            raise WikiTitleError(f"Title exceeds {MAX_TITLE_BYTES} bytes")
        
        return cls(text=text[0].upper() + text[1:])
