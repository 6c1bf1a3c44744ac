"""
Registration of the <pdf> tag with a markup host.

A host exposes set_hook(name, callback) and calls the callback for each
occurrence of the tag with its body, attributes and request context.
TagHookRegistry is a minimal host of that kind, used to render whole
wikitext pages outside a wiki.
"""

import html
import re
from typing import Callable, Dict, Mapping, Optional

from ..config.logger_module import log_debug, log_info
from .embed_collaborators import RequestContext
from .embed_core import TAG_NAME, PdfTagHandler


TagCallback = Callable[[Optional[str], Mapping[str, str], RequestContext], str]

ATTRIBUTE_PATTERN = re.compile(
    r"""([\w:.-]+)(?:\s*=\s*(?:"([^"]*)"|'([^']*)'|([^\s"'>]+)))?"""
)


def on_parser_first_call_init(parser, handler: PdfTagHandler) -> bool:
    """
    Register the pdf tag with a parser.
    
    Args:
        parser: Any object with set_hook(name, callback)
        handler: Tag handler whose generate_tag becomes the callback
        
    Returns:
        True
    """
    parser.set_hook(TAG_NAME, handler.generate_tag)
    return True


def parse_attributes(text: str) -> Dict[str, str]:
    """
    Decode the attribute string of a tag.
    
    Names are lower-cased; values may be double-quoted, single-quoted or
    bare, and character references in them are decoded. An attribute
    without a value maps to "". Later duplicates win.
    """
    attributes = {}
    for match in ATTRIBUTE_PATTERN.finditer(text or ""):
        name = match.group(1).lower()
        value = next((g for g in match.group(2, 3, 4) if g is not None), "")
        attributes[name] = html.unescape(value)
    return attributes


class TagHookRegistry:
    """Dispatches extension tags in wikitext to registered callbacks."""
    
    def __init__(self):
        self.hooks: Dict[str, TagCallback] = {}
    
    def set_hook(self, name: str, callback: TagCallback) -> None:
        """Register callback for tag name (case-insensitive)."""
        self.hooks[name.lower()] = callback
        log_debug(f"Registered tag hook <{name.lower()}>")
    
    def _pattern(self) -> "re.Pattern":
        names = "|".join(re.escape(name) for name in sorted(self.hooks))
        return re.compile(
            rf"<(?P<name>{names})(?P<attrs>(?:\s[^>]*?)?)"
            rf"(?:/>|>(?P<body>.*?)</(?P=name)\s*>)",
            re.IGNORECASE | re.DOTALL
        )
    
    def render(self, source: str, request: Optional[RequestContext] = None) -> str:
        """
        Replace every registered tag occurrence in source with its callback output.
        
        Args:
            source: Wikitext
            request: Request context passed to each callback
            
        Returns:
            Source with tag occurrences replaced
        """
        if not self.hooks:
            return source
        
        request = request or RequestContext()
        count = 0
        
        def replace(match: "re.Match") -> str:
            nonlocal count
            count += 1
            callback = self.hooks[match.group("name").lower()]
            return callback(match.group("body"), parse_attributes(match.group("attrs")), request)
        
        output = self._pattern().sub(replace, source)
        log_info(f"Rendered {count} extension tag(s)")
        return output
