"""
Configuration for the embed module.

Holds the default iframe dimensions used when a <pdf> tag omits
its width or height attribute.
"""

from dataclasses import dataclass
from typing import Union

from ..config.config_module import get_config_int, parse_loose_int


DEFAULT_WIDTH = 800
DEFAULT_HEIGHT = 1090


@dataclass
class PdfEmbedConfig:
    """Default dimensions for embedded PDF iframes."""
    
    # Iframe width in pixels when the tag has no width attribute
    width: Union[int, str] = DEFAULT_WIDTH
    
    # Iframe height in pixels when the tag has no height attribute
    height: Union[int, str] = DEFAULT_HEIGHT
    
    def __post_init__(self):
        """Coerce integer-like values and validate them."""
        self.width = parse_loose_int(self.width)
        self.height = parse_loose_int(self.height)
        
        if self.width < 0:
            raise ValueError(f"width must not be negative, got {self.width}")
        if self.height < 0:
            raise ValueError(f"height must not be negative, got {self.height}")
    
    @classmethod
    def from_env(cls) -> "PdfEmbedConfig":
        """
        Build the configuration from PDFEMBED_WIDTH and PDFEMBED_HEIGHT.
        
        Returns:
            PdfEmbedConfig with defaults for unset keys
        """
        return cls(
            width=get_config_int("PDFEMBED_WIDTH", DEFAULT_WIDTH),
            height=get_config_int("PDFEMBED_HEIGHT", DEFAULT_HEIGHT),
        )
