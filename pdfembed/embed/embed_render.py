"""
HTML rendering for the <pdf> tag.

Builds the two fragments the tag can produce. The error span is an lxml
element serialized with the HTML method. The iframe is written out with
its attribute values HTML-escaped and otherwise verbatim, since the HTML
serializer would percent-encode the src URL.
"""

import html

from lxml import etree
from pydantic import BaseModel


class EmbedDimensions(BaseModel):
    """Resolved size and start page of an embed."""
    width: int
    height: int
    page: int = 1


class HtmlRenderer:
    """Serializes error and embed fragments."""
    
    error_class = "error"
    iframe_style = "max-width: 100%;"
    
    @staticmethod
    def _serialize(element: etree._Element) -> str:
        return etree.tostring(element, method="html", encoding="unicode")
    
    def error(self, message: str) -> str:
        """
        Build an inline error fragment.
        
        Args:
            message: Plain message text
            
        Returns:
            <span class="error">message</span>
        """
        span = etree.Element("span", {"class": self.error_class})
        span.text = message
        return self._serialize(span)
    
    def embed(self, url: str, dimensions: EmbedDimensions) -> str:
        """
        Build the iframe showing a PDF at a given page.
        
        Args:
            url: Absolute URL of the PDF file
            dimensions: Width, height and start page
            
        Returns:
            <iframe width=".." height=".." src="url#page=N" style=".."></iframe>
        """
        attributes = [
            ("width", str(dimensions.width)),
            ("height", str(dimensions.height)),
            ("src", f"{url}#page={dimensions.page}"),
            ("style", self.iframe_style),
        ]
        rendered = " ".join(
            f'{name}="{html.escape(value, quote=True)}"' for name, value in attributes
        )
        return f"<iframe {rendered}></iframe>"
