"""
Wiki module for PDFEmbed.

Provides:
- WikiTitle: file title normalization

Imported from their own modules, not re-exported here:
- wiki_api_client.MediaWikiApiClient: retrying Action API client
- wiki_collaborators: ApiTextExpander, ApiUserResolver, ApiFileResolver
  and ApiMessageLookup, tag handler collaborators backed by a live wiki

Errors:
- WikiError: Base exception for wiki module
- WikiApiError: Transport or API failure
- WikiTitleError: Text cannot be turned into a title
"""

from .wiki_errors import WikiError, WikiApiError, WikiTitleError
from .wiki_title import WikiTitle

__all__ = [
    "WikiTitle",
    "WikiError",
    "WikiApiError",
    "WikiTitleError",
]
