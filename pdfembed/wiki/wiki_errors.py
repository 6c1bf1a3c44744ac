"""
Custom exceptions for the wiki module.
"""


class WikiError(Exception):
    """Base exception for wiki module."""
    pass


class WikiApiError(WikiError):
    """Raised when a MediaWiki API request fails or returns an error object."""
    
    def __init__(self, message: str, code: str = None):
        super().__init__(message)
        self.code = code


class WikiTitleError(WikiError):
    """Raised when text cannot be turned into a valid title."""
    pass
