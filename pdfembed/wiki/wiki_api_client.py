"""
MediaWiki Action API client with retry logic.

Wraps a requests session to call api.php with JSON responses, retrying
transient transport failures and turning API error objects into
WikiApiError.
"""

from typing import Any, Dict, Optional

import requests
from tenacity import retry, stop_after_attempt, wait_exponential, retry_if_exception_type

from .. import __version__
from ..config.config_module import get_config, get_config_int
from ..config.logger_module import log_debug, log_error
from .wiki_errors import WikiApiError


DEFAULT_USER_AGENT = f"PDFEmbed/{__version__} (python-requests)"
DEFAULT_TIMEOUT = 30


class MediaWikiApiClient:
    """
    Thin client for a wiki's api.php endpoint.
    
    Every request asks for format=json with formatversion=2, so boolean
    flags such as "missing" come back as real booleans and page sets as
    lists.
    """

    def __init__(self,
                 api_url: str = None,
                 timeout: int = None,
                 user_agent: str = None,
                 session: requests.Session = None):
        """
        Initialize the API client.
        
        Args:
            api_url: Full URL of api.php (loaded from MEDIAWIKI_API_URL if not provided)
            timeout: HTTP request timeout in seconds
            user_agent: User-Agent header sent with every request
            session: Preconfigured session, e.g. one carrying login cookies
        """
        self.api_url = api_url or get_config("MEDIAWIKI_API_URL")
        if not self.api_url:
            raise ValueError("MEDIAWIKI_API_URL not provided or found in config")
        
        self.timeout = timeout or get_config_int("MEDIAWIKI_API_TIMEOUT", DEFAULT_TIMEOUT)
        self.user_agent = user_agent or get_config("MEDIAWIKI_USER_AGENT", DEFAULT_USER_AGENT)
        
        self._session = session or requests.Session()
        self._session.headers.update({"User-Agent": self.user_agent})

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=1, max=10),
        retry=retry_if_exception_type((requests.exceptions.ConnectionError,
                                       requests.exceptions.Timeout)),
        reraise=True
    )
    def _send(self, params: Dict[str, Any], post: bool) -> requests.Response:
        if post:
            return self._session.post(self.api_url, data=params, timeout=self.timeout)
        return self._session.get(self.api_url, params=params, timeout=self.timeout)

    def request(self, params: Dict[str, Any], post: bool = False) -> Dict[str, Any]:
        """
        Call the API and return the decoded response.
        
        Args:
            params: Query parameters; format and formatversion are added
            post: Send as a POST body instead of a query string
            
        Returns:
            Decoded JSON response
            
        Raises:
            WikiApiError: On transport failure, a non-200 status, a body
                that is not JSON, or an API error object
        """
        params = dict(params, format="json", formatversion="2")
        action = params.get("action", "?")
        
        try:
            response = self._send(params, post)
        except requests.exceptions.RequestException as e:
            log_error(f"MediaWiki API request failed (action={action}): {e}")
            raise WikiApiError(f"Request failed: {str(e)}")
        
        if response.status_code != 200:
            log_error(f"MediaWiki API returned HTTP {response.status_code} (action={action})")
            raise WikiApiError(f"HTTP {response.status_code} from {self.api_url}")
        
        try:
            data = response.json()
        except ValueError:
            raise WikiApiError(f"Response from {self.api_url} is not JSON")
        
        if "error" in data:
            error = data["error"]
            code = error.get("code", "unknown")
            info = error.get("info", "")
            log_error(f"MediaWiki API error {code} (action={action}): {info}")
            raise WikiApiError(f"{code}: {info}", code=code)
        
        log_debug(f"MediaWiki API request succeeded (action={action})")
        return data

    def query(self, **params: Any) -> Dict[str, Any]:
        """
        Run an action=query request.
        
        Returns:
            The "query" member of the response (empty if absent)
        """
        data = self.request(dict(params, action="query"))
        return data.get("query", {})
