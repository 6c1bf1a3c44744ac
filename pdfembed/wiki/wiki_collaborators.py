"""
Tag handler collaborators backed by the MediaWiki Action API.

Each class implements one collaborator interface of the embed module
by querying a live wiki through MediaWikiApiClient.
"""

from typing import List, Optional

from pydantic import BaseModel

from ..embed.embed_collaborators import (
    FileHandle,
    FileResolver,
    MessageLookup,
    TextExpander,
    UserResolver,
    WikiUser,
)
from .wiki_api_client import MediaWikiApiClient
from .wiki_errors import WikiApiError
from .wiki_title import WikiTitle


class ImageInfo(BaseModel):
    """Model for one imageinfo revision."""
    url: str


class FilePage(BaseModel):
    """Model for a page entry of a prop=imageinfo query."""
    title: str
    missing: bool = False
    invalid: bool = False
    imageinfo: List[ImageInfo] = []


class ApiUser(BaseModel):
    """Model for a list=users or meta=userinfo entry."""
    name: Optional[str] = None
    missing: bool = False
    invalid: bool = False
    rights: List[str] = []


class ApiMessage(BaseModel):
    """Model for a meta=allmessages entry."""
    name: str
    content: Optional[str] = None
    missing: bool = False


class ApiTextExpander(TextExpander):
    """Expands wikitext with action=expandtemplates."""
    
    def __init__(self, client: MediaWikiApiClient, title: str = None):
        """
        Args:
            client: API client
            title: Page used as the expansion context ({{PAGENAME}} etc.)
        """
        self.client = client
        self.title = title
    
    def expand(self, text: str) -> str:
        params = {"action": "expandtemplates", "text": text, "prop": "wikitext"}
        if self.title:
            params["title"] = self.title
        data = self.client.request(params, post=True)
        
        try:
            return data["expandtemplates"]["wikitext"]
        except KeyError:
            raise WikiApiError("expandtemplates response has no wikitext")


class ApiUserResolver(UserResolver):
    """Looks up users and rights with list=users and meta=userinfo."""
    
    def __init__(self, client: MediaWikiApiClient):
        self.client = client
    
    def get_current_user(self) -> Optional[WikiUser]:
        result = self.client.query(meta="userinfo", uiprop="rights")
        if "userinfo" not in result:
            return None
        user = ApiUser.model_validate(result["userinfo"])
        return WikiUser(name=user.name or "", rights=frozenset(user.rights))
    
    def new_from_name(self, name: Optional[str]) -> Optional[WikiUser]:
        if not name or not name.strip():
            return None
        
        result = self.client.query(list="users", ususers=name, usprop="rights")
        users = [ApiUser.model_validate(u) for u in result.get("users", [])]
        if not users:
            return None
        
        user = users[0]
        if user.missing or user.invalid or not user.name:
            return None
        return WikiUser(name=user.name, rights=frozenset(user.rights))


class ApiFileResolver(FileResolver):
    """Finds files and their URLs with prop=imageinfo."""
    
    def __init__(self, client: MediaWikiApiClient):
        self.client = client
    
    def find_file(self, title: WikiTitle) -> Optional[FileHandle]:
        result = self.client.query(
            titles=title.prefixed_text,
            prop="imageinfo",
            iiprop="url",
        )
        for entry in result.get("pages", []):
            page = FilePage.model_validate(entry)
            # Files from a shared repository are "missing" locally but still carry imageinfo
            if page.invalid or not page.imageinfo:
                continue
            return FileHandle(name=title.db_key, url=page.imageinfo[0].url)
        return None


class ApiMessageLookup(MessageLookup):
    """Reads interface messages with meta=allmessages."""
    
    def __init__(self, client: MediaWikiApiClient, language: str = None):
        self.client = client
        self.language = language
    
    def plain(self, key: str) -> str:
        params = {"meta": "allmessages", "ammessages": key}
        if self.language:
            params["amlang"] = self.language
        result = self.client.query(**params)
        
        for entry in result.get("allmessages", []):
            message = ApiMessage.model_validate(entry)
            if message.name == key and not message.missing and message.content is not None:
                return message.content
        return f"⧼{key}⧽"
