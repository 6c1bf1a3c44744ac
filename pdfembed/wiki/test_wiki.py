"""
Test suite for the wiki module.

Covers title normalization, the Action API client and the API-backed
collaborators, with the HTTP session mocked out.
"""

from unittest.mock import Mock, MagicMock, patch

import pytest
import requests
from tenacity import wait_none

from .wiki_api_client import MediaWikiApiClient, DEFAULT_TIMEOUT
from .wiki_collaborators import (
    ApiFileResolver,
    ApiMessageLookup,
    ApiTextExpander,
    ApiUserResolver,
)
from .wiki_errors import WikiApiError, WikiError, WikiTitleError
from .wiki_title import WikiTitle, MAX_TITLE_BYTES
from ..embed.embed_collaborators import EMBED_PDF_RIGHT, FileHandle, WikiUser


API_URL = "https://wiki.example.org/w/api.php"


# ==================== FIXTURES ====================

@pytest.fixture(autouse=True)
def mock_logging():
    """Mock logging functions in the API client."""
    with patch('pdfembed.wiki.wiki_api_client.log_debug'), \
         patch('pdfembed.wiki.wiki_api_client.log_error'):
        yield


@pytest.fixture(autouse=True)
def no_retry_wait(monkeypatch):
    """Retry immediately instead of backing off."""
    monkeypatch.setattr(MediaWikiApiClient._send.retry, "wait", wait_none())


def make_response(payload=None, status_code=200):
    response = MagicMock()
    response.status_code = status_code
    if isinstance(payload, Exception):
        response.json.side_effect = payload
    else:
        response.json.return_value = payload
    return response


@pytest.fixture
def session():
    session = MagicMock(spec=requests.Session)
    session.headers = {}
    return session


@pytest.fixture
def client(session):
    return MediaWikiApiClient(api_url=API_URL, timeout=5, user_agent="test-agent", session=session)


# ==================== TEST CLASSES ====================

class TestErrors:
    """Test custom exceptions."""
    
    def test_hierarchy(self):
        assert issubclass(WikiApiError, WikiError)
        assert issubclass(WikiTitleError, WikiError)
    
    def test_api_error_code(self):
        error = WikiApiError("badtoken: Invalid token", code="badtoken")
        assert str(error) == "badtoken: Invalid token"
        assert error.code == "badtoken"


class TestWikiTitle:
    """Test file title normalization."""
    
    @pytest.mark.parametrize("text,expected", [
        ("Sample.pdf", "Sample.pdf"),
        ("sample.pdf", "Sample.pdf"),
        ("  Annual_report  2020.pdf ", "Annual report 2020.pdf"),
        ("File:Manual.pdf", "Manual.pdf"),
        ("image: manual.pdf", "Manual.pdf"),
        ("Media:Manual.pdf", "Manual.pdf"),
        (":File:Manual.pdf", "Manual.pdf"),
        ("Manual.pdf#page=3", "Manual.pdf"),
        ("Help:Manual.pdf", "Manual.pdf"),
        ("User:Sample.pdf", "Sample.pdf"),
        ("user_talk:sample.pdf", "Sample.pdf"),
        ("Category: Sample.pdf", "Sample.pdf"),
        ("Q3: Sample.pdf", "Q3: Sample.pdf"),
        ("élan.pdf", "Élan.pdf"),
    ])
    def test_normalization(self, text, expected):
        assert WikiTitle.new_from_text(text).text == expected
    
    def test_db_key_and_prefixed_text(self):
        title = WikiTitle.new_from_text("annual report.pdf")
        assert title.db_key == "Annual_report.pdf"
        assert title.prefixed_text == "File:Annual report.pdf"
        assert title.namespace == "File"
    
    @pytest.mark.parametrize("text", [
        None, "", "   ", "File:", "#frag", "a<b.pdf", "a>b.pdf", "a[b].pdf",
        "a|b.pdf", "a{b}.pdf", "a\nb.pdf",
    ])
    def test_invalid(self, text):
        assert WikiTitle.new_from_text(text) is None
        with pytest.raises(WikiTitleError):
            WikiTitle.parse(text)
    
    def test_length_limit(self):
        assert WikiTitle.new_from_text("a" * (MAX_TITLE_BYTES - 4) + ".pdf") is not None
        assert WikiTitle.new_from_text("a" * (MAX_TITLE_BYTES - 3) + ".pdf") is None
        # Limit is in bytes, not characters
        assert WikiTitle.new_from_text("é" * 126 + ".pdf") is None


class TestMediaWikiApiClient:
    """Test the Action API client."""
    
    def test_initialization(self, client, session):
        assert client.api_url == API_URL
        assert client.timeout == 5
        assert session.headers["User-Agent"] == "test-agent"
    
    def test_configuration_from_env(self, monkeypatch, session):
        monkeypatch.setenv("MEDIAWIKI_API_URL", API_URL)
        monkeypatch.delenv("MEDIAWIKI_API_TIMEOUT", raising=False)
        
        client = MediaWikiApiClient(session=session)
        
        assert client.api_url == API_URL
        assert client.timeout == DEFAULT_TIMEOUT
        assert session.headers["User-Agent"].startswith("PDFEmbed/")
    
    def test_missing_api_url(self, monkeypatch):
        monkeypatch.delenv("MEDIAWIKI_API_URL", raising=False)
        with pytest.raises(ValueError) as exc_info:
            MediaWikiApiClient()
        assert "MEDIAWIKI_API_URL" in str(exc_info.value)
    
    def test_get_request(self, client, session):
        session.get.return_value = make_response({"query": {"pages": []}})
        
        result = client.query(titles="File:A.pdf", prop="imageinfo")
        
        assert result == {"pages": []}
        session.get.assert_called_once_with(
            API_URL,
            params={
                "titles": "File:A.pdf",
                "prop": "imageinfo",
                "action": "query",
                "format": "json",
                "formatversion": "2",
            },
            timeout=5,
        )
    
    def test_post_request(self, client, session):
        session.post.return_value = make_response({"expandtemplates": {"wikitext": "x"}})
        
        client.request({"action": "expandtemplates", "text": "{{x}}"}, post=True)
        
        assert session.post.call_args[1]["data"]["text"] == "{{x}}"
        session.get.assert_not_called()
    
    def test_api_error_object(self, client, session):
        session.get.return_value = make_response(
            {"error": {"code": "readapidenied", "info": "You need read permission."}}
        )
        
        with pytest.raises(WikiApiError) as exc_info:
            client.query(meta="userinfo")
        
        assert exc_info.value.code == "readapidenied"
        assert "You need read permission." in str(exc_info.value)
    
    def test_http_error_status(self, client, session):
        session.get.return_value = make_response({}, status_code=503)
        
        with pytest.raises(WikiApiError) as exc_info:
            client.query(meta="userinfo")
        
        assert "HTTP 503" in str(exc_info.value)
    
    def test_non_json_body(self, client, session):
        session.get.return_value = make_response(ValueError("Expecting value"))
        
        with pytest.raises(WikiApiError) as exc_info:
            client.query(meta="userinfo")
        
        assert "not JSON" in str(exc_info.value)
    
    def test_transient_failure_retried(self, client, session):
        session.get.side_effect = [
            requests.exceptions.ConnectionError("reset"),
            requests.exceptions.Timeout("slow"),
            make_response({"query": {"ok": True}}),
        ]
        
        assert client.query(meta="siteinfo") == {"ok": True}
        assert session.get.call_count == 3
    
    def test_retries_exhausted(self, client, session):
        session.get.side_effect = requests.exceptions.ConnectionError("down")
        
        with pytest.raises(WikiApiError) as exc_info:
            client.query(meta="siteinfo")
        
        assert "Request failed" in str(exc_info.value)
        assert session.get.call_count == 3
    
    def test_other_request_errors_not_retried(self, client, session):
        session.get.side_effect = requests.exceptions.InvalidURL("bad url")
        
        with pytest.raises(WikiApiError):
            client.query(meta="siteinfo")
        
        assert session.get.call_count == 1
    
    def test_query_without_query_member(self, client, session):
        session.get.return_value = make_response({"batchcomplete": True})
        assert client.query(meta="siteinfo") == {}


class TestApiTextExpander:
    """Test expansion through action=expandtemplates."""
    
    def test_expand(self, client, session):
        session.post.return_value = make_response({"expandtemplates": {"wikitext": "Manual.pdf"}})
        expander = ApiTextExpander(client, title="Main Page")
        
        assert expander.expand("{{{1|Manual.pdf}}}") == "Manual.pdf"
        
        data = session.post.call_args[1]["data"]
        assert data["action"] == "expandtemplates"
        assert data["prop"] == "wikitext"
        assert data["title"] == "Main Page"
    
    def test_missing_wikitext(self, client, session):
        session.post.return_value = make_response({"expandtemplates": {}})
        
        with pytest.raises(WikiApiError):
            ApiTextExpander(client).expand("x")


class TestApiUserResolver:
    """Test user lookup through list=users and meta=userinfo."""
    
    def test_new_from_name(self, client, session):
        session.get.return_value = make_response({"query": {"users": [
            {"userid": 3, "name": "Alice", "rights": [EMBED_PDF_RIGHT, "read"]}
        ]}})
        resolver = ApiUserResolver(client)
        
        user = resolver.new_from_name("Alice")
        
        assert user == WikiUser(name="Alice", rights=frozenset({EMBED_PDF_RIGHT, "read"}))
        assert resolver.is_allowed(user, EMBED_PDF_RIGHT)
        assert session.get.call_args[1]["params"]["ususers"] == "Alice"
    
    @pytest.mark.parametrize("entry", [
        {"name": "Nobody", "missing": True},
        {"name": "<bad>", "invalid": True},
    ])
    def test_missing_or_invalid(self, client, session, entry):
        session.get.return_value = make_response({"query": {"users": [entry]}})
        assert ApiUserResolver(client).new_from_name("x") is None
    
    def test_blank_name_skips_request(self, client, session):
        assert ApiUserResolver(client).new_from_name("") is None
        assert ApiUserResolver(client).new_from_name(None) is None
        session.get.assert_not_called()
    
    def test_current_user(self, client, session):
        session.get.return_value = make_response({"query": {"userinfo": {
            "id": 7, "name": "Bot", "rights": ["read"]
        }}})
        
        user = ApiUserResolver(client).get_current_user()
        
        assert user == WikiUser(name="Bot", rights=frozenset({"read"}))
        assert session.get.call_args[1]["params"]["meta"] == "userinfo"


class TestApiFileResolver:
    """Test file lookup through prop=imageinfo."""
    
    def test_found(self, client, session):
        session.get.return_value = make_response({"query": {"pages": [{
            "ns": 6, "title": "File:Annual report.pdf",
            "imageinfo": [{"url": "https://wiki.example.org/images/a/ab/Annual_report.pdf"}],
        }]}})
        
        file = ApiFileResolver(client).find_file(WikiTitle.new_from_text("Annual_report.pdf"))
        
        assert file == FileHandle(
            name="Annual_report.pdf",
            url="https://wiki.example.org/images/a/ab/Annual_report.pdf",
        )
        assert session.get.call_args[1]["params"]["titles"] == "File:Annual report.pdf"
    
    def test_shared_repository_file(self, client, session):
        session.get.return_value = make_response({"query": {"pages": [{
            "ns": 6, "title": "File:Shared.pdf", "missing": True, "known": True,
            "imageinfo": [{"url": "https://commons.example.org/Shared.pdf"}],
        }]}})
        
        file = ApiFileResolver(client).find_file(WikiTitle.new_from_text("Shared.pdf"))
        
        assert file.get_full_url() == "https://commons.example.org/Shared.pdf"
    
    def test_missing(self, client, session):
        session.get.return_value = make_response({"query": {"pages": [
            {"ns": 6, "title": "File:Nope.pdf", "missing": True}
        ]}})
        
        assert ApiFileResolver(client).find_file(WikiTitle.new_from_text("Nope.pdf")) is None


class TestApiMessageLookup:
    """Test messages through meta=allmessages."""
    
    def test_found(self, client, session):
        session.get.return_value = make_response({"query": {"allmessages": [
            {"name": "embed_pdf_blank_file", "content": "Fehler: Kein Dateiname."}
        ]}})
        
        lookup = ApiMessageLookup(client, language="de")
        
        assert lookup.plain("embed_pdf_blank_file") == "Fehler: Kein Dateiname."
        assert session.get.call_args[1]["params"]["amlang"] == "de"
    
    def test_missing(self, client, session):
        session.get.return_value = make_response({"query": {"allmessages": [
            {"name": "embed_pdf_blank_file", "missing": True}
        ]}})
        
        assert ApiMessageLookup(client).plain("embed_pdf_blank_file") == "⧼embed_pdf_blank_file⧽"
