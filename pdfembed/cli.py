#!/usr/bin/env python3
"""
PDFEmbed - Command-line front end

Renders <pdf> tags outside a wiki, against either a local directory of
files or a live wiki's Action API.

Usage:
    pdfembed tag FILE [--width W] [--height H] [--page P] [options]
    pdfembed page PATH [options]

Options:
    --api-url URL          Use a live wiki (api.php) for users, files and messages
    --files-dir DIR        Directory holding the PDF files (local mode)
    --base-url URL         URL prefix the files are served under (local mode)
    --user NAME[:RIGHTS]   Known user and comma-separated rights (repeatable)
    --current-user NAME    User making the request (edit previews)
    --revision-user NAME   Author of the rendered revision
    --action ACTION        Request action (default: view)
    --param NAME=VALUE     Template parameter for {{{NAME}}} (repeatable)
    --env-file PATH        .env file to load (default: .env)
    --log-level LEVEL      Logging level (default: WARNING)
    --log-file PATH        Also log to this file
"""

import argparse
import sys
from pathlib import Path
from typing import Dict, List, Optional

from .config.config_module import ConfigError, get_config, load_config, validate_config
from .config.logger_module import initialize_logger, log_error, log_info
from .embed.embed_collaborators import (
    EMBED_PDF_RIGHT,
    DefaultMessages,
    DirectoryFileResolver,
    RequestContext,
    StaticUserResolver,
    TemplateArgumentExpander,
)
from .embed.embed_config import PdfEmbedConfig
from .embed.embed_core import PdfTagHandler
from .embed.embed_hooks import TagHookRegistry, on_parser_first_call_init
from .wiki.wiki_api_client import MediaWikiApiClient
from .wiki.wiki_collaborators import (
    ApiFileResolver,
    ApiMessageLookup,
    ApiTextExpander,
    ApiUserResolver,
)
from .wiki.wiki_errors import WikiApiError


def parse_user_specs(specs: List[str]) -> Dict[str, List[str]]:
    """
    Parse --user values of the form NAME or NAME:right1,right2.
    
    A bare NAME is granted embed_pdf.
    """
    users = {}
    for spec in specs:
        name, sep, rights = spec.partition(":")
        if sep:
            users[name] = [r.strip() for r in rights.split(",") if r.strip()]
        else:
            users[name] = [EMBED_PDF_RIGHT]
    return users


def parse_params(specs: List[str]) -> Dict[str, str]:
    """Parse --param NAME=VALUE pairs."""
    params = {}
    for spec in specs:
        name, sep, value = spec.partition("=")
        if not sep:
            raise ValueError(f"Invalid --param {spec!r}, expected NAME=VALUE")
        params[name.strip()] = value
    return params


def build_handler(args: argparse.Namespace) -> PdfTagHandler:
    """
    Build a tag handler with API or local collaborators.
    
    Raises:
        ConfigError: If neither an API URL nor a files directory is configured
    """
    config = PdfEmbedConfig.from_env()
    
    if args.api_url:
        client = MediaWikiApiClient(api_url=args.api_url)
        log_info(f"Using MediaWiki API at {args.api_url}")
        return PdfTagHandler(
            expander=ApiTextExpander(client, title=args.title),
            user_resolver=ApiUserResolver(client),
            file_resolver=ApiFileResolver(client),
            messages=ApiMessageLookup(client, language=args.language),
            config=config,
        )
    
    if not args.files_dir:
        raise ConfigError("Either --api-url or --files-dir must be given")
    if not Path(args.files_dir).is_dir():
        raise ConfigError(f"Files directory not found: {args.files_dir}")
    
    log_info(f"Using local files in {args.files_dir}")
    return PdfTagHandler(
        expander=TemplateArgumentExpander(parse_params(args.param)),
        user_resolver=StaticUserResolver(parse_user_specs(args.user),
                                         current_user=args.current_user),
        file_resolver=DirectoryFileResolver(args.files_dir, args.base_url),
        messages=DefaultMessages(),
        config=config,
    )


def parse_arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog="pdfembed",
        description="PDFEmbed - Render <pdf> tags as embedded PDF iframes",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s tag Manual.pdf --files-dir ./files --base-url https://wiki/images --user Alice --revision-user Alice
  %(prog)s tag Manual.pdf --page 3 --api-url https://wiki.example.org/w/api.php --revision-user Alice
  %(prog)s page Main_Page.wiki --files-dir ./files --base-url https://wiki/images --user Alice --revision-user Alice
        """
    )
    
    subparsers = parser.add_subparsers(dest="command", required=True)
    
    tag_parser = subparsers.add_parser("tag", help="Render a single <pdf> tag")
    tag_parser.add_argument("file", help="File name, the tag body")
    tag_parser.add_argument("--width", help="width attribute")
    tag_parser.add_argument("--height", help="height attribute")
    tag_parser.add_argument("--page", help="page attribute")
    
    page_parser = subparsers.add_parser("page", help="Render every <pdf> tag in a wikitext file")
    page_parser.add_argument("path", help="Wikitext file")
    
    for sub in (tag_parser, page_parser):
        sub.add_argument("--api-url", help="MediaWiki api.php URL")
        sub.add_argument("--title", help="Page title used as expansion context (API mode)")
        sub.add_argument("--language", help="Message language (API mode)")
        sub.add_argument("--files-dir", help="Directory holding the PDF files")
        sub.add_argument("--base-url", default="",
                         help="URL prefix the files are served under")
        sub.add_argument("--user", action="append", default=[],
                         help="NAME or NAME:right1,right2 (repeatable)")
        sub.add_argument("--current-user", help="User making the request")
        sub.add_argument("--revision-user", help="Author of the rendered revision")
        sub.add_argument("--action", default="view",
                         help="Request action (default: view)")
        sub.add_argument("--param", action="append", default=[],
                         help="Template parameter NAME=VALUE (repeatable)")
        sub.add_argument("--env-file", default=".env",
                         help=".env file to load (default: .env)")
        sub.add_argument("--log-level",
                         choices=["DEBUG", "INFO", "WARNING", "ERROR"],
                         default="WARNING",
                         help="Logging level (default: WARNING)")
        sub.add_argument("--log-file", help="Also log to this file")
    
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the pdfembed command."""
    args = parse_arguments(argv)
    
    initialize_logger(log_level=args.log_level, log_file=args.log_file)
    load_config(args.env_file)
    
    request = RequestContext(action=args.action, revision_user=args.revision_user)
    
    try:
        if args.api_url is None and not args.files_dir:
            validate_config(["MEDIAWIKI_API_URL"])
            args.api_url = get_config("MEDIAWIKI_API_URL")
        handler = build_handler(args)
        
        if args.command == "tag":
            attributes = {
                name: value
                for name, value in (("width", args.width),
                                    ("height", args.height),
                                    ("page", args.page))
                if value is not None
            }
            output = handler.generate(args.file, attributes, request)
        else:
            source = Path(args.path).read_text(encoding="utf-8")
            registry = TagHookRegistry()
            on_parser_first_call_init(registry, handler)
            output = registry.render(source, request)
    
    except (ConfigError, ValueError) as e:
        print(f"❌ Configuration Error: {e}", file=sys.stderr)
        return 1
    except WikiApiError as e:
        log_error(f"Wiki API failure: {e}")
        print(f"❌ Wiki API Error: {e}", file=sys.stderr)
        return 1
    except OSError as e:
        print(f"❌ Cannot read {getattr(args, 'path', '')}: {e}", file=sys.stderr)
        return 1
    
    print(output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
