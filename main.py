"""
Entrypoint: load config, read one Markdown document into a page, write the page
"""

import argparse
import asyncio
import sys

import structlog

from article.config import Config
from article.fetcher import HTTPFetcher
from article.highlight import CodeHighlighter
from article.logs import setup_logging
from article.reader import DocumentLoader, Hooks
from article.renderer import MarkdownRenderer
from article.sink import Page


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Render a remote Markdown document into an HTML page")
    parser.add_argument("url", help="document URL, absolute or relative to fetcher.base_url")
    parser.add_argument("--config", default=None, help="path to config.yaml")
    parser.add_argument("--page", default=None, help="HTML page template holding the content region")
    parser.add_argument("--content", default=None, help="id of the content region")
    parser.add_argument("--ref", default=None, help="link offered when the document cannot be loaded")
    parser.add_argument("--fragment", default="", help="URL fragment to keep, e.g. #section2")
    parser.add_argument("--out", default="article.html", help="output file, '-' for stdout")
    return parser.parse_args(argv)


async def main(argv=None) -> int:
    """Initialize dependencies and read the document"""
    args = parse_args(argv)
    config = Config(args.config)
    # the page itself goes to stdout with --out -
    setup_logging(config.logging, stream=sys.stderr if args.out == "-" else sys.stdout)
    logger = structlog.get_logger(__name__)

    content_id = args.content or config.page.get('content_id', 'content')
    template = args.page or config.page.get('template')
    page_url = args.fragment if args.fragment.startswith('#') or not args.fragment else f"#{args.fragment}"

    if template:
        page = Page.from_file(template, url=page_url)
    else:
        page = Page.with_region(content_id, url=page_url)

    renderer = MarkdownRenderer.from_config(config.renderer)
    hooks = Hooks.plain(content_id, highlight=CodeHighlighter.from_config(page, content_id, config.highlight))
    discard_stale = bool(config.loader.get("discard_stale", False))

    async with HTTPFetcher.from_config(config.fetcher) as fetcher:
        loader = DocumentLoader(page, fetcher=fetcher, renderer=renderer, discard_stale=discard_stale)
        await loader.read(args.url, args.ref or args.url, hooks)

    if args.out == "-":
        sys.stdout.write(page.tostring())
    else:
        page.write(args.out)
        logger.info("page_written", path=args.out)
    return 0


if __name__ == "__main__":
    try:
        sys.exit(asyncio.run(main()))
    except Exception as e:
        structlog.get_logger(__name__).error("fatal_error", error=str(e), exc_info=True)
        sys.exit(1)
