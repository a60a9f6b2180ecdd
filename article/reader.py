"""
Read a remote Markdown document into a region of a page.

The exported surface is four operations:

    article(url)                 fetch the raw document text
    render(markdown)             convert Markdown to HTML
    attach(page, target, html)   replace the content of a page region
    read(url, ref, hooks, page)  the whole pipeline, with a fallback message

`read` captures the page's URL fragment when it is called, runs
fetch -> hooks.parse -> render -> hooks.preprocess -> attach -> hooks.highlight,
then reassigns the fragment so deep links still land on their anchor.

Only retrieval failures are recovered: the region then shows a short message
with a link to `ref`. Errors from conversion, hooks or id lookup propagate
to the caller.
"""
import html
import itertools
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Optional

import structlog

from .fetcher import HTTPFetcher, RetrievalError, article
from .renderer import MarkdownRenderer, render
from .sink import Page, Target, attach

__all__ = [
    'DocumentLoader',
    'FALLBACK_MESSAGE',
    'Hooks',
    'article',
    'attach',
    'fallback_html',
    'read',
    'render',
]

logger = structlog.get_logger(__name__)

FALLBACK_MESSAGE = 'Oops, cannot load content for the moment...<br>Try refersh or '


def fallback_html(ref: str) -> str:
    return FALLBACK_MESSAGE + f'<a href="{html.escape(ref, quote=True)}" target="_blank">click</a>'


def _identity(text: str) -> str:
    return text


def _noop() -> None:
    return None


@dataclass
class Hooks:
    """Per-call collaborators of a read."""

    parse: Callable[[str], str]
    preprocess: Callable[[str], str]
    highlight: Callable[[], Any]
    content: Target

    def __post_init__(self):
        for name in ('parse', 'preprocess', 'highlight'):
            if not callable(getattr(self, name)):
                raise TypeError(f"hooks.{name} must be callable")

    @classmethod
    def plain(cls, content: Target, highlight: Optional[Callable[[], Any]] = None) -> "Hooks":
        """Hooks that pass text through untouched."""
        return cls(parse=_identity, preprocess=_identity, highlight=highlight or _noop, content=content)


def _target_key(target: Target):
    if isinstance(target, str):
        return target
    return target.get('id') or id(target)


class DocumentLoader:
    def __init__(
        self,
        page: Page,
        fetcher: Optional[HTTPFetcher] = None,
        renderer: Optional[MarkdownRenderer] = None,
        discard_stale: bool = False,
    ):
        self.page = page
        self._owns_fetcher = fetcher is None
        self.fetcher = fetcher or HTTPFetcher()
        self.renderer = renderer or MarkdownRenderer()
        self.discard_stale = discard_stale
        self._tokens = itertools.count(1)
        self._latest: Dict[Any, int] = {}

    async def __aenter__(self) -> "DocumentLoader":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_fetcher:
            await self.fetcher.aclose()

    def read(self, url: str, fallback_ref: str, hooks: Hooks) -> Awaitable[None]:
        # captured now, before anything awaits
        fragment = self.page.location.hash
        token = None
        if self.discard_stale:
            token = next(self._tokens)
            self._latest[_target_key(hooks.content)] = token
        return self._read(url, fallback_ref, hooks, fragment, token)

    def _is_stale(self, hooks: Hooks, token: Optional[int]) -> bool:
        return token is not None and self._latest.get(_target_key(hooks.content)) != token

    async def _read(self, url: str, fallback_ref: str, hooks: Hooks, fragment: str, token: Optional[int]) -> None:
        log = logger.bind(url=url)

        try:
            markdown = await self.fetcher.fetch_text(url)
        except RetrievalError as e:
            log.warning("document_retrieval_failed", error=str(e), status_code=e.status_code)
            if self._is_stale(hooks, token):
                log.info("stale_read_discarded", stage="fallback")
                return None
            attach(self.page, hooks.content, fallback_html(fallback_ref))
            return None

        # outside the retrieval guard: conversion, hook and lookup errors propagate
        markdown = hooks.parse(markdown)
        rendered = await self.renderer.render(markdown)
        rendered = hooks.preprocess(rendered)

        if self._is_stale(hooks, token):
            log.info("stale_read_discarded", stage="attach")
            return None

        attach(self.page, hooks.content, rendered)
        hooks.highlight()

        if fragment:
            self.page.location.hash = fragment

        log.info("document_read", html_chars=len(rendered), fragment=fragment or None)
        return None


async def _closing(loader: DocumentLoader, pending: Awaitable[None]) -> None:
    async with loader:
        await pending


def read(
    url: str,
    fallback_ref: str,
    hooks: Hooks,
    page: Page,
    fetcher: Optional[HTTPFetcher] = None,
    renderer: Optional[MarkdownRenderer] = None,
) -> Awaitable[None]:
    """Run one read with a throwaway loader; a fetcher created here is closed afterwards."""
    loader = DocumentLoader(page, fetcher=fetcher, renderer=renderer)
    return _closing(loader, loader.read(url, fallback_ref, hooks))
