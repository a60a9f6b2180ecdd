import httpx
import pytest
import structlog

from article.fetcher import HTTPFetcher
from article.sink import Page

DOCS = "https://docs.example.com/manual/"


def mock_fetcher(handler, **kwargs):
    """HTTPFetcher whose requests are answered by `handler` instead of the network."""
    kwargs.setdefault("base_url", DOCS)
    return HTTPFetcher(transport=httpx.MockTransport(handler), **kwargs)


def serve(documents):
    """Handler serving `documents` by path; unknown paths get a 404."""
    def handler(request):
        body = documents.get(request.url.path)
        if body is None:
            return httpx.Response(404, text="not found")
        return httpx.Response(200, text=body, headers={"content-type": "text/markdown; charset=utf-8"})
    return handler


@pytest.fixture
def page():
    return Page(
        '<html><body><nav id="toc"></nav>'
        '<div id="content" class="article">loading...</div><footer>f</footer>'
        '</body></html>',
        url="https://docs.example.com/manual/index.html",
    )


@pytest.fixture(autouse=True)
def reset_structlog():
    yield
    structlog.reset_defaults()
