"""
In-process HTML page: element lookup, content replacement, URL fragment
"""
import html
from pathlib import Path
from typing import List, Union
from urllib.parse import urldefrag

import lxml.html
import structlog

logger = structlog.get_logger(__name__)

EMPTY_PAGE = '<!DOCTYPE html><html><head><meta charset="utf-8"><title></title></head><body></body></html>'


class SinkResolutionError(LookupError):
    """No element carries the requested id."""


class Location:
    """Page URL with a writable fragment."""

    def __init__(self, href: str = ""):
        self.url, fragment = urldefrag(href)
        self._hash = f"#{fragment}" if fragment else ""
        self.navigations: List[str] = []

    @property
    def hash(self) -> str:
        return self._hash

    @hash.setter
    def hash(self, value: str) -> None:
        value = value or ""
        if value and not value.startswith("#"):
            value = "#" + value
        self._hash = value
        self.navigations.append(value)
        logger.debug("location_hash_assigned", hash=value)

    @property
    def href(self) -> str:
        return self.url + self._hash


class Page:
    def __init__(self, document: str = EMPTY_PAGE, url: str = ""):
        self.tree = lxml.html.document_fromstring(document)
        self.location = Location(url)

    @classmethod
    def from_file(cls, path: Union[str, Path], url: str = "") -> "Page":
        return cls(Path(path).read_text(encoding="utf-8"), url=url)

    @classmethod
    def with_region(cls, element_id: str, url: str = "") -> "Page":
        """Minimal page whose body holds a single empty <div> with `element_id`."""
        page = cls(url=url)
        body = page.tree.body
        body.append(body.makeelement("div", {"id": element_id}))
        return page

    def get_element_by_id(self, element_id: str) -> lxml.html.HtmlElement:
        try:
            return self.tree.get_element_by_id(element_id)
        except KeyError:
            raise SinkResolutionError(f"No element with id {element_id!r}") from None

    def tostring(self) -> str:
        return lxml.html.tostring(self.tree, encoding="unicode", doctype="<!DOCTYPE html>")

    def write(self, path: Union[str, Path]) -> Path:
        path = Path(path)
        path.write_text(self.tostring(), encoding="utf-8")
        return path


def _parse_fragment(markup: str) -> lxml.html.HtmlElement:
    # wrapping in a <div> keeps leading text intact, whitespace included
    document = lxml.html.document_fromstring(f"<html><body><div>{markup}</div></body></html>")
    return document.body[0]


def replace_content(element: lxml.html.HtmlElement, markup: str) -> lxml.html.HtmlElement:
    """Overwrite the text and children of `element`; its tag, attributes and tail stay."""
    wrapper = _parse_fragment(markup)
    element.text = wrapper.text
    for child in list(element):
        element.remove(child)
    for child in list(wrapper):
        element.append(child)
    return element


def inner_html(element: lxml.html.HtmlElement) -> str:
    parts = [html.escape(element.text or "", quote=False)]
    parts.extend(lxml.html.tostring(child, encoding="unicode") for child in element)
    return "".join(parts)


Target = Union[str, lxml.html.HtmlElement]


def resolve(page: Page, target: Target) -> lxml.html.HtmlElement:
    if isinstance(target, str):
        return page.get_element_by_id(target)
    return target


def attach(page: Page, target: Target, markup: str) -> lxml.html.HtmlElement:
    """Replace the content of `target` (an element or an element id) with `markup`."""
    element = resolve(page, target)
    replace_content(element, markup)
    logger.debug("content_attached", target=element.get("id"), html_chars=len(markup))
    return element
