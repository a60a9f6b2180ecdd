"""
Markdown to HTML conversion
"""
from typing import Any, Dict, Optional

import structlog
from markdown_it import MarkdownIt

logger = structlog.get_logger(__name__)

DEFAULT_PRESET = "commonmark"


class MarkdownRenderer:
    """Thin async wrapper over a markdown-it parser.

    Errors raised by markdown-it are not caught here.
    """

    def __init__(self, preset: str = DEFAULT_PRESET, html: bool = True, tables: bool = True, strikethrough: bool = True):
        self.preset = preset
        self._md = MarkdownIt(preset, {"html": html})
        extra = [name for name, wanted in (("table", tables), ("strikethrough", strikethrough)) if wanted]
        if extra:
            self._md.enable(extra)

    @classmethod
    def from_config(cls, section: Dict[str, Any]) -> "MarkdownRenderer":
        return cls(
            preset=section.get("preset") or DEFAULT_PRESET,
            html=section.get("html", True),
            tables=section.get("tables", True),
            strikethrough=section.get("strikethrough", True),
        )

    def render_sync(self, markdown: str) -> str:
        return self._md.render(markdown)

    async def render(self, markdown: str) -> str:
        html = self.render_sync(markdown)
        logger.debug("markdown_rendered", preset=self.preset, markdown_chars=len(markdown), html_chars=len(html))
        return html


_default_renderer: Optional[MarkdownRenderer] = None


def _get_default_renderer() -> MarkdownRenderer:
    global _default_renderer
    if _default_renderer is None:
        _default_renderer = MarkdownRenderer()
    return _default_renderer


async def render(markdown: str, renderer: Optional[MarkdownRenderer] = None) -> str:
    """Convert Markdown text to HTML."""
    return await (renderer or _get_default_renderer()).render(markdown)
