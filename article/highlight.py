"""
Syntax coloring for code blocks in attached content
"""
from typing import Dict, Optional, Type

import structlog
from pygments import highlight
from pygments.formatters import HtmlFormatter
from pygments.lexer import Lexer
from pygments.lexers import get_lexer_by_name
from pygments.util import ClassNotFound

from .lexers import LuaLexer
from .sink import Page, Target, replace_content, resolve

logger = structlog.get_logger(__name__)

LANGUAGE_PREFIXES = ('language-', 'lang-')

# languages colored with a local token table before asking pygments
LEXERS: Dict[str, Type[Lexer]] = {
    'lua': LuaLexer,
}


def get_lexer(language: str) -> Optional[Lexer]:
    language = language.strip().lower()
    if not language:
        return None
    if language in LEXERS:
        return LEXERS[language]()
    try:
        return get_lexer_by_name(language)
    except ClassNotFound:
        return None


def _language_of(element) -> Optional[str]:
    for cls in (element.get('class') or '').split():
        for prefix in LANGUAGE_PREFIXES:
            if cls.startswith(prefix) and len(cls) > len(prefix):
                return cls[len(prefix):]
    return None


class CodeHighlighter:
    """Colors every ``pre > code`` block inside one region of a page.

    Instances take no arguments when called, so one can be passed straight
    through as the ``highlight`` hook of a read.
    """

    def __init__(self, page: Page, target: Target, css_class: str = 'highlight', default_language: Optional[str] = None):
        self.page = page
        self.target = target
        self.css_class = css_class
        self.default_language = default_language
        self._formatter = HtmlFormatter(nowrap=True)

    @classmethod
    def from_config(cls, page: Page, target: Target, section: Dict) -> "CodeHighlighter":
        return cls(
            page,
            target,
            css_class=section.get('css_class') or 'highlight',
            default_language=section.get('default_language'),
        )

    def __call__(self) -> int:
        region = resolve(self.page, self.target)
        colored = 0
        for code in list(region.iterfind('.//pre/code')):
            pre = code.getparent()
            if self.css_class in (pre.get('class') or '').split():
                continue

            language = _language_of(code) or _language_of(pre) or self.default_language
            if not language:
                continue
            lexer = get_lexer(language)
            if lexer is None:
                logger.debug("highlight_language_unknown", language=language)
                continue

            source = code.text_content()
            replace_content(code, highlight(source, lexer, self._formatter))
            pre_classes = (pre.get('class') or '').split()
            for cls in (self.css_class, f'language-{language}'):
                if cls not in pre_classes:
                    pre_classes.append(cls)
            pre.set('class', ' '.join(pre_classes))
            colored += 1

        logger.debug("code_blocks_highlighted", count=colored)
        return colored
