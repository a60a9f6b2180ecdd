from article.highlight import CodeHighlighter, get_lexer
from article.lexers import LuaLexer
from article.sink import attach, inner_html


def test_lua_block_is_colored_with_local_lexer(page):
    attach(page, "content", '<p>Intro</p><pre><code class="language-lua">local x = 1\n</code></pre>')

    colored = CodeHighlighter(page, "content")()

    region = page.get_element_by_id("content")
    markup = inner_html(region)
    assert colored == 1
    assert '<span class="k">local</span>' in markup
    assert '<span class="m">1</span>' in markup
    assert region.find(".//pre").get("class") == "highlight language-lua"


def test_second_pass_leaves_blocks_alone(page):
    attach(page, "content", '<pre><code class="language-lua">return nil\n</code></pre>')
    highlighter = CodeHighlighter(page, "content")
    highlighter()
    first = inner_html(page.get_element_by_id("content"))

    assert highlighter() == 0
    assert inner_html(page.get_element_by_id("content")) == first


def test_unknown_language_is_left_untouched(page):
    attach(page, "content", '<pre><code class="language-nosuchlang">x y z\n</code></pre>')

    assert CodeHighlighter(page, "content")() == 0
    assert inner_html(page.get_element_by_id("content")) == '<pre><code class="language-nosuchlang">x y z\n</code></pre>'


def test_block_without_language_uses_default(page):
    attach(page, "content", "<pre><code>while true do end\n</code></pre>")

    assert CodeHighlighter(page, "content")() == 0
    assert CodeHighlighter(page, "content", default_language="lua")() == 1


def test_other_languages_come_from_pygments(page):
    attach(page, "content", '<pre><code class="language-python">def f():\n    return 1\n</code></pre>')

    assert CodeHighlighter(page, "content")() == 1
    assert '<span class="k">def</span>' in inner_html(page.get_element_by_id("content"))


def test_markup_in_code_stays_escaped(page):
    attach(page, "content", '<pre><code class="language-lua">if a &lt; b then end\n</code></pre>')

    CodeHighlighter(page, "content")()

    markup = inner_html(page.get_element_by_id("content"))
    assert '<span class="o">&lt;</span>' in markup


def test_only_the_target_region_is_scanned(page):
    attach(page, "toc", '<pre><code class="language-lua">local a\n</code></pre>')
    attach(page, "content", '<pre><code class="language-lua">local b\n</code></pre>')

    CodeHighlighter(page, "content")()

    assert "highlight" not in (page.get_element_by_id("toc").find(".//pre").get("class") or "")


def test_custom_css_class_and_config(page):
    attach(page, "content", '<pre><code class="lang-lua">local x\n</code></pre>')

    CodeHighlighter.from_config(page, "content", {"css_class": "colored"})()

    assert page.get_element_by_id("content").find(".//pre").get("class") == "colored language-lua"


def test_get_lexer_prefers_local_table():
    assert isinstance(get_lexer("Lua"), LuaLexer)
    assert get_lexer("") is None
    assert get_lexer("nosuchlang") is None
