"""
Lua token table for the syntax colorer
"""
from pygments.lexer import RegexLexer, bygroups, words
from pygments.token import (
    Comment,
    Keyword,
    Name,
    Number,
    Operator,
    Punctuation,
    String,
    Text,
    Whitespace,
)

__all__ = ['LuaLexer']


class LuaLexer(RegexLexer):
    name = 'Lua'
    aliases = ['lua']
    filenames = ['*.lua']
    mimetypes = ['text/x-lua']

    tokens = {
        'root': [
            # unterminated block comments run to the end of input
            (r'--\[\[[\s\S]*?(?:\]\]|\Z)', Comment.Multiline),
            (r'--.*', Comment.Single),
            (r'(["\'])(?:\\(?:\r\n|[\s\S])|(?!\1)[^\\\r\n])*\1', String),
            (r'\b((?i:class|new))(\s+)([\w.\\]+)', bygroups(Name, Whitespace, Name.Class)),
            (r'\b((?i:catch))(\s+)(\()([\w.\\]+)', bygroups(Name, Whitespace, Punctuation, Name.Class)),
            (words((
                'and', 'break', 'do', 'else', 'elseif', 'end', 'for', 'function',
                'goto', 'if', 'in', 'local', 'nil', 'not', 'or', 'repeat', 'return',
                'then', 'until', 'while'), prefix=r'\b', suffix=r'\b'), Keyword),
            (r'\b(?:true|false)\b', Keyword.Constant),
            (r'\w+(?=\()', Name.Function),
            (r'(?i:\b0x[\da-f]+\b|(?:\b\d+\.?\d*|\B\.\d+)(?:e[+-]?\d+)?)', Number),
            (r'[<>]=?|[!=]=?=?|--?|\+\+?|&&?|\|\|?|[?*/~^%#]', Operator),
            (r'[{}[\];(),.:]', Punctuation),
            (r'\s+', Whitespace),
            (r'\w+', Name),
            (r'.', Text),
        ],
    }
