from pygments.token import Comment, Keyword, Name, Number, Operator, Punctuation, String

from article.lexers import LuaLexer


def tokens(source):
    return [(ttype, value) for ttype, value in LuaLexer().get_tokens(source) if value.strip()]


def test_keywords_names_and_operators():
    result = tokens("local x = y and 1")

    assert (Keyword, "local") in result
    assert (Name, "x") in result
    assert (Operator, "=") in result
    assert (Keyword, "and") in result
    assert (Number, "1") in result


def test_line_comment_runs_to_end_of_line():
    result = tokens("x = 1 -- set x\ny = 2")

    assert (Comment.Single, "-- set x") in result
    assert (Name, "y") in result


def test_block_comment_spans_lines():
    result = tokens("--[[ first\nsecond ]] return")

    assert (Comment.Multiline, "--[[ first\nsecond ]]") in result
    assert (Keyword, "return") in result


def test_unterminated_block_comment_runs_to_end():
    source = "--[[ never closed\nlocal x"

    result = tokens(source)

    assert result[0][0] is Comment.Multiline
    assert result[0][1].startswith("--[[ never closed")
    assert all(ttype is Comment.Multiline for ttype, _ in result)


def test_strings_with_escapes():
    result = tokens('s = "say \\"hi\\"" .. \'it\\\'s\'')

    assert (String, '"say \\"hi\\""') in result
    assert (String, "'it\\'s'") in result


def test_booleans_and_nil():
    result = tokens("a = true; b = false; c = nil")

    assert (Keyword.Constant, "true") in result
    assert (Keyword.Constant, "false") in result
    assert (Keyword, "nil") in result
    assert (Punctuation, ";") in result


def test_function_calls_and_definitions():
    result = tokens("function update(delta) print(delta) end")

    assert (Keyword, "function") in result
    assert (Name.Function, "update") in result
    assert (Name.Function, "print") in result
    assert (Keyword, "end") in result


def test_numbers():
    result = tokens("a = 0x1F + 3.25 + .5 + 1e10 + 2E-3")

    for literal in ("0x1F", "3.25", ".5", "1e10", "2E-3"):
        assert (Number, literal) in result


def test_class_name_after_new():
    result = tokens("obj = new Vec2")

    assert (Name.Class, "Vec2") in result


def test_class_keyword_is_case_insensitive():
    assert (Name.Class, "Vec2") in tokens("obj = NEW Vec2")
    assert (Name.Class, "Shape") in tokens("Class Shape")


def test_class_name_after_catch():
    assert (Name.Class, "Err") in tokens("catch (Err)")
    assert (Name.Class, "IOError") in tokens("CATCH (IOError)")


def test_comparison_operators():
    result = tokens("if a <= b and c ~= d then end")

    assert (Operator, "<=") in result
    assert (Operator, "~") in result
    assert (Keyword, "then") in result
