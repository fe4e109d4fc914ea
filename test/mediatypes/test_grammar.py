import pytest
from hypothesis import assume
from hypothesis import example
from hypothesis import given
from hypothesis.strategies import text

from mediatypes import grammar
from mediatypes.exceptions import ErrorKind
from mediatypes.exceptions import ParseError


@pytest.mark.parametrize(
    "s,valid",
    [
        ("text", True),
        ("vnd.ms-excel", True),
        ("x-foo_bar!#$%&'*+-.^`{|}~", True),
        ("*", True),
        ("", False),
        ("a b", False),
        ("a/b", False),
        ("a;b", False),
        ('a"', False),
        ("a\tb", False),
        ("a\n", False),
        ("a\x7f", False),
        ("a@b", False),
        ("[x]", False),
        ("é", False),
    ],
)
def test_is_token(s, valid):
    assert grammar.is_token(s) is valid


@pytest.mark.parametrize(
    "s,pos",
    [
        ("abc", None),
        ("", None),
        ("ab c", 2),
        ("a/b", 1),
        ("=", 0),
    ],
)
def test_find_invalid_char(s, pos):
    assert grammar.find_invalid_char(s) == pos


def test_check_token():
    grammar.check_token("html")

    with pytest.raises(ParseError, match="empty token at position 5") as e:
        grammar.check_token("", 5)
    assert e.value.kind is ErrorKind.INVALID_TOKEN

    with pytest.raises(ParseError, match="illegal character ' '") as e:
        grammar.check_token("ab c", 5)
    assert e.value.kind is ErrorKind.INVALID_TOKEN
    assert e.value.position == 7


@pytest.mark.parametrize(
    "s,production",
    [
        ("text", grammar.Production.TOKEN),
        ("", grammar.Production.QUOTED_STRING_CONTENT),
        ("hello world", grammar.Production.QUOTED_STRING_CONTENT),
        ('a"b', grammar.Production.QUOTED_STRING_CONTENT),
        ("a\tb", grammar.Production.QUOTED_STRING_CONTENT),
        ("a\x00", grammar.Production.INVALID),
        ("a\r\nb", grammar.Production.INVALID),
    ],
)
def test_classify(s, production):
    assert grammar.classify(s) is production


@pytest.mark.parametrize(
    "s,start,out",
    [
        ('"abc"', 0, ("abc", 5)),
        ('"a\\"b"', 0, ('a"b', 6)),
        ('x="a\\\\b";', 2, ("a\\b", 8)),
        ('""', 0, ("", 2)),
        ('"a;b" ', 0, ("a;b", 5)),
        ('"a\tb"', 0, ("a\tb", 5)),
        ('"a\\\tb"', 0, ("a\tb", 6)),
    ],
)
def test_read_quoted_string(s, start, out):
    assert grammar.read_quoted_string(s, start) == out


@pytest.mark.parametrize(
    "s,end,kind,pos",
    [
        ('"abc', None, ErrorKind.UNTERMINATED_QUOTED_STRING, 0),
        ('"ab"', 3, ErrorKind.UNTERMINATED_QUOTED_STRING, 0),
        ('"abc\\', None, ErrorKind.BAD_ESCAPE, 4),
        ('"a\x01b"', None, ErrorKind.INVALID_TOKEN, 2),
        ('"a\\\x01"', None, ErrorKind.INVALID_TOKEN, 3),
    ],
)
def test_read_quoted_string_err(s, end, kind, pos):
    with pytest.raises(ParseError) as e:
        grammar.read_quoted_string(s, 0, end)
    assert e.value.kind is kind
    assert e.value.position == pos


def test_unquote():
    assert grammar.unquote('"a\\"b"') == 'a"b'
    assert grammar.unquote('""') == ""

    with pytest.raises(ParseError, match="must start with"):
        grammar.unquote("abc")
    with pytest.raises(ParseError, match="unexpected data after quoted string") as e:
        grammar.unquote('"a"b')
    assert e.value.position == 3


@pytest.mark.parametrize(
    "value,quoted",
    [
        ("utf-8", "utf-8"),
        ("", '""'),
        ("a b", '"a b"'),
        ("a/b", '"a/b"'),
        ('a"b', '"a\\"b"'),
        ("a\\b", '"a\\\\b"'),
    ],
)
def test_quote(value, quoted):
    assert grammar.quote(value) == quoted


@given(text())
@example("")
@example('a"b')
@example("a\\")
@example('\\"')
@example("foo bar")
def test_quote_unquote_cycle(s):
    assume(grammar.is_quoted_string_content(s))
    quoted = grammar.quote(s)
    if grammar.needs_quoting(s):
        assert grammar.unquote(quoted) == s
    else:
        assert quoted == s


@pytest.mark.parametrize(
    "s,valid",
    [
        ("simple boundary", True),
        ("---- next message ----", True),
        ("  foo", True),
        ("a" * 70, True),
        ("gc0p4Jq0M2Yt08j34c0p", True),
        ("foo ", False),
        ("", False),
        ("a" * 71, False),
        ('foo"bar', False),
        ("foo;bar", False),
    ],
)
def test_is_boundary(s, valid):
    assert grammar.is_boundary(s) is valid
