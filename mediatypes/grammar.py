"""
Grammar productions shared by the parser and the MediaType constructor.

    token := 1*<any (US-ASCII) CHAR except SPACE, CTLs, or tspecials>
    tspecials := "(" / ")" / "<" / ">" / "@" / "," / ";" / ":" /
                 "\" / <"> / "/" / "[" / "]" / "?" / "="

    https://datatracker.ietf.org/doc/html/rfc2045#section-5.1
"""

import enum
import re

from mediatypes.exceptions import ErrorKind
from mediatypes.exceptions import ParseError

TSPECIALS = frozenset('()<>@,;:\\"/[]?= ')

# "!" / "#" / "$" / "%" / "&" / "'" / "*" / "+" / "-" / "." / "^" / "_" / "`" / "{" / "|" / "}" / "~" / DIGIT / ALPHA
_token = re.compile(r"[!#$%&'*+\-.^_`{|}~0-9a-zA-Z]+")

# https://datatracker.ietf.org/doc/html/rfc2046#section-5.1.1
# bchars := bcharsnospace / " "
_boundary = re.compile(r"[0-9a-zA-Z'()+_,\-./:=? ]{0,69}[0-9a-zA-Z'()+_,\-./:=?]")


class Production(enum.Enum):
    TOKEN = "token"
    QUOTED_STRING_CONTENT = "quoted-string content"
    INVALID = "invalid"


def is_token_char(c: str) -> bool:
    return "\x21" <= c <= "\x7e" and c not in TSPECIALS


def is_ctl(c: str) -> bool:
    return c < "\x20" or c == "\x7f"


def is_token(s: str) -> bool:
    return bool(_token.fullmatch(s))


def find_invalid_char(s: str) -> int | None:
    """
    Index of the first character that may not appear in a token, or None.
    """
    for i, c in enumerate(s):
        if not is_token_char(c):
            return i
    return None


def check_token(s: str, offset: int = 0, input: str | None = None) -> None:
    """
    Raise a ParseError if s is not a valid token.

    offset: position of s within input, used for the error position.
    """
    if not s:
        raise ParseError(
            ErrorKind.INVALID_TOKEN, offset, input, detail="empty token"
        )
    i = find_invalid_char(s)
    if i is not None:
        raise ParseError(
            ErrorKind.INVALID_TOKEN,
            offset + i,
            input,
            detail=f"illegal character {s[i]!r}",
        )


def is_quoted_string_content(s: str) -> bool:
    """
    Anything goes inside a quoted string except control characters (HTAB is fine).
    """
    return not any(is_ctl(c) and c != "\t" for c in s)


def classify(s: str) -> Production:
    if is_token(s):
        return Production.TOKEN
    elif is_quoted_string_content(s):
        return Production.QUOTED_STRING_CONTENT
    else:
        return Production.INVALID


def read_quoted_string(
    s: str, start: int, end: int | None = None
) -> tuple[str, int]:
    """
    start: offset of the opening quote
    end: offset at which the input is considered to end

    Returns the unescaped content and the offset just after the closing quote.
    A backslash takes the following character literally, unless it is a
    control character.

    Raises:
        ParseError, for an unterminated string, a trailing backslash or a control character.
    """
    if end is None:
        end = len(s)
    assert s[start] == '"'
    ret = []
    i = start + 1
    while i < end:
        c = s[i]
        if c == '"':
            return "".join(ret), i + 1
        elif c == "\\":
            if i + 1 >= end:
                raise ParseError(ErrorKind.BAD_ESCAPE, i, s)
            c = s[i + 1]
            if is_ctl(c) and c != "\t":
                raise ParseError(
                    ErrorKind.INVALID_TOKEN,
                    i + 1,
                    s,
                    detail="control character in quoted string",
                )
            ret.append(c)
            i += 2
        elif is_ctl(c) and c != "\t":
            raise ParseError(
                ErrorKind.INVALID_TOKEN,
                i,
                s,
                detail="control character in quoted string",
            )
        else:
            ret.append(c)
            i += 1
    raise ParseError(ErrorKind.UNTERMINATED_QUOTED_STRING, start, s)


def unquote(s: str) -> str:
    """
    Unescape a complete quoted string, including its surrounding quotes.
    """
    if not s.startswith('"'):
        raise ParseError(
            ErrorKind.INVALID_TOKEN, 0, s, detail="quoted string must start with '\"'"
        )
    value, off = read_quoted_string(s, 0)
    if off != len(s):
        raise ParseError(
            ErrorKind.INVALID_TOKEN,
            off,
            s,
            detail="unexpected data after quoted string",
        )
    return value


def needs_quoting(value: str) -> bool:
    return not is_token(value)


def quote(value: str) -> str:
    """
    Return value as a token if possible, as an escaped quoted string otherwise.
    """
    if not needs_quoting(value):
        return value
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def is_boundary(s: str) -> bool:
    return bool(_boundary.fullmatch(s))
