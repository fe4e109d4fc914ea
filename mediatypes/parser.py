"""
A strict, single-pass parser for media types as they appear in Content-Type
headers:

    media-type := type "/" subtype ["+" suffix] *(";" *WSP parameter)
    parameter := attribute "=" (token / quoted-string)

    https://datatracker.ietf.org/doc/html/rfc2045#section-5.1
    https://datatracker.ietf.org/doc/html/rfc6838#section-4.2
    https://datatracker.ietf.org/doc/html/rfc6839

Leading and trailing whitespace is ignored. Whitespace is otherwise only
allowed right after a ";" (and inside quoted strings).
"""

import logging

from mediatypes import grammar
from mediatypes.exceptions import ErrorKind
from mediatypes.exceptions import ParseError
from mediatypes.mediatype import MediaType
from mediatypes.mediatype import split_suffix
from mediatypes.options import DEFAULT
from mediatypes.options import ParseOptions

logger = logging.getLogger(__name__)

_WSP = " \t"


def _read_until(s: str, start: int, end: int, term: str) -> tuple[str, int]:
    """
    Read until one of the characters in term or end is reached.
    Returns the data read and the offset of the terminating character (or end).
    """
    for i in range(start, end):
        if s[i] in term:
            return s[start:i], i
    return s[start:end], end


def _skip_whitespace(s: str, start: int, end: int) -> int:
    while start < end and s[start] in _WSP:
        start += 1
    return start


def _read_value(s: str, start: int, end: int) -> tuple[str, int]:
    """
    Reads a parameter value, either a quoted string or a token.
    Returns the value and the offset of the following ";" (or end).
    """
    if start < end and s[start] == '"':
        value, off = grammar.read_quoted_string(s, start, end)
        if off < end and s[off] != ";":
            raise ParseError(
                ErrorKind.INVALID_TOKEN,
                off,
                s,
                detail=f"unexpected character {s[off]!r} after quoted string",
            )
        return value, off
    value, off = _read_until(s, start, end, ";")
    grammar.check_token(value, start, s)
    return value, off


def parse(s: str, options: ParseOptions = DEFAULT) -> MediaType:
    """
    Parse a media type such as

        text/html; charset=UTF-8

    Returns:
        A MediaType with type, subtype, suffix and parameter names lowercased.

    Raises:
        ParseError, if the media type is malformed. The error carries the
        offset into s at which parsing failed.
    """
    if not isinstance(s, str):
        raise TypeError(f"Expected str, but got {type(s).__name__}.")
    if options.max_length is not None and len(s) > options.max_length:
        raise ParseError(
            ErrorKind.INPUT_TOO_LONG,
            options.max_length,
            detail=f"input exceeds {options.max_length} characters",
        )

    end = len(s)
    while end > 0 and s[end - 1] in _WSP:
        end -= 1
    off = _skip_whitespace(s, 0, end)

    type_start = off
    type_, off = _read_until(s, off, end, "/;")
    if off == end or s[off] != "/":
        raise ParseError(ErrorKind.MISSING_SLASH, off, s)
    if not type_:
        raise ParseError(ErrorKind.EMPTY_TYPE, type_start, s)
    grammar.check_token(type_, type_start, s)

    subtype_start = off + 1
    subtype, off = _read_until(s, subtype_start, end, ";")
    if not subtype:
        raise ParseError(ErrorKind.EMPTY_SUBTYPE, subtype_start, s)
    grammar.check_token(subtype, subtype_start, s)
    subtype, suffix = split_suffix(subtype)

    params: list[tuple[str, str]] = []
    seen: set[str] = set()
    while off < end:
        # s[off] is always ";" here.
        separator = off
        off = _skip_whitespace(s, off + 1, end)
        if off == end:
            raise ParseError(ErrorKind.TRAILING_SEPARATOR, separator, s)
        if s[off] == ";":
            raise ParseError(ErrorKind.TRAILING_SEPARATOR, off, s)

        name_start = off
        name, off = _read_until(s, off, end, "=;")
        if off == end or s[off] != "=":
            raise ParseError(ErrorKind.MISSING_EQUALS, off, s)
        grammar.check_token(name, name_start, s)
        name = name.lower()

        value, off = _read_value(s, off + 1, end)

        if name in seen:
            if options.strict:
                raise ParseError(
                    ErrorKind.DUPLICATE_PARAMETER,
                    name_start,
                    s,
                    detail=f"duplicate parameter {name!r}",
                )
            logger.debug(f"Ignoring duplicate parameter {name!r} in {s!r}.")
            continue
        seen.add(name)
        params.append((name, value))

    return MediaType._unchecked(
        type_.lower(),
        subtype.lower(),
        suffix.lower() if suffix is not None else None,
        tuple(params),
    )
