"""
Helpers for Accept-style headers, i.e. comma-separated lists of media ranges
with optional quality values:

    Accept: text/html, application/xhtml+xml, application/xml;q=0.9, */*;q=0.8

    https://datatracker.ietf.org/doc/html/rfc7231#section-5.3.2
"""

import logging
import re
from collections.abc import Iterable
from collections.abc import Sequence
from dataclasses import dataclass

import pyparsing

from mediatypes.exceptions import ErrorKind
from mediatypes.exceptions import ParseError
from mediatypes.mediatype import MediaType
from mediatypes.options import DEFAULT
from mediatypes.options import ParseOptions
from mediatypes.parser import parse

logger = logging.getLogger(__name__)

QuotedString = pyparsing.Regex(
    re.compile(
        r"""
            "(?:[^"\\]|\\.)*  # double-quoted string with backslash escapes
            "?  # that may be unterminated, the media type parser reports that.
        """,
        re.VERBOSE | re.DOTALL,
    )
)

# Any input is valid here: commas split elements, except inside quoted strings.
expr = (
    pyparsing.ZeroOrMore(
        QuotedString | pyparsing.Literal(",") | pyparsing.CharsNotIn('",')
    )
    .leave_whitespace()
    .parse_with_tabs()
)

# qvalue = ( "0" [ "." 0*3DIGIT ] ) / ( "1" [ "." 0*3("0") ] )
_qvalue = re.compile(r"0(?:\.[0-9]{0,3})?|1(?:\.0{0,3})?")


@dataclass(frozen=True)
class MediaRange:
    media_type: MediaType
    quality: float = 1.0


def split_list(header: str) -> list[str]:
    """
    Split a comma-separated header value into its elements, leaving commas
    within quoted strings alone. Empty elements are dropped.
    """
    elements = []
    current: list[str] = []
    for tok in expr.parse_string(header, parse_all=True):
        if tok == ",":
            elements.append("".join(current))
            current = []
        else:
            current.append(tok)
    elements.append("".join(current))
    return [e.strip(" \t") for e in elements if e.strip(" \t")]


def parse_list(header: str, options: ParseOptions = DEFAULT) -> list[MediaType]:
    """
    Parse a comma-separated list of media types.

    Elements that fail to parse are skipped, unless options.strict is set,
    in which case the ParseError is raised.
    """
    ret = []
    for element in split_list(header):
        try:
            ret.append(parse(element, options))
        except ParseError as e:
            if options.strict:
                raise
            logger.debug(f"Skipping invalid media type {element!r}: {e}")
    return ret


def _split_quality(media_type: MediaType) -> MediaRange:
    # The q parameter separates media type parameters from accept extensions.
    params = media_type.parameters
    for i, (name, value) in enumerate(params):
        if name == "q":
            if not _qvalue.fullmatch(value):
                raise ParseError(ErrorKind.INVALID_QUALITY, input=value)
            return MediaRange(
                MediaType(
                    media_type.type,
                    media_type.subtype,
                    params[:i],
                    suffix=media_type.suffix,
                ),
                float(value),
            )
    return MediaRange(media_type)


def parse_accept(header: str, options: ParseOptions = DEFAULT) -> list[MediaRange]:
    """
    Parse an Accept header value into media ranges with their quality values.

    Raises:
        ParseError, for invalid elements if options.strict is set.
        Invalid elements are skipped otherwise.
    """
    ret = []
    for element in split_list(header):
        try:
            ret.append(_split_quality(parse(element, options)))
        except ParseError as e:
            if options.strict:
                raise
            logger.debug(f"Skipping invalid media range {element!r}: {e}")
    return ret


def sort_by_specificity(media_types: Iterable[MediaType]) -> list[MediaType]:
    """
    Most specific first. Media types of equal specificity keep their order.
    """
    return sorted(media_types, key=lambda m: m.specificity, reverse=True)


def best_match(
    offered: Iterable[MediaType | str],
    accept: str | Sequence[MediaRange],
    options: ParseOptions = DEFAULT,
) -> MediaType | None:
    """
    Pick the offered media type the client prefers.

    Each offered type gets the quality of the most specific range it matches.
    The highest quality wins, ties go to the type offered first. Types that
    match no range or only ranges with q=0 are not acceptable.

    An empty Accept value accepts anything.

    Returns:
        The chosen media type, or None if none of the offered types is acceptable.

    Raises:
        ParseError, if an offered media type given as a string is invalid.
    """
    if isinstance(accept, str):
        ranges = parse_accept(accept, options)
    else:
        ranges = list(accept)
    if not ranges:
        ranges = [MediaRange(MediaType.wildcard())]
    ranges.sort(key=lambda r: r.media_type.specificity, reverse=True)

    best = None
    best_quality = 0.0
    for candidate in offered:
        if isinstance(candidate, str):
            candidate = parse(candidate, options)
        for r in ranges:
            if candidate.matches(r.media_type):
                if r.quality > best_quality:
                    best, best_quality = candidate, r.quality
                break
    return best
