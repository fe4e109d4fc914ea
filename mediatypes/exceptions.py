"""
We use builtin exceptions and specialize where necessary: everything raised for
malformed media types is a ValueError, so callers that only care about
"valid or not" can keep catching that.

A MediaTypeError always carries an ErrorKind and, where it makes sense, the
offset into the input at which the problem was detected.
"""

import enum


class ErrorKind(enum.Enum):
    EMPTY_TYPE = "empty type"
    EMPTY_SUBTYPE = "empty subtype"
    MISSING_SLASH = "missing '/' between type and subtype"
    MISSING_EQUALS = "missing '=' after parameter name"
    INVALID_TOKEN = "invalid token"
    UNTERMINATED_QUOTED_STRING = "unterminated quoted string"
    BAD_ESCAPE = "backslash escape at end of input"
    TRAILING_SEPARATOR = "';' not followed by a parameter"
    DUPLICATE_PARAMETER = "duplicate parameter"
    INPUT_TOO_LONG = "input too long"
    INVALID_QUALITY = "invalid quality value"
    INVALID_BOUNDARY = "invalid multipart boundary"
    UNKNOWN_CHARSET = "unknown charset"


class MediaTypeError(ValueError):
    """
    Base class for all errors raised for malformed media types.
    """

    def __init__(
        self,
        kind: ErrorKind,
        position: int | None = None,
        input: str | None = None,
        detail: str | None = None,
    ):
        self.kind = kind
        self.position = position
        self.input = input
        self.detail = detail
        super().__init__(self._format())

    def _format(self) -> str:
        msg = self.detail or self.kind.value
        if self.position is not None:
            msg += f" at position {self.position}"
        if self.input is not None:
            msg += f": {self.input!r}"
        return msg


class ParseError(MediaTypeError):
    """
    Raised by the parser. The position is an offset into the original input string.
    """


class ValidationError(MediaTypeError):
    """
    Raised when a MediaType is constructed from invalid components.
    The position, if any, is relative to the offending component.
    """
