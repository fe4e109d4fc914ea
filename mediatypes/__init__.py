from mediatypes.exceptions import ErrorKind
from mediatypes.exceptions import MediaTypeError
from mediatypes.exceptions import ParseError
from mediatypes.exceptions import ValidationError
from mediatypes.mediatype import MediaType
from mediatypes.mediatype import Tree
from mediatypes.options import DEFAULT
from mediatypes.options import ParseOptions
from mediatypes.options import STRICT
from mediatypes.parser import parse

__all__ = [
    "DEFAULT",
    "ErrorKind",
    "MediaType",
    "MediaTypeError",
    "ParseError",
    "ParseOptions",
    "STRICT",
    "Tree",
    "ValidationError",
    "parse",
]
