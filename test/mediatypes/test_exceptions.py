import dataclasses

import pytest

from mediatypes import DEFAULT
from mediatypes import ErrorKind
from mediatypes import MediaTypeError
from mediatypes import ParseError
from mediatypes import ParseOptions
from mediatypes import STRICT
from mediatypes import ValidationError


def test_error_message():
    e = ParseError(ErrorKind.MISSING_EQUALS, 17, "text/html;charset")
    assert str(e) == "missing '=' after parameter name at position 17: 'text/html;charset'"
    assert e.kind is ErrorKind.MISSING_EQUALS
    assert e.position == 17
    assert e.input == "text/html;charset"

    e = ValidationError(ErrorKind.EMPTY_TYPE, detail="empty type")
    assert str(e) == "empty type"
    assert e.position is None

    assert str(MediaTypeError(ErrorKind.BAD_ESCAPE, 3)) == (
        "backslash escape at end of input at position 3"
    )


def test_hierarchy():
    assert issubclass(ParseError, MediaTypeError)
    assert issubclass(ValidationError, MediaTypeError)
    assert issubclass(MediaTypeError, ValueError)


def test_options():
    assert not DEFAULT.strict
    assert DEFAULT.max_length is None
    assert STRICT.strict
    assert ParseOptions(max_length=0).max_length == 0

    with pytest.raises(ValueError, match="must not be negative"):
        ParseOptions(max_length=-1)
    with pytest.raises(dataclasses.FrozenInstanceError):
        DEFAULT.strict = True  # type: ignore
