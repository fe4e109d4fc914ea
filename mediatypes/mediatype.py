from __future__ import annotations

import codecs
import enum
import logging
from collections.abc import Iterable
from collections.abc import Mapping

from mediatypes import grammar
from mediatypes.exceptions import ErrorKind
from mediatypes.exceptions import ValidationError
from mediatypes.options import DEFAULT
from mediatypes.options import ParseOptions

logger = logging.getLogger(__name__)

WILDCARD = "*"

# Parameters whose values are case-insensitive when matching against a pattern.
# https://datatracker.ietf.org/doc/html/rfc2046#section-4.1.2
_CASE_INSENSITIVE_PARAMETERS = frozenset(["charset"])

# https://mimesniff.spec.whatwg.org/#mime-type-groups
_FONT_TYPES = frozenset(
    [
        "application/font-ttf",
        "application/font-cff",
        "application/font-off",
        "application/font-sfnt",
        "application/vnd.ms-opentype",
        "application/font-woff",
        "application/vnd.ms-fontobject",
    ]
)
_ARCHIVE_TYPES = frozenset(
    ["application/x-rar-compressed", "application/zip", "application/x-gzip"]
)
_XML_TYPES = frozenset(["text/xml", "application/xml"])
_JSON_TYPES = frozenset(["application/json", "text/json"])
_SCRIPTABLE_TYPES = frozenset(["text/html", "application/pdf"])


class Tree(enum.Enum):
    """
    Registration trees, https://datatracker.ietf.org/doc/html/rfc6838#section-3
    """

    STANDARDS = "standards"
    VENDOR = "vnd"
    PERSONAL = "prs"
    PRIVATE = "x"
    UNREGISTERED = "unregistered"


_TREE_FACETS = {
    "vnd": Tree.VENDOR,
    "prs": Tree.PERSONAL,
    "x": Tree.PRIVATE,
}


def split_suffix(subtype: str) -> tuple[str, str | None]:
    """
    Split a structured syntax suffix (RFC 6839) off a subtype, e.g.
    "atom+xml" -> ("atom", "xml"). The split happens at the last "+",
    and only if there is something on both sides of it.
    """
    i = subtype.rfind("+")
    if 0 < i < len(subtype) - 1:
        return subtype[:i], subtype[i + 1 :]
    return subtype, None


def _check_component(value: str, what: str, empty_kind: ErrorKind) -> None:
    if not isinstance(value, str):
        raise TypeError(f"Expected str for {what}, but got {type(value).__name__}.")
    if not value:
        raise ValidationError(empty_kind, detail=f"empty {what}")
    i = grammar.find_invalid_char(value)
    if i is not None:
        raise ValidationError(
            ErrorKind.INVALID_TOKEN,
            i,
            value,
            detail=f"illegal character {value[i]!r} in {what}",
        )


def _check_parameter(name: str, value: str) -> None:
    _check_component(name, "parameter name", ErrorKind.INVALID_TOKEN)
    if not isinstance(value, str):
        raise TypeError(
            f"Expected str for parameter {name!r}, but got {type(value).__name__}."
        )
    if not grammar.is_quoted_string_content(value):
        i = next(i for i, c in enumerate(value) if grammar.is_ctl(c) and c != "\t")
        raise ValidationError(
            ErrorKind.INVALID_TOKEN,
            i,
            value,
            detail=f"control character in value of parameter {name!r}",
        )


class MediaType:
    """
    An immutable media type, e.g. text/html; charset=UTF-8.

    Type, subtype, suffix and parameter names are stored lowercase, parameter
    values are kept as they are. Two media types are equal if their type,
    subtype and suffix are equal and they have the same set of parameters,
    regardless of parameter order.
    """

    __slots__ = ("_type", "_subtype", "_suffix", "_parameters")

    _type: str
    _subtype: str
    _suffix: str | None
    _parameters: tuple[tuple[str, str], ...]

    def __init__(
        self,
        type_: str,
        subtype: str,
        parameters: Iterable[tuple[str, str]] | Mapping[str, str] = (),
        *,
        suffix: str | None = None,
        options: ParseOptions = DEFAULT,
    ):
        """
        Build a media type from its components, validating each of them.

        If no suffix is given and the subtype contains a "+", the suffix is
        split off the subtype the same way the parser does it.

        *Raises:*
         - ValidationError, if a component is invalid, or if a parameter name
           is repeated and options.strict is set.
        """
        _check_component(type_, "type", ErrorKind.EMPTY_TYPE)
        _check_component(subtype, "subtype", ErrorKind.EMPTY_SUBTYPE)
        if suffix is None:
            subtype, suffix = split_suffix(subtype)
        else:
            _check_component(suffix, "suffix", ErrorKind.INVALID_TOKEN)
            # str() joins subtype and suffix with "+" and the parser splits at the last one.
            if "+" in suffix:
                raise ValidationError(
                    ErrorKind.INVALID_TOKEN,
                    suffix.index("+"),
                    suffix,
                    detail="illegal character '+' in suffix",
                )

        if isinstance(parameters, Mapping):
            parameters = parameters.items()
        params: list[tuple[str, str]] = []
        seen: set[str] = set()
        for name, value in parameters:
            _check_parameter(name, value)
            name = name.lower()
            if name in seen:
                if options.strict:
                    raise ValidationError(
                        ErrorKind.DUPLICATE_PARAMETER,
                        detail=f"duplicate parameter {name!r}",
                    )
                logger.debug(f"Ignoring duplicate parameter {name!r}={value!r}.")
                continue
            seen.add(name)
            params.append((name, value))

        self._type = type_.lower()
        self._subtype = subtype.lower()
        self._suffix = suffix.lower() if suffix is not None else None
        self._parameters = tuple(params)

    @classmethod
    def _unchecked(
        cls,
        type_: str,
        subtype: str,
        suffix: str | None,
        parameters: tuple[tuple[str, str], ...],
    ) -> MediaType:
        # Components must already be validated and normalized.
        self = cls.__new__(cls)
        self._type = type_
        self._subtype = subtype
        self._suffix = suffix
        self._parameters = parameters
        return self

    @classmethod
    def wildcard(cls) -> MediaType:
        """The */* media range."""
        return cls._unchecked(WILDCARD, WILDCARD, None, ())

    @classmethod
    def wildcard_subtype(cls, type_: str) -> MediaType:
        """A media range with a concrete type and any subtype, e.g. image/*."""
        return cls(type_, WILDCARD)

    @property
    def type(self) -> str:
        """
        The top-level type, e.g. "application" for "application/atom+xml".
        """
        return self._type

    @property
    def subtype(self) -> str:
        """
        The subtype without its suffix, e.g. "atom" for "application/atom+xml".
        """
        return self._subtype

    @property
    def suffix(self) -> str | None:
        """
        The structured syntax suffix, e.g. "xml" for "application/atom+xml".
        """
        return self._suffix

    @property
    def parameters(self) -> tuple[tuple[str, str], ...]:
        return self._parameters

    @property
    def essence(self) -> str:
        """
        The media type without parameters, e.g. "application/atom+xml".
        """
        if self._suffix is None:
            return f"{self._type}/{self._subtype}"
        return f"{self._type}/{self._subtype}+{self._suffix}"

    def parameter(self, name: str, default: str | None = None) -> str | None:
        """
        Case-insensitive parameter lookup.
        """
        name = name.lower()
        for k, v in self._parameters:
            if k == name:
                return v
        return default

    @property
    def charset(self) -> str | None:
        return self.parameter("charset")

    def resolve_charset(self) -> str | None:
        """
        The charset parameter resolved to the name of a Python codec, e.g.
        "iso8859-1" for charset=ISO-8859-1, or None if the parameter is absent.

        *Raises:*
         - ValidationError, if no codec is known under that name.
        """
        charset = self.charset
        if charset is None:
            return None
        try:
            return codecs.lookup(charset).name
        except LookupError as e:
            raise ValidationError(ErrorKind.UNKNOWN_CHARSET, input=charset) from e

    def boundary(self) -> str | None:
        """
        The multipart boundary, or None if the parameter is absent.

        *Raises:*
         - ValidationError, if the boundary violates the RFC 2046 grammar.
        """
        boundary = self.parameter("boundary")
        if boundary is None:
            return None
        if not grammar.is_boundary(boundary):
            raise ValidationError(ErrorKind.INVALID_BOUNDARY, input=boundary)
        return boundary

    @property
    def tree(self) -> Tree | None:
        """
        The registration tree of the subtype, or None for a wildcard subtype.
        """
        if self._subtype == WILDCARD:
            return None
        facet, dot, _ = self._subtype.partition(".")
        if not dot:
            return Tree.STANDARDS
        return _TREE_FACETS.get(facet, Tree.UNREGISTERED)

    @property
    def facet(self) -> str | None:
        """
        The facet prefix of the subtype, e.g. "vnd" for "application/vnd.api+json"
        or "spam" for "example/spam.foobar". None if the subtype has no facet.
        """
        facet, dot, _ = self._subtype.partition(".")
        if not dot:
            return None
        return facet

    def is_wildcard(self) -> bool:
        """
        True for media ranges such as text/* or */*, which can only be used as patterns.
        """
        return self._type == WILDCARD or self._subtype == WILDCARD

    def with_parameter(self, name: str, value: str) -> MediaType:
        """
        Return a copy with the given parameter set, replacing an existing
        parameter of the same name in place.
        """
        _check_parameter(name, value)
        name = name.lower()
        params = []
        replaced = False
        for k, v in self._parameters:
            if k == name:
                params.append((name, value))
                replaced = True
            else:
                params.append((k, v))
        if not replaced:
            params.append((name, value))
        return self._unchecked(self._type, self._subtype, self._suffix, tuple(params))

    def without_parameter(self, name: str) -> MediaType:
        name = name.lower()
        params = tuple((k, v) for k, v in self._parameters if k != name)
        return self._unchecked(self._type, self._subtype, self._suffix, params)

    def without_parameters(self) -> MediaType:
        return self._unchecked(self._type, self._subtype, self._suffix, ())

    def with_charset(self, charset: str) -> MediaType:
        return self.with_parameter("charset", charset)

    def with_charset_utf8(self) -> MediaType:
        return self.with_charset("utf-8")

    def essence_equals(self, other: MediaType) -> bool:
        """
        Compare type, subtype and suffix, ignoring parameters.
        """
        return (self._type, self._subtype, self._suffix) == (
            other._type,
            other._subtype,
            other._suffix,
        )

    def matches(self, pattern: MediaType) -> bool:
        """
        Check whether this media type is covered by pattern, as done for Accept headers.

        A "*" in the pattern matches any type or subtype. The suffix is only
        compared if the pattern has one. All parameters of the pattern must be
        present with the same value, additional parameters are ignored. Values
        are compared case-sensitively, except for charset (RFC 2046 section 4.1.2).
        """
        if pattern._type != WILDCARD and pattern._type != self._type:
            return False
        if pattern._subtype != WILDCARD and pattern._subtype != self._subtype:
            return False
        if pattern._suffix is not None and pattern._suffix != self._suffix:
            return False
        for name, value in pattern._parameters:
            mine = self.parameter(name)
            if mine is None:
                return False
            if name in _CASE_INSENSITIVE_PARAMETERS:
                if mine.lower() != value.lower():
                    return False
            elif mine != value:
                return False
        return True

    @property
    def specificity(self) -> tuple[int, int]:
        """
        A sort key: concrete types rank above type/* which ranks above */*,
        and with equal shape more parameters rank higher.
        """
        shape = (self._type != WILDCARD) + (self._subtype != WILDCARD)
        return shape, len(self._parameters)

    def specificity_cmp(self, other: MediaType) -> int:
        """
        Returns 1 if self is more specific than other, -1 if it is less
        specific, and 0 if neither is more specific than the other.
        """
        a, b = self.specificity, other.specificity
        if a > b:
            return 1
        elif a < b:
            return -1
        return 0

    def is_image_type(self) -> bool:
        return self._type == "image"

    def is_audio_or_video_type(self) -> bool:
        return self._type in ("audio", "video") or self.essence == "application/ogg"

    def is_font_type(self) -> bool:
        return self._type == "font" or self.essence in _FONT_TYPES

    def is_zip_based_type(self) -> bool:
        return self._suffix == "zip" or self.essence == "application/zip"

    def is_archive_type(self) -> bool:
        return self.essence in _ARCHIVE_TYPES

    def is_xml_type(self) -> bool:
        return self._suffix == "xml" or self.essence in _XML_TYPES

    def is_json_type(self) -> bool:
        return self._suffix == "json" or self.essence in _JSON_TYPES

    def is_scriptable_type(self) -> bool:
        return self.essence in _SCRIPTABLE_TYPES

    def _key(self):
        return self._type, self._subtype, self._suffix, frozenset(self._parameters)

    def __eq__(self, other):
        if not isinstance(other, MediaType):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self):
        return hash(self._key())

    def __str__(self):
        parts = [self.essence]
        for name, value in self._parameters:
            parts.append(f"{name}={grammar.quote(value)}")
        return "; ".join(parts)

    def __repr__(self):
        return f"{type(self).__name__}({str(self)!r})"

