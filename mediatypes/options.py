from dataclasses import dataclass


@dataclass(frozen=True)
class ParseOptions:
    """
    Configuration for parsing and constructing media types.
    Passed explicitly to every call, there is no global default to mutate.
    """

    strict: bool = False
    """
    Reject duplicate parameter names instead of keeping the first occurrence.
    """
    max_length: int | None = None
    """
    Refuse inputs longer than this many characters. Header values arrive from
    untrusted peers, so callers should set a bound (e.g. 8192).
    """

    def __post_init__(self):
        if self.max_length is not None and self.max_length < 0:
            raise ValueError(f"max_length must not be negative: {self.max_length}")


DEFAULT = ParseOptions()
STRICT = ParseOptions(strict=True)
