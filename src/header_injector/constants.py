"""Static data shared by the extraction engine and the configuration layer."""

from __future__ import annotations

MAX_HEADERS = 10

DEFAULT_HEADER_NAME = "X-Custom-Header"
DEFAULT_HEADER_VALUE = "CustomValue"

# Characters that terminate a literal-mode token (in addition to whitespace).
LITERAL_DELIMITERS = frozenset({",", '"', "}", "]"})
# Unicode spaces that still bind words together; they stay part of a token.
NON_BREAKING_SPACES = frozenset({"\u00a0", "\u2007", "\u202f"})

RESPONSE_SAMPLE_LENGTH = 200

DEFAULT_NAMESPACE = "header_injector"


__all__ = [
    "DEFAULT_HEADER_NAME",
    "DEFAULT_HEADER_VALUE",
    "DEFAULT_NAMESPACE",
    "LITERAL_DELIMITERS",
    "MAX_HEADERS",
    "NON_BREAKING_SPACES",
    "RESPONSE_SAMPLE_LENGTH",
]
