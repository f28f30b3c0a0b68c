"""Text normalization for strings placed in quads and upsert queries.

Every free-form string that ends up in a subject, value or query-literal
position passes through :func:`remove_invalid_chars` before it is compared
or transmitted.
"""

from __future__ import annotations

import re
from types import MappingProxyType

BLANK_NODE_PREFIX = "_:"

# Two-character escape spellings come first so they win over a lone backslash.
REPLACEMENTS: MappingProxyType[str, str] = MappingProxyType(
    {
        "\\b": " ",
        "\\f": " ",
        "\\n": " ",
        "\\r": " ",
        "\\t": " ",
        '\\"': " ",
        "\x08": " ",  # backspace
        "\x0c": " ",  # form feed
        "\n": " ",
        "\r": " ",
        "\t": " ",
        "^": "",
        "{": "",
        "}": "",
        "`": "",
        "~": "",
        "\\": "",
        '"': "",
    }
)

_PATTERN = re.compile("|".join(re.escape(k) for k in REPLACEMENTS))


def remove_invalid_chars(s: str) -> str:
    """Normalize a string for use in a quad or an upsert query literal.

    Control characters and their escaped spellings become a single space,
    characters with structural meaning in DQL/RDF are dropped, surrounding
    whitespace and any blank-node prefix are stripped.

    The transformation is idempotent and maps ``""`` to ``""``.

    Args:
        s: Raw input string

    Returns:
        str: Sanitized string, possibly empty
    """
    s = _PATTERN.sub(lambda m: REPLACEMENTS[m.group(0)], s)
    s = s.strip()
    while s.startswith(BLANK_NODE_PREFIX):
        s = s[len(BLANK_NODE_PREFIX) :].strip()
    return s
