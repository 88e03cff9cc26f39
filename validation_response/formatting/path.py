"""Property path parsing helpers."""

from __future__ import annotations

import re

# A plain run of identifier characters, a quoted bracketed key, or any other bracketed key.
_SEGMENT_PATTERN = re.compile(r"""[^.\[\]]+|\[(?:"(.*?)"|'(.*?)'|(.*?))\]""")
_QUOTE_CHARS = "\"'"


def split_property_path(path: str) -> list[str]:
    """Split a property path into ordered segments.

    Dotted identifiers and bracketed keys both become plain string segments,
    so ``items[0].name`` yields ``["items", "0", "name"]``. Quotes around a
    bracketed key are stripped, and a quoted key may itself hold ``.``, ``[``
    or ``]`` (``tags["c[0]"]``). The empty path yields no segments.

    Malformed paths are parsed best-effort and never raise.
    """
    segments: list[str] = []
    for match in _SEGMENT_PATTERN.finditer(path):
        token = match.group(0)
        if not token.startswith("["):
            segments.append(token)
        elif match.group(1) is not None:
            segments.append(match.group(1))
        elif match.group(2) is not None:
            segments.append(match.group(2))
        else:
            segments.append(match.group(3).strip(_QUOTE_CHARS))
    return segments
