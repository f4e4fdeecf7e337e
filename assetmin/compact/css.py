"""CSS compaction."""

from __future__ import annotations

import re

# Up to the first "*/"; embedded "*" characters are fine.
_COMMENT_RE = re.compile(r"/\*[^*]*\*+(?:[^/][^*]*\*+)*/")
_WHITESPACE_RE = re.compile(r"[\r\n\t ]+")


def compact_css(buffer: str) -> str:
    """
    Strip comments and whitespace from CSS.

    Purely lexical: comment-like text inside strings or ``url()`` values is
    removed too, and every space goes, including ones between selector parts.
    """
    buffer = _COMMENT_RE.sub("", buffer)
    buffer = buffer.replace(": ", ":")
    return _WHITESPACE_RE.sub("", buffer)
