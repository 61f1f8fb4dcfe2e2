r"""
Field Escaping and Tokenizing
=============================

Reversible escaping for the '::' delimiter and a scanning tokenizer
that splits the wire text into fields.

ESCAPE TOKENS (always two characters):
======================================
    \\   a literal backslash
    \:   a literal '::'
    \.   a literal ':' that ends a field

Pairs of colons are consumed left to right, so ':::' escapes to '\:\.'.
A single colon in the middle of a field stays literal ('12:30' is
unchanged), because it can never combine with the following delimiter.

TOKENIZER RULES:
================
- Scan left to right
- A backslash and the character after it form one atomic token
- '::' outside a token is a field boundary
- Anything else is literal

So 'a\:::b' splits into the fields 'a\:' and 'b' (unescaped: 'a::'
and 'b'): the escape token is consumed before the delimiter is seen.
Unknown escapes such as '\x' are kept verbatim on unescape.
"""

from __future__ import annotations
from typing import List, Sequence

from ..contracts.base import SEPARATOR


ESCAPE = "\\"
COLON = ":"

_UNESCAPES = {
    ESCAPE: ESCAPE,
    COLON: SEPARATOR,
    ".": COLON,
}


def escape_field(text: str) -> str:
    """Escape one field so it cannot be confused with a delimiter."""
    out = []
    i = 0
    n = len(text)
    while i < n:
        ch = text[i]
        if ch == ESCAPE:
            out.append(ESCAPE + ESCAPE)
            i += 1
        elif ch == COLON:
            if i + 1 < n and text[i + 1] == COLON:
                out.append(ESCAPE + COLON)
                i += 2
            elif i + 1 == n:
                out.append(ESCAPE + ".")
                i += 1
            else:
                out.append(COLON)
                i += 1
        else:
            out.append(ch)
            i += 1
    return "".join(out)


def unescape_field(text: str) -> str:
    """Reverse escape_field. Unknown escape tokens are kept verbatim."""
    if ESCAPE not in text:
        return text
    out = []
    i = 0
    n = len(text)
    while i < n:
        ch = text[i]
        if ch == ESCAPE and i + 1 < n:
            nxt = text[i + 1]
            out.append(_UNESCAPES.get(nxt, ch + nxt))
            i += 2
        else:
            out.append(ch)
            i += 1
    return "".join(out)


def split_fields(text: str) -> List[str]:
    """
    Split wire text into still-escaped fields.

    Escape tokens are consumed atomically so an escaped delimiter is
    never mistaken for a boundary.
    """
    fields = []
    buf = []
    i = 0
    n = len(text)
    step = len(SEPARATOR)
    while i < n:
        ch = text[i]
        if ch == ESCAPE and i + 1 < n:
            buf.append(text[i:i + 2])
            i += 2
        elif text.startswith(SEPARATOR, i):
            fields.append("".join(buf))
            buf = []
            i += step
        else:
            buf.append(ch)
            i += 1
    fields.append("".join(buf))
    return fields


def tokenize(text: str) -> List[str]:
    """Split and unescape wire text into field values."""
    return [unescape_field(f) for f in split_fields(text)]


def join_fields(fields: Sequence[str]) -> str:
    """
    Escape and join fields, dropping trailing empty ones.

    Empty fields in the middle are kept as empty slots so later
    fields keep their position.
    """
    kept = list(fields)
    while kept and kept[-1] == "":
        kept.pop()
    return SEPARATOR.join(escape_field(f) for f in kept)
