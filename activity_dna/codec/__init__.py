"""
Codec Layer

RESPONSIBILITY: Encode/decode between ActivityRecord and the delimited
wire text
OUTPUTS: Result carrying wire text or ActivityRecord

WHAT THIS LAYER MUST NOT DO:
============================
- Analyze, score or aggregate records
- Print or log to a console (diagnostics go to the injected sink)
- Read the wall clock except through the injected LogicalClock
"""

from .encoder import ActivityEncoder, encode
from .decoder import ActivityDecoder, decode
from .envelope import integrity_hash
from .escaping import escape_field, unescape_field, split_fields, tokenize, join_fields

__all__ = [
    'ActivityEncoder', 'encode',
    'ActivityDecoder', 'decode',
    'integrity_hash',
    'escape_field', 'unescape_field', 'split_fields', 'tokenize', 'join_fields',
]
