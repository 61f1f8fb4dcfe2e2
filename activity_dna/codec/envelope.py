"""
Integrity Envelope
==================

Wraps an oversized serialized context together with a checksum and the
time it was generated:

    {"data": <context>, "integrity": <checksum>, "generatedAt": <epoch-ms>}

THE CHECKSUM IS A TAMPER HINT, NOT A SECURITY CONTROL.
It is a 32-bit polynomial rolling hash; anyone can recompute it after
editing the data. It detects accidental corruption and naive edits only.
"""

from __future__ import annotations
from collections.abc import Mapping
from typing import Any, Tuple

from ..contracts.records import EnvelopeStatus
from ..domain.serialization import compact_dumps


DATA_KEY = "data"
INTEGRITY_KEY = "integrity"
GENERATED_AT_KEY = "generatedAt"

# Key names written by older encoders; still accepted on decode.
_LEGACY_KEYS = ("_integrity", "_ts")

_BASE36 = "0123456789abcdefghijklmnopqrstuvwxyz"


def _to_base36(number: int) -> str:
    if number == 0:
        return "0"
    digits = []
    while number:
        number, rem = divmod(number, 36)
        digits.append(_BASE36[rem])
    return "".join(reversed(digits))


def integrity_hash(text: str) -> str:
    """
    Rolling hash h = h*31 + unit over UTF-16 code units, folded to a
    signed 32-bit integer; absolute value rendered in base 36.
    """
    h = 0
    data = text.encode("utf-16-le")
    for i in range(0, len(data), 2):
        unit = data[i] | (data[i + 1] << 8)
        h = (h * 31 + unit) & 0xFFFFFFFF
    if h >= 0x80000000:
        h -= 0x100000000
    return _to_base36(abs(h))


def wrap(context: Mapping, serialized: str, generated_at: int) -> dict:
    """Build the envelope for an already-serialized context."""
    return {
        DATA_KEY: context,
        INTEGRITY_KEY: integrity_hash(serialized),
        GENERATED_AT_KEY: generated_at,
    }


def is_envelope(obj: Any) -> bool:
    if not isinstance(obj, Mapping) or not isinstance(obj.get(DATA_KEY), Mapping):
        return False
    keys = set(obj.keys())
    return keys in (
        {DATA_KEY, INTEGRITY_KEY, GENERATED_AT_KEY},
        {DATA_KEY, *_LEGACY_KEYS},
    )


def unwrap(obj: Any) -> Tuple[Any, EnvelopeStatus]:
    """
    Return (context, status).

    Non-envelope input is returned unchanged with status NONE. For an
    envelope the checksum is recomputed over the re-serialized data;
    key order survives a JSON round trip, so an untouched envelope
    always verifies.
    """
    if not is_envelope(obj):
        return obj, EnvelopeStatus.NONE

    data = obj[DATA_KEY]
    claimed = obj.get(INTEGRITY_KEY, obj.get(_LEGACY_KEYS[0]))
    try:
        actual = integrity_hash(compact_dumps(data))
    except (TypeError, ValueError):
        return data, EnvelopeStatus.MISMATCH

    if claimed == actual:
        return data, EnvelopeStatus.VERIFIED
    return data, EnvelopeStatus.MISMATCH
