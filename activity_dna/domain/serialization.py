import json
from dataclasses import asdict
from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from typing import Any

from ..contracts.values import epoch_millis


def compact_dumps(obj: Any) -> str:
    """
    Serialize structured value/context data for the wire.

    No whitespace, non-ASCII kept as-is, NaN/Infinity rejected with
    ValueError (they are not JSON and would not survive a decode).
    """
    return json.dumps(obj, separators=(",", ":"), ensure_ascii=False, allow_nan=False)


class StrictResultEncoder(json.JSONEncoder):
    """
    JSON Encoder that prioritizes Fidelity over Flexibility.

    RULES:
    1. Dates MUST be epoch milliseconds, the unit used on the wire.
    2. Enums MUST use their .value.
    3. Decimals are emitted as floats.
    4. Sets -> Lists (sorted for determinism).
    5. Result types use their to_dict() when they have one.
    """

    def default(self, obj: Any) -> Any:
        if isinstance(obj, (datetime, date)):
            return epoch_millis(obj)
        if isinstance(obj, Enum):
            return obj.value
        if isinstance(obj, Decimal):
            return float(obj)
        if isinstance(obj, (set, frozenset)):
            return sorted(list(obj), key=repr)
        if hasattr(obj, "to_dict"):
            return obj.to_dict()
        if hasattr(obj, "__dataclass_fields__"):
            return asdict(obj)

        return super().default(obj)


def to_jsonable(obj: Any) -> Any:
    """Round-trip obj through StrictResultEncoder into plain JSON types."""
    return json.loads(json.dumps(obj, cls=StrictResultEncoder))
