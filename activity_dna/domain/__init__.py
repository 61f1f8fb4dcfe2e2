from .serialization import compact_dumps, StrictResultEncoder, to_jsonable

__all__ = ['compact_dumps', 'StrictResultEncoder', 'to_jsonable']
