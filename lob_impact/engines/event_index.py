# lob_impact/engines/event_index.py
from __future__ import annotations

import pyarrow as pa
import pyarrow.compute as pc

from lob_impact.utils.errors import EventLookupError


class EventIndex:
    """
    event_id → 行 的哈希索引（只读）。

    take() 一次性向量化查找；找不到的 event_id 抛 EventLookupError。
    """

    def __init__(self, events: pa.Table) -> None:
        self._events = events
        self._ids = events["event_id"].combine_chunks()

    def positions(self, event_ids: pa.Array | pa.ChunkedArray) -> pa.Array:
        if isinstance(event_ids, pa.ChunkedArray):
            event_ids = event_ids.combine_chunks()

        pos = pc.index_in(event_ids, value_set=self._ids)
        if pos.null_count:
            missing = event_ids.filter(pc.is_null(pos))
            raise EventLookupError(missing.to_pylist())
        return pos

    def take(self, column: str, event_ids: pa.Array | pa.ChunkedArray) -> pa.Array:
        column_values = self._events[column]
        if len(event_ids) == 0:
            return pa.array([], type=column_values.type)
        return pc.take(column_values, self.positions(event_ids)).combine_chunks()
