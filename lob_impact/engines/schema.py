# lob_impact/engines/schema.py
from __future__ import annotations

import pyarrow as pa
import pyarrow.compute as pc

from lob_impact.utils.errors import InvalidEventError

BID = "bid"
ASK = "ask"
BUY = "buy"
SELL = "sell"

# 时间戳约定：naive timestamp[ns]，语义为 UTC；ns 输入无损
TS_TYPE = pa.timestamp("ns")

EVENT_SCHEMA = pa.schema(
    [
        pa.field("event_id", pa.int64(), nullable=False),
        pa.field("order_id", pa.int64(), nullable=False),
        pa.field("direction", pa.string(), nullable=False),
        pa.field("price", pa.float64(), nullable=False),
        pa.field("fill_volume", pa.float64(), nullable=False),
        pa.field("local_timestamp", TS_TYPE, nullable=False),
        pa.field("exchange_timestamp", TS_TYPE, nullable=False),
        pa.field("matching_event", pa.int64()),
    ]
)

TRADE_SCHEMA = pa.schema(
    [
        ("timestamp", TS_TYPE),
        ("price", pa.float64()),
        ("volume", pa.float64()),
        ("direction", pa.string()),
        ("maker_event_id", pa.int64()),
        ("taker_event_id", pa.int64()),
        ("maker_order_id", pa.int64()),
        ("taker_order_id", pa.int64()),
    ]
)

IMPACT_SCHEMA = pa.schema(
    [
        ("order_id", pa.int64()),
        ("min_price", pa.float64()),
        ("max_price", pa.float64()),
        ("vwap", pa.float64()),
        ("hits", pa.int64()),
        ("volume", pa.float64()),
        ("start_time", TS_TYPE),
        ("end_time", TS_TYPE),
        ("direction", pa.string()),
    ]
)


def require_columns(table: pa.Table, schema: pa.Schema, owner: str) -> None:
    missing = [name for name in schema.names if name not in table.column_names]
    if missing:
        raise InvalidEventError(f"{owner} missing required columns: {missing}")


def conform_events(table: pa.Table) -> pa.Table:
    """
    把任意来源的事件表收敛到 EVENT_SCHEMA。

    - 只保留 EVENT_SCHEMA 列（多余列忽略）
    - 类型统一 cast
    - 非空列不允许 null
    - direction 只允许 bid / ask
    - fill_volume >= 0（price 不做符号约束）
    - event_id 必须唯一
    """
    require_columns(table, EVENT_SCHEMA, "event table")

    columns = []
    for field in EVENT_SCHEMA:
        column = table[field.name]
        if not field.nullable and column.null_count:
            raise InvalidEventError(
                f"column {field.name!r} has {column.null_count} null value(s)"
            )
        try:
            columns.append(column.cast(field.type))
        except (pa.ArrowInvalid, pa.ArrowNotImplementedError) as exc:
            raise InvalidEventError(
                f"column {field.name!r} cannot be cast to {field.type}: {exc}"
            ) from exc

    events = pa.Table.from_arrays(columns, schema=EVENT_SCHEMA)
    if events.num_rows == 0:
        return events

    valid_dir = pc.is_in(events["direction"], value_set=pa.array([BID, ASK]))
    if not pc.all(valid_dir).as_py():
        bad = pc.unique(events["direction"].filter(pc.invert(valid_dir))).to_pylist()
        raise InvalidEventError(f"unknown direction value(s): {bad}")

    negative = pc.sum(pc.less(events["fill_volume"], 0.0)).as_py()
    if negative:
        raise InvalidEventError(f"fill_volume has {negative} negative value(s)")

    distinct = pc.count_distinct(events["event_id"]).as_py()
    if distinct != events.num_rows:
        raise InvalidEventError(
            f"event_id is not unique: {events.num_rows - distinct} duplicate(s)"
        )

    return events
