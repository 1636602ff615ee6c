"""Pydantic record models for the event / trade / impact tables.

The engines work on Arrow tables; these models are the row-level contracts
used at the edges (building inputs by hand, validating, displaying results).
"""
from __future__ import annotations

from datetime import datetime
from typing import Iterable, List, Literal, Optional

import pyarrow as pa
from pydantic import BaseModel, Field

from lob_impact.engines.schema import EVENT_SCHEMA, IMPACT_SCHEMA, TRADE_SCHEMA


class Event(BaseModel):
    """One observed order-book event, already annotated with its match."""

    model_config = {"frozen": True}

    event_id: int
    order_id: int
    direction: Literal["bid", "ask"]
    price: float
    fill_volume: float = Field(default=0.0, ge=0)
    local_timestamp: datetime
    exchange_timestamp: datetime
    matching_event: Optional[int] = Field(
        default=None,
        description="event_id of the opposite-side event this one matched with.",
    )


class Trade(BaseModel):
    model_config = {"frozen": True}

    timestamp: datetime
    price: float
    volume: float
    direction: Literal["buy", "sell"]
    maker_event_id: int
    taker_event_id: int
    maker_order_id: int
    taker_order_id: int


class Impact(BaseModel):
    """Summary of the fills produced by one market (taker) order."""

    model_config = {"frozen": True}

    order_id: int
    min_price: float
    max_price: float
    vwap: Optional[float]
    hits: int = Field(ge=1)
    volume: float
    start_time: datetime
    end_time: datetime
    direction: Literal["buy", "sell"]


def events_to_table(events: Iterable[Event]) -> pa.Table:
    rows = [e.model_dump() for e in events]
    return pa.Table.from_pylist(rows, schema=EVENT_SCHEMA)


def trades_to_table(trades: Iterable[Trade]) -> pa.Table:
    rows = [t.model_dump() for t in trades]
    return pa.Table.from_pylist(rows, schema=TRADE_SCHEMA)


def trades_from_table(table: pa.Table) -> List[Trade]:
    return [Trade(**row) for row in table.select(TRADE_SCHEMA.names).to_pylist()]


def impacts_from_table(table: pa.Table) -> List[Impact]:
    return [Impact(**row) for row in table.select(IMPACT_SCHEMA.names).to_pylist()]
