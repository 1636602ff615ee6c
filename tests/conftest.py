# tests/conftest.py
from __future__ import annotations

from datetime import datetime, timedelta
from typing import Optional

import pyarrow as pa
import pytest
from loguru import logger

from lob_impact.models import Event, events_to_table
from lob_impact.utils.path import PathManager

T0 = datetime(2015, 5, 1, 12, 0, 0)


def ms(n: float) -> datetime:
    return T0 + timedelta(milliseconds=n)


@pytest.fixture(autouse=True)
def disable_file_logger():
    logger.remove()
    logger.add(lambda msg: None)
    yield


@pytest.fixture(autouse=True)
def reset_path_root():
    yield
    PathManager.set_root(None)


def matched_pair(
    bid_id: int,
    ask_id: int,
    *,
    bid_order: int,
    ask_order: int,
    bid_price: float,
    ask_price: float,
    bid_ex: float,
    ask_ex: float,
    volume: float = 1.0,
    bid_local: Optional[float] = None,
    ask_local: Optional[float] = None,
) -> list[Event]:
    """
    一对已匹配的 bid / ask 事件；时间参数均为相对 T0 的毫秒。
    local 缺省等于 exchange 时间。
    """
    bid = Event(
        event_id=bid_id,
        order_id=bid_order,
        direction="bid",
        price=bid_price,
        fill_volume=volume,
        local_timestamp=ms(bid_ex if bid_local is None else bid_local),
        exchange_timestamp=ms(bid_ex),
        matching_event=ask_id,
    )
    ask = Event(
        event_id=ask_id,
        order_id=ask_order,
        direction="ask",
        price=ask_price,
        fill_volume=volume,
        local_timestamp=ms(ask_ex if ask_local is None else ask_local),
        exchange_timestamp=ms(ask_ex),
        matching_event=bid_id,
    )
    return [bid, ask]


def resting_event(event_id: int, order_id: int, direction: str, price: float, at: float) -> Event:
    return Event(
        event_id=event_id,
        order_id=order_id,
        direction=direction,
        price=price,
        fill_volume=0.0,
        local_timestamp=ms(at),
        exchange_timestamp=ms(at),
        matching_event=None,
    )


@pytest.fixture
def jump_events() -> pa.Table:
    """
    三对成交，前两笔 bid maker @100，第三笔 order_id 乱序导致 ask 被误判为 maker @115.5
    """
    events = (
        matched_pair(1, 2, bid_order=1, ask_order=2, bid_price=100.0, ask_price=99.0, bid_ex=0, ask_ex=1)
        + matched_pair(3, 4, bid_order=3, ask_order=4, bid_price=100.0, ask_price=99.0, bid_ex=10, ask_ex=11)
        + matched_pair(5, 6, bid_order=6, ask_order=5, bid_price=100.5, ask_price=115.5, bid_ex=20, ask_ex=20)
    )
    return events_to_table(events)


@pytest.fixture
def make_pair():
    return matched_pair


@pytest.fixture
def make_resting():
    return resting_event


@pytest.fixture
def at():
    return ms
