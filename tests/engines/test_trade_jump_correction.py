from __future__ import annotations

import pytest
from loguru import logger

from lob_impact.engines.trade_match_engine import TradeMatchEngine
from lob_impact.models import events_to_table


# ============================================================
# 1. [100, 100, 115.5] → 第三笔被标记并交换 maker/taker
# ============================================================
def test_jump_corrected_with_recorded_taker_price(jump_events):
    result = TradeMatchEngine().execute(jump_events)
    rows = result.trades.to_pylist()

    assert [r["price"] for r in rows] == [100.0, 100.0, 100.5]

    third = rows[2]
    assert third["direction"] == "sell"
    assert third["maker_event_id"] == 5
    assert third["taker_event_id"] == 6
    assert third["maker_order_id"] == 6
    assert third["taker_order_id"] == 5


def test_jump_correction_leaves_other_trades_untouched(jump_events):
    corrected = TradeMatchEngine().execute(jump_events).trades
    raw = TradeMatchEngine(correct_jumps=False).execute(jump_events).trades

    assert corrected.slice(0, 2).equals(raw.slice(0, 2))
    assert raw["price"].to_pylist() == [100.0, 100.0, 115.5]
    assert raw["direction"].to_pylist()[2] == "buy"


def test_jump_diagnostics(jump_events):
    diag = TradeMatchEngine().execute(jump_events).diagnostics

    assert diag.date == "2015-05-01"
    assert diag.threshold == 10.0
    assert diag.flagged == [2]
    assert diag.corrected == 1

    c = diag.corrections[0]
    assert c.index == 2
    assert c.previous_price == 100.0
    assert c.original_price == 115.5
    assert c.corrected_price == 100.5
    assert c.jump == pytest.approx(15.5)
    assert c.maker_event_id == 5
    assert c.taker_event_id == 6

    assert "2015-05-01" in diag.message
    assert "1 jumps" in diag.message


def test_jump_flagged_but_not_corrected_when_disabled(jump_events):
    diag = TradeMatchEngine(correct_jumps=False).execute(jump_events).diagnostics

    assert diag.flagged == [2]
    assert diag.corrections == []


def test_no_jumps_no_diagnostics(make_pair):
    events = events_to_table(
        make_pair(1, 2, bid_order=1, ask_order=2, bid_price=100.0, ask_price=99.0, bid_ex=0, ask_ex=1)
        + make_pair(3, 4, bid_order=3, ask_order=4, bid_price=109.0, ask_price=99.0, bid_ex=2, ask_ex=3)
    )
    diag = TradeMatchEngine().execute(events).diagnostics

    # 跳变恰好 9 < 10
    assert diag.flagged == []
    assert diag.corrected == 0


def test_jump_equal_to_threshold_not_flagged(make_pair):
    events = events_to_table(
        make_pair(1, 2, bid_order=1, ask_order=2, bid_price=100.0, ask_price=99.0, bid_ex=0, ask_ex=1)
        + make_pair(3, 4, bid_order=3, ask_order=4, bid_price=110.0, ask_price=99.0, bid_ex=2, ask_ex=3)
    )

    assert TradeMatchEngine().execute(events).diagnostics.flagged == []


def test_custom_threshold(jump_events):
    diag = TradeMatchEngine(jump_threshold=20.0).execute(jump_events).diagnostics

    assert diag.flagged == []


# ============================================================
# 2. 级联语义：i 的复查基于已修正的 i-1
# ============================================================
def test_recheck_uses_corrected_predecessor(make_pair):
    # 原始价格 [100, 120, 100.5]：index 1、2 都被标记
    # 修正 index 1 → 100.2 之后，index 2 与 100.2 只差 0.3，不再交换
    events = events_to_table(
        make_pair(1, 2, bid_order=1, ask_order=2, bid_price=100.0, ask_price=99.0, bid_ex=0, ask_ex=1)
        + make_pair(3, 4, bid_order=4, ask_order=3, bid_price=100.2, ask_price=120.0, bid_ex=10, ask_ex=10)
        + make_pair(5, 6, bid_order=5, ask_order=6, bid_price=100.5, ask_price=99.0, bid_ex=20, ask_ex=21)
    )
    result = TradeMatchEngine().execute(events)

    assert result.diagnostics.flagged == [1, 2]
    assert [c.index for c in result.diagnostics.corrections] == [1]
    assert result.trades["price"].to_pylist() == [100.0, 100.2, 100.5]
    assert result.trades["direction"].to_pylist() == ["sell", "sell", "sell"]


def test_consecutive_jumps_both_corrected(make_pair):
    # [100, 115, 130]：修正 index 1 → 100.1 后 index 2 仍然跳 29.9，继续修正 → 100.3
    events = events_to_table(
        make_pair(1, 2, bid_order=1, ask_order=2, bid_price=100.0, ask_price=99.0, bid_ex=0, ask_ex=1)
        + make_pair(3, 4, bid_order=4, ask_order=3, bid_price=100.1, ask_price=115.0, bid_ex=10, ask_ex=10)
        + make_pair(5, 6, bid_order=6, ask_order=5, bid_price=100.3, ask_price=130.0, bid_ex=20, ask_ex=20)
    )
    result = TradeMatchEngine().execute(events)

    assert result.diagnostics.flagged == [1, 2]
    assert result.diagnostics.corrected == 2
    assert result.trades["price"].to_pylist() == [100.0, 100.1, 100.3]
    assert result.trades["maker_event_id"].to_pylist() == [1, 3, 5]


# ============================================================
# 跳变被标记时输出 warning（日期 + 计数）
# ============================================================
def test_flagged_jump_emits_warning(jump_events):
    captured = []
    sink_id = logger.add(lambda msg: captured.append(str(msg)), level="WARNING")
    try:
        TradeMatchEngine().execute(jump_events)
    finally:
        logger.remove(sink_id)

    assert len(captured) == 1
    assert "2015-05-01" in captured[0]
    assert "1 jumps" in captured[0]
    assert "1 corrected" in captured[0]


def test_no_warning_without_jumps(make_pair):
    events = events_to_table(
        make_pair(1, 2, bid_order=1, ask_order=2, bid_price=100.0, ask_price=99.0, bid_ex=0, ask_ex=1)
        + make_pair(3, 4, bid_order=3, ask_order=4, bid_price=101.0, ask_price=99.0, bid_ex=2, ask_ex=3)
    )
    captured = []
    sink_id = logger.add(lambda msg: captured.append(str(msg)), level="WARNING")
    try:
        TradeMatchEngine().execute(events)
    finally:
        logger.remove(sink_id)

    assert captured == []
