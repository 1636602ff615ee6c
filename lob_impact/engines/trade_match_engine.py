# lob_impact/engines/trade_match_engine.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

import pyarrow as pa
import pyarrow.compute as pc

from lob_impact.engines.event_index import EventIndex
from lob_impact.engines.schema import (
    ASK,
    BID,
    BUY,
    SELL,
    TRADE_SCHEMA,
    conform_events,
)
from lob_impact.utils.errors import MatchingError
from lob_impact.utils.logger import logs

DEFAULT_JUMP_THRESHOLD = 10.0


@dataclass(frozen=True)
class JumpCorrection:
    """一次 maker/taker 交换（index 为 timestamp 排序后的行号）"""

    index: int
    previous_price: float
    original_price: float
    corrected_price: float
    jump: float
    maker_event_id: int
    taker_event_id: int


@dataclass
class MatchDiagnostics:
    date: Optional[str]
    threshold: float
    flagged: List[int] = field(default_factory=list)
    corrections: List[JumpCorrection] = field(default_factory=list)

    @property
    def corrected(self) -> int:
        return len(self.corrections)

    @property
    def message(self) -> str:
        return (
            f"{self.date}: {len(self.flagged)} jumps > {self.threshold:g}, "
            f"{self.corrected} corrected (swapping makers with takers)"
        )


@dataclass
class TradeMatchResult:
    trades: pa.Table
    diagnostics: MatchDiagnostics


class TradeMatchEngine:
    """
    TradeMatchEngine

    输入（契约）：
      - 已完成 matching_event 标注的事件表（EVENT_SCHEMA，行序不限）

    输出：
      - TradeMatchResult.trades：每个 bid/ask 匹配对一行，按 timestamp 升序（稳定排序）
      - TradeMatchResult.diagnostics：价格跳变修正记录

    步骤：
      1. 按方向拆出已匹配的 bid / ask；bid 按 event_id、ask 按 matching_event 排序，
         第 i 行互为一对（不满足即 MatchingError，直接中止）
      2. maker = exchange_timestamp 更早的一方；相同则 order_id 更小的一方
      3. 价格取 maker 限价，timestamp 取两边 local_timestamp 较早者
      4. 相邻成交价跳变 > jump_threshold 的位置视为 maker/taker 误判，
         从左到右逐个复查并交换（依赖已修正的前一笔）

    设计原则：
      - 纯计算、无状态、不做 IO
      - 除第 4 步外全部向量化
    """

    def __init__(
        self,
        *,
        jump_threshold: float = DEFAULT_JUMP_THRESHOLD,
        correct_jumps: bool = True,
    ) -> None:
        if jump_threshold <= 0:
            raise ValueError(f"jump_threshold must be > 0, got {jump_threshold}")
        self.jump_threshold = jump_threshold
        self.correct_jumps = correct_jumps

    # ==========================================================
    # Public API
    # ==========================================================
    def execute(self, events: pa.Table) -> TradeMatchResult:
        events = conform_events(events)
        diagnostics = MatchDiagnostics(
            date=self._batch_date(events),
            threshold=self.jump_threshold,
        )

        bids, asks = self._align_pairs(events)
        if bids.num_rows == 0:
            logs.info(f"[TradeMatch] {diagnostics.date} no matched events")
            return TradeMatchResult(TRADE_SCHEMA.empty_table(), diagnostics)

        index = EventIndex(events)
        trades = self._build_trades(bids, asks, index)
        trades = trades.sort_by([("timestamp", "ascending")])

        trades = self._correct_jumps(trades, index, diagnostics)

        if diagnostics.flagged:
            logs.warning(f"[TradeMatch] {diagnostics.message}")

        logs.info(
            f"[TradeMatch] {diagnostics.date} trades={trades.num_rows} "
            f"flagged={len(diagnostics.flagged)} corrected={diagnostics.corrected}"
        )
        return TradeMatchResult(trades, diagnostics)

    # ==========================================================
    # 1. pairing
    # ==========================================================
    @staticmethod
    def _align_pairs(events: pa.Table) -> tuple[pa.Table, pa.Table]:
        matched = pc.is_valid(events["matching_event"])

        bids = events.filter(pc.and_(matched, pc.equal(events["direction"], BID)))
        asks = events.filter(pc.and_(matched, pc.equal(events["direction"], ASK)))

        bids = bids.sort_by("event_id").combine_chunks()
        asks = asks.sort_by("matching_event").combine_chunks()

        TradeMatchEngine._assert_bijection(bids, asks)
        return bids, asks

    @staticmethod
    def _assert_bijection(bids: pa.Table, asks: pa.Table) -> None:
        if bids.num_rows != asks.num_rows:
            raise MatchingError(
                f"matched bids ({bids.num_rows}) and matched asks "
                f"({asks.num_rows}) differ in count"
            )
        if bids.num_rows == 0:
            return

        forward = pc.equal(bids["event_id"], asks["matching_event"])
        backward = pc.equal(bids["matching_event"], asks["event_id"])
        broken = pc.invert(pc.and_(forward, backward))

        if pc.any(broken).as_py():
            i = pc.index(broken, True).as_py()
            raise MatchingError(
                f"pair {i} is not symmetric: bid event {bids['event_id'][i].as_py()} "
                f"-> {bids['matching_event'][i].as_py()}, ask event "
                f"{asks['event_id'][i].as_py()} -> {asks['matching_event'][i].as_py()}"
            )

        unequal = pc.not_equal(bids["fill_volume"], asks["fill_volume"])
        if pc.any(unequal).as_py():
            i = pc.index(unequal, True).as_py()
            raise MatchingError(
                f"pair {i} fill volume differs: bid event {bids['event_id'][i].as_py()} "
                f"filled {bids['fill_volume'][i].as_py()}, ask event "
                f"{asks['event_id'][i].as_py()} filled {asks['fill_volume'][i].as_py()}"
            )

    # ==========================================================
    # 2-3. maker / taker + trade fields
    # ==========================================================
    @staticmethod
    def _bid_is_maker(bids: pa.Table, asks: pa.Table) -> pa.Array:
        bid_ts = bids["exchange_timestamp"]
        ask_ts = asks["exchange_timestamp"]

        # 同一 exchange 时间：order_id 递增假设 → 小者先到
        tie_break = pc.and_(
            pc.equal(bid_ts, ask_ts),
            pc.less(bids["order_id"], asks["order_id"]),
        )
        return pc.or_(pc.less(bid_ts, ask_ts), tie_break)

    def _build_trades(
        self,
        bids: pa.Table,
        asks: pa.Table,
        index: EventIndex,
    ) -> pa.Table:
        bid_maker = self._bid_is_maker(bids, asks)

        maker_event_id = pc.if_else(bid_maker, bids["event_id"], asks["event_id"])
        taker_event_id = pc.if_else(bid_maker, asks["event_id"], bids["event_id"])

        return pa.table(
            {
                "timestamp": pc.min_element_wise(
                    bids["local_timestamp"], asks["local_timestamp"]
                ),
                "price": pc.if_else(bid_maker, bids["price"], asks["price"]),
                "volume": bids["fill_volume"],
                # bid 为 maker → 卖方主动
                "direction": pc.if_else(bid_maker, pa.scalar(SELL), pa.scalar(BUY)),
                "maker_event_id": maker_event_id,
                "taker_event_id": taker_event_id,
                "maker_order_id": index.take("order_id", maker_event_id),
                "taker_order_id": index.take("order_id", taker_event_id),
            },
            schema=TRADE_SCHEMA,
        )

    # ==========================================================
    # 4. price jump correction
    # ==========================================================
    def _flag_jumps(self, price: pa.ChunkedArray | pa.Array) -> List[int]:
        n = len(price)
        if n <= 1:
            return []

        if isinstance(price, pa.ChunkedArray):
            price = price.combine_chunks()

        jump = pc.abs(pc.subtract(price.slice(1), price.slice(0, n - 1)))
        flagged = pc.indices_nonzero(pc.greater(jump, self.jump_threshold))
        return [i + 1 for i in flagged.to_pylist()]

    def _correct_jumps(
        self,
        trades: pa.Table,
        index: EventIndex,
        diagnostics: MatchDiagnostics,
    ) -> pa.Table:
        flagged = self._flag_jumps(trades["price"])
        diagnostics.flagged = flagged

        if not flagged or not self.correct_jumps:
            return trades

        # 每个 flagged 行只会被访问一次，taker 在访问前不会变，
        # 因此 taker 的原始成交价可以一次性查好
        taker_ids = pc.take(trades["taker_event_id"], pa.array(flagged, pa.int64()))
        recorded_prices = index.take("price", taker_ids).to_pylist()

        price = trades["price"].to_pylist()
        direction = trades["direction"].to_pylist()
        maker_event = trades["maker_event_id"].to_pylist()
        taker_event = trades["taker_event_id"].to_pylist()
        maker_order = trades["maker_order_id"].to_pylist()
        taker_order = trades["taker_order_id"].to_pylist()
        corrected = [False] * trades.num_rows

        # 严格从左到右：i-1 可能刚被修正
        for i, recorded in zip(flagged, recorded_prices):
            jump = abs(price[i] - price[i - 1])
            if jump <= self.jump_threshold:
                continue

            original = price[i]
            price[i] = recorded
            direction[i] = SELL if direction[i] == BUY else BUY
            maker_event[i], taker_event[i] = taker_event[i], maker_event[i]
            maker_order[i], taker_order[i] = taker_order[i], maker_order[i]
            corrected[i] = True

            diagnostics.corrections.append(
                JumpCorrection(
                    index=i,
                    previous_price=price[i - 1],
                    original_price=original,
                    corrected_price=recorded,
                    jump=jump,
                    maker_event_id=maker_event[i],
                    taker_event_id=taker_event[i],
                )
            )

        if not any(corrected):
            return trades

        columns = {
            "price": price,
            "direction": direction,
            "maker_event_id": maker_event,
            "taker_event_id": taker_event,
            "maker_order_id": maker_order,
            "taker_order_id": taker_order,
        }
        for name, values in columns.items():
            idx = trades.schema.get_field_index(name)
            trades = trades.set_column(
                idx, name, pa.array(values, type=trades.schema.field(name).type)
            )
        return trades

    # ==========================================================
    # helpers
    # ==========================================================
    @staticmethod
    def _batch_date(events: pa.Table) -> Optional[str]:
        if events.num_rows == 0:
            return None
        first = pc.cast(events["local_timestamp"].slice(0, 1), pa.date32())
        return first[0].as_py().isoformat()
