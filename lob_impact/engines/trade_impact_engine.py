# lob_impact/engines/trade_impact_engine.py
from __future__ import annotations

import pyarrow as pa
import pyarrow.compute as pc

from lob_impact.engines.schema import IMPACT_SCHEMA, TRADE_SCHEMA, require_columns
from lob_impact.engines.vwap import vwap_from_sums


class TradeImpactEngine:
    """
    TradeImpactEngine

    输入：
      - trade Arrow Table（TRADE_SCHEMA，通常来自 TradeMatchEngine）

    输出：
      - impact Arrow Table（IMPACT_SCHEMA），每个 taker_order_id 一行：
          order_id, min_price, max_price, vwap, hits, volume,
          start_time, end_time, direction

    语义：
      - 一个市价 / 可成交限价单吃掉多个 maker → 多笔 trade → 一个 impact
      - direction 取组内时间上最后一笔（假设组内方向不变）
      - vwap = Σ(price·volume) / Σ(volume)，保留 vwap_decimals 位
      - 输出按 start_time 升序
    """

    def __init__(self, *, vwap_decimals: int = 2) -> None:
        self.vwap_decimals = vwap_decimals

    def execute(self, trades: pa.Table) -> pa.Table:
        if trades.num_rows == 0:
            return IMPACT_SCHEMA.empty_table()

        require_columns(trades, TRADE_SCHEMA, "TradeImpactEngine")

        # 稳定排序：组内 "last" = 时间上最后一笔
        ordered = trades.sort_by([("timestamp", "ascending")])
        ordered = ordered.append_column(
            "notional",
            pc.multiply(
                pc.cast(ordered["price"], pa.float64()),
                pc.cast(ordered["volume"], pa.float64()),
            ),
        )

        grouped = (
            ordered
            .group_by("taker_order_id", use_threads=False)  # "last" 依赖输入顺序
            .aggregate(
                [
                    ("price", "min"),
                    ("price", "max"),
                    ("notional", "sum"),
                    ("volume", "sum"),
                    ("price", "count"),
                    ("timestamp", "min"),
                    ("timestamp", "max"),
                    ("direction", "last"),
                ]
            )
        )

        impacts = pa.table(
            {
                "order_id": grouped["taker_order_id"],
                "min_price": grouped["price_min"],
                "max_price": grouped["price_max"],
                "vwap": vwap_from_sums(
                    grouped["notional_sum"],
                    grouped["volume_sum"],
                    decimals=self.vwap_decimals,
                ),
                "hits": grouped["price_count"],
                "volume": pc.cast(grouped["volume_sum"], pa.float64()),
                "start_time": grouped["timestamp_min"],
                "end_time": grouped["timestamp_max"],
                "direction": grouped["direction_last"],
            },
            schema=IMPACT_SCHEMA,
        )

        return impacts.sort_by([("start_time", "ascending")])
