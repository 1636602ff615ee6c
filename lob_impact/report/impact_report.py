# lob_impact/report/impact_report.py
from __future__ import annotations

from dataclasses import dataclass, asdict
from typing import Optional

import pyarrow as pa
import pyarrow.compute as pc

from lob_impact.engines.schema import BUY, SELL
from lob_impact.utils.errors import UserInputError

BPS = 10_000


def impact_bps(impacts: pa.Table) -> pa.Array:
    """
    每个 impact 吃穿的价格区间（bps）：
        10000 * (max_price - min_price) / max_price
    """
    spread = pc.subtract(impacts["max_price"], impacts["min_price"])
    bps = pc.multiply(pc.divide(spread, impacts["max_price"]), float(BPS))
    if isinstance(bps, pa.ChunkedArray):
        bps = bps.combine_chunks()
    return bps


@dataclass(frozen=True)
class ImpactSummary:
    direction: Optional[str]
    impacts: int
    volume: float
    mean_hits: Optional[float]
    # bps 分布只统计 range > 0 的 impact（单价位成交不计）
    moving: int
    bps_min: Optional[float]
    bps_q1: Optional[float]
    bps_median: Optional[float]
    bps_mean: Optional[float]
    bps_q3: Optional[float]
    bps_max: Optional[float]

    def to_dict(self) -> dict:
        return asdict(self)


def summarize_impacts(impacts: pa.Table, direction: Optional[str] = None) -> ImpactSummary:
    if direction is not None:
        if direction not in (BUY, SELL):
            raise UserInputError(f"direction must be '{BUY}' or '{SELL}', got {direction!r}")
        impacts = impacts.filter(pc.equal(impacts["direction"], direction))

    if impacts.num_rows == 0:
        return ImpactSummary(direction, 0, 0.0, None, 0, None, None, None, None, None, None)

    bps = impact_bps(impacts)
    bps = bps.filter(pc.greater(bps, 0.0))

    if len(bps) == 0:
        quantiles = [None, None, None]
        bps_min = bps_mean = bps_max = None
    else:
        quantiles = pc.quantile(bps, q=[0.25, 0.5, 0.75]).to_pylist()
        min_max = pc.min_max(bps)
        bps_min = min_max["min"].as_py()
        bps_max = min_max["max"].as_py()
        bps_mean = pc.mean(bps).as_py()

    return ImpactSummary(
        direction=direction,
        impacts=impacts.num_rows,
        volume=pc.sum(impacts["volume"]).as_py(),
        mean_hits=pc.mean(impacts["hits"]).as_py(),
        moving=len(bps),
        bps_min=bps_min,
        bps_q1=quantiles[0],
        bps_median=quantiles[1],
        bps_mean=bps_mean,
        bps_q3=quantiles[2],
        bps_max=bps_max,
    )
