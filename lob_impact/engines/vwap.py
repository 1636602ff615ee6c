# lob_impact/engines/vwap.py
from __future__ import annotations

from typing import Optional, Sequence

import pyarrow as pa
import pyarrow.compute as pc


def vwap(
    prices: Sequence[float] | pa.Array | pa.ChunkedArray,
    volumes: Sequence[float] | pa.Array | pa.ChunkedArray,
) -> Optional[float]:
    """
    VWAP = Σ(price·volume) / Σ(volume)

    总成交量为 0（或输入为空）时返回 None。
    """
    if len(prices) != len(volumes):
        raise ValueError(
            f"vwap: prices/volumes length mismatch ({len(prices)} vs {len(volumes)})"
        )

    p = pc.cast(prices if isinstance(prices, (pa.Array, pa.ChunkedArray)) else pa.array(prices), pa.float64())
    v = pc.cast(volumes if isinstance(volumes, (pa.Array, pa.ChunkedArray)) else pa.array(volumes), pa.float64())

    notional = pc.sum(pc.multiply(p, v))
    total = pc.sum(v)

    return vwap_from_sums(
        pa.array([notional.as_py()], pa.float64()),
        pa.array([total.as_py()], pa.float64()),
    )[0].as_py()


def vwap_from_sums(
    notional: pa.Array | pa.ChunkedArray,
    volume: pa.Array | pa.ChunkedArray,
    decimals: Optional[int] = None,
) -> pa.Array:
    """
    向量化版本：已分组求和后的 notional / volume → vwap。

    - volume 为 0 / null → null
    - decimals 不为 None 时四舍五入
    """
    notional = pc.cast(notional, pa.float64())
    volume = pc.cast(volume, pa.float64())

    zero = pc.fill_null(pc.equal(volume, 0.0), True)
    safe_volume = pc.if_else(zero, pa.scalar(1.0), volume)
    out = pc.if_else(
        zero,
        pa.scalar(None, pa.float64()),
        pc.divide(notional, safe_volume),
    )

    if decimals is not None:
        out = pc.round(out, ndigits=decimals, round_mode="half_to_even")

    if isinstance(out, pa.ChunkedArray):
        out = out.combine_chunks()
    return out
