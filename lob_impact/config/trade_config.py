# lob_impact/config/trade_config.py
from pydantic import BaseModel, Field


class TradeConfig(BaseModel):
    """
    TradeConfig

    - jump_threshold: 相邻成交价跳变阈值（货币单位），超过即视为 maker/taker 误判
    - correct_jumps: False 时只标记、不交换
    - vwap_decimals: impact vwap 保留小数位
    """

    jump_threshold: float = Field(default=10.0, gt=0)
    correct_jumps: bool = True
    vwap_decimals: int = Field(default=2, ge=0)
