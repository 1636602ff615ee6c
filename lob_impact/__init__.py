#!filepath: lob_impact/__init__.py
"""Trade reconstruction and market-order impact aggregation for LOB event data."""

from .utils.logger import Logging, logs
from .config.app_config import AppConfig
from .engines.trade_match_engine import TradeMatchEngine, TradeMatchResult
from .engines.trade_impact_engine import TradeImpactEngine
from .engines.vwap import vwap

__version__ = "0.1.0"

__all__ = [
    "logs", "Logging",
    "AppConfig",
    "TradeMatchEngine", "TradeMatchResult",
    "TradeImpactEngine",
    "vwap",
]
