from .app_config import AppConfig
from .data_config import DataConfig
from .log_config import LogConfig
from .trade_config import TradeConfig

__all__ = ["AppConfig", "DataConfig", "LogConfig", "TradeConfig"]
