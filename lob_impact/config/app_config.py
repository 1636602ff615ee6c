#!filepath: lob_impact/config/app_config.py
import os

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field

from .log_config import LogConfig
from .data_config import DataConfig
from .trade_config import TradeConfig

DATA_ROOT_ENV = "LOB_IMPACT_DATA_ROOT"


def package_root() -> str:
    """
    返回包目录（基于当前文件位置推导）:
    lob_impact/config/app_config.py → lob_impact/config → lob_impact
    """
    return os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))


def project_root() -> str:
    return os.path.abspath(os.path.join(package_root(), ".."))


class AppConfig(BaseModel):
    log: LogConfig = Field(default_factory=LogConfig)
    data: DataConfig = Field(default_factory=DataConfig)
    trade: TradeConfig = Field(default_factory=TradeConfig)

    @classmethod
    def load(cls, path: str | None = None) -> "AppConfig":
        """
        加载 YAML 配置 + .env
        - 默认使用 lob_impact/config/base.yml
        - 不依赖当前工作目录
        - LOB_IMPACT_DATA_ROOT 覆盖 data.root
        """
        load_dotenv(os.path.join(project_root(), ".env"))

        if path is None:
            path = os.path.join(package_root(), "config", "base.yml")

        if not os.path.exists(path):
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path, "r", encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}

        data_root = os.getenv(DATA_ROOT_ENV)
        if data_root:
            raw["data"] = {**(raw.get("data") or {}), "root": data_root}

        return cls(**raw)
