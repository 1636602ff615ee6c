#!filepath: lob_impact/utils/path.py
from pathlib import Path
from typing import Optional

from lob_impact.utils.logger import logs


class PathManager:
    """
    数据目录结构（root 由配置 / 环境变量决定）：

    <root>/
     ├── events/<date>.parquet    已完成 maker/taker 匹配的事件表
     ├── fact/<date>/
     │     ├── trades.parquet
     │     └── impacts.parquet
     └── logs/
    """

    _root: Optional[Path] = None

    @classmethod
    def detect_root(cls) -> Path:
        """
        默认 root = <project_root>/data
        lob_impact/utils/path.py → parents[2] = project_root
        """
        current = Path(__file__).resolve()
        root = current.parents[2] / "data"
        logs.debug(f"[PathManager] detect_root = {root}")
        return root

    @classmethod
    def root(cls) -> Path:
        if cls._root is None:
            cls._root = cls.detect_root()
        return cls._root

    @classmethod
    def set_root(cls, new_root: Path | str | None):
        if new_root is None:
            cls._root = None
        else:
            cls._root = Path(new_root).resolve()
        logs.debug(f"[PathManager] set_root = {cls._root}")

    # ---------------------------------------------------------
    # data dirs
    # ---------------------------------------------------------
    @classmethod
    def events_dir(cls) -> Path:
        return cls.root() / "events"

    @classmethod
    def events_file(cls, date: str, fmt: str = "parquet") -> Path:
        return cls.events_dir() / f"{date}.{fmt}"

    @classmethod
    def fact_dir(cls, date: str = '') -> Path:
        if date:
            return cls.root() / "fact" / date
        return cls.root() / "fact"

    @classmethod
    def trades_file(cls, date: str) -> Path:
        return cls.fact_dir(date) / "trades.parquet"

    @classmethod
    def impacts_file(cls, date: str) -> Path:
        return cls.fact_dir(date) / "impacts.parquet"
