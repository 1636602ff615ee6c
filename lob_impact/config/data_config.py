#!filepath: lob_impact/config/data_config.py
from typing import Literal, Optional

from pydantic import BaseModel


class DataConfig(BaseModel):
    # None → PathManager.detect_root()
    root: Optional[str] = None
    events_format: Literal["parquet", "csv"] = "parquet"
