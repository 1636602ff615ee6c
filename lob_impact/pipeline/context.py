#!filepath: lob_impact/pipeline/context.py
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import pyarrow as pa

from lob_impact.engines.trade_match_engine import MatchDiagnostics
from lob_impact.report.impact_report import ImpactSummary


@dataclass
class PipelineContext:
    """
    PipelineContext = Pipeline 运行期唯一上下文

    - Pipeline 负责构造
    - Step 读取上游产物、写入自己的产物
    - 不放业务逻辑
    """

    # -------------------------
    # identity / dirs
    # -------------------------
    date: str
    events_file: Path
    fact_dir: Path

    # -------------------------
    # data layer（由 Step 依次填充）
    # -------------------------
    events: Optional[pa.Table] = None
    trades: Optional[pa.Table] = None
    diagnostics: Optional[MatchDiagnostics] = None
    impacts: Optional[pa.Table] = None
    summary: Optional[ImpactSummary] = None

    # -------- PipelineRuntime flags --------
    abort_pipeline: bool = False
    abort_reason: Optional[str] = None

    @property
    def trades_file(self) -> Path:
        return self.fact_dir / "trades.parquet"

    @property
    def impacts_file(self) -> Path:
        return self.fact_dir / "impacts.parquet"
