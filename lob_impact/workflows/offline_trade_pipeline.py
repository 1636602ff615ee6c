#!filepath: lob_impact/workflows/offline_trade_pipeline.py
from __future__ import annotations

from typing import Optional

from lob_impact.config.app_config import AppConfig
from lob_impact.dataloader.event_loader import EventTableLoader
from lob_impact.engines.trade_impact_engine import TradeImpactEngine
from lob_impact.engines.trade_match_engine import TradeMatchEngine
from lob_impact.observability.instrumentation import Instrumentation
from lob_impact.pipeline.pipeline import DataPipeline
from lob_impact.steps.impact_report_step import ImpactReportStep
from lob_impact.steps.load_events_step import LoadEventsStep
from lob_impact.steps.trade_impact_step import TradeImpactStep
from lob_impact.steps.trade_match_step import TradeMatchStep
from lob_impact.utils.path import PathManager


def build_offline_trade_pipeline(cfg: Optional[AppConfig] = None) -> DataPipeline:
    """
    Offline trade pipeline

    Semantic Order:
        LoadEvents     (matched events file → EVENT_SCHEMA)
        → TradeMatch   (maker/taker pairing + jump correction → trades.parquet)
        → TradeImpact  (group by taker order → impacts.parquet)
        → ImpactReport (bps summary → logs / metrics)
    """
    cfg = cfg or AppConfig.load()

    if cfg.data.root:
        PathManager.set_root(cfg.data.root)

    inst = Instrumentation()

    steps = [
        LoadEventsStep(loader=EventTableLoader(), inst=inst),
        TradeMatchStep(
            engine=TradeMatchEngine(
                jump_threshold=cfg.trade.jump_threshold,
                correct_jumps=cfg.trade.correct_jumps,
            ),
            inst=inst,
        ),
        TradeImpactStep(
            engine=TradeImpactEngine(vwap_decimals=cfg.trade.vwap_decimals),
            inst=inst,
        ),
        ImpactReportStep(inst=inst),
    ]

    return DataPipeline(
        steps=steps,
        pm=PathManager,
        inst=inst,
        events_format=cfg.data.events_format,
    )
