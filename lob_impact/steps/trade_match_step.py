# lob_impact/steps/trade_match_step.py
from __future__ import annotations

from lob_impact.engines.trade_match_engine import TradeMatchEngine
from lob_impact.pipeline.context import PipelineContext
from lob_impact.pipeline.step import PipelineStep
from lob_impact.utils.logger import logs
from lob_impact.utils.parquet_utils import ParquetAtomicWriter


class TradeMatchStep(PipelineStep):
    """
    输入：
      ctx.events

    输出：
      ctx.trades / ctx.diagnostics
      fact/<date>/trades.parquet

    MatchingError 不在这里捕获：配对不成立说明上游数据坏了，整个 run 应该失败。
    """

    stage = "trades"

    def __init__(self, engine: TradeMatchEngine, inst=None) -> None:
        super().__init__(inst)
        self.engine = engine

    def run(self, ctx: PipelineContext) -> PipelineContext:
        if ctx.events is None:
            logs.warning(f"[{self.step_name}] no events -> skip")
            return ctx

        with self.timed():
            with self.inst.timer(f"[{self.stage}] {ctx.date}"):
                result = self.engine.execute(ctx.events)

            ctx.trades = result.trades
            ctx.diagnostics = result.diagnostics

            ParquetAtomicWriter.write_table(ctx.trades, ctx.trades_file)

            self.inst.record(f"{ctx.date}.trades.rows", ctx.trades.num_rows)
            self.inst.record(f"{ctx.date}.trades.jumps_flagged", len(result.diagnostics.flagged))
            self.inst.record(f"{ctx.date}.trades.jumps_corrected", result.diagnostics.corrected)

            logs.info(
                f"[{self.step_name}] written {ctx.trades_file.name} rows={ctx.trades.num_rows}"
            )
        return ctx
