# lob_impact/steps/trade_impact_step.py
from __future__ import annotations

from lob_impact.engines.trade_impact_engine import TradeImpactEngine
from lob_impact.pipeline.context import PipelineContext
from lob_impact.pipeline.step import PipelineStep
from lob_impact.utils.logger import logs
from lob_impact.utils.parquet_utils import ParquetAtomicWriter


class TradeImpactStep(PipelineStep):
    """
    输入：
      ctx.trades

    输出：
      ctx.impacts
      fact/<date>/impacts.parquet
    """

    stage = "impacts"

    def __init__(self, engine: TradeImpactEngine, inst=None) -> None:
        super().__init__(inst)
        self.engine = engine

    def run(self, ctx: PipelineContext) -> PipelineContext:
        if ctx.trades is None:
            logs.warning(f"[{self.step_name}] no trades -> skip")
            return ctx

        with self.timed():
            with self.inst.timer(f"[{self.stage}] {ctx.date}"):
                ctx.impacts = self.engine.execute(ctx.trades)

            ParquetAtomicWriter.write_table(ctx.impacts, ctx.impacts_file)
            self.inst.record(f"{ctx.date}.impacts.rows", ctx.impacts.num_rows)

            logs.info(
                f"[{self.step_name}] written {ctx.impacts_file.name} rows={ctx.impacts.num_rows}"
            )
        return ctx
