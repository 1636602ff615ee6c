# lob_impact/steps/load_events_step.py
from __future__ import annotations

from lob_impact.dataloader.event_loader import EventTableLoader
from lob_impact.pipeline.context import PipelineContext
from lob_impact.pipeline.step import PipelineStep
from lob_impact.utils.logger import logs


class LoadEventsStep(PipelineStep):
    """
    输入：
      events/<date>.parquet|csv（已完成 matching_event 标注）

    输出：
      ctx.events（EVENT_SCHEMA）

    当日文件缺失不是错误：标记 abort，后续 Step 跳过。
    """

    stage = "events"

    def __init__(self, loader: EventTableLoader, inst=None) -> None:
        super().__init__(inst)
        self.loader = loader

    def run(self, ctx: PipelineContext) -> PipelineContext:
        with self.timed():
            if not ctx.events_file.exists():
                ctx.abort_pipeline = True
                ctx.abort_reason = f"events file missing: {ctx.events_file}"
                logs.warning(f"[{self.step_name}] {ctx.abort_reason}")
                return ctx

            with self.inst.timer(f"[{self.stage}] {ctx.date}"):
                ctx.events = self.loader.load(ctx.events_file)

            self.inst.record(f"{ctx.date}.events.rows", ctx.events.num_rows)
        return ctx
