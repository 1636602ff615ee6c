#!filepath: lob_impact/pipeline/pipeline.py
from __future__ import annotations

from lob_impact.observability.instrumentation import Instrumentation
from lob_impact.pipeline.context import PipelineContext
from lob_impact.pipeline.step import PipelineStep
from lob_impact.utils.filesystem import FileSystem
from lob_impact.utils.logger import logs
from lob_impact.utils.path import PathManager


class DataPipeline:
    """
    DataPipeline = 调度器（Scheduler）

    - Pipeline 负责 orchestration（顺序 / 上下文）
    - Pipeline 不负责任何 Step 级计时
    - 某个 Step 设置 ctx.abort_pipeline 后，剩余 Step 不再执行
    """

    def __init__(
        self,
        steps: list[PipelineStep],
        pm: type[PathManager] | PathManager,
        inst: Instrumentation,
        events_format: str = "parquet",
    ):
        self.steps = steps
        self.pm = pm
        self.inst = inst
        self.events_format = events_format

    @logs.catch("pipeline run failed")
    def run(self, date: str) -> PipelineContext:
        logs.info(f"[Pipeline] ====== START {date} ======")

        fact_dir = FileSystem.ensure_dir(self.pm.fact_dir(date))

        ctx = PipelineContext(
            date=date,
            events_file=self.pm.events_file(date, self.events_format),
            fact_dir=fact_dir,
        )

        for step in self.steps:
            if ctx.abort_pipeline:
                logs.warning(
                    f"[Pipeline] {date} aborted before {step.step_name}: {ctx.abort_reason}"
                )
                break
            ctx = step.run(ctx)

        self.inst.generate_timeline_report(date)
        logs.info(f"[Pipeline] ====== END {date} ======")
        return ctx
