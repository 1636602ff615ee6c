# lob_impact/steps/impact_report_step.py
from __future__ import annotations

from lob_impact.pipeline.context import PipelineContext
from lob_impact.pipeline.step import PipelineStep
from lob_impact.report.impact_report import summarize_impacts
from lob_impact.utils.logger import logs


class ImpactReportStep(PipelineStep):
    """impacts → ImpactSummary（只记日志 / metrics，不落盘）"""

    stage = "report"

    def run(self, ctx: PipelineContext) -> PipelineContext:
        if ctx.impacts is None:
            return ctx

        with self.timed():
            ctx.summary = summarize_impacts(ctx.impacts)

        s = ctx.summary
        self.inst.record(f"{ctx.date}.impacts.moving", s.moving)
        logs.info(
            f"[{self.step_name}] {ctx.date} impacts={s.impacts} volume={s.volume} "
            f"mean_hits={s.mean_hits} median_bps={s.bps_median}"
        )
        return ctx
