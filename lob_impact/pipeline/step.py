from __future__ import annotations

from lob_impact.observability.instrumentation import (
    Instrumentation,
    NoOpInstrumentation,
)
from lob_impact.pipeline.context import PipelineContext


class PipelineStep:
    """
    Pipeline Step 基类

    职责：
      1. orchestration（读 ctx → 调 engine → 写 ctx / 文件）
      2. 提供 Step 级时间语义边界（parent scope）

    约定：
      - Step 本身不进入 timeline，叶子计时发生在 Step 内部
      - Instrumentation 可选，Step 行为不依赖 inst 是否存在
      - ctx.abort_pipeline 为 True 时，后续 Step 直接跳过
    """

    stage: str = ''  # e.g. "trades"

    def __init__(self, inst: Instrumentation | None = None):
        self.inst: Instrumentation | NoOpInstrumentation = (
            inst if inst is not None else NoOpInstrumentation()
        )

    @property
    def step_name(self) -> str:
        return self.__class__.__name__

    def timed(self):
        """Step 级 wall-time（record=False，不进入 timeline）"""
        return self.inst.timer(self.step_name, record=False)

    def run(self, ctx: PipelineContext) -> PipelineContext:
        raise NotImplementedError
