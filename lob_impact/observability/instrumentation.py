from __future__ import annotations

import time
from collections import OrderedDict
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Dict

from lob_impact.utils.logger import logs


@dataclass
class Instrumentation:
    """
    Instrumentation（Leaf-only accounting + Parent scope）。

    - timeline 只记录叶子节点（record=True），按 run 累积，报告后清空
    - Step 级 timer 只作为时间语义边界（record=False）
    - metrics 每次 record 记一条 info 日志，报告时与 timeline 一起输出
    """

    enabled: bool = True
    timeline: Dict[str, float] = field(default_factory=OrderedDict)
    metrics: Dict[str, Any] = field(default_factory=OrderedDict)

    def timer(self, name: str, *, record: bool = True):
        inst = self

        @contextmanager
        def _ctx():
            if not inst.enabled:
                yield
                return

            start = time.perf_counter()
            try:
                yield
            finally:
                if record:
                    elapsed = time.perf_counter() - start
                    inst.timeline[name] = inst.timeline.get(name, 0.0) + elapsed

        return _ctx()

    def record(self, name: str, value: Any) -> None:
        if not self.enabled:
            return
        self.metrics[name] = value
        logs.info(f"[Metric] {name} = {value}")

    def generate_timeline_report(self, date: str) -> float:
        """输出本次 run 的 timeline + metrics，返回总耗时并清空。"""
        if not self.enabled:
            return 0.0

        total = sum(self.timeline.values())
        logs.info(f"[Timeline] ===== Pipeline timeline for {date} =====")
        for name, sec in self.timeline.items():
            share = sec / total * 100 if total > 0 else 0.0
            logs.info(f"[Timeline] {name:<30} {sec:>8.3f}s {share:>5.1f}%")
        logs.info(f"[Timeline] {'Total':<30} {total:>8.3f}s")

        for name, value in self.metrics.items():
            logs.info(f"[Timeline] {name:<30} {value}")
        logs.info("[Timeline] ===========================================")

        self.timeline.clear()
        self.metrics.clear()
        return total


class NoOpInstrumentation:
    """Step 未注入 Instrumentation 时使用。"""

    def timer(self, name: str, *, record: bool = True):
        return _NoOpTimer()

    def record(self, name: str, value: Any) -> None:
        pass

    def generate_timeline_report(self, date: str) -> float:
        return 0.0


class _NoOpTimer:
    def __enter__(self):
        pass

    def __exit__(self, exc_type, exc, tb):
        pass
