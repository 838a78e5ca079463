"""Work distribution across worker threads."""

from prime_sum.pipeline.scheduler import (
    DEFAULT_START,
    Outcome,
    RunReport,
    SchedulerConfig,
    TaskResult,
    WorkScheduler,
    run_range,
)

__all__ = [
    "DEFAULT_START",
    "Outcome",
    "RunReport",
    "SchedulerConfig",
    "TaskResult",
    "WorkScheduler",
    "run_range",
]
