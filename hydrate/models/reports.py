"""Hydration run reports, per function and per step."""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from hydrate.models.functions import FunctionId, Runtime


class StepStatus(str, Enum):
    """Outcome of one pipeline step for one function."""

    NOT_STARTED = "not_started"
    PASSED = "passed"
    FAILED = "failed"
    SKIPPED = "skipped"  # intentionally excluded (disable list, ineligible)
    ROLLED_BACK = "rolled_back"  # passed, then undone by a later failure
    CANCELLED = "cancelled"


class StepOutcome(BaseModel):
    model_config = ConfigDict(frozen=True)

    step: str
    status: StepStatus = StepStatus.NOT_STARTED
    error_type: str = ""
    error: str = ""
    detail: str = ""


class FunctionReport(BaseModel):
    """Everything that happened to a single function during a run."""

    model_config = ConfigDict(frozen=True)

    function_id: FunctionId
    runtime: Runtime
    path: str
    steps: dict[str, StepOutcome] = Field(default_factory=dict)

    def status(self, step: str) -> StepStatus:
        outcome = self.steps.get(step)
        return outcome.status if outcome else StepStatus.NOT_STARTED

    @property
    def failed(self) -> bool:
        return any(o.status == StepStatus.FAILED for o in self.steps.values())

    @property
    def cancelled(self) -> bool:
        return any(o.status == StepStatus.CANCELLED for o in self.steps.values())

    @property
    def errors(self) -> list[StepOutcome]:
        return [o for o in self.steps.values() if o.status == StepStatus.FAILED]


class HydrationReport(BaseModel):
    """Aggregate report for one hydration run.

    Per-function failures never abort sibling functions, so a report may
    mix passed and failed entries.
    """

    model_config = ConfigDict(frozen=True)

    app: str
    root: str
    functions: list[FunctionReport] = []
    started_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    finished_at: datetime | None = None

    def for_function(self, function_id: FunctionId) -> FunctionReport:
        for report in self.functions:
            if report.function_id == function_id:
                return report
        raise KeyError(f"No report for function {function_id}")

    @property
    def succeeded(self) -> list[FunctionReport]:
        return [r for r in self.functions if not r.failed and not r.cancelled]

    @property
    def failed(self) -> list[FunctionReport]:
        return [r for r in self.functions if r.failed]

    @property
    def ok(self) -> bool:
        return not self.failed and not any(r.cancelled for r in self.functions)
