"""Per-function pipeline: install -> shared -> static -> views.

A function either ends with its full artifact set or with none of it.  When
a stage fails (or the run is cancelled mid-function) every hydration
artifact already written for that function is removed and the stages that
had passed are reported as rolled back.
"""

from __future__ import annotations

import logging

from hydrate.core.errors import FunctionError
from hydrate.models.reports import FunctionReport, StepOutcome, StepStatus
from hydrate.stages import STAGE_ORDER, BaseStage, FunctionContext, get_stage

logger = logging.getLogger(__name__)


def _abort(
    ctx: FunctionContext,
    stages: list[BaseStage],
    next_index: int,
    remaining: StepStatus,
    detail: str,
) -> None:
    for stage in reversed(stages):
        stage.rollback(ctx)
        outcome = ctx.outcomes.get(stage.stage_id)
        # Installed dependencies are kept; everything hydrated is undone.
        if (
            outcome
            and outcome.status is StepStatus.PASSED
            and stage.stage_id != "install"
        ):
            ctx.outcomes[stage.stage_id] = outcome.model_copy(
                update={"status": StepStatus.ROLLED_BACK, "detail": detail}
            )
    for stage in stages[next_index:]:
        ctx.outcomes.setdefault(
            stage.stage_id,
            StepOutcome(step=stage.stage_id, status=remaining, detail=detail),
        )


def run_function(ctx: FunctionContext) -> FunctionReport:
    """Run every stage for one function and report what happened.

    Per-function errors are recorded, not raised.
    """
    stages = [get_stage(stage_id) for stage_id in STAGE_ORDER]
    for index, stage in enumerate(stages):
        if ctx.cancel.is_set():
            if index == 0:
                # Never started: leave whatever an earlier run produced.
                for pending in stages:
                    ctx.outcomes[pending.stage_id] = StepOutcome(
                        step=pending.stage_id,
                        status=StepStatus.CANCELLED,
                        detail="run cancelled",
                    )
            else:
                logger.warning("Cancelling %s mid-hydration; rolling back", ctx.fn.id)
                _abort(ctx, stages, index, StepStatus.CANCELLED, "run cancelled")
            break

        try:
            stage.run_stage(ctx)
        except FunctionError as exc:
            ctx.outcomes[stage.stage_id] = StepOutcome(
                step=stage.stage_id,
                status=StepStatus.FAILED,
                error_type=type(exc).__name__,
                error=str(exc.cause),
            )
            _abort(
                ctx, stages, index + 1, StepStatus.NOT_STARTED, f"{stage.stage_id} failed"
            )
            break

    return FunctionReport(
        function_id=ctx.fn.id,
        runtime=ctx.strategy.runtime,
        path=ctx.fn.path,
        steps={sid: ctx.outcomes[sid] for sid in STAGE_ORDER if sid in ctx.outcomes},
    )
