"""Abstract base stage with an enforced per-function lifecycle.

Every concrete stage implements only ``execute()``.  The ``run_stage()``
wrapper is **not overridable**: it logs the outcome and guarantees that
any failure leaves as a ``FunctionError`` subclass carrying the function
identity, so the pipeline can record it and move on to sibling functions.
"""

from __future__ import annotations

import abc
import logging
import threading
from pathlib import Path
from typing import ClassVar, final

from hydrate.core.errors import FunctionError
from hydrate.installers.base import PackageManager, RuntimeStrategy
from hydrate.installers.strategies import get_strategy
from hydrate.models.config import HydrationConfig
from hydrate.models.functions import FunctionDescriptor
from hydrate.models.reports import StepOutcome, StepStatus

logger = logging.getLogger(__name__)


class FunctionContext:
    """Mutable state threaded through one function's stages."""

    def __init__(
        self,
        fn: FunctionDescriptor,
        config: HydrationConfig,
        package_manager: PackageManager,
        *,
        app: str = "app",
        cancel: threading.Event | None = None,
    ) -> None:
        if fn.runtime is None:
            raise ValueError(f"{fn.id} must be classified before hydration")
        self.fn = fn
        self.config = config
        self.package_manager = package_manager
        self.app = app
        self.cancel = cancel or threading.Event()
        self.strategy: RuntimeStrategy = get_strategy(fn.runtime)
        self.outcomes: dict[str, StepOutcome] = {}

    @property
    def function_dir(self) -> Path:
        return self.config.function_dir(self.fn)

    def status(self, step: str) -> StepStatus:
        outcome = self.outcomes.get(step)
        return outcome.status if outcome else StepStatus.NOT_STARTED


class BaseStage(abc.ABC):
    """Abstract base for the per-function hydration stages.

    Subclasses set ``stage_id``, ``display_name`` and ``error_type`` and
    implement ``execute(ctx)``, returning a ``StepOutcome`` (``PASSED`` or
    ``SKIPPED``).  Failures are raised, never returned.
    """

    stage_id: ClassVar[str]
    display_name: ClassVar[str]
    error_type: ClassVar[type[FunctionError]]

    @abc.abstractmethod
    def execute(self, ctx: FunctionContext) -> StepOutcome:
        ...

    @abc.abstractmethod
    def rollback(self, ctx: FunctionContext) -> None:
        """Remove whatever this stage wrote for the function."""
        ...

    @final
    def run_stage(self, ctx: FunctionContext) -> StepOutcome:
        """Execute the stage for one function.  **Do not override.**"""
        try:
            outcome = self.execute(ctx)
        except FunctionError as exc:
            logger.error("%s [%s] %s", self.display_name, ctx.fn.id, exc)
            raise
        except Exception as exc:
            logger.error(
                "%s [%s] execution failed: %s", self.display_name, ctx.fn.id, exc
            )
            raise self._wrap(ctx, exc) from exc

        ctx.outcomes[self.stage_id] = outcome
        logger.info(
            "%s [%s] %s%s",
            self.display_name,
            ctx.fn.id,
            outcome.status.value,
            f" ({outcome.detail})" if outcome.detail else "",
        )
        return outcome

    def _wrap(self, ctx: FunctionContext, exc: Exception) -> FunctionError:
        return self.error_type(ctx.fn.id, exc)

    def passed(self, detail: str = "") -> StepOutcome:
        return StepOutcome(step=self.stage_id, status=StepStatus.PASSED, detail=detail)

    def skipped(self, detail: str) -> StepOutcome:
        return StepOutcome(step=self.stage_id, status=StepStatus.SKIPPED, detail=detail)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} stage_id={self.stage_id!r}>"
