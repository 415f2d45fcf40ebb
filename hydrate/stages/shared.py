"""Shared stage: copy the project's shared code into every function.

Functions on the shared-disable list get nothing, and any copy left from
an earlier run is removed.
"""

from __future__ import annotations

from typing import ClassVar

from hydrate.core.errors import HydrationError
from hydrate.core.hasher import tree_digest
from hydrate.core.mount import materialize_mount, remove_mount, render_content_marker
from hydrate.models.reports import StepOutcome
from hydrate.stages.base import BaseStage, FunctionContext


class SharedStage(BaseStage):
    stage_id: ClassVar[str] = "shared"
    display_name: ClassVar[str] = "Shared Code"

    def _wrap(self, ctx: FunctionContext, exc: Exception) -> HydrationError:
        return HydrationError(ctx.fn.id, self.stage_id, exc)

    def execute(self, ctx: FunctionContext) -> StepOutcome:
        spec = ctx.strategy.shared_mount
        if not ctx.config.shared_enabled(ctx.fn):
            remove_mount(ctx.function_dir, spec)
            return self.skipped("disabled")

        source = ctx.config.resolve(ctx.config.shared_source)
        if not source.is_dir():
            remove_mount(ctx.function_dir, spec)
            return self.skipped(f"no shared source at {ctx.config.shared_source}")

        source_label = ctx.config.shared_source.as_posix()
        provenance = {
            "app": ctx.app,
            "function": str(ctx.fn.id),
            "kind": spec.kind,
            "runtime": ctx.strategy.runtime.value,
            "source": source_label,
            "digest": tree_digest(source),
        }
        content = render_content_marker(spec, ctx.fn.name, source_label, source)
        dest = materialize_mount(
            ctx.function_dir, spec, source, content=content, provenance=provenance
        )
        return self.passed(dest.relative_to(ctx.function_dir).as_posix())

    def rollback(self, ctx: FunctionContext) -> None:
        remove_mount(ctx.function_dir, ctx.strategy.shared_mount)
