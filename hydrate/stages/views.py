"""Views stage: copy views code into read-style HTTP handlers.

Scope: only ``get``/``any`` handlers are eligible.  Without a views pragma
every eligible handler is hydrated; with one, only the listed handlers are.
The views-disable list overrides both.
"""

from __future__ import annotations

from typing import ClassVar

from hydrate.core.errors import HydrationError
from hydrate.core.mount import materialize_mount, remove_mount, render_content_marker
from hydrate.models.reports import StepOutcome
from hydrate.stages.base import BaseStage, FunctionContext


class ViewsStage(BaseStage):
    stage_id: ClassVar[str] = "views"
    display_name: ClassVar[str] = "Views Code"

    def _wrap(self, ctx: FunctionContext, exc: Exception) -> HydrationError:
        return HydrationError(ctx.fn.id, self.stage_id, exc)

    @staticmethod
    def _skip_reason(ctx: FunctionContext) -> str | None:
        fn, config = ctx.fn, ctx.config
        if not fn.is_read_handler:
            return "not a get/any handler"
        if fn.id in config.views_disabled:
            return "disabled"
        if not config.views_in_scope(fn):
            return "not listed in views pragma"
        return None

    def execute(self, ctx: FunctionContext) -> StepOutcome:
        spec = ctx.strategy.views_mount
        reason = self._skip_reason(ctx)
        if reason is None and not ctx.config.resolve(ctx.config.views_source).is_dir():
            reason = f"no views source at {ctx.config.views_source}"
        if reason is not None:
            remove_mount(ctx.function_dir, spec)
            return self.skipped(reason)

        source = ctx.config.resolve(ctx.config.views_source)
        content = render_content_marker(
            spec, ctx.fn.name, ctx.config.views_source.as_posix(), source
        )
        dest = materialize_mount(ctx.function_dir, spec, source, content=content)
        return self.passed(dest.relative_to(ctx.function_dir).as_posix())

    def rollback(self, ctx: FunctionContext) -> None:
        remove_mount(ctx.function_dir, ctx.strategy.views_mount)
