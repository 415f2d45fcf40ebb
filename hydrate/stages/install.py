"""Install stage: populate the function's own dependency directory."""

from __future__ import annotations

from typing import ClassVar

from hydrate.core.errors import InstallError
from hydrate.installers.package_manager import install_dependencies
from hydrate.models.reports import StepOutcome
from hydrate.stages.base import BaseStage, FunctionContext


class InstallStage(BaseStage):
    stage_id: ClassVar[str] = "install"
    display_name: ClassVar[str] = "Dependency Install"
    error_type: ClassVar[type[InstallError]] = InstallError

    def execute(self, ctx: FunctionContext) -> StepOutcome:
        deps = install_dependencies(ctx.fn, ctx.function_dir, ctx.package_manager)
        return self.passed(deps.relative_to(ctx.function_dir).as_posix())

    def rollback(self, ctx: FunctionContext) -> None:
        # Installed packages belong to the package manager and are left in place.
        return None
