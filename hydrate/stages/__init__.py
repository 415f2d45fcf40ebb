"""Per-function hydration stages, registered by stage_id.

Usage::

    from hydrate.stages import STAGE_ORDER, get_stage

    for stage_id in STAGE_ORDER:
        get_stage(stage_id).run_stage(ctx)
"""

from __future__ import annotations

from hydrate.stages.base import BaseStage, FunctionContext
from hydrate.stages.install import InstallStage
from hydrate.stages.shared import SharedStage
from hydrate.stages.static import STATIC_MANIFEST, StaticStage
from hydrate.stages.views import ViewsStage

STAGE_REGISTRY: dict[str, type[BaseStage]] = {
    "install": InstallStage,
    "shared": SharedStage,
    "static": StaticStage,
    "views": ViewsStage,
}

# Execution order within one function.  Static must follow shared.
STAGE_ORDER: list[str] = ["install", "shared", "static", "views"]


def get_stage(stage_id: str) -> BaseStage:
    """Instantiate and return a stage by its ``stage_id``.

    Raises ``KeyError`` if the stage_id is not registered.
    """
    try:
        cls = STAGE_REGISTRY[stage_id]
    except KeyError:
        raise KeyError(
            f"Unknown stage_id {stage_id!r}. "
            f"Registered stages: {sorted(STAGE_REGISTRY.keys())}"
        ) from None
    return cls()


__all__ = [
    "BaseStage",
    "FunctionContext",
    "InstallStage",
    "SharedStage",
    "StaticStage",
    "ViewsStage",
    "STATIC_MANIFEST",
    "STAGE_REGISTRY",
    "STAGE_ORDER",
    "get_stage",
]
