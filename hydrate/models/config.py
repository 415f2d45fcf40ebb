"""Per-run hydration configuration, passed explicitly into every hydrator."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict

from hydrate.models.functions import FunctionDescriptor, FunctionId, Runtime

if TYPE_CHECKING:
    from hydrate.config import HydrateSettings


class HydrationConfig(BaseModel):
    """Inputs that decide which artifacts each function receives.

    ``views_pragma`` of ``None`` means no pragma was declared: every
    read-style handler gets views code.  Any set (even an empty one)
    switches to explicit opt-in.
    """

    model_config = ConfigDict(frozen=True)

    root: Path
    shared_source: Path = Path("src/shared")
    views_source: Path = Path("src/views")
    static_source: Path | None = Path("public")
    shared_disabled: frozenset[FunctionId] = frozenset()
    views_disabled: frozenset[FunctionId] = frozenset()
    views_pragma: frozenset[FunctionId] | None = None
    default_runtime: Runtime = Runtime.NODEJS
    fingerprint_static: bool = False

    @classmethod
    def from_settings(
        cls, root: Path, settings: HydrateSettings, **overrides: object
    ) -> HydrationConfig:
        """Build a config from environment-driven settings plus overrides."""
        values: dict[str, object] = {
            "root": Path(root),
            "shared_source": settings.shared_dir,
            "views_source": settings.views_dir,
            "static_source": settings.static_dir,
            "default_runtime": settings.default_runtime,
            "fingerprint_static": settings.fingerprint_static,
        }
        values.update(overrides)
        return cls(**values)

    # ------------------------------------------------------------------
    # Resolved paths
    # ------------------------------------------------------------------

    def resolve(self, path: Path) -> Path:
        return path if path.is_absolute() else self.root / path

    def function_dir(self, fn: FunctionDescriptor) -> Path:
        return self.root / fn.relative_path()

    # ------------------------------------------------------------------
    # Membership predicates
    # ------------------------------------------------------------------

    def shared_enabled(self, fn: FunctionDescriptor) -> bool:
        return fn.id not in self.shared_disabled

    def views_in_scope(self, fn: FunctionDescriptor) -> bool:
        """Eligibility, then pragma scope, then the disable list (which wins)."""
        if not fn.is_read_handler:
            return False
        if fn.id in self.views_disabled:
            return False
        if self.views_pragma is None:
            return True
        return fn.id in self.views_pragma
