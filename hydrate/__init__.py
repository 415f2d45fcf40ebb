"""Hydrate: per-function dependency, shared-code and views hydration.

For every function of a serverless app the engine installs the function's
own dependencies, copies the project's shared code (and, for read-style
HTTP handlers, its views code) into the function's dependency tree, and
emits a static asset manifest beside the shared code.  Runs are idempotent
and a failed function never leaves a partial artifact set.
"""

__version__ = "0.1.0"
__description__ = "Multi-runtime dependency and shared-code hydration engine"

from hydrate.core.errors import (
    DerivationError,
    HydrateError,
    HydrationError,
    InstallError,
    ManifestError,
)
from hydrate.core.orchestrator import Hydrator
from hydrate.models.config import HydrationConfig

__all__ = [
    "Hydrator",
    "HydrationConfig",
    "HydrateError",
    "ManifestError",
    "InstallError",
    "HydrationError",
    "DerivationError",
    "__version__",
]
