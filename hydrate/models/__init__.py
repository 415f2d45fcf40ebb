"""Hydrate data models.  All are frozen Pydantic v2 models."""

from hydrate.models.config import HydrationConfig
from hydrate.models.functions import (
    FunctionDescriptor,
    FunctionId,
    HttpMethod,
    Runtime,
    RuntimeGroup,
    TriggerType,
)
from hydrate.models.manifest import (
    AppManifest,
    CustomPathHandler,
    HttpRoute,
    NamedHandler,
)
from hydrate.models.reports import (
    FunctionReport,
    HydrationReport,
    StepOutcome,
    StepStatus,
)

__all__ = [
    # functions
    "TriggerType",
    "Runtime",
    "HttpMethod",
    "FunctionId",
    "FunctionDescriptor",
    "RuntimeGroup",
    # manifest
    "AppManifest",
    "HttpRoute",
    "NamedHandler",
    "CustomPathHandler",
    # config
    "HydrationConfig",
    # reports
    "StepStatus",
    "StepOutcome",
    "FunctionReport",
    "HydrationReport",
]
