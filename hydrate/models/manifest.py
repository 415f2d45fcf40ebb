"""Parsed declarative app definition.

The engine does not read any manifest file format itself; callers hand it
an already-parsed mapping (for instance the result of loading a JSON or
``.arc`` document), validated through :class:`AppManifest`.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from hydrate.models.functions import Runtime


class HttpRoute(BaseModel):
    """``get /memories`` style HTTP route declaration."""

    model_config = ConfigDict(frozen=True)

    method: str
    path: str
    runtime: Runtime | None = None


class NamedHandler(BaseModel):
    """Events, queues, scheduled jobs and table streams are declared by name."""

    model_config = ConfigDict(frozen=True)

    name: str
    runtime: Runtime | None = None


class CustomPathHandler(BaseModel):
    """A handler living in a custom source path that still answers HTTP."""

    model_config = ConfigDict(frozen=True)

    name: str
    method: str | None = None
    runtime: Runtime | None = None


class AppManifest(BaseModel):
    """Project-level app definition.

    ``runtime`` is the project-wide default runtime; functions that do not
    declare one fall back to it.
    """

    model_config = ConfigDict(frozen=True)

    app: str = "app"
    runtime: Runtime | None = None
    http: list[HttpRoute] = []
    events: list[NamedHandler] = []
    queues: list[NamedHandler] = []
    scheduled: list[NamedHandler] = []
    tables: list[NamedHandler] = []
    streams: list[NamedHandler] = []
    custom_paths: list[CustomPathHandler] = []
