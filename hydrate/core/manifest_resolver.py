"""Manifest resolver: flattens an app definition into function descriptors.

Descriptors come out in a fixed trigger order (http, events, queues,
scheduled, tables, streams, custom paths) and keep declaration order within
each trigger.  Nothing here touches the filesystem.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Mapping
from typing import Any

from pydantic import ValidationError

from hydrate.core.errors import ManifestError
from hydrate.models.functions import (
    FunctionDescriptor,
    HttpMethod,
    Runtime,
    TriggerType,
)
from hydrate.models.manifest import AppManifest, HttpRoute

logger = logging.getLogger(__name__)

_VALID_NAME = re.compile(r"^[A-Za-z0-9_.\-]+$")
_PARAM = re.compile(r":([A-Za-z0-9_]+)")

# Source directory per manifest section.  Tables and (legacy) streams share
# a trigger type but live in separate trees.
_SECTION_DIRS: dict[str, tuple[TriggerType, str]] = {
    "events": (TriggerType.EVENT, "src/events"),
    "queues": (TriggerType.QUEUE, "src/queues"),
    "scheduled": (TriggerType.SCHEDULED, "src/scheduled"),
    "tables": (TriggerType.TABLE_STREAM, "src/tables"),
    "streams": (TriggerType.TABLE_STREAM, "src/streams"),
}
_HTTP_DIR = "src/http"
_CUSTOM_PATH_DIR = "src/head"


def http_function_name(method: str, path: str) -> str:
    """Derive a function directory name from an HTTP route.

    ``get /`` -> ``get-index``; ``get /notes/:id`` -> ``get-notes-000id``;
    ``any /time/*`` -> ``any-time-catchall``.
    """
    if not path.startswith("/"):
        raise ManifestError(f"HTTP path must start with '/': {method} {path!r}")
    trimmed = path.strip("/")
    if not trimmed:
        return f"{method}-index"
    slug = _PARAM.sub(r"000\1", trimmed)
    slug = slug.replace("*", "catchall").replace("/", "-")
    return f"{method}-{slug}"


def _parse_method(raw: str, where: str) -> HttpMethod:
    try:
        return HttpMethod(raw.lower())
    except ValueError:
        raise ManifestError(f"Unknown HTTP method {raw!r} in {where}") from None


def _check_name(name: str, where: str) -> None:
    # "." and ".." would resolve outside the trigger directory.
    if not name or not _VALID_NAME.match(name) or not name.strip("."):
        raise ManifestError(f"Malformed function name {name!r} in {where}")


def _http_descriptor(route: HttpRoute) -> FunctionDescriptor:
    method = _parse_method(route.method, f"@http {route.method} {route.path}")
    name = http_function_name(method.value, route.path)
    _check_name(name, f"@http {route.method} {route.path}")
    return FunctionDescriptor(
        trigger_type=TriggerType.HTTP,
        name=name,
        runtime=route.runtime,
        http_method=method,
        path=f"{_HTTP_DIR}/{name}",
    )


def _iter_descriptors(manifest: AppManifest) -> Iterable[FunctionDescriptor]:
    for route in manifest.http:
        yield _http_descriptor(route)

    for section, (trigger, base_dir) in _SECTION_DIRS.items():
        for handler in getattr(manifest, section):
            _check_name(handler.name, f"@{section}")
            yield FunctionDescriptor(
                trigger_type=trigger,
                name=handler.name,
                runtime=handler.runtime,
                path=f"{base_dir}/{handler.name}",
            )

    for handler in manifest.custom_paths:
        _check_name(handler.name, "custom path")
        yield FunctionDescriptor(
            trigger_type=TriggerType.CUSTOM_PATH,
            name=handler.name,
            runtime=handler.runtime,
            http_method=(
                _parse_method(handler.method, f"custom path {handler.name}")
                if handler.method is not None
                else None
            ),
            path=f"{_CUSTOM_PATH_DIR}/{handler.name}",
        )


def load_manifest(data: AppManifest | Mapping[str, Any]) -> AppManifest:
    """Validate a parsed app definition, mapping errors to ``ManifestError``."""
    if isinstance(data, AppManifest):
        return data
    try:
        return AppManifest.model_validate(data)
    except ValidationError as exc:
        raise ManifestError(f"Invalid app manifest: {exc}") from exc


def resolve_manifest(
    data: AppManifest | Mapping[str, Any],
) -> tuple[FunctionDescriptor, ...]:
    """Turn an app definition into an ordered tuple of descriptors.

    Raises
    ------
    ManifestError
        On malformed names, unknown methods, or duplicate
        ``(trigger_type, name)`` pairs.
    """
    manifest = load_manifest(data)
    seen: set[tuple[TriggerType, str]] = set()
    descriptors: list[FunctionDescriptor] = []
    for fn in _iter_descriptors(manifest):
        if fn.id in seen:
            raise ManifestError(f"Duplicate function declaration: {fn.id}")
        seen.add(fn.id)
        descriptors.append(fn)

    logger.debug("Resolved %d functions from app %r", len(descriptors), manifest.app)
    return tuple(descriptors)


def project_default_runtime(
    data: AppManifest | Mapping[str, Any], fallback: Runtime
) -> Runtime:
    """The manifest's declared default runtime, else *fallback*."""
    return load_manifest(data).runtime or fallback
