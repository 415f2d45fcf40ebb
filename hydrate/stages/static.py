"""Static stage: emit ``static.json`` beside the shared provenance marker.

The manifest maps every file under the project's static folder to the name
it is published under (fingerprinted when enabled).  It only ever exists
inside a shared mount, so removing or replacing the mount removes it too.
"""

from __future__ import annotations

import json
from pathlib import Path, PurePosixPath
from typing import ClassVar

from hydrate.core.errors import DerivationError
from hydrate.core.hasher import file_digest, list_tree
from hydrate.models.reports import StepOutcome, StepStatus
from hydrate.stages.base import BaseStage, FunctionContext

STATIC_MANIFEST = "static.json"


def fingerprinted_name(rel: PurePosixPath, digest: str) -> str:
    """``css/app.css`` -> ``css/app-<digest[:10]>.css``."""
    return rel.with_name(f"{rel.stem}-{digest[:10]}{rel.suffix}").as_posix()


def build_static_manifest(static_root: Path | None, fingerprint: bool) -> dict[str, str]:
    if static_root is None or not static_root.is_dir():
        return {}
    manifest: dict[str, str] = {}
    for rel in list_tree(static_root):
        key = PurePosixPath(rel.as_posix())
        if fingerprint:
            digest = file_digest(static_root / rel)
            manifest[key.as_posix()] = fingerprinted_name(key, digest)
        else:
            manifest[key.as_posix()] = key.as_posix()
    return manifest


class StaticStage(BaseStage):
    stage_id: ClassVar[str] = "static"
    display_name: ClassVar[str] = "Static Manifest"
    error_type: ClassVar[type[DerivationError]] = DerivationError

    def execute(self, ctx: FunctionContext) -> StepOutcome:
        if ctx.status("shared") is not StepStatus.PASSED:
            return self.skipped("no shared artifact")

        mount = ctx.strategy.shared_mount
        marker = mount.target(ctx.function_dir) / mount.provenance_marker
        if not marker.is_file():
            raise DerivationError(ctx.fn.id, f"provenance marker missing: {marker}")

        config = ctx.config
        static_root = (
            config.resolve(config.static_source) if config.static_source else None
        )
        manifest = build_static_manifest(static_root, config.fingerprint_static)
        target = marker.parent / STATIC_MANIFEST
        target.write_text(
            json.dumps(manifest, indent=2, sort_keys=True) + "\n", encoding="utf-8"
        )
        return self.passed(f"{len(manifest)} assets")

    def rollback(self, ctx: FunctionContext) -> None:
        mount = ctx.strategy.shared_mount
        target = mount.target(ctx.function_dir) / STATIC_MANIFEST
        if target.is_file():
            target.unlink()
