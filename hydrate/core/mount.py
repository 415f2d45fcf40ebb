"""Copy-then-mark primitive shared by the shared and views hydrators.

A mount is a directory inside a function's dependency tree that receives a
full copy of a source tree plus marker files.  Writes go to a sibling
staging directory which is swapped into place with ``os.replace``, so a
reader either sees the previous mount, the new one, or nothing.

Staging layout (sibling of the mount)::

    <parent>/.<name>.staging-XXXX   new copy being assembled
    <parent>/.<name>.old-XXXX       previous copy during the swap

Either left behind means an interrupted run; both are swept on the next
call for that mount.
"""

from __future__ import annotations

import logging
import os
import shutil
import tempfile
from pathlib import Path, PurePosixPath
from typing import Any

from pydantic import BaseModel, ConfigDict

from hydrate.core.hasher import canonical_json_bytes, list_tree, tree_digest

logger = logging.getLogger(__name__)


class MountSpec(BaseModel):
    """Where a hydration kind lands and which markers it writes.

    ``mount_point`` is relative to the function directory.
    """

    model_config = ConfigDict(frozen=True)

    kind: str
    mount_point: PurePosixPath
    content_marker: str
    provenance_marker: str | None = None

    def target(self, function_dir: Path) -> Path:
        return function_dir / self.mount_point

    @property
    def marker_names(self) -> tuple[str, ...]:
        names = [self.content_marker]
        if self.provenance_marker:
            names.append(self.provenance_marker)
        return tuple(names)


def _staging_prefixes(dest: Path) -> tuple[str, str]:
    return f".{dest.name}.staging-", f".{dest.name}.old-"


def _rm_rf(path: Path) -> None:
    if path.is_symlink() or path.is_file():
        path.unlink()
    elif path.exists():
        shutil.rmtree(path)


def sweep_stale(dest: Path) -> int:
    """Remove staging/old leftovers of an interrupted run.  Returns count."""
    parent = dest.parent
    if not parent.is_dir():
        return 0
    removed = 0
    for prefix in _staging_prefixes(dest):
        for leftover in parent.glob(f"{prefix}*"):
            logger.warning("Removing incomplete hydration leftover %s", leftover)
            _rm_rf(leftover)
            removed += 1
    return removed


def render_content_marker(
    spec: MountSpec, function_label: str, source_label: str, source: Path
) -> str:
    """Markdown documenting what was copied; no timestamps, so it is stable."""
    files = list_tree(source)
    lines = [
        f"# {spec.kind}",
        "",
        f"Hydrated into `{function_label}` from `{source_label}`.",
        "",
        f"Tree digest: `{tree_digest(source)}`",
        "",
        f"## Files ({len(files)})",
        "",
    ]
    lines.extend(f"- `{rel.as_posix()}`" for rel in files)
    return "\n".join(lines) + "\n"


def materialize_mount(
    function_dir: Path,
    spec: MountSpec,
    source: Path,
    *,
    content: str,
    provenance: dict[str, Any] | None = None,
) -> Path:
    """Replace the mount for *spec* with a fresh copy of *source* plus markers.

    Returns the mount directory.  On any failure the staging copy is
    removed and the previous mount (if any) is left untouched.
    """
    dest = spec.target(function_dir)
    dest.parent.mkdir(parents=True, exist_ok=True)
    sweep_stale(dest)

    staging_prefix, old_prefix = _staging_prefixes(dest)
    staging = Path(tempfile.mkdtemp(prefix=staging_prefix, dir=dest.parent))
    try:
        shutil.copytree(source, staging, dirs_exist_ok=True)
        (staging / spec.content_marker).write_text(content, encoding="utf-8")
        if spec.provenance_marker:
            (staging / spec.provenance_marker).write_bytes(
                canonical_json_bytes(provenance or {}) + b"\n"
            )

        if dest.exists():
            old = Path(tempfile.mkdtemp(prefix=old_prefix, dir=dest.parent))
            # mkdtemp created the directory; os.replace needs the name free
            old.rmdir()
            os.replace(dest, old)
            os.replace(staging, dest)
            _rm_rf(old)
        else:
            os.replace(staging, dest)
    except BaseException:
        _rm_rf(staging)
        raise

    logger.debug("Mounted %s at %s", spec.kind, dest)
    return dest


def remove_mount(function_dir: Path, spec: MountSpec) -> bool:
    """Delete a mount and any leftovers.  Returns True if a mount existed."""
    dest = spec.target(function_dir)
    sweep_stale(dest)
    if not dest.exists():
        return False
    _rm_rf(dest)
    logger.debug("Removed %s mount at %s", spec.kind, dest)
    return True


def has_mount(function_dir: Path, spec: MountSpec) -> bool:
    """A mount counts as present only when all its markers exist."""
    dest = spec.target(function_dir)
    return all((dest / name).is_file() for name in spec.marker_names)
