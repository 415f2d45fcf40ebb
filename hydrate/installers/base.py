"""Runtime strategy and package-manager protocols.

Each runtime is a ``RuntimeStrategy`` subclass describing where its
dependencies live, where shared and views code are mounted, and how its
package manager is invoked.  The set is closed and registered in
``hydrate.installers.strategies.STRATEGIES``; adding a runtime means adding
one subclass and one registry entry.

The actual install is delegated to a ``PackageManager``, any object with
``install(function_dir, runtime)``.  Tests and host tools substitute their
own implementation.
"""

from __future__ import annotations

import abc
from pathlib import Path, PurePosixPath
from typing import ClassVar, Protocol, runtime_checkable

from hydrate.core.mount import MountSpec
from hydrate.models.functions import Runtime

SHARED_KIND = "shared"
VIEWS_KIND = "views"
SHARED_CONTENT_MARKER = "shared.md"
SHARED_PROVENANCE_MARKER = ".arc"
VIEWS_CONTENT_MARKER = "views.md"


@runtime_checkable
class PackageManager(Protocol):
    """Populate a function's dependency directory for a runtime.

    Must be idempotent: calling it repeatedly on the same function leaves
    the same dependency tree.  Raises on failure.
    """

    def install(self, function_dir: Path, runtime: Runtime) -> None:
        ...


class RuntimeStrategy(abc.ABC):
    """Layout and install command for one runtime."""

    runtime: ClassVar[Runtime]
    deps_dir: ClassVar[str]
    dependency_file: ClassVar[str]
    # Directory (relative to the function) holding the shared/views mounts.
    mount_root: ClassVar[str]

    @property
    def shared_mount(self) -> MountSpec:
        return MountSpec(
            kind=SHARED_KIND,
            mount_point=PurePosixPath(self.mount_root) / SHARED_KIND,
            content_marker=SHARED_CONTENT_MARKER,
            provenance_marker=SHARED_PROVENANCE_MARKER,
        )

    @property
    def views_mount(self) -> MountSpec:
        return MountSpec(
            kind=VIEWS_KIND,
            mount_point=PurePosixPath(self.mount_root) / VIEWS_KIND,
            content_marker=VIEWS_CONTENT_MARKER,
        )

    def deps_path(self, function_dir: Path) -> Path:
        return function_dir / self.deps_dir

    def has_manifest(self, function_dir: Path) -> bool:
        """Whether the function declares any dependencies of its own."""
        return (function_dir / self.dependency_file).is_file()

    def install_env(self, function_dir: Path) -> dict[str, str]:
        """Extra environment variables for the install command."""
        return {}

    @abc.abstractmethod
    def install_command(self, function_dir: Path) -> list[str]:
        """Argv for the runtime's package manager, run inside *function_dir*."""
        ...

    def __repr__(self) -> str:
        return f"<{type(self).__name__} runtime={self.runtime.value!r}>"
