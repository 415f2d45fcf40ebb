"""Default package manager collaborator and the install entry point."""

from __future__ import annotations

import logging
import os
import subprocess
from pathlib import Path

from hydrate.core.errors import InstallError
from hydrate.installers.base import PackageManager
from hydrate.installers.strategies import get_strategy
from hydrate.models.functions import FunctionDescriptor, Runtime

logger = logging.getLogger(__name__)


class SubprocessPackageManager:
    """Runs the runtime's package manager in the function directory.

    Functions without a dependency file get an empty dependency directory
    so later hydration steps always have somewhere to mount into.
    """

    def install(self, function_dir: Path, runtime: Runtime) -> None:
        strategy = get_strategy(runtime)
        if strategy.has_manifest(function_dir):
            cmd = strategy.install_command(function_dir)
            logger.info(
                "Installing %s dependencies in %s: %s",
                runtime.value,
                function_dir,
                " ".join(cmd),
            )
            extra_env = strategy.install_env(function_dir)
            proc = subprocess.run(
                cmd,
                cwd=function_dir,
                env={**os.environ, **extra_env} if extra_env else None,
                capture_output=True,
                text=True,
                check=False,
            )
            if proc.returncode != 0:
                raise RuntimeError(
                    f"{cmd[0]} exited with {proc.returncode}: "
                    f"{(proc.stderr or proc.stdout).strip()}"
                )
        else:
            logger.debug(
                "No %s in %s; nothing to install", strategy.dependency_file, function_dir
            )
        strategy.deps_path(function_dir).mkdir(parents=True, exist_ok=True)


def install_dependencies(
    fn: FunctionDescriptor, function_dir: Path, package_manager: PackageManager
) -> Path:
    """Install *fn*'s dependencies and return its dependency directory.

    Raises
    ------
    InstallError
        Wrapping whatever the collaborator raised, tagged with the function.
    """
    if fn.runtime is None:
        raise InstallError(fn.id, "function has no runtime assigned")
    if not function_dir.is_dir():
        raise InstallError(fn.id, f"function directory not found: {function_dir}")

    strategy = get_strategy(fn.runtime)
    try:
        package_manager.install(function_dir, fn.runtime)
    except Exception as exc:
        raise InstallError(fn.id, exc) from exc

    deps = strategy.deps_path(function_dir)
    deps.mkdir(parents=True, exist_ok=True)
    return deps
