"""Per-runtime dependency installers.

Usage::

    from hydrate.installers import get_strategy, install_dependencies

    strategy = get_strategy(Runtime.PYTHON)
    deps_dir = install_dependencies(fn, function_dir, SubprocessPackageManager())
"""

from __future__ import annotations

from hydrate.installers.base import PackageManager, RuntimeStrategy
from hydrate.installers.package_manager import (
    SubprocessPackageManager,
    install_dependencies,
)
from hydrate.installers.strategies import (
    STRATEGIES,
    NodeStrategy,
    PythonStrategy,
    RubyStrategy,
    get_strategy,
)

__all__ = [
    "PackageManager",
    "RuntimeStrategy",
    "NodeStrategy",
    "PythonStrategy",
    "RubyStrategy",
    "STRATEGIES",
    "get_strategy",
    "SubprocessPackageManager",
    "install_dependencies",
]
