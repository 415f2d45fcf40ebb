"""The three supported runtimes."""

from __future__ import annotations

from pathlib import Path
from typing import ClassVar

from hydrate.installers.base import RuntimeStrategy
from hydrate.models.functions import Runtime


class NodeStrategy(RuntimeStrategy):
    runtime: ClassVar[Runtime] = Runtime.NODEJS
    deps_dir: ClassVar[str] = "node_modules"
    dependency_file: ClassVar[str] = "package.json"
    mount_root: ClassVar[str] = "node_modules/@architect"

    def install_command(self, function_dir: Path) -> list[str]:
        return ["npm", "install", "--omit=dev", "--no-audit", "--no-fund"]


class PythonStrategy(RuntimeStrategy):
    runtime: ClassVar[Runtime] = Runtime.PYTHON
    deps_dir: ClassVar[str] = "vendor"
    dependency_file: ClassVar[str] = "requirements.txt"
    mount_root: ClassVar[str] = "vendor"

    def install_command(self, function_dir: Path) -> list[str]:
        return [
            "pip",
            "install",
            "--upgrade",
            "-r",
            self.dependency_file,
            "-t",
            self.deps_dir,
        ]


class RubyStrategy(RuntimeStrategy):
    runtime: ClassVar[Runtime] = Runtime.RUBY
    deps_dir: ClassVar[str] = "vendor"
    dependency_file: ClassVar[str] = "Gemfile"
    mount_root: ClassVar[str] = "vendor"

    def install_command(self, function_dir: Path) -> list[str]:
        return ["bundle", "install"]

    def install_env(self, function_dir: Path) -> dict[str, str]:
        # `bundle install --path` is deprecated since Bundler 2.1.
        return {"BUNDLE_PATH": f"{self.deps_dir}/bundle"}


STRATEGIES: dict[Runtime, RuntimeStrategy] = {
    Runtime.NODEJS: NodeStrategy(),
    Runtime.PYTHON: PythonStrategy(),
    Runtime.RUBY: RubyStrategy(),
}


def get_strategy(runtime: Runtime) -> RuntimeStrategy:
    """Return the strategy for *runtime*.

    Raises ``KeyError`` if the runtime has no registered strategy.
    """
    try:
        return STRATEGIES[runtime]
    except KeyError:
        raise KeyError(
            f"Unknown runtime {runtime!r}. "
            f"Registered runtimes: {sorted(r.value for r in STRATEGIES)}"
        ) from None
