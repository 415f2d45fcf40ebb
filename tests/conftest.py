"""Shared test fixtures for hydrate."""

from __future__ import annotations

import threading
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

from hydrate.config import HydrateSettings
from hydrate.core.manifest_resolver import resolve_manifest
from hydrate.core.orchestrator import Hydrator
from hydrate.models.config import HydrationConfig
from hydrate.models.functions import Runtime

# Files each fake install drops into the runtime's dependency directory.
FAKE_PACKAGES: dict[Runtime, str] = {
    Runtime.NODEJS: "node_modules/tiny-json-http/package.json",
    Runtime.PYTHON: "vendor/minimal-0.1.0.dist-info/METADATA",
    Runtime.RUBY: "vendor/bundle/ruby/3.2.0/gems/a-0.2.1/lib/a.rb",
}


class FakePackageManager:
    """In-process package manager: writes one fake package per install.

    Functions whose directory name is in ``fail_for`` raise instead.
    """

    def __init__(self, fail_for: set[str] | None = None) -> None:
        self.fail_for = set(fail_for or ())
        self.calls: list[tuple[str, Runtime]] = []
        self._lock = threading.Lock()

    def install(self, function_dir: Path, runtime: Runtime) -> None:
        with self._lock:
            self.calls.append((function_dir.name, runtime))
        if function_dir.name in self.fail_for:
            raise RuntimeError(f"registry unreachable for {function_dir.name}")
        package = function_dir / FAKE_PACKAGES[runtime]
        package.parent.mkdir(parents=True, exist_ok=True)
        package.write_text(f"{runtime.value} package\n", encoding="utf-8")


# ---------------------------------------------------------------------------
# Manifests
# ---------------------------------------------------------------------------


@pytest.fixture
def http_manifest() -> dict[str, Any]:
    """Five HTTP routes: two get, one post, one put, one delete."""
    return {
        "app": "mockapp",
        "http": [
            {"method": "get", "path": "/"},
            {"method": "get", "path": "/memories", "runtime": "python"},
            {"method": "post", "path": "/up-tents"},
            {"method": "put", "path": "/on_your_boots"},
            {"method": "delete", "path": "/badness_in_life", "runtime": "ruby"},
        ],
    }


@pytest.fixture
def full_manifest(http_manifest: dict[str, Any]) -> dict[str, Any]:
    """Every trigger type, plus a catch-all route."""
    manifest = dict(http_manifest)
    manifest["http"] = [
        *http_manifest["http"],
        {"method": "any", "path": "/time_is_good/*"},
    ]
    manifest.update(
        {
            "events": [{"name": "just-being-in-nature"}],
            "queues": [{"name": "parks-to-visit"}],
            "scheduled": [{"name": "hikes-with-friends"}],
            "tables": [{"name": "trails"}],
            "streams": [{"name": "rivers"}],
            "custom_paths": [{"name": "in-the-clouds", "method": "post"}],
        }
    )
    return manifest


# ---------------------------------------------------------------------------
# Project tree
# ---------------------------------------------------------------------------


def _write(path: Path, text: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")


@pytest.fixture
def make_project(tmp_path: Path) -> Callable[..., Path]:
    """Factory fixture: lay out an app with function dirs and source trees."""

    def _factory(
        manifest: dict[str, Any],
        *,
        shared: bool = True,
        views: bool = True,
        static: bool = True,
    ) -> Path:
        root = tmp_path / "app"
        root.mkdir(exist_ok=True)
        for fn in resolve_manifest(manifest):
            _write(root / fn.path / "index.js", f"// {fn.name}\n")
        if shared:
            _write(root / "src/shared/index.js", "module.exports = {}\n")
            _write(root / "src/shared/lib/helpers.js", "exports.id = x => x\n")
        if views:
            _write(root / "src/views/layout.js", "module.exports = () => ''\n")
        if static:
            _write(root / "public/index.html", "<h1>hi</h1>\n")
            _write(root / "public/css/app.css", "body { margin: 0 }\n")
        return root

    return _factory


@pytest.fixture
def make_config() -> Callable[..., HydrationConfig]:
    """Factory fixture: HydrationConfig with test defaults."""

    def _factory(root: Path, **overrides: Any) -> HydrationConfig:
        return HydrationConfig(root=root, **overrides)

    return _factory


@pytest.fixture
def fake_pm() -> FakePackageManager:
    return FakePackageManager()


@pytest.fixture
def make_fake_pm() -> Callable[..., FakePackageManager]:
    return FakePackageManager


@pytest.fixture
def settings() -> HydrateSettings:
    return HydrateSettings(max_workers=4)


@pytest.fixture
def hydrator(settings: HydrateSettings, fake_pm: FakePackageManager) -> Hydrator:
    """A Hydrator wired to the fake package manager."""
    return Hydrator(settings=settings, package_manager=fake_pm)


@pytest.fixture
def snapshot() -> Callable[[Path], dict[str, bytes]]:
    """Capture every file under a root as {relative posix path: bytes}."""

    def _snapshot(root: Path) -> dict[str, bytes]:
        return {
            p.relative_to(root).as_posix(): p.read_bytes()
            for p in sorted(root.rglob("*"))
            if p.is_file()
        }

    return _snapshot
