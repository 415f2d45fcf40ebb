"""Tests for the individual per-function stages."""

from __future__ import annotations

import json
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

from hydrate.core.classifier import classify_runtimes
from hydrate.core.errors import DerivationError, HydrationError, InstallError
from hydrate.core.manifest_resolver import resolve_manifest
from hydrate.models.functions import Runtime
from hydrate.models.reports import StepOutcome, StepStatus
from hydrate.stages import (
    STAGE_ORDER,
    STAGE_REGISTRY,
    FunctionContext,
    InstallStage,
    SharedStage,
    StaticStage,
    ViewsStage,
    get_stage,
)
from hydrate.stages.static import build_static_manifest, fingerprinted_name


@pytest.fixture
def make_ctx(
    http_manifest, make_project, make_config, fake_pm
) -> Callable[..., FunctionContext]:
    """Factory: a FunctionContext for one route of the http manifest."""
    root = make_project(http_manifest)
    fns = {
        fn.name: fn
        for fn in classify_runtimes(resolve_manifest(http_manifest), Runtime.NODEJS).all()
    }

    def _factory(name: str, pm: Any = None, **overrides: Any) -> FunctionContext:
        config = make_config(root, **overrides)
        return FunctionContext(fns[name], config, pm or fake_pm, app="mockapp")

    return _factory


def _run(ctx: FunctionContext, *stage_ids: str) -> list[StepOutcome]:
    return [get_stage(sid).run_stage(ctx) for sid in stage_ids]


class TestRegistry:
    def test_order(self):
        assert STAGE_ORDER == ["install", "shared", "static", "views"]
        assert set(STAGE_REGISTRY) == set(STAGE_ORDER)

    def test_unknown_stage(self):
        with pytest.raises(KeyError, match="Unknown stage_id"):
            get_stage("deploy")

    def test_unclassified_function_rejected(self, http_manifest, make_config, tmp_path, fake_pm):
        fn = resolve_manifest(http_manifest)[0]
        with pytest.raises(ValueError):
            FunctionContext(fn, make_config(tmp_path), fake_pm)


class TestInstallStage:
    def test_passes(self, make_ctx):
        ctx = make_ctx("get-memories")
        (outcome,) = _run(ctx, "install")
        assert outcome.status == StepStatus.PASSED
        assert outcome.detail == "vendor"
        assert ctx.status("install") == StepStatus.PASSED

    def test_failure_raises_install_error(self, make_ctx, make_fake_pm):
        ctx = make_ctx("get-index", pm=make_fake_pm(fail_for={"get-index"}))
        with pytest.raises(InstallError):
            InstallStage().run_stage(ctx)
        assert ctx.status("install") == StepStatus.NOT_STARTED


class TestSharedStage:
    @pytest.mark.parametrize(
        "name,mount",
        [
            ("get-index", "node_modules/@architect/shared"),
            ("get-memories", "vendor/shared"),
            ("delete-badness_in_life", "vendor/shared"),
        ],
    )
    def test_mounts_per_runtime(self, make_ctx, name, mount):
        ctx = make_ctx(name)
        _, outcome = _run(ctx, "install", "shared")
        assert outcome.status == StepStatus.PASSED
        dest = ctx.function_dir / mount
        assert (dest / ".arc").is_file()
        assert (dest / "shared.md").is_file()
        assert (dest / "lib" / "helpers.js").is_file()

    def test_provenance_content(self, make_ctx):
        ctx = make_ctx("get-memories")
        _run(ctx, "install", "shared")
        arc = json.loads((ctx.function_dir / "vendor/shared/.arc").read_text(encoding="utf-8"))
        assert arc["app"] == "mockapp"
        assert arc["function"] == "http:get-memories"
        assert arc["runtime"] == "python"
        assert arc["source"] == "src/shared"
        assert len(arc["digest"]) == 64

    def test_disabled_skips_and_removes_previous(self, make_ctx):
        ctx = make_ctx("get-index")
        _run(ctx, "install", "shared")
        disabled = make_ctx("get-index", shared_disabled=frozenset({ctx.fn.id}))
        (outcome,) = _run(disabled, "shared")
        assert outcome.status == StepStatus.SKIPPED
        assert outcome.detail == "disabled"
        assert not (ctx.function_dir / "node_modules/@architect/shared").exists()

    def test_missing_source_skips(self, make_ctx):
        ctx = make_ctx("get-index", shared_source=Path("src/nothing-here"))
        _, outcome = _run(ctx, "install", "shared")
        assert outcome.status == StepStatus.SKIPPED

    def test_copy_failure_is_hydration_error(self, make_ctx, monkeypatch):
        import shutil

        ctx = make_ctx("get-index")
        InstallStage().run_stage(ctx)

        def _broken(*args, **kwargs):
            raise OSError("read-only file system")

        monkeypatch.setattr(shutil, "copytree", _broken)
        with pytest.raises(HydrationError) as excinfo:
            SharedStage().run_stage(ctx)
        assert excinfo.value.kind == "shared"
        assert excinfo.value.function_id == ctx.fn.id


class TestStaticStage:
    def test_written_next_to_arc(self, make_ctx):
        ctx = make_ctx("get-index")
        *_, outcome = _run(ctx, "install", "shared", "static")
        assert outcome.status == StepStatus.PASSED
        static = ctx.function_dir / "node_modules/@architect/shared/static.json"
        assert json.loads(static.read_text(encoding="utf-8")) == {
            "css/app.css": "css/app.css",
            "index.html": "index.html",
        }

    def test_skipped_without_shared(self, make_ctx):
        ctx = make_ctx("get-index")
        ctx.outcomes["shared"] = StepOutcome(step="shared", status=StepStatus.SKIPPED)
        (outcome,) = _run(ctx, "static")
        assert outcome.status == StepStatus.SKIPPED

    def test_missing_marker_is_derivation_error(self, make_ctx):
        ctx = make_ctx("get-index")
        ctx.outcomes["shared"] = StepOutcome(step="shared", status=StepStatus.PASSED)
        with pytest.raises(DerivationError):
            StaticStage().run_stage(ctx)

    def test_fingerprinted(self, make_ctx):
        ctx = make_ctx("get-index", fingerprint_static=True)
        _run(ctx, "install", "shared", "static")
        static = ctx.function_dir / "node_modules/@architect/shared/static.json"
        mapping = json.loads(static.read_text(encoding="utf-8"))
        assert mapping["css/app.css"].startswith("css/app-")
        assert mapping["css/app.css"].endswith(".css")
        assert mapping["css/app.css"] != "css/app.css"

    def test_no_static_source_gives_empty_manifest(self, make_ctx):
        ctx = make_ctx("get-index", static_source=None)
        _run(ctx, "install", "shared", "static")
        static = ctx.function_dir / "node_modules/@architect/shared/static.json"
        assert json.loads(static.read_text(encoding="utf-8")) == {}


class TestStaticHelpers:
    def test_fingerprinted_name(self):
        from pathlib import PurePosixPath

        assert (
            fingerprinted_name(PurePosixPath("css/app.css"), "0123456789abcdef")
            == "css/app-0123456789.css"
        )

    def test_build_missing_root(self, tmp_path: Path):
        assert build_static_manifest(tmp_path / "public", fingerprint=True) == {}


class TestViewsStage:
    @pytest.mark.parametrize(
        "name,mount",
        [
            ("get-index", "node_modules/@architect/views"),
            ("get-memories", "vendor/views"),
        ],
    )
    def test_get_routes_hydrated(self, make_ctx, name, mount):
        ctx = make_ctx(name)
        _, outcome = _run(ctx, "install", "views")
        assert outcome.status == StepStatus.PASSED
        assert (ctx.function_dir / mount / "views.md").is_file()
        assert (ctx.function_dir / mount / "layout.js").is_file()
        assert not (ctx.function_dir / mount / ".arc").exists()

    @pytest.mark.parametrize(
        "name", ["post-up-tents", "put-on_your_boots", "delete-badness_in_life"]
    )
    def test_non_read_routes_skipped(self, make_ctx, name):
        ctx = make_ctx(name)
        _, outcome = _run(ctx, "install", "views")
        assert outcome.status == StepStatus.SKIPPED
        assert outcome.detail == "not a get/any handler"

    def test_pragma_excludes_unlisted(self, make_ctx):
        listed = make_ctx("get-memories")
        ctx = make_ctx("get-index", views_pragma=frozenset({listed.fn.id}))
        _, outcome = _run(ctx, "install", "views")
        assert outcome.status == StepStatus.SKIPPED
        assert outcome.detail == "not listed in views pragma"

    def test_disabled_reason(self, make_ctx):
        probe = make_ctx("get-index")
        ctx = make_ctx(
            "get-index",
            views_pragma=frozenset({probe.fn.id}),
            views_disabled=frozenset({probe.fn.id}),
        )
        _, outcome = _run(ctx, "install", "views")
        assert outcome.detail == "disabled"

    def test_leaving_scope_removes_previous(self, make_ctx):
        ctx = make_ctx("get-index")
        _run(ctx, "install", "views")
        narrowed = make_ctx("get-index", views_pragma=frozenset())
        _run(narrowed, "views")
        assert not (ctx.function_dir / "node_modules/@architect/views").exists()

    def test_does_not_touch_shared(self, make_ctx):
        ctx = make_ctx("get-index")
        _run(ctx, "install", "shared", "views")
        ViewsStage().rollback(ctx)
        assert (ctx.function_dir / "node_modules/@architect/shared/.arc").is_file()
