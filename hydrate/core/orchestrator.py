"""Hydration orchestrator: the entry point for a hydration run.

Wires the manifest resolver, runtime classifier and per-function pipeline
together and fans functions out over a thread pool.  Functions never read
or write each other's directories, so they run with no ordering between
them; within a function the pipeline order is fixed.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Collection, Mapping
from concurrent.futures import Future, ThreadPoolExecutor
from datetime import datetime, timezone
from typing import Any

from hydrate.config import HydrateSettings
from hydrate.config import settings as default_settings
from hydrate.core.classifier import classify_runtimes
from hydrate.core.manifest_resolver import (
    load_manifest,
    project_default_runtime,
    resolve_manifest,
)
from hydrate.core.pipeline import run_function
from hydrate.installers.base import PackageManager
from hydrate.installers.package_manager import SubprocessPackageManager
from hydrate.models.config import HydrationConfig
from hydrate.models.functions import FunctionDescriptor, FunctionId, RuntimeGroup
from hydrate.models.manifest import AppManifest
from hydrate.models.reports import (
    FunctionReport,
    HydrationReport,
    StepOutcome,
    StepStatus,
)
from hydrate.stages import FunctionContext

logger = logging.getLogger(__name__)


class Hydrator:
    """Hydrates every function of an app.

    Parameters
    ----------
    settings:
        Engine settings.  Defaults to the ``hydrate.config.settings`` singleton.
    package_manager:
        Dependency install collaborator.  Defaults to running each
        runtime's package manager in a subprocess.
    """

    def __init__(
        self,
        settings: HydrateSettings | None = None,
        package_manager: PackageManager | None = None,
    ) -> None:
        self.settings = settings or default_settings
        self.package_manager: PackageManager = (
            package_manager or SubprocessPackageManager()
        )

    # ------------------------------------------------------------------
    # Planning
    # ------------------------------------------------------------------

    def plan(
        self, manifest: AppManifest | Mapping[str, Any], config: HydrationConfig
    ) -> RuntimeGroup:
        """Resolve and classify functions.  Raises ``ManifestError``."""
        _, group = self._classify(load_manifest(manifest), config)
        return group

    @staticmethod
    def _classify(
        app: AppManifest, config: HydrationConfig
    ) -> tuple[tuple[FunctionDescriptor, ...], RuntimeGroup]:
        descriptors = resolve_manifest(app)
        default = project_default_runtime(app, config.default_runtime)
        return descriptors, classify_runtimes(descriptors, default)

    # ------------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------------

    def run(
        self,
        manifest: AppManifest | Mapping[str, Any],
        config: HydrationConfig,
        *,
        only: Collection[FunctionId] | None = None,
        cancel: threading.Event | None = None,
    ) -> HydrationReport:
        """Hydrate all functions (or just *only*) and return the run report.

        Manifest problems raise ``ManifestError`` before anything is
        written.  Per-function failures are collected in the report.
        """
        app = load_manifest(manifest)
        started = datetime.now(timezone.utc)
        descriptors, group = self._classify(app, config)
        cancel = cancel or threading.Event()

        # Report in declaration order, not runtime order.
        classified = {fn.id: fn for fn in group.all()}
        ordered = [classified[fn.id] for fn in descriptors]
        if only is not None:
            wanted = set(only)
            ordered = [fn for fn in ordered if fn.id in wanted]

        logger.info(
            "Hydrating %d functions for app %r with %d workers",
            len(ordered),
            app.app,
            self.settings.max_workers,
        )

        reports: list[FunctionReport] = []
        with ThreadPoolExecutor(
            max_workers=max(1, self.settings.max_workers),
            thread_name_prefix="hydrate",
        ) as pool:
            futures: list[tuple[FunctionDescriptor, Future[FunctionReport]]] = [
                (fn, pool.submit(self._hydrate_one, fn, config, app.app, cancel))
                for fn in ordered
            ]
            for fn, future in futures:
                reports.append(self._collect(fn, future))

        report = HydrationReport(
            app=app.app,
            root=str(config.root),
            functions=reports,
            started_at=started,
            finished_at=datetime.now(timezone.utc),
        )
        logger.info(
            "Hydration finished: %d succeeded, %d failed",
            len(report.succeeded),
            len(report.failed),
        )
        return report

    def _hydrate_one(
        self,
        fn: FunctionDescriptor,
        config: HydrationConfig,
        app_name: str,
        cancel: threading.Event,
    ) -> FunctionReport:
        ctx = FunctionContext(
            fn, config, self.package_manager, app=app_name, cancel=cancel
        )
        return run_function(ctx)

    @staticmethod
    def _collect(
        fn: FunctionDescriptor, future: Future[FunctionReport]
    ) -> FunctionReport:
        """Unwrap a function's result; unexpected errors fail that function only."""
        try:
            return future.result()
        except Exception as exc:
            logger.exception("Hydration of %s crashed", fn.id)
            return FunctionReport(
                function_id=fn.id,
                runtime=fn.runtime,
                path=fn.path,
                steps={
                    "pipeline": StepOutcome(
                        step="pipeline",
                        status=StepStatus.FAILED,
                        error_type=type(exc).__name__,
                        error=str(exc),
                    )
                },
            )
