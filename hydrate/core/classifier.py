"""Runtime classifier: partitions descriptors by their effective runtime."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from hydrate.models.functions import FunctionDescriptor, Runtime, RuntimeGroup

logger = logging.getLogger(__name__)


def effective_runtime(fn: FunctionDescriptor, default_runtime: Runtime) -> Runtime:
    """Declared runtime wins; otherwise the project default applies."""
    return fn.runtime or default_runtime


def classify_runtimes(
    descriptors: Iterable[FunctionDescriptor], default_runtime: Runtime
) -> RuntimeGroup:
    """Group descriptors by runtime.

    The result is total: every descriptor appears in exactly one group, with
    its ``runtime`` field filled in.  Every runtime has an entry, possibly
    empty, and input order is kept within each group.
    """
    buckets: dict[Runtime, list[FunctionDescriptor]] = {rt: [] for rt in Runtime}
    count = 0
    for fn in descriptors:
        runtime = effective_runtime(fn, default_runtime)
        if fn.runtime is not runtime:
            fn = fn.model_copy(update={"runtime": runtime})
        buckets[runtime].append(fn)
        count += 1

    group = RuntimeGroup(groups={rt: tuple(fns) for rt, fns in buckets.items()})

    logger.debug(
        "Classified %d functions: %s",
        count,
        ", ".join(f"{rt.value}={len(fns)}" for rt, fns in buckets.items()),
    )
    return group
