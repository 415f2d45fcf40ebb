"""Hydration error taxonomy.

``ManifestError`` is fatal for a whole run.  The per-function errors carry
the function identity so they can be collected into the run report while
sibling functions keep going.
"""

from __future__ import annotations

from hydrate.models.functions import FunctionId


class HydrateError(RuntimeError):
    """Base class for all hydration engine errors."""


class ManifestError(HydrateError):
    """Raised for malformed or duplicate function declarations."""


class FunctionError(HydrateError):
    """A failure scoped to one function; retrying that function alone is safe."""

    step: str = ""

    def __init__(self, function_id: FunctionId, cause: BaseException | str) -> None:
        self.function_id = function_id
        self.cause = cause
        super().__init__(f"{self.step} failed for {function_id}: {cause}")


class InstallError(FunctionError):
    """The package manager collaborator failed for a function."""

    step = "install"


class HydrationError(FunctionError):
    """Copying shared or views code into a function failed."""

    def __init__(
        self, function_id: FunctionId, kind: str, cause: BaseException | str
    ) -> None:
        self.kind = kind
        self.step = kind
        super().__init__(function_id, cause)


class DerivationError(FunctionError):
    """Writing a function's static manifest failed."""

    step = "static"
