"""Function descriptor models, one per declared handler and immutable per pass."""

from __future__ import annotations

from enum import Enum
from pathlib import PurePosixPath
from typing import NamedTuple

from pydantic import BaseModel, ConfigDict, model_validator


class TriggerType(str, Enum):
    """What invokes a function."""

    HTTP = "http"
    EVENT = "event"
    QUEUE = "queue"
    SCHEDULED = "scheduled"
    TABLE_STREAM = "table_stream"
    CUSTOM_PATH = "custom_path"


class Runtime(str, Enum):
    """Execution runtimes a function may be assigned to."""

    NODEJS = "nodejs"
    PYTHON = "python"
    RUBY = "ruby"


class HttpMethod(str, Enum):
    GET = "get"
    POST = "post"
    PUT = "put"
    PATCH = "patch"
    DELETE = "delete"
    HEAD = "head"
    OPTIONS = "options"
    ANY = "any"


# Triggers whose handlers answer an HTTP request and carry a method.
HTTP_STYLE_TRIGGERS: frozenset[TriggerType] = frozenset(
    {TriggerType.HTTP, TriggerType.CUSTOM_PATH}
)

# Methods that mark a handler as read-style (eligible for views code).
READ_METHODS: frozenset[HttpMethod] = frozenset({HttpMethod.GET, HttpMethod.ANY})


class FunctionId(NamedTuple):
    """Identity of a function: ``(trigger_type, name)``."""

    trigger_type: TriggerType
    name: str

    def __str__(self) -> str:
        return f"{self.trigger_type.value}:{self.name}"


class FunctionDescriptor(BaseModel):
    """A single deployable function resolved from the app manifest.

    ``path`` is the function's source directory relative to the project
    root (POSIX separators), e.g. ``src/http/get-index``.
    """

    model_config = ConfigDict(frozen=True)

    trigger_type: TriggerType
    name: str
    runtime: Runtime | None = None  # None until classified
    http_method: HttpMethod | None = None
    path: str

    @model_validator(mode="after")
    def _method_only_on_http_triggers(self) -> FunctionDescriptor:
        if self.http_method is not None and self.trigger_type not in HTTP_STYLE_TRIGGERS:
            raise ValueError(
                f"http_method is only valid for http/custom_path triggers, "
                f"not {self.trigger_type.value}"
            )
        return self

    @property
    def id(self) -> FunctionId:
        return FunctionId(self.trigger_type, self.name)

    @property
    def is_read_handler(self) -> bool:
        """True for http/custom_path handlers answering ``get`` or ``any``."""
        return (
            self.trigger_type in HTTP_STYLE_TRIGGERS
            and self.http_method in READ_METHODS
        )

    def relative_path(self) -> PurePosixPath:
        return PurePosixPath(self.path)


class RuntimeGroup(BaseModel):
    """Descriptors partitioned by runtime.

    Every runtime has an entry (possibly empty).  Derived each pass and
    never persisted.
    """

    model_config = ConfigDict(frozen=True)

    groups: dict[Runtime, tuple[FunctionDescriptor, ...]]

    def __getitem__(self, runtime: Runtime) -> tuple[FunctionDescriptor, ...]:
        return self.groups[runtime]

    def all(self) -> list[FunctionDescriptor]:
        """Flatten back to a single list, grouped by runtime."""
        return [fn for runtime in Runtime for fn in self.groups.get(runtime, ())]

    def __len__(self) -> int:
        return sum(len(fns) for fns in self.groups.values())
