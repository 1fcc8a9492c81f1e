"""Workflow graph records.

These models describe a workflow *definition*: tasks, the actions they own,
and the control-flow/policy descriptor attached to each action. Nothing here
executes a workflow.

Policy values (retry strategy, attempt counts, delays, durations) are not
range-checked at construction time. A workflow may be edited and saved in an
invalid-but-recoverable state; ``flowbuilder.graph.validator`` is the
authority that reports such defects.

Records are frozen. The store replaces them on every edit and hands out
copies, so changing a record never changes the store behind it.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

# Closed scalar variant for action parameters.
ParameterValue = str | bool | int | float | None


class ActionType(str, Enum):
    """Action kinds the editor offers. The ``type`` field stays an open tag."""

    BUILTIN = "builtin"
    CMD = "cmd"
    HTTP = "http"
    WASM = "wasm"


class RetryStrategy(str, Enum):
    FIXED = "fixed"
    EXPONENTIAL = "exponential"


class RetryPolicy(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    strategy: str
    max_attempts: int
    delay: int | float


class TimeoutPolicy(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    duration: int | float
    on_timeout: str | None = None

    def to_json(self) -> dict[str, object]:
        out: dict[str, object] = {"duration": self.duration}
        if self.on_timeout is not None:
            out["on_timeout"] = self.on_timeout
        return out


class ActionFlow(BaseModel):
    """Control-flow edges and policy for a single action.

    ``None`` means absent; absent entries are omitted from the wire form.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    next: str | None = None
    next_if: str | None = None
    retry: RetryPolicy | None = None
    timeout: TimeoutPolicy | None = None

    def to_json(self) -> dict[str, object]:
        out: dict[str, object] = {}
        if self.next is not None:
            out["next"] = self.next
        if self.next_if is not None:
            out["next_if"] = self.next_if
        if self.retry is not None:
            out["retry"] = self.retry.model_dump(mode="json")
        if self.timeout is not None:
            out["timeout"] = self.timeout.to_json()
        return out


class Action(BaseModel):
    """One node of the control-flow graph."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    id: str
    taskId: str
    name: str = ""
    description: str | None = None
    type: str = ""
    parameters: dict[str, ParameterValue] = Field(default_factory=dict)
    outputs: dict[str, str] | None = None
    flow: ActionFlow = Field(default_factory=ActionFlow)

    # Presentation coordinates; persisted but inert to validation.
    x: int | float = 0
    y: int | float = 0

    def to_json(self) -> dict[str, object]:
        out: dict[str, object] = {
            "id": self.id,
            "taskId": self.taskId,
            "name": self.name,
        }
        if self.description is not None:
            out["description"] = self.description
        out["type"] = self.type
        out["parameters"] = dict(self.parameters)
        if self.outputs is not None:
            out["outputs"] = dict(self.outputs)
        out["x"] = self.x
        out["y"] = self.y
        out["flow"] = self.flow.to_json()
        return out


class Task(BaseModel):
    """A named grouping of actions."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    id: str
    name: str = ""
    description: str | None = None
    actions: list[str] = Field(default_factory=list)

    def to_json(self) -> dict[str, object]:
        out: dict[str, object] = {"id": self.id, "name": self.name}
        if self.description is not None:
            out["description"] = self.description
        out["actions"] = list(self.actions)
        return out


class Workflow(BaseModel):
    """Root aggregate: format version, environment, variables and tasks."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    version: str = "1.0"
    env: dict[str, str] = Field(default_factory=dict)
    vars: dict[str, str] = Field(default_factory=dict)
    tasks: list[Task] = Field(default_factory=list)

    def to_json(self) -> dict[str, object]:
        return {
            "version": self.version,
            "env": dict(self.env),
            "vars": dict(self.vars),
            "tasks": [task.to_json() for task in self.tasks],
        }


class WorkflowSnapshot(BaseModel):
    """Read-only view of a store: the workflow plus its action map.

    Action order follows the store's insertion order. Consumers must not rely
    on it surviving a round trip; only membership and content are preserved.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    workflow: Workflow = Field(default_factory=Workflow)
    actions: dict[str, Action] = Field(default_factory=dict)

    @classmethod
    def empty(cls, version: str = "1.0") -> WorkflowSnapshot:
        return cls(workflow=Workflow(version=version))

    def to_document(self) -> dict[str, Any]:
        """Return the plain tree both text encodings are built from."""

        return {
            "workflow": self.workflow.to_json(),
            "actions": {action_id: a.to_json() for action_id, a in self.actions.items()},
        }
