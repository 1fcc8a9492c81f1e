"""Workflow graph model.

This package holds the definition side of a workflow:
- records for tasks, actions and their control-flow/policy descriptor
- a store that owns one workflow and keeps task/action membership consistent
- a pure validator for referential and semantic integrity
- JSON and YAML codecs with lossless round trips

Nothing here executes a workflow.
"""

from flowbuilder.graph.errors import (
    FormatError,
    SchemaError,
    WorkflowError,
    WorkflowReferenceError,
)
from flowbuilder.graph.ids import IdGenerator
from flowbuilder.graph.models import (
    Action,
    ActionFlow,
    ActionType,
    RetryPolicy,
    RetryStrategy,
    Task,
    TimeoutPolicy,
    Workflow,
    WorkflowSnapshot,
)
from flowbuilder.graph.serializer import (
    WorkflowFormat,
    decode,
    encode,
    export_workflow,
    import_workflow,
)
from flowbuilder.graph.store import WorkflowStore
from flowbuilder.graph.validator import ValidationResult, validate

__all__ = [
    "Action",
    "ActionFlow",
    "ActionType",
    "FormatError",
    "IdGenerator",
    "RetryPolicy",
    "RetryStrategy",
    "SchemaError",
    "Task",
    "TimeoutPolicy",
    "ValidationResult",
    "Workflow",
    "WorkflowError",
    "WorkflowFormat",
    "WorkflowReferenceError",
    "WorkflowSnapshot",
    "WorkflowStore",
    "decode",
    "encode",
    "export_workflow",
    "import_workflow",
    "validate",
]
