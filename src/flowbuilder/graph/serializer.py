"""Text codecs for workflow snapshots.

Two interchangeable encodings of the same tree::

    {"workflow": {"version", "env", "vars", "tasks": [...]},
     "actions": {<action id>: {...}}}

JSON is the compact structured form; YAML is the indented human-readable one.
For any snapshot produced by a ``WorkflowStore``, ``decode(encode(s, f), f)``
equals ``s`` for both formats.
"""

from __future__ import annotations

import json
import logging
from enum import Enum
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from .errors import FormatError, SchemaError
from .models import Action, Workflow, WorkflowSnapshot
from .store import WorkflowStore

logger = logging.getLogger(__name__)


class WorkflowFormat(str, Enum):
    JSON = "json"
    YAML = "yaml"

    @classmethod
    def from_path(cls, path: Path) -> WorkflowFormat:
        """Infer the format from a file suffix (``.json``, ``.yaml``, ``.yml``)."""

        suffix = path.suffix.lower()
        if suffix == ".json":
            return cls.JSON
        if suffix in {".yaml", ".yml"}:
            return cls.YAML
        raise ValueError(f"Cannot infer workflow format from file name: {path.name}")


def encode(
    snapshot: WorkflowSnapshot,
    fmt: WorkflowFormat | str = WorkflowFormat.JSON,
    *,
    indent: int = 2,
) -> str:
    document = snapshot.to_document()
    if WorkflowFormat(fmt) is WorkflowFormat.JSON:
        return json.dumps(document, indent=indent, ensure_ascii=False) + "\n"
    return yaml.safe_dump(
        document,
        default_flow_style=False,
        sort_keys=False,
        allow_unicode=True,
        indent=indent or None,
    )


def decode(text: str, fmt: WorkflowFormat | str) -> WorkflowSnapshot:
    """Parse ``text`` as ``fmt`` into a snapshot.

    A missing (or null) ``workflow`` entry decodes to a fresh empty workflow;
    a present but malformed one is an error, and so are repeated task ids.

    Raises:
        FormatError: The text does not parse under the format's grammar.
        SchemaError: The parsed tree is not a workflow document.
    """

    fmt = WorkflowFormat(fmt)
    document = _parse(text, fmt)

    if not isinstance(document, dict):
        raise SchemaError(
            f"Workflow document must be a mapping, got {type(document).__name__}"
        )

    raw_workflow = document.get("workflow")
    raw_actions = document.get("actions")
    unknown = sorted(str(key) for key in document if key not in {"workflow", "actions"})
    if unknown:
        raise SchemaError(f"Unexpected top-level key(s): {', '.join(unknown)}")

    try:
        workflow = Workflow() if raw_workflow is None else Workflow.model_validate(raw_workflow)
    except ValidationError as e:
        raise SchemaError(f"Malformed workflow: {e}") from e

    seen: set[str] = set()
    for task in workflow.tasks:
        if task.id in seen:
            raise SchemaError(f"Task id {task.id!r} is defined more than once")
        seen.add(task.id)

    return WorkflowSnapshot(workflow=workflow, actions=_decode_actions(raw_actions))


def export_workflow(
    store: WorkflowStore,
    fmt: WorkflowFormat | str = WorkflowFormat.JSON,
    *,
    indent: int = 2,
) -> str:
    snapshot = store.snapshot()
    text = encode(snapshot, fmt, indent=indent)
    logger.info(
        "Workflow exported",
        extra={
            "format": WorkflowFormat(fmt).value,
            "tasks": len(snapshot.workflow.tasks),
            "actions": len(snapshot.actions),
        },
    )
    return text


def import_workflow(
    store: WorkflowStore, text: str, fmt: WorkflowFormat | str
) -> WorkflowSnapshot:
    """Decode ``text`` and replace the store's state with it.

    The store is only touched once decoding has fully succeeded, so a failed
    import leaves the previous state in place.
    """

    fmt = WorkflowFormat(fmt)
    try:
        snapshot = decode(text, fmt)
    except (FormatError, SchemaError) as e:
        logger.warning("Workflow import rejected: %s", e, extra={"format": fmt.value})
        raise

    store.load_snapshot(snapshot)
    logger.info(
        "Workflow imported",
        extra={
            "format": fmt.value,
            "tasks": len(snapshot.workflow.tasks),
            "actions": len(snapshot.actions),
        },
    )
    return snapshot


def _parse(text: str, fmt: WorkflowFormat) -> Any:
    if fmt is WorkflowFormat.JSON:
        try:
            return json.loads(text)
        except json.JSONDecodeError as e:
            raise FormatError(fmt.value, str(e)) from e
    try:
        return yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise FormatError(fmt.value, str(e)) from e


def _decode_actions(raw: object) -> dict[str, Action]:
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise SchemaError(f"'actions' must be a mapping, got {type(raw).__name__}")

    actions: dict[str, Action] = {}
    for key, item in raw.items():
        try:
            action = Action.model_validate(item)
        except ValidationError as e:
            raise SchemaError(f"Malformed action {key!r}: {e}") from e
        if action.id != key:
            raise SchemaError(f"Action keyed {key!r} declares id {action.id!r}")
        actions[action.id] = action
    return actions
