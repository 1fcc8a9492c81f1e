"""In-memory workflow graph store.

The store is the single source of truth for one editor session. It owns the
workflow aggregate, the action map and two cursors (the active selection and
the link source used while drawing an edge).

Actions live in an append-only arena. Deleted slots are tombstoned, never
reused. A secondary index maps each task id to the ordered ids of its member
actions; ``Task.actions`` is materialised from that index whenever a snapshot
is taken. Every mutation updates arena and index together, which keeps the
task <-> action relation consistent in both directions.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator

from pydantic import ValidationError

from .errors import WorkflowReferenceError
from .ids import IdGenerator
from .models import Action, ActionFlow, ActionType, Task, Workflow, WorkflowSnapshot

logger = logging.getLogger(__name__)

_ACTION_FIELDS = frozenset(Action.model_fields)
_TASK_FIELDS = frozenset(Task.model_fields)
_IMMUTABLE_ACTION_FIELDS = frozenset({"id", "taskId"})
_IMMUTABLE_TASK_FIELDS = frozenset({"id", "actions"})


class WorkflowStore:
    """Owns the workflow being edited and its atomic mutation API.

    Entity mutations are strict about the task/action relation. Cursor updates
    are permissive and always succeed. Flow references (``next``, ``next_if``,
    ``timeout.on_timeout``) may dangle; reporting them is the validator's job.
    """

    def __init__(self, *, ids: IdGenerator | None = None, version: str = "1.0") -> None:
        self._ids = ids or IdGenerator()
        self._version = version
        self._env: dict[str, str] = {}
        self._vars: dict[str, str] = {}

        # Task records carry no action list; membership lives in ``_members``.
        self._tasks: list[Task] = []
        self._members: dict[str, list[str]] = {}

        self._arena: list[Action | None] = []
        self._slots: dict[str, int] = {}

        self._active_id: str | None = None
        self._linking_from: str | None = None

    @property
    def active_task_id(self) -> str | None:
        return self._active_id

    @property
    def linking_from(self) -> str | None:
        return self._linking_from

    @property
    def workflow(self) -> Workflow:
        return Workflow(
            version=self._version,
            env=dict(self._env),
            vars=dict(self._vars),
            tasks=[self._materialise(task) for task in self._tasks],
        )

    def actions(self) -> dict[str, Action]:
        """Live actions keyed by id, in insertion order."""

        return {action.id: action.model_copy(deep=True) for action in self._iter_actions()}

    def get_action(self, action_id: str) -> Action | None:
        slot = self._slots.get(action_id)
        if slot is None:
            return None
        action = self._arena[slot]
        assert action is not None
        return action.model_copy(deep=True)

    def get_task(self, task_id: str) -> Task | None:
        idx = self._task_index(task_id)
        return None if idx is None else self._materialise(self._tasks[idx])

    def task_actions(self, task_id: str) -> list[Action]:
        """Actions listed under a task, in task order. Dangling ids are skipped."""

        actions: list[Action] = []
        for action_id in self._members.get(task_id, []):
            action = self.get_action(action_id)
            if action is not None:
                actions.append(action)
        return actions

    def snapshot(self) -> WorkflowSnapshot:
        return WorkflowSnapshot(workflow=self.workflow, actions=self.actions())

    def __contains__(self, action_id: object) -> bool:
        return action_id in self._slots

    def __len__(self) -> int:
        return len(self._slots)

    def add_task(self, name: str) -> str:
        task_id = self._new_id("task_")
        self._tasks.append(Task(id=task_id, name=name, description=""))
        self._members[task_id] = []
        self._active_id = task_id
        logger.debug("Task added", extra={"task_id": task_id, "task_name": name})
        return task_id

    def update_task(self, task_id: str, **updates: object) -> None:
        """Shallow-merge ``name``/``description`` into a task; no-op if missing."""

        idx = self._task_index(task_id)
        if idx is None:
            return
        _check_update_fields(updates, allowed=_TASK_FIELDS, immutable=_IMMUTABLE_TASK_FIELDS)
        current = self._tasks[idx]
        try:
            self._tasks[idx] = Task.model_validate({**current.model_dump(), **updates})
        except ValidationError as e:
            raise ValueError(f"Invalid task update: {e}") from e
        logger.debug("Task updated", extra={"task_id": task_id, "fields": sorted(updates)})

    def delete_task(self, task_id: str) -> None:
        """Remove a task and cascade to every action it owns."""

        idx = self._task_index(task_id)
        if idx is None:
            return

        doomed = list(self._members.get(task_id, []))
        doomed.extend(
            action.id
            for action in self._iter_actions()
            if action.taskId == task_id and action.id not in doomed
        )
        for action_id in doomed:
            self._drop_action(action_id)

        del self._tasks[idx]
        self._members.pop(task_id, None)
        self._demote_cursors({task_id, *doomed})
        logger.debug(
            "Task deleted",
            extra={"task_id": task_id, "cascaded_actions": len(doomed)},
        )

    def add_action(
        self,
        task_id: str,
        type: ActionType | str,
        name: str,
        x: int | float,
        y: int | float,
    ) -> str:
        if self._task_index(task_id) is None:
            raise WorkflowReferenceError("task", task_id)

        action_id = self._new_id("act_")
        action = Action(
            id=action_id,
            taskId=task_id,
            name=name,
            description="",
            type=type.value if isinstance(type, ActionType) else type,
            parameters={},
            flow=ActionFlow(),
            x=x,
            y=y,
        )
        self._slots[action_id] = len(self._arena)
        self._arena.append(action)
        self._members[task_id].append(action_id)
        logger.debug(
            "Action added",
            extra={"task_id": task_id, "action_id": action_id, "action_type": action.type},
        )
        return action_id

    def delete_action(self, action_id: str) -> None:
        if action_id not in self._slots:
            return
        self._drop_action(action_id)
        self._demote_cursors({action_id})
        logger.debug("Action deleted", extra={"action_id": action_id})

    def update_action(self, action_id: str, **updates: object) -> None:
        """Shallow-merge fields into an action; no-op if it does not exist.

        ``id`` and ``taskId`` cannot be changed here. Flow references are
        written as given, without checking their targets.

        Raises:
            ValueError: On unknown or immutable field names, or values that
                do not fit the action model. Nothing is applied in that case.
        """

        slot = self._slots.get(action_id)
        if slot is None:
            return
        _check_update_fields(updates, allowed=_ACTION_FIELDS, immutable=_IMMUTABLE_ACTION_FIELDS)
        current = self._arena[slot]
        assert current is not None
        self._arena[slot] = _merge_action(current, updates)
        logger.debug("Action updated", extra={"action_id": action_id, "fields": sorted(updates)})

    def link_actions(self, from_id: str, to_id: str) -> None:
        """Point ``from_id``'s unconditional successor at ``to_id``.

        The target does not need to exist. A missing source makes the call a
        no-op; otherwise the link-source cursor is cleared.
        """

        slot = self._slots.get(from_id)
        if slot is None:
            return
        self._linking_from = None
        current = self._arena[slot]
        assert current is not None
        flow = current.flow.model_copy(update={"next": to_id})
        self._arena[slot] = current.model_copy(update={"flow": flow})
        logger.debug("Actions linked", extra={"from_id": from_id, "to_id": to_id})

    def unlink_action(self, action_id: str) -> None:
        slot = self._slots.get(action_id)
        if slot is None:
            return
        current = self._arena[slot]
        assert current is not None
        flow = current.flow.model_copy(update={"next": None})
        self._arena[slot] = current.model_copy(update={"flow": flow})
        logger.debug("Action unlinked", extra={"action_id": action_id})

    def set_active_task(self, entity_id: str | None) -> None:
        """Select a task or action. Unknown ids select nothing."""

        if entity_id is not None and not self._exists(entity_id):
            logger.debug("Ignoring selection of unknown id", extra={"entity_id": entity_id})
            entity_id = None
        self._active_id = entity_id

    def set_linking_from(self, action_id: str | None) -> None:
        """Start (or with ``None`` cancel) drawing an edge from an action."""

        if action_id is not None and action_id not in self._slots:
            action_id = None
        self._linking_from = action_id

    def cancel_linking(self) -> None:
        self._linking_from = None

    def load_snapshot(self, snapshot: WorkflowSnapshot) -> None:
        """Replace all state with ``snapshot`` and reset both cursors.

        The active task becomes the first imported task, if there is one.
        Membership is taken verbatim from each task's ``actions`` list so
        that inconsistent documents stay visible to the validator.

        Raises:
            ValueError: Two tasks share an id. The store is left untouched.
        """

        workflow = snapshot.workflow
        members: dict[str, list[str]] = {}
        for task in workflow.tasks:
            if task.id in members:
                raise ValueError(f"Duplicate task id: {task.id!r}")
            members[task.id] = list(task.actions)
        tasks = [task.model_copy(update={"actions": []}) for task in workflow.tasks]
        arena: list[Action | None] = [
            action.model_copy(deep=True) for action in snapshot.actions.values()
        ]
        slots = {action.id: idx for idx, action in enumerate(arena) if action is not None}

        self._version = workflow.version
        self._env = dict(workflow.env)
        self._vars = dict(workflow.vars)
        self._tasks = tasks
        self._members = members
        self._arena = arena
        self._slots = slots
        self._active_id = tasks[0].id if tasks else None
        self._linking_from = None
        logger.debug(
            "Store replaced",
            extra={"tasks": len(tasks), "actions": len(slots)},
        )

    def _iter_actions(self) -> Iterator[Action]:
        for action in self._arena:
            if action is not None:
                yield action

    def _task_index(self, task_id: str) -> int | None:
        for idx, task in enumerate(self._tasks):
            if task.id == task_id:
                return idx
        return None

    def _materialise(self, task: Task) -> Task:
        return task.model_copy(update={"actions": list(self._members.get(task.id, []))})

    def _exists(self, entity_id: str) -> bool:
        return entity_id in self._slots or self._task_index(entity_id) is not None

    def _new_id(self, prefix: str) -> str:
        # Imported documents may already hold ids that collide with ours.
        while True:
            candidate = self._ids.generate(prefix)
            if not self._exists(candidate):
                return candidate

    def _drop_action(self, action_id: str) -> None:
        slot = self._slots.pop(action_id, None)
        if slot is not None:
            self._arena[slot] = None
        # Imported documents may list an action under a task other than its owner.
        for owned in self._members.values():
            while action_id in owned:
                owned.remove(action_id)

    def _demote_cursors(self, removed: set[str]) -> None:
        if self._active_id in removed:
            self._active_id = None
        if self._linking_from in removed:
            self._linking_from = None


def _check_update_fields(
    updates: dict[str, object], *, allowed: frozenset[str], immutable: frozenset[str]
) -> None:
    unknown = sorted(set(updates) - allowed)
    if unknown:
        raise ValueError(f"Unknown field(s): {', '.join(unknown)}")
    frozen = sorted(set(updates) & immutable)
    if frozen:
        raise ValueError(f"Field(s) cannot be updated: {', '.join(frozen)}")


def _merge_action(current: Action, updates: dict[str, object]) -> Action:
    merged = {name: getattr(current, name) for name in Action.model_fields}
    merged.update(updates)
    try:
        return Action.model_validate(merged)
    except ValidationError as e:
        raise ValueError(f"Invalid action update: {e}") from e
