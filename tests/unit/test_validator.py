"""Unit tests for workflow validation."""

from __future__ import annotations

from flowbuilder.graph.models import (
    Action,
    ActionFlow,
    RetryPolicy,
    Task,
    TimeoutPolicy,
    Workflow,
    WorkflowSnapshot,
)
from flowbuilder.graph.store import WorkflowStore
from flowbuilder.graph.validator import validate


def _single_action_snapshot(flow: ActionFlow, *, action_type: str = "cmd") -> WorkflowSnapshot:
    action = Action(id="act_1", taskId="task_1", name="Run", type=action_type, flow=flow)
    task = Task(id="task_1", name="Main", actions=["act_1"])
    return WorkflowSnapshot(workflow=Workflow(tasks=[task]), actions={"act_1": action})


def test_populated_store_is_valid(populated_store: WorkflowStore) -> None:
    result = validate(populated_store.snapshot())

    assert result.valid
    assert result.errors == ()


def test_empty_workflow_is_valid() -> None:
    assert validate(WorkflowSnapshot.empty()).valid


def test_self_loop_is_structurally_valid(store: WorkflowStore) -> None:
    task_id = store.add_task("Ingest")
    action_id = store.add_action(task_id, "http", "Fetch", 10, 10)
    store.link_actions(action_id, action_id)

    result = validate(store.snapshot())

    assert result.valid, result.errors


def test_invalid_retry_reports_each_violation() -> None:
    flow = ActionFlow(retry=RetryPolicy(strategy="linear", max_attempts=0, delay=-1))

    result = validate(_single_action_snapshot(flow))

    assert not result.valid
    assert result.errors == (
        'Action "act_1" has invalid retry strategy: "linear"',
        'Action "act_1" has invalid max_attempts: 0',
        'Action "act_1" has invalid delay: -1',
    )


def test_timeout_checks() -> None:
    flow = ActionFlow(timeout=TimeoutPolicy(duration=-0.5, on_timeout="act_gone"))

    result = validate(_single_action_snapshot(flow))

    assert result.errors == (
        'Action "act_1" has invalid timeout duration: -0.5',
        'Action "act_1" references non-existent on_timeout action "act_gone"',
    )


def test_zero_delay_and_duration_are_valid() -> None:
    flow = ActionFlow(
        retry=RetryPolicy(strategy="fixed", max_attempts=1, delay=0),
        timeout=TimeoutPolicy(duration=0),
    )

    assert validate(_single_action_snapshot(flow)).valid


def test_dangling_references_are_reported_in_stable_order(store: WorkflowStore) -> None:
    first = store.add_task("")
    a = store.add_action(first, "cmd", "A", 0, 0)
    b = store.add_action(first, "", "B", 0, 0)
    store.link_actions(a, "act_gone")
    store.update_action(a, flow={"next": "act_gone", "next_if": "act_also_gone"})
    store.update_action(b, flow={"next": a})

    result = validate(store.snapshot())

    assert result.errors == (
        f'Task "{first}" has no name',
        f'Action "{a}" references non-existent next action "act_gone"',
        f'Action "{a}" references non-existent next_if action "act_also_gone"',
        f'Action "{b}" has no type',
    )


def test_deleting_link_target_leaves_dangling_edge_for_validator(store: WorkflowStore) -> None:
    task_id = store.add_task("Ingest")
    a = store.add_action(task_id, "cmd", "A", 0, 0)
    b = store.add_action(task_id, "cmd", "B", 0, 0)
    store.link_actions(a, b)

    store.delete_action(b)

    assert validate(store.snapshot()).errors == (
        f'Action "{a}" references non-existent next action "{b}"',
    )


def test_inconsistent_membership_is_reported() -> None:
    snapshot = WorkflowSnapshot(
        workflow=Workflow(
            tasks=[
                Task(id="task_1", name="One", actions=["act_1", "act_missing"]),
                Task(id="task_2", name="Two", actions=["act_1"]),
            ]
        ),
        actions={
            "act_1": Action(id="act_1", taskId="task_2", type="cmd"),
            "act_2": Action(id="act_2", taskId="task_1", type="cmd"),
        },
    )

    assert validate(snapshot).errors == (
        'Action "act_1" belongs to task "task_2" but is listed under task "task_1"',
        'Task "task_1" references non-existent action "act_missing"',
        'Action "act_1" is listed more than once',
        'Action "act_2" is not listed by any task',
    )


def test_validate_is_deterministic_and_pure(store: WorkflowStore) -> None:
    task_id = store.add_task(" ")
    action_id = store.add_action(task_id, "cmd", "A", 0, 0)
    store.update_action(
        action_id,
        flow={"next": "x", "retry": {"strategy": "linear", "max_attempts": 0, "delay": -1}},
    )
    snapshot = store.snapshot()

    first = validate(snapshot)
    second = validate(snapshot)

    assert first == second
    assert len(first.errors) == 5
    assert store.snapshot() == snapshot


def test_repeated_task_id_is_reported_where_it_appears() -> None:
    snapshot = WorkflowSnapshot(
        workflow=Workflow(
            tasks=[
                Task(id="task_1", name="One", actions=["act_a"]),
                Task(id="task_1", name="Two", actions=["act_b"]),
            ]
        ),
        actions={
            "act_a": Action(id="act_a", taskId="task_1", type="cmd"),
            "act_b": Action(id="act_b", taskId="task_1", type="cmd"),
        },
    )

    assert validate(snapshot).errors == ('Task "task_1" is defined more than once',)


def test_nan_delay_and_duration_are_invalid() -> None:
    nan = float("nan")
    flow = ActionFlow(
        retry=RetryPolicy(strategy="fixed", max_attempts=1, delay=nan),
        timeout=TimeoutPolicy(duration=nan),
    )

    assert validate(_single_action_snapshot(flow)).errors == (
        'Action "act_1" has invalid delay: nan',
        'Action "act_1" has invalid timeout duration: nan',
    )
