"""Structural validation of a workflow snapshot.

Errors are reported in a stable order: task order, then the order of actions
within each task, then the order of checks within an action. Membership
problems (a repeated task id, an action listed twice or under a task that does
not own it) are reported where the walk meets them. Actions that no task lists
are reported last, in action-map order.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from .models import Action, RetryStrategy, WorkflowSnapshot

logger = logging.getLogger(__name__)

_RETRY_STRATEGIES = frozenset(s.value for s in RetryStrategy)


@dataclass(frozen=True, slots=True)
class ValidationResult:
    valid: bool
    errors: tuple[str, ...]


def validate(snapshot: WorkflowSnapshot) -> ValidationResult:
    """Check referential and semantic integrity without mutating anything."""

    actions = snapshot.actions
    errors: list[str] = []
    listed: set[str] = set()
    defined: set[str] = set()

    for task in snapshot.workflow.tasks:
        if task.id in defined:
            errors.append(f'Task "{task.id}" is defined more than once')
        defined.add(task.id)
        if not task.name.strip():
            errors.append(f'Task "{task.id}" has no name')

        for action_id in task.actions:
            action = actions.get(action_id)
            if action is None:
                errors.append(f'Task "{task.id}" references non-existent action "{action_id}"')
                continue
            if action_id in listed:
                errors.append(f'Action "{action_id}" is listed more than once')
                continue
            listed.add(action_id)
            if action.taskId != task.id:
                errors.append(
                    f'Action "{action_id}" belongs to task "{action.taskId}" '
                    f'but is listed under task "{task.id}"'
                )
            errors.extend(_check_action(action, actions))

    for action_id in actions:
        if action_id not in listed:
            errors.append(f'Action "{action_id}" is not listed by any task')

    result = ValidationResult(valid=not errors, errors=tuple(errors))
    if not result.valid:
        logger.info("Workflow validation failed", extra={"error_count": len(errors)})
    return result


def _check_action(action: Action, actions: dict[str, Action]) -> list[str]:
    errors: list[str] = []
    aid = action.id
    flow = action.flow

    if not action.type:
        errors.append(f'Action "{aid}" has no type')

    if flow.next and flow.next not in actions:
        errors.append(f'Action "{aid}" references non-existent next action "{flow.next}"')

    if flow.next_if and flow.next_if not in actions:
        errors.append(f'Action "{aid}" references non-existent next_if action "{flow.next_if}"')

    # Range checks are written so that NaN fails them.
    retry = flow.retry
    if retry is not None:
        if retry.strategy not in _RETRY_STRATEGIES:
            errors.append(f'Action "{aid}" has invalid retry strategy: "{retry.strategy}"')
        if retry.max_attempts < 1:
            errors.append(f'Action "{aid}" has invalid max_attempts: {retry.max_attempts}')
        if not retry.delay >= 0:
            errors.append(f'Action "{aid}" has invalid delay: {retry.delay}')

    timeout = flow.timeout
    if timeout is not None:
        if not timeout.duration >= 0:
            errors.append(f'Action "{aid}" has invalid timeout duration: {timeout.duration}')
        if timeout.on_timeout and timeout.on_timeout not in actions:
            errors.append(
                f'Action "{aid}" references non-existent on_timeout action "{timeout.on_timeout}"'
            )

    return errors
