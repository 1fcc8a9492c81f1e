"""Error taxonomy for the workflow graph model.

Structural graph defects are *not* exceptions: the validator reports them as a
list because a workflow may be saved in an invalid-but-recoverable state.
"""

from __future__ import annotations


class WorkflowError(Exception):
    """Base class for workflow model errors."""


class WorkflowReferenceError(WorkflowError, LookupError):
    """Raised when a mutation targets an owning entity that does not exist."""

    def __init__(self, kind: str, ref_id: str) -> None:
        self.kind = kind
        self.ref_id = ref_id
        super().__init__(f"Unknown {kind}: {ref_id!r}")


class FormatError(WorkflowError, ValueError):
    """Raised when text does not parse under the declared format's grammar."""

    def __init__(self, fmt: str, message: str) -> None:
        self.fmt = fmt
        super().__init__(f"Invalid {fmt.upper()} format: {message}")


class SchemaError(WorkflowError, ValueError):
    """Raised when parsed text does not have the workflow document shape."""
