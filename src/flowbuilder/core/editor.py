"""Editor session facade."""

import logging
from pathlib import Path

from flowbuilder.core.config import FlowBuilderConfig
from flowbuilder.graph.models import WorkflowSnapshot
from flowbuilder.graph.serializer import WorkflowFormat, export_workflow, import_workflow
from flowbuilder.graph.store import WorkflowStore
from flowbuilder.graph.validator import ValidationResult, validate

logger = logging.getLogger(__name__)


class FlowBuilder:
    """One editor session over a single owned workflow store.

    The presentation layer mutates ``store`` directly and goes through this
    facade for validation and for moving workflows in and out as text.
    """

    def __init__(
        self,
        config: FlowBuilderConfig | None = None,
        store: WorkflowStore | None = None,
    ) -> None:
        """Initialize the session.

        Args:
            config: Configuration object. If None, loads from environment.
            store: Store to edit. If None, a fresh empty workflow is created.
        """
        self.config = config or FlowBuilderConfig()
        self.config.setup_logging()

        self.store = store or WorkflowStore(version=self.config.workflow_version)
        logger.info("Editor session started")

    def validate(self) -> ValidationResult:
        return validate(self.store.snapshot())

    def export_text(self, fmt: WorkflowFormat | str | None = None) -> str:
        return export_workflow(
            self.store,
            fmt or self.config.default_format,
            indent=self.config.json_indent,
        )

    def import_text(
        self, text: str, fmt: WorkflowFormat | str | None = None
    ) -> WorkflowSnapshot:
        """Replace the session's workflow with one decoded from ``text``.

        Raises:
            FormatError: The text does not parse.
            SchemaError: The parsed document has the wrong shape.
        """
        return import_workflow(self.store, text, fmt or self.config.default_format)

    def export_to_path(self, path: Path, fmt: WorkflowFormat | str | None = None) -> Path:
        """Write the workflow to ``path``; the format defaults to the file suffix."""
        fmt = fmt or WorkflowFormat.from_path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.export_text(fmt), encoding="utf-8")
        logger.info(f"Workflow written to: {path}")
        return path

    def import_from_path(
        self, path: Path, fmt: WorkflowFormat | str | None = None
    ) -> WorkflowSnapshot:
        fmt = fmt or WorkflowFormat.from_path(path)
        logger.info(f"Loading workflow from: {path}")
        return self.import_text(path.read_text(encoding="utf-8"), fmt)
