"""Configuration for the workflow editor core."""

import logging
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from flowbuilder.graph.serializer import WorkflowFormat
from flowbuilder.logging import configure_logging


class FlowBuilderConfig(BaseSettings):
    """Settings for a workflow editor session.

    Every field can be overridden with a ``FLOWBUILDER_``-prefixed environment
    variable or a local ``.env`` file.
    """

    log_level: str = Field(
        default="INFO",
        description="Logging level",
    )
    log_format: Literal["text", "json"] = Field(
        default="text",
        description="Plain text log lines or one JSON object per record",
    )
    debug: bool = Field(
        default=False,
        description="Enable debug logging for flowbuilder loggers",
    )

    default_format: WorkflowFormat = Field(
        default=WorkflowFormat.JSON,
        description="Encoding used for import/export when none is given",
    )
    json_indent: int = Field(
        default=2,
        ge=0,
        description="Indentation used when encoding workflows",
    )
    workflow_version: str = Field(
        default="1.0",
        description="Format version stamped on new workflows",
    )

    model_config = SettingsConfigDict(
        env_prefix="FLOWBUILDER_",
        env_file=".env",
        extra="ignore",
    )

    def setup_logging(self) -> None:
        """Configure logging based on settings."""
        if self.log_format == "json":
            configure_logging(self.log_level)
        else:
            level = getattr(logging, self.log_level.upper(), logging.INFO)
            logging.basicConfig(
                level=level,
                format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )

        if self.debug:
            logging.getLogger("flowbuilder").setLevel(logging.DEBUG)
