"""Unit tests for configuration."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from flowbuilder.core.config import FlowBuilderConfig
from flowbuilder.graph.serializer import WorkflowFormat

_ENV_VARS = [
    "FLOWBUILDER_LOG_LEVEL",
    "FLOWBUILDER_LOG_FORMAT",
    "FLOWBUILDER_DEBUG",
    "FLOWBUILDER_DEFAULT_FORMAT",
    "FLOWBUILDER_JSON_INDENT",
    "FLOWBUILDER_WORKFLOW_VERSION",
]


@pytest.fixture(autouse=True)
def _clean_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


def test_config_defaults() -> None:
    """Test config default values."""
    config = FlowBuilderConfig()

    assert config.log_level == "INFO"
    assert config.log_format == "text"
    assert config.debug is False
    assert config.default_format is WorkflowFormat.JSON
    assert config.json_indent == 2
    assert config.workflow_version == "1.0"


def test_config_loads_from_dotenv(tmp_path: Path) -> None:
    (tmp_path / ".env").write_text(
        "\n".join(
            [
                "FLOWBUILDER_LOG_LEVEL=DEBUG",
                "FLOWBUILDER_DEFAULT_FORMAT=yaml",
                "FLOWBUILDER_JSON_INDENT=4",
                "",
            ]
        ),
        encoding="utf-8",
    )

    config = FlowBuilderConfig()

    assert config.log_level == "DEBUG"
    assert config.default_format is WorkflowFormat.YAML
    assert config.json_indent == 4


def test_environment_overrides_dotenv(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    (tmp_path / ".env").write_text("FLOWBUILDER_WORKFLOW_VERSION=2.0\n", encoding="utf-8")
    monkeypatch.setenv("FLOWBUILDER_WORKFLOW_VERSION", "3.0")

    assert FlowBuilderConfig().workflow_version == "3.0"


def test_config_rejects_negative_indent() -> None:
    with pytest.raises(ValueError):
        FlowBuilderConfig(json_indent=-1)


def test_setup_logging_debug_raises_package_level() -> None:
    FlowBuilderConfig(debug=True).setup_logging()

    assert logging.getLogger("flowbuilder").level == logging.DEBUG
