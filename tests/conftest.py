"""Test configuration and fixtures."""

from pathlib import Path

import pytest

from flowbuilder.core.config import FlowBuilderConfig
from flowbuilder.graph.ids import IdGenerator
from flowbuilder.graph.models import RetryPolicy, TimeoutPolicy
from flowbuilder.graph.store import WorkflowStore


@pytest.fixture
def id_generator() -> IdGenerator:
    """Provide an id generator pinned to a fixed wall clock."""
    return IdGenerator(clock=lambda: 1_700_000_000.0)


@pytest.fixture
def store(id_generator: IdGenerator) -> WorkflowStore:
    """Provide an empty store."""
    return WorkflowStore(ids=id_generator)


@pytest.fixture
def populated_store(store: WorkflowStore) -> WorkflowStore:
    """Provide a store with two tasks, linked actions and policy metadata."""
    ingest = store.add_task("Ingest")
    fetch = store.add_action(ingest, "http", "Fetch", 10, 10)
    parse = store.add_action(ingest, "builtin", "Parse", 120, 10.5)
    fallback = store.add_action(ingest, "cmd", "Fallback", 120, 90)

    store.link_actions(fetch, parse)
    store.update_action(
        fetch,
        description="GET the upstream feed",
        parameters={"url": "https://example.com/feed", "verify": True, "retries": 3, "ratio": 0.25},
        outputs={"body": "response.body"},
        flow={
            "next": parse,
            "next_if": fallback,
            "retry": RetryPolicy(strategy="exponential", max_attempts=5, delay=1.5),
            "timeout": TimeoutPolicy(duration=30, on_timeout=fallback),
        },
    )

    publish = store.add_task("Publish")
    store.add_action(publish, "wasm", "Render", 0, 0)
    store.update_task(publish, description="Push results downstream")
    return store


@pytest.fixture
def config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> FlowBuilderConfig:
    """Provide a config isolated from the developer's environment."""
    monkeypatch.chdir(tmp_path)
    return FlowBuilderConfig(log_level="DEBUG", debug=True)
