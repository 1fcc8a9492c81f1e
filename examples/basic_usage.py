#!/usr/bin/env python3
"""Programmatic workflow editing example.

This demonstrates using the editor components directly:

* build a task with linked actions and retry/timeout policy
* validate the workflow
* export it to JSON and YAML and load it back into a fresh session
"""

from __future__ import annotations

import tempfile
from pathlib import Path

from flowbuilder import FlowBuilder, FlowBuilderConfig
from flowbuilder.graph.models import ActionType, RetryPolicy, TimeoutPolicy


def main() -> int:
    editor = FlowBuilder(FlowBuilderConfig(log_format="json"))
    store = editor.store

    ingest = store.add_task("Ingest")
    fetch = store.add_action(ingest, ActionType.HTTP, "Fetch", 10, 10)
    parse = store.add_action(ingest, ActionType.BUILTIN, "Parse", 160, 10)
    alert = store.add_action(ingest, ActionType.CMD, "Alert", 160, 120)

    store.link_actions(fetch, parse)
    store.update_action(
        fetch,
        parameters={"url": "https://example.com/feed", "method": "GET"},
        flow={
            "next": parse,
            "retry": RetryPolicy(strategy="exponential", max_attempts=3, delay=2),
            "timeout": TimeoutPolicy(duration=30, on_timeout=alert),
        },
    )

    result = editor.validate()
    print(f"valid={result.valid} errors={list(result.errors)}")

    with tempfile.TemporaryDirectory() as tmp:
        for name in ("workflow.json", "workflow.yaml"):
            path = editor.export_to_path(Path(tmp) / name)
            reloaded = FlowBuilder(editor.config)
            snapshot = reloaded.import_from_path(path)
            print(f"{name}: round trip equal = {snapshot == store.snapshot()}")

    print(editor.export_text("yaml"))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
