"""Core package initialization."""

from flowbuilder.core.config import FlowBuilderConfig
from flowbuilder.core.editor import FlowBuilder

__all__ = [
    "FlowBuilder",
    "FlowBuilderConfig",
]
