"""flowbuilder.

Workflow definition model for a visual flow editor:
- tasks and actions linked by conditional control-flow edges
- retry and timeout policy metadata
- validation and JSON/YAML import/export
"""

__version__ = "0.1.0"

from flowbuilder.core.config import FlowBuilderConfig
from flowbuilder.core.editor import FlowBuilder

__all__ = ["__version__", "FlowBuilder", "FlowBuilderConfig"]
