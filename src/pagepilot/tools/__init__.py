# Tools package.

from pagepilot.tools.protocol import BaseTool, ToolDefinition, ToolProtocol

__all__ = [
    "ToolProtocol",
    "BaseTool",
    "ToolDefinition",
]
