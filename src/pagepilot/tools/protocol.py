# Tool protocol shared by every agent-facing tool.
# Created: 2026-09-30

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable


@dataclass(frozen=True)
class ToolDefinition:
    """What an LLM needs to know to call a tool."""

    name: str
    description: str
    parameters: dict[str, Any]
    trust_level: str = "standard"

    def to_openai_schema(self) -> dict[str, Any]:
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": self.parameters,
            },
        }

    def to_anthropic_schema(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "input_schema": self.parameters,
        }


@runtime_checkable
class ToolProtocol(Protocol):
    @property
    def name(self) -> str: ...

    @property
    def definition(self) -> ToolDefinition: ...

    async def execute(self, **params: Any) -> str: ...


class BaseTool(ABC):
    """Base class for tools: subclasses declare metadata and implement execute()."""

    @property
    @abstractmethod
    def name(self) -> str: ...

    @property
    @abstractmethod
    def description(self) -> str: ...

    @property
    def trust_level(self) -> str:
        return "standard"

    @property
    @abstractmethod
    def parameters(self) -> dict[str, Any]: ...

    @property
    def definition(self) -> ToolDefinition:
        return ToolDefinition(
            name=self.name,
            description=self.description,
            parameters=self.parameters,
            trust_level=self.trust_level,
        )

    @abstractmethod
    async def execute(self, **params: Any) -> str: ...

    @staticmethod
    def _error(message: str) -> str:
        return f"Error: {message}"


__all__ = ["ToolDefinition", "ToolProtocol", "BaseTool"]
