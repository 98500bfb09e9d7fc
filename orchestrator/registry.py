"""
Tool Registry - Named set of invocable toolkit capabilities

Populated once at process start by the toolkit integration, then frozen.
The orchestrator only reads from it.
"""

import logging
from typing import Dict, List, Optional, Any, Iterable

from agents.shared.schemas import ToolDescriptor

logger = logging.getLogger(__name__)


class ToolRegistry:
    """
    Registry of tool descriptors keyed by exact name.

    Stores for each tool:
    - Name (unique identifier, exact-match lookup)
    - Description and input schema (advertised to the model)
    - Invoke callable (executed by the dispatcher)
    """

    def __init__(self, tools: Optional[Iterable[ToolDescriptor]] = None):
        """Initialize registry, optionally pre-populated"""
        self._tools: Dict[str, ToolDescriptor] = {}
        self._frozen = False

        for tool in tools or []:
            self.register(tool)

    def register(self, tool: ToolDescriptor) -> None:
        """
        Add a tool to the registry.

        Args:
            tool: ToolDescriptor to add

        Raises:
            RuntimeError: If the registry has been frozen
            ValueError: If a tool with the same name is already registered
        """
        if self._frozen:
            raise RuntimeError("Tool registry is frozen")
        if tool.name in self._tools:
            raise ValueError(f"Tool '{tool.name}' is already registered")

        self._tools[tool.name] = tool
        logger.debug(f"Registered tool: {tool.name}")

    def freeze(self) -> "ToolRegistry":
        """Make the registry read-only for the rest of the process lifetime"""
        self._frozen = True
        return self

    @property
    def frozen(self) -> bool:
        return self._frozen

    def get(self, name: str) -> Optional[ToolDescriptor]:
        """
        Get a tool by exact name.

        Returns:
            ToolDescriptor or None if not found
        """
        return self._tools.get(name)

    def list(self) -> List[ToolDescriptor]:
        """All tools in registration order"""
        return list(self._tools.values())

    def names(self) -> List[str]:
        return list(self._tools.keys())

    def to_openai_tools(self) -> List[Dict[str, Any]]:
        """
        Render the registry as OpenAI function-tool definitions.

        Returns:
            List of {"type": "function", "function": {...}} dicts
        """
        return [
            {
                "type": "function",
                "function": {
                    "name": tool.name,
                    "description": tool.description,
                    "parameters": tool.input_schema,
                }
            }
            for tool in self._tools.values()
        ]

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __len__(self) -> int:
        return len(self._tools)
