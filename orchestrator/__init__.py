"""
Orchestrator - Tool-call orchestration for the chat service

Holds the conversation state, the tool registry and dispatcher, and the
chat loop that decides when a model response is final.
"""

from .registry import ToolRegistry
from .conversation import Conversation
from .dispatcher import ToolDispatcher, ToolOutcome
from .chat_loop import ChatLoop, ChatState, FALLBACK_REPLY

__all__ = [
    "ToolRegistry",
    "Conversation",
    "ToolDispatcher",
    "ToolOutcome",
    "ChatLoop",
    "ChatState",
    "FALLBACK_REPLY",
]
