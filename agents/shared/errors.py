"""
Chat Service - Error Taxonomy

Tool failures are recoverable and end up in the conversation as data.
Model failures are fatal for the request and propagate to the HTTP boundary.
"""

from typing import Optional


class ChatError(Exception):
    """Base class for all chat service errors"""


class InvalidRequest(ChatError):
    """Inbound message is missing or empty"""

    def __init__(self, message: str = "Message is required"):
        super().__init__(message)


class ToolResolutionMiss(ChatError):
    """Model requested a tool that is not in the registry"""

    def __init__(self, tool_name: str):
        self.tool_name = tool_name
        super().__init__(f"Unknown tool: {tool_name}")


class ToolExecutionFailure(ChatError):
    """A tool's capability raised while executing"""

    def __init__(self, tool_name: str, cause: Exception):
        self.tool_name = tool_name
        self.cause = cause
        super().__init__(str(cause))


class ModelInvocationFailure(ChatError):
    """The model client failed (network, auth, malformed response)"""

    def __init__(self, message: str, cause: Optional[Exception] = None):
        self.cause = cause
        super().__init__(message)
