"""
Chat Service - Data Schemas

Pydantic models for conversation turns, model responses, tool descriptors
and the HTTP payloads exchanged with the chat endpoint.
"""

from pydantic import BaseModel, Field, ConfigDict, field_validator
from typing import Optional, Dict, Any, List, Literal, Union, Callable, Annotated


# Placeholder used when the model omits a tool call id
DEFAULT_CALL_ID = "default_id"


class ChatBaseModel(BaseModel):
    """Base class for all chat service models"""
    model_config = ConfigDict(
        populate_by_name=True,
        use_enum_values=True
    )

    def to_json(self) -> str:
        """Serialize to JSON string"""
        return self.model_dump_json()

    @classmethod
    def from_json(cls, json_str: str):
        """Deserialize from JSON string"""
        return cls.model_validate_json(json_str)


# ============================================
# Tool Calls
# ============================================

class ToolCallRequest(ChatBaseModel):
    """A tool invocation requested by the model"""
    id: str = DEFAULT_CALL_ID
    name: str
    args: Dict[str, Any] = Field(default_factory=dict)

    @field_validator("id", mode="before")
    @classmethod
    def default_missing_id(cls, value):
        return value or DEFAULT_CALL_ID

    @field_validator("args", mode="before")
    @classmethod
    def default_missing_args(cls, value):
        return {} if value is None else value


class ToolDescriptor(BaseModel):
    """A named capability exposed by the toolkit"""
    model_config = ConfigDict(arbitrary_types_allowed=True)

    name: str = Field(..., min_length=1)
    description: str = ""
    input_schema: Dict[str, Any] = Field(
        default_factory=lambda: {"type": "object", "properties": {}}
    )
    invoke: Callable[..., Any]


# ============================================
# Conversation Turns
# ============================================

class UserTurn(ChatBaseModel):
    """Text sent by the user"""
    role: Literal["user"] = "user"
    text: str


class ModelTurn(ChatBaseModel):
    """Output of one model invocation"""
    role: Literal["assistant"] = "assistant"
    text: Optional[str] = None
    tool_calls: List[ToolCallRequest] = Field(default_factory=list)


class ToolResultTurn(ChatBaseModel):
    """Result (or failure) of one tool call, fed back to the model"""
    role: Literal["tool"] = "tool"
    tool_name: str
    call_id: str
    content: str
    is_error: bool = False


Turn = Annotated[
    Union[UserTurn, ModelTurn, ToolResultTurn],
    Field(discriminator="role")
]


class ModelResponse(ChatBaseModel):
    """Normalized response returned by a model client"""
    content: str = ""
    tool_calls: List[ToolCallRequest] = Field(default_factory=list)

    @field_validator("content", mode="before")
    @classmethod
    def default_missing_content(cls, value):
        return value or ""

    @property
    def has_content(self) -> bool:
        return bool(self.content)

    def to_turn(self) -> ModelTurn:
        return ModelTurn(text=self.content or None, tool_calls=list(self.tool_calls))


# ============================================
# HTTP Payloads
# ============================================

class ChatRequest(ChatBaseModel):
    """Body of POST /chat"""
    message: Optional[str] = None


class ChatResponse(ChatBaseModel):
    """Successful reply from POST /chat"""
    reply: str


class ErrorResponse(ChatBaseModel):
    """Error body returned by the API"""
    error: str
