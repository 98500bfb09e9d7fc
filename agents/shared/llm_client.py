"""
Chat Service - LLM Client Wrapper

OpenAI-compatible chat completion client with tool calling.
Turns a conversation into chat messages and the API reply into a
ModelResponse. Every failure surfaces as ModelInvocationFailure.
"""

import os
import json
import time
import logging
from typing import List, Dict, Any, Optional, Sequence
from openai import OpenAI, APIError, APITimeoutError, RateLimitError

from agents.shared.errors import ModelInvocationFailure
from agents.shared.schemas import (
    Turn,
    UserTurn,
    ModelTurn,
    ToolResultTurn,
    ToolCallRequest,
    ModelResponse
)

logger = logging.getLogger(__name__)


def turn_to_message(turn: Turn) -> Dict[str, Any]:
    """Convert a conversation turn to an OpenAI chat message dict"""
    if isinstance(turn, UserTurn):
        return {"role": "user", "content": turn.text}

    if isinstance(turn, ModelTurn):
        message: Dict[str, Any] = {"role": "assistant", "content": turn.text}
        if turn.tool_calls:
            message["tool_calls"] = [
                {
                    "id": call.id,
                    "type": "function",
                    "function": {
                        "name": call.name,
                        "arguments": json.dumps(call.args)
                    }
                } for call in turn.tool_calls
            ]
        return message

    if isinstance(turn, ToolResultTurn):
        return {
            "role": "tool",
            "tool_call_id": turn.call_id,
            "content": turn.content
        }

    raise TypeError(f"Unsupported turn type: {type(turn).__name__}")


def parse_tool_calls(raw_calls: Optional[List[Dict[str, Any]]]) -> List[ToolCallRequest]:
    """
    Parse tool calls from a chat completion message.

    Raises:
        ModelInvocationFailure: If a call's arguments are not a JSON object
    """
    calls = []
    for raw in raw_calls or []:
        function = raw.get("function") or {}
        arguments = function.get("arguments") or "{}"
        try:
            args = json.loads(arguments) if isinstance(arguments, str) else arguments
        except json.JSONDecodeError as e:
            raise ModelInvocationFailure(
                f"Malformed arguments for tool call {function.get('name')}: {e}", e
            ) from e
        if not function.get("name"):
            raise ModelInvocationFailure("Tool call is missing a function name")
        if not isinstance(args, dict):
            raise ModelInvocationFailure(
                f"Tool call {function.get('name')} arguments must be an object"
            )
        calls.append(ToolCallRequest(id=raw.get("id"), name=function.get("name"), args=args))
    return calls


class LLMClient:
    """
    Wrapper for LLM API calls with error handling.
    Compatible with OpenAI and other OpenAI-style APIs.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        model: str = "gpt-4o-mini",
        temperature: float = 0.0,
        max_retries: int = 1,
        timeout: int = 30,
        tools: Optional[List[Dict[str, Any]]] = None,
        system_prompt: Optional[str] = None,
        client: Optional[Any] = None
    ):
        """
        Initialize LLM client.

        Args:
            api_key: API key (defaults to OPENAI_API_KEY env var)
            base_url: Base URL (defaults to OPENAI_BASE_URL env var)
            model: Model name
            temperature: Sampling temperature used by invoke()
            max_retries: Attempts per call; 1 means no retry
            timeout: Timeout in seconds for API calls
            tools: OpenAI function-tool definitions bound to every invoke()
            system_prompt: Optional system message prepended by invoke()
            client: Pre-built OpenAI-compatible client (skips construction)
        """
        self.api_key = api_key or os.getenv("OPENAI_API_KEY")
        self.base_url = base_url or os.getenv("OPENAI_BASE_URL")
        self.model = model
        self.temperature = temperature
        self.max_retries = max(1, max_retries)
        self.timeout = timeout
        self.tools = tools or []
        self.system_prompt = system_prompt

        if client is not None:
            self.client = client
        else:
            if not self.api_key:
                raise ValueError("API key is required. Set OPENAI_API_KEY environment variable.")

            self.client = OpenAI(
                api_key=self.api_key,
                base_url=self.base_url,
                timeout=self.timeout,
                max_retries=0
            )

        logger.info(
            f"LLM Client initialized: model={self.model}, base_url={self.base_url}, "
            f"tools={len(self.tools)}"
        )

    def chat_completion(
        self,
        messages: List[Dict[str, Any]],
        temperature: Optional[float] = None,
        tools: Optional[List[Dict[str, Any]]] = None
    ) -> Dict[str, Any]:
        """
        Make a chat completion request.

        Args:
            messages: List of message dicts with 'role' and 'content'
            temperature: Sampling temperature (0-2), defaults to the client's
            tools: Optional list of tools for function calling

        Returns:
            Dict containing the API response

        Raises:
            ModelInvocationFailure: If all attempts fail
        """
        last_error = None

        for attempt in range(self.max_retries):
            try:
                logger.debug(f"LLM API call attempt {attempt + 1}/{self.max_retries}")

                kwargs = {
                    "model": self.model,
                    "messages": messages,
                    "temperature": self.temperature if temperature is None else temperature
                }

                if tools:
                    kwargs["tools"] = tools

                response = self.client.chat.completions.create(**kwargs)

                logger.debug(f"LLM API call successful on attempt {attempt + 1}")

                # Convert to dict for easier handling
                usage = response.usage
                return {
                    "id": response.id,
                    "model": response.model,
                    "choices": [
                        {
                            "index": choice.index,
                            "message": {
                                "role": choice.message.role,
                                "content": choice.message.content,
                                "tool_calls": [
                                    {
                                        "id": tc.id,
                                        "type": tc.type,
                                        "function": {
                                            "name": tc.function.name,
                                            "arguments": tc.function.arguments
                                        }
                                    } for tc in choice.message.tool_calls
                                ] if choice.message.tool_calls else None
                            },
                            "finish_reason": choice.finish_reason
                        } for choice in response.choices
                    ],
                    "usage": {
                        "prompt_tokens": usage.prompt_tokens,
                        "completion_tokens": usage.completion_tokens,
                        "total_tokens": usage.total_tokens
                    } if usage else None
                }

            except RateLimitError as e:
                last_error = e
                wait_time = 2 ** attempt  # Exponential backoff
                logger.warning(f"Rate limit hit on attempt {attempt + 1}/{self.max_retries}")
                if attempt < self.max_retries - 1:
                    time.sleep(wait_time)

            except APITimeoutError as e:
                last_error = e
                logger.warning(f"API timeout on attempt {attempt + 1}/{self.max_retries}: {e}")
                if attempt < self.max_retries - 1:
                    time.sleep(1)

            except APIError as e:
                last_error = e
                logger.error(f"API error on attempt {attempt + 1}/{self.max_retries}: {e}")
                if attempt < self.max_retries - 1:
                    time.sleep(2 ** attempt)

            except Exception as e:
                last_error = e
                logger.error(f"Unexpected error on attempt {attempt + 1}/{self.max_retries}: {e}")
                if attempt < self.max_retries - 1:
                    time.sleep(1)

        error_msg = f"LLM API call failed after {self.max_retries} attempt(s): {last_error}"
        logger.error(error_msg)
        raise ModelInvocationFailure(error_msg, last_error)

    def build_messages(self, conversation: Sequence[Turn]) -> List[Dict[str, Any]]:
        """Chat messages for a conversation, with the system prompt first"""
        messages = []

        if self.system_prompt:
            messages.append({"role": "system", "content": self.system_prompt})

        messages.extend(turn_to_message(turn) for turn in conversation)
        return messages

    def invoke(self, conversation: Sequence[Turn]) -> ModelResponse:
        """
        Send the conversation to the model with the bound tools.

        Args:
            conversation: Turns in chronological order

        Returns:
            ModelResponse with content and requested tool calls

        Raises:
            ModelInvocationFailure: On API failure or malformed response
        """
        response = self.chat_completion(
            self.build_messages(conversation),
            tools=self.tools or None
        )

        choices = response.get("choices") or []
        if not choices:
            raise ModelInvocationFailure("Model returned no choices")

        message = choices[0]["message"]
        content = message.get("content")
        if content is not None and not isinstance(content, str):
            raise ModelInvocationFailure(f"Unexpected content type: {type(content).__name__}")

        return ModelResponse(
            content=content or "",
            tool_calls=parse_tool_calls(message.get("tool_calls"))
        )

