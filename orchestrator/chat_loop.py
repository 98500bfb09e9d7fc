"""
Chat Loop - Tool-call orchestration for one user message

Drives a bounded cycle:
1. Ask the model - with the user's message
2. Act - if the model asked for tools, dispatch them
3. Ask again - once, with the tool results folded in
4. Reply - a single final string

There is at most one dispatch round per request; the second model response
is final even if it asks for more tools.
"""

import asyncio
import inspect
import logging
from enum import Enum
from typing import Any, List, Optional

from agents.shared.errors import InvalidRequest
from agents.shared.schemas import ModelResponse, UserTurn
from orchestrator.conversation import Conversation
from orchestrator.dispatcher import ToolDispatcher, ToolOutcome

logger = logging.getLogger(__name__)

FALLBACK_REPLY = "I couldn't process that request."


class ChatState(str, Enum):
    AWAITING_FIRST_MODEL_RESPONSE = "awaiting_first_model_response"
    DISPATCHING_TOOLS = "dispatching_tools"
    AWAITING_SECOND_MODEL_RESPONSE = "awaiting_second_model_response"
    DONE = "done"


class ChatRun:
    """Per-request record of the loop's progress"""

    def __init__(self, message: str):
        self.message = message
        self.state = ChatState.AWAITING_FIRST_MODEL_RESPONSE
        self.conversation = Conversation()
        self.outcomes: List[ToolOutcome] = []
        self.model_calls = 0
        self.reply: Optional[str] = None

    def finish(self, reply: str) -> str:
        self.reply = reply
        self.state = ChatState.DONE
        return reply


class ChatLoop:
    """
    Orchestrates model invocation and tool dispatch for one message at a time.

    The model client and dispatcher are built once at process start and
    shared read-only by every request.
    """

    def __init__(self, llm_client: Any, dispatcher: ToolDispatcher):
        """
        Initialize chat loop.

        Args:
            llm_client: Object with invoke(turns) -> ModelResponse (sync or async)
            dispatcher: Tool dispatcher bound to the tool registry
        """
        self.llm = llm_client
        self.dispatcher = dispatcher

    async def execute(self, message: Optional[str]) -> str:
        """
        Produce the final reply for a user message.

        Raises:
            InvalidRequest: If the message is missing or empty
            Exception: Whatever the model client raises, unchanged
        """
        run = await self.run(message)
        return run.reply

    async def run(self, message: Optional[str]) -> ChatRun:
        """Execute the loop and return the full per-request record"""
        if not message:
            raise InvalidRequest()

        logger.debug(f"Starting chat run: {message[:200]}")

        run = ChatRun(message)
        run.conversation.append(UserTurn(text=message))

        # First model response
        response = await self._invoke_model(run)
        run.conversation.append(response.to_turn())

        # Content takes precedence over any tool calls in the same response
        if response.has_content:
            if response.tool_calls:
                logger.warning(
                    f"Model returned content and {len(response.tool_calls)} tool call(s); "
                    f"ignoring the tool calls"
                )
            run.finish(response.content)
            return run

        if not response.tool_calls:
            logger.warning("Model returned neither content nor tool calls, using fallback reply")
            run.finish(FALLBACK_REPLY)
            return run

        # Single dispatch round
        run.state = ChatState.DISPATCHING_TOOLS
        run.outcomes = await self.dispatcher.dispatch_all(response.tool_calls)

        for outcome in run.outcomes:
            turn = outcome.to_turn()
            if turn is not None:
                run.conversation.append(turn)

        logger.debug(f"Updated conversation: {run.conversation!r}")

        # Second (final) model response
        run.state = ChatState.AWAITING_SECOND_MODEL_RESPONSE
        final = await self._invoke_model(run)
        if final.tool_calls:
            logger.info(
                f"Final model response requested {len(final.tool_calls)} more tool call(s); "
                f"not dispatching"
            )

        run.finish(final.content)
        return run

    async def _invoke_model(self, run: ChatRun) -> ModelResponse:
        """Invoke the model with a snapshot of the conversation"""
        run.model_calls += 1
        turns = run.conversation.turns

        if inspect.iscoroutinefunction(self.llm.invoke):
            response = await self.llm.invoke(turns)
        else:
            response = await asyncio.to_thread(self.llm.invoke, turns)

        logger.info(
            f"Model response {run.model_calls}: content={bool(response.content)}, "
            f"tool_calls={[call.name for call in response.tool_calls]}"
        )
        return response
