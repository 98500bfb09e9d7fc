"""
Tool Dispatcher - Resolve, execute and normalize model-issued tool calls

Every call produces a ToolOutcome. Tool failures are absorbed here and turned
into data the model can read on its next turn; nothing a tool raises escapes
the dispatcher.
"""

import asyncio
import inspect
import json
import logging
from typing import Any, List, Literal, Optional, Sequence

from pydantic import BaseModel, ConfigDict

from agents.shared.errors import ToolResolutionMiss, ToolExecutionFailure
from agents.shared.schemas import ToolCallRequest, ToolDescriptor, ToolResultTurn
from orchestrator.registry import ToolRegistry

logger = logging.getLogger(__name__)


class ToolOutcome(BaseModel):
    """Recoverable result of dispatching one tool call"""
    model_config = ConfigDict(arbitrary_types_allowed=True)

    call: ToolCallRequest
    status: Literal["ok", "error", "missing"]
    content: Optional[str] = None
    error: Optional[Exception] = None

    @property
    def is_error(self) -> bool:
        return self.status != "ok"

    def to_turn(self) -> Optional[ToolResultTurn]:
        """Result turn for the conversation, or None when the call is dropped"""
        if self.content is None:
            return None
        return ToolResultTurn(
            tool_name=self.call.name,
            call_id=self.call.id,
            content=self.content,
            is_error=self.is_error
        )


def stringify_result(result: Any) -> str:
    """Render a tool's return value as message content"""
    if isinstance(result, str):
        return result
    try:
        return json.dumps(result, default=str)
    except (TypeError, ValueError):
        return str(result)


class ToolDispatcher:
    """
    Dispatches tool calls against a ToolRegistry.

    Calls run sequentially by default. With concurrent=True they run together,
    but outcomes are still returned in the order the model emitted the calls.
    """

    def __init__(
        self,
        registry: ToolRegistry,
        concurrent: bool = False,
        report_missing: bool = False
    ):
        """
        Initialize dispatcher.

        Args:
            registry: Registry used to resolve tool names
            concurrent: Execute the calls of one round concurrently
            report_missing: Emit an error turn for unknown tools instead of
                dropping the call
        """
        self.registry = registry
        self.concurrent = concurrent
        self.report_missing = report_missing

    async def dispatch(self, call: ToolCallRequest) -> ToolOutcome:
        """
        Resolve and execute a single tool call.

        Args:
            call: Tool call emitted by the model

        Returns:
            ToolOutcome with status ok, error or missing
        """
        tool = self.registry.get(call.name)
        if tool is None:
            miss = ToolResolutionMiss(call.name)
            logger.error(f"Unknown tool call: {call.name} (id={call.id})")
            content = str(miss) if self.report_missing else None
            return ToolOutcome(call=call, status="missing", content=content, error=miss)

        logger.info(f"Processing tool call: {call.name} (id={call.id}) args={call.args}")

        try:
            result = await self._invoke(tool, call)
        except Exception as e:
            failure = ToolExecutionFailure(call.name, e)
            logger.error(f"Error executing tool {call.name}: {e}", exc_info=True)
            return ToolOutcome(
                call=call,
                status="error",
                content=f"Error executing tool: {failure}",
                error=failure
            )

        content = stringify_result(result)
        logger.info(f"Tool {call.name} executed successfully: {content[:200]}")
        return ToolOutcome(call=call, status="ok", content=content)

    async def dispatch_all(self, calls: Sequence[ToolCallRequest]) -> List[ToolOutcome]:
        """
        Dispatch every call of one round.

        Returns:
            Outcomes in the same order as calls
        """
        if self.concurrent and len(calls) > 1:
            return list(await asyncio.gather(*(self.dispatch(call) for call in calls)))

        outcomes = []
        for call in calls:
            outcomes.append(await self.dispatch(call))
        return outcomes

    async def _invoke(self, tool: ToolDescriptor, call: ToolCallRequest) -> Any:
        """Run the tool's capability; blocking tools go to a worker thread"""
        args = dict(call.args)

        if inspect.iscoroutinefunction(tool.invoke):
            return await tool.invoke(args)

        result = await asyncio.to_thread(tool.invoke, args)
        if inspect.isawaitable(result):
            result = await result
        return result
