"""
Orchestrator Main Entry Point

Builds the process-wide components once, in dependency order:
1. Tool registry (from the external toolkit, then frozen)
2. LLM client (bound to the registry's tools)
3. Tool dispatcher
4. Chat loop

Every request then goes through the same, read-only components.
"""

import logging
from typing import Any, Optional

from agents.shared.llm_client import LLMClient
from agents.shared.toolkit import load_registry
from orchestrator.chat_loop import ChatLoop
from orchestrator.dispatcher import ToolDispatcher
from orchestrator.registry import ToolRegistry
from orchestrator.settings import Settings

logger = logging.getLogger(__name__)


class Orchestrator:
    """Container for the chat service components"""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        registry: Optional[ToolRegistry] = None,
        llm_client: Optional[Any] = None
    ):
        """
        Initialize orchestrator components.

        Args:
            settings: Configuration (defaults to the environment)
            registry: Pre-built tool registry; loaded from the toolkit if omitted
            llm_client: Pre-built model client; an LLMClient if omitted
        """
        self.settings = settings or Settings()

        logger.info("Initializing tool registry...")
        if registry is None:
            registry = load_registry(self.settings.toolkit, self.settings.toolkit_factory)
        self.registry = registry.freeze()
        logger.info(f"Tool registry ready ({len(self.registry)} tools)")

        logger.info("Initializing LLM client...")
        if llm_client is None:
            llm = self.settings.llm
            llm_client = LLMClient(
                api_key=llm.api_key,
                base_url=llm.base_url,
                model=llm.model,
                temperature=llm.temperature,
                max_retries=llm.max_retries,
                timeout=llm.timeout,
                tools=self.registry.to_openai_tools(),
                system_prompt=llm.system_prompt
            )
        self.llm = llm_client
        logger.info("LLM client ready")

        self.dispatcher = ToolDispatcher(
            self.registry,
            concurrent=self.settings.dispatch.concurrent_tools,
            report_missing=self.settings.dispatch.report_unknown_tools
        )
        self.chat_loop = ChatLoop(llm_client=self.llm, dispatcher=self.dispatcher)

        logger.info("Orchestrator is READY")

    async def handle(self, message: Optional[str]) -> str:
        """Run one user message through the chat loop"""
        return await self.chat_loop.execute(message)
