"""
Configuration for the chat service.

Values come from the environment; a local .env file is loaded first.
"""

import os
from dataclasses import dataclass, field
from typing import List, Optional

from dotenv import load_dotenv

from agents.shared.toolkit import ToolkitSettings

load_dotenv()


def _env_bool(key: str, default: bool = False) -> bool:
    value = os.getenv(key)
    if value is None or value == "":
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _env_optional(key: str) -> Optional[str]:
    return os.getenv(key) or None


@dataclass
class LLMSettings:
    """Model client configuration"""
    api_key: Optional[str] = field(default_factory=lambda: _env_optional("OPENAI_API_KEY"))
    base_url: Optional[str] = field(default_factory=lambda: _env_optional("OPENAI_BASE_URL"))
    model: str = field(default_factory=lambda: os.getenv("LLM_MODEL", "gpt-4o-mini"))
    temperature: float = field(default_factory=lambda: float(os.getenv("LLM_TEMPERATURE", "0")))
    max_retries: int = field(default_factory=lambda: int(os.getenv("LLM_MAX_RETRIES", "1")))
    timeout: int = field(default_factory=lambda: int(os.getenv("LLM_TIMEOUT", "30")))
    system_prompt: Optional[str] = field(default_factory=lambda: _env_optional("LLM_SYSTEM_PROMPT"))


@dataclass
class DispatchSettings:
    """Tool dispatch behaviour"""
    concurrent_tools: bool = field(default_factory=lambda: _env_bool("CHAT_CONCURRENT_TOOLS"))
    report_unknown_tools: bool = field(default_factory=lambda: _env_bool("CHAT_REPORT_UNKNOWN_TOOLS"))


@dataclass
class Settings:
    """Main configuration container"""
    llm: LLMSettings = field(default_factory=LLMSettings)
    toolkit: ToolkitSettings = field(default_factory=ToolkitSettings.from_env)
    toolkit_factory: Optional[str] = field(default_factory=lambda: _env_optional("TOOLKIT_FACTORY"))
    dispatch: DispatchSettings = field(default_factory=DispatchSettings)

    def validate(self) -> List[str]:
        """Validate configuration and return list of errors"""
        errors = []

        if not self.llm.api_key:
            errors.append("OPENAI_API_KEY is required")
        if self.llm.max_retries < 1:
            errors.append("LLM_MAX_RETRIES must be at least 1")
        if self.toolkit_factory and ":" not in self.toolkit_factory:
            errors.append("TOOLKIT_FACTORY must look like 'module:attribute'")

        return errors
