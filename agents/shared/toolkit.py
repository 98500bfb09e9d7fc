"""
Toolkit Integration - Build the tool registry from an external agent toolkit

The toolkit is an external package. It is located through an import path
("module:attribute") naming a factory that accepts the provider identity,
provider credential, network and signing credential, and returns the tools.
Those four values are passed through untouched.
"""

import importlib
import logging
import os
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, Optional

from agents.shared.schemas import ToolDescriptor
from orchestrator.registry import ToolRegistry

logger = logging.getLogger(__name__)


@dataclass
class ToolkitSettings:
    """Opaque values forwarded to the toolkit constructor"""
    provider: str = "blockfrost"
    provider_api_key: str = ""
    network: str = "testnet"
    private_key: str = field(default="", repr=False)

    @classmethod
    def from_env(cls) -> "ToolkitSettings":
        return cls(
            provider=os.getenv("CARDANO_PROVIDER") or "blockfrost",
            provider_api_key=os.getenv("CARDANO_PROVIDER_API_KEY", ""),
            network=os.getenv("CARDANO_NETWORK") or "testnet",
            private_key=os.getenv("CARDANO_PRIVATE_KEY", ""),
        )


def resolve_factory(path: str) -> Callable[..., Iterable[Any]]:
    """
    Import a toolkit factory from "module:attribute".

    Raises:
        ValueError: If the path is malformed or does not name a callable
        ImportError: If the module cannot be imported
    """
    module_name, sep, attribute = path.partition(":")
    if not sep or not module_name or not attribute:
        raise ValueError(f"Toolkit factory must look like 'module:attribute', got '{path}'")

    module = importlib.import_module(module_name)
    factory = module
    for part in attribute.split("."):
        factory = getattr(factory, part)

    if not callable(factory):
        raise ValueError(f"Toolkit factory '{path}' is not callable")
    return factory


def _input_schema(tool: Any) -> Dict[str, Any]:
    schema = getattr(tool, "input_schema", None)
    if isinstance(schema, dict):
        return schema

    # pydantic model classes (e.g. LangChain-style args_schema)
    args_schema = getattr(tool, "args_schema", None)
    if isinstance(args_schema, dict):
        return args_schema
    if args_schema is not None and hasattr(args_schema, "model_json_schema"):
        return args_schema.model_json_schema()
    # pydantic v1 models
    if args_schema is not None and hasattr(args_schema, "schema"):
        return args_schema.schema()

    return {"type": "object", "properties": {}}


def to_descriptor(tool: Any) -> ToolDescriptor:
    """
    Adapt a toolkit tool to a ToolDescriptor.

    Accepts ToolDescriptor instances, or any object exposing ``name`` and a
    callable ``invoke``.
    """
    if isinstance(tool, ToolDescriptor):
        return tool

    name = getattr(tool, "name", None)
    invoke = getattr(tool, "invoke", None)
    if not name or not callable(invoke):
        raise TypeError(f"Toolkit tool {tool!r} must expose 'name' and a callable 'invoke'")

    return ToolDescriptor(
        name=name,
        description=getattr(tool, "description", "") or "",
        input_schema=_input_schema(tool),
        invoke=invoke
    )


def load_registry(
    settings: ToolkitSettings,
    factory_path: Optional[str] = None,
    factory: Optional[Callable[..., Iterable[Any]]] = None
) -> ToolRegistry:
    """
    Build and freeze the process-wide tool registry.

    Args:
        settings: Toolkit pass-through configuration
        factory_path: "module:attribute" of the toolkit factory
        factory: Factory callable, takes precedence over factory_path

    Returns:
        Frozen ToolRegistry
    """
    registry = ToolRegistry()

    if factory is None and factory_path:
        factory = resolve_factory(factory_path)

    if factory is None:
        logger.warning("No toolkit factory configured; the model will have no tools")
        return registry.freeze()

    tools = factory(
        provider=settings.provider,
        api_key=settings.provider_api_key,
        network=settings.network,
        private_key=settings.private_key,
    )

    for tool in tools:
        registry.register(to_descriptor(tool))

    logger.info(f"Loaded {len(registry)} toolkit tools on {settings.network}: {registry.names()}")
    return registry.freeze()
