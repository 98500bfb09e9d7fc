"""
Chat Service - Test Fixtures

Shared fixtures: a small wallet toolkit, scripted model clients, and fake
OpenAI SDK responses. No network access is needed.
"""

import pytest
from types import SimpleNamespace
from unittest.mock import Mock

from agents.shared.schemas import ToolDescriptor, ModelResponse, ToolCallRequest
from orchestrator.registry import ToolRegistry
from orchestrator.dispatcher import ToolDispatcher
from orchestrator.chat_loop import ChatLoop


def tool_call(name: str, call_id: str = None, **args) -> ToolCallRequest:
    """Helper to build a tool call request"""
    return ToolCallRequest(id=call_id, name=name, args=args)


def scripted_model(*responses) -> Mock:
    """Model client whose invoke() returns the given responses in order"""
    model = Mock()
    model.invoke = Mock(side_effect=list(responses))
    return model


def fake_completion(content=None, tool_calls=None) -> SimpleNamespace:
    """Object shaped like an OpenAI ChatCompletion"""
    raw_calls = None
    if tool_calls:
        raw_calls = [
            SimpleNamespace(
                id=call_id,
                type="function",
                function=SimpleNamespace(name=name, arguments=arguments)
            )
            for call_id, name, arguments in tool_calls
        ]

    return SimpleNamespace(
        id="chatcmpl-test",
        model="gpt-4o-mini",
        choices=[
            SimpleNamespace(
                index=0,
                message=SimpleNamespace(role="assistant", content=content, tool_calls=raw_calls),
                finish_reason="tool_calls" if raw_calls else "stop"
            )
        ],
        usage=SimpleNamespace(prompt_tokens=12, completion_tokens=5, total_tokens=17)
    )


@pytest.fixture
def wallet_tools():
    """Wallet tools; each is a Mock so calls can be inspected"""
    get_balance = Mock(return_value="42 ADA")
    get_address = Mock(return_value={"address": "addr_test1qz"})
    send_ada = Mock(side_effect=RuntimeError("Insufficient funds"))

    return {
        "getBalance": get_balance,
        "getAddress": get_address,
        "sendAda": send_ada,
    }


@pytest.fixture
def registry(wallet_tools):
    """Frozen registry over the wallet tools"""
    return ToolRegistry([
        ToolDescriptor(
            name="getBalance",
            description="Get the wallet balance",
            invoke=wallet_tools["getBalance"]
        ),
        ToolDescriptor(
            name="getAddress",
            description="Get the wallet address",
            invoke=wallet_tools["getAddress"]
        ),
        ToolDescriptor(
            name="sendAda",
            description="Send ADA to an address",
            input_schema={
                "type": "object",
                "properties": {
                    "to": {"type": "string"},
                    "amount": {"type": "number"}
                },
                "required": ["to", "amount"]
            },
            invoke=wallet_tools["sendAda"]
        ),
    ]).freeze()


@pytest.fixture
def dispatcher(registry):
    return ToolDispatcher(registry)


@pytest.fixture
def make_loop(dispatcher):
    """Build a ChatLoop around a scripted model"""
    def _make(*responses):
        model = scripted_model(*responses)
        return ChatLoop(llm_client=model, dispatcher=dispatcher), model
    return _make


@pytest.fixture
def balance_scenario():
    """First response asks for getBalance, second answers"""
    return (
        ModelResponse(content="", tool_calls=[tool_call("getBalance", "c1")]),
        ModelResponse(content="You have 42 ADA.", tool_calls=[]),
    )
