"""
Tests for the LLM client

Uses a fake OpenAI-compatible client; no API calls are made.
"""

import json

import pytest
from unittest.mock import Mock, patch

from agents.shared.errors import ModelInvocationFailure
from agents.shared.llm_client import LLMClient, turn_to_message, parse_tool_calls
from agents.shared.schemas import UserTurn, ModelTurn, ToolResultTurn, ToolCallRequest
from conftest import fake_completion


def make_client(*completions, **kwargs):
    """LLMClient over a fake SDK client returning the given completions"""
    sdk = Mock()
    sdk.chat.completions.create = Mock(side_effect=list(completions))
    return LLMClient(client=sdk, **kwargs), sdk


class TestMessageConversion:
    """Turns to chat messages"""

    def test_user_turn(self):
        assert turn_to_message(UserTurn(text="hi")) == {"role": "user", "content": "hi"}

    def test_model_turn_with_tool_calls(self):
        turn = ModelTurn(tool_calls=[ToolCallRequest(id="c1", name="sendAda", args={"amount": 5})])

        message = turn_to_message(turn)

        assert message["role"] == "assistant"
        assert message["content"] is None
        assert message["tool_calls"] == [{
            "id": "c1",
            "type": "function",
            "function": {"name": "sendAda", "arguments": '{"amount": 5}'}
        }]

    def test_model_turn_without_tool_calls(self):
        assert "tool_calls" not in turn_to_message(ModelTurn(text="hello"))

    def test_tool_result_turn(self):
        turn = ToolResultTurn(tool_name="getBalance", call_id="c1", content="42 ADA")
        assert turn_to_message(turn) == {"role": "tool", "tool_call_id": "c1", "content": "42 ADA"}


class TestParseToolCalls:
    """Tool calls from the API reply"""

    def test_arguments_decoded(self):
        calls = parse_tool_calls([
            {"id": "c1", "function": {"name": "sendAda", "arguments": '{"to": "addr1", "amount": 2}'}}
        ])
        assert calls == [ToolCallRequest(id="c1", name="sendAda", args={"to": "addr1", "amount": 2})]

    def test_missing_id_and_empty_arguments(self):
        calls = parse_tool_calls([{"id": None, "function": {"name": "getBalance", "arguments": ""}}])
        assert calls[0].id == "default_id"
        assert calls[0].args == {}

    def test_malformed_arguments_raise(self):
        with pytest.raises(ModelInvocationFailure):
            parse_tool_calls([{"id": "c1", "function": {"name": "sendAda", "arguments": "{not json"}}])

    def test_non_object_arguments_raise(self):
        with pytest.raises(ModelInvocationFailure):
            parse_tool_calls([{"id": "c1", "function": {"name": "sendAda", "arguments": "[1, 2]"}}])

    def test_missing_name_raises(self):
        with pytest.raises(ModelInvocationFailure):
            parse_tool_calls([{"id": "c1", "function": {"arguments": "{}"}}])

    def test_none_gives_no_calls(self):
        assert parse_tool_calls(None) == []


class TestLLMClientInvoke:
    """invoke() end to end over a fake SDK"""

    def test_text_response(self):
        client, sdk = make_client(fake_completion(content="Hello!"))

        response = client.invoke([UserTurn(text="hi")])

        assert response.content == "Hello!"
        assert response.tool_calls == []
        kwargs = sdk.chat.completions.create.call_args.kwargs
        assert kwargs["model"] == "gpt-4o-mini"
        assert kwargs["temperature"] == 0.0
        assert kwargs["messages"] == [{"role": "user", "content": "hi"}]
        assert "tools" not in kwargs

    def test_tool_call_response(self):
        client, _ = make_client(
            fake_completion(content=None, tool_calls=[("c1", "getBalance", "{}")])
        )

        response = client.invoke([UserTurn(text="What is my wallet balance?")])

        assert response.content == ""
        assert response.tool_calls == [ToolCallRequest(id="c1", name="getBalance", args={})]

    def test_tools_and_system_prompt_bound(self, registry):
        client, sdk = make_client(
            fake_completion(content="ok"),
            tools=registry.to_openai_tools(),
            system_prompt="You manage a Cardano wallet."
        )

        client.invoke([UserTurn(text="hi")])

        kwargs = sdk.chat.completions.create.call_args.kwargs
        assert [tool["function"]["name"] for tool in kwargs["tools"]] == [
            "getBalance", "getAddress", "sendAda"
        ]
        assert kwargs["messages"][0] == {"role": "system", "content": "You manage a Cardano wallet."}

    def test_request_carries_only_model_messages_tools_and_temperature(self, registry):
        client, sdk = make_client(fake_completion(content="ok"), tools=registry.to_openai_tools())

        client.invoke([UserTurn(text="hi")])

        kwargs = sdk.chat.completions.create.call_args.kwargs
        assert set(kwargs) == {"model", "messages", "temperature", "tools"}
        assert not hasattr(client, "simple_completion")

    def test_full_tool_round_messages(self):
        client, sdk = make_client(fake_completion(content="You have 42 ADA."))
        turns = (
            UserTurn(text="balance?"),
            ModelTurn(tool_calls=[ToolCallRequest(id="c1", name="getBalance")]),
            ToolResultTurn(tool_name="getBalance", call_id="c1", content="42 ADA"),
        )

        client.invoke(turns)

        messages = sdk.chat.completions.create.call_args.kwargs["messages"]
        assert [m["role"] for m in messages] == ["user", "assistant", "tool"]
        assert json.loads(messages[1]["tool_calls"][0]["function"]["arguments"]) == {}

    def test_sdk_error_becomes_model_invocation_failure(self):
        client, sdk = make_client(RuntimeError("connection reset"))

        with pytest.raises(ModelInvocationFailure) as exc_info:
            client.invoke([UserTurn(text="hi")])

        assert isinstance(exc_info.value.cause, RuntimeError)
        assert sdk.chat.completions.create.call_count == 1

    def test_no_choices_is_failure(self):
        completion = fake_completion(content="x")
        completion.choices = []
        client, _ = make_client(completion)

        with pytest.raises(ModelInvocationFailure):
            client.invoke([UserTurn(text="hi")])

    @patch("agents.shared.llm_client.time.sleep")
    def test_retries_when_configured(self, sleep):
        client, sdk = make_client(
            RuntimeError("flaky"),
            fake_completion(content="recovered"),
            max_retries=2
        )

        assert client.invoke([UserTurn(text="hi")]).content == "recovered"
        assert sdk.chat.completions.create.call_count == 2


class TestLLMClientConstruction:
    """API key handling"""

    def test_missing_api_key(self, monkeypatch):
        monkeypatch.delenv("OPENAI_API_KEY", raising=False)

        with pytest.raises(ValueError) as exc_info:
            LLMClient()

        assert "API key is required" in str(exc_info.value)

    def test_api_key_from_environment(self, monkeypatch):
        monkeypatch.setenv("OPENAI_API_KEY", "sk-test")

        client = LLMClient()

        assert client.api_key == "sk-test"
        assert client.client is not None
