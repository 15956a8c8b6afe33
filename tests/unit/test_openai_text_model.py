# tests/unit/test_openai_text_model.py
"""
OpenAITextModel (No Network)

Purpose
-------
Drive `generate()` against stub SDK clients so both API shapes and the
Responses output walk are exercised without an API key or network.
"""

from types import SimpleNamespace

from listing_critic.core.ai.llm import OpenAITextModel, detect_mode


class _Recorder:
    def __init__(self, result):
        self.result = result
        self.calls = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        return self.result


def _responses_client(result):
    return SimpleNamespace(responses=_Recorder(result))


def _chat_client(content):
    message = SimpleNamespace(content=content)
    completions = _Recorder(SimpleNamespace(choices=[SimpleNamespace(message=message)]))
    return SimpleNamespace(chat=SimpleNamespace(completions=completions))


def test_detect_mode_from_client_capabilities():
    assert detect_mode(_responses_client(None)) == "responses"
    assert detect_mode(_chat_client("")) == "chat_completions"


def test_default_sdk_client_uses_responses_api():
    model = OpenAITextModel(api_key="sk-test")
    assert model.mode == "responses"


def test_responses_output_text_is_returned():
    client = _responses_client(SimpleNamespace(output_text='{"price": 1}', output=[]))
    model = OpenAITextModel(api_key="sk-test", model="gpt-4o-mini", timeout_s=12.0, client=client)

    assert model.generate("hello") == '{"price": 1}'

    (call,) = client.responses.calls
    assert call["model"] == "gpt-4o-mini"
    assert call["timeout"] == 12.0
    assert call["input"] == [{"role": "user", "content": [{"type": "input_text", "text": "hello"}]}]


def test_responses_message_items_are_joined_when_output_text_is_empty():
    message = SimpleNamespace(
        type="message",
        content=[
            SimpleNamespace(type="output_text", text='{"bedrooms": '),
            SimpleNamespace(type="refusal", text="ignored"),
            SimpleNamespace(type="output_text", text="3}"),
        ],
    )
    reasoning = SimpleNamespace(type="reasoning", content=[])
    client = _responses_client(SimpleNamespace(output_text="", output=[reasoning, message]))
    model = OpenAITextModel(api_key="sk-test", client=client)

    assert model.generate("x") == '{"bedrooms": 3}'


def test_responses_without_any_text_is_empty():
    client = _responses_client(SimpleNamespace(output_text=None, output=None))
    assert OpenAITextModel(api_key="sk-test", client=client).generate("x") == ""


def test_chat_completions_client():
    client = _chat_client('{"tenure": "freehold"}')
    model = OpenAITextModel(api_key="sk-test", model="gpt-4o", timeout_s=5.0, client=client)

    assert model.mode == "chat_completions"
    assert model.generate("hi") == '{"tenure": "freehold"}'

    (call,) = client.chat.completions.calls
    assert call == {"model": "gpt-4o", "messages": [{"role": "user", "content": "hi"}], "timeout": 5.0}


def test_chat_completions_null_content_is_empty():
    assert OpenAITextModel(api_key="sk-test", client=_chat_client(None)).generate("x") == ""
