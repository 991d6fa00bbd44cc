"""
Shared fixtures: settings and a scripted completion client.
"""

import pytest
from openai.types.chat import ChatCompletion

from ragchat.core.config import Settings
from ragchat.models.chat import ChatMessage


def make_completion(content="Grounded answer [doc1].", context=None) -> ChatCompletion:
    """Build a completion shaped like an "On Your Data" response."""
    message = {"role": "assistant", "content": content}
    if context is not None:
        message["context"] = context
    return ChatCompletion.model_validate(
        {
            "id": "chatcmpl-test",
            "object": "chat.completion",
            "created": 1700000000,
            "model": "gpt-4o",
            "choices": [{"index": 0, "finish_reason": "stop", "message": message}],
            "usage": {"prompt_tokens": 100, "completion_tokens": 50, "total_tokens": 150},
        }
    )


class FakeCompletionClient:
    """Records every request and replays a canned completion or failure."""

    def __init__(self, completion=None, error=None):
        self._completion = completion if completion is not None else make_completion()
        self._error = error
        self.calls = []

    async def complete(self, messages, data_source):
        self.calls.append({"messages": messages, "data_source": data_source})
        if self._error is not None:
            raise self._error
        return self._completion


@pytest.fixture
def settings():
    return Settings(
        azure_openai_endpoint="https://contoso.openai.azure.com/",
        azure_openai_chat_deployment="gpt-4o",
        azure_openai_embedding_deployment="text-embedding-3-small",
        azure_search_endpoint="https://contoso.search.windows.net",
        azure_search_index_name="docs-v1",
        system_prompt="You are a helpful assistant.",
    )


@pytest.fixture
def conversation():
    """25 alternating user/assistant turns, numbered from 0."""
    return [
        ChatMessage(role="user" if i % 2 == 0 else "assistant", content=f"message {i}")
        for i in range(25)
    ]
