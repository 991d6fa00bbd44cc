"""
Unit tests for the Azure OpenAI chat client wrapper.
"""

from unittest.mock import AsyncMock

import pytest
from azure.core.credentials import AccessToken

from ragchat.core.config import ConfigurationError
from ragchat.services.openai_client import AzureOpenAIChatClient

from conftest import make_completion


class StaticCredential:
    """Async token credential that never touches the network."""

    def __init__(self):
        self.closed = False

    async def get_token(self, *scopes, **kwargs):
        return AccessToken("test-token", 4102444800)

    async def close(self):
        self.closed = True


@pytest.mark.asyncio
async def test_complete_sends_data_source(settings, monkeypatch):
    client = AzureOpenAIChatClient(settings, credential=StaticCredential())
    create = AsyncMock(return_value=make_completion())
    monkeypatch.setattr(client._client.chat.completions, "create", create)
    messages = [{"role": "system", "content": "Be brief."}, {"role": "user", "content": "Hi"}]
    data_source = {"type": "azure_search", "parameters": {"index_name": "docs-v1"}}

    completion = await client.complete(messages, data_source)

    assert completion.choices[0].message.content == "Grounded answer [doc1]."
    create.assert_awaited_once_with(
        model="gpt-4o",
        messages=messages,
        extra_body={"data_sources": [data_source]},
    )


@pytest.mark.asyncio
async def test_complete_propagates_errors(settings, monkeypatch):
    client = AzureOpenAIChatClient(settings, credential=StaticCredential())
    monkeypatch.setattr(
        client._client.chat.completions, "create", AsyncMock(side_effect=TimeoutError("slow"))
    )

    with pytest.raises(TimeoutError):
        await client.complete([], {})


@pytest.mark.asyncio
async def test_close_leaves_injected_credential_open(settings):
    credential = StaticCredential()
    client = AzureOpenAIChatClient(settings, credential=credential)

    await client.close()

    assert credential.closed is False


def test_missing_endpoint_fails_construction(settings):
    with pytest.raises(ConfigurationError, match="azure_openai_endpoint"):
        AzureOpenAIChatClient(
            settings.model_copy(update={"azure_openai_endpoint": ""}),
            credential=StaticCredential(),
        )
