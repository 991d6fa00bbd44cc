"""
Azure OpenAI client wrapper.

Sends chat completions grounded on an Azure AI Search data source.
Uses DefaultAzureCredential (Managed Identity in production, az login locally)
unless another async token credential is injected.
"""

import logging
from typing import Any, Protocol

from azure.core.credentials_async import AsyncTokenCredential
from azure.identity.aio import DefaultAzureCredential, get_bearer_token_provider
from openai import AsyncAzureOpenAI
from openai.types.chat import ChatCompletion

from ragchat.core.config import Settings, require_settings
from ragchat.core.telemetry import get_tracer

logger = logging.getLogger(__name__)

COGNITIVE_SERVICES_SCOPE = "https://cognitiveservices.azure.com/.default"


class CompletionClient(Protocol):
    """Anything that can run one grounded chat completion."""

    async def complete(
        self,
        messages: list[dict[str, str]],
        data_source: dict[str, Any],
    ) -> ChatCompletion: ...


class AzureOpenAIChatClient:
    """Async wrapper around an Azure OpenAI chat deployment."""

    def __init__(
        self,
        settings: Settings,
        credential: AsyncTokenCredential | None = None,
    ) -> None:
        require_settings(settings, ("azure_openai_endpoint", "azure_openai_chat_deployment"))
        self._deployment = settings.azure_openai_chat_deployment
        self._owns_credential = credential is None
        self._credential = credential or DefaultAzureCredential()
        self._tracer = get_tracer()

        # Use Entra ID token-based auth (no API keys)
        token_provider = get_bearer_token_provider(self._credential, COGNITIVE_SERVICES_SCOPE)

        self._client = AsyncAzureOpenAI(
            azure_endpoint=settings.azure_openai_endpoint,
            azure_ad_token_provider=token_provider,
            api_version=settings.azure_openai_api_version,
        )

    async def complete(
        self,
        messages: list[dict[str, str]],
        data_source: dict[str, Any],
    ) -> ChatCompletion:
        """
        Generate a chat completion grounded on the given data source.

        Args:
            messages: The conversation messages, system message first.
            data_source: An "On Your Data" data source definition.

        Returns:
            The raw completion; grounding metadata lives on
            ``choices[0].message.context``.
        """
        with self._tracer.start_as_current_span("openai.chat") as span:
            span.set_attribute("openai.model", self._deployment)
            span.set_attribute("openai.message_count", len(messages))

            completion = await self._client.chat.completions.create(
                model=self._deployment,
                messages=messages,
                extra_body={"data_sources": [data_source]},
            )

            if completion.usage:
                span.set_attribute("openai.total_tokens", completion.usage.total_tokens)
                logger.info("Chat completion: %d tokens used", completion.usage.total_tokens)
            return completion

    async def close(self) -> None:
        await self._client.close()
        if self._owns_credential:
            await self._credential.close()
