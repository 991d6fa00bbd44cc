"""
RAG Orchestrator: core chat completion pipeline.

Retrieval happens server-side: the completion request carries an Azure AI
Search data source and the service grounds the answer itself.

1. Bound the conversation to the most recent messages.
2. Prepend the configured system prompt.
3. Attach the search data source (vector + keyword + semantic rerank).
4. Call the chat deployment once.
5. Normalize content and citations, or the failure, into a ChatResponse.
"""

import logging
from collections.abc import Iterable
from typing import Any

from openai.types.chat import ChatCompletion

from ragchat.core.config import ConfigurationError, Settings, require_settings
from ragchat.core.telemetry import get_tracer
from ragchat.models.chat import ChatMessage, ChatResponse, Citation, ContentPart
from ragchat.services.openai_client import CompletionClient

logger = logging.getLogger(__name__)

MAX_HISTORY_MESSAGES = 20

REQUIRED_SETTINGS = (
    "azure_openai_endpoint",
    "azure_openai_chat_deployment",
    "azure_search_endpoint",
    "azure_search_index_name",
)


def semantic_configuration_name(index_name: str) -> str:
    """Name of the semantic ranking profile provisioned alongside the index."""
    return f"{index_name}-semantic-configuration"


class RAGOrchestrator:
    """Turns a conversation into an answer grounded on the search index."""

    def __init__(self, settings: Settings, completion_client: CompletionClient) -> None:
        require_settings(settings, REQUIRED_SETTINGS)
        self._settings = settings
        self._client = completion_client
        self._tracer = get_tracer()

        logger.info(
            "RAG orchestrator initialized",
            extra={
                "chat_deployment": settings.azure_openai_chat_deployment,
                "search_index": settings.azure_search_index_name,
            },
        )

    async def get_chat_completion(self, history: Iterable[ChatMessage]) -> ChatResponse:
        """
        Answer the latest turn of a conversation.

        Args:
            history: Conversation so far, oldest first. Not modified.

        Returns:
            ChatResponse with content and citations, or with ``error`` set
            if the completion call failed. Never raises.
        """
        with self._tracer.start_as_current_span("rag.chat_completion") as span:
            try:
                history = list(history)
                span.set_attribute("rag.history_length", len(history))
                messages = self._build_messages(history)
                span.set_attribute("rag.messages_sent", len(messages))

                completion = await self._client.complete(messages, self.build_data_source())

                response = self._to_response(completion)
                span.set_attribute("rag.citation_count", len(response.citations))
                return response
            except Exception as exc:
                logger.exception(
                    "Error in get_chat_completion",
                    extra={"error_type": type(exc).__name__, "error_detail": str(exc)},
                )
                span.set_attribute("rag.error", True)
                return ChatResponse(error=f"An error occurred: {str(exc) or type(exc).__name__}")

    def build_data_source(self) -> dict[str, Any]:
        """Azure AI Search data source attached to every completion request."""
        index_name = self._settings.azure_search_index_name
        parameters: dict[str, Any] = {
            "endpoint": self._settings.azure_search_endpoint,
            "index_name": index_name,
            # The search service is reached with the caller's managed identity.
            "authentication": {"type": "system_assigned_managed_identity"},
            "query_type": "vector_semantic_hybrid",
            "semantic_configuration": semantic_configuration_name(index_name),
        }
        if self._settings.azure_openai_embedding_deployment:
            parameters["embedding_dependency"] = {
                "type": "deployment_name",
                "deployment_name": self._settings.azure_openai_embedding_deployment,
            }
        return {"type": "azure_search", "parameters": parameters}

    def _build_messages(self, history: list[ChatMessage]) -> list[dict[str, str]]:
        """Assemble the LLM message array: system + bounded history."""
        system_prompt = self._settings.system_prompt
        if not system_prompt:
            raise ConfigurationError("system_prompt is not configured")

        recent = history[-MAX_HISTORY_MESSAGES:]
        messages = [{"role": "system", "content": system_prompt}]
        messages.extend(msg.to_completion_message() for msg in recent)
        return messages

    @staticmethod
    def _to_response(completion: ChatCompletion) -> ChatResponse:
        """Extract answer text and grounding citations from the first choice."""
        if not completion.choices:
            return ChatResponse()

        message = completion.choices[0].message
        content = [ContentPart(text=message.content)] if message.content else []

        # "On Your Data" grounding metadata is an extra field on the message.
        context = getattr(message, "context", None) or {}
        citations = [Citation.model_validate(item) for item in context.get("citations") or []]

        return ChatResponse(content=content, citations=citations)
