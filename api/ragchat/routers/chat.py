"""
Chat router: POST /chat endpoint.

Receives the conversation held by the client, runs the grounded
completion, and returns the answer with its citations.
"""

from fastapi import APIRouter, Depends, Request

from ragchat.models.chat import ChatRequest, ChatResponse
from ragchat.services.rag import RAGOrchestrator

router = APIRouter(tags=["chat"])


def get_rag_orchestrator(request: Request) -> RAGOrchestrator:
    """
    Dependency injection for the RAG orchestrator.
    Initialized once in the lifespan handler and stored in app.state.
    """
    return request.app.state.rag_orchestrator


@router.post("/chat", response_model=ChatResponse)
async def chat(
    request: ChatRequest,
    rag: RAGOrchestrator = Depends(get_rag_orchestrator),
) -> ChatResponse:
    """
    Ask a question grounded on the search index.

    Completion failures are reported in the ``error`` field of a
    200 response, never as an HTTP error.
    """
    return await rag.get_chat_completion(request.messages)
