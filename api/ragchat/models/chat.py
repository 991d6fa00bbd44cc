"""
Pydantic models for the chat request/response contracts.
"""

from typing import Literal

from pydantic import BaseModel, Field, field_validator

Role = Literal["system", "user", "assistant"]


class Citation(BaseModel):
    """A retrieved index fragment that grounded part of an answer."""

    title: str = Field("", description="Title of the source document")
    content: str = Field("", description="Text of the retrieved fragment")
    url: str | None = Field(None, description="URL of the source document, if indexed")
    filepath: str | None = Field(None, description="File path of the source document")
    chunk_id: str | None = Field(None, description="Chunk identifier within the source")

    @field_validator("title", "content", mode="before")
    @classmethod
    def _none_as_empty(cls, value: str | None) -> str:
        # The search index may leave title/content unmapped.
        return value or ""


class ChatMessage(BaseModel):
    """A single message in the conversation history."""

    role: Role = Field(..., description="Message role: 'system', 'user' or 'assistant'")
    content: str = Field(..., description="Message content")
    citations: list[Citation] | None = Field(
        None, description="Sources that grounded an assistant message"
    )

    def to_completion_message(self) -> dict[str, str]:
        """Wire form sent to the completion endpoint; citations stay local."""
        return {"role": self.role, "content": self.content}


class ChatRequest(BaseModel):
    """Request body for the POST /chat endpoint."""

    messages: list[ChatMessage] = Field(
        ..., description="Conversation history (latest message last)"
    )


class ContentPart(BaseModel):
    """One ordered part of the generated answer."""

    type: Literal["text"] = "text"
    text: str


class ChatResponse(BaseModel):
    """Result of one grounded chat completion."""

    content: list[ContentPart] = Field(
        default_factory=list, description="Generated answer parts, in order"
    )
    citations: list[Citation] = Field(
        default_factory=list, description="Sources that grounded the answer"
    )
    error: str | None = Field(None, description="Failure message if the request failed")

    @property
    def text(self) -> str:
        return "".join(part.text for part in self.content)

    def to_assistant_message(self) -> ChatMessage:
        """Build the assistant turn the caller appends to its history."""
        return ChatMessage(
            role="assistant",
            content=self.text,
            citations=list(self.citations) or None,
        )
