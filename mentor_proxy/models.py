"""Pydantic models shared across application layers."""

from __future__ import annotations

from datetime import datetime
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

FALLBACK_CONTENT = (
    "I apologize, but I cannot provide a response right now. Please try again later."
)


class InvocationRequest(BaseModel):
    """Incoming proxy invocation body."""

    prompt: str | None = Field(default=None, description="Free-text prompt for the provider.")
    context: Any = Field(default=None, description="Opaque caller data echoed back.")


class InvocationResponse(BaseModel):
    """Successful invocation result."""

    content: str
    context: Any = None


class ErrorResponse(BaseModel):
    """Error envelope returned on any failed invocation."""

    error: str
    content: str = FALLBACK_CONTENT


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# Gemini generateContent wire schema.


class GeminiPart(_CamelModel):
    text: str | None = None


class GeminiContent(_CamelModel):
    parts: list[GeminiPart] = Field(default_factory=list)
    role: str | None = None


class GenerationConfig(_CamelModel):
    temperature: float
    top_p: float
    top_k: int
    max_output_tokens: int


class SafetySetting(_CamelModel):
    category: str
    threshold: str


class GenerateContentRequest(_CamelModel):
    """Request body for ``models/{model}:generateContent``."""

    contents: list[GeminiContent]
    generation_config: GenerationConfig
    safety_settings: list[SafetySetting] = Field(default_factory=list)


class GeminiCandidate(_CamelModel):
    content: GeminiContent | None = None
    finish_reason: str | None = None


class GenerateContentResponse(_CamelModel):
    """Subset of the generateContent response the proxy relies on."""

    candidates: list[GeminiCandidate] = Field(default_factory=list)


class DecodedText(BaseModel):
    """Provider response carrying generated text."""

    kind: Literal["text"] = "text"
    text: str


class DecodeFailure(BaseModel):
    """Provider response without a usable generated text."""

    kind: Literal["decode_failure"] = "decode_failure"
    reason: str


DecodeResult = Annotated[Union[DecodedText, DecodeFailure], Field(discriminator="kind")]


# Mentoring domain types exchanged with the web application.


class ChatMessage(_CamelModel):
    id: str
    content: str
    sender: Literal["user", "ai"]
    timestamp: datetime
    type: Literal["text", "roadmap", "task-suggestion"] | None = None
    metadata: Any = None


class Resource(_CamelModel):
    id: str | None = None
    title: str
    type: Literal["video", "article", "course", "book", "project"]
    url: str
    description: str | None = None
    duration: str | None = None
    difficulty: Literal["beginner", "intermediate", "advanced"] | None = None


class Task(_CamelModel):
    id: str | None = None
    title: str
    description: str = ""
    resources: list[Resource] = Field(default_factory=list)
    due_date: datetime | None = None
    status: Literal["pending", "in-progress", "completed"] = "pending"
    estimated_hours: float | None = None
    level: str | None = None
    roadmap_id: str | None = None


class RoadmapLevel(_CamelModel):
    id: str | None = None
    title: str
    description: str = ""
    tasks: list[Task] = Field(default_factory=list)
    estimated_hours: float | None = None
    prerequisites: list[str] | None = None


class Roadmap(_CamelModel):
    """Learning roadmap as produced by the mentor and tracked by the UI."""

    id: str
    title: str
    description: str = ""
    levels: list[RoadmapLevel] = Field(default_factory=list)
    estimated_duration: str = ""
    color: str | None = None
    status: Literal["not-started", "active", "completed"] = "not-started"
    progress: float = 0
