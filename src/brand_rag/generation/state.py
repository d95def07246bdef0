"""Generation state and request models shared by the graph nodes."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TypedDict

from brand_rag.config import settings


@dataclass
class BrandProfile:
    """Brand voice descriptors injected into every prompt.

    Attributes
    ----------
    id:
        Brand identifier; scopes retrieval.
    name:
        Display name of the brand.
    personality:
        Short personality description (e.g. "playful, confident").
    voice:
        Tone-of-voice guidance.
    usp:
        Unique selling points, in priority order.
    """

    id: str
    name: str
    personality: str = ""
    voice: str = ""
    usp: list[str] = field(default_factory=list)


@dataclass
class GenerationRequest:
    """One content-generation request.

    Attributes
    ----------
    topic:
        What the content is about.
    channel:
        Publishing channel (Facebook, LinkedIn, blog, ...).
    brief:
        Free-text notes from the requester.
    language:
        Output language.
    system_prompt:
        Optional instructions that replace the default persona line.
    context:
        Grounding supplied by the caller; when set, retrieval is skipped.
    top_k:
        Passages to retrieve (``None`` uses the retriever default).
    """

    topic: str
    channel: str
    brief: str = ""
    language: str = field(default_factory=lambda: settings.default_language)
    system_prompt: str | None = None
    context: str | None = None
    top_k: int | None = None


@dataclass
class GenerationResult:
    """Generated text plus the source names that grounded it."""

    text: str
    sources: list[str] = field(default_factory=list)
    prompt: str = ""


class GenerationState(TypedDict):
    """Typed state flowing through the generation graph.

    Attributes
    ----------
    brand:
        Brand profile; ``brand.id`` is the retrieval scope.
    request:
        The structured generation request.
    context:
        Grounding text (empty when nothing relevant was found).
    sources:
        Distinct source names behind ``context``.
    prompt:
        Final prompt sent to the model.
    answer:
        Model output.
    """

    brand: BrandProfile
    request: GenerationRequest
    context: str
    sources: list[str]
    prompt: str
    answer: str
