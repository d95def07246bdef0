"""Prompt templates for grounded content generation.

Every builder here is a pure function: no network calls, same input gives
the same string.
"""

from __future__ import annotations

from brand_rag.generation.state import BrandProfile, GenerationRequest

GROUNDING_HEADER = "BRAND KNOWLEDGE BASE (retrieved guideline excerpts)"
GROUNDING_RULE = "━" * 40

DEFAULT_PERSONA = """\
You are the senior content writer for {brand_name}.
Write content that follows the brand's voice and guidelines exactly.
When the knowledge base below conflicts with general best practice,
the knowledge base wins.  Never invent product facts.
"""


def build_retrieval_query(request: GenerationRequest) -> str:
    """Text embedded to look up grounding passages for *request*."""
    return f"{request.topic} {request.channel}".strip()


def build_grounding_block(context: str) -> str:
    """Wrap *context* in the delimited grounding section ("" when empty)."""
    if not context.strip():
        return ""
    return f"{GROUNDING_HEADER}:\n{GROUNDING_RULE}\n{context.strip()}\n{GROUNDING_RULE}"


def build_generation_prompt(
    request: GenerationRequest,
    brand: BrandProfile,
    context: str = "",
) -> str:
    """Assemble the final prompt text for one generation call.

    Parameters
    ----------
    request:
        Topic, channel, brief, language and optional custom system prompt.
    brand:
        Brand voice descriptors.
    context:
        Retrieved or caller-supplied grounding.  The grounding block is
        only emitted when this is non-blank.

    Returns
    -------
    str
        Sections separated by blank lines: persona (or custom system
        prompt), grounding, brand profile, request details.
    """
    if request.system_prompt and request.system_prompt.strip():
        persona = request.system_prompt.strip()
    else:
        persona = DEFAULT_PERSONA.format(brand_name=brand.name).strip()

    sections = [persona]

    grounding = build_grounding_block(context)
    if grounding:
        sections.append(grounding)

    profile_lines = ["[BRAND PROFILE]", f"Brand: {brand.name}"]
    if brand.personality:
        profile_lines.append(f"Personality: {brand.personality}")
    if brand.voice:
        profile_lines.append(f"Voice: {brand.voice}")
    if brand.usp:
        profile_lines.append(f"USP: {', '.join(brand.usp)}")
    sections.append("\n".join(profile_lines))

    request_lines = [
        "[REQUEST]",
        f"Topic: {request.topic}",
        f"Channel: {request.channel}",
        f"Language: {request.language}",
    ]
    if request.brief.strip():
        request_lines.append(f"Brief: {request.brief.strip()}")
    sections.append("\n".join(request_lines))

    return "\n\n".join(sections)
