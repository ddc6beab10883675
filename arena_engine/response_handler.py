"""Interpretation of raw agent replies."""

import json
import logging

from .models import ParsedAgentResponse

logger = logging.getLogger(__name__)


def strip_json_code_fence(content: str) -> str:
    """Remove markdown code fence markers wrapped around a JSON reply."""
    return content.replace("```json", "").replace("```", "").strip()


def parse_agent_response(content: str) -> ParsedAgentResponse:
    """Turn model output into a speak/stay-silent decision.

    Agents are asked to answer with ``{"should_respond": bool, "content": str}``.
    When the reply is not a JSON object at all, the whole reply is treated as
    something the agent wants to say, so a model that ignores the format is
    still heard instead of going silent.
    """
    cleaned = strip_json_code_fence(content)
    try:
        parsed = json.loads(cleaned)
    except (json.JSONDecodeError, RecursionError):
        parsed = None

    if not isinstance(parsed, dict):
        logger.debug(f"Agent reply is not a JSON object, using raw text: {content[:100]!r}")
        return ParsedAgentResponse(should_respond=True, content=content.strip())

    should_respond = parsed.get("should_respond") is True
    reply = parsed.get("content")
    return ParsedAgentResponse(
        should_respond=should_respond,
        content=reply if isinstance(reply, str) else "",
    )
