"""Readers for OpenAI-compatible chat completion response bodies."""

import json
import logging
from typing import Any

import httpx

from .exceptions import StreamError
from .types import ChunkCallback

logger = logging.getLogger(__name__)

STREAM_DONE = "[DONE]"


def _first_choice_text(data: Any, field: str) -> str:
    if not isinstance(data, dict):
        return ""
    choices = data.get("choices")
    if not isinstance(choices, list) or not choices or not isinstance(choices[0], dict):
        return ""
    container = choices[0].get(field)
    if not isinstance(container, dict):
        return ""
    content = container.get("content")
    return content if isinstance(content, str) else ""


def extract_delta_content(parsed: Any) -> str:
    """Pull ``choices[0].delta.content`` out of a stream chunk, if present."""
    return _first_choice_text(parsed, "delta")


def extract_message_content(data: Any) -> str:
    """Pull ``choices[0].message.content`` out of a complete response body."""
    return _first_choice_text(data, "message")


async def read_chat_completion_stream(
    response: httpx.Response, on_chunk: ChunkCallback
) -> str:
    """Consume a server-sent event body, forwarding each text delta.

    Returns the concatenated text. Lines that are not ``data:`` lines or do
    not decode as JSON are skipped; ``data: [DONE]`` ends the read.
    """
    complete_content = ""

    async for line in response.aiter_lines():
        line = line.strip()

        # Skip empty lines, comments and other SSE fields
        if not line.startswith("data:"):
            continue

        data = line.removeprefix("data:").strip()
        if data == STREAM_DONE:
            break

        try:
            parsed = json.loads(data)
        except (json.JSONDecodeError, RecursionError):
            logger.debug(f"Skipping invalid JSON in stream: {data[:100]}...")
            continue

        if isinstance(parsed, dict) and isinstance(parsed.get("error"), dict):
            error_msg = parsed["error"].get("message", "Unknown streaming error")
            logger.error(f"Completion streaming error: {error_msg}")
            raise StreamError(f"Streaming error: {error_msg}")

        content_chunk = extract_delta_content(parsed)
        if content_chunk:
            complete_content += content_chunk
            await on_chunk(content_chunk)

    return complete_content


async def read_chat_completion(response: httpx.Response) -> str:
    """Read a non-streaming JSON body and return the reply text."""
    await response.aread()
    return extract_message_content(response.json())
