"""Persona arena round orchestration."""

from .agent import Agent, AgentAbility, create_agents_from_roster
from .core import RoundOrchestrator, compute_max_attempts, run_arena_round
from .exceptions import ArenaError, ChatCompletionError, EmptyRosterError, StreamError
from .models import (
    AgentSnapshot,
    Message,
    ParsedAgentResponse,
    RoundHandlers,
    RoundParams,
    RoundResult,
)
from .prompt_builder import (
    build_agent_system_prompt,
    format_system_proposition,
    format_timestamp,
    render_prompt_template,
)
from .response_handler import parse_agent_response
from .speaker_picker import SpeakerPicker
from .stream_reader import read_chat_completion, read_chat_completion_stream
from .types import AgentStatus, ChatCompletionRequest, ChatCompletionRequester, ChatMessage

__all__ = [
    "Agent",
    "AgentAbility",
    "AgentSnapshot",
    "AgentStatus",
    "ArenaError",
    "ChatCompletionError",
    "ChatCompletionRequest",
    "ChatCompletionRequester",
    "ChatMessage",
    "EmptyRosterError",
    "Message",
    "ParsedAgentResponse",
    "RoundHandlers",
    "RoundOrchestrator",
    "RoundParams",
    "RoundResult",
    "SpeakerPicker",
    "StreamError",
    "build_agent_system_prompt",
    "compute_max_attempts",
    "create_agents_from_roster",
    "format_system_proposition",
    "format_timestamp",
    "parse_agent_response",
    "read_chat_completion",
    "read_chat_completion_stream",
    "render_prompt_template",
    "run_arena_round",
]
