"""Pytest configuration and shared fixtures.

This file is automatically loaded by pytest and provides:
- Prompt templates and a small roster used across modules
- Builders for OpenAI-compatible response bodies (JSON and SSE)
- A scripted fake requester for driving rounds without a network
- Pytest configuration hooks
"""

import json
from collections.abc import Callable
from pathlib import Path
from typing import Any

import httpx
import pytest
import yaml

from arena_engine import Agent, create_agents_from_roster
from config.settings import AgentProfile, ArenaPrompts


# =============================================================================
# RESPONSE BUILDERS
# =============================================================================


def completion_json(content: str, status_code: int = 200) -> httpx.Response:
    """Build a non-streaming chat completion response."""
    return httpx.Response(
        status_code,
        json={"choices": [{"message": {"role": "assistant", "content": content}}]},
    )


def agent_reply(should_respond: bool, content: str = "") -> str:
    """The JSON decision text agents are asked to produce."""
    return json.dumps({"should_respond": should_respond, "content": content})


def sse_body(chunks: list[str], done: bool = True) -> bytes:
    """Encode text deltas as a server-sent event body."""
    lines = [
        "data: " + json.dumps({"choices": [{"delta": {"content": chunk}}]})
        for chunk in chunks
    ]
    if done:
        lines.append("data: [DONE]")
    return ("\n\n".join(lines) + "\n\n").encode()


def completion_stream(chunks: list[str], status_code: int = 200) -> httpx.Response:
    """Build a streaming chat completion response."""
    return httpx.Response(
        status_code,
        content=sse_body(chunks),
        headers={"content-type": "text/event-stream", "cache-control": "no-cache"},
    )


class FakeRequester:
    """Scripted stand-in for a chat completion transport.

    ``script`` is either a list of responses/exceptions consumed in order, or
    a callable receiving the request payload and returning one.
    """

    def __init__(self, script: list[Any] | Callable[[dict[str, Any]], Any]):
        self._script = script if callable(script) else list(script)
        self.requests: list[dict[str, Any]] = []
        self.responses: list[httpx.Response] = []

    async def __call__(self, payload: dict[str, Any]) -> httpx.Response:
        self.requests.append(payload)
        if callable(self._script):
            item = self._script(payload)
        else:
            if not self._script:
                raise AssertionError("No fake responses left")
            item = self._script.pop(0)
        if isinstance(item, Exception):
            raise item
        self.responses.append(item)
        return item


# =============================================================================
# SHARED FIXTURES - Available to all test modules
# =============================================================================


@pytest.fixture
def arena_prompts() -> ArenaPrompts:
    """Prompt templates with easily recognisable output."""
    return ArenaPrompts(
        system_name="Moderator",
        unknown_agent_name="Someone",
        system_proposition_template="Proposition: {{proposition}}",
        agent_system_base="Debate briefly. Answer in JSON.",
        agent_persona_template="You are {{ name }}. {{persona}}",
        user_chat_log_template="Log:\n{{chat_log}}\nYour move.",
    )


@pytest.fixture
def roster_profiles() -> list[AgentProfile]:
    """Three agents with distinct personas."""
    return [
        AgentProfile(id="socrates", name="Socrates", persona="Asks questions."),
        AgentProfile(id="nietzsche", name="Nietzsche", persona="Attacks morality."),
        AgentProfile(id="marx", name="Marx", persona="Sees class conflict.", accent="#a58bff"),
    ]


@pytest.fixture
def make_agents(
    roster_profiles: list[AgentProfile], arena_prompts: ArenaPrompts
) -> Callable[..., list[Agent]]:
    """Factory building fresh agents for the first ``count`` profiles."""

    def _make(count: int | None = None, **kwargs: Any) -> list[Agent]:
        profiles = roster_profiles if count is None else roster_profiles[:count]
        return create_agents_from_roster(profiles, arena_prompts, **kwargs)

    return _make


@pytest.fixture
def config_data() -> dict[str, Any]:
    """A complete, valid arena config document."""
    return {
        "ui": {"defaultProposition": "  Cats are better than dogs.  "},
        "prompts": {
            "systemName": "Moderator",
            "unknownAgentName": "Unknown",
            "systemPropositionTemplate": "Proposition: {{proposition}}",
            "agentSystemBase": "Debate briefly.",
            "agentPersonaTemplate": "You are {{name}}. {{persona}}",
            "userChatLogTemplate": "{{chat_log}}",
        },
        "defaultProvider": "local",
        "providers": {
            "local": {
                "name": "Local",
                "baseUrl": "http://llm.test/v1/",
                "apiKey": "secret-key",
                "models": ["tiny", " ", "small"],
            },
            "remote": {
                "baseUrl": "https://remote.test/v1",
                "apiKey": "remote-key",
                "models": ["big"],
            },
        },
        "defaultRoster": "duo",
        "rosters": {
            "duo": {
                "name": "Duo",
                "agents": [
                    {"id": "a", "name": "Alpha", "persona": "First voice."},
                    {"id": "b", "name": "Beta", "persona": "Second voice.", "accent": "#123456"},
                ],
            },
            "solo": {
                "agents": [{"id": "s", "name": "Solo", "persona": "Only voice."}],
            },
        },
    }


@pytest.fixture
def config_file(tmp_path: Path, config_data: dict[str, Any]) -> Path:
    """Write ``config_data`` to a temporary YAML file."""
    path = tmp_path / "arena-config.yaml"
    path.write_text(yaml.safe_dump(config_data, sort_keys=False), encoding="utf-8")
    return path


# =============================================================================
# PYTEST CONFIGURATION HOOKS
# =============================================================================


def pytest_configure(config: pytest.Config) -> None:
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )
