"""Tests for runtime agents: context mirroring, request building and abilities."""

from collections.abc import Callable

import pytest

from arena_engine import Agent, AgentAbility, AgentStatus, Message, ParsedAgentResponse


def _message(message_id: str, content: str, agent_id: str | None = "socrates") -> Message:
    return Message(
        id=message_id,
        agent_id=agent_id,
        role="system" if agent_id is None else "agent",
        content=content,
        time="10:00",
    )


@pytest.mark.unit
def test_new_agent_is_idle_with_frozen_system_prompt(make_agents: Callable[..., list[Agent]]) -> None:
    agent = make_agents(1)[0]

    assert agent.status is AgentStatus.IDLE
    assert agent.system_prompt.endswith("You are Socrates. Asks questions.")
    assert agent.snapshot().to_dict() == {
        "id": "socrates",
        "name": "Socrates",
        "persona": "Asks questions.",
        "accent": "#9aa2ff",
        "status": "idle",
    }


@pytest.mark.unit
def test_sync_context_patches_in_place_when_ids_match(make_agents: Callable[..., list[Agent]]) -> None:
    agent = make_agents(1)[0]
    agent.sync_context([_message("m0", "hello", None), _message("m1", "")])
    first_entry = agent.context[0]

    agent.sync_context([_message("m0", "hello", None), _message("m1", "partial")])

    assert [m.content for m in agent.context] == ["hello", "partial"]
    assert agent.context[0] is first_entry


@pytest.mark.unit
def test_sync_context_resets_when_ids_differ(make_agents: Callable[..., list[Agent]]) -> None:
    agent = make_agents(1)[0]
    agent.sync_context([_message("m0", "hello", None), _message("m1", "x")])

    agent.sync_context([_message("m0", "hello", None), _message("m2", "y")])

    assert [m.id for m in agent.context] == ["m0", "m2"]


@pytest.mark.unit
def test_sync_context_twice_is_idempotent(make_agents: Callable[..., list[Agent]]) -> None:
    agent = make_agents(1)[0]
    log = [_message("m0", "hello", None), _message("m1", "x")]
    agent.sync_context(log)
    before = agent.context

    agent.sync_context(log)

    assert agent.context == before
    assert all(a is b for a, b in zip(agent.context, before))


@pytest.mark.unit
def test_context_holds_copies_not_caller_objects(make_agents: Callable[..., list[Agent]]) -> None:
    agent = make_agents(1)[0]
    log = [_message("m0", "hello", None)]

    agent.reset_context(log)
    log[0].content = "changed"

    assert agent.context[0].content == "hello"


@pytest.mark.unit
def test_observers_mirror_mutations_and_ignore_unknown_ids(
    make_agents: Callable[..., list[Agent]],
) -> None:
    agent = make_agents(1)[0]
    agent.observe_message_added(_message("m1", ""))
    agent.observe_message_updated("m1", "streamed")
    agent.observe_message_updated("missing", "nope")
    agent.observe_message_removed("missing")

    assert [(m.id, m.content) for m in agent.context] == [("m1", "streamed")]

    agent.observe_message_removed("m1")

    assert agent.context == ()


@pytest.mark.unit
def test_request_reflects_own_mirror(make_agents: Callable[..., list[Agent]]) -> None:
    socrates = make_agents(2)[0]
    socrates.sync_context(
        [_message("m0", "Proposition: tea", None), _message("m1", "Tea wins.", "nietzsche")]
    )

    request = socrates.build_chat_completion_request(model="tiny", temperature=0.3, streaming=True)

    assert request["model"] == "tiny"
    assert request["temperature"] == 0.3
    assert request["stream"] is True
    assert request["messages"][0] == {"role": "system", "content": socrates.system_prompt}
    assert request["messages"][1] == {
        "role": "user",
        "content": "Log:\nModerator: Proposition: tea\nNietzsche: Tea wins.\nYour move.",
    }


@pytest.mark.unit
def test_abilities_apply_in_registration_order(make_agents: Callable[..., list[Agent]]) -> None:
    seen_agents: list[str] = []

    def shout_log(log: str, agent: Agent) -> str:
        seen_agents.append(agent.id)
        return log.upper()

    abilities = [
        AgentAbility(key="sig", transform_system_prompt=lambda prompt, agent: f"{prompt} [{agent.id}]"),
        AgentAbility(key="shout", transform_chat_log=shout_log),
        AgentAbility(key="wrap", transform_user_prompt=lambda prompt, agent: f"<{prompt}>"),
        AgentAbility(key="noop", transform_user_prompt=lambda prompt, agent: None),
    ]
    agent = make_agents(1, abilities=abilities)[0]
    agent.sync_context([_message("m0", "tea", None)])

    request = agent.build_chat_completion_request(model="m", temperature=0.0, streaming=False)

    assert agent.system_prompt.endswith("[socrates]")
    assert request["messages"][1]["content"] == "<Log:\nMODERATOR: TEA\nYour move.>"
    assert seen_agents == ["socrates"]


@pytest.mark.unit
def test_parsed_response_hooks_receive_raw_text(make_agents: Callable[..., list[Agent]]) -> None:
    calls: list[str] = []

    def veto(parsed: ParsedAgentResponse, agent: Agent, raw: str) -> ParsedAgentResponse:
        calls.append(raw)
        return ParsedAgentResponse(should_respond=False, content=parsed.content)

    agent = make_agents(1, abilities=[AgentAbility(key="veto", transform_parsed_response=veto)])[0]

    parsed = agent.parse_response('{"should_respond": true, "content": "hi"}')

    assert parsed == ParsedAgentResponse(should_respond=False, content="hi")
    assert calls == ['{"should_respond": true, "content": "hi"}']


@pytest.mark.unit
def test_initial_context_seeds_every_agent(make_agents: Callable[..., list[Agent]]) -> None:
    agents = make_agents(initial_context=[_message("m0", "hello", None)])

    assert [len(agent.context) for agent in agents] == [1, 1, 1]
