"""Persona agents taking part in an arena round."""

import logging
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass, replace

from config.settings import AgentProfile, ArenaPrompts

from .models import AgentSnapshot, Message, ParsedAgentResponse
from .prompt_builder import build_agent_system_prompt, build_chat_log, build_user_prompt
from .response_handler import parse_agent_response
from .types import AgentStatus, ChatCompletionRequest

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AgentAbility:
    """A capability plugged into an agent's prompt and response pipeline.

    Every transform is optional. Transforms receive the agent so they can
    behave differently per persona; returning ``None`` keeps the value as is.
    Abilities run in the order they were registered.
    """

    key: str
    transform_system_prompt: Callable[[str, "Agent"], str | None] | None = None
    transform_chat_log: Callable[[str, "Agent"], str | None] | None = None
    transform_user_prompt: Callable[[str, "Agent"], str | None] | None = None
    transform_parsed_response: (
        Callable[[ParsedAgentResponse, "Agent", str], ParsedAgentResponse | None] | None
    ) = None


class Agent:
    """Runtime agent: identity, status and a private mirror of the transcript."""

    def __init__(
        self,
        profile: AgentProfile,
        roster: Sequence[AgentProfile],
        prompts: ArenaPrompts,
        abilities: Sequence[AgentAbility] | None = None,
        initial_context: Iterable[Message] | None = None,
    ):
        self.id = profile.id
        self.name = profile.name
        self.persona = profile.persona
        self.accent = profile.accent
        self.status = AgentStatus.IDLE

        self._profile = profile
        self._prompts = prompts
        self._abilities: tuple[AgentAbility, ...] = tuple(abilities or ())
        self._names_by_agent_id = {member.id: member.name for member in roster}
        self._context: list[Message] = []

        system_prompt = build_agent_system_prompt(profile, prompts)
        for ability in self._abilities:
            if ability.transform_system_prompt:
                system_prompt = _keep(ability.transform_system_prompt(system_prompt, self), system_prompt)
        self._system_prompt = system_prompt

        if initial_context is not None:
            self.reset_context(initial_context)

    def __repr__(self) -> str:
        return f"Agent(id={self.id!r}, status={self.status.value!r})"

    @property
    def profile(self) -> AgentProfile:
        return self._profile

    @property
    def system_prompt(self) -> str:
        return self._system_prompt

    @property
    def context(self) -> tuple[Message, ...]:
        """Read-only view of the mirrored transcript."""
        return tuple(self._context)

    def snapshot(self) -> AgentSnapshot:
        return AgentSnapshot(
            id=self.id,
            name=self.name,
            persona=self.persona,
            accent=self.accent,
            status=self.status,
        )

    def reset_context(self, messages: Iterable[Message]) -> None:
        """Replace the mirror with copies of ``messages``."""
        self._context = [replace(message) for message in messages]

    def sync_context(self, messages: Sequence[Message]) -> None:
        """Bring the mirror in line with ``messages``.

        When both hold the same ids in the same order only changed content and
        times are patched; any other difference replaces the mirror wholesale.
        """
        same_ids = len(self._context) == len(messages) and all(
            mine.id == theirs.id for mine, theirs in zip(self._context, messages)
        )
        if not same_ids:
            self.reset_context(messages)
            return

        for index, incoming in enumerate(messages):
            existing = self._context[index]
            if existing.content != incoming.content or existing.time != incoming.time:
                self._context[index] = replace(
                    existing, content=incoming.content, time=incoming.time
                )

    def observe_message_added(self, message: Message) -> None:
        self._context.append(replace(message))

    def observe_message_updated(self, message_id: str, content: str) -> None:
        index = self._find_message(message_id)
        if index is not None:
            self._context[index] = replace(self._context[index], content=content)

    def observe_message_removed(self, message_id: str) -> None:
        index = self._find_message(message_id)
        if index is not None:
            del self._context[index]

    def build_chat_completion_request(
        self, model: str, temperature: float, streaming: bool
    ) -> ChatCompletionRequest:
        """Build the request for this agent's next turn from its own mirror."""
        chat_log = build_chat_log(self._context, self._names_by_agent_id, self._prompts)
        for ability in self._abilities:
            if ability.transform_chat_log:
                chat_log = _keep(ability.transform_chat_log(chat_log, self), chat_log)

        user_prompt = build_user_prompt(chat_log, self._prompts)
        for ability in self._abilities:
            if ability.transform_user_prompt:
                user_prompt = _keep(ability.transform_user_prompt(user_prompt, self), user_prompt)

        logger.debug(
            f"Built request for {self.id}: {len(self._context)} messages in context, model {model}"
        )
        return {
            "model": model,
            "temperature": temperature,
            "stream": streaming,
            "messages": [
                {"role": "system", "content": self._system_prompt},
                {"role": "user", "content": user_prompt},
            ],
        }

    def parse_response(self, content: str) -> ParsedAgentResponse:
        parsed = parse_agent_response(content)
        for ability in self._abilities:
            if ability.transform_parsed_response:
                parsed = _keep(ability.transform_parsed_response(parsed, self, content), parsed)
        return parsed

    def _find_message(self, message_id: str) -> int | None:
        for index, message in enumerate(self._context):
            if message.id == message_id:
                return index
        return None


def _keep(value, fallback):
    return fallback if value is None else value


def create_agents_from_roster(
    roster: Sequence[AgentProfile],
    prompts: ArenaPrompts,
    abilities: Sequence[AgentAbility] | None = None,
    initial_context: Sequence[Message] | None = None,
) -> list[Agent]:
    """Create one agent per roster profile, all sharing the same prompts."""
    return [
        Agent(
            profile=profile,
            roster=roster,
            prompts=prompts,
            abilities=abilities,
            initial_context=initial_context,
        )
        for profile in roster
    ]
