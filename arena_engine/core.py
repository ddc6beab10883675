"""Core round engine for orchestrating persona agent debates."""

import logging
import time
from dataclasses import replace
from typing import Any

from .agent import Agent
from .exceptions import ChatCompletionError
from .models import Message, RoundHandlers, RoundParams, RoundResult
from .prompt_builder import format_timestamp
from .speaker_picker import SpeakerPicker
from .stream_reader import read_chat_completion, read_chat_completion_stream
from .types import AgentStatus

logger = logging.getLogger(__name__)


def current_time_ms() -> int:
    return int(time.time() * 1000)


def compute_max_attempts(max_responses: int, roster_size: int, attempt_floor: int = 3) -> int:
    """Upper bound on turns per round, so silent rosters cannot poll forever."""
    return max(max_responses * max(attempt_floor, roster_size), max_responses)


def find_last_speaker_id(messages: list[Message]) -> str | None:
    for message in reversed(messages):
        if message.role == "agent" and message.agent_id is not None:
            return message.agent_id
    return None


class RoundOrchestrator:
    """Runs one round: agents take turns until the speaker budget is spent.

    The caller's message list is never modified. Every change is applied to
    a fresh list, mirrored into each agent's context and reported through
    the round handlers.
    """

    def __init__(self, params: RoundParams, handlers: RoundHandlers | None = None):
        self.params = params
        self.handlers = handlers or RoundHandlers()
        self.responded = 0
        self.attempts = 0

        self._messages: list[Message] = list(params.messages)
        self._now = params.now or current_time_ms
        self._picker = SpeakerPicker(
            params.agents,
            shuffle=params.shuffle_agents,
            random_source=params.random_source,
        )

    @property
    def messages(self) -> list[Message]:
        return list(self._messages)

    async def run(self) -> RoundResult:
        """Run the round and report the resulting transcript."""
        params = self.params
        max_responses = max(0, params.max_agents)
        max_attempts = compute_max_attempts(
            max_responses, len(params.agents), params.attempt_floor
        )
        error: str | None = None
        round_start_time = time.time()

        for agent in params.agents:
            agent.sync_context(self._messages)

        logger.info(
            f"Starting round: {len(params.agents)} agents, budget {max_responses}, "
            f"max {max_attempts} attempts, model {params.model}, streaming={params.streaming}"
        )

        while self.responded < max_responses and self.attempts < max_attempts:
            self.attempts += 1
            agent = self._picker.pick_next(find_last_speaker_id(self._messages))
            await self._set_status(agent, AgentStatus.THINKING)

            try:
                await self._take_turn(agent)
                await self._set_status(agent, AgentStatus.IDLE)
            except Exception as e:
                await self._set_status(agent, AgentStatus.IDLE)
                error = str(e) or "Request failed."
                logger.error(
                    f"Round aborted on turn {self.attempts} ({agent.id}): "
                    f"{type(e).__name__}: {error}"
                )
                break

        round_time_ms = int((time.time() - round_start_time) * 1000)
        logger.info(
            f"Round finished: {self.responded} spoke in {self.attempts} attempts "
            f"({round_time_ms}ms)"
        )
        return RoundResult(
            messages=list(self._messages),
            responded=self.responded,
            error=error,
            attempts=self.attempts,
            metadata={"round_time_ms": round_time_ms},
        )

    async def _take_turn(self, agent: Agent) -> None:
        params = self.params
        agent.sync_context(self._messages)
        payload = agent.build_chat_completion_request(
            model=params.model,
            temperature=params.temperature,
            streaming=params.streaming,
        )

        placeholder_id: str | None = None
        response = await params.requester(payload)
        try:
            if not response.is_success:
                raise ChatCompletionError(response.status_code)

            if params.streaming:
                placeholder_id = self._new_message_id(agent)
                await self._set_status(agent, AgentStatus.SPEAKING)
                await self._push_message(
                    Message(
                        id=placeholder_id,
                        agent_id=agent.id,
                        role="agent",
                        content="",
                        time=format_timestamp(),
                    )
                )

                accumulated = ""

                async def on_chunk(chunk: str) -> None:
                    nonlocal accumulated
                    accumulated += chunk
                    await self._update_message(placeholder_id, accumulated)

                content = await read_chat_completion_stream(response, on_chunk)
            else:
                content = await read_chat_completion(response)
        finally:
            await response.aclose()

        if not content.strip():
            logger.warning(f"Agent {agent.id} returned empty content")

        parsed = agent.parse_response(content)
        final_content = parsed.content.strip()

        if parsed.should_respond and final_content:
            self.responded += 1
            if placeholder_id is not None:
                await self._update_message(placeholder_id, final_content)
                spoken = self._find_message(placeholder_id)
                if spoken is not None:
                    await self._notify(self.handlers.on_agent_spoke, replace(spoken))
            else:
                await self._set_status(agent, AgentStatus.SPEAKING)
                spoken = Message(
                    id=self._new_message_id(agent),
                    agent_id=agent.id,
                    role="agent",
                    content=final_content,
                    time=format_timestamp(),
                )
                await self._push_message(spoken)
                await self._notify(self.handlers.on_agent_spoke, replace(spoken))
            logger.info(f"{agent.name} spoke ({len(final_content)} chars)")
        else:
            if placeholder_id is not None:
                await self._remove_message(placeholder_id)
            logger.info(f"{agent.name} stayed silent")

    def _new_message_id(self, agent: Agent) -> str:
        """``<agent id>-<timestamp>``, suffixed when the log already holds it."""
        base = f"{agent.id}-{self._now()}"
        taken = {message.id for message in self._messages}
        candidate = base
        suffix = 1
        while candidate in taken:
            candidate = f"{base}-{suffix}"
            suffix += 1
        return candidate

    def _find_message(self, message_id: str) -> Message | None:
        for message in self._messages:
            if message.id == message_id:
                return message
        return None

    async def _push_message(self, message: Message) -> None:
        self._messages = [*self._messages, message]
        await self._notify(self.handlers.on_message_added, replace(message))
        for agent in self.params.agents:
            agent.observe_message_added(message)

    async def _update_message(self, message_id: str, content: str) -> None:
        self._messages = [
            replace(message, content=content) if message.id == message_id else message
            for message in self._messages
        ]
        await self._notify(self.handlers.on_message_updated, message_id, content)
        for agent in self.params.agents:
            agent.observe_message_updated(message_id, content)

    async def _remove_message(self, message_id: str) -> None:
        self._messages = [message for message in self._messages if message.id != message_id]
        await self._notify(self.handlers.on_message_removed, message_id)
        for agent in self.params.agents:
            agent.observe_message_removed(message_id)

    async def _set_status(self, agent: Agent, status: AgentStatus) -> None:
        agent.status = status
        await self._notify(self.handlers.on_agent_status, agent.id, status)

    async def _notify(self, callback: Any, *args: Any) -> None:
        """Invoke an observer; its failures are logged and never end the round."""
        if callback is None:
            return
        try:
            await callback(*args)
        except Exception as e:
            logger.error(f"Round handler {getattr(callback, '__name__', callback)!r} failed: {e}")


async def run_arena_round(
    params: RoundParams, handlers: RoundHandlers | None = None
) -> RoundResult:
    """Run a single arena round with a fresh orchestrator."""
    return await RoundOrchestrator(params, handlers).run()
