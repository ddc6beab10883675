"""Prompt construction for arena agents."""

import re
from collections.abc import Iterable, Mapping
from datetime import datetime

from config.settings import AgentProfile, ArenaPrompts

from .models import Message

_TEMPLATE_VARIABLE = re.compile(r"\{\{\s*([a-zA-Z0-9_]+)\s*\}\}")


def render_prompt_template(template: str, variables: Mapping[str, str]) -> str:
    """Substitute ``{{name}}`` tokens; unknown names render as empty text."""
    return _TEMPLATE_VARIABLE.sub(lambda match: variables.get(match.group(1), ""), template)


def format_system_proposition(proposition: str, prompts: ArenaPrompts) -> str:
    return render_prompt_template(
        prompts.system_proposition_template, {"proposition": proposition}
    )


def build_agent_system_prompt(profile: AgentProfile, prompts: ArenaPrompts) -> str:
    """Combine the shared base instructions with the agent's persona."""
    parts = [
        prompts.agent_system_base.strip(),
        render_prompt_template(
            prompts.agent_persona_template,
            {"name": profile.name, "persona": profile.persona},
        ).strip(),
    ]
    return " ".join(part for part in parts if part)


def build_chat_log(
    messages: Iterable[Message],
    names_by_agent_id: Mapping[str, str],
    prompts: ArenaPrompts,
) -> str:
    """Render the transcript as ``Speaker: content`` lines."""
    lines = []
    for message in messages:
        if message.agent_id is None:
            speaker = prompts.system_name
        else:
            speaker = names_by_agent_id.get(message.agent_id, prompts.unknown_agent_name)
        lines.append(f"{speaker}: {message.content}")
    return "\n".join(lines)


def build_user_prompt(chat_log: str, prompts: ArenaPrompts) -> str:
    return render_prompt_template(prompts.user_chat_log_template, {"chat_log": chat_log})


def format_timestamp(moment: datetime | None = None) -> str:
    """Short wall-clock time shown next to a message."""
    return (moment or datetime.now()).strftime("%H:%M")
