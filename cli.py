#!/usr/bin/env python3
"""Command-line arena: run debate rounds against a configured provider."""

import argparse
import asyncio
import logging
import sys

import httpx

from arena_engine import (
    Message,
    RoundHandlers,
    RoundParams,
    create_agents_from_roster,
    format_system_proposition,
    run_arena_round,
)
from config.settings import ConfigError, get_default_config
from main import setup_logging
from providers import RequesterFactory

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Run persona arena rounds from the terminal")
    p.add_argument("--config", type=str, help="Path to arena config YAML (default: $ARENA_CONFIG or ./arena-config.yaml)")
    p.add_argument("--provider", type=str, help="Provider key from the config")
    p.add_argument("--roster", type=str, help="Roster key from the config")
    p.add_argument("--proposition", type=str, default="", help="Debate topic (required)")
    p.add_argument("--rounds", type=int, default=1, help="Number of rounds to run")
    p.add_argument("--maxAgents", dest="max_agents", type=int, default=5, help="Max agents that may speak per round")
    p.add_argument("--temperature", type=float, default=0.7, help="Sampling temperature")
    p.add_argument("--model", type=str, help="Model name (defaults to the provider's first model)")
    p.add_argument("--stream", action="store_true", help="Enable streaming")
    return p


async def run_cli(args: argparse.Namespace, client: httpx.AsyncClient | None = None) -> int:
    """Run the requested rounds and return the process exit code."""
    proposition = (args.proposition or "").strip()
    if not proposition:
        print("Missing --proposition.", file=sys.stderr)
        return 1

    try:
        config = get_default_config(args.config)
        provider_key = args.provider or config.pick_default_provider_key()
        provider = config.get_provider(provider_key)
        roster = config.get_roster(args.roster or config.pick_default_roster_key())
    except ConfigError as e:
        print(f"Config error: {e}", file=sys.stderr)
        return 1

    setup_logging(config.system.log_level)

    model = (args.model or "").strip() or (provider.models[0] if provider.models else "")
    if not model:
        print(f"Provider '{provider_key}' has no models.", file=sys.stderr)
        return 1

    names_by_agent_id = {agent.id: agent.name for agent in roster.agents}
    messages = [Message.system(format_system_proposition(proposition, config.prompts))]

    print(
        f"Provider: {provider.name} ({provider_key}) | Model: {model} | "
        f"temp={args.temperature} | maxAgents={args.max_agents}"
    )
    print(messages[0].content)
    print()

    requester = RequesterFactory.create(
        provider, client=client, timeout=config.system.request_timeout
    )
    exit_code = 0
    try:
        for round_number in range(1, args.rounds + 1):
            spoke = 0

            async def on_agent_spoke(message: Message) -> None:
                nonlocal spoke
                spoke += 1
                print(f"{names_by_agent_id.get(message.agent_id, 'Agent')}: {message.content}")
                print()

            result = await run_arena_round(
                RoundParams(
                    model=model,
                    temperature=args.temperature,
                    max_agents=args.max_agents,
                    streaming=args.stream,
                    agents=create_agents_from_roster(roster.agents, config.prompts),
                    messages=messages,
                    requester=requester,
                ),
                RoundHandlers(on_agent_spoke=on_agent_spoke),
            )
            messages = result.messages

            if result.error:
                print(f"Error: {result.error}", file=sys.stderr)
                exit_code = 1
                break

            if spoke == 0:
                print("No agents responded.")
                print()

            print(f"\n--- Round {round_number} complete ---\n")
    finally:
        await requester.aclose()

    return exit_code


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    return asyncio.run(run_cli(args))


if __name__ == "__main__":
    sys.exit(main())
