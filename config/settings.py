"""Configuration settings and data models."""

import logging
import os
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILENAME = "arena-config.yaml"
CONFIG_PATH_ENV_VAR = "ARENA_CONFIG"
DEFAULT_ACCENT = "#9aa2ff"


class ConfigError(ValueError):
    """Raised when the arena configuration is missing or malformed."""


class ArenaPrompts(BaseModel):
    """Prompt templates shared by every agent of the arena."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    system_name: str = Field(
        ..., alias="systemName", description="Speaker label for system messages"
    )
    unknown_agent_name: str = Field(
        ..., alias="unknownAgentName", description="Label for speakers missing from the roster"
    )
    system_proposition_template: str = Field(
        ..., alias="systemPropositionTemplate", description="Renders {{proposition}}"
    )
    agent_system_base: str = Field(
        ..., alias="agentSystemBase", description="Instructions every agent receives"
    )
    agent_persona_template: str = Field(
        ..., alias="agentPersonaTemplate", description="Renders {{name}} and {{persona}}"
    )
    user_chat_log_template: str = Field(
        ..., alias="userChatLogTemplate", description="Renders {{chat_log}}"
    )

    @field_validator("system_name", "unknown_agent_name", mode="before")
    @classmethod
    def strip_labels(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("*")
    @classmethod
    def require_text(cls, v, info):
        if not v.strip():
            raise ValueError(f"prompts.{info.field_name} is required")
        return v


class AgentProfile(BaseModel):
    """Static identity of a persona agent."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Unique id within the roster")
    name: str = Field(..., description="Display name")
    persona: str = Field(..., description="Persona description fed to the model")
    accent: str = Field(default=DEFAULT_ACCENT, description="Display accent colour")

    @field_validator("id", "name", "persona", "accent", mode="before")
    @classmethod
    def strip_text(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("id", "name", "persona")
    @classmethod
    def require_text(cls, v, info):
        if not v:
            raise ValueError(f"Agent is missing {info.field_name}")
        return v

    @field_validator("accent")
    @classmethod
    def default_accent(cls, v):
        return v or DEFAULT_ACCENT


class ProviderConfig(BaseModel):
    """An OpenAI-compatible completion provider."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    key: str = Field(default="", description="Registry key, filled in on load")
    name: str = Field(default="", description="Display name, defaults to the key")
    base_url: str = Field(default="", alias="baseUrl", description="API base URL")
    api_key: str = Field(default="", alias="apiKey", description="API key")
    api_key_env: str | None = Field(
        default=None,
        alias="apiKeyEnv",
        description="Environment variable holding the API key when apiKey is unset",
    )
    models: list[str] = Field(default_factory=list, description="Selectable model names")

    @field_validator("name", "base_url", "api_key", mode="before")
    @classmethod
    def strip_text(cls, v):
        if v is None:
            return ""
        return v.strip() if isinstance(v, str) else v

    @field_validator("models", mode="before")
    @classmethod
    def keep_named_models(cls, v):
        if not isinstance(v, list):
            return []
        return [m.strip() for m in v if isinstance(m, str) and m.strip()]

    @model_validator(mode="before")
    @classmethod
    def resolve_api_key_from_env(cls, data):
        if not isinstance(data, dict):
            return data
        api_key = data.get("apiKey", data.get("api_key"))
        env_name = data.get("apiKeyEnv", data.get("api_key_env"))
        if isinstance(api_key, str) and api_key.strip():
            return data
        if isinstance(env_name, str) and env_name.strip():
            env_value = os.getenv(env_name.strip(), "").strip()
            if env_value:
                data = {k: v for k, v in data.items() if k not in ("apiKey", "api_key")}
                data["apiKey"] = env_value
        return data

    @model_validator(mode="after")
    def validate_connection(self) -> "ProviderConfig":
        if not self.base_url:
            raise ValueError("Provider is missing baseUrl")
        if not self.api_key:
            raise ValueError("Provider is missing apiKey")
        if not self.models:
            raise ValueError("Provider must have at least one model")
        return self


class RosterConfig(BaseModel):
    """A named, ordered set of agents."""

    model_config = ConfigDict(frozen=True)

    key: str = Field(default="", description="Registry key, filled in on load")
    name: str = Field(default="", description="Display name, defaults to the key")
    agents: list[AgentProfile] = Field(..., description="Agents of the roster")

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, v):
        if v is None:
            return ""
        return v.strip() if isinstance(v, str) else v

    @model_validator(mode="before")
    @classmethod
    def require_agent_list(cls, data):
        if isinstance(data, dict) and not isinstance(data.get("agents"), list):
            raise ValueError("Roster is missing agents array")
        return data

    @field_validator("agents")
    @classmethod
    def validate_agents(cls, v: list[AgentProfile]):
        if not v:
            raise ValueError("Roster must have at least one agent")

        seen: set[str] = set()
        for agent in v:
            if agent.id in seen:
                raise ValueError(f"Roster has duplicate agent id '{agent.id}'")
            seen.add(agent.id)
        return v


class UiConfig(BaseModel):
    """Presentation defaults."""

    model_config = ConfigDict(populate_by_name=True)

    default_proposition: str = Field(default="", alias="defaultProposition")

    @field_validator("default_proposition", mode="before")
    @classmethod
    def strip_proposition(cls, v):
        if not isinstance(v, str):
            return ""
        return v.strip()


class SystemConfig(BaseModel):
    """Process-wide settings."""

    model_config = ConfigDict(populate_by_name=True)

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO", alias="logLevel"
    )
    request_timeout: float = Field(
        default=60.0, alias="requestTimeout", description="Completion request timeout in seconds"
    )


def _keyed_entries(section: str, value: Any) -> dict[str, Any]:
    """Drop blank keys and stamp each entry with its key and default name."""
    if not isinstance(value, dict):
        raise ValueError(f"{section} must be an object map")

    entries: dict[str, Any] = {}
    for key, entry in value.items():
        key = str(key).strip()
        if not key:
            continue
        if isinstance(entry, BaseModel):
            entry = entry.model_dump(by_alias=True)
        if not isinstance(entry, dict):
            raise ValueError(f"{section} entry '{key}' must be an object")
        name = entry.get("name")
        entries[key] = {
            **entry,
            "key": key,
            "name": name.strip() if isinstance(name, str) and name.strip() else key,
        }

    if not entries:
        raise ValueError(f"{section} must not be empty")
    return entries


class ArenaConfig(BaseModel):
    """Complete arena configuration."""

    model_config = ConfigDict(populate_by_name=True)

    ui: UiConfig = Field(default_factory=UiConfig)
    prompts: ArenaPrompts
    default_provider: str | None = Field(default=None, alias="defaultProvider")
    providers: dict[str, ProviderConfig]
    default_roster: str | None = Field(default=None, alias="defaultRoster")
    rosters: dict[str, RosterConfig]
    system: SystemConfig = Field(default_factory=SystemConfig)

    @field_validator("ui", "system", mode="before")
    @classmethod
    def allow_empty_section(cls, v):
        return v if isinstance(v, dict) else {}

    @field_validator("prompts", mode="before")
    @classmethod
    def require_prompts_map(cls, v):
        if not isinstance(v, dict):
            raise ValueError("prompts must be an object")
        return v

    @field_validator("providers", mode="before")
    @classmethod
    def normalize_providers(cls, v):
        return _keyed_entries("providers", v)

    @field_validator("rosters", mode="before")
    @classmethod
    def normalize_rosters(cls, v):
        return _keyed_entries("rosters", v)

    @field_validator("default_provider", "default_roster", mode="before")
    @classmethod
    def blank_to_none(cls, v):
        if not isinstance(v, str) or not v.strip():
            return None
        return v.strip()

    @classmethod
    def load_from_file(cls, config_path: Path) -> "ArenaConfig":
        """Load configuration from a YAML file."""
        if not config_path.exists():
            raise ConfigError(
                f"Missing arena config: {config_path}. "
                "Create it from arena-config.example.yaml"
            )

        with open(config_path, "r", encoding="utf-8") as f:
            try:
                data = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise ConfigError(f"Invalid YAML in {config_path}: {e}") from e

        return cls.from_mapping(data)

    @classmethod
    def from_mapping(cls, data: Any) -> "ArenaConfig":
        """Validate an already parsed configuration document."""
        if not isinstance(data, dict):
            raise ConfigError("Invalid YAML: root must be an object.")

        # Validate required sections
        required_sections = ["prompts", "providers", "rosters"]
        missing_sections = [
            section for section in required_sections if section not in data
        ]
        if missing_sections:
            raise ConfigError(f"Missing required config sections: {missing_sections}")

        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise ConfigError(_describe_validation_error(e)) from e

    def save_to_file(self, config_path: Path) -> None:
        """Save configuration to YAML file."""
        config_path.parent.mkdir(parents=True, exist_ok=True)

        data = self.model_dump(by_alias=True, exclude_none=True)
        for section in ("providers", "rosters"):
            for entry in data[section].values():
                entry.pop("key", None)

        with open(config_path, "w", encoding="utf-8") as f:
            yaml.dump(
                data,
                f,
                default_flow_style=False,
                indent=2,
                sort_keys=False,
                allow_unicode=True,
            )

    def pick_default_provider_key(self) -> str:
        if self.default_provider and self.default_provider in self.providers:
            return self.default_provider
        return next(iter(self.providers))

    def get_provider(self, key: str) -> ProviderConfig:
        provider = self.providers.get(key)
        if provider is None:
            raise ConfigError(f"Unknown provider '{key}'.")
        return provider

    def list_provider_summaries(self) -> list[dict[str, Any]]:
        return [
            {"key": key, "name": provider.name, "models": list(provider.models)}
            for key, provider in self.providers.items()
        ]

    def pick_default_roster_key(self) -> str:
        if self.default_roster and self.default_roster in self.rosters:
            return self.default_roster
        return next(iter(self.rosters))

    def get_roster(self, key: str) -> RosterConfig:
        roster = self.rosters.get(key)
        if roster is None:
            raise ConfigError(f"Unknown roster '{key}'.")
        return roster

    def list_roster_summaries(self) -> list[dict[str, Any]]:
        return [
            {"key": key, "name": roster.name, "agentCount": len(roster.agents)}
            for key, roster in self.rosters.items()
        ]

    def get_default_proposition(self) -> str:
        return self.ui.default_proposition.strip()


def _describe_validation_error(error: ValidationError) -> str:
    """Flatten a pydantic error into one readable line per problem."""
    problems = []
    for item in error.errors():
        location = ".".join(str(part) for part in item["loc"])
        message = item["msg"].removeprefix("Value error, ")
        problems.append(f"{location}: {message}" if location else message)
    return "Invalid arena config: " + "; ".join(problems)


def resolve_config_path(config_path: str | Path | None = None) -> Path:
    """Resolve the config file from an explicit path, ARENA_CONFIG or the cwd."""
    configured = str(config_path).strip() if config_path else ""
    if not configured:
        configured = os.environ.get(CONFIG_PATH_ENV_VAR, "").strip()
    if configured:
        path = Path(configured)
        return path if path.is_absolute() else Path.cwd() / path
    return Path.cwd() / DEFAULT_CONFIG_FILENAME


def get_default_config(config_path: str | Path | None = None) -> ArenaConfig:
    """Load the arena configuration from the resolved config path."""
    path = resolve_config_path(config_path)
    logger.debug(f"Loading arena config from {path}")
    return ArenaConfig.load_from_file(path)


def get_template_config() -> ArenaConfig:
    """Get template configuration for config file generation."""
    return ArenaConfig(
        ui=UiConfig(default_proposition="Social media does more harm than good."),
        prompts=ArenaPrompts(
            system_name="Moderator",
            unknown_agent_name="Unknown",
            system_proposition_template="Proposition: {{proposition}}",
            agent_system_base=(
                "You are one voice in a live group debate. Read the chat log and "
                "decide whether you have something worth adding. Reply with JSON "
                'only: {"should_respond": true|false, "content": "<your reply>"}. '
                "Keep replies under 80 words."
            ),
            agent_persona_template="You are {{name}}. {{persona}}",
            user_chat_log_template="Chat log so far:\n{{chat_log}}\n\nYour turn.",
        ),
        default_provider="openai",
        providers={
            "openai": ProviderConfig(
                key="openai",
                name="OpenAI",
                base_url="https://api.openai.com/v1",
                api_key_env="OPENAI_API_KEY",
                api_key="sk-replace-me",
                models=["gpt-4o-mini"],
            ),
        },
        default_roster="philosophers",
        rosters={
            "philosophers": RosterConfig(
                key="philosophers",
                name="Philosophers",
                agents=[
                    AgentProfile(
                        id="socrates",
                        name="Socrates",
                        persona="Relentless questioner. Pulls hidden assumptions into daylight.",
                        accent="#8bf3ff",
                    ),
                    AgentProfile(
                        id="nietzsche",
                        name="Nietzsche",
                        persona="Existential critic. Attacks herd morality with fire and irony.",
                        accent="#ff7b9c",
                    ),
                    AgentProfile(
                        id="marx",
                        name="Marx",
                        persona="Historical materialist. Frames everything as class conflict.",
                        accent="#a58bff",
                    ),
                ],
            ),
        },
        system=SystemConfig(log_level="INFO", request_timeout=60.0),
    )
