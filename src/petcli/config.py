"""Config file creation, loading and resolution."""

import json
import logging
import os
import sys
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from petcli.errors import ConfigLoadError, MissingCredential

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path.home() / ".config" / "petcli" / "config.toml"
API_KEY_ENV = "OPENAI_API_KEY"
PROVIDERS = ("openai", "ollama")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

DEFAULT_ASCII = """\
  /\\___/\\
 (  o o  )
 (  =^=  )
  (____)
"""


@dataclass(frozen=True)
class Config:
    """Settings loaded once at startup."""

    pet_name: str = "Whiskers"
    pet_ascii: str = DEFAULT_ASCII
    history_limit: int = 100
    command_history_limit: int = 50
    context_messages: int = 6
    llm_provider: str = "openai"
    model: str = "gpt-3.5-turbo"
    base_url: str = "https://api.openai.com"
    ollama_url: str = "http://localhost:11434"
    ollama_model: str = "llama2"
    timeout: float = 30.0
    theme: str = "default"
    log_level: str = "WARNING"


DEFAULTS: dict[str, Any] = asdict(Config())


def _toml_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return repr(value)
    if "\n" in value:
        # Literal multi-line string so backslashes in the art survive
        return f"'''\n{value}'''"
    return json.dumps(value)


def render_default_config() -> str:
    """Return the text of a config file holding every default value."""
    lines = ["# PetCLI configuration", ""]
    for key, value in DEFAULTS.items():
        lines.append(f"{key} = {_toml_value(value)}")
    return "\n".join(lines) + "\n"


def ensure_config(path: Path | None = None) -> Path:
    """Create the config file with defaults if it doesn't exist yet."""
    config_path = path or DEFAULT_CONFIG_PATH
    if not config_path.exists():
        config_path.parent.mkdir(parents=True, exist_ok=True)
        config_path.write_text(render_default_config(), encoding="utf-8")
        logger.info("Wrote default config to %s", config_path)
    return config_path


def load_config(path: Path | None = None) -> Config:
    """Load config from TOML file. Returns defaults if the file doesn't exist.

    Unknown keys are ignored. Raises ConfigLoadError for malformed TOML or
    values of the wrong type.
    """
    config_path = path or DEFAULT_CONFIG_PATH
    if not config_path.exists():
        return Config()
    try:
        with open(config_path, "rb") as f:
            raw = tomllib.load(f)
    except (tomllib.TOMLDecodeError, OSError) as e:
        raise ConfigLoadError(f"Could not read {config_path}: {e}", config_path) from e
    return config_from_dict(raw, config_path)


def config_from_dict(raw: dict[str, Any], path: Path | None = None) -> Config:
    values: dict[str, Any] = {}
    for field in fields(Config):
        if field.name not in raw:
            continue
        value = raw[field.name]
        expected = type(DEFAULTS[field.name])
        if expected is float and isinstance(value, int) and not isinstance(value, bool):
            value = float(value)
        if not isinstance(value, expected) or isinstance(value, bool):
            raise ConfigLoadError(
                f"'{field.name}' should be {expected.__name__}, got {type(value).__name__}", path
            )
        values[field.name] = value

    if values.get("history_limit", 1) < 1:
        raise ConfigLoadError("'history_limit' must be at least 1", path)
    if values.get("llm_provider", "openai") not in PROVIDERS:
        raise ConfigLoadError(
            f"'llm_provider' must be one of {', '.join(PROVIDERS)}", path
        )
    if values.get("log_level", "WARNING").upper() not in LOG_LEVELS:
        raise ConfigLoadError(
            f"'log_level' must be one of {', '.join(LOG_LEVELS)}", path
        )
    return Config(**values)


def resolve(cli_value: Any, config_value: Any, default: Any) -> Any:
    """Resolve a setting with precedence: CLI flag > config file > default."""
    if cli_value is not None:
        return cli_value
    if config_value is not None:
        return config_value
    return default


def require_api_key(env: dict[str, str] | None = None) -> str:
    """Return the OpenAI API key or raise MissingCredential."""
    env = os.environ if env is None else env
    key = env.get(API_KEY_ENV, "").strip()
    if not key:
        raise MissingCredential(API_KEY_ENV)
    return key
