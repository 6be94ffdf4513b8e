"""Entry point — click CLI, config resolution, logging and app launch."""

import asyncio
import logging
import sys
from dataclasses import replace
from pathlib import Path

import click
from dotenv import load_dotenv
from rich.console import Console

from petcli.app import PetApp
from petcli.client import OllamaClient, OpenAIClient, PetClient
from petcli.config import (
    DEFAULT_CONFIG_PATH,
    PROVIDERS,
    Config,
    ensure_config,
    load_config,
    require_api_key,
    resolve,
)
from petcli.errors import ConfigLoadError, MissingCredential
from petcli.shell_history import RecentCommands, load_recent_commands
from petcli.storage import DEFAULT_DATA_DIR, Storage
from petcli.themes import THEME_NAMES

console = Console()
logger = logging.getLogger("petcli")

LOG_PATH = DEFAULT_DATA_DIR / "petcli.log"


def configure_logging(level: str, path: Path = LOG_PATH) -> None:
    """Send the petcli logger to a file; the full-screen UI owns the terminal."""
    path.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(path, encoding="utf-8")
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
    logger.handlers[:] = [handler]
    logger.setLevel(level.upper())
    logger.propagate = False


def build_client(config: Config, api_key: str | None) -> PetClient:
    if config.llm_provider == "ollama":
        return OllamaClient(
            base_url=config.ollama_url,
            model=config.ollama_model,
            pet_name=config.pet_name,
            timeout=config.timeout,
        )
    return OpenAIClient(
        base_url=config.base_url,
        model=config.model,
        pet_name=config.pet_name,
        api_key=api_key,
        timeout=config.timeout,
    )


async def _run_app(config: Config, api_key: str | None, reset: bool) -> None:
    client = build_client(config, api_key)
    storage = Storage()
    if reset:
        storage.reset()
    recent = RecentCommands(
        config.command_history_limit, load_recent_commands(config.command_history_limit)
    )
    app = PetApp.load(config, client, storage, recent)
    logger.info("Session started (%s, mood=%s)", config.pet_name, app.state.mood.value)
    try:
        await app.run(console)
    finally:
        await app.close()
        logger.info("Session ended (%d interactions)", app.state.interaction_count)


@click.command()
@click.option("--config", "config_path", default=None, type=click.Path(path_type=Path), help=f"Path to config file (default: {DEFAULT_CONFIG_PATH}).")
@click.option("--name", default=None, help="Override the pet's name.")
@click.option("--provider", default=None, type=click.Choice(PROVIDERS, case_sensitive=False), help="AI backend to use.")
@click.option("--model", default=None, help="Model name to send in requests.")
@click.option("--theme", default=None, type=click.Choice(THEME_NAMES, case_sensitive=False), help="Color theme.")
@click.option("--timeout", default=None, type=float, help="Seconds to wait for an AI reply (default: 30).")
@click.option("--reset", is_flag=True, help="Forget the saved pet and chat history.")
@click.option("--verbose", "-v", is_flag=True, help="Log debug output to the log file.")
def main(
    config_path: Path | None,
    name: str | None,
    provider: str | None,
    model: str | None,
    theme: str | None,
    timeout: float | None,
    reset: bool,
    verbose: bool,
) -> None:
    """PetCLI — a terminal pet that chats and helps with shell commands. Esc to quit."""
    load_dotenv()

    try:
        cfg = load_config(ensure_config(config_path))
    except ConfigLoadError as e:
        console.print(f"[yellow]Warning:[/yellow] {e}. Using default settings.")
        cfg = Config()
    except OSError as e:
        console.print(f"[yellow]Warning:[/yellow] Could not create config file: {e}. Using default settings.")
        cfg = Config()

    cfg = replace(
        cfg,
        pet_name=resolve(name, cfg.pet_name, Config.pet_name),
        llm_provider=resolve(provider, cfg.llm_provider, Config.llm_provider).lower(),
        theme=resolve(theme, cfg.theme, Config.theme),
        timeout=resolve(timeout, cfg.timeout, Config.timeout),
    )
    if model is not None:
        if cfg.llm_provider == "ollama":
            cfg = replace(cfg, ollama_model=model)
        else:
            cfg = replace(cfg, model=model)

    configure_logging("DEBUG" if verbose else cfg.log_level)

    api_key = None
    if cfg.llm_provider == "openai":
        try:
            api_key = require_api_key()
        except MissingCredential as e:
            console.print(f"[bold red]Error:[/bold red] {e}")
            console.print("[dim]Export it in your shell or put it in a .env file.[/dim]")
            raise SystemExit(1)

    # Require a real terminal
    if not sys.stdin.isatty():
        console.print("[bold red]Error:[/bold red] petcli requires an interactive terminal.")
        raise SystemExit(1)

    try:
        asyncio.run(_run_app(cfg, api_key, reset))
    except OSError as e:
        logger.exception("Terminal failure")
        console.print(f"[bold red]Error:[/bold red] Could not run the terminal UI: {e}")
        raise SystemExit(1)


if __name__ == "__main__":
    main()
