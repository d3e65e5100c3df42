"""Main Click application root."""

from __future__ import annotations

import asyncio
import json
import logging

import click

from sensorconsole.core.config import get_core_config, set_core_config
from sensorconsole.core.config.main import Config
from sensorconsole.core.exceptions import ParseError, SensorConsoleError
from sensorconsole.modules.protocols.a2ui import (
    RenderedNode,
    RenderEngine,
    get_component_registry,
    parse_agent_response,
)

logger = logging.getLogger(__name__)


def _echo_rendered(nodes: tuple[RenderedNode, ...], fmt: str) -> None:
    if fmt == "json":
        click.echo(json.dumps([n.to_dict() for n in nodes], indent=2, ensure_ascii=False))
        return
    for node in nodes:
        click.echo(node.outline())


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False),
    help="Path to settings.toml",
)
@click.pass_context
def cli(ctx, verbose, config_path):
    """SensorConsole CLI - A2UI agent panel tools."""
    ctx.ensure_object(dict)
    set_core_config(Config.load(config_path))
    cfg = get_core_config()

    if verbose or cfg.debug:
        level = logging.DEBUG
    else:
        level = getattr(logging, cfg.log_level.upper(), logging.INFO)
    logging.basicConfig(level=level, format="%(levelname)s %(message)s")

    # Suppress verbose HTTP logging from Google API clients
    logging.getLogger("google").setLevel(logging.WARNING)
    logging.getLogger("google_genai").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("urllib3").setLevel(logging.WARNING)


@cli.command()
@click.argument("source", type=click.File("r", encoding="utf-8"))
@click.option(
    "--format", "fmt", type=click.Choice(["outline", "json"]), default="outline", show_default=True
)
def render(source, fmt):
    """Parse a raw agent response (file or '-') and print the rendered tree."""
    raw = source.read()
    try:
        parsed = parse_agent_response(raw)
    except ParseError as e:
        click.echo(f"Error [{e.code}]: {e.message}", err=True)
        raise SystemExit(1) from e
    if parsed.repaired:
        click.echo("(response was truncated and has been repaired)", err=True)
    _echo_rendered(RenderEngine().render_payload(parsed.payload), fmt)


@cli.command()
def components():
    """List the registered A2UI component types."""
    for type_tag in get_component_registry().types():
        click.echo(type_tag)


@cli.command()
@click.option("--model", default=None, help="LLM key, e.g. google/gemini-flash-latest")
@click.option(
    "--format", "fmt", type=click.Choice(["outline", "json"]), default="outline", show_default=True
)
def chat(model, fmt):
    """Interactive chat with the A2UI agent."""
    from sensorconsole.agent import AgentAssistant, AgentErrorTurn, AgentSession

    try:
        session = AgentSession.from_config(get_core_config(), model=model)
    except SensorConsoleError as e:
        raise click.ClickException(e.message) from e

    assistant = AgentAssistant(session, engine=RenderEngine())
    _echo_rendered(assistant.render_turn(assistant.log.last), fmt)

    async def _loop() -> None:
        while True:
            try:
                text = click.prompt("you", prompt_suffix="> ", default="", show_default=False)
            except click.Abort:
                return
            if text.strip() in {"/quit", "/exit"}:
                return
            turn = await assistant.submit(text)
            if turn is None:
                continue
            if isinstance(turn, AgentErrorTurn):
                click.secho(f"[{turn.failure}]", fg="red", err=True)
            _echo_rendered(assistant.render_turn(turn), fmt)

    asyncio.run(_loop())
