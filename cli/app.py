from __future__ import annotations

import sys
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

import typer

from cli.config import CLIConfig, load_config
from cli.render import echo_banner, echo_goodbye, echo_reply, style_status
from cli.session import run_chat
from logging_config import configure_logging
from services.router import IntentRouter, build_default_router


@dataclass
class CLIState:
    config: CLIConfig
    router: IntentRouter


app = typer.Typer(
    help="Ask questions about daily Malaysian air quality readings.",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def _get_state(ctx: typer.Context) -> CLIState:
    state = ctx.obj
    if not isinstance(state, CLIState):
        raise typer.Exit(code=1)
    return state


def build_router(config: CLIConfig) -> IntentRouter:
    decorate = style_status if config.color else None
    return build_default_router(config.data_path, config.seed, decorate)


@app.callback()
def main(
    ctx: typer.Context,
    data: Optional[Path] = typer.Option(
        None,
        "--data",
        "-d",
        dir_okay=False,
        help="Readings file (defaults to AIRQ_DATA_PATH or the bundled dataset).",
    ),
    color: Optional[bool] = typer.Option(
        None,
        "--color/--no-color",
        help="Colour status labels (defaults to AIRQ_COLOR).",
    ),
    seed: Optional[int] = typer.Option(
        None,
        "--seed",
        help="Seed for the fallback reply generator.",
    ),
) -> None:
    """Entry point for the CLI."""
    configure_logging()
    config = load_config(
        data_path=str(data) if data is not None else None,
        color=color,
        seed=seed,
    )
    ctx.obj = CLIState(config=config, router=build_router(config))


@app.command("ask")
def ask_command(
    ctx: typer.Context,
    question: List[str] = typer.Argument(..., help="The question to answer."),
    as_json: bool = typer.Option(
        False,
        "--json",
        help="Print the resolved intent as JSON instead of formatted text.",
    ),
) -> None:
    """Answer a single question and exit."""
    state = _get_state(ctx)
    utterance = " ".join(question)
    if as_json:
        intent = state.router.resolve(utterance)
        typer.echo(intent.model_dump_json(indent=2))
        return
    echo_reply(state.config.reply_prefix, state.router.respond(utterance))


@app.command("chat")
def chat_command(
    ctx: typer.Context,
    banner: bool = typer.Option(True, "--banner/--no-banner", help="Show the welcome banner."),
) -> None:
    """Start an interactive session reading one question per line."""
    state = _get_state(ctx)
    if banner:
        echo_banner()
    run_chat(state.router, sys.stdin, state.config)
    if banner:
        echo_goodbye()


@app.command("stats")
def stats_command(
    ctx: typer.Context,
    as_json: bool = typer.Option(
        False,
        "--json",
        help="Print the statistics as JSON instead of formatted text.",
    ),
) -> None:
    """Print dataset statistics."""
    state = _get_state(ctx)
    intent = state.router.statistics()
    if as_json:
        typer.echo(intent.model_dump_json(indent=2))
        return
    echo_reply(state.config.reply_prefix, state.router.formatter.render(intent))
