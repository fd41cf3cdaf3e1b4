"""Line-based chat loop around the router."""

from __future__ import annotations

from typing import Iterator, TextIO

import typer

from cli.config import CLIConfig
from cli.render import echo_reply
from services.knowledge import FAREWELL_PHRASE
from services.lexicon import normalize
from services.router import IntentRouter

EXIT_COMMANDS = frozenset({"quit", "exit"})


def iter_committed_lines(stream: TextIO) -> Iterator[str]:
    """Yield each non-blank line from ``stream`` without its line ending."""
    for raw in stream:
        line = raw.rstrip("\r\n")
        if line.strip():
            yield line


def run_chat(router: IntentRouter, stream: TextIO, config: CLIConfig) -> None:
    """Answer lines until EOF or an exit command.

    The router itself never ends a session; "quit" and "exit" only produce a
    farewell reply, and this loop decides to stop after printing it.
    """
    typer.echo(config.prompt, nl=False)
    for line in iter_committed_lines(stream):
        typer.echo()
        echo_reply(config.reply_prefix, router.respond(line))
        if normalize(line.strip()) in EXIT_COMMANDS:
            return
        typer.echo(config.prompt, nl=False)

    typer.echo()
    echo_reply(config.reply_prefix, router.respond(FAREWELL_PHRASE))
