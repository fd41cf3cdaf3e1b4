from __future__ import annotations

from typing import Iterable

import typer

from models.records import STATUS_GOOD, STATUS_MODERATE, STATUS_UNHEALTHY

_STATUS_COLORS = {
    STATUS_GOOD: typer.colors.GREEN,
    STATUS_MODERATE: typer.colors.YELLOW,
    STATUS_UNHEALTHY: typer.colors.RED,
}

BANNER_RULE = "=" * 54

BANNER_LINES = (
    "    MALAYSIA AIR POLLUTANT AI - HISTORICAL DATA    ",
)

HELP_LINES = (
    "I have 1 month of daily API data (Oct 29 - Nov 29, 2025)!",
    "Try asking about:",
    "- Specific dates: 'today', '29 Nov', 'yesterday'",
    "- Areas with dates: 'KL today', 'Selangor on 29 Nov', 'melaka today'",
    "- Health advice: 'can I go out today?', 'is it safe to exercise in KL?'",
    "- Rankings: 'cleanest areas', 'most polluted ranking', 'top 10'",
    "- Trends and comparisons",
    "Type 'quit' or press Ctrl-D to exit.",
)


def style_status(label: str) -> str:
    """Colour a status label for the terminal; unknown labels pass through."""
    color = _STATUS_COLORS.get(label)
    if color is None:
        return label
    return typer.style(label, fg=color)


def echo_heading(lines: Iterable[str]) -> None:
    typer.echo()
    typer.echo(BANNER_RULE)
    for line in lines:
        typer.secho(line, bold=True)
    typer.echo(BANNER_RULE)


def echo_banner() -> None:
    echo_heading(BANNER_LINES)
    for line in HELP_LINES:
        typer.echo(line)
    typer.echo()


def echo_goodbye() -> None:
    echo_heading(("           Thank you for using our service!           ",))


def echo_reply(prefix: str, text: str) -> None:
    typer.echo(f"{prefix}{text}")
    typer.echo()
