"""CLI entry point for twofa.

Usage:
    twofa run                 # Interactive enrollment/verification TUI
    twofa code SECRET         # Print the current code for a base32 secret
    twofa new-secret          # Print a fresh secret (and URI with --issuer/--name)
"""

from __future__ import annotations

import logging
import time
from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape

from twofa import engine, keys
from twofa.config import LOG_LEVELS, settings

console = Console()
logger = logging.getLogger(__name__)


def _setup_logging(level: str, log_file: Path | None) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        datefmt="%H:%M:%S",
        filename=str(log_file) if log_file else None,
    )


@click.group()
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default=None,
    help="Logging level (default from TWOFA_LOG_LEVEL).",
)
@click.option("--log-file", type=click.Path(dir_okay=False, path_type=Path), default=None, help="Write logs here.")
def main(log_level: str | None, log_file: Path | None) -> None:
    """twofa — enroll and verify TOTP accounts from the terminal."""
    _setup_logging(log_level or settings.log_level, log_file or settings.log_file)


@main.command()
@click.option("--tick-interval", type=float, default=None, help="Seconds between clock ticks.")
@click.option("--alt-screen/--no-alt-screen", default=None, help="Draw on the terminal's alternate screen.")
def run(tick_interval: float | None, alt_screen: bool | None) -> None:
    """Start the interactive tool."""
    from twofa.runtime import Runtime
    from twofa.ui import TerminalView
    from twofa.workflow import Workflow

    interval = tick_interval if tick_interval is not None else settings.tick_interval
    if interval <= 0:
        raise click.BadParameter("must be positive", param_hint="--tick-interval")
    screen = settings.alt_screen if alt_screen is None else alt_screen

    logger.info("Starting TUI (tick interval %.2fs)", interval)
    with TerminalView(console=console, alt_screen=screen) as view:
        runtime = Runtime(Workflow(), render=view, key_source=keys.read_key, tick_interval=interval)
        final = runtime.run()
    console.print(f"Goodbye. {len(final.store)} account(s) enrolled this session were not saved.")


@main.command()
@click.argument("secret")
def code(secret: str) -> None:
    """Show the current code for SECRET with timing info."""
    now = time.time()
    try:
        current = engine.derive_code(secret, now)
        upcoming = engine.derive_code(secret, now + engine.PERIOD)
    except ValueError as e:
        console.print(f"[red]Invalid TOTP secret: {escape(str(e))}[/red]")
        raise SystemExit(1) from e
    console.print(f"Current code: [bold]{current}[/bold]")
    console.print(f"Time remaining: {engine.seconds_remaining(now)}s")
    console.print(f"Next code: {upcoming}")


@main.command("new-secret")
@click.option("--issuer", default=None, help="Issuer for the provisioning URI.")
@click.option("--name", default=None, help="Account name for the provisioning URI.")
def new_secret(issuer: str | None, name: str | None) -> None:
    """Generate a fresh secret."""
    try:
        secret = engine.generate_secret()
    except engine.GenerationError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        raise SystemExit(1) from e
    console.print(secret)
    if issuer and name:
        console.print(engine.build_provisioning_uri(issuer, name, secret), soft_wrap=True)


if __name__ == "__main__":
    main()
