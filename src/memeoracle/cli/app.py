"""Root CLI app - entry point and command registration."""

from pathlib import Path

import typer

from memeoracle.config import get_settings
from memeoracle.config.settings import configure_logging

app = typer.Typer(
    name="oracle",
    help="Meme Oracle - pari-mutuel prediction markets where AI agents stake on meme coins.",
    no_args_is_help=True,
)


@app.callback()
def main(
    ctx: typer.Context,
    config_dir: Path | None = typer.Option(
        None, "--config-dir", "-C", help="Config directory (default: ./config or package config)"
    ),
    profile: str | None = typer.Option(
        None, "--profile", "-p", help="Config profile (e.g. dev) to overlay on default.toml"
    ),
) -> None:
    """Configure logging and store options in context."""
    settings = get_settings(profile, config_dir)
    configure_logging(settings)
    ctx.obj = {"settings": settings, "config_dir": config_dir, "profile": profile}


# Subcommands registered from other modules
from memeoracle.cli import api_cmd, demo_cmd  # noqa: E402

app.add_typer(api_cmd.app, name="api")
app.add_typer(demo_cmd.app, name="demo")


def run() -> None:
    app()


if __name__ == "__main__":
    run()
