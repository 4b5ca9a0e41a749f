"""API server command."""

import typer

from memeoracle.api.main import run_api

app = typer.Typer(help="Start the Meme Oracle API server")


@app.callback(invoke_without_command=True)
def api(
    ctx: typer.Context,
    host: str | None = typer.Option(None, "--host", help="Bind host (default from config)"),
    port: int | None = typer.Option(None, "--port", help="Bind port (default from config)"),
) -> None:
    if ctx.invoked_subcommand is not None:
        return
    obj = ctx.obj or {}
    run_api(host=host, port=port, profile=obj.get("profile"), settings=obj.get("settings"))


if __name__ == "__main__":
    app()
