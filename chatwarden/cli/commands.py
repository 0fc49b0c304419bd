"""CLI commands for chatwarden."""

import asyncio

import typer
from rich.console import Console
from rich.table import Table

from chatwarden import __logo__, __version__

app = typer.Typer(
    name="chatwarden",
    help=f"{__logo__} chatwarden - WhatsApp group moderation bot",
    no_args_is_help=True,
)

console = Console()


def version_callback(value: bool):
    if value:
        console.print(f"{__logo__} chatwarden v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        None, "--version", "-v", callback=version_callback, is_eager=True
    ),
):
    """chatwarden - WhatsApp group moderation bot."""
    pass


# ============================================================================
# Onboard / Setup
# ============================================================================


@app.command()
def onboard():
    """Write a default chatwarden configuration."""
    from chatwarden.config.loader import get_config_path, save_config
    from chatwarden.config.schema import Config

    config_path = get_config_path()
    if config_path.exists():
        console.print(f"[yellow]Config already exists at {config_path}[/yellow]")
        if not typer.confirm("Overwrite?"):
            raise typer.Exit()

    save_config(Config())
    console.print(f"[green]✓[/green] Created config at {config_path}")
    console.print(f"\n{__logo__} chatwarden is ready!")
    console.print("\nNext steps:")
    console.print(f"  1. Add admin numbers and the bridge token to [cyan]{config_path}[/cyan]")
    console.print("  2. Optionally set [cyan]OPENAI_API_KEY[/cyan] for AI commands")
    console.print("  3. Run: [cyan]chatwarden run[/cyan]")


# ============================================================================
# Runtime
# ============================================================================


def _setup_logging(config, verbose: bool) -> None:
    from chatwarden.utils.helpers import configure_logging, get_logs_path

    level = "DEBUG" if verbose else config.logging.level
    log_file = get_logs_path() / "chatwarden.log" if config.logging.file_enabled else None
    configure_logging(
        level,
        log_file=log_file,
        rotation=config.logging.rotation,
        retention=config.logging.retention,
    )


@app.command()
def run(
    verbose: bool = typer.Option(False, "--verbose", help="Verbose output"),
):
    """Connect to the WhatsApp bridge and moderate incoming messages."""
    from chatwarden.app.bootstrap import build_service
    from chatwarden.channels.whatsapp import WhatsAppChannel
    from chatwarden.config.loader import load_config

    config = load_config()
    _setup_logging(config, verbose)

    if not config.channels.whatsapp.bridge_token.strip():
        console.print("[red]Error: channels.whatsapp.bridgeToken is not set.[/red]")
        raise typer.Exit(1)

    service = build_service(config)
    channel = WhatsAppChannel(config.channels.whatsapp, service)
    service.bind_transport(channel)

    console.print(f"{__logo__} Starting chatwarden against {config.channels.whatsapp.resolved_bridge_url}")

    async def serve():
        try:
            await channel.start()
        finally:
            await channel.stop()
            await service.aclose()

    try:
        asyncio.run(serve())
    except KeyboardInterrupt:
        console.print("\nShutting down...")


@app.command()
def moderate(
    text: str = typer.Argument(..., help="Message body to check"),
    sender: str = typer.Option("0000000000@c.us", "--sender", "-s", help="Sender address"),
    group: str | None = typer.Option(None, "--group", "-g", help="Group address"),
):
    """Dry-run one message through moderation and command dispatch."""
    from chatwarden.app.bootstrap import build_service
    from chatwarden.config.loader import load_config

    config = load_config()
    service = build_service(config)

    async def run_once():
        try:
            return await service.handle_inbound_message(text, sender, group, False)
        finally:
            await service.aclose()

    result = asyncio.run(run_once())
    if result.reply is None:
        console.print("[dim]No reply (message allowed)[/dim]")
    else:
        console.print(result.reply)
    if result.delete:
        console.print("[yellow]Message would be deleted[/yellow]")


@app.command()
def status():
    """Show chatwarden configuration status."""
    from chatwarden.app.bootstrap import build_service
    from chatwarden.config.loader import get_config_path, load_config

    config_path = get_config_path()
    config = load_config()
    snapshot = build_service(config).status_snapshot()

    console.print(f"{__logo__} chatwarden Status\n")
    console.print(f"Config: {config_path} {'[green]✓[/green]' if config_path.exists() else '[red]✗[/red]'}")
    console.print(f"Bridge: {config.channels.whatsapp.resolved_bridge_url}")
    console.print(
        f"Bridge token: {'[green]✓[/green]' if config.channels.whatsapp.bridge_token else '[dim]not set[/dim]'}"
    )

    table = Table(title="Features")
    table.add_column("Feature", style="cyan")
    table.add_column("Enabled")
    for name, enabled in snapshot.features.items():
        table.add_row(name, "[green]✓[/green]" if enabled else "[dim]✗[/dim]")
    console.print(table)

    console.print(f"Prefix: {config.commands.prefix}  AI prefix: {config.commands.ai_prefix!r}")
    console.print(f"Admins: {', '.join(config.admins) or '[dim]none[/dim]'}")
    console.print(
        f"Rate limit: {config.moderation.max_messages_per_minute}/min, "
        f"warnings before ban: {config.moderation.max_warnings}"
    )


if __name__ == "__main__":
    app()
