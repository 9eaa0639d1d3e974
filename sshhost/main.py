"""Command line entry point for sshhost."""

from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape

from sshhost import __version__
from sshhost.ssh_config import SSHConfigError
from sshhost.updater import UpdateOptions, UpdateResult, default_config_path, update_ssh_config

app = typer.Typer(
    name="sshhost",
    help="Point an SSH host alias in ~/.ssh/config at a newly provisioned machine",
    add_completion=False,
)
# Diagnostics go to stderr so that --dry-run output stays clean on stdout
console = Console(stderr=True)


def version_callback(value: bool) -> None:
    if value:
        typer.echo(f"sshhost {__version__}")
        raise typer.Exit()


@app.command()
def update(
    key: str = typer.Option("", "-k", "--key", help="Host key to update"),
    hostname: str = typer.Option("", "-h", "--hostname", help="New HostName"),
    identity_file: str = typer.Option("", "-i", "--identity-file", help="New IdentityFile path"),
    user: str = typer.Option("", "-u", "--user", help="New User"),
    config_path: Path | None = typer.Option(
        None, "-c", "--config", help="SSH config file (default: $HOME/.ssh/config)"
    ),
    backup: bool = typer.Option(False, "--backup", help="Keep config.bak before overwriting"),
    dry_run: bool = typer.Option(
        False, "--dry-run", help="Print the updated config instead of writing it"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show progress messages"),
    version: bool | None = typer.Option(
        None,
        "--version",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
):
    """
    Update HostName, IdentityFile and/or User of the host blocks matching KEY.

    A missing config file or an unknown key is not an error: the command
    reports it and exits successfully without touching anything.
    """
    options = UpdateOptions(
        key=key,
        hostname=hostname,
        identity_file=identity_file,
        user=user,
        backup=backup,
    )
    target = config_path or default_config_path()

    if verbose:
        console.print(f"[dim]Reading SSH config: {target}[/dim]")
        if not options.replacements():
            console.print("[dim]No replacement values given, file will be rewritten as-is[/dim]")

    try:
        result, document = update_ssh_config(target, options, dry_run=dry_run)
    except SSHConfigError as e:
        console.print(f"[red]Error: could not parse {target}: {escape(str(e))}[/red]")
        raise typer.Exit(1)
    except (OSError, UnicodeDecodeError) as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(1)

    if result is UpdateResult.CONFIG_MISSING:
        console.print("[yellow]ssh config file not found, skipping update[/yellow]")
        return

    if result is UpdateResult.HOST_NOT_FOUND:
        console.print(
            f"[yellow]host {escape(key)} not found in ssh config file, skipping update[/yellow]"
        )
        return

    if dry_run:
        # Raw text, no rich markup or wrapping
        typer.echo(document.to_text(), nl=False)
        return

    changed = ", ".join(f"{name}={escape(value)}" for name, value in options.replacements().items())
    if changed:
        console.print(f"[green]✓[/green] Updated SSH config for {escape(key)}: {changed}")
    else:
        console.print(f"[green]✓[/green] Host {escape(key)} found, nothing to change")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
