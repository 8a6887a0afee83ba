"""onepass — command-line front end to the vault.

Commands
--------
  init     Initialise a new encrypted vault
  new      Create a resource
  get      Retrieve a resource (optionally copy its password to the clipboard)
  list     List resource names
  update   Change the name, user or password of a resource
  del      Delete a resource
  suggest  Suggest strong random passwords
  purge    Remove the vault file
  info     Show vault location and size
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Annotated, Any, Callable, NoReturn, Optional, TypeVar

import pyperclip
import typer
from rich import box
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.prompt import Confirm, Prompt
from rich.table import Table
from rich.text import Text
from rich.theme import Theme

from . import __version__, config
from .errors import VaultError
from .guard import OperationGuard
from .models import Resource, ResourceField
from .password import suggest as suggest_password
from .resources import ResourceStore
from .validation import validate_master_password

T = TypeVar("T")

# ---------------------------------------------------------------------------
# App & consoles
# ---------------------------------------------------------------------------

_THEME = Theme(
    {
        "success": "bold green",
        "warning": "bold yellow",
        "danger": "bold red",
        "muted": "dim",
        "label": "cyan",
        "highlight": "bold white",
    }
)

console = Console(theme=_THEME)
err = Console(stderr=True, theme=_THEME)

app = typer.Typer(
    name="onepass",
    help="[bold cyan]onepass[/bold cyan]: a password-protected credential vault in a single file.",
    no_args_is_help=True,
    pretty_exceptions_show_locals=False,
    rich_markup_mode="rich",
    add_completion=False,
)

MSG_NO_RESOURCES = "No resources saved - create one with [bold]onepass new[/bold]."


@dataclass
class Session:
    """Per-invocation state shared by every command."""

    path: Path
    guard: OperationGuard = field(default_factory=OperationGuard)

    @property
    def store(self) -> ResourceStore:
        return ResourceStore.at(self.path, self.guard)


# ---------------------------------------------------------------------------
# Shared helpers
# ---------------------------------------------------------------------------


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=err, show_path=False, show_time=verbose)],
        force=True,
    )


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"onepass {__version__}")
        raise typer.Exit()


def _session(ctx: typer.Context) -> Session:
    return ctx.obj


def _fail(message: str) -> NoReturn:
    err.print(f"[danger]{message}[/danger]")
    raise typer.Exit(1)


def _run(session: Session, func: Callable[..., T], *args: Any) -> T:
    """Run one vault operation under the interrupt guard."""
    try:
        return session.guard.run(func, *args)
    except VaultError as exc:
        _fail(escape(str(exc)))


def _ask(session: Session, prompt: str, *, password: bool = False, default: Optional[str] = None) -> str:
    with session.guard.prompting():
        if default is None:
            return Prompt.ask(prompt, password=password, console=console)
        return Prompt.ask(prompt, password=password, default=default, console=console)


def _confirm(session: Session, prompt: str, default: bool = False) -> bool:
    with session.guard.prompting():
        return Confirm.ask(prompt, default=default, console=console)


def _master_password(session: Session, *, confirm: bool = False) -> str:
    """Return the master password from the environment or a hidden prompt."""
    password = os.environ.get(config.PASSWORD_ENV)
    if password is None:
        password = _ask(session, "Master password", password=True)
        if confirm and password != _ask(session, "Confirm password", password=True):
            _fail("Passwords do not match.")
    try:
        return validate_master_password(password)
    except VaultError as exc:
        _fail(escape(str(exc)))


def _require_vault(session: Session) -> None:
    if not session.path.exists():
        _fail(f"No vault found at {session.path}. Run [bold]onepass init[/bold] first.")


def _copy_to_clipboard(session: Session, secret: str) -> None:
    try:
        pyperclip.copy(secret)
    except pyperclip.PyperclipException:
        console.print("[warning]Could not access clipboard. Is a clipboard mechanism available?[/warning]")
        return
    console.print("[success]Password copied to clipboard.[/success]")
    try:
        _ask(session, "Press Enter to clear the clipboard", default="")
    finally:
        pyperclip.copy("")


def _render_resource(resource: Resource, *, show_password: bool = False) -> None:
    body = Text()

    def row(label: str, value: str, style: str = "highlight") -> None:
        body.append(f"  {label:<10}", style="label")
        body.append(value + "\n", style=style)

    row("User", resource.user or "-")
    if show_password:
        row("Password", resource.password, style="bold green")
    else:
        row("Password", "••••••••••••", style="muted")

    console.print(
        Panel(body, title=f"[bold cyan]{resource.name}[/bold cyan]", expand=False, border_style="cyan")
    )


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


@app.callback()
def main_callback(
    ctx: typer.Context,
    location: Annotated[
        Optional[str],
        typer.Option(
            "--location",
            "-l",
            help="Vault file location (relative paths are taken from your home directory).",
            show_default=False,
        ),
    ] = None,
    verbose: Annotated[bool, typer.Option("--verbose", help="Show debug logging.")] = False,
    version: Annotated[
        Optional[bool],
        typer.Option("--version", callback=_version_callback, is_eager=True, help="Show version and exit."),
    ] = None,
) -> None:
    _configure_logging(verbose)
    session = Session(path=config.resolve_vault_path(location))
    ctx.obj = session
    ctx.with_resource(session.guard.installed())


@app.command()
def init(ctx: typer.Context) -> None:
    """Initialise a new encrypted vault."""
    session = _session(ctx)
    if session.path.exists():
        _fail(f"A vault already exists at {session.path}. Run [bold]onepass purge[/bold] to remove it.")

    console.print(
        Panel(
            "[bold]Welcome to onepass[/bold]\n"
            "[muted]Choose a strong master password. It cannot be recovered if lost.[/muted]",
            title="[bold cyan]Vault Initialisation[/bold cyan]",
            border_style="cyan",
            expand=False,
        )
    )
    password = _master_password(session, confirm=True)
    path = _run(session, session.store.initialize, password)
    console.print(f"\n[success]Vault created →[/success] [bold]{path}[/bold]")


@app.command()
def new(
    ctx: typer.Context,
    name: Annotated[str, typer.Argument(help="Unique name of the resource.")],
    user: Annotated[Optional[str], typer.Option("--user", "-u", help="Username or email.")] = None,
    generate: Annotated[bool, typer.Option("--generate", "-g", help="Use a generated strong password.")] = False,
    length: Annotated[
        int, typer.Option("--length", help="Generated password length.")
    ] = config.SUGGESTED_PASSWORD_LENGTH,
) -> None:
    """Create a new resource."""
    session = _session(ctx)
    _require_vault(session)
    master = _master_password(session)

    if user is None:
        user = _ask(session, "  User", default="")

    if generate or _confirm(session, "  Generated a strong password, do you want to use it?", default=True):
        try:
            secret = suggest_password(length)
        except ValueError as exc:
            _fail(escape(str(exc)))
    else:
        secret = _ask(session, "  Choose a password", password=True)

    resource = _run(session, session.store.create, master, Resource(name=name, user=user, password=secret))
    console.print(f"[success]Resource '[bold]{resource.name}[/bold]' saved.[/success]")


@app.command()
def get(
    ctx: typer.Context,
    name: Annotated[str, typer.Argument(help="Resource name (exact match).")],
    show: Annotated[bool, typer.Option("--show", "-s", help="Display the password in plain text.")] = False,
    copy: Annotated[bool, typer.Option("--copy", "-c", help="Copy the password to the clipboard.")] = False,
) -> None:
    """Retrieve a resource."""
    session = _session(ctx)
    _require_vault(session)
    master = _master_password(session)
    resource = _run(session, session.store.get, master, name)
    _render_resource(resource, show_password=show)
    if copy:
        _copy_to_clipboard(session, resource.password)


@app.command("list")
def list_resources(ctx: typer.Context) -> None:
    """List the names of all resources."""
    session = _session(ctx)
    _require_vault(session)
    master = _master_password(session)
    names = _run(session, session.store.list, master)

    if not names:
        console.print(f"[muted]{MSG_NO_RESOURCES}[/muted]")
        return

    table = Table(title=f"Resources ({len(names)} total)", box=box.ROUNDED, header_style="bold cyan")
    table.add_column("#", style="muted", justify="right", no_wrap=True)
    table.add_column("Name", style="bold white", min_width=16)
    for i, resource_name in enumerate(names, 1):
        table.add_row(str(i), resource_name)
    console.print(table)


@app.command()
def update(
    ctx: typer.Context,
    name: Annotated[str, typer.Argument(help="Resource name (exact match).")],
    target: Annotated[
        Optional[ResourceField], typer.Option("--field", "-f", help="Field to change.", show_default=False)
    ] = None,
    value: Annotated[Optional[str], typer.Option("--value", help="New value.", show_default=False)] = None,
    generate: Annotated[
        bool, typer.Option("--generate", "-g", help="Use a generated password as the new value.")
    ] = False,
) -> None:
    """Update the name, user or password of a resource."""
    session = _session(ctx)
    _require_vault(session)
    master = _master_password(session)

    if target is None:
        choice = _ask(session, "Update name (n), user (u) or password (p)?")
        shortcuts = {"n": ResourceField.NAME, "u": ResourceField.USER, "p": ResourceField.PASSWORD}
        if choice.strip() not in shortcuts:
            _fail(f"Unsupported choice '{choice}'.")
        target = shortcuts[choice.strip()]

    generated = False
    if value is None:
        if generate and target is ResourceField.PASSWORD:
            value = suggest_password()
            generated = True
        elif generate:
            _fail("--generate only applies to the password field.")
        else:
            value = _ask(session, f"New {target.value}", password=target is ResourceField.PASSWORD)

    resource = _run(session, session.store.update, master, name, target, value)
    console.print(f"[success]Resource '[bold]{resource.name}[/bold]' updated.[/success]")
    if generated:
        console.print(f"  [muted]New password:[/muted] [bold green]{resource.password}[/bold green]")


@app.command("del")
def delete(
    ctx: typer.Context,
    name: Annotated[str, typer.Argument(help="Resource name (exact match).")],
    yes: Annotated[bool, typer.Option("--yes", "-y", help="Skip confirmation prompt.")] = False,
) -> None:
    """Permanently delete a resource."""
    session = _session(ctx)
    _require_vault(session)
    master = _master_password(session)

    if not yes and not _confirm(
        session, f"  Delete '[bold]{name}[/bold]'? [muted]This cannot be undone.[/muted]"
    ):
        raise typer.Exit(0)

    resource = _run(session, session.store.delete, master, name)
    console.print(f"[danger]Resource '[bold]{resource.name}[/bold]' deleted.[/danger]")


@app.command()
def suggest(
    length: Annotated[
        int, typer.Option("--length", "-n", help="Password length.")
    ] = config.SUGGESTED_PASSWORD_LENGTH,
    count: Annotated[int, typer.Option("--count", "-c", help="Number of passwords to suggest.")] = 1,
) -> None:
    """Suggest strong random passwords."""
    try:
        passwords = [suggest_password(length) for _ in range(count)]
    except ValueError as exc:
        _fail(escape(str(exc)))

    if count == 1:
        console.print(
            Panel(
                f"[bold green]{passwords[0]}[/bold green]",
                title=f"[bold]Suggested password ({length} chars)[/bold]",
                border_style="green",
                expand=False,
            )
        )
    else:
        for i, pw in enumerate(passwords, 1):
            console.print(f"  [muted]{i:>3}.[/muted]  [bold green]{pw}[/bold green]")


@app.command()
def purge(
    ctx: typer.Context,
    yes: Annotated[bool, typer.Option("--yes", "-y", help="Skip confirmation prompt.")] = False,
) -> None:
    """Remove the vault file and every resource in it."""
    session = _session(ctx)
    _require_vault(session)

    if not yes and not _confirm(
        session, f"  Remove [bold]{session.path}[/bold]? [muted]All resources will be lost.[/muted]"
    ):
        raise typer.Exit(0)

    _run(session, session.store.vault.purge)
    console.print(f"[danger]Vault at [bold]{session.path}[/bold] removed.[/danger]")


@app.command()
def info(ctx: typer.Context) -> None:
    """Show vault location and size."""
    session = _session(ctx)
    vault = session.store.vault

    table = Table(box=box.SIMPLE, show_header=False, padding=(0, 2))
    table.add_column("Key", style="cyan")
    table.add_column("Value", style="white")
    table.add_row("Version", __version__)
    table.add_row("Vault path", str(vault.path))
    table.add_row("Vault exists", "[green]yes[/green]" if vault.exists() else "[red]no[/red]")
    if vault.exists():
        table.add_row("Vault size", f"{vault.size()} bytes")

    console.print(Panel(table, title="[bold cyan]onepass info[/bold cyan]", border_style="cyan", expand=False))


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

def main() -> None:
    app()


if __name__ == "__main__":
    main()
