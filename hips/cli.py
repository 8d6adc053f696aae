"""Command-line interface for the encrypted secret store."""

from __future__ import annotations

import errno
import logging
import sys
from pathlib import Path
from typing import NoReturn

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.prompt import Confirm, Prompt

from .config import Config
from .errors import HipsError
from .schema import Secret
from .store import Store
from .template import render, render_env, unescape

error_console = Console(stderr=True)

DATABASE_ENV = "HIPS_DATABASE"
PASSWORD_ENV = "HIPS_PASSWORD"


def prompt_password(prompt_text: str = "Enter database password") -> str:
    """Prompt for a password using rich."""
    return Prompt.ask(f"[cyan]{prompt_text}[/cyan]", password=True)


def _configure_logging(debug: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=error_console, show_path=False)],
        force=True,
    )


def _fail(message: object) -> NoReturn:
    error_console.print(
        f"Error: {message}",
        style="red",
        markup=False,
        highlight=False,
        soft_wrap=True,
    )
    raise SystemExit(1)


def get_store(ctx: click.Context) -> Store:
    password = ctx.obj.get("password")
    if password is None:
        password = prompt_password()
        ctx.obj["password"] = password
    try:
        return Store.open(Config(location=ctx.obj["database"], password=password))
    except HipsError as e:
        _fail(e)


def _confirm_overwrite(store: Store, name: str, force: bool) -> None:
    if force or not store.exists(name):
        return
    if not sys.stdin.isatty():
        _fail(f"Secret '{name}' already exists (use --force to overwrite)")
    if not Confirm.ask(f"[yellow]Secret '{name}' already exists. Overwrite?[/yellow]"):
        error_console.print("[yellow]Cancelled[/yellow]")
        raise SystemExit(1)


@click.group()
@click.option(
    "-d",
    "--database",
    envvar=DATABASE_ENV,
    required=True,
    type=click.Path(path_type=Path),
    help=f"Database path: a .yaml file or a directory (env: {DATABASE_ENV})",
)
@click.option(
    "-p",
    "--password",
    envvar=PASSWORD_ENV,
    help=f"Database password (env: {PASSWORD_ENV})",
)
@click.option("--debug", is_flag=True, help="Enable debug output")
@click.option("--force", is_flag=True, help="Skip confirmations")
@click.pass_context
def cli(
    ctx: click.Context,
    database: Path,
    password: str | None,
    debug: bool,
    force: bool,
) -> None:
    """Store and retrieve secrets in an encrypted database."""
    _configure_logging(debug)
    ctx.ensure_object(dict)
    ctx.obj["database"] = database
    ctx.obj["password"] = password
    ctx.obj["debug"] = debug
    ctx.obj["force"] = force


@cli.command()
@click.argument("name")
@click.argument("secret", required=False)
@click.pass_context
def store(ctx: click.Context, name: str, secret: str | None) -> None:
    """Store a secret under the provided name."""
    db = get_store(ctx)

    if secret is None:
        secret = Prompt.ask(f"[cyan]Enter secret value for {name}[/cyan]", password=True)
        if not secret:
            _fail("No value provided")

    try:
        _confirm_overwrite(db, name, ctx.obj["force"])
        db.store(Secret(name=name, secret=secret))
    except HipsError as e:
        _fail(e)
    error_console.print(f"[green]Stored {name}[/green]")


@cli.command()
@click.argument("name")
@click.pass_context
def load(ctx: click.Context, name: str) -> None:
    """Retrieve the secret stored under the provided name."""
    db = get_store(ctx)
    try:
        secret = db.load(name)
    except HipsError as e:
        _fail(e)
    click.echo(secret.secret)


@cli.command("list")
@click.pass_context
def list_secrets(ctx: click.Context) -> None:
    """List all available secrets."""
    db = get_store(ctx)
    try:
        secrets = db.list()
    except HipsError as e:
        _fail(e)

    for name in sorted(s.name for s in secrets):
        click.echo(name)


@cli.command()
@click.argument("name")
@click.pass_context
def remove(ctx: click.Context, name: str) -> None:
    """Remove the secret stored under the provided name."""
    db = get_store(ctx)
    try:
        if not db.exists(name):
            _fail(f"{name} not found")
        if not ctx.obj["force"] and sys.stdin.isatty():
            if not Confirm.ask(f"[yellow]Remove secret '{name}'?[/yellow]"):
                error_console.print("[yellow]Cancelled[/yellow]")
                raise SystemExit(1)
        db.remove(name)
    except HipsError as e:
        _fail(e)
    error_console.print(f"[green]Removed {name}[/green]")


@cli.command()
@click.argument("current_name")
@click.argument("new_name")
@click.pass_context
def rename(ctx: click.Context, current_name: str, new_name: str) -> None:
    """Rename a secret."""
    db = get_store(ctx)
    try:
        if current_name != new_name:
            _confirm_overwrite(db, new_name, ctx.obj["force"])
        db.rename(current_name, new_name)
    except HipsError as e:
        _fail(e)
    error_console.print(f"[green]Renamed {current_name} to {new_name}[/green]")


@cli.command()
@click.argument("new_password", required=False)
@click.option(
    "--to",
    "new_location",
    type=click.Path(path_type=Path),
    help="Write the re-encrypted database to this location",
)
@click.pass_context
def rotate(
    ctx: click.Context,
    new_password: str | None,
    new_location: Path | None,
) -> None:
    """Re-encrypt the whole database using a new password."""
    db = get_store(ctx)

    if new_password is None:
        new_password = prompt_password("Enter new password")
        confirm = prompt_password("Confirm new password")
        if new_password != confirm:
            _fail("Passwords do not match")

    try:
        new_db = db.rotate(new_password=new_password, new_location=new_location)
    except HipsError as e:
        _fail(e)
    error_console.print(
        f"[green]Rotated database into {new_db.config.location}[/green]"
    )


@cli.command()
@click.argument("template")
@click.pass_context
def template(ctx: click.Context, template: str) -> None:
    """Print secrets according to a template (file path or literal)."""
    text = _read_template(template)
    db = get_store(ctx)
    try:
        click.echo(render(text, db.list()))
    except HipsError as e:
        _fail(e)


def _read_template(template: str) -> str:
    """Read `template` as a file if it names one, else unescape it as a literal."""
    try:
        return Path(template).read_text()
    except OSError as e:
        if e.errno in (errno.ENOENT, errno.ENOTDIR, errno.EISDIR, errno.ENAMETOOLONG):
            return unescape(template)
        _fail(f"reading template {template}: {e}")


@cli.command()
@click.option("-i", "--interpreter", help="Interpreter for a leading shebang line")
@click.pass_context
def env(ctx: click.Context, interpreter: str | None) -> None:
    """Print a shell script exporting every secret."""
    db = get_store(ctx)
    try:
        click.echo(render_env(db.list(), interpreter=interpreter))
    except HipsError as e:
        _fail(e)


cli.add_command(load, "get")
cli.add_command(list_secrets, "ls")
cli.add_command(remove, "rm")
cli.add_command(rotate, "rot")
cli.add_command(template, "tmp")


def main() -> None:
    """Entry point for the hips CLI."""
    cli()


if __name__ == "__main__":
    main()
