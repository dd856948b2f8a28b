"""
CommerFlow command line.

Setup, seeding and diagnostics for a CommerFlow deployment:

- ``init-db``: create the tables (development; production uses Alembic)
- ``seed``: load sample categories and products
- ``create-admin`` / ``list-users`` / ``reset-password``: account maintenance
- ``generate-env``: write a ``.env`` file from a preset
- ``check-db`` / ``smoke``: diagnostics against the database or a running server
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Awaitable, Callable, NoReturn, Optional, TypeVar

import click
from rich.console import Console
from rich.table import Table
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from commerflow.core.database.utils import create_all, create_engine, create_sessionmaker
from commerflow.core.logging_config import get_logger, setup_logging
from commerflow.server.core.config import settings

from . import tasks
from .env_presets import PRESETS, build_preset, render_env
from .smoke import run_smoke

console = Console()
logger = get_logger(__name__)

T = TypeVar("T")

Task = Callable[[AsyncEngine, async_sessionmaker[AsyncSession]], Awaitable[T]]


def run_with_database(database_url: str, task: Task) -> T:
    """Run an async task against a fresh engine that is disposed afterwards."""

    async def runner():
        engine = create_engine(database_url)
        try:
            return await task(engine, create_sessionmaker(engine))
        finally:
            await engine.dispose()

    return asyncio.run(runner())


def fail(message: str, error: Optional[Exception] = None) -> NoReturn:
    console.print(f"[bold red]Error:[/bold red] {message}")
    if error is not None:
        logger.debug("Command failed", exc_info=error)
    raise SystemExit(1)


@click.group()
@click.option(
    "--database-url",
    envvar="DATABASE_URL",
    default=None,
    help="Database URL (defaults to the configured DATABASE_URL).",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="WARNING",
    show_default=True,
    help="Console log level.",
)
@click.pass_context
def cli(ctx: click.Context, database_url: Optional[str], log_level: str):
    """CommerFlow setup, seeding and diagnostics."""
    setup_logging(log_level=log_level, log_format="simple", enable_file=False)
    ctx.ensure_object(dict)
    ctx.obj["database_url"] = database_url or settings.resolved_database_url


@cli.command("init-db")
@click.pass_context
def init_db_command(ctx: click.Context):
    """Create every table that does not exist yet."""

    async def task(engine, _):
        await create_all(engine)

    try:
        run_with_database(ctx.obj["database_url"], task)
    except Exception as e:
        fail(f"could not create tables: {e}", e)
    console.print("[bold green]Database tables created.[/bold green]")


@cli.command()
@click.option("--clean", is_flag=True, default=False, help="Delete products that were never ordered first.")
@click.pass_context
def seed(ctx: click.Context, clean: bool):
    """Load the sample categories and products."""

    async def task(engine, session_factory):
        await create_all(engine)
        return await tasks.seed_catalogue(session_factory, clean=clean)

    try:
        report = run_with_database(ctx.obj["database_url"], task)
    except Exception as e:
        fail(f"seeding failed: {e}", e)

    if clean:
        console.print(f"Removed {report.products_removed} unordered products")
    console.print(f"Categories created: {len(report.categories_created)}")
    console.print(f"Products created: {len(report.products_created)}")
    for name in report.products_skipped:
        console.print(f"[yellow]Product '{name}' already exists, skipped[/yellow]")
    console.print("[bold green]Sample data ready.[/bold green]")


@cli.command("create-admin")
@click.option("--email", default=None, help="Administrator email (defaults to ADMIN_EMAIL).")
@click.option("--password", default=None, help="Administrator password (defaults to ADMIN_PASSWORD).")
@click.option("--name", default=None, help="Administrator name (defaults to ADMIN_NAME).")
@click.pass_context
def create_admin_command(ctx: click.Context, email: Optional[str], password: Optional[str], name: Optional[str]):
    """Create the administrator account, or promote an existing account."""
    admin = settings.admin

    async def task(engine, session_factory):
        await create_all(engine)
        return await tasks.create_admin(
            session_factory, email or admin.email, password or admin.password, name or admin.name
        )

    try:
        user, created = run_with_database(ctx.obj["database_url"], task)
    except Exception as e:
        fail(f"could not create admin: {e}", e)

    if created:
        console.print(f"[bold green]Admin user created:[/bold green] {user.email}")
    else:
        console.print(f"[yellow]Admin user already exists:[/yellow] {user.email} (role {user.role.value})")


@cli.command("list-users")
@click.pass_context
def list_users_command(ctx: click.Context):
    """Show every account."""

    async def task(_, session_factory):
        return await tasks.list_users(session_factory)

    try:
        users = run_with_database(ctx.obj["database_url"], task)
    except Exception as e:
        fail(f"could not list users: {e}", e)

    if not users:
        console.print("No users found.")
        return

    table = Table(title=f"Users ({len(users)})")
    table.add_column("Email", no_wrap=True)
    table.add_column("Name")
    table.add_column("Role")
    table.add_column("Created")
    for user in users:
        table.add_row(user.email, user.name, user.role.value, user.created_at.strftime("%Y-%m-%d %H:%M"))
    console.print(table)


@cli.command("reset-password")
@click.argument("email")
@click.option("--password", prompt=True, hide_input=True, confirmation_prompt=True, help="The new password.")
@click.pass_context
def reset_password_command(ctx: click.Context, email: str, password: str):
    """Set a new password for the account EMAIL."""
    if len(password) < 6:
        fail("password must be at least 6 characters long")

    async def task(_, session_factory):
        return await tasks.reset_password(session_factory, email, password)

    try:
        user = run_with_database(ctx.obj["database_url"], task)
    except Exception as e:
        fail(f"could not reset password: {e}", e)

    if user is None:
        fail(f"no user with email {email}")
    console.print(f"[bold green]Password updated for[/bold green] {user.email}")


@cli.command("generate-env")
@click.argument("preset", type=click.Choice(sorted(PRESETS)), default="dev")
@click.option("--output", "-o", type=click.Path(dir_okay=False), default=".env", show_default=True)
@click.option("--force", is_flag=True, default=False, help="Overwrite an existing file.")
def generate_env(preset: str, output: str, force: bool):
    """Write an environment file from a preset (dev, prod or test)."""
    path = Path(output)
    if path.exists() and not force:
        fail(f"{path} already exists; use --force to overwrite it")

    path.write_text(render_env(build_preset(preset), title=f"CommerFlow Environment Configuration ({preset})"))
    console.print(f"[bold green]Generated {path} from the {preset} preset.[/bold green]")
    if preset == "prod":
        console.print("[yellow]Review DATABASE_URL, CORS_ORIGINS and ADMIN_PASSWORD before deploying.[/yellow]")


@cli.command("check-db")
@click.pass_context
def check_db(ctx: click.Context):
    """Connect to the database and print row counts."""

    async def task(_, session_factory):
        return await tasks.count_entities(session_factory)

    try:
        counts = run_with_database(ctx.obj["database_url"], task)
    except Exception as e:
        fail(f"database check failed: {e}", e)

    table = Table(title="Database")
    table.add_column("Table")
    table.add_column("Rows", justify="right")
    for name, count in counts.items():
        table.add_row(name, str(count))
    console.print("[bold green]Database connection OK[/bold green]")
    console.print(table)


@cli.command()
@click.option(
    "--base-url",
    default=None,
    help="Server base URL (defaults to http://localhost:<COMMERFLOW_SERVER_PORT>).",
)
@click.option("--email", default=None, help="Administrator email (defaults to ADMIN_EMAIL).")
@click.option("--password", default=None, help="Administrator password (defaults to ADMIN_PASSWORD).")
def smoke(base_url: Optional[str], email: Optional[str], password: Optional[str]):
    """Exercise a running server over HTTP."""
    admin = settings.admin
    url = base_url or f"http://localhost:{settings.server_port}"
    results = run_smoke(url, email or admin.email, password or admin.password)

    table = Table(title=f"Smoke test: {url}")
    table.add_column("Check")
    table.add_column("Result")
    table.add_column("Detail")
    for result in results:
        table.add_row(result.name, "[green]PASS[/green]" if result.ok else "[red]FAIL[/red]", result.detail)
    console.print(table)

    if not all(result.ok for result in results):
        raise SystemExit(1)


if __name__ == "__main__":
    cli()
