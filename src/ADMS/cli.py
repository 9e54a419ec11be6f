# src/ADMS/cli.py
from __future__ import annotations

import asyncio
import os
from typing import Any, Awaitable, Callable

import click
from rich.console import Console
from rich.table import Table

from ADMS.app_logger import setup_logging
from ADMS.core.config import settings
from ADMS.db.session import Database

console = Console()


def _run_with_database(url: str | None, work: Callable[[Database], Awaitable[Any]]) -> Any:
    """Open a storage handle for one command and always dispose it."""

    async def _main():
        database = Database(url)
        try:
            return await work(database)
        finally:
            await database.dispose()

    return asyncio.run(_main())


# ------------------------------
# Root CLI
# ------------------------------
@click.group(help="ADMS command line: schema management, seeding and the API server")
@click.option("--database-url", envvar="ADMS_DATABASE_URL", default=None,
              help="SQLAlchemy async URL (defaults to settings.DATABASE_URL)")
@click.option("--log-level", default=None, help="Override LOG_LEVEL")
@click.pass_context
def cli(ctx: click.Context, database_url: str | None, log_level: str | None) -> None:
    setup_logging(level=log_level)
    ctx.ensure_object(dict)
    ctx.obj["database_url"] = database_url or settings.DATABASE_URL


# ------------------------------
# Schema
# ------------------------------
@cli.group(name="db", help="Create or drop the schema")
def db_group() -> None:
    pass


@db_group.command("create", help="Create every table that does not exist yet")
@click.pass_obj
def db_create(obj: dict) -> None:
    _run_with_database(obj["database_url"], lambda database: database.create_all())
    console.print("[green]✔ schema created[/green]")


@db_group.command("drop", help="Drop every table (destroys all data)")
@click.confirmation_option(prompt="Drop every table?")
@click.pass_obj
def db_drop(obj: dict) -> None:
    _run_with_database(obj["database_url"], lambda database: database.drop_all())
    console.print("[yellow]schema dropped[/yellow]")


# ------------------------------
# Seeding
# ------------------------------
@cli.group(name="seed", help="Replace table contents with synthetic data")
def seed_group() -> None:
    pass


@seed_group.command("users", help="Delete all users and insert COUNT new ones in batches")
@click.option("--count", type=click.IntRange(min=0), default=100, show_default=True)
@click.option("--batch-size", type=click.IntRange(min=1), default=None,
              help="Rows per INSERT (defaults to SEED_BATCH_SIZE)")
@click.pass_obj
def seed_users_cmd(obj: dict, count: int, batch_size: int | None) -> None:
    from ADMS.seeds.users import seed_users

    async def work(database: Database) -> int:
        async with database.session() as session:
            return await seed_users(session, count, batch_size=batch_size)

    inserted = _run_with_database(obj["database_url"], work)
    console.print(f"[green]✔ {inserted} users seeded[/green]")


@seed_group.command("departments", help="Delete all departments and insert COUNT new ones")
@click.option("--count", type=click.IntRange(min=0), default=5, show_default=True)
@click.pass_obj
def seed_departments_cmd(obj: dict, count: int) -> None:
    from ADMS.seeds.departments import seed_departments

    async def work(database: Database):
        async with database.session() as session:
            return await seed_departments(session, count)

    departments = _run_with_database(obj["database_url"], work)
    table = Table(title=f"{len(departments)} departments seeded")
    table.add_column("Name")
    table.add_column("Slug")
    for d in departments:
        table.add_row(d.name, d.slug)
    console.print(table)


@seed_group.command("courses", help="Delete all courses and insert COUNT new ones across departments")
@click.option("--count", type=click.IntRange(min=0), default=50, show_default=True)
@click.pass_obj
def seed_courses_cmd(obj: dict, count: int) -> None:
    from ADMS.seeds.courses import seed_courses

    async def work(database: Database):
        async with database.session() as session:
            return await seed_courses(session, count)

    courses = _run_with_database(obj["database_url"], work)
    if not courses:
        console.print("[yellow]no courses seeded (are there any departments?)[/yellow]")
        return
    console.print(f"[green]✔ {len(courses)} courses seeded[/green]")


# ------------------------------
# Server
# ------------------------------
@cli.command("serve", help="Run the API with uvicorn")
@click.option("--host", default="127.0.0.1", show_default=True)
@click.option("--port", type=int, default=8000, show_default=True)
@click.option("--reload", is_flag=True, default=False)
@click.pass_obj
def serve(obj: dict, host: str, port: int, reload: bool) -> None:
    import uvicorn

    # the factory reads settings from the environment in the server process
    os.environ["ADMS_DATABASE_URL"] = obj["database_url"]
    uvicorn.run("ADMS.main:app_factory", factory=True, host=host, port=port, reload=reload)


def _main():
    cli(obj={})


if __name__ == "__main__":
    _main()
