import asyncio, logging

from pathlib import Path

import click

from alembic import command as alembic_command
from alembic.config import Config as AlembicConfig
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table
from rich.traceback import install as install_traceback

from blockdocs.environment import Environment, set_current_env


console = Console()
install_traceback(show_locals=False, word_wrap=True, console=console)

ENV_OPTION = click.option(
    '--env',
    type=click.Choice([env.value for env in Environment]),
    default=Environment.DEVELOPMENT.value,
    help='Environment to use.',
)


class Context:

    def settings(self):
        """Return the settings for the current context."""
        from blockdocs.settings import get_settings
        return get_settings()

    def use_env(self, env: str) -> None:
        set_current_env(env)
        configure_logging(self.settings().app.log_level)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True)],
        force=True,
    )


async def _create_tables() -> None:
    from blockdocs.models import Base
    from blockdocs.settings import get_settings

    dcs = get_settings().primary_database()
    async with dcs.sqlalchemy_transaction() as conn:
        await conn.run_sync(Base.metadata.create_all)
    await dcs.sqlalchemy_dispose_async_engine()


@click.group()
@click.pass_context
def cli(ctx: click.Context) -> None:
    """blockdocs: block-based documentation authoring."""
    ctx.obj = Context()


# =====================================================
# Database
# =====================================================

@cli.group()
def db() -> None:
    """Database management."""


@db.command()
@ENV_OPTION
@click.pass_obj
def create(ctx: Context, env: str) -> None:
    """Create all tables directly from the models."""
    ctx.use_env(env)
    asyncio.run(_create_tables())
    console.log(f"Created tables on {ctx.settings().primary_database().url.render_as_string(hide_password=True)}")


@db.command()
@ENV_OPTION
@click.pass_obj
def migrate(ctx: Context, env: str) -> None:
    """Run alembic migrations up to head."""
    ctx.use_env(env)
    settings = ctx.settings()
    config = AlembicConfig(str(settings.app.root_path / "alembic.ini"))
    config.set_main_option("script_location", str(settings.app.alembic_path))
    console.log("Running migrations: upgrade head")
    console.log("Note: to migrate model changes create a revision first with `alembic revision --autogenerate -m 'your message'`.")
    alembic_command.upgrade(config, "head")


# =====================================================
# Projects
# =====================================================

@cli.group()
def projects() -> None:
    """Project queries."""


@projects.command(name="list")
@ENV_OPTION
@click.option('--user-id', type=int, required=True, help='Owner of the projects to list.')
@click.pass_obj
def list_projects(ctx: Context, env: str, user_id: int) -> None:
    """List the projects owned by a user."""
    ctx.use_env(env)

    from blockdocs.repository import DocsRepository
    from blockdocs.session import signed_in_as

    async def load():
        with signed_in_as(user_id):
            return await DocsRepository().list_projects()

    table = Table(title=f"Projects of user {user_id}")
    table.add_column("ID", justify="right")
    table.add_column("Name")
    table.add_column("Description")
    table.add_column("Created")
    for project in asyncio.run(load()):
        table.add_row(str(project.id), project.name, project.description or "", f"{project.created_at:%Y-%m-%d %H:%M}")
    console.print(table)


# =====================================================
# Export
# =====================================================

@cli.command()
@ENV_OPTION
@click.argument('project_id', type=int)
@click.option('--output', '-o', type=click.Path(dir_okay=False, path_type=Path), default=None, help='Target file, defaults to the project name.')
@click.pass_obj
def export(ctx: Context, env: str, project_id: int, output: Path | None) -> None:
    """Write a project as a single standalone HTML file."""
    ctx.use_env(env)

    from blockdocs.errors import NotFoundError
    from blockdocs.render.document import export_filename, generate_html
    from blockdocs.repository import DocsRepository

    try:
        snapshot = asyncio.run(DocsRepository().get_public_project(project_id))
    except NotFoundError as e:
        raise click.ClickException(str(e)) from e

    html = generate_html(snapshot.project.name, snapshot.headers, snapshot.navbar_items)
    target = output or Path(export_filename(snapshot.project.name))
    target.write_text(html, encoding="utf-8")
    console.log(f"Exported {snapshot.project.name!r} to {target} ({len(html)} bytes)")


# =====================================================
# Server
# =====================================================

@cli.command()
@ENV_OPTION
@click.pass_obj
def serve(ctx: Context, env: str) -> None:
    """Run the read-only MCP server over stdio."""
    ctx.use_env(env)

    from blockdocs.server import mcp
    mcp.run()


if __name__ == "__main__":
    cli()
