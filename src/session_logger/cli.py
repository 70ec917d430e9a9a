import logging

import click

from session_logger.core.config import settings
from session_logger.core.constants import SessionAttributeName
from session_logger.log import (
    setup_logging_to_console,
    setup_logging_to_file,
    setup_logging_to_seq,
)
from session_logger.logger import SessionLogger
from session_logger.services.session_store import SessionStore

logger = logging.getLogger("session_logger.cli")


def _describe(store: SessionStore, log_session) -> str:
    title = store.get_attribute(log_session.logkey, SessionAttributeName.TITLE)
    state = "open" if log_session.is_open else "closed"
    return (
        f"{log_session.logkey}\t{log_session.package}\t{log_session.name}\t"
        f"{log_session.filename}\t{log_session.logstart}\t{log_session.logend or '-'}\t"
        f"{state}\t{title or ''}"
    )


@click.group()
@click.option("--db", "db_path", default=None, help="SQLite session database path or URL (default: SQLALCHEMY_DATABASE_URI)")
@click.option("--level", "log_level", type=int, default=lambda: settings.SESSION_LOG_LEVEL, help="Console log level (3, 4, 6 or 7)")
@click.option("--log-dir", default=None, help="Also write diagnostics to a timestamped file in this directory")
@click.pass_context
def main(ctx: click.Context, db_path: str | None, log_level: int, log_dir: str | None):
    level = logging.getLevelName(settings.DIAGNOSTIC_LOG_LEVEL)
    if not setup_logging_to_seq(level):
        setup_logging_to_console(level)
    if log_dir is not None:
        setup_logging_to_file(settings.PROJECT_NAME, level, log_dir=log_dir)

    ctx.ensure_object(dict)
    ctx.obj["db_path"] = db_path
    ctx.obj["log_level"] = log_level


@main.command()
@click.option("--package", required=True)
@click.option("--name", required=True)
@click.option("--filename", required=True)
@click.option("--title", default=None)
@click.pass_context
def start(ctx: click.Context, package: str, name: str, filename: str, title: str | None):
    """Start a session for FILENAME unless one is already open."""
    session_logger = SessionLogger(ctx.obj["db_path"], ctx.obj["log_level"])
    try:
        key = session_logger.start_session(package, name, filename, title)
    finally:
        session_logger.store.close()
    click.echo(key)


@main.command()
@click.argument("filename")
@click.pass_context
def end(ctx: click.Context, filename: str):
    """End the latest session for FILENAME."""
    session_logger = SessionLogger(ctx.obj["db_path"], ctx.obj["log_level"])
    key = session_logger.close_session(filename)
    if key is None:
        raise click.ClickException(f"No session found for {filename}")
    click.echo(key)


@main.command()
@click.argument("filename")
@click.argument("title")
@click.pass_context
def title(ctx: click.Context, filename: str, title: str):
    """Set the title of the latest session for FILENAME."""
    with SessionStore(ctx.obj["db_path"]) as store:
        key = store.find_latest_session_key(filename)
        if key is None:
            raise click.ClickException(f"No session found for {filename}")
        store.set_title(key, title)
    click.echo(key)


@main.command()
@click.argument("filename")
@click.pass_context
def show(ctx: click.Context, filename: str):
    """Show the latest session for FILENAME."""
    with SessionStore(ctx.obj["db_path"]) as store:
        key = store.find_latest_session_key(filename)
        if key is None:
            raise click.ClickException(f"No session found for {filename}")
        click.echo(_describe(store, store.get_session(key)))


@main.command("list")
@click.option("--filename", default=None)
@click.pass_context
def list_sessions(ctx: click.Context, filename: str | None):
    """List sessions, newest first."""
    with SessionStore(ctx.obj["db_path"]) as store:
        for log_session in store.list_sessions(filename):
            click.echo(_describe(store, log_session))


@main.command()
@click.option("--yes", is_flag=True, help="Confirm dropping every session")
@click.pass_context
def reset(ctx: click.Context, yes: bool):
    """Drop and recreate the sessions table."""
    if not yes:
        raise click.ClickException("Refusing to drop sessions without --yes")

    store = SessionStore(ctx.obj["db_path"])
    try:
        store.initialize(clear=True)
    finally:
        store.close()
    logger.info("Sessions table reset in %s", store.db_path)
    click.echo("reset")


if __name__ == "__main__":
    main()
