import asyncio

import click

from app.core.config import settings
from app.core.db import SessionLocal
from app.core.logging import setup_logging
from app.domains.identity.services import AnonymousUserService


async def run_cleanup(session_factory, older_than_days: int) -> int:
    async with session_factory() as session:
        return await AnonymousUserService(session).cleanup_abandoned_users(older_than_days)


@click.group()
def cli():
    """Служебные команды Testimony Builder"""
    setup_logging(settings.log_level)


@cli.command("cleanup-anonymous")
@click.option("--days", default=30, show_default=True, type=click.IntRange(min=1),
              help="Inactivity period before an anonymous user is removed")
def cleanup_anonymous(days):
    """Remove anonymous users inactive for more than DAYS days."""
    deleted = asyncio.run(run_cleanup(SessionLocal, days))
    click.echo(f"Deleted {deleted} abandoned anonymous users")


if __name__ == "__main__":
    cli()
