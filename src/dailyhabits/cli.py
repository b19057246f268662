"""Flask CLI commands for DailyHabits."""

from __future__ import annotations

import click

from .logging_config import get_logger
from .services import auth

logger = get_logger("cli")


def _context():
    from .blueprints.common import app_context

    return app_context()


def init_app(app) -> None:
    """Register CLI commands on the Flask app."""

    @app.cli.command("dailyhabits-create-user")
    @click.argument("username")
    @click.password_option()
    def create_user(username: str, password: str) -> None:
        """Create an account that can sign in to the web app."""

        try:
            user = auth.create_user(
                username=username, password=password, session_factory=_context().session_factory
            )
        except ValueError as exc:
            raise click.ClickException(str(exc)) from exc
        click.echo(f"Created user {user.username} ({user.id})")

    @app.cli.command("dailyhabits-reset")
    @click.option("--username", default=None, help="Only reset this user's habits")
    def reset(username: str | None) -> None:
        """Run the daily reset sweep and refresh today's progress."""

        ctx = _context()
        if username:
            user = auth.get_user_by_username(username, ctx.session_factory)
            if user is None:
                raise click.ClickException(f"No such user: {username}")
            users = [user]
        else:
            users = auth.list_users(ctx.session_factory)

        for user in users:
            ledger = ctx.ledger_for(user.id)
            cleared = ledger.reset_daily_if_needed()
            progress = ctx.aggregator_for(user.id).recompute_today()
            click.echo(
                f"{user.username}: cleared {cleared}, "
                f"{progress.completed_count}/{progress.total_habits} done "
                f"({progress.completion_percentage}%)"
            )
        logger.info("Reset sweep finished", extra={"users": len(users)})
