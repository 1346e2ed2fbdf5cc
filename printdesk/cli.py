"""Flask CLI commands for printdesk."""

import click
from flask import Flask, current_app

from .models import db
from .services.retention import retention_sweeper
from .store import parse_seed_operators, user_store


def register_commands(app: Flask) -> None:
    """Attach the printdesk commands to ``flask``."""
    
    @app.cli.command("init-db")
    def init_db():
        """Create all tables that do not exist yet."""
        db.create_all()
        click.echo("Database tables created")
    
    @app.cli.command("seed-operators")
    def seed_operators():
        """Create operator accounts listed in SEED_OPERATORS."""
        try:
            credentials = parse_seed_operators(current_app.config["SEED_OPERATORS"])
        except ValueError as e:
            raise click.ClickException(str(e)) from e
        if not credentials:
            click.echo("SEED_OPERATORS is empty, nothing to seed")
            return
        changed = user_store.seed(credentials)
        click.echo(f"Seeded {len(changed)} of {len(credentials)} operators")
    
    @app.cli.command("create-operator")
    @click.argument("username")
    @click.password_option()
    def create_operator(username: str, password: str):
        """Create a single operator account."""
        if user_store.get_by_username(username) is not None:
            raise click.ClickException(f"Operator {username!r} already exists")
        user_store.create(username, password)
        click.echo(f"Created operator {username}")
    
    @app.cli.command("sweep")
    def sweep():
        """Run one retention sweep now."""
        result = retention_sweeper.sweep()
        click.echo(
            f"Deleted {result.deleted} files, expired {result.expired} jobs, "
            f"{result.failed} failures"
        )
