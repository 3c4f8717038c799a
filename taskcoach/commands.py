# taskcoach/commands.py
import click

from .extensions import db
from .services import admin_service, session_service


def register_commands(app):

    @app.cli.command("init-db")
    def init_db():
        """Create all tables (use `flask db upgrade` once migrations exist)."""
        db.create_all()
        click.echo("Tables created.")

    @app.cli.command("seed-orgs")
    @click.argument("names", nargs=-1, required=True)
    def seed_orgs(names):
        """Create one organization per NAME."""
        for name in names:
            org = admin_service.create_organization(name)
            click.echo(f"Organization #{org.id} {org.name} created.")

    @app.cli.command("purge-sessions")
    def purge_sessions():
        """Delete expired session rows."""
        n = session_service.purge_expired()
        click.echo(f"Purged {n} expired session(s).")
