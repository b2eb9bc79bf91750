import click
from flask import Flask

from book_rental.errors import ServiceError
from book_rental.extensions import db
from book_rental.services.auth_service import AuthService


def register_cli(app: Flask):
    @app.cli.command("init-db")
    def init_db():
        """Create all tables (use `flask db upgrade` once migrations exist)."""
        db.create_all()
        click.echo("Tables created.")

    @app.cli.command("create-admin")
    @click.option("--name", required=True)
    @click.option("--username", required=True)
    @click.option("--email", required=True)
    @click.password_option()
    def create_admin(name, username, email, password):
        """Create an admin user."""
        try:
            user = AuthService.register(name, username, email, password, role="admin")
        except ServiceError as e:
            raise click.ClickException(str(e))
        click.echo(f"Admin {user.username} created (id={user.id}).")
