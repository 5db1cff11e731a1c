"""
Operator commands, available as `flask --app api <command>`:
- init-db        create the users table and its indexes
- create-user    add an account with a fresh storage partition
- hash-password  print a stored-hash string for manual inserts
"""
from __future__ import annotations

import click
from flask import Flask
from sqlalchemy.exc import IntegrityError

from models import storage
from models.user import User
from utils.security import hash_password, generate_storage_dir


def register_commands(app: Flask) -> None:
    @app.cli.command("init-db")
    def init_db():
        """Create database tables."""
        storage.reload(app.config["DATABASE_URL"])
        click.echo("Database initialised.")

    @app.cli.command("create-user")
    @click.argument("username")
    @click.password_option()
    def create_user(username, password):
        """Create USERNAME with a random storage partition."""
        user = User(
            username=username,
            pass_hash=hash_password(password),
            storage_dir=generate_storage_dir(),
        )
        try:
            user.save()
        except IntegrityError:
            raise click.ClickException(f"user {username!r} already exists")
        click.echo(f"Created user {user.username} (id={user.id}, storage={user.storage_dir})")

    @app.cli.command("hash-password")
    @click.password_option()
    def hash_password_command(password):
        """Print the stored form of a password."""
        click.echo(hash_password(password))
