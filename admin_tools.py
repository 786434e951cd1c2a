"""
Admin Tools - maintenance commands run next to the deployed app

    python admin_tools.py init-db
    python admin_tools.py purge-sessions
    python admin_tools.py hash-password
    python admin_tools.py create-user <username>
"""
import asyncio

import typer

from auth_utils import hash_password
from crud.user import UserRepository
from database import AsyncSessionLocal, init_db
from errors import ConstraintError
from jobs.session_reaper import purge_expired_sessions

app = typer.Typer(help="Portfolio backend maintenance")


@app.command("init-db")
def init_db_command():
    """Create all database tables."""
    asyncio.run(init_db())
    typer.echo("Database initialized")


@app.command("purge-sessions")
def purge_sessions():
    """Delete expired admin sessions."""
    removed = asyncio.run(purge_expired_sessions(AsyncSessionLocal))
    typer.echo(f"Removed {removed} expired session(s)")


@app.command("hash-password")
def hash_password_command(
    password: str = typer.Option(..., prompt=True, hide_input=True, confirmation_prompt=True),
):
    """Print an argon2 hash for ADMIN_PASSWORD_HASH."""
    typer.echo(hash_password(password))


@app.command("create-user")
def create_user(
    username: str,
    password: str = typer.Option(..., prompt=True, hide_input=True, confirmation_prompt=True),
):
    """Store a user row with a hashed password."""

    async def _create():
        await init_db()
        async with AsyncSessionLocal() as db:
            return await UserRepository(db).create_user(
                {"username": username, "password": hash_password(password)}
            )

    try:
        user = asyncio.run(_create())
    except ConstraintError as e:
        typer.echo(e.message, err=True)
        raise typer.Exit(code=1)
    typer.echo(f"Created user {user.username} (id={user.id})")


if __name__ == "__main__":
    app()
