"""authgate CLI — run the server and talk to its auth endpoints.

Usage:
    authgate serve --reload                                  # Start the API (uvicorn)
    authgate register "Jane Doe" jane@example.com            # Create an account
    authgate login jane@example.com                          # Get a bearer token
    authgate me --token eyJhbGciOi...                        # Who does this token belong to?

Passwords are prompted for (hidden input) unless given with --password.
"""

from __future__ import annotations

import asyncio
import concurrent.futures
import json
import os
import sys
from typing import Optional

import click
import httpx

from authgate import __version__

# ---------------------------------------------------------------------------
# Config
# ---------------------------------------------------------------------------

DEFAULT_API_URL = "http://localhost:8000"


def _api_url() -> str:
    return os.environ.get("AUTHGATE_API_URL", DEFAULT_API_URL).rstrip("/")


def _client() -> httpx.AsyncClient:
    """Build an async HTTP client pointed at the authgate server."""
    return httpx.AsyncClient(base_url=_api_url(), timeout=30.0)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _run(coro):
    """Run an async coroutine from synchronous Click handler.

    Handles nested event loops (e.g. when invoked via Click CliRunner
    inside an existing async context like tests) by offloading to a thread.
    """
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return asyncio.run(coro)
    else:
        with concurrent.futures.ThreadPoolExecutor(max_workers=1) as pool:
            return pool.submit(asyncio.run, coro).result()


def _pretty_json(data: dict | list) -> str:
    return json.dumps(data, indent=2, default=str)


def _fail(response: httpx.Response) -> None:
    """Print the API's error message and exit non-zero."""
    try:
        body = response.json()
    except ValueError:
        body = {"message": response.text}
    click.secho(
        f"Error ({response.status_code}): {body.get('message', 'request failed')}",
        fg="red",
        err=True,
    )
    for err in body.get("errors") or []:
        click.secho(f"  - {err}", fg="red", err=True)
    sys.exit(1)


def _print_auth_result(body: dict, token_only: bool) -> None:
    if token_only:
        click.echo(body["token"])
        return
    user = body["user"]
    click.secho(f"Authenticated as {user['name']} <{user['email']}>", fg="green")
    click.echo(f"User ID: {user['id']}")
    click.echo(f"Token:   {body['token']}")


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(version=__version__, prog_name="authgate")
def main():
    """authgate — credential-based authentication gate."""


# ---------------------------------------------------------------------------
# authgate serve
# ---------------------------------------------------------------------------


@main.command()
@click.option("--host", default=None, help="Bind address (default: AUTHGATE_HOST)")
@click.option("--port", type=int, default=None, help="Port (default: AUTHGATE_PORT)")
@click.option("--reload", is_flag=True, help="Reload on code changes (development)")
def serve(host: Optional[str], port: Optional[int], reload: bool):
    """Start the API server."""
    import uvicorn

    from authgate.config import settings

    uvicorn.run(
        "authgate.main:app",
        host=host or settings.host,
        port=port or settings.port,
        reload=reload,
    )


# ---------------------------------------------------------------------------
# authgate register
# ---------------------------------------------------------------------------


@main.command()
@click.argument("name")
@click.argument("email")
@click.option("--password", prompt=True, hide_input=True, confirmation_prompt=True)
@click.option("--token-only", is_flag=True, help="Print only the token")
def register(name: str, email: str, password: str, token_only: bool):
    """Create a new account and print its token."""
    _run(_register_impl(name, email, password, token_only))


async def _register_impl(name: str, email: str, password: str, token_only: bool):
    async with _client() as c:
        r = await c.post(
            "/api/auth/register",
            json={"name": name, "email": email, "password": password},
        )
    if r.status_code != 201:
        _fail(r)
    _print_auth_result(r.json(), token_only)


# ---------------------------------------------------------------------------
# authgate login
# ---------------------------------------------------------------------------


@main.command()
@click.argument("email")
@click.option("--password", prompt=True, hide_input=True)
@click.option("--token-only", is_flag=True, help="Print only the token")
def login(email: str, password: str, token_only: bool):
    """Log in and print a bearer token."""
    _run(_login_impl(email, password, token_only))


async def _login_impl(email: str, password: str, token_only: bool):
    async with _client() as c:
        r = await c.post(
            "/api/auth/login",
            json={"email": email, "password": password},
        )
    if r.status_code != 200:
        _fail(r)
    _print_auth_result(r.json(), token_only)


# ---------------------------------------------------------------------------
# authgate me
# ---------------------------------------------------------------------------


@main.command()
@click.option("--token", envvar="AUTHGATE_TOKEN", required=True,
              help="Bearer token (or set AUTHGATE_TOKEN)")
@click.option("--json", "as_json", is_flag=True, help="Print the raw JSON user")
def me(token: str, as_json: bool):
    """Show the user a token belongs to."""
    _run(_me_impl(token, as_json))


async def _me_impl(token: str, as_json: bool):
    async with _client() as c:
        r = await c.get(
            "/api/auth/me",
            headers={"Authorization": f"Bearer {token}"},
        )
    if r.status_code != 200:
        _fail(r)

    user = r.json()["user"]
    if as_json:
        click.echo(_pretty_json(user))
        return
    click.echo(f"{user['name']} <{user['email']}>")
    click.echo(f"User ID: {user['id']}")


if __name__ == "__main__":
    main()
