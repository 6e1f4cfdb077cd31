"""CLI tests.

Learn: The CLI only talks HTTP, so _client() is swapped for an httpx
client on a MockTransport and each test scripts the server's answers.
"""

import json

import httpx
import pytest
from click.testing import CliRunner

from authgate import __version__
from authgate.cli import main as cli

USER = {"id": "8d1c2e3f-0000-4000-8000-000000000001", "name": "Jane Doe", "email": "jane@example.com"}
TOKEN = "header.payload.signature"


@pytest.fixture()
def requests_seen():
    return []


@pytest.fixture()
def mock_api(monkeypatch, requests_seen):
    """Route CLI requests to a handler function: mock_api(handler)."""

    def install(handler):
        def recording(request: httpx.Request) -> httpx.Response:
            requests_seen.append(request)
            return handler(request)

        monkeypatch.setattr(
            cli,
            "_client",
            lambda: httpx.AsyncClient(
                transport=httpx.MockTransport(recording), base_url="http://test"
            ),
        )

    return install


def test_login_prints_token(mock_api, requests_seen):
    mock_api(lambda req: httpx.Response(200, json={"success": True, "token": TOKEN, "user": USER}))

    result = CliRunner().invoke(cli.main, ["login", "jane@example.com", "--password", "secret123"])

    assert result.exit_code == 0, result.output
    assert "Authenticated as Jane Doe <jane@example.com>" in result.output
    assert TOKEN in result.output
    assert requests_seen[0].url.path == "/api/auth/login"


def test_login_token_only(mock_api):
    mock_api(lambda req: httpx.Response(200, json={"success": True, "token": TOKEN, "user": USER}))

    result = CliRunner().invoke(
        cli.main, ["login", "jane@example.com", "--password", "secret123", "--token-only"]
    )

    assert result.exit_code == 0
    assert result.output.strip() == TOKEN


def test_login_failure(mock_api):
    mock_api(lambda req: httpx.Response(400, json={"success": False, "message": "Invalid credentials"}))

    result = CliRunner().invoke(cli.main, ["login", "jane@example.com", "--password", "nope"])

    assert result.exit_code == 1
    assert "Invalid credentials" in result.output


def test_register_sends_body(mock_api, requests_seen):
    mock_api(lambda req: httpx.Response(201, json={"success": True, "token": TOKEN, "user": USER}))

    result = CliRunner().invoke(
        cli.main, ["register", "Jane Doe", "jane@example.com", "--password", "secret123"]
    )

    assert result.exit_code == 0, result.output
    request = requests_seen[0]
    assert request.method == "POST"
    assert request.url.path == "/api/auth/register"
    assert json.loads(request.content) == {
        "name": "Jane Doe",
        "email": "jane@example.com",
        "password": "secret123",
    }


def test_register_validation_errors(mock_api):
    mock_api(lambda req: httpx.Response(400, json={
        "success": False,
        "message": "Validation failed",
        "errors": ["Password must be at least 6 characters long"],
    }))

    result = CliRunner().invoke(
        cli.main, ["register", "Jane Doe", "jane@example.com", "--password", "123"]
    )

    assert result.exit_code == 1
    assert "Validation failed" in result.output
    assert "Password must be at least 6 characters long" in result.output


def test_me_sends_bearer_token(mock_api, requests_seen):
    mock_api(lambda req: httpx.Response(200, json={"success": True, "user": USER}))

    result = CliRunner().invoke(cli.main, ["me", "--token", TOKEN])

    assert result.exit_code == 0
    assert "Jane Doe <jane@example.com>" in result.output
    assert requests_seen[0].headers["Authorization"] == f"Bearer {TOKEN}"


def test_me_token_from_env(mock_api, requests_seen):
    mock_api(lambda req: httpx.Response(200, json={"success": True, "user": USER}))

    result = CliRunner().invoke(cli.main, ["me", "--json"], env={"AUTHGATE_TOKEN": TOKEN})

    assert result.exit_code == 0
    assert '"email": "jane@example.com"' in result.output
    assert requests_seen[0].headers["Authorization"] == f"Bearer {TOKEN}"


def test_me_rejected(mock_api):
    mock_api(lambda req: httpx.Response(401, json={"success": False, "message": "Token is not valid"}))

    result = CliRunner().invoke(cli.main, ["me", "--token", "bad"])

    assert result.exit_code == 1
    assert "Token is not valid" in result.output


def test_version_matches_package():
    result = CliRunner().invoke(cli.main, ["--version"])
    assert result.exit_code == 0
    assert f"authgate, version {__version__}" in result.output
