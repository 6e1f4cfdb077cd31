"""Service info, health check and API docs.

Learn: Open endpoints for operators and client developers:
- GET /            → what this service is and what it exposes
- GET /api/health  → is the server up, is the user store reachable
- GET /api/docs    → the auth endpoints as JSON, with curl examples
(FastAPI's interactive OpenAPI UI stays at /docs.)
"""

import time
from datetime import datetime, timezone

import structlog
from fastapi import APIRouter
from sqlalchemy import text

from authgate import __version__
from authgate.config import settings
from authgate.errors import API_ENDPOINTS

logger = structlog.get_logger()

router = APIRouter()

_STARTED_AT = time.monotonic()

SAMPLE_TOKEN = "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9..."
SAMPLE_USER = {
    "id": "3f2c8a9e-6b1d-4c57-9a0e-1d2b3c4d5e6f",
    "name": "John Doe",
    "email": "john@example.com",
}


def _uptime() -> int:
    return round(time.monotonic() - _STARTED_AT)


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _base_url() -> str:
    return f"http://localhost:{settings.port}"


@router.get("/")
async def service_info():
    """Describe the service and list its endpoints."""
    return {
        "success": True,
        "message": "authgate authentication API",
        "version": __version__,
        "status": "online",
        "timestamp": _now(),
        "environment": settings.environment,
        "uptime": _uptime(),
        "endpoints": API_ENDPOINTS,
        "security": {
            "tokens": settings.jwt_algorithm,
            "token_ttl_minutes": settings.jwt_expire_minutes,
            "password_hashing": f"bcrypt, {settings.bcrypt_rounds} rounds",
        },
    }


@router.get("/api/health")
async def health_check():
    """Check server health and user store connectivity."""
    checks = {"server": "ok"}

    if settings.user_store == "sql":
        from authgate.db.engine import engine

        try:
            async with engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            checks["database"] = "ok"
        except Exception:
            logger.exception("health.database_error")
            checks["database"] = "error"
    else:
        checks["database"] = "ok"

    status = "healthy" if all(v == "ok" for v in checks.values()) else "degraded"

    return {
        "success": True,
        "status": status,
        "version": __version__,
        "timestamp": _now(),
        "uptime": _uptime(),
        "environment": settings.environment,
        "user_store": settings.user_store,
        **checks,
    }


@router.get("/api/docs")
async def api_docs():
    """Machine-readable description of the auth endpoints."""
    base = _base_url()
    return {
        "success": True,
        "title": "authgate API documentation",
        "version": __version__,
        "description": "JWT bearer-token authentication with bcrypt password hashing",
        "base_url": base,
        "endpoints": [
            {
                "method": "POST",
                "path": "/api/auth/register",
                "description": "Register a new user account",
                "authentication": "Not required",
                "request_body": {
                    "name": "string (required, min 1 char)",
                    "email": "string (required, valid email)",
                    "password": "string (required, min 6 chars)",
                },
                "responses": {
                    "201": {"success": True, "token": SAMPLE_TOKEN, "user": SAMPLE_USER},
                    "400": {"success": False, "message": "User already exists"},
                },
            },
            {
                "method": "POST",
                "path": "/api/auth/login",
                "description": "Login with existing user credentials",
                "authentication": "Not required",
                "request_body": {
                    "email": "string (required)",
                    "password": "string (required)",
                },
                "responses": {
                    "200": {"success": True, "token": SAMPLE_TOKEN, "user": SAMPLE_USER},
                    "400": {"success": False, "message": "Invalid credentials"},
                },
            },
            {
                "method": "GET",
                "path": "/api/auth/me",
                "description": "Get current authenticated user profile",
                "authentication": "Required - Bearer Token",
                "headers": {"Authorization": f"Bearer {SAMPLE_TOKEN}"},
                "responses": {
                    "200": {"success": True, "user": SAMPLE_USER},
                    "401": {"success": False, "message": "No token, authorization denied"},
                },
            },
        ],
        "examples": {
            "register": (
                f"curl -X POST {base}/api/auth/register "
                '-H "Content-Type: application/json" '
                '-d \'{"name": "John Doe", "email": "john@example.com", "password": "123456"}\''
            ),
            "login": (
                f"curl -X POST {base}/api/auth/login "
                '-H "Content-Type: application/json" '
                '-d \'{"email": "john@example.com", "password": "123456"}\''
            ),
            "me": (
                f"curl -X GET {base}/api/auth/me "
                '-H "Authorization: Bearer YOUR_JWT_TOKEN"'
            ),
        },
    }
