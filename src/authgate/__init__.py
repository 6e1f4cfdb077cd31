"""authgate — credential-based authentication gate for HTTP services.

Registers users, issues bearer tokens on login, and validates those
tokens on protected routes.
"""

__version__ = "0.1.0"
