"""Authentication core.

Learn: Four pieces, leaf-first:
1. password   → bcrypt hash/verify
2. validation → registration input rules
3. jwt        → issue/verify signed, expiring tokens
4. gate       → Authorization header → Authenticated | Rejected

dependencies wires them into FastAPI.
"""
