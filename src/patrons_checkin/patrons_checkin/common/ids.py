from __future__ import annotations

import secrets


def new_id() -> str:
    """24 hex characters, the width of the id columns in schema.sql."""
    return secrets.token_hex(12)
