from __future__ import annotations

from functools import wraps
from typing import Optional

from flask import g, request

from ..core.enums import AccessLevel
from ..core.exceptions import NoAccess
from .gate import AuthenticationGate


def read_token(header_value: Optional[str]) -> Optional[str]:
    if header_value is None:
        return None
    value = header_value.strip()
    if value[:7].lower() == "bearer ":
        value = value[7:].strip()
    return value or None


def build_access_required(gate: AuthenticationGate, *, header_name: str):
    """Return an ``access_required(*levels)`` decorator bound to ``gate``.

    The wrapped view runs with ``g.principal`` set. A valid session whose
    access level the route does not accept fails with NoAccess.
    """

    def access_required(*levels: AccessLevel):
        allowed = frozenset(levels)

        def decorator(view):
            @wraps(view)
            def wrapper(*args, **kwargs):
                principal = gate.authenticate(read_token(request.headers.get(header_name)))
                if principal.access_level not in allowed:
                    raise NoAccess()
                g.principal = principal
                return view(*args, **kwargs)

            return wrapper

        return decorator

    return access_required
