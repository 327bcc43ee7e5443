from __future__ import annotations

from enum import Enum


class AccessLevel(str, Enum):
    """Access level carried by a manager session, fixed when it is issued."""

    FULL = "FULL"
    RESET = "RESET"


class ServiceType(str, Enum):
    """Kind of area a service runs in; also the tag of the Service variant."""

    DINING = "DINING"
    GAMING = "GAMING"
