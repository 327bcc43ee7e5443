from __future__ import annotations

import pytest

from src.patrons_checkin.patrons_checkin.core.exceptions import ValidationError, VenueNotFound


def test_get_venue_by_url_returns_public_projection(world):
    venue = world.venue_service.get_venue_by_url("the-club")

    public = venue.to_public_dict()
    assert public["id"] == "venue-1"
    assert public["urlName"] == "the-club"
    assert public["areas"][0] == {
        "id": "dining-1",
        "type": "DINING",
        "shortName": "bistro",
        "name": "Bistro",
        "isOpen": True,
        "hasActiveService": False,
    }


def test_has_active_service_follows_lifecycle(world):
    world.lifecycle.start_gaming_service("m-full", "venue-1", "gaming-1")

    areas = {a["id"]: a for a in world.venue_service.get_venue_by_id("venue-1").to_public_dict()["areas"]}

    assert areas["gaming-1"]["hasActiveService"] is True
    assert areas["dining-1"]["hasActiveService"] is False


def test_unknown_venue(world):
    with pytest.raises(VenueNotFound):
        world.venue_service.get_venue_by_id("missing")
    with pytest.raises(VenueNotFound):
        world.venue_service.get_venue_by_url("missing")
    with pytest.raises(ValidationError):
        world.venue_service.get_venue_by_url(" ")
