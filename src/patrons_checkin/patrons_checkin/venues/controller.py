from __future__ import annotations

from flask import Flask

from ..common.http import ok
from ..container import Container


def register(app: Flask, container: Container) -> None:
    venues = container.venue_service

    @app.route("/venue/<venue_id>", methods=["GET"], endpoint="venue_by_id")
    def get_venue_by_id(venue_id: str):
        return ok(venue=venues.get_venue_by_id(venue_id).to_public_dict())

    @app.route("/venue/byUrl/<venue_url>", methods=["GET"], endpoint="venue_by_url")
    def get_venue_by_url(venue_url: str):
        return ok(venue=venues.get_venue_by_url(venue_url).to_public_dict())
