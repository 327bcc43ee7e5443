from __future__ import annotations

from flask import Flask

from ..common.http import json_body, ok
from ..container import Container
from .model import DiningCheckInRequest, GamingCheckInRequest


def register(app: Flask, container: Container) -> None:
    checkins = container.checkin_service

    @app.route("/patron/check-in/<venue_id>/gaming/<area_id>", methods=["POST"], endpoint="gaming_check_in")
    def gaming_check_in(venue_id: str, area_id: str):
        checkins.submit_gaming_check_in(venue_id, area_id, GamingCheckInRequest.from_json(json_body()))
        return ok()

    @app.route("/patron/check-in/<venue_id>/dining/<area_id>", methods=["POST"], endpoint="dining_check_in")
    def dining_check_in(venue_id: str, area_id: str):
        checkins.submit_dining_check_in(venue_id, area_id, DiningCheckInRequest.from_json(json_body()))
        return ok()
