from __future__ import annotations

from flask import Flask, g, request, send_file

from ..common.http import json_body, ok
from ..common.validators import require_non_empty, require_secret
from ..core.enums import AccessLevel
from ..core.exceptions import AreaNotFound
from ..container import Container
from ..venues.qr import render_qr_png
from .decorators import build_access_required


def register(app: Flask, container: Container) -> None:
    access_required = build_access_required(container.gate, header_name=app.config["SESSION_HEADER"])
    auth = container.manager_auth_service

    @app.route("/manager/login", methods=["POST"], endpoint="manager_login")
    def login():
        data = json_body()
        result = auth.login(
            require_non_empty(data.get("username"), "username"),
            require_secret(data.get("password"), "password"),
            request.remote_addr,
        )
        return ok(**result.to_dict())

    @app.route("/manager/self", methods=["GET"], endpoint="manager_self")
    @access_required(AccessLevel.FULL)
    def get_self():
        profile = auth.get_self(g.principal.manager_id)
        return ok(manager=profile.to_dict())

    @app.route("/manager/password", methods=["PATCH"], endpoint="manager_update_password")
    @access_required(AccessLevel.FULL, AccessLevel.RESET)
    def update_password():
        data = json_body()
        auth.update_password(g.principal.manager_id, require_secret(data.get("password"), "password"))
        return ok()

    @app.route("/manager/venues", methods=["GET"], endpoint="manager_venues")
    @access_required(AccessLevel.FULL)
    def get_venues():
        venues = auth.get_venues(g.principal.manager_id)
        return ok(venues=[v.to_dict() for v in venues])

    @app.route("/manager/venue/<venue_id>/area/<area_id>/qr", methods=["GET"], endpoint="manager_area_qr")
    @access_required(AccessLevel.FULL)
    def area_qr(venue_id: str, area_id: str):
        """PNG QR code pointing patrons at the public check-in page of an area."""
        auth.ensure_can_access_venue(g.principal.manager_id, venue_id)
        venue = container.venue_service.get_venue_by_id(venue_id)

        area = next((a for a in venue.areas if a.area_id == area_id), None)
        if area is None:
            raise AreaNotFound()

        url = app.config["PUBLIC_CHECKIN_URL"].format(venue=venue.url_name, area=area.short_name)
        return send_file(render_qr_png(url), mimetype="image/png")
