from __future__ import annotations

from flask import Flask, g

from ..common.http import json_body, ok
from ..common.validators import require_table_number
from ..core.enums import AccessLevel
from ..container import Container
from ..managers.decorators import build_access_required
from .model import DiningPatronUpdate, GamingPatronUpdate


def register(app: Flask, container: Container) -> None:
    access_required = build_access_required(container.gate, header_name=app.config["SESSION_HEADER"])
    lifecycle = container.lifecycle_service

    # -------- Start / stop --------
    @app.route("/manager/venue/<venue_id>/dining/<area_id>/start", methods=["POST"], endpoint="start_dining_service")
    @access_required(AccessLevel.FULL)
    def start_dining_service(venue_id: str, area_id: str):
        service = lifecycle.start_dining_service(g.principal.manager_id, venue_id, area_id)
        return ok(201, service=service.to_dict())

    @app.route("/manager/venue/<venue_id>/gaming/<area_id>/start", methods=["POST"], endpoint="start_gaming_service")
    @access_required(AccessLevel.FULL)
    def start_gaming_service(venue_id: str, area_id: str):
        service = lifecycle.start_gaming_service(g.principal.manager_id, venue_id, area_id)
        return ok(201, service=service.to_dict())

    @app.route("/manager/venue/<venue_id>/dining/<area_id>/stop", methods=["POST"], endpoint="stop_dining_service")
    @access_required(AccessLevel.FULL)
    def stop_dining_service(venue_id: str, area_id: str):
        lifecycle.stop_dining_service(g.principal.manager_id, venue_id, area_id)
        return ok()

    @app.route("/manager/venue/<venue_id>/gaming/<area_id>/stop", methods=["POST"], endpoint="stop_gaming_service")
    @access_required(AccessLevel.FULL)
    def stop_gaming_service(venue_id: str, area_id: str):
        lifecycle.stop_gaming_service(g.principal.manager_id, venue_id, area_id)
        return ok()

    # -------- Dining tables --------
    @app.route(
        "/manager/service/<service_id>/table/<table_id>/checkin/<check_in_id>/move",
        methods=["POST"],
        endpoint="move_dining_group",
    )
    @access_required(AccessLevel.FULL)
    def move_dining_group(service_id: str, table_id: str, check_in_id: str):
        data = json_body()
        new_table_id = lifecycle.move_dining_group(
            g.principal.manager_id, service_id, table_id, check_in_id, require_table_number(data.get("tableNumber"))
        )
        return ok(tableId=new_table_id)

    @app.route("/manager/service/<service_id>/table/<table_id>/move", methods=["POST"], endpoint="move_dining_table")
    @access_required(AccessLevel.FULL)
    def move_dining_table(service_id: str, table_id: str):
        data = json_body()
        new_table_id = lifecycle.move_dining_table(
            g.principal.manager_id, service_id, table_id, require_table_number(data.get("tableNumber"))
        )
        return ok(tableId=new_table_id)

    @app.route("/manager/service/<service_id>/table/<table_id>/close", methods=["POST"], endpoint="close_dining_table")
    @access_required(AccessLevel.FULL)
    def close_dining_table(service_id: str, table_id: str):
        lifecycle.close_dining_table(g.principal.manager_id, service_id, table_id)
        return ok()

    # -------- Dining patrons --------
    dining_patron_url = "/manager/service/<service_id>/table/<table_id>/checkin/<check_in_id>/patron/<patron_id>"

    @app.route(dining_patron_url, methods=["PATCH"], endpoint="update_dining_patron")
    @access_required(AccessLevel.FULL)
    def update_dining_patron(service_id: str, table_id: str, check_in_id: str, patron_id: str):
        update = DiningPatronUpdate.from_json(json_body())
        patron = lifecycle.update_dining_patron(
            g.principal.manager_id, service_id, table_id, check_in_id, patron_id, update
        )
        return ok(patron=patron.to_dict())

    @app.route(dining_patron_url, methods=["DELETE"], endpoint="delete_dining_patron")
    @access_required(AccessLevel.FULL)
    def delete_dining_patron(service_id: str, table_id: str, check_in_id: str, patron_id: str):
        lifecycle.delete_dining_patron(g.principal.manager_id, service_id, table_id, check_in_id, patron_id)
        return ok()

    # -------- Gaming patrons --------
    gaming_patron_url = "/manager/service/<service_id>/gaming/patron/<patron_id>"

    @app.route(gaming_patron_url, methods=["PATCH"], endpoint="update_gaming_patron")
    @access_required(AccessLevel.FULL)
    def update_gaming_patron(service_id: str, patron_id: str):
        update = GamingPatronUpdate.from_json(json_body())
        lifecycle.update_gaming_patron(g.principal.manager_id, service_id, patron_id, update)
        return ok()

    @app.route(gaming_patron_url, methods=["DELETE"], endpoint="delete_gaming_patron")
    @access_required(AccessLevel.FULL)
    def delete_gaming_patron(service_id: str, patron_id: str):
        lifecycle.delete_gaming_patron(g.principal.manager_id, service_id, patron_id)
        return ok()

    @app.route(gaming_patron_url + "/checkout", methods=["POST"], endpoint="check_out_gaming_patron")
    @access_required(AccessLevel.FULL)
    def check_out_gaming_patron(service_id: str, patron_id: str):
        lifecycle.check_out_gaming_patron(g.principal.manager_id, service_id, patron_id)
        return ok()
