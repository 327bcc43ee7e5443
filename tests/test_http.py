from __future__ import annotations

import pytest

from src.patrons_checkin.patrons_checkin.container import Container
from src.patrons_checkin.patrons_checkin.main import create_app


@pytest.fixture
def client(world, monkeypatch):
    monkeypatch.setenv("APP_ENV", "testing")
    container = Container(
        conn=None,
        managers_repo=world.managers,
        sessions_repo=world.sessions,
        venues_repo=world.venues,
        services_repo=world.services,
        marketing_repo=world.marketing_users,
        gate=world.gate,
        manager_auth_service=world.auth,
        lifecycle_service=world.lifecycle,
        checkin_service=world.checkins,
        venue_service=world.venue_service,
        newsletter_service=world.newsletter,
    )
    return create_app(container=container).test_client()


def _login(client, username="ada", password="secret-pass!"):
    resp = client.post("/manager/login", json={"username": username, "password": password})
    assert resp.status_code == 200
    return resp.get_json()


def _auth(token):
    return {"Authorization": f"Bearer {token}"}


def test_public_venue_lookup(client):
    resp = client.get("/venue/byUrl/the-club")

    assert resp.status_code == 200
    body = resp.get_json()
    assert body["success"] is True
    assert body["venue"]["id"] == "venue-1"

    missing = client.get("/venue/missing")
    assert missing.status_code == 404
    assert missing.get_json() == {"success": False, "code": "E_VENUE_NOT_FOUND", "message": "Venue not found"}


def test_login_records_client_ip(client, world):
    body = _login(client)

    assert body["accessLevel"] == "FULL"
    assert world.sessions.get_by_session_id(body["sessionId"]).ip_address == "127.0.0.1"


def test_bad_login_maps_to_401(client):
    resp = client.post("/manager/login", json={"username": "ada", "password": "nope"})

    assert resp.status_code == 401
    assert resp.get_json()["code"] == "E_BAD_LOGIN"


def test_malformed_body_maps_to_invalid_input(client):
    resp = client.post("/manager/login", data="not json", content_type="application/json")

    assert resp.status_code == 400
    assert resp.get_json()["code"] == "E_INVALID_INPUT"


def test_manager_routes_require_a_session(client):
    assert client.get("/manager/self").get_json()["code"] == "E_UNAUTHENTICATED"
    resp = client.get("/manager/self", headers=_auth("0" * 256))
    assert resp.status_code == 401


def test_reset_session_may_only_change_password(client):
    token = _login(client, "grace", "first-login")["sessionId"]

    forbidden = client.get("/manager/self", headers=_auth(token))
    assert forbidden.status_code == 403
    assert forbidden.get_json()["code"] == "E_NO_ACCESS"

    changed = client.patch("/manager/password", json={"password": "brand-new-pass"}, headers=_auth(token))
    assert changed.status_code == 200

    expired = client.patch("/manager/password", json={"password": "again"}, headers=_auth(token))
    assert expired.get_json()["code"] == "E_SESSION_EXPIRED"

    fresh = _login(client, "grace", "brand-new-pass")
    assert fresh["accessLevel"] == "FULL"
    me = client.get("/manager/self", headers={"Authorization": fresh["sessionId"]})
    assert me.get_json()["manager"]["isPasswordReset"] is False


def test_dining_flow_over_http(client, world):
    token = _login(client)["sessionId"]

    started = client.post("/manager/venue/venue-1/dining/dining-1/start", headers=_auth(token))
    assert started.status_code == 201
    service_id = started.get_json()["service"]["id"]

    again = client.post("/manager/venue/venue-1/dining/dining-1/start", headers=_auth(token))
    assert again.status_code == 409
    assert again.get_json()["code"] == "E_AREA_HAS_ACTIVE_SERVICE"

    checked_in = client.post(
        "/patron/check-in/venue-1/dining/dining-1",
        json={"tableNumber": "4", "people": [{"firstName": "Ann", "phoneNumber": "0400"}]},
    )
    assert checked_in.status_code == 200

    sitting = world.services.get_service(service_id).sittings[0]
    check_in = sitting.check_ins[0]
    moved = client.post(
        f"/manager/service/{service_id}/table/{sitting.sitting_id}/checkin/{check_in.check_in_id}/move",
        json={"tableNumber": "9"},
        headers=_auth(token),
    )
    assert moved.status_code == 200
    new_table = moved.get_json()["tableId"]

    patron_url = (
        f"/manager/service/{service_id}/table/{new_table}/checkin/{check_in.check_in_id}"
        f"/patron/{check_in.people[0].patron_id}"
    )
    updated = client.patch(patron_url, json={"firstName": "Anne", "phoneNumber": "0411"}, headers=_auth(token))
    assert updated.get_json()["patron"]["firstName"] == "Anne"

    venues = client.get("/manager/venues", headers=_auth(token)).get_json()["venues"]
    dining_area = next(a for a in venues[0]["areas"] if a["id"] == "dining-1")
    assert dining_area["activeService"]["sittings"][-1]["tableNumber"] == "9"

    stopped = client.post("/manager/venue/venue-1/dining/dining-1/stop", headers=_auth(token))
    assert stopped.status_code == 200

    closed = client.post(
        "/patron/check-in/venue-1/dining/dining-1",
        json={"tableNumber": "4", "people": [{"firstName": "Bob", "phoneNumber": "0400"}]},
    )
    assert closed.status_code == 404
    assert closed.get_json()["code"] == "E_NO_SERVICE"


def test_gaming_patron_routes(client, world):
    token = _login(client)["sessionId"]
    service_id = client.post(
        "/manager/venue/venue-1/gaming/gaming-1/start", headers=_auth(token)
    ).get_json()["service"]["id"]
    client.post(
        "/patron/check-in/venue-1/gaming/gaming-1",
        json={"firstName": "Gus", "lastName": "Player", "phoneNumber": "0400"},
    )
    patron_id = world.services.get_service(service_id).patrons[0].patron_id

    resp = client.post(f"/manager/service/{service_id}/gaming/patron/{patron_id}/checkout", headers=_auth(token))
    assert resp.status_code == 200
    assert not world.services.get_service(service_id).patrons[0].is_active

    missing = client.delete(f"/manager/service/{service_id}/gaming/patron/nope", headers=_auth(token))
    assert missing.get_json()["code"] == "E_PATRON_NOT_FOUND"


def test_other_venue_manager_gets_no_access(client, world):
    token = _login(client, "alan")["sessionId"]

    resp = client.post("/manager/venue/venue-1/gaming/gaming-1/start", headers=_auth(token))

    assert resp.status_code == 403
    assert resp.get_json()["code"] == "E_NO_ACCESS"
    assert world.services.mutations == 0


def test_area_qr_code_is_png(client):
    token = _login(client)["sessionId"]

    resp = client.get("/manager/venue/venue-1/area/gaming-1/qr", headers=_auth(token))

    assert resp.status_code == 200
    assert resp.mimetype == "image/png"
    assert resp.data.startswith(b"\x89PNG")


def test_unknown_route_is_json(client):
    resp = client.get("/nowhere")

    assert resp.status_code == 404
    assert resp.get_json()["success"] is False


def test_integer_table_numbers_can_be_moved(client, world):
    token = _login(client)["sessionId"]
    service_id = client.post(
        "/manager/venue/venue-1/dining/dining-1/start", headers=_auth(token)
    ).get_json()["service"]["id"]
    client.post(
        "/patron/check-in/venue-1/dining/dining-1",
        json={"tableNumber": 4, "people": [{"firstName": "Ann", "phoneNumber": "0400"}]},
    )
    sitting = world.services.get_service(service_id).sittings[0]
    check_in = sitting.check_ins[0]

    moved = client.post(
        f"/manager/service/{service_id}/table/{sitting.sitting_id}/move",
        json={"tableNumber": 9},
        headers=_auth(token),
    )
    assert moved.status_code == 200
    assert world.services.get_service(service_id).find_sitting(sitting.sitting_id).table_number == "9"

    regrouped = client.post(
        f"/manager/service/{service_id}/table/{sitting.sitting_id}/checkin/{check_in.check_in_id}/move",
        json={"tableNumber": 12},
        headers=_auth(token),
    )
    assert regrouped.status_code == 200

    boolean = client.post(
        f"/manager/service/{service_id}/table/{sitting.sitting_id}/move",
        json={"tableNumber": True},
        headers=_auth(token),
    )
    assert boolean.status_code == 400
    assert boolean.get_json()["code"] == "E_INVALID_INPUT"


def test_unexpected_errors_hide_internal_detail(client, world, monkeypatch):
    def explode(venue_id):
        raise RuntimeError("mysql secret")

    monkeypatch.setattr(world.venues, "get_by_id", explode)

    resp = client.get("/venue/venue-1")

    assert resp.status_code == 500
    assert resp.get_json()["code"] == "E_UNKNOWN_INTERNAL"
    assert "mysql secret" not in resp.get_data(as_text=True)


def test_newsletter_signup_and_unsubscribe(client, world):
    payload = {"name": "Fan", "email": "fan@example.com", "captcha": "token-1"}

    signed_up = client.post("/news/signup", json=payload)
    assert signed_up.status_code == 200
    assert signed_up.get_json() == {"success": True}

    twice = client.post("/news/signup", json=payload)
    assert twice.status_code == 409
    assert twice.get_json()["code"] == "E_MARKETING_USER_SUBSCRIBED"

    (link_id,) = world.marketing_users.links
    assert client.delete(f"/news/unsubscribe/{link_id}").status_code == 200
    assert client.post("/news/signup", json=payload).status_code == 200

    missing = client.delete("/news/unsubscribe/nope")
    assert missing.status_code == 404
    assert missing.get_json()["code"] == "E_UNSUBSCRIBE_LINK_NOT_FOUND"


def test_newsletter_signup_rejects_failed_captcha(client, world):
    world.captcha.passes = False

    resp = client.post("/news/signup", json={"name": "Bot", "email": "bot@example.com", "captcha": "x"})

    assert resp.status_code == 400
    assert resp.get_json()["code"] == "E_RECAPTCHA_FAIL"
    assert world.marketing_users.users == {}
