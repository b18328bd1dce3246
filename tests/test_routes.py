"""
Integration tests for the JSON API
==================================

Drives the Flask app through its test client. The OpenAI client is the
MagicMock from conftest, so recommendation calls never hit the network.
"""

# =========================
# Imports
# =========================
import json
from unittest.mock import MagicMock
import pytest
from sqlalchemy.exc import OperationalError
from conftest import openai_reply


@pytest.fixture
def repo(ctx):
    # seed the catalog into the app's own database
    return ctx.tires


def new_tire(model_id, **overrides):
    body = {
        "modelId": model_id, "code": "XL", "size": "205/55R16",
        "fuelEfficiency": "B", "wetGrip": "A", "noiseLevel": 70,
        "price": 11000, "inStock": True, "imageUrl": "",
    }
    body.update(overrides)
    return body


# -------------------------
# Tests: Service
# -------------------------
def test_service_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.get_json()["status"] == "ok"


def test_unknown_route_is_json_404(client):
    resp = client.get("/api/nope")
    assert resp.status_code == 404
    assert "message" in resp.get_json()


# -------------------------
# Tests: Public catalog
# -------------------------
def test_list_tires_is_public(client, catalog):
    resp = client.get("/api/tires")
    assert resp.status_code == 200
    body = resp.get_json()
    assert [t["id"] for t in body] == [t.id for t in catalog["tires"]]
    assert body[0]["model"]["brand"]["name"] == "Contimax"


def test_list_tires_with_filters(client, catalog):
    resp = client.get("/api/tires?width=205&aspect=55&diameter=16"
                      "&modelSeason=2")
    assert resp.status_code == 200
    assert [t["price"] for t in resp.get_json()] == [6000]


def test_list_tires_in_stock_and_noise(client, catalog):
    resp = client.get("/api/tires?inStock=true&maxNoiseLevel=72")
    assert sorted(t["noiseLevel"] for t in resp.get_json()) == [71, 72]


def test_list_tires_bad_filter_is_400(client, catalog):
    resp = client.get("/api/tires?maxNoiseLevel=quiet")
    assert resp.status_code == 400
    assert "maxNoiseLevel" in resp.get_json()["errors"]


def test_get_tire(client, catalog):
    tire = catalog["tires"][1]
    resp = client.get(f"/api/tires/{tire.id}")
    assert resp.status_code == 200
    assert resp.get_json()["size"] == "225/45R17"


def test_get_missing_tire_is_404(client):
    assert client.get("/api/tires/999").status_code == 404


def test_brands_and_models_are_public(client, catalog):
    brands = client.get("/api/brands").get_json()
    assert [b["name"] for b in brands] == ["Contimax"]

    models = client.get("/api/models").get_json()
    assert {m["season"] for m in models} == {1, 2}

    resp = client.get(f"/api/brands/{catalog['brand'].id}/models")
    assert len(resp.get_json()) == 2
    assert client.get("/api/brands/999/models").status_code == 404


# -------------------------
# Tests: Admin gate
# -------------------------
@pytest.mark.parametrize("method,path", [
    ("post", "/api/tires"),
    ("patch", "/api/tires/1"),
    ("delete", "/api/tires/1"),
    ("post", "/api/brands"),
    ("patch", "/api/brands/1"),
    ("delete", "/api/brands/1"),
    ("post", "/api/models"),
    ("patch", "/api/models/1"),
    ("delete", "/api/models/1"),
    ("get", "/api/health/database"),
])
def test_writes_need_admin(client, user_client, catalog, method, path):
    assert getattr(client, method)(path, json={}).status_code == 401
    assert getattr(user_client, method)(path, json={}).status_code == 403


def test_rejected_write_changes_nothing(client, user_client, catalog):
    tire = catalog["tires"][0]
    user_client.delete(f"/api/tires/{tire.id}")
    user_client.patch(f"/api/tires/{tire.id}", json={"price": 1})
    body = client.get(f"/api/tires/{tire.id}").get_json()
    assert body["price"] == tire.price


# -------------------------
# Tests: Admin CRUD
# -------------------------
def test_admin_creates_tire(admin_client, catalog, ctx):
    resp = admin_client.post("/api/tires",
                             json=new_tire(catalog["summer"].id))
    assert resp.status_code == 201
    body = resp.get_json()
    assert body["id"]
    admin = ctx.users.get_user_by_username("admin")
    assert body["createdById"] == admin.id
    assert admin_client.get(f"/api/tires/{body['id']}").status_code == 200


def test_admin_create_invalid_tire_is_400(admin_client, catalog):
    resp = admin_client.post("/api/tires", json=new_tire(
        catalog["summer"].id, size="big", fuelEfficiency="Z"))
    assert resp.status_code == 400
    assert set(resp.get_json()["errors"]) == {"size", "fuelEfficiency"}


def test_admin_create_without_json_is_400(admin_client):
    resp = admin_client.post("/api/tires", data="nope",
                             content_type="text/plain")
    assert resp.status_code == 400


def test_admin_create_tire_for_unknown_model_is_409(admin_client, catalog):
    resp = admin_client.post("/api/tires", json=new_tire(4242))
    assert resp.status_code == 409


def test_admin_updates_tire(admin_client, catalog):
    tire = catalog["tires"][1]
    resp = admin_client.patch(f"/api/tires/{tire.id}",
                              json={"inStock": True, "price": "99.50"})
    assert resp.status_code == 200
    assert resp.get_json()["inStock"] is True
    assert resp.get_json()["price"] == 9950
    assert resp.get_json()["size"] == tire.size


def test_admin_update_missing_tire_is_404(admin_client):
    resp = admin_client.patch("/api/tires/999", json={"price": 100})
    assert resp.status_code == 404


def test_admin_deletes_tire(admin_client, catalog):
    tire_id = catalog["tires"][0].id
    assert admin_client.delete(f"/api/tires/{tire_id}").status_code == 204
    assert admin_client.get(f"/api/tires/{tire_id}").status_code == 404
    assert admin_client.delete(f"/api/tires/{tire_id}").status_code == 404


def test_admin_brand_and_model_flow(admin_client):
    resp = admin_client.post("/api/brands", json={"name": "Goodride"})
    assert resp.status_code == 201
    brand_id = resp.get_json()["id"]

    assert admin_client.post("/api/brands",
                             json={"name": "Goodride"}).status_code == 409

    resp = admin_client.post("/api/models", json={
        "name": "Eagle", "brandId": brand_id, "season": "winter"})
    assert resp.status_code == 201
    model = resp.get_json()
    assert model["season"] == 2
    assert model["brand"]["name"] == "Goodride"

    resp = admin_client.patch(f"/api/models/{model['id']}",
                              json={"season": 1})
    assert resp.get_json()["season"] == 1

    # brand still referenced by the model
    assert admin_client.delete(
        f"/api/brands/{brand_id}").status_code == 409
    assert admin_client.delete(
        f"/api/models/{model['id']}").status_code == 204
    assert admin_client.delete(f"/api/brands/{brand_id}").status_code == 204


def test_admin_rename_brand(admin_client, catalog):
    resp = admin_client.patch(f"/api/brands/{catalog['brand'].id}",
                              json={"name": "Contimax Pro"})
    assert resp.status_code == 200
    assert resp.get_json()["name"] == "Contimax Pro"
    assert admin_client.patch("/api/brands/999",
                              json={"name": "x"}).status_code == 404


# -------------------------
# Tests: Recommendations
# -------------------------
PREFS = {"drivingStyle": "eco", "weather": "rain and snow",
         "budget": "economy", "vehicleType": "compact"}


def test_recommendations_from_model(client, catalog, openai_client):
    ids = [catalog["tires"][2].id, catalog["tires"][4].id]
    openai_client.chat.completions.create.return_value = openai_reply(
        json.dumps({"recommendedTireIds": ids}))
    resp = client.post("/api/recommendations", json=PREFS)
    assert resp.status_code == 200
    assert [t["id"] for t in resp.get_json()] == ids


def test_recommendations_fall_back_when_model_fails(client, catalog,
                                                    openai_client):
    openai_client.chat.completions.create.side_effect = RuntimeError("down")
    resp = client.post("/api/recommendations", json=PREFS)
    assert resp.status_code == 200
    assert [t["price"] for t in resp.get_json()] == [9500, 6000, 7000]


def test_recommendations_on_empty_catalog(client, openai_client):
    openai_client.chat.completions.create.return_value = openai_reply(
        '{"recommendedTireIds": []}')
    resp = client.post("/api/recommendations", json=PREFS)
    assert resp.status_code == 200
    assert resp.get_json() == []


def test_recommendations_need_no_login(client, catalog):
    resp = client.post("/api/recommendations", json={})
    assert resp.status_code == 200
    assert isinstance(resp.get_json(), list)
    assert len(resp.get_json()) <= 5


def test_recommendations_reject_bad_preferences(client):
    resp = client.post("/api/recommendations", json={"budget": 3})
    assert resp.status_code == 400


# -------------------------
# Tests: Database health
# -------------------------
def test_database_health_for_admin(admin_client):
    resp = admin_client.get("/api/health/database")
    assert resp.status_code == 200
    assert resp.get_json()["isConnected"] is True


def test_database_health_when_down(admin_client, ctx):
    broken = MagicMock()
    broken.connect.side_effect = OperationalError("SELECT 1", {},
                                                  Exception("gone"))
    ctx.health_monitor.engine = broken
    resp = admin_client.get("/api/health/database")
    assert resp.status_code == 503
    assert resp.get_json()["isConnected"] is False


# -------------------------
# Tests: Session auth
# -------------------------
def test_register_logs_in_as_customer(user_client):
    body = user_client.get("/api/user").get_json()
    assert body["username"] == "carl"
    assert body["isAdmin"] is False


def test_register_duplicate_is_409(client, user_client):
    resp = client.post("/api/register", json={"username": "carl",
                                              "password": "other-pass"})
    assert resp.status_code == 409


def test_register_short_password_is_400(client):
    resp = client.post("/api/register", json={"username": "dan",
                                              "password": "123"})
    assert resp.status_code == 400
    assert "password" in resp.get_json()["errors"]


def test_login_and_logout(client, ctx):
    ctx.users.create_user("erin", "erin-pass")
    assert client.get("/api/user").status_code == 401

    resp = client.post("/api/login", json={"username": "erin",
                                           "password": "wrong"})
    assert resp.status_code == 401

    resp = client.post("/api/login", json={"username": "erin",
                                           "password": "erin-pass"})
    assert resp.status_code == 200
    assert client.get("/api/user").get_json()["username"] == "erin"

    assert client.post("/api/logout").status_code == 204
    assert client.get("/api/user").status_code == 401


def test_session_cookie_is_same_site(client, ctx):
    ctx.users.create_user("fay", "fay-pass")
    resp = client.post("/api/login", json={"username": "fay",
                                           "password": "fay-pass"})
    cookie = resp.headers.get("Set-Cookie")
    assert "SameSite=Lax" in cookie
    assert "HttpOnly" in cookie


# -------------------------
# Tests: Out-of-range numbers
# -------------------------
HUGE = 99999999999999999999


def test_huge_filter_value_is_400(client, catalog):
    resp = client.get(f"/api/tires?maxNoiseLevel={HUGE}")
    assert resp.status_code == 400
    assert "maxNoiseLevel" in resp.get_json()["errors"]


def test_huge_id_is_404(client, admin_client, catalog):
    assert client.get(f"/api/tires/{HUGE}").status_code == 404
    assert admin_client.patch(f"/api/tires/{HUGE}",
                              json={"price": 100}).status_code == 404
    assert admin_client.delete(f"/api/tires/{HUGE}").status_code == 404
    assert admin_client.delete(f"/api/brands/{HUGE}").status_code == 404
    assert admin_client.patch(f"/api/models/{HUGE}",
                              json={"name": "x"}).status_code == 404
    assert client.get(f"/api/brands/{HUGE}/models").status_code == 404


@pytest.mark.parametrize("field", ["price", "noiseLevel", "modelId"])
def test_huge_number_in_tire_payload_is_400(admin_client, catalog, field):
    body = new_tire(catalog["summer"].id, **{field: 10**30})
    resp = admin_client.post("/api/tires", json=body)
    assert resp.status_code == 400
    assert field in resp.get_json()["errors"]

    tire_id = catalog["tires"][0].id
    resp = admin_client.patch(f"/api/tires/{tire_id}", json={field: 10**30})
    assert resp.status_code == 400
