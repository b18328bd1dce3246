"""
Shared fixtures
===============

Every test gets its own in-memory SQLite database, so nothing leaks between
tests and no file is written.
"""

# =========================
# Imports
# =========================
from unittest.mock import MagicMock
import pytest
from tireshop.app import create_app
from tireshop.db import init_db
from tireshop.models import Season
from tireshop.repository import TireRepository, UserRepository


# -------------------------
# Helpers
# -------------------------
def make_tire(repo, model_id, **overrides):
    data = {
        "modelId": model_id,
        "code": "XL",
        "size": "205/55R16",
        "fuelEfficiency": "C",
        "wetGrip": "B",
        "noiseLevel": 70,
        "price": 8000,
        "inStock": True,
        "imageUrl": "https://example.com/tire.png",
    }
    data.update(overrides)
    return repo.create_tire(data, actor_id=None)


def openai_reply(content):
    """Fake chat completion response carrying `content`."""
    message = MagicMock()
    message.content = content
    choice = MagicMock()
    choice.message = message
    response = MagicMock()
    response.choices = [choice]
    return response


# -------------------------
# Fixtures
# -------------------------
@pytest.fixture
def session_factory():
    engine, factory = init_db("sqlite://")
    yield factory
    engine.dispose()


@pytest.fixture
def repo(session_factory):
    return TireRepository(session_factory)


@pytest.fixture
def users(session_factory):
    return UserRepository(session_factory)


@pytest.fixture
def catalog(repo):
    """Brand with one summer and one winter model plus five tires."""
    brand = repo.create_brand({"name": "Contimax"})
    summer = repo.create_model({"name": "SportContact", "brandId": brand.id,
                                "season": int(Season.SUMMER)})
    winter = repo.create_model({"name": "WinterContact", "brandId": brand.id,
                                "season": int(Season.WINTER)})
    tires = [
        make_tire(repo, summer.id, size="205/55R16", code="XL",
                  fuelEfficiency="C", wetGrip="A", noiseLevel=71, price=9000),
        make_tire(repo, summer.id, size="225/45R17", code="RSC",
                  fuelEfficiency="B", wetGrip="B", noiseLevel=68, price=15000,
                  inStock=False),
        make_tire(repo, winter.id, size="205/55R16", code="SEAL",
                  fuelEfficiency="E", wetGrip="C", noiseLevel=72, price=6000),
        make_tire(repo, winter.id, size="195/65R15", code="XL",
                  fuelEfficiency="B", wetGrip="B", noiseLevel=69, price=7000,
                  inStock=False),
        make_tire(repo, winter.id, size="215/60R16", code="XL",
                  fuelEfficiency="A", wetGrip="D", noiseLevel=74, price=9500),
    ]
    return {"brand": brand, "summer": summer, "winter": winter,
            "tires": tires}


@pytest.fixture
def openai_client():
    return MagicMock()


@pytest.fixture
def app(openai_client):
    app = create_app({
        "DATABASE_URL": "sqlite://",
        "SECRET_KEY": "test-secret",
        "OPENAI_API_KEY": "",
        "LOG_LEVEL": "WARNING",
    }, openai_client=openai_client)
    app.config["TESTING"] = True
    yield app
    app.extensions["tireshop"].close()


@pytest.fixture
def ctx(app):
    return app.extensions["tireshop"]


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def admin_client(app, ctx):
    ctx.users.create_user("admin", "admin-pass", is_admin=True)
    c = app.test_client()
    resp = c.post("/api/login", json={"username": "admin",
                                      "password": "admin-pass"})
    assert resp.status_code == 200
    return c


@pytest.fixture
def user_client(app):
    c = app.test_client()
    resp = c.post("/api/register", json={"username": "carl",
                                         "password": "carl-pass"})
    assert resp.status_code == 201
    return c
