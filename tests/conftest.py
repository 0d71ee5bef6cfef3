import datetime as dt
from zoneinfo import ZoneInfo

import pytest
from werkzeug.security import generate_password_hash

from cafe_app import create_app
from cafe_app.extensions import db
from cafe_app.models.role import Role
from cafe_app.models.user import User
from cafe_app.services import menu_service
from cafe_app.services.clock import FixedClock

TZ_NAME = "Asia/Riyadh"
TZ = ZoneInfo(TZ_NAME)

# 2025-01-01 is "today" in every test, so the voting cycle is 2025-01-02
MORNING = dt.datetime(2025, 1, 1, 10, 0, tzinfo=TZ)
EVENING = dt.datetime(2025, 1, 1, 18, 30, tzinfo=TZ)
TODAY = dt.date(2025, 1, 1)
TOMORROW = dt.date(2025, 1, 2)

SEED_USERS = [
    ("Admin", "admin@example.com", "ADMIN"),
    ("Chef", "chef@example.com", "CAFE"),
    ("Alice", "alice@example.com", "USER"),
    ("Bob", "bob@example.com", "USER"),
    ("Carol", "carol@example.com", "USER"),
]

SAMPLE_OPTIONS = [
    {"dish_name": "Chicken Kabsa", "dish_name_ar": "كبسة دجاج", "description": "Rice and chicken"},
    {"dish_name": "Beef Lasagna", "description": "Baked pasta"},
    {"dish_name": "Falafel Wrap", "image_path": "/img/falafel.jpg"},
]


@pytest.fixture()
def app():
    app = create_app("config.TestConfig")
    with app.app_context():
        db.create_all()
        roles = {}
        for name in ("ADMIN", "CAFE", "USER"):
            roles[name] = Role(name=name)
            db.session.add(roles[name])
        for name, email, role in SEED_USERS:
            db.session.add(User(
                name=name,
                email=email,
                password=generate_password_hash("secret"),
                role=roles[role],
            ))
        db.session.commit()

    app.extensions["cafe_clock"] = FixedClock(MORNING, TZ_NAME, 18)

    yield app

    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def clock(app):
    return app.extensions["cafe_clock"]


@pytest.fixture()
def ctx(app):
    with app.app_context():
        yield


def user_id(email):
    return User.query.filter_by(email=email).first().id


def add_users(count, prefix="voter"):
    """Create ``count`` extra voters and return their ids."""
    role = Role.query.filter_by(name="USER").first()
    users = [User(name=f"{prefix}{i}", email=f"{prefix}{i}@example.com", role=role) for i in range(count)]
    db.session.add_all(users)
    db.session.commit()
    return [u.id for u in users]


def post_sample_menu(menu_date=TOMORROW):
    """Post the three sample options and return their ids in order."""
    return [o.id for o in menu_service.post_menu(menu_date, SAMPLE_OPTIONS)]


def login(client, email):
    r = client.post("/api/auth/login", json={"email": email, "password": "secret"})
    assert r.status_code == 200, r.data
    return {"Authorization": f"Bearer {r.get_json()['token']}"}
