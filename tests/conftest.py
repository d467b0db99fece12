"""Shared test fixtures."""
import time

import jwt
import pytest

from app import create_app
from models import db, MerchantProfile

API_KEY = "test-api-key"
API_SECRET = "test-api-secret"
SHOP = "jane-store.myshopify.com"


def make_token(shop=SHOP, audience=API_KEY, secret=API_SECRET, expires_in=60, **claims):
    now = int(time.time())
    payload = {
        "iss": f"https://{shop}/admin",
        "dest": f"https://{shop}",
        "aud": audience,
        "sub": "42",
        "iat": now,
        "nbf": now,
        "exp": now + expires_in,
    }
    payload.update(claims)
    return jwt.encode(payload, secret, algorithm="HS256")


@pytest.fixture
def app():
    app = create_app({
        "TESTING": True,
        "SECRET_KEY": "test-secret-key",
        "SHOPIFY_API_KEY": API_KEY,
        "SHOPIFY_API_SECRET": API_SECRET,
        "SQLALCHEMY_DATABASE_URI": "sqlite://",
        "LOG_FILE": "",
        "CORS_ORIGINS": ["https://admin.shopify.com"],
    })
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def token():
    return make_token()


@pytest.fixture
def auth_headers(token):
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def valid_form():
    return {
        "firstName": "Jane",
        "lastName": "Doe",
        "email": "jane.doe@example.com",
        "storeName": "Jane's Goods",
    }


@pytest.fixture
def add_profile(app):
    def _add(**kwargs):
        values = {
            "first_name": "Jane",
            "last_name": "Doe",
            "email": "jane.doe@example.com",
            "store_name": "Jane's Goods",
        }
        values.update(kwargs)
        profile = MerchantProfile(**values)
        db.session.add(profile)
        db.session.commit()
        return profile
    return _add
