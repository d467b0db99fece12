"""
Shopify admin authentication for embedded app requests.

App Bridge signs a short lived session token (an HS256 JWT) with the app's
API secret. The token arrives as a Bearer header on fetch requests, or as the
``id_token`` parameter when Shopify loads the app inside the admin frame.
"""
from dataclasses import dataclass
from typing import Optional

import jwt
from flask import session


class AuthenticationError(Exception):
    """Raised when a request does not carry a valid admin session token."""


@dataclass
class AdminSession:
    shop: str
    user_id: Optional[str]
    token: str


def shop_from_dest(dest):
    # dest claim looks like "https://example.myshopify.com"
    if not dest:
        return None
    return dest.split("://", 1)[-1].rstrip("/")


def extract_id_token(request):
    auth_header = request.headers.get("Authorization", "")
    if auth_header.lower().startswith("bearer "):
        return auth_header[7:].strip()

    token = request.args.get("id_token") or request.form.get("id_token")
    if token:
        return token

    return session.get("id_token")


class ShopifyAdminAuthenticator:
    def __init__(self, api_key, api_secret):
        self.api_key = api_key
        self.api_secret = api_secret

    def verify_id_token(self, id_token):
        return jwt.decode(
            id_token,
            self.api_secret,
            algorithms=["HS256"],
            audience=self.api_key,
            options={"verify_exp": True}
        )

    def authenticate(self, request) -> AdminSession:
        if not self.api_secret:
            raise AuthenticationError("Shopify API secret is not configured")

        id_token = extract_id_token(request)
        if not id_token:
            raise AuthenticationError("Missing session token")

        try:
            claims = self.verify_id_token(id_token)
        except jwt.ExpiredSignatureError as e:
            raise AuthenticationError("Session token expired") from e
        except jwt.InvalidTokenError as e:
            raise AuthenticationError(f"Invalid session token: {e}") from e

        shop = shop_from_dest(claims.get("dest"))
        if not shop:
            raise AuthenticationError("Session token has no shop destination")

        # Keep the token so the form POST from the same frame authenticates
        session["shop"] = shop
        session["id_token"] = id_token

        return AdminSession(shop=shop, user_id=claims.get("sub"), token=id_token)
