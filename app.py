import logging

import pytz
from flask import Flask, request, jsonify, render_template, redirect, current_app
from flask_cors import CORS

from config import Config, configure_logging
from models import db, MerchantProfile
from onboarding import (
    ProfileFields,
    load_onboarding,
    submit_onboarding,
)
from shopify_auth import AuthenticationError, ShopifyAdminAuthenticator


def create_app(config=None, authenticator=None):
    app = Flask(__name__)
    app.config.from_object(Config)
    if config:
        app.config.update(config)

    configure_logging(app.config.get("LOG_FILE"), app.config.get("LOG_LEVEL", "INFO"))

    if app.config.get("CORS_ORIGINS"):
        CORS(app, origins=app.config["CORS_ORIGINS"], supports_credentials=True)

    db.init_app(app)

    if authenticator is None:
        authenticator = ShopifyAdminAuthenticator(
            app.config.get("SHOPIFY_API_KEY"),
            app.config.get("SHOPIFY_API_SECRET"),
        )
    app.extensions["shopify_auth"] = authenticator

    register_template_helpers(app)
    register_routes(app)
    register_commands(app)
    return app


def get_authenticator():
    return current_app.extensions["shopify_auth"]


def wants_json():
    best = request.accept_mimetypes.best_match(["text/html", "application/json"])
    return best == "application/json"


# Static copy for the sync info panel; the configured database URL never reaches the page
SYNC_INFO = {
    "host": "localhost",
    "port": 5432,
    "table": MerchantProfile.__tablename__,
}


def localize(value, tz_name):
    if value is None:
        return ""
    if value.tzinfo is None:
        value = pytz.utc.localize(value)
    try:
        tz = pytz.timezone(tz_name)
    except pytz.UnknownTimeZoneError:
        tz = pytz.utc
    return value.astimezone(tz).strftime("%b %d, %Y %I:%M %p %Z")


def register_template_helpers(app):
    @app.template_filter("localtime")
    def localtime_filter(value):
        return localize(value, current_app.config.get("DISPLAY_TIMEZONE", "UTC"))

    @app.context_processor
    def inject_shopify():
        return {"shopify_api_key": current_app.config.get("SHOPIFY_API_KEY") or ""}


def render_onboarding(profile, admin, values=None, errors=None, status=200):
    # Echoed values win over the stored profile after a failed submission
    if values is None:
        values = ProfileFields.from_profile(profile)
    return render_template(
        "onboarding.html",
        title="Onboarding",
        profile=profile,
        form=values.as_form(),
        errors=errors or {},
        id_token=admin.token if admin else "",
        shop_name=admin.shop if admin else None,
        db_info=SYNC_INFO,
    ), status


def register_routes(app):

    @app.errorhandler(AuthenticationError)
    def handle_auth_error(e):
        logging.warning("Rejected admin request to %s: %s", request.path, e)
        return jsonify({"error": "Unauthorized", "message": str(e)}), 401

    # ---------------- ONBOARDING ----------------
    @app.route("/app/onboarding", methods=["GET"])
    def onboarding_page():
        data = load_onboarding(request, get_authenticator(), db.session)

        if wants_json():
            profile = data.profile.to_dict() if data.profile else None
            return jsonify({"profile": profile})

        return render_onboarding(data.profile, data.admin)

    @app.route("/app/onboarding", methods=["POST"])
    def onboarding_submit():
        result = submit_onboarding(
            request, get_authenticator(), db.session, current_app.logger
        )

        if result.location:
            return redirect(result.location)

        if wants_json():
            return jsonify({"errors": result.errors}), result.status

        # the form re-renders from the submitted values, so the stored
        # profile is only needed for the "Profile Found" banner
        return render_onboarding(
            None,
            result.admin,
            values=result.values,
            errors=result.errors,
            status=result.status,
        )

    # ---------------- APP HOME ----------------
    @app.route("/app")
    def app_home():
        admin = get_authenticator().authenticate(request)
        return render_template(
            "app_home.html",
            title="Home",
            shop_name=admin.shop,
            id_token=admin.token,
            onboarding_success=request.args.get("onboarding") == "success",
        )

    @app.route("/init-db", methods=["GET"])
    def init_db():
        """Create all database tables."""
        try:
            db.create_all()
            return jsonify({"message": "Database initialized successfully"}), 200
        except Exception as e:
            current_app.logger.error("Database initialization failed: %s", e, exc_info=True)
            return jsonify({"error": str(e)}), 500


def register_commands(app):
    @app.cli.command("init-db")
    def init_db_command():
        """Create the MerchantProfile table."""
        db.create_all()
        print("Database initialized successfully")


if __name__ == "__main__":
    create_app().run(debug=True, port=5000)
