"""
Onboarding page handlers.

``load_onboarding`` runs on every page view and ``submit_onboarding`` on
every form POST. Both take the authenticator and the database session as
arguments so they can run against any Flask request.
"""
import re
from dataclasses import dataclass, field
from typing import Dict, Optional

from models import MerchantProfile
from shopify_auth import AdminSession

SUCCESS_LOCATION = "/app?onboarding=success"
STORAGE_ERROR_MESSAGE = (
    "Failed to save profile. Please check your database connection in pgAdmin."
)

EMAIL_PATTERN = re.compile(r"\S+@\S+\.\S+")


@dataclass
class ProfileFields:
    first_name: str = ""
    last_name: str = ""
    email: str = ""
    store_name: str = ""

    @classmethod
    def from_form(cls, form):
        # absent fields count as empty
        return cls(
            first_name=form.get("firstName") or "",
            last_name=form.get("lastName") or "",
            email=form.get("email") or "",
            store_name=form.get("storeName") or "",
        )

    @classmethod
    def from_profile(cls, profile):
        if profile is None:
            return cls()
        return cls(
            first_name=profile.first_name or "",
            last_name=profile.last_name or "",
            email=profile.email or "",
            store_name=profile.store_name or "",
        )

    def as_form(self):
        return {
            "firstName": self.first_name,
            "lastName": self.last_name,
            "email": self.email,
            "storeName": self.store_name,
        }


@dataclass
class LoaderData:
    profile: Optional[MerchantProfile]
    admin: Optional[AdminSession] = None


@dataclass
class ActionResult:
    status: int
    errors: Dict[str, str] = field(default_factory=dict)
    values: Optional[ProfileFields] = None
    location: Optional[str] = None
    admin: Optional[AdminSession] = None


def validate_profile(fields: ProfileFields) -> Dict[str, str]:
    """Return every violation keyed by form field name, empty when valid."""
    errors = {}
    if not fields.first_name:
        errors["firstName"] = "First name is required"
    if not fields.last_name:
        errors["lastName"] = "Last name is required"
    if not fields.email:
        errors["email"] = "Email is required"
    elif not EMAIL_PATTERN.fullmatch(fields.email):
        errors["email"] = "Invalid email format"
    if not fields.store_name:
        errors["storeName"] = "Store name is required"
    return errors


def latest_profile(db_session):
    # Not scoped to the authenticated shop: the newest row wins globally
    return (
        db_session.query(MerchantProfile)
        .order_by(MerchantProfile.created_at.desc(), MerchantProfile.id.desc())
        .first()
    )


def load_onboarding(request, authenticator, db_session) -> LoaderData:
    admin = authenticator.authenticate(request)
    return LoaderData(profile=latest_profile(db_session), admin=admin)


def save_profile(db_session, fields: ProfileFields) -> MerchantProfile:
    profile = MerchantProfile(
        first_name=fields.first_name,
        last_name=fields.last_name,
        email=fields.email,
        store_name=fields.store_name,
    )
    db_session.add(profile)
    db_session.commit()
    return profile


def submit_onboarding(request, authenticator, db_session, logger) -> ActionResult:
    admin = authenticator.authenticate(request)
    fields = ProfileFields.from_form(request.form)

    errors = validate_profile(fields)
    if errors:
        return ActionResult(status=400, errors=errors, values=fields, admin=admin)

    try:
        profile = save_profile(db_session, fields)
    except Exception as e:
        db_session.rollback()
        logger.error("Failed to save merchant profile: %s", e, exc_info=True)
        return ActionResult(
            status=500,
            errors={"form": STORAGE_ERROR_MESSAGE},
            values=fields,
            admin=admin,
        )

    logger.info("Saved merchant profile %s for shop %s", profile.id, admin.shop)
    return ActionResult(status=302, location=SUCCESS_LOCATION, admin=admin)
