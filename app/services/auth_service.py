import logging
import os
import secrets
from datetime import datetime, timedelta

from fastapi import HTTPException
from passlib.context import CryptContext
from sqlalchemy.orm import Session

from app.deps.auth import ADMIN_ROLES
from app.models.user import User
from app.services.notification_service import notify_admins_of_region


logger = logging.getLogger(__name__)

MAGIC_LINK_TTL_MINUTES = int(os.getenv("MAGIC_LINK_TTL_MINUTES", "15"))
FIRST_ACCESS_TTL_DAYS = int(os.getenv("FIRST_ACCESS_TTL_DAYS", "7"))

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str | None) -> bool:
    if not hashed_password:
        return False
    return pwd_context.verify(plain_password, hashed_password)


def new_login_token() -> str:
    # 32 url-safe characters
    return secrets.token_urlsafe(24)


def find_user_by_email(db: Session, email: str, region: str | None = None) -> User | None:
    q = db.query(User).filter(User.email == email)
    if region:
        q = q.filter(User.region == region)
    return q.order_by(User.created_at.asc()).first()


def check_user_role(db: Session, email: str | None, region: str | None = None) -> dict:
    if not email:
        raise HTTPException(status_code=400, detail="Email is required")

    user = find_user_by_email(db, email, region)
    if not user:
        return {"userExists": False, "isAdmin": False, "hasPassword": False}

    is_admin = user.role in ADMIN_ROLES
    return {
        "userExists": True,
        "isAdmin": is_admin,
        "hasPassword": not user.is_passwordless,
        "isPasswordless": bool(user.is_passwordless),
        "requiresPassword": is_admin or (not user.is_passwordless and user.role == "user"),
        "role": user.role,
    }


def register_passwordless(db: Session, payload) -> User:
    existing = db.query(User.id).filter(User.email == payload.email, User.region == payload.region).first()
    if existing:
        raise HTTPException(status_code=409, detail="An account with this email already exists in this region")

    user = User(
        username=f"user_{secrets.token_hex(4)}",
        email=payload.email,
        first_name=payload.first_name,
        last_name=payload.last_name,
        company_name=payload.company_name,
        country=payload.country,
        region=payload.region,
        region_category=payload.category,
        region_subcategory=payload.subcategory,
        role="user",
        is_active=True,
        is_approved=False,
        is_passwordless=True,
        login_token=new_login_token(),
        login_token_expiry=datetime.utcnow() + timedelta(days=FIRST_ACCESS_TTL_DAYS),
    )
    db.add(user)
    db.flush()

    notify_admins_of_region(
        db,
        user.region,
        "New registration",
        f"{user.first_name} {user.last_name} ({user.email}) is awaiting approval.",
    )
    logger.info("passwordless registration", extra={"user_id": str(user.id), "region": user.region})
    return user


def request_magic_link(db: Session, email: str, region: str | None = None) -> User:
    user = find_user_by_email(db, email, region)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    if user.role in ADMIN_ROLES:
        raise HTTPException(status_code=403, detail="Administrators must sign in with a password")
    if not user.is_passwordless:
        raise HTTPException(status_code=403, detail="This account signs in with a password")
    if not user.is_approved:
        raise HTTPException(status_code=403, detail="Your account is pending approval")

    user.login_token = new_login_token()
    user.login_token_expiry = datetime.utcnow() + timedelta(minutes=MAGIC_LINK_TTL_MINUTES)
    db.flush()

    # delivery is handled by the mail collaborator; the token itself is never logged
    logger.info("magic link issued", extra={"user_id": str(user.id), "ttl_minutes": MAGIC_LINK_TTL_MINUTES})
    return user


def verify_magic_link(db: Session, token: str) -> User:
    user = db.query(User).filter(User.login_token == token).first()
    if not user:
        raise HTTPException(status_code=404, detail="Invalid or already used link")

    if user.login_token_expiry is None or user.login_token_expiry < datetime.utcnow():
        raise HTTPException(status_code=400, detail="This link has expired")

    # single use
    user.login_token = None
    user.login_token_expiry = None
    db.flush()
    return user
