# app/dependencies.py
import logging
import os
import re

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from google.auth.transport import requests as google_requests
from google.oauth2 import id_token
from sqlalchemy.orm import Session

from app.database import get_db
from app.models.profile import Profile, ROLE_ADMIN, ROLE_BLOGGER
from app.models.admin_whitelist import AdminWhitelist

logger = logging.getLogger(__name__)

# Security schemes
bearer = HTTPBearer(description="Google ID Token (JWT)")
optional_bearer = HTTPBearer(auto_error=False, description="Google ID Token (JWT)")


def _verify_token(token: str) -> dict:
    # 1. Check if Client ID is actually loaded
    client_id = os.getenv("GOOGLE_CLIENT_ID")
    if not client_id:
        logger.error("GOOGLE_CLIENT_ID is not set in environment variables")
        raise HTTPException(status_code=500, detail="Server Configuration Error")

    try:
        # 2. Verify the token
        idinfo = id_token.verify_oauth2_token(
            token, google_requests.Request(), client_id
        )
    except ValueError as e:
        # 3. Log the specific error (e.g. "Token expired", "Audience mismatch")
        logger.warning("Token validation failed: %s", e)
        raise HTTPException(status_code=401, detail=f"Invalid token: {str(e)}")
    except Exception as e:
        logger.error("Unexpected auth error: %s", e)
        raise HTTPException(status_code=401, detail="Authentication failed")

    return {
        "sub": idinfo["sub"],
        "email": idinfo.get("email", ""),
        "name": idinfo.get("name"),
        "picture": idinfo.get("picture"),
    }


def get_verified_identity(credentials: HTTPAuthorizationCredentials = Depends(bearer)) -> dict:
    return _verify_token(credentials.credentials)


def get_optional_identity(
    credentials: HTTPAuthorizationCredentials | None = Depends(optional_bearer),
) -> dict | None:
    """Anonymous readers are allowed; a bad token is still rejected."""
    if credentials is None:
        return None
    return _verify_token(credentials.credentials)


def is_whitelisted_admin(db: Session, email: str) -> bool:
    if not email:
        return False
    return db.query(AdminWhitelist).filter(AdminWhitelist.email == email.lower()).first() is not None


def derive_username(db: Session, email: str) -> str | None:
    """Username from the email local part, suffixed with a number if taken."""
    base = re.sub(r"[^a-z0-9_]+", "", (email or "").split("@")[0].lower())
    if not base:
        return None

    username, n = base, 1
    while db.query(Profile).filter(Profile.username == username).first():
        n += 1
        username = f"{base}{n}"
    return username


def get_or_create_profile(db: Session, identity: dict) -> Profile:
    """
    Look up the profile for a verified identity, creating it on first sign-in.
    The role comes from the admin whitelist, never from the client.
    """
    profile = db.query(Profile).filter(Profile.user_id == identity["sub"]).first()
    if profile:
        if identity.get("email") and profile.email != identity["email"]:
            profile.email = identity["email"]
            db.commit()
            db.refresh(profile)
        return profile

    profile = Profile(
        user_id=identity["sub"],
        email=identity.get("email", ""),
        username=derive_username(db, identity.get("email")),
        full_name=identity.get("name"),
        avatar_url=identity.get("picture"),
        role=ROLE_ADMIN if is_whitelisted_admin(db, identity.get("email")) else ROLE_BLOGGER,
    )
    db.add(profile)
    db.commit()
    db.refresh(profile)
    logger.info("Created %s profile %s", profile.role, profile.id)
    return profile


def get_current_profile(
    identity: dict = Depends(get_verified_identity),
    db: Session = Depends(get_db)
) -> Profile:
    return get_or_create_profile(db, identity)


def get_optional_profile(
    identity: dict | None = Depends(get_optional_identity),
    db: Session = Depends(get_db)
) -> Profile | None:
    if identity is None:
        return None
    return get_or_create_profile(db, identity)


def require_admin(profile: Profile = Depends(get_current_profile)) -> Profile:
    if not profile.is_admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Access denied")
    return profile
