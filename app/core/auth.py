# app/core/auth.py
import uuid
from typing import Any

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import jwt, JWTError
from sqlmodel import Session, select

from app.core.config import get_settings
from app.database import get_session
from app.models.user import User

settings = get_settings()

# HTTP Bearer scheme:
# - auto_error=False => missing Authorization header will NOT raise immediately
#   so guests can still browse and edit their cart.
bearer_scheme = HTTPBearer(auto_error=False)


def decode_access_token(token: str) -> dict[str, Any]:
    """
    Decode and verify an access token (JWT).

    Verification:
      - signature (JWT_ALG using JWT_SECRET)
      - expiration time (exp), when present
      - audience is NOT verified

    Raises:
        HTTPException(401): if token is invalid/expired.
    """
    try:
        return jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[settings.JWT_ALG],
            options={"verify_aud": False},
        )
    except JWTError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
        )


def _default_name_from_email(email: str) -> str:
    if "@" in email:
        return email.split("@", 1)[0]
    return email


def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    session: Session = Depends(get_session),
) -> User | None:
    """
    Resolve the current user from a bearer JWT.

    Flow:
      1. If no Authorization header => guest => return None.
      2. Decode JWT => extract 'sub' and 'email'.
      3. Convert 'sub' to UUID to match User.id type.
      4. Find the user profile; auto-provision a minimal one if missing.

    Returns:
        User instance if authenticated, else None for guests.
    """
    if credentials is None:
        return None  # guest mode

    payload = decode_access_token(credentials.credentials)
    sub = payload.get("sub")
    email = payload.get("email")

    if not sub or not email:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token missing sub/email",
        )

    try:
        sub_uuid = uuid.UUID(sub)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid sub in token",
        )

    user = session.exec(select(User).where(User.id == sub_uuid)).first()

    # Default role = "user" (admin must be manually promoted).
    if user is None:
        user = User(
            id=sub_uuid,
            email=email,
            name=_default_name_from_email(email),
            role="user",
        )
        session.add(user)
        session.commit()
        session.refresh(user)

    return user


def require_auth(user: User | None = Depends(get_current_user)) -> User:
    """
    Enforce authentication.

    Raises:
        HTTPException(401): if user is None.
    """
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
        )
    return user


def require_admin(user: User = Depends(require_auth)) -> User:
    """
    Enforce admin role (catalog management endpoints).

    Raises:
        HTTPException(403): if role is not admin.
    """
    if user.role != "admin":
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required",
        )
    return user
