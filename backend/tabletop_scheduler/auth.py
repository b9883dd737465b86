"""Authentication dependencies for FastAPI routes.

Tokens are issued by the external auth service; this module only verifies
them. A token may arrive as a Bearer header or in the auth cookie.
"""
import logging
from typing import Optional

import jwt
from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from tabletop_scheduler.config import settings
from tabletop_scheduler.database import get_db
from tabletop_scheduler.errors import AuthenticationRequired, InvalidToken
from tabletop_scheduler.models.user import User

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)


def get_token_from_request(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials],
) -> Optional[str]:
    """Prefer the Authorization header, fall back to the auth cookie."""
    if credentials is not None and credentials.credentials:
        return credentials.credentials
    return request.cookies.get(settings.AUTH_COOKIE_NAME)


def verify_token(token: str) -> Optional[dict]:
    """Decode a JWT, returning its payload or None if it does not verify."""
    try:
        return jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
    except jwt.PyJWTError as exc:
        logger.info("Rejected token: %s", exc)
        return None


def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db),
) -> User:
    """Dependency to resolve the authenticated user for a request.

    Raises:
        AuthenticationRequired: no token was sent
        InvalidToken: token does not verify or names an unknown user
    """
    token = get_token_from_request(request, credentials)
    if not token:
        raise AuthenticationRequired()

    payload = verify_token(token)
    if payload is None:
        raise InvalidToken()

    user_id = payload.get("user_id") or payload.get("userId")
    if not user_id:
        raise InvalidToken("Invalid token payload")

    user = db.query(User).filter(User.user_id == str(user_id)).first()
    if user is None:
        raise InvalidToken("User not found")
    return user
