"""
Password hashing, JWT issuing and the request dependencies guarding admin routes.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import ExpiredSignatureError, JWTError, jwt
from passlib.context import CryptContext

from errors import Forbidden, Unauthorized

ALGORITHM = "HS256"

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")
bearer_scheme = HTTPBearer(auto_error=False)


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def create_access_token(user_id: str, email: str, secret: str, expires_delta: timedelta) -> str:
    expire = datetime.now(timezone.utc) + expires_delta
    return jwt.encode({"sub": user_id, "email": email, "exp": expire}, secret, algorithm=ALGORITHM)


def decode_access_token(token: str, secret: str) -> dict:
    try:
        return jwt.decode(token, secret, algorithms=[ALGORITHM])
    except ExpiredSignatureError:
        raise Unauthorized("Token expired")
    except JWTError:
        raise Unauthorized("Invalid token.")


def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> dict:
    if credentials is None or not credentials.credentials:
        raise Unauthorized("Access denied. No token provided.")
    settings = request.app.state.settings
    payload = decode_access_token(credentials.credentials, settings.jwt_secret)
    user_id = payload.get("sub")
    if not user_id:
        raise Unauthorized("Invalid token.")
    user = request.app.state.services.auth.find_user(user_id)
    if user is None or not user.get("isActive", False):
        raise Unauthorized("Invalid token or user not found.")
    return user


def get_current_admin(current: dict = Depends(get_current_user)) -> dict:
    if current.get("role") != "ADMIN":
        raise Forbidden("Access denied. Admin privileges required.")
    return current
