"""FastAPI dependencies exposing "current user id, or none".

  get_optional_user_id  → user id from a valid bearer token, else None
  get_current_user_id   → same, but raises 401 when there is no user
"""

from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer

from provider_portal.auth.jwt import decode_token
from provider_portal.middleware.exceptions import UnauthenticatedError

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login", auto_error=False)


async def get_optional_user_id(token: str | None = Depends(oauth2_scheme)) -> str | None:
    if not token:
        return None
    payload = decode_token(token)
    user_id: str | None = payload.get("sub")
    if not user_id or payload.get("type") != "access":
        return None
    return user_id


async def get_current_user_id(
    user_id: str | None = Depends(get_optional_user_id),
) -> str:
    if user_id is None:
        raise UnauthenticatedError("Invalid or expired token")
    return user_id
