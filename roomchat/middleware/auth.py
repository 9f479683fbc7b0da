"""JWT bearer-token resolution of the current user.

Tokens are issued by the external auth flow; this module only verifies them.
"""
import logging
from typing import Optional

from fastapi import HTTPException, status, Request
from jose import jwt, JWTError
from pydantic import BaseModel

from roomchat.settings import AUTH_SECRET, AUTH_ALGORITHM

logger = logging.getLogger(__name__)


class CurrentUser(BaseModel):
    """User information extracted from JWT."""
    user_id: str


def decode_user_id(token: str) -> Optional[str]:
    """Return the `sub` claim of a valid token, or None."""
    if token.startswith("Bearer "):
        token = token[7:]
    try:
        payload = jwt.decode(token, AUTH_SECRET, algorithms=[AUTH_ALGORITHM])
    except JWTError as e:
        logger.warning(f"JWT decode error: {str(e)}")
        return None
    return payload.get("sub")


async def get_current_user(request: Request) -> CurrentUser:
    """
    Validate JWT token from Authorization header and extract the user id.

    Raises:
        HTTPException: If token is missing, invalid or expired
    """
    auth_header = request.headers.get("authorization")
    if not auth_header or not auth_header.startswith("Bearer "):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing or invalid Authorization header",
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        payload = jwt.decode(auth_header[7:], AUTH_SECRET, algorithms=[AUTH_ALGORITHM])
    except jwt.ExpiredSignatureError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token has expired",
            headers={"WWW-Authenticate": "Bearer"},
        )
    except JWTError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Invalid token: {str(e)}",
            headers={"WWW-Authenticate": "Bearer"},
        )

    user_id = payload.get("sub")
    if not user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token: missing user ID",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return CurrentUser(user_id=user_id)
