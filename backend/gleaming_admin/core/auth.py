"""
Authentication and admin gating

Requests carry the Supabase Auth access token as a bearer token. The token
identifies the user; whether that user may use the admin panel is decided by
``isAdmin`` on their customer record.
"""
import logging
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from pydantic import BaseModel

from gleaming_admin.core.config import settings
from gleaming_admin.core.database import get_supabase
from gleaming_admin.repositories.customer_repository import CustomerRepository

logger = logging.getLogger(__name__)

# Security scheme for bearer tokens
security = HTTPBearer(auto_error=False)

JWT_ALGORITHM = "HS256"


class TokenUser(BaseModel):
    """User data extracted from the access token"""
    id: str
    email: Optional[str] = None
    role: str = "authenticated"


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"}
    )


def decode_access_token(token: str) -> dict:
    """
    Decode and validate a Supabase access token.

    Supabase signs access tokens with the project's JWT secret (HS256) and
    the audience "authenticated"; ``sub`` is the user id.
    """
    try:
        return jwt.decode(
            token,
            settings.SUPABASE_JWT_SECRET,
            algorithms=[JWT_ALGORITHM],
            audience=settings.SUPABASE_JWT_AUDIENCE,
        )
    except JWTError as e:
        if "expired" in str(e).lower():
            raise _unauthorized("Token has expired")
        raise _unauthorized(f"Invalid token: {str(e)}")


def lookup_token_user(token: str) -> TokenUser:
    """Ask the auth service who the token belongs to (no local JWT secret)"""
    try:
        response = get_supabase().auth.get_user(token)
    except RuntimeError:
        raise
    except Exception as e:
        logger.info(f"Auth service rejected token: {e}")
        raise _unauthorized("Invalid token")

    user = getattr(response, "user", None)
    if user is None:
        raise _unauthorized("Invalid token")
    return TokenUser(id=user.id, email=user.email, role=user.role or "authenticated")


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> TokenUser:
    """
    Dependency that extracts and validates the current user from the token.

    Usage:
        @router.get("/protected")
        async def protected_route(user: TokenUser = Depends(get_current_user)):
            return {"message": f"Hello {user.email}"}
    """
    if not credentials:
        raise _unauthorized("Authentication required")

    token = credentials.credentials

    if not settings.SUPABASE_JWT_SECRET:
        return lookup_token_user(token)

    payload = decode_access_token(token)
    user_id = payload.get("sub")
    if not user_id:
        raise _unauthorized("Invalid token payload: missing user id")

    return TokenUser(
        id=user_id,
        email=payload.get("email"),
        role=payload.get("role", "authenticated")
    )


async def require_admin(user: TokenUser = Depends(get_current_user)) -> TokenUser:
    """
    Dependency allowing only users whose customer record has isAdmin true.

    Raises:
        HTTPException 403: not an admin (or no customer record)
        HTTPException 503: the customer record could not be read
    """
    try:
        record = CustomerRepository().find_document(user.id)
    except Exception as e:
        logger.error(f"Error verifying admin status for {user.id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Could not verify your admin status."
        )

    if not record or record.get("isAdmin") is not True:
        logger.warning(f"Admin access denied for {user.id}")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You do not have permission to access this panel."
        )

    return user
