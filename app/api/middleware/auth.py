"""
JWT Authentication middleware for Supabase Auth.

Protects the admin routes (upload, clear, bulk call, recordings). The Twilio
webhook is authenticated by request signature instead.
"""

import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.config import get_settings

security = HTTPBearer()


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
) -> str:
    """
    Validate Supabase JWT and return user_id.

    Raises 401 if token is missing or invalid.

    Usage:
        @router.post("/call-all")
        async def call_all(user_id: str = Depends(get_current_user)):
            ...
    """
    return _validate_token(credentials.credentials)


def _validate_token(token: str) -> str:
    """
    Validate a Supabase JWT and extract the user_id.

    Raises:
        HTTPException(401): If token is invalid, expired, or missing required claims
    """
    jwt_secret = get_settings().supabase_jwt_secret

    if not jwt_secret:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Server auth configuration error",
        )

    try:
        # Supabase signs with HS256 for the 'authenticated' audience
        payload = jwt.decode(
            token,
            jwt_secret,
            algorithms=["HS256"],
            audience="authenticated",
        )
    except jwt.ExpiredSignatureError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token has expired",
        )
    except jwt.InvalidAudienceError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token audience",
        )
    except jwt.InvalidTokenError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Invalid token: {str(e)}",
        )

    user_id = payload.get("sub")
    if not user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token: missing user identifier",
        )
    return user_id
