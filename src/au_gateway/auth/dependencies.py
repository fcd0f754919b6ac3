"""FastAPI dependency: get_current_user_id.

Usage in any protected router:
    from src.au_gateway.auth.dependencies import get_current_user_id

    @router.post("/protected")
    async def protected(user_id: str = Depends(get_current_user_id)):
        ...
"""

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer

from src.au_common.errors import InvalidCredentialsError
from src.au_gateway.auth.jwt_handler import decode_token

# Tokens are issued by the account service; tokenUrl only feeds Swagger UI
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/login")

# Reusable 401 exception with WWW-Authenticate header (OAuth2 standard)
_CREDENTIALS_EXCEPTION = HTTPException(
    status_code=status.HTTP_401_UNAUTHORIZED,
    detail="Invalid or expired token",
    headers={"WWW-Authenticate": "Bearer"},
)


async def get_current_user_id(token: str = Depends(oauth2_scheme)) -> str:
    """Extract and validate the JWT Bearer token, return the user id (sub)."""
    try:
        payload = decode_token(token)
    except InvalidCredentialsError:
        raise _CREDENTIALS_EXCEPTION from None

    user_id: str | None = payload.get("sub")
    if not user_id:
        raise _CREDENTIALS_EXCEPTION
    return user_id
