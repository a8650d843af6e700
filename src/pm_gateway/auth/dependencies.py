"""FastAPI dependency: get_current_signer.

Usage in any protected router:
    from src.pm_gateway.auth.dependencies import get_current_signer

    @router.post("/protected")
    async def protected(signer: str = Depends(get_current_signer)):
        ...
"""

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer

from src.pm_common.errors import InvalidCredentialsError
from src.pm_gateway.auth.jwt_handler import decode_token

MAX_ADDRESS_LENGTH = 64

# Tokens come from the external gateway; tokenUrl only feeds the Swagger "Authorize" button
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/token")

# Reusable 401 exception with WWW-Authenticate header (OAuth2 standard)
_CREDENTIALS_EXCEPTION = HTTPException(
    status_code=status.HTTP_401_UNAUTHORIZED,
    detail="Invalid or expired token",
    headers={"WWW-Authenticate": "Bearer"},
)


async def get_current_signer(token: str = Depends(oauth2_scheme)) -> str:
    """Extract and validate the JWT Bearer token, return the signer address.

    Raises HTTP 401 if the token is missing, invalid, or expired.
    """
    try:
        payload = decode_token(token)
    except InvalidCredentialsError:
        raise _CREDENTIALS_EXCEPTION from None

    address: str | None = payload.get("sub")
    # Addresses are stored in VARCHAR(64) columns
    if not address or len(address) > MAX_ADDRESS_LENGTH:
        raise _CREDENTIALS_EXCEPTION
    return address
