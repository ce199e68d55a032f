"""JWT verification for bearer tokens issued by the terminal auth service.

This service never issues tokens and never handles passwords or sessions.
It trusts the signed ``sub`` (account id) and ``role`` claims.
"""

from jose import JWTError, jwt

from config.settings import settings
from src.lt_common.enums import AccountRole
from src.lt_common.errors import InvalidCredentialsError

_ALGORITHM = settings.JWT_ALGORITHM  # "HS256"


def decode_token(token: str) -> dict[str, str]:
    """Decode and validate an access token.

    Raises:
        InvalidCredentialsError: bad signature, expired, wrong type, or a
            missing/unknown ``sub`` or ``role`` claim.
    """
    try:
        payload: dict[str, str] = jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[_ALGORITHM],  # Explicit list prevents algorithm confusion
        )
    except JWTError:
        raise InvalidCredentialsError() from None

    if payload.get("type") != "access" or not payload.get("sub"):
        raise InvalidCredentialsError()
    if payload.get("role") not in {r.value for r in AccountRole}:
        raise InvalidCredentialsError()
    return payload
