"""FastAPI dependencies: get_current_actor and require_roles.

Usage in any protected router:
    from src.lt_gateway.auth.dependencies import Actor, get_current_actor, require_roles

    @router.post("/draws/{draw_id}/result")
    async def post_result(actor: Actor = Depends(require_roles(*RESULT_POSTERS))):
        ...
"""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer

from src.lt_common.enums import AccountRole
from src.lt_common.errors import ForbiddenError, InvalidCredentialsError
from src.lt_gateway.auth.jwt_handler import decode_token

# Tokens come from the terminal auth service; tokenUrl only feeds Swagger UI
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/login")

# Reusable 401 exception with WWW-Authenticate header (OAuth2 standard)
_CREDENTIALS_EXCEPTION = HTTPException(
    status_code=status.HTTP_401_UNAUTHORIZED,
    detail="Invalid or expired token",
    headers={"WWW-Authenticate": "Bearer"},
)

ADMINS = (AccountRole.ADMIN, AccountRole.SUPERADMIN)
RESULT_POSTERS = (AccountRole.AREA_COORDINATOR, *ADMINS)


@dataclass(frozen=True)
class Actor:
    id: str
    role: AccountRole


async def get_current_actor(token: str = Depends(oauth2_scheme)) -> Actor:
    """Extract and validate the JWT Bearer token. Raises HTTP 401 on failure."""
    try:
        payload = decode_token(token)
    except InvalidCredentialsError:
        raise _CREDENTIALS_EXCEPTION from None
    return Actor(id=payload["sub"], role=AccountRole(payload["role"]))


def require_roles(*roles: AccountRole) -> Callable[..., Awaitable[Actor]]:
    """Dependency factory: the caller must hold one of ``roles``.

    Raises HTTP 403 (ForbiddenError, code 1006) otherwise.
    """
    allowed = frozenset(roles)

    async def _check(actor: Actor = Depends(get_current_actor)) -> Actor:
        if actor.role not in allowed:
            raise ForbiddenError(actor.role.value)
        return actor

    return _check
