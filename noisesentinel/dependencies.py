import jwt
from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from noisesentinel.database import get_db
from noisesentinel.models.user import (
    ADMIN,
    ALL_ROLES,
    COURT_AUTHORITY,
    JUDGE,
    POLICE_OFFICER,
    STATION_AUTHORITY,
    User,
)
from noisesentinel.utils.security import decode_access_token

AUTHORITY_ROLES = (ADMIN, COURT_AUTHORITY, STATION_AUTHORITY)
COURT_ROLES = (ADMIN, COURT_AUTHORITY, JUDGE)
STATION_ROLES = (ADMIN, STATION_AUTHORITY, POLICE_OFFICER)

_bearer = HTTPBearer(auto_error=False)
_CHALLENGE = {"WWW-Authenticate": "Bearer"}


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer),
    db: AsyncSession = Depends(get_db),
) -> User:
    if credentials is None:
        raise HTTPException(status_code=401, detail="Authentication required.", headers=_CHALLENGE)

    try:
        claims = decode_access_token(credentials.credentials)
        user_id = int(claims["sub"])
    except (jwt.PyJWTError, KeyError, ValueError):
        raise HTTPException(status_code=401, detail="Invalid or expired token.", headers=_CHALLENGE)

    user = await db.get(User, user_id)
    if user is None or not user.is_active:
        raise HTTPException(status_code=401, detail="User account is not available.", headers=_CHALLENGE)
    return user


def require_roles(*roles: str):
    async def _check_role(user: User = Depends(get_current_user)) -> User:
        if user.role.name not in roles:
            raise HTTPException(status_code=403, detail="You do not have permission to perform this action.")
        return user

    return _check_role


any_user = require_roles(*ALL_ROLES)
admin_only = require_roles(ADMIN)
court_authority_only = require_roles(COURT_AUTHORITY)
station_authority_only = require_roles(STATION_AUTHORITY)
judge_only = require_roles(JUDGE)
police_officer_only = require_roles(POLICE_OFFICER)
authority_roles = require_roles(*AUTHORITY_ROLES)
court_roles = require_roles(*COURT_ROLES)
station_roles = require_roles(*STATION_ROLES)
