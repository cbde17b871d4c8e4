import re
import secrets
import uuid
from datetime import datetime, timedelta

import bcrypt
import jwt

from noisesentinel.config import settings
from noisesentinel.utils.dates import utcnow

PASSWORD_PATTERN = re.compile(r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d)(?=.*[@$!%*?&])[A-Za-z\d@$!%*?&]{8,}$")
PASSWORD_RULE = (
    "Password must be at least 8 characters long and contain uppercase, lowercase, "
    "a number and a special character (@$!%*?&)."
)

_ALGORITHM = "HS256"


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode(), bcrypt.gensalt(rounds=settings.bcrypt_rounds)).decode()


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode(), password_hash.encode())
    except ValueError:
        return False


def is_strong_password(password: str) -> bool:
    return PASSWORD_PATTERN.match(password) is not None


def generate_otp() -> str:
    return f"{secrets.randbelow(1_000_000):06d}"


def generate_access_token() -> str:
    return secrets.token_urlsafe(32)


def create_access_token(user_id: int, username: str, email: str, role: str) -> tuple[str, datetime]:
    """Sign a bearer token for the user and return it with its expiry."""
    expires_at = utcnow() + timedelta(minutes=settings.jwt_expiry_minutes)
    claims = {
        "sub": str(user_id),
        "name": username,
        "email": email,
        "role": role,
        "jti": str(uuid.uuid4()),
        "iss": settings.jwt_issuer,
        "aud": settings.jwt_audience,
        "exp": expires_at,
    }
    token = jwt.encode(claims, settings.jwt_secret_key, algorithm=_ALGORITHM)
    return token, expires_at


def decode_access_token(token: str) -> dict:
    """Raises jwt.PyJWTError when the token is invalid or expired."""
    return jwt.decode(
        token,
        settings.jwt_secret_key,
        algorithms=[_ALGORITHM],
        audience=settings.jwt_audience,
        issuer=settings.jwt_issuer,
    )
